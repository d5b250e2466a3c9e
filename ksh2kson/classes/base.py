"""
Base, generic classes supporting other more specialized classes.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass

__all__ = [
    "Validateable",
    "ConversionError",
    "ParseError",
    "TimingError",
    "InvalidValueError",
    "DecodeError",
    "TimeSignature",
]


class Validateable(ABC):
    """An abstract base class for classes that require validation."""

    @abstractmethod
    def validate(self):
        """
        Perform validation on the object.

        :raises ValueError: if any of the input is invalid.
        """
        pass


class ConversionError(Exception):
    """
    Base class for every error raised while converting a chart.

    :param message: Description of the problem.
    :param line_no: 1-based line number in the source text, if known.
    :param column: 1-based column in the source line, if known.
    """

    def __init__(self, message: str, line_no: int | None = None, column: int | None = None):
        self.message = message
        self.line_no = line_no
        self.column = column
        super().__init__(self._format())

    def _format(self) -> str:
        if self.line_no is None:
            return self.message
        if self.column is None:
            return f"{self.message} (at line {self.line_no})"
        return f"{self.message} (at line {self.line_no}, column {self.column})"


class ParseError(ConversionError):
    """Raised when a chart line cannot be classified."""

    pass


class TimingError(ConversionError):
    """Raised when measures cannot be laid out on the tick timeline."""

    pass


class InvalidValueError(ConversionError, ValueError):
    """Raised when a numeric value in the chart is malformed or out of range."""

    pass


class DecodeError(ConversionError):
    """Raised when a laser glyph is not part of the laser alphabet."""

    pass


@dataclass(frozen=True)
class TimeSignature(Validateable):
    """An immutable class that represents a time signature."""

    upper: int = 4
    lower: int = 4

    def __post_init__(self):
        self.validate()

    def validate(self):
        if self.upper <= 0:
            raise ValueError(f"upper number must be positive (got {self.upper})")
        if self.lower <= 0:
            raise ValueError(f"lower number must be positive (got {self.lower})")

    def to_dict(self) -> dict[str, int]:
        return {"n": self.upper, "d": self.lower}
