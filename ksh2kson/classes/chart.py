"""
Classes that represent a KSH chart as read from text, before and after tick assignment.
"""
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from .base import (
    TimeSignature,
    Validateable,
)
from .enums import (
    ButtonLane,
    LaserLane,
)

__all__ = [
    "TICKS_PER_BAR",
    "TICKS_PER_BEAT",
    "Modifier",
    "ChartLine",
    "Measure",
    "ParsedChart",
    "TimedLine",
    "TimedChart",
]

TICKS_PER_BAR = 192
"""Number of ticks in a single 4/4 bar."""

TICKS_PER_BEAT = TICKS_PER_BAR // 4
"""Number of ticks in a quarter note."""

SPIN_TAGS = ("@(", "@)", "@<", "@>", "S<", "S>")


@dataclass(frozen=True)
class Modifier:
    """A ``key=value`` line found in the chart body, attached to the note line that follows it."""

    key: str
    value: str
    line_no: int = 0


@dataclass(frozen=True)
class ChartLine(Validateable):
    """A single note line of a measure."""

    bt: str
    fx: str
    laser: str
    spin: str = ""
    spin_length: int | None = None
    modifiers: tuple[Modifier, ...] = ()
    line_no: int = 0

    def __post_init__(self):
        self.validate()

    def validate(self):
        if len(self.bt) != 4:
            raise ValueError(f"BT field must have 4 glyphs (got {self.bt!r})")
        if len(self.fx) != 2:
            raise ValueError(f"FX field must have 2 glyphs (got {self.fx!r})")
        if len(self.laser) != 2:
            raise ValueError(f"laser field must have 2 glyphs (got {self.laser!r})")
        if self.spin and self.spin not in SPIN_TAGS:
            raise ValueError(f"invalid spin tag (got {self.spin!r})")

    def button(self, lane: ButtonLane) -> str:
        """Return the glyph for a button lane."""
        if lane.is_fx():
            return self.fx[lane.value - 5]
        return self.bt[lane.value]

    def laser_glyph(self, lane: LaserLane) -> str:
        """Return the glyph for a laser lane."""
        return self.laser[lane.value - 8]

    def find_modifiers(self, key: str) -> Iterator[Modifier]:
        return (mod for mod in self.modifiers if mod.key == key)


Measure = tuple[ChartLine, ...]


@dataclass(frozen=True)
class ParsedChart:
    """The result of classifying KSH text: a header table and the measures of the chart body."""

    meta: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    measures: tuple[Measure, ...] = ()

    def __post_init__(self):
        if not isinstance(self.meta, MappingProxyType):
            object.__setattr__(self, "meta", MappingProxyType(dict(self.meta)))

    def iter_lines(self) -> Iterator[tuple[int, ChartLine]]:
        """
        Iterate through every note line.

        :returns: A generator that emits a 2-tuple of: measure index, and the note line.
        """
        for index, measure in enumerate(self.measures):
            for line in measure:
                yield index, line


@dataclass(frozen=True)
class TimedLine:
    """A note line placed on the tick timeline."""

    line: ChartLine
    tick: int
    length: int

    @property
    def modifiers(self) -> tuple[Modifier, ...]:
        return self.line.modifiers


@dataclass(frozen=True)
class TimedChart:
    """A parsed chart whose lines carry absolute ticks, together with the timing data found along the way."""

    meta: Mapping[str, str]
    measures: tuple[tuple[TimedLine, ...], ...]
    bpm_changes: tuple[tuple[int, float], ...] = ()
    time_signatures: tuple[tuple[int, TimeSignature], ...] = ()
    stops: tuple[tuple[int, int], ...] = ()
    total_ticks: int = 0

    def iter_lines(self) -> Iterator[TimedLine]:
        """Iterate through every timed note line in chart order."""
        for measure in self.measures:
            yield from measure
