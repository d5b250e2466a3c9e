"""
Abstract base classes for parsers.
"""
from abc import ABC, abstractmethod
from typing import TextIO

from ..classes.chart import ParsedChart

__all__ = [
    "Parser",
]


class Parser(ABC):
    """
    An abstract base class for parsers that read a specific format.
    """

    @abstractmethod
    def parse_string(self, text: str) -> ParsedChart:
        """Parse chart text that is already in memory."""
        pass

    def parse(self, f: TextIO) -> ParsedChart:
        """Parse a file, reading it whole."""
        return self.parse_string(f.read())
