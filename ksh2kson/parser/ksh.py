"""
Reader for the KSH chart format.

A KSH file is a header of ``key=value`` lines, a ``--`` bar line, then measures of note lines separated by ``--``.
Modifier lines (``key=value``) inside a measure attach to the note line that follows them.
"""
import dataclasses
import logging

from ..classes.base import ParseError
from ..classes.chart import (
    SPIN_TAGS,
    ChartLine,
    Measure,
    Modifier,
    ParsedChart,
)
from ..classes.enums import LineState
from .base import Parser

__all__ = [
    "BAR_LINE",
    "KSHParser",
    "tokenize_note_line",
]

BAR_LINE = "--"
COMMENT_PREFIXES = ("#", "//")
BT_GLYPHS = "012"
FX_GLYPHS = "012"
DIGITS = "0123456789"

logger = logging.getLogger(__name__)


def _check_glyphs(text: str, start: int, count: int, allowed: str | None, what: str, line_no: int) -> str:
    glyphs = text[start : start + count]
    if len(glyphs) < count:
        raise ParseError(f"{what} field is truncated", line_no, len(text) + 1)
    if allowed is not None:
        for i, glyph in enumerate(glyphs):
            if glyph not in allowed:
                raise ParseError(f'invalid {what} glyph "{glyph}"', line_no, start + i + 1)
    return glyphs


def _check_separator(text: str, index: int, line_no: int) -> None:
    if index >= len(text) or text[index] != "|":
        raise ParseError('expected "|"', line_no, index + 1)


def tokenize_note_line(text: str, line_no: int = 0, modifiers: tuple[Modifier, ...] = ()) -> ChartLine:
    """
    Read a note line field by field.

    The layout is fixed: four BT glyphs, ``|``, two FX glyphs, ``|``, two laser glyphs, then an optional spin tag
    followed by an optional spin length. Laser glyphs are not checked here.

    :param text: The stripped line.
    :param line_no: Line number used in error reports.
    :param modifiers: Modifiers to attach to the line.
    :raises ParseError: if the line does not follow the layout. The column of the first offending character is given.
    """
    bt = _check_glyphs(text, 0, 4, BT_GLYPHS, "BT", line_no)
    _check_separator(text, 4, line_no)
    fx = _check_glyphs(text, 5, 2, FX_GLYPHS, "FX", line_no)
    _check_separator(text, 7, line_no)
    laser = _check_glyphs(text, 8, 2, None, "laser", line_no)

    spin = ""
    spin_length: int | None = None
    rest = text[10:]
    if rest:
        spin = rest[:2]
        if spin not in SPIN_TAGS:
            raise ParseError(f'invalid spin tag "{spin}"', line_no, 11)
        length_str = rest[2:]
        for i, char in enumerate(length_str):
            if char not in DIGITS:
                raise ParseError(f'invalid spin length "{length_str}"', line_no, 13 + i)
        if length_str:
            spin_length = int(length_str)

    return ChartLine(bt, fx, laser, spin, spin_length, modifiers, line_no)


def _split_option(line: str) -> tuple[str, str] | None:
    key, sep, value = line.partition("=")
    if not sep or not key:
        return None
    return key, value


@dataclasses.dataclass
class _BodyState:
    measures: list[Measure] = dataclasses.field(default_factory=list)
    current: list[ChartLine] = dataclasses.field(default_factory=list)
    pending: list[Modifier] = dataclasses.field(default_factory=list)

    def close_measure(self) -> None:
        self.measures.append(tuple(self.current))
        self.current = []

    def add_line(self, line: ChartLine) -> None:
        self.current.append(line)
        self.pending = []


@dataclasses.dataclass(eq=False)
class KSHParser(Parser):
    """
    Classify the lines of a KSH chart into a header table and measures.

    :param strict: If `True`, an unrecognized line in the chart body raises :class:`ParseError`. If `False`, the line
        is logged and skipped.
    """

    strict: bool = True

    def parse_string(self, text: str) -> ParsedChart:
        if text.startswith("\ufeff"):
            text = text[1:]

        meta: dict[str, str] = {}
        body = _BodyState()
        state = LineState.HEADER

        for line_no, raw_line in enumerate(text.split("\n"), start=1):
            line = raw_line.strip()
            if not line:
                continue

            if state == LineState.HEADER:
                if line == BAR_LINE:
                    logger.debug(f"header ends at line {line_no}")
                    state = LineState.BODY
                    continue
                option = _split_option(line)
                if option is None:
                    logger.debug(f'ignoring header line {line_no}: "{line}"')
                    continue
                key, value = option
                if value:
                    meta[key] = value
                continue

            # 1. Measure divider
            if line == BAR_LINE:
                body.close_measure()
            # 2. Comments
            elif line.startswith(COMMENT_PREFIXES):
                continue
            # 3. Modifiers
            elif "=" in line:
                option = _split_option(line)
                if option is None:
                    self._reject(ParseError(f'modifier has no name: "{line}"', line_no, 1), line)
                    continue
                body.pending.append(Modifier(option[0], option[1], line_no))
            # 4. Note data
            else:
                try:
                    chart_line = tokenize_note_line(line, line_no, tuple(body.pending))
                except ParseError as e:
                    self._reject(e, line)
                    continue
                body.add_line(chart_line)

        if body.current:
            logger.debug("flushing unterminated final measure")
            body.close_measure()
        if body.pending:
            logger.debug(f"dropping {len(body.pending)} modifier(s) after the last note line")

        return ParsedChart(meta, tuple(body.measures))

    def _reject(self, error: ParseError, line: str) -> None:
        if self.strict:
            raise error
        logger.warning(f'unrecognized line at line {error.line_no}: "{line}"')
