"""
Decoding of laser glyphs into laser segments.
"""
import dataclasses
import logging

from collections.abc import Iterable
from fractions import Fraction

from ..classes.base import DecodeError
from ..classes.chart import TimedChart, TimedLine
from ..classes.enums import LaserLane
from ..classes.kson import LaserPoint, LaserSegment

__all__ = [
    "LASER_ALPHABET",
    "SLAM_THRESHOLD",
    "convert_laser_pos",
    "build_lane",
    "build_laser_graphs",
]

LASER_ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmno"
LASER_OFF = "-"
LASER_CONTINUE = ":"
WIDE_RANGE_VALUE = "2x"
SLAM_THRESHOLD = 6
"""Two laser samples at most this many ticks apart are merged into a single slam point."""

logger = logging.getLogger(__name__)


def convert_laser_pos(s: str) -> Fraction:
    """
    Convert a laser glyph to its position, from 0 (leftmost) to 1 (rightmost).

    :raises ValueError: if the glyph is not in :data:`LASER_ALPHABET`.
    """
    if len(s) != 1 or s not in LASER_ALPHABET:
        raise ValueError(f"invalid laser glyph (got {s!r})")
    return Fraction(LASER_ALPHABET.index(s), len(LASER_ALPHABET) - 1)


@dataclasses.dataclass
class _SegmentState:
    start: int
    wide: bool
    points: list[LaserPoint] = dataclasses.field(default_factory=list)
    last_tick: int = 0

    def add_sample(self, tick: int, value: float) -> None:
        if not self.points:
            self.points.append(LaserPoint(tick, value, relative=False))
        elif tick - self.last_tick <= SLAM_THRESHOLD:
            self.points[-1] = dataclasses.replace(self.points[-1], vf=value)
            return
        else:
            self.points.append(LaserPoint(tick - self.start, value))
        self.last_tick = tick

    def to_segment(self) -> LaserSegment:
        return LaserSegment(self.start, tuple(self.points), self.wide)


def build_lane(lines: Iterable[TimedLine], lane: LaserLane) -> tuple[LaserSegment, ...]:
    """
    Build the laser segments of a single lane.

    :param lines: Timed note lines in chart order.
    :param lane: The lane to build.
    :returns: The segments of the lane, ordered by tick.
    :raises DecodeError: if a glyph is not a laser position, ``-`` or ``:``.
    """
    segments: list[LaserSegment] = []
    segment: _SegmentState | None = None
    range_multiplier = 1

    for timed_line in lines:
        for modifier in timed_line.line.find_modifiers(lane.range_key):
            range_multiplier = 2 if modifier.value == WIDE_RANGE_VALUE else 1

        glyph = timed_line.line.laser_glyph(lane)
        if glyph == LASER_CONTINUE:
            continue
        if glyph == LASER_OFF:
            if segment is not None:
                segments.append(segment.to_segment())
                segment = None
            continue

        try:
            value = float(convert_laser_pos(glyph))
        except ValueError as e:
            raise DecodeError(f"{e} on {lane} laser", timed_line.line.line_no, lane.value + 1) from e
        if segment is None:
            segment = _SegmentState(timed_line.tick, wide=range_multiplier == 2)
        segment.add_sample(timed_line.tick, value)

    if segment is not None:
        logger.debug(f"{lane} laser starting at tick {segment.start} runs to the end of the chart")
        segments.append(segment.to_segment())

    return tuple(segments)


def build_laser_graphs(chart: TimedChart) -> tuple[tuple[LaserSegment, ...], ...]:
    """Build the segments of both laser lanes of a timed chart."""
    lines = tuple(chart.iter_lines())
    return tuple(build_lane(lines, lane) for lane in LaserLane)
