"""
Decoding of BT and FX glyphs into chip and hold notes.
"""
import dataclasses
import logging

from collections.abc import Iterable

from ..classes.chart import TimedChart, TimedLine
from ..classes.enums import ButtonLane
from ..classes.kson import NoteEvent, NoteInfo

__all__ = [
    "decode_lane",
    "decode_notes",
]

BT_LANES = [ButtonLane.BT_A, ButtonLane.BT_B, ButtonLane.BT_C, ButtonLane.BT_D]
FX_LANES = [ButtonLane.FX_L, ButtonLane.FX_R]

# Glyph meanings differ between BT and FX lanes
# fmt: off
CHIP_GLYPH = {False: "1", True: "2"}
HOLD_GLYPH = {False: "2", True: "1"}
# fmt: on

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class _HoldState:
    start: int
    duration: int = 0

    def extend(self, length: int) -> "_HoldState":
        return dataclasses.replace(self, duration=self.duration + length)

    def to_event(self) -> NoteEvent:
        return NoteEvent(self.start, self.duration)


def decode_lane(lines: Iterable[TimedLine], lane: ButtonLane) -> tuple[NoteEvent, ...]:
    """
    Decode the notes of a single button lane.

    Consecutive hold glyphs are merged into one hold note. A chip or an empty glyph ends the hold in progress.

    :param lines: Timed note lines in chart order.
    :param lane: The lane to decode.
    :returns: The notes of the lane, ordered by tick.
    """
    chip_glyph = CHIP_GLYPH[lane.is_fx()]
    hold_glyph = HOLD_GLYPH[lane.is_fx()]

    notes: list[NoteEvent] = []
    hold: _HoldState | None = None
    for timed_line in lines:
        glyph = timed_line.line.button(lane)
        if glyph == hold_glyph:
            if hold is None:
                hold = _HoldState(timed_line.tick)
            hold = hold.extend(timed_line.length)
            continue
        if hold is not None:
            notes.append(hold.to_event())
            hold = None
        if glyph == chip_glyph:
            notes.append(NoteEvent(timed_line.tick))

    if hold is not None:
        logger.debug(f"{lane}: hold at tick {hold.start} runs to the end of the chart")
        notes.append(hold.to_event())

    return tuple(notes)


def decode_notes(chart: TimedChart) -> NoteInfo:
    """Decode every BT and FX lane of a timed chart. Lanes are independent of each other."""
    lines = tuple(chart.iter_lines())
    return NoteInfo(
        bt=tuple(decode_lane(lines, lane) for lane in BT_LANES),
        fx=tuple(decode_lane(lines, lane) for lane in FX_LANES),
    )
