"""
Placement of parsed measures on the absolute tick timeline.
"""
import dataclasses
import logging

from collections.abc import Mapping

from ..classes.base import (
    InvalidValueError,
    TimeSignature,
    TimingError,
)
from ..classes.chart import (
    TICKS_PER_BAR,
    ChartLine,
    Measure,
    Modifier,
    ParsedChart,
    TimedChart,
    TimedLine,
)
from ..utils import parse_positive

__all__ = [
    "TimingState",
    "parse_time_signature",
    "resolve_timing",
]

TIMESIG_KEY = "beat"
BPM_KEY = "t"
STOP_KEY = "stop"

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class TimingState:
    """Running state of the timing pass: where the next measure starts and which time signature is in force."""

    offset: int = 0
    time_signature: TimeSignature = TimeSignature()


def parse_time_signature(value: str, line_no: int | None = None) -> TimeSignature:
    """
    Parse a ``n/d`` time signature.

    :raises TimingError: if the value is not two positive integers, or if the lower number does not divide a bar.
    """
    parts = value.split("/")
    if len(parts) != 2 or not all(part.strip().isdecimal() for part in parts):
        raise TimingError(f"malformed time signature (got {value!r})", line_no)
    upper, lower = int(parts[0]), int(parts[1])
    if upper <= 0 or lower <= 0:
        raise TimingError(f"time signature must be positive (got {value!r})", line_no)
    if TICKS_PER_BAR % lower != 0:
        raise TimingError(f"time signature lower number must divide {TICKS_PER_BAR} (got {value!r})", line_no)
    return TimeSignature(upper, lower)


def _parse_header_bpm(value: str | None) -> float | None:
    # `t` in the header may also be a display range such as "120-240"
    if value is None:
        return None
    try:
        return parse_positive(value)
    except ValueError:
        logger.debug(f'header BPM "{value}" is not a single number; treating it as display-only')
        return None


def _parse_modifier_value(modifier: Modifier) -> float:
    try:
        return parse_positive(modifier.value)
    except ValueError as e:
        raise InvalidValueError(f"invalid {modifier.key} value: {e}", modifier.line_no) from e


@dataclasses.dataclass
class _Breakpoints:
    bpm: dict[int, float] = dataclasses.field(default_factory=dict)
    time_signatures: dict[int, TimeSignature] = dataclasses.field(default_factory=dict)
    stops: dict[int, int] = dataclasses.field(default_factory=dict)


def _measure_time_signature(index: int, measure: Measure) -> TimeSignature | None:
    for position, line in enumerate(measure):
        for modifier in line.find_modifiers(TIMESIG_KEY):
            if position != 0:
                raise TimingError(
                    f"time signature change must be on the first line of measure {index}", modifier.line_no
                )
    if not measure:
        return None
    timesig: TimeSignature | None = None
    for modifier in measure[0].find_modifiers(TIMESIG_KEY):
        timesig = parse_time_signature(modifier.value, modifier.line_no)
    return timesig


def _resolve_measure(
    index: int, measure: Measure, state: TimingState, breakpoints: _Breakpoints
) -> tuple[tuple[TimedLine, ...], TimingState]:
    timesig = _measure_time_signature(index, measure)
    if timesig is not None:
        breakpoints.time_signatures[index] = timesig
        state = dataclasses.replace(state, time_signature=timesig)

    measure_len = (TICKS_PER_BAR // state.time_signature.lower) * state.time_signature.upper
    if not measure:
        raise TimingError(f"measure {index} has no note lines")
    if measure_len % len(measure) != 0:
        raise TimingError(
            f"measure {index} cannot be split evenly into {len(measure)} lines (length {measure_len})",
            measure[0].line_no,
        )
    tick_per_line = measure_len // len(measure)

    timed_lines: list[TimedLine] = []
    for position, line in enumerate(measure):
        tick = state.offset + position * tick_per_line
        _collect_line_events(line, tick, breakpoints)
        timed_lines.append(TimedLine(line, tick, tick_per_line))

    return tuple(timed_lines), dataclasses.replace(state, offset=state.offset + measure_len)


def _collect_line_events(line: ChartLine, tick: int, breakpoints: _Breakpoints) -> None:
    for modifier in line.modifiers:
        if modifier.key == BPM_KEY:
            breakpoints.bpm[tick] = _parse_modifier_value(modifier)
        elif modifier.key == STOP_KEY:
            length = round(_parse_modifier_value(modifier))
            if length == 0:
                raise InvalidValueError(f"stop must last at least one tick (got {modifier.value!r})", modifier.line_no)
            breakpoints.stops[tick] = length


def resolve_timing(chart: ParsedChart) -> TimedChart:
    """
    Assign every note line of a parsed chart its absolute tick and tick length.

    A bar of 4/4 spans :data:`TICKS_PER_BAR` ticks; every measure is divided evenly between its lines.

    :param chart: The parsed chart. It is not modified.
    :returns: A :class:`TimedChart` holding the timed lines, BPM changes, time signature changes (keyed by measure
        index) and scroll stops.
    :raises TimingError: if a time signature is malformed or misplaced, or if a measure cannot be split evenly.
    :raises InvalidValueError: if a BPM or stop value is not a positive finite number.
    """
    meta: Mapping[str, str] = chart.meta
    breakpoints = _Breakpoints()
    state = TimingState()

    if TIMESIG_KEY in meta:
        state = TimingState(time_signature=parse_time_signature(meta[TIMESIG_KEY]))
    breakpoints.time_signatures[0] = state.time_signature

    header_bpm = _parse_header_bpm(meta.get(BPM_KEY))
    if header_bpm is not None:
        breakpoints.bpm[0] = header_bpm

    timed_measures: list[tuple[TimedLine, ...]] = []
    for index, measure in enumerate(chart.measures):
        timed_lines, state = _resolve_measure(index, measure, state, breakpoints)
        timed_measures.append(timed_lines)

    if not breakpoints.bpm:
        logger.warning("chart does not define any BPM")

    return TimedChart(
        meta=meta,
        measures=tuple(timed_measures),
        bpm_changes=tuple(sorted(breakpoints.bpm.items())),
        time_signatures=tuple(sorted(breakpoints.time_signatures.items())),
        stops=tuple(sorted(breakpoints.stops.items())),
        total_ticks=state.offset,
    )
