"""
Assembly of the final KSON document, and the text-to-document entry point.
"""
import dataclasses
import logging

from collections.abc import Mapping

from ..classes.base import InvalidValueError
from ..classes.chart import TICKS_PER_BEAT, ParsedChart, TimedChart
from ..classes.enums import DifficultySlot
from ..classes.kson import (
    AudioInfo,
    BeatInfo,
    BGMInfo,
    CameraInfo,
    GaugeInfo,
    KSONDocument,
    LaserSegment,
    MetaInfo,
    NoteInfo,
)
from ..parser.ksh import KSHParser
from ..utils import (
    clamp,
    parse_finite,
    parse_int,
)
from .camera import build_camera
from .lasers import build_laser_graphs
from .notes import decode_notes
from .timing import resolve_timing

__all__ = [
    "assemble_document",
    "convert_chart",
    "ksh2kson",
]

MIN_LEVEL = 1
MAX_LEVEL = 20
MIN_GAUGE_TOTAL = 100
DEFAULT_MUSIC_VOLUME = 100

logger = logging.getLogger(__name__)


def _header_int(meta: Mapping[str, str], key: str) -> int | None:
    if key not in meta:
        return None
    try:
        return parse_int(meta[key])
    except ValueError as e:
        raise InvalidValueError(f'invalid "{key}" header value: {e}') from e


def _parse_level(meta: Mapping[str, str]) -> int:
    if "level" not in meta:
        return MIN_LEVEL
    try:
        return clamp(parse_int(meta["level"]), MIN_LEVEL, MAX_LEVEL)
    except ValueError as e:
        logger.warning(f"{e}; using level {MIN_LEVEL}")
        return MIN_LEVEL


def _build_meta(meta: Mapping[str, str]) -> MetaInfo:
    std_bpm: float | None = None
    if "to" in meta:
        try:
            std_bpm = parse_finite(meta["to"])
        except ValueError as e:
            raise InvalidValueError(f'invalid "to" header value: {e}') from e

    difficulty_name = meta.get("difficulty")
    return MetaInfo(
        title=meta.get("title", ""),
        artist=meta.get("artist", ""),
        chart_author=meta.get("effect", ""),
        level=_parse_level(meta),
        difficulty=DifficultySlot.from_name(difficulty_name),
        difficulty_name=difficulty_name,
        disp_bpm=meta.get("t"),
        std_bpm=std_bpm,
        jacket_filename=meta.get("jacket"),
        jacket_author=meta.get("illustrator"),
        information=meta.get("information"),
    )


def _build_audio(meta: Mapping[str, str]) -> AudioInfo:
    filename = ""
    if "m" in meta:
        filename, *extra_files = meta["m"].split(";")
        if extra_files:
            logger.warning("multiple song files are not supported yet")

    vol = _header_int(meta, "mvol")
    offset = _header_int(meta, "o")
    preview_offset = _header_int(meta, "po")
    preview_duration = _header_int(meta, "plength")
    return AudioInfo(
        bgm=BGMInfo(
            filename=filename,
            vol=vol if vol is not None and vol != DEFAULT_MUSIC_VOLUME else None,
            offset=offset if offset else None,
            preview_offset=preview_offset if preview_offset is not None and preview_offset >= 0 else None,
            preview_duration=preview_duration if preview_duration is not None and preview_duration >= 0 else None,
        )
    )


def _build_gauge(meta: Mapping[str, str]) -> GaugeInfo | None:
    total = _header_int(meta, "total")
    if total is None:
        return None
    return GaugeInfo(clamp(total, MIN_GAUGE_TOTAL))


def _build_version(meta: Mapping[str, str]) -> str:
    version = meta.get("ver", "").strip()
    return f"ksh {version}" if version else "ksh"


def assemble_document(
    chart: TimedChart,
    notes: NoteInfo,
    lasers: tuple[tuple[LaserSegment, ...], ...],
    camera: CameraInfo,
) -> KSONDocument:
    """
    Merge header data, timing data and decoded notes into a KSON document.

    :param chart: The timed chart. Its header table provides metadata, audio and gauge settings.
    :param notes: Decoded BT and FX notes.
    :param lasers: Laser segments, left lane first.
    :param camera: Camera graphs.
    :raises InvalidValueError: if a numeric header value cannot be parsed.
    """
    meta = chart.meta
    return KSONDocument(
        version=_build_version(meta),
        meta=_build_meta(meta),
        beat=BeatInfo(
            bpm=chart.bpm_changes,
            time_sig=chart.time_signatures,
            stop=chart.stops,
            resolution=TICKS_PER_BEAT,
        ),
        gauge=_build_gauge(meta),
        audio=_build_audio(meta),
        note=dataclasses.replace(notes, laser=lasers),
        camera=camera,
    )


def convert_chart(parsed: ParsedChart) -> KSONDocument:
    """
    Convert an already parsed KSH chart into a KSON document.

    :raises ConversionError: if the chart cannot be converted. The subclass tells which stage failed.
    """
    timed = resolve_timing(parsed)
    logger.debug(f"chart spans {timed.total_ticks} ticks over {len(timed.measures)} measures")
    return assemble_document(timed, decode_notes(timed), build_laser_graphs(timed), build_camera(timed))


def ksh2kson(text: str, *, strict: bool = True) -> KSONDocument:
    """
    Convert KSH chart text into a KSON document.

    :param text: The whole chart text.
    :param strict: If `False`, unrecognized lines in the chart body are skipped instead of raising.
    :raises ConversionError: if the chart cannot be converted. The subclass tells which stage failed.
    """
    return convert_chart(KSHParser(strict=strict).parse_string(text))
