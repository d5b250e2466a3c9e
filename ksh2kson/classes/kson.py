"""
Classes that represent a KSON document.

Every class here is frozen. ``to_dict()`` produces the plain nested structure written out as JSON.
"""
from dataclasses import dataclass, field
from typing import Any

from .base import (
    TimeSignature,
    Validateable,
)
from .chart import TICKS_PER_BEAT
from .enums import (
    ButtonLane,
    CameraParam,
    DifficultySlot,
    LaserLane,
)

__all__ = [
    "NoteEvent",
    "LaserPoint",
    "LaserSegment",
    "GraphPoint",
    "MetaInfo",
    "BeatInfo",
    "GaugeInfo",
    "BGMInfo",
    "AudioInfo",
    "NoteInfo",
    "CameraInfo",
    "KSONDocument",
]


@dataclass(frozen=True)
class NoteEvent(Validateable):
    """A button note. A length of zero means a chip, anything else is a hold."""

    y: int
    length: int = 0

    def __post_init__(self):
        self.validate()

    def validate(self):
        if self.y < 0:
            raise ValueError(f"tick cannot be negative (got {self.y})")
        if self.length < 0:
            raise ValueError(f"length cannot be negative (got {self.length})")

    @property
    def is_hold(self) -> bool:
        return self.length > 0

    def to_dict(self) -> dict[str, int]:
        if self.is_hold:
            return {"y": self.y, "l": self.length}
        return {"y": self.y}


@dataclass(frozen=True)
class LaserPoint(Validateable):
    """
    A sample point on a laser segment.

    The first point of a segment is absolute (``relative=False``) and ``y`` is its tick. Later points are relative and
    ``y`` is the offset from the start of the segment. ``vf`` is only set when the point is a slam.
    """

    y: int
    v: float
    vf: float | None = None
    relative: bool = True

    def __post_init__(self):
        self.validate()

    def validate(self):
        if self.y < 0:
            raise ValueError(f"tick cannot be negative (got {self.y})")
        if not 0 <= self.v <= 1:
            raise ValueError(f"value out of range (got {self.v})")
        if self.vf is not None and not 0 <= self.vf <= 1:
            raise ValueError(f"final value out of range (got {self.vf})")

    def is_slam(self) -> bool:
        """Return `True` if this point has an instantaneous change."""
        return self.vf is not None and self.vf != self.v

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"ry" if self.relative else "y": self.y, "v": self.v}
        if self.is_slam():
            data["vf"] = self.vf
        return data


@dataclass(frozen=True)
class LaserSegment:
    """A continuous laser, as an ordered list of sample points."""

    y: int
    points: tuple[LaserPoint, ...]
    wide: bool = False

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"y": self.y, "v": [point.to_dict() for point in self.points]}
        if self.wide:
            data["wide"] = 2
        return data


@dataclass(frozen=True)
class GraphPoint:
    """A point on a camera graph."""

    y: int
    v: float
    vf: float | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"y": self.y, "v": self.v}
        if self.vf is not None and self.vf != self.v:
            data["vf"] = self.vf
        return data


@dataclass(frozen=True)
class MetaInfo(Validateable):
    title: str = ""
    artist: str = ""
    chart_author: str = ""
    level: int = 1
    difficulty: DifficultySlot = DifficultySlot.INFINITE
    difficulty_name: str | None = None
    disp_bpm: str | None = None
    std_bpm: float | None = None
    jacket_filename: str | None = None
    jacket_author: str | None = None
    information: str | None = None

    def __post_init__(self):
        self.validate()

    def validate(self):
        if not 1 <= self.level <= 20:
            raise ValueError(f"level out of range (got {self.level})")

    def to_dict(self) -> dict[str, Any]:
        difficulty: dict[str, Any] = {"idx": self.difficulty.value}
        if self.difficulty_name is not None:
            difficulty["name"] = self.difficulty_name
        data: dict[str, Any] = {
            "title": self.title,
            "artist": self.artist,
            "chart_author": self.chart_author,
            "level": self.level,
            "difficulty": difficulty,
        }
        optional_fields = {
            "disp_bpm": self.disp_bpm,
            "std_bpm": self.std_bpm,
            "jacket_filename": self.jacket_filename,
            "jacket_author": self.jacket_author,
            "information": self.information,
        }
        data.update({k: v for k, v in optional_fields.items() if v is not None})
        return data


@dataclass(frozen=True)
class BeatInfo:
    bpm: tuple[tuple[int, float], ...] = ()
    time_sig: tuple[tuple[int, TimeSignature], ...] = ()
    stop: tuple[tuple[int, int], ...] = ()
    resolution: int = TICKS_PER_BEAT

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "bpm": [{"y": y, "v": v} for y, v in self.bpm],
            "time_sig": [{"idx": idx, "v": timesig.to_dict()} for idx, timesig in self.time_sig],
        }
        if self.stop:
            data["stop"] = [{"y": y, "l": length} for y, length in self.stop]
        data["resolution"] = self.resolution
        return data


@dataclass(frozen=True)
class GaugeInfo:
    total: int

    def to_dict(self) -> dict[str, Any]:
        return {"total": self.total}


@dataclass(frozen=True)
class BGMInfo:
    filename: str = ""
    vol: int | None = None
    offset: int | None = None
    preview_offset: int | None = None
    preview_duration: int | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"filename": self.filename}
        if self.vol is not None:
            data["vol"] = self.vol
        if self.offset is not None:
            data["offset"] = self.offset
        if self.preview_offset is not None or self.preview_duration is not None:
            preview: dict[str, int] = {}
            if self.preview_offset is not None:
                preview["offset"] = self.preview_offset
            if self.preview_duration is not None:
                preview["duration"] = self.preview_duration
            data["preview"] = preview
        return data


@dataclass(frozen=True)
class AudioInfo:
    bgm: BGMInfo = field(default_factory=BGMInfo)

    def to_dict(self) -> dict[str, Any]:
        return {"bgm": self.bgm.to_dict()}


@dataclass(frozen=True)
class NoteInfo:
    """All the note data in a chart: one list per button lane and one list of segments per laser lane."""

    bt: tuple[tuple[NoteEvent, ...], ...] = ((), (), (), ())
    fx: tuple[tuple[NoteEvent, ...], ...] = ((), ())
    laser: tuple[tuple[LaserSegment, ...], ...] = ((), ())

    def lane(self, lane: ButtonLane) -> tuple[NoteEvent, ...]:
        if lane.is_fx():
            return self.fx[lane.value - 5]
        return self.bt[lane.value]

    def laser_lane(self, lane: LaserLane) -> tuple[LaserSegment, ...]:
        return self.laser[lane.value - 8]

    def to_dict(self) -> dict[str, Any]:
        return {
            "bt": [[note.to_dict() for note in notes] for notes in self.bt],
            "fx": [[note.to_dict() for note in notes] for notes in self.fx],
            "laser": [[segment.to_dict() for segment in segments] for segments in self.laser],
        }


@dataclass(frozen=True)
class CameraInfo:
    body: tuple[tuple[CameraParam, tuple[GraphPoint, ...]], ...] = ()

    def graph(self, param: CameraParam) -> tuple[GraphPoint, ...]:
        for key, points in self.body:
            if key == param:
                return points
        return ()

    def to_dict(self) -> dict[str, Any]:
        if not self.body:
            return {}
        return {"cam": {"body": {param.value: [point.to_dict() for point in points] for param, points in self.body}}}


@dataclass(frozen=True)
class KSONDocument:
    """A complete KSON document."""

    version: str = "ksh"
    meta: MetaInfo = field(default_factory=MetaInfo)
    beat: BeatInfo = field(default_factory=BeatInfo)
    gauge: GaugeInfo | None = None
    audio: AudioInfo = field(default_factory=AudioInfo)
    note: NoteInfo = field(default_factory=NoteInfo)
    camera: CameraInfo = field(default_factory=CameraInfo)

    def to_dict(self) -> dict[str, Any]:
        """Convert the document to nested dicts and lists, ready for JSON serialization."""
        data: dict[str, Any] = {
            "version": self.version,
            "meta": self.meta.to_dict(),
            "beat": self.beat.to_dict(),
        }
        if self.gauge is not None:
            data["gauge"] = self.gauge.to_dict()
        data["audio"] = self.audio.to_dict()
        data["note"] = self.note.to_dict()
        data["camera"] = self.camera.to_dict()
        return data
