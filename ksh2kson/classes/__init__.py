from .base import (
    ConversionError,
    DecodeError,
    InvalidValueError,
    ParseError,
    TimeSignature,
    TimingError,
)

from .chart import (
    TICKS_PER_BAR,
    TICKS_PER_BEAT,
    ChartLine,
    Measure,
    Modifier,
    ParsedChart,
    TimedChart,
    TimedLine,
)

from .enums import (
    ButtonLane,
    CameraParam,
    DifficultySlot,
    LaserLane,
    LineState,
)

from .kson import (
    AudioInfo,
    BeatInfo,
    BGMInfo,
    CameraInfo,
    GaugeInfo,
    GraphPoint,
    KSONDocument,
    LaserPoint,
    LaserSegment,
    MetaInfo,
    NoteEvent,
    NoteInfo,
)
