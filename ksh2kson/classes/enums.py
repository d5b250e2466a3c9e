"""
General purpose enumerations.
"""
from enum import Enum, auto, unique

__all__ = [
    "LineState",
    "DifficultySlot",
    "ButtonLane",
    "LaserLane",
    "CameraParam",
]


class LineState(Enum):
    """Enumeration for the section of a KSH file currently being read."""

    HEADER = auto()
    BODY = auto()


@unique
class DifficultySlot(Enum):
    """Enumeration for the difficulty slot."""

    LIGHT = 0
    CHALLENGE = 1
    EXTENDED = 2
    INFINITE = 3

    @classmethod
    def from_name(cls, name: str | None) -> "DifficultySlot":
        """Match a KSH difficulty name case-insensitively, defaulting to the last slot."""
        if name is not None:
            for slot in cls:
                if slot.name.lower() == name.strip().lower():
                    return slot
        return cls.INFINITE


class ButtonLane(Enum):
    """Enumeration for the button lanes, valued by their column inside a KSH note line."""

    BT_A = 0
    BT_B = 1
    BT_C = 2
    BT_D = 3
    FX_L = 5
    FX_R = 6

    def is_fx(self) -> bool:
        return self in (ButtonLane.FX_L, ButtonLane.FX_R)

    def __str__(self) -> str:
        return self.name.lower()


class LaserLane(Enum):
    """Enumeration for the laser lanes, valued by their column inside a KSH note line."""

    LEFT = 8
    RIGHT = 9

    @property
    def range_key(self) -> str:
        """Name of the modifier that sets this lane's laser range."""
        return f"laserrange_{self.name[0].lower()}"

    def __str__(self) -> str:
        return self.name.lower()


class CameraParam(Enum):
    """Enumeration for the camera parameters, valued by their name in the output document."""

    ZOOM = "zoom"
    ROTATION_X = "rotation_x"
    SHIFT_X = "shift_x"
    CENTER_SPLIT = "center_split"

    @classmethod
    def from_ksh_key(cls, key: str) -> "CameraParam | None":
        return KSH_CAMERA_KEYS.get(key)


# fmt: off
KSH_CAMERA_KEYS = {
    "zoom_bottom" : CameraParam.ZOOM,
    "zoom_top"    : CameraParam.ROTATION_X,
    "zoom_side"   : CameraParam.SHIFT_X,
    "center_split": CameraParam.CENTER_SPLIT,
}
# fmt: on
