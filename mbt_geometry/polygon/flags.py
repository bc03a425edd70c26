"""
Clip plane flags.

The six half-spaces a polygon can be clipped against are combined into a
bit mask. The numeric values are stable and are compared or persisted by
callers, so they must never change:

    NONE=0, NEAR=1, FAR=2, LEFT=4, RIGHT=8, UP=16, DOWN=32

Planes are always processed in increasing bit order. The order matters:
a vertex synthesized by one plane keeps its flag and may receive further
flags from the planes processed after it.
"""

from enum import IntFlag
from typing import Iterable, Tuple, Union


class ClipPlane(IntFlag):
    """Bit flags selecting clip planes (also used as per-vertex origin tags)."""

    NONE = 0
    NEAR = 1
    FAR = 2
    LEFT = 4
    RIGHT = 8
    UP = 16
    DOWN = 32

    FOV = LEFT | RIGHT | UP | DOWN
    ALL = NEAR | FAR | FOV

    @classmethod
    def from_names(cls, names: Union[str, Iterable[str]]) -> "ClipPlane":
        """
        Build a mask from plane names (case insensitive).

        Accepts single names or a list, e.g. ``["near", "far"]`` or ``"fov"``.

        Raises:
            ValueError: If a name does not match any plane.
        """
        if isinstance(names, str):
            names = [names]

        mask = cls.NONE
        for name in names:
            key = str(name).strip().upper()
            if key not in cls.__members__:
                valid = [m.lower() for m in cls.__members__]
                raise ValueError(f"Unknown clip plane: {name}. Valid: {valid}")
            mask |= cls.__members__[key]
        return mask


# Processing order of the clip passes
CLIP_ORDER: Tuple[ClipPlane, ...] = (
    ClipPlane.NEAR,
    ClipPlane.FAR,
    ClipPlane.LEFT,
    ClipPlane.RIGHT,
    ClipPlane.UP,
    ClipPlane.DOWN,
)

# Index of each FOV plane in CameraParameters.fov_normals
FOV_NORMAL_INDEX = {
    ClipPlane.LEFT: 0,
    ClipPlane.RIGHT: 1,
    ClipPlane.UP: 2,
    ClipPlane.DOWN: 3,
}


def check_mask(clip_mask: int) -> ClipPlane:
    """
    Convert an integer to a ClipPlane mask.

    Raises:
        ValueError: If the mask has bits outside the six planes.
    """
    unknown = int(clip_mask) & ~int(ClipPlane.ALL)
    if unknown:
        raise ValueError(f"Clip mask {int(clip_mask)} has undefined plane bits {unknown}")
    return ClipPlane(clip_mask)


def active_planes(clip_mask: int) -> Tuple[ClipPlane, ...]:
    """
    Return the planes a clip mask enables, in processing order.

    Near clipping is implied as soon as any field-of-view plane is set, so
    points behind the camera never reach the FOV tests.
    """
    clip_mask = check_mask(clip_mask)
    planes = []
    for plane in CLIP_ORDER:
        if plane & clip_mask:
            planes.append(plane)
        elif plane is ClipPlane.NEAR and clip_mask & ClipPlane.FOV:
            planes.append(plane)
    return tuple(planes)
