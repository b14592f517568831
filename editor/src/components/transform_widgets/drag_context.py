"""Gesture state for the design canvas.

Pointer input from any device (mouse, touch, tablet) is reduced to a neutral
PointerEvent before it reaches the gesture controller. A GestureSession is the
snapshot taken when a drag starts; every frame of the drag is computed from it.
"""

from dataclasses import dataclass
from typing import Optional

from constants import STAGE_WIDTH, BASE_ELEMENT_SIZE
from models.transform import ScreenPixel, StagePercent

# Gesture modes
GESTURE_NONE = 'none'
GESTURE_MOVING = 'moving'
GESTURE_RESIZING = 'resizing'
GESTURE_ROTATING = 'rotating'

# Pointer event kinds
POINTER_DOWN = 'down'
POINTER_MOVE = 'move'
POINTER_UP = 'up'
POINTER_CANCEL = 'cancel'


@dataclass(frozen=True)
class PointerEvent:
    """Device-independent pointer event in screen pixels."""
    kind: str
    pos: ScreenPixel

    @classmethod
    def at(cls, kind, x, y):
        return cls(kind, ScreenPixel(float(x), float(y)))


@dataclass(frozen=True)
class StageRect:
    """Where the stage currently sits on screen.

    left/top/width/height are screen pixels of the (zoomed) stage box;
    zoom is the user's stage zoom factor that produced that size.
    """
    left: float
    top: float
    width: float
    height: float
    zoom: float = 1.0

    def percent_to_screen(self, pos: StagePercent) -> ScreenPixel:
        return ScreenPixel(self.left + self.width * pos.x / 100, self.top + self.height * pos.y / 100)

    @property
    def pixels_per_stage_unit(self) -> float:
        return self.width / STAGE_WIDTH

    def element_half_size(self, scale: float) -> float:
        """Half the on-screen side length of an element's box"""
        return BASE_ELEMENT_SIZE * scale * self.pixels_per_stage_unit / 2


@dataclass
class GestureSession:
    """Snapshot of one in-flight drag.

    Replaces separate start-position / start-transform fields with a single
    object that is created on pointer-down and dropped on pointer-up.
    """
    mode: str
    view: str
    element_id: str
    start: ScreenPixel
    start_x: float
    start_y: float
    start_scale: float
    start_rotation: float
    stage: StageRect
    pivot: Optional[ScreenPixel] = None  # Rotation pivot, fixed at gesture start
