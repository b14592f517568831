"""
Garment Design Studio - Gesture Components

This package contains the element manipulation architecture:
- handles.py: ABC-based handle classes (CornerHandle, RotationHandle, etc.)
- modes.py: Handle sets for selected and unselected elements
- drag_context.py: Pointer events, stage rect and gesture snapshot
- gesture_controller.py: The move/resize/rotate state machine
"""

from .handles import Handle, CornerHandle, RotationHandle, DeleteHandle, BodyHandle
from .modes import HandleMode, SelectedMode, IdleMode, create_mode
from .drag_context import (
    GestureSession, PointerEvent, StageRect,
    GESTURE_NONE, GESTURE_MOVING, GESTURE_RESIZING, GESTURE_ROTATING,
    POINTER_DOWN, POINTER_MOVE, POINTER_UP, POINTER_CANCEL,
)
from .gesture_controller import GestureController, PRESS_GESTURE, PRESS_DELETED, PRESS_CLEARED

__all__ = [
    'Handle', 'CornerHandle', 'RotationHandle', 'DeleteHandle', 'BodyHandle',
    'HandleMode', 'SelectedMode', 'IdleMode', 'create_mode',
    'GestureSession', 'PointerEvent', 'StageRect',
    'GESTURE_NONE', 'GESTURE_MOVING', 'GESTURE_RESIZING', 'GESTURE_ROTATING',
    'POINTER_DOWN', 'POINTER_MOVE', 'POINTER_UP', 'POINTER_CANCEL',
    'GestureController', 'PRESS_GESTURE', 'PRESS_DELETED', 'PRESS_CLEARED',
]
