"""Gesture controller - turns pointer events into design element edits.

States: none, moving, resizing, rotating.

    none --down on body/corner/rotate--> moving/resizing/rotating
    any  --up/cancel--> none

A pointer-down while a gesture is already running replaces the snapshot
(last writer wins); sessions never stack. Move and resize are relative to
the snapshot taken at pointer-down; rotation is recomputed each frame from
the fixed pivot and the pointer.

The controller only sees PointerEvent objects, never toolkit events.
"""

import logging

from .drag_context import (
    GestureSession, PointerEvent,
    GESTURE_NONE, GESTURE_MOVING, GESTURE_RESIZING, GESTURE_ROTATING,
    POINTER_DOWN, POINTER_MOVE, POINTER_UP, POINTER_CANCEL,
)
from .handles import DeleteHandle
from .modes import create_mode

logger = logging.getLogger(__name__)

# Result of press()
PRESS_GESTURE = 'gesture'
PRESS_DELETED = 'deleted'
PRESS_CLEARED = 'cleared'


class GestureController:
    """Single-owner finite-state machine over one StudioSession.

    Args:
        session: StudioSession providing the active view, selection and
            element mutations
    """

    def __init__(self, session):
        self.session = session
        self._gesture = None
        self._handle = None
        self._selected_mode = create_mode('selected')
        self._idle_mode = create_mode('idle')
        handles = self._selected_mode.get_handles()
        self._gesture_handles = {
            GESTURE_MOVING: handles['body'],
            GESTURE_RESIZING: handles['se'],
            GESTURE_ROTATING: handles['rotate'],
        }

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def mode(self):
        """Current gesture mode ('none' when idle)"""
        return self._gesture.mode if self._gesture else GESTURE_NONE

    @property
    def gesture(self):
        """The in-flight GestureSession, or None"""
        return self._gesture

    def is_active(self):
        return self._gesture is not None

    # ------------------------------------------------------------------
    # Hit testing
    # ------------------------------------------------------------------

    def hit_test(self, pos, stage):
        """Find the element and handle under a screen position.

        The selected element is tested first with its full handle set, since
        its buttons sit outside its box. Other elements are tested body-only,
        topmost (last painted) first.

        Returns:
            (DesignElement, Handle) or (None, None)
        """
        elements = self.session.elements()
        selected = self.session.selected_element()
        if selected is not None:
            handle = self._hit_element(self._selected_mode, selected, pos, stage)
            if handle is not None:
                return selected, handle
        for element in reversed(list(elements)):
            if selected is not None and element.id == selected.id:
                continue
            handle = self._hit_element(self._idle_mode, element, pos, stage)
            if handle is not None:
                return element, handle
        return None, None

    def _hit_element(self, mode, element, pos, stage):
        center = stage.percent_to_screen(element.position)
        half_size = self.handle_box_half_size(element, stage)
        return mode.get_handle_at_pos(pos.x, pos.y, center.x, center.y, half_size, element.rotation)

    @staticmethod
    def handle_box_half_size(element, stage):
        """Half side of the selection box around an element, in screen pixels"""
        return stage.element_half_size(element.scale)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def press(self, event: PointerEvent, stage):
        """Pointer-down anywhere on the canvas.

        Starts a gesture on a body/corner/rotate hit, removes the element on
        a delete hit, and clears the selection when nothing is hit.

        Returns:
            PRESS_GESTURE, PRESS_DELETED or PRESS_CLEARED
        """
        element, handle = self.hit_test(event.pos, stage)
        if element is None:
            self._gesture = None
            self._handle = None
            self.session.select(None)
            return PRESS_CLEARED
        if isinstance(handle, DeleteHandle):
            self._gesture = None
            self._handle = None
            self.session.remove_element(self.session.active_view, element.id)
            return PRESS_DELETED
        self.begin(element.id, handle.gesture, event.pos, stage)
        return PRESS_GESTURE

    def begin(self, element_id, mode, pos, stage):
        """Start a gesture on an element of the active view.

        Selecting an element and starting a gesture are the same action.

        Raises:
            ValueError: mode is not a gesture mode
            KeyError: no such element in the active view
        """
        if mode not in self._gesture_handles:
            raise ValueError(f"Not a gesture mode: {mode}")
        view = self.session.active_view
        element = self.session.elements(view).get(element_id)
        if element is None:
            raise KeyError(element_id)
        if self._gesture is not None:
            logger.debug("Replacing stale %s gesture on %s", self._gesture.mode, self._gesture.element_id)

        self.session.select(element_id)
        self._handle = self._gesture_handles[mode]
        self._gesture = GestureSession(
            mode=mode,
            view=view,
            element_id=element_id,
            start=pos,
            start_x=element.x,
            start_y=element.y,
            start_scale=element.scale,
            start_rotation=element.rotation,
            stage=stage,
            pivot=stage.percent_to_screen(element.position),
        )
        logger.debug("Gesture %s started on %s", mode, element_id)

    def move(self, event: PointerEvent):
        """Per-frame update. Returns True if the element changed."""
        gesture = self._gesture
        if gesture is None:
            return False
        if self.session.elements(gesture.view).get(gesture.element_id) is None:
            # Element went away under the pointer
            self.end()
            return False
        fields = self._handle.drag(event.pos, gesture)
        self.session.update_element(gesture.view, gesture.element_id, **fields)
        return True

    def end(self):
        """Pointer-up or pointer-cancel: back to 'none' without further edits"""
        if self._gesture is not None:
            logger.debug("Gesture %s ended on %s", self._gesture.mode, self._gesture.element_id)
        self._gesture = None
        self._handle = None

    release = end
    cancel = end

    def handle_event(self, event: PointerEvent, stage=None):
        """Dispatch a neutral pointer event.

        Args:
            event: PointerEvent
            stage: StageRect, required for pointer-down

        Returns:
            press() result for pointer-down, move() result for pointer-move,
            None otherwise
        """
        if event.kind == POINTER_DOWN:
            if stage is None:
                raise ValueError("pointer-down needs the current stage rect")
            return self.press(event, stage)
        if event.kind == POINTER_MOVE:
            return self.move(event)
        if event.kind in (POINTER_UP, POINTER_CANCEL):
            self.end()
            return None
        raise ValueError(f"Unknown pointer event kind: {event.kind}")
