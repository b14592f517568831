"""Design element handle system - ABC-based handle architecture.

Each handle type is a class that knows:
- How to draw itself
- How to test if a pointer position hits it
- Which gesture it starts, and how a drag of that gesture updates the element

All positions are screen pixels. A handle's abstract position is given in
box-normalized coordinates (-1..1) and rotated with the element, so the
handles follow the selection box as the element turns.
"""

from abc import ABC, abstractmethod
from PyQt5.QtCore import QPointF, Qt
from PyQt5.QtGui import QPen, QBrush, QColor
import math

from constants import (
    HANDLE_RADIUS, HANDLE_HIT_TOLERANCE,
    ROTATION_HANDLE_OFFSET, ROTATION_HANDLE_RADIUS,
    DELETE_HANDLE_OFFSET, DELETE_HANDLE_RADIUS,
    MIN_POSITION, MAX_POSITION, MIN_SCALE, MAX_SCALE,
    RESIZE_PIXELS_PER_SCALE, ROTATION_HANDLE_ANGLE_OFFSET,
)
from utils.coordinate_transforms import clamp, screen_delta_to_percent, angle_from_pivot
from .drag_context import GESTURE_MOVING, GESTURE_RESIZING, GESTURE_ROTATING


def rotate_offset(local_x, local_y, rotation):
    """Rotate a box-local offset by rotation degrees (clockwise on a Y-down screen)."""
    rad = math.radians(rotation)
    cos_r = math.cos(rad)
    sin_r = math.sin(rad)
    return local_x * cos_r - local_y * sin_r, local_x * sin_r + local_y * cos_r


class Handle(ABC):
    """Abstract base class for element handles."""

    # Gesture started by pressing this handle, or None for action handles
    gesture = None

    @abstractmethod
    def hit_test(self, pointer_x, pointer_y, center_x, center_y, half_size, rotation) -> bool:
        """Test if a pointer position hits this handle.

        Args:
            pointer_x, pointer_y: Pointer position in screen pixels
            center_x, center_y: Element center in screen pixels
            half_size: Half the side of the selection box in pixels
            rotation: Element rotation in degrees

        Returns:
            bool: True if the pointer hits this handle
        """
        pass

    @abstractmethod
    def draw(self, painter, center_x, center_y, half_size, rotation):
        """Draw this handle with a QPainter."""
        pass

    def drag(self, pointer, session):
        """Compute element fields for one frame of this handle's gesture.

        Args:
            pointer: Current ScreenPixel
            session: GestureSession snapshot taken at pointer-down

        Returns:
            dict of DesignElement fields to apply
        """
        return {}

    @abstractmethod
    def get_cursor(self):
        """Qt cursor shape to show while hovering this handle."""
        pass


class _PointHandle(Handle):
    """Handle drawn as a circle at a fixed box-normalized position."""

    def __init__(self, norm_x, norm_y, radius, hit_tolerance, extra_offset=0.0):
        self.norm_x = norm_x
        self.norm_y = norm_y
        self.radius = radius
        self.hit_tolerance = hit_tolerance
        # Extra pixels beyond the box edge along the Y axis (rotate/delete buttons)
        self.extra_offset = extra_offset

    def get_pixel_pos(self, center_x, center_y, half_size, rotation):
        """Screen position of this handle for the given box."""
        local_x = self.norm_x * half_size
        local_y = self.norm_y * (half_size + self.extra_offset)
        off_x, off_y = rotate_offset(local_x, local_y, rotation)
        return center_x + off_x, center_y + off_y

    def hit_test(self, pointer_x, pointer_y, center_x, center_y, half_size, rotation):
        px, py = self.get_pixel_pos(center_x, center_y, half_size, rotation)
        return math.hypot(pointer_x - px, pointer_y - py) <= self.radius + self.hit_tolerance


class CornerHandle(_PointHandle):
    """Corner handle for uniform resizing."""

    gesture = GESTURE_RESIZING

    def __init__(self, corner_type, radius=HANDLE_RADIUS, hit_tolerance=HANDLE_HIT_TOLERANCE):
        """
        Args:
            corner_type: 'nw', 'ne', 'sw', 'se'
        """
        self.corner_type = corner_type
        norm_x, norm_y = {
            'nw': (-1, -1),
            'ne': (1, -1),
            'sw': (-1, 1),
            'se': (1, 1),
        }[corner_type]
        super().__init__(norm_x, norm_y, radius, hit_tolerance)

    def draw(self, painter, center_x, center_y, half_size, rotation):
        px, py = self.get_pixel_pos(center_x, center_y, half_size, rotation)
        painter.setPen(QPen(QColor(24, 24, 27), 2))
        painter.setBrush(QBrush(QColor(255, 255, 255)))
        painter.drawEllipse(QPointF(px, py), float(self.radius), float(self.radius))

    def drag(self, pointer, session):
        """Scale by pointer travel; lower-right grows, upper-left shrinks.

        Every corner uses the same sign(dx + dy) rule, so dragging the
        upper-left corner outward shrinks the element.
        """
        dx = (pointer.x - session.start.x) / session.stage.zoom
        dy = (pointer.y - session.start.y) / session.stage.zoom
        distance = math.hypot(dx, dy)
        direction = 1 if (dx + dy) > 0 else -1
        scale = session.start_scale + direction * distance / RESIZE_PIXELS_PER_SCALE
        return {'scale': clamp(scale, MIN_SCALE, MAX_SCALE)}

    def get_cursor(self):
        if self.corner_type in ('nw', 'se'):
            return Qt.SizeFDiagCursor
        return Qt.SizeBDiagCursor


class RotationHandle(_PointHandle):
    """Round button above the selection box for rotation."""

    gesture = GESTURE_ROTATING

    def __init__(self, offset=ROTATION_HANDLE_OFFSET, radius=ROTATION_HANDLE_RADIUS, hit_tolerance=HANDLE_HIT_TOLERANCE):
        super().__init__(0, -1, radius, hit_tolerance, extra_offset=offset)

    def draw(self, painter, center_x, center_y, half_size, rotation):
        px, py = self.get_pixel_pos(center_x, center_y, half_size, rotation)
        painter.setPen(QPen(QColor(255, 255, 255), 1))
        painter.setBrush(QBrush(QColor(24, 24, 27)))
        painter.drawEllipse(QPointF(px, py), float(self.radius), float(self.radius))
        # Arc glyph
        painter.setPen(QPen(QColor(255, 255, 255), 2))
        painter.setBrush(Qt.NoBrush)
        r = self.radius * 0.5
        painter.drawArc(int(px - r), int(py - r), int(2 * r), int(2 * r), 30 * 16, 300 * 16)

    def drag(self, pointer, session):
        """Absolute angle from the pivot to the pointer; pointing up is 0 degrees."""
        pivot = session.pivot
        rotation = angle_from_pivot(pivot.x, pivot.y, pointer.x, pointer.y, ROTATION_HANDLE_ANGLE_OFFSET)
        return {'rotation': rotation}

    def get_cursor(self):
        return Qt.CrossCursor


class DeleteHandle(_PointHandle):
    """Round button below the selection box that removes the element.

    This is an action, not a gesture: pressing it never starts a drag.
    """

    gesture = None

    def __init__(self, offset=DELETE_HANDLE_OFFSET, radius=DELETE_HANDLE_RADIUS, hit_tolerance=HANDLE_HIT_TOLERANCE):
        super().__init__(0, 1, radius, hit_tolerance, extra_offset=offset)

    def draw(self, painter, center_x, center_y, half_size, rotation):
        px, py = self.get_pixel_pos(center_x, center_y, half_size, rotation)
        painter.setPen(QPen(QColor(255, 255, 255), 1))
        painter.setBrush(QBrush(QColor(239, 68, 68)))
        painter.drawEllipse(QPointF(px, py), float(self.radius), float(self.radius))
        painter.setPen(QPen(QColor(255, 255, 255), 2))
        r = self.radius * 0.4
        painter.drawLine(QPointF(px - r, py - r), QPointF(px + r, py + r))
        painter.drawLine(QPointF(px - r, py + r), QPointF(px + r, py - r))

    def get_cursor(self):
        return Qt.PointingHandCursor


class BodyHandle(Handle):
    """The element itself (rotated square box) for moving."""

    gesture = GESTURE_MOVING

    def hit_test(self, pointer_x, pointer_y, center_x, center_y, half_size, rotation):
        # Un-rotate the pointer into the box's local frame
        local_x, local_y = rotate_offset(pointer_x - center_x, pointer_y - center_y, -rotation)
        return abs(local_x) <= half_size and abs(local_y) <= half_size

    def draw(self, painter, center_x, center_y, half_size, rotation):
        """Dashed selection outline."""
        pen = QPen(QColor(24, 24, 27), 2)
        pen.setStyle(Qt.DashLine)
        painter.save()
        painter.translate(center_x, center_y)
        painter.rotate(rotation)
        painter.setPen(pen)
        painter.setBrush(Qt.NoBrush)
        painter.drawRect(int(-half_size), int(-half_size), int(2 * half_size), int(2 * half_size))
        painter.restore()

    def drag(self, pointer, session):
        """Translate by pointer travel, converted to percent of the on-screen stage."""
        dx_pct, dy_pct = screen_delta_to_percent(
            pointer.x - session.start.x, pointer.y - session.start.y,
            session.stage.width, session.stage.height)
        return {
            'x': clamp(session.start_x + dx_pct, MIN_POSITION, MAX_POSITION),
            'y': clamp(session.start_y + dy_pct, MIN_POSITION, MAX_POSITION),
        }

    def get_cursor(self):
        return Qt.SizeAllCursor
