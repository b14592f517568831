"""
Garment Design Studio - Design Element Data Model

One overlay graphic placed on a garment view.

Provides property-based access with:
- Silent clamping of position, scale and opacity into their bounds
- UUID-based identification (stable for the element's lifetime)
- Dict export/import for layout files

Rotation is stored exactly as edited (unbounded degrees). It is only
normalized into [0, 360) when exported with to_dict().

This is part of the MODEL layer - pure data, no UI logic.
"""

import copy
import math
import uuid as uuid_module
from typing import Dict, Optional

from constants import (
    DEFAULT_POSITION_X, DEFAULT_POSITION_Y,
    DEFAULT_SCALE, DEFAULT_ROTATION, DEFAULT_OPACITY,
    MIN_POSITION, MAX_POSITION,
    MIN_SCALE, MAX_SCALE,
    MIN_OPACITY, MAX_OPACITY,
)
from models.transform import StagePercent
from utils.value_utils import clamp


def normalize_rotation(rotation: float) -> float:
    """Fold an unbounded rotation into [0, 360)."""
    folded = float(rotation) % 360.0
    # -0.0 % 360 and tiny negative values can land on 360.0
    if folded >= 360.0:
        folded = 0.0
    return folded


class DesignElement:
    """A placed overlay: center position, scale, rotation and opacity.

    Properties:
        id: stable identifier
        image_source: URL, data URL or file path of the overlay bitmap
        x, y: center as percent of stage width/height, clamped to [0, 100]
        scale: multiplier on BASE_ELEMENT_SIZE, clamped to [0.1, 5.0]
        rotation: degrees, unbounded but finite
        opacity: clamped to [0, 1]
    """

    # Fields that may be changed through update()
    EDITABLE_FIELDS = ('x', 'y', 'scale', 'rotation', 'opacity', 'image_source')

    def __init__(self, image_source: str, x: float = DEFAULT_POSITION_X, y: float = DEFAULT_POSITION_Y,
                 scale: float = DEFAULT_SCALE, rotation: float = DEFAULT_ROTATION,
                 opacity: float = DEFAULT_OPACITY, element_id: Optional[str] = None):
        self._id = element_id if element_id else uuid_module.uuid4().hex
        self.image_source = image_source
        self.x = x
        self.y = y
        self.scale = scale
        self.rotation = rotation
        self.opacity = opacity

    @property
    def id(self) -> str:
        return self._id

    @property
    def x(self) -> float:
        return self._x

    @x.setter
    def x(self, value: float):
        self._x = clamp(float(value), MIN_POSITION, MAX_POSITION)

    @property
    def y(self) -> float:
        return self._y

    @y.setter
    def y(self, value: float):
        self._y = clamp(float(value), MIN_POSITION, MAX_POSITION)

    @property
    def position(self) -> StagePercent:
        """Center position as a tagged stage percentage"""
        return StagePercent(self._x, self._y)

    @property
    def scale(self) -> float:
        return self._scale

    @scale.setter
    def scale(self, value: float):
        self._scale = clamp(float(value), MIN_SCALE, MAX_SCALE)

    @property
    def rotation(self) -> float:
        return self._rotation

    @rotation.setter
    def rotation(self, value: float):
        value = float(value)
        if not math.isfinite(value):
            raise ValueError(f"Rotation must be a finite number of degrees, got {value}")
        self._rotation = value

    @property
    def opacity(self) -> float:
        return self._opacity

    @opacity.setter
    def opacity(self, value: float):
        self._opacity = clamp(float(value), MIN_OPACITY, MAX_OPACITY)

    def update(self, **fields) -> None:
        """Apply a partial update. Out-of-range numbers are clamped.

        Raises:
            ValueError: if a field is not editable (including 'id') or the
                rotation is not finite; nothing is changed
        """
        unknown = [name for name in fields if name not in self.EDITABLE_FIELDS]
        if unknown:
            raise ValueError(f"Cannot update design element field(s): {', '.join(sorted(unknown))}")
        staged = copy.copy(self)
        for name, value in fields.items():
            setattr(staged, name, value)
        self.__dict__.update(staged.__dict__)

    def copy(self) -> 'DesignElement':
        """Independent copy with the same id (used for render snapshots)"""
        return copy.copy(self)

    def to_dict(self) -> Dict:
        """Export to a plain dict. Rotation is normalized into [0, 360)."""
        return {
            'id': self._id,
            'src': self.image_source,
            'x': self._x,
            'y': self._y,
            'scale': self._scale,
            'rotation': normalize_rotation(self._rotation),
            'opacity': self._opacity,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'DesignElement':
        """Create from a dict produced by to_dict()"""
        return cls(
            image_source=data['src'],
            x=data.get('x', DEFAULT_POSITION_X),
            y=data.get('y', DEFAULT_POSITION_Y),
            scale=data.get('scale', DEFAULT_SCALE),
            rotation=data.get('rotation', DEFAULT_ROTATION),
            opacity=data.get('opacity', DEFAULT_OPACITY),
            element_id=data.get('id'),
        )

    def __eq__(self, other):
        if not isinstance(other, DesignElement):
            return NotImplemented
        return (self._id == other._id and self.image_source == other.image_source
                and self._x == other._x and self._y == other._y
                and self._scale == other._scale and self._rotation == other._rotation
                and self._opacity == other._opacity)

    def __repr__(self):
        return (f"DesignElement(id={self._id!r}, x={self._x:.2f}, y={self._y:.2f}, "
                f"scale={self._scale:.2f}, rotation={self._rotation:.1f}, opacity={self._opacity:.2f})")
