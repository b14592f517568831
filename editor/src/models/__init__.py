"""
Garment Design Studio - Data Models

This module contains the data model classes for design layouts.
This is the MODEL in MVC architecture.
"""

from .transform import Vec2, StagePercent, StagePixel, BitmapPixel, ScreenPixel, StageGeometry
from .design_element import DesignElement, normalize_rotation
from .view_layout import DesignElements, ViewLayout
from .garment import Garment
from .errors import StudioError, NoActiveGarment, MissingViewImage, ImageDecodeFailure

__all__ = [
    'Vec2', 'StagePercent', 'StagePixel', 'BitmapPixel', 'ScreenPixel', 'StageGeometry',
    'DesignElement', 'normalize_rotation',
    'DesignElements', 'ViewLayout',
    'Garment',
    'StudioError', 'NoActiveGarment', 'MissingViewImage', 'ImageDecodeFailure',
]
