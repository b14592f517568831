"""Coordinate and geometry data structures.

Every coordinate pair carries the space it lives in, so a stage percentage
can never be handed to something expecting bitmap pixels.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class Vec2:
    """Untagged 2D vector. Base for the tagged coordinate types."""
    x: float
    y: float

    def __iter__(self):
        """Allow tuple unpacking: x, y = vec2"""
        return iter((self.x, self.y))


@dataclass(frozen=True)
class StagePercent(Vec2):
    """Position as percent of stage width/height (0-100, Y-down)."""


@dataclass(frozen=True)
class StagePixel(Vec2):
    """Position in logical stage units (0..stage_w, 0..stage_h)."""


@dataclass(frozen=True)
class BitmapPixel(Vec2):
    """Position in pixels of a concrete bitmap (base image / composite)."""


@dataclass(frozen=True)
class ScreenPixel(Vec2):
    """Position in widget pixels as reported by pointer events."""


@dataclass(frozen=True)
class StageGeometry:
    """Rectangle a base image occupies inside a stage.

    Produced by the fit rules in utils.coordinate_transforms:
    - stage_w, stage_h: the stage box the image was fitted into
    - render_w, render_h: fitted image size in stage units
    - offset_x, offset_y: top-left of the fitted image inside the stage
      (letterbox gap for contain, negative crop for cover)
    """
    stage_w: float
    stage_h: float
    render_w: float
    render_h: float
    offset_x: float
    offset_y: float

    def as_tuple(self):
        return (self.render_w, self.render_h, self.offset_x, self.offset_y)
