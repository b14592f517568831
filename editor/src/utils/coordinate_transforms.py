"""Coordinate transformation utilities for stage and bitmap rendering.

Provides conversion between the coordinate systems used by the studio:
- Stage percent (0-100, Y-down), how element positions are stored
- Stage pixels (logical stage units, e.g. 600x800)
- Bitmap pixels (native pixels of a base image or composite)
- Screen pixels (widget pixels reported by pointer events)

Nothing here rounds. Rounding only happens when a pixel is finally written.
"""
import math

from models.transform import StagePercent, StagePixel, BitmapPixel, StageGeometry
from constants import FIT_CONTAIN, FIT_COVER
from utils.value_utils import clamp  # noqa: F401  re-exported for callers


def _check_dimensions(container_w, container_h, image_w, image_h):
	if container_w <= 0 or container_h <= 0:
		raise ValueError(f"Container size must be positive, got {container_w}x{container_h}")
	if image_w <= 0 or image_h <= 0:
		raise ValueError(f"Image size must be positive, got {image_w}x{image_h}")


def fit_contain(container_w, container_h, image_w, image_h):
	"""Largest rectangle with the image's aspect ratio that fits inside the container.

	The result is centered, with letterbox gaps on the constrained axis.

	Args:
		container_w, container_h: Stage size (logical units)
		image_w, image_h: Intrinsic image size (any unit, only the ratio matters)

	Returns:
		StageGeometry with render size and offsets in container units
	"""
	_check_dimensions(container_w, container_h, image_w, image_h)
	image_ratio = image_w / image_h
	container_ratio = container_w / container_h

	if image_ratio > container_ratio:
		# Width constrained: full width, vertical letterbox
		render_w = float(container_w)
		render_h = container_w / image_ratio
		offset_x = 0.0
		offset_y = (container_h - render_h) / 2
	else:
		# Height constrained: full height, horizontal letterbox
		render_h = float(container_h)
		render_w = container_h * image_ratio
		offset_y = 0.0
		offset_x = (container_w - render_w) / 2

	return StageGeometry(float(container_w), float(container_h), render_w, render_h, offset_x, offset_y)


def fit_cover(container_w, container_h, image_w, image_h):
	"""Smallest rectangle with the image's aspect ratio that covers the container.

	The overflowing axis is cropped evenly, so its offset is negative.

	Returns:
		StageGeometry with render size and offsets in container units
	"""
	_check_dimensions(container_w, container_h, image_w, image_h)
	image_ratio = image_w / image_h
	container_ratio = container_w / container_h

	if image_ratio > container_ratio:
		# Wider than the container: full height, crop left/right
		render_h = float(container_h)
		render_w = container_h * image_ratio
		offset_y = 0.0
		offset_x = (container_w - render_w) / 2
	else:
		# Taller than the container: full width, crop top/bottom
		render_w = float(container_w)
		render_h = container_w / image_ratio
		offset_x = 0.0
		offset_y = (container_h - render_h) / 2

	return StageGeometry(float(container_w), float(container_h), render_w, render_h, offset_x, offset_y)


FIT_RULES = {
	FIT_CONTAIN: fit_contain,
	FIT_COVER: fit_cover,
}


def fit_rect(mode, container_w, container_h, image_w, image_h):
	"""Apply the fit rule named by mode ('contain' or 'cover')."""
	try:
		rule = FIT_RULES[mode]
	except KeyError:
		raise ValueError(f"Unknown fit rule: {mode}") from None
	return rule(container_w, container_h, image_w, image_h)


def percent_to_stage_pixel(pos, geometry):
	"""Convert a stage percentage to stage pixels.

	Args:
		pos: StagePercent
		geometry: StageGeometry (only the stage size is used)

	Returns:
		StagePixel
	"""
	return StagePixel(pos.x / 100 * geometry.stage_w, pos.y / 100 * geometry.stage_h)


def stage_pixel_to_percent(pos, geometry):
	"""Convert stage pixels back to a stage percentage."""
	return StagePercent(pos.x / geometry.stage_w * 100, pos.y / geometry.stage_h * 100)


def stage_to_pixel(pos, geometry, target_w, target_h):
	"""Map a stage percentage onto a bitmap whose image was fitted into the stage.

	The percentage is first placed in stage pixels, the letterbox offset is
	removed, then the result is rescaled by target size / fitted render size.

	Args:
		pos: StagePercent
		geometry: StageGeometry from fit_contain/fit_cover for this bitmap
		target_w, target_h: Bitmap size in pixels

	Returns:
		BitmapPixel (unrounded)
	"""
	stage = percent_to_stage_pixel(pos, geometry)
	px = (stage.x - geometry.offset_x) / geometry.render_w * target_w
	py = (stage.y - geometry.offset_y) / geometry.render_h * target_h
	return BitmapPixel(px, py)


def pixel_to_stage(pos, geometry, target_w, target_h):
	"""Inverse of stage_to_pixel.

	Args:
		pos: BitmapPixel
		geometry: StageGeometry used for the forward mapping
		target_w, target_h: Bitmap size in pixels

	Returns:
		StagePercent (unclamped, may fall outside 0-100 in the letterbox)
	"""
	stage_x = pos.x / target_w * geometry.render_w + geometry.offset_x
	stage_y = pos.y / target_h * geometry.render_h + geometry.offset_y
	return stage_pixel_to_percent(StagePixel(stage_x, stage_y), geometry)


def element_width_on_bitmap(base_size, scale, geometry, target_w):
	"""Width in bitmap pixels of an element whose width is base_size * scale stage units."""
	return (base_size * scale / geometry.render_w) * target_w


def screen_delta_to_percent(dx, dy, stage_rect_w, stage_rect_h):
	"""Convert a pointer delta in screen pixels into percent of the stage.

	Args:
		dx, dy: Pointer travel in screen pixels
		stage_rect_w, stage_rect_h: On-screen stage size in pixels

	Returns:
		(dx_pct, dy_pct)
	"""
	return dx / stage_rect_w * 100, dy / stage_rect_h * 100


def angle_from_pivot(pivot_x, pivot_y, x, y, offset_degrees=0.0):
	"""Angle in degrees of the vector pivot -> (x, y), Y-down, plus an offset."""
	return math.degrees(math.atan2(y - pivot_y, x - pivot_x)) + offset_degrees
