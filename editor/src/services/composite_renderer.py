"""Composite Renderer Service.

Flattens a base garment image and an ordered list of design elements into a
single bitmap that matches what the interactive stage shows.

The stage on screen fits the base image into a fixed 600x800 box with the
contain rule, and element positions are percentages of that box. The
composite is rendered at the base image's native size instead, so every
element goes stage percent -> stage pixels -> bitmap pixels through the same
contain geometry before it is drawn.

Overlays are decoded and drawn one at a time in list order, so paint order
never depends on how long an image takes to load.
"""

import asyncio
import io
import logging
import math

import numpy as np
from PIL import Image

from constants import (
    STAGE_WIDTH, STAGE_HEIGHT, BASE_ELEMENT_SIZE,
    COMPOSITE_BACKGROUND, COMPOSITE_FORMAT, COMPOSITE_MIME,
)
from services.image_loader import ImageLoader, image_to_data_url
from utils.coordinate_transforms import fit_contain, stage_to_pixel, element_width_on_bitmap

logger = logging.getLogger(__name__)


class CompositeRenderer:
    """Offscreen renderer that produces the flattened design blueprint.

    The renderer holds no per-render state; render() is a pure function of
    its inputs (given deterministic image decoding).
    """

    def __init__(self, image_loader=None, stage_size=(STAGE_WIDTH, STAGE_HEIGHT),
                 base_element_size=BASE_ELEMENT_SIZE):
        self.image_loader = image_loader or ImageLoader()
        self.stage_w, self.stage_h = stage_size
        self.base_element_size = base_element_size

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def render(self, base_source, elements):
        """Render a composite.

        Args:
            base_source: Base garment image source (see ImageLoader)
            elements: DesignElements in paint order (bottom first)

        Returns:
            PIL.Image.Image (RGB) at the base image's native size

        Raises:
            ImageDecodeFailure: the base or any overlay failed to load; no
                partial image is produced
        """
        snapshot = [element.copy() for element in elements]
        return self._render_snapshot(base_source, snapshot)

    def render_async(self, base_source, elements):
        """Same as render(), run in the default executor.

        The element list is copied here, when the call is made, so edits to
        the live layout after this returns do not reach the render.

        Returns:
            Awaitable resolving to the composite image
        """
        snapshot = [element.copy() for element in elements]
        return self._render_in_executor(base_source, snapshot)

    async def _render_in_executor(self, base_source, snapshot):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._render_snapshot, base_source, snapshot)

    def render_png(self, base_source, elements):
        """Render and encode as PNG bytes."""
        return encode_png(self.render(base_source, elements))

    def render_data_url(self, base_source, elements):
        """Render and encode as a PNG data URL."""
        return image_to_data_url(self.render(base_source, elements), COMPOSITE_FORMAT, COMPOSITE_MIME)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _render_snapshot(self, base_source, elements):
        base = self.image_loader.load(base_source)
        out_w, out_h = base.size

        # White background, base drawn to fill the bitmap exactly
        canvas = Image.new('RGBA', (out_w, out_h), COMPOSITE_BACKGROUND)
        canvas.alpha_composite(base)

        # Same letterboxing the user saw on the stage
        geometry = fit_contain(self.stage_w, self.stage_h, out_w, out_h)
        logger.debug("Composite %dx%d, stage geometry %s", out_w, out_h, geometry)

        for element in elements:
            overlay = self.image_loader.load(element.image_source)
            self._draw_element(canvas, overlay, element, geometry)

        logger.info("Rendered composite %dx%d with %d element(s)", out_w, out_h, len(elements))
        return canvas.convert('RGB')

    def _draw_element(self, canvas, overlay, element, geometry):
        """Draw one overlay centered on its mapped position, rotated, with opacity."""
        out_w, out_h = canvas.size
        center = stage_to_pixel(element.position, geometry, out_w, out_h)
        width = element_width_on_bitmap(self.base_element_size, element.scale, geometry, out_w)
        height = overlay.height / overlay.width * width
        if width <= 0 or height <= 0:
            return

        # Resample once to the target size, then place it with an exact
        # sub-pixel affine transform
        sized = overlay.resize((max(1, round(width)), max(1, round(height))), Image.Resampling.LANCZOS)

        bounds = _rotated_bounds(center.x, center.y, width, height, element.rotation, out_w, out_h)
        if bounds is None:
            return
        left, top, right, bottom = bounds

        coeffs = _inverse_affine(center.x - left, center.y - top, width, height,
                                 sized.width / width, sized.height / height, element.rotation)
        layer = sized.transform(
            (right - left, bottom - top), Image.Transform.AFFINE, coeffs,
            resample=Image.Resampling.BICUBIC, fillcolor=(0, 0, 0, 0),
        )

        if element.opacity < 1.0:
            layer = _apply_opacity(layer, element.opacity)

        canvas.alpha_composite(layer, dest=(left, top))


def _rotated_bounds(cx, cy, width, height, rotation, max_w, max_h):
    """Integer bounding box of a rotated rectangle, clipped to the bitmap.

    Returns:
        (left, top, right, bottom) or None if nothing is visible
    """
    rad = math.radians(rotation)
    cos_r = abs(math.cos(rad))
    sin_r = abs(math.sin(rad))
    half_w = (width * cos_r + height * sin_r) / 2
    half_h = (width * sin_r + height * cos_r) / 2
    left = max(0, math.floor(cx - half_w) - 1)
    top = max(0, math.floor(cy - half_h) - 1)
    right = min(max_w, math.ceil(cx + half_w) + 1)
    bottom = min(max_h, math.ceil(cy + half_h) + 1)
    if right <= left or bottom <= top:
        return None
    return left, top, right, bottom


def _inverse_affine(cx, cy, width, height, sx, sy, rotation):
    """Coefficients mapping layer pixels back into the sized overlay.

    Forward placement: scale to width x height, rotate clockwise by rotation
    (Y-down) about the overlay center, translate the center to (cx, cy).
    PIL wants the inverse: for every output pixel, where to sample the input.
    """
    rad = math.radians(rotation)
    cos_r = math.cos(rad)
    sin_r = math.sin(rad)
    a = sx * cos_r
    b = sx * sin_r
    c = sx * (width / 2 - cos_r * cx - sin_r * cy)
    d = -sy * sin_r
    e = sy * cos_r
    f = sy * (height / 2 + sin_r * cx - cos_r * cy)
    return (a, b, c, d, e, f)


def _apply_opacity(layer, opacity):
    """Multiply the alpha channel by opacity."""
    pixels = np.array(layer, dtype=np.float32)
    pixels[..., 3] = np.round(pixels[..., 3] * opacity)
    return Image.fromarray(pixels.astype(np.uint8))


def encode_png(img):
    """Lossless PNG encoding of a composite."""
    buffer = io.BytesIO()
    img.save(buffer, COMPOSITE_FORMAT)
    return buffer.getvalue()
