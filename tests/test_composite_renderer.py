"""
Tests for the composite renderer.

Verifies:
- Output size and background
- Element placement through the shared contain geometry
- Paint order, opacity and rotation
- Atomic failure on undecodable images
- Snapshot isolation for async renders
"""
import asyncio
import io

import numpy as np
import pytest
from PIL import Image

from models.design_element import DesignElement
from models.errors import ImageDecodeFailure
from services.composite_renderer import encode_png
from conftest import solid_data_url, close_to_color, RED, BLUE, WHITE


def pixel(img, x, y):
    return img.getpixel((x, y))[:3]


# ══════════════════════════════════════════════════════════════════════════
# Base Output
# ══════════════════════════════════════════════════════════════════════════

class TestBaseOutput:

    def test_native_size_and_mode(self, renderer):
        img = renderer.render(solid_data_url(800, 1000, WHITE), [])
        assert img.size == (800, 1000)
        assert img.mode == 'RGB'

    def test_transparent_base_shows_white(self, renderer):
        img = renderer.render(solid_data_url(40, 40, (0, 0, 0, 0)), [])
        assert close_to_color(pixel(img, 20, 20), (255, 255, 255))

    def test_empty_layout_equals_base(self, renderer):
        img = renderer.render(solid_data_url(50, 70, (10, 200, 30, 255)), [])
        assert close_to_color(pixel(img, 0, 0), (10, 200, 30))
        assert close_to_color(pixel(img, 49, 69), (10, 200, 30))


# ══════════════════════════════════════════════════════════════════════════
# Placement
# ══════════════════════════════════════════════════════════════════════════

class TestPlacement:

    def test_centered_element_on_square_base(self, renderer, white_base_1000, red_overlay):
        img = renderer.render(white_base_1000, [DesignElement(red_overlay)])
        # 128 stage units on a 600 unit wide fit -> ~213 px, centered at (500, 500)
        assert close_to_color(pixel(img, 500, 500), (255, 0, 0))
        assert close_to_color(pixel(img, 400, 500), (255, 0, 0))
        assert close_to_color(pixel(img, 600, 500), (255, 0, 0))
        assert close_to_color(pixel(img, 380, 500), (255, 255, 255))
        assert close_to_color(pixel(img, 620, 500), (255, 255, 255))
        assert close_to_color(pixel(img, 500, 380), (255, 255, 255))

    def test_position_uses_letterbox_offset(self, renderer, red_overlay):
        # 800x1000 base: stage y=25 is the top edge of the bitmap
        base = solid_data_url(800, 1000, WHITE)
        element = DesignElement(red_overlay, x=50, y=100 * 225 / 800)
        img = renderer.render(base, [element])
        # stage (300, 225) -> bitmap (400, (225 - 25) / 750 * 1000)
        assert close_to_color(pixel(img, 400, 267), (255, 0, 0))

    def test_scale_changes_size(self, renderer, white_base_1000, red_overlay):
        img = renderer.render(white_base_1000, [DesignElement(red_overlay, scale=2.0)])
        # Half width ~213 px
        assert close_to_color(pixel(img, 300, 500), (255, 0, 0))
        assert close_to_color(pixel(img, 280, 500), (255, 255, 255))

    def test_aspect_ratio_is_kept(self, renderer, white_base_1000):
        wide = solid_data_url(128, 32, RED)
        img = renderer.render(white_base_1000, [DesignElement(wide)])
        # ~213 x 53 px
        assert close_to_color(pixel(img, 400, 500), (255, 0, 0))
        assert close_to_color(pixel(img, 500, 540), (255, 255, 255))

    def test_rotation_turns_element(self, renderer, white_base_1000):
        wide = solid_data_url(128, 32, RED)
        img = renderer.render(white_base_1000, [DesignElement(wide, rotation=90)])
        assert close_to_color(pixel(img, 500, 400), (255, 0, 0))
        assert close_to_color(pixel(img, 400, 500), (255, 255, 255))

    def test_element_partly_off_canvas(self, renderer, white_base_1000, red_overlay):
        img = renderer.render(white_base_1000, [DesignElement(red_overlay, x=0, y=50)])
        assert close_to_color(pixel(img, 5, 500), (255, 0, 0))


# ══════════════════════════════════════════════════════════════════════════
# Paint Order and Opacity
# ══════════════════════════════════════════════════════════════════════════

class TestCompositing:

    def test_paint_order(self, renderer, white_base_1000, red_overlay, blue_overlay):
        a = DesignElement(red_overlay, x=45)
        b = DesignElement(blue_overlay, x=55)
        ab = np.array(renderer.render(white_base_1000, [a, b]), dtype=np.int16)
        ba = np.array(renderer.render(white_base_1000, [b, a]), dtype=np.int16)

        # Later element is on top where they overlap
        assert close_to_color(ab[500, 500], (0, 0, 255))
        assert close_to_color(ba[500, 500], (255, 0, 0))

        # Outside the overlap (x 443..557, y 393..607) nothing changes
        diff = np.any(ab != ba, axis=2)
        ys, xs = np.nonzero(diff)
        assert xs.min() >= 440 and xs.max() <= 560
        assert ys.min() >= 390 and ys.max() <= 610

    def test_zero_opacity_leaves_base(self, renderer, white_base_1000, red_overlay):
        base = np.array(renderer.render(white_base_1000, []))
        img = np.array(renderer.render(white_base_1000, [DesignElement(red_overlay, opacity=0)]))
        assert np.array_equal(base, img)

    def test_half_opacity_blends(self, renderer, white_base_1000, red_overlay):
        img = renderer.render(white_base_1000, [DesignElement(red_overlay, opacity=0.5)])
        assert close_to_color(pixel(img, 500, 500), (255, 128, 128))

    def test_render_is_deterministic(self, renderer, white_base_1000, red_overlay):
        elements = [DesignElement(red_overlay, x=30, y=60, scale=1.3, rotation=17, opacity=0.8)]
        first = np.array(renderer.render(white_base_1000, elements))
        second = np.array(renderer.render(white_base_1000, elements))
        assert np.array_equal(first, second)


# ══════════════════════════════════════════════════════════════════════════
# Failures
# ══════════════════════════════════════════════════════════════════════════

class TestFailures:

    def test_bad_overlay_aborts(self, renderer, white_base_1000, red_overlay, broken_source):
        elements = [DesignElement(red_overlay), DesignElement(broken_source)]
        with pytest.raises(ImageDecodeFailure):
            renderer.render(white_base_1000, elements)

    def test_bad_base_aborts(self, renderer, broken_source, red_overlay):
        with pytest.raises(ImageDecodeFailure):
            renderer.render(broken_source, [DesignElement(red_overlay)])

    def test_missing_file(self, renderer, tmp_path):
        with pytest.raises(ImageDecodeFailure):
            renderer.render(str(tmp_path / "nope.png"), [])

    def test_not_an_image(self, renderer, tmp_path):
        path = tmp_path / "notes.png"
        path.write_text("plain text")
        with pytest.raises(ImageDecodeFailure):
            renderer.render(str(path), [])


# ══════════════════════════════════════════════════════════════════════════
# Encoding and Async
# ══════════════════════════════════════════════════════════════════════════

class TestOutputs:

    def test_png_bytes_decode_to_same_pixels(self, renderer, white_base_1000, red_overlay):
        elements = [DesignElement(red_overlay)]
        img = renderer.render(white_base_1000, elements)
        decoded = Image.open(io.BytesIO(renderer.render_png(white_base_1000, elements)))
        assert decoded.format == 'PNG'
        assert np.array_equal(np.array(decoded.convert('RGB')), np.array(img))

    def test_data_url(self, renderer, white_base_1000):
        assert renderer.render_data_url(white_base_1000, []).startswith("data:image/png;base64,")

    def test_encode_png_signature(self):
        assert encode_png(Image.new('RGB', (2, 2))).startswith(b'\x89PNG')

    def test_file_path_sources(self, renderer, tmp_path):
        base_path = tmp_path / "base.png"
        overlay_path = tmp_path / "logo.png"
        Image.new('RGBA', (600, 800), WHITE).save(base_path)
        Image.new('RGBA', (16, 16), BLUE).save(overlay_path)
        img = renderer.render(str(base_path), [DesignElement(overlay_path.as_uri())])
        assert close_to_color(pixel(img, 300, 400), (0, 0, 255))

    def test_async_matches_sync(self, renderer, white_base_1000, red_overlay):
        elements = [DesignElement(red_overlay, rotation=30)]
        sync = np.array(renderer.render(white_base_1000, elements))
        result = asyncio.run(renderer.render_async(white_base_1000, elements))
        assert np.array_equal(np.array(result), sync)

    def test_async_snapshot_taken_at_call(self, renderer, white_base_1000, red_overlay):
        element = DesignElement(red_overlay)
        elements = [element]

        async def run():
            pending = renderer.render_async(white_base_1000, elements)
            # Edits after the call do not reach the render
            element.update(x=0)
            elements.append(DesignElement(red_overlay, y=0))
            return await pending

        img = asyncio.run(run())
        assert close_to_color(pixel(img, 500, 500), (255, 0, 0))
        assert close_to_color(pixel(img, 5, 500), (255, 255, 255))
