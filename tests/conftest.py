"""
Shared fixtures for Garment Design Studio tests.

Provides in-memory base/overlay images, a sample garment, and a session
with that garment active.
"""
import sys
import os
import pytest

# Ensure editor/src is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'editor', 'src'))

# Widget tests run without a display
os.environ.setdefault('QT_QPA_PLATFORM', 'offscreen')

from PIL import Image

from models.garment import Garment
from services.composite_renderer import CompositeRenderer
from services.image_loader import image_to_data_url
from services.studio_session import StudioSession
from utils.logger import set_debug_mode

WHITE = (255, 255, 255, 255)
GRAY = (128, 128, 128, 255)
RED = (255, 0, 0, 255)
BLUE = (0, 0, 255, 255)


def solid_data_url(width, height, color):
    """PNG data URL of a solid-color RGBA image"""
    return image_to_data_url(Image.new('RGBA', (width, height), color))


# ── Sessions stay in debug mode: loggerRaise re-raises, no popups ──────

@pytest.fixture(autouse=True)
def debug_errors():
    set_debug_mode(True)
    yield


# ── Images ──────────────────────────────────────────────────────────────

@pytest.fixture
def white_base_1000():
    """1000x1000 white base image as a data URL"""
    return solid_data_url(1000, 1000, WHITE)


@pytest.fixture
def red_overlay():
    return solid_data_url(64, 64, RED)


@pytest.fixture
def blue_overlay():
    return solid_data_url(64, 64, BLUE)


@pytest.fixture
def broken_source():
    """A data URL that is not valid base64"""
    return "data:image/png;base64,!!!not-an-image!!!"


# ── Garments / sessions ─────────────────────────────────────────────────

@pytest.fixture
def garment(white_base_1000):
    """Garment with front and back images and no side image"""
    return Garment('tee', 'T-Shirt', {
        'front': white_base_1000,
        'back': solid_data_url(800, 1000, GRAY),
    })


@pytest.fixture
def renderer():
    return CompositeRenderer()


@pytest.fixture
def session(garment, renderer):
    """StudioSession with the sample garment active on the front view"""
    s = StudioSession(renderer)
    s.select_garment(garment)
    return s


def close_to_color(actual, expected, tol=2):
    """Channel-wise comparison that tolerates resampling rounding"""
    return all(abs(a - e) <= tol for a, e in zip(actual, expected))
