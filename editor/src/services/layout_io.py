"""
Garment Design Studio - Layout File Operations

Minimal JSON round-trip for a garment's design layout. A layout file holds
the garment entry (so a file can be rendered on its own) and every view's
elements in paint order:

    {
        "version": 1,
        "garment": {"id": ..., "name": ..., "views": {"front": ..., ...}},
        "views": {"front": [{"id": ..., "src": ..., "x": ..., ...}], ...}
    }

Rotation is written normalized into [0, 360).
"""

import json
import logging

from models.garment import Garment
from models.view_layout import ViewLayout

logger = logging.getLogger(__name__)

LAYOUT_FORMAT_VERSION = 1


def layout_to_dict(garment, layout):
    """Build the serializable layout structure"""
    return {
        'version': LAYOUT_FORMAT_VERSION,
        'garment': garment.to_dict(),
        'views': layout.to_dict(),
    }


def layout_from_dict(data):
    """Parse a layout structure

    Returns:
        (Garment, ViewLayout)

    Raises:
        ValueError: unsupported version or malformed content
    """
    version = data.get('version')
    if version != LAYOUT_FORMAT_VERSION:
        raise ValueError(f"Unsupported layout version: {version}")
    views = data.get('views', {})
    if not isinstance(views, dict):
        raise ValueError("Layout 'views' must be an object")
    for view, items in views.items():
        if not isinstance(items, list):
            raise ValueError(f"Layout view '{view}' must be a list of elements")
    try:
        garment = Garment.from_dict(data['garment'])
        layout = ViewLayout.from_dict(views)
    except (KeyError, TypeError) as e:
        raise ValueError(f"Malformed layout data: {e}") from e
    return garment, layout


def save_layout_to_file(garment, layout, filename):
    """Save a garment's layout as JSON

    Raises:
        OSError: if the file cannot be written
    """
    with open(filename, 'w', encoding='utf-8') as f:
        json.dump(layout_to_dict(garment, layout), f, indent=2)
    logger.info("Layout saved to %s", filename)


def load_layout_from_file(filename):
    """Load a layout JSON file

    Returns:
        (Garment, ViewLayout)

    Raises:
        OSError: if the file cannot be read
        ValueError: if the content is not a valid layout
    """
    with open(filename, 'r', encoding='utf-8') as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError("Layout file must contain a JSON object")
    garment, layout = layout_from_dict(data)
    logger.info("Layout loaded from %s (%d element(s))", filename, layout.element_count())
    return garment, layout
