"""Headless Blueprint Renderer - CLI entry point.

Reads saved layout files and renders each view that has a base image to a
PNG blueprint at the base image's native resolution, exactly as the
Generate Blueprint action in the studio window does.

Usage:
    python editor/src/headless.py <layout_file> [layout_file ...] [-o OUTPUT_DIR] [--view VIEW]

Examples:
    python editor/src/headless.py designs/tee.json
    python editor/src/headless.py designs/*.json -o renders/ --view front
    python editor/src/headless.py designs/tee.json --view back --data-url
"""

import sys
import os
import argparse
import logging

# Add editor/src to path so imports work
_src_dir = os.path.dirname(os.path.abspath(__file__))
if _src_dir not in sys.path:
    sys.path.insert(0, _src_dir)

from constants import VIEW_NAMES
from models.errors import StudioError
from services.composite_renderer import CompositeRenderer
from services.layout_io import load_layout_from_file
from services.studio_session import StudioSession
from utils.logger import configure_logging

logger = logging.getLogger(__name__)


def open_layout_session(layout_path, renderer=None):
    """StudioSession with the garment and layout of a layout file active"""
    garment, layout = load_layout_from_file(layout_path)
    session = StudioSession(renderer or CompositeRenderer())
    session.set_layout(garment.id, layout)
    session.select_garment(garment)
    return session


def render_layout_file(layout_path, output_dir, views=None, use_filenames=False, renderer=None):
    """Render the views of one layout file to PNG files.

    Args:
        layout_path: Layout JSON file
        output_dir: Directory the PNGs are written to (created if missing)
        views: View names to render (default: every view with a base image)
        use_filenames: Name outputs after the layout file instead of the garment id
        renderer: CompositeRenderer to reuse across files

    Returns:
        List of written file paths

    Raises:
        OSError, ValueError: the layout file cannot be read
        StudioError: a view cannot be rendered
    """
    session = open_layout_session(layout_path, renderer)
    garment = session.garment
    if views is None:
        views = garment.available_views()

    stem = os.path.splitext(os.path.basename(layout_path))[0] if use_filenames else garment.id
    os.makedirs(output_dir, exist_ok=True)

    written = []
    for view in views:
        out_file = os.path.join(output_dir, f"{stem}_{view}.png")
        with open(out_file, 'wb') as f:
            f.write(session.get_composite_png(view))
        written.append(out_file)
    return written


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Render garment design layouts to PNG blueprints (headless).',
    )
    parser.add_argument(
        'layout_files',
        nargs='+',
        help='Path(s) to layout JSON files.',
    )
    parser.add_argument(
        '-o', '--output',
        default='./output',
        help='Output directory for PNG files (default: ./output).',
    )
    parser.add_argument(
        '--view',
        choices=VIEW_NAMES,
        action='append',
        help='View to render (repeatable; default: every view with a base image).',
    )
    parser.add_argument(
        '-f', '--use-filenames',
        action='store_true',
        help='Name output PNGs after the layout filename instead of the garment id.',
    )
    parser.add_argument(
        '--data-url',
        action='store_true',
        help='Print each composite as a PNG data URL instead of writing files.',
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose logging.',
    )
    args = parser.parse_args(argv)

    configure_logging(args.verbose)

    output_dir = os.path.abspath(args.output)
    renderer = CompositeRenderer()

    rendered = 0
    failed = 0
    for layout_file in args.layout_files:
        layout_path = os.path.abspath(layout_file)
        if not os.path.isfile(layout_path):
            print(f"  [FAIL] {layout_file}: file not found")
            failed += 1
            continue
        try:
            if args.data_url:
                session = open_layout_session(layout_path, renderer)
                for view in args.view or session.garment.available_views():
                    print(session.get_composite_data_url(view))
                    rendered += 1
                continue
            for out_file in render_layout_file(layout_path, output_dir, args.view, args.use_filenames, renderer):
                rendered += 1
                print(f"  [{rendered}] {os.path.basename(out_file)}")
        except (OSError, ValueError, StudioError) as e:
            failed += 1
            print(f"  [FAIL] {layout_file}: {e}")
            logger.debug("Render failure", exc_info=True)

    if not args.data_url:
        print(f"\nDone. Rendered {rendered} image(s) to {output_dir}/")
    if failed:
        print(f"  ({failed} failed)")
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
