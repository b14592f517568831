"""
Composite worker thread.

QThread-based worker that flattens one view into the exported blueprint PNG
so the window stays responsive while overlays are decoded.
"""

import logging
from pathlib import Path

from PyQt5.QtCore import QThread, pyqtSignal

from models.errors import StudioError
from services.composite_renderer import encode_png

logger = logging.getLogger(__name__)


class CompositeWorker(QThread):
    """Worker thread for composite export."""

    finished = pyqtSignal(bool, str)  # success, output path or error message

    def __init__(self, renderer, base_source, elements, output_path):
        """
        Args:
            renderer: CompositeRenderer
            base_source: Base image source of the exported view
            elements: DesignElements in paint order; copied here, so edits
                made while the worker runs do not reach the export
            output_path: Destination PNG file
        """
        super().__init__()
        self.renderer = renderer
        self.base_source = base_source
        self.elements = [element.copy() for element in elements]
        self.output_path = Path(output_path)
        self.png_bytes = None

    def run(self):
        """Render, encode and write the composite."""
        try:
            image = self.renderer.render(self.base_source, self.elements)
            self.png_bytes = encode_png(image)
            self.output_path.write_bytes(self.png_bytes)
        except StudioError as e:
            logger.error("Composite export failed: %s", e)
            self.finished.emit(False, str(e))
            return
        except OSError as e:
            logger.error("Could not write %s: %s", self.output_path, e)
            self.finished.emit(False, f"Could not write {self.output_path}: {e}")
            return
        except Exception as e:
            logger.exception("Unexpected error while generating the blueprint")
            self.finished.emit(False, f"Error: {e}")
            return

        logger.info("Blueprint written to %s", self.output_path)
        self.finished.emit(True, str(self.output_path))
