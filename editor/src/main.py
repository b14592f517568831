import sys
import os
import argparse
import logging

# Add editor/src to path so imports work when running directly
if __name__ == "__main__":
    current_dir = os.path.dirname(os.path.abspath(__file__))
    if current_dir not in sys.path:
        sys.path.insert(0, current_dir)

# PyQt5 import/s
from PyQt5 import QtWidgets
from PyQt5.QtWidgets import (
    QMainWindow, QWidget, QHBoxLayout, QVBoxLayout, QSplitter, QFileDialog,
    QMessageBox, QLabel, QComboBox, QTabBar, QToolBar,
)
from PyQt5.QtCore import Qt
from PyQt5.QtGui import QColor

# Component imports
from components.studio_canvas import StudioCanvas
from components.adjustment_panel import AdjustmentPanel
from components.composite_worker import CompositeWorker

# Model and service imports
from models.garment import Garment
from models.errors import StudioError
from services.studio_session import StudioSession
from services.layout_io import save_layout_to_file, load_layout_from_file

# Utility imports
from utils.logger import loggerRaise, set_main_window, set_debug_mode, configure_logging
from constants import VIEW_NAMES, DEFAULT_VIEW, CONFIG_DIR_NAME

# Mixin imports
from studio_window.menu_mixin import MenuMixin
from studio_window.config_mixin import ConfigMixin

logger = logging.getLogger(__name__)

IMAGE_FILE_FILTER = "Images (*.png *.jpg *.jpeg *.webp *.bmp);;All Files (*)"
LAYOUT_FILE_FILTER = "Layout Files (*.json);;All Files (*)"


class GarmentStudio(MenuMixin, ConfigMixin, QMainWindow):
    def __init__(self, garments=None, config_dir=None):
        super().__init__()
        self.resize(1280, 860)
        self.setMinimumSize(960, 640)

        # Session context: garment, layout arena, view and selection
        self.session = StudioSession()
        self.session.add_listener(self._on_session_changed)

        self.garments = {}  # garment id -> Garment, in combo order
        self._worker = None

        # Track current file and saved state
        self.current_file_path = None
        self.is_saved = True

        self._init_config(config_dir or os.path.join(os.path.expanduser("~"), CONFIG_DIR_NAME))

        # Initialize global logger with main window reference
        set_main_window(self)

        self.setup_ui()
        for garment in garments or []:
            self.add_garment(garment)
        self._update_window_title()

    def setup_ui(self):
        central_widget = QWidget()
        self.setCentralWidget(central_widget)

        main_layout = QVBoxLayout(central_widget)
        main_layout.setContentsMargins(0, 0, 0, 0)
        main_layout.setSpacing(0)

        # Garment picker + view tabs
        toolbar = QToolBar("Garment")
        toolbar.setMovable(False)
        toolbar.addWidget(QLabel(" Garment: "))
        self.garment_combo = QComboBox()
        self.garment_combo.setMinimumWidth(180)
        self.garment_combo.currentIndexChanged.connect(self._on_garment_combo_changed)
        toolbar.addWidget(self.garment_combo)
        toolbar.addSeparator()
        self.view_tabs = QTabBar()
        for view in VIEW_NAMES:
            self.view_tabs.addTab(view.capitalize())
        self.view_tabs.currentChanged.connect(self._on_view_tab_changed)
        toolbar.addWidget(self.view_tabs)
        self.addToolBar(Qt.TopToolBarArea, toolbar)

        # Canvas (center) and adjustment panel (right)
        splitter = QSplitter(Qt.Horizontal)
        self.canvas = StudioCanvas(self.session, parent=self)
        self.canvas.zoomChanged.connect(self._on_zoom_changed)
        splitter.addWidget(self.canvas)

        side = QWidget()
        side_layout = QHBoxLayout(side)
        side_layout.setContentsMargins(0, 0, 0, 0)
        self.adjustment_panel = AdjustmentPanel(self.session, parent=side)
        side_layout.addWidget(self.adjustment_panel, alignment=Qt.AlignTop)
        side.setMinimumWidth(260)
        splitter.addWidget(side)
        splitter.setSizes([960, 300])
        splitter.setCollapsible(0, False)
        main_layout.addWidget(splitter)

        # Menus need the canvas for the zoom actions
        self._create_menu_bar()

        # Status bar with left and right sections
        self.status_left = QLabel("Ready")
        self.status_right = QLabel("Zoom 100%")
        self.statusBar().addWidget(self.status_left, 1)
        self.statusBar().addPermanentWidget(self.status_right)

    # ========================================
    # Garments and views
    # ========================================

    def add_garment(self, garment, select=True):
        """Register a garment in the picker (replaces one with the same id)"""
        replacing = garment.id in self.garments
        self.garments[garment.id] = garment
        if not replacing:
            self.garment_combo.blockSignals(True)
            self.garment_combo.addItem(garment.name, garment.id)
            self.garment_combo.blockSignals(False)
        if select:
            self.select_garment(garment.id)

    def select_garment(self, garment_id):
        garment = self.garments[garment_id]
        self.garment_combo.blockSignals(True)
        self.garment_combo.setCurrentIndex(self.garment_combo.findData(garment_id))
        self.garment_combo.blockSignals(False)
        self.session.select_garment(garment)

    def _on_garment_combo_changed(self, index):
        if index < 0:
            return
        self.session.select_garment(self.garments[self.garment_combo.itemData(index)])

    def switch_view(self, view):
        if self.session.garment is None:
            return
        self.session.switch_view(view)

    def _on_view_tab_changed(self, index):
        self.switch_view(VIEW_NAMES[index])

    def _sync_view_controls(self):
        """Reflect garment/view state in the tabs and view actions"""
        garment = self.session.garment
        view = self.session.active_view if garment is not None else DEFAULT_VIEW
        self.view_tabs.blockSignals(True)
        self.view_tabs.setCurrentIndex(VIEW_NAMES.index(view))
        for index, name in enumerate(VIEW_NAMES):
            has_view = garment is not None and garment.has_view(name)
            self.view_tabs.setTabTextColor(index, QColor(Qt.black) if has_view else QColor(Qt.gray))
        self.view_tabs.blockSignals(False)
        self.view_actions[view].setChecked(True)

    def _on_session_changed(self, reason):
        if reason in ('garment', 'view', 'layout'):
            self._sync_view_controls()
        if reason == 'elements':
            self.is_saved = False
            self._update_window_title()
        if self.session.garment is not None:
            count = len(self.session.elements())
            self.status_left.setText(
                f"{self.session.garment.name} - {self.session.active_view} view - {count} graphic(s)")

    def _on_zoom_changed(self, zoom):
        self.status_right.setText(f"Zoom {round(zoom * 100)}%")

    # ========================================
    # Actions
    # ========================================

    def _report_error(self, e, user_message):
        """Route a failed action through loggerRaise without closing the window"""
        try:
            loggerRaise(e, user_message)
        except (StudioError, OSError, ValueError):
            self.status_left.setText(f"{user_message}: {e}")

    def new_garment(self):
        """Create a garment from a front image picked on disk"""
        filename, _ = QFileDialog.getOpenFileName(self, "Choose Front Image", self.last_image_dir, IMAGE_FILE_FILTER)
        if not filename:
            return
        self._remember_image_dir(filename)
        name = os.path.splitext(os.path.basename(filename))[0]
        garment_id = name
        suffix = 2
        while garment_id in self.garments:
            garment_id = f"{name}-{suffix}"
            suffix += 1
        self.add_garment(Garment(garment_id, name, {'front': filename}))

    def set_view_image(self):
        """Pick a base image for the active view of the active garment"""
        garment = self.session.garment
        if garment is None:
            return
        view = self.session.active_view
        filename, _ = QFileDialog.getOpenFileName(
            self, f"Choose {view.capitalize()} Image", self.last_image_dir, IMAGE_FILE_FILTER)
        if not filename:
            return
        self._remember_image_dir(filename)
        views = dict(garment.views)
        views[view] = filename
        updated = Garment(garment.id, garment.name, views)
        self.garments[garment.id] = updated
        self.session.select_garment(updated)
        self.session.switch_view(view)
        self.is_saved = False
        self._update_window_title()

    def add_graphic(self):
        """Place an image file on the active view"""
        if self.session.garment is None:
            return
        filename, _ = QFileDialog.getOpenFileName(self, "Add Graphic", self.last_image_dir, IMAGE_FILE_FILTER)
        if not filename:
            return
        self._remember_image_dir(filename)
        try:
            self.session.add_element(self.session.active_view, filename)
        except StudioError as e:
            self._report_error(e, "Cannot place a graphic on this view")

    def remove_selected(self):
        element = self.session.selected_element() if self.session.garment is not None else None
        if element is not None:
            self.session.remove_element(self.session.active_view, element.id)

    def open_layout(self):
        if not self._prompt_save_if_needed():
            return
        filename, _ = QFileDialog.getOpenFileName(self, "Open Layout", "", LAYOUT_FILE_FILTER)
        if filename:
            self.open_layout_file(filename)

    def open_layout_file(self, filepath):
        """Load a layout file, register its garment and make it active"""
        try:
            garment, layout = load_layout_from_file(filepath)
        except (OSError, ValueError) as e:
            self._report_error(e, "Failed to open layout")
            return
        self.session.set_layout(garment.id, layout)
        self.add_garment(garment)
        self.canvas.clear_image_cache()

        self.current_file_path = filepath
        self.is_saved = True
        self._update_window_title()
        self._add_to_recent_files(filepath)

    def save_layout(self):
        if self.current_file_path:
            self._write_layout(self.current_file_path)
        else:
            self.save_layout_as()

    def save_layout_as(self):
        if self.session.garment is None:
            return
        filename, _ = QFileDialog.getSaveFileName(
            self, "Save Layout", f"{self.session.garment.id}.json", LAYOUT_FILE_FILTER)
        if not filename:
            return
        if not filename.lower().endswith('.json'):
            filename += '.json'
        self._write_layout(filename)

    def _write_layout(self, filepath):
        if self.session.garment is None:
            return
        try:
            save_layout_to_file(self.session.garment, self.session.layout, filepath)
        except OSError as e:
            self._report_error(e, "Failed to save layout")
            return
        self.current_file_path = filepath
        self.is_saved = True
        self._update_window_title()
        self._add_to_recent_files(filepath)

    def generate_blueprint(self):
        """Flatten the active view into a PNG on a worker thread"""
        if self.session.garment is None:
            return
        if self._worker is not None and self._worker.isRunning():
            self.status_left.setText("A blueprint is already being generated")
            return
        try:
            base_source, elements = self.session.render_snapshot()
        except StudioError as e:
            self._report_error(e, "Cannot generate a blueprint for this view")
            return

        default_name = os.path.join(
            self.last_export_dir, f"{self.session.garment.id}_{self.session.active_view}.png")
        filename, _ = QFileDialog.getSaveFileName(self, "Generate Blueprint", default_name,
                                                  "PNG Files (*.png);;All Files (*)")
        if not filename:
            return
        if not filename.lower().endswith('.png'):
            filename += '.png'
        self._remember_export_dir(filename)

        self.generate_action.setEnabled(False)
        self.status_left.setText("Generating blueprint...")
        self._worker = CompositeWorker(self.session.renderer, base_source, elements, filename)
        self._worker.finished.connect(self._on_generate_finished)
        self._worker.start()

    def _on_generate_finished(self, success, message):
        self.generate_action.setEnabled(True)
        if success:
            self.status_left.setText(f"Blueprint written to {message}")
            QMessageBox.information(self, "Blueprint Generated", f"Blueprint saved to:\n{message}")
        else:
            self.status_left.setText("Blueprint generation failed")
            QMessageBox.critical(self, "Generate Failed", message)

    def closeEvent(self, event):
        """Prompt to save if needed, then wait for a running export"""
        if not self._prompt_save_if_needed():
            event.ignore()
            return
        if self._worker is not None:
            self._worker.wait()
        self.canvas.detach()
        self.adjustment_panel.detach()
        self._save_config()
        event.accept()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Garment Design Studio")
    parser.add_argument('layout', nargs='?', help='Layout JSON file to open')
    parser.add_argument('--front', help='Front view base image')
    parser.add_argument('--back', help='Back view base image')
    parser.add_argument('--side', help='Side view base image')
    parser.add_argument('--name', default='Garment', help='Display name for the garment built from --front/--back/--side')
    parser.add_argument('--id', dest='garment_id', default='garment', help='Id for the garment built from --front/--back/--side')
    parser.add_argument('--release', action='store_true', help='Show error popups instead of raising')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    return parser.parse_args(argv)


def main(argv=None):
    """Main entry point for the Garment Design Studio"""
    args = parse_args(argv)
    configure_logging(args.verbose)
    if args.release:
        set_debug_mode(False)

    app = QtWidgets.QApplication(sys.argv[:1])
    app.setStyle("Fusion")

    garments = []
    views = {view: getattr(args, view) for view in VIEW_NAMES if getattr(args, view)}
    if views:
        garments.append(Garment(args.garment_id, args.name, views))

    window = GarmentStudio(garments)
    if args.layout:
        window.open_layout_file(args.layout)
    window.show()
    return app.exec_()


if __name__ == "__main__":
    sys.exit(main())
