"""Menu bar creation for GarmentStudio"""

from PyQt5.QtWidgets import QActionGroup

from constants import VIEW_NAMES


class MenuMixin:
    """Menu bar and menu action wiring"""

    def _create_menu_bar(self):
        """Create the File, Design and View menus"""
        menubar = self.menuBar()

        # File Menu
        file_menu = menubar.addMenu("&File")

        new_action = file_menu.addAction("&New Garment...")
        new_action.setShortcut("Ctrl+N")
        new_action.triggered.connect(self.new_garment)

        open_action = file_menu.addAction("&Open Layout...")
        open_action.setShortcut("Ctrl+O")
        open_action.triggered.connect(self.open_layout)

        self.recent_menu = file_menu.addMenu("Recent Layouts")
        self._update_recent_files_menu()

        file_menu.addSeparator()

        save_action = file_menu.addAction("&Save Layout")
        save_action.setShortcut("Ctrl+S")
        save_action.triggered.connect(self.save_layout)

        save_as_action = file_menu.addAction("Save Layout &As...")
        save_as_action.setShortcut("Ctrl+Shift+S")
        save_as_action.triggered.connect(self.save_layout_as)

        file_menu.addSeparator()

        self.generate_action = file_menu.addAction("&Generate Blueprint...")
        self.generate_action.setShortcut("Ctrl+E")
        self.generate_action.triggered.connect(self.generate_blueprint)

        file_menu.addSeparator()

        exit_action = file_menu.addAction("E&xit")
        exit_action.setShortcut("Alt+F4")
        exit_action.triggered.connect(self.close)

        # Design Menu
        design_menu = menubar.addMenu("&Design")

        add_action = design_menu.addAction("&Add Graphic...")
        add_action.setShortcut("Ctrl+G")
        add_action.triggered.connect(self.add_graphic)

        remove_action = design_menu.addAction("&Remove Selected")
        remove_action.triggered.connect(self.remove_selected)

        design_menu.addSeparator()

        view_image_action = design_menu.addAction("Set &View Image...")
        view_image_action.triggered.connect(self.set_view_image)

        # View Menu
        view_menu = menubar.addMenu("&View")

        self.view_action_group = QActionGroup(self)
        self.view_actions = {}
        for index, view in enumerate(VIEW_NAMES):
            action = view_menu.addAction(view.capitalize())
            action.setCheckable(True)
            action.setShortcut(f"Ctrl+{index + 1}")
            action.triggered.connect(lambda checked, v=view: self.switch_view(v))
            self.view_action_group.addAction(action)
            self.view_actions[view] = action

        view_menu.addSeparator()

        zoom_in_action = view_menu.addAction("Zoom &In")
        zoom_in_action.setShortcut("Ctrl+=")
        zoom_in_action.triggered.connect(self.canvas.zoom_in)

        zoom_out_action = view_menu.addAction("Zoom &Out")
        zoom_out_action.setShortcut("Ctrl+-")
        zoom_out_action.triggered.connect(self.canvas.zoom_out)

        reset_zoom_action = view_menu.addAction("&Reset Zoom")
        reset_zoom_action.setShortcut("Ctrl+0")
        reset_zoom_action.triggered.connect(self.canvas.reset_zoom)
