"""
Garment Design Studio - Studio Session Service

Session-scoped context for the design engine:
- active garment and its ViewLayout (one layout per garment id)
- active view and the selected design element
- the element operations exposed to the rest of the application
- composite export of a view

The selection is view-scoped: switching view clears it, and a selected id is
only ever looked up in the active view's collection.
"""

import logging

from constants import VIEW_NAMES, DEFAULT_VIEW
from models.design_element import DesignElement
from models.errors import MissingViewImage, NoActiveGarment
from models.view_layout import ViewLayout
from services.composite_renderer import CompositeRenderer, encode_png
from services.image_loader import image_to_data_url

logger = logging.getLogger(__name__)


class StudioSession:
    """Owns the editable state of one studio window.

    Args:
        renderer: CompositeRenderer used for exports (default: a new one)
    """

    def __init__(self, renderer=None):
        self.renderer = renderer or CompositeRenderer()
        self._layouts = {}  # garment id -> ViewLayout
        self._garment = None
        self._active_view = DEFAULT_VIEW
        self._selected_id = None
        self._listeners = []

    # ------------------------------------------------------------------
    # Change notification
    # ------------------------------------------------------------------

    def add_listener(self, callback):
        """Register callback(reason) called after every state change"""
        self._listeners.append(callback)

    def remove_listener(self, callback):
        self._listeners.remove(callback)

    def _notify(self, reason):
        for callback in list(self._listeners):
            callback(reason)

    # ------------------------------------------------------------------
    # Garment / view / selection
    # ------------------------------------------------------------------

    @property
    def garment(self):
        return self._garment

    @property
    def active_view(self):
        return self._active_view

    @property
    def selected_id(self):
        return self._selected_id

    @property
    def layout(self) -> ViewLayout:
        """ViewLayout of the active garment

        Raises:
            NoActiveGarment: no garment selected
        """
        if self._garment is None:
            raise NoActiveGarment()
        return self._layouts[self._garment.id]

    def select_garment(self, garment):
        """Make a garment active.

        Each garment keeps its own layout; selecting one never touches the
        layout of another. The view resets to front and the selection clears.
        """
        self._garment = garment
        if garment.id not in self._layouts:
            self._layouts[garment.id] = ViewLayout()
        self._active_view = DEFAULT_VIEW
        self._selected_id = None
        logger.info("Active garment: %s", garment.id)
        self._notify('garment')

    def discard_layout(self, garment_id):
        """Drop a garment's layout (e.g. the garment left the catalog)"""
        self._layouts.pop(garment_id, None)
        if self._garment is not None and self._garment.id == garment_id:
            self._garment = None
            self._selected_id = None
            self._notify('garment')

    def set_layout(self, garment_id, layout):
        """Replace a garment's layout wholesale (layout loaded from disk)"""
        self._layouts[garment_id] = layout
        if self._garment is not None and self._garment.id == garment_id:
            self._selected_id = None
            self._notify('layout')

    def switch_view(self, view):
        """Activate another view. Always clears the selection."""
        if view not in VIEW_NAMES:
            raise ValueError(f"Unknown view: {view}")
        self._active_view = view
        self._selected_id = None
        self._notify('view')

    def select(self, element_id):
        """Select an element of the active view, or None for no selection.

        Raises:
            KeyError: element_id is not in the active view
        """
        if element_id is not None and self.elements().get(element_id) is None:
            raise KeyError(element_id)
        if element_id != self._selected_id:
            self._selected_id = element_id
            self._notify('selection')

    def selected_element(self):
        """The selected DesignElement in the active view, or None"""
        if self._selected_id is None or self._garment is None:
            return None
        return self.elements().get(self._selected_id)

    def elements(self, view=None):
        """DesignElements of a view (active view by default)"""
        return self.layout.elements(view or self._active_view)

    def base_image(self, view=None):
        """Base image reference of a view of the active garment ('' if absent)"""
        if self._garment is None:
            raise NoActiveGarment()
        return self._garment.image_for(view or self._active_view)

    def _require_view_image(self, view):
        if self._garment is None:
            raise NoActiveGarment()
        if not self._garment.has_view(view):
            raise MissingViewImage(self._garment.id, view)
        return self._garment.image_for(view)

    # ------------------------------------------------------------------
    # Element operations
    # ------------------------------------------------------------------

    def add_element(self, view, image_source):
        """Place a graphic at the stage center (scale 1, rotation 0, opacity 1).

        The new element becomes the selection when it lands on the active view.

        Raises:
            MissingViewImage: the view has no base image; nothing is added
        """
        self._require_view_image(view)
        element = self.layout.add(view, DesignElement(image_source))
        if view == self._active_view:
            self._selected_id = element.id
        self._notify('elements')
        return element

    def update_element(self, view, element_id, **fields):
        """Apply a partial update (gestures and numeric inputs).

        Out-of-range x/y/scale/opacity values are clamped, not rejected.

        Raises:
            KeyError: no such element in the view
            ValueError: a field is not editable or the rotation is not finite
        """
        element = self.layout.get(view, element_id)
        if element is None:
            raise KeyError(element_id)
        element.update(**fields)
        self._notify('elements')
        return element

    def remove_element(self, view, element_id):
        """Remove an element outright. Clears the selection if it was selected.

        Raises:
            KeyError: no such element in the view
        """
        element = self.layout.remove(view, element_id)
        if view == self._active_view and element_id == self._selected_id:
            self._selected_id = None
        self._notify('elements')
        return element

    # ------------------------------------------------------------------
    # Composite export
    # ------------------------------------------------------------------

    def render_snapshot(self, view=None):
        """Immutable render inputs for a view: (base image source, element copies)

        Raises:
            MissingViewImage: the view has no base image
        """
        view = view or self._active_view
        base_source = self._require_view_image(view)
        return base_source, self.elements(view).snapshot()

    def get_composite_image(self, view=None):
        """Flatten a view into one PIL image.

        Raises:
            MissingViewImage: the view has no base image
            ImageDecodeFailure: an image failed to load; nothing is returned
        """
        base_source, elements = self.render_snapshot(view)
        return self.renderer.render(base_source, elements)

    def get_composite_image_async(self, view=None):
        """Awaitable composite of a view, snapshotted at call time"""
        base_source, elements = self.render_snapshot(view)
        return self.renderer.render_async(base_source, elements)

    def get_composite_png(self, view=None):
        return encode_png(self.get_composite_image(view))

    def get_composite_data_url(self, view=None):
        return image_to_data_url(self.get_composite_image(view))
