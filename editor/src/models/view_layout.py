"""
Garment Design Studio - View Layout Data Model

A ViewLayout holds one ordered collection of design elements per named view
(front, back, side). Collection order is paint order: later elements are
drawn on top. Views never share elements.

This is part of the MODEL layer - pure data, no UI logic.
"""

import logging
from typing import Dict, List, Optional

from constants import VIEW_NAMES
from models.design_element import DesignElement

logger = logging.getLogger(__name__)


class DesignElements:
    """Ordered collection of DesignElement objects for a single view

    Provides:
    - List-like access (indexing, iteration, len)
    - Id-based lookups
    - Unique ids within the collection
    """

    def __init__(self, elements: Optional[List[DesignElement]] = None):
        self._elements: List[DesignElement] = []
        for element in elements or []:
            self.append(element)

    def __len__(self) -> int:
        return len(self._elements)

    def __getitem__(self, index: int) -> DesignElement:
        return self._elements[index]

    def __iter__(self):
        return iter(self._elements)

    def __contains__(self, element_id) -> bool:
        return self.index_of(element_id) is not None

    def __repr__(self) -> str:
        return f"DesignElements({len(self._elements)} elements)"

    def append(self, element: DesignElement):
        """Add element on top of the paint order

        Raises:
            TypeError: element is not a DesignElement
            ValueError: an element with the same id is already present
        """
        if not isinstance(element, DesignElement):
            raise TypeError(f"Expected DesignElement, got {type(element)}")
        if element.id in self:
            raise ValueError(f"Duplicate design element id: {element.id}")
        self._elements.append(element)

    def index_of(self, element_id: str) -> Optional[int]:
        """Paint-order index of an element, or None"""
        for i, element in enumerate(self._elements):
            if element.id == element_id:
                return i
        return None

    def get(self, element_id: str) -> Optional[DesignElement]:
        index = self.index_of(element_id)
        return self._elements[index] if index is not None else None

    def remove(self, element_id: str) -> DesignElement:
        """Remove and return an element

        Raises:
            KeyError: no element with that id
        """
        index = self.index_of(element_id)
        if index is None:
            raise KeyError(element_id)
        return self._elements.pop(index)

    def snapshot(self) -> List[DesignElement]:
        """Copies of all elements in paint order, detached from this collection"""
        return [element.copy() for element in self._elements]

    def to_list(self) -> List[Dict]:
        return [element.to_dict() for element in self._elements]


class ViewLayout:
    """Per-view design element collections for one garment"""

    def __init__(self):
        self._views: Dict[str, DesignElements] = {view: DesignElements() for view in VIEW_NAMES}

    def elements(self, view: str) -> DesignElements:
        """Collection for a view

        Raises:
            ValueError: unknown view name
        """
        try:
            return self._views[view]
        except KeyError:
            raise ValueError(f"Unknown view: {view}") from None

    def add(self, view: str, element: DesignElement) -> DesignElement:
        self.elements(view).append(element)
        logger.debug("Added element %s to %s view", element.id, view)
        return element

    def get(self, view: str, element_id: str) -> Optional[DesignElement]:
        return self.elements(view).get(element_id)

    def remove(self, view: str, element_id: str) -> DesignElement:
        element = self.elements(view).remove(element_id)
        logger.debug("Removed element %s from %s view", element_id, view)
        return element

    def element_count(self) -> int:
        return sum(len(collection) for collection in self._views.values())

    def to_dict(self) -> Dict[str, List[Dict]]:
        return {view: collection.to_list() for view, collection in self._views.items()}

    @classmethod
    def from_dict(cls, data: Dict[str, List[Dict]]) -> 'ViewLayout':
        """Rebuild a layout from to_dict() output. Missing views stay empty."""
        layout = cls()
        for view, items in data.items():
            collection = layout.elements(view)
            for item in items:
                collection.append(DesignElement.from_dict(item))
        return layout

    def __repr__(self):
        counts = ', '.join(f"{view}={len(self._views[view])}" for view in VIEW_NAMES)
        return f"ViewLayout({counts})"
