"""Garment catalog entry as seen by the studio.

The catalog itself lives outside the engine; a Garment only carries what the
studio needs: an id, a display name, and a base image reference per view.
"""
from typing import Dict, Optional

from constants import VIEW_NAMES


class Garment:
    """Catalog entry with per-view base image references.

    A view whose reference is missing or empty has no stage: nothing can be
    placed on it and it cannot be rendered.
    """

    def __init__(self, garment_id: str, name: str, views: Optional[Dict[str, str]] = None):
        self.id = garment_id
        self.name = name
        views = views or {}
        unknown = set(views) - set(VIEW_NAMES)
        if unknown:
            raise ValueError(f"Unknown view name(s): {', '.join(sorted(unknown))}")
        self.views = {view: views.get(view) or '' for view in VIEW_NAMES}

    def image_for(self, view: str) -> str:
        """Base image reference for a view ('' if absent)"""
        if view not in VIEW_NAMES:
            raise ValueError(f"Unknown view: {view}")
        return self.views[view]

    def has_view(self, view: str) -> bool:
        return bool(self.image_for(view))

    def available_views(self):
        return [view for view in VIEW_NAMES if self.views[view]]

    @classmethod
    def from_dict(cls, data: Dict) -> 'Garment':
        return cls(data['id'], data.get('name', data['id']), data.get('views'))

    def to_dict(self) -> Dict:
        return {'id': self.id, 'name': self.name, 'views': dict(self.views)}

    def __repr__(self):
        return f"Garment(id={self.id!r}, name={self.name!r}, views={self.available_views()})"
