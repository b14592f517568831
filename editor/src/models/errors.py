"""Exceptions raised by the design studio engine.

Out-of-range numeric input is never an error: position, scale and opacity
are clamped silently by the model.
"""


class StudioError(Exception):
    """Base class for all engine errors"""


class NoActiveGarment(StudioError):
    """An engine operation needs a garment but none is selected"""

    def __init__(self):
        super().__init__("No garment is selected")


class MissingViewImage(StudioError):
    """Placement or render requested on a view without a base image"""

    def __init__(self, garment_id, view):
        self.garment_id = garment_id
        self.view = view
        super().__init__(f"Garment '{garment_id}' has no base image for the '{view}' view")


class ImageDecodeFailure(StudioError):
    """A base or overlay image could not be loaded or decoded"""

    def __init__(self, source, reason):
        self.source = source
        self.reason = reason
        super().__init__(f"Failed to load image {_describe_source(source)}: {reason}")


def _describe_source(source) -> str:
    """Shorten data URLs so error messages stay readable"""
    text = str(source)
    if text.startswith('data:'):
        return text.split(',', 1)[0] + ',...'
    if len(text) > 120:
        return text[:117] + '...'
    return text
