"""UI components for Garment Design Studio

This package contains the studio's Qt widgets:
- studio_canvas: Interactive stage (base image, overlays, selection handles)
- adjustment_panel: Scale / rotation / opacity sliders for the selection
- composite_worker: QThread that writes the exported blueprint
- transform_widgets: Handle classes and the gesture state machine
"""

from .studio_canvas import StudioCanvas
from .adjustment_panel import AdjustmentPanel, StepSlider
from .composite_worker import CompositeWorker

__all__ = [
    'StudioCanvas',
    'AdjustmentPanel',
    'StepSlider',
    'CompositeWorker',
]
