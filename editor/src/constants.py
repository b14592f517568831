"""
Garment Design Studio - Constants and Configuration

This module contains all constant values used throughout the application:
- Stage geometry (the logical box overlays are placed in)
- Default design element settings
- Min/max values and constraints
- Gesture tuning values
- Canvas handle sizes and zoom limits
"""

# ======================================================================
# VIEWS
# ======================================================================
# Named views a garment can provide a base image for, in UI order
VIEW_FRONT = 'front'
VIEW_BACK = 'back'
VIEW_SIDE = 'side'
VIEW_NAMES = (VIEW_FRONT, VIEW_BACK, VIEW_SIDE)
DEFAULT_VIEW = VIEW_FRONT

# ======================================================================
# STAGE GEOMETRY
# ======================================================================
# Reference stage used both on screen and for composite export.
# Positions are stored as percentages of this box.
STAGE_WIDTH = 600
STAGE_HEIGHT = 800

# Logical size of a design element at scale 1.0 (stage units)
BASE_ELEMENT_SIZE = 128

# Fit rules understood by utils.coordinate_transforms.fit_rect
FIT_CONTAIN = 'contain'
FIT_COVER = 'cover'

# ======================================================================
# DEFAULT ELEMENT VALUES
# ======================================================================
DEFAULT_POSITION_X = 50.0  # Percent of stage width
DEFAULT_POSITION_Y = 50.0  # Percent of stage height
DEFAULT_SCALE = 1.0
DEFAULT_ROTATION = 0.0
DEFAULT_OPACITY = 1.0

# ======================================================================
# VALUE CONSTRAINTS
# ======================================================================
MIN_POSITION = 0.0
MAX_POSITION = 100.0
MIN_SCALE = 0.1
MAX_SCALE = 5.0
MIN_OPACITY = 0.0
MAX_OPACITY = 1.0

# ======================================================================
# GESTURE TUNING
# ======================================================================
# Pixels of pointer travel per 1.0 of scale change while resizing
RESIZE_PIXELS_PER_SCALE = 200.0

# Added to atan2 angle so that "up" from the pivot is 0 degrees
ROTATION_HANDLE_ANGLE_OFFSET = 90.0

# ======================================================================
# CANVAS / HANDLES
# ======================================================================
HANDLE_RADIUS = 8             # Corner handle radius in pixels
HANDLE_HIT_TOLERANCE = 4      # Extra pixels accepted around a handle
ROTATION_HANDLE_OFFSET = 36   # Distance above the selection box
ROTATION_HANDLE_RADIUS = 12
DELETE_HANDLE_OFFSET = 36     # Distance below the selection box
DELETE_HANDLE_RADIUS = 12

# Stage zoom (apparel scale) limits and step for the zoom buttons
MIN_STAGE_ZOOM = 0.5
MAX_STAGE_ZOOM = 3.0
STAGE_ZOOM_STEP = 0.1

# ======================================================================
# ADJUSTMENT PANEL SLIDERS
# ======================================================================
SCALE_SLIDER_STEP = 0.05
ROTATION_SLIDER_MIN = 0
ROTATION_SLIDER_MAX = 360
OPACITY_SLIDER_STEP = 0.01

# ======================================================================
# COMPOSITE OUTPUT
# ======================================================================
COMPOSITE_BACKGROUND = (255, 255, 255, 255)
COMPOSITE_FORMAT = 'PNG'
COMPOSITE_MIME = 'image/png'

# ======================================================================
# CONFIG
# ======================================================================
CONFIG_DIR_NAME = '.garment_studio'
CONFIG_FILE_NAME = 'config.json'
MAX_RECENT_FILES = 10
