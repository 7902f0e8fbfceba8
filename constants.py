# constants.py

"""
Application Constants

This module defines static configuration values for the application's framework.
These are not expected to change between simulation runs.

Data Contract:
- All values are immutable constants.
- Units are specified in comments where applicable.
"""

# Screen dimensions
WIDTH = 1600  # Pixels
HEIGHT = 1200  # Pixels

# The sidebar is carved out of the right side of the window.
SIDEBAR_WIDTH = 150  # Pixels

# Framerate
FPS = 60  # Frames per second

# Colors (RGB)
WHITE = (255, 255, 255)
BACKGROUND = (7, 18, 50)
SIDEBAR_BACKGROUND = (50, 50, 50)
SLIDER_TRACK = (100, 100, 100)
SLIDER_THUMB = (200, 200, 200)

# Window Title
TITLE = "Maxwell's Demon"

# Physics defaults
GRAVITY = 9.81  # Downward acceleration, pixels / s^2 (screen y grows downward)
SUBSTEPS = 20  # Integrator sub-steps per rendered frame
MAX_FRAME_DT = 0.05  # Seconds. Longer frames (stalls, JIT compilation) are clamped to this.
PARTICLE_RADIUS = 5.0  # Pixels
MIN_SPEED = 50.0  # Pixels / s
MAX_SPEED = 250.0  # Pixels / s

# Demon gate thresholds (pixels / s)
HOT_SPEED = 140.0  # Leftward movers need at least this speed to pass.
COLD_SPEED = 10.0  # Rightward movers need at most this speed to pass.

# Coulomb law defaults
COULOMB_K = 8.9875517923e9
COULOMB_SOFTENING = 0.001
COULOMB_CUTOFF = 2000.0
PARTICLE_CHARGE = 0.001234  # Identical for every particle.

# Impulse collision defaults
RESTITUTION = 1.0
CORRECTION_FACTOR = 0.8
PENETRATION_SLOP = 0.01

# Color Mapping for Visualization
# Kinetic energy is normalized so an average particle maps to this value
# on a 0-100 scale.
COLOR_AVERAGE_LEVEL = 50.0

# Each keyframe is a tuple: (normalized_level, (R, G, B) color).
# Below the first level and above the last the color is held constant.
COLOR_GRADIENT_KEYFRAMES = [
    (20.0, (0, 0, 255)),      # Blue
    (40.0, (255, 255, 0)),    # Yellow
    (60.0, (255, 165, 0)),    # Orange
    (80.0, (255, 0, 0)),      # Red
]

# Slider widget (sidebar coordinates)
SLIDER_OFFSET_X = 10  # Pixels from the sidebar's left edge
SLIDER_Y = 80  # Pixels
SLIDER_HEIGHT = 20  # Pixels
SLIDER_THUMB_WIDTH = 10  # Pixels
SLIDER_DEFAULT = 50.0  # Range 0-100

# Logging cadence
ENERGY_LOG_INTERVAL = 100  # Ticks between energy debug lines
