import math

# --- Physics Constants ---
GRAVITY = 150.0  # units per second squared, downward-positive
DAMPING = 0.99  # Velocity kept per update (1.0 = no air resistance)
MAX_STEP = 0.05  # Longest step integrated at once, in seconds

# --- Emission Defaults ---
BURST_COUNT = 150
EMISSION_ANGLE_RANGE = (-120.0, -60.0)  # Degrees, -90 is straight up
SPEED_RANGE = (150.0, 400.0)  # units per second
LIFESPAN_RANGE = (3.0, 6.0)  # seconds
ANGULAR_VELOCITY_RANGE = (-math.pi, math.pi)  # radians per second

# Palette (BGR format for OpenCV)
PALETTE = {
    "red": (0, 0, 255),
    "blue": (255, 0, 0),
    "green": (0, 200, 0),
    "yellow": (0, 255, 255),
    "pink": (203, 192, 255),
    "purple": (128, 0, 128),
    "orange": (0, 165, 255),
    "cyan": (255, 255, 0),
}

# --- Render Settings ---
DEFAULT_FPS = 30
DEFAULT_RESOLUTION = (400, 800)
DEFAULT_DURATION = 8.0  # seconds
CONFETTI_SIZE = (10, 10)
BACKGROUND_COLOR = (15, 10, 10)
MIN_BURST_GAP = 1.0  # seconds between beat-driven bursts
