"""
Application Constants

This module contains all application-wide constants to avoid magic numbers
and improve maintainability.
"""

import math

# Counter ceilings
HIT_COUNT_LIMIT = 2**32 - 1  # bins at or above this are not incremented by aggregation
COUNTER_MAX = 2**64 - 1      # uint64 ceiling for spread sums

# Spread
MIN_SPREAD_RADIUS = 0
MAX_SPREAD_RADIUS = 255

# Mercator constants
HALF_PI = 0.5 * math.pi
TWO_PI = 2.0 * math.pi
QUARTER_PI = 0.25 * math.pi

# Heat ramp breakpoints (fraction of log-normalized density)
RAMP_BLUE_TO_CYAN = 0.25
RAMP_CYAN_TO_GREEN = 0.5
RAMP_GREEN_TO_YELLOW = 0.75
RAMP_YELLOW_TO_WHITE = 1.0

# Color channels
CHANNEL_MIN = 0
CHANNEL_MAX = 255
RGBA_CHANNELS = 4

# Rendering defaults
DEFAULT_BACKGROUND = (0, 0, 0, 255)
DEFAULT_CSV_CHUNK_SIZE = 100_000

# Demo parameters (reference sample program)
DEMO_WIDTH = 800
DEMO_HEIGHT = 800
DEMO_EXTENT = 5.0
DEMO_BATCHES = 100
DEMO_BATCH_SIZE = 1000
DEMO_SPREAD_RADIUS = 1
DEMO_OUTPUT = "output.png"

# Logging
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
