"""Scoring and window-analysis thresholds, weights, and bands.

Every tunable number used by the scorer, the window aggregator and the window
analyzer lives here so it can be tested and adjusted in one place.
"""

from types import MappingProxyType

# --- Combined score ---

WEIGHTS = MappingProxyType({
    "swell_angle": 0.20,
    "window": 0.15,
    "energy": 0.20,
    "texture": 0.15,
    "wind": 0.15,
    "steepness": 0.10,
    "consistency": 0.05,
    "tide": 0.00,  # reserved, inert until tide tuning is confirmed
})

# Sub-scores that default to neutral (1.0) instead of 0 when absent
NEUTRAL_DEFAULTS = frozenset({"consistency", "tide"})

LABEL_EPIC = 80
LABEL_GOOD = 60
LABEL_OK = 40

# --- Swell angle / window ---

SWELL_ANGLE_PAD_DEG = 15.0
SHADOW_BLOCK_SCORE = 0.1

# --- Energy (wave power, kW/m) ---

WAVE_POWER_COEFF = 0.49
POWER_LOW = 3.0
POWER_MEDIUM = 7.0
POWER_HEAVY = 12.0
ENERGY_AT_LOW = 0.2
ENERGY_AT_MEDIUM = 0.5
ENERGY_AT_HEAVY = 0.8
ENERGY_HEAVY = 0.95
HEAVY_SHALLOW_PENALTY = 0.1

# Legacy band policy: (height band m, period band s) per bottom type
ENERGY_BANDS = MappingProxyType({
    "point": ((0.4, 2.2), (11.0, 16.0)),
    "reef": ((0.6, 3.0), (11.0, 17.0)),
    "beachbreak": ((0.4, 2.5), (9.0, 14.0)),
})
BAND_PAD_RATIO = 0.75

# --- Texture ---

MIN_SWELL_FOR_CHOP = 1e-3

# --- Wind (km/h, degrees from pure offshore) ---

WIND_DIR_BANDS = ((30.0, 1.0), (60.0, 0.6), (90.0, 0.3))
WIND_DIR_FLOOR = 0.1
WIND_TOO_LIGHT = 4.0
WIND_TOO_STRONG = 28.0
WIND_LIGHT_SCORE = 0.7
WIND_STRONG_SCORE = 0.3

# --- Steepness H / (1.56 T^2) ---

DEEP_WATER_WAVELENGTH_COEFF = 1.56
STEEPNESS_RANGES = MappingProxyType({
    "point": {"ideal": (0.015, 0.03), "hard": (0.01, 0.05)},
    "reef": {"ideal": (0.018, 0.032), "hard": (0.012, 0.055)},
    "beachbreak": {"ideal": (0.02, 0.035), "hard": (0.015, 0.05)},
})

# --- Tide (inert sub-score) ---

TIDE_NEUTRAL = 1.0
TIDE_MISMATCH_FACTOR = 0.7
TIDE_LOW_FRACTION = 1 / 3
TIDE_HIGH_FRACTION = 2 / 3

# --- Consistency ---

CONSISTENCY_WINDOW = 3
CONSISTENCY_TOLERANCE = 30.0

# --- Reasons ---

REASON_ANGLE_IDEAL = 0.9
REASON_ANGLE_BAD = 0.3
REASON_WINDOW_BAD = 0.15
REASON_TEXTURE_CHOPPY = 0.5
REASON_TEXTURE_CLEAN = 0.9
REASON_WIND_GOOD = 0.8
REASON_WIND_BAD = 0.3
REASON_STEEP_GOOD = 0.85
REASON_STEEP_BAD = 0.3

# Hours logged as scoring samples
SAMPLE_LOG_HOURS = frozenset({6, 9, 12, 15})

# --- Window aggregation ---

GOOD_WINDOW_THRESHOLD = 60
HIGHLIGHT_LIMIT = 5

# --- Window analysis ---

DAYLIGHT_FIRST_HOUR = 6
DAYLIGHT_LAST_HOUR = 16
TIME_BUCKETS = (
    ("morning", 5, 9),
    ("midday", 9, 14),
    ("afternoon", 14, 18),
)
MAX_GAP_HOURS = 2.0

LONGBOARD_MIN_HEIGHT = 0.5
LONGBOARD_MAX_HEIGHT = 1.5
SHORTBOARD_MIN_HEIGHT = 1.0
SHORTBOARD_MIN_POWER = 3.0
OFFSHORE_MAX_WIND = 25.0
LIGHT_MAX_WIND = 10.0

QUALITY_RATINGS = (
    (90, "epic"),
    (80, "excellent"),
    (70, "good"),
    (60, "ok"),
)
QUALITY_FLOOR = "regular"

BEGINNER_MAX_HEIGHT = 1.2
BEGINNER_MAX_POWER = 4.0
INTERMEDIATE_HEIGHT = (0.8, 2.0)
ADVANCED_MIN_HEIGHT = 1.5
ADVANCED_MIN_POWER = 6.0

WINDOW_LIMIT = 5
NEXT_GOOD_WINDOWS = 3
REGION_LIMIT = 3
