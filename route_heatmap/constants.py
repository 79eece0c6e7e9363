"""Constants used throughout the route heatmap generator.

This module centralizes the tuning values of the synthesis pipeline. Most
of them shape how the synthetic network looks (spacing, hemisphere balance,
route length mix, heat falloff), so keeping them in one place makes visual
tuning a matter of editing numbers here.

Categories:
- Unit Conversions: Standard unit conversion factors
- Validation Ranges: Min/max bounds for coordinate validation
- Country Lookup: Property keys used to derive ISO-3 codes
- Airport Synthesis: Targets, spacing and attempt budgets
- Route Synthesis: Hub counts, bucket gates and per-route derivation
- Heatmap: Kernel, sampling and output configuration
- Country Statistics: Hub ranking and synthetic activity windows
"""

# === Unit Conversions ===
NAUTICAL_MILES_TO_KM = 1.852
KM_TO_NAUTICAL_MILES = 1.0 / NAUTICAL_MILES_TO_KM

# === Validation Ranges ===
LAT_MIN = -90.0
LAT_MAX = 90.0
LON_MIN = -180.0
LON_MAX = 180.0

# === Country Lookup ===
# Checked in order; Natural Earth uses "-99" for "not assigned"
ISO3_PROPERTY_KEYS = ("ISO_A3", "ADM0_A3", "BRK_A3", "SU_A3")
ISO3_MISSING_VALUE = "-99"

# === Airport Synthesis ===
SYNTHETIC_SEED = 0x51F2B7AD
LAT_LIMIT = 89.0  # Synthetic points never sit exactly on a pole
DEFAULT_TARGET_COUNT = 5200
MIN_TARGET_COUNT = 1
DEFAULT_SPACING_DEG = 0.5
MIN_SPACING_DEG = 0.15
SOUTH_TARGET_SHARE = 0.44  # Southern hemisphere is under-represented in real data
SOUTH_POLAR_BAND_LAT = -70.0
SOUTH_POLAR_TARGET_SHARE = 0.08
LAND_CACHE_CELL_DEG = 0.12
SPACING_MIN_COS_LAT = 0.18  # Floor for the longitude correction near the poles

# Real airports kept as seeds: max(floor, share * target)
REAL_KEEP_SHARE = 0.04
REAL_KEEP_FLOOR = 120

# Hemisphere acceptance curve: clamp(base + pressure * gain, min, 1)
HEMISPHERE_BASE_PROBABILITY = 0.52
HEMISPHERE_PRESSURE_GAIN = 0.9
HEMISPHERE_MIN_PROBABILITY = 0.12

# Golden-angle spiral stage
SPREAD_TARGET_SHARE = 0.96
SPIRAL_ITERS_PER_POINT = 14
SPIRAL_MIN_ITERS = 70000
SPIRAL_STEP = 7919  # Prime, so it is co-prime with practical iteration counts
SPIRAL_LAT_JITTER = 0.62  # Fraction of min spacing
SPIRAL_LON_JITTER = 1.12

# Attempt budgets: max(floor, per_point * target)
POLAR_ATTEMPTS_PER_POINT = 24
POLAR_MIN_ATTEMPTS = 7000
GAP_FILL_ATTEMPTS_PER_POINT = 40
GAP_FILL_MIN_ATTEMPTS = 50000
FINAL_FILL_ATTEMPTS_PER_POINT = 12
FINAL_FILL_MIN_ATTEMPTS = 22000
RELAXED_FILL_ATTEMPTS_PER_POINT = 1.2
RELAXED_FILL_MIN_ATTEMPTS = 5000

LARGE_TARGET_WARNING = 50000  # Warn when synthesis will be slow

# === Route Synthesis ===
DEFAULT_ROUTE_COUNT = 180
ROUTE_HUB_MIN = 6
ROUTE_HUB_MAX = 12
ROUTE_HUB_POINTS_PER_HUB = 10
ROUTE_ATTEMPTS_PER_ROUTE = 140
ROUTE_MIN_ATTEMPTS = 800
ROUTE_FALLBACK_ATTEMPTS_PER_ROUTE = 80
ROUTE_FALLBACK_MIN_ATTEMPTS = 300

# Bucket selection thresholds on a uniform draw
HUB_HUB_SHARE = 0.34
HUB_SPOKE_SHARE = 0.72  # Cumulative; the remainder is regional

# Each gate is (reject_above_dot, base, gain, min, max); acceptance is
# clamp(base + (1 - dot) * gain, min, max)
HUB_HUB_GATE = (0.65, 0.35, 0.75, 0.35, 0.98)
HUB_SPOKE_GATE = (0.92, 0.25, 0.55, 0.25, 0.92)
FALLBACK_GATE = (0.985, 0.22, 0.5, 0.22, 0.9)

# Regional routes keep min_dot <= dot <= max_dot and accept
# clamp(base + (dot - min_dot) * gain, min, max)
REGIONAL_MIN_DOT = 0.72
REGIONAL_MAX_DOT = 0.975
REGIONAL_GATE = (0.35, 0.35, 0.35, 0.85)

# Per-route derivation
ROUTE_SURFACE_LIFT = 1.01  # Endpoints sit just above the globe surface
ARC_BOOST_CHORD_SCALE = 1.35
ARC_BOOST_MIN = 0.25
ARC_BOOST_MAX = 1.25
ARC_CONTROL_BASE = 1.075
ARC_CONTROL_GAIN = 0.14
ROUTE_SPEED_BASE = 0.018
ROUTE_SPEED_GAIN = 0.03
ROUTE_SIZE_BASE = 2.6
ROUTE_SIZE_GAIN = 0.95
TRAFFIC_MIN = 0.62
TRAFFIC_MAX = 1.22
TRAFFIC_GAIN = 0.55
TRAFFIC_SEED_JITTER = 0.16
TRAFFIC_TIERS = 4

# === Heatmap ===
HEATMAP_WIDTH = 512
HEATMAP_HEIGHT = 256
HEATMAP_KERNEL_RADIUS = 4
HEATMAP_KERNEL_SIGMA = 2.15
HEATMAP_SAMPLES_PER_ROUTE = 84
HEATMAP_WEIGHT_BASE = 0.75
HEATMAP_WEIGHT_GAIN = 0.55
HEATMAP_LIFT_POWER = 0.55  # < 1 lifts mid-range values, keeps the peak at 1
HEATMAP_MIN_PEAK = 1e-6
PACKED_ROUTE_STRIDE = 11  # p0, p1, p2 (9) + traffic + traffic_count

# === Country Statistics ===
HUB_SCORE_DEGREE_WEIGHT = 0.62
HUB_SCORE_TRAFFIC_WEIGHT = 0.38
HUB_RANK_MIN = 40
HUB_RANK_MAX = 140
HUB_RANK_PER_SQRT_ROUTE = 8
STATS_LOOKBACK_SECONDS = 600  # "ten minutes ago" comparison window
