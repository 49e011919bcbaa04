"""
Engineering Constants for Mass-Timber Member Sizing
"""

# Gravity
GRAVITY = 9.81  # m/s²

# Default timber grade (MASSLAM ML38)
DEFAULT_GRADE = "ML38"

# Fire design (AS 1720.4 style charring model)
DEFAULT_CHARRING_RATE = 0.7    # mm/min, MASSLAM glulam
ZERO_STRENGTH_LAYER = 7.0      # mm, added to the char depth for any rated member

# Design load factor applied to aggregated service loads
DESIGN_LOAD_FACTOR = 1.5

# Deflection limits (span / limit) keyed by area load class (kPa)
DEFLECTION_LIMIT_LIGHT = 300       # load < 3 kPa
DEFLECTION_LIMIT_COMMERCIAL = 360  # 3 kPa <= load < 5 kPa
DEFLECTION_LIMIT_HEAVY = 400       # load >= 5 kPa
DEFLECTION_LOAD_THRESHOLD_LOW = 3.0   # kPa
DEFLECTION_LOAD_THRESHOLD_HIGH = 5.0  # kPa

# Shear stress factor for rectangular sections (peak / average)
RECTANGULAR_SHEAR_FACTOR = 1.5

# Minimum net dimensions (mm)
MIN_JOIST_DEPTH = 140
MIN_BEAM_DEPTH = 240
MIN_NET_WIDTH = 45              # smallest residual width retained after charring

# Column proportioning
COLUMN_SLENDERNESS_DIVISOR = 20  # net depth >= height / 20

# Self-weight convergence
SELF_WEIGHT_SINGLE = "single"
SELF_WEIGHT_ITERATE = "iterate"
MAX_SELF_WEIGHT_ITERATIONS = 10
CONVERGENCE_TOLERANCE = 0.5  # mm

# Catalog snapping tolerance (mm); values within it count as a match
SNAP_TOLERANCE = 1e-6

# Geometry
BAY_SUM_TOLERANCE = 0.01  # m

# Building defaults
DEFAULT_JOIST_SPACING = 800  # mm
DEFAULT_FLOOR_HEIGHT = 3.0   # m
