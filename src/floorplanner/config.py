"""
Configuration for the floor planner graph engine.

All lengths are plan units (centimetres).
"""

# Walls
DEFAULT_WALL_THICKNESS = 20
DEFAULT_FLOOR_TYPE = "default"

# Geometry
GRID_SIZE = 10  # Snap grid for merge intersections and opening nodes
INTERSECTION_EPSILON = 1e-4  # Parallel/coincident segment threshold

# Merge
MERGE_SNAP_RADIUS = 5  # Existing node within this distance suppresses a split
MERGE_POSITION_TOLERANCE = 5  # Per-axis tolerance for duplicate node unification

# Picking
NEARBY_NODE_THRESHOLD = 20
CLOSEST_WALL_THRESHOLD = 20

# Doors and windows
OPENING_MIN_MARGIN = 10  # Minimum flank length on each side of an opening
OPENING_LENGTH_SLACK = 20  # Wall must be at least width + slack long

# History
HISTORY_CAPACITY = 50

# Templates
DEFAULT_TEMPLATE_SIZE = 300

# Units
CM2_PER_M2 = 10000.0
CM_PER_M = 100.0
