"""Process-wide numeric constants shared by the engine, analyzer and geometry."""

# Values with an absolute value below EPSILON are treated as exactly zero.
EPSILON = 1e-6
# Threshold for squared lengths (EPSILON ** 2).
SQ_EPSILON = 1e-12

# Number of unknowns (x, y, z) handled by the geometry and the parser.
NUM_VARS = 3
# Largest number of equation rows the session lets a user create.
MAX_ROWS = 4

# Length of the finite segment drawn for a plane/plane intersection line.
LINE_SEGMENT_LENGTH = 20.0

# Where the trivial "0 = 0" plane is parked so it never shows in the scene.
OFF_SCENE_POSITION = (0.0, -1000.0, 0.0)

# Directions shorter than this (squared) fall back to the +X axis.
MIN_DIRECTION_LENGTH_SQ = 1e-4
