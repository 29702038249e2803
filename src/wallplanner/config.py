"""Global parameters for the wall geometry engine.

Every tolerance used by the offset engine, the junction resolver and the
graph builder lives here so that all of them agree on what "the same point"
means. Per-run overrides for room detection go through
:class:`wallplanner.core.model.DetectionOptions`.
"""

# Global parameters for algorithm sensitivity
GEOMETRY_EPSILON = 1e-6  # Tolerance for parametric checks and degenerate lengths
ZERO_LENGTH = 1e-4  # Vectors shorter than this normalize to the zero vector
NODE_MERGE_EPSILON = 1e-3  # Endpoint tolerance for junction nodes (mm)

# Junction trimming bounds
JUNCTION_PARALLEL_EPSILON = 1e-4
JUNCTION_MAX_TRIM_BY_THICKNESS_FACTOR = 6.0
JUNCTION_MAX_TRIM_BY_LENGTH_FACTOR = 1.5
JUNCTION_MAX_CAP_STRETCH_FACTOR = 6.0

# Joins sharper than this (degrees) are butted instead of mitered
MITER_MIN_ANGLE = 30.0

# Room detection defaults
DEFAULT_SNAP_TOLERANCE = 5.0  # mm
DEFAULT_MIN_ROOM_AREA = 1.0  # m^2
DEFAULT_MAX_ROOM_AREA = 10000.0  # m^2
MAX_TRACE_STEPS = 1000  # Lower bound of the face trace safety counter
DEGENERATE_NORMAL = 1e-3  # Averaged offset vectors shorter than this are ignored

# Wall defaults
DEFAULT_WALL_THICKNESS = 150.0  # mm
DEFAULT_WALL_MATERIAL = "generic"

# Unit conversion
MM2_PER_M2 = 1_000_000.0
MM_PER_M = 1000.0

ROOM_NAME_PREFIX = "Room"
ROOM_COLORS = (
    "rgba(14, 165, 233, 0.15)",  # blue
    "rgba(16, 185, 129, 0.15)",  # green
    "rgba(245, 158, 11, 0.15)",  # amber
    "rgba(239, 68, 68, 0.15)",  # red
    "rgba(139, 92, 246, 0.15)",  # purple
    "rgba(236, 72, 153, 0.15)",  # pink
    "rgba(6, 182, 212, 0.15)",  # cyan
    "rgba(132, 204, 22, 0.15)",  # lime
)
