"""Geometry utilities for wall plans.

This module provides wall face offsets, junction cleanup, join data and
the polygon measurements used by room detection.
"""

from .joins import compute_joins, compute_wall_polygon
from .junction import rebuild_wall_faces
from .offset import compute_offset_lines, create_wall
from .polygon import polygon_area, polygon_centroid, polygon_perimeter

__all__ = [
    "compute_offset_lines",
    "create_wall",
    "rebuild_wall_faces",
    "compute_joins",
    "compute_wall_polygon",
    "polygon_area",
    "polygon_perimeter",
    "polygon_centroid",
]
