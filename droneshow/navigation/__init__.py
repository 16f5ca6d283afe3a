"""Geographic projection helpers."""

from .geo import (
    EARTH_RADIUS_M,
    METERS_PER_DEGREE,
    geo_point_to_offset,
    haversine_distance,
    offset_to_geo_point,
    rotate_offset,
    segment_distance_3d,
)

__all__ = [
    "EARTH_RADIUS_M",
    "METERS_PER_DEGREE",
    "geo_point_to_offset",
    "haversine_distance",
    "offset_to_geo_point",
    "rotate_offset",
    "segment_distance_3d",
]
