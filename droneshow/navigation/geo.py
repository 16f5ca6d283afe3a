"""Coordinate transform utilities for formation placement.

Offsets are in a local tangent plane centered on a formation's center
point: x = east, y = north, z = up (meters). The conversion is a
small-angle equirectangular approximation, only accurate for offsets of
a few hundred meters.
"""

import math

from ..core.drone import GeoPoint

# Meters per degree of latitude (and of longitude at the equator)
METERS_PER_DEGREE = 111320.0

# Mean Earth radius used for great-circle distances
EARTH_RADIUS_M = 6371000.0


def offset_to_geo_point(center: GeoPoint, offset) -> GeoPoint:
    """Convert a tangent-plane offset to an absolute position.

    Args:
        center: Origin of the tangent plane
        offset: Object with ``x`` (east), ``y`` (north), ``z`` (up) in meters

    Returns:
        GeoPoint of the offset position
    """
    lat_offset = offset.y / METERS_PER_DEGREE
    lon_offset = offset.x / (
        METERS_PER_DEGREE * math.cos(math.radians(center.latitude))
    )
    return GeoPoint(
        latitude=center.latitude + lat_offset,
        longitude=center.longitude + lon_offset,
        altitude=center.altitude + offset.z,
    )


def geo_point_to_offset(center: GeoPoint, point: GeoPoint) -> tuple:
    """Inverse of offset_to_geo_point.

    Returns:
        (x, y, z) offset of ``point`` from ``center`` in meters
    """
    y = (point.latitude - center.latitude) * METERS_PER_DEGREE
    x = (point.longitude - center.longitude) * (
        METERS_PER_DEGREE * math.cos(math.radians(center.latitude))
    )
    z = point.altitude - center.altitude
    return (x, y, z)


def haversine_distance(p1: GeoPoint, p2: GeoPoint) -> float:
    """Great-circle distance between two points (meters, altitude ignored)."""
    phi1 = math.radians(p1.latitude)
    phi2 = math.radians(p2.latitude)
    d_phi = math.radians(p2.latitude - p1.latitude)
    d_lambda = math.radians(p2.longitude - p1.longitude)

    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_M * c


def segment_distance_3d(p1: GeoPoint, p2: GeoPoint) -> float:
    """Distance treating horizontal and vertical legs as orthogonal."""
    horizontal = haversine_distance(p1, p2)
    vertical = abs(p2.altitude - p1.altitude)
    return math.hypot(horizontal, vertical)


def rotate_offset(x: float, y: float, degrees: float) -> tuple:
    """Rotate an east/north offset counter-clockwise about the vertical axis.

    Args:
        x: East offset (meters)
        y: North offset (meters)
        degrees: Rotation angle

    Returns:
        Rotated (x, y)
    """
    if degrees == 0.0:
        return (x, y)

    angle_rad = math.radians(degrees)
    cos_r = math.cos(angle_rad)
    sin_r = math.sin(angle_rad)

    return (x * cos_r - y * sin_r, x * sin_r + y * cos_r)
