# Standard library imports
import math

# Mean earth radius (IUGG), spherical model
EARTH_RADIUS_KM = 6371.0088

# Relative slack added to bounding boxes so float rounding never drops a point on the circle
_BOX_MARGIN = 1e-6


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points, in kilometres."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(min(1.0, math.sqrt(a)))


def bounding_box(lat: float, lon: float, radius_km: float) -> tuple[float, float, float, float]:
    """
    (min_lat, max_lat, min_lon, max_lon) enclosing the circle of ``radius_km``.

    Only a coarse pre-selection; the haversine check decides. Near the poles
    or across the antimeridian the longitude range widens to [-180, 180].
    """
    angle = radius_km / EARTH_RADIUS_KM * (1 + _BOX_MARGIN) + _BOX_MARGIN
    d_lat = math.degrees(angle)
    min_lat, max_lat = lat - d_lat, lat + d_lat
    if min_lat <= -90 or max_lat >= 90:
        return max(min_lat, -90.0), min(max_lat, 90.0), -180.0, 180.0

    ratio = math.sin(angle) / math.cos(math.radians(lat))
    if angle >= math.pi / 2 or ratio >= 1:
        return min_lat, max_lat, -180.0, 180.0
    d_lon = math.degrees(math.asin(ratio))
    min_lon, max_lon = lon - d_lon, lon + d_lon
    if min_lon < -180 or max_lon > 180:
        return min_lat, max_lat, -180.0, 180.0
    return min_lat, max_lat, min_lon, max_lon
