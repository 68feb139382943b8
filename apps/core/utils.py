"""
Utility functions for the Air Quality Health Advisory service.
"""
import math
from collections import namedtuple
from datetime import datetime, timedelta

from django.utils import timezone

from .constants import TIME_OF_DAY_HOURS
from .exceptions import InvalidCoordinate, RegionWarning

CoordinateCheck = namedtuple('CoordinateCheck', ['latitude', 'longitude', 'warning'])


def calculate_distance_km(lat1, lon1, lat2, lon2):
    """
    Calculate the distance between two coordinates using Haversine formula.
    Returns distance in kilometers.
    """
    R = 6371  # Earth's radius in kilometers

    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    a = (math.sin(delta_lat / 2) ** 2 +
         math.cos(lat1_rad) * math.cos(lat2_rad) *
         math.sin(delta_lon / 2) ** 2)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    distance = R * c
    return distance


def distance_km(a, b):
    """Haversine distance between two ``Coordinate`` values."""
    return calculate_distance_km(a.latitude, a.longitude, b.latitude, b.longitude)


def round_half_up(value):
    """Round to the nearest integer, halves away from negative infinity."""
    return int(math.floor(value + 0.5))


def is_cache_fresh(timestamp, ttl_seconds):
    """
    Check if a cache timestamp is younger than the TTL.

    Args:
        timestamp: datetime the entry was cached
        ttl_seconds: maximum acceptable age in seconds

    Returns:
        bool: True if the entry can be served
    """
    if timestamp is None:
        return False

    if not timezone.is_aware(timestamp):
        timestamp = timezone.make_aware(timestamp)

    age = timezone.now() - timestamp
    return age < timedelta(seconds=ttl_seconds)


def parse_timestamp(value):
    """
    Parse an upstream timestamp into an aware datetime.

    Accepts ISO 8601 strings and the ``DD-MM-YYYY HH:MM:SS`` format used by
    CPCB. Returns None when the value cannot be parsed.
    """
    if not value:
        return None

    if isinstance(value, datetime):
        timestamp = value
    else:
        value = str(value).strip()
        timestamp = None
        try:
            timestamp = datetime.fromisoformat(value.replace('Z', '+00:00'))
        except ValueError:
            for fmt in ('%d-%m-%Y %H:%M:%S', '%d-%m-%Y %H:%M', '%Y-%m-%d %H:%M:%S'):
                try:
                    timestamp = datetime.strptime(value, fmt)
                    break
                except ValueError:
                    continue
        if timestamp is None:
            return None

    if not timezone.is_aware(timestamp):
        timestamp = timezone.make_aware(timestamp)
    return timestamp


def in_bounds(lat, lon, bounds):
    """Check whether a coordinate falls inside a north/south/east/west rectangle."""
    return (
        bounds['south'] <= lat <= bounds['north'] and
        bounds['west'] <= lon <= bounds['east']
    )


def validate_coordinates(lat, lon, service_region=None):
    """
    Validate latitude and longitude values.

    Args:
        lat: latitude value
        lon: longitude value
        service_region: optional bounding box; coordinates outside it are
            accepted with a ``RegionWarning``

    Returns:
        CoordinateCheck: parsed floats plus an optional warning

    Raises:
        InvalidCoordinate: unparseable or out-of-range values
    """
    try:
        lat = float(lat)
        lon = float(lon)
    except (TypeError, ValueError):
        raise InvalidCoordinate("Invalid coordinates format")

    if math.isnan(lat) or math.isnan(lon):
        raise InvalidCoordinate("Invalid coordinates format")

    if not (-90 <= lat <= 90):
        raise InvalidCoordinate("Latitude must be between -90 and 90")

    if not (-180 <= lon <= 180):
        raise InvalidCoordinate("Longitude must be between -180 and 180")

    warning = None
    if service_region and not in_bounds(lat, lon, service_region):
        region_name = service_region.get('name', 'the service region')
        warning = RegionWarning(
            f"Coordinates are outside {region_name} region. Results may be less accurate."
        )

    return CoordinateCheck(lat, lon, warning)


def get_time_of_day(hour):
    """
    Bucket a wall-clock hour into morning, afternoon, evening or night.

    Args:
        hour: hour of day, 0-23

    Returns:
        str: time-of-day label
    """
    for label, start, end in TIME_OF_DAY_HOURS:
        if start <= hour < end:
            return label
    return 'night'
