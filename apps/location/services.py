"""
Location services: coordinate validation and PIN code geocoding.
"""
import logging
import re
from decimal import Decimal

from django.conf import settings
from django.utils import timezone
from geopy.geocoders import Nominatim
from geopy.exc import GeopyError

from apps.core.exceptions import InvalidCoordinate
from apps.core.types import Coordinate
from apps.core.utils import validate_coordinates

from .models import LocationCache

logger = logging.getLogger(__name__)

PINCODE_PATTERN = re.compile(r'^\d{6}$')


class LocationService:
    """
    Service for turning user input into validated coordinates.
    Uses caching to minimize external geocoding API calls.
    """

    def __init__(self, geocoder=None):
        aq_settings = getattr(settings, 'AIR_QUALITY_SETTINGS', {})
        self.geocoder = geocoder or Nominatim(
            user_agent=aq_settings.get('GEOCODER_USER_AGENT', 'air-health-advisory/1.0')
        )
        self.cache_ttl_seconds = aq_settings.get('LOCATION_CACHE_TTL', 86400)
        self.service_region = aq_settings.get('SERVICE_REGION')
        self.timeout = aq_settings.get('REQUEST_TIMEOUT', 10)

    def validate(self, lat, lon):
        """
        Validate a coordinate pair against range and the service region.

        Returns:
            tuple: (Coordinate, warning message or None)

        Raises:
            InvalidCoordinate: malformed or out-of-range values
        """
        check = validate_coordinates(lat, lon, service_region=self.service_region)
        warning = str(check.warning) if check.warning else None
        if warning:
            logger.info(f"({check.latitude}, {check.longitude}): {warning}")
        return Coordinate(check.latitude, check.longitude), warning

    def geocode_pincode(self, pincode, use_cache=True):
        """
        Resolve a 6-digit Indian PIN code to coordinates.

        Args:
            pincode: postal code as entered by the user
            use_cache: whether to use cached results

        Returns:
            dict: lat, lon, formatted_address, or None when not found

        Raises:
            InvalidCoordinate: the PIN code is not six digits
        """
        pincode = str(pincode or '').strip()
        if not PINCODE_PATTERN.match(pincode):
            raise InvalidCoordinate("Please enter a valid 6-digit Indian Pincode")

        if use_cache:
            cached = self._get_from_cache(pincode)
            if cached:
                return cached

        try:
            location = self.geocoder.geocode(
                {'postalcode': pincode, 'country': 'India'},
                exactly_one=True,
                timeout=self.timeout,
            )
        except GeopyError as e:
            logger.warning(f"Geocoding service error for {pincode}: {e}")
            return None

        if not location:
            logger.info(f"Pincode {pincode} not found")
            return None

        result = {
            'lat': float(location.latitude),
            'lon': float(location.longitude),
            'formatted_address': location.address or '',
        }
        self._save_to_cache(pincode, result)
        return result

    def _get_from_cache(self, pincode):
        """Get location from cache if available and fresh."""
        try:
            cache_entry = LocationCache.objects.get(postal_code=pincode)

            cache_age = timezone.now() - cache_entry.cached_at
            if cache_age.total_seconds() < self.cache_ttl_seconds:
                cache_entry.increment_hit_count()

                return {
                    'lat': float(cache_entry.lat),
                    'lon': float(cache_entry.lon),
                    'formatted_address': cache_entry.formatted_address,
                }

            # Cache expired, delete it
            cache_entry.delete()

        except LocationCache.DoesNotExist:
            pass

        return None

    def _save_to_cache(self, pincode, location_data):
        """Save location data to cache."""
        try:
            LocationCache.objects.update_or_create(
                postal_code=pincode,
                defaults={
                    'lat': round(Decimal(str(location_data['lat'])), 6),
                    'lon': round(Decimal(str(location_data['lon'])), 6),
                    'formatted_address': location_data.get('formatted_address', ''),
                }
            )
        except Exception as e:
            logger.error(f"Cache save error: {e}")
