"""
OpenAQ adapter, the secondary public air quality API.
"""
import logging
from typing import Dict, Optional

from apps.core.constants import POLLUTANT_ALIASES
from apps.core.utils import calculate_distance_km, parse_timestamp, round_half_up

from .base import BaseAdapter

logger = logging.getLogger(__name__)


class OpenAQAdapter(BaseAdapter):
    """
    Adapter for the OpenAQ ``latest`` endpoint.
    Global measurements aggregated from government and research monitors.

    Unlike the station sources it returns raw concentrations only; callers
    compute the AQI from them.
    """

    SOURCE_NAME = "OpenAQ"
    SOURCE_CODE = "OPENAQ"
    API_BASE_URL = "https://api.openaq.org/v2/"
    REQUIRES_API_KEY = False
    API_KEY_NAME = "OPENAQ"

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.API_BASE_URL = self.settings.get('OPENAQ_API_URL', self.API_BASE_URL)
        self.radius_m = self.settings.get('OPENAQ_RADIUS_M', 25000)

    def _add_api_key(self, params: Dict, headers: Dict):
        """OpenAQ uses the 'X-API-Key' header."""
        if self.api_key:
            headers['X-API-Key'] = self.api_key

    def fetch_near(self, lat: float, lon: float) -> Optional[Dict]:
        """
        Fetch the latest measurements of the nearest location.

        Args:
            lat: Latitude
            lon: Longitude

        Returns:
            Measurement set dict, or None when no location is nearby

        Raises:
            SourceUnavailable: network or HTTP failure
        """
        params = {
            'coordinates': f"{lat},{lon}",
            'radius': self.radius_m,
            'limit': 1,
            'order_by': 'distance',
        }

        raw_data = self._make_request('latest', params=params)
        return self.normalize_data(raw_data, lat, lon)

    def normalize_data(self, raw_data: Dict, query_lat: float, query_lon: float) -> Optional[Dict]:
        """
        Normalize an OpenAQ response to a measurement set::

            {'location', 'city', 'distance_km', 'last_updated',
             'measurements': {'pm25': 41, ...}}
        """
        results = (raw_data or {}).get('results') or []
        if not results:
            return None

        location = results[0]

        measurements = {}
        last_updated = None
        for measurement in location.get('measurements', []):
            key = POLLUTANT_ALIASES.get(str(measurement.get('parameter', '')).lower())
            value = measurement.get('value')
            if not key or value is None:
                continue
            try:
                measurements[key] = round_half_up(float(value))
            except (TypeError, ValueError):
                continue
            if last_updated is None:
                last_updated = parse_timestamp(measurement.get('lastUpdated'))

        if not measurements:
            return None

        coordinates = location.get('coordinates') or {}
        if coordinates.get('latitude') is not None and coordinates.get('longitude') is not None:
            distance = calculate_distance_km(
                query_lat, query_lon,
                float(coordinates['latitude']), float(coordinates['longitude'])
            )
        else:
            distance = float(location.get('distance') or 0) / 1000

        return {
            'location': location.get('location') or 'Unknown',
            'city': location.get('city') or '',
            'distance_km': distance,
            'last_updated': last_updated,
            'measurements': measurements,
        }
