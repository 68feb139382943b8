"""
Nearest-station selection over a pool of monitoring stations.
"""
import logging
from typing import List, Optional, Sequence, Tuple

from django.conf import settings
from django.utils import timezone

from apps.core.aqi import get_aqi_category
from apps.core.constants import POLLUTANTS
from apps.core.types import AQICategory, AQIReading, Coordinate, Station
from apps.core.utils import distance_km

logger = logging.getLogger(__name__)

DEFAULT_RADII_KM = (10, 25, 50, 100)
DEFAULT_SOURCE_NAME = 'CPCB (Govt. of India)'


class StationResolver:
    """
    Picks the station that represents a query coordinate.

    ``nearest_valid`` searches successively larger radii and returns the
    closest station with data inside the first radius that has any.
    ``rank_nearby`` lists stations around a point for browsing, data or not.
    """

    def __init__(self, radii_km: Sequence[float] = None, max_radius_km: float = None):
        aq_settings = getattr(settings, 'AIR_QUALITY_SETTINGS', {})
        self.radii_km = sorted(radii_km or aq_settings.get('SEARCH_RADII_KM', DEFAULT_RADII_KM))
        self.max_radius_km = max_radius_km or aq_settings.get('NEARBY_MAX_RADIUS_KM', 200)

    def nearest_valid(
        self,
        stations: Sequence[Station],
        at: Coordinate,
        source_name: str = DEFAULT_SOURCE_NAME,
    ) -> Optional[AQIReading]:
        """
        Find the nearest station with usable data.

        Stations whose effective AQI is 0 are treated as having no data, so a
        station reporting genuine zeros is skipped too.

        Args:
            stations: candidate stations from a single source
            at: query coordinate
            source_name: label recorded on the reading

        Returns:
            AQIReading for the winning station, or None when nothing within
            the largest radius has data
        """
        candidates = [
            (distance_km(at, station.coordinate), station)
            for station in stations
            if station.effective_aqi > 0
        ]

        for radius in self.radii_km:
            in_range = [item for item in candidates if item[0] <= radius]
            if in_range:
                distance, winner = min(in_range, key=lambda item: item[0])
                logger.debug(
                    f"Selected station {winner.id} at {distance:.2f} km (radius {radius} km)"
                )
                return self.format_reading(winner, distance, source_name)

        logger.info(
            f"No station with data within {self.radii_km[-1]} km of "
            f"({at.latitude}, {at.longitude}) among {len(stations)} stations"
        )
        return None

    def rank_nearby(
        self,
        stations: Sequence[Station],
        at: Coordinate,
        max_results: int,
        max_radius_km: float = None,
    ) -> List[Tuple[Station, float]]:
        """
        Stations within a radius of ``at``, closest first.

        Stations without data are kept; their AQI renders as unknown.

        Returns:
            list of (Station, distance_km) tuples, at most ``max_results`` long
        """
        radius = max_radius_km if max_radius_km is not None else self.max_radius_km

        nearby = []
        for station in stations:
            distance = distance_km(at, station.coordinate)
            if distance <= radius:
                nearby.append((station, distance))

        nearby.sort(key=lambda item: item[1])
        return nearby[:max_results]

    def search(self, stations: Sequence[Station], query: str) -> Optional[Station]:
        """First station whose id or city contains ``query``, case-insensitive."""
        query = (query or '').strip().lower()
        if not query:
            return None

        for station in stations:
            if query in station.id.lower() or (station.city and query in station.city.lower()):
                return station
        return None

    @staticmethod
    def format_reading(station: Station, distance: float, source_name: str) -> AQIReading:
        """Normalise a selected station into an ``AQIReading``."""
        aqi_value = station.reported_aqi
        pm25 = station.pm25 or 0
        pm10 = station.pm10 or 0

        return AQIReading(
            aqi_value=aqi_value,
            aqi_category=AQICategory(get_aqi_category(aqi_value)),
            dominant_pollutant='PM2.5' if pm25 >= pm10 else 'PM10',
            pollutants={key: station.pollutants.get(key) or 0 for key in POLLUTANTS},
            station_label=station.id,
            distance_km=distance,
            source_name=source_name,
            measured_at=station.last_updated or timezone.now(),
        )
