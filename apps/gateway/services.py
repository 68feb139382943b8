"""
Air quality data gateway: resolves a coordinate to a single reading by trying
each data source in priority order.
"""
import logging
import time
from typing import Dict, List, Optional

from django.conf import settings
from django.utils import timezone

from apps.core.aqi import calculate_overall_aqi, get_aqi_category
from apps.core.constants import DATA_SOURCES, POLLUTANTS
from apps.core.exceptions import NoDataAvailable, SourceUnavailable
from apps.core.types import AQICategory, AQIReading, Coordinate, Station
from apps.core.utils import in_bounds, is_cache_fresh
from apps.stations.resolver import StationResolver

logger = logging.getLogger(__name__)


class AQIDataGateway:
    """
    Resolves coordinates to ``AQIReading`` objects.

    Resolution order, stopping at the first success:

    1. the reading cache (fresh entries only)
    2. the curated station dataset
    3. the live CPCB feed, when the coordinate is inside its coverage area
    4. the secondary public API (optional)

    A failing source is logged and skipped. Only when every source comes back
    empty is ``NoDataAvailable`` raised.

    Station sources select stations by a coarse effective AQI (authoritative
    value, else max of PM2.5/PM10), while the secondary API path computes the
    full NAQI sub-index. The two paths are kept separate on purpose; readings
    from different sources are not strictly comparable.
    """

    def __init__(
        self,
        curated_source,
        live_source=None,
        secondary_source=None,
        cache=None,
        resolver: StationResolver = None,
        cache_ttl: int = None,
        live_feed_region: Dict = None,
    ):
        aq_settings = settings.AIR_QUALITY_SETTINGS
        self.curated_source = curated_source
        self.live_source = live_source
        self.secondary_source = secondary_source
        self.cache = cache
        self.resolver = resolver or StationResolver()
        self.cache_ttl = cache_ttl if cache_ttl is not None else aq_settings.get('CACHE_TTL_SECONDS', 1800)
        self.cache_precision = aq_settings.get('CACHE_KEY_PRECISION', 4)
        self.live_feed_region = live_feed_region or aq_settings.get('LIVE_FEED_REGION')

    def resolve(self, at: Coordinate, use_cache: bool = True) -> AQIReading:
        """
        Get the air quality reading for a coordinate.

        Args:
            at: query coordinate (already validated)
            use_cache: serve a fresh cached reading when available

        Returns:
            AQIReading

        Raises:
            NoDataAvailable: every source failed or had no data
        """
        start_time = time.time()
        key = at.cache_key(self.cache_precision)

        if use_cache and self.cache is not None:
            cached = self._get_from_cache(key)
            if cached:
                logger.info(f"Using cached AQI data for {key}")
                return cached

        logger.info(f"Fetching AQI data for ({at.latitude}, {at.longitude})")
        sources_tried = ['CURATED']

        reading = self._resolve_from_stations(self.curated_source, at)

        if reading is None and self.live_source is not None:
            if self.live_feed_region and not in_bounds(at.latitude, at.longitude, self.live_feed_region):
                logger.debug("Coordinate outside live feed coverage, skipping CPCB feed")
            else:
                sources_tried.append('CPCB_LIVE')
                reading = self._resolve_from_stations(self.live_source, at)

        if reading is None and self.secondary_source is not None:
            sources_tried.append('OPENAQ')
            reading = self._resolve_from_secondary(at)

        if reading is None:
            logger.warning(
                f"No air quality data for ({at.latitude}, {at.longitude}); tried {sources_tried}"
            )
            raise NoDataAvailable(sources_tried=sources_tried)

        if self.cache is not None:
            self._save_to_cache(key, reading)

        execution_time = int((time.time() - start_time) * 1000)
        logger.info(
            f"Resolved AQI {reading.aqi_value} from {reading.source_name} "
            f"({reading.station_label}) in {execution_time} ms"
        )
        return reading

    def nearby_stations(self, at: Coordinate, limit: int = None) -> List[Dict]:
        """
        Stations around a coordinate for map and browse views.

        Uses the curated dataset, falling back to the live feed when the
        curated source fails. Returns an empty list when both fail.
        """
        limit = limit or settings.AIR_QUALITY_SETTINGS.get('NEARBY_DEFAULT_LIMIT', 50)
        stations = self._all_stations()

        ranked = self.resolver.rank_nearby(stations, at, max_results=limit)
        return [station.to_dict(distance_km=distance) for station, distance in ranked]

    def find_station(self, query: str) -> Optional[Station]:
        """Station whose id or city matches ``query``."""
        return self.resolver.search(self._all_stations(), query)

    def _all_stations(self) -> List[Station]:
        for source in (self.curated_source, self.live_source):
            if source is None:
                continue
            try:
                return source.fetch_all()
            except SourceUnavailable as e:
                logger.warning(f"Station list unavailable from {e.source}, trying next source")
            except Exception as e:
                logger.error(f"Error fetching station list: {e}", exc_info=True)
        return []

    def _resolve_from_stations(self, source, at: Coordinate) -> Optional[AQIReading]:
        """Run nearest-station selection over one station source."""
        if source is None:
            return None

        source_code = getattr(source, 'SOURCE_CODE', source.__class__.__name__)

        if hasattr(source, 'is_available') and not source.is_available():
            logger.info(f"{source_code} unavailable, skipping")
            return None

        try:
            stations = source.fetch_all()
        except SourceUnavailable as e:
            logger.warning(f"{source_code} failed: {e}")
            return None
        except Exception as e:
            logger.error(f"Error in {source_code}: {e}", exc_info=True)
            return None

        if not stations:
            logger.info(f"{source_code} returned no stations")
            return None

        source_name = getattr(source, 'SOURCE_NAME', None) or DATA_SOURCES.get(source_code, source_code)
        reading = self.resolver.nearest_valid(stations, at, source_name=source_name)
        if reading:
            logger.debug(f"Found station in {source_code}: {reading.station_label}")
        return reading

    def _resolve_from_secondary(self, at: Coordinate) -> Optional[AQIReading]:
        """Normalise the secondary API's measurements with the full NAQI calculation."""
        source = self.secondary_source

        if hasattr(source, 'is_available') and not source.is_available():
            logger.info("Secondary source unavailable, skipping")
            return None

        try:
            measurement_set = source.fetch_near(at.latitude, at.longitude)
        except SourceUnavailable as e:
            logger.warning(f"Secondary source failed: {e}")
            return None
        except Exception as e:
            logger.error(f"Error in secondary source: {e}", exc_info=True)
            return None

        if not measurement_set:
            return None

        measurements = measurement_set.get('measurements') or {}
        aqi, dominant = calculate_overall_aqi(measurements)
        if dominant is None:
            return None

        label = measurement_set.get('location') or 'Unknown'
        if measurement_set.get('city'):
            label = f"{label}, {measurement_set['city']}"

        return AQIReading(
            aqi_value=aqi,
            aqi_category=AQICategory(get_aqi_category(aqi)),
            dominant_pollutant=dominant,
            pollutants={key: measurements.get(key) or 0 for key in POLLUTANTS},
            station_label=label,
            distance_km=float(measurement_set.get('distance_km') or 0),
            source_name=getattr(source, 'SOURCE_NAME', DATA_SOURCES['OPENAQ']),
            measured_at=measurement_set.get('last_updated') or timezone.now(),
        )

    def _get_from_cache(self, key: str) -> Optional[AQIReading]:
        """Get a reading from cache if available and fresh."""
        try:
            entry = self.cache.get(key)
        except Exception as e:
            logger.error(f"Cache read failed for {key}: {e}")
            return None

        if not entry:
            return None

        reading, cached_at = entry
        if is_cache_fresh(cached_at, self.cache_ttl):
            return reading
        return None

    def _save_to_cache(self, key: str, reading: AQIReading):
        """Save a resolved reading to cache."""
        try:
            self.cache.put(key, reading, timezone.now())
        except Exception as e:
            logger.error(f"Failed to save to cache: {e}")
