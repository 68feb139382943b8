"""
Main orchestrator that wires the services together and serves the
presentation layer.
"""
import logging
from typing import Dict, Optional

from django.conf import settings
from django.utils import timezone

from apps.adapters.cpcb import CPCBFeedAdapter
from apps.adapters.curated import CuratedStationsAdapter
from apps.adapters.openaq import OpenAQAdapter
from apps.advisory.engine import AdvisoryGenerator
from apps.advisory.insight import GeminiInsightGenerator, NullInsightGenerator
from apps.advisory.risk import RiskAssessor
from apps.core.aqi import get_category_info
from apps.core.types import Advisory, AQIReading, HealthProfile, RiskAssessment
from apps.core.utils import get_time_of_day
from apps.gateway.cache import DatabaseReadingCache
from apps.gateway.services import AQIDataGateway
from apps.location.services import LocationService

logger = logging.getLogger(__name__)


def build_gateway(cache=None) -> AQIDataGateway:
    """Construct the data gateway with the sources enabled in settings."""
    aq_settings = settings.AIR_QUALITY_SETTINGS

    secondary = OpenAQAdapter() if aq_settings.get('OPENAQ_ENABLED', True) else None

    return AQIDataGateway(
        curated_source=CuratedStationsAdapter(),
        live_source=CPCBFeedAdapter(),
        secondary_source=secondary,
        cache=cache if cache is not None else DatabaseReadingCache(),
    )


def build_insight_generator():
    if settings.AIR_QUALITY_SETTINGS.get('INSIGHT_ENABLED', True):
        return GeminiInsightGenerator()
    return NullInsightGenerator()


class AdvisoryOrchestrator:
    """
    Main orchestrator service that coordinates:
    1. Location validation
    2. Air quality resolution through the data gateway
    3. Risk assessment
    4. Advisory generation
    5. Optional narrative insight
    """

    def __init__(
        self,
        gateway: AQIDataGateway = None,
        location_service: LocationService = None,
        risk_assessor: RiskAssessor = None,
        advisory_generator: AdvisoryGenerator = None,
        insight_generator=None,
    ):
        self.gateway = gateway or build_gateway()
        self.location_service = location_service or LocationService()
        self.risk_assessor = risk_assessor or RiskAssessor()
        self.advisory_generator = advisory_generator or AdvisoryGenerator(self.risk_assessor)
        self.insight_generator = insight_generator or build_insight_generator()

    def resolve(self, lat, lon, use_cache: bool = True):
        """
        Validate a coordinate and resolve its reading.

        Returns:
            tuple: (AQIReading, region warning or None)

        Raises:
            InvalidCoordinate: bad coordinate
            NoDataAvailable: every source exhausted
        """
        coordinate, warning = self.location_service.validate(lat, lon)
        return self.gateway.resolve(coordinate, use_cache=use_cache), warning

    def assess(self, profile: HealthProfile, reading: AQIReading) -> RiskAssessment:
        return self.risk_assessor.assess(profile, reading)

    def generate_advisory(
        self,
        profile: HealthProfile,
        reading: AQIReading,
        time_of_day: Optional[str] = None,
        include_insight: bool = False,
    ) -> Advisory:
        """
        Generate the advisory, optionally augmented with a narrative insight.

        The time of day defaults to the current local hour.
        """
        if time_of_day is None:
            time_of_day = get_time_of_day(timezone.localtime().hour)

        advisory = self.advisory_generator.generate(profile, reading, time_of_day)

        if include_insight:
            insight = self.insight_generator.generate(profile, reading, advisory.risk)
            advisory = advisory.with_insight(insight)

        return advisory

    def get_air_quality(self, lat, lon, use_cache: bool = True) -> Dict:
        """Reading for a coordinate as a response dict."""
        reading, warning = self.resolve(lat, lon, use_cache=use_cache)
        category_info = get_category_info(reading.aqi_value)

        return {
            'location': {'lat': float(lat), 'lon': float(lon), 'warning': warning},
            'current': reading.to_dict(),
            'health_advice': category_info['health_message'] if category_info else '',
            'color_class': category_info['color_class'] if category_info else '',
        }

    def get_advisory(
        self,
        lat,
        lon,
        profile: HealthProfile,
        time_of_day: Optional[str] = None,
        include_insight: bool = False,
        use_cache: bool = True,
    ) -> Dict:
        """Reading plus personalised advisory as a response dict."""
        reading, warning = self.resolve(lat, lon, use_cache=use_cache)
        advisory = self.generate_advisory(
            profile, reading, time_of_day=time_of_day, include_insight=include_insight
        )

        return {
            'location': {'lat': float(lat), 'lon': float(lon), 'warning': warning},
            'current': reading.to_dict(),
            'advisory': advisory.to_dict(),
        }

    def nearby_stations(self, lat, lon, limit: int = None) -> Dict:
        coordinate, warning = self.location_service.validate(lat, lon)
        stations = self.gateway.nearby_stations(coordinate, limit=limit)
        return {
            'location': {'lat': coordinate.latitude, 'lon': coordinate.longitude, 'warning': warning},
            'count': len(stations),
            'stations': stations,
        }

    def find_station(self, query: str) -> Optional[Dict]:
        station = self.gateway.find_station(query)
        return station.to_dict() if station else None

    def geocode_pincode(self, pincode) -> Optional[Dict]:
        result = self.location_service.geocode_pincode(pincode)
        if result is None:
            return None

        _, warning = self.location_service.validate(result['lat'], result['lon'])
        return {**result, 'warning': warning}
