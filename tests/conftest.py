"""
Shared fixtures and builders for the advisory test-suite.
"""
import threading
from datetime import datetime
from unittest import mock

import pytest
from django.utils import timezone

from apps.advisory.insight import NullInsightGenerator
from apps.api.orchestrator import AdvisoryOrchestrator
from apps.core.aqi import get_aqi_category
from apps.core.constants import POLLUTANTS
from apps.core.exceptions import SourceUnavailable
from apps.core.types import AQICategory, AQIReading, Coordinate, HealthProfile, Station
from apps.gateway.services import AQIDataGateway
from apps.location.services import LocationService

# Mandir Marg, Delhi
DELHI = Coordinate(28.636429, 77.201067)
MUMBAI = Coordinate(19.0760, 72.8777)
LONDON = Coordinate(51.5074, -0.1278)

MEASURED_AT = timezone.make_aware(datetime(2026, 10, 18, 10, 0, 0))


def make_station(station_id, lat, lon, aqi=None, last_updated=MEASURED_AT, **pollutants):
    return Station(
        id=station_id,
        coordinate=Coordinate(lat, lon),
        pollutants=pollutants,
        authoritative_aqi=aqi,
        last_updated=last_updated,
    )


def make_reading(aqi, dominant='PM2.5', station='Mandir Marg, Delhi - DPCC', **pollutants):
    return AQIReading(
        aqi_value=aqi,
        aqi_category=AQICategory(get_aqi_category(aqi)),
        dominant_pollutant=dominant,
        pollutants={key: pollutants.get(key, 0) for key in POLLUTANTS},
        station_label=station,
        distance_km=1.2,
        source_name='CPCB (Govt. of India)',
        measured_at=MEASURED_AT,
    )


class FakeStationSource:
    """In-memory station source that records how often it is read."""

    def __init__(self, stations=(), code='CURATED', name='CPCB (Govt. of India)',
                 available=True, error=None):
        self.stations = list(stations)
        self.SOURCE_CODE = code
        self.SOURCE_NAME = name
        self.available = available
        self.error = error
        self.calls = 0

    def is_available(self):
        return self.available

    def fetch_all(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.stations)


class InMemoryReadingCache:
    """Process-local stand-in for DatabaseReadingCache."""

    def __init__(self):
        self.entries = {}
        self._lock = threading.Lock()

    def get(self, key):
        with self._lock:
            return self.entries.get(key)

    def put(self, key, reading, cached_at):
        with self._lock:
            self.entries[key] = (reading, cached_at)


class FakeSecondarySource:
    SOURCE_CODE = 'OPENAQ'
    SOURCE_NAME = 'OpenAQ'

    def __init__(self, measurement_set=None, error=None):
        self.measurement_set = measurement_set
        self.error = error
        self.calls = 0

    def is_available(self):
        return True

    def fetch_near(self, lat, lon):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.measurement_set


@pytest.fixture
def delhi_stations():
    return [
        make_station('Mandir Marg, Delhi - DPCC', 28.636429, 77.201067, aqi=182,
                     pm25=88, pm10=182, no2=41),
        make_station('ITO, Delhi - CPCB', 28.628624, 77.241060, aqi=211, pm25=97, pm10=211),
        make_station('Anand Vihar, Delhi - DPCC', 28.650364, 77.315589, aqi=276,
                     pm25=131, pm10=276),
        make_station('Sector-51, Gurugram - HSPCB', 28.423170, 77.072830, aqi=149,
                     pm25=64, pm10=149),
        make_station('Vasundhara, Ghaziabad - UPPCB', 28.660335, 77.357256),
    ]


@pytest.fixture
def curated_source(delhi_stations):
    return FakeStationSource(delhi_stations)


@pytest.fixture
def live_source():
    return FakeStationSource(
        [make_station('Bandra, Mumbai - MPCB', 19.0596, 72.8295, aqi=132, pm25=58, pm10=132)],
        code='CPCB_LIVE',
    )


@pytest.fixture
def secondary_source():
    return FakeSecondarySource({
        'location': 'Marylebone Road',
        'city': 'London',
        'distance_km': 2.4,
        'last_updated': MEASURED_AT,
        'measurements': {'pm25': 46, 'pm10': 176},
    })


@pytest.fixture
def reading_cache():
    return InMemoryReadingCache()


@pytest.fixture
def gateway(curated_source, live_source, secondary_source, reading_cache):
    return AQIDataGateway(
        curated_source=curated_source,
        live_source=live_source,
        secondary_source=secondary_source,
        cache=reading_cache,
    )


@pytest.fixture
def geocoder():
    return mock.Mock()


@pytest.fixture
def orchestrator(gateway, geocoder):
    return AdvisoryOrchestrator(
        gateway=gateway,
        location_service=LocationService(geocoder=geocoder),
        insight_generator=NullInsightGenerator(),
    )


@pytest.fixture
def healthy_adult():
    return HealthProfile(age=30)


@pytest.fixture
def asthmatic_senior():
    return HealthProfile.from_codes(age=80, respiratory=['asthma'], symptoms=['shortness-breath'])
