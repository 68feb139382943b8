"""
Curated station dataset adapter.

The curated dataset is a pre-vetted JSON snapshot of CPCB stations with
authoritative AQI values. It is read from a local file by default, or from
a URL when ``CURATED_STATIONS_URL`` is configured.
"""
import json
import logging
from pathlib import Path
from typing import List, Dict

from apps.core.exceptions import SourceUnavailable
from apps.core.types import Coordinate, Station
from apps.core.utils import parse_timestamp

from .base import StationSourceAdapter

logger = logging.getLogger(__name__)


class CuratedStationsAdapter(StationSourceAdapter):
    """
    Adapter for the curated ``selected_stations.json`` dataset.

    Entries look like::

        {"station_id": "Mandir Marg, Delhi - DPCC", "latitude": "28.63",
         "longitude": "77.20", "aqi": "182", "last_update": "18-10-2026 10:00:00",
         "pollutants": {"PM2.5": "95", "PM10": "160", "NO2": "41"}}
    """

    SOURCE_NAME = "CPCB (Govt. of India)"
    SOURCE_CODE = "CURATED"

    def __init__(self, path: str = None, url: str = None, **kwargs):
        super().__init__(**kwargs)
        self.path = path if path is not None else self.settings.get('CURATED_STATIONS_PATH')
        self.url = url if url is not None else self.settings.get('CURATED_STATIONS_URL')

    def fetch_all(self) -> List[Station]:
        raw_data = self._load()

        if not isinstance(raw_data, list):
            raise SourceUnavailable(self.SOURCE_CODE, "dataset is not a list of stations")

        stations = self.normalize_data(raw_data)
        logger.debug(f"Loaded {len(stations)} curated stations")
        return stations

    def _load(self):
        if self.url:
            return self._make_request(self.url)

        if not self.path:
            raise SourceUnavailable(self.SOURCE_CODE, "no dataset configured")

        try:
            with Path(self.path).open(encoding='utf-8') as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to load curated stations from {self.path}: {e}")
            raise SourceUnavailable(self.SOURCE_CODE, str(e)) from e

    def normalize_data(self, raw_data: List[Dict]) -> List[Station]:
        """Convert dataset entries to Stations, skipping malformed rows."""
        stations = []

        for entry in raw_data:
            try:
                lat = float(entry['latitude'])
                lon = float(entry['longitude'])
            except (KeyError, TypeError, ValueError):
                logger.warning(f"Skipping curated station without coordinates: {entry.get('station_id')}")
                continue

            try:
                aqi = int(float(entry.get('aqi')))
            except (TypeError, ValueError):
                aqi = None

            stations.append(Station(
                id=str(entry.get('station_id', 'Unknown')),
                coordinate=Coordinate(lat, lon),
                pollutants=self.normalize_pollutants(entry.get('pollutants')),
                authoritative_aqi=aqi,
                last_updated=parse_timestamp(entry.get('last_update')),
            ))

        return stations
