"""
CPCB (Central Pollution Control Board) live feed adapter.
"""
import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import List

from apps.core.exceptions import SourceUnavailable
from apps.core.types import Coordinate, Station
from apps.core.utils import parse_timestamp

from .base import StationSourceAdapter

logger = logging.getLogger(__name__)


class CPCBFeedAdapter(StationSourceAdapter):
    """
    Adapter for the CPCB CAAQMS RSS feed.
    Official Indian station data, published as XML::

        <Station id="..." latitude="28.63" longitude="77.20" lastupdate="...">
            <Pollutant_Index id="PM2.5" Avg="95" .../>
            <Air_Quality_Index Value="182" .../>
        </Station>

    When the feed cannot be reached a local copy of the XML can be used
    instead (``CPCB_FEED_FALLBACK_PATH``).
    """

    SOURCE_NAME = "CPCB (Govt. of India)"
    SOURCE_CODE = "CPCB_LIVE"

    def __init__(self, feed_url: str = None, fallback_path: str = None, **kwargs):
        super().__init__(**kwargs)
        self.feed_url = feed_url or self.settings.get('CPCB_FEED_URL')
        self.fallback_path = (
            fallback_path if fallback_path is not None
            else self.settings.get('CPCB_FEED_FALLBACK_PATH')
        )

    def fetch_all(self) -> List[Station]:
        xml_text = self._fetch_xml()
        stations = self.parse_stations(xml_text)

        if not stations:
            raise SourceUnavailable(self.SOURCE_CODE, "feed contained no stations")

        logger.debug(f"Parsed {len(stations)} stations from CPCB feed")
        return stations

    def _fetch_xml(self) -> str:
        if not self.fallback_path:
            return self._make_request(self.feed_url, expect='text')

        # The status only records a failure when the local copy fails too
        try:
            xml_text = self._make_request(self.feed_url, expect='text', track_status=False)
        except SourceUnavailable as remote_error:
            logger.warning(f"CPCB feed unavailable, using local copy {self.fallback_path}")
            try:
                xml_text = Path(self.fallback_path).read_text(encoding='utf-8')
            except OSError as e:
                message = f"{remote_error}; local feed copy unreadable: {e}"
                self._update_status(success=False, error_message=message)
                raise SourceUnavailable(self.SOURCE_CODE, message) from e

        self._update_status(success=True)
        return xml_text

    def parse_stations(self, xml_text: str) -> List[Station]:
        """
        Parse every ``Station`` element in the feed.

        Stations with unparseable coordinates are skipped; pollutant averages
        that are not numbers (``NA``) are treated as not measured.

        Raises:
            SourceUnavailable: the document is not well-formed XML
        """
        try:
            root = ET.fromstring(xml_text)
        except ET.ParseError as e:
            logger.error(f"Error parsing CPCB feed: {e}")
            raise SourceUnavailable(self.SOURCE_CODE, f"malformed XML: {e}") from e

        stations = []

        for node in root.iter('Station'):
            try:
                lat = float(node.get('latitude'))
                lon = float(node.get('longitude'))
            except (TypeError, ValueError):
                continue

            raw_pollutants = {
                pollutant.get('id'): pollutant.get('Avg')
                for pollutant in node.iter('Pollutant_Index')
                if pollutant.get('id')
            }

            aqi = None
            aqi_node = node.find('Air_Quality_Index')
            if aqi_node is not None:
                try:
                    aqi = int(float(aqi_node.get('Value')))
                except (TypeError, ValueError):
                    aqi = None

            stations.append(Station(
                id=node.get('id') or 'Unknown',
                coordinate=Coordinate(lat, lon),
                pollutants=self.normalize_pollutants(raw_pollutants),
                authoritative_aqi=aqi,
                last_updated=parse_timestamp(node.get('lastupdate')),
            ))

        return stations
