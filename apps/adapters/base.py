"""
Base adapter class for all air quality data sources.
"""
import logging
import time
from abc import ABC, abstractmethod
from typing import List, Dict, Optional

import requests
from django.conf import settings
from django.utils import timezone
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from apps.core.constants import POLLUTANT_ALIASES
from apps.core.exceptions import SourceUnavailable
from apps.core.types import Station

from .models import AdapterStatus

logger = logging.getLogger(__name__)

# Consecutive failures after which an adapter is switched off
AUTO_DISABLE_THRESHOLD = 10


class BaseAdapter(ABC):
    """
    Abstract base class for all data source adapters.
    Provides common functionality for HTTP calls, health tracking and error handling.
    """

    # Subclasses must define these
    SOURCE_NAME = None
    SOURCE_CODE = None
    API_BASE_URL = None
    REQUIRES_API_KEY = False
    API_KEY_NAME = None

    def __init__(self, session: requests.Session = None):
        if not all([self.SOURCE_NAME, self.SOURCE_CODE]):
            raise ValueError("Adapter must define SOURCE_NAME and SOURCE_CODE")

        self.settings = settings.AIR_QUALITY_SETTINGS
        self.api_key = self._get_api_key()
        self.session = session or self._create_session()

    def _get_api_key(self) -> Optional[str]:
        """Get API key from settings."""
        if not self.API_KEY_NAME:
            return None

        api_key = settings.API_KEYS.get(self.API_KEY_NAME)
        if not api_key and self.REQUIRES_API_KEY:
            logger.warning(f"No API key found for {self.SOURCE_NAME}")

        return api_key or None

    def _create_session(self) -> requests.Session:
        """Create requests session with retry logic."""
        session = requests.Session()

        retry_strategy = Retry(
            total=self.settings.get('MAX_RETRIES', 3),
            backoff_factor=self.settings.get('RETRY_BACKOFF_FACTOR', 2),
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["GET", "POST"]
        )

        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        return session

    def _make_request(
        self,
        url: str,
        params: Dict = None,
        headers: Dict = None,
        method: str = 'GET',
        expect: str = 'json',
        track_status: bool = True,
    ):
        """
        Make HTTP request with error handling and logging.

        Args:
            url: absolute URL, or a path joined to API_BASE_URL
            params: Query parameters
            headers: HTTP headers
            method: HTTP method
            expect: 'json' for a decoded body, 'text' for the raw text
            track_status: record the outcome in AdapterStatus

        Returns:
            Decoded JSON or response text

        Raises:
            SourceUnavailable: on network, HTTP or decoding errors
        """
        if not url.startswith(('http://', 'https://')):
            url = f"{self.API_BASE_URL.rstrip('/')}/{url.lstrip('/')}"
        params = params or {}
        headers = headers or {}

        start_time = time.time()

        try:
            self._add_api_key(params, headers)

            timeout = self.settings.get('REQUEST_TIMEOUT', 10)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                headers=headers,
                timeout=timeout
            )

            response_time_ms = int((time.time() - start_time) * 1000)
            logger.debug(
                f"{self.SOURCE_NAME} {method} {url} -> {response.status_code} ({response_time_ms} ms)"
            )

            response.raise_for_status()
            data = response.json() if expect == 'json' else response.text

        except (requests.exceptions.RequestException, ValueError) as e:
            logger.error(f"{self.SOURCE_NAME} API error: {e}")
            if track_status:
                self._update_status(success=False, error_message=str(e))
            raise SourceUnavailable(self.SOURCE_CODE, str(e)) from e

        if track_status:
            self._update_status(success=True)
        return data

    def _add_api_key(self, params: Dict, headers: Dict):
        """
        Add API key to request. Override in subclass if needed.
        Default: adds to query params as 'api_key'.
        """
        if self.api_key:
            params['api_key'] = self.api_key

    def _update_status(self, success: bool, error_message: str = ''):
        """Update adapter status metrics."""
        try:
            status, created = AdapterStatus.objects.get_or_create(
                source=self.SOURCE_CODE,
                defaults={'is_active': True}
            )

            status.total_requests += 1

            if success:
                status.last_success_at = timezone.now()
                status.consecutive_failures = 0
            else:
                status.last_failure_at = timezone.now()
                status.consecutive_failures += 1
                status.total_failures += 1
                status.status_message = error_message

            if status.consecutive_failures >= AUTO_DISABLE_THRESHOLD:
                status.is_active = False
                logger.error(
                    f"{self.SOURCE_NAME} auto-disabled after "
                    f"{AUTO_DISABLE_THRESHOLD} consecutive failures"
                )

            status.save()

        except Exception as e:
            logger.error(f"Failed to update adapter status: {e}")

    def is_available(self) -> bool:
        """Check if adapter is available and healthy."""
        if not self.REQUIRES_API_KEY:
            return True

        if not self.api_key:
            return False

        try:
            status = AdapterStatus.objects.get(source=self.SOURCE_CODE)
            return status.is_healthy
        except AdapterStatus.DoesNotExist:
            return True


class StationSourceAdapter(BaseAdapter):
    """Adapter that returns a full list of monitoring stations."""

    @abstractmethod
    def fetch_all(self) -> List[Station]:
        """
        Fetch every station the source knows about.

        Raises:
            SourceUnavailable: the source could not be read or parsed
        """

    @staticmethod
    def normalize_pollutants(raw: Dict) -> Dict[str, float]:
        """
        Map upstream pollutant names to reading keys, dropping unknown
        pollutants and values that are missing or not numeric.
        """
        pollutants = {}
        for name, value in (raw or {}).items():
            key = POLLUTANT_ALIASES.get(str(name).strip().lower())
            if not key or value is None:
                continue
            try:
                pollutants[key] = float(value)
            except (TypeError, ValueError):
                continue
        return pollutants
