"""
API views for air quality and health advisory endpoints.
"""
import logging

from django.utils import timezone
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.adapters.models import AdapterStatus

from .orchestrator import AdvisoryOrchestrator
from .serializers import (
    AdvisoryRequestSerializer,
    AirQualityResponseSerializer,
    CoordinateQuerySerializer,
    NearbyStationsQuerySerializer,
)

logger = logging.getLogger(__name__)


class OrchestratorMixin:
    """Provides the orchestrator to views; tests replace ``get_orchestrator``."""

    def get_orchestrator(self):
        return AdvisoryOrchestrator()


class AirQualityView(OrchestratorMixin, APIView):
    """
    GET /api/v1/air-quality/?lat=28.63&lon=77.22

    Current reading from the nearest valid station.
    """

    def get(self, request):
        params = CoordinateQuerySerializer(data=request.query_params)
        params.is_valid(raise_exception=True)

        result = self.get_orchestrator().get_air_quality(
            params.validated_data['lat'],
            params.validated_data['lon'],
            use_cache=not params.validated_data['refresh'],
        )
        return Response(AirQualityResponseSerializer(result).data)


class AdvisoryView(OrchestratorMixin, APIView):
    """
    POST /api/v1/advisory/

    Body: {"lat": .., "lon": .., "profile": {"age": .., "respiratory": [..], ...},
           "time_of_day": "morning", "include_insight": false}
    """

    def post(self, request):
        serializer = AdvisoryRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = self.get_orchestrator().get_advisory(
            data['lat'],
            data['lon'],
            data['profile']['profile'],
            time_of_day=data.get('time_of_day'),
            include_insight=data['include_insight'],
            use_cache=not data['refresh'],
        )
        return Response(result)


class NearbyStationsView(OrchestratorMixin, APIView):
    """GET /api/v1/stations/?lat=..&lon=..&limit=.."""

    def get(self, request):
        params = NearbyStationsQuerySerializer(data=request.query_params)
        params.is_valid(raise_exception=True)

        result = self.get_orchestrator().nearby_stations(
            params.validated_data['lat'],
            params.validated_data['lon'],
            limit=params.validated_data.get('limit'),
        )
        return Response(result)


class StationSearchView(OrchestratorMixin, APIView):
    """GET /api/v1/stations/search/?q=ITO"""

    def get(self, request):
        query = request.query_params.get('q', '').strip()
        if not query:
            return Response(
                {'error': 'Query parameter q is required', 'code': status.HTTP_400_BAD_REQUEST},
                status=status.HTTP_400_BAD_REQUEST
            )

        station = self.get_orchestrator().find_station(query)
        if station is None:
            return Response(
                {'error': f'No station matching "{query}"', 'code': status.HTTP_404_NOT_FOUND},
                status=status.HTTP_404_NOT_FOUND
            )
        return Response(station)


class PincodeView(OrchestratorMixin, APIView):
    """GET /api/v1/location/pincode/?code=110001"""

    def get(self, request):
        code = request.query_params.get('code', '')
        result = self.get_orchestrator().geocode_pincode(code)
        if result is None:
            return Response(
                {'error': 'Pincode not found', 'code': status.HTTP_404_NOT_FOUND},
                status=status.HTTP_404_NOT_FOUND
            )
        return Response(result)


class HealthCheckView(APIView):
    """
    GET /api/v1/health/

    Service liveness plus per-source health.
    """

    def get(self, request):
        sources = [
            {
                'source': adapter.source,
                'is_active': adapter.is_active,
                'is_healthy': adapter.is_healthy,
                'success_rate': round(adapter.success_rate, 1),
                'last_success_at': adapter.last_success_at,
                'status_message': adapter.status_message or None,
            }
            for adapter in AdapterStatus.objects.all()
        ]

        return Response({
            'status': 'healthy',
            'timestamp': timezone.now(),
            'sources': sources,
        })
