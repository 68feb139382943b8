"""
Custom exception handlers for API.
"""
from rest_framework.views import exception_handler
from rest_framework.response import Response
from rest_framework import status
import logging

from apps.core.exceptions import InvalidCoordinate, NoDataAvailable, UnknownHealthCode

logger = logging.getLogger(__name__)

NO_DATA_MESSAGE = 'No valid air quality data found for this location. Please try again in a few minutes.'


def custom_exception_handler(exc, context):
    """
    Custom exception handler for DRF.
    Logs errors and provides consistent error responses.
    """
    if isinstance(exc, (InvalidCoordinate, UnknownHealthCode)):
        logger.info(f"Rejected request: {exc}")
        return Response(
            {'error': str(exc), 'code': status.HTTP_400_BAD_REQUEST},
            status=status.HTTP_400_BAD_REQUEST
        )

    if isinstance(exc, NoDataAvailable):
        logger.warning(f"No data available: {exc} (sources tried: {exc.sources_tried})")
        return Response(
            {'error': NO_DATA_MESSAGE, 'code': status.HTTP_503_SERVICE_UNAVAILABLE},
            status=status.HTTP_503_SERVICE_UNAVAILABLE
        )

    # Call REST framework's default exception handler first
    response = exception_handler(exc, context)

    # If DRF didn't handle it, create custom response
    if response is None:
        logger.error(
            f"API Exception: {exc}",
            exc_info=True,
            extra={'context': context}
        )
        return Response(
            {
                'error': 'Internal server error',
                'code': status.HTTP_500_INTERNAL_SERVER_ERROR
            },
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    # Customize error response format
    if isinstance(response.data, dict):
        error_data = {
            'error': response.data.get('detail', response.data),
            'code': response.status_code
        }
        response.data = error_data

    return response
