"""
URL routing for API endpoints.
"""
from django.urls import path
from .views import (
    AdvisoryView,
    AirQualityView,
    HealthCheckView,
    NearbyStationsView,
    PincodeView,
    StationSearchView,
)

app_name = 'api'

urlpatterns = [
    path('air-quality/', AirQualityView.as_view(), name='air-quality'),
    path('advisory/', AdvisoryView.as_view(), name='advisory'),
    path('stations/', NearbyStationsView.as_view(), name='stations'),
    path('stations/search/', StationSearchView.as_view(), name='station-search'),
    path('location/pincode/', PincodeView.as_view(), name='pincode'),
    path('health/', HealthCheckView.as_view(), name='health'),
]
