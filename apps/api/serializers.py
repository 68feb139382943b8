"""
DRF serializers for API requests and responses.
"""
from rest_framework import serializers

from apps.core.exceptions import UnknownHealthCode
from apps.core.types import HealthProfile


class CoordinateQuerySerializer(serializers.Serializer):
    """Query parameters carrying a coordinate."""
    lat = serializers.FloatField()
    lon = serializers.FloatField()
    refresh = serializers.BooleanField(required=False, default=False)


class NearbyStationsQuerySerializer(CoordinateQuerySerializer):
    limit = serializers.IntegerField(required=False, min_value=1, max_value=500)


class HealthProfileSerializer(serializers.Serializer):
    """Health profile as submitted by the profile form."""
    age = serializers.IntegerField(min_value=0, max_value=130)
    gender = serializers.CharField(required=False, allow_blank=True, default='')
    respiratory = serializers.ListField(child=serializers.CharField(), required=False, default=list)
    cardiovascular = serializers.ListField(child=serializers.CharField(), required=False, default=list)
    other = serializers.ListField(child=serializers.CharField(), required=False, default=list)
    symptoms = serializers.ListField(child=serializers.CharField(), required=False, default=list)
    outdoor_hours = serializers.FloatField(required=False, min_value=0, max_value=24, default=0)
    activity_level = serializers.CharField(required=False, default='moderate')

    def validate(self, attrs):
        try:
            attrs['profile'] = HealthProfile.from_codes(
                age=attrs['age'],
                gender=attrs.get('gender', ''),
                respiratory=attrs.get('respiratory', []),
                cardiovascular=attrs.get('cardiovascular', []),
                other=attrs.get('other', []),
                symptoms=attrs.get('symptoms', []),
                outdoor_hours_per_day=attrs.get('outdoor_hours', 0),
                activity_level=attrs.get('activity_level', 'moderate'),
                strict=True,
            )
        except UnknownHealthCode as e:
            raise serializers.ValidationError(str(e))
        return attrs


class AdvisoryRequestSerializer(serializers.Serializer):
    """Body of an advisory request."""
    TIME_OF_DAY_CHOICES = ['morning', 'afternoon', 'evening', 'night']

    lat = serializers.FloatField()
    lon = serializers.FloatField()
    profile = HealthProfileSerializer()
    time_of_day = serializers.ChoiceField(choices=TIME_OF_DAY_CHOICES, required=False)
    include_insight = serializers.BooleanField(required=False, default=False)
    refresh = serializers.BooleanField(required=False, default=False)


class PollutantSerializer(serializers.Serializer):
    """Serializer for pollutant concentrations."""
    pm25 = serializers.FloatField(required=False, allow_null=True)
    pm10 = serializers.FloatField(required=False, allow_null=True)
    o3 = serializers.FloatField(required=False, allow_null=True)
    no2 = serializers.FloatField(required=False, allow_null=True)
    so2 = serializers.FloatField(required=False, allow_null=True)
    co = serializers.FloatField(required=False, allow_null=True)


class CurrentAirQualitySerializer(serializers.Serializer):
    """Serializer for current air quality data."""
    aqi = serializers.IntegerField()
    category = serializers.CharField()
    dominant_pollutant = serializers.CharField()
    pollutants = PollutantSerializer()
    station = serializers.CharField()
    distance_km = serializers.FloatField()
    source = serializers.CharField()
    measured_at = serializers.DateTimeField()


class LocationSerializer(serializers.Serializer):
    """Serializer for location information."""
    lat = serializers.FloatField()
    lon = serializers.FloatField()
    warning = serializers.CharField(allow_null=True, required=False)


class AirQualityResponseSerializer(serializers.Serializer):
    """Main response serializer for air quality endpoint."""
    location = LocationSerializer()
    current = CurrentAirQualitySerializer()
    health_advice = serializers.CharField(required=False)
    color_class = serializers.CharField(required=False)
