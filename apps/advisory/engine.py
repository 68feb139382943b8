"""
Advisory engine: turns a risk assessment into health impacts,
recommendations, warnings and an activity plan.
"""
import logging
from typing import List, Optional

from django.utils import timezone

from apps.core.types import (
    Advisory,
    AQIReading,
    HealthProfile,
    Recommendation,
    RespiratoryCondition,
    RiskAssessment,
    RiskLevel,
    Symptom,
)

from .risk import RiskAssessor

logger = logging.getLogger(__name__)

STAY_INDOORS = Recommendation(
    'activity', '🏠', 'Stay Indoors',
    'Strictly avoid outdoor activities. Keep windows and doors closed.',
)
LIMIT_EXPOSURE = Recommendation(
    'activity', '🚶', 'Limit Exposure',
    'Reduce prolonged outdoor exertion. Take breaks if effective.',
)
WEAR_MASK = Recommendation(
    'protection', '😷', 'Wear N95/N99 Mask',
    'Cloth masks are ineffective against PM2.5. Use a fitted N95/N99 respirator if you must go out.',
)
AIR_PURIFIER = Recommendation(
    'environment', '🌬️', 'Use Air Purifier',
    'Run HEPA air purifier on High/Turbo mode given current PM2.5 levels.',
)
MEDICATION_READINESS = Recommendation(
    'health', '💊', 'Medication Readiness',
    'Keep your rescue inhaler/medication accessible. Monitor peak flow if applicable.',
)
HYDRATION = Recommendation(
    'relief', '💧', 'Hydration & Steam',
    'Stay hydrated to keep airways moist. Steam inhalation can help soothe throat irritation.',
)
MAINTAIN_IMMUNITY = Recommendation(
    'lifestyle', '🥗', 'Maintain Immunity',
    'Healthy individuals should focus on antioxidant-rich diet and hydration '
    'to mitigate general pollution effects.',
)
SAFE_FOR_ACTIVITY = Recommendation(
    'activity', '🏃', 'Safe for Activity',
    'Great conditions for outdoor exercise! Enjoy the relatively clean air.',
)

URGENT_WARNING = (
    "URGENT: Your symptoms combined with severe AQI indicate high risk. "
    "Consult a doctor immediately if breathing becomes difficult."
)
CARDIAC_ALERT = (
    "Cardiac Alert: Extremely high pollution triggers inflammation. "
    "Avoid ALL physical exertion."
)

PLAN_SEVERE = (
    "No safe time for outdoor exercise today. "
    "Perform light indoor activities like yoga or stretching."
)
PLAN_VERY_HIGH = (
    "Avoid outdoor exercise. Walking is safe only with N95 mask for short duration (<30 mins)."
)
PLAN_DELAY = (
    "AQI is often worst in early morning. Delay outdoor activities until "
    "afternoon (12 PM - 4 PM) when levels may drop."
)
PLAN_AFTERNOON_WINDOW = (
    "Best time for ventilation or short walks is between 2 PM and 4 PM "
    "when PM levels are typically lowest."
)

HIGH_RISK_LEVELS = (RiskLevel.SEVERE, RiskLevel.VERY_HIGH)


class AdvisoryGenerator:
    """
    Builds an ``Advisory`` from a profile and a reading.

    Output depends only on the inputs plus the caller-supplied time of day;
    the clock is read only to stamp ``generated_at``.
    """

    def __init__(self, risk_assessor: RiskAssessor = None):
        self.risk_assessor = risk_assessor or RiskAssessor()

    def generate(
        self,
        profile: HealthProfile,
        reading: AQIReading,
        time_of_day: str,
        risk: Optional[RiskAssessment] = None,
    ) -> Advisory:
        """
        Generate a complete advisory.

        Args:
            profile: user health profile
            reading: current air quality
            time_of_day: 'morning', 'afternoon', 'evening' or 'night'
            risk: precomputed assessment; computed when omitted

        Returns:
            Advisory
        """
        risk = risk or self.risk_assessor.assess(profile, reading)
        logger.debug(f"Generating advisory for risk {risk.level.value} ({risk.score})")

        return Advisory(
            risk=risk,
            health_impacts=tuple(self.health_impacts(profile, reading)),
            recommendations=tuple(self.recommendations(profile, reading, risk)),
            warnings=tuple(self.warnings(profile, reading, risk)),
            activity_plan=self.activity_plan(reading, risk, time_of_day),
            generated_at=timezone.now(),
        )

    @staticmethod
    def health_impacts(profile: HealthProfile, reading: AQIReading) -> List[str]:
        impacts = []
        respiratory = profile.respiratory_conditions

        if reading.pollutant('pm25') > 60:
            if RespiratoryCondition.ASTHMA in respiratory:
                impacts.append("High PM2.5 may trigger asthma attacks and respiratory inflammation.")
            elif profile.has_cardiovascular_condition:
                impacts.append("Fine particles can enter the bloodstream, increasing cardiac stress.")
            else:
                impacts.append(
                    "Prolonged exposure to fine particles may cause throat irritation and coughing."
                )

        if reading.pollutant('no2') > 80:
            if RespiratoryCondition.ASTHMA in respiratory or RespiratoryCondition.BRONCHITIS in respiratory:
                impacts.append("Elevated NO2 levels significantly aggravate bronchial symptoms.")

        if reading.pollutant('o3') > 100:
            impacts.append("Ground-level ozone may cause chest pain, coughing, and throat irritation.")

        if profile.has_symptom(Symptom.COUGH) and reading.aqi_value > 200:
            impacts.append("Current pollution levels are likely exacerbating your cough.")

        return impacts

    @staticmethod
    def recommendations(
        profile: HealthProfile,
        reading: AQIReading,
        risk: RiskAssessment,
    ) -> List[Recommendation]:
        recommendations = []
        aqi = reading.aqi_value

        # Outdoor activity
        if risk.level in HIGH_RISK_LEVELS:
            recommendations.append(STAY_INDOORS)
        elif risk.level == RiskLevel.HIGH:
            recommendations.append(LIMIT_EXPOSURE)

        # Protection
        if aqi > 150 or (risk.level != RiskLevel.LOW and profile.is_sensitive_group):
            recommendations.append(WEAR_MASK)

        # Indoor air
        if aqi > 200:
            recommendations.append(AIR_PURIFIER)

        # Health management, non-prescription
        if profile.has_respiratory_condition:
            recommendations.append(MEDICATION_READINESS)

        if profile.has_symptom(Symptom.COUGH, Symptom.THROAT_IRRITATION):
            recommendations.append(HYDRATION)

        # General health for users without conditions
        if not profile.has_conditions_or_symptoms and risk.level not in HIGH_RISK_LEVELS:
            recommendations.append(MAINTAIN_IMMUNITY)
            if aqi < 100:
                recommendations.append(SAFE_FOR_ACTIVITY)

        return recommendations

    @staticmethod
    def warnings(profile: HealthProfile, reading: AQIReading, risk: RiskAssessment) -> List[str]:
        warnings = []

        if risk.level == RiskLevel.SEVERE and profile.has_symptom(
            Symptom.SHORTNESS_BREATH, Symptom.CHEST_TIGHTNESS
        ):
            warnings.append(URGENT_WARNING)

        if profile.has_cardiovascular_condition and reading.aqi_value > 300:
            warnings.append(CARDIAC_ALERT)

        return warnings

    @staticmethod
    def activity_plan(reading: AQIReading, risk: RiskAssessment, time_of_day: str) -> str:
        if risk.level == RiskLevel.SEVERE:
            return PLAN_SEVERE
        if risk.level == RiskLevel.VERY_HIGH:
            return PLAN_VERY_HIGH
        if time_of_day == 'morning' and reading.aqi_value > 150:
            return PLAN_DELAY
        return PLAN_AFTERNOON_WINDOW
