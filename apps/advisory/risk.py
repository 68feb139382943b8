"""
Personal health risk scoring from an AQI reading and a health profile.
"""
from apps.core.types import (
    AQIReading,
    HealthProfile,
    OtherCondition,
    RiskAssessment,
    RiskLevel,
    Symptom,
)
from apps.core.utils import round_half_up

# Pollution alone can contribute at most this many points
MAX_BASE_SCORE = 50
MAX_SCORE = 100

# (exclusive upper bound, level, summary), checked in order
RISK_LEVELS = [
    (20, RiskLevel.LOW, "Air quality is acceptable for you. Enjoy your day!"),
    (40, RiskLevel.MODERATE, "Minor health risk. Sensitive individuals should be cautious."),
    (60, RiskLevel.HIGH, "Significant health risk. Limit outdoor exposure."),
    (80, RiskLevel.VERY_HIGH, "Dangerous conditions. Avoid outdoor activities."),
]
SEVERE_SUMMARY = "CRITICAL HEALTH RISK. Stay indoors and take protective measures immediately."


class RiskAssessor:
    """
    Scores risk on a 0-100 scale.

    The base score is AQI / 10, capped at 50. It is scaled by a vulnerability
    multiplier that starts at 1.0 and grows with every applicable factor; the
    factors are cumulative.
    """

    def assess(self, profile: HealthProfile, reading: AQIReading) -> RiskAssessment:
        base_score = min(reading.aqi_value / 10, MAX_BASE_SCORE)
        multiplier = self.vulnerability_multiplier(profile)

        score = min(base_score * multiplier, MAX_SCORE)
        level, summary = self.classify(score)

        return RiskAssessment(score=round_half_up(score), level=level, summary=summary)

    @staticmethod
    def vulnerability_multiplier(profile: HealthProfile) -> float:
        multiplier = 1.0

        # Age
        if profile.age < 10 or profile.age > 65:
            multiplier += 0.2
        if profile.age < 5 or profile.age > 75:
            multiplier += 0.1

        # Conditions
        if profile.has_respiratory_condition:
            multiplier += 0.4
        if profile.has_cardiovascular_condition:
            multiplier += 0.3
        if OtherCondition.PREGNANT in profile.other_conditions:
            multiplier += 0.3
        if OtherCondition.DIABETES in profile.other_conditions:
            multiplier += 0.1

        # Symptoms
        if profile.symptoms:
            multiplier += 0.2
        if profile.has_symptom(Symptom.SHORTNESS_BREATH, Symptom.CHEST_TIGHTNESS):
            multiplier += 0.3

        return multiplier

    @staticmethod
    def classify(score: float):
        """Map an (unrounded) score to its risk level and summary."""
        for upper_bound, level, summary in RISK_LEVELS:
            if score < upper_bound:
                return level, summary
        return RiskLevel.SEVERE, SEVERE_SUMMARY
