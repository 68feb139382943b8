"""
Tests for the rule-based advisory engine.
"""
import pytest

from apps.advisory.engine import (
    AIR_PURIFIER,
    CARDIAC_ALERT,
    HYDRATION,
    LIMIT_EXPOSURE,
    MAINTAIN_IMMUNITY,
    MEDICATION_READINESS,
    PLAN_AFTERNOON_WINDOW,
    PLAN_DELAY,
    PLAN_SEVERE,
    PLAN_VERY_HIGH,
    SAFE_FOR_ACTIVITY,
    STAY_INDOORS,
    URGENT_WARNING,
    WEAR_MASK,
    AdvisoryGenerator,
)
from apps.core.types import HealthProfile, RiskAssessment, RiskLevel

from conftest import make_reading


@pytest.fixture
def generator():
    return AdvisoryGenerator()


class TestScenarios:

    def test_healthy_adult_clean_air(self, generator, healthy_adult):
        advisory = generator.generate(healthy_adult, make_reading(85, pm25=30), 'afternoon')

        assert advisory.risk.level == RiskLevel.LOW
        assert advisory.recommendations == (MAINTAIN_IMMUNITY, SAFE_FOR_ACTIVITY)
        assert advisory.health_impacts == ()
        assert advisory.warnings == ()
        assert advisory.activity_plan == PLAN_AFTERNOON_WINDOW

    def test_healthy_adult_polluted_morning(self, generator, healthy_adult):
        advisory = generator.generate(healthy_adult, make_reading(182, pm25=88), 'morning')

        assert advisory.risk.level == RiskLevel.LOW
        assert advisory.recommendations == (WEAR_MASK, MAINTAIN_IMMUNITY)
        assert advisory.health_impacts == (
            "Prolonged exposure to fine particles may cause throat irritation and coughing.",
        )
        assert advisory.activity_plan == PLAN_DELAY

    def test_severe_risk_with_breathlessness(self, generator, asthmatic_senior):
        reading = make_reading(400, pm25=200, no2=90)
        advisory = generator.generate(asthmatic_senior, reading, 'evening')

        assert advisory.risk.level == RiskLevel.SEVERE
        assert advisory.recommendations == (
            STAY_INDOORS, WEAR_MASK, AIR_PURIFIER, MEDICATION_READINESS,
        )
        assert advisory.warnings == (URGENT_WARNING,)
        assert advisory.health_impacts == (
            "High PM2.5 may trigger asthma attacks and respiratory inflammation.",
            "Elevated NO2 levels significantly aggravate bronchial symptoms.",
        )
        assert advisory.activity_plan == PLAN_SEVERE

    def test_very_high_risk_has_no_urgent_warning(self, generator):
        # Scores 67 (Very High), so the Severe-only urgent warning stays off
        profile = HealthProfile.from_codes(
            age=70, respiratory=['asthma'], symptoms=['shortness-breath']
        )
        advisory = generator.generate(profile, make_reading(320, pm25=150), 'morning')

        assert advisory.risk.level == RiskLevel.VERY_HIGH
        assert STAY_INDOORS in advisory.recommendations
        assert advisory.warnings == ()
        assert advisory.activity_plan == PLAN_VERY_HIGH

    def test_cardiac_patient(self, generator):
        profile = HealthProfile.from_codes(age=50, cardiovascular=['heart-disease'])
        advisory = generator.generate(profile, make_reading(320, pm25=150), 'afternoon')

        # 32 * 1.3 = 41.6
        assert advisory.risk.level == RiskLevel.HIGH
        assert advisory.recommendations == (LIMIT_EXPOSURE, WEAR_MASK, AIR_PURIFIER)
        assert advisory.warnings == (CARDIAC_ALERT,)
        assert advisory.health_impacts == (
            "Fine particles can enter the bloodstream, increasing cardiac stress.",
        )
        assert advisory.activity_plan == PLAN_AFTERNOON_WINDOW

    def test_sensitive_child_gets_mask_below_threshold(self, generator):
        profile = HealthProfile.from_codes(age=3, symptoms=['cough'])
        advisory = generator.generate(profile, make_reading(150, pm25=55), 'afternoon')

        # 15 * 1.5 = 22.5
        assert advisory.risk.level == RiskLevel.MODERATE
        assert advisory.recommendations == (WEAR_MASK, HYDRATION)


class TestHealthImpacts:

    def test_no2_only_affects_asthma_or_bronchitis(self, healthy_adult):
        reading = make_reading(150, no2=120)
        bronchitis = HealthProfile.from_codes(age=30, respiratory=['bronchitis'])
        allergies = HealthProfile.from_codes(age=30, respiratory=['allergies'])

        assert AdvisoryGenerator.health_impacts(healthy_adult, reading) == []
        assert AdvisoryGenerator.health_impacts(allergies, reading) == []
        assert AdvisoryGenerator.health_impacts(bronchitis, reading) == [
            "Elevated NO2 levels significantly aggravate bronchial symptoms."
        ]

    def test_ozone_affects_everyone(self, healthy_adult):
        impacts = AdvisoryGenerator.health_impacts(healthy_adult, make_reading(120, o3=140))
        assert impacts == [
            "Ground-level ozone may cause chest pain, coughing, and throat irritation."
        ]

    def test_cough_at_poor_air(self):
        profile = HealthProfile.from_codes(age=30, symptoms=['cough'])

        assert AdvisoryGenerator.health_impacts(profile, make_reading(200)) == []
        assert AdvisoryGenerator.health_impacts(profile, make_reading(201)) == [
            "Current pollution levels are likely exacerbating your cough."
        ]

    def test_thresholds_are_strict(self, healthy_adult):
        reading = make_reading(150, pm25=60, no2=80, o3=100)
        assert AdvisoryGenerator.health_impacts(healthy_adult, reading) == []


class TestGenerate:

    def test_repeatable_apart_from_timestamp(self, generator, asthmatic_senior):
        reading = make_reading(276, pm25=131, pm10=276)

        first = generator.generate(asthmatic_senior, reading, 'morning').to_dict()
        second = generator.generate(asthmatic_senior, reading, 'morning').to_dict()
        first.pop('generated_at')
        second.pop('generated_at')

        assert first == second

    def test_uses_precomputed_risk(self, generator, healthy_adult):
        risk = RiskAssessment(score=90, level=RiskLevel.SEVERE, summary='given')
        advisory = generator.generate(healthy_adult, make_reading(50), 'afternoon', risk=risk)

        assert advisory.risk is risk
        assert advisory.activity_plan == PLAN_SEVERE
        assert STAY_INDOORS in advisory.recommendations

    def test_serialised_recommendation_shape(self, generator, healthy_adult):
        data = generator.generate(healthy_adult, make_reading(85), 'afternoon').to_dict()

        assert data['recommendations'][0] == {
            'type': 'lifestyle',
            'icon': '🥗',
            'title': 'Maintain Immunity',
            'text': MAINTAIN_IMMUNITY.text,
        }
        assert data['insight'] is None
