"""
Optional narrative insight generation.

Generators never raise: any failure degrades to a fixed fallback string so
the rule-based advisory is always delivered.
"""
import logging
from typing import Dict

import requests
from django.conf import settings

from apps.core.exceptions import InsightUnavailable
from apps.core.types import AQIReading, HealthProfile, RiskAssessment

logger = logging.getLogger(__name__)

INSIGHT_DISABLED = "AI Insight unavailable. Showing standard system recommendations."
INSIGHT_MISSING_KEY = "AI Insight unavailable (Missing API Key)."
INSIGHT_FALLBACK = (
    "AI Insight unavailable (Network/API Error). Showing standard system recommendations."
)
INSIGHT_EMPTY = "Unable to generate AI insight at this time."


class NullInsightGenerator:
    """Insight generator used when narrative augmentation is switched off."""

    def generate(self, profile: HealthProfile, reading: AQIReading, risk: RiskAssessment) -> str:
        return INSIGHT_DISABLED


class GeminiInsightGenerator:
    """
    Requests a short personalised insight from the Gemini ``generateContent``
    REST endpoint.
    """

    def __init__(self, api_key: str = None, api_url: str = None, timeout: int = None,
                 session: requests.Session = None):
        aq_settings = settings.AIR_QUALITY_SETTINGS
        self.api_key = api_key if api_key is not None else settings.API_KEYS.get('GEMINI', '')
        self.api_url = api_url or aq_settings.get('GEMINI_API_URL')
        self.timeout = timeout or aq_settings.get('INSIGHT_TIMEOUT', 15)
        self.session = session or requests.Session()

    def generate(self, profile: HealthProfile, reading: AQIReading, risk: RiskAssessment) -> str:
        if not self.api_key:
            return INSIGHT_MISSING_KEY

        try:
            return self._request_insight(self.build_prompt(profile, reading, risk))
        except InsightUnavailable as e:
            logger.error(f"Gemini insight failed: {e}")
            return INSIGHT_FALLBACK
        except Exception as e:
            logger.error(f"Unexpected error generating insight: {e}", exc_info=True)
            return INSIGHT_FALLBACK

    def _request_insight(self, prompt: str) -> str:
        payload = {'contents': [{'parts': [{'text': prompt}]}]}

        try:
            response = self.session.post(
                self.api_url,
                params={'key': self.api_key},
                json=payload,
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            raise InsightUnavailable(str(e)) from e

        return self._extract_text(data)

    @staticmethod
    def _extract_text(data: Dict) -> str:
        candidates = (data or {}).get('candidates') or []
        if not candidates:
            return INSIGHT_EMPTY

        try:
            return candidates[0]['content']['parts'][0]['text']
        except (KeyError, IndexError, TypeError) as e:
            raise InsightUnavailable(f"unexpected response shape: {e}") from e

    @staticmethod
    def build_prompt(profile: HealthProfile, reading: AQIReading, risk: RiskAssessment) -> str:
        conditions = ', '.join(profile.all_conditions()) or 'None'
        symptoms = ', '.join(sorted(symptom.value for symptom in profile.symptoms)) or 'None'

        return f"""
Act as a medical health expert for air quality.
Analyze this patient profile and current air quality data.

PATIENT PROFILE:
- Age: {profile.age}
- Gender: {profile.gender or 'Not specified'}
- Conditions: {conditions}
- Symptoms: {symptoms}
- Activity Level: {profile.activity_level.value}
- Outdoor Hours per Day: {profile.outdoor_hours_per_day}

CURRENT AIR QUALITY:
- AQI: {reading.aqi_value} ({reading.aqi_category.value})
- Main Pollutants: PM2.5 ({reading.pollutant('pm25')}), PM10 ({reading.pollutant('pm10')}), NO2 ({reading.pollutant('no2')})
- Risk Level: {risk.level.value}

TASK:
Provide a concise, 3-sentence personalized health insight.
1. Explain specifically why current conditions are risky for this specific person based on their conditions.
2. Give one specific, non-obvious protective tip.
3. Tone: Professional, medically sound, urgent if risk is High/Severe.
Do not recommend prescription drugs.
""".strip()
