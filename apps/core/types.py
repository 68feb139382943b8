"""
Value types shared by the resolver, gateway and advisory engine.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple

from .aqi import MAX_AQI
from .constants import POLLUTANTS
from .exceptions import UnknownHealthCode
from .utils import parse_timestamp, round_half_up

logger = logging.getLogger(__name__)


class AQICategory(str, Enum):
    GOOD = 'Good'
    SATISFACTORY = 'Satisfactory'
    MODERATE = 'Moderate'
    POOR = 'Poor'
    VERY_POOR = 'Very Poor'
    SEVERE = 'Severe'


class RiskLevel(str, Enum):
    LOW = 'Low'
    MODERATE = 'Moderate'
    HIGH = 'High'
    VERY_HIGH = 'Very High'
    SEVERE = 'Severe'


class RespiratoryCondition(str, Enum):
    ASTHMA = 'asthma'
    COPD = 'copd'
    BRONCHITIS = 'bronchitis'
    ALLERGIES = 'allergies'
    SINUSITIS = 'sinusitis'


class CardiovascularCondition(str, Enum):
    HYPERTENSION = 'hypertension'
    HEART_DISEASE = 'heart-disease'
    ARRHYTHMIA = 'arrhythmia'
    STROKE_HISTORY = 'stroke-history'


class OtherCondition(str, Enum):
    PREGNANT = 'pregnant'
    DIABETES = 'diabetes'
    IMMUNOCOMPROMISED = 'immunocompromised'
    ELDERLY_CARE = 'elderly-care'


class Symptom(str, Enum):
    COUGH = 'cough'
    SHORTNESS_BREATH = 'shortness-breath'
    CHEST_TIGHTNESS = 'chest-tightness'
    THROAT_IRRITATION = 'throat-irritation'
    EYE_IRRITATION = 'eye-irritation'
    HEADACHE = 'headache'
    FATIGUE = 'fatigue'
    WHEEZING = 'wheezing'


class ActivityLevel(str, Enum):
    SEDENTARY = 'sedentary'
    LIGHT = 'light'
    MODERATE = 'moderate'
    ACTIVE = 'active'
    VERY_ACTIVE = 'very-active'


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float

    def cache_key(self, precision: int = 4) -> str:
        return f"aqi_{self.latitude:.{precision}f}_{self.longitude:.{precision}f}"


@dataclass(frozen=True)
class Station:
    """A monitoring station as reported by one of the station sources."""

    id: str
    coordinate: Coordinate
    pollutants: Dict[str, float] = field(default_factory=dict)
    authoritative_aqi: Optional[int] = None
    last_updated: Optional[datetime] = None

    @property
    def pm25(self) -> Optional[float]:
        return self.pollutants.get('pm25')

    @property
    def pm10(self) -> Optional[float]:
        return self.pollutants.get('pm10')

    @property
    def effective_aqi(self) -> float:
        """
        AQI used for station selection.

        The source-provided AQI when it is positive, otherwise the larger of
        the raw PM2.5 and PM10 concentrations. The proxy is deliberately coarse
        and matches what the upstream feeds publish; 0 means "no data".
        """
        if self.authoritative_aqi and self.authoritative_aqi > 0:
            return self.authoritative_aqi
        return max(self.pm25 or 0, self.pm10 or 0)

    @property
    def reported_aqi(self) -> int:
        """Effective AQI rounded half-up and capped at the top of the scale."""
        return min(round_half_up(self.effective_aqi), MAX_AQI)

    @property
    def name(self) -> str:
        return self.id.split(',')[0].strip()

    @property
    def city(self) -> str:
        parts = self.id.split(',')
        if len(parts) < 2:
            return ''
        return parts[1].split(' - ')[0].strip()

    def to_dict(self, distance_km: Optional[float] = None) -> Dict:
        effective = self.effective_aqi
        data = {
            'id': self.id,
            'name': self.name,
            'city': self.city,
            'lat': self.coordinate.latitude,
            'lon': self.coordinate.longitude,
            'aqi': self.reported_aqi if effective > 0 else None,
            'pollutants': dict(self.pollutants),
            'last_updated': self.last_updated.isoformat() if self.last_updated else None,
        }
        if distance_km is not None:
            data['distance_km'] = round(distance_km, 2)
        return data


@dataclass(frozen=True)
class AQIReading:
    """Normalised air quality reading for a query coordinate."""

    aqi_value: int
    aqi_category: AQICategory
    dominant_pollutant: str
    pollutants: Dict[str, float]
    station_label: str
    distance_km: float
    source_name: str
    measured_at: datetime

    def pollutant(self, key: str) -> float:
        return self.pollutants.get(key, 0) or 0

    def to_dict(self) -> Dict:
        return {
            'aqi': self.aqi_value,
            'category': self.aqi_category.value,
            'dominant_pollutant': self.dominant_pollutant,
            'pollutants': dict(self.pollutants),
            'station': self.station_label,
            'distance_km': round(self.distance_km, 2),
            'source': self.source_name,
            'measured_at': self.measured_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'AQIReading':
        """Rebuild a reading produced by ``to_dict`` (used by the cache)."""
        return cls(
            aqi_value=int(data['aqi']),
            aqi_category=AQICategory(data['category']),
            dominant_pollutant=data['dominant_pollutant'],
            pollutants={key: data['pollutants'].get(key, 0) for key in POLLUTANTS},
            station_label=data['station'],
            distance_km=float(data['distance_km']),
            source_name=data['source'],
            measured_at=parse_timestamp(data['measured_at']),
        )


def _parse_codes(enum_cls, codes, field_name, strict):
    parsed = set()
    unknown = set()
    for code in codes or ():
        try:
            parsed.add(enum_cls(str(code).strip().lower()))
        except ValueError:
            unknown.add(str(code))

    if unknown:
        if strict:
            raise UnknownHealthCode(field_name, unknown)
        logger.warning(f"Ignoring unrecognised {field_name}: {sorted(unknown)}")

    return frozenset(parsed)


@dataclass(frozen=True)
class HealthProfile:
    """
    User health profile. Owned by the caller and never mutated by the core.

    Conditions and symptoms are closed enumerations; build profiles from raw
    form codes with ``from_codes``.
    """

    age: int
    gender: str = ''
    respiratory_conditions: FrozenSet[RespiratoryCondition] = frozenset()
    cardiovascular_conditions: FrozenSet[CardiovascularCondition] = frozenset()
    other_conditions: FrozenSet[OtherCondition] = frozenset()
    symptoms: FrozenSet[Symptom] = frozenset()
    outdoor_hours_per_day: float = 0.0
    activity_level: ActivityLevel = ActivityLevel.MODERATE

    @classmethod
    def from_codes(
        cls,
        age,
        gender: str = '',
        respiratory: Iterable[str] = (),
        cardiovascular: Iterable[str] = (),
        other: Iterable[str] = (),
        symptoms: Iterable[str] = (),
        outdoor_hours_per_day: float = 0.0,
        activity_level: str = 'moderate',
        strict: bool = True,
    ) -> 'HealthProfile':
        """
        Build a profile from free-form codes.

        Args:
            strict: raise ``UnknownHealthCode`` on unrecognised codes; when
                False they are dropped and logged

        Raises:
            UnknownHealthCode: unrecognised code in strict mode
        """
        try:
            activity = ActivityLevel(str(activity_level or 'moderate').strip().lower())
        except ValueError:
            if strict:
                raise UnknownHealthCode('activity level', [str(activity_level)])
            logger.warning(f"Ignoring unrecognised activity level: {activity_level}")
            activity = ActivityLevel.MODERATE

        return cls(
            age=int(age),
            gender=gender or '',
            respiratory_conditions=_parse_codes(
                RespiratoryCondition, respiratory, 'respiratory conditions', strict),
            cardiovascular_conditions=_parse_codes(
                CardiovascularCondition, cardiovascular, 'cardiovascular conditions', strict),
            other_conditions=_parse_codes(OtherCondition, other, 'other conditions', strict),
            symptoms=_parse_codes(Symptom, symptoms, 'symptoms', strict),
            outdoor_hours_per_day=float(outdoor_hours_per_day or 0),
            activity_level=activity,
        )

    @property
    def has_respiratory_condition(self) -> bool:
        return bool(self.respiratory_conditions)

    @property
    def has_cardiovascular_condition(self) -> bool:
        return bool(self.cardiovascular_conditions)

    @property
    def is_pregnant(self) -> bool:
        return OtherCondition.PREGNANT in self.other_conditions

    @property
    def has_conditions_or_symptoms(self) -> bool:
        return bool(
            self.respiratory_conditions or
            self.cardiovascular_conditions or
            self.other_conditions or
            self.symptoms
        )

    @property
    def is_sensitive_group(self) -> bool:
        """Children under 15, adults over 65 and pregnant users."""
        return self.age < 15 or self.age > 65 or self.is_pregnant

    def has_symptom(self, *symptoms: Symptom) -> bool:
        return any(symptom in self.symptoms for symptom in symptoms)

    def all_conditions(self) -> List[str]:
        codes = [
            *self.respiratory_conditions,
            *self.cardiovascular_conditions,
            *self.other_conditions,
        ]
        return sorted(code.value for code in codes)


@dataclass(frozen=True)
class RiskAssessment:
    score: int
    level: RiskLevel
    summary: str

    def to_dict(self) -> Dict:
        return {'score': self.score, 'level': self.level.value, 'summary': self.summary}


@dataclass(frozen=True)
class Recommendation:
    category: str
    icon: str
    title: str
    text: str

    def to_dict(self) -> Dict:
        return {'type': self.category, 'icon': self.icon, 'title': self.title, 'text': self.text}


@dataclass(frozen=True)
class Advisory:
    risk: RiskAssessment
    health_impacts: Tuple[str, ...]
    recommendations: Tuple[Recommendation, ...]
    warnings: Tuple[str, ...]
    activity_plan: str
    generated_at: datetime
    insight: Optional[str] = None

    def with_insight(self, insight: str) -> 'Advisory':
        return replace(self, insight=insight)

    def to_dict(self) -> Dict:
        return {
            'risk': self.risk.to_dict(),
            'health_impacts': list(self.health_impacts),
            'recommendations': [rec.to_dict() for rec in self.recommendations],
            'warnings': list(self.warnings),
            'activity_plan': self.activity_plan,
            'generated_at': self.generated_at.isoformat(),
            'insight': self.insight,
        }
