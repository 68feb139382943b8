"""
India NAQI calculations: per-pollutant sub-indices, overall AQI and categories.
"""
from .constants import (
    AQI_THRESHOLDS,
    BAND_ORDER,
    INDIA_AQI_CATEGORIES,
    POLLUTANT_LIMITS,
    POLLUTANTS,
)
from .utils import round_half_up

# AQI index range covered by each band, in BAND_ORDER
INDEX_BANDS = [(0, 50), (51, 100), (101, 200), (201, 300), (301, 400), (401, 500)]

MAX_AQI = 500


def _limit_key(pollutant):
    """Map 'pm25', 'PM2.5' or 'PM25' to the POLLUTANT_LIMITS key."""
    key = str(pollutant).lower().replace('.', '')
    info = POLLUTANTS.get(key)
    return info['limit_key'] if info else None


def get_breakpoints(pollutant):
    """
    Build the breakpoint table for a pollutant.

    Returns:
        list of (c_low, c_high, i_low, i_high) tuples, or [] when the
        pollutant has no configured limits
    """
    limits = POLLUTANT_LIMITS.get(_limit_key(pollutant))
    if not limits:
        return []

    breakpoints = []
    c_low = 0
    for band, (i_low, i_high) in zip(BAND_ORDER, INDEX_BANDS):
        c_high = limits[band]
        breakpoints.append((c_low, c_high, i_low, i_high))
        c_low = c_high
    return breakpoints


def calculate_sub_index(pollutant, concentration):
    """
    Convert a pollutant concentration to its AQI sub-index.

    Bands are checked in order, so a concentration equal to a band's upper
    limit maps to that band's upper index. Concentrations above the SEVERE
    limit return 500.

    Args:
        pollutant: pollutant code ('pm25', 'PM2.5', 'PM25', ...)
        concentration: µg/m³ (mg/m³ for CO)

    Returns:
        int: sub-index in 0-500, 0 for unknown pollutants
    """
    breakpoints = get_breakpoints(pollutant)
    if not breakpoints or concentration is None:
        return 0

    concentration = float(concentration)
    if concentration <= 0:
        return 0

    for c_low, c_high, i_low, i_high in breakpoints:
        if c_low <= concentration <= c_high:
            aqi = (i_high - i_low) / (c_high - c_low) * (concentration - c_low) + i_low
            return round_half_up(aqi)

    return MAX_AQI


def calculate_overall_aqi(pollutants):
    """
    Overall AQI is the worst sub-index among measured pollutants.

    Args:
        pollutants: dict of reading key -> concentration; missing, None and
            zero values count as not measured

    Returns:
        tuple: (aqi, dominant pollutant display name or None)
    """
    best_aqi = 0
    dominant = None

    for key, info in POLLUTANTS.items():
        value = pollutants.get(key)
        if not value:
            continue
        sub_index = calculate_sub_index(key, value)
        if dominant is None or sub_index > best_aqi:
            best_aqi = sub_index
            dominant = info['name']

    return best_aqi, dominant


def get_aqi_category(aqi):
    """Category name for an AQI value."""
    if aqi <= AQI_THRESHOLDS['GOOD']:
        return 'Good'
    if aqi <= AQI_THRESHOLDS['SATISFACTORY']:
        return 'Satisfactory'
    if aqi <= AQI_THRESHOLDS['MODERATE']:
        return 'Moderate'
    if aqi <= AQI_THRESHOLDS['POOR']:
        return 'Poor'
    if aqi <= AQI_THRESHOLDS['VERY_POOR']:
        return 'Very Poor'
    return 'Severe'


def get_category_info(aqi):
    """Full category record (colour, health message) for an AQI value."""
    name = get_aqi_category(aqi)
    for category in INDIA_AQI_CATEGORIES:
        if category['category'] == name:
            return category
    return None


def get_aqi_color_class(aqi):
    """CSS class used by presentation layers for an AQI value."""
    return get_category_info(aqi)['color_class']


def get_pollutant_category(pollutant, value):
    """Category of a single pollutant concentration, 'Unknown' if unsupported."""
    limits = POLLUTANT_LIMITS.get(_limit_key(pollutant))
    if not limits:
        return 'Unknown'

    labels = ['Good', 'Satisfactory', 'Moderate', 'Poor', 'Very Poor']
    for band, label in zip(BAND_ORDER, labels):
        if value <= limits[band]:
            return label
    return 'Severe'
