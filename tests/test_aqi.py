"""
Tests for India NAQI sub-index and category calculations.
"""
import pytest

from apps.core.aqi import (
    calculate_overall_aqi,
    calculate_sub_index,
    get_aqi_category,
    get_aqi_color_class,
    get_breakpoints,
    get_pollutant_category,
)


class TestSubIndex:

    @pytest.mark.parametrize('pollutant,concentration,expected', [
        ('pm25', 15, 25),
        ('pm25', 30, 50),
        ('pm25', 31, 53),
        ('pm25', 46, 77),
        ('pm25', 380, 500),
        ('pm10', 100, 100),
        ('pm10', 176, 151),
        ('co', 1.0, 50),
        ('o3', 100, 100),
    ])
    def test_linear_interpolation(self, pollutant, concentration, expected):
        assert calculate_sub_index(pollutant, concentration) == expected

    def test_band_upper_limit_belongs_to_lower_band(self):
        # 60 is the SATISFACTORY upper limit for PM2.5
        assert calculate_sub_index('pm25', 60) == 100

    def test_above_top_band_is_capped(self):
        assert calculate_sub_index('pm25', 1200) == 500
        assert calculate_sub_index('no2', 600) == 500

    @pytest.mark.parametrize('value', [0, -5, None])
    def test_non_positive_or_missing_is_zero(self, value):
        assert calculate_sub_index('pm25', value) == 0

    def test_unknown_pollutant_is_zero(self):
        assert calculate_sub_index('nh3', 120) == 0

    @pytest.mark.parametrize('alias', ['pm25', 'PM2.5', 'PM25', 'pm2.5'])
    def test_pollutant_aliases(self, alias):
        assert calculate_sub_index(alias, 46) == 77

    def test_breakpoints_are_contiguous(self):
        breakpoints = get_breakpoints('pm10')
        assert breakpoints[0][0] == 0
        for previous, current in zip(breakpoints, breakpoints[1:]):
            assert previous[1] == current[0]
        assert [bp[3] for bp in breakpoints] == [50, 100, 200, 300, 400, 500]


class TestOverallAQI:

    def test_worst_pollutant_wins(self):
        assert calculate_overall_aqi({'pm25': 46, 'pm10': 176}) == (151, 'PM10')

    def test_first_maximum_wins_on_tie(self):
        # Both sub-indices are 50; PM2.5 is evaluated first
        assert calculate_overall_aqi({'pm25': 30, 'pm10': 50}) == (50, 'PM2.5')

    def test_missing_and_zero_values_are_skipped(self):
        assert calculate_overall_aqi({'pm25': 0, 'pm10': None, 'no2': 90}) == (
            calculate_sub_index('no2', 90), 'NO2'
        )

    def test_dominant_pm25(self):
        assert calculate_overall_aqi({'pm25': 70, 'no2': 10}) == (
            calculate_sub_index('pm25', 70), 'PM2.5'
        )
        assert calculate_sub_index('pm25', 70) == 134

    def test_nothing_measured(self):
        assert calculate_overall_aqi({}) == (0, None)
        assert calculate_overall_aqi({'pm25': 0}) == (0, None)


class TestCategories:

    @pytest.mark.parametrize('aqi,category', [
        (0, 'Good'),
        (50, 'Good'),
        (51, 'Satisfactory'),
        (100, 'Satisfactory'),
        (101, 'Moderate'),
        (200, 'Moderate'),
        (201, 'Poor'),
        (300, 'Poor'),
        (301, 'Very Poor'),
        (400, 'Very Poor'),
        (401, 'Severe'),
        (500, 'Severe'),
    ])
    def test_category_boundaries(self, aqi, category):
        assert get_aqi_category(aqi) == category

    def test_color_class(self):
        assert get_aqi_color_class(182) == 'aqi-moderate'
        assert get_aqi_color_class(450) == 'aqi-severe'

    def test_pollutant_category(self):
        assert get_pollutant_category('pm25', 95) == 'Poor'
        assert get_pollutant_category('PM10', 40) == 'Good'
        assert get_pollutant_category('pm25', 400) == 'Severe'
        assert get_pollutant_category('nh3', 10) == 'Unknown'
