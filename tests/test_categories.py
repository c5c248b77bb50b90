"""Tests for the AQI and UV label classifiers."""

import pytest

from services.weather import aqi_category, uv_risk


@pytest.mark.parametrize("aqi,expected", [
    (-10, "Good"),
    (0, "Good"),
    (50, "Good"),
    (51, "Moderate"),
    (100, "Moderate"),
    (101, "Unhealthy for Sensitive Groups"),
    (150, "Unhealthy for Sensitive Groups"),
    (151, "Unhealthy"),
    (200, "Unhealthy"),
    (201, "Very Unhealthy"),
    (300, "Very Unhealthy"),
    (301, "Hazardous"),
    (999, "Hazardous"),
])
def test_aqi_category_boundaries(aqi, expected):
    assert aqi_category(aqi) == expected


@pytest.mark.parametrize("index,expected", [
    (-1.0, "Low"),
    (0, "Low"),
    (2.9, "Low"),
    (3.0, "Moderate"),
    (5.99, "Moderate"),
    (6, "High"),
    (7.9, "High"),
    (8, "Very High"),
    (10.9, "Very High"),
    (11, "Extreme"),
    (16.5, "Extreme"),
])
def test_uv_risk_boundaries(index, expected):
    assert uv_risk(index) == expected
