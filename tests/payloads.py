"""Canned upstream payloads and a stub requests.Session for the test suite."""

from datetime import datetime
from unittest.mock import MagicMock

import requests

# A Tuesday
FIXED_NOW = datetime(2024, 6, 11, 9, 30)

OPENWEATHER_LONDON = {
    "coord": {"lon": -0.1257, "lat": 51.5085},
    "weather": [{"id": 803, "main": "Clouds", "description": "broken clouds", "icon": "04d"}],
    "main": {"temp": 18.4, "feels_like": 17.9, "temp_min": 16.1, "temp_max": 19.8, "humidity": 64},
    "sys": {"country": "GB"},
    "timezone": 3600,
    "name": "London",
}

WAQI_LONDON = {"status": "ok", "data": {"aqi": 57, "idx": 5724, "city": {"name": "London"}}}

OPENUV_LONDON = {"result": {"uv": 4.2, "uv_max": 6.1}}

GEO_PARIS = [
    {"name": "Paris", "lat": 48.8589, "lon": 2.32, "country": "FR", "state": "Ile-de-France"},
    {"name": "Paris", "lat": 33.6617, "lon": -95.5555, "country": "US", "state": "Texas"},
]


def fake_response(payload=None, status=200, invalid_json=False):
    response = MagicMock()
    response.status_code = status
    if invalid_json:
        response.json.side_effect = ValueError("Expecting value")
    else:
        response.json.return_value = payload
    return response


def fixed_clock(tz=None):
    return FIXED_NOW.replace(tzinfo=tz)


class StubUpstreams:
    """requests.Session stand-in that answers by URL path and records calls."""

    def __init__(self):
        self.responses = {
            '/data/2.5/weather': fake_response(OPENWEATHER_LONDON),
            '/geo/1.0/direct': fake_response(GEO_PARIS),
            '/feed/': fake_response(WAQI_LONDON),
            '/api/v1/uv': fake_response(OPENUV_LONDON),
        }
        self.session = MagicMock(spec=requests.Session)
        self.session.get.side_effect = self._get

    def _get(self, url, params=None, headers=None, timeout=None):
        for path, response in self.responses.items():
            if path in url:
                if isinstance(response, Exception):
                    raise response
                return response
        raise AssertionError(f"unexpected upstream call: {url}")

    def calls_to(self, path):
        return [c for c in self.session.get.call_args_list if path in c.args[0]]
