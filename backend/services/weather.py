# backend/services/weather.py
import logging
import math
from dataclasses import dataclass, asdict
from numbers import Real
from typing import Dict, Optional

import requests

from services.upstream import UpstreamClient, UpstreamRejected, EmptyResult

logger = logging.getLogger(__name__)

AQI_CATEGORIES = (
    (50, 'Good'),
    (100, 'Moderate'),
    (150, 'Unhealthy for Sensitive Groups'),
    (200, 'Unhealthy'),
    (300, 'Very Unhealthy'),
)

UV_RISKS = (
    (3, 'Low'),
    (6, 'Moderate'),
    (8, 'High'),
    (11, 'Very High'),
)


@dataclass
class WeatherInfo:
    city: str
    country: str
    temp: float
    feels_like: float
    humidity: int
    condition: str
    lat: Optional[float] = None
    lon: Optional[float] = None
    utc_offset: int = 0

    def to_dict(self) -> Dict:
        data = asdict(self)
        for internal in ('lat', 'lon', 'utc_offset'):
            data.pop(internal)
        return data


@dataclass
class AirQualityInfo:
    aqi: int
    category: str


@dataclass
class UVInfo:
    index: float
    risk: str


def aqi_category(aqi: int) -> str:
    for upper, label in AQI_CATEGORIES:
        if aqi <= upper:
            return label
    return 'Hazardous'


def uv_risk(index: float) -> str:
    for upper, label in UV_RISKS:
        if index < upper:
            return label
    return 'Extreme'


def _is_number(value) -> bool:
    # NaN and inf decode from JSON but are not usable readings
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)


class WeatherClient(UpstreamClient):
    """OpenWeather current conditions, looked up by city name (metric units)."""

    provider = 'openweather'

    def get_current(self, city: str) -> WeatherInfo:
        data = self._get_json('/data/2.5/weather', params={
            'q': city,
            'units': 'metric',
            'appid': self.credential,
        })

        if not isinstance(data, dict):
            raise self._malformed('expected a JSON object')

        conditions = data.get('weather')
        if not conditions:
            logger.warning(f"openweather returned no conditions for {city!r}")
            raise EmptyResult(self.provider, f"no weather conditions for {city}")

        main = data.get('main')
        coord = data.get('coord') or {}
        if not isinstance(main, dict) or not isinstance(conditions, list) or not isinstance(coord, dict):
            raise self._malformed('missing main or weather section')

        if not all(_is_number(main.get(key)) for key in ('temp', 'feels_like', 'humidity')):
            raise self._malformed('temperature fields are not numeric')

        first = conditions[0]
        if not isinstance(first, dict):
            raise self._malformed('weather condition is not an object')

        offset = data.get('timezone')
        if not _is_number(offset) or abs(offset) >= 86400:
            offset = 0

        sys_info = data.get('sys')
        return WeatherInfo(
            city=data.get('name') or city,
            country=sys_info.get('country', '') if isinstance(sys_info, dict) else '',
            temp=main['temp'],
            feels_like=main['feels_like'],
            humidity=int(main['humidity']),
            condition=first.get('description', ''),
            lat=coord['lat'] if _is_number(coord.get('lat')) else None,
            lon=coord['lon'] if _is_number(coord.get('lon')) else None,
            utc_offset=int(offset),
        )


class AirQualityClient(UpstreamClient):
    """World Air Quality Index feed for the station nearest to a coordinate pair."""

    provider = 'waqi'

    def get_air_quality(self, lat: float, lon: float) -> AirQualityInfo:
        data = self._get_json(f"/feed/geo:{lat};{lon}/", params={'token': self.credential})

        if not isinstance(data, dict):
            raise self._malformed('expected a JSON object')

        # WAQI reports failures (bad token, unknown station) inside a 200
        if data.get('status') != 'ok':
            reason = data.get('data') if isinstance(data.get('data'), str) else 'unknown error'
            logger.warning(f"waqi rejected the lookup: {reason}")
            raise UpstreamRejected(self.provider, f"upstream reported error: {reason}")

        station = data.get('data')
        aqi = station.get('aqi') if isinstance(station, dict) else None
        if not _is_number(aqi):
            raise self._malformed(f"aqi value {aqi!r} is not numeric")

        aqi = int(aqi)
        return AirQualityInfo(aqi=aqi, category=aqi_category(aqi))


class UVClient(UpstreamClient):
    provider = 'openuv'

    def get_uv(self, lat: float, lon: float) -> UVInfo:
        data = self._get_json(
            '/api/v1/uv',
            params={'lat': lat, 'lng': lon},
            headers={'x-access-token': self.credential},
        )

        result = data.get('result') if isinstance(data, dict) else None
        index = result.get('uv') if isinstance(result, dict) else None
        if not _is_number(index):
            raise self._malformed(f"uv value {index!r} is not numeric")

        index = float(index)
        return UVInfo(index=index, risk=uv_risk(index))


def build_weather_clients(settings, session: requests.Session):
    timeout = settings.upstream_timeout
    return (
        WeatherClient(settings.openweather_base_url, settings.openweather_api_key, session, timeout),
        AirQualityClient(settings.waqi_base_url, settings.waqi_api_token, session, timeout),
        UVClient(settings.openuv_base_url, settings.openuv_api_key, session, timeout),
    )
