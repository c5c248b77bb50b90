# backend/services/aggregator.py
import logging
from dataclasses import dataclass, asdict
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional

import requests

from services.location import CitySearchClient, CitySuggestion
from services.traffic import TrafficInfo, estimate_traffic
from services.upstream import MissingParameter, MalformedUpstreamPayload
from services.weather import (
    AirQualityInfo,
    UVInfo,
    WeatherInfo,
    build_weather_clients,
)

logger = logging.getLogger(__name__)

Clock = Callable[[Optional[timezone]], datetime]


@dataclass
class CompositeCityInfo:
    city: str
    country: str
    weather: WeatherInfo
    air_quality: AirQualityInfo
    uv: UVInfo
    traffic: TrafficInfo

    def to_dict(self) -> Dict:
        return {
            'city': self.city,
            'country': self.country,
            'weather': self.weather.to_dict(),
            'air_quality': asdict(self.air_quality),
            'uv': asdict(self.uv),
            'traffic': asdict(self.traffic),
        }


def require_param(name: str, value: Optional[str]) -> str:
    value = (value or '').strip()
    if not value:
        raise MissingParameter(name)
    return value


class CityInfoService:
    """Sequential fan-out over the upstream clients for one request.

    Any upstream failure propagates unchanged and aborts the whole request;
    there are no partial results and no fallback values.
    """

    def __init__(self, settings, session: Optional[requests.Session] = None,
                 clock: Optional[Clock] = None):
        self.settings = settings
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.clock = clock or datetime.now

        self.weather_client, self.air_quality_client, self.uv_client = \
            build_weather_clients(settings, self.session)
        self.city_search_client = CitySearchClient(
            settings.openweather_base_url,
            settings.openweather_api_key,
            self.session,
            settings.upstream_timeout,
            limit=settings.city_search_limit,
        )

    def close(self):
        if self._owns_session:
            self.session.close()

    def current_weather(self, city: Optional[str]) -> WeatherInfo:
        city = require_param('city', city)
        self.settings.require('openweather_api_key')

        return self.weather_client.get_current(city)

    def search_cities(self, query: Optional[str]) -> List[CitySuggestion]:
        query = require_param('q', query)
        self.settings.require('openweather_api_key')

        return self.city_search_client.search(query)

    def city_info(self, city: Optional[str]) -> CompositeCityInfo:
        city = require_param('city', city)
        self.settings.require('openweather_api_key', 'waqi_api_token', 'openuv_api_key')

        weather = self.weather_client.get_current(city)
        if weather.lat is None or weather.lon is None:
            raise MalformedUpstreamPayload(self.weather_client.provider, 'response has no coordinates')

        air_quality = self.air_quality_client.get_air_quality(weather.lat, weather.lon)
        uv = self.uv_client.get_uv(weather.lat, weather.lon)
        traffic = estimate_traffic(self.local_time(weather.utc_offset))

        logger.info(
            f"Aggregated city info for {weather.city}, {weather.country}: "
            f"aqi={air_quality.aqi} uv={uv.index} traffic={traffic.level}"
        )

        return CompositeCityInfo(
            city=weather.city,
            country=weather.country,
            weather=weather,
            air_quality=air_quality,
            uv=uv,
            traffic=traffic,
        )

    def local_time(self, utc_offset: int) -> datetime:
        return self.clock(timezone(timedelta(seconds=utc_offset)))
