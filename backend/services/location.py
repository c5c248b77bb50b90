# backend/services/location.py
import logging
from dataclasses import dataclass
from typing import List

from services.upstream import UpstreamClient

logger = logging.getLogger(__name__)


@dataclass
class CitySuggestion:
    name: str
    country: str


class CitySearchClient(UpstreamClient):
    """OpenWeather direct geocoding. Zero matches is a valid, empty result."""

    provider = 'openweather-geo'

    def __init__(self, *args, limit: int = 5, **kwargs):
        super().__init__(*args, **kwargs)
        self.limit = limit

    def search(self, query: str) -> List[CitySuggestion]:
        logger.info(f"Searching for location: {query}")

        data = self._get_json('/geo/1.0/direct', params={
            'q': query,
            'limit': self.limit,
            'appid': self.credential,
        })

        if not isinstance(data, list):
            raise self._malformed('expected a JSON array of matches')

        results = []
        for item in data:
            if not isinstance(item, dict) or not item.get('name'):
                raise self._malformed('geocoding match without a name')

            results.append(CitySuggestion(
                name=item['name'],
                country=item.get('country', ''),
            ))

        return results
