# backend/config.py
import os
from dataclasses import dataclass
from typing import Optional, Tuple

from dotenv import load_dotenv

from services.upstream import MissingCredential

CREDENTIAL_ENV_VARS = {
    'openweather_api_key': 'OPENWEATHER_API_KEY',
    'waqi_api_token': 'WAQI_API_TOKEN',
    'openuv_api_key': 'OPENUV_API_KEY',
}


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


@dataclass(frozen=True)
class Settings:
    port: int = 8080
    environment: str = 'production'
    log_level: str = 'INFO'

    openweather_api_key: str = ''
    waqi_api_token: str = ''
    openuv_api_key: str = ''

    openweather_base_url: str = 'https://api.openweathermap.org'
    waqi_base_url: str = 'https://api.waqi.info'
    openuv_base_url: str = 'https://api.openuv.io'

    upstream_timeout: float = 10.0
    city_search_limit: int = 5

    cors_origins: Tuple[str, ...] = ('*',)
    rate_limit_enabled: bool = True

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> 'Settings':
        load_dotenv(dotenv_path)

        origins = os.getenv('CORS_ORIGINS', '*')

        return cls(
            port=int(os.getenv('PORT', 8080)),
            environment=os.getenv('FLASK_ENV', 'production'),
            log_level=os.getenv('LOG_LEVEL', 'INFO').upper(),
            openweather_api_key=os.getenv('OPENWEATHER_API_KEY', ''),
            waqi_api_token=os.getenv('WAQI_API_TOKEN', ''),
            openuv_api_key=os.getenv('OPENUV_API_KEY', ''),
            openweather_base_url=os.getenv('OPENWEATHER_BASE_URL', cls.openweather_base_url),
            waqi_base_url=os.getenv('WAQI_BASE_URL', cls.waqi_base_url),
            openuv_base_url=os.getenv('OPENUV_BASE_URL', cls.openuv_base_url),
            upstream_timeout=float(os.getenv('UPSTREAM_TIMEOUT', 10)),
            city_search_limit=int(os.getenv('CITY_SEARCH_LIMIT', 5)),
            cors_origins=tuple(o.strip() for o in origins.split(',') if o.strip()) or ('*',),
            rate_limit_enabled=_env_bool('RATELIMIT_ENABLED', True),
        )

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == 'development'

    def require(self, *names: str) -> None:
        """Raise MissingCredential for the first unset credential in ``names``."""
        for name in names:
            if not getattr(self, name):
                raise MissingCredential(CREDENTIAL_ENV_VARS.get(name, name.upper()))

    def missing_credentials(self) -> list:
        return [
            env_var for field_name, env_var in CREDENTIAL_ENV_VARS.items()
            if not getattr(self, field_name)
        ]
