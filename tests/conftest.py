import pytest

from app import create_app
from config import Settings
from payloads import StubUpstreams, fixed_clock


@pytest.fixture
def settings():
    return Settings(
        openweather_api_key='ow-key',
        waqi_api_token='waqi-token',
        openuv_api_key='uv-key',
        rate_limit_enabled=False,
    )


@pytest.fixture
def upstreams():
    return StubUpstreams()


@pytest.fixture
def make_client(upstreams):
    def _make(settings, clock=fixed_clock):
        app = create_app(settings, session=upstreams.session, clock=clock)
        return app.test_client()
    return _make


@pytest.fixture
def client(make_client, settings):
    return make_client(settings)
