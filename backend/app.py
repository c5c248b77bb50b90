# backend/app.py
import logging
from typing import Optional

import requests
from flask import Blueprint, Flask, current_app, g, jsonify, request
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from werkzeug.exceptions import HTTPException

from config import Settings
from services.aggregator import CityInfoService, Clock
from services.upstream import (
    GatewayError,
    MissingParameter,
    MissingCredential,
    UpstreamUnreachable,
    UpstreamRejected,
    MalformedUpstreamPayload,
    EmptyResult,
)

logger = logging.getLogger(__name__)

BANNER = "DailyWeather API running. Use /weather?city=CityName"

# Upstream 400/404 means the user asked for something that does not exist.
USER_ATTRIBUTABLE_UPSTREAM_STATUSES = (400, 404)

ERROR_STATUS = {
    MissingParameter: 400,
    MissingCredential: 500,
    UpstreamUnreachable: 500,
    UpstreamRejected: 500,
    MalformedUpstreamPayload: 500,
    EmptyResult: 500,
}

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["3000 per day", "500 per hour"],
    storage_uri="memory://",
)

api = Blueprint('api', __name__)


def status_for(error: GatewayError) -> int:
    if isinstance(error, UpstreamRejected) and error.status in USER_ATTRIBUTABLE_UPSTREAM_STATUSES:
        return 400
    return ERROR_STATUS.get(type(error), 500)


def get_service() -> CityInfoService:
    if 'city_info_service' not in g:
        gateway = current_app.extensions['gateway']
        g.city_info_service = CityInfoService(
            gateway['settings'],
            session=gateway['session'],
            clock=gateway['clock'],
        )
    return g.city_info_service


def close_service(exc=None):
    service = g.pop('city_info_service', None)
    if service is not None:
        service.close()


def plain_text(body: str, status: int = 200):
    return body, status, {'Content-Type': 'text/plain; charset=utf-8'}


@api.route('/', methods=['GET'])
@limiter.exempt
def home():
    return plain_text(BANNER)


@api.route('/health', methods=['GET'])
@limiter.exempt
def health_check():
    return plain_text('OK')


@api.route('/weather', methods=['GET'])
@limiter.limit("500 per hour")
def get_weather():
    weather = get_service().current_weather(request.args.get('city'))
    return jsonify(weather.to_dict()), 200


@api.route('/city-info', methods=['GET'])
@limiter.limit("300 per hour")
def get_city_info():
    info = get_service().city_info(request.args.get('city'))
    return jsonify(info.to_dict()), 200


@api.route('/cities', methods=['GET'])
@limiter.limit("100 per hour")
def search_cities():
    results = get_service().search_cities(request.args.get('q'))
    return jsonify([{'name': r.name, 'country': r.country} for r in results]), 200


def handle_gateway_error(error: GatewayError):
    status = status_for(error)
    if status >= 500:
        logger.error(f"{error.code} on {request.path}: {error.message}")
    else:
        logger.info(f"{error.code} on {request.path}: {error.message}")

    return jsonify({
        'success': False,
        'error': error.message,
        'code': error.code
    }), status


def not_found(error):
    return jsonify({
        'success': False,
        'error': 'Endpoint not found',
        'code': 'NOT_FOUND'
    }), 404


def internal_error(error):
    logger.exception(f"Internal server error: {error}")
    return jsonify({
        'success': False,
        'error': 'Internal server error',
        'code': 'INTERNAL_ERROR'
    }), 500


def ratelimit_handler(e):
    return jsonify({
        'success': False,
        'error': 'Rate limit exceeded',
        'code': 'RATE_LIMITED',
        'retry_after': str(e.description)
    }), 429


def http_error(error: HTTPException):
    return jsonify({
        'success': False,
        'error': error.description,
        'code': error.name.upper().replace(' ', '_')
    }), error.code


def create_app(settings: Optional[Settings] = None,
               session: Optional[requests.Session] = None,
               clock: Optional[Clock] = None) -> Flask:
    settings = settings or Settings.from_env()

    logging.basicConfig(
        level=settings.log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler()
        ]
    )

    app = Flask(__name__)
    app.json.sort_keys = False
    app.config['RATELIMIT_ENABLED'] = settings.rate_limit_enabled

    CORS(app, resources={r"/*": {"origins": list(settings.cors_origins)}})
    limiter.init_app(app)

    app.extensions['gateway'] = {
        'settings': settings,
        'session': session,
        'clock': clock,
    }

    app.register_blueprint(api)
    app.teardown_appcontext(close_service)

    app.register_error_handler(GatewayError, handle_gateway_error)
    app.register_error_handler(404, not_found)
    app.register_error_handler(429, ratelimit_handler)
    app.register_error_handler(500, internal_error)
    app.register_error_handler(HTTPException, http_error)

    for env_var in settings.missing_credentials():
        logger.warning(f"{env_var} not set - routes that need it will respond 500")

    return app


if __name__ == '__main__':
    settings = Settings.from_env()
    app = create_app(settings)

    logger.info("=" * 60)
    logger.info("DailyWeather API")
    logger.info("=" * 60)
    logger.info(f"Server: Running on port {settings.port}")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Upstream timeout: {settings.upstream_timeout}s")
    logger.info("=" * 60)

    app.run(host='0.0.0.0', port=settings.port, debug=settings.is_development)
