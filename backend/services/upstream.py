# backend/services/upstream.py
import logging
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger(__name__)


class GatewayError(Exception):
    code = 'GATEWAY_ERROR'

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class MissingParameter(GatewayError):
    code = 'MISSING_PARAMETER'

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"{name} parameter is required")


class MissingCredential(GatewayError):
    code = 'MISSING_CREDENTIAL'

    def __init__(self, env_var: str):
        self.env_var = env_var
        super().__init__(f"{env_var} not configured")


class UpstreamError(GatewayError):
    code = 'UPSTREAM_ERROR'

    def __init__(self, provider: str, message: str):
        self.provider = provider
        super().__init__(f"{provider}: {message}")


class UpstreamUnreachable(UpstreamError):
    code = 'UPSTREAM_UNREACHABLE'


class UpstreamRejected(UpstreamError):
    code = 'UPSTREAM_REJECTED'

    def __init__(self, provider: str, message: str, status: Optional[int] = None):
        self.status = status
        super().__init__(provider, message)


class MalformedUpstreamPayload(UpstreamError):
    code = 'MALFORMED_UPSTREAM_PAYLOAD'


class EmptyResult(UpstreamError):
    code = 'EMPTY_RESULT'


class UpstreamClient:
    """Base for clients that issue a single GET and decode a JSON body.

    Subclasses set ``provider`` and build URLs from ``base_url``. No retries:
    every failure is raised as one of the UpstreamError kinds.
    """

    provider = 'upstream'

    def __init__(self, base_url: str, credential: str,
                 session: Optional[requests.Session] = None, timeout: float = 10.0):
        self.base_url = base_url.rstrip('/')
        self.credential = credential
        self.session = session or requests.Session()
        self.timeout = timeout

    def _get_json(self, path: str, params: Optional[Dict] = None,
                  headers: Optional[Dict] = None) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug(f"{self.provider} GET {url}")

        try:
            response = self.session.get(url, params=params, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning(f"{self.provider} request failed: {e.__class__.__name__}")
            raise UpstreamUnreachable(self.provider, 'failed to reach upstream') from e

        if not 200 <= response.status_code < 300:
            logger.warning(f"{self.provider} returned status {response.status_code}")
            raise UpstreamRejected(
                self.provider,
                f"upstream returned status {response.status_code}",
                status=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            logger.warning(f"{self.provider} returned a non-JSON body")
            raise MalformedUpstreamPayload(self.provider, 'response body is not valid JSON') from e

    def _malformed(self, detail: str) -> MalformedUpstreamPayload:
        logger.warning(f"{self.provider} payload malformed: {detail}")
        return MalformedUpstreamPayload(self.provider, detail)
