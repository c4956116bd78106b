# order_service/services/auth_client.py
import requests
from requests import RequestException

from order_service.domain.errors import Unauthorized, UpstreamUnavailable
from order_service.utils.retry import http_retry
from order_service.utils.settings import USER_SERVICE_URL, HTTP_TIMEOUT_SECONDS
from order_service.utils.logging import get_logger

logger = get_logger(__name__)


class AuthClient:
    """Weryfikacja tokena w user-service (POST /auth/verify)."""

    def __init__(self, base_url: str | None = None, timeout: float = HTTP_TIMEOUT_SECONDS):
        self.base_url = (base_url or USER_SERVICE_URL).rstrip("/")
        self.timeout = timeout

    @http_retry()
    def _post_verify(self, token: str) -> requests.Response:
        return requests.post(
            f"{self.base_url}/auth/verify",
            json={"token": token},
            timeout=self.timeout,
        )

    def verify(self, token: str) -> str:
        if not token:
            raise Unauthorized("Missing token")

        try:
            resp = self._post_verify(token)
        except RequestException as e:
            logger.error(f"User service unreachable: {e}")
            raise UpstreamUnavailable("Authentication service unavailable") from e

        if resp.status_code >= 500:
            logger.error(f"User service returned {resp.status_code}")
            raise UpstreamUnavailable("Authentication service unavailable")

        if resp.status_code != 200:
            raise Unauthorized("Invalid token")

        try:
            data = resp.json()
        except ValueError as e:
            raise UpstreamUnavailable("Malformed authentication response") from e

        user = data.get("user") or {}
        user_id = user.get("userId") or user.get("id")
        if not data.get("valid") or not user_id:
            raise Unauthorized("Invalid token")

        return str(user_id)
