# wholesale/clients/auth_client.py
import requests

from wholesale.domain.models import UserIdentity
from wholesale.errors import AuthError
from wholesale.utils.retry import http_retry
from wholesale.utils.settings import AUTH_SERVICE_URL
from wholesale.utils.logging import get_logger

logger = get_logger(__name__)


class AuthClient:
    """
    Sesje i tokeny wydaje zewnetrzny serwis auth.
    My tylko pytamy: token -> tozsamosc + role.
    """

    def __init__(self, base_url: str | None = None, timeout: int = 2):
        self.base_url = (base_url or AUTH_SERVICE_URL).rstrip("/")
        self.timeout = timeout

    @http_retry()
    def _fetch_session(self, token: str) -> requests.Response:
        url = f"{self.base_url}/session"
        logger.info(f"AuthClient GET {url}")
        return requests.get(
            url,
            headers={"Authorization": f"Bearer {token}"},
            timeout=self.timeout,
        )

    def resolve(self, token: str) -> UserIdentity:
        resp = self._fetch_session(token)
        if resp.status_code in (401, 403):
            raise AuthError("Invalid or expired session")
        resp.raise_for_status()

        data = resp.json()
        user = data.get("user") or data
        return UserIdentity(
            id=str(user["id"]),
            email=user.get("email") or "",
            name=user.get("business_name") or user.get("name") or "",
            roles=list(data.get("roles") or user.get("roles") or []),
        )
