# wholesale/clients/email_client.py
import requests
from requests import RequestException

from wholesale.utils.settings import EMAIL_API_KEY, EMAIL_API_URL, EMAIL_FROM
from wholesale.utils.logging import get_logger

logger = get_logger(__name__)


class EmailClient:
    """
    Wysylka maili przez HTTP API w stylu Resend.
    send() zwraca True/False i nigdy nie rzuca - porazka maila
    nie moze zepsuc zamowienia. Bez retry.
    """

    def __init__(
        self,
        api_url: str | None = None,
        api_key: str | None = None,
        sender: str | None = None,
        timeout: int = 5,
    ):
        self.api_url = api_url or EMAIL_API_URL
        self.api_key = api_key if api_key is not None else EMAIL_API_KEY
        self.sender = sender or EMAIL_FROM
        self.timeout = timeout

    def send(
        self,
        to: list[str],
        subject: str,
        html: str,
        text: str | None = None,
        sender: str | None = None,
    ) -> bool:
        payload = {
            "from": sender or self.sender,
            "to": to,
            "subject": subject,
            "html": html,
        }
        if text:
            payload["text"] = text

        try:
            resp = requests.post(
                self.api_url,
                json=payload,
                headers={"Authorization": f"Bearer {self.api_key}"},
                timeout=self.timeout,
            )
            resp.raise_for_status()
        except RequestException as e:
            logger.error(f"Email '{subject}' to {to} failed: {e}")
            return False

        logger.info(f"Email '{subject}' sent to {to}")
        return True
