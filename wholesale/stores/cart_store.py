# wholesale/stores/cart_store.py
import json

import redis
from pydantic import TypeAdapter, ValidationError

from wholesale.domain.models import CartItem, CheckoutSession
from wholesale.utils.retry import redis_retry
from wholesale.utils.settings import REDIS_URL, CART_TTL_SECONDS, CHECKOUT_TTL_SECONDS
from wholesale.utils.logging import get_logger

logger = get_logger(__name__)

_cart_adapter = TypeAdapter(list[CartItem])


class CartStore:
    """
    Koszyk nalezy do sesji przegladarki, trzymamy go w redisie pod kluczem sesji.
    Jeden pisarz na sesje, wiec bez lockow.
    TTL przedluzany przy kazdym zapisie.
    """

    def __init__(self, client: redis.Redis | None = None, ttl: int = CART_TTL_SECONDS):
        self.redis = client or redis.Redis.from_url(REDIS_URL, decode_responses=True)
        self.ttl = ttl

    @staticmethod
    def _key(session_id: str) -> str:
        return f"cart:{session_id}"

    @redis_retry()
    def load(self, session_id: str) -> list[CartItem]:
        key = self._key(session_id)
        raw = self.redis.get(key)
        if not raw:
            return []
        try:
            return _cart_adapter.validate_json(raw)
        except ValidationError as e:
            # uszkodzone dane - zaczynamy od pustego koszyka
            logger.error(f"Failed to parse cart data for {key}: {e}")
            self.redis.delete(key)
            return []

    @redis_retry()
    def save(self, session_id: str, items: list[CartItem]) -> None:
        payload = json.dumps([i.model_dump(mode="json") for i in items])
        self.redis.set(self._key(session_id), payload, ex=self.ttl)

    @redis_retry()
    def clear(self, session_id: str) -> None:
        self.redis.delete(self._key(session_id))


class CheckoutStore:
    """Stan krokow checkoutu, tez per sesja."""

    def __init__(self, client: redis.Redis | None = None, ttl: int = CHECKOUT_TTL_SECONDS):
        self.redis = client or redis.Redis.from_url(REDIS_URL, decode_responses=True)
        self.ttl = ttl

    @staticmethod
    def _key(session_id: str) -> str:
        return f"checkout:{session_id}"

    @redis_retry()
    def load(self, session_id: str) -> CheckoutSession:
        raw = self.redis.get(self._key(session_id))
        if not raw:
            return CheckoutSession()
        try:
            return CheckoutSession.model_validate_json(raw)
        except ValidationError as e:
            logger.error(f"Failed to parse checkout state for session {session_id}: {e}")
            return CheckoutSession()

    @redis_retry()
    def save(self, session_id: str, state: CheckoutSession) -> None:
        self.redis.set(self._key(session_id), state.model_dump_json(), ex=self.ttl)

    @redis_retry()
    def reset(self, session_id: str) -> None:
        self.redis.delete(self._key(session_id))
