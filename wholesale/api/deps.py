# wholesale/api/deps.py
import redis
from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from wholesale.clients.auth_client import AuthClient
from wholesale.data.database import get_db
from wholesale.domain.models import ShopSettings, UserIdentity
from wholesale.errors import AuthError
from wholesale.repos.shipping_address_repo import ShippingAddressRepo
from wholesale.services.cart_service import CartService
from wholesale.services.category_moq import CategoryMOQResolver
from wholesale.services.checkout_service import CheckoutService
from wholesale.services.notification_service import NotificationService
from wholesale.services.order_service import OrderService
from wholesale.services.pricing_service import PricingService
from wholesale.services.settings_service import SettingsService
from wholesale.services.shipping_service import ShippingCalculator
from wholesale.stores.cart_store import CartStore, CheckoutStore
from wholesale.utils.settings import REDIS_URL

_redis_client: redis.Redis | None = None


def get_redis() -> redis.Redis:
    global _redis_client
    if _redis_client is None:
        _redis_client = redis.Redis.from_url(REDIS_URL, decode_responses=True)
    return _redis_client


def get_auth_client() -> AuthClient:
    return AuthClient()


def get_session_id(x_session_id: str = Header(..., min_length=8)) -> str:
    return x_session_id


def _bearer(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    return token


def get_optional_user(
    authorization: str | None = Header(default=None),
    auth: AuthClient = Depends(get_auth_client),
) -> UserIdentity | None:
    token = _bearer(authorization)
    if token is None:
        return None
    try:
        return auth.resolve(token)
    except AuthError:
        return None


def get_current_user(user: UserIdentity | None = Depends(get_optional_user)) -> UserIdentity:
    if user is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user


def require_admin(user: UserIdentity = Depends(get_current_user)) -> UserIdentity:
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Admin role required")
    return user


def get_shop_settings(db: Session = Depends(get_db)) -> ShopSettings:
    # swiezo przy kazdym requescie, admin mogl zmienic ustawienia
    return SettingsService(db).load()


def get_cart_service(
    settings: ShopSettings = Depends(get_shop_settings),
    client: redis.Redis = Depends(get_redis),
) -> CartService:
    return CartService(store=CartStore(client), moq=CategoryMOQResolver(settings))


def get_checkout_service(
    db: Session = Depends(get_db),
    settings: ShopSettings = Depends(get_shop_settings),
    client: redis.Redis = Depends(get_redis),
    cart: CartService = Depends(get_cart_service),
) -> CheckoutService:
    return CheckoutService(
        cart=cart,
        store=CheckoutStore(client),
        addresses=ShippingAddressRepo(db),
        shipping=ShippingCalculator(settings),
        pricing=PricingService(db),
        orders=OrderService(db),
        notifications=NotificationService(settings.email),
    )
