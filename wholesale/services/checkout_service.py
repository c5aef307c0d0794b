# wholesale/services/checkout_service.py
import re
from datetime import datetime, timezone
from decimal import Decimal

from wholesale.domain.models import (
    CartItem,
    CheckoutSession,
    Order,
    ShippingAddress,
    ShippingOption,
    UserIdentity,
)
from wholesale.domain.order_normalizer import normalize_order
from wholesale.domain.schemas import CheckoutOut
from wholesale.errors import (
    CheckoutStepError,
    InvalidAddressError,
    MissingCheckoutInfoError,
    ShippingCalculationError,
)
from wholesale.repos.shipping_address_repo import ShippingAddressRepo
from wholesale.services.cart_service import CartService, cart_weight
from wholesale.services.notification_service import NotificationService
from wholesale.services.order_service import OrderService, generate_order_id
from wholesale.services.pricing_service import PricingService
from wholesale.services.shipping_service import Destination, ShippingCalculator
from wholesale.stores.cart_store import CheckoutStore
from wholesale.utils.logging import get_logger

logger = get_logger(__name__)

POSTAL_CODE_RE = re.compile(r"^\d{4}$")
PHONE_RE = re.compile(r"^(?:\+61|0)[2-478](?:[ -]?[0-9]){8}$")


def validate_address(address: ShippingAddress) -> None:
    errors = []
    for field in ("name", "street", "city", "state", "country"):
        if not getattr(address, field).strip():
            errors.append(f"{field} is required")
    if not POSTAL_CODE_RE.match(address.postal_code or ""):
        errors.append("Postal code must be 4 digits.")
    if not PHONE_RE.match(address.phone or ""):
        errors.append("Please enter a valid Australian phone number.")
    if errors:
        raise InvalidAddressError(errors)


class CheckoutService:
    """
    Orkiestracja checkoutu: cart -> shipping -> payment.

    Kroki ida sekwencyjnie (zapis adresu, wycena wysylki, zapis zamowienia,
    maile). Nic nie jest wycofywane: jesli zapis zamowienia padnie, zapisany
    wczesniej adres zostaje, koszyk tez zostaje, uzytkownik moze ponowic.
    """

    def __init__(
        self,
        cart: CartService,
        store: CheckoutStore,
        addresses: ShippingAddressRepo,
        shipping: ShippingCalculator,
        pricing: PricingService,
        orders: OrderService,
        notifications: NotificationService,
    ):
        self.cart = cart
        self.store = store
        self.addresses = addresses
        self.shipping = shipping
        self.pricing = pricing
        self.orders = orders
        self.notifications = notifications

    #query
    def state(self, session_id: str) -> CheckoutSession:
        return self.store.load(session_id)

    def view(
        self,
        session_id: str,
        state: CheckoutSession | None = None,
        user: UserIdentity | None = None,
    ) -> CheckoutOut:
        """Kwoty jak w przyszlym zamowieniu: ceny z tieru zalogowanego uzytkownika."""
        state = state or self.state(session_id)
        lines = self._priced_lines(self.cart.get_items(session_id), user)
        cart_subtotal = sum((price * item.quantity for item, price in lines), Decimal("0.00"))
        shipping_price = state.selected_option.price if state.selected_option else Decimal("0.00")
        return CheckoutOut(
            step=state.step,
            shipping_address=state.shipping_address,
            editing_address=state.editing_address,
            shipping_options=state.shipping_options,
            selected_option=state.selected_option,
            subtotal=cart_subtotal,
            total=cart_subtotal + shipping_price,
            order_id=state.order_id,
        )

    #commands
    def start(self, session_id: str, user: UserIdentity | None) -> CheckoutSession:
        items = self.cart.get_items(session_id)
        if not items:
            raise CheckoutStepError("cart", "shipping", "cart is empty")

        previous = self.state(session_id)
        state = CheckoutSession(step="shipping", quote_seq=previous.quote_seq)

        # zapisany adres = krok potwierdzony, chyba ze user chce go edytowac
        address = self.addresses.get_for_user(user.id) if user else None
        state.shipping_address = address or previous.shipping_address
        self.store.save(session_id, state)

        logger.info(f"Checkout started for session {session_id}")

        if state.shipping_address is None:
            return state
        return self._quote(session_id, state, items)

    def edit_address(self, session_id: str) -> CheckoutSession:
        state = self.state(session_id)
        if state.step == "cart":
            raise CheckoutStepError(state.step, "shipping", "checkout not started")
        state.step = "shipping"
        state.editing_address = True
        self.store.save(session_id, state)
        return state

    def submit_address(
        self,
        session_id: str,
        user: UserIdentity | None,
        address: ShippingAddress,
    ) -> CheckoutSession:
        state = self.state(session_id)
        if state.step == "cart":
            raise CheckoutStepError(state.step, "shipping", "checkout not started")

        validate_address(address)

        if user is not None:
            # upsert per user, zostaje nawet gdy dalsze kroki padna
            self.addresses.upsert(user.id, address)
            logger.info(f"Shipping address saved for user {user.id}")

        state.shipping_address = address
        state.editing_address = False
        self.store.save(session_id, state)

        return self._quote(session_id, state, self.cart.get_items(session_id))

    def refresh_shipping_options(self, session_id: str) -> CheckoutSession:
        """Ponowna wycena po zmianie koszyka, tylko gdy jestesmy juz za adresem."""
        state = self.state(session_id)
        if state.step not in ("shipping-options", "payment") or state.shipping_address is None:
            return state

        items = self.cart.get_items(session_id)
        if not items:
            self.store.reset(session_id)
            return CheckoutSession()

        # krok zostaje (payment nie cofa sie do shipping-options), zmieniaja sie tylko opcje
        try:
            return self._quote(session_id, state, items)
        except ShippingCalculationError:
            # bez opcji nie da sie przejsc dalej
            state = self.state(session_id)
            state.shipping_options = []
            state.selected_option = None
            self.store.save(session_id, state)
            return state

    def _quote(self, session_id: str, state: CheckoutSession, items: list[CartItem]) -> CheckoutSession:
        seq = state.quote_seq + 1
        state.quote_seq = seq
        self.store.save(session_id, state)

        address = state.shipping_address
        options = self.shipping.calculate_options(
            cart_weight(items),
            Destination(postal_code=address.postal_code, state=address.state),
            items,
        )
        return self.apply_quote(session_id, seq, options)

    def apply_quote(self, session_id: str, seq: int, options: list[ShippingOption]) -> CheckoutSession:
        """
        Wynik wyceny numer seq. Jesli w miedzyczasie zlecono nowsza,
        wynik jest nieaktualny i go odrzucamy (last write wins).
        """
        state = self.state(session_id)
        if seq < state.quote_seq or seq <= state.applied_quote_seq:
            logger.info(f"Discarding stale shipping quote {seq} for session {session_id}")
            return state

        state.shipping_options = options
        state.applied_quote_seq = seq

        current = state.selected_option.id if state.selected_option else None
        still_offered = next((o for o in options if o.id == current), None)
        # domyslnie pierwsza opcja (darmowa, jesli przysluguje)
        state.selected_option = still_offered or (options[0] if options else None)

        if state.step == "shipping":
            state.step = "shipping-options"
        self.store.save(session_id, state)
        return state

    def select_option(self, session_id: str, option_id: str) -> CheckoutSession:
        state = self.state(session_id)
        option = next((o for o in state.shipping_options if o.id == option_id), None)
        if option is None:
            raise MissingCheckoutInfoError([f"shipping option '{option_id}'"])
        state.selected_option = option
        self.store.save(session_id, state)
        return state

    def proceed_to_payment(self, session_id: str) -> CheckoutSession:
        state = self.state(session_id)
        if state.step != "shipping-options":
            raise CheckoutStepError(state.step, "payment")
        if state.selected_option is None:
            raise MissingCheckoutInfoError(["shipping option"])

        state.step = "payment"
        # klucz idempotencji dla finalizacji
        state.order_id = state.order_id or generate_order_id()
        self.store.save(session_id, state)
        return state

    def complete_order(
        self,
        session_id: str,
        user: UserIdentity,
        payment_method: str = "bank-transfer",
    ) -> Order:
        """
        Use Case: finalizacja zamowienia.
        1. ponowna kontrola adresu i opcji wysylki
        2. zapis zamowienia (blad -> koszyk zostaje, user zostaje na payment)
        3. maile (kazdy osobno, bledy tylko logowane)
        4. czyszczenie koszyka i stanu checkoutu
        """
        state = self.state(session_id)
        if state.step != "payment":
            raise CheckoutStepError(state.step, "complete")

        items = self.cart.get_items(session_id)
        missing = []
        if state.shipping_address is None:
            missing.append("shipping address")
        if state.selected_option is None:
            missing.append("shipping option")
        if not items:
            missing.append("cart items")
        if missing:
            raise MissingCheckoutInfoError(missing)

        order = self._build_order(state, user, items, payment_method)
        created = self.orders.create_order(order)

        try:
            queued = self.notifications.dispatch_order_notifications(created)
            logger.info(f"Order {created.id} notifications queued: {queued}")
        except Exception as e:
            logger.error(f"[NOTIFICATION] dispatch for order {created.id} failed: {e}")

        self.cart.clear_cart(session_id)
        self.store.reset(session_id)
        return created

    def _priced_lines(
        self,
        items: list[CartItem],
        user: UserIdentity | None,
    ) -> list[tuple[CartItem, Decimal]]:
        """(pozycja, cena jednostkowa) - jedno zapytanie o ceny tieru dla calego koszyka"""
        if user is None:
            return [(item, item.product.price) for item in items]
        tier_id = self.pricing.user_tier_id(user.id)
        prices = self.pricing.effective_prices([i.product for i in items], tier_id)
        return [(item, prices.get(item.product.id, item.product.price)) for item in items]

    def _build_order(
        self,
        state: CheckoutSession,
        user: UserIdentity,
        items: list[CartItem],
        payment_method: str,
    ) -> Order:
        lines = []
        for item, price in self._priced_lines(items, user):
            lines.append(
                {
                    "product": item.product,
                    "quantity": item.quantity,
                    "unit_price": price if price != item.product.price else None,
                }
            )

        now = datetime.now(timezone.utc)
        order = normalize_order(
            {
                "id": state.order_id or generate_order_id(),
                "user_id": user.id,
                "user_name": user.name,
                "email": user.email,
                "items": lines,
                "status": "pending",
                "payment_method": payment_method,
                "shipping_address": state.shipping_address,
                "shipping_option": state.selected_option,
                "invoice_status": "draft",
                "created_at": now,
                "updated_at": now,
            }
        )
        order.total = sum((i.line_total for i in order.items), Decimal("0.00")) + order.shipping_cost
        return order
