# wholesale/services/shipping_service.py
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from wholesale.domain.models import CartItem, ShippingOption, ShopSettings
from wholesale.errors import ShippingCalculationError
from wholesale.utils.logging import get_logger

logger = get_logger(__name__)

FREE_SHIPPING_ID = "free-shipping"
FREE_SHIPPING_CARRIER = "Australia Post"

HEAVY_WEIGHT_KG = Decimal("5")
HEAVY_MULTIPLIER = Decimal("1.5")
REMOTE_MULTIPLIER = Decimal("1.2")
REMOTE_STATES = frozenset({"WA", "NT"})
REMOTE_EXPRESS_DAYS = "4-6 business days"
REMOTE_STANDARD_DAYS = "7-12 business days"

# dwa przewozniki x trzy poziomy uslugi
CARRIER_OPTIONS: tuple[ShippingOption, ...] = (
    ShippingOption(
        id="auspost-parcel", name="Parcel Post", carrier="Australia Post",
        price=Decimal("12.95"), estimated_delivery_days="5-7 business days",
        description="Standard tracked delivery",
    ),
    ShippingOption(
        id="auspost-express", name="Express Post", carrier="Australia Post",
        price=Decimal("18.95"), estimated_delivery_days="2-3 business days",
        description="Next business day delivery to most metro areas",
    ),
    ShippingOption(
        id="auspost-same-day", name="Same Day", carrier="Australia Post",
        price=Decimal("29.95"), estimated_delivery_days="Same day",
        description="Order before 11am for delivery today",
    ),
    ShippingOption(
        id="startrack-road", name="Road Express", carrier="StarTrack",
        price=Decimal("14.50"), estimated_delivery_days="3-5 business days",
        description="Economy road freight",
    ),
    ShippingOption(
        id="startrack-premium", name="Premium Express", carrier="StarTrack",
        price=Decimal("22.00"), estimated_delivery_days="1-2 business days",
        description="Priority air and road freight",
    ),
    ShippingOption(
        id="startrack-same-day", name="Same Day", carrier="StarTrack",
        price=Decimal("34.00"), estimated_delivery_days="Same day",
        description="Metro courier delivery",
    ),
)

# uproszczone mapowanie pierwszej cyfry kodu pocztowego na stan
_POSTCODE_STATES = {
    "0": "NT",
    "1": "NSW",
    "2": "NSW",
    "3": "VIC",
    "4": "QLD",
    "5": "SA",
    "6": "WA",
    "7": "TAS",
}


@dataclass(frozen=True)
class Destination:
    postal_code: str
    state: str


def state_from_postal_code(postal_code: str) -> str:
    return _POSTCODE_STATES.get((postal_code or "")[:1], "NSW")


def is_same_day(option: ShippingOption) -> bool:
    return option.id.endswith("same-day")


def _money(value: Decimal) -> Decimal:
    return value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


class ShippingCalculator:
    """
    Opcje wysylki dla koszyka.

    Kolejnosc regul ma znaczenie:
    1. darmowa wysylka (prog z ustawien) - jedyna opcja, nic innego nie oferujemy
    2. katalog przewoznikow
    3. doplata za wage > 5kg (x1.5)
    4. stany odlegle: bez same-day, x1.2 i dluzsze terminy
    """

    def __init__(self, settings: ShopSettings):
        self.settings = settings

    @staticmethod
    def protein_unit_count(items: Iterable[CartItem]) -> int:
        count = 0
        for item in items:
            category = item.product.category
            if category is not None and "protein" in category.name.lower():
                count += item.quantity
        return count

    def free_shipping_option(self) -> ShippingOption:
        return ShippingOption(
            id=FREE_SHIPPING_ID,
            name="Free Shipping",
            carrier=FREE_SHIPPING_CARRIER,
            price=Decimal("0.00"),
            estimated_delivery_days=self.settings.free_shipping_days,
            description=self.settings.free_shipping_message,
        )

    def calculate_options(
        self,
        total_weight: Decimal,
        destination: Destination,
        items: Iterable[CartItem] = (),
    ) -> list[ShippingOption]:
        try:
            return self._calculate(Decimal(str(total_weight)), destination, list(items))
        except Exception as e:
            # bez cichego fallbacku, wolajacy musi zablokowac checkout
            logger.error(f"Error calculating shipping options: {e}")
            raise ShippingCalculationError(f"Could not calculate shipping options: {e}") from e

    def _calculate(
        self,
        total_weight: Decimal,
        destination: Destination,
        items: list[CartItem],
    ) -> list[ShippingOption]:
        logger.info(
            f"Calculating shipping options for weight={total_weight}kg "
            f"postcode={destination.postal_code} state={destination.state}"
        )

        if self.protein_unit_count(items) >= self.settings.free_shipping_threshold:
            return [self.free_shipping_option()]

        options = [o.model_copy() for o in CARRIER_OPTIONS]

        if total_weight > HEAVY_WEIGHT_KG:
            for option in options:
                option.price = option.price * HEAVY_MULTIPLIER

        state = (destination.state or "").strip().upper()
        if state in REMOTE_STATES:
            options = [o for o in options if not is_same_day(o)]
            for option in options:
                option.price = option.price * REMOTE_MULTIPLIER
                if "express" in option.name.lower():
                    option.estimated_delivery_days = REMOTE_EXPRESS_DAYS
                else:
                    option.estimated_delivery_days = REMOTE_STANDARD_DAYS

        for option in options:
            option.price = _money(option.price)
        return options
