# wholesale/domain/models.py
from datetime import date, datetime
from decimal import Decimal
from typing import Any, List, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


OrderStatus = Literal["pending", "processing", "shipped", "delivered", "cancelled"]
InvoiceStatus = Literal["draft", "issued", "paid", "cancelled"]


class DomainModel(BaseModel):
    """
    Wspolna konfiguracja: pola w pythonie sa snake_case,
    na zewnatrz (json, api) camelCase. Przyjmujemy oba warianty.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CategoryRef(DomainModel):
    """
    Znormalizowana referencja kategorii.
    W danych kategoria bywa stringiem albo obiektem {id, name},
    wiec wszystko konwertujemy na wejsciu przez coerce().
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    id: str | None = None
    name: str = ""

    @classmethod
    def coerce(cls, value: Any) -> "CategoryRef | None":
        if value is None or value == "":
            return None
        if isinstance(value, CategoryRef):
            return value
        if isinstance(value, str):
            return cls(name=value)
        if isinstance(value, dict):
            raw_id = value.get("id")
            return cls(
                id=str(raw_id) if raw_id is not None else None,
                name=value.get("name") or "",
            )
        raise TypeError(f"Unsupported category value: {value!r}")

    @property
    def key(self) -> str:
        return self.name.strip().lower()

    def matches(self, other: "CategoryRef | None") -> bool:
        if other is None:
            return False
        # tozsamosc po id, jesli obie strony je maja; inaczej po nazwie
        if self.id is not None and other.id is not None:
            return self.id == other.id
        return self.key == other.key


class Product(DomainModel):
    id: str
    name: str
    description: str = ""
    price: Decimal
    stock: int = Field(default=0, ge=0)
    category: CategoryRef | None = None
    min_quantity: int = Field(default=1, ge=1)
    weight: Decimal | None = None
    image: str | None = None

    # metadane opisowe, checkout ich nie interpretuje
    serving_size: str | None = None
    number_of_servings: int | None = None
    bag_size: str | None = None
    ingredients: str | None = None
    amino_acid_profile: List[dict] | None = None
    nutritional_info: List[dict] | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, value):
        return str(value) if value is not None else value

    @field_validator("category", mode="before")
    @classmethod
    def _coerce_category(cls, value):
        return CategoryRef.coerce(value)

    @field_validator("min_quantity", mode="before")
    @classmethod
    def _default_min_quantity(cls, value):
        return value or 1


class CartItem(DomainModel):
    product: Product
    quantity: int = Field(gt=0)

    @property
    def line_total(self) -> Decimal:
        return self.product.price * self.quantity


class ShippingAddress(DomainModel):
    name: str = ""
    street: str = ""
    city: str = ""
    state: str = ""
    postal_code: str = ""
    country: str = "AU"
    phone: str = ""


class ShippingOption(DomainModel):
    id: str
    name: str
    carrier: str
    price: Decimal = Field(ge=0)
    estimated_delivery_days: str | int
    description: str | None = None


class OrderItem(DomainModel):
    product: Product
    quantity: int = Field(gt=0)
    unit_price: Decimal | None = None

    @property
    def effective_unit_price(self) -> Decimal:
        if self.unit_price is not None:
            return self.unit_price
        return self.product.price

    @property
    def line_total(self) -> Decimal:
        return self.effective_unit_price * self.quantity


class TrackingInfo(DomainModel):
    tracking_number: str
    carrier: str
    tracking_url: str | None = None
    shipped_date: date | None = None
    estimated_delivery_date: date | None = None


class Order(DomainModel):
    """
    Kanoniczny ksztalt zamowienia. Budowany wylacznie przez order_normalizer.
    total to zamrozony snapshot z chwili utworzenia, nie jest przeliczany.
    """

    id: str
    user_id: str | None = None
    user_name: str = ""
    email: str = ""
    items: List[OrderItem] = Field(default_factory=list)
    total: Decimal = Decimal("0.00")
    status: OrderStatus = "pending"
    created_at: datetime | None = None
    updated_at: datetime | None = None
    payment_method: str = ""
    shipping_address: ShippingAddress | None = None
    shipping_option: ShippingOption | None = None
    invoice_status: InvoiceStatus | None = None
    invoice_url: str | None = None
    invoice_number: str | None = None
    notes: str | None = None
    tracking_info: TrackingInfo | None = None

    @property
    def shipping_cost(self) -> Decimal:
        if self.shipping_option is None:
            return Decimal("0.00")
        return self.shipping_option.price


class EmailSettings(DomainModel):
    admin_email: str = ""
    dispatch_email: str = ""
    accounts_email: str = ""
    notify_customer: bool = True
    notify_admin: bool = True
    notify_dispatch: bool = False
    notify_accounts: bool = False


class ShopSettings(DomainModel):
    """Ustawienia biznesowe edytowalne przez admina (tabela shop_settings)."""

    free_shipping_threshold: int = Field(default=12, ge=0)
    free_shipping_message: str = "Free shipping for orders with 12+ items"
    free_shipping_days: str = "5-7 business days"
    category_moqs: dict[str, int] = Field(default_factory=lambda: {"Protein Powder": 12})
    email: EmailSettings = Field(default_factory=EmailSettings)


class UserIdentity(DomainModel):
    id: str
    email: str = ""
    name: str = ""
    roles: List[str] = Field(default_factory=list)

    @property
    def is_admin(self) -> bool:
        return "admin" in self.roles


NoticeLevel = Literal["success", "info", "warning", "error"]


class Notice(DomainModel):
    """Komunikat dla uzytkownika (toast). Nie blokuje operacji."""

    level: NoticeLevel
    title: str
    message: str


CheckoutStep = Literal["cart", "shipping", "shipping-options", "payment"]


class CheckoutSession(DomainModel):
    """Stan checkoutu jednej sesji przegladarki (trzymany w redisie)."""

    step: CheckoutStep = "cart"
    shipping_address: ShippingAddress | None = None
    editing_address: bool = False
    shipping_options: List[ShippingOption] = Field(default_factory=list)
    selected_option: ShippingOption | None = None
    # numer ostatniego zleconego przeliczenia wysylki, starsze wyniki odrzucamy
    quote_seq: int = 0
    applied_quote_seq: int = 0
    # generowany przy wejsciu w payment, sluzy jako klucz idempotencji
    order_id: str | None = None
    payment_method: str = "bank-transfer"
