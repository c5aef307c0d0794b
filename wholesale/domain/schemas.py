# wholesale/domain/schemas.py
from datetime import date
from decimal import Decimal
from typing import List

from pydantic import Field

from wholesale.domain.models import (
    CartItem,
    CheckoutStep,
    DomainModel,
    InvoiceStatus,
    Notice,
    Order,
    OrderStatus,
    ShippingAddress,
    ShippingOption,
)


class ItemIn(DomainModel):
    """Schema dla dodawania produktu do koszyka."""

    product_id: str = Field(..., min_length=1, description="ID produktu")
    quantity: int = Field(..., description="Ilosc produktu")


class QuantityIn(DomainModel):
    """Schema dla zmiany ilosci (0 lub mniej usuwa pozycje)."""

    quantity: int


class CartOut(DomainModel):
    """Schema dla koszyka (response)."""

    items: List[CartItem]
    total_items: int
    subtotal: Decimal
    notices: List[Notice] = Field(default_factory=list)
    category_shortfalls: dict[str, int] = Field(default_factory=dict)


class ShippingQuoteIn(DomainModel):
    """Zapytanie o opcje wysylki poza checkoutem."""

    total_weight: Decimal = Field(..., ge=0)
    postal_code: str
    state: str


class CheckoutOut(DomainModel):
    """Schema dla stanu checkoutu (response)."""

    step: CheckoutStep
    shipping_address: ShippingAddress | None = None
    editing_address: bool = False
    shipping_options: List[ShippingOption] = Field(default_factory=list)
    selected_option: ShippingOption | None = None
    subtotal: Decimal = Decimal("0.00")
    total: Decimal = Decimal("0.00")
    order_id: str | None = None


class SelectOptionIn(DomainModel):
    option_id: str


class CompleteOrderIn(DomainModel):
    payment_method: str = "bank-transfer"


class OrderSuccessOut(DomainModel):
    order: Order
    redirect_to: str = "/order-success"


class OrderStatusIn(DomainModel):
    status: OrderStatus


class OrderUpdateIn(DomainModel):
    """Edycja zamowienia przez admina. total zmienia sie tylko gdy jest podany."""

    user_name: str | None = None
    email: str | None = None
    items: List[dict] | None = None
    total: Decimal | None = Field(default=None, ge=0)
    status: OrderStatus | None = None
    payment_method: str | None = None
    shipping_address: ShippingAddress | None = None
    shipping_option: ShippingOption | None = None
    invoice_status: InvoiceStatus | None = None
    invoice_url: str | None = None
    invoice_number: str | None = None
    notes: str | None = None


class AdminOrderLineIn(DomainModel):
    product_id: str
    quantity: int = Field(default=1, gt=0)
    unit_price: Decimal | None = Field(default=None, ge=0)


class AdminOrderUserIn(DomainModel):
    id: str | None = None
    email: str | None = None
    name: str | None = None


class AdminOrderCreateIn(DomainModel):
    """Reczne zamowienie tworzone przez admina z wlasnymi cenami."""

    user: AdminOrderUserIn
    items: List[AdminOrderLineIn] = Field(..., min_length=1)
    shipping_price: Decimal = Field(default=Decimal("0.00"), ge=0)
    shipping_address: ShippingAddress | None = None
    notes: str | None = None
    payment_method: str = "bank-transfer"
    status: OrderStatus = "pending"


class TrackingIn(DomainModel):
    tracking_number: str = Field(..., min_length=1)
    carrier: str | None = None
    tracking_url: str | None = None
    shipped_date: date | None = None
    estimated_delivery_date: date | None = None


class PricingTierIn(DomainModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = None
    discount_percentage: Decimal = Field(default=Decimal("0"), ge=0, le=100)


class PricingTierUpdateIn(DomainModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None
    discount_percentage: Decimal | None = Field(default=None, ge=0, le=100)


class PricingTierOut(DomainModel):
    id: int
    name: str
    description: str | None = None
    discount_percentage: Decimal


class ProductPriceIn(DomainModel):
    price: Decimal = Field(..., ge=0)


class ProductPriceOut(DomainModel):
    product_id: str
    tier_id: int
    price: Decimal


class UserTierIn(DomainModel):
    tier_id: int


class EffectivePriceOut(DomainModel):
    product_id: str
    base_price: Decimal
    effective_price: Decimal
    savings: Decimal
    tier_id: int | None = None


class EmailSettingsUpdateIn(DomainModel):
    admin_email: str | None = None
    dispatch_email: str | None = None
    accounts_email: str | None = None
    notify_customer: bool | None = None
    notify_admin: bool | None = None
    notify_dispatch: bool | None = None
    notify_accounts: bool | None = None


class ShopSettingsUpdateIn(DomainModel):
    free_shipping_threshold: int | None = Field(default=None, ge=0)
    free_shipping_message: str | None = None
    free_shipping_days: str | None = None
    category_moqs: dict[str, int] | None = None
    email: EmailSettingsUpdateIn | None = None
