# wholesale/domain/order_normalizer.py
"""
Sprowadzanie zamowien do jednego kanonicznego ksztaltu.

Rekord moze przyjsc prosto z bazy (snake_case, items/shipping_address/
shipping_option jako tekst json) albo byc juz zbudowany w pamieci
(camelCase, struktury). Obie drogi daja ten sam obiekt Order.
Funkcje sa czyste: bez I/O i bez modyfikacji wejscia.
"""
import json
from decimal import Decimal
from typing import Any, Mapping

from wholesale.domain.models import Order, OrderItem, Product

# pola zamowienia: nazwa kanoniczna -> nazwa w pamieci (camelCase)
_TOP_LEVEL_FIELDS = {
    "id": "id",
    "user_id": "userId",
    "user_name": "userName",
    "email": "email",
    "total": "total",
    "status": "status",
    "created_at": "createdAt",
    "updated_at": "updatedAt",
    "payment_method": "paymentMethod",
    "invoice_status": "invoiceStatus",
    "invoice_url": "invoiceUrl",
    "invoice_number": "invoiceNumber",
    "notes": "notes",
    "tracking_info": "trackingInfo",
}

UNKNOWN_PRODUCT_NAME = "Unknown product"


def _pick(raw: Mapping[str, Any], snake: str, camel: str) -> Any:
    if raw.get(snake) is not None:
        return raw[snake]
    return raw.get(camel)


def _decode(value: Any) -> Any:
    if isinstance(value, bytes):
        value = value.decode("utf-8")
    if isinstance(value, str):
        if not value.strip():
            return None
        return json.loads(value)
    return value


def _as_dict(value: Any) -> dict | None:
    if value is None:
        return None
    if hasattr(value, "model_dump"):
        return value.model_dump()
    if isinstance(value, Mapping):
        return dict(value)
    return None


def _is_materialized(product: Mapping[str, Any] | None) -> bool:
    if not product:
        return False
    return all(product.get(k) is not None for k in ("id", "name", "price"))


def _normalize_item(
    raw_item: Any,
    products: Mapping[str, Any],
) -> OrderItem:
    raw_item = _decode(raw_item)
    if isinstance(raw_item, OrderItem):
        return raw_item.model_copy(deep=True)

    item = _as_dict(raw_item) or {}
    product = _as_dict(item.get("product"))

    product_id = _pick(item, "product_id", "productId")
    if product_id is None and product:
        product_id = product.get("id")

    unit_price = _pick(item, "unit_price", "unitPrice")
    quantity = item.get("quantity")
    if quantity is None:
        quantity = 1

    if not _is_materialized(product):
        looked_up = _as_dict(products.get(str(product_id))) if product_id is not None else None
        # snapshot z zamowienia ma pierwszenstwo, lookup tylko uzupelnia braki
        merged = {**(looked_up or {}), **{k: v for k, v in (product or {}).items() if v is not None}}

        if not _is_materialized(merged):
            merged.setdefault("id", str(product_id) if product_id is not None else "")
            merged.setdefault("name", UNKNOWN_PRODUCT_NAME)
            if merged.get("price") is None:
                merged["price"] = unit_price if unit_price is not None else Decimal("0.00")
        product = merged

    return OrderItem(
        product=Product.model_validate(product),
        quantity=int(quantity),
        unit_price=unit_price,
    )


def normalize_order(
    raw: Mapping[str, Any] | Order,
    products: Mapping[str, Any] | None = None,
) -> Order:
    """
    Zwraca kanoniczny Order.

    raw      - rekord z bazy albo slownik/obiekt juz w pamieci
    products - opcjonalna mapa product_id -> produkt, uzywana gdy pozycja
               zamowienia ma tylko id produktu
    """
    if isinstance(raw, Order):
        raw = raw.model_dump()
    products = products or {}

    data: dict[str, Any] = {}
    for snake, camel in _TOP_LEVEL_FIELDS.items():
        value = _pick(raw, snake, camel)
        if value is not None:
            data[snake] = value

    raw_items = _decode(raw.get("items")) or []
    data["items"] = [_normalize_item(i, products) for i in raw_items]

    address = _decode(_pick(raw, "shipping_address", "shippingAddress"))
    if address:
        data["shipping_address"] = _as_dict(address)

    option = _decode(_pick(raw, "shipping_option", "shippingOption"))
    if option:
        data["shipping_option"] = _as_dict(option)

    data["id"] = str(data.get("id", ""))
    if data.get("user_id") is not None:
        data["user_id"] = str(data["user_id"])
    data.setdefault("status", "pending")
    data.setdefault("user_name", "")
    data.setdefault("email", "")
    data.setdefault("total", Decimal("0.00"))
    if data.get("updated_at") is None and data.get("created_at") is not None:
        data["updated_at"] = data["created_at"]

    return Order.model_validate(data)


def order_to_record(order: Order) -> dict[str, Any]:
    """
    Odwrotnosc normalize_order: kolumny tabeli orders (snake_case),
    items/shipping_address/shipping_option jako tekst json.
    """
    record = order.model_dump(
        exclude={"items", "shipping_address", "shipping_option", "tracking_info"}
    )
    record["items"] = json.dumps(
        [i.model_dump(mode="json") for i in order.items]
    )
    record["shipping_address"] = (
        json.dumps(order.shipping_address.model_dump(mode="json"))
        if order.shipping_address
        else None
    )
    record["shipping_option"] = (
        json.dumps(order.shipping_option.model_dump(mode="json"))
        if order.shipping_option
        else None
    )
    return record


def unresolved_product_ids(raw: Mapping[str, Any]) -> set[str]:
    """id produktow, ktore trzeba dociagnac zanim wolamy normalize_order"""
    ids = set()
    for raw_item in _decode(raw.get("items")) or []:
        item = _as_dict(_decode(raw_item)) or {}
        product = _as_dict(item.get("product"))
        if _is_materialized(product):
            continue
        product_id = _pick(item, "product_id", "productId")
        if product_id is None and product:
            product_id = product.get("id")
        if product_id is not None:
            ids.add(str(product_id))
    return ids
