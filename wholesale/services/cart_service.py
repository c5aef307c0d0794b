# wholesale/services/cart_service.py
from decimal import Decimal
from typing import Iterable

from wholesale.domain.models import CartItem, Notice, Product
from wholesale.domain.schemas import CartOut
from wholesale.errors import CartValidationError
from wholesale.services.category_moq import CategoryMOQResolver
from wholesale.stores.cart_store import CartStore
from wholesale.utils.logging import get_logger

logger = get_logger(__name__)


def total_items(items: Iterable[CartItem]) -> int:
    return sum(i.quantity for i in items)


def subtotal(items: Iterable[CartItem]) -> Decimal:
    # zawsze cena bazowa, ceny z tierow dochodza dopiero przy zamowieniu
    return sum((i.product.price * i.quantity for i in items), Decimal("0.00"))


def cart_weight(items: Iterable[CartItem]) -> Decimal:
    return sum(((i.product.weight or Decimal("0")) * i.quantity for i in items), Decimal("0"))


class CartService:
    """
    Use case'y koszyka sesji.
    commands (add, remove, update, clear) zapisuja koszyk od razu do store,
    query (view) liczy total_items i subtotal przy kazdym odczycie.

    add_to_cart pilnuje min_quantity produktu, update_quantity juz nie.
    """

    def __init__(self, store: CartStore, moq: CategoryMOQResolver):
        self.store = store
        self.moq = moq

    #query - odczyt
    def get_items(self, session_id: str) -> list[CartItem]:
        return self.store.load(session_id)

    def view(self, session_id: str, notices: list[Notice] | None = None) -> CartOut:
        return self._to_out(self.get_items(session_id), notices or [])

    def _to_out(self, items: list[CartItem], notices: list[Notice]) -> CartOut:
        return CartOut(
            items=items,
            total_items=total_items(items),
            subtotal=subtotal(items),
            notices=notices,
            category_shortfalls=self.moq.shortfalls(items),
        )

    #commands
    def add_to_cart(self, session_id: str, product: Product, quantity: int) -> CartOut:
        min_qty = product.min_quantity or 1
        if quantity < min_qty:
            # koszyk zostaje bez zmian
            raise CartValidationError(
                f"You must order at least {min_qty} units of {product.name}.",
                product_id=product.id,
            )

        items = self.get_items(session_id)
        existing = next((i for i in items if i.product.id == product.id), None)

        if existing:
            logger.info(
                f"Produkt {product.id} juz jest w koszyku {session_id}, zwiekszam ilosc "
                f"z {existing.quantity} do {existing.quantity + quantity}"
            )
            existing.quantity += quantity
        else:
            logger.info(f"Dodaje produkt {product.id} x{quantity} do koszyka {session_id}")
            items.append(CartItem(product=product, quantity=quantity))

        self.store.save(session_id, items)

        notices = []
        moq_notice = self.moq.after_add(items, product.category)
        if moq_notice:
            notices.append(moq_notice)
        notices.append(
            Notice(
                level="success",
                title="Added to cart",
                message=f"{quantity} x {product.name} added to your cart.",
            )
        )
        return self._to_out(items, notices)

    def remove_from_cart(self, session_id: str, product_id: str) -> CartOut:
        items = self.get_items(session_id)
        removed = next((i for i in items if i.product.id == product_id), None)
        items = [i for i in items if i.product.id != product_id]
        self.store.save(session_id, items)

        logger.info(f"Usunieto produkt {product_id} z koszyka {session_id}")

        notices = []
        if removed:
            moq_notice = self.moq.after_remove(items, removed.product.category)
            if moq_notice:
                notices.append(moq_notice)
        notices.append(
            Notice(level="info", title="Removed from cart", message="Item removed from your cart.")
        )
        return self._to_out(items, notices)

    def update_quantity(self, session_id: str, product_id: str, quantity: int) -> CartOut:
        if quantity <= 0:
            return self.remove_from_cart(session_id, product_id)

        items = self.get_items(session_id)
        updated = None
        for item in items:
            if item.product.id == product_id:
                # bez walidacji min_quantity, to robi tylko add_to_cart
                item.quantity = quantity
                updated = item

        self.store.save(session_id, items)

        notices = []
        if updated is not None:
            category = updated.product.category
            moq = self.moq.moq_for(category)
            total = self.moq.total_quantity(items, category)
            if moq and total < moq:
                notices.append(
                    Notice(
                        level="warning",
                        title="Category minimum not met",
                        message=(
                            f"You need {moq - total} more units from the {category.name} "
                            f"category to meet the minimum order of {moq} units."
                        ),
                    )
                )
        return self._to_out(items, notices)

    def clear_cart(self, session_id: str) -> CartOut:
        self.store.clear(session_id)
        logger.info(f"Koszyk {session_id} wyczyszczony")
        return self._to_out(
            [],
            [Notice(level="info", title="Cart cleared", message="All items have been removed from your cart.")],
        )
