# wholesale/services/category_moq.py
from typing import Any, Iterable

from wholesale.domain.models import CartItem, CategoryRef, Notice, ShopSettings


class CategoryMOQResolver:
    """
    Minimalne zamowienie (MOQ) liczone dla calej kategorii, nie produktu.
    Tabela MOQ pochodzi z ustawien sklepu przekazanych w konstruktorze.
    """

    def __init__(self, settings: ShopSettings):
        self._moqs = dict(settings.category_moqs)
        self._moqs_lower = {name.lower(): moq for name, moq in self._moqs.items()}

    def moq_for(self, category: Any) -> int | None:
        ref = CategoryRef.coerce(category)
        if ref is None or not ref.name:
            return None
        moq = self._moqs.get(ref.name)
        if moq is None:
            moq = self._moqs_lower.get(ref.name.lower())
        return moq

    @staticmethod
    def total_quantity(items: Iterable[CartItem], category: Any) -> int:
        ref = CategoryRef.coerce(category)
        if ref is None:
            return 0
        return sum(i.quantity for i in items if ref.matches(i.product.category))

    # komunikaty doradcze, nigdy nie blokuja koszyka

    def after_add(self, items: list[CartItem], category: CategoryRef | None) -> Notice | None:
        moq = self.moq_for(category)
        if not moq:
            return None

        total = self.total_quantity(items, category)
        if total < moq:
            remaining = moq - total
            return Notice(
                level="info",
                title="Category minimum not yet met",
                message=(
                    f"You need {remaining} more units from the {category.name} category "
                    f"to meet the minimum order of {moq} units. "
                    "You can mix and match different products from this category."
                ),
            )
        return Notice(
            level="success",
            title="Category minimum met",
            message=(
                f"Great! You now have {total} units from the {category.name} category, "
                "meeting the minimum requirement."
            ),
        )

    def after_remove(self, items: list[CartItem], category: CategoryRef | None) -> Notice | None:
        moq = self.moq_for(category)
        if not moq:
            return None

        total = self.total_quantity(items, category)
        # pusta kategoria to nie problem, ostrzegamy tylko gdy cos zostalo
        if 0 < total < moq:
            return Notice(
                level="warning",
                title="Category minimum warning",
                message=(
                    f"You now need {moq - total} more units from the {category.name} category "
                    f"to meet the minimum order of {moq} units."
                ),
            )
        return None

    def shortfalls(self, items: list[CartItem]) -> dict[str, int]:
        """kategoria -> ile jednostek brakuje do MOQ (tylko kategorie obecne w koszyku)"""
        result: dict[str, int] = {}
        seen: list[CategoryRef] = []
        for item in items:
            category = item.product.category
            if category is None or any(category.matches(s) for s in seen):
                continue
            seen.append(category)
            moq = self.moq_for(category)
            if moq:
                total = self.total_quantity(items, category)
                if total < moq:
                    result[category.name] = moq - total
        return result
