"""Tests for category minimum order quantity notices."""

from decimal import Decimal

from wholesale.domain.models import CartItem, CategoryRef, Product, ShopSettings
from wholesale.services.category_moq import CategoryMOQResolver


def make_item(product_id, category, quantity):
    return CartItem(
        product=Product(id=product_id, name=product_id, price=Decimal("10.00"), category=category),
        quantity=quantity,
    )


def resolver(moqs=None):
    return CategoryMOQResolver(ShopSettings(category_moqs=moqs or {"Protein Powder": 12}))


class TestMoqLookup:
    def test_exact_name(self):
        assert resolver().moq_for("Protein Powder") == 12

    def test_case_insensitive_fallback(self):
        assert resolver().moq_for({"id": 7, "name": "protein powder"}) == 12

    def test_unknown_category(self):
        assert resolver().moq_for("Accessories") is None

    def test_missing_category(self):
        assert resolver().moq_for(None) is None
        assert resolver().moq_for("") is None


class TestTotalQuantity:
    def test_mixes_string_and_object_categories(self):
        items = [
            make_item("a", "Protein Powder", 4),
            make_item("b", {"name": "protein powder"}, 3),
            make_item("c", "Accessories", 10),
        ]
        assert CategoryMOQResolver.total_quantity(items, "Protein Powder") == 7

    def test_matches_by_id_when_both_sides_have_one(self):
        items = [
            make_item("a", {"id": 1, "name": "Protein Powder"}, 5),
            make_item("b", {"id": 2, "name": "Protein Powder"}, 5),
        ]
        assert CategoryMOQResolver.total_quantity(items, {"id": "1", "name": "Other"}) == 5

    def test_category_ref_identity(self):
        assert CategoryRef.coerce({"id": 3, "name": "X"}).matches(CategoryRef.coerce({"id": "3", "name": "Y"}))
        assert not CategoryRef.coerce("X").matches(None)


class TestAfterAdd:
    def test_below_minimum_reports_remaining(self):
        items = [make_item("a", "Protein Powder", 5)]
        notice = resolver().after_add(items, CategoryRef.coerce("Protein Powder"))

        assert notice.level == "info"
        assert notice.title == "Category minimum not yet met"
        assert "7 more units" in notice.message

    def test_minimum_met(self):
        items = [make_item("a", "Protein Powder", 8), make_item("b", "Protein Powder", 4)]
        notice = resolver().after_add(items, CategoryRef.coerce("Protein Powder"))

        assert notice.level == "success"
        assert "12 units" in notice.message

    def test_no_moq_no_notice(self):
        items = [make_item("a", "Accessories", 1)]
        assert resolver().after_add(items, CategoryRef.coerce("Accessories")) is None


class TestAfterRemove:
    def test_warning_when_partially_filled(self):
        items = [make_item("a", "Protein Powder", 3)]
        notice = resolver().after_remove(items, CategoryRef.coerce("Protein Powder"))

        assert notice.level == "warning"
        assert "9 more units" in notice.message

    def test_no_warning_when_category_empty(self):
        assert resolver().after_remove([], CategoryRef.coerce("Protein Powder")) is None

    def test_no_warning_when_still_met(self):
        items = [make_item("a", "Protein Powder", 12)]
        assert resolver().after_remove(items, CategoryRef.coerce("Protein Powder")) is None


class TestShortfalls:
    def test_only_categories_below_minimum(self):
        items = [
            make_item("a", "Protein Powder", 5),
            make_item("b", "Protein Powder", 2),
            make_item("c", "Accessories", 1),
        ]
        assert resolver({"Protein Powder": 12, "Accessories": 1}).shortfalls(items) == {"Protein Powder": 5}
