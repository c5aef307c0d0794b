"""Wyjatki domenowe sklepu hurtowego."""


class WholesaleError(Exception):
    """Bazowy wyjatek dla wszystkich bledow domeny."""

    pass


class CartValidationError(WholesaleError):
    """Ilosc ponizej minimum produktu albo niepoprawna pozycja koszyka."""

    def __init__(self, message: str, product_id: str | None = None):
        self.product_id = product_id
        super().__init__(message)


class InvalidAddressError(WholesaleError):
    """Adres wysylki nie przeszedl walidacji."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("Invalid shipping address: " + "; ".join(errors))


class CheckoutStepError(WholesaleError):
    """Niedozwolone przejscie miedzy krokami checkoutu."""

    def __init__(self, current: str, requested: str, reason: str | None = None):
        self.current = current
        self.requested = requested
        msg = f"Cannot move from '{current}' to '{requested}'"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)


class MissingCheckoutInfoError(WholesaleError):
    """Brakuje adresu albo opcji wysylki przy finalizacji zamowienia."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(
            "Missing required information for checkout: " + ", ".join(missing)
        )


class ShippingCalculationError(WholesaleError):
    """Nie udalo sie policzyc opcji wysylki. Klient moze sprobowac ponownie."""

    retryable = True


class OrderPersistError(WholesaleError):
    """Zapis zamowienia sie nie powiodl. Koszyk zostaje nietkniety."""

    retryable = True


class OrderNotFoundError(WholesaleError):
    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__(f"Order not found: {order_id}")


class PricingTierNotFoundError(WholesaleError):
    def __init__(self, tier_id: str):
        self.tier_id = tier_id
        super().__init__(f"Pricing tier not found: {tier_id}")


class AuthError(WholesaleError):
    """Brak lub niepoprawny token, albo brak wymaganej roli."""

    def __init__(self, message: str = "Not authenticated", status_code: int = 401):
        self.status_code = status_code
        super().__init__(message)
