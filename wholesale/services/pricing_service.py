# wholesale/services/pricing_service.py
from decimal import Decimal

from sqlalchemy.orm import Session

from wholesale.data.models.pricing import PricingTierModel
from wholesale.domain.models import Product
from wholesale.domain.schemas import PricingTierIn
from wholesale.errors import PricingTierNotFoundError
from wholesale.repos.pricing_repo import PricingRepo
from wholesale.utils.logging import get_logger

logger = get_logger(__name__)


class PricingService:
    """
    Ceny z tierow cenowych.
    Cena efektywna = nadpisanie z product_prices dla tieru uzytkownika,
    a jak go nie ma to cena bazowa produktu.
    """

    def __init__(self, db: Session):
        self.repo = PricingRepo(db)

    #query
    def user_tier_id(self, user_id: str | None) -> int | None:
        if not user_id:
            return None
        row = self.repo.get_user_tier(user_id)
        return row.tier_id if row else None

    def effective_price(self, product: Product, tier_id: int | None) -> Decimal:
        if tier_id is None:
            return product.price
        row = self.repo.get_product_price(product.id, tier_id)
        return row.price if row is not None else product.price

    def savings(self, product: Product, tier_id: int | None, quantity: int) -> Decimal:
        # bez clampowania: nadpisanie powyzej ceny bazowej daje ujemne "savings"
        return (product.price - self.effective_price(product, tier_id)) * quantity

    def effective_prices(self, products: list[Product], tier_id: int | None) -> dict[str, Decimal]:
        """Jedno zapytanie dla calej listy produktow."""
        base = {p.id: p.price for p in products}
        if tier_id is None:
            return base
        overrides = self.repo.get_tier_prices(tier_id, list(base))
        return {pid: overrides.get(pid, price) for pid, price in base.items()}

    def list_tiers(self) -> list[PricingTierModel]:
        return self.repo.list_tiers()

    #commands - admin
    def create_tier(self, payload: PricingTierIn) -> PricingTierModel:
        tier = self.repo.create_tier(PricingTierModel(**payload.model_dump()))
        logger.info(f"Pricing tier {tier.id} ({tier.name}) created")
        return tier

    def update_tier(self, tier_id: int, changes: dict) -> PricingTierModel:
        tier = self._require_tier(tier_id)
        return self.repo.update_tier(tier, changes)

    def delete_tier(self, tier_id: int) -> None:
        tier = self._require_tier(tier_id)
        self.repo.delete_tier(tier)
        logger.info(f"Pricing tier {tier_id} deleted")

    def set_product_price(self, product_id: str, tier_id: int, price: Decimal):
        self._require_tier(tier_id)
        row = self.repo.set_product_price(product_id, tier_id, price)
        logger.info(f"Tier price for product {product_id} in tier {tier_id} set to {price}")
        return row

    def remove_product_price(self, product_id: str, tier_id: int) -> bool:
        return self.repo.delete_product_price(product_id, tier_id)

    def assign_user_tier(self, user_id: str, tier_id: int):
        self._require_tier(tier_id)
        row = self.repo.assign_user_tier(user_id, tier_id)
        logger.info(f"User {user_id} assigned to pricing tier {tier_id}")
        return row

    def remove_user_tier(self, user_id: str) -> bool:
        return self.repo.remove_user_tier(user_id)

    def _require_tier(self, tier_id: int) -> PricingTierModel:
        tier = self.repo.get_tier(tier_id)
        if tier is None:
            raise PricingTierNotFoundError(str(tier_id))
        return tier
