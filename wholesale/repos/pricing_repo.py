# wholesale/repos/pricing_repo.py
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from wholesale.data.models.pricing import PricingTierModel, ProductPriceModel, UserPricingTierModel


class PricingRepo:
    def __init__(self, db: Session):
        self.db = db

    # tiers
    def list_tiers(self) -> list[PricingTierModel]:
        return list(self.db.execute(select(PricingTierModel).order_by(PricingTierModel.name)).scalars().all())

    def get_tier(self, tier_id: int) -> PricingTierModel | None:
        return self.db.get(PricingTierModel, tier_id)

    def create_tier(self, tier: PricingTierModel) -> PricingTierModel:
        self.db.add(tier)
        self.db.commit()
        self.db.refresh(tier)
        return tier

    def update_tier(self, tier: PricingTierModel, values: dict) -> PricingTierModel:
        for key, value in values.items():
            setattr(tier, key, value)
        self.db.commit()
        self.db.refresh(tier)
        return tier

    def delete_tier(self, tier: PricingTierModel) -> None:
        self.db.delete(tier)
        self.db.commit()

    # product prices
    def get_product_price(self, product_id: str, tier_id: int) -> ProductPriceModel | None:
        return self.db.execute(
            select(ProductPriceModel).where(
                ProductPriceModel.product_id == product_id,
                ProductPriceModel.tier_id == tier_id,
            )
        ).scalar_one_or_none()

    def get_tier_prices(self, tier_id: int, product_ids: list[str]) -> dict[str, Decimal]:
        if not product_ids:
            return {}
        rows = self.db.execute(
            select(ProductPriceModel).where(
                ProductPriceModel.tier_id == tier_id,
                ProductPriceModel.product_id.in_(product_ids),
            )
        ).scalars().all()
        return {r.product_id: r.price for r in rows}

    def set_product_price(self, product_id: str, tier_id: int, price: Decimal) -> ProductPriceModel:
        row = self.get_product_price(product_id, tier_id)
        if row is None:
            row = ProductPriceModel(product_id=product_id, tier_id=tier_id, price=price)
            self.db.add(row)
        else:
            row.price = price
        self.db.commit()
        self.db.refresh(row)
        return row

    def delete_product_price(self, product_id: str, tier_id: int) -> bool:
        row = self.get_product_price(product_id, tier_id)
        if row is None:
            return False
        self.db.delete(row)
        self.db.commit()
        return True

    # user -> tier
    def get_user_tier(self, user_id: str) -> UserPricingTierModel | None:
        return self.db.execute(
            select(UserPricingTierModel).where(UserPricingTierModel.user_id == user_id)
        ).scalar_one_or_none()

    def assign_user_tier(self, user_id: str, tier_id: int) -> UserPricingTierModel:
        row = self.get_user_tier(user_id)
        if row is None:
            row = UserPricingTierModel(user_id=user_id, tier_id=tier_id)
            self.db.add(row)
        else:
            row.tier_id = tier_id
        self.db.commit()
        self.db.refresh(row)
        return row

    def remove_user_tier(self, user_id: str) -> bool:
        row = self.get_user_tier(user_id)
        if row is None:
            return False
        self.db.delete(row)
        self.db.commit()
        return True
