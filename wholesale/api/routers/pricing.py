# wholesale/api/routers/pricing.py
from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from wholesale.api.deps import get_optional_user, require_admin
from wholesale.data.database import get_db
from wholesale.domain.models import UserIdentity
from wholesale.domain.schemas import (
    EffectivePriceOut,
    PricingTierIn,
    PricingTierOut,
    PricingTierUpdateIn,
    ProductPriceIn,
    ProductPriceOut,
    UserTierIn,
)
from wholesale.errors import PricingTierNotFoundError
from wholesale.repos.product_repo import ProductRepo, product_from_model
from wholesale.services.pricing_service import PricingService

router = APIRouter(prefix="/pricing", tags=["pricing"])
admin_router = APIRouter(
    prefix="/admin/pricing",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
)


def _tier_out(tier) -> PricingTierOut:
    return PricingTierOut.model_validate(tier, from_attributes=True)


@router.get("/products/{product_id}", response_model=EffectivePriceOut)
def effective_price(
    product_id: str,
    user: UserIdentity | None = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    """Cena produktu dla zalogowanego uzytkownika (z jego tieru)."""
    row = ProductRepo(db).get_product(product_id)
    if not row:
        raise HTTPException(status_code=404, detail="Product not found")

    product = product_from_model(row)
    svc = PricingService(db)
    tier_id = svc.user_tier_id(user.id if user else None)
    return EffectivePriceOut(
        product_id=product.id,
        base_price=product.price,
        effective_price=svc.effective_price(product, tier_id),
        savings=svc.savings(product, tier_id, 1),
        tier_id=tier_id,
    )


@admin_router.get("/tiers", response_model=list[PricingTierOut])
def list_tiers(db: Session = Depends(get_db)):
    return [_tier_out(t) for t in PricingService(db).list_tiers()]


@admin_router.post("/tiers", response_model=PricingTierOut, status_code=201)
def create_tier(payload: PricingTierIn, db: Session = Depends(get_db)):
    return _tier_out(PricingService(db).create_tier(payload))


@admin_router.put("/tiers/{tier_id}", response_model=PricingTierOut)
def update_tier(tier_id: int, payload: PricingTierUpdateIn, db: Session = Depends(get_db)):
    try:
        tier = PricingService(db).update_tier(tier_id, payload.model_dump(exclude_unset=True))
    except PricingTierNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _tier_out(tier)


@admin_router.delete("/tiers/{tier_id}", status_code=204)
def delete_tier(tier_id: int, db: Session = Depends(get_db)):
    try:
        PricingService(db).delete_tier(tier_id)
    except PricingTierNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return Response(status_code=204)


@admin_router.put("/tiers/{tier_id}/products/{product_id}", response_model=ProductPriceOut)
def set_product_price(
    tier_id: int,
    product_id: str,
    payload: ProductPriceIn,
    db: Session = Depends(get_db),
):
    if not ProductRepo(db).get_product(product_id):
        raise HTTPException(status_code=404, detail="Product not found")
    try:
        row = PricingService(db).set_product_price(product_id, tier_id, payload.price)
    except PricingTierNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return ProductPriceOut(product_id=row.product_id, tier_id=row.tier_id, price=row.price)


@admin_router.delete("/tiers/{tier_id}/products/{product_id}", status_code=204)
def remove_product_price(tier_id: int, product_id: str, db: Session = Depends(get_db)):
    if not PricingService(db).remove_product_price(product_id, tier_id):
        raise HTTPException(status_code=404, detail="Tier price not found")
    return Response(status_code=204)


@admin_router.put("/users/{user_id}", status_code=204)
def assign_user_tier(user_id: str, payload: UserTierIn, db: Session = Depends(get_db)):
    try:
        PricingService(db).assign_user_tier(user_id, payload.tier_id)
    except PricingTierNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return Response(status_code=204)


@admin_router.delete("/users/{user_id}", status_code=204)
def remove_user_tier(user_id: str, db: Session = Depends(get_db)):
    if not PricingService(db).remove_user_tier(user_id):
        raise HTTPException(status_code=404, detail="User has no pricing tier")
    return Response(status_code=204)
