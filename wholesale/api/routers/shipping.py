# wholesale/api/routers/shipping.py
from fastapi import APIRouter, Depends, HTTPException

from wholesale.api.deps import get_cart_service, get_session_id, get_shop_settings
from wholesale.domain.models import ShippingOption, ShopSettings
from wholesale.domain.schemas import ShippingQuoteIn
from wholesale.errors import ShippingCalculationError
from wholesale.services.cart_service import CartService
from wholesale.services.shipping_service import Destination, ShippingCalculator, state_from_postal_code

router = APIRouter(prefix="/shipping", tags=["shipping"])


@router.post("/quote", response_model=list[ShippingOption])
def quote(
    payload: ShippingQuoteIn,
    session_id: str = Depends(get_session_id),
    settings: ShopSettings = Depends(get_shop_settings),
    cart: CartService = Depends(get_cart_service),
):
    calculator = ShippingCalculator(settings)
    try:
        return calculator.calculate_options(
            payload.total_weight,
            Destination(postal_code=payload.postal_code, state=payload.state),
            cart.get_items(session_id),
        )
    except ShippingCalculationError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.get("/options/{postal_code}", response_model=list[ShippingOption])
def options_for_postal_code(
    postal_code: str,
    settings: ShopSettings = Depends(get_shop_settings),
):
    calculator = ShippingCalculator(settings)
    try:
        return calculator.calculate_options(
            1,
            Destination(postal_code=postal_code, state=state_from_postal_code(postal_code)),
        )
    except ShippingCalculationError as e:
        raise HTTPException(status_code=503, detail=str(e))
