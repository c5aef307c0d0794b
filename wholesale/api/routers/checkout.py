# wholesale/api/routers/checkout.py
from fastapi import APIRouter, Depends, HTTPException

from wholesale.api.deps import (
    get_checkout_service,
    get_current_user,
    get_optional_user,
    get_session_id,
)
from wholesale.domain.models import ShippingAddress, UserIdentity
from wholesale.domain.schemas import CheckoutOut, CompleteOrderIn, OrderSuccessOut, SelectOptionIn
from wholesale.errors import (
    CheckoutStepError,
    InvalidAddressError,
    MissingCheckoutInfoError,
    OrderPersistError,
    ShippingCalculationError,
)
from wholesale.services.checkout_service import CheckoutService

router = APIRouter(prefix="/checkout", tags=["checkout"])


@router.get("/", response_model=CheckoutOut)
def get_checkout(
    session_id: str = Depends(get_session_id),
    user: UserIdentity | None = Depends(get_optional_user),
    svc: CheckoutService = Depends(get_checkout_service),
):
    return svc.view(session_id, user=user)


@router.post("/start", response_model=CheckoutOut)
def start_checkout(
    session_id: str = Depends(get_session_id),
    user: UserIdentity | None = Depends(get_optional_user),
    svc: CheckoutService = Depends(get_checkout_service),
):
    try:
        state = svc.start(session_id, user)
    except CheckoutStepError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ShippingCalculationError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return svc.view(session_id, state, user)


@router.post("/address", response_model=CheckoutOut)
def submit_address(
    payload: ShippingAddress,
    session_id: str = Depends(get_session_id),
    user: UserIdentity | None = Depends(get_optional_user),
    svc: CheckoutService = Depends(get_checkout_service),
):
    try:
        state = svc.submit_address(session_id, user, payload)
    except InvalidAddressError as e:
        raise HTTPException(status_code=422, detail=e.errors)
    except CheckoutStepError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ShippingCalculationError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return svc.view(session_id, state, user)


@router.post("/address/edit", response_model=CheckoutOut)
def edit_address(
    session_id: str = Depends(get_session_id),
    user: UserIdentity | None = Depends(get_optional_user),
    svc: CheckoutService = Depends(get_checkout_service),
):
    try:
        state = svc.edit_address(session_id)
    except CheckoutStepError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return svc.view(session_id, state, user)


@router.post("/shipping-options/refresh", response_model=CheckoutOut)
def refresh_shipping_options(
    session_id: str = Depends(get_session_id),
    user: UserIdentity | None = Depends(get_optional_user),
    svc: CheckoutService = Depends(get_checkout_service),
):
    return svc.view(session_id, svc.refresh_shipping_options(session_id), user)


@router.post("/shipping-option", response_model=CheckoutOut)
def select_shipping_option(
    payload: SelectOptionIn,
    session_id: str = Depends(get_session_id),
    user: UserIdentity | None = Depends(get_optional_user),
    svc: CheckoutService = Depends(get_checkout_service),
):
    try:
        state = svc.select_option(session_id, payload.option_id)
    except MissingCheckoutInfoError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return svc.view(session_id, state, user)


@router.post("/payment", response_model=CheckoutOut)
def proceed_to_payment(
    session_id: str = Depends(get_session_id),
    user: UserIdentity | None = Depends(get_optional_user),
    svc: CheckoutService = Depends(get_checkout_service),
):
    try:
        state = svc.proceed_to_payment(session_id)
    except (CheckoutStepError, MissingCheckoutInfoError) as e:
        raise HTTPException(status_code=409, detail=str(e))
    return svc.view(session_id, state, user)


@router.post("/complete", response_model=OrderSuccessOut, status_code=201)
def complete_order(
    payload: CompleteOrderIn,
    session_id: str = Depends(get_session_id),
    user: UserIdentity = Depends(get_current_user),
    svc: CheckoutService = Depends(get_checkout_service),
):
    """
    Finalizuje zamowienie. Przy bledzie zapisu koszyk zostaje,
    a klient moze ponowic (ten sam order_id, bez duplikatu).
    """
    try:
        order = svc.complete_order(session_id, user, payload.payment_method)
    except (CheckoutStepError, MissingCheckoutInfoError) as e:
        raise HTTPException(status_code=409, detail=str(e))
    except OrderPersistError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return OrderSuccessOut(order=order)
