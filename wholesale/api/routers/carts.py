# wholesale/api/routers/carts.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from wholesale.api.deps import get_cart_service, get_checkout_service, get_session_id
from wholesale.data.database import get_db
from wholesale.domain.schemas import CartOut, ItemIn, QuantityIn
from wholesale.errors import CartValidationError
from wholesale.repos.product_repo import ProductRepo, product_from_model
from wholesale.services.cart_service import CartService
from wholesale.services.checkout_service import CheckoutService

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("/", response_model=CartOut)
def get_cart(
    session_id: str = Depends(get_session_id),
    svc: CartService = Depends(get_cart_service),
):
    return svc.view(session_id)


@router.post("/items", response_model=CartOut)
def add_item(
    payload: ItemIn,
    session_id: str = Depends(get_session_id),
    db: Session = Depends(get_db),
    svc: CartService = Depends(get_cart_service),
    checkout: CheckoutService = Depends(get_checkout_service),
):
    row = ProductRepo(db).get_product(payload.product_id)
    if not row:
        raise HTTPException(status_code=404, detail="Product not found")

    try:
        cart = svc.add_to_cart(session_id, product_from_model(row), payload.quantity)
    except CartValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))

    checkout.refresh_shipping_options(session_id)
    return cart


@router.patch("/items/{product_id}", response_model=CartOut)
def update_item(
    product_id: str,
    payload: QuantityIn,
    session_id: str = Depends(get_session_id),
    svc: CartService = Depends(get_cart_service),
    checkout: CheckoutService = Depends(get_checkout_service),
):
    cart = svc.update_quantity(session_id, product_id, payload.quantity)
    checkout.refresh_shipping_options(session_id)
    return cart


@router.delete("/items/{product_id}", response_model=CartOut)
def remove_item(
    product_id: str,
    session_id: str = Depends(get_session_id),
    svc: CartService = Depends(get_cart_service),
    checkout: CheckoutService = Depends(get_checkout_service),
):
    cart = svc.remove_from_cart(session_id, product_id)
    checkout.refresh_shipping_options(session_id)
    return cart


@router.delete("/", response_model=CartOut)
def clear_cart(
    session_id: str = Depends(get_session_id),
    svc: CartService = Depends(get_cart_service),
    checkout: CheckoutService = Depends(get_checkout_service),
):
    cart = svc.clear_cart(session_id)
    checkout.refresh_shipping_options(session_id)
    return cart
