# wholesale/api/routers/orders.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from wholesale.api.deps import get_current_user
from wholesale.data.database import get_db
from wholesale.domain.models import Order, TrackingInfo, UserIdentity
from wholesale.services.order_service import OrderService
from wholesale.services.tracking_service import TrackingService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(db: Session):
    return OrderService(db)


@router.get("/", response_model=list[Order])
def list_orders(
    user: UserIdentity = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Zamowienia uzytkownika, najnowsze najpierw. Admin widzi wszystkie.
    """
    return get_service(db).list_orders(user)


@router.get("/{order_id}", response_model=Order)
def get_order(
    order_id: str,
    user: UserIdentity = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        order = svc.get_order(order_id, user)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    if order is None:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


@router.get("/{order_id}/tracking", response_model=TrackingInfo)
def get_tracking(
    order_id: str,
    user: UserIdentity = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        order = get_service(db).get_order(order_id, user)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    if order is None:
        raise HTTPException(status_code=404, detail="Order not found")

    tracking = TrackingService(db).get_tracking(order_id)
    if tracking is None:
        raise HTTPException(status_code=404, detail="No tracking information for this order")
    return tracking
