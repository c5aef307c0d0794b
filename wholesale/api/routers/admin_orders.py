# wholesale/api/routers/admin_orders.py
from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from wholesale.api.deps import get_shop_settings, require_admin
from wholesale.data.database import get_db
from wholesale.domain.models import Order, ShopSettings, TrackingInfo
from wholesale.domain.schemas import AdminOrderCreateIn, OrderStatusIn, OrderUpdateIn, TrackingIn
from wholesale.errors import OrderNotFoundError, OrderPersistError
from wholesale.services.notification_service import NotificationService
from wholesale.services.order_service import OrderService
from wholesale.services.tracking_service import TrackingService

router = APIRouter(
    prefix="/admin/orders",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
)


@router.post("/", response_model=Order, status_code=201)
def create_order(payload: AdminOrderCreateIn, db: Session = Depends(get_db)):
    """
    Reczne zamowienie z cenami jednostkowymi podanymi przez admina.
    """
    try:
        return OrderService(db).create_admin_order(payload)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except OrderPersistError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.put("/{order_id}", response_model=Order)
def update_order(order_id: str, payload: OrderUpdateIn, db: Session = Depends(get_db)):
    try:
        return OrderService(db).update_order(order_id, payload)
    except OrderNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch("/{order_id}/status", response_model=Order)
def update_status(order_id: str, payload: OrderStatusIn, db: Session = Depends(get_db)):
    try:
        return OrderService(db).update_status(order_id, payload.status)
    except OrderNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{order_id}", status_code=204)
def delete_order(order_id: str, db: Session = Depends(get_db)):
    try:
        OrderService(db).delete_order(order_id)
    except OrderNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return Response(status_code=204)


@router.post("/{order_id}/tracking", response_model=TrackingInfo, status_code=201)
def add_tracking(
    order_id: str,
    payload: TrackingIn,
    db: Session = Depends(get_db),
    settings: ShopSettings = Depends(get_shop_settings),
):
    """
    Dodaje tracking, ustawia status shipped i wysyla maila do klienta.
    """
    svc = TrackingService(db, NotificationService(settings.email))
    try:
        return svc.add_tracking(order_id, payload)
    except OrderNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
