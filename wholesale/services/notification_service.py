# wholesale/services/notification_service.py
from html import escape

from wholesale.celery_worker import celery_app
from wholesale.clients.email_client import EmailClient
from wholesale.domain.models import EmailSettings, Order, TrackingInfo
from wholesale.domain.order_normalizer import normalize_order
from wholesale.utils.logging import get_logger

logger = get_logger(__name__)

email_client = EmailClient()

SUBJECTS = {
    "customer": "Order Confirmation #{id}",
    "admin": "New Order #{id}",
    "dispatch": "New Order for Dispatch #{id}",
    "accounts": "New Order for Billing #{id}",
}


def order_recipients(order: Order, settings: EmailSettings) -> list[tuple[str, str]]:
    """(klasa odbiorcy, adres) dla wlaczonych powiadomien"""
    recipients = []
    if settings.notify_customer and order.email:
        recipients.append(("customer", order.email))
    if settings.notify_admin and settings.admin_email:
        recipients.append(("admin", settings.admin_email))
    if settings.notify_dispatch and settings.dispatch_email:
        recipients.append(("dispatch", settings.dispatch_email))
    if settings.notify_accounts and settings.accounts_email:
        recipients.append(("accounts", settings.accounts_email))
    return recipients


def render_order_email(kind: str, order: Order) -> tuple[str, str, str]:
    subject = SUBJECTS.get(kind, "Order Notification #{id}").format(id=order.id)

    rows = "".join(
        f"<tr><td>{escape(i.product.name)}</td><td>{i.quantity}</td>"
        f"<td>${i.effective_unit_price:.2f}</td><td>${i.line_total:.2f}</td></tr>"
        for i in order.items
    )
    lines = "\n".join(
        f"- {i.product.name} x{i.quantity} @ ${i.effective_unit_price:.2f}" for i in order.items
    )
    shipping = order.shipping_option
    shipping_line = f"{shipping.name} (${shipping.price:.2f})" if shipping else "n/a"

    address = ""
    if order.shipping_address:
        a = order.shipping_address
        address = f"{a.name}, {a.street}, {a.city} {a.state} {a.postal_code}, {a.country}"

    html = (
        f"<h1>{escape(subject)}</h1>"
        f"<p>Customer: {escape(order.user_name)} ({escape(order.email)})</p>"
        f"<table><tr><th>Product</th><th>Qty</th><th>Unit</th><th>Total</th></tr>{rows}</table>"
        f"<p>Shipping: {escape(shipping_line)}</p>"
        f"<p>Deliver to: {escape(address)}</p>"
        f"<p><strong>Total: ${order.total:.2f}</strong></p>"
        f"<p>Payment method: {escape(order.payment_method)}</p>"
    )
    text = (
        f"{subject}\n\n{lines}\n\nShipping: {shipping_line}\n"
        f"Deliver to: {address}\nTotal: ${order.total:.2f}\n"
    )
    return subject, html, text


def render_tracking_email(order: Order, tracking: TrackingInfo) -> tuple[str, str, str]:
    subject = f"Your order #{order.id} has shipped!"
    link = (
        f'<p><a href="{escape(tracking.tracking_url)}">Track your parcel</a></p>'
        if tracking.tracking_url
        else ""
    )
    eta = tracking.estimated_delivery_date.isoformat() if tracking.estimated_delivery_date else "TBC"
    html = (
        f"<h1>{escape(subject)}</h1>"
        f"<p>Carrier: {escape(tracking.carrier)}</p>"
        f"<p>Tracking number: {escape(tracking.tracking_number)}</p>"
        f"<p>Estimated delivery: {eta}</p>{link}"
    )
    text = (
        f"{subject}\nCarrier: {tracking.carrier}\nTracking number: {tracking.tracking_number}\n"
        f"Estimated delivery: {eta}\n{tracking.tracking_url or ''}"
    )
    return subject, html, text


class NotificationService:
    """
    Powiadomienia mailowe o zamowieniach.
    Kazda klasa odbiorcy to osobny task Celery (fan-out rownolegly),
    blad jednego nie blokuje pozostalych ani zamowienia.
    """

    def __init__(self, settings: EmailSettings):
        self.settings = settings

    def dispatch_order_notifications(self, order: Order) -> list[str]:
        payload = order.model_dump(mode="json")
        queued = []
        for kind, recipient in order_recipients(order, self.settings):
            try:
                send_order_email_task.delay(kind, recipient, payload)
                queued.append(kind)
            except Exception as e:
                logger.error(f"[NOTIFICATION] Failed to queue {kind} email for order {order.id}: {e}")
        return queued

    def send_tracking_notification(self, order: Order, tracking: TrackingInfo) -> bool:
        if not order.email:
            return False
        try:
            send_tracking_email_task.delay(
                order.email, order.model_dump(mode="json"), tracking.model_dump(mode="json")
            )
        except Exception as e:
            logger.error(f"[NOTIFICATION] Failed to queue tracking email for order {order.id}: {e}")
            return False
        return True


@celery_app.task(name="wholesale.services.notification_service.send_order_email_task")
def send_order_email_task(kind: str, recipient: str, order_payload: dict):
    order = normalize_order(order_payload)
    subject, html, text = render_order_email(kind, order)
    ok = email_client.send([recipient], subject, html, text)
    if not ok:
        logger.error(f"[NOTIFICATION] {kind} email for order {order.id} to {recipient} failed")
    return {"kind": kind, "order_id": order.id, "status": "sent" if ok else "failed"}


@celery_app.task(name="wholesale.services.notification_service.send_tracking_email_task")
def send_tracking_email_task(recipient: str, order_payload: dict, tracking_payload: dict):
    order = normalize_order(order_payload)
    tracking = TrackingInfo.model_validate(tracking_payload)
    subject, html, text = render_tracking_email(order, tracking)
    ok = email_client.send([recipient], subject, html, text)
    if not ok:
        logger.error(f"[NOTIFICATION] tracking email for order {order.id} to {recipient} failed")
    return {"order_id": order.id, "status": "sent" if ok else "failed"}
