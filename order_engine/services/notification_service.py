# order_engine/services/notification_service.py
from order_engine.celery_worker import celery_app
from order_engine.utils.logging import get_logger

logger = get_logger(__name__)

TITLES = {
    "PENDING": "Order Received",
    "CONFIRMED": "Order Confirmed",
    "PREPARING": "Order Being Prepared",
    "OUT_FOR_DELIVERY": "Order Out for Delivery",
    "DELIVERED": "Order Delivered",
    "CANCELLED": "Order Cancelled",
    "REFUNDED": "Payment Refunded",
}

BODIES = {
    "PENDING": "Your order has been received and is being processed",
    "CONFIRMED": "Your order has been confirmed",
    "PREPARING": "Your order is being prepared",
    "OUT_FOR_DELIVERY": "Your order is on its way",
    "DELIVERED": "Your order has been delivered",
    "CANCELLED": "Your order has been cancelled",
    "REFUNDED": "Your payment has been refunded",
}


class NotificationService:
    """
    NotificationDispatcher na Celery.
    Kolejkuje zadanie, retry nalezy do workera, nie do nas.
    """

    @staticmethod
    def notify_status_change(user_id: str, order_id: str, new_status: str) -> None:
        send_order_status_notification_task.delay(user_id, order_id, new_status)


@celery_app.task(name="order_engine.services.notification_service.send_order_status_notification_task")
def send_order_status_notification_task(user_id: str, order_id: str, status: str):
    """
    Celery task - w prawdziwym systemie wysłałby push/email.
    Teraz tylko loguje.
    """
    title = TITLES.get(status, "Order Update")
    body = BODIES.get(status, f"Your order status is now {status}")
    logger.info(f"[NOTIFICATION] User {user_id}: Order {order_id} - {title}: {body}")

    return {
        "user_id": user_id,
        "order_id": order_id,
        "status": status,
        "title": title,
        "body": body,
    }
