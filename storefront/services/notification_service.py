# storefront/services/notification_service.py
from urllib.parse import urlencode

from storefront.celery_worker import celery_app
from storefront.utils.settings import APP_BASE_URL
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def order_confirmation_url(order_number: str, email: str | None = None) -> str:
    params = {"order": order_number}
    if email:
        params.update({"guest": "true", "email": email})
    return f"{APP_BASE_URL.rstrip('/')}/order-confirmation?{urlencode(params)}"


class NotificationService:
    """
    Serwis do wysyłania powiadomień.
    Używa Celery do asynchronicznego przetwarzania.
    """

    @staticmethod
    def send_order_confirmation(order_number: str, email: str, guest: bool = True):
        """
        Potwierdzenie zamowienia, fire and forget: blad kolejki nie psuje zamowienia.
        """
        try:
            send_order_confirmation_task.delay(order_number, email, guest)
        except Exception as e:
            logger.error(f"Failed to enqueue order confirmation for {order_number}: {e}")


@celery_app.task(name="storefront.services.notification_service.send_order_confirmation_task")
def send_order_confirmation_task(order_number: str, email: str, guest: bool = True):
    """
    Celery task - w prawdziwym systemie wysłałby email.
    Teraz tylko loguje.
    """
    url = order_confirmation_url(order_number, email if guest else None)
    logger.info(f"[NOTIFICATION] {email}: order {order_number} confirmed, track at {url}")

    return {"order_number": order_number, "email": email, "status": "sent"}
