# app/services/notification_service.py
from decimal import Decimal

from app.celery_worker import celery_app
from app.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Serwis do wysyłania powiadomień.
    Fire-and-forget: blad tutaj nigdy nie cofa zamowienia.
    """

    @staticmethod
    def send_order_notification(
        session_id: str,
        order_id: int,
        total: Decimal,
        item_count: int,
    ) -> bool:
        """
        Wysyła powiadomienie o nowym zamowieniu. Zwraca False gdy sie nie udalo.
        """
        try:
            send_order_notification_task.delay(session_id, order_id, str(total), item_count)
            return True
        except Exception:
            logger.exception(f"[NOTIFICATION] Failed to enqueue notification for order {order_id}")
            return False


@celery_app.task(name="app.services.notification_service.send_order_notification_task")
def send_order_notification_task(session_id: str, order_id: int, total: str, item_count: int):
    """
    Celery task - w prawdziwym systemie wysłałby email do wlasciciela sklepu.
    Teraz tylko loguje.
    """
    logger.info(
        f"[NOTIFICATION] New order #{order_id} from {session_id}: "
        f"total {total}, {item_count} item(s)"
    )

    return {"order_id": order_id, "status": "sent"}
