# storefront/services/notification_service.py
from storefront.celery_worker import celery_app
from storefront.services.mail_service import MailService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Customer notifications, delivered by a Celery worker.
    Enqueue errors (broker down) propagate to the caller.
    """

    @staticmethod
    def send_payment_receipt(email: str, name: str, order_id: int):
        send_payment_receipt_task.delay(email, name, order_id)
        logger.info(f"[NOTIFICATION] receipt for order {order_id} queued for {email}")


@celery_app.task(name="storefront.services.notification_service.send_payment_receipt_task")
def send_payment_receipt_task(email: str, name: str, order_id: int):
    MailService().send(email, name)
    return {"email": email, "order_id": order_id, "status": "sent"}
