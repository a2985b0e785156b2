# storefront/services/payment_service.py
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from uuid import uuid4

from sqlalchemy.orm import Session

from storefront.data.database import unit_of_work
from storefront.data.models.order import OrderStatus
from storefront.domain.errors import (
    ConflictError,
    InternalFailure,
    NotFoundError,
    PaymentFailedError,
)
from storefront.domain.pricing import to_minor_units
from storefront.repos.order_repo import OrderRepo
from storefront.services.lock_service import LockService, order_settle_key, release_quietly
from storefront.services.notification_service import NotificationService
from storefront.services.payment_gateway import PaymentGateway, ChargeResult
from storefront.utils.settings import CHECKOUT_LOCK_TTL_SECONDS, STRIPE_CURRENCY
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class SettlementOutcome(str, Enum):
    PAID = "paid"
    NOTIFICATION_FAILED = "notification_failed"
    CHARGED_UNRECORDED = "charged_unrecorded"
    CHARGE_PENDING = "charge_pending"


@dataclass(frozen=True)
class Settlement:
    order_id: int
    outcome: SettlementOutcome
    amount: Decimal
    charge_id: str | None
    message: str

    @property
    def is_partial(self) -> bool:
        return self.outcome != SettlementOutcome.PAID


def new_charge_key(order_id: int) -> str:
    return f"order-{order_id}-{uuid4().hex}"


class PaymentService:
    """
    Settlement of an order: charge the stored total, record it, tell the customer.

    unpaid -> charging -> paid
    unpaid -> charging -> unpaid       (declined / gateway unreachable)
    unpaid -> charging (stays)         (charged but not recorded, or pending)

    The idempotency key and card token are stored on the order when it enters
    charging. Settling an order parked in charging replays them whatever token
    the caller brings, so the gateway answers from its idempotency cache
    instead of charging twice. A decline clears both.
    """

    def __init__(
        self,
        db: Session,
        gateway: PaymentGateway,
        lock_service: LockService,
        notifications: NotificationService,
        currency: str | None = None,
    ):
        self.db = db
        self.repo = OrderRepo(db)
        self.gateway = gateway
        self.lock_service = lock_service
        self.notifications = notifications
        self.currency = currency or STRIPE_CURRENCY

    def settle_payment(
        self,
        order_id: int,
        customer_id: int,
        charge_token: str,
        notify_email: str,
        notify_name: str = "",
        description: str | None = None,
    ) -> Settlement:
        owner = uuid4().hex
        lock_key = order_settle_key(order_id)
        if not self.lock_service.acquire(lock_key, owner, CHECKOUT_LOCK_TTL_SECONDS):
            raise ConflictError(f"Payment for order {order_id} already in progress")

        try:
            return self._settle(order_id, customer_id, charge_token, notify_email, notify_name, description)
        finally:
            release_quietly(self.lock_service, lock_key, owner)

    def _settle(self, order_id, customer_id, charge_token, notify_email, notify_name, description) -> Settlement:
        # amount always comes from the stored order, never from the client
        order = self.repo.get_order(order_id)
        if not order or order.customer_id != customer_id:
            raise NotFoundError(f"Order {order_id} does not exist")

        if order.status == OrderStatus.PAID:
            raise ConflictError(f"Order {order_id} is already paid")

        total = order.total_amount

        if order.status == OrderStatus.CHARGING and order.charge_key:
            key, source = order.charge_key, order.charge_source
            logger.warning(f"Order {order_id} resuming charge {key}")
        else:
            key, source = new_charge_key(order_id), charge_token

        self._move(
            order_id,
            customer_id,
            (OrderStatus.UNPAID, OrderStatus.CHARGING),
            OrderStatus.CHARGING,
            charge_key=key,
            charge_source=source,
        )
        logger.info(f"Order {order_id} charging {total} {self.currency}")

        result = self._charge(order_id, total, source, key, description)

        if result.pending:
            logger.warning(
                f"Order {order_id} charge {result.gateway_transaction_id} not confirmed: {result.failure_reason}"
            )
            return Settlement(
                order_id=order_id,
                outcome=SettlementOutcome.CHARGE_PENDING,
                amount=total,
                charge_id=result.gateway_transaction_id,
                message="Payment is awaiting confirmation, retry the payment later to reconcile",
            )

        if not result.success:
            self._move(
                order_id,
                customer_id,
                (OrderStatus.CHARGING,),
                OrderStatus.UNPAID,
                charge_key=None,
                charge_source=None,
                comments=(result.failure_reason or "")[:255] or None,
            )
            logger.warning(f"Order {order_id} payment failed: {result.failure_reason}")
            raise PaymentFailedError(order_id, result.failure_reason or "charge failed")

        try:
            recorded = self._mark_paid(order_id, customer_id, result)
        except InternalFailure:
            recorded = False

        if not recorded:
            logger.error(
                f"Order {order_id} charged ({result.gateway_transaction_id}) but status not recorded"
            )
            return Settlement(
                order_id=order_id,
                outcome=SettlementOutcome.CHARGED_UNRECORDED,
                amount=total,
                charge_id=result.gateway_transaction_id,
                message="Payment taken but not recorded yet, retry the payment to reconcile",
            )

        logger.info(f"Order {order_id} paid, charge {result.gateway_transaction_id}")

        try:
            self.notifications.send_payment_receipt(notify_email, notify_name, order_id)
        except Exception:
            logger.exception(f"Order {order_id} paid but the receipt could not be queued")
            return Settlement(
                order_id=order_id,
                outcome=SettlementOutcome.NOTIFICATION_FAILED,
                amount=total,
                charge_id=result.gateway_transaction_id,
                message="Payment successful but the receipt could not be sent",
            )

        return Settlement(
            order_id=order_id,
            outcome=SettlementOutcome.PAID,
            amount=total,
            charge_id=result.gateway_transaction_id,
            message="Payment successful and receipt sent",
        )

    def _move(self, order_id: int, customer_id: int, from_statuses, to_status: OrderStatus, **fields) -> None:
        with unit_of_work(self.db):
            rowcount = self.repo.update_status(
                order_id, customer_id, from_statuses, {"status": int(to_status), **fields}
            )
        if rowcount == 0:
            raise ConflictError(f"Order {order_id} changed during payment")

    def _charge(self, order_id: int, total: Decimal, source: str, key: str, description: str | None) -> ChargeResult:
        try:
            return self.gateway.charge(
                amount_minor_units=to_minor_units(total),
                currency=self.currency,
                description=description or f"Order {order_id}",
                source_token=source,
                idempotency_key=key,
            )
        except Exception as e:
            logger.exception(f"Gateway error for order {order_id}")
            return ChargeResult(success=False, gateway_status="error", failure_reason=str(e))

    def _mark_paid(self, order_id: int, customer_id: int, result: ChargeResult) -> bool:
        with unit_of_work(self.db):
            rowcount = self.repo.update_status(
                order_id,
                customer_id,
                (OrderStatus.CHARGING,),
                {
                    "status": int(OrderStatus.PAID),
                    "reference": result.gateway_transaction_id,
                    "auth_code": result.gateway_status,
                    "comments": None,
                    "charge_key": None,
                    "charge_source": None,
                },
            )
        return rowcount == 1
