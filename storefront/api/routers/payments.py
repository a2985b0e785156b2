# storefront/api/routers/payments.py
from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from storefront.api.deps import (
    get_current_customer,
    get_lock_service,
    get_notification_service,
    get_payment_gateway,
)
from storefront.data.database import get_db
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import ChargeIn, SettlementOut
from storefront.services.identity import Identity
from storefront.services.lock_service import LockService
from storefront.services.notification_service import NotificationService
from storefront.services.payment_gateway import PaymentGateway
from storefront.services.payment_service import PaymentService, SettlementOutcome

router = APIRouter(prefix="/stripe", tags=["payments"])


@router.post("/charge", response_model=SettlementOut)
def charge(
    payload: ChargeIn,
    response: Response,
    customer: Identity = Depends(get_current_customer),
    db: Session = Depends(get_db),
    gateway: PaymentGateway = Depends(get_payment_gateway),
    lock_service: LockService = Depends(get_lock_service),
    notifications: NotificationService = Depends(get_notification_service),
):
    """
    Charges the stored order total with a Stripe token.
    200 paid (with a warning message if the receipt failed),
    202 charged but not recorded yet or still pending, 402 declined.
    """
    svc = PaymentService(db, gateway, lock_service, notifications)
    try:
        settlement = svc.settle_payment(
            order_id=payload.order_id,
            customer_id=customer.customer_id,
            charge_token=payload.stripeToken,
            notify_email=payload.email,
            notify_name=customer.name,
            description=payload.description,
        )
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

    if settlement.outcome in (SettlementOutcome.CHARGED_UNRECORDED, SettlementOutcome.CHARGE_PENDING):
        response.status_code = 202

    return {
        "order_id": settlement.order_id,
        "outcome": settlement.outcome.value,
        "amount": settlement.amount,
        "charge_id": settlement.charge_id,
        "message": settlement.message,
    }
