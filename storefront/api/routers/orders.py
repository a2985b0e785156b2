# storefront/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_customer, get_lock_service
from storefront.data.database import get_db
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import (
    CustomerOrderOut,
    OrderCreate,
    OrderIdOut,
    OrderSummaryOut,
)
from storefront.services.identity import Identity
from storefront.services.lock_service import LockService
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(db: Session, lock_service: LockService):
    return OrderService(db, lock_service)


@router.post("", response_model=OrderIdOut, status_code=201)
def create_order(
    payload: OrderCreate,
    customer: Identity = Depends(get_current_customer),
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
):
    """
    Creates an order from the cart. The cart itself is left as it is.
    """
    svc = get_service(db, lock_service)
    try:
        order_id = svc.create_order(
            cart_id=payload.cart_id,
            shipping_id=payload.shipping_id,
            tax_id=payload.tax_id,
            customer_id=customer.customer_id,
        )
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return {"order_id": order_id}


@router.get("/inCustomer", response_model=List[CustomerOrderOut])
def get_customer_orders(
    customer: Identity = Depends(get_current_customer),
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
):
    return get_service(db, lock_service).get_customer_orders(customer.customer_id)


@router.get("/{order_id}", response_model=OrderSummaryOut)
def get_order_summary(
    order_id: int,
    customer: Identity = Depends(get_current_customer),
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
):
    svc = get_service(db, lock_service)
    try:
        return svc.get_order_summary(order_id, customer.customer_id)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
