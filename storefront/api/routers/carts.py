# storefront/api/routers/carts.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_customer, get_lock_service
from storefront.data.database import get_db
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import (
    CartIdOut,
    CartItemIn,
    CartItemOut,
    CartLineOut,
    CartPricingOut,
    MessageOut,
    QuantityIn,
)
from storefront.services.cart_service import CartService
from storefront.services.lock_service import LockService
from storefront.services.order_service import OrderService

router = APIRouter(
    prefix="/shoppingcart",
    tags=["shoppingcart"],
    dependencies=[Depends(get_current_customer)],
)


def get_service(db: Session):
    return CartService(db)


@router.get("/generateUniqueId", response_model=CartIdOut)
def generate_unique_id():
    return {"cart_id": CartService.generate_cart_id()}


@router.post("/add", response_model=CartItemOut)
def add_item(payload: CartItemIn, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.add_item(
            cart_id=payload.cart_id,
            product_id=payload.product_id,
            attributes=payload.attributes,
            quantity=payload.quantity,
        )
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/{cart_id}", response_model=List[CartLineOut])
def get_cart(cart_id: str, db: Session = Depends(get_db)):
    return get_service(db).get_cart(cart_id)


@router.get("/{cart_id}/totals", response_model=CartPricingOut)
def get_cart_totals(
    cart_id: str,
    shipping_id: int = Query(..., gt=0),
    tax_id: int = Query(..., gt=0),
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
):
    svc = OrderService(db, lock_service)
    try:
        return svc.price_cart(cart_id, shipping_id, tax_id)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.put("/update/{item_id}", response_model=CartItemOut)
def update_item(item_id: int, payload: QuantityIn, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.update_item(item_id, payload.quantity)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/empty/{cart_id}", response_model=List[CartLineOut])
def empty_cart(cart_id: str, db: Session = Depends(get_db)):
    return get_service(db).empty_cart(cart_id)


@router.delete("/removeProduct/{item_id}", response_model=MessageOut)
def remove_item(item_id: int, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        svc.remove_item(item_id)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return {"message": "Item successfully deleted"}
