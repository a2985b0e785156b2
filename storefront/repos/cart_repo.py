# storefront/repos/cart_repo.py
from typing import List

from sqlalchemy import select, delete
from sqlalchemy.orm import Session

from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.product import ProductModel


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_cart_lines(self, cart_id: str) -> List[tuple[CartItemModel, ProductModel]]:
        """Lines of a cart with their product row, one query."""
        stmt = (
            select(CartItemModel, ProductModel)
            .join(ProductModel, ProductModel.product_id == CartItemModel.product_id)
            .where(CartItemModel.cart_id == cart_id)
            .order_by(CartItemModel.item_id)
        )
        return list(self.db.execute(stmt).all())

    def get_item(self, item_id: int) -> CartItemModel | None:
        return self.db.get(CartItemModel, item_id)

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def add_item(self, item: CartItemModel) -> CartItemModel:
        self.db.add(item)
        self.db.commit()
        self.db.refresh(item)
        return item

    def update_quantity(self, item: CartItemModel, quantity: int) -> CartItemModel:
        item.quantity = quantity
        self.db.commit()
        self.db.refresh(item)
        return item

    def delete_item(self, item_id: int) -> int:
        res = self.db.execute(delete(CartItemModel).where(CartItemModel.item_id == item_id))
        self.db.commit()
        return res.rowcount

    def empty_cart(self, cart_id: str) -> int:
        res = self.db.execute(delete(CartItemModel).where(CartItemModel.cart_id == cart_id))
        self.db.commit()
        return res.rowcount
