# storefront/repos/order_repo.py
from typing import List, Iterable

from sqlalchemy import select, update
from sqlalchemy.orm import Session, selectinload

from storefront.data.models.order import OrderModel
from storefront.data.models.order_detail import OrderDetailModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    # writes are not committed here, callers run them in unit_of_work
    def add_order(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.flush()
        return order

    def add_details(self, details: Iterable[OrderDetailModel]) -> None:
        self.db.add_all(list(details))
        self.db.flush()

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def get_order_with_items(self, order_id: int) -> OrderModel | None:
        stmt = (
            select(OrderModel)
            .options(selectinload(OrderModel.items))
            .where(OrderModel.order_id == order_id)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def get_customer_orders(self, customer_id: int) -> List[OrderModel]:
        stmt = (
            select(OrderModel)
            .options(selectinload(OrderModel.customer))
            .where(OrderModel.customer_id == customer_id)
            .order_by(OrderModel.order_id)
        )
        return list(self.db.execute(stmt).scalars().all())

    def update_status(
        self,
        order_id: int,
        customer_id: int,
        from_statuses: Iterable[int],
        new_data: dict,
    ) -> int:
        """
        Conditional update, e.g.
        update orders set status 1 where order_id 7 and customer_id 3 and status in (2)
        0 rows = someone else moved the order first (or it is not ours)
        """
        stmt = (
            update(OrderModel)
            .where(
                OrderModel.order_id == order_id,
                OrderModel.customer_id == customer_id,
                OrderModel.status.in_([int(s) for s in from_statuses]),
            )
            .values(**new_data)
            .execution_options(synchronize_session=False)
        )
        return self.db.execute(stmt).rowcount
