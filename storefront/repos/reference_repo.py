# storefront/repos/reference_repo.py
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.data.models.reference import ShippingModel, TaxModel


class ReferenceRepo:
    """Shipping and tax rows, read only."""

    def __init__(self, db: Session):
        self.db = db

    def get_shipping(self, shipping_id: int) -> ShippingModel | None:
        return self.db.get(ShippingModel, shipping_id)

    def get_tax(self, tax_id: int) -> TaxModel | None:
        return self.db.get(TaxModel, tax_id)

    def list_taxes(self) -> List[TaxModel]:
        return list(self.db.execute(select(TaxModel).order_by(TaxModel.tax_id)).scalars().all())
