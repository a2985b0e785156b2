# storefront/services/reference_service.py
from sqlalchemy.orm import Session

from storefront.data.models.reference import TaxModel
from storefront.domain.errors import NotFoundError
from storefront.repos.reference_repo import ReferenceRepo


class ReferenceService:
    def __init__(self, db: Session):
        self.repo = ReferenceRepo(db)

    def list_taxes(self) -> list[TaxModel]:
        return self.repo.list_taxes()

    def get_tax(self, tax_id: int) -> TaxModel:
        tax = self.repo.get_tax(tax_id)
        if not tax:
            raise NotFoundError(f"Tax {tax_id} does not exist")
        return tax
