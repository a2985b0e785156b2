# storefront/api/routers/taxes.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.errors import NotFoundError
from storefront.domain.schemas import TaxOut
from storefront.services.reference_service import ReferenceService

router = APIRouter(prefix="/tax", tags=["tax"])


@router.get("", response_model=List[TaxOut])
def get_all_tax(db: Session = Depends(get_db)):
    return ReferenceService(db).list_taxes()


@router.get("/{tax_id}", response_model=TaxOut)
def get_single_tax(tax_id: int, db: Session = Depends(get_db)):
    try:
        return ReferenceService(db).get_tax(tax_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
