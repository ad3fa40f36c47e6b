# storefront/api/routers/shipping.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.errors import NotFoundError
from storefront.domain.schemas import ShippingQuoteIn, ShippingQuoteOut
from storefront.services.shipping import ShippingService

router = APIRouter(prefix="/shipping", tags=["shipping"])


@router.post("/quote", response_model=ShippingQuoteOut)
def quote_shipping(payload: ShippingQuoteIn, db: Session = Depends(get_db)):
    """
    Metody wysylki i sumy zamowienia dla koszyka goscia przed platnoscia.
    """
    try:
        return ShippingService(db).quote(payload.items, payload.state)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
