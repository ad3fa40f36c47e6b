# storefront/api/routers/orders.py
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.errors import NotFoundError, OrderError
from storefront.domain.schemas import GuestOrderCreate, GuestOrderOut, OrderOut
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(db: Session):
    return OrderService(db)


@router.post("/guest", response_model=GuestOrderOut, status_code=201)
def create_guest_order(
    payload: GuestOrderCreate,
    db: Session = Depends(get_db),
):
    """
    Tworzy zamówienie goscia z potwierdzonej platnosci.
    Wysyła potwierdzenie asynchronicznie.
    """
    svc = get_service(db)
    try:
        return svc.create_guest_order_with_payment(payload)
    except OrderError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/by-number/{order_number}", response_model=OrderOut)
def get_order_by_number(
    order_number: str,
    email: str | None = Query(None),
    db: Session = Depends(get_db),
):
    """
    Sledzenie zamówienia (publiczne), email weryfikuje zamowienia gosci.
    """
    svc = get_service(db)
    try:
        return svc.get_order_by_number(order_number, email)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
