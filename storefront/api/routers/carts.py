# storefront/api/routers/carts.py
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.errors import CartSyncError, NotFoundError, StorefrontError
from storefront.domain.schemas import CartOut, ItemIn, LocalCartIn, QuantityIn, SyncOut
from storefront.services.cart_service import CartService
from storefront.services.cart_sync import describe_sync
from storefront.services.local_cart import InMemoryCartStorage, LocalCartStore

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(db: Session):
    return CartService(db)


def _error(e: Exception) -> HTTPException:
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    return HTTPException(status_code=400, detail=str(e))


@router.get("/", response_model=CartOut)
def get_cart(user_id: str = Query(...), db: Session = Depends(get_db)):
    return get_service(db).get_cart(user_id)


@router.post("/items")
def add_item(payload: ItemIn, user_id: str = Query(...), db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.add_to_cart(user_id, payload.product_id, payload.quantity)
    except StorefrontError as e:
        raise _error(e)


@router.patch("/items/{cart_item_id}")
def update_item(
    cart_item_id: str,
    payload: QuantityIn,
    user_id: str = Query(...),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.update_cart_item(user_id, cart_item_id, payload.quantity)
    except StorefrontError as e:
        raise _error(e)


@router.delete("/items/{cart_item_id}")
def remove_item(cart_item_id: str, user_id: str = Query(...), db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.remove_from_cart(user_id, cart_item_id)
    except StorefrontError as e:
        raise _error(e)


@router.delete("/")
def clear_cart(user_id: str = Query(...), db: Session = Depends(get_db)):
    return get_service(db).clear_cart(user_id)


@router.post("/sync", response_model=SyncOut)
def sync_cart(payload: LocalCartIn, user_id: str = Query(...), db: Session = Depends(get_db)):
    """
    Scala koszyk przeslany przez klienta (localStorage) z koszykiem uzytkownika.
    """
    store = LocalCartStore(InMemoryCartStorage())
    #add zamiast save, zdublowane product_id sie sumuja
    for item in payload.items:
        store.add(item.product_id, item.quantity)

    svc = get_service(db)
    try:
        result = svc.sync_local_cart(user_id, store)
    except CartSyncError as e:
        raise HTTPException(status_code=409, detail=str(e))

    return SyncOut(synced=True, result=result, message=describe_sync(result))
