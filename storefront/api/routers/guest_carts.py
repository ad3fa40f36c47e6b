# storefront/api/routers/guest_carts.py
from functools import lru_cache

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.errors import CartSyncError
from storefront.domain.schemas import ItemIn, LocalCartOut, LocalQuantityIn, SyncOut
from storefront.services.cart_service import CartService
from storefront.services.cart_sync import describe_sync
from storefront.services.local_cart import CartStorage, LocalCartStore, RedisCartStorage, guest_cart_key

router = APIRouter(prefix="/guest-carts", tags=["guest-carts"])


@lru_cache
def get_guest_storage() -> CartStorage:
    return RedisCartStorage()


def get_store(guest_id: str, storage: CartStorage = Depends(get_guest_storage)) -> LocalCartStore:
    return LocalCartStore(storage, key=guest_cart_key(guest_id))


def _out(guest_id: str, store: LocalCartStore) -> LocalCartOut:
    items = store.get()
    return LocalCartOut(guest_id=guest_id, items=items, count=sum(i.quantity for i in items))


@router.get("/{guest_id}", response_model=LocalCartOut)
def get_guest_cart(guest_id: str, store: LocalCartStore = Depends(get_store)):
    return _out(guest_id, store)


@router.post("/{guest_id}/items", response_model=LocalCartOut)
def add_guest_item(guest_id: str, payload: ItemIn, store: LocalCartStore = Depends(get_store)):
    store.add(payload.product_id, payload.quantity)
    return _out(guest_id, store)


@router.patch("/{guest_id}/items/{product_id}", response_model=LocalCartOut)
def update_guest_item(
    guest_id: str,
    product_id: str,
    payload: LocalQuantityIn,
    store: LocalCartStore = Depends(get_store),
):
    store.update(product_id, payload.quantity)
    return _out(guest_id, store)


@router.delete("/{guest_id}/items/{product_id}", response_model=LocalCartOut)
def remove_guest_item(guest_id: str, product_id: str, store: LocalCartStore = Depends(get_store)):
    store.remove(product_id)
    return _out(guest_id, store)


@router.delete("/{guest_id}")
def clear_guest_cart(guest_id: str, store: LocalCartStore = Depends(get_store)):
    store.clear()
    return {"message": "Cart cleared"}


@router.post("/{guest_id}/merge", response_model=SyncOut)
def merge_guest_cart(
    guest_id: str,
    user_id: str = Query(...),
    store: LocalCartStore = Depends(get_store),
    db: Session = Depends(get_db),
):
    """
    Wywolywane po zalogowaniu: koszyk goscia z redisa trafia do koszyka uzytkownika.
    Przy bledzie koszyk goscia zostaje w redisie.
    """
    try:
        result = CartService(db).sync_local_cart(user_id, store)
    except CartSyncError as e:
        raise HTTPException(status_code=409, detail=str(e))

    return SyncOut(synced=True, result=result, message=describe_sync(result))
