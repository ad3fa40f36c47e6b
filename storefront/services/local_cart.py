# storefront/services/local_cart.py
import json
from pathlib import Path
from typing import Dict, List, Protocol

import redis
from pydantic import TypeAdapter, ValidationError

from storefront.domain.cart import LocalCartItem
from storefront.utils.retry import redis_retry
from storefront.utils.settings import GUEST_CART_TTL_SECONDS, LOCAL_CART_STORAGE_KEY, REDIS_URL
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

_items_adapter = TypeAdapter(List[LocalCartItem])


class CartStorage(Protocol):
    """Jeden slot tekstowy pod kluczem, zapis i odczyt calej wartosci naraz."""

    def read(self, key: str) -> str | None: ...

    def write(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class InMemoryCartStorage:
    def __init__(self):
        self._slots: Dict[str, str] = {}

    def read(self, key: str) -> str | None:
        return self._slots.get(key)

    def write(self, key: str, value: str) -> None:
        self._slots[key] = value

    def delete(self, key: str) -> None:
        self._slots.pop(key, None)


class FileCartStorage:
    """Slot jako plik JSON w katalogu (np. profil klienta po stronie kupujacego)."""

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def read(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def write(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        #zapis do pliku tymczasowego i rename, czytelnik nigdy nie widzi polowy JSONa
        tmp = self._path(key).with_suffix(".tmp")
        tmp.write_text(value, encoding="utf-8")
        tmp.replace(self._path(key))

    def delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


class RedisCartStorage:
    """Koszyki gosci po stronie serwera, kazdy zapis odnawia TTL."""

    def __init__(
        self,
        url: str | None = None,
        client: redis.Redis | None = None,
        ttl_seconds: int = GUEST_CART_TTL_SECONDS,
    ):
        self.redis = client or redis.Redis.from_url(url or REDIS_URL, decode_responses=True)
        self.ttl_seconds = ttl_seconds

    @redis_retry()
    def read(self, key: str) -> str | None:
        return self.redis.get(key)

    @redis_retry()
    def write(self, key: str, value: str) -> None:
        self.redis.set(name=key, value=value, ex=self.ttl_seconds)

    @redis_retry()
    def delete(self, key: str) -> None:
        self.redis.delete(key)


def guest_cart_key(guest_id: str) -> str:
    return f"{LOCAL_CART_STORAGE_KEY}:{guest_id}"


class LocalCartStore:
    """
    Koszyk anonimowego klienta trzymany w jednym slocie storage.
    -odczyt nigdy nie rzuca (pusty koszyk przy bledzie)
    -unikalnosc product_id pilnuja operacje add/update/remove
    """

    def __init__(self, storage: CartStorage, key: str = LOCAL_CART_STORAGE_KEY):
        self.storage = storage
        self.key = key

    def get(self) -> List[LocalCartItem]:
        try:
            raw = self.storage.read(self.key)
        except Exception as e:
            logger.warning(f"Error reading local cart {self.key}: {e}")
            return []

        if not raw:
            return []

        try:
            return _items_adapter.validate_python(json.loads(raw))
        except (ValueError, ValidationError) as e:
            logger.warning(f"Malformed local cart {self.key}, treating as empty: {e}")
            return []

    def save(self, items: List[LocalCartItem]) -> None:
        payload = json.dumps([item.model_dump() for item in items])
        try:
            self.storage.write(self.key, payload)
        except Exception as e:
            logger.error(f"Error saving local cart {self.key}: {e}")

    def add(self, product_id: str, quantity: int) -> List[LocalCartItem]:
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise ValueError("Quantity must be a positive integer")

        cart = self.get()
        for item in cart:
            if item.product_id == product_id:
                item.quantity += quantity
                break
        else:
            cart.append(LocalCartItem(product_id=product_id, quantity=quantity))

        self.save(cart)
        return cart

    def update(self, product_id: str, quantity: int) -> List[LocalCartItem]:
        cart = self.get()
        item = next((i for i in cart if i.product_id == product_id), None)

        if item is None:
            return cart

        if quantity <= 0:
            return self.remove(product_id)

        item.quantity = quantity
        self.save(cart)
        return cart

    def remove(self, product_id: str) -> List[LocalCartItem]:
        cart = [item for item in self.get() if item.product_id != product_id]
        self.save(cart)
        return cart

    def clear(self) -> None:
        try:
            self.storage.delete(self.key)
        except Exception as e:
            logger.error(f"Error clearing local cart {self.key}: {e}")

    def count(self) -> int:
        return sum(item.quantity for item in self.get())
