# storefront/services/cart_sync.py
"""
Synchronizacja koszyka goscia z koszykiem zalogowanego uzytkownika.

CartSyncService wykonuje jeden przebieg (odczyt, plan, zapis, czyszczenie),
CartSyncHandler pilnuje zeby przebieg odpalil sie raz na jedno zalogowanie.
"""
from dataclasses import dataclass
from typing import List, Protocol

from storefront.domain.cart import CartSyncResult, ServerCartItem
from storefront.domain.errors import CartSyncError
from storefront.domain.reconciler import calculate_sync_stats, compare_carts
from storefront.services.local_cart import LocalCartStore
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CartGateway(Protocol):
    """Koszyk serwera widziany z orkiestratora."""

    def get_cart(self) -> List[ServerCartItem]: ...

    def add_item(self, product_id: str, quantity: int) -> None: ...

    def set_quantity(self, cart_item_id: str, quantity: int) -> None: ...


class ServiceCartGateway:
    """Gateway w procesie, nad CartService dla jednego uzytkownika."""

    def __init__(self, cart_service, user_id: str):
        self.cart_service = cart_service
        self.user_id = user_id

    def get_cart(self) -> List[ServerCartItem]:
        items = self.cart_service.get_cart(self.user_id)["items"]
        return [ServerCartItem.model_validate(i) for i in items]

    def add_item(self, product_id: str, quantity: int) -> None:
        self.cart_service.add_to_cart(self.user_id, product_id, quantity)

    def set_quantity(self, cart_item_id: str, quantity: int) -> None:
        self.cart_service.update_cart_item(self.user_id, cart_item_id, quantity)


class CartSyncService:
    def __init__(self, store: LocalCartStore, gateway: CartGateway):
        self.store = store
        self.gateway = gateway

    def sync_cart(self) -> CartSyncResult | None:
        """
        Scala koszyk lokalny z koszykiem serwera.

        Zwraca statystyki albo None gdy nie bylo czego scalac.
        Przy bledzie rzuca CartSyncError i zostawia koszyk lokalny
        (ponowny plan po czesciowym zapisie jest mniejszy, max jest idempotentny).
        """
        local_cart = self.store.get()

        if not local_cart:
            return None

        try:
            server_cart = self.gateway.get_cart()
            plan = compare_carts(local_cart, server_cart)

            if plan.is_empty():
                logger.info("Koszyk serwera juz zawiera koszyk lokalny, nic do scalenia")
                self.store.clear()
                return None

            #po kolei, nigdy dwie mutacje koszyka naraz
            for item in plan.to_add:
                self.gateway.add_item(item.product_id, item.quantity)

            for update in plan.to_update:
                self.gateway.set_quantity(update.cart_item_id, update.quantity)

        except Exception as e:
            logger.error(f"Cart sync error: {e}")
            raise CartSyncError(f"Failed to sync cart: {e}") from e

        stats = calculate_sync_stats(plan.to_add, plan.to_update, plan.conflicts)
        self.store.clear()

        logger.info(
            f"Cart synced: merged={stats.merged_count} added={stats.added_count} "
            f"conflicts={stats.conflict_count}"
        )
        return stats


@dataclass
class SyncState:
    """Stan nalezacy do wywolujacego, jeden na sesje UI."""

    was_authenticated: bool = False
    has_synced_this_session: bool = False


class CartSyncHandler:
    """
    Odpala sync na zboczu anonim -> zalogowany, nie na kazdym odswiezeniu.
    -sukces albo pusty koszyk: oznacz jako zsynchronizowany
    -blad: nie oznaczaj, koszyk lokalny zostaje do kolejnego logowania
    -wylogowanie: reset, kolejne logowanie znow synchronizuje
    """

    def __init__(self, sync_service: CartSyncService, state: SyncState | None = None):
        self.sync_service = sync_service
        self.state = state or SyncState()

    def on_auth_state(self, is_authenticated: bool, is_loading: bool = False) -> CartSyncResult | None:
        if is_loading:
            return None

        state = self.state
        should_sync = (
            is_authenticated
            and not state.was_authenticated
            and not state.has_synced_this_session
        )

        #zbocze zapamietane przed syncem, wywolanie w trakcie syncu nic nie zrobi
        state.was_authenticated = is_authenticated

        if not is_authenticated:
            state.has_synced_this_session = False
            return None

        if not should_sync:
            return None

        result = self.sync_service.sync_cart()
        state.has_synced_this_session = True
        return result


def describe_sync(result: CartSyncResult | None) -> str | None:
    """Tekst powiadomienia dla uzytkownika."""
    if result is None or result.merged_count == 0:
        return None
    if result.conflict_count > 0:
        return (
            f"{result.merged_count} item(s) merged. {result.conflict_count} item(s) had "
            f"quantity conflicts - kept maximum quantity."
        )
    return f"{result.merged_count} item(s) from your guest session have been added to your cart."
