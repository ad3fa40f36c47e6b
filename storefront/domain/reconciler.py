# storefront/domain/reconciler.py
"""
Scalanie koszyka lokalnego (gosc) z koszykiem w bazie.

Strategia:
- produkt w obu koszykach: zostaje wieksza ilosc
- produkt tylko lokalnie: dodajemy do bazy
- produkt tylko w bazie: bez zmian

Czyste funkcje, zadnego I/O.
"""
from typing import Dict, Iterable, Sequence

from storefront.domain.cart import (
    CartItemUpdate,
    CartSyncResult,
    LocalCartItem,
    QuantityConflict,
    ReconciliationPlan,
    ServerCartItem,
)


def compare_carts(
    local_cart: Iterable[LocalCartItem],
    server_cart: Iterable[ServerCartItem],
) -> ReconciliationPlan:
    plan = ReconciliationPlan()

    by_product: Dict[str, ServerCartItem] = {item.product_id: item for item in server_cart}

    for local_item in local_cart:
        db_item = by_product.get(local_item.product_id)

        if db_item is None:
            plan.to_add.append(local_item)
            continue

        local_qty = local_item.quantity
        db_qty = db_item.quantity
        final_qty = max(local_qty, db_qty)

        #baza ma juz tyle samo lub wiecej, nic do zrobienia
        if final_qty == db_qty:
            continue

        plan.to_update.append(
            CartItemUpdate(
                cart_item_id=db_item.cart_item_id,
                product_id=local_item.product_id,
                quantity=final_qty,
            )
        )

        if local_qty != db_qty:
            plan.conflicts.append(
                QuantityConflict(
                    product_id=local_item.product_id,
                    local_qty=local_qty,
                    db_qty=db_qty,
                    final_qty=final_qty,
                    product_name=db_item.product.name,
                )
            )

    return plan


def calculate_sync_stats(
    to_add: Sequence[LocalCartItem],
    to_update: Sequence[CartItemUpdate],
    conflicts: Sequence[QuantityConflict],
) -> CartSyncResult:
    return CartSyncResult(
        merged_count=len(to_add) + len(to_update),
        added_count=len(to_add),
        conflict_count=len(conflicts),
        merged_products=[c.product_name for c in conflicts],
    )
