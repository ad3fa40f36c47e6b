from storefront.domain.cart import CartItemUpdate, LocalCartItem, QuantityConflict
from storefront.domain.reconciler import calculate_sync_stats, compare_carts

from fakes import server_item


def local(**quantities):
    return [LocalCartItem(product_id=pid, quantity=q) for pid, q in quantities.items()]


def test_local_higher_quantity_updates_and_reports_conflict():
    plan = compare_carts(local(A=3), [server_item("A", 1, name="Serum")])

    assert plan.to_add == []
    assert plan.to_update == [CartItemUpdate(cart_item_id="ci-A", product_id="A", quantity=3)]
    assert plan.conflicts == [
        QuantityConflict(product_id="A", local_qty=3, db_qty=1, final_qty=3, product_name="Serum")
    ]


def test_local_only_items_are_added_verbatim():
    plan = compare_carts(local(A=2, B=1), [server_item("C", 5)])

    assert plan.to_add == local(A=2, B=1)
    assert plan.to_update == []
    assert plan.conflicts == []


def test_server_dominates_means_no_action():
    plan = compare_carts(local(A=1), [server_item("A", 5)])
    assert plan.is_empty()
    assert plan.conflicts == []


def test_equal_quantities_produce_nothing():
    plan = compare_carts(local(A=2), [server_item("A", 2)])
    assert plan.is_empty()
    assert plan.conflicts == []


def test_empty_local_cart_gives_empty_plan():
    plan = compare_carts([], [server_item("A", 2)])
    assert plan.is_empty()
    assert plan.conflicts == []


def test_empty_server_cart_adds_everything():
    plan = compare_carts(local(A=1, B=4), [])
    assert plan.to_add == local(A=1, B=4)
    assert plan.to_update == []


def test_output_follows_local_iteration_order():
    server = [server_item("B", 1), server_item("A", 1)]
    plan = compare_carts(local(A=2, C=1, B=3, D=1), server)

    assert [u.product_id for u in plan.to_update] == ["A", "B"]
    assert [a.product_id for a in plan.to_add] == ["C", "D"]


def test_rerun_after_applying_plan_is_empty():
    server = {i.product_id: i for i in [server_item("A", 1), server_item("B", 7)]}
    local_cart = local(A=4, B=2, C=3)

    plan = compare_carts(local_cart, server.values())
    for update in plan.to_update:
        server[update.product_id].quantity = update.quantity
    for item in plan.to_add:
        server[item.product_id] = server_item(item.product_id, item.quantity)

    assert compare_carts(local_cart, server.values()).is_empty()
    assert {pid: i.quantity for pid, i in server.items()} == {"A": 4, "B": 7, "C": 3}


def test_sync_stats():
    plan = compare_carts(local(A=3, B=1, C=2), [server_item("A", 1, name="Serum")])
    stats = calculate_sync_stats(plan.to_add, plan.to_update, plan.conflicts)

    assert stats.merged_count == 3
    assert stats.added_count == 2
    assert stats.conflict_count == 1
    assert stats.merged_products == ["Serum"]
