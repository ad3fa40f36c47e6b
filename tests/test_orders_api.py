import re
from decimal import Decimal

import pytest

from storefront.data.models import OrderModel, ProductModel
from storefront.services.guest_checkout import GuestCheckout, ServiceOrderGateway
from storefront.services.order_service import OrderService

ORDER_NUMBER = re.compile(r"^ORD-\d+-[A-Z0-9]{9}$")


def guest_order(**overrides):
    payload = {
        "payment_response": {
            "payment_status": "PAID",
            "transaction_reference": "MNFY|20260101|000123",
            "payment_reference": "TRC-123",
            "amount_paid": "36500.00",
            "customer_email": "guest@example.com",
            "customer_name": "Guest Shopper",
        },
        "address": {
            "first_name": "Chioma",
            "last_name": "Okeke",
            "email": "Guest@Example.com",
            "address_1": "12 Admiralty Way",
            "city": "Lekki",
            "state": "Lagos",
        },
        "items": [
            {"product_id": "p-serum", "quantity": 2},
            {"product_id": "p-cleanser", "quantity": 1},
        ],
        "totals": {"subtotal": "33500.00", "shipping": "3000.00", "tax": "0", "total": "36500.00"},
    }
    for key, value in overrides.items():
        if isinstance(value, dict) and key in payload:
            payload[key] = {**payload[key], **value}
        else:
            payload[key] = value
    return payload


def test_create_guest_order(client, products, db):
    resp = client.post("/orders/guest", json=guest_order())

    assert resp.status_code == 201
    body = resp.json()
    db.expire_all()
    assert ORDER_NUMBER.match(body["order_number"])
    assert body["message"] == "Guest order created successfully"
    assert body["order"]["payment_method"] == "WALLET"
    assert body["order"]["currency"] == "NGN"
    assert body["order"]["status"] == "PENDING"
    assert body["order"]["payment_status"] == "COMPLETED"
    assert [(i["product_name"], i["quantity"]) for i in body["order"]["items"]] == [
        ("Niacinamide Serum", 2),
        ("Foaming Cleanser", 1),
    ]

    order = db.query(OrderModel).filter_by(order_number=body["order_number"]).one()
    assert order.user_id is None
    assert order.country == "Nigeria"
    assert len(order.payments) == 1
    assert order.payments[0].reference == "TRC-123"
    assert order.payments[0].gateway_response["payment_status"] == "PAID"
    assert [h.notes for h in order.status_history] == ["Guest order created", "Payment completed"]

    serum = db.get(ProductModel, "p-serum")
    assert (serum.quantity, serum.reserved_quantity, serum.sale_count) == (23, 2, 2)


@pytest.mark.parametrize(
    "overrides, detail",
    [
        ({"payment_response": {"payment_status": "PENDING"}}, "Payment not completed"),
        ({"payment_response": {"amount_paid": "100.00"}}, "Payment amount mismatch"),
        ({"totals": {"subtotal": "30000.00"}}, "Order totals are inconsistent"),
        ({"items": [{"product_id": "missing", "quantity": 1}]}, "Some products not found"),
        ({"items": [{"product_id": "p-last", "quantity": 2}]}, "Insufficient stock for Retinol Night Cream"),
        ({"payment_response": {"amount_paid": "NaN"}}, "Invalid paid amount"),
        ({"payment_response": {"amount_paid": "Infinity"}}, "Invalid paid amount"),
        ({"payment_response": {"amount_paid": "abc"}}, "Invalid paid amount"),
    ],
)
def test_create_guest_order_rejections(client, products, db, overrides, detail):
    resp = client.post("/orders/guest", json=guest_order(**overrides))

    assert resp.status_code == 400
    assert detail in resp.json()["detail"]
    assert db.query(OrderModel).count() == 0


def test_repeated_product_lines_are_rejected(client, products, db):
    resp = client.post(
        "/orders/guest",
        json=guest_order(
            items=[
                {"product_id": "p-last", "quantity": 1},
                {"product_id": "p-last", "quantity": 1},
            ],
            payment_response={"amount_paid": "39000.00"},
            totals={"subtotal": "36000.00", "shipping": "3000.00", "tax": "0", "total": "39000.00"},
        ),
    )

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Duplicate products in order"
    db.expire_all()
    assert db.get(ProductModel, "p-last").quantity == 1
    assert db.query(OrderModel).count() == 0


def test_amount_within_tolerance_is_accepted(client, products):
    resp = client.post("/orders/guest", json=guest_order(payment_response={"amount_paid": "36500.004"}))
    assert resp.status_code == 201


def test_track_order_by_number(client, products):
    number = client.post("/orders/guest", json=guest_order()).json()["order_number"]

    ok = client.get(f"/orders/by-number/{number}", params={"email": "guest@example.com"})
    no_email = client.get(f"/orders/by-number/{number}")
    wrong = client.get(f"/orders/by-number/{number}", params={"email": "someone@example.com"})
    missing = client.get("/orders/by-number/ORD-0-XXXXXXXXX")

    assert ok.status_code == 200
    assert Decimal(ok.json()["total"]) == Decimal("36500.00")
    assert no_email.status_code == 200
    assert wrong.status_code == 403
    assert missing.status_code == 404


def test_guest_checkout_in_process(products, db, local_store):
    local_store.add("p-serum", 1)
    checkout = GuestCheckout(local_store, ServiceOrderGateway(OrderService(db)))

    payment = guest_order()["payment_response"] | {"amount_paid": "15500.00"}
    result = checkout.create_guest_order(
        payment,
        guest_order()["address"],
        {"subtotal": "12500", "shipping": "3000", "tax": "0", "total": "15500"},
    )

    assert ORDER_NUMBER.match(result.order_number)
    assert local_store.get() == []
    assert db.query(OrderModel).count() == 1
