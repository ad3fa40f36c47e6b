import pytest
import requests

from storefront.domain.errors import CartSyncError
from storefront.services import api_client
from storefront.services.api_client import StorefrontClient
from storefront.services.cart_sync import CartSyncService
from storefront.services.guest_checkout import assemble_guest_order


class FakeResponse:
    def __init__(self, status_code=200, body=None):
        self.status_code = status_code
        self._body = body if body is not None else {}
        self.reason = "OK" if status_code < 400 else "Bad Request"
        self.text = str(self._body)

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        return self._body


class FakeHttp:
    def __init__(self, responses):
        self.responses = list(responses)
        self.requests = []

    def _handle(self, method, url, **kwargs):
        self.requests.append((method, url, kwargs))
        return self.responses.pop(0)

    def install(self, monkeypatch):
        for method in ("get", "post", "patch"):
            monkeypatch.setattr(
                api_client.requests,
                method,
                lambda url, _m=method, **kw: self._handle(_m.upper(), url, **kw),
            )


CART_BODY = {
    "items": [
        {
            "id": "ci-1",
            "product_id": "p-serum",
            "quantity": 1,
            "product": {"id": "p-serum", "name": "Niacinamide Serum", "price": "12500.00"},
        }
    ],
    "total": "12500.00",
    "count": 1,
}


def test_sync_over_http(monkeypatch, local_store):
    http = FakeHttp([FakeResponse(body=CART_BODY), FakeResponse(), FakeResponse()])
    http.install(monkeypatch)
    local_store.add("p-serum", 2)
    local_store.add("p-gift", 1)

    client = StorefrontClient(base_url="http://shop.test/", user_id="u1")
    result = CartSyncService(local_store, client).sync_cart()

    assert [(m, u) for m, u, _ in http.requests] == [
        ("GET", "http://shop.test/cart/"),
        ("POST", "http://shop.test/cart/items"),
        ("PATCH", "http://shop.test/cart/items/ci-1"),
    ]
    assert http.requests[1][2]["json"] == {"product_id": "p-gift", "quantity": 1}
    assert http.requests[2][2]["json"] == {"quantity": 2}
    assert all(kw["params"] == {"user_id": "u1"} for _, _, kw in http.requests)
    assert result.merged_products == ["Niacinamide Serum"]
    assert local_store.get() == []


def test_rejected_mutation_is_not_retried(monkeypatch, local_store):
    http = FakeHttp(
        [
            FakeResponse(body={"items": [], "total": "0", "count": 0}),
            FakeResponse(400, {"detail": "Insufficient stock"}),
        ]
    )
    http.install(monkeypatch)
    local_store.add("p-last", 3)

    with pytest.raises(CartSyncError, match="Insufficient stock"):
        CartSyncService(local_store, StorefrontClient("http://shop.test", user_id="u1")).sync_cart()

    assert len(http.requests) == 2
    assert local_store.count() == 3


def test_create_guest_order_posts_json(monkeypatch):
    http = FakeHttp([FakeResponse(201, {"order_number": "ORD-1-ABCDEFGHI", "order": {"email": "g@example.com"}})])
    http.install(monkeypatch)
    payload = assemble_guest_order(
        {
            "payment_status": "PAID",
            "payment_reference": "TRC-9",
            "customer_email": "g@example.com",
            "customer_name": "G",
        },
        {"first_name": "G", "last_name": "H", "email": "g@example.com", "address_1": "1 Road", "city": "Ikeja"},
        [{"product_id": "p-serum", "quantity": 1}],
        {"subtotal": "12500", "shipping": "3000", "tax": "0", "total": "15500"},
    )

    body = StorefrontClient("http://shop.test").create_guest_order(payload)

    method, url, kwargs = http.requests[0]
    assert (method, url) == ("POST", "http://shop.test/orders/guest")
    assert kwargs["json"]["payment_method"] == "WALLET"
    assert kwargs["json"]["totals"]["total"] == "15500"
    assert body["order_number"] == "ORD-1-ABCDEFGHI"


def test_cart_calls_require_user():
    with pytest.raises(ValueError):
        StorefrontClient("http://shop.test").add_item("p-serum", 1)


def test_client_error_is_not_retried(monkeypatch):
    http = FakeHttp([FakeResponse(404, {"detail": "Order not found"})])
    http.install(monkeypatch)

    with pytest.raises(requests.HTTPError, match="Order not found"):
        StorefrontClient("http://shop.test").get_order("ORD-0-X")

    assert len(http.requests) == 1


def test_server_error_is_retried(monkeypatch):
    http = FakeHttp(
        [
            FakeResponse(503, {"detail": "Service unavailable"}),
            FakeResponse(body={"order_number": "ORD-1-ABCDEFGHI"}),
        ]
    )
    http.install(monkeypatch)
    monkeypatch.setattr(StorefrontClient.get_order.retry, "sleep", lambda _: None)

    body = StorefrontClient("http://shop.test").get_order("ORD-1-ABCDEFGHI", email="g@example.com")

    assert body["order_number"] == "ORD-1-ABCDEFGHI"
    assert len(http.requests) == 2
    assert http.requests[1][2]["params"] == {"email": "g@example.com"}
