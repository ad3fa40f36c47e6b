# storefront/services/api_client.py
from typing import Any, Dict, List

import requests

from storefront.domain.cart import ServerCartItem
from storefront.domain.schemas import GuestOrderCreate
from storefront.utils.retry import http_retry, http_connect_retry
from storefront.utils.settings import STOREFRONT_API_URL
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def _raise_for_status(resp: requests.Response) -> None:
    if resp.ok:
        return
    try:
        body = resp.json()
        detail = body.get("detail") if isinstance(body, dict) else body
    except ValueError:
        detail = resp.text
    raise requests.HTTPError(f"{resp.status_code} {resp.reason}: {detail}", response=resp)


class StorefrontClient:
    """
    Klient HTTP API sklepu po stronie kupujacego.
    Implementuje CartGateway (sync koszyka) i OrderGateway (zamowienie goscia).
    """

    def __init__(self, base_url: str | None = None, user_id: str | None = None, timeout: int = 5):
        self.base_url = (base_url or STOREFRONT_API_URL).rstrip("/")
        self.user_id = user_id
        self.timeout = timeout

    def _user_params(self) -> Dict[str, str]:
        if not self.user_id:
            raise ValueError("StorefrontClient needs user_id for cart operations")
        return {"user_id": self.user_id}

    @http_retry()
    def get_cart(self) -> List[ServerCartItem]:
        url = f"{self.base_url}/cart/"
        logger.info(f"StorefrontClient GET {url}")

        resp = requests.get(url, params=self._user_params(), timeout=self.timeout)
        _raise_for_status(resp)
        return [ServerCartItem.model_validate(i) for i in resp.json()["items"]]

    @http_connect_retry()
    def add_item(self, product_id: str, quantity: int) -> None:
        url = f"{self.base_url}/cart/items"
        logger.info(f"StorefrontClient POST {url} product={product_id} qty={quantity}")

        resp = requests.post(
            url,
            params=self._user_params(),
            json={"product_id": product_id, "quantity": quantity},
            timeout=self.timeout,
        )
        _raise_for_status(resp)

    @http_connect_retry()
    def set_quantity(self, cart_item_id: str, quantity: int) -> None:
        url = f"{self.base_url}/cart/items/{cart_item_id}"
        logger.info(f"StorefrontClient PATCH {url} qty={quantity}")

        resp = requests.patch(
            url,
            params=self._user_params(),
            json={"quantity": quantity},
            timeout=self.timeout,
        )
        _raise_for_status(resp)

    @http_connect_retry()
    def create_guest_order(self, payload: GuestOrderCreate) -> Dict[str, Any]:
        url = f"{self.base_url}/orders/guest"
        logger.info(f"StorefrontClient POST {url} payment={payload.payment_response.payment_reference}")

        resp = requests.post(url, json=payload.model_dump(mode="json"), timeout=self.timeout)
        _raise_for_status(resp)
        return resp.json()

    @http_retry()
    def get_order(self, order_number: str, email: str | None = None) -> Dict[str, Any]:
        url = f"{self.base_url}/orders/by-number/{order_number}"
        params = {"email": email} if email else None

        resp = requests.get(url, params=params, timeout=self.timeout)
        _raise_for_status(resp)
        return resp.json()
