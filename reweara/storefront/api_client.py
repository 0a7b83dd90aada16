# reweara/storefront/api_client.py
"""HTTP client for the storefront API.

StorefrontClient wraps httpx with the identity headers the API expects
(guest session id, optional bearer token) and a small query cache: GET
results are reused until they go stale or a mutation invalidates them.

CartSynchronizer keeps a CartStore consistent with the server cart.
"""

import logging
import time
import uuid
from typing import Any, Callable

import httpx

from reweara.core.config import get_settings
from reweara.schemas.cart import CartSummary
from reweara.schemas.catalog import ProductRead
from reweara.schemas.coupon import CouponValidation
from reweara.schemas.order import OrderCreate, OrderWithItemsRead
from reweara.schemas.promotion import BannerRead, PromotionalPopupRead
from reweara.schemas.wishlist import WishlistItemRead
from reweara.storefront.cart_store import CartStore, LineItem

logger = logging.getLogger(__name__)


class StorefrontAPIError(Exception):
    """Non-2xx response from the storefront API."""

    def __init__(self, status_code: int, message: str, detail: Any = None):
        self.status_code = status_code
        self.message = message
        self.detail = detail
        super().__init__(f"{status_code}: {message}")


class StorefrontUnavailable(Exception):
    """The storefront API could not be reached."""

    pass


def _handle_response(response: httpx.Response) -> Any:
    if response.is_success:
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    try:
        body = response.json()
    except ValueError:
        body = response.text
    # Proxies and gateways do not always answer with FastAPI's {"detail": ...}
    detail = body.get("detail") if isinstance(body, dict) else body

    if isinstance(detail, dict):
        message = detail.get("message", str(detail))
    elif isinstance(detail, str):
        message = detail
    else:
        message = response.reason_phrase
    raise StorefrontAPIError(response.status_code, message, detail)


class StorefrontClient:
    """
    Args:
        base_url: API root including the version prefix,
                  e.g. "https://shop.example/api/v1"
        session_id: guest cart identity, sent as the session header
        token: bearer token for signed-in shoppers
        stale_time: seconds a cached GET stays fresh
        http_client: pre-built httpx.Client (tests, custom transports)
    """

    def __init__(
        self,
        base_url: str,
        *,
        session_id: str | None = None,
        token: str | None = None,
        timeout: float = 10.0,
        stale_time: float = 300.0,
        http_client: httpx.Client | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.base_url = base_url.rstrip("/")
        self.session_id = session_id or str(uuid.uuid4())
        self.token = token
        self.stale_time = stale_time
        self._clock = clock
        self._owns_client = http_client is None
        self._http = http_client or httpx.Client(timeout=timeout)
        self._cache: dict[tuple[str, tuple], tuple[float, Any]] = {}

    # ---- plumbing ----

    def close(self) -> None:
        if self._owns_client:
            self._http.close()

    def __enter__(self) -> "StorefrontClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _headers(self) -> dict[str, str]:
        headers = {get_settings().SESSION_HEADER: self.session_id}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _request(self, method: str, path: str, **kwargs) -> Any:
        try:
            response = self._http.request(
                method, f"{self.base_url}{path}", headers=self._headers(), **kwargs
            )
        except httpx.RequestError as e:
            logger.error("Storefront API unavailable (%s %s): %s", method, path, e)
            raise StorefrontUnavailable(str(e)) from e
        return _handle_response(response)

    def query(self, path: str, params: dict[str, Any] | None = None, *, fresh: bool = False) -> Any:
        """Cached GET."""
        key = (path, tuple(sorted((params or {}).items())))
        cached = self._cache.get(key)
        now = self._clock()
        if cached is not None and not fresh and now - cached[0] < self.stale_time:
            return cached[1]

        data = self._request("GET", path, params=params)
        self._cache[key] = (now, data)
        return data

    def invalidate(self, prefix: str) -> None:
        for key in [k for k in self._cache if k[0].startswith(prefix)]:
            del self._cache[key]

    def mutate(self, method: str, path: str, json: Any = None, *, invalidates: tuple[str, ...] = ()) -> Any:
        data = self._request(method, path, json=json)
        for prefix in invalidates:
            self.invalidate(prefix)
        return data

    # ---- catalog ----

    def list_products(self, **filters) -> list[ProductRead]:
        params = {k: v for k, v in filters.items() if v is not None}
        return [ProductRead.model_validate(p) for p in self.query("/products", params)]

    # ---- cart ----

    def get_cart(self, *, fresh: bool = False) -> CartSummary:
        return CartSummary.model_validate(self.query("/cart", fresh=fresh))

    def _cart_mutation(self, method: str, path: str, json: Any = None) -> CartSummary:
        summary = CartSummary.model_validate(
            self.mutate(method, path, json, invalidates=("/cart",))
        )
        self._cache[("/cart", ())] = (self._clock(), summary.model_dump(mode="json"))
        return summary

    def add_to_cart(self, product_id: uuid.UUID | str, quantity: int = 1) -> CartSummary:
        return self._cart_mutation(
            "POST", "/cart/items", {"product_id": str(product_id), "quantity": quantity}
        )

    def update_cart_item(self, item_id: uuid.UUID | str, quantity: int) -> CartSummary:
        return self._cart_mutation("PUT", f"/cart/items/{item_id}", {"quantity": quantity})

    def remove_cart_item(self, item_id: uuid.UUID | str) -> CartSummary:
        return self._cart_mutation("DELETE", f"/cart/items/{item_id}")

    def clear_cart(self) -> CartSummary:
        return self._cart_mutation("DELETE", "/cart")

    # ---- wishlist ----

    def wishlist(self) -> list[WishlistItemRead]:
        return [WishlistItemRead.model_validate(w) for w in self.query("/wishlist")]

    def save_to_wishlist(self, product_id: uuid.UUID | str) -> WishlistItemRead:
        data = self.mutate(
            "POST", "/wishlist", {"product_id": str(product_id)}, invalidates=("/wishlist",)
        )
        return WishlistItemRead.model_validate(data)

    def remove_from_wishlist(self, product_id: uuid.UUID | str) -> None:
        self.mutate("DELETE", f"/wishlist/{product_id}", invalidates=("/wishlist",))

    # ---- checkout ----

    def validate_coupon(self, code: str, subtotal: float) -> CouponValidation:
        data = self._request("POST", "/coupons/validate", json={"code": code, "subtotal": subtotal})
        return CouponValidation.model_validate(data)

    def checkout(self, payload: OrderCreate) -> OrderWithItemsRead:
        data = self.mutate(
            "POST",
            "/orders",
            payload.model_dump(mode="json"),
            invalidates=("/cart", "/orders", "/products"),
        )
        return OrderWithItemsRead.model_validate(data)

    # ---- promotions ----

    def active_popups(self) -> list[PromotionalPopupRead]:
        """Active popups; a failed fetch means there is nothing to show."""
        try:
            data = self.query("/promotional-popups/active")
        except (StorefrontAPIError, StorefrontUnavailable) as e:
            logger.warning("Could not fetch promotional popups: %s", e)
            return []
        return [PromotionalPopupRead.model_validate(p) for p in data or []]

    def active_banners(self) -> list[BannerRead]:
        try:
            data = self.query("/banners")
        except (StorefrontAPIError, StorefrontUnavailable) as e:
            logger.warning("Could not fetch banners: %s", e)
            return []
        return [BannerRead.model_validate(b) for b in data or []]


class CartSynchronizer:
    """
    Applies cart changes to the local CartStore first, then to the server.

    The summary the server answers with is authoritative and replaces the
    local lines. When the server rejects a change the store is re-pulled
    from the server before the error propagates.
    """

    def __init__(self, client: StorefrontClient, store: CartStore):
        self.client = client
        self.store = store
        self._item_ids: dict[str, uuid.UUID] = {}

    def refresh(self) -> CartSummary:
        summary = self.client.get_cart(fresh=True)
        self._apply(summary)
        return summary

    def add(self, product: LineItem | Any, quantity: int = 1) -> CartSummary:
        item = product if isinstance(product, LineItem) else LineItem.from_product(product)
        self.store.add_item(item, quantity)
        return self._push(lambda: self.client.add_to_cart(item.product_id, quantity))

    def set_quantity(self, product_id: str, quantity: int) -> CartSummary | None:
        """
        Returns None when the server has no line for the product; the local
        store then matches the server cart.
        """
        product_id = str(product_id)
        item_id = self._server_item_id(product_id)
        self.store.set_quantity(product_id, quantity)
        if item_id is None:
            return None
        return self._push(lambda: self.client.update_cart_item(item_id, max(quantity, 0)))

    def remove(self, product_id: str) -> CartSummary | None:
        product_id = str(product_id)
        item_id = self._server_item_id(product_id)
        self.store.remove_item(product_id)
        if item_id is None:
            return None
        return self._push(lambda: self.client.remove_cart_item(item_id))

    def _server_item_id(self, product_id: str) -> uuid.UUID | None:
        # Line ids are only known after a pull; fetch them once on demand
        if product_id not in self._item_ids:
            self.refresh()
        return self._item_ids.get(product_id)

    def _push(self, call: Callable[[], CartSummary]) -> CartSummary:
        try:
            summary = call()
        except (StorefrontAPIError, StorefrontUnavailable) as e:
            logger.warning("Cart sync failed, reloading server cart: %s", e)
            self._recover()
            raise
        self._apply(summary)
        return summary

    def _recover(self) -> None:
        try:
            self.refresh()
        except (StorefrontAPIError, StorefrontUnavailable) as e:
            logger.error("Could not reload server cart: %s", e)

    def _apply(self, summary: CartSummary) -> None:
        self._item_ids = {str(i.product_id): i.id for i in summary.items}
        self.store.replace_items(
            LineItem(
                product_id=str(i.product_id),
                name=i.product_name,
                price=i.price,
                image=i.image_url,
                quantity=i.quantity,
            )
            for i in summary.items
        )
