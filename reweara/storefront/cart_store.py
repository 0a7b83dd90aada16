# reweara/storefront/cart_store.py
"""
In-memory cart state for the storefront.

CartStore is an explicit, injectable state container: product views call
add_item, the cart badge and cart page read `items` / `count`, and
CartSynchronizer (api_client.py) reconciles it with the server cart.
"""
import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, Iterable

logger = logging.getLogger(__name__)

Listener = Callable[["CartStore"], None]


@dataclass(frozen=True)
class LineItem:
    """One product-id-keyed entry of the cart."""

    product_id: str
    name: str
    price: float
    image: str | None = None
    quantity: int = 1

    @property
    def line_total(self) -> float:
        return self.price * self.quantity

    @classmethod
    def from_product(cls, product: Any, quantity: int = 1) -> "LineItem":
        """
        Build a line from a product-like record: anything exposing
        id, name, price and either `image` or an `images` list.
        """
        image = getattr(product, "image", None)
        if image is None:
            images = getattr(product, "images", None) or []
            image = images[0] if images else None
        return cls(
            product_id=str(product.id),
            name=product.name,
            price=float(product.price),
            image=image,
            quantity=quantity,
        )


class CartStore:
    """
    Cart aggregate: insertion-ordered line items plus the derived item count.

    Every mutation recomputes `count` before listeners run, so observers
    always see count == sum of quantities.
    """

    def __init__(self, items: Iterable[LineItem] = ()):
        self._items: dict[str, LineItem] = {}
        self._listeners: list[Listener] = []
        self.count = 0
        self.is_open = False
        for item in items:
            self._merge(item, item.quantity)
        self._recount()

    # ---- reads ----

    @property
    def items(self) -> list[LineItem]:
        return list(self._items.values())

    @property
    def total_price(self) -> float:
        return round(sum(item.line_total for item in self._items.values()), 2)

    def get(self, product_id: str) -> LineItem | None:
        return self._items.get(str(product_id))

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, product_id: object) -> bool:
        return str(product_id) in self._items

    # ---- subscriptions ----

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _commit(self) -> None:
        self._recount()
        for listener in list(self._listeners):
            listener(self)

    def _recount(self) -> None:
        self.count = sum(item.quantity for item in self._items.values())

    def _merge(self, item: LineItem, quantity: int) -> None:
        existing = self._items.get(item.product_id)
        if existing is None:
            self._items[item.product_id] = replace(item, quantity=quantity)
        else:
            self._items[item.product_id] = replace(
                existing, quantity=existing.quantity + quantity
            )

    # ---- mutations ----

    def add_item(self, item: LineItem | Any, quantity: int = 1) -> None:
        """
        Add `quantity` units. An existing line for the same product id is
        incremented; otherwise a new line is appended.
        """
        if not isinstance(item, LineItem):
            item = LineItem.from_product(item)
        self._merge(item, quantity)
        self._commit()

    def remove_item(self, product_id: str) -> None:
        """Drop the line for `product_id`; absent ids are ignored."""
        self._items.pop(str(product_id), None)
        self._commit()

    def set_quantity(self, product_id: str, quantity: int) -> None:
        """
        Replace a line's quantity. quantity <= 0 removes the line.
        Unknown product ids are left alone, no line is created.
        """
        product_id = str(product_id)
        if quantity <= 0:
            self.remove_item(product_id)
            return

        existing = self._items.get(product_id)
        if existing is None:
            logger.debug("set_quantity for unknown product %s ignored", product_id)
        else:
            self._items[product_id] = replace(existing, quantity=quantity)
        self._commit()

    def replace_items(self, items: Iterable[LineItem]) -> None:
        """
        Load a snapshot (e.g. the server cart). Duplicate product ids in
        the snapshot are merged by summing their quantities.
        """
        self._items = {}
        for item in items:
            if item.quantity > 0:
                self._merge(item, item.quantity)
        self._commit()

    def clear(self) -> None:
        self._items = {}
        self._commit()

    # ---- visibility ----

    def toggle_cart(self) -> None:
        self.is_open = not self.is_open
        self._commit()

    def open_cart(self) -> None:
        self.is_open = True
        self._commit()

    def close_cart(self) -> None:
        self.is_open = False
        self._commit()
