# reweara/services/cart_service.py
import logging
import uuid

from fastapi import HTTPException, status
from sqlmodel import Session

from reweara.core.auth import CartOwner
from reweara.core.clock import utcnow
from reweara.models.cart import Cart, CartItem
from reweara.models.catalog import Product
from reweara.repositories.cart_repo import CartRepository
from reweara.repositories.catalog_repo import CatalogRepository
from reweara.schemas.cart import (
    CartItemCreate,
    CartItemUpdate,
    CartItemRead,
    CartSummary,
)

logger = logging.getLogger(__name__)


class CartService:
    """
    Business logic for the server-side cart.

    Responsibilities:
      - resolve (or lazily create) the cart of a user or guest session
      - validate product existence and active flag
      - merge repeated adds of the same product into one line
      - enforce quantity <= stock
      - treat a quantity of 0 as removal
      - compute line totals and cart totals from current product prices
    """

    def __init__(self, cart_repo: CartRepository, catalog_repo: CatalogRepository):
        self.cart_repo = cart_repo
        self.catalog_repo = catalog_repo

    # ---- internal helpers ----

    def get_or_create_cart(self, session: Session, owner: CartOwner) -> Cart:
        if owner.user is not None:
            cart = self.cart_repo.get_for_user(session, owner.user.id)
        else:
            cart = self.cart_repo.get_for_session(session, owner.session_id)

        if cart is None:
            cart = self.cart_repo.create_cart(
                session,
                Cart(user_id=owner.user_id, session_id=owner.session_id),
            )
        return cart

    def _get_valid_product(self, session: Session, product_id: uuid.UUID) -> Product:
        product = self.catalog_repo.get_product(session, product_id)
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        if not product.is_active:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Product is not available",
            )
        return product

    def _get_owned_item(
        self, session: Session, cart: Cart, item_id: uuid.UUID
    ) -> CartItem:
        item = self.cart_repo.get_item(session, item_id)
        if not item or item.cart_id != cart.id:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Item not found in cart",
            )
        return item

    def _summarize(self, session: Session, cart: Cart) -> CartSummary:
        item_reads: list[CartItemRead] = []
        total_qty = 0
        total_price = 0.0

        for it in self.cart_repo.list_items(session, cart.id):
            product = self.catalog_repo.get_product(session, it.product_id)
            if product is None:
                continue

            line_total = it.quantity * product.price
            total_qty += it.quantity
            total_price += line_total

            item_reads.append(
                CartItemRead(
                    id=it.id,
                    product_id=it.product_id,
                    product_name=product.name,
                    price=product.price,
                    image_url=product.images[0] if product.images else None,
                    quantity=it.quantity,
                    line_total=line_total,
                )
            )

        return CartSummary(
            cart_id=cart.id,
            items=item_reads,
            total_quantity=total_qty,
            total_price=round(total_price, 2),
        )

    # ---- public operations ----

    def get_cart_summary(self, session: Session, owner: CartOwner) -> CartSummary:
        """
        Return full cart summary:
          - list of CartItemRead (with line_total)
          - total_quantity
          - total_price
        """
        cart = self.get_or_create_cart(session, owner)
        return self._summarize(session, cart)

    def add_item(
        self,
        session: Session,
        owner: CartOwner,
        payload: CartItemCreate,
    ) -> CartSummary:
        """
        Add a product to the cart.

        Rules:
          - product must exist and be active
          - an existing line for the product is incremented, never duplicated
          - resulting quantity <= stock
        """
        product = self._get_valid_product(session, payload.product_id)
        cart = self.get_or_create_cart(session, owner)

        existing = self.cart_repo.get_item_for_product(session, cart.id, product.id)
        new_qty = payload.quantity + (existing.quantity if existing else 0)

        if new_qty > product.stock:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Not enough stock available",
            )

        if existing:
            existing.quantity = new_qty
            existing.updated_at = utcnow()
            self.cart_repo.save_item(session, existing)
        else:
            self.cart_repo.save_item(
                session,
                CartItem(cart_id=cart.id, product_id=product.id, quantity=new_qty),
            )

        logger.debug("cart %s: product %s -> qty %d", cart.id, product.id, new_qty)
        return self._summarize(session, cart)

    def update_item(
        self,
        session: Session,
        owner: CartOwner,
        item_id: uuid.UUID,
        payload: CartItemUpdate,
    ) -> CartSummary:
        """
        Set the quantity of a cart line.

        quantity == 0 removes the line; above stock => 400.
        """
        cart = self.get_or_create_cart(session, owner)
        item = self._get_owned_item(session, cart, item_id)

        if payload.quantity == 0:
            self.cart_repo.delete_item(session, item)
            return self._summarize(session, cart)

        product = self._get_valid_product(session, item.product_id)
        if payload.quantity > product.stock:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Not enough stock available",
            )

        item.quantity = payload.quantity
        item.updated_at = utcnow()
        self.cart_repo.save_item(session, item)
        return self._summarize(session, cart)

    def remove_item(
        self,
        session: Session,
        owner: CartOwner,
        item_id: uuid.UUID,
    ) -> CartSummary:
        cart = self.get_or_create_cart(session, owner)
        item = self._get_owned_item(session, cart, item_id)
        self.cart_repo.delete_item(session, item)
        return self._summarize(session, cart)

    def clear_cart(self, session: Session, owner: CartOwner) -> CartSummary:
        """
        Clear all items from the cart and return an empty summary.
        """
        cart = self.get_or_create_cart(session, owner)
        self.cart_repo.clear(session, cart.id)
        return CartSummary(cart_id=cart.id, items=[], total_quantity=0, total_price=0.0)
