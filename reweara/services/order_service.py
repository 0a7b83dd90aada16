# reweara/services/order_service.py
import logging
import uuid

from fastapi import HTTPException, status
from sqlmodel import Session

from reweara.core.auth import CartOwner
from reweara.core.clock import utcnow
from reweara.core.config import get_settings
from reweara.models.catalog import Product
from reweara.models.order import Order, OrderItem
from reweara.repositories.cart_repo import CartRepository
from reweara.repositories.catalog_repo import CatalogRepository
from reweara.repositories.order_repo import OrderRepository
from reweara.schemas.order import (
    OrderCreate,
    OrderRead,
    OrderWithItemsRead,
    OrderItemRead,
    OrderStatusUpdate,
)
from reweara.services.cart_service import CartService
from reweara.services.coupon_service import CouponService

logger = logging.getLogger(__name__)

# Allowed admin status transitions
STATUS_TRANSITIONS: dict[str, set[str]] = {
    "pending": {"payment_verified", "confirmed", "cancelled"},
    "payment_verified": {"confirmed", "cancelled"},
    "confirmed": {"shipped", "cancelled"},
    "shipped": {"delivered"},
    "delivered": set(),
    "cancelled": set(),
}


class OrderService:
    """
    Business logic for orders.

    Responsibilities:
      - Create order from the owner's cart
      - Validate cart items against products (stock, active)
      - Price from current product price, add GST + shipping, apply coupon
      - Deduct stock
      - Clear cart after success
      - Enforce status transitions (admin)
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        cart_repo: CartRepository,
        catalog_repo: CatalogRepository,
        cart_service: CartService,
        coupon_service: CouponService,
    ):
        self.order_repo = order_repo
        self.cart_repo = cart_repo
        self.catalog_repo = catalog_repo
        self.cart_service = cart_service
        self.coupon_service = coupon_service

    # -------- Pricing --------

    @staticmethod
    def shipping_for(subtotal: float) -> float:
        settings = get_settings()
        if subtotal > settings.FREE_SHIPPING_THRESHOLD:
            return 0.0
        return settings.SHIPPING_FEE

    @staticmethod
    def tax_for(subtotal: float) -> float:
        return round(subtotal * get_settings().TAX_RATE, 2)

    # -------- Shopper-facing operations --------

    def checkout(
        self,
        session: Session,
        owner: CartOwner,
        payload: OrderCreate,
    ) -> OrderWithItemsRead:
        """
        Convert the owner's cart into an Order.

        Steps:
          1. Load cart items; error if empty.
          2. Validate every line against its product (exists, active, stock).
          3. Compute subtotal from current prices, tax, shipping, coupon.
          4. Create Order + OrderItem rows.
          5. Deduct stock, bump coupon usage, clear cart.
          6. Commit and return the full order.
        """
        cart = self.cart_service.get_or_create_cart(session, owner)
        cart_items = self.cart_repo.list_items(session, cart.id)
        if not cart_items:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cart is empty",
            )

        errors: list[dict[str, str]] = []
        product_map: dict[uuid.UUID, Product] = {}

        for ci in cart_items:
            product = self.catalog_repo.get_product(session, ci.product_id)

            if not product:
                errors.append({"product_id": str(ci.product_id), "reason": "Product not found"})
                continue

            product_map[ci.product_id] = product

            if not product.is_active:
                errors.append({"product_id": str(ci.product_id), "reason": "Product is not available"})
                continue

            if ci.quantity > product.stock:
                errors.append(
                    {
                        "product_id": str(ci.product_id),
                        "reason": f"Insufficient stock (have {product.stock}, requested {ci.quantity})",
                    }
                )

        if errors:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={"message": "Cart validation failed", "items": errors},
            )

        subtotal = round(
            sum(ci.quantity * product_map[ci.product_id].price for ci in cart_items), 2
        )
        tax_amount = self.tax_for(subtotal)
        shipping_amount = self.shipping_for(subtotal)

        discount_amount = 0.0
        coupon = None
        if payload.coupon_code:
            coupon, discount_amount = self.coupon_service.resolve(
                session, payload.coupon_code, subtotal
            )

        total_amount = round(subtotal + tax_amount + shipping_amount - discount_amount, 2)

        order = self.order_repo.add_order(
            session,
            Order(
                user_id=owner.user_id,
                session_id=owner.session_id,
                guest_email=None if owner.user else payload.shipping_address.email,
                status="pending",
                payment_method=payload.payment_method,
                subtotal=subtotal,
                tax_amount=tax_amount,
                shipping_amount=shipping_amount,
                discount_amount=discount_amount,
                total_amount=total_amount,
                coupon_code=coupon.code if coupon else None,
                shipping_address=payload.shipping_address.model_dump(),
                notes=payload.notes,
            ),
        )

        order_items = self.order_repo.add_items(
            session,
            [
                OrderItem(
                    order_id=order.id,
                    product_id=ci.product_id,
                    product_name=product_map[ci.product_id].name,
                    quantity=ci.quantity,
                    price=product_map[ci.product_id].price,
                )
                for ci in cart_items
            ],
        )

        for ci in cart_items:
            product_map[ci.product_id].stock -= ci.quantity
            session.add(product_map[ci.product_id])
            session.delete(ci)

        if coupon is not None:
            coupon.usage_count += 1
            session.add(coupon)

        session.commit()
        session.refresh(order)

        logger.info(
            "Order %s placed: subtotal=%.2f total=%.2f coupon=%s",
            order.id,
            subtotal,
            total_amount,
            order.coupon_code,
        )
        return self._build_order_with_items_dto(order, order_items)

    def list_owner_orders(
        self,
        session: Session,
        owner: CartOwner,
        skip: int = 0,
        limit: int = 50,
    ) -> list[OrderRead]:
        """
        List orders for the given owner (without items).
        """
        orders = self.order_repo.list_for_owner(
            session,
            user_id=owner.user_id,
            session_id=owner.session_id,
            skip=skip,
            limit=limit,
        )
        return orders  # type: ignore[return-value]

    def get_owner_order(
        self,
        session: Session,
        owner: CartOwner,
        order_id: uuid.UUID,
    ) -> OrderWithItemsRead:
        """
        Get a single order for the owner, including items.

        - 404 if order not found or does not belong to this owner.
        """
        order = self.order_repo.get_by_id(session, order_id)
        if not order or not self._owned_by(order, owner):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Order not found",
            )

        items = self.order_repo.list_items_for_order(session, order.id)
        return self._build_order_with_items_dto(order, items)

    # -------- Admin operations --------

    def list_all_orders(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
        status_filter: str | None = None,
    ) -> list[OrderRead]:
        orders = self.order_repo.list_all(session, skip, limit, status_filter)
        return orders  # type: ignore[return-value]

    def get_order_admin(
        self,
        session: Session,
        order_id: uuid.UUID,
    ) -> OrderWithItemsRead:
        order = self.order_repo.get_by_id(session, order_id)
        if not order:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Order not found",
            )
        items = self.order_repo.list_items_for_order(session, order.id)
        return self._build_order_with_items_dto(order, items)

    def update_status(
        self,
        session: Session,
        order_id: uuid.UUID,
        payload: OrderStatusUpdate,
    ) -> OrderRead:
        """
        Admin-only status update with the STATUS_TRANSITIONS state machine.

        Any invalid transition raises 400. Verifying payment also marks
        payment_status as verified.
        """
        order = self.order_repo.get_by_id(session, order_id)
        if not order:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Order not found",
            )

        current = order.status
        new = payload.status

        if current == new:
            return order  # type: ignore[return-value]

        if new not in STATUS_TRANSITIONS.get(current, set()):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid status transition: {current} -> {new}",
            )

        order.status = new
        if new == "payment_verified":
            order.payment_status = "verified"
        order.updated_at = utcnow()
        session.add(order)
        session.commit()
        session.refresh(order)

        logger.info("Order %s: %s -> %s", order.id, current, new)
        return order  # type: ignore[return-value]

    # -------- Helpers --------

    @staticmethod
    def _owned_by(order: Order, owner: CartOwner) -> bool:
        if owner.user is not None:
            return order.user_id == owner.user.id
        return order.user_id is None and order.session_id == owner.session_id

    def _build_order_with_items_dto(
        self,
        order: Order,
        items: list[OrderItem],
    ) -> OrderWithItemsRead:
        item_dtos = [
            OrderItemRead(
                id=it.id,
                order_id=it.order_id,
                product_id=it.product_id,
                product_name=it.product_name,
                quantity=it.quantity,
                price=it.price,
                line_total=round(it.quantity * it.price, 2),
            )
            for it in items
        ]

        return OrderWithItemsRead(
            id=order.id,
            user_id=order.user_id,
            guest_email=order.guest_email,
            status=order.status,
            payment_method=order.payment_method,
            payment_status=order.payment_status,
            subtotal=order.subtotal,
            tax_amount=order.tax_amount,
            shipping_amount=order.shipping_amount,
            discount_amount=order.discount_amount,
            total_amount=order.total_amount,
            coupon_code=order.coupon_code,
            shipping_address=order.shipping_address,
            notes=order.notes,
            created_at=order.created_at,
            items=item_dtos,
        )
