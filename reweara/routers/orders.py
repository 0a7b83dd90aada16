# reweara/routers/orders.py
import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from reweara.core.auth import CartOwner, get_cart_owner, require_admin
from reweara.database import get_session
from reweara.repositories.cart_repo import CartRepository
from reweara.repositories.catalog_repo import CatalogRepository
from reweara.repositories.coupon_repo import CouponRepository
from reweara.repositories.order_repo import OrderRepository
from reweara.schemas.order import (
    OrderCreate,
    OrderRead,
    OrderStatus,
    OrderWithItemsRead,
    OrderStatusUpdate,
)
from reweara.services.cart_service import CartService
from reweara.services.coupon_service import CouponService
from reweara.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"])

cart_repo = CartRepository()
catalog_repo = CatalogRepository()
service = OrderService(
    OrderRepository(),
    cart_repo,
    catalog_repo,
    CartService(cart_repo, catalog_repo),
    CouponService(CouponRepository()),
)


# -------- Shopper endpoints --------


@router.post(
    "",
    response_model=OrderWithItemsRead,
    status_code=status.HTTP_201_CREATED,
)
def checkout(
    payload: OrderCreate,
    session: Session = Depends(get_session),
    owner: CartOwner = Depends(get_cart_owner),
):
    """
    Create an order from the current cart (user or guest session).
    """
    return service.checkout(session, owner, payload)


@router.get("/me", response_model=list[OrderRead])
def list_my_orders(
    session: Session = Depends(get_session),
    owner: CartOwner = Depends(get_cart_owner),
    skip: int = 0,
    limit: int = 50,
):
    return service.list_owner_orders(session, owner, skip, limit)


@router.get("/me/{order_id}", response_model=OrderWithItemsRead)
def get_my_order(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
    owner: CartOwner = Depends(get_cart_owner),
):
    return service.get_owner_order(session, owner, order_id)


# -------- Admin endpoints --------


@router.get(
    "",
    response_model=list[OrderRead],
    dependencies=[Depends(require_admin)],
)
def list_all_orders(
    session: Session = Depends(get_session),
    skip: int = 0,
    limit: int = 50,
    status_filter: OrderStatus | None = Query(default=None, alias="status"),
):
    """
    List all orders (admin only), optionally filtered by status.
    """
    return service.list_all_orders(session, skip, limit, status_filter)


@router.get(
    "/{order_id}",
    response_model=OrderWithItemsRead,
    dependencies=[Depends(require_admin)],
)
def get_order_admin(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return service.get_order_admin(session, order_id)


@router.patch(
    "/{order_id}/status",
    response_model=OrderRead,
    dependencies=[Depends(require_admin)],
)
def update_order_status(
    order_id: uuid.UUID,
    payload: OrderStatusUpdate,
    session: Session = Depends(get_session),
):
    """
    Update order status (admin only).

      pending          -> payment_verified, confirmed, cancelled

      payment_verified -> confirmed, cancelled

      confirmed        -> shipped, cancelled

      shipped          -> delivered
    """
    return service.update_status(session, order_id, payload)
