# reweara/routers/cart.py
import uuid

from fastapi import APIRouter, Depends
from sqlmodel import Session

from reweara.core.auth import CartOwner, get_cart_owner
from reweara.database import get_session
from reweara.repositories.cart_repo import CartRepository
from reweara.repositories.catalog_repo import CatalogRepository
from reweara.schemas.cart import CartSummary, CartItemCreate, CartItemUpdate
from reweara.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["Cart"])

cart_repo = CartRepository()
catalog_repo = CatalogRepository()
service = CartService(cart_repo, catalog_repo)


@router.get("", response_model=CartSummary)
def get_cart(
    session: Session = Depends(get_session),
    owner: CartOwner = Depends(get_cart_owner),
):
    """
    Get the cart of the current user, or of the guest session
    named by the X-Session-Id header.
    """
    return service.get_cart_summary(session, owner)


@router.post("/items", response_model=CartSummary)
def add_cart_item(
    payload: CartItemCreate,
    session: Session = Depends(get_session),
    owner: CartOwner = Depends(get_cart_owner),
):
    """
    Add a product; repeated adds of the same product merge into one line.
    """
    return service.add_item(session, owner, payload)


@router.put("/items/{item_id}", response_model=CartSummary)
def update_cart_item(
    item_id: uuid.UUID,
    payload: CartItemUpdate,
    session: Session = Depends(get_session),
    owner: CartOwner = Depends(get_cart_owner),
):
    """
    Set the quantity of a cart line; 0 removes it.
    """
    return service.update_item(session, owner, item_id, payload)


@router.delete("/items/{item_id}", response_model=CartSummary)
def remove_cart_item(
    item_id: uuid.UUID,
    session: Session = Depends(get_session),
    owner: CartOwner = Depends(get_cart_owner),
):
    return service.remove_item(session, owner, item_id)


@router.delete("", response_model=CartSummary)
def clear_cart(
    session: Session = Depends(get_session),
    owner: CartOwner = Depends(get_cart_owner),
):
    """
    Clear the entire cart.
    """
    return service.clear_cart(session, owner)
