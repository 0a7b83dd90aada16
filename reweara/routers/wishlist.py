# reweara/routers/wishlist.py
import uuid

from fastapi import APIRouter, Depends
from sqlmodel import Session

from reweara.core.auth import require_auth
from reweara.database import get_session
from reweara.models.user import User
from reweara.repositories.catalog_repo import CatalogRepository
from reweara.repositories.wishlist_repo import WishlistRepository
from reweara.schemas.wishlist import WishlistItemCreate, WishlistItemRead
from reweara.services.wishlist_service import WishlistService

router = APIRouter(prefix="/wishlist", tags=["Wishlist"])

wishlist_repo = WishlistRepository()
catalog_repo = CatalogRepository()
service = WishlistService(wishlist_repo, catalog_repo)


@router.get("", response_model=list[WishlistItemRead])
def get_wishlist(
    session: Session = Depends(get_session),
    user: User = Depends(require_auth),
):
    """
    Saved products of the current user, most recently saved first.
    """
    return service.list_items(session, user)


@router.post("", response_model=WishlistItemRead)
def add_to_wishlist(
    payload: WishlistItemCreate,
    session: Session = Depends(get_session),
    user: User = Depends(require_auth),
):
    """
    Save a product. Saving it again returns the existing entry.
    """
    return service.add_item(session, user, payload)


@router.delete("/{product_id}")
def remove_from_wishlist(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
    user: User = Depends(require_auth),
):
    return service.remove_item(session, user, product_id)
