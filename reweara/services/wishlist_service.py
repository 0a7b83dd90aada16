# reweara/services/wishlist_service.py
import logging
import uuid

from fastapi import HTTPException, status
from sqlmodel import Session

from reweara.models.catalog import Product
from reweara.models.user import User
from reweara.models.wishlist import WishlistItem
from reweara.repositories.catalog_repo import CatalogRepository
from reweara.repositories.wishlist_repo import WishlistRepository
from reweara.schemas.catalog import ProductRead
from reweara.schemas.wishlist import WishlistItemCreate, WishlistItemRead

logger = logging.getLogger(__name__)


class WishlistService:
    """
    Saved products of signed-in shoppers. Adding is idempotent and removing
    a product that was never saved is not an error.
    """

    def __init__(self, wishlist_repo: WishlistRepository, catalog_repo: CatalogRepository):
        self.wishlist_repo = wishlist_repo
        self.catalog_repo = catalog_repo

    @staticmethod
    def _to_read(item: WishlistItem, product: Product) -> WishlistItemRead:
        return WishlistItemRead(
            id=item.id,
            product_id=item.product_id,
            created_at=item.created_at,
            product=ProductRead.model_validate(product),
        )

    def list_items(self, session: Session, user: User) -> list[WishlistItemRead]:
        rows = self.wishlist_repo.list_for_user(session, user.id)
        return [self._to_read(item, product) for item, product in rows]

    def add_item(
        self, session: Session, user: User, payload: WishlistItemCreate
    ) -> WishlistItemRead:
        product = self.catalog_repo.get_product(session, payload.product_id)
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )

        item = self.wishlist_repo.get_for_product(session, user.id, product.id)
        if item is None:
            if not product.is_active:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Product is not available",
                )
            item = self.wishlist_repo.save(
                session, WishlistItem(user_id=user.id, product_id=product.id)
            )
            logger.info("User %s saved product %s", user.id, product.id)
        return self._to_read(item, product)

    def remove_item(self, session: Session, user: User, product_id: uuid.UUID) -> dict:
        item = self.wishlist_repo.get_for_product(session, user.id, product_id)
        if item is not None:
            self.wishlist_repo.delete(session, item)
        return {"message": "Item removed from wishlist"}
