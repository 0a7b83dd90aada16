# reweara/repositories/wishlist_repo.py
import uuid

from sqlmodel import Session, select

from reweara.models.catalog import Product
from reweara.models.wishlist import WishlistItem


class WishlistRepository:

    def list_for_user(
        self, session: Session, user_id: uuid.UUID
    ) -> list[tuple[WishlistItem, Product]]:
        stmt = (
            select(WishlistItem, Product)
            .join(Product, Product.id == WishlistItem.product_id)
            .where(WishlistItem.user_id == user_id)
            .order_by(WishlistItem.created_at.desc())
        )
        return session.exec(stmt).all()

    def get_for_product(
        self, session: Session, user_id: uuid.UUID, product_id: uuid.UUID
    ) -> WishlistItem | None:
        stmt = select(WishlistItem).where(
            WishlistItem.user_id == user_id, WishlistItem.product_id == product_id
        )
        return session.exec(stmt).first()

    def save(self, session: Session, item: WishlistItem) -> WishlistItem:
        session.add(item)
        session.commit()
        session.refresh(item)
        return item

    def delete(self, session: Session, item: WishlistItem) -> None:
        session.delete(item)
        session.commit()
