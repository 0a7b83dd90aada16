# reweara/schemas/wishlist.py
import uuid
from datetime import datetime

from sqlmodel import SQLModel

from reweara.schemas.catalog import ProductRead


class WishlistItemCreate(SQLModel):
    product_id: uuid.UUID


class WishlistItemRead(SQLModel):
    """
    Saved product, joined with the product it points to.
    """

    id: uuid.UUID
    product_id: uuid.UUID
    created_at: datetime
    product: ProductRead
