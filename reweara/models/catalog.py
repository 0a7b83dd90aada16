# reweara/models/catalog.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field


class Category(SQLModel, table=True):
    """
    Top-level product grouping (e.g. "Thrift", "Originals", "Accessories").
    """

    __tablename__ = "categories"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True, index=True)
    name: str = Field(max_length=100)
    slug: str = Field(max_length=255, unique=True, index=True)
    description: str | None = None
    image_url: str | None = None
    is_active: bool = Field(default=True, index=True)
    sort_order: int = Field(default=0)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class Brand(SQLModel, table=True):
    """
    Brand shown in the brand scroller; featured brands get a home-page slot.
    """

    __tablename__ = "brands"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True, index=True)
    name: str = Field(max_length=100)
    slug: str = Field(max_length=255, unique=True, index=True)
    description: str | None = None
    logo_url: str | None = None
    is_active: bool = Field(default=True, index=True)
    is_featured: bool = Field(default=False)
    sort_order: int = Field(default=0)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class Product(SQLModel, table=True):
    """
    Catalog entry.

    `images` holds public media URLs in display order; the first one is
    used as the cart thumbnail.
    """

    __tablename__ = "products"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        max_length=255,
        index=True,
    )

    slug: str = Field(
        max_length=255,
        unique=True,
        index=True,
        description="URL-friendly identifier (unique)",
    )

    description: str | None = None

    category_id: uuid.UUID = Field(
        foreign_key="categories.id",
        index=True,
    )

    brand_id: uuid.UUID | None = Field(
        default=None,
        foreign_key="brands.id",
        index=True,
    )

    price: float = Field(
        gt=0,
        description="Unit price (INR)",
    )

    original_price: float | None = Field(
        default=None,
        description="Pre-discount price shown struck through",
    )

    # "New", "Like New", "Good", "Fair"
    condition: str | None = None
    size: str | None = None
    color: str | None = None

    images: list[str] = Field(
        default_factory=list,
        sa_column=Column(JSON),
    )

    is_active: bool = Field(default=True, index=True)
    is_featured: bool = Field(default=False)
    is_hot_selling: bool = Field(default=False)

    stock: int = Field(
        default=1,
        ge=0,
        description="How many units currently in stock",
    )

    view_count: int = Field(default=0, ge=0)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
