# reweara/schemas/catalog.py
import uuid
from datetime import datetime

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field


class CategoryRead(SQLModel):
    id: uuid.UUID
    name: str
    slug: str
    description: str | None = None
    image_url: str | None = None
    sort_order: int


class BrandRead(SQLModel):
    id: uuid.UUID
    name: str
    slug: str
    description: str | None = None
    logo_url: str | None = None
    is_featured: bool
    sort_order: int


class ProductRead(SQLModel):
    """
    Product representation for clients.
    """

    id: uuid.UUID
    name: str
    slug: str
    description: str | None = None
    category_id: uuid.UUID
    brand_id: uuid.UUID | None = None
    price: float
    original_price: float | None = None
    condition: str | None = None
    size: str | None = None
    color: str | None = None
    images: list[str] = []
    is_active: bool
    is_featured: bool
    is_hot_selling: bool
    stock: int
    view_count: int
    created_at: datetime


class ProductCreate(SQLModel):
    """
    Payload for creating a product.

    - slug is optional: if omitted, generated from `name`.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=255)
    slug: str | None = None
    description: str | None = None
    category_id: uuid.UUID
    brand_id: uuid.UUID | None = None
    price: float = Field(gt=0)
    original_price: float | None = Field(default=None, gt=0)
    condition: str | None = None
    size: str | None = None
    color: str | None = None
    images: list[str] = []
    is_active: bool = True
    is_featured: bool = False
    is_hot_selling: bool = False
    stock: int = Field(default=1, ge=0)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v

    @field_validator("slug")
    @classmethod
    def normalize_slug(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        if not v:
            raise ValueError("slug cannot be empty if provided")
        return v


class ProductUpdate(SQLModel):
    """
    Partial update payload for products.
    All fields are optional.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=255)
    description: str | None = None
    category_id: uuid.UUID | None = None
    brand_id: uuid.UUID | None = None
    price: float | None = Field(default=None, gt=0)
    original_price: float | None = Field(default=None, gt=0)
    condition: str | None = None
    size: str | None = None
    color: str | None = None
    images: list[str] | None = None
    is_active: bool | None = None
    is_featured: bool | None = None
    is_hot_selling: bool | None = None
    stock: int | None = Field(default=None, ge=0)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v
