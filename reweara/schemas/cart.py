# reweara/schemas/cart.py
import uuid

from sqlmodel import SQLModel, Field


class CartItemCreate(SQLModel):
    """
    Payload for adding to cart.
    Adding a product already in the cart increments its quantity.
    """

    product_id: uuid.UUID
    quantity: int = Field(default=1, gt=0)


class CartItemUpdate(SQLModel):
    """
    Payload for setting the quantity of a cart line.
    A quantity of 0 removes the line.
    """

    quantity: int = Field(ge=0)


class CartItemRead(SQLModel):
    """
    Read model for a single cart line, joined with its product.
    """

    id: uuid.UUID
    product_id: uuid.UUID
    product_name: str
    price: float
    image_url: str | None = None
    quantity: int
    line_total: float


class CartSummary(SQLModel):
    """
    Full cart response model with totals.
    """

    cart_id: uuid.UUID
    items: list[CartItemRead]
    total_quantity: int
    total_price: float
