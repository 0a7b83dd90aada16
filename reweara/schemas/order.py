# reweara/schemas/order.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel

PaymentMethod = Literal["upi", "cod"]
OrderStatus = Literal[
    "pending",
    "payment_verified",
    "confirmed",
    "shipped",
    "delivered",
    "cancelled",
]


class ShippingAddress(SQLModel):
    model_config = ConfigDict(extra="forbid")

    full_name: str
    email: str
    phone: str
    address: str
    city: str
    state: str
    pincode: str
    landmark: str | None = None

    @field_validator("full_name", "email", "phone", "address", "city", "state", "pincode")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class OrderCreate(SQLModel):
    """
    Payload for creating an order from the current cart.

    Backend derives:
      - owner (user from token, or guest session)
      - status = 'pending'
      - subtotal from current product prices
      - tax, shipping and coupon discount
    """

    model_config = ConfigDict(extra="forbid")

    shipping_address: ShippingAddress
    payment_method: PaymentMethod = "upi"
    coupon_code: str | None = None
    notes: str | None = None

    @field_validator("coupon_code", "notes")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None


class OrderRead(SQLModel):
    """
    Lightweight representation of an order (without items).
    """

    id: uuid.UUID
    user_id: uuid.UUID | None = None
    guest_email: str | None = None
    status: OrderStatus
    payment_method: PaymentMethod
    payment_status: str
    subtotal: float
    tax_amount: float
    shipping_amount: float
    discount_amount: float
    total_amount: float
    coupon_code: str | None = None
    shipping_address: dict
    notes: str | None = None
    created_at: datetime


class OrderItemRead(SQLModel):
    id: uuid.UUID
    order_id: uuid.UUID
    product_id: uuid.UUID
    product_name: str | None = None
    quantity: int
    price: float
    line_total: float


class OrderWithItemsRead(OrderRead):
    """
    Full order view including items.
    """

    items: list[OrderItemRead]


class OrderStatusUpdate(SQLModel):
    """
    Admin payload to change order status.
    """

    model_config = ConfigDict(extra="forbid")

    status: OrderStatus
