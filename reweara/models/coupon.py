# reweara/models/coupon.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class Coupon(SQLModel, table=True):
    """
    Discount code redeemable at checkout.

    discount_type:
      - "percentage": discount_value is a percent of the subtotal,
                      optionally capped by max_discount_amount
      - "fixed":      discount_value is an absolute amount
    """

    __tablename__ = "coupons"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True, index=True)

    code: str = Field(
        max_length=50,
        unique=True,
        index=True,
        description="Stored upper-cased",
    )

    description: str | None = None

    discount_type: str = Field(description="percentage | fixed")
    discount_value: float = Field(gt=0)

    min_purchase_amount: float | None = None
    max_discount_amount: float | None = None

    usage_limit: int | None = None
    usage_count: int = Field(default=0, ge=0)

    start_date: datetime | None = None
    end_date: datetime | None = None

    is_active: bool = Field(default=True)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
