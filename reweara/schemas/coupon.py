# reweara/schemas/coupon.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

DiscountType = Literal["percentage", "fixed"]


class CouponCreate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    code: str = Field(max_length=50)
    description: str | None = None
    discount_type: DiscountType
    discount_value: float = Field(gt=0)
    min_purchase_amount: float | None = Field(default=None, ge=0)
    max_discount_amount: float | None = Field(default=None, gt=0)
    usage_limit: int | None = Field(default=None, gt=0)
    start_date: datetime | None = None
    end_date: datetime | None = None
    is_active: bool = True

    @field_validator("code")
    @classmethod
    def normalize_code(cls, v: str) -> str:
        v = v.strip().upper()
        if not v:
            raise ValueError("code cannot be empty")
        return v


class CouponUpdate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    description: str | None = None
    discount_value: float | None = Field(default=None, gt=0)
    min_purchase_amount: float | None = Field(default=None, ge=0)
    max_discount_amount: float | None = Field(default=None, gt=0)
    usage_limit: int | None = Field(default=None, gt=0)
    start_date: datetime | None = None
    end_date: datetime | None = None
    is_active: bool | None = None


class CouponRead(SQLModel):
    id: uuid.UUID
    code: str
    description: str | None = None
    discount_type: DiscountType
    discount_value: float
    min_purchase_amount: float | None = None
    max_discount_amount: float | None = None
    usage_limit: int | None = None
    usage_count: int
    start_date: datetime | None = None
    end_date: datetime | None = None
    is_active: bool


class CouponValidateRequest(SQLModel):
    code: str
    subtotal: float = Field(ge=0)


class CouponValidation(SQLModel):
    code: str
    discount_type: DiscountType
    discount_amount: float
