# reweara/schemas/stats.py
import uuid
from datetime import date, datetime

from pydantic import ConfigDict
from sqlmodel import SQLModel

from reweara.schemas.order import OrderStatus


class DailySales(SQLModel):
    model_config = ConfigDict(extra="forbid")

    date: date
    total_revenue: float
    order_count: int


class TopProduct(SQLModel):
    """
    Units sold and revenue per product, at the prices paid.
    """
    model_config = ConfigDict(extra="forbid")

    product_id: uuid.UUID
    name: str
    total_quantity: int
    total_revenue: float


class LatestOrderSummary(SQLModel):
    model_config = ConfigDict(extra="forbid")

    id: uuid.UUID
    created_at: datetime
    user_id: uuid.UUID | None
    receiver_name: str | None
    total_amount: float
    status: OrderStatus


class AdminDashboardStats(SQLModel):
    """
    Payload for the admin dashboard cards, chart and tables.
    """
    model_config = ConfigDict(extra="forbid")

    total_revenue: float
    total_orders: int
    active_products: int
    total_customers: int
    daily_sales: list[DailySales]
    top_products: list[TopProduct]
    latest_orders: list[LatestOrderSummary]
