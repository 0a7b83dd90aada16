# reweara/repositories/stats_repo.py
from datetime import datetime

from sqlalchemy import func
from sqlmodel import Session, select

from reweara.models.catalog import Product
from reweara.models.order import Order, OrderItem
from reweara.models.user import User

# Cancelled orders never count towards revenue or sales
EXCLUDED_STATUS = "cancelled"


class StatsRepository:
    """
    Read-only aggregates for the admin dashboard.

    Only portable SQL functions are used so the same queries run on
    Postgres and on the SQLite test database.
    """

    def count_customers(self, session: Session) -> int:
        stmt = select(func.count()).select_from(User).where(User.role == "user")
        return int(session.exec(stmt).one() or 0)

    def count_orders(self, session: Session) -> int:
        stmt = select(func.count()).select_from(Order)
        return int(session.exec(stmt).one() or 0)

    def count_active_products(self, session: Session) -> int:
        stmt = select(func.count()).select_from(Product).where(Product.is_active == True)  # noqa: E712
        return int(session.exec(stmt).one() or 0)

    def total_revenue(self, session: Session) -> float:
        stmt = (
            select(func.coalesce(func.sum(Order.total_amount), 0.0))
            .where(Order.status != EXCLUDED_STATUS)
        )
        return float(session.exec(stmt).one() or 0.0)

    def daily_sales(self, session: Session, start: datetime, end: datetime) -> list[tuple]:
        """
        Revenue and order count per calendar day in [start, end).
        """
        day_expr = func.date(Order.created_at)

        stmt = (
            select(
                day_expr.label("day"),
                func.coalesce(func.sum(Order.total_amount), 0.0).label("revenue"),
                func.count(Order.id).label("order_count"),
            )
            .where(
                Order.status != EXCLUDED_STATUS,
                Order.created_at >= start,
                Order.created_at < end,
            )
            .group_by(day_expr)
            .order_by(day_expr)
        )
        return list(session.exec(stmt).all())

    def top_products(self, session: Session, limit: int = 5) -> list[tuple]:
        qty_sum = func.coalesce(func.sum(OrderItem.quantity), 0)
        revenue_sum = func.coalesce(func.sum(OrderItem.quantity * OrderItem.price), 0.0)

        stmt = (
            select(
                OrderItem.product_id,
                Product.name,
                qty_sum.label("total_quantity"),
                revenue_sum.label("total_revenue"),
            )
            .join(Order, Order.id == OrderItem.order_id)
            .join(Product, Product.id == OrderItem.product_id)
            .where(Order.status != EXCLUDED_STATUS)
            .group_by(OrderItem.product_id, Product.name)
            .order_by(qty_sum.desc())
            .limit(limit)
        )
        return list(session.exec(stmt).all())

    def latest_orders(self, session: Session, limit: int = 5) -> list[Order]:
        stmt = select(Order).order_by(Order.created_at.desc()).limit(limit)
        return list(session.exec(stmt).all())
