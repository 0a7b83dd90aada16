# reweara/services/stats_service.py
from datetime import date, datetime, timezone

from fastapi import HTTPException, status
from sqlmodel import Session

from reweara.core.clock import utcnow
from reweara.repositories.stats_repo import StatsRepository
from reweara.schemas.stats import (
    AdminDashboardStats,
    DailySales,
    LatestOrderSummary,
    TopProduct,
)


def month_bounds(year: int, month: int) -> tuple[datetime, datetime]:
    start = datetime(year, month, 1, tzinfo=timezone.utc)
    if month == 12:
        end = datetime(year + 1, 1, 1, tzinfo=timezone.utc)
    else:
        end = datetime(year, month + 1, 1, tzinfo=timezone.utc)
    return start, end


class StatsService:
    """
    Orchestrates the aggregated admin dashboard statistics.
    """

    def __init__(self, repo: StatsRepository):
        self.repo = repo

    def get_admin_dashboard_stats(
        self,
        session: Session,
        year: int | None = None,
        month: int | None = None,
        top_n_products: int = 5,
        latest_n_orders: int = 5,
    ) -> AdminDashboardStats:
        # Default to the current month
        today = utcnow().date()
        if year is None:
            year = today.year
        if month is None:
            month = today.month

        if not 1 <= month <= 12:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="month must be between 1 and 12",
            )

        start, end = month_bounds(year, month)
        daily_sales = [
            DailySales(
                # SQLite answers date() with an ISO string, Postgres with a date
                date=day if isinstance(day, date) else date.fromisoformat(str(day)),
                total_revenue=float(revenue or 0.0),
                order_count=int(order_count or 0),
            )
            for day, revenue, order_count in self.repo.daily_sales(session, start, end)
        ]

        top_products = [
            TopProduct(
                product_id=product_id,
                name=name,
                total_quantity=int(total_quantity or 0),
                total_revenue=float(product_revenue or 0.0),
            )
            for product_id, name, total_quantity, product_revenue in self.repo.top_products(
                session, limit=top_n_products
            )
        ]

        latest_orders = [
            LatestOrderSummary(
                id=o.id,
                created_at=o.created_at,
                user_id=o.user_id,
                receiver_name=(o.shipping_address or {}).get("full_name"),
                total_amount=o.total_amount,
                status=o.status,
            )
            for o in self.repo.latest_orders(session, limit=latest_n_orders)
        ]

        return AdminDashboardStats(
            total_revenue=self.repo.total_revenue(session),
            total_orders=self.repo.count_orders(session),
            active_products=self.repo.count_active_products(session),
            total_customers=self.repo.count_customers(session),
            daily_sales=daily_sales,
            top_products=top_products,
            latest_orders=latest_orders,
        )
