# reweara/routers/admin_stats.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from reweara.core.auth import require_admin
from reweara.database import get_session
from reweara.repositories.stats_repo import StatsRepository
from reweara.schemas.stats import AdminDashboardStats
from reweara.services.stats_service import StatsService

router = APIRouter(prefix="/admin/stats", tags=["Admin Stats"])

repo = StatsRepository()
service = StatsService(repo)


@router.get(
    "",
    response_model=AdminDashboardStats,
    dependencies=[Depends(require_admin)],
)
def get_admin_dashboard_stats(
    year: int | None = None,
    month: int | None = None,
    session: Session = Depends(get_session),
):
    """
    Revenue, order, product and customer totals, plus daily sales for one
    month (the current one by default), the best sellers and the latest
    orders.
    """
    return service.get_admin_dashboard_stats(session=session, year=year, month=month)
