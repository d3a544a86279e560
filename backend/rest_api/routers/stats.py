"""
Sales stats router for the back office dashboard.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.infrastructure.db import get_db
from shared.utils.schemas import SalesStats
from rest_api.services.domain import StatsService


router = APIRouter(prefix="/api", tags=["stats"])


@router.get("/stats", response_model=SalesStats)
def sales_stats(db: Session = Depends(get_db)) -> SalesStats:
    """Sales today, last 7 days, last 30 days and a per-day series."""
    return StatsService(db).get_sales_stats()
