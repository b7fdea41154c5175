from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from config import TREND_WINDOW_DAYS
from daykeys import local_today
from database import get_db
from services.habit_service import HabitService
from services.log_service import LogService
from services.trend_engine import Analytics, TrendEngine

router = APIRouter(prefix="/api/v1/trends", tags=["Trends"])

@router.get("", response_model=Analytics)
async def get_trends(
    window_days: int = Query(TREND_WINDOW_DAYS, ge=0, le=366),
    reference_date: Optional[date] = None,
    db: Session = Depends(get_db),
):
    """Recomputed from a fresh snapshot on every request."""
    habits = HabitService.get_all(db)
    logs = LogService.get_all(db)
    return TrendEngine.recompute(habits, logs, reference_date or local_today(), window_days)
