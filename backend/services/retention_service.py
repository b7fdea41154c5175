"""
retention_service.py — Data retention sweep
Deletes daily logs older than the configured retention period. Runs once at
application startup; day keys are compared as strings since `YYYY-MM-DD`
sorts chronologically.
"""

import calendar
import logging
from datetime import date
from enum import Enum

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from config import DATA_RETENTION_PERIOD
from daykeys import day_key, local_today
from models.daily_log import DailyLog
from services.settings_service import SettingsService

logger = logging.getLogger(__name__)

RETENTION_SETTING_KEY = "dataRetentionPeriod"


class DataRetentionPeriod(str, Enum):
    INDEFINITE = "Indefinite"
    THREE_MONTHS = "3 Months"
    SIX_MONTHS = "6 Months"
    TWELVE_MONTHS = "12 Months"

    @property
    def months(self) -> int | None:
        return {
            DataRetentionPeriod.THREE_MONTHS: 3,
            DataRetentionPeriod.SIX_MONTHS: 6,
            DataRetentionPeriod.TWELVE_MONTHS: 12,
        }.get(self)

    def cutoff_date(self, reference: date | None = None) -> date | None:
        """First day that is kept; None means keep everything."""
        if self.months is None:
            return None
        return subtract_months(reference or local_today(), self.months)


def subtract_months(d: date, months: int) -> date:
    """Calendar month arithmetic; the day is clamped to the target month's length."""
    total = d.year * 12 + (d.month - 1) - months
    year, month = divmod(total, 12)
    month += 1
    day = min(d.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


class RetentionService:
    @staticmethod
    def get_period(db: Session) -> DataRetentionPeriod:
        raw = SettingsService.get(db, RETENTION_SETTING_KEY, DATA_RETENTION_PERIOD)
        try:
            return DataRetentionPeriod(raw)
        except ValueError:
            logger.warning(f"Unknown retention period {raw!r}, keeping data indefinitely")
            return DataRetentionPeriod.INDEFINITE

    @staticmethod
    def set_period(db: Session, period: DataRetentionPeriod) -> bool:
        return SettingsService.set(db, RETENTION_SETTING_KEY, period.value)

    @staticmethod
    def perform_cleanup(db: Session, period: DataRetentionPeriod | None = None, today: date | None = None) -> int:
        """Delete logs dated before the cutoff. Returns the number of deleted logs."""
        period = period or RetentionService.get_period(db)
        cutoff = period.cutoff_date(today)
        if cutoff is None:
            logger.info("Data Retention: Policy is Indefinite. No cleanup needed.")
            return 0

        cutoff_key = day_key(cutoff)
        logger.info(f"Data Retention: Deleting logs before {cutoff_key}...")
        try:
            deleted = db.query(DailyLog).filter(DailyLog.date < cutoff_key).delete(synchronize_session=False)
            db.commit()
            logger.info(f"Data Retention: Cleanup removed {deleted} log(s).")
            return deleted
        except SQLAlchemyError as e:
            logger.error(f"Data Retention: Error performing cleanup: {e}")
            db.rollback()
            return 0
