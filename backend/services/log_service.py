"""
log_service.py — Daily log history
Read and delete access to the one-per-day DailyLog records.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.daily_log import DailyLog

logger = logging.getLogger(__name__)


class LogService:
    @staticmethod
    def get_all(db: Session) -> list[DailyLog]:
        """All logs, newest first."""
        return db.query(DailyLog).order_by(DailyLog.date.desc()).all()

    @staticmethod
    def get_by_date(db: Session, date_key: str) -> DailyLog | None:
        return db.query(DailyLog).filter_by(date=date_key).first()

    @staticmethod
    def delete_by_date(db: Session, date_key: str) -> bool:
        try:
            log = db.query(DailyLog).filter_by(date=date_key).first()
            if log:
                db.delete(log)
                db.commit()
                logger.info(f"Deleted log for {date_key}")
                return True
            return False
        except SQLAlchemyError as e:
            logger.error(f"Error deleting log for {date_key}: {e}")
            db.rollback()
            return False
