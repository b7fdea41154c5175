"""
settings_service.py — App preferences
Small key/value store for user preferences such as the data-retention policy.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.app_setting import AppSetting

logger = logging.getLogger(__name__)


class SettingsService:
    @staticmethod
    def get(db: Session, key: str, default: str | None = None) -> str | None:
        row = db.query(AppSetting).filter_by(key=key).first()
        return row.value if row and row.value is not None else default

    @staticmethod
    def set(db: Session, key: str, value: str | None) -> bool:
        try:
            row = db.query(AppSetting).filter_by(key=key).first()
            if not row:
                row = AppSetting(key=key)
                db.add(row)
            row.value = value
            db.commit()
            return True
        except SQLAlchemyError as e:
            logger.error(f"Error saving setting '{key}': {e}")
            db.rollback()
            return False
