"""
notification_service.py — Daily Reminders
Persists local reminder requests: one general daily nudge plus an optional
reminder per habit. Rescheduling an identifier replaces the previous request.
"""

import logging
import re
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from config import REMINDER_TITLE, REMINDER_BODY
from models.reminder import Reminder

logger = logging.getLogger(__name__)

GENERAL_REMINDER_ID = "generalDailyReminder"

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


def parse_reminder_time(value) -> tuple[int, int] | None:
    """Parse "HH:MM" into (hour, minute); None if malformed or out of range."""
    if not isinstance(value, str):
        return None
    match = _TIME_RE.match(value.strip())
    if not match:
        return None
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        return None
    return hour, minute


def habit_reminder_id(habit_id: int) -> str:
    return f"habit-{habit_id}"


class NotificationService:
    @staticmethod
    def _upsert(db: Session, identifier: str, **fields) -> Reminder | None:
        try:
            r = db.query(Reminder).filter_by(identifier=identifier).first()
            if not r:
                r = Reminder(identifier=identifier)
                db.add(r)
            for k, v in fields.items():
                setattr(r, k, v)
            db.commit()
            db.refresh(r)
            logger.info(f"Scheduled reminder '{identifier}' at {r.hour:02d}:{r.minute:02d}")
            return r
        except SQLAlchemyError as e:
            logger.error(f"Error scheduling reminder '{identifier}': {e}")
            db.rollback()
            return None

    @staticmethod
    def _cancel(db: Session, identifier: str) -> bool:
        try:
            removed = db.query(Reminder).filter_by(identifier=identifier).delete(synchronize_session=False)
            db.commit()
            return removed > 0
        except SQLAlchemyError as e:
            logger.error(f"Error cancelling reminder '{identifier}': {e}")
            db.rollback()
            return False

    # ------------------------------------------------------------------
    @staticmethod
    def schedule_general_daily_reminder(db: Session, hour: int, minute: int) -> Reminder | None:
        return NotificationService._upsert(
            db, GENERAL_REMINDER_ID,
            habit_id=None, title=REMINDER_TITLE, body=REMINDER_BODY,
            hour=hour, minute=minute, repeats=True,
        )

    @staticmethod
    def cancel_general_daily_reminder(db: Session) -> bool:
        return NotificationService._cancel(db, GENERAL_REMINDER_ID)

    @staticmethod
    def get_general_daily_reminder(db: Session) -> Reminder | None:
        return db.query(Reminder).filter_by(identifier=GENERAL_REMINDER_ID).first()

    @staticmethod
    def schedule_habit_reminder(db: Session, habit) -> Reminder | None:
        parsed = parse_reminder_time(habit.reminder_time)
        if parsed is None:
            logger.warning(f"Habit '{habit.name}' has no valid reminder time")
            return None
        hour, minute = parsed
        return NotificationService._upsert(
            db, habit_reminder_id(habit.id),
            habit_id=habit.id, title=f"Habit Reminder: {habit.name}",
            body=f"Time for '{habit.name}'", hour=hour, minute=minute, repeats=True,
        )

    @staticmethod
    def cancel_habit_reminder(db: Session, habit_id: int) -> bool:
        return NotificationService._cancel(db, habit_reminder_id(habit_id))

    @staticmethod
    def sync_habit_reminder(db: Session, habit) -> Reminder | None:
        """Match the stored reminder to the habit's reminder settings."""
        if habit.reminder_enabled and habit.reminder_time:
            return NotificationService.schedule_habit_reminder(db, habit)
        NotificationService.cancel_habit_reminder(db, habit.id)
        return None

    @staticmethod
    def get_all(db: Session) -> list[Reminder]:
        return db.query(Reminder).order_by(Reminder.hour.asc(), Reminder.minute.asc()).all()

    @staticmethod
    def due(db: Session, now: datetime | None = None) -> list[Reminder]:
        """Reminders that fire at the given local minute."""
        now = now or datetime.now()
        return db.query(Reminder).filter_by(hour=now.hour, minute=now.minute).all()
