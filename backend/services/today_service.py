"""
today_service.py — Today's entry
Loads and saves the single DailyLog of the current local day. The first save
creates the log; later saves that day update it in place. Only statuses for
habits that currently exist are kept.
"""

import logging
from datetime import date

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from config import DEFAULT_MOOD, MOOD_CHOICES
from daykeys import day_key, local_today
from models.daily_log import DailyLog
from services.log_service import LogService

logger = logging.getLogger(__name__)


class TodayEntry(BaseModel):
    date: str
    habits: dict[str, bool]
    mood: str = DEFAULT_MOOD
    note: str = ""
    reflection: str = ""
    saved: bool = False


class TodayService:
    @staticmethod
    def load(db: Session, habits, today: date | None = None) -> TodayEntry:
        key = day_key(today or local_today())
        statuses = {h.name: False for h in habits}
        log = LogService.get_by_date(db, key)
        if not log:
            return TodayEntry(date=key, habits=statuses)

        for name, status in (log.habits or {}).items():
            if name in statuses:
                statuses[name] = status is True
            else:
                logger.debug(f"Skipping '{name}' (no longer defined)")
        return TodayEntry(
            date=key,
            habits=statuses,
            mood=log.mood,
            note=log.note or "",
            reflection=log.reflection or "",
            saved=True,
        )

    @staticmethod
    def save(db: Session, habits, data: dict, today: date | None = None) -> DailyLog | None:
        """Upsert today's log. Fields missing from `data` keep their current value."""
        try:
            entry = TodayService.load(db, habits, today)
            # A mood stored under an earlier mood set is carried over as-is
            mood = data.get("mood", entry.mood)
            if "mood" in data and mood not in MOOD_CHOICES:
                logger.warning(f"Unknown mood {mood!r}")
                return None

            statuses = dict(entry.habits)
            for name, status in (data.get("habits") or {}).items():
                if name in statuses:
                    statuses[name] = bool(status)
                else:
                    logger.debug(f"Ignoring status for unknown habit '{name}'")

            log = LogService.get_by_date(db, entry.date)
            if not log:
                logger.info(f"Creating log for {entry.date}")
                log = DailyLog(date=entry.date)
                db.add(log)
            # Reassign so the JSON column registers the change
            log.habits = statuses
            log.mood = mood
            log.note = data.get("note", entry.note)
            log.reflection = data.get("reflection", entry.reflection)
            db.commit()
            db.refresh(log)
            return log
        except SQLAlchemyError as e:
            logger.error(f"Error saving daily log: {e}")
            db.rollback()
            return None

    @staticmethod
    def toggle(db: Session, habits, name: str, today: date | None = None) -> DailyLog | None:
        entry = TodayService.load(db, habits, today)
        if name not in entry.habits:
            return None
        return TodayService.save(db, habits, {"habits": {name: not entry.habits[name]}}, today)

    @staticmethod
    def delete(db: Session, today: date | None = None) -> bool:
        return LogService.delete_by_date(db, day_key(today or local_today()))
