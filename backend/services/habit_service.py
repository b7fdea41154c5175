"""
habit_service.py — Habit definitions
Create, edit and delete habits. Habit names double as the keys of every
daily log's completion mapping, so a rename or delete leaves older log
entries orphaned; that history is kept as-is and simply stops matching.
"""

import logging
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.habit import Habit
from services.notification_service import NotificationService, parse_reminder_time

logger = logging.getLogger(__name__)


def _clean_description(value) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


class HabitService:
    @staticmethod
    def create(db: Session, data: dict) -> Habit | None:
        try:
            name = (data.get("name") or "").strip()
            if not name:
                logger.warning("Refusing to create a habit with an empty name")
                return None
            if db.query(Habit).filter_by(name=name).first():
                logger.warning(f"Habit '{name}' already exists")
                return None

            reminder_time = data.get("reminder_time")
            if reminder_time and parse_reminder_time(reminder_time) is None:
                logger.warning(f"Invalid reminder time {reminder_time!r}")
                return None

            h = Habit(
                name=name,
                description=_clean_description(data.get("description")),
                creation_date=data.get("creation_date") or datetime.now(),
                reminder_enabled=bool(data.get("reminder_enabled", False)),
                reminder_time=reminder_time if data.get("reminder_enabled") else None,
            )
            db.add(h)
            db.commit()
            db.refresh(h)
            NotificationService.sync_habit_reminder(db, h)
            return h
        except SQLAlchemyError as e:
            logger.error(f"Failed to create habit: {e}")
            db.rollback()
            return None

    @staticmethod
    def get_all(db: Session) -> list[Habit]:
        """All habits, oldest first."""
        return db.query(Habit).order_by(Habit.creation_date.asc(), Habit.id.asc()).all()

    @staticmethod
    def get(db: Session, habit_id: int) -> Habit | None:
        return db.query(Habit).filter_by(id=habit_id).first()

    @staticmethod
    def update(db: Session, habit_id: int, data: dict) -> Habit | None:
        try:
            h = db.query(Habit).filter_by(id=habit_id).first()
            if not h: return None

            name = (data.get("name") or "").strip() if "name" in data else h.name
            if not name:
                return None
            clash = db.query(Habit).filter(Habit.name == name, Habit.id != habit_id).first()
            if clash:
                logger.warning(f"Habit '{name}' already exists")
                return None
            if data.get("reminder_time") and parse_reminder_time(data["reminder_time"]) is None:
                logger.warning(f"Invalid reminder time {data['reminder_time']!r}")
                return None

            if name != h.name:
                # Older logs keep the previous name and stop counting for this habit
                logger.info(f"Renaming habit '{h.name}' to '{name}'")
                h.name = name
            if "description" in data:
                h.description = _clean_description(data["description"])
            if "reminder_time" in data:
                h.reminder_time = data["reminder_time"]
            if "reminder_enabled" in data:
                h.reminder_enabled = bool(data["reminder_enabled"])
            if not h.reminder_enabled:
                h.reminder_time = None

            db.commit()
            db.refresh(h)
            NotificationService.sync_habit_reminder(db, h)
            return h
        except SQLAlchemyError as e:
            logger.error(f"Failed to update habit {habit_id}: {e}")
            db.rollback()
            return None

    @staticmethod
    def delete(db: Session, habit_id: int) -> bool:
        try:
            h = db.query(Habit).filter_by(id=habit_id).first()
            if h:
                NotificationService.cancel_habit_reminder(db, habit_id)
                db.delete(h)
                db.commit()
                return True
            return False
        except SQLAlchemyError as e:
            logger.error(f"Failed to delete habit {habit_id}: {e}")
            db.rollback()
            return False
