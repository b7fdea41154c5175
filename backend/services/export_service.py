"""
export_service.py — JSON data export
Dumps every habit and daily log into a pretty-printed JSON file so the user
can take their history elsewhere.
"""

import json
import logging
import os
from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from sqlalchemy.orm import Session

from config import EXPORT_DIR
from models.daily_log import DailyLog
from models.habit import Habit

logger = logging.getLogger(__name__)


class _ExportModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ExportableHabit(_ExportModel):
    name: str
    habit_description: str | None = None
    creation_date: datetime


class ExportableDailyLog(_ExportModel):
    date: str
    habits: dict[str, bool]
    mood: str
    note: str
    reflection: str


class ExportData(_ExportModel):
    export_date: datetime
    habits: list[ExportableHabit]
    logs: list[ExportableDailyLog]


class ExportService:
    @staticmethod
    def build(db: Session, now: datetime | None = None) -> ExportData:
        logs = db.query(DailyLog).order_by(DailyLog.date.asc()).all()
        habits = db.query(Habit).order_by(Habit.creation_date.asc()).all()
        return ExportData(
            export_date=now or datetime.now().astimezone(),
            habits=[
                ExportableHabit(name=h.name, habit_description=h.description, creation_date=h.creation_date)
                for h in habits
            ],
            logs=[
                ExportableDailyLog(
                    date=l.date,
                    habits=l.habits or {},
                    mood=l.mood,
                    note=l.note or "",
                    reflection=l.reflection or "",
                )
                for l in logs
            ],
        )

    @staticmethod
    def export_to_json(db: Session, export_dir: str | None = None, now: datetime | None = None) -> str:
        """Write the export file and return its path. I/O errors propagate to the caller."""
        now = now or datetime.now().astimezone()
        data = ExportService.build(db, now)
        payload = json.dumps(data.model_dump(mode="json", by_alias=True), indent=2, sort_keys=True, ensure_ascii=False)

        export_dir = export_dir or EXPORT_DIR
        os.makedirs(export_dir, exist_ok=True)
        path = os.path.join(export_dir, f"protocol_export_{now.date().isoformat()}.json")

        # Atomic write: temp file, then rename
        tmp_path = path + ".tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            f.write(payload)
        os.replace(tmp_path, path)

        logger.info(f"Export successful. File saved to: {path}")
        return path
