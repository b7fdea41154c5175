# Import all models so they register with SQLAlchemy Base.metadata
# This ensures Base.metadata.create_all() creates all tables

from models.habit import Habit
from models.daily_log import DailyLog
from models.reminder import Reminder
from models.app_setting import AppSetting

__all__ = [
    "Habit",
    "DailyLog",
    "Reminder",
    "AppSetting",
]
