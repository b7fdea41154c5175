from datetime import datetime

from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean
from database import Base


class Habit(Base):
    __tablename__ = "habits"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), unique=True, nullable=False)  # also the key into DailyLog.habits
    description = Column(Text, nullable=True)
    creation_date = Column(DateTime, nullable=False, default=datetime.now)  # local wall clock
    reminder_enabled = Column(Boolean, default=False)
    reminder_time = Column(String(5), nullable=True)  # e.g., "08:00"
