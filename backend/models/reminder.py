from datetime import datetime

from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, ForeignKey
from database import Base


class Reminder(Base):
    __tablename__ = "reminders"

    id = Column(Integer, primary_key=True, autoincrement=True)
    identifier = Column(String(100), unique=True, nullable=False)  # generalDailyReminder / habit-<id>
    habit_id = Column(Integer, ForeignKey("habits.id", ondelete="CASCADE"), nullable=True)
    title = Column(String(300), nullable=False)
    body = Column(Text, nullable=False)
    hour = Column(Integer, nullable=False)
    minute = Column(Integer, nullable=False)
    repeats = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.now)
