from sqlalchemy import Column, Integer, String, Text, JSON
from database import Base


class DailyLog(Base):
    __tablename__ = "daily_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    date = Column(String(10), unique=True, nullable=False)  # YYYY-MM-DD, local calendar
    habits = Column(JSON, nullable=False, default=dict)  # habit name -> completed
    mood = Column(String(16), nullable=False)
    note = Column(Text, nullable=False, default="")
    reflection = Column(Text, nullable=False, default="")
