from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from config import MOOD_CHOICES
from database import get_db
from services.habit_service import HabitService
from services.today_service import TodayEntry, TodayService

router = APIRouter(prefix="/api/v1/today", tags=["Today"])

class TodayUpdate(BaseModel):
    habits: Optional[dict[str, bool]] = None
    mood: Optional[str] = None
    note: Optional[str] = None
    reflection: Optional[str] = None

    @field_validator("mood")
    @classmethod
    def known_mood(cls, v):
        if v is not None and v not in MOOD_CHOICES:
            raise ValueError(f"mood must be one of {MOOD_CHOICES}")
        return v

@router.get("", response_model=TodayEntry)
async def get_today(db: Session = Depends(get_db)):
    return TodayService.load(db, HabitService.get_all(db))

@router.put("", response_model=TodayEntry)
async def save_today(entry_data: TodayUpdate, db: Session = Depends(get_db)):
    habits = HabitService.get_all(db)
    data = {k: v for k, v in entry_data.model_dump(exclude_unset=True).items() if v is not None}
    if TodayService.save(db, habits, data) is None:
        raise HTTPException(status_code=500, detail="Failed to save today's log")
    return TodayService.load(db, habits)

@router.post("/toggle/{habit_name}", response_model=TodayEntry)
async def toggle_habit(habit_name: str, db: Session = Depends(get_db)):
    habits = HabitService.get_all(db)
    if TodayService.toggle(db, habits, habit_name) is None:
        raise HTTPException(status_code=404, detail="Habit not found")
    return TodayService.load(db, habits)

@router.delete("")
async def delete_today(db: Session = Depends(get_db)):
    if not TodayService.delete(db):
        raise HTTPException(status_code=404, detail="No log for today")
    return {"status": "success"}

@router.get("/moods")
async def list_moods():
    return MOOD_CHOICES
