from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field, field_validator
from sqlalchemy.orm import Session

from database import get_db
from services.habit_service import HabitService

router = APIRouter(prefix="/api/v1/habits", tags=["Habits"])

class HabitCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    reminder_enabled: Optional[bool] = False
    reminder_time: Optional[str] = None

class HabitUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    reminder_enabled: Optional[bool] = None
    reminder_time: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_null(cls, v):
        if v is None:
            raise ValueError("name cannot be null")
        return v

class HabitOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    creation_date: datetime
    reminder_enabled: bool = False
    reminder_time: Optional[str] = None

@router.get("", response_model=list[HabitOut])
async def list_habits(db: Session = Depends(get_db)):
    return HabitService.get_all(db)

@router.post("", response_model=HabitOut, status_code=201)
async def create_habit(habit_data: HabitCreate, db: Session = Depends(get_db)):
    h = HabitService.create(db, habit_data.model_dump(exclude_unset=True))
    if h is None:
        raise HTTPException(status_code=409, detail="Habit name is taken or the habit is invalid")
    return h

@router.get("/{habit_id}", response_model=HabitOut)
async def get_habit(habit_id: int, db: Session = Depends(get_db)):
    h = HabitService.get(db, habit_id)
    if not h:
        raise HTTPException(status_code=404, detail="Habit not found")
    return h

@router.put("/{habit_id}", response_model=HabitOut)
async def update_habit(habit_id: int, habit_data: HabitUpdate, db: Session = Depends(get_db)):
    if not HabitService.get(db, habit_id):
        raise HTTPException(status_code=404, detail="Habit not found")
    h = HabitService.update(db, habit_id, habit_data.model_dump(exclude_unset=True))
    if h is None:
        raise HTTPException(status_code=409, detail="Habit name is taken or the update is invalid")
    return h

@router.delete("/{habit_id}")
async def delete_habit(habit_id: int, db: Session = Depends(get_db)):
    if not HabitService.delete(db, habit_id):
        raise HTTPException(status_code=404, detail="Habit not found")
    return {"status": "success"}
