import logging
import os

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from database import get_db
from services.export_service import ExportService
from services.notification_service import NotificationService
from services.retention_service import DataRetentionPeriod, RetentionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/settings", tags=["Settings"])

class RetentionUpdate(BaseModel):
    period: DataRetentionPeriod

class ReminderTime(BaseModel):
    hour: int = Field(ge=0, le=23)
    minute: int = Field(ge=0, le=59)

class ReminderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    identifier: str
    habit_id: int | None = None
    title: str
    body: str
    hour: int
    minute: int
    repeats: bool = True

# --- Data retention ---

@router.get("/retention")
async def get_retention(db: Session = Depends(get_db)):
    period = RetentionService.get_period(db)
    cutoff = period.cutoff_date()
    return {
        "period": period.value,
        "cutoff_date": cutoff.isoformat() if cutoff else None,
        "choices": [p.value for p in DataRetentionPeriod],
    }

@router.put("/retention")
async def set_retention(data: RetentionUpdate, db: Session = Depends(get_db)):
    if not RetentionService.set_period(db, data.period):
        raise HTTPException(status_code=500, detail="Failed to save retention period")
    return {"status": "success", "period": data.period.value}

@router.post("/retention/run")
async def run_retention(db: Session = Depends(get_db)):
    deleted = RetentionService.perform_cleanup(db)
    return {"status": "success", "deleted": deleted}

# --- Reminders ---

@router.get("/reminder", response_model=ReminderOut | None)
async def get_reminder(db: Session = Depends(get_db)):
    return NotificationService.get_general_daily_reminder(db)

@router.put("/reminder", response_model=ReminderOut)
async def set_reminder(data: ReminderTime, db: Session = Depends(get_db)):
    r = NotificationService.schedule_general_daily_reminder(db, data.hour, data.minute)
    if r is None:
        raise HTTPException(status_code=500, detail="Failed to schedule reminder")
    return r

@router.delete("/reminder")
async def cancel_reminder(db: Session = Depends(get_db)):
    NotificationService.cancel_general_daily_reminder(db)
    return {"status": "success"}

@router.get("/reminders", response_model=list[ReminderOut])
async def list_reminders(db: Session = Depends(get_db)):
    return NotificationService.get_all(db)

# --- Export ---

@router.post("/export")
async def export_data(db: Session = Depends(get_db)):
    try:
        path = ExportService.export_to_json(db)
    except OSError as e:
        logger.error(f"Export failed: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to export data: {e}")
    return FileResponse(path, media_type="application/json", filename=os.path.basename(path))
