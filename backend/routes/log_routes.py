from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict
from sqlalchemy.orm import Session

from database import get_db
from services.log_service import LogService

router = APIRouter(prefix="/api/v1/logs", tags=["Logs"])

class DailyLogOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: str
    habits: dict[str, bool]
    mood: str
    note: str = ""
    reflection: str = ""

@router.get("", response_model=list[DailyLogOut])
async def list_logs(db: Session = Depends(get_db)):
    return LogService.get_all(db)

@router.get("/{date}", response_model=DailyLogOut)
async def get_log(date: str, db: Session = Depends(get_db)):
    log = LogService.get_by_date(db, date)
    if not log:
        raise HTTPException(status_code=404, detail="Log not found")
    return log

@router.delete("/{date}")
async def delete_log(date: str, db: Session = Depends(get_db)):
    if not LogService.delete_by_date(db, date):
        raise HTTPException(status_code=404, detail="Log not found")
    return {"status": "success"}
