import os
import sys
import logging
from contextlib import asynccontextmanager

# Ensure this directory is in the path when launched from elsewhere
current_dir = os.path.dirname(os.path.abspath(__file__))
if current_dir not in sys.path:
    sys.path.append(current_dir)

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import RUN_RETENTION_ON_STARTUP
from database import SessionLocal, init_db
from routes.habit_routes import router as habit_router
from routes.today_routes import router as today_router
from routes.log_routes import router as log_router
from routes.trend_routes import router as trend_router
from routes.settings_routes import router as settings_router
from services.retention_service import RetentionService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    if RUN_RETENTION_ON_STARTUP:
        logger.info("Triggering data retention check...")
        db = SessionLocal()
        try:
            RetentionService.perform_cleanup(db)
        finally:
            db.close()
    yield


app = FastAPI(title="Protocol Habit Tracker", lifespan=lifespan)

@app.get("/api/v1/health-check")
async def health():
    return {"status": "ok", "message": "Backend is alive!"}

# Local clients only; the app serves a single user
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(habit_router)
app.include_router(today_router)
app.include_router(log_router)
app.include_router(trend_router)
app.include_router(settings_router)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="127.0.0.1", port=8000, reload=True)
