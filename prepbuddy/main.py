"""
FastAPI app entrypoint.

AI assistant relay, notifications, tracker, quiz arena, mock interviews and profile.
"""
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from apscheduler.schedulers.background import BackgroundScheduler
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load .env from the project root before any app code
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

from prepbuddy.api.routes import assistant, interview, notifications, profile, quiz, tracker
from prepbuddy.config import settings
from prepbuddy.core.constants import DAILY_REMINDER_JOB_ID
from prepbuddy.scheduler.reminder_job import run_daily_reminder_job

logger = logging.getLogger(__name__)

# Scheduler: daily reminder emails at settings.daily_reminder_hour
_scheduler = BackgroundScheduler()


@asynccontextmanager
async def lifespan(app: FastAPI):
    _scheduler.add_job(
        run_daily_reminder_job,
        "cron",
        hour=settings.daily_reminder_hour,
        minute=0,
        id=DAILY_REMINDER_JOB_ID,
        replace_existing=True,
    )
    _scheduler.start()
    app.state.scheduler = _scheduler
    logger.info("PrepBuddy API ready; daily reminders at %02d:00", settings.daily_reminder_hour)
    yield
    _scheduler.shutdown(wait=False)


app = FastAPI(title="PrepBuddy", version="0.1.0", lifespan=lifespan)

# CORS: dev origins + optional CORS_ORIGINS env (comma-separated) for the production frontend
_cors_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:4173",
    "http://127.0.0.1:4173",
]
if settings.cors_origins:
    _cors_origins.extend(o.strip() for o in settings.cors_origins.split(",") if o.strip())
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(assistant.router, prefix="/functions/ai-assistant", tags=["assistant"])
app.include_router(interview.router, prefix="/functions/ai-interview", tags=["interview"])
app.include_router(notifications.router, prefix="/functions/notifications", tags=["notifications"])
app.include_router(tracker.router, prefix="/tracker", tags=["tracker"])
app.include_router(quiz.router, prefix="/quiz", tags=["quiz"])
app.include_router(profile.router, prefix="/profile", tags=["profile"])


@app.get("/", include_in_schema=False)
def root():
    return {"message": "PrepBuddy API", "docs": "/docs", "health": "/health"}


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
