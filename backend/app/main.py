import logging
import os
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings

# ─── Logging setup (file + console) ───
_LOG_DIR = Path(__file__).resolve().parent.parent / "logs"
_LOG_DIR.mkdir(exist_ok=True)

_log_level = getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)

logging.basicConfig(
    level=_log_level,
    format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    handlers=[
        logging.StreamHandler(),
        RotatingFileHandler(
            _LOG_DIR / "withme.log",
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding="utf-8",
        ),
    ],
)

# Quiet noisy libraries
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

from app.database import async_session_factory
from app.routers import (
    activities,
    auth,
    budget,
    cities,
    comments,
    export,
    feedback,
    forms,
    group_ideas,
    groups,
    invitations,
    itinerary,
    likes,
    members,
    notes,
    notifications,
    polls,
    profiles,
    tasks,
    templates,
    trips,
)
from app.services.cache_service import cache_service
from app.services.invitation_service import invitation_service
from app.services.poll_service import poll_service
from app.services.rate_limiter import rate_limiter

logger = logging.getLogger(__name__)


async def _expire_invitations():
    async with async_session_factory() as db:
        count = await invitation_service.expire_stale_invitations(db)
        if count:
            logger.info(f"Invitations: {count} expired")


async def _close_polls():
    async with async_session_factory() as db:
        count = await poll_service.close_expired_polls(db)
        if count:
            logger.info(f"Polls: {count} closed")


async def _sweep_rate_limits():
    removed = rate_limiter.sweep()
    if removed:
        logger.debug(f"Rate limiter: {removed} expired windows removed")


def build_scheduler() -> AsyncIOScheduler:
    scheduler = AsyncIOScheduler()
    scheduler.add_job(_expire_invitations, IntervalTrigger(hours=1), id="expire_invitations")
    scheduler.add_job(_close_polls, IntervalTrigger(minutes=15), id="close_polls")
    scheduler.add_job(
        _sweep_rate_limits,
        IntervalTrigger(seconds=settings.rate_limit_sweep_seconds),
        id="sweep_rate_limits",
    )
    return scheduler


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: background scheduler
    scheduler = None
    if settings.scheduler_enabled:
        try:
            scheduler = build_scheduler()
            scheduler.start()
            logger.info("Background scheduler started")
        except Exception as e:
            logger.error(f"Scheduler failed to start: {e}")
            scheduler = None

    # Demo data for local development
    if settings.seed_on_startup:
        try:
            from app.seed import seed
            await seed()
        except Exception as e:
            logger.warning(f"Auto-seed skipped: {e}")

    yield

    # Shutdown
    if scheduler:
        scheduler.shutdown(wait=False)
        logger.info("Background scheduler stopped")
    await cache_service.close()


app = FastAPI(
    title="withme.travel",
    description="Collaborative trip planning API",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(profiles.router, prefix="/api/profiles", tags=["profiles"])
app.include_router(trips.router, prefix="/api/trips", tags=["trips"])
app.include_router(members.router, prefix="/api/trips", tags=["members"])
app.include_router(itinerary.router, prefix="/api/trips", tags=["itinerary"])
app.include_router(polls.router, prefix="/api/trips", tags=["polls"])
app.include_router(budget.router, prefix="/api/trips", tags=["budget"])
app.include_router(export.router, prefix="/api/trips", tags=["export"])
app.include_router(activities.router, prefix="/api/trips", tags=["activities"])
app.include_router(cities.router, prefix="/api/trips", tags=["cities"])
app.include_router(tasks.router, prefix="/api/trips", tags=["tasks"])
app.include_router(notes.router, prefix="/api/trips", tags=["notes"])
app.include_router(templates.router, prefix="/api", tags=["templates"])
app.include_router(groups.router, prefix="/api/groups", tags=["groups"])
app.include_router(group_ideas.router, prefix="/api/groups", tags=["group-ideas"])
app.include_router(invitations.router, prefix="/api", tags=["invitations"])
app.include_router(forms.router, prefix="/api", tags=["forms"])
app.include_router(likes.router, prefix="/api/likes", tags=["likes"])
app.include_router(comments.router, prefix="/api/comments", tags=["comments"])
app.include_router(feedback.router, prefix="/api/feedback", tags=["feedback"])
app.include_router(notifications.router, prefix="/api/notifications", tags=["notifications"])


@app.get("/api/health")
async def health_check():
    return {"status": "ok", "service": "withme"}
