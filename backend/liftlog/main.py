# liftlog/main.py
import time
import logging
import uuid
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from liftlog.routers.catalog import router as catalog_router
from liftlog.routers.plans import router as plans_router
from liftlog.routers.session import router as session_router
from liftlog.routers.workouts import router as workouts_router
from liftlog.routers.stats import router as stats_router
from liftlog.routers.measurements import router as measurements_router
from liftlog.db import SessionLocal  # for healthz DB check
from liftlog.errors import LiftLogError
from liftlog.services.catalog import default_catalog
from liftlog.services.reconciler import FinishReconciler
from liftlog.services.registry import SessionRegistry
from liftlog.settings import get_settings

log = logging.getLogger("uvicorn")

app = FastAPI(
    title="LiftLog API",
    openapi_tags=[
        {"name": "catalog", "description": "Exercise catalog lookups"},
        {"name": "plans", "description": "Generated training programs"},
        {"name": "session", "description": "The in-progress workout"},
        {"name": "workouts", "description": "Finished workouts"},
        {"name": "stats", "description": "Points, streaks, monthly goals, weekly comparison"},
        {"name": "measurements", "description": "Body weight log"},
    ],
)

settings = get_settings()
app.state.catalog = default_catalog
app.state.reconciler = FinishReconciler(SessionLocal, points_per_workout=settings.POINTS_PER_WORKOUT)
app.state.sessions = SessionRegistry(
    SessionLocal, app.state.reconciler, default_label=settings.DEFAULT_SESSION_LABEL
)


# CORS (relax for local dev; tighten origins in prod via env)
ALLOW_ORIGINS = settings.ALLOW_ORIGINS.split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOW_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.middleware("http")
async def add_request_id_and_log(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000
    response.headers["X-Request-ID"] = req_id
    log.info("rid=%s %s %s -> %s in %.1fms",
             req_id, request.method, request.url.path, response.status_code, duration_ms)
    return response

@app.exception_handler(LiftLogError)
async def liftlog_error_handler(request: Request, exc: LiftLogError):
    if exc.status_code >= 500:
        log.warning("%s %s failed: %s", request.method, request.url.path, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

@app.get("/")
def root():
    return {"ok": True, "name": "LiftLog API"}

@app.get("/ping")
def ping():
    return {"pong": True}

@app.get("/healthz")
def healthz():
    # Quick DB sanity check
    try:
        with SessionLocal() as db:
            db.execute(text("SELECT 1"))
        return {"status": "ok"}
    except Exception as e:
        return {"status": "degraded", "error": str(e)}

@app.get("/version")
def version():
    return {"version": settings.API_VERSION}

# Routers
app.include_router(catalog_router)
app.include_router(plans_router)
app.include_router(session_router)
app.include_router(workouts_router)
app.include_router(stats_router)
app.include_router(measurements_router)
