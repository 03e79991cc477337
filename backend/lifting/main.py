# lifting/main.py
import time
import logging
import uuid
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from lifting.errors import LiftingError
from lifting.settings import get_settings
from lifting.routers.users import router as users_router
from lifting.routers.exercises import router as exercises_router
from lifting.routers.plans import router as plans_router
from lifting.routers.mesocycles import router as mesocycles_router
from lifting.routers.workouts import router as workouts_router
from lifting.db import SessionLocal  # for healthz DB check

log = logging.getLogger("uvicorn")
settings = get_settings()

app = FastAPI(
    title="Lifting API",
    openapi_tags=[
        {"name": "users", "description": "Lifters"},
        {"name": "exercises", "description": "Exercise library and history"},
        {"name": "plans", "description": "Reusable workout templates"},
        {"name": "mesocycles", "description": "Training blocks"},
        {"name": "workouts", "description": "Workout and set logging"},
    ],
)


# CORS (relax for local dev; tighten origins in prod via env)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOW_ORIGINS.split(","),
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

@app.exception_handler(LiftingError)
async def lifting_error_handler(request: Request, exc: LiftingError):
    log.warning("%s %s rejected: %s (%s)", request.method, request.url.path, exc.code, exc)
    return JSONResponse(status_code=exc.status_code, content={"detail": str(exc), "code": exc.code})

@app.get("/")
def root():
    return {"ok": True, "name": "Lifting API"}

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
app.include_router(users_router)
app.include_router(exercises_router)
app.include_router(plans_router)
app.include_router(mesocycles_router)
app.include_router(workouts_router)
