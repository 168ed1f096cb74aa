# app/main.py
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
import structlog

from app.core.config import settings, setup_logging
from app.core.errors import FleetError
from app.infrastructure.db.session import create_schema
from app.api.v1.routers.fleet import router as fleet_router
from app.api.v1.routers.trips import router as trips_router
from app.api.v1.routers.emergencies import router as emergency_router
from app.api.v1.routers.realtime import router as realtime_router

from app.middleware.error_handler import fleet_error_handler, http_error_handler
from app.middleware.request_context import RequestContextMiddleware

logger = structlog.get_logger("app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)
    if settings.auto_create_schema:
        await create_schema()
    logger.info("Service started", app_name=settings.app_name, environment=settings.environment)
    yield


setup_logging()
app = FastAPI(title=settings.app_name, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.cors_origins.split(",")] if settings.cors_origins else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestContextMiddleware)

app.include_router(fleet_router)
app.include_router(trips_router)
app.include_router(emergency_router)
app.include_router(realtime_router)

app.mount("/uploads", StaticFiles(directory=settings.upload_dir, check_dir=False), name="uploads")

@app.exception_handler(FleetError)
async def _fleet_exc_handler(request: Request, exc: FleetError):
    return await fleet_error_handler(request, exc)

@app.exception_handler(StarletteHTTPException)
async def _http_exc_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

@app.exception_handler(RequestValidationError)
async def _validation_exc_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=422, content={"detail": jsonable_encoder(exc.errors())})

@app.exception_handler(Exception)
async def _unhandled_exc_handler(request: Request, exc: Exception):
    return await http_error_handler(request, exc)

@app.get("/healthz")
def healthz():
    return {"ok": True}
