
import logging
from fastapi import Request
from fastapi.responses import JSONResponse
from app.core.errors import FleetError

log = logging.getLogger("app.error_handler")

async def fleet_error_handler(request: Request, exc: FleetError):
    level = logging.ERROR if exc.status_code >= 500 else logging.INFO
    log.log(level, "Request failed: %s", exc.message, extra={"path": str(request.url), "error_type": type(exc).__name__})
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

async def http_error_handler(request: Request, exc: Exception):

    log.exception("Unhandled error", extra={"path": str(request.url)})
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal Server Error", "error": str(exc)},
    )
