import logging
from datetime import datetime, timezone

from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from slack_send import __version__
from slack_send.config import settings
from slack_send.errors import (
    AuthExchangeError,
    ConfigurationError,
    PlatformError,
    ReportedError,
    RetryFailedError,
    SlackSendError,
    TransportError,
    ValidationError,
)
from slack_send.routers import actions

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.app_name,
    description="Send a Slack message via incoming webhook or chat.postMessage.",
    version=__version__,
    debug=settings.debug,
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
)

_STATUS_BY_ERROR = {
    ValidationError: 422,
    ConfigurationError: 400,
    ReportedError: 400,
    TransportError: 502,
    PlatformError: 502,
    AuthExchangeError: 502,
    RetryFailedError: 502,
}


# --- Exception Handlers ---


@app.exception_handler(SlackSendError)
async def send_error_handler(request: Request, exc: SlackSendError):
    status_code = _STATUS_BY_ERROR.get(type(exc), 500)
    logger.warning("%s on %s: %s", type(exc).__name__, request.url.path, exc)

    error = {
        "code": status_code,
        "type": type(exc).__name__,
        "message": exc.message,
    }
    # Carried so the framework can hand the error back to /v1/error unchanged
    if getattr(exc, "status", None) is not None:
        error["status"] = exc.status
    if isinstance(exc, PlatformError) and exc.code:
        error["platform_code"] = exc.code

    return JSONResponse(status_code=status_code, content={"error": error})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": {"code": exc.status_code, "message": exc.detail}},
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = []
    for err in exc.errors():
        clean = {k: v for k, v in err.items() if k != "ctx"}
        if "msg" in clean:
            clean["msg"] = str(clean["msg"])
        errors.append(clean)
    return JSONResponse(
        status_code=422,
        content={"error": {"code": 422, "message": "Validation error", "details": errors}},
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s", request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"error": {"code": 500, "message": "Internal server error"}},
    )


# --- Routes ---

api_v1 = APIRouter(prefix="/v1")
api_v1.include_router(actions.router)
app.include_router(api_v1)


@app.get("/", summary="API root")
async def root():
    return {"name": settings.app_name, "status": "ok", "version": __version__}


@app.get("/health", summary="Health check")
async def health_ping():
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": __version__,
    }
