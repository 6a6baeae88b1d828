"""FastAPI web server exposing the profile lookup endpoint."""

from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from igprofile import ProfileLookupService, ServiceConfig, __version__
from igprofile.core.exporter import to_response
from igprofile.exceptions import InvalidUsernameError, ProfileNotFoundError, UpstreamError
from igprofile.logging import configure_logging, get_logger

INVALID_USERNAME_MESSAGE = "Invalid Instagram username"
NOT_FOUND_MESSAGE = "Instagram profile not found"

log = get_logger("api")


class LookupRequest(BaseModel):
    """Request body for a profile lookup."""

    username: str = Field(..., min_length=1, description="Instagram username, with or without @")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    timestamp: str


# Global service instance
_service: Optional[ProfileLookupService] = None


def get_service() -> ProfileLookupService:
    """Dependency returning the service started by the lifespan handler."""
    if _service is None:
        raise RuntimeError("Lookup service is not running")
    return _service


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage service lifecycle."""
    global _service
    config = ServiceConfig()
    configure_logging(config)
    _service = ProfileLookupService(config)
    await _service.__aenter__()
    try:
        yield
    finally:
        await _service.__aexit__(None, None, None)
        _service = None


app = FastAPI(
    title="igprofile API",
    description="Cached Instagram profile lookups",
    version=__version__,
    lifespan=lifespan,
)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@app.exception_handler(RequestValidationError)
async def invalid_body_handler(request: Request, exc: RequestValidationError):
    return _error(400, INVALID_USERNAME_MESSAGE)


@app.exception_handler(InvalidUsernameError)
async def invalid_username_handler(request: Request, exc: InvalidUsernameError):
    return _error(400, INVALID_USERNAME_MESSAGE)


@app.exception_handler(ProfileNotFoundError)
async def not_found_handler(request: Request, exc: ProfileNotFoundError):
    return _error(404, NOT_FOUND_MESSAGE)


@app.exception_handler(UpstreamError)
async def upstream_handler(request: Request, exc: UpstreamError):
    return _error(500, str(exc))


@app.exception_handler(Exception)
async def unexpected_handler(request: Request, exc: Exception):
    log.error("unexpected_error", path=request.url.path, exc_info=exc)
    return _error(500, str(exc) or exc.__class__.__name__)


@app.get("/health", response_model=HealthResponse, tags=["System"])
async def health_check():
    """Check API health status."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        timestamp=datetime.now().isoformat(),
    )


@app.post("/", tags=["Profiles"])
@app.post("/api/profile", tags=["Profiles"])
async def lookup_profile(
    request: LookupRequest,
    force_refresh: bool = Query(False, description="Skip the cache read"),
    service: ProfileLookupService = Depends(get_service),
):
    """
    Look up an Instagram profile.

    Serves the stored copy while it is younger than the cache TTL, otherwise
    fetches it from the provider and stores the refreshed record.
    """
    result = await service.lookup(request.username, force_refresh=force_refresh)
    return to_response(result)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
