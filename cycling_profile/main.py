"""Main FastAPI application."""

import logging
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from cycling_profile.api.routes import router, templates
from cycling_profile.config import get_settings

SERVICE_NAME = "strava-cycling-profile-backend"

settings = get_settings()

logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=settings.log_level.upper()
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Strava Cycling Profile",
    description="Connect a Strava account and view cycling totals over the last 7, 30 or 60 days",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_origin],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    error = "Route not found" if exc.status_code == 404 else exc.detail
    return JSONResponse({"error": error}, status_code=exc.status_code, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = jsonable_encoder(exc.errors())
    first = errors[0] if errors else {}
    field = first.get("loc", ["request"])[-1]
    message = f"Invalid {field}: {first.get('msg', 'invalid value')}"
    logger.warning(f"Rejected {request.method} {request.url.path}: {errors}")
    return JSONResponse({"error": message}, status_code=400)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse({"error": "Internal server error"}, status_code=500)


# Mount static files
app.mount("/static", StaticFiles(directory=str(Path(__file__).resolve().parent / "static")), name="static")

app.include_router(router)


@app.get("/", response_class=HTMLResponse, include_in_schema=False)
async def read_root(request: Request):
    """Serve the login page."""
    return templates.TemplateResponse(request, "login.html", {"title": "Cycling Profile"})


@app.get("/dashboard", response_class=HTMLResponse, include_in_schema=False)
async def read_dashboard(request: Request):
    """Serve the stats dashboard."""
    return templates.TemplateResponse(request, "dashboard.html", {"title": "Cycling Profile"})


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": SERVICE_NAME
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "cycling_profile.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.app_debug
    )
