# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the PawSync API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from app.config import settings
from app.exceptions import (
    PawSyncException,
    pawsync_exception_handler,
    validation_exception_handler,
)
from app.routers import health, workspaces, pets, tasks, submissions, timeline, upload
from app.auth import routes as auth_routes

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Runs on startup and shutdown:
    - Startup: Log configuration
    - Shutdown: Log shutdown
    """
    logger.info(f"Starting PawSync API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    logger.info(f"Serving uploads from {settings.upload_path} at {settings.UPLOADS_URL_PATH}")

    yield

    logger.info("Shutting down PawSync API")


# Create FastAPI application
app = FastAPI(
    title="PawSync API",
    description="""
## Pet-Training Homework API

PawSync connects dog trainers with the owners they coach.

### How It Works

1. **Trainer Setup** - A trainer saves their profile and gets a workspace with an invite link
2. **Owner Joins** - The owner opens the link, signs in and adds their pet
3. **Homework** - The trainer assigns tasks; the owner submits notes, photos and videos
4. **Feedback** - The trainer comments on each submission
5. **Progress** - Both sides follow the pet's timeline and completion calendar

### Roles

| Role | Can |
|------|-----|
| **Trainer** | Assign and close tasks, comment on submissions of assigned pets |
| **Owner** | Add pets, submit homework, choose preferred weekdays |
| **Admin** | Everything, on every pet |
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Auth",
            "description": "Current user and role selection",
        },
        {
            "name": "Workspaces",
            "description": "Trainer profile, invite links and joining a workspace",
        },
        {
            "name": "Pets",
            "description": "Pets and trainer assignment",
        },
        {
            "name": "Tasks",
            "description": "Homework tasks, preferred days and reference media",
        },
        {
            "name": "Submissions",
            "description": "Homework submissions and trainer comments",
        },
        {
            "name": "Timeline",
            "description": "Activity feed and completion calendar",
        },
        {
            "name": "Upload",
            "description": "Photo and video uploads",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def uploads_resource_policy(request: Request, call_next):
    """Let other origins embed uploaded media."""
    response = await call_next(request)
    if request.url.path.startswith(settings.UPLOADS_URL_PATH.rstrip("/") + "/"):
        response.headers["Cross-Origin-Resource-Policy"] = "cross-origin"
    return response


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(PawSyncException)
async def handle_pawsync_exception(request: Request, exc: PawSyncException):
    """Handle custom PawSync exceptions."""
    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
    return await pawsync_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def handle_validation_exception(request: Request, exc: RequestValidationError):
    """Handle malformed request bodies and parameters."""
    return await validation_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Authentication endpoints
app.include_router(
    auth_routes.router,
    prefix="/api/auth",
    tags=["Auth"]
)

# Health check endpoints
app.include_router(
    health.router,
    prefix="/api",
    tags=["Health"]
)

# Workspace and invite endpoints
app.include_router(
    workspaces.router,
    prefix="/api/workspaces",
    tags=["Workspaces"]
)

# Pet endpoints
app.include_router(
    pets.router,
    prefix="/api/pets",
    tags=["Pets"]
)

# Homework task endpoints
app.include_router(
    tasks.router,
    prefix="/api/tasks",
    tags=["Tasks"]
)

# Submission and comment endpoints
app.include_router(
    submissions.router,
    prefix="/api/submissions",
    tags=["Submissions"]
)

# Timeline endpoints
app.include_router(
    timeline.timeline_router,
    prefix="/api/timeline",
    tags=["Timeline"]
)

# Calendar endpoints
app.include_router(
    timeline.calendar_router,
    prefix="/api/calendar",
    tags=["Timeline"]
)

# File upload endpoint
app.include_router(
    upload.router,
    prefix="/api/upload",
    tags=["Upload"]
)


# =============================================================================
# Static Uploads
# =============================================================================

settings.upload_path.mkdir(parents=True, exist_ok=True)
app.mount(
    settings.UPLOADS_URL_PATH,
    StaticFiles(directory=settings.upload_path),
    name="uploads",
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "PawSync API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/health",
    }
