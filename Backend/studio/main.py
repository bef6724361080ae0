# studio/main.py
"""
Component Studio Backend
"""
import uvicorn
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import FileResponse, JSONResponse

# Rate limiting
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from dotenv import load_dotenv
load_dotenv()

from studio import __version__, cache, db
from studio.core.config import settings
from studio.core.logging import log, log_section


# ---------------------------------------------------------------------------
# LIFESPAN
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown."""
    log_section("STARTUP", "Component Studio starting")
    log("STARTUP", f"GEMINI_API_KEY loaded: {bool(settings.llm.gemini_api_key)}")
    log("STARTUP", f"Model: {settings.llm.gemini_model}")

    await db.connect_db()
    await cache.connect_cache()

    yield

    log("STARTUP", "Shutting down...")
    await cache.disconnect_cache()
    await db.disconnect_db()


# ---------------------------------------------------------------------------
# APP INITIALIZATION
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Component Studio",
    version=__version__,
    lifespan=lifespan,
)

# Monitoring
from studio.lib.monitoring import register_monitoring
register_monitoring(app)

if settings.cors_origins == ["*"] and not settings.debug:
    log("SECURITY", "Using allow_origins=['*'] - consider setting CORS_ORIGINS in production")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Rate limiting per client IP, configured via RATE_LIMIT (e.g. "50/minute")
limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit])
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)
log("SECURITY", f"Rate limiting enabled: {settings.rate_limit}")


# ---------------------------------------------------------------------------
# ERROR BODIES
# ---------------------------------------------------------------------------

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render errors as ``{"error": ...}``; dict details are passed through as-is."""
    body = exc.detail if isinstance(exc.detail, dict) else {"error": exc.detail}
    return JSONResponse(body, status_code=exc.status_code, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    details = [
        {"field": ".".join(str(p) for p in err.get("loc", ())), "message": err.get("msg", "")}
        for err in exc.errors()
    ]
    return JSONResponse({"error": "Invalid request body", "details": details}, status_code=400)


# ---------------------------------------------------------------------------
# API ROUTES
# ---------------------------------------------------------------------------

from studio.api import health, auth, sessions, ai, preview

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(sessions.router)
app.include_router(ai.router)
app.include_router(preview.router)


# ---------------------------------------------------------------------------
# STATIC FILES
# ---------------------------------------------------------------------------

if settings.paths.frontend_dist.exists():
    log("STARTUP", f"Serving frontend from: {settings.paths.frontend_dist}")

    assets_path = settings.paths.frontend_dist / "_next"
    if assets_path.exists():
        app.mount("/_next", StaticFiles(directory=assets_path), name="assets")

    @app.get("/{full_path:path}", include_in_schema=False)
    async def serve_spa(request: Request, full_path: str):
        file_path = settings.paths.frontend_dist / full_path
        if file_path.exists() and file_path.is_file():
            return FileResponse(file_path)
        return FileResponse(settings.paths.frontend_dist / "index.html")


# ---------------------------------------------------------------------------
# RUN
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    uvicorn.run(
        "studio.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.debug,
        reload_dirs=["studio"],
    )
