import sys
import os
from datetime import datetime
from typing import Any, Optional


# ═══════════════════════════════════════════════════════════════════════════════
# LOG FILTERING
# ═══════════════════════════════════════════════════════════════════════════════
# Only these scopes are shown at INFO level
# Everything else is gated behind STUDIO_DEBUG

INFO_SCOPES = {
    "STARTUP",      # Lifespan
    "DB",           # MongoDB connection
    "CACHE",        # Redis connection and failures
    "AUTH",         # Register / login / logout
    "SESSIONS",     # Session route failures
    "AI",           # AI proxy routes
    "GEMINI",       # LLM boundary
    "SECURITY",     # CORS / rate limiting
    "MONITORING",   # Prometheus
}

# DEBUG-only scopes (hidden by default)
DEBUG_SCOPES = {
    "CACHE-HIT",
    "CACHE-MISS",
    "PREVIEW",
    "EXPORT",
    "TOKENS",
}

DEBUG_MODE = os.getenv("STUDIO_DEBUG", "false").lower() == "true"


def is_enabled(scope: str) -> bool:
    return DEBUG_MODE or scope in INFO_SCOPES


def log(scope: str, message: str, data: Any = None, session_id: Optional[str] = None) -> None:
    """
    Unified logging function for Component Studio.

    Only INFO_SCOPES are shown by default.
    Set STUDIO_DEBUG=true to see all scopes.
    """
    if not is_enabled(scope):
        return

    timestamp = datetime.now().strftime("%H:%M:%S")
    prefix = f"[{timestamp}] [{scope}]"

    if session_id:
        prefix += f" [{str(session_id)[-8:]}]"

    print(f"{prefix} {message}")

    if data:
        print(f"  Data: {data}")

    sys.stdout.flush()


def log_section(scope: str, title: str) -> None:
    """
    Log a section header with visual separator.
    """
    timestamp = datetime.now().strftime("%H:%M:%S")
    print(f"\n{'='*60}")
    print(f"[{timestamp}] [{scope}] {title}")
    print(f"{'='*60}")
    sys.stdout.flush()
