"""
FastAPI application entry point.

Run:
- dev: uvicorn src.app.main:app --reload
- prod: uvicorn src.app.main:app
"""

import logging
from collections.abc import AsyncGenerator, Mapping
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from fastapi import FastAPI

from src.app.providers.base import AdapterSettings, GenerativeBackend
from src.app.routes import chat, files, tools
from src.app.services.adapter import GeminiAdapter
from src.app.services.chat import ChatSessions
from src.app.services.workspace import WorkspaceService
from src.core.logging import setup_logging
from src.core.registry import FileRegistry

logger = logging.getLogger(__name__)

# =============================================================================
# Configuration
# =============================================================================


def load_config(config_path: Path | None = None) -> dict:
    """Load default.yaml."""
    if config_path is None:
        # default.yaml at the project root
        config_path = Path(__file__).parent.parent.parent / "default.yaml"

    if not config_path.exists():
        return {}

    with open(config_path, encoding="utf-8") as f:
        data: dict[Any, Any] = yaml.safe_load(f) or {}
        return data


def init_state(
    app: FastAPI,
    config: dict,
    backend: GenerativeBackend | None = None,
    environ: Mapping[str, str] | None = None,
) -> None:
    """
    Build the shared objects and attach them to app.state.

    The credential is validated here, once; a missing key is logged and
    surfaced as ConfigurationError on every later AI call.
    """
    settings = AdapterSettings.from_config(config, environ)
    if not settings.configured:
        logger.warning(
            "Gemini API key is not configured (GEMINI_API_KEY / GOOGLE_API_KEY); "
            "AI actions will fail until it is set"
        )

    registry = FileRegistry()
    adapter = GeminiAdapter(settings, backend=backend)

    app.state.config = config
    app.state.settings = settings
    app.state.registry = registry
    app.state.adapter = adapter
    app.state.workspace = WorkspaceService(adapter, registry)
    app.state.chat_sessions = ChatSessions(adapter, registry)


# =============================================================================
# Lifespan
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifecycle.

    Startup: .env, config, logging, shared state
    Shutdown: drop the registry (nothing persists)
    """
    # Startup
    load_dotenv()
    config = load_config()
    setup_logging(config)
    init_state(app, config)

    yield

    # Shutdown
    app.state.registry.clear_files()


# =============================================================================
# App Instance
# =============================================================================

app = FastAPI(
    title="Gemini Workspace",
    description="File upload, chat and analysis on top of the Gemini API",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(files.api_router, prefix="/api/files", tags=["Files API"])
app.include_router(chat.api_router, prefix="/api/chat", tags=["Chat API"])
app.include_router(tools.api_router, prefix="/api/tools", tags=["Tools API"])


# =============================================================================
# Root Endpoints
# =============================================================================


@app.get("/")
async def root() -> dict[str, Any]:
    return {
        "message": "Gemini Workspace",
        "endpoints": {
            "files": "/api/files",
            "chat": "/api/chat/message",
            "tools": "/api/tools",
        },
    }


@app.get("/health")
async def health() -> dict[str, Any]:
    """Health check (reports whether the API key is configured)."""
    settings = getattr(app.state, "settings", None)
    return {
        "status": "ok",
        "ai_configured": bool(settings and settings.configured),
    }


# =============================================================================
# CLI Entry Point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.app.main:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
    )
