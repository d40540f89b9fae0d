"""
Pytest fixtures for the workspace tests.
"""

from collections.abc import Callable, Mapping

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.app.main import init_state
from src.app.providers.base import AdapterSettings, GenerativeBackend
from src.app.routes import chat, files, tools
from src.app.services.adapter import GeminiAdapter
from src.core.registry import FileRegistry
from src.testing.fakes import FakeBackend

# =============================================================================
# Settings / Adapter Fixtures
# =============================================================================


@pytest.fixture
def settings() -> AdapterSettings:
    """Configured settings."""
    return AdapterSettings.from_config(
        {"ai": {"text_model": "text-model", "vision_model": "vision-model"}},
        environ={"GEMINI_API_KEY": "test-api-key"},
    )


@pytest.fixture
def unconfigured_settings() -> AdapterSettings:
    """Settings without an API key."""
    return AdapterSettings.from_config({}, environ={})


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def make_backend() -> type[FakeBackend]:
    """FakeBackend class, for tests that need a custom responder."""
    return FakeBackend


@pytest.fixture
def adapter(settings: AdapterSettings, backend: FakeBackend) -> GeminiAdapter:
    return GeminiAdapter(settings, backend=backend)


@pytest.fixture
def registry() -> FileRegistry:
    return FileRegistry()


# =============================================================================
# App Fixtures
# =============================================================================


def build_app(
    backend: GenerativeBackend,
    environ: Mapping[str, str] | None = None,
    config: dict | None = None,
) -> FastAPI:
    """FastAPI app with routes and state, without the lifespan."""
    app = FastAPI()
    app.include_router(files.api_router, prefix="/api/files")
    app.include_router(chat.api_router, prefix="/api/chat")
    app.include_router(tools.api_router, prefix="/api/tools")

    init_state(
        app,
        config if config is not None else {"upload": {"max_bytes": 1024 * 1024}},
        backend=backend,
        environ={"GEMINI_API_KEY": "test-api-key"} if environ is None else environ,
    )
    return app


@pytest.fixture
def make_app() -> Callable[..., FastAPI]:
    """build_app(backend, environ=None, config=None)."""
    return build_app


@pytest.fixture
def app(backend: FakeBackend) -> FastAPI:
    return build_app(backend)


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)
