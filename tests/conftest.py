"""pytest fixtures."""

from collections.abc import AsyncGenerator, Callable
from typing import Any

import pytest
import pytest_asyncio
from fastapi import Depends, FastAPI, Form
from fastapi.responses import HTMLResponse
from httpx import ASGITransport, AsyncClient

from csrf_sdk import (
    CSRFConfig,
    CSRFContext,
    CSRFMiddleware,
    TokenGenerator,
    get_csrf_context,
    register_exception_handlers,
    require_csrf_token,
)


def build_app(
    config: CSRFConfig | None = None,
    enforce: bool = False,
    exempt_paths: list[str] | None = None,
) -> FastAPI:
    """Build a small comments app protected by CSRFMiddleware."""
    app = FastAPI()
    app.add_middleware(
        CSRFMiddleware,
        config=config or CSRFConfig(),
        enforce=enforce,
        exempt_paths=exempt_paths,
    )
    register_exception_handlers(app)

    @app.get("/")
    async def index(csrf: CSRFContext = Depends(get_csrf_context)) -> dict:
        return {"token": csrf.current_token(), "fresh": csrf.is_fresh}

    @app.get("/comments/new")
    async def new_comment(csrf: CSRFContext = Depends(get_csrf_context)) -> HTMLResponse:
        return HTMLResponse(f"<head>{csrf.meta_tags()}</head><form>{csrf.hidden_input()}</form>")

    @app.post("/comments")
    async def create_comment(text: str = Form(...)) -> dict:
        return {"created": text}

    @app.post("/api/comments")
    async def create_comment_json(payload: dict[str, Any]) -> dict:
        return {"created": payload.get("text")}

    @app.delete("/api/comments/{comment_id}")
    async def delete_comment(comment_id: int) -> dict:
        return {"deleted": comment_id}

    @app.post("/webhooks/github")
    async def webhook() -> dict:
        return {"received": True}

    @app.post("/selective", dependencies=[Depends(require_csrf_token)])
    async def selective() -> dict:
        return {"ok": True}

    @app.post("/selective/form")
    async def selective_form(
        text: str = Form(...),
        csrf: CSRFContext = Depends(require_csrf_token),
    ) -> dict:
        return {"created": text, "token": csrf.current_token()}

    return app


@pytest.fixture
def csrf_config() -> CSRFConfig:
    """Default CSRF configuration."""
    return CSRFConfig()


@pytest.fixture
def valid_token(csrf_config: CSRFConfig) -> str:
    """A well-formed token for the default configuration."""
    return TokenGenerator.generate(csrf_config.token_len)


@pytest.fixture
def make_client() -> Callable[..., AsyncClient]:
    """Factory for test HTTP clients against a freshly built app."""

    def _make(
        config: CSRFConfig | None = None,
        enforce: bool = False,
        exempt_paths: list[str] | None = None,
        base_url: str = "http://test",
    ) -> AsyncClient:
        app = build_app(config=config, enforce=enforce, exempt_paths=exempt_paths)
        return AsyncClient(transport=ASGITransport(app=app), base_url=base_url)

    return _make


@pytest_asyncio.fixture
async def client(make_client) -> AsyncGenerator[AsyncClient, None]:
    """Client for an app with enforcement disabled."""
    async with make_client() as ac:
        yield ac


@pytest_asyncio.fixture
async def enforcing_client(make_client) -> AsyncGenerator[AsyncClient, None]:
    """Client for an app with global enforcement enabled."""
    async with make_client(enforce=True, exempt_paths=["/webhooks/"]) as ac:
        yield ac

