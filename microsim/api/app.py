"""
MicroSim API — FastAPI endpoints.

Exposes the simulation engine over HTTP for:
- State inspection and narrative history
- Bootstrap / reset
- User actions
- Runtime credential and model selection
- Model catalogue proxy (the key stays server-side)
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from microsim.config import RuntimeSettings, Settings
from microsim.errors import (
    EmptyInputError,
    InferenceError,
    InferenceTimeoutError,
    MissingCredentialError,
    SimulationError,
)
from microsim.inference.client import InferenceClient, OpenRouterClient
from microsim.orchestrator.engine import SimulationEngine
from microsim.state.store import StateStore, open_store

logger = logging.getLogger("MicroSimAPI")


# --- Request Models ---

class ActionRequest(BaseModel):
    input: Optional[str] = None


class ConfigRequest(BaseModel):
    api_key: Optional[str] = Field(default=None, alias="apiKey")
    model: Optional[str] = None


def _to_http_error(error: SimulationError) -> HTTPException:
    """Map an engine failure onto the status code a client should see."""
    if isinstance(error, EmptyInputError):
        return HTTPException(400, str(error))
    if isinstance(error, MissingCredentialError):
        return HTTPException(401, str(error))
    if isinstance(error, InferenceTimeoutError):
        return HTTPException(504, str(error))
    if isinstance(error, InferenceError):
        return HTTPException(502, str(error))
    return HTTPException(500, str(error))


# --- Application Factory ---

def create_app(
    settings: Optional[Settings] = None,
    store: Optional[StateStore] = None,
    client: Optional[InferenceClient] = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""

    settings = settings or Settings.from_env()
    st = store or open_store(settings.db_path)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        yield
        close = getattr(st, "close", None)
        if close is not None:
            close()
            logger.info("State store closed")

    app = FastAPI(
        title="MicroSim API",
        description="Household world simulation driven by an LLM",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Initialize components
    cl = client or OpenRouterClient(
        base_url=settings.base_url,
        timeout=settings.request_timeout_seconds,
        referer=settings.referer,
        title=settings.title,
    )
    engine = SimulationEngine(
        store=st,
        client=cl,
        settings=RuntimeSettings.from_settings(settings),
    )

    # Store components on app state for access in endpoints
    app.state.settings = settings
    app.state.store = st
    app.state.engine = engine

    @app.get("/")
    def health():
        return {"ok": True}

    # === SIMULATION ===

    @app.get("/api/state")
    def get_state():
        """Persisted world state plus narrative history for page reload."""
        try:
            status = engine.get_status()
        except SimulationError as e:
            raise _to_http_error(e)
        return status.model_dump(by_alias=True)

    @app.post("/api/init")
    def init_simulation():
        """Reset to the initial world and clear chat history."""
        try:
            result = engine.bootstrap()
        except SimulationError as e:
            raise _to_http_error(e)
        return result.model_dump()

    @app.post("/api/reset")
    def reset_simulation():
        """Explicit reset, independent of client startup."""
        try:
            result = engine.reset()
        except SimulationError as e:
            raise _to_http_error(e)
        return result.model_dump()

    @app.post("/api/action")
    def act(req: ActionRequest):
        """Advance the simulation with one free-text action."""
        try:
            result = engine.act(req.input or "")
        except SimulationError as e:
            logger.error("Action error: %s", e)
            raise _to_http_error(e)
        return result.model_dump()

    # === CONFIGURATION ===

    @app.post("/api/config")
    def configure(req: ConfigRequest):
        """Store key and model in memory only."""
        status = engine.configure(api_key=req.api_key, model=req.model)
        return status.model_dump(by_alias=True)

    @app.get("/api/models")
    def list_models():
        """Proxy the provider's model list using the configured key."""
        try:
            models = engine.list_models()
        except SimulationError as e:
            raise _to_http_error(e)
        return [m.model_dump(mode="json", exclude_none=True) for m in models]

    if not engine.settings.has_api_key:
        logger.warning("No OPENROUTER_API_KEY set. Configure via POST /api/config or .env")

    return app


# Default application instance
app = create_app()
