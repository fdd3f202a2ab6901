# src/a2a_planner/server.py
from __future__ import annotations

import uuid
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.background import BackgroundTask
from starlette.middleware.cors import CORSMiddleware

from .agents import AgentRegistry, build_registry
from .card import agent_card
from .config import Settings, settings as default_settings
from .errors import INTERNAL_ERROR
from .handler import A2ARequestHandler, IdFactory, error_body, new_id
from .logging_config import configure_logging
from .notifications import NotificationSink, build_notifier


log = logging.getLogger("a2a.server")


def _log(level: str, event: str, **fields: Any) -> None:
    """Structured logging helper: fields land in the JSON line via `extra`."""
    fn = getattr(log, level, log.info)
    fn(event, extra=fields)


def _request_id(req: Request) -> str:
    """Return incoming X-Request-ID or generate a new one."""
    rid = req.headers.get("x-request-id")
    return rid if rid else str(uuid.uuid4())


def _with_diag_headers(rid: str) -> Dict[str, str]:
    """Standard headers we attach to all responses."""
    return {
        "X-Request-ID": rid,
        "Cache-Control": "no-store",
    }


def _agent_meta(agent: Any) -> Dict[str, Any]:
    provider = getattr(agent, "provider", None)
    return {
        "id": getattr(agent, "id", "unknown"),
        "name": getattr(agent, "name", "unknown"),
        "ready": bool(getattr(agent, "ready", False)),
        "reason": getattr(agent, "reason", ""),
        "provider": getattr(provider, "id", None),
    }


def create_app(
    registry: Optional[AgentRegistry] = None,
    *,
    settings: Optional[Settings] = None,
    notifier: Optional[NotificationSink] = None,
    id_factory: IdFactory = new_id,
) -> FastAPI:
    """Build the FastAPI app around an agent registry (the planner by default)."""
    cfg = settings or default_settings
    registry = registry if registry is not None else build_registry(cfg)
    notifier = notifier or build_notifier(cfg)
    handler = A2ARequestHandler(registry, id_factory=id_factory, notifier=notifier)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        _log("info", "startup", agents=[_agent_meta(a) for a in registry])
        yield
        await notifier.aclose()
        for agent in registry:
            memory = getattr(agent, "memory", None)
            if memory is not None:
                memory.close()

    app = FastAPI(
        title=cfg.agent_name,
        version=cfg.agent_version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.registry = registry
    app.state.handler = handler
    app.state.settings = cfg

    # CORS (configurable; permissive defaults suitable for local/dev)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=(cfg.cors_allow_origins or ["*"]),
        allow_credentials=cfg.cors_allow_credentials,
        allow_methods=(cfg.cors_allow_methods or ["*"]),
        allow_headers=(cfg.cors_allow_headers or ["*"]),
    )

    # =========================================================================
    # Meta & Health
    # =========================================================================

    @app.get("/", include_in_schema=False)
    async def root() -> RedirectResponse:
        return RedirectResponse(url="/docs", status_code=307)

    @app.get("/healthz")
    async def healthz(req: Request) -> JSONResponse:
        rid = _request_id(req)
        return JSONResponse({"status": "ok"}, headers=_with_diag_headers(rid))

    @app.get("/readyz")
    async def readyz(req: Request) -> JSONResponse:
        rid = _request_id(req)
        agents = [_agent_meta(a) for a in registry]
        ok = bool(agents) and all(a["ready"] for a in agents)
        payload = {"status": "ready" if ok else "not-ready", "agents": agents}
        return JSONResponse(payload, status_code=200 if ok else 503, headers=_with_diag_headers(rid))

    @app.get("/.well-known/agent-card.json")
    async def card(req: Request) -> JSONResponse:
        rid = _request_id(req)
        return JSONResponse(agent_card(cfg), headers=_with_diag_headers(rid))

    @app.get("/a2a/agents")
    async def agents(req: Request) -> JSONResponse:
        rid = _request_id(req)
        return JSONResponse({"agents": [_agent_meta(a) for a in registry]}, headers=_with_diag_headers(rid))

    # =========================================================================
    # A2A JSON-RPC endpoint
    # =========================================================================

    @app.post("/a2a/agent/{agent_id}")
    async def a2a_agent(agent_id: str, req: Request) -> JSONResponse:
        rid = _request_id(req)
        body = await req.body()
        result = await handler.handle(agent_id, body)
        _log("debug", "a2a.response", request_id=rid, agent_id=agent_id, status_code=result.status_code)
        background = BackgroundTask(result.background) if result.background else None
        return JSONResponse(
            result.body,
            status_code=result.status_code,
            headers=_with_diag_headers(rid),
            background=background,
        )

    # =========================================================================
    # Global Exception Handler
    # =========================================================================

    @app.exception_handler(Exception)
    async def _unhandled_error_handler(req: Request, exc: Exception) -> JSONResponse:
        rid = _request_id(req)
        _log("error", "unhandled.exception", request_id=rid, error=str(exc))
        # Callers always get a JSON-RPC body; the log has the details.
        return JSONResponse(
            error_body(None, INTERNAL_ERROR, "Internal error", {"details": str(exc) or type(exc).__name__}),
            status_code=500,
            headers=_with_diag_headers(rid),
        )

    return app


configure_logging(default_settings.log_level)
app = create_app()
