from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import settings
from .database import init_db
from .errors import LedgerError

from .api.deps import get_ledger
from .api.workflow import router as workflow_router
from .api.candidates import router as candidates_router
from .api.votes import router as votes_router
from .api.tokens import router as tokens_router
from .api.principals import router as principals_router
from .api.events import router as events_router

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Votehub Election Ledger API",
        version=getattr(settings, "app_version", "0.1.x"),
    )

    allow_origins = getattr(settings, "cors_allow_origins", ["*"])
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # --- Startup ---
    @app.on_event("startup")
    def _startup() -> None:
        # Creates tables (idempotent), binds the token issuer and seeds roles
        init_db()
        get_ledger().bootstrap(admins=settings.admin_principals, funders=settings.funder_principals)
        logger.info(
            "ledger ready (admins=%d funders=%d)",
            len(settings.admin_principals),
            len(settings.funder_principals),
        )

    # --- Rejected ledger operations -> stable JSON envelope ---
    @app.exception_handler(LedgerError)
    async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.as_dict())

    # --- Health / meta ---
    @app.get("/health", tags=["meta"])
    def health() -> Dict[str, Any]:
        return {
            "ok": True,
            "env": getattr(settings, "env", "local"),
        }

    @app.get("/version", tags=["meta"])
    def version() -> Dict[str, Any]:
        return {"version": getattr(settings, "app_version", "0.1.x")}

    # --- API routers ---
    app.include_router(workflow_router)
    app.include_router(candidates_router)
    app.include_router(votes_router)
    app.include_router(tokens_router)
    app.include_router(principals_router)
    app.include_router(events_router)

    return app


app = create_app()


def run() -> None:
    logging.basicConfig(level=getattr(logging, str(settings.log_level).upper(), logging.INFO))
    import uvicorn

    # NOTE: init_db + bootstrap are handled by the FastAPI startup hook.
    uvicorn.run(
        "votehub.main:app",
        host=getattr(settings, "host", "127.0.0.1"),
        port=int(getattr(settings, "port", 8000)),
        reload=bool(getattr(settings, "reload", False)),
    )
