"""
guardian/api.py
─────────────────────────────────────────────────────────────────────────────
Family Guardian - JSON API over the alert lifecycle

TWO USAGE MODES:
  1. Importable coordinator (no HTTP):
         from guardian.api import build_coordinator
         guardian = build_coordinator(data_dir=Path("data"))
         guardian.handle_event("URGENT: wire money", "manual_check")

  2. FastAPI HTTP server (elderly UI + family dashboard via fetch()):
         python -m guardian.api                  # default: port 3000
         python -m guardian.api --port 9000
         uvicorn guardian.api:app --port 3000

ENDPOINTS:
  POST /api/flag-event        - screen a message / emergency, maybe create alert
  GET  /api/alerts            - latest alerts, newest first
  POST /api/action-alert      - family approves or blocks an alert
  GET  /api/safe-contacts     - trusted contacts
  GET  /api/blocked-contacts  - numbers blocked by the family
  GET  /api/stats             - pending / emergency / safe-contact counts
  GET  /health                - liveness + data dir

Page rendering, PWA manifest and static files are served elsewhere.

SECURITY NOTES:
  - No authentication (single-family, localhost deployment assumed)
  - CORS limited to the configured origins
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from guardian import __version__
from guardian.config import load_config, resolve_data_dir
from guardian.coordinator import AlertCoordinator
from guardian.errors import StorageUnavailable
from guardian.models.record import EventOutcome, TYPE_MESSAGE
from guardian.stores import json_stores

logger = logging.getLogger(__name__)


def build_coordinator(
    data_dir: Optional[Path] = None,
    config:   Optional[Dict[str, Any]] = None,
) -> AlertCoordinator:
    """AlertCoordinator over the JSON data files. Does not touch disk until used."""
    config = config or load_config()
    data_dir = Path(data_dir) if data_dir else resolve_data_dir(config)
    alerts, contacts = json_stores(data_dir, safe_contacts=config.get("safe_contacts"))
    return AlertCoordinator(alerts, contacts)


# ── REQUEST MODELS ──────────────────────────────────────────────────────────

class FlagEventRequest(BaseModel):
    message: Optional[str] = None
    source:  str = "unknown"
    type:    str = TYPE_MESSAGE


class ActionRequest(BaseModel):
    alertId: int
    action:  str


def _event_body(outcome: EventOutcome) -> Dict[str, Any]:
    if outcome.alert_created:
        return {
            "status":        outcome.status,
            "suspicious":    outcome.suspicious,
            "keywordsFound": outcome.keywords_found,
            "alertType":     outcome.alert_type,
            "alertId":       outcome.alert_id,
            "caution":       outcome.caution,
        }
    return {"status": outcome.status, "suspicious": False, "caution": outcome.caution}


# ═══════════════════════════════════════════════════════════════════════════
# FASTAPI HTTP APP
# ═══════════════════════════════════════════════════════════════════════════

def build_app(
    data_dir:    Optional[Path] = None,
    config:      Optional[Dict[str, Any]] = None,
    coordinator: Optional[AlertCoordinator] = None,
) -> FastAPI:
    """
    Build the FastAPI application.
    Pass `coordinator` to serve pre-built (e.g. in-memory) stores.
    """
    config = config or load_config()
    resolved_dir: Optional[Path] = None
    if coordinator is None:
        resolved_dir = Path(data_dir) if data_dir else resolve_data_dir(config)
        guardian = build_coordinator(data_dir=resolved_dir, config=config)
    else:
        guardian = coordinator
    list_limit = int(config.get("alert_list_limit", 20))

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        guardian.initialize()
        logger.info("Family Guardian data initialized")
        yield

    _app = FastAPI(
        title       = "Family Guardian API",
        description = "Scam screening and family alert relay",
        version     = __version__,
        docs_url    = "/docs",
        redoc_url   = None,
        lifespan    = lifespan,
    )
    _app.state.guardian = guardian

    _app.add_middleware(
        CORSMiddleware,
        allow_origins     = list(config.get("cors_origins") or []),
        allow_methods     = ["GET", "POST", "OPTIONS"],
        allow_headers     = ["Content-Type"],
        allow_credentials = False,
    )

    @_app.exception_handler(StorageUnavailable)
    async def storage_unavailable(request: Request, exc: StorageUnavailable):
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
        return JSONResponse(
            status_code=503,
            content={"status": "error", "message": "Storage unavailable"},
        )

    # ── ENDPOINTS ───────────────────────────────────────────────────────

    @_app.post("/api/flag-event", summary="Screen a message or raise an emergency")
    def flag_event(req: FlagEventRequest):
        """
        Classify the message. Suspicious messages and every emergency
        become alerts for the family dashboard.
        """
        outcome = guardian.handle_event(req.message, req.source, req.type)
        if outcome.status == "invalid":
            return JSONResponse(
                status_code=400,
                content={"status": "error", "message": outcome.caution},
            )
        return _event_body(outcome)

    @_app.get("/api/alerts", summary="Latest alerts")
    def get_alerts(limit: Optional[int] = Query(None, ge=1, le=100)):
        """Most recent alerts first (default: the configured list limit)."""
        alerts = guardian.list_alerts(limit or list_limit)
        return [a.to_dict() for a in alerts]

    @_app.post("/api/action-alert", summary="Approve or block an alert")
    def action_alert(req: ActionRequest):
        outcome = guardian.handle_action(req.alertId, req.action)
        if outcome.ok:
            return {
                "status":       "success",
                "action":       outcome.action,
                "blockedPhone": outcome.blocked_phone,
            }
        status_code = {"not_found": 404, "already_resolved": 409}.get(outcome.status, 400)
        return JSONResponse(
            status_code=status_code,
            content={"status": "error", "message": outcome.detail},
        )

    @_app.get("/api/safe-contacts", summary="Trusted contacts")
    def get_safe_contacts():
        return [c.to_dict() for c in guardian.list_safe_contacts()]

    @_app.get("/api/blocked-contacts", summary="Blocked numbers")
    def get_blocked_contacts():
        return [c.to_dict() for c in guardian.list_blocked_contacts()]

    @_app.get("/api/stats", summary="Dashboard counters")
    def get_stats():
        return guardian.stats().to_dict()

    @_app.get("/health", summary="Health check")
    def health():
        return {
            "status":  "ok",
            "dataDir": str(resolved_dir) if resolved_dir else None,
            "version": __version__,
        }

    return _app


# Module-level app instance - used by uvicorn guardian.api:app
app = build_app()


# ═══════════════════════════════════════════════════════════════════════════
# CLI ENTRYPOINT - python -m guardian.api
# ═══════════════════════════════════════════════════════════════════════════

if __name__ == "__main__":
    import argparse

    import uvicorn

    cfg = load_config()
    parser = argparse.ArgumentParser(
        prog        = "guardian.api",
        description = "Family Guardian API server",
    )
    parser.add_argument("--port", type=int, default=cfg["port"],
                        help=f"Port to bind (default: {cfg['port']})")
    parser.add_argument("--host", type=str, default=cfg["host"],
                        help=f"Host to bind (default: {cfg['host']})")
    parser.add_argument("--data-dir", type=Path, default=None,
                        help="Directory holding the JSON data files")
    args = parser.parse_args()

    logging.basicConfig(
        level   = logging.INFO,
        format  = '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt = '%H:%M:%S',
    )
    uvicorn.run(
        build_app(data_dir=args.data_dir, config=cfg),
        host      = args.host,
        port      = args.port,
        log_level = "info",
    )
