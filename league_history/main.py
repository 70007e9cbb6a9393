# league_history/main.py
from __future__ import annotations

import json
import logging
import os
import time
import uuid

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

# Routers
from .routers import (
    records,
    seasons,
    standings,
    teams,
    weeks,
)

# ---------- App ----------
app = FastAPI(title="League History", version="0.1.0")

# Dashboard dev server
app.add_middleware(
    CORSMiddleware,
    allow_origins=[os.getenv("DASHBOARD_ORIGIN", "http://localhost:5173")],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


# ---------- Minimal structured logging ----------
logging.basicConfig(level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO))
logger = logging.getLogger("league_history")


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id

    duration_ms = (time.perf_counter() - start) * 1000.0
    log_obj = {
        "msg": "request",
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        "status": response.status_code,
        "duration_ms": round(duration_ms, 2),
    }
    logger.info(json.dumps(log_obj, separators=(",", ":")))
    return response


# ---------- Health ----------
@app.get("/health/ping")
def ping():
    return {"ok": True, "ping": "pong"}


def _include_router_flex(app: FastAPI, module) -> None:
    for attr in ("router", "route"):
        if hasattr(module, attr):
            app.include_router(getattr(module, attr))
            return
    name = getattr(module, "__name__", str(module))
    raise RuntimeError(f"Module {name} does not define `router` or `route`")


# ---------- Include Routers ----------
_include_router_flex(app, seasons)  # /api/seasons
_include_router_flex(app, weeks)  # /api/seasons/{year}/weeks
_include_router_flex(app, teams)  # /api/seasons/{year}/teams
_include_router_flex(app, standings)  # /api/seasons/{year}/standings
_include_router_flex(app, records)  # /api/records
