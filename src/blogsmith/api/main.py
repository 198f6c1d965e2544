from __future__ import annotations

from datetime import UTC, datetime
from dotenv import load_dotenv
import logging
from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, generate_latest

from .. import __version__
from ..config import get_settings
from .routers.diag import router as diag_router
from .routers.generate import router as generate_router
from ..observability.metrics import metrics_middleware_factory

load_dotenv()  # Load environment variables from .env if present (DEEPSEEK_API_KEY, etc.)

_settings = get_settings()

app = FastAPI(title="Blogsmith API", version=__version__)

logging.basicConfig(level=getattr(logging, _settings.log_level, logging.INFO))

# Observability: request latency histogram
app.middleware("http")(metrics_middleware_factory())

# Routers
app.include_router(generate_router)
app.include_router(diag_router)

# Same routers under /api; the UI posts to /api/generate
app.include_router(generate_router, prefix="/api")
app.include_router(diag_router, prefix="/api")

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(_settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _health_payload() -> dict:
    return {
        "status": "ok",
        "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
        "components": {
            "api": "ok",
            "upstream_configured": get_settings().has_api_key,
        },
    }


@app.get("/")
def root():
    return {"name": "Blogsmith API", "version": __version__}


@app.get("/health")
def health():
    return _health_payload()


@app.get("/metrics")
def metrics() -> Response:
    data = generate_latest(REGISTRY)
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)


@app.get("/api")
def api_root():
    return {"name": "Blogsmith API", "version": __version__}


@app.get("/api/health")
def api_health():
    return _health_payload()


@app.get("/api/metrics")
def api_metrics() -> Response:
    data = generate_latest(REGISTRY)
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)
