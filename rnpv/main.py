"""
rNPV Valuator — FastAPI Application Entry Point

Architecture:
    - FastAPI application with auto-generated OpenAPI docs at /docs
    - CORS enabled for a browser front end (origins from RNPV_CORS_ORIGINS)
    - All routers mounted under /api
    - Database tables created on startup via lifespan event

Usage:
    python -m uvicorn rnpv.main:app --host 127.0.0.1 --port 8050
"""

import json
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .config import CORS_ORIGINS, LOG_LEVEL, STORE_BACKEND
from .database import init_db
from .routers import export, lookups, valuation

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("rnpv.api")


class ValuationJSONResponse(JSONResponse):
    """JSON response that writes non-finite PVs as Infinity / NaN instead of failing."""

    def render(self, content) -> bytes:
        return json.dumps(
            content,
            ensure_ascii=False,
            allow_nan=True,
            indent=None,
            separators=(",", ":"),
        ).encode("utf-8")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.
    - On startup: create tables when the SQL store is in use
    """
    if STORE_BACKEND == "sql":
        init_db()
    logger.info(f"rNPV Valuator {__version__} started (store={STORE_BACKEND})")
    yield


app = FastAPI(
    title="rNPV Valuator",
    description=(
        "Risk-adjusted NPV for a single pharmaceutical asset under owner "
        "and licensor postures: mechanism-adjusted PTRS, DCF, rNPV and ROI."
    ),
    version=__version__,
    lifespan=lifespan,
    default_response_class=ValuationJSONResponse,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(valuation.router)  # /api/valuation, /api/valuations
app.include_router(lookups.router)    # /api/loe, /api/trial
app.include_router(export.router)     # /api/export


@app.get("/")
def root():
    """Health check and API information endpoint."""
    return {
        "name": "rNPV Valuator API",
        "version": __version__,
        "status": "running",
        "docs": "/docs",
        "endpoints": {
            "compute": "/api/valuation/compute",
            "validate": "/api/valuation/validate",
            "valuations": "/api/valuations",
            "share": "/api/valuation/share/{slug}",
            "loe": "/api/loe/{drug_name}",
            "trial": "/api/trial/{nct_id}",
            "export": "/api/export/csv",
        },
    }


@app.get("/health")
def health_check():
    return {"status": "healthy"}
