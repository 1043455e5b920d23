"""
main.py – FastAPI application entry point.

Endpoints
---------
GET  /            – service banner
GET  /health      – liveness / readiness probe with version info
POST /analyze     – upload CSV, run full forensics pipeline, return JSON
GET  /sample      – run the pipeline on a generated demo dataset
GET  /sample.csv  – download the generated demo dataset

Production concerns addressed
------------------------------
- Structured logging (INFO level)
- File-size guard before parsing the upload
- Request-ID header injected into every response for traceability
- parse_stats returned so callers know about dropped rows / warnings
- CORS locked to env-configurable origins
"""
from __future__ import annotations

import logging
import uuid

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, UploadFile, File, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from . import __version__
from .config import MAX_FILE_SIZE_BYTES, CORS_ORIGINS
from .models import AnalysisResult
from .parser import parse_csv
from .pipeline import run_analysis
from .sample_data import generate_sample_csv

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-8s %(name)s │ %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S",
)
log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info("Fundtrace v%s starting up", __version__)
    yield
    log.info("Fundtrace shutting down")


# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Fundtrace",
    description="Detect money-laundering rings through transaction-graph analysis",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Request-ID middleware
# ---------------------------------------------------------------------------
@app.middleware("http")
async def add_request_id(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


def _analyze_bytes(file_bytes: bytes, source: str) -> dict:
    """Parse → analyse → attach parse_stats.  ValueError means no usable data."""
    try:
        df, parse_stats = parse_csv(file_bytes)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    if parse_stats.get("warnings"):
        log.warning("Parse warnings for %s: %s", source, parse_stats["warnings"])

    result = run_analysis(df)
    result["parse_stats"] = parse_stats
    log.info(
        "Analysis of %s: %d valid rows, %d rings, %d flagged accounts",
        source,
        parse_stats["valid_rows"],
        result["summary"]["fraud_rings_detected"],
        result["summary"]["suspicious_accounts_flagged"],
    )
    return result


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------
@app.get("/", include_in_schema=False)
def root():
    return {"status": "ok", "service": "Fundtrace", "version": __version__}


@app.get("/health")
def health():
    """Liveness / readiness probe."""
    return {
        "status": "healthy",
        "version": __version__,
        "max_file_size_mb": MAX_FILE_SIZE_BYTES // (1024 * 1024),
    }


@app.post("/analyze", response_model=AnalysisResult)
async def analyze(file: UploadFile = File(...)):
    """
    Upload a CSV of financial transactions and receive a forensic analysis.

    Expected CSV columns: transaction_id, sender_id, receiver_id, amount, timestamp
    """
    if not (file.filename or "").lower().endswith(".csv"):
        raise HTTPException(status_code=400, detail="Only CSV files are accepted.")

    file_bytes = await file.read()

    if len(file_bytes) > MAX_FILE_SIZE_BYTES:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum size is {MAX_FILE_SIZE_BYTES // (1024*1024)} MB.",
        )

    return _analyze_bytes(file_bytes, file.filename)


@app.get("/sample", response_model=AnalysisResult)
def sample(seed: Optional[int] = None):
    """Analyse a freshly generated demo dataset."""
    return _analyze_bytes(generate_sample_csv(seed).encode("utf-8"), "sample.csv")


@app.get("/sample.csv", response_class=PlainTextResponse)
def sample_csv(seed: Optional[int] = None):
    return PlainTextResponse(generate_sample_csv(seed), media_type="text/csv")
