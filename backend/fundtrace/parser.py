"""
parser.py – CSV parsing and validation.

Validates:
  • Required columns present
  • transaction_id / sender_id / receiver_id non-empty
  • amount numeric and > 0
  • timestamp parseable (YYYY-MM-DD HH:MM:SS with per-row fallback;
    offsets are converted to naive UTC)
  • Encoding auto-detection (UTF-8 / latin-1 fallback)

Invalid rows are dropped and counted.  If no valid row survives the file has
no usable data and a ValueError is raised.
"""
from __future__ import annotations

import io
import logging
from datetime import datetime, timezone
from typing import Iterable, Tuple

import pandas as pd

from .config import MAX_ROWS
from .models import Transaction

log = logging.getLogger(__name__)

# Column order of the frame handed to the analysis core.
COLUMNS = ["transaction_id", "sender_id", "receiver_id", "amount", "timestamp"]
REQUIRED_COLUMNS = frozenset(COLUMNS)

_TS_FORMATS = ["%Y-%m-%d %H:%M:%S", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%d %H:%M"]


def _decode_bytes(raw: bytes) -> str:
    """Try UTF-8, then latin-1 fallback."""
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return raw.decode("latin-1", errors="replace")


def _parse_timestamps(series: pd.Series) -> pd.Series:
    """
    Parse every row on its own terms; only unparseable rows become NaT.

    A single known format covering the whole column is the fast path.
    Otherwise each value is inferred separately, offsets are converted to
    UTC and the result is made naive again.
    """
    for fmt in _TS_FORMATS:
        parsed = pd.to_datetime(series, format=fmt, errors="coerce")
        if parsed.notna().all():
            return parsed
    parsed = pd.to_datetime(series, errors="coerce", format="mixed", utc=True)
    return parsed.dt.tz_convert(None)


def _utc_naive(ts: datetime) -> datetime:
    if ts.tzinfo is None:
        return ts
    return ts.astimezone(timezone.utc).replace(tzinfo=None)


def frame_from_transactions(transactions: Iterable[Transaction]) -> pd.DataFrame:
    """Build the analysis frame from already-validated Transaction records."""
    records = [t.model_dump() for t in transactions]
    df = pd.DataFrame.from_records(records, columns=COLUMNS)
    df["amount"] = df["amount"].astype(float)
    df["timestamp"] = pd.to_datetime([_utc_naive(ts) for ts in df["timestamp"]])
    return df


def parse_csv(file_bytes: bytes) -> Tuple[pd.DataFrame, dict]:
    """
    Parse and validate CSV bytes.

    Returns
    -------
    df    : pd.DataFrame  – cleaned, ready for analysis (ingestion order kept)
    stats : dict          – parse statistics and warnings

    Raises
    ------
    ValueError on fatal errors (unreadable CSV, missing columns, zero valid rows).
    """
    stats: dict = {
        "total_rows": 0,
        "valid_rows": 0,
        "dropped_rows": 0,
        "negative_amounts": 0,
        "warnings": [],
    }

    # 1. Decode & read ─────────────────────────────────────────────────────────
    text = _decode_bytes(file_bytes)

    # Comment lines ('#') and blank lines are not data rows.
    cleaned_lines = [
        line for line in text.splitlines()
        if line.strip() and not line.strip().startswith("#")
    ]
    cleaned_text = "\n".join(cleaned_lines)

    if not cleaned_text:
        raise ValueError("CSV file is empty – no rows found.")

    try:
        df = pd.read_csv(io.StringIO(cleaned_text), dtype=str, keep_default_na=False)
    except Exception as exc:
        raise ValueError(f"CSV parse error: {exc}") from exc

    stats["total_rows"] = len(df)
    log.info("CSV loaded: %d raw rows", len(df))

    if df.empty:
        raise ValueError("CSV file is empty – no rows found.")

    # 2. Normalise column names ────────────────────────────────────────────────
    df.columns = [str(c).strip().lower().replace(" ", "_") for c in df.columns]
    missing = REQUIRED_COLUMNS - set(df.columns)
    if missing:
        raise ValueError(
            f"Missing required columns: {sorted(missing)}. "
            f"Found: {sorted(df.columns.tolist())}"
        )
    df = df[COLUMNS].copy()

    # 3. Strip whitespace ──────────────────────────────────────────────────────
    for col in COLUMNS:
        df[col] = df[col].str.strip()

    # 4. Drop empty-field rows ─────────────────────────────────────────────────
    mask_empty = (
        df["transaction_id"].eq("") | df["sender_id"].eq("") |
        df["receiver_id"].eq("") | df["amount"].eq("") | df["timestamp"].eq("")
    )
    n_empty = int(mask_empty.sum())
    if n_empty:
        stats["warnings"].append(f"Dropped {n_empty} rows with empty fields.")
    df = df[~mask_empty].copy()

    # 5. Parse & validate amount ───────────────────────────────────────────────
    df["amount"] = pd.to_numeric(df["amount"], errors="coerce")
    bad = df["amount"].isna()
    if bad.any():
        stats["warnings"].append(f"Dropped {int(bad.sum())} rows with non-numeric amount.")
        df = df[~bad].copy()

    neg = df["amount"] <= 0
    stats["negative_amounts"] = int(neg.sum())
    if stats["negative_amounts"]:
        stats["warnings"].append(
            f"Dropped {stats['negative_amounts']} rows with non-positive amount."
        )
        df = df[~neg].copy()
    df["amount"] = df["amount"].astype(float)

    # 6. Parse timestamps ──────────────────────────────────────────────────────
    if not df.empty:
        df["timestamp"] = _parse_timestamps(df["timestamp"])
        bad_ts = df["timestamp"].isna()
        if bad_ts.any():
            stats["warnings"].append(
                f"Dropped {int(bad_ts.sum())} rows with unparseable timestamp."
            )
            df = df[~bad_ts].copy()

    # 7. Row limit ─────────────────────────────────────────────────────────────
    if len(df) > MAX_ROWS:
        stats["warnings"].append(
            f"Dataset truncated from {len(df)} to {MAX_ROWS} rows."
        )
        df = df.head(MAX_ROWS).copy()

    if df.empty:
        raise ValueError(
            "No valid transactions found. Check CSV format. "
            f"Issues: {'; '.join(stats['warnings']) or 'unknown'}"
        )

    df = df.reset_index(drop=True)
    stats["valid_rows"] = len(df)
    stats["dropped_rows"] = stats["total_rows"] - len(df)
    log.info("Parse complete: %d valid / %d total rows", stats["valid_rows"], stats["total_rows"])
    return df, stats
