"""
structuring_detector.py – Detect amount structuring (sub-threshold transactions).

Structuring is when a launderer breaks a single large transfer into multiple
smaller transfers that each fall just below a regulatory reporting threshold.

Each reporting threshold T defines a band [T - STRUCTURING_MARGIN, T).  A send
is counted once per band it falls into, so a transaction inside two
overlapping bands counts twice.  Senders reaching STRUCTURING_MIN_TX counted
sends are flagged.
"""
from __future__ import annotations

import logging
from typing import Dict, List

import pandas as pd

from .config import (
    STRUCTURING_THRESHOLDS,
    STRUCTURING_MARGIN,
    STRUCTURING_MIN_TX,
)

log = logging.getLogger(__name__)


def detect_structuring(df: pd.DataFrame) -> Dict[str, List[str]]:
    """
    Detect accounts with suspicious sub-threshold sending patterns.

    Returns
    -------
    dict mapping sender account_id to ["structuring"].
    """
    flagged: Dict[str, List[str]] = {}

    if df.empty:
        return flagged

    hits = pd.Series(0, index=df.index)
    for threshold in STRUCTURING_THRESHOLDS:
        in_band = (df["amount"] >= threshold - STRUCTURING_MARGIN) & (df["amount"] < threshold)
        hits = hits + in_band.astype(int)

    # Group by sender – structuring is about how you SEND money
    per_sender = hits.groupby(df["sender_id"], sort=False).sum()
    for sender, count in per_sender.items():
        if count >= STRUCTURING_MIN_TX:
            flagged[sender] = ["structuring"]

    log.info("Structuring detection: %d accounts flagged", len(flagged))
    return flagged
