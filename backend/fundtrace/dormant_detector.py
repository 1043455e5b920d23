"""
dormant_detector.py – Detect dormant account activation.

An account that sits mostly idle and then concentrates nearly all of its
activity into a short burst is a classic sign of a bought or hijacked
account.  Flagged when:

  • the dataset spans at least DORMANT_MIN_DATASET_DAYS (else skipped),
  • the account has ≥ DORMANT_MIN_TX transactions (sent + received),
  • its own activity spans more than DORMANT_SPAN_MULTIPLIER × burst window,
  • some window [anchor, anchor + DORMANT_BURST_HOURS] holds at least
    DORMANT_BURST_SHARE of all its transactions.
"""
from __future__ import annotations

import logging
import math
from typing import Dict, List

import numpy as np
import pandas as pd

from .config import (
    DORMANT_MIN_DATASET_DAYS,
    DORMANT_MIN_TX,
    DORMANT_BURST_HOURS,
    DORMANT_BURST_SHARE,
    DORMANT_SPAN_MULTIPLIER,
)
from .utils import anchor_windows

log = logging.getLogger(__name__)


def _account_legs(df_sorted: pd.DataFrame) -> pd.DataFrame:
    """
    One row per (account, transaction) participation, in time order with the
    sender leg of a transaction ahead of its receiver leg.
    """
    pos = np.arange(len(df_sorted))
    legs = pd.concat([
        pd.DataFrame({
            "account":   df_sorted["sender_id"].to_numpy(),
            "timestamp": df_sorted["timestamp"],
            "_seq":      pos * 2,
        }),
        pd.DataFrame({
            "account":   df_sorted["receiver_id"].to_numpy(),
            "timestamp": df_sorted["timestamp"],
            "_seq":      pos * 2 + 1,
        }),
    ], ignore_index=True)
    return legs.sort_values("_seq", kind="stable")


def detect_dormant_activation(df: pd.DataFrame) -> Dict[str, List[str]]:
    """
    Returns
    -------
    dict mapping account_id to ["dormant_activation"].
    """
    flagged: Dict[str, List[str]] = {}

    if df.empty:
        return flagged

    df_sorted = df.sort_values("timestamp", kind="stable").reset_index(drop=True)
    total_span = df_sorted["timestamp"].iloc[-1] - df_sorted["timestamp"].iloc[0]
    if total_span < pd.Timedelta(days=DORMANT_MIN_DATASET_DAYS):
        log.info("Dormant detection skipped: dataset spans only %s", total_span)
        return flagged

    burst = pd.Timedelta(hours=DORMANT_BURST_HOURS)
    min_span = burst * DORMANT_SPAN_MULTIPLIER

    for acc, grp in _account_legs(df_sorted).groupby("account", sort=False):
        n = len(grp)
        if n < DORMANT_MIN_TX:
            continue
        times = grp["timestamp"]
        if times.iloc[-1] - times.iloc[0] <= min_span:
            continue
        needed = math.ceil(n * DORMANT_BURST_SHARE)
        lo, hi = anchor_windows(times, burst)
        if ((hi - lo) >= needed).any():
            flagged[acc] = ["dormant_activation"]

    log.info("Dormant activation detection: %d accounts flagged", len(flagged))
    return flagged
