"""
smurf_detector.py – Detect smurfing patterns (fan-in / fan-out).

Smurfing
--------
  Fan-in  : FAN_THRESHOLD+ unique senders → 1 receiver within a 72-hour window.
            The receiver is labelled fan_in, every sender inside a qualifying
            window is labelled smurfing_source.
  Fan-out : 1 sender → FAN_THRESHOLD+ unique receivers within a 72-hour window.
            The sender is labelled fan_out.

Every transaction of an account is tried as a window anchor, and every
qualifying window contributes its counterparties, not just the first one.
"""
from __future__ import annotations

import logging
from typing import Dict, List

import pandas as pd

from .config import FAN_THRESHOLD, SMURF_WINDOW_HOURS
from .utils import add_label, anchor_windows

log = logging.getLogger(__name__)


def _qualifying_counterparties(
    grp: pd.DataFrame, counterpart_col: str, window: pd.Timedelta
) -> List[List[str]]:
    """Unique counterparties of every anchor window reaching FAN_THRESHOLD."""
    counterparts = grp[counterpart_col].tolist()
    lo, hi = anchor_windows(grp["timestamp"], window)
    hits = []
    for start, end in zip(lo, hi):
        unique = list(dict.fromkeys(counterparts[start:end]))
        if len(unique) >= FAN_THRESHOLD:
            hits.append(unique)
    return hits


def detect_smurfing(df: pd.DataFrame) -> Dict[str, List[str]]:
    """
    Detect fan-in and fan-out smurfing patterns.

    Returns
    -------
    dict mapping account_id to its smurfing labels
    ("fan_in", "fan_out", "smurfing_source"), in discovery order.
    """
    labels: Dict[str, List[str]] = {}
    if df.empty:
        return labels

    window = pd.Timedelta(hours=SMURF_WINDOW_HOURS)
    df_s = df.sort_values("timestamp", kind="stable")

    # ── Fan-in: many senders → one receiver ────────────────────────────────
    for receiver, grp in df_s.groupby("receiver_id", sort=False):
        for senders in _qualifying_counterparties(grp, "sender_id", window):
            add_label(labels, receiver, "fan_in")
            for sender in senders:
                add_label(labels, sender, "smurfing_source")

    # ── Fan-out: one sender → many receivers ────────────────────────────────
    for sender, grp in df_s.groupby("sender_id", sort=False):
        if _qualifying_counterparties(grp, "receiver_id", window):
            add_label(labels, sender, "fan_out")

    log.info("Smurfing detection: %d accounts flagged (fan-in + fan-out)", len(labels))
    return labels
