"""
bidirectional_detector.py – Detect round-trip (bi-directional) fund flows.

Flags account pairs where money goes A→B and comes back B→A with a similar
amount within ROUND_TRIP_WINDOW_DAYS.  This catches 2-node laundering loops
that the cycle detector skips (minimum cycle length = 3).

Every forward transaction is compared with every reverse transaction of the
pair; a single match within the time window whose smaller amount is at least
(1 - ROUND_TRIP_AMOUNT_TOLERANCE) of the larger flags both accounts.
"""
from __future__ import annotations

import logging
from typing import Dict, List

import numpy as np
import pandas as pd

from .config import ROUND_TRIP_AMOUNT_TOLERANCE, ROUND_TRIP_WINDOW_DAYS
from .utils import add_label

log = logging.getLogger(__name__)


def _any_round_trip(fwd: pd.DataFrame, rev: pd.DataFrame, window: pd.Timedelta) -> bool:
    """All-pairs comparison of forward vs reverse transactions."""
    f_amt = fwd["amount"].to_numpy()[:, None]
    r_amt = rev["amount"].to_numpy()[None, :]
    ratio = np.minimum(f_amt, r_amt) / np.maximum(f_amt, r_amt)

    f_ts = fwd["timestamp"].to_numpy(dtype="datetime64[ns]")[:, None]
    r_ts = rev["timestamp"].to_numpy(dtype="datetime64[ns]")[None, :]
    gap = np.abs(f_ts - r_ts)

    match = (gap <= window.to_timedelta64()) & (ratio >= 1.0 - ROUND_TRIP_AMOUNT_TOLERANCE)
    return bool(match.any())


def detect_round_trips(df: pd.DataFrame) -> Dict[str, List[str]]:
    """
    Detect bi-directional flows with similar amounts.

    Returns
    -------
    dict mapping account_id to ["round_trip"].
    """
    flagged: Dict[str, List[str]] = {}

    if df.empty:
        return flagged

    window = pd.Timedelta(days=ROUND_TRIP_WINDOW_DAYS)
    pairs = {key: grp for key, grp in df.groupby(["sender_id", "receiver_id"], sort=False)}

    for (a, b), fwd in pairs.items():
        rev = pairs.get((b, a))
        if rev is None:
            continue
        if _any_round_trip(fwd, rev, window):
            add_label(flagged, a, "round_trip")
            add_label(flagged, b, "round_trip")

    log.info("Round-trip detection: %d accounts flagged", len(flagged))
    return flagged
