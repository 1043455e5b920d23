"""
velocity_detector.py – Detect rapid-fire outgoing transfers.

Mules emptying an account tend to push several transfers out within minutes.
For each sender, every outgoing transaction (chronological order) is tried as
a window anchor; if VELOCITY_MIN_TX or more sends fall within
[anchor, anchor + VELOCITY_WINDOW_MINUTES] the sender is flagged and no
further anchors are examined.
"""
from __future__ import annotations

import logging
from typing import Dict, List

import pandas as pd

from .config import VELOCITY_WINDOW_MINUTES, VELOCITY_MIN_TX
from .utils import anchor_windows

log = logging.getLogger(__name__)


def detect_high_velocity(df: pd.DataFrame) -> Dict[str, List[str]]:
    """
    Returns
    -------
    dict mapping sender account_id to ["high_velocity"].
    """
    flagged: Dict[str, List[str]] = {}

    if df.empty:
        return flagged

    window = pd.Timedelta(minutes=VELOCITY_WINDOW_MINUTES)
    df_sorted = df.sort_values("timestamp", kind="stable")

    for sender, grp in df_sorted.groupby("sender_id", sort=False):
        if len(grp) < VELOCITY_MIN_TX:
            continue
        lo, hi = anchor_windows(grp["timestamp"], window)
        counts = hi - lo
        # first qualifying anchor is enough
        if (counts >= VELOCITY_MIN_TX).any():
            flagged[sender] = ["high_velocity"]

    log.info("High-velocity detection: %d accounts flagged", len(flagged))
    return flagged
