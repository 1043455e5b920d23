"""
utils.py – Time-window helpers & ring aggregation.

Anchor windows
--------------
Several detectors scan every transaction of an account as a window anchor
and look at the transactions inside [anchor, anchor + window].  On a
time-sorted series both bounds come out of one vectorised searchsorted call.

Ring aggregation
----------------
RingAggregator owns the state of a single analysis run: the ring-id counter,
the ring list, each account's ring memberships (in creation order) and each
account's pattern labels.  Rings must be added cycles → smurfing → shells so
ring ids and "first ring wins" stay stable.
"""
from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Tuple

import numpy as np
import pandas as pd

from .config import (
    CYCLE_RING_BASE, CYCLE_RING_PER_NODE,
    SHELL_RING_BASE, SHELL_RING_PER_NODE, SHELL_MAX_TX,
    SMURF_MIN_RING_MEMBERS, SMURF_RING_RISK,
)

log = logging.getLogger(__name__)


def anchor_windows(times: pd.Series, window: pd.Timedelta) -> Tuple[np.ndarray, np.ndarray]:
    """
    For a time-sorted series, return (lo, hi) index arrays such that
    times[lo[i]:hi[i]] are exactly the entries within [times[i], times[i] + window].
    """
    times = times.reset_index(drop=True)
    lo = times.searchsorted(times, side="left")
    hi = times.searchsorted(times + window, side="right")
    return np.asarray(lo), np.asarray(hi)


def add_label(labels: Dict[str, List[str]], account: str, label: str) -> None:
    """Attach label to account once, keeping first-seen order."""
    existing = labels.setdefault(account, [])
    if label not in existing:
        existing.append(label)


class RingAggregator:
    """
    Turns raw detector output into FraudRing records and per-account label sets.

    Scoped to one analysis run; create a new instance per run.
    """

    def __init__(self, tx_counts: Dict[str, int]):
        self.tx_counts = tx_counts
        self.rings: List[Dict] = []
        self.account_rings: Dict[str, List[str]] = {}
        self.account_patterns: Dict[str, List[str]] = {}
        self._counter = 0

    def _new_ring(self, members: List[str], pattern_type: str, risk_score: float) -> str:
        self._counter += 1
        ring_id = f"RING_{self._counter:03d}"
        self.rings.append({
            "ring_id":         ring_id,
            "member_accounts": list(members),
            "pattern_type":    pattern_type,
            "risk_score":      float(min(risk_score, 100.0)),
        })
        for acc in members:
            self.account_rings.setdefault(acc, []).append(ring_id)
        return ring_id

    def add_cycles(self, cycles: Iterable[List[str]]) -> None:
        for cycle in cycles:
            self._new_ring(cycle, "cycle", CYCLE_RING_BASE + CYCLE_RING_PER_NODE * len(cycle))
            label = f"cycle_length_{len(cycle)}"
            for acc in cycle:
                add_label(self.account_patterns, acc, label)

    def add_smurfing(self, smurf_labels: Dict[str, List[str]]) -> None:
        """One shared smurfing ring, only when at least two accounts are involved."""
        members = list(smurf_labels)
        if len(members) < SMURF_MIN_RING_MEMBERS:
            if members:
                log.info("Smurfing: %d flagged account(s), below ring minimum", len(members))
            return
        self._new_ring(members, "smurfing", SMURF_RING_RISK)
        self.add_labels(smurf_labels)

    def add_shells(self, chains: Iterable[List[str]]) -> None:
        for chain in chains:
            self._new_ring(chain, "layered_shell", SHELL_RING_BASE + SHELL_RING_PER_NODE * len(chain))
            last = len(chain) - 1
            for idx, acc in enumerate(chain):
                add_label(self.account_patterns, acc, "layered_shell")
                if 0 < idx < last and self.tx_counts.get(acc, 0) <= SHELL_MAX_TX:
                    add_label(self.account_patterns, acc, "low_activity_intermediary")

    def add_labels(self, labels: Dict[str, List[str]], track: bool = False) -> None:
        """
        Merge ring-less detector labels.  With track=True the accounts are also
        entered into the membership index (with no ring) so they keep their
        encounter position in the output.
        """
        for acc, pats in labels.items():
            for p in pats:
                add_label(self.account_patterns, acc, p)
            if track:
                self.account_rings.setdefault(acc, [])

    def flagged_accounts(self) -> List[str]:
        """Accounts carrying at least one label, in encounter order."""
        ordered = list(self.account_rings)
        seen = set(ordered)
        ordered += [a for a in self.account_patterns if a not in seen]
        return [a for a in ordered if self.account_patterns.get(a)]

    def primary_ring(self, account: str, default: str) -> str:
        rings = self.account_rings.get(account)
        return rings[0] if rings else default
