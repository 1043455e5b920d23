"""
sample_data.py – Demo dataset with embedded laundering patterns.

Background noise: 80 random transfers among 30 ordinary accounts over a week.
Embedded patterns:
  • 3-cycle      ACC_00101 → ACC_00102 → ACC_00103 → ACC_00101
  • fan-in       ACC_00201..ACC_00205 → ACC_00200 within 48h
  • fan-out      ACC_00200 → ACC_00210..ACC_00212 some 50–60h later
  • shell chain  ACC_00301 → ACC_00302 → ACC_00303 → ACC_00304
"""
from __future__ import annotations

import csv
import io
import random
from datetime import datetime, timedelta
from typing import Optional

BASE_TIME = datetime(2024, 6, 1, 8, 0, 0)
HEADER = ["transaction_id", "sender_id", "receiver_id", "amount", "timestamp"]

CYCLE_ACCOUNTS = ["ACC_00101", "ACC_00102", "ACC_00103"]
SMURF_HUB = "ACC_00200"
SMURF_SOURCES = [f"ACC_{i:05d}" for i in range(201, 206)]
SMURF_TARGETS = [f"ACC_{i:05d}" for i in range(210, 213)]
SHELL_ACCOUNTS = ["ACC_00301", "ACC_00302", "ACC_00303", "ACC_00304"]


def _fmt(ts: datetime) -> str:
    return ts.strftime("%Y-%m-%d %H:%M:%S")


def generate_sample_csv(seed: Optional[int] = None) -> str:
    """Return sample transactions as CSV text (header included)."""
    rng = random.Random(seed)
    rows = []

    def _add(sender: str, receiver: str, amount: float, ts: datetime) -> None:
        rows.append([f"TXN_{len(rows) + 1:05d}", sender, receiver, f"{amount:.2f}", _fmt(ts)])

    # Normal transactions
    normal = [f"ACC_{i:05d}" for i in range(1, 31)]
    for _ in range(80):
        sender = rng.choice(normal)
        receiver = rng.choice(normal)
        while receiver == sender:
            receiver = rng.choice(normal)
        ts = BASE_TIME + timedelta(seconds=rng.random() * 7 * 24 * 3600)
        _add(sender, receiver, rng.random() * 5000 + 100, ts)

    # Cycle
    for i, acc in enumerate(CYCLE_ACCOUNTS):
        nxt = CYCLE_ACCOUNTS[(i + 1) % len(CYCLE_ACCOUNTS)]
        _add(acc, nxt, 2000 + rng.random() * 500, BASE_TIME + timedelta(hours=i))

    # Smurfing fan-in, then fan-out from the same hub
    for src in SMURF_SOURCES:
        ts = BASE_TIME + timedelta(seconds=rng.random() * 48 * 3600)
        _add(src, SMURF_HUB, 450 + rng.random() * 50, ts)
    for tgt in SMURF_TARGETS:
        ts = BASE_TIME + timedelta(hours=50) + timedelta(seconds=rng.random() * 10 * 3600)
        _add(SMURF_HUB, tgt, 700 + rng.random() * 100, ts)

    # Layered shell chain
    for i in range(len(SHELL_ACCOUNTS) - 1):
        ts = BASE_TIME + timedelta(hours=2 * (i + 1))
        _add(SHELL_ACCOUNTS[i], SHELL_ACCOUNTS[i + 1], 3000 + rng.random() * 1000, ts)

    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(HEADER)
    writer.writerows(rows)
    return buf.getvalue()
