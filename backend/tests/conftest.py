"""Shared fixtures: small transaction frames built from (sender, receiver, amount, hours) rows."""
from datetime import datetime, timedelta

import pandas as pd
import pytest

BASE = datetime(2024, 1, 1, 9, 0, 0)
COLUMNS = ["transaction_id", "sender_id", "receiver_id", "amount", "timestamp"]


def frame(rows) -> pd.DataFrame:
    """rows: iterable of (sender, receiver, amount, hours_after_base)."""
    records = [
        (f"TX{i:04d}", sender, receiver, float(amount), BASE + timedelta(hours=hours))
        for i, (sender, receiver, amount, hours) in enumerate(rows, start=1)
    ]
    df = pd.DataFrame(records, columns=COLUMNS)
    df["amount"] = df["amount"].astype(float)
    df["timestamp"] = pd.to_datetime(df["timestamp"])
    return df


@pytest.fixture
def make_df():
    return frame


@pytest.fixture
def cycle_df() -> pd.DataFrame:
    return frame([
        ("A", "B", 500, 0),
        ("B", "C", 490, 1),
        ("C", "A", 480, 2),
    ])


@pytest.fixture
def shell_df() -> pd.DataFrame:
    """A → B → C → D where B and C only pass money along."""
    return frame([
        ("A", "B", 3000, 0),
        ("B", "C", 2950, 2),
        ("C", "D", 2900, 4),
    ])
