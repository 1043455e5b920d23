import pandas as pd
import pytest

from fundtrace.parser import parse_csv
from fundtrace.pipeline import analyze_transactions, run_analysis
from fundtrace.sample_data import (
    generate_sample_csv, CYCLE_ACCOUNTS, SMURF_HUB, SMURF_SOURCES, SHELL_ACCOUNTS,
)


@pytest.fixture(params=[1, 7, 42])
def sample_df(request) -> pd.DataFrame:
    df, _ = parse_csv(generate_sample_csv(seed=request.param).encode("utf-8"))
    return df


def test_sample_dataset_end_to_end(sample_df):
    result = analyze_transactions(sample_df)
    rings = result["fraud_rings"]
    types = {r["pattern_type"] for r in rings}

    assert {"cycle", "smurfing", "layered_shell"} <= types
    assert result["suspicious_accounts"]

    scores = [a["suspicion_score"] for a in result["suspicious_accounts"]]
    assert all(a >= b for a, b in zip(scores, scores[1:]))


def test_sample_embedded_patterns(sample_df):
    result = analyze_transactions(sample_df)
    rings = result["fraud_rings"]

    cycle_sets = [set(r["member_accounts"]) for r in rings if r["pattern_type"] == "cycle"]
    assert set(CYCLE_ACCOUNTS) in cycle_sets

    shell = [r for r in rings if r["member_accounts"] == SHELL_ACCOUNTS]
    assert len(shell) == 1
    assert shell[0]["pattern_type"] == "layered_shell"
    assert shell[0]["risk_score"] == 87.0

    smurf = next(r for r in rings if r["pattern_type"] == "smurfing")
    assert smurf["risk_score"] == 80.0
    assert {SMURF_HUB, *SMURF_SOURCES} <= set(smurf["member_accounts"])

    flagged = {a["account_id"]: a for a in result["suspicious_accounts"]}
    assert "fan_in" in flagged[SMURF_HUB]["detected_patterns"]
    assert "fan_out" in flagged[SMURF_HUB]["detected_patterns"]


def test_ring_ids_are_sequential_by_type(sample_df):
    rings = analyze_transactions(sample_df)["fraud_rings"]
    order = {"cycle": 0, "smurfing": 1, "layered_shell": 2}

    assert [r["ring_id"] for r in rings] == [f"RING_{i:03d}" for i in range(1, len(rings) + 1)]
    kinds = [order[r["pattern_type"]] for r in rings]
    assert kinds == sorted(kinds)


def test_summary_counts(sample_df):
    result = analyze_transactions(sample_df)
    summary = result["summary"]
    accounts = set(sample_df["sender_id"]) | set(sample_df["receiver_id"])

    assert summary["total_accounts_analyzed"] == len(accounts)
    assert summary["suspicious_accounts_flagged"] == len(result["suspicious_accounts"])
    assert summary["fraud_rings_detected"] == len(result["fraud_rings"])
    assert summary["processing_time_seconds"] >= 0
    assert sum(b["count"] for b in summary["risk_distribution"]) == len(result["suspicious_accounts"])


def test_sample_is_reproducible_with_seed():
    assert generate_sample_csv(seed=3) == generate_sample_csv(seed=3)


def test_cycle_scenario(cycle_df):
    result = analyze_transactions(cycle_df)

    assert result["fraud_rings"] == [{
        "ring_id": "RING_001",
        "member_accounts": ["A", "B", "C"],
        "pattern_type": "cycle",
        "risk_score": 85.0,
    }]
    # 30 for the cycle + 5 for the ring, pass-through bonus needs 3+ transactions
    assert [(a["account_id"], a["suspicion_score"], a["ring_id"])
            for a in result["suspicious_accounts"]] == [
        ("A", 35.0, "RING_001"), ("B", 35.0, "RING_001"), ("C", 35.0, "RING_001"),
    ]


def test_shell_scenario(shell_df):
    result = analyze_transactions(shell_df)

    assert result["fraud_rings"] == [{
        "ring_id": "RING_001",
        "member_accounts": ["A", "B", "C", "D"],
        "pattern_type": "layered_shell",
        "risk_score": 87.0,
    }]
    flagged = {a["account_id"]: a for a in result["suspicious_accounts"]}
    assert flagged["B"]["detected_patterns"] == ["layered_shell", "low_activity_intermediary"]
    # interior accounts outrank the endpoints; ties keep encounter order
    assert [a["account_id"] for a in result["suspicious_accounts"]] == ["B", "C", "A", "D"]


def test_standalone_account(make_df):
    df = make_df([("X", "A", 9600, 0), ("X", "B", 9700, 30), ("X", "C", 9800, 60)])
    result = analyze_transactions(df)

    assert result["fraud_rings"] == []
    assert result["suspicious_accounts"] == [{
        "account_id": "X",
        "suspicion_score": 22.0,
        "detected_patterns": ["structuring"],
        "ring_id": "STANDALONE",
    }]


def test_empty_input(make_df):
    result = analyze_transactions(make_df([]))

    assert result["suspicious_accounts"] == []
    assert result["fraud_rings"] == []
    assert result["summary"]["total_accounts_analyzed"] == 0


def test_graph_payload(cycle_df):
    result = run_analysis(cycle_df)
    graph = result["graph"]

    assert len(graph["edges"]) == 3
    nodes = {n["id"]: n for n in graph["nodes"]}
    assert nodes["A"]["suspicious"] is True
    assert nodes["A"]["ring_ids"] == ["RING_001"]
    assert nodes["A"]["total_sent"] == 500.0
    assert nodes["A"]["total_received"] == 480.0
    assert nodes["A"]["tx_count"] == 2


def test_runs_are_independent(cycle_df, shell_df):
    first = analyze_transactions(cycle_df)
    analyze_transactions(shell_df)
    again = analyze_transactions(cycle_df)

    assert first["fraud_rings"] == again["fraud_rings"]
    assert first["suspicious_accounts"] == again["suspicious_accounts"]
