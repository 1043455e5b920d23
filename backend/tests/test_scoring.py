import pytest

from fundtrace.scoring import calc_suspicion_score, score_accounts
from fundtrace.utils import RingAggregator


def test_single_cycle_member():
    # balanced flow (ratio 1.0) earns no pass-through bonus
    assert calc_suspicion_score(["cycle_length_3"], 1, 2, 500.0, 500.0) == 35.0


@pytest.mark.parametrize("labels, expected", [
    (["fan_in", "fan_out"], 40.0),
    (["fan_in", "fan_out", "smurfing_source"], 60.0),
    (["cycle_length_3", "fan_in", "fan_out", "high_velocity", "structuring"], 100.0),
    (["structuring", "round_trip", "dormant_activation", "high_velocity", "smurfing_source"], 100.0),
])
def test_multi_pattern_bonus(labels, expected):
    assert calc_suspicion_score(labels, 0, 1, 0.0, 0.0) == expected


def test_five_labels_stack_both_bonuses():
    labels = ["smurfing_source", "dormant_activation", "low_activity_intermediary",
              "high_velocity", "fan_in"]
    # 10 + 15 + 15 + 18 + 20 = 78, + 20 bonus
    assert calc_suspicion_score(labels, 0, 1, 0.0, 0.0) == 98.0


def test_ring_bonus_is_capped():
    assert calc_suspicion_score(["fan_in"], 2, 1, 0.0, 0.0) == 30.0
    assert calc_suspicion_score(["fan_in"], 7, 1, 0.0, 0.0) == 35.0


def test_pass_through_bonus():
    assert calc_suspicion_score(["layered_shell"], 0, 3, 80.0, 100.0) == 33.0
    # too few transactions
    assert calc_suspicion_score(["layered_shell"], 0, 2, 80.0, 100.0) == 25.0
    # near-identical flow is outside the band
    assert calc_suspicion_score(["layered_shell"], 0, 3, 96.0, 100.0) == 25.0


def test_merchant_suppression():
    # 25 transactions, sent/received ratio 0.5
    assert calc_suspicion_score(["fan_in"], 1, 25, 500.0, 1000.0) == 10.0
    assert calc_suspicion_score(["smurfing_source"], 0, 25, 500.0, 1000.0) == 0.0


def test_payroll_suppression():
    # 15 outgoing-only transactions
    assert calc_suspicion_score(["fan_out"], 1, 15, 9000.0, 0.0) == 5.0
    assert calc_suspicion_score(["high_velocity"], 0, 15, 9000.0, 0.0) == 0.0


def test_score_capped_at_100():
    labels = ["cycle_length_3", "cycle_length_4", "fan_in", "fan_out",
              "layered_shell", "structuring"]
    assert calc_suspicion_score(labels, 5, 4, 80.0, 100.0) == 100.0


def test_scoring_is_pure():
    args = (["round_trip", "structuring", "high_velocity"], 2, 6, 700.0, 1000.0)

    assert calc_suspicion_score(*args) == calc_suspicion_score(*args)


def test_score_accounts_threshold_and_standalone():
    agg = RingAggregator({"X": 3, "Y": 1, "Z": 1})
    agg.add_labels({"X": ["structuring"]})
    agg.add_labels({"Y": ["smurfing_source"]})
    agg.add_labels({"Z": ["dormant_activation"]}, track=True)
    stats = {
        "X": {"tx_count": 3, "total_sent": 28000.0, "total_received": 0.0},
        "Y": {"tx_count": 1, "total_sent": 100.0, "total_received": 0.0},
        "Z": {"tx_count": 5, "total_sent": 500.0, "total_received": 0.0},
    }
    accounts = score_accounts(agg, stats)

    assert [a["account_id"] for a in accounts] == ["Z", "X"]
    assert accounts[0] == {
        "account_id": "Z",
        "suspicion_score": 15.0,
        "detected_patterns": ["dormant_activation"],
        "ring_id": "STANDALONE",
    }
    assert accounts[1]["suspicion_score"] == 22.0


def test_score_accounts_walks_flagged_accounts_once(monkeypatch):
    agg = RingAggregator({"X": 3})
    agg.add_labels({"X": ["structuring"]})
    calls = []
    original = agg.flagged_accounts

    def counting():
        calls.append(1)
        return original()

    monkeypatch.setattr(agg, "flagged_accounts", counting)
    score_accounts(agg, {"X": {"tx_count": 3, "total_sent": 28000.0, "total_received": 0.0}})

    assert len(calls) == 1
