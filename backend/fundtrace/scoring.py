"""
scoring.py – Suspicion scoring engine.

Scoring model
-------------
1. Pattern contributions  – additive weight per detected label (config.py)
2. Multi-pattern bonus    – +10 at 3+ distinct labels, another +10 at 5+
3. Ring bonus             – +5 per ring membership, capped at +15
4. Pass-through bonus     – sent/received within 60–95% of each other
                             (receive-and-forward mule behaviour)
5. Merchant suppression   – busy accounts with balanced flow look like
                             legitimate businesses
6. Payroll suppression    – busy outbound-only accounts look like payroll

Scores are capped at 100.0 and rounded to one decimal.  The scorer is a pure
function of its inputs.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Sequence

from .config import (
    SCORE_CYCLE_3, SCORE_CYCLE_4, SCORE_CYCLE_5,
    SCORE_FAN_IN, SCORE_FAN_OUT, SCORE_SMURFING_SOURCE,
    SCORE_SHELL, SCORE_LOW_ACTIVITY,
    SCORE_HIGH_VELOCITY, SCORE_STRUCTURING, SCORE_ROUND_TRIP, SCORE_DORMANT,
    SCORE_MULTI_PATTERN_BONUS, SCORE_RING_BONUS, SCORE_RING_BONUS_CAP,
    SCORE_PASS_THROUGH_BONUS, PASS_THROUGH_RATIO_LOW, PASS_THROUGH_RATIO_HIGH,
    MERCHANT_MIN_TX, MERCHANT_FLOW_RATIO, MERCHANT_PENALTY,
    PAYROLL_MIN_TX, PAYROLL_PENALTY,
    MIN_SUSPICION_SCORE, STANDALONE_RING_ID,
)
from .utils import RingAggregator

log = logging.getLogger(__name__)

PATTERN_SCORES: Dict[str, float] = {
    "cycle_length_3":            SCORE_CYCLE_3,
    "cycle_length_4":            SCORE_CYCLE_4,
    "cycle_length_5":            SCORE_CYCLE_5,
    "fan_in":                    SCORE_FAN_IN,
    "fan_out":                   SCORE_FAN_OUT,
    "smurfing_source":           SCORE_SMURFING_SOURCE,
    "layered_shell":             SCORE_SHELL,
    "low_activity_intermediary": SCORE_LOW_ACTIVITY,
    "high_velocity":             SCORE_HIGH_VELOCITY,
    "structuring":               SCORE_STRUCTURING,
    "round_trip":                SCORE_ROUND_TRIP,
    "dormant_activation":        SCORE_DORMANT,
}


def calc_suspicion_score(
    patterns: Sequence[str],
    ring_count: int,
    tx_count: int,
    total_sent: float,
    total_received: float,
) -> float:
    """
    Combine an account's labels, ring memberships and flow into a 0–100 score.
    """
    labels = set(patterns)
    score = sum(PATTERN_SCORES.get(p, 0.0) for p in labels)

    # Diverse fraud signals
    if len(labels) >= 3:
        score += SCORE_MULTI_PATTERN_BONUS
    if len(labels) >= 5:
        score += SCORE_MULTI_PATTERN_BONUS

    score += min(ring_count * SCORE_RING_BONUS, SCORE_RING_BONUS_CAP)

    # Pass-through: receives and forwards similar (not identical) amounts
    if total_sent > 0 and total_received > 0:
        flow_ratio = min(total_sent, total_received) / max(total_sent, total_received)
        if PASS_THROUGH_RATIO_LOW < flow_ratio < PASS_THROUGH_RATIO_HIGH and tx_count >= 3:
            score += SCORE_PASS_THROUGH_BONUS

    # High-volume merchant filter
    if tx_count > MERCHANT_MIN_TX:
        ratio = min(total_sent, total_received) / max(total_sent, total_received, 1)
        if ratio > MERCHANT_FLOW_RATIO:
            score = max(score - MERCHANT_PENALTY, 0.0)

    # Payroll filter: outbound-only with many transactions
    if total_received == 0 and tx_count > PAYROLL_MIN_TX:
        score = max(score - PAYROLL_PENALTY, 0.0)

    return round(min(score, 100.0), 1)


def score_accounts(
    aggregator: RingAggregator,
    stats: Dict[str, Dict],
) -> List[Dict]:
    """
    Score every flagged account and keep those at or above MIN_SUSPICION_SCORE.

    Parameters
    ----------
    aggregator : RingAggregator holding ring memberships and labels of the run
    stats      : per-account tx_count / total_sent / total_received

    Returns
    -------
    list of suspicious-account dicts in encounter order (unsorted)
    """
    accounts: List[Dict] = []
    flagged = aggregator.flagged_accounts()
    for acc in flagged:
        patterns = aggregator.account_patterns[acc]
        s = stats.get(acc, {})
        score = calc_suspicion_score(
            patterns,
            len(aggregator.account_rings.get(acc, [])),
            s.get("tx_count", 0),
            s.get("total_sent", 0.0),
            s.get("total_received", 0.0),
        )
        if score < MIN_SUSPICION_SCORE:
            continue
        accounts.append({
            "account_id":        acc,
            "suspicion_score":   score,
            "detected_patterns": list(patterns),
            "ring_id":           aggregator.primary_ring(acc, STANDALONE_RING_ID),
        })

    log.info("Scoring complete: %d accounts scored, %d above threshold",
             len(flagged), len(accounts))
    return accounts
