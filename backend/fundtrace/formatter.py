"""
formatter.py – Produce the final API response.

JSON contract
-------------
{
  "suspicious_accounts": [{account_id, suspicion_score, detected_patterns, ring_id}],
  "fraud_rings":         [{ring_id, member_accounts, pattern_type, risk_score}],
  "summary":            {total_accounts_analyzed, suspicious_accounts_flagged,
                          fraud_rings_detected, processing_time_seconds,
                          pattern_breakdown, risk_distribution},
  "graph":              {nodes: [...], edges: [...]},     // optional
  "parse_stats":         {...}                            // optional
}

suspicious_accounts is sorted by suspicion_score descending; ties keep
encounter order.  fraud_rings keep creation order (ring id order).
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List

import pandas as pd

log = logging.getLogger(__name__)

# Fixed display order of the per-label breakdown.
PATTERN_LABELS: Dict[str, str] = {
    "cycle_length_3":            "3-node cycle",
    "cycle_length_4":            "4-node cycle",
    "cycle_length_5":            "5-node cycle",
    "fan_in":                    "Fan-in aggregator",
    "fan_out":                   "Fan-out disperser",
    "smurfing_source":           "Smurfing source",
    "layered_shell":             "Layered shell chain",
    "low_activity_intermediary": "Low-activity intermediary",
    "high_velocity":             "High velocity",
    "structuring":               "Structuring",
    "round_trip":                "Round trip",
    "dormant_activation":        "Dormant activation",
}

# (label, lower bound inclusive, upper bound exclusive; the last band is closed)
RISK_BANDS = [
    ("0–30", 0.0, 30.0),
    ("30–60", 30.0, 60.0),
    ("60–80", 60.0, 80.0),
    ("80–100", 80.0, 100.0),
]


def pattern_breakdown(suspicious_accounts: List[Dict]) -> List[Dict[str, Any]]:
    """Number of reported accounts carrying each detection label."""
    counts = {name: 0 for name in PATTERN_LABELS}
    for acc in suspicious_accounts:
        for p in acc["detected_patterns"]:
            if p in counts:
                counts[p] += 1
    return [
        {"name": name, "label": PATTERN_LABELS[name], "count": counts[name]}
        for name in PATTERN_LABELS
    ]


def risk_distribution(suspicious_accounts: List[Dict]) -> List[Dict[str, Any]]:
    """Bucket reported accounts by suspicion score band."""
    bands = []
    for label, low, high in RISK_BANDS:
        closed = high == RISK_BANDS[-1][2]
        count = sum(
            1 for a in suspicious_accounts
            if a["suspicion_score"] >= low
            and (a["suspicion_score"] <= high if closed else a["suspicion_score"] < high)
        )
        bands.append({"range": label, "count": count})
    return bands


def format_output(
    rings: List[Dict],
    suspicious_accounts: List[Dict],
    processing_time: float,
    total_accounts: int,
) -> Dict[str, Any]:
    """
    Build the AnalysisResult payload.

    Parameters
    ----------
    rings               : ring records from RingAggregator (creation order)
    suspicious_accounts : scored accounts in encounter order
    processing_time     : elapsed wall-clock seconds
    total_accounts      : distinct account count of the transaction set
    """
    # sorted() is stable, so equal scores keep encounter order
    ranked = sorted(suspicious_accounts, key=lambda a: a["suspicion_score"], reverse=True)
    fraud_rings = [dict(r, member_accounts=list(r["member_accounts"])) for r in rings]

    summary: Dict[str, Any] = {
        "total_accounts_analyzed":     total_accounts,
        "suspicious_accounts_flagged": len(ranked),
        "fraud_rings_detected":        len(fraud_rings),
        "processing_time_seconds":     round(processing_time, 3),
        "pattern_breakdown":           pattern_breakdown(ranked),
        "risk_distribution":           risk_distribution(ranked),
    }

    log.info(
        "Format complete: %d suspicious accounts, %d fraud rings",
        len(ranked),
        len(fraud_rings),
    )
    return {
        "suspicious_accounts": ranked,
        "fraud_rings":         fraud_rings,
        "summary":             summary,
    }


def build_graph_data(df: pd.DataFrame, result: Dict[str, Any]) -> Dict[str, List[Dict]]:
    """
    Visualisation payload: one node per account, one edge per transaction.
    """
    suspicious = {a["account_id"]: a for a in result["suspicious_accounts"]}
    nodes: Dict[str, Dict[str, Any]] = {}

    def _node(acc: str) -> Dict[str, Any]:
        if acc not in nodes:
            sa = suspicious.get(acc)
            nodes[acc] = {
                "id":                acc,
                "total_sent":        0.0,
                "total_received":    0.0,
                "tx_count":          0,
                "suspicious":        sa is not None,
                "ring_ids":          [sa["ring_id"]] if sa else [],
                "detected_patterns": list(sa["detected_patterns"]) if sa else [],
                "suspicion_score":   sa["suspicion_score"] if sa else 0.0,
            }
        return nodes[acc]

    edges: List[Dict[str, Any]] = []
    for row in df.itertuples(index=False):
        sender = _node(row.sender_id)
        receiver = _node(row.receiver_id)
        sender["total_sent"] += float(row.amount)
        sender["tx_count"] += 1
        receiver["total_received"] += float(row.amount)
        receiver["tx_count"] += 1
        edges.append({
            "source":         row.sender_id,
            "target":         row.receiver_id,
            "amount":         round(float(row.amount), 2),
            "transaction_id": row.transaction_id,
            "timestamp":      str(row.timestamp),
        })

    for nd in nodes.values():
        nd["total_sent"] = round(nd["total_sent"], 2)
        nd["total_received"] = round(nd["total_received"], 2)

    return {"nodes": list(nodes.values()), "edges": edges}
