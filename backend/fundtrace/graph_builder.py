"""
graph_builder.py – Build a labelled directed graph from transaction data.
Uses vectorised pandas aggregation for the per-account statistics.

Node order matters downstream (cycle/shell search start order): accounts are
inserted in order of first appearance as a sender, followed by receive-only
accounts in order of first appearance.  Successors keep the order in which
each counterparty was first paid.
"""
from __future__ import annotations

import logging
from typing import Dict

import networkx as nx
import pandas as pd

log = logging.getLogger(__name__)


def build_graph(df: pd.DataFrame) -> nx.DiGraph:
    """
    Construct a directed graph from a validated transaction DataFrame.

    An edge (A, B) exists iff at least one transaction has sender A and
    receiver B.

    Node attributes
    ---------------
    total_sent, total_received, net_flow : float
    tx_count, sent_count, received_count : int
    first_tx, last_tx                    : pd.Timestamp | None

    Edge attributes
    ---------------
    total_amount : float
    tx_count     : int
    """
    G = nx.DiGraph()
    if df.empty:
        log.info("Graph built: 0 nodes, 0 edges")
        return G

    # ── Node ordering ──────────────────────────────────────────────────────────
    senders = pd.unique(df["sender_id"])
    sender_set = set(senders)
    receive_only = [a for a in pd.unique(df["receiver_id"]) if a not in sender_set]
    all_accounts = pd.Index(list(senders) + receive_only)

    # ── Vectorised node statistics ─────────────────────────────────────────────
    sent_stats = df.groupby("sender_id").agg(
        total_sent=("amount", "sum"),
        sent_count=("amount", "count"),
        sent_first=("timestamp", "min"),
        sent_last=("timestamp", "max"),
    )
    recv_stats = df.groupby("receiver_id").agg(
        total_received=("amount", "sum"),
        received_count=("amount", "count"),
        recv_first=("timestamp", "min"),
        recv_last=("timestamp", "max"),
    )
    s = sent_stats.reindex(all_accounts)
    r = recv_stats.reindex(all_accounts)

    first_ts = pd.concat([s["sent_first"], r["recv_first"]], axis=1).min(axis=1)
    last_ts = pd.concat([s["sent_last"], r["recv_last"]], axis=1).max(axis=1)

    node_df = pd.DataFrame({
        "total_sent":     s["total_sent"].fillna(0.0),
        "total_received": r["total_received"].fillna(0.0),
        "sent_count":     s["sent_count"].fillna(0).astype(int),
        "received_count": r["received_count"].fillna(0).astype(int),
        "first_tx":       first_ts,
        "last_tx":        last_ts,
    }, index=all_accounts)
    node_df["tx_count"] = node_df["sent_count"] + node_df["received_count"]
    node_df["net_flow"] = node_df["total_received"] - node_df["total_sent"]

    G.add_nodes_from([
        (row.Index, {
            "total_sent":     float(row.total_sent),
            "total_received": float(row.total_received),
            "net_flow":       float(row.net_flow),
            "tx_count":       int(row.tx_count),
            "sent_count":     int(row.sent_count),
            "received_count": int(row.received_count),
            "first_tx":       row.first_tx,
            "last_tx":        row.last_tx,
        })
        for row in node_df.itertuples()
    ])

    # ── Edges ──────────────────────────────────────────────────────────────────
    # groupby(sort=False) keeps first-appearance order of each (sender, receiver)
    # pair, which becomes each node's successor order.
    edge_stats = df.groupby(["sender_id", "receiver_id"], sort=False).agg(
        total_amount=("amount", "sum"),
        tx_count=("amount", "count"),
    ).reset_index()

    G.add_edges_from([
        (row.sender_id, row.receiver_id, {
            "total_amount": float(row.total_amount),
            "tx_count":     int(row.tx_count),
        })
        for row in edge_stats.itertuples(index=False)
    ])

    log.info("Graph built: %d nodes, %d edges", G.number_of_nodes(), G.number_of_edges())
    return G


def account_stats(G: nx.DiGraph) -> Dict[str, Dict]:
    """Per-account aggregates used by scoring: tx_count, total_sent, total_received."""
    return {
        node: {
            "tx_count":       attrs.get("tx_count", 0),
            "total_sent":     attrs.get("total_sent", 0.0),
            "total_received": attrs.get("total_received", 0.0),
        }
        for node, attrs in G.nodes(data=True)
    }
