"""
cycle_detector.py – Detect circular fund routing (money-mule rings).

Strategy
--------
Depth-limited DFS with an explicit path stack, started from every node in
graph order.  Only simple cycles are explored (a node is never revisited
within the current path) and only lengths CYCLE_MIN_LEN..max_length count.

Canonical deduplication: the member IDs are sorted and joined, so every
rotation of a cycle, and any other traversal order over the same set of
accounts, collapses onto the first one found.

Performance
-----------
Worst case is exponential in the branching factor, bounded by max_length (≤5).
"""
from __future__ import annotations

import logging
from typing import List

import networkx as nx

from .config import CYCLE_MIN_LEN, CYCLE_MAX_LEN

log = logging.getLogger(__name__)


def _canonical_cycle(cycle: List[str]) -> str:
    """Order-insensitive identity of a cycle: its sorted member IDs joined."""
    return ",".join(sorted(cycle))


def detect_cycles(G: nx.DiGraph, max_length: int = CYCLE_MAX_LEN) -> List[List[str]]:
    """
    Detect simple directed cycles of length CYCLE_MIN_LEN to max_length.

    Returns
    -------
    List of cycles, each an ordered list of account IDs in traversal order
    starting at the node the search began from.
    """
    cycles: List[List[str]] = []
    seen: set = set()

    for start in G.nodes():
        stack = [(start, [start])]
        while stack:
            node, path = stack.pop()
            for nxt in G.successors(node):
                if nxt == start and CYCLE_MIN_LEN <= len(path) <= max_length:
                    key = _canonical_cycle(path)
                    if key not in seen:
                        seen.add(key)
                        cycles.append(list(path))
                elif nxt not in path and len(path) < max_length:
                    stack.append((nxt, path + [nxt]))

    log.info("Cycle detection: %d rings found", len(cycles))
    return cycles
