"""
shell_detector.py – Detect layered shell account networks.

Definition
----------
A shell chain is a directed simple path of SHELL_MIN_CHAIN (4) or more nodes
where every strictly-interior node is a low-activity account
(tx_count ≤ SHELL_MAX_TX) – pass-through layers used purely to obfuscate.
The first and last nodes carry no activity requirement.

Algorithm
---------
Iterative DFS with an explicit path stack from every account that sends
money.  A popped path qualifies as soon as it has ≥ SHELL_MIN_CHAIN nodes and
all interior nodes are low-activity; extension continues while the path is
shorter than SHELL_MAX_CHAIN, so qualifying prefixes are reported alongside
their longer extensions.

Chains are deduplicated by their exact ordered path.
"""
from __future__ import annotations

import logging
from typing import List

import networkx as nx

from .config import SHELL_MAX_TX, SHELL_MIN_CHAIN, SHELL_MAX_CHAIN

log = logging.getLogger(__name__)


def detect_shell_networks(G: nx.DiGraph) -> List[List[str]]:
    """
    Detect layered shell-account chains.

    Returns
    -------
    List of chains, each the full ordered path [source, shell1, ..., dest].
    """
    chains: List[List[str]] = []
    seen_paths: set = set()

    tx_count = nx.get_node_attributes(G, "tx_count")
    candidate_sources = [n for n in G.nodes() if G.out_degree(n) > 0]

    for source in candidate_sources:
        stack = [[source]]
        while stack:
            path = stack.pop()

            if len(path) >= SHELL_MIN_CHAIN:
                intermediaries = path[1:-1]
                if all(tx_count.get(n, 0) <= SHELL_MAX_TX for n in intermediaries):
                    key = ",".join(path)
                    if key not in seen_paths:
                        seen_paths.add(key)
                        chains.append(list(path))

            if len(path) < SHELL_MAX_CHAIN:
                for nbr in G.successors(path[-1]):
                    if nbr not in path:
                        stack.append(path + [nbr])

    log.info("Shell detection: %d chains found", len(chains))
    return chains
