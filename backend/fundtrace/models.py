"""
models.py – Pydantic models.
Defines the transaction record and the exact JSON contract the API returns.
"""
from __future__ import annotations
from datetime import datetime
from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field


class Transaction(BaseModel):
    """A single validated transfer. Never mutated after ingestion."""
    model_config = ConfigDict(frozen=True)

    transaction_id: str = Field(..., min_length=1)
    sender_id: str = Field(..., min_length=1)
    receiver_id: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0.0)
    timestamp: datetime


class SuspiciousAccount(BaseModel):
    """
    Mandatory fields: account_id, suspicion_score, detected_patterns, ring_id.
    ring_id is the first ring the account joined, or "STANDALONE".
    """
    account_id: str
    suspicion_score: float = Field(..., ge=0.0, le=100.0)
    detected_patterns: List[str]
    ring_id: str


class FraudRing(BaseModel):
    ring_id: str
    member_accounts: List[str]
    pattern_type: Literal["cycle", "smurfing", "layered_shell"]
    risk_score: float = Field(..., ge=0.0, le=100.0)


class PatternBreakdown(BaseModel):
    name: str
    label: str
    count: int


class RiskBand(BaseModel):
    range: str
    count: int


class AnalysisSummary(BaseModel):
    total_accounts_analyzed: int
    suspicious_accounts_flagged: int
    fraud_rings_detected: int
    processing_time_seconds: float
    pattern_breakdown: List[PatternBreakdown] = []
    risk_distribution: List[RiskBand] = []


class GraphNode(BaseModel):
    id: str
    total_sent: float
    total_received: float
    tx_count: int
    suspicious: bool
    ring_ids: List[str]
    detected_patterns: List[str]
    suspicion_score: float


class GraphEdge(BaseModel):
    source: str
    target: str
    amount: float
    transaction_id: str
    timestamp: str


class GraphData(BaseModel):
    nodes: List[GraphNode]
    edges: List[GraphEdge]


class ParseStats(BaseModel):
    total_rows: int
    valid_rows: int
    dropped_rows: int
    negative_amounts: int
    warnings: List[str] = []


class AnalysisResult(BaseModel):
    suspicious_accounts: List[SuspiciousAccount]
    fraud_rings: List[FraudRing]
    summary: AnalysisSummary
    graph: Optional[GraphData] = None
    parse_stats: Optional[ParseStats] = None
