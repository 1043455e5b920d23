"""Fundtrace – transaction-graph money-laundering detection."""

__version__ = "1.2.0"
