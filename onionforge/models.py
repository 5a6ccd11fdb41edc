"""Data models for onionforge.

HistoryEntry, LastCalculation, Diagnostics, BenchmarkResult — the typed
records that flow from state → controller → CLI.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Union

Number = Union[int, float]


def utc_timestamp() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class LastCalculation:
    """The most recent successful two-operand calculation."""

    expression: str
    result: Number

    def to_dict(self) -> dict:
        return {"expression": self.expression, "result": self.result}


@dataclass(frozen=True)
class HistoryEntry:
    """One successful calculation in the session history."""

    expression: str
    result: Number
    timestamp: str = field(default_factory=utc_timestamp)

    def __str__(self) -> str:
        return f"{self.expression} = {self.result}"

    def to_dict(self) -> dict:
        return {
            "expression": self.expression,
            "result": self.result,
            "timestamp": self.timestamp,
        }


@dataclass
class Diagnostics:
    """Non-identifying snapshot of a calculator session."""

    version: str
    history_length: int
    current_input: str
    has_operator: bool
    last_calculation: Optional[LastCalculation] = None
    timestamp: str = field(default_factory=utc_timestamp)

    def to_dict(self) -> dict:
        """Serialize to a JSON-compatible dict."""
        return {
            "version": self.version,
            "timestamp": self.timestamp,
            "history_length": self.history_length,
            "last_calculation": self.last_calculation.to_dict() if self.last_calculation else None,
            "current_input": self.current_input,
            "has_operator": self.has_operator,
        }


@dataclass
class BenchmarkResult:
    """Timing of a batch of engine evaluations."""

    iterations: int
    total_ms: float = 0.0

    @property
    def average_ms(self) -> float:
        if self.iterations == 0:
            return 0.0
        return self.total_ms / self.iterations

    def to_dict(self) -> dict:
        return {
            "iterations": self.iterations,
            "total_ms": self.total_ms,
            "average_ms": self.average_ms,
        }
