"""Engine micro-benchmark.

Evaluates ``i + i*2`` for i in range(iterations) and times the whole batch
with a monotonic clock.
"""

from __future__ import annotations

import time
from typing import Optional

from onionforge.engine import ExpressionEngine
from onionforge.models import BenchmarkResult


def run_benchmark(iterations: int = 1000, engine: Optional[ExpressionEngine] = None) -> BenchmarkResult:
    """Time `iterations` evaluations on one engine.

    Raises:
        ValueError: iterations is not positive.
    """
    if iterations <= 0:
        raise ValueError(f"iterations must be positive, got {iterations}")
    engine = engine or ExpressionEngine()

    start = time.monotonic()
    for i in range(iterations):
        engine.evaluate(f"{i}+{i * 2}")
    elapsed = time.monotonic() - start

    return BenchmarkResult(iterations=iterations, total_ms=round(elapsed * 1000, 3))
