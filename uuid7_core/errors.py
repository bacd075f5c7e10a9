"""
uuid7_core/errors.py - Generation failures

Both errors leave the generator state exactly as it was before the
failing call.  Neither is retried internally.
"""

from __future__ import annotations


class EntropyUnavailable(RuntimeError):
    """The random source could not supply the requested bytes."""

    def __init__(self, message: str = "could not generate random values") -> None:
        super().__init__(message)


class ClockDriftExceeded(RuntimeError):
    """Logical time ran ahead of the wall clock by more than allowed.

    Raised only when the generator is configured with DriftPolicy.RAISE.
    """

    def __init__(self, logical_ms: int, wall_ms: int, max_drift_ms: int) -> None:
        self.logical_ms = logical_ms
        self.wall_ms = wall_ms
        self.drift_ms = logical_ms - wall_ms
        self.max_drift_ms = max_drift_ms
        super().__init__(
            f"logical timestamp {logical_ms} leads wall clock {wall_ms} "
            f"by {self.drift_ms} ms (max {max_drift_ms} ms)"
        )
