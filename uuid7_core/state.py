"""
uuid7_core/state.py - Generator state and configuration models

GeneratorState is a frozen snapshot of the two mutable fields a Generator
owns.  The live values are plain attributes on the Generator; snapshots are
handed out for inspection and accepted once, at construction, to start a
generator from a known point.

GeneratorConfig carries the knobs that are not part of the algorithm
itself: what to do when counter overflow pushes logical time ahead of the
wall clock, and whether generate() takes a lock.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .layout import MAX_COUNTER, MAX_TIMESTAMP_MS


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class DriftPolicy(str, Enum):
    """Response when logical time leads the wall clock by > max_drift_ms."""
    ALLOW = "allow"    # unbounded logical advance
    WARN = "warn"      # generate, log uuid7.clock_drift
    RAISE = "raise"    # fail with ClockDriftExceeded, state unchanged


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------

class GeneratorState(BaseModel):
    """Snapshot of (previous_timestamp, sequence_counter)."""

    model_config = ConfigDict(frozen=True)

    previous_timestamp: int = Field(
        default=0,
        ge=0,
        le=MAX_TIMESTAMP_MS,
        description="Timestamp (unix ms) encoded in the last identifier.",
    )
    sequence_counter: int = Field(
        default=0,
        ge=0,
        le=MAX_COUNTER,
        description="18-bit counter encoded in the last identifier.",
    )
class GeneratorConfig(BaseSettings):
    """Non-algorithmic generator settings.

    Unset fields are read from UUID7_DRIFT_POLICY, UUID7_MAX_DRIFT_MS and
    UUID7_THREAD_SAFE; invalid values raise pydantic.ValidationError.
    """

    model_config = SettingsConfigDict(env_prefix="UUID7_", frozen=True)

    drift_policy: DriftPolicy = Field(
        default=DriftPolicy.ALLOW,
        description="What to do when counter overflow outruns the wall clock.",
    )
    max_drift_ms: int = Field(
        default=1000,
        ge=0,
        description="Tolerated lead of logical time over the wall clock.",
    )
    thread_safe: bool = Field(
        default=False,
        description="Serialize generate() with a lock for shared instances.",
    )

    @field_validator("drift_policy", mode="before")
    @classmethod
    def normalize_drift_policy(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @classmethod
    def from_env(cls) -> "GeneratorConfig":
        return cls()
