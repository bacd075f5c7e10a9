"""
uuid7_core/sources.py - Clock and entropy collaborators

The generator depends on two single-method capabilities:

    Clock.now_ms()      -> int    milliseconds since the Unix epoch
    RandomSource.fill(n) -> bytes  exactly n cryptographically strong bytes

System implementations read time.time_ns() and os.urandom().  The Fixed*
variants are deterministic stand-ins for tests and demos.
"""

from __future__ import annotations

import os
import time
from typing import Iterable, List, Optional, Protocol, Union, runtime_checkable

from .errors import EntropyUnavailable


# ---------------------------------------------------------------------------
# Protocols
# ---------------------------------------------------------------------------

@runtime_checkable
class Clock(Protocol):
    def now_ms(self) -> int:
        """Current time in milliseconds since the Unix epoch.

        Need not be monotonic; the generator absorbs backward jumps.
        """
        ...


@runtime_checkable
class RandomSource(Protocol):
    def fill(self, n: int) -> bytes:
        """Return exactly *n* random bytes or raise EntropyUnavailable."""
        ...


# ---------------------------------------------------------------------------
# System implementations
# ---------------------------------------------------------------------------

class SystemClock:
    """Wall clock backed by time.time_ns()."""

    def now_ms(self) -> int:
        return time.time_ns() // 1_000_000


class SystemRandomSource:
    """Kernel CSPRNG via os.urandom()."""

    def fill(self, n: int) -> bytes:
        try:
            data = os.urandom(n)
        except (OSError, NotImplementedError) as exc:
            raise EntropyUnavailable(f"could not generate random values: {exc}") from exc
        if len(data) != n:
            raise EntropyUnavailable(
                f"random source returned {len(data)} bytes, expected {n}"
            )
        return data


# ---------------------------------------------------------------------------
# Deterministic implementations
# ---------------------------------------------------------------------------

class FixedClock:
    """Settable clock.  Can be moved forward or backward freely."""

    def __init__(self, now_ms: int = 0) -> None:
        self._now_ms = now_ms

    def now_ms(self) -> int:
        return self._now_ms

    def set(self, now_ms: int) -> None:
        self._now_ms = now_ms

    def advance(self, ms: int = 1) -> None:
        self._now_ms += ms


class FixedRandomSource:
    """Replays scripted byte strings, one per fill() call.

    Each scripted item is either bytes (returned, truncated to n) or None
    (that call raises EntropyUnavailable).  When the script runs out the
    source either repeats *fallback* as a byte value or raises.

    Args:
        script:   Ordered responses for successive fill() calls.
        fallback: Byte value used once the script is exhausted.  None makes
                  an exhausted source raise EntropyUnavailable.
    """

    def __init__(
        self,
        script: Optional[Iterable[Union[bytes, None]]] = None,
        fallback: Optional[int] = 0x00,
    ) -> None:
        self._script: List[Union[bytes, None]] = list(script or [])
        self._fallback = fallback
        self.requests: List[int] = []

    def push(self, item: Union[bytes, None]) -> None:
        self._script.append(item)

    def fail_next(self) -> None:
        """Make the next fill() raise EntropyUnavailable."""
        self._script.insert(0, None)

    def fill(self, n: int) -> bytes:
        self.requests.append(n)
        if self._script:
            item = self._script.pop(0)
            if item is None:
                raise EntropyUnavailable("scripted entropy failure")
            return item[:n]
        if self._fallback is None:
            raise EntropyUnavailable("scripted entropy exhausted")
        return bytes([self._fallback]) * n
