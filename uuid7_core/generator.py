"""
uuid7_core/generator.py - Monotonic UUID v7 generator

A small synchronous state machine.  Each Generator owns two fields:

    previous_timestamp   unix ms encoded in the last identifier
    sequence_counter     18-bit counter encoded in the last identifier

generate() makes one two-way decision per call:

    clock moved past previous_timestamp
        -> reseed the counter from entropy (top bit forced to 0)
    clock did not move (or moved backward)
        -> counter + 1; on overflow the counter wraps to 0 and the
           logical timestamp advances by 1 ms regardless of the clock

State is committed only after the random bytes for the call have been
obtained and the identifier is fully assembled, so a failed call leaves
the generator exactly as it was.

One instance is meant for one thread of control.  Sharing an instance
across threads requires GeneratorConfig(thread_safe=True), which makes the
whole of generate() a critical section.
"""

from __future__ import annotations

import contextlib
import threading
from typing import ContextManager, Optional

from .errors import ClockDriftExceeded, EntropyUnavailable
from .layout import (
    ENTROPY_OFFSET,
    MAX_COUNTER,
    SEED_OFFSET,
    UUID_LEN,
    clear_counter_msb,
    read_counter,
    set_version_and_variant,
    write_counter,
    write_timestamp,
)
from .log import get_logger
from .sources import Clock, RandomSource, SystemClock, SystemRandomSource
from .state import DriftPolicy, GeneratorConfig, GeneratorState

logger = get_logger(__name__)


class Generator:
    """Stateful UUID v7 generator with an 18-bit dedicated counter.

    Args:
        clock:         Millisecond clock.  Defaults to SystemClock.
        random_source: Cryptographic byte source.  Defaults to
                       SystemRandomSource.
        state:         Initial state.  Defaults to (0, 0), so the first call
                       always takes the reseed path.
        config:        Drift and locking settings.
    """

    def __init__(
        self,
        clock: Optional[Clock] = None,
        random_source: Optional[RandomSource] = None,
        *,
        state: Optional[GeneratorState] = None,
        config: Optional[GeneratorConfig] = None,
    ) -> None:
        self._clock: Clock = clock if clock is not None else SystemClock()
        self._random: RandomSource = (
            random_source if random_source is not None else SystemRandomSource()
        )
        self._config: GeneratorConfig = config if config is not None else GeneratorConfig()

        initial = state if state is not None else GeneratorState()
        self._previous_timestamp: int = initial.previous_timestamp
        self._sequence_counter: int = initial.sequence_counter

        self._lock: ContextManager = (
            threading.Lock() if self._config.thread_safe else contextlib.nullcontext()
        )

    # ------------------------------------------------------------------
    # Public properties
    # ------------------------------------------------------------------

    @property
    def state(self) -> GeneratorState:
        """Snapshot of the current state."""
        return GeneratorState(
            previous_timestamp=self._previous_timestamp,
            sequence_counter=self._sequence_counter,
        )

    @property
    def previous_timestamp(self) -> int:
        return self._previous_timestamp

    @property
    def sequence_counter(self) -> int:
        return self._sequence_counter

    @property
    def config(self) -> GeneratorConfig:
        return self._config

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    def generate(self) -> bytes:
        """Return the next 16-byte identifier.

        Raises:
            EntropyUnavailable: The random source failed.  State unchanged.
            ClockDriftExceeded: DriftPolicy.RAISE and logical time is too far
                                ahead of the wall clock.  State unchanged.
        """
        with self._lock:
            return self._generate()

    __call__ = generate

    def _generate(self) -> bytes:
        now_ms = self._clock.now_ms()
        buf = bytearray(UUID_LEN)
        overflowed = False
        drift_exceeded = False

        if now_ms > self._previous_timestamp:
            # Timestamp advanced: bytes 6-15 random, counter seeded from them
            buf[SEED_OFFSET:] = self._entropy(UUID_LEN - SEED_OFFSET)
            clear_counter_msb(buf)
            counter = read_counter(buf)
            tms = now_ms
        else:
            counter = self._sequence_counter + 1
            tms = self._previous_timestamp
            if counter > MAX_COUNTER:
                counter = 0
                tms += 1
                overflowed = True
                drift_exceeded = self._check_drift(tms, now_ms)

            # Bytes 6-8 carry the counter; only 9-15 are random
            buf[ENTROPY_OFFSET:] = self._entropy(UUID_LEN - ENTROPY_OFFSET)
            write_counter(buf, counter)

        write_timestamp(buf, tms)
        set_version_and_variant(buf)

        self._previous_timestamp = tms
        self._sequence_counter = counter

        if overflowed:
            logger.debug("uuid7.counter_overflow", logical_ms=tms, wall_ms=now_ms)
        if drift_exceeded:
            logger.warning(
                "uuid7.clock_drift",
                logical_ms=tms,
                wall_ms=now_ms,
                drift_ms=tms - now_ms,
                max_drift_ms=self._config.max_drift_ms,
            )
        return bytes(buf)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _entropy(self, n: int) -> bytes:
        try:
            data = self._random.fill(n)
        except EntropyUnavailable:
            logger.debug("uuid7.entropy_unavailable", requested=n)
            raise
        if len(data) != n:
            logger.debug("uuid7.entropy_unavailable", requested=n, received=len(data))
            raise EntropyUnavailable(
                f"random source returned {len(data)} bytes, expected {n}"
            )
        return data

    def _check_drift(self, logical_ms: int, wall_ms: int) -> bool:
        """Apply the drift policy to a logical timestamp about to be used.

        Returns True when the drift should be reported once the call
        commits (DriftPolicy.WARN).
        """
        policy = self._config.drift_policy
        if policy == DriftPolicy.ALLOW:
            return False
        if logical_ms - wall_ms <= self._config.max_drift_ms:
            return False
        if policy == DriftPolicy.RAISE:
            raise ClockDriftExceeded(logical_ms, wall_ms, self._config.max_drift_ms)
        return True
