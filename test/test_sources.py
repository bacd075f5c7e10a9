"""
test/test_sources.py - Tests for clocks, random sources, config and the
per-thread binding

Run:  python test/test_sources.py
"""

import sys
import os
import threading
import time
import uuid
from unittest import mock

# Ensure project root is on path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from pydantic import ValidationError
from pydantic_settings import BaseSettings

from uuid7_core.binding import (
    default_generator,
    reset_default_generator,
    uuid7,
    uuid7_bytes,
    uuid7_uuid,
)
from uuid7_core.errors import EntropyUnavailable
from uuid7_core.layout import MAX_COUNTER, read_timestamp
from uuid7_core.sources import (
    Clock,
    FixedClock,
    FixedRandomSource,
    RandomSource,
    SystemClock,
    SystemRandomSource,
)
from uuid7_core.state import DriftPolicy, GeneratorConfig, GeneratorState


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_PASS = 0
_FAIL = 0

_ENV_KEYS = ("UUID7_DRIFT_POLICY", "UUID7_MAX_DRIFT_MS", "UUID7_THREAD_SAFE")


def _ok(name: str) -> None:
    global _PASS
    _PASS += 1
    print(f"  PASS: {name}")


def _fail(name: str, err: Exception) -> None:
    global _FAIL
    _FAIL += 1
    print(f"  FAIL: {name} - {err}")


def _with_env(values: dict):
    """Patch UUID7_* variables, clearing any not given."""
    env = {k: v for k, v in os.environ.items() if k not in _ENV_KEYS}
    env.update(values)
    return mock.patch.dict(os.environ, env, clear=True)


# ---------------------------------------------------------------------------
# Tests: sources
# ---------------------------------------------------------------------------

def test_system_clock_is_unix_ms():
    before = int(time.time() * 1000)
    now = SystemClock().now_ms()
    after = int(time.time() * 1000)

    assert before - 1 <= now <= after + 1
    assert isinstance(SystemClock(), Clock)

    _ok("test_system_clock_is_unix_ms")


def test_system_random_source_lengths():
    src = SystemRandomSource()
    assert isinstance(src, RandomSource)
    assert len(src.fill(10)) == 10
    assert len(src.fill(7)) == 7
    assert src.fill(16) != src.fill(16)

    _ok("test_system_random_source_lengths")


def test_system_random_source_failure():
    src = SystemRandomSource()
    with mock.patch("uuid7_core.sources.os.urandom", side_effect=OSError("no entropy")):
        try:
            src.fill(10)
            raise AssertionError("Expected EntropyUnavailable")
        except EntropyUnavailable as e:
            assert isinstance(e.__cause__, OSError)

    with mock.patch("uuid7_core.sources.os.urandom", return_value=b"\x00\x01"):
        try:
            src.fill(10)
            raise AssertionError("Expected EntropyUnavailable")
        except EntropyUnavailable:
            pass

    _ok("test_system_random_source_failure")


def test_fixed_clock_moves_both_ways():
    clock = FixedClock(100)
    assert clock.now_ms() == 100
    clock.advance(5)
    assert clock.now_ms() == 105
    clock.set(50)
    assert clock.now_ms() == 50
    clock.advance()
    assert clock.now_ms() == 51

    _ok("test_fixed_clock_moves_both_ways")


def test_fixed_random_source_script():
    src = FixedRandomSource([b"\x01" * 16, None], fallback=0xAB)

    assert src.fill(10) == b"\x01" * 10
    try:
        src.fill(7)
        raise AssertionError("Expected EntropyUnavailable")
    except EntropyUnavailable:
        pass
    assert src.fill(3) == b"\xAB\xAB\xAB"
    assert src.requests == [10, 7, 3]

    src.fail_next()
    try:
        src.fill(1)
        raise AssertionError("Expected EntropyUnavailable")
    except EntropyUnavailable:
        pass

    exhausted = FixedRandomSource(fallback=None)
    try:
        exhausted.fill(1)
        raise AssertionError("Expected EntropyUnavailable")
    except EntropyUnavailable:
        pass

    _ok("test_fixed_random_source_script")


# ---------------------------------------------------------------------------
# Tests: state and config models
# ---------------------------------------------------------------------------

def test_generator_state_bounds():
    GeneratorState(previous_timestamp=0, sequence_counter=MAX_COUNTER)

    for bad in (
        {"sequence_counter": MAX_COUNTER + 1},
        {"sequence_counter": -1},
        {"previous_timestamp": -1},
        {"previous_timestamp": 1 << 48},
    ):
        try:
            GeneratorState(**bad)
            raise AssertionError(f"Expected ValidationError for {bad}")
        except ValidationError:
            pass

    _ok("test_generator_state_bounds")


def test_generator_state_is_frozen():
    state = GeneratorState(previous_timestamp=1, sequence_counter=2)
    try:
        state.sequence_counter = 3
        raise AssertionError("Expected ValidationError")
    except ValidationError:
        pass

    _ok("test_generator_state_is_frozen")


def test_config_defaults():
    config = GeneratorConfig()
    assert config.drift_policy == DriftPolicy.ALLOW
    assert config.max_drift_ms == 1000
    assert config.thread_safe is False

    _ok("test_config_defaults")


def test_config_from_env():
    with _with_env({
        "UUID7_DRIFT_POLICY": " Warn ",
        "UUID7_MAX_DRIFT_MS": "250",
        "UUID7_THREAD_SAFE": "true",
    }):
        config = GeneratorConfig.from_env()
    assert config.drift_policy == DriftPolicy.WARN
    assert config.max_drift_ms == 250
    assert config.thread_safe is True

    with _with_env({}):
        assert GeneratorConfig.from_env() == GeneratorConfig()

    _ok("test_config_from_env")


def test_config_from_env_rejects_bad_values():
    for env in (
        {"UUID7_DRIFT_POLICY": "clamp"},
        {"UUID7_MAX_DRIFT_MS": "-1"},
        {"UUID7_MAX_DRIFT_MS": "soon"},
    ):
        with _with_env(env):
            try:
                GeneratorConfig.from_env()
                raise AssertionError(f"Expected ValidationError for {env}")
            except ValidationError:
                pass

    _ok("test_config_from_env_rejects_bad_values")


def test_config_is_env_settings():
    """GeneratorConfig() itself reads UUID7_*; explicit kwargs win."""
    assert issubclass(GeneratorConfig, BaseSettings)

    with _with_env({"UUID7_DRIFT_POLICY": "RAISE", "UUID7_MAX_DRIFT_MS": "3"}):
        config = GeneratorConfig()
        explicit = GeneratorConfig(max_drift_ms=9)
    assert config.drift_policy == DriftPolicy.RAISE
    assert config.max_drift_ms == 3
    assert explicit.drift_policy == DriftPolicy.RAISE
    assert explicit.max_drift_ms == 9

    try:
        config.max_drift_ms = 5
        raise AssertionError("Expected ValidationError")
    except ValidationError:
        pass

    _ok("test_config_is_env_settings")


# ---------------------------------------------------------------------------
# Tests: binding
# ---------------------------------------------------------------------------

def test_uuid7_string_form():
    reset_default_generator()
    value = uuid7()
    parsed = uuid.UUID(value)

    assert value == str(parsed)
    assert parsed.version == 7
    assert parsed.variant == uuid.RFC_4122

    _ok("test_uuid7_string_form")


def test_binding_is_monotonic_per_thread():
    reset_default_generator()
    values = [uuid7_bytes() for _ in range(500)]
    values += [uuid7_uuid().bytes for _ in range(500)]
    values += [uuid.UUID(uuid7()).bytes for _ in range(500)]

    for a, b in zip(values, values[1:]):
        assert a < b
    assert abs(read_timestamp(values[-1]) - SystemClock().now_ms()) < 5000

    _ok("test_binding_is_monotonic_per_thread")


def test_default_generator_is_thread_local():
    reset_default_generator()
    mine = default_generator()
    assert default_generator() is mine

    others = []
    t = threading.Thread(target=lambda: others.append(default_generator()))
    t.start()
    t.join()
    assert others[0] is not mine

    reset_default_generator()
    assert default_generator() is not mine

    _ok("test_default_generator_is_thread_local")


def test_default_generator_reads_env():
    reset_default_generator()
    with _with_env({"UUID7_DRIFT_POLICY": "raise", "UUID7_MAX_DRIFT_MS": "7"}):
        gen = default_generator()
    assert gen.config.drift_policy == DriftPolicy.RAISE
    assert gen.config.max_drift_ms == 7
    reset_default_generator()

    _ok("test_default_generator_reads_env")


# ---------------------------------------------------------------------------
# Runner
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    print("=" * 60)
    print("UUID v7 Sources, Config & Binding Tests")
    print("=" * 60)

    tests = [
        test_system_clock_is_unix_ms,
        test_system_random_source_lengths,
        test_system_random_source_failure,
        test_fixed_clock_moves_both_ways,
        test_fixed_random_source_script,
        test_generator_state_bounds,
        test_generator_state_is_frozen,
        test_config_defaults,
        test_config_from_env,
        test_config_from_env_rejects_bad_values,
        test_config_is_env_settings,
        test_uuid7_string_form,
        test_binding_is_monotonic_per_thread,
        test_default_generator_is_thread_local,
        test_default_generator_reads_env,
    ]

    for t in tests:
        try:
            t()
        except Exception as e:
            _fail(t.__name__, e)

    print("=" * 60)
    if _FAIL == 0:
        print(f"ALL {_PASS} TESTS PASSED")
    else:
        print(f"{_PASS} passed, {_FAIL} FAILED")
        sys.exit(1)
    print("=" * 60)
