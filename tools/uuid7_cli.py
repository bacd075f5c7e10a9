#!/usr/bin/env python3
"""
uuid7 CLI - Generate and self-check UUID v7 identifiers.

Usage:
    python -m tools.uuid7_cli generate
    python -m tools.uuid7_cli generate -n 10 --format hex
    python -m tools.uuid7_cli check -n 100000

Commands:
    generate  - Print identifiers, one per line
    check     - Generate a burst and verify ordering, version and variant

Environment:
    UUID7_DRIFT_POLICY, UUID7_MAX_DRIFT_MS, UUID7_THREAD_SAFE
"""

import argparse
import os
import sys
import uuid
from typing import List, Optional

# Ensure project root is on path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from uuid7_core.errors import ClockDriftExceeded, EntropyUnavailable
from uuid7_core.generator import Generator
from uuid7_core.layout import read_counter, read_timestamp, read_variant, read_version
from uuid7_core.log import configure_logging
from uuid7_core.state import GeneratorConfig


# ============================================================
# Formatting
# ============================================================

FORMATS = ("str", "hex", "int")


def fmt_id(data: bytes, fmt: str) -> str:
    """Render a 16-byte identifier for display."""
    if fmt == "hex":
        return data.hex()
    if fmt == "int":
        return str(int.from_bytes(data, byteorder="big"))
    return str(uuid.UUID(bytes=data))


# ============================================================
# Commands
# ============================================================

def cmd_generate(gen: Generator, count: int, fmt: str) -> int:
    for _ in range(count):
        print(fmt_id(gen.generate(), fmt))
    return 0


def check_ids(ids: List[bytes]) -> List[str]:
    """Return a list of problems found in a sequence of identifiers."""
    errors: List[str] = []
    prev: Optional[bytes] = None
    for i, data in enumerate(ids):
        if read_version(data) != 0b0111:
            errors.append(f"#{i}: version {read_version(data):#x}, expected 0x7")
        if read_variant(data) != 0b10:
            errors.append(f"#{i}: variant {read_variant(data):#b}, expected 0b10")
        if prev is not None:
            if data <= prev:
                errors.append(f"#{i}: not greater than #{i - 1}")
            elif read_timestamp(data) == read_timestamp(prev):
                if read_counter(data) != read_counter(prev) + 1:
                    errors.append(
                        f"#{i}: counter {read_counter(data)} does not follow "
                        f"{read_counter(prev)} within one millisecond"
                    )
        prev = data
    return errors


def cmd_check(gen: Generator, count: int) -> int:
    ids = [gen.generate() for _ in range(count)]
    errors = check_ids(ids)

    span = read_timestamp(ids[-1]) - read_timestamp(ids[0]) if ids else 0
    print(f"  Generated: {len(ids)} identifiers over {span} ms")
    if not errors:
        print("  Result: ✓ OK (strictly increasing, version 7, variant 10)")
        return 0
    print(f"  Result: ✗ FAILED ({len(errors)} error(s))")
    for e in errors[:20]:
        print(f"    • {e}")
    return 1


# ============================================================
# Main
# ============================================================

def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="uuid7 CLI - UUID v7 generator and self-check",
        prog="python -m tools.uuid7_cli",
    )
    parser.add_argument(
        "command",
        choices=["generate", "check"],
        help="Command: generate (print ids) or check (verify a burst)",
    )
    parser.add_argument(
        "--count", "-n",
        type=int,
        default=None,
        help="Number of identifiers (default: 1 for generate, 10000 for check)",
    )
    parser.add_argument(
        "--format", "-f",
        choices=FORMATS,
        default="str",
        help="Output format for generate",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Log level for generator diagnostics (written to stderr)",
    )

    args = parser.parse_args(argv)
    configure_logging(args.log_level, json_output=False)

    count = args.count
    if count is None:
        count = 1 if args.command == "generate" else 10000
    if count < 1:
        print("  ERROR: --count must be at least 1")
        return 2

    try:
        gen = Generator(config=GeneratorConfig.from_env())
    except ValueError as e:
        print(f"  ERROR: invalid UUID7_* environment: {e}")
        return 2

    try:
        if args.command == "generate":
            return cmd_generate(gen, count, args.format)
        return cmd_check(gen, count)
    except (EntropyUnavailable, ClockDriftExceeded) as e:
        print(f"  ERROR: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
