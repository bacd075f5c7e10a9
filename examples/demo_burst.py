#!/usr/bin/env python3
"""
UUID v7 Burst & Clock Regression Demo

Demonstrates the generator's ordering guarantees with a scripted clock:

Flow:
  1. Normal tick: a new millisecond reseeds the counter from entropy
  2. Burst: several identifiers within one millisecond, counter +1 each
  3. Clock jumps backward 5 s: timestamps hold, ordering is preserved
  4. Counter overflow: the logical timestamp advances by 1 ms
  5. Clock catches up: the counter is reseeded again

Run:
    python examples/demo_burst.py
"""

import os
import sys
import uuid

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from uuid7_core.generator import Generator
from uuid7_core.layout import MAX_COUNTER, read_counter, read_timestamp
from uuid7_core.sources import FixedClock, SystemRandomSource
from uuid7_core.state import GeneratorState


# ============================================================
# Display
# ============================================================

def show(label: str, data: bytes, wall_ms: int) -> None:
    ts = read_timestamp(data)
    lead = ts - wall_ms
    print(f"  {label:22s} {uuid.UUID(bytes=data)}  "
          f"ts={ts}  counter={read_counter(data):6d}  lead={lead:+d} ms")


# ============================================================
# Main Demo
# ============================================================

def main() -> None:
    start_ms = 1_700_000_000_000
    clock = FixedClock(start_ms)
    gen = Generator(clock, SystemRandomSource())
    issued = []

    print(f"\n{'━' * 100}")
    print("  1. Timestamp advance (counter reseeded)")
    print(f"{'━' * 100}")
    data = gen.generate()
    issued.append(data)
    show("first call", data, clock.now_ms())

    print(f"\n{'━' * 100}")
    print("  2. Same-millisecond burst")
    print(f"{'━' * 100}")
    for i in range(4):
        data = gen.generate()
        issued.append(data)
        show(f"burst #{i + 1}", data, clock.now_ms())

    print(f"\n{'━' * 100}")
    print("  3. Clock jumps back 5000 ms")
    print(f"{'━' * 100}")
    clock.set(start_ms - 5000)
    for i in range(2):
        data = gen.generate()
        issued.append(data)
        show(f"after jump #{i + 1}", data, clock.now_ms())

    print(f"\n{'━' * 100}")
    print("  4. Counter overflow")
    print(f"{'━' * 100}")
    clock.set(start_ms)
    # Start a generator at the edge of the counter range
    edge = Generator(
        clock,
        SystemRandomSource(),
        state=GeneratorState(previous_timestamp=start_ms, sequence_counter=MAX_COUNTER - 1),
    )
    for i in range(3):
        show(f"edge #{i + 1}", edge.generate(), clock.now_ms())

    print(f"\n{'━' * 100}")
    print("  5. Clock catches up")
    print(f"{'━' * 100}")
    clock.set(start_ms + 10)
    data = gen.generate()
    issued.append(data)
    show("next tick", data, clock.now_ms())

    ordered = all(a < b for a, b in zip(issued, issued[1:]))
    print(f"\n  Main generator issued {len(issued)} ids, strictly increasing: {ordered}\n")


if __name__ == "__main__":
    main()
