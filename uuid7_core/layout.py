"""
uuid7_core/layout.py - UUID v7 bit layout

Pure functions over the 16-byte identifier buffer.  No clock, no
randomness, no state: everything here can be tested with literal bytes.

Layout (big-endian, RFC 9562 v7 with an 18-bit dedicated counter):

    bytes 0-5   48-bit unix_ts_ms
    byte  6     version (high nibble, 0111) | counter bits 17-14
    byte  7     counter bits 13-6
    byte  8     variant (top 2 bits, 10)    | counter bits 5-0
    bytes 9-15  random

The counter reuses every bit of bytes 6-8 not taken by version and
variant, which gives 18 bits instead of the 12-bit rand_a field.
"""

from __future__ import annotations


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

UUID_LEN = 16

TIMESTAMP_BYTES = 6
MAX_TIMESTAMP_MS = (1 << 48) - 1

COUNTER_BITS = 18
MAX_COUNTER = (1 << COUNTER_BITS) - 1  # 262143

# Offsets of the random regions requested from the RandomSource
SEED_OFFSET = 6       # timestamp advanced: counter seed + entropy
ENTROPY_OFFSET = 9    # counter incremented: entropy only

VERSION_BITS = 0x70
VARIANT_BITS = 0x80

# Bit 3 of byte 6 is the counter's most significant bit
_COUNTER_MSB_MASK = 0xF7


# ---------------------------------------------------------------------------
# Counter packing
# ---------------------------------------------------------------------------

def pack_counter(counter: int) -> tuple[int, int, int]:
    """Split an 18-bit counter across bytes 6, 7 and 8.

    Returns (byte6_bits, byte7, byte8_bits) where byte6_bits holds counter
    bits 17-14 in its low nibble and byte8_bits holds bits 5-0.  Version and
    variant positions are left zero.
    """
    if not 0 <= counter <= MAX_COUNTER:
        raise ValueError(f"counter must be in [0, {MAX_COUNTER}], got {counter}")
    return (counter >> 14) & 0x0F, (counter >> 6) & 0xFF, counter & 0x3F


def unpack_counter(byte6: int, byte7: int, byte8: int) -> int:
    """Reassemble the 18-bit counter, ignoring version and variant bits."""
    return ((byte6 & 0x0F) << 14) | ((byte7 & 0xFF) << 6) | (byte8 & 0x3F)


def write_counter(buf: bytearray, counter: int) -> None:
    """Overwrite bytes 6-8 of *buf* with *counter*."""
    buf[6], buf[7], buf[8] = pack_counter(counter)


def clear_counter_msb(buf: bytearray) -> None:
    """Force the counter's top bit to 0 so a freshly seeded counter has
    at least 2**17 increments of headroom before rollover."""
    buf[6] &= _COUNTER_MSB_MASK


# ---------------------------------------------------------------------------
# Timestamp and tags
# ---------------------------------------------------------------------------

def write_timestamp(buf: bytearray, tms: int) -> None:
    """Write a 48-bit unix millisecond timestamp into bytes 0-5."""
    if not 0 <= tms <= MAX_TIMESTAMP_MS:
        raise ValueError(f"timestamp does not fit in 48 bits: {tms}")
    buf[0:TIMESTAMP_BYTES] = tms.to_bytes(TIMESTAMP_BYTES, byteorder="big")


def set_version_and_variant(buf: bytearray) -> None:
    # byte 6 high nibble: version 0111
    buf[6] = (buf[6] & 0x0F) | VERSION_BITS
    # byte 8 top 2 bits: variant 10
    buf[8] = (buf[8] & 0x3F) | VARIANT_BITS


# ---------------------------------------------------------------------------
# Field accessors
# ---------------------------------------------------------------------------

def read_timestamp(data: bytes) -> int:
    """Return the unix_ts_ms field of a 16-byte identifier."""
    return int.from_bytes(data[0:TIMESTAMP_BYTES], byteorder="big")


def read_counter(data: bytes) -> int:
    """Return the 18-bit counter field of a 16-byte identifier."""
    return unpack_counter(data[6], data[7], data[8])


def read_version(data: bytes) -> int:
    return data[6] >> 4


def read_variant(data: bytes) -> int:
    return data[8] >> 6
