"""
uuid7_core - Monotonic UUID v7 generation.

Time-ordered 128-bit identifiers with an 18-bit dedicated counter:
strictly increasing per generator, resistant to backward clock jumps,
with no coordination between processes.
"""

__version__ = "0.1.0"

from .binding import default_generator, reset_default_generator, uuid7, uuid7_bytes, uuid7_uuid
from .errors import ClockDriftExceeded, EntropyUnavailable
from .generator import Generator
from .layout import (
    MAX_COUNTER,
    MAX_TIMESTAMP_MS,
    UUID_LEN,
    pack_counter,
    read_counter,
    read_timestamp,
    read_variant,
    read_version,
    unpack_counter,
)
from .log import configure_logging, get_logger
from .sources import (
    Clock,
    FixedClock,
    FixedRandomSource,
    RandomSource,
    SystemClock,
    SystemRandomSource,
)
from .state import DriftPolicy, GeneratorConfig, GeneratorState
