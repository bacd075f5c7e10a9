"""
uuid7_core/binding.py - Default per-thread generator

The module-level uuid7() callable is what applications register as their
ID factory, e.g. ``Field(default_factory=uuid7)``.  Each thread gets its
own Generator built from GeneratorConfig.from_env(), so identifiers from a
single thread are strictly increasing and no lock is taken.  Identifiers
from different threads are ordered by timestamp only.
"""

from __future__ import annotations

import threading
import uuid

from .generator import Generator
from .state import GeneratorConfig

_local = threading.local()


def default_generator() -> Generator:
    """Return the calling thread's generator, creating it on first use."""
    gen = getattr(_local, "generator", None)
    if gen is None:
        gen = Generator(config=GeneratorConfig.from_env())
        _local.generator = gen
    return gen


def reset_default_generator() -> None:
    """Drop the calling thread's generator.  The next call starts fresh."""
    _local.__dict__.pop("generator", None)


def uuid7_bytes() -> bytes:
    return default_generator().generate()


def uuid7_uuid() -> uuid.UUID:
    return uuid.UUID(bytes=default_generator().generate())


def uuid7() -> str:
    """Generate a UUID v7 in canonical 8-4-4-4-12 form."""
    return str(uuid7_uuid())
