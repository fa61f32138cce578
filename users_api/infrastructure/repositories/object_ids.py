"""
CRC — infrastructure/repositories/object_ids.py

Name
- ObjectId-shaped identifier generator

Responsibilities
- Produce 24-char lowercase hex ids: 4-byte big-endian unix timestamp,
  5 random bytes (per process), 3-byte incrementing counter.
- Ids created later in the same process sort after earlier ones.

Collaborators
- postgres / in_memory User repositories (assign id on insert)
"""

from __future__ import annotations

import os
import threading
import time
from typing import Optional

_PROCESS_RANDOM: bytes = os.urandom(5)
_COUNTER_MASK = 0xFFFFFF

_counter_lock = threading.Lock()
_counter = int.from_bytes(os.urandom(3), "big")


def _next_count() -> int:
    global _counter
    with _counter_lock:
        _counter = (_counter + 1) & _COUNTER_MASK
        return _counter


def new_object_id(timestamp: Optional[float] = None) -> str:
    """R: New 24-hex id; `timestamp` (unix seconds) is injectable for tests."""
    seconds = int(time.time() if timestamp is None else timestamp) & 0xFFFFFFFF
    raw = (
        seconds.to_bytes(4, "big")
        + _PROCESS_RANDOM
        + _next_count().to_bytes(3, "big")
    )
    return raw.hex()
