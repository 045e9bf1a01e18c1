"""Row ids for listing and offer records.

A listing or offer address is reused across lifecycles (list, cancel,
relist), so each row gets its own snowflake id. Ids sort in creation order
within one process; ROW_ID_MACHINE_ID keeps processes sharing a database
(API workers, the admin CLI) from colliding.

Layout (63 bits used):
  - 41 bits: milliseconds since ROW_ID_EPOCH_MS
  - 10 bits: machine id
  - 12 bits: per-millisecond sequence
"""

import threading
import time

from config.settings import settings

ROW_ID_EPOCH_MS = 1_700_000_000_000
MACHINE_BITS = 10
SEQUENCE_BITS = 12
MAX_MACHINE_ID = (1 << MACHINE_BITS) - 1
MAX_SEQUENCE = (1 << SEQUENCE_BITS) - 1


class SnowflakeIdGenerator:
    def __init__(self, machine_id: int = 0) -> None:
        if not 0 <= machine_id <= MAX_MACHINE_ID:
            raise ValueError(f"machine_id must be 0-{MAX_MACHINE_ID}, got {machine_id}")
        self._machine_id = machine_id
        self._sequence = 0
        self._last_ms = -1
        self._lock = threading.Lock()

    def next_id(self) -> str:
        with self._lock:
            now = max(_now_ms(), self._last_ms)  # wall clock may step back
            if now == self._last_ms:
                self._sequence = (self._sequence + 1) & MAX_SEQUENCE
                if self._sequence == 0:
                    while now <= self._last_ms:
                        now = _now_ms()
            else:
                self._sequence = 0
            self._last_ms = now
            value = (
                ((now - ROW_ID_EPOCH_MS) << (MACHINE_BITS + SEQUENCE_BITS))
                | (self._machine_id << SEQUENCE_BITS)
                | self._sequence
            )
            return str(value)


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


def id_timestamp_ms(row_id: str) -> int:
    """Unix milliseconds at which `row_id` was generated."""
    return (int(row_id) >> (MACHINE_BITS + SEQUENCE_BITS)) + ROW_ID_EPOCH_MS


def id_machine(row_id: str) -> int:
    return (int(row_id) >> SEQUENCE_BITS) & MAX_MACHINE_ID


_default_generator = SnowflakeIdGenerator(settings.ROW_ID_MACHINE_ID)


def generate_id() -> str:
    return _default_generator.next_id()
