"""ID generation.

* Internal primary keys for orders and order lines: 64-bit snowflake ids as
  decimal strings, increasing over time so the order listing cursor can
  compare them numerically.
* Order numbers shown to customers: ORDER-<epoch ms>-<9 base36 chars>.
"""

import secrets
import string
import threading
import time
from collections.abc import Callable

_ORDER_NUMBER_ALPHABET = string.digits + string.ascii_uppercase
_ORDER_NUMBER_SUFFIX_LEN = 9


def _epoch_ms() -> int:
    return time.time_ns() // 1_000_000


class SnowflakeIdGenerator:
    """41-bit ms timestamp | 10-bit machine id | 12-bit per-ms sequence."""

    EPOCH_MS = 1_700_000_000_000
    MACHINE_BITS = 10
    SEQUENCE_BITS = 12

    def __init__(self, machine_id: int = 0, clock: Callable[[], int] = _epoch_ms) -> None:
        max_machine = (1 << self.MACHINE_BITS) - 1
        if not 0 <= machine_id <= max_machine:
            raise ValueError(f"machine_id must be 0-{max_machine}, got {machine_id}")
        self._prefix_machine = machine_id << self.SEQUENCE_BITS
        self._clock = clock
        self._lock = threading.Lock()
        self._last_ms = -1
        self._seq = 0

    def next_id(self) -> str:
        with self._lock:
            now = self._clock()
            if now > self._last_ms:
                self._seq = 0
            else:
                # Same millisecond (or clock stepped back): keep counting on the
                # last timestamp and borrow the next ms once the sequence is full.
                now = self._last_ms
                self._seq += 1
                if self._seq >> self.SEQUENCE_BITS:
                    now += 1
                    self._seq = 0
            self._last_ms = now
            shift = self.MACHINE_BITS + self.SEQUENCE_BITS
            return str(((now - self.EPOCH_MS) << shift) | self._prefix_machine | self._seq)


_ids = SnowflakeIdGenerator()


def generate_id() -> str:
    return _ids.next_id()


def generate_order_number(clock: Callable[[], int] = _epoch_ms) -> str:
    """Display number such as ORDER-1760000000000-4K9ZQ2B7X.

    Not guaranteed unique: the orders table enforces uniqueness and the
    assembler regenerates once on collision.
    """
    suffix = "".join(
        secrets.choice(_ORDER_NUMBER_ALPHABET) for _ in range(_ORDER_NUMBER_SUFFIX_LEN)
    )
    return f"ORDER-{clock()}-{suffix}"
