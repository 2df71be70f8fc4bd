"""Striped re-entrant locks for serializing writers of the same aggregate.

Each key hashes onto one of a fixed number of RLocks. Holding several keys
acquires their stripes in index order, so two callers locking overlapping
key sets can never deadlock, and the same thread may re-enter a stripe it
already holds (the workflow locks a checkout's products, then the ledger locks
each product again while reserving).
"""

import threading
import zlib
from contextlib import ExitStack, contextmanager

DEFAULT_STRIPES = 256


class StripedLocks:
    def __init__(self, stripes: int = DEFAULT_STRIPES):
        self._locks = [threading.RLock() for _ in range(stripes)]

    def _stripe(self, key) -> int:
        return zlib.crc32(str(key).encode("utf-8")) % len(self._locks)

    @contextmanager
    def hold(self, *keys):
        """Hold the locks for every key until the block exits."""
        stripes = sorted({self._stripe(key) for key in keys})
        with ExitStack() as stack:
            for index in stripes:
                stack.enter_context(self._locks[index])
            yield


# Shared across every ledger and workflow instance in the process
product_locks = StripedLocks()
order_locks = StripedLocks()
