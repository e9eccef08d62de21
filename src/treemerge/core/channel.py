# src/treemerge/core/channel.py
import queue
import threading
from typing import Iterator

from treemerge.config import CHANNEL_CAPACITY, SEND_POLL_INTERVAL
from treemerge.models import Record

_CLOSED = object()


class RecordChannel:
    """
    Bounded hand-off between the walkers and the single sink.

    send() blocks while the channel is full (backpressure) but gives up as
    soon as the run is cancelled, so a dead sink never strands a producer.
    """

    def __init__(self, capacity: int = CHANNEL_CAPACITY, poll_interval: float = SEND_POLL_INTERVAL):
        if capacity < 1:
            raise ValueError("channel capacity must be at least 1")
        self.capacity = capacity
        self.poll_interval = poll_interval
        self._queue: "queue.Queue" = queue.Queue(maxsize=capacity)
        self._cancelled = threading.Event()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self) -> None:
        self._cancelled.set()

    def _put(self, item) -> bool:
        while not self._cancelled.is_set():
            try:
                self._queue.put(item, timeout=self.poll_interval)
                return True
            except queue.Full:
                continue
        return False

    def send(self, record: Record) -> bool:
        """Returns False if the run was cancelled before the record was queued."""
        return self._put(record)

    def close(self) -> None:
        self._put(_CLOSED)

    def __iter__(self) -> Iterator[Record]:
        while True:
            item = self._queue.get()
            if item is _CLOSED:
                return
            yield item
