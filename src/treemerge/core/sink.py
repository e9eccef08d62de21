# src/treemerge/core/sink.py
from typing import BinaryIO

from treemerge.core.channel import RecordChannel
from treemerge.errors import SinkError
from treemerge.models import SinkStats


class AggregationSink:
    """
    The only writer of the output. Drains the channel in arrival order,
    one write() per record so records are never interleaved.
    """

    def __init__(self, channel: RecordChannel, destination: BinaryIO):
        self.channel = channel
        self.destination = destination
        self.stats = SinkStats()

    def drain(self) -> SinkStats:
        try:
            for record in self.channel:
                self.destination.write(record.data)
                self.stats.add(record)
            flush = getattr(self.destination, "flush", None)
            if flush is not None:
                flush()
        except OSError as e:
            # Stop the producers; whatever is still buffered is dropped
            self.channel.cancel()
            raise SinkError(f"Could not write output: {e}") from e
        except Exception:
            self.channel.cancel()
            raise
        return self.stats
