"""Background decoding of records ahead of the replay thread.

Decoding (decompression, PGN parsing, filtering) runs in one producer thread
that feeds a single bounded queue. The replay thread consumes in arrival
order; when the queue is full the producer blocks. Rating state is never
touched by the producer.
"""

from __future__ import annotations

import logging
import queue
import threading
from typing import Iterable, Iterator, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)

_DONE = object()


class _ProducerError:
    def __init__(self, error: BaseException) -> None:
        self.error = error


def prefetch(
    items: Iterable[T], maxsize: int, poll_interval: float = 0.1
) -> Iterator[T]:
    """
    Iterate ``items`` while a background thread produces them.

    Args:
        items: Source iterable, consumed only by the producer thread.
        maxsize: Queue bound; the producer blocks when this many items are
            waiting. A value below 1 disables the thread.
        poll_interval: Seconds between stop checks of a blocked producer.

    Yields:
        The items of ``items`` in their original order.

    Raises:
        Any exception raised by the source iterable, re-raised in the
        consumer after the items produced before it.
    """
    if maxsize < 1:
        yield from items
        return

    buffer: queue.Queue = queue.Queue(maxsize=maxsize)
    stop = threading.Event()

    def put(item: object) -> bool:
        while not stop.is_set():
            try:
                buffer.put(item, timeout=poll_interval)
                return True
            except queue.Full:
                continue
        return False

    def produce() -> None:
        source = iter(items)
        try:
            for item in source:
                if not put(item):
                    return
        except BaseException as error:  # handed to the consumer
            put(_ProducerError(error))
            return
        finally:
            # Release open files of an abandoned source on this thread
            close = getattr(source, "close", None)
            if close is not None:
                close()
        put(_DONE)

    producer = threading.Thread(
        target=produce, name="ratingbench-prefetch", daemon=True
    )
    producer.start()

    try:
        while True:
            item = buffer.get()
            if item is _DONE:
                break
            if isinstance(item, _ProducerError):
                raise item.error
            yield item
    finally:
        # Early exit: unblock the producer and wait for it
        stop.set()
        while producer.is_alive():
            try:
                buffer.get_nowait()
            except queue.Empty:
                pass
            producer.join(timeout=poll_interval)
        logger.debug("prefetch producer stopped")
