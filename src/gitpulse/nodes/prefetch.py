"""Producer/consumer handoff that overlaps history reads with aggregation."""

import queue
import threading
from typing import Iterable, Iterator, TypeVar

from loguru import logger

T = TypeVar("T")

_DONE = object()
_POLL_SECONDS = 0.1


class _Failure:
    def __init__(self, error: BaseException):
        self.error = error


def prefetch(source: Iterable[T], depth: int) -> Iterator[T]:
    """Iterate ``source`` on a worker thread, at most ``depth`` items ahead.

    Items arrive in exactly the order the source produced them. An exception
    raised by the source is re-raised in the consumer. Closing the returned
    generator early stops the worker and closes the source. ``depth <= 0``
    iterates the source directly.
    """
    if depth <= 0:
        yield from source
        return

    handoff: "queue.Queue[object]" = queue.Queue(maxsize=depth)
    stop = threading.Event()
    iterator = iter(source)

    def offer(item: object) -> bool:
        while not stop.is_set():
            try:
                handoff.put(item, timeout=_POLL_SECONDS)
                return True
            except queue.Full:
                continue
        return False

    def produce() -> None:
        try:
            for item in iterator:
                if not offer(item):
                    return
        except BaseException as e:
            offer(_Failure(e))
            return
        offer(_DONE)

    worker = threading.Thread(target=produce, name="gitpulse-prefetch", daemon=True)
    worker.start()
    logger.debug(f"Prefetching history with depth {depth}")
    try:
        while True:
            try:
                item = handoff.get(timeout=_POLL_SECONDS)
            except queue.Empty:
                if worker.is_alive():
                    continue
                try:
                    item = handoff.get_nowait()
                except queue.Empty:
                    raise RuntimeError("prefetch worker stopped without finishing") from None
            if item is _DONE:
                return
            if isinstance(item, _Failure):
                raise item.error
            yield item
    finally:
        stop.set()
        worker.join()
        close = getattr(iterator, "close", None)
        if close is not None:
            close()
