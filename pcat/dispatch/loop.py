# pcat/dispatch/loop.py
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol, Sequence

from ..errors import PcatError
from .lines import LineReader

if TYPE_CHECKING:
    from .readiness import Readiness

logger = logging.getLogger(__name__)


class Channel(Protocol):
    """Write end of a worker's input pipe (an unbuffered binary file)."""

    def write(self, data: bytes | memoryview, /) -> int | None: ...

    def fileno(self) -> int: ...


def write_all(channel: Channel, data: bytes) -> None:
    """Writes `data` to `channel` in full, resuming after short writes."""
    view = memoryview(data)
    while view:
        try:
            written = channel.write(view)
        except OSError as exc:
            raise PcatError("write() failed", exc) from exc
        view = view[written or 0:]


class Dispatcher:
    """
    Feeds logical lines from a `LineReader` to whichever channels the
    `Readiness` source reports writable.

    Ready channels are served in ascending order within a round, one logical
    line each; an overlong line goes entirely to the channel that started it.
    The loop ends as soon as the reader is exhausted, even mid-round.
    """

    def __init__(self, channels: Sequence[Channel], reader: LineReader, readiness: Readiness) -> None:
        self._channels = channels
        self._reader = reader
        self._readiness = readiness
        self.counts: list[int] = [0] * len(channels)

    def feed(self, position: int) -> bool:
        """Sends one logical line to channel `position`; False once input is exhausted."""
        channel = self._channels[position]
        delivered = False
        for chunk in self._reader.chunks():
            write_all(channel, chunk)
            delivered = True
        if delivered:
            self.counts[position] += 1
        return delivered

    def run(self) -> list[int]:
        """Runs until the input is exhausted; returns lines delivered per channel."""
        while not self._reader.exhausted:
            ready = self._readiness.wait()
            logger.debug("writable: %s", ready)
            for position in ready:
                if not self.feed(position):
                    break
        logger.debug("dispatch finished: %s lines %s", sum(self.counts), self.counts)
        return self.counts
