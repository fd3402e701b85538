# pcat/dispatch/readiness.py
from __future__ import annotations

import logging
import selectors
from typing import Protocol, Sequence

from ..errors import PcatError
from .loop import Channel

logger = logging.getLogger(__name__)


class Readiness(Protocol):
    def wait(self) -> list[int]:
        """Blocks until some channels are writable; returns their positions, ascending."""
        ...


class SelectorReadiness:
    """
    Write-readiness over a fixed set of channels, backed by
    `selectors.DefaultSelector`. `wait()` never times out.
    """

    def __init__(self, channels: Sequence[Channel]) -> None:
        self._selector = selectors.DefaultSelector()
        try:
            for position, channel in enumerate(channels):
                self._selector.register(channel, selectors.EVENT_WRITE, position)
        except OSError as exc:
            self._selector.close()
            raise PcatError("Couldn't watch worker pipe", exc) from exc

    def wait(self) -> list[int]:
        try:
            events = self._selector.select()
        except OSError as exc:
            raise PcatError("select() failed", exc) from exc
        return sorted(key.data for key, mask in events if mask & selectors.EVENT_WRITE)

    def close(self) -> None:
        self._selector.close()

    def __enter__(self) -> SelectorReadiness:
        return self

    def __exit__(self, type, value, traceback) -> None:
        self.close()
