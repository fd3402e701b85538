"""
pcat.dispatch
=============

Readiness-driven line multiplexing:

* `LineReader` – splits the input into logical lines (chunked when overlong).
* `SelectorReadiness` – blocking write-readiness wait over the worker pipes.
* `Dispatcher` – the loop that ties both together.
"""
from __future__ import annotations

from typing import BinaryIO, Sequence

from ..config import MAX_LINE_BYTES
from .lines import LineReader
from .loop import Channel, Dispatcher, write_all
from .readiness import Readiness, SelectorReadiness


def dispatch(channels: Sequence[Channel], stream: BinaryIO, max_line_bytes: int = MAX_LINE_BYTES) -> list[int]:
    """Feeds `stream` to `channels` until EOF; returns lines delivered per channel."""
    reader = LineReader(stream, max_line_bytes)
    with SelectorReadiness(channels) as readiness:
        return Dispatcher(channels, reader, readiness).run()


__all__ = [
    "Channel",
    "Dispatcher",
    "LineReader",
    "Readiness",
    "SelectorReadiness",
    "dispatch",
    "write_all",
]
