"""
pcat.dispatch.lines
===================

`LineReader` turns the input stream into *logical lines*.

A logical line is read as one or more chunks of at most ``max_line_bytes``.
A chunk that fills the whole bound without ending in a newline is overlong
and the line continues in the next chunk, so the caller can hand every chunk
of the same line to the same worker.
"""
from __future__ import annotations

import logging
from typing import BinaryIO, Iterator

from ..config import MAX_LINE_BYTES
from ..errors import PcatError

logger = logging.getLogger(__name__)


class LineReader:
    def __init__(self, stream: BinaryIO, max_line_bytes: int = MAX_LINE_BYTES) -> None:
        self._stream = stream
        self.max_line_bytes = max_line_bytes
        self.exhausted = False

    def _read_chunk(self) -> bytes:
        try:
            return self._stream.readline(self.max_line_bytes)
        except OSError as exc:
            raise PcatError("Couldn't read stdin", exc) from exc

    def _is_complete(self, chunk: bytes) -> bool:
        return len(chunk) < self.max_line_bytes or chunk.endswith(b"\n")

    def chunks(self) -> Iterator[bytes]:
        """
        Yields the chunks of the next logical line, verbatim.

        Yields nothing (and sets `exhausted`) once the stream is at EOF.
        """
        if self.exhausted:
            return
        while True:
            chunk = self._read_chunk()
            if not chunk:
                logger.debug("stdin EOF")
                self.exhausted = True
                return
            yield chunk
            if self._is_complete(chunk):
                return
