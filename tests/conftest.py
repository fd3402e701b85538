"""
Fixtures and fakes shared by the whole PyTest suite.

* Fake channels/readiness let the dispatch loop run without processes or pipes.
* `passthrough_cmd` is a portable `cat` built on the running interpreter.
"""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Iterable

import pytest


# ════════════════════════════════════════════════════════════════════════════
# Environment: keep PCAT_* / LOG_LEVEL from leaking into Config defaults
# ════════════════════════════════════════════════════════════════════════════
@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch):
    for name in ("PCAT_PROCS", "PCAT_OUTPUT", "PCAT_MAX_LINE_BYTES", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    yield


# ════════════════════════════════════════════════════════════════════════════
# Real child processes
# ════════════════════════════════════════════════════════════════════════════
COPY_STDIN = "import shutil, sys; shutil.copyfileobj(sys.stdin.buffer, sys.stdout.buffer)"


@pytest.fixture
def passthrough_cmd() -> list[str]:
    return [sys.executable, "-c", COPY_STDIN]


def read_outputs(paths: Iterable[Path]) -> list[bytes]:
    """All lines written to `paths`, in file order."""
    lines: list[bytes] = []
    for p in paths:
        lines.extend(p.read_bytes().splitlines(keepends=True))
    return lines


# ════════════════════════════════════════════════════════════════════════════
# In-memory fakes for the dispatch loop
# ════════════════════════════════════════════════════════════════════════════
class FakeChannel:
    """Records every write; optionally accepts at most `max_write` bytes per call."""

    def __init__(self, fd: int = 100, max_write: int | None = None) -> None:
        self._fd = fd
        self.max_write = max_write
        self.writes: list[bytes] = []

    def write(self, data) -> int:
        chunk = bytes(data[: self.max_write] if self.max_write else data)
        self.writes.append(chunk)
        return len(chunk)

    def fileno(self) -> int:
        return self._fd

    @property
    def data(self) -> bytes:
        return b"".join(self.writes)

    def lines(self) -> list[bytes]:
        return self.data.splitlines(keepends=True)


class ScriptedReadiness:
    """Returns scripted rounds of ready positions; once used up, everyone is ready."""

    def __init__(self, size: int, rounds: Iterable[list[int]] = ()) -> None:
        self._size = size
        self._rounds = list(rounds)
        self.calls = 0

    def wait(self) -> list[int]:
        self.calls += 1
        if self._rounds:
            return self._rounds.pop(0)
        return list(range(self._size))


class CapacityReadiness:
    """
    Simulates pipe buffers: each channel accepts `capacity[i]` lines before it
    blocks. When nobody is writable, the "children" drain every buffer.
    """

    def __init__(self, channels: list[FakeChannel], capacity: list[int]) -> None:
        self._channels = channels
        self._capacity = capacity
        self._seen = [0] * len(channels)

    def wait(self) -> list[int]:
        ready = self._ready()
        if not ready:
            self._seen = [len(c.lines()) for c in self._channels]
            ready = self._ready()
        return ready

    def _ready(self) -> list[int]:
        return [
            i for i, c in enumerate(self._channels)
            if len(c.lines()) - self._seen[i] < self._capacity[i]
        ]


@pytest.fixture
def fake_channels():
    def _make(n: int, **kwargs) -> list[FakeChannel]:
        return [FakeChannel(fd=100 + i, **kwargs) for i in range(n)]
    return _make
