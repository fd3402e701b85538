# pcat/pool.py
from __future__ import annotations

import logging
from typing import BinaryIO

from .config import Config
from .dispatch import dispatch
from .errors import PcatError
from .worker import Worker

logger = logging.getLogger(__name__)


class WorkerPool:
    """
    Fixed-size pool of worker processes, each fed through its own pipe.

    Lifecycle: `start()` → `feed(stream)` → `shutdown()`.
    """

    def __init__(self, cfg: Config) -> None:
        self._cfg = cfg
        self._workers: list[Worker] = []

    @property
    def size(self) -> int:
        return len(self._workers)

    @property
    def workers(self) -> tuple[Worker, ...]:
        return tuple(self._workers)

    @property
    def channels(self) -> list[BinaryIO]:
        """Write ends of the worker pipes, in worker order."""
        return [w.channel for w in self._workers if w.channel is not None]

    def start(self) -> None:
        """
        Spawns every worker. A pipe, fork or output-file failure closes the
        ones already started and re-raises; a command that cannot be executed
        only leaves that worker without a process (see `Worker.spawn`).
        """
        if self._workers:
            raise RuntimeError("WorkerPool already started")

        for index in range(1, self._cfg.procs + 1):
            worker = Worker(index, self._cfg.command, self._cfg.output_template)
            try:
                worker.spawn()
            except PcatError as e:
                logger.error("Failed to start %s: %s", worker.name, e)
                self.abort()
                self._workers.clear()
                raise
            self._workers.append(worker)
        logger.info("WorkerPool: %s workers started.", len(self._workers))

    def feed(self, stream: BinaryIO) -> list[int]:
        """Dispatches `stream` line by line to the workers until EOF."""
        if not self._workers:
            raise RuntimeError("WorkerPool not started")
        counts = dispatch(self.channels, stream, self._cfg.max_line_bytes)
        for worker, count in zip(self._workers, counts):
            logger.info("[%s] received %s lines", worker.name, count)
        return counts

    def shutdown(self) -> None:
        """Closes every input pipe, then waits for all the children to exit."""
        logger.info("WorkerPool.shutdown() …")
        for w in self._workers:
            w.close()
        for w in self._workers:
            w.wait()
        logger.info("WorkerPool finished.")

    def abort(self) -> None:
        """Closes the input pipes without waiting; used on fatal errors."""
        for w in self._workers:
            if w.channel is not None and not w.channel.closed:
                try:
                    w.channel.close()
                except OSError as e:
                    logger.error("[%s] error closing pipe: %s", w.name, e)
