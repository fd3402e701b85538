# pcat/worker.py
from __future__ import annotations

import errno
import logging
import os
import subprocess
from typing import BinaryIO, Sequence

from .config import PLACEHOLDER, render_output_path
from .errors import PcatError

logger = logging.getLogger(__name__)

# Popen errors meaning the command itself could not be executed.
_EXEC_ERRNOS = frozenset({errno.ENOENT, errno.EACCES, errno.EPERM, errno.ENOEXEC, errno.ENOTDIR})


def substitute_placeholder(command: Sequence[str], index: int) -> list[str]:
    """
    Returns a private copy of `command` with every ``%%`` replaced by the
    worker number, zero-padded to two digits (3 -> ``"03"``).
    """
    tag = f"{index:02d}"
    return [arg.replace(PLACEHOLDER, tag) for arg in command]


class Worker:
    """One child process fed through its own pipe."""

    def __init__(self, index: int, command: Sequence[str], output_template: str | None = None) -> None:
        self.index = index
        self.args: list[str] = substitute_placeholder(command, index)
        self.output_path: str | None = (
            render_output_path(output_template, index) if output_template else None
        )
        self.proc: subprocess.Popen[bytes] | None = None
        self.channel: BinaryIO | None = None
        self.exec_error: OSError | None = None

    @property
    def name(self) -> str:
        return f"worker-{self.index:02d}"

    @property
    def pid(self) -> int | None:
        return self.proc.pid if self.proc else None

    @property
    def returncode(self) -> int | None:
        return self.proc.returncode if self.proc else None

    def spawn(self) -> None:
        """
        Creates the input pipe, opens the optional output file and starts the
        command. Only the pipe's write end stays open in the parent.

        A command that cannot be executed is reported and leaves the worker
        without a process: its pipe has no reader, so the first line sent to
        it fails with a broken pipe.
        """
        if self.proc is not None or self.channel is not None:
            raise RuntimeError(f"[{self.name}] already spawned")

        try:
            read_fd, write_fd = os.pipe()
        except OSError as exc:
            raise PcatError("Couldn't create pipe", exc) from exc

        stdout_fd: int | None = None
        try:
            if self.output_path is not None:
                try:
                    # No O_TRUNC: existing content past what the worker writes is kept.
                    stdout_fd = os.open(self.output_path, os.O_WRONLY | os.O_CREAT, 0o666)
                except OSError as exc:
                    raise PcatError(f"Couldn't open {self.output_path}", exc) from exc

            try:
                self.proc = subprocess.Popen(self.args, stdin=read_fd, stdout=stdout_fd)
            except OSError as exc:
                if exc.errno not in _EXEC_ERRNOS:
                    raise PcatError("Couldn't fork", exc) from exc
                self.exec_error = exc
                logger.error("[%s] Couldn't exec %s: %s", self.name, self.args[0], exc.strerror or exc)
        except PcatError:
            os.close(write_fd)
            raise
        finally:
            os.close(read_fd)
            if stdout_fd is not None:
                os.close(stdout_fd)

        self.channel = open(write_fd, "wb", buffering=0)
        if self.proc is not None:
            logger.info("[%s] spawn → pid %s: %s", self.name, self.proc.pid, " ".join(self.args))

    def close(self) -> None:
        """Closes the write end; the child sees end-of-input on stdin."""
        if self.channel is None or self.channel.closed:
            return
        try:
            self.channel.close()
        except OSError as exc:
            raise PcatError("failed to close parent writer", exc) from exc

    def wait(self) -> int | None:
        """Blocks until the child exits and returns its status."""
        if not self.proc:
            return None
        rc = self.proc.wait()
        logger.info("[%s] pid %s exited (RC=%s)", self.name, self.proc.pid, rc)
        return rc
