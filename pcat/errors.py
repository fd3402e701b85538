# pcat/errors.py
from __future__ import annotations


class PcatError(RuntimeError):
    """
    Fatal failure of a system-level operation (pipe, spawn, read, write, wait).

    The message reads like ``perror``: ``"<operation>: <strerror>"``.
    """

    def __init__(self, operation: str, cause: OSError | None = None) -> None:
        self.operation = operation
        self.cause = cause
        super().__init__(self._format())

    def _format(self) -> str:
        if self.cause is None:
            return self.operation
        reason = self.cause.strerror or str(self.cause)
        return f"{self.operation}: {reason}"
