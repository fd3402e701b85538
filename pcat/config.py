# pcat/config.py

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

DEF_PROCS = 2
MAX_PROCS = 32
MAX_LINE_BYTES = 65535

PLACEHOLDER = "%%"


# --- Helpers ---
def _getenv_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None: return default
    try: return int(raw)
    except (TypeError, ValueError): return default


def render_output_path(template: str, index: int) -> str:
    """Renders an output template (one integer placeholder) for worker `index`."""
    try:
        return template % index
    except (TypeError, ValueError) as exc:
        raise ValueError(
            f"Output template {template!r} must contain exactly one integer placeholder (e.g. %d)."
        ) from exc


@dataclass(slots=True)
class Config:
    # --- Pool ---
    procs: int = field(default_factory=lambda: _getenv_int("PCAT_PROCS", DEF_PROCS))
    command: list[str] = field(default_factory=list)
    output_template: str | None = field(default_factory=lambda: os.getenv("PCAT_OUTPUT") or None)

    # --- Dispatch ---
    max_line_bytes: int = field(default_factory=lambda: _getenv_int("PCAT_MAX_LINE_BYTES", MAX_LINE_BYTES))

    # --- Logging ---
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "WARNING"))

    def __post_init__(self) -> None:
        """Clamps the pool size and validates the command and templates."""
        if self.procs < 1:
            self.procs = DEF_PROCS
        elif self.procs > MAX_PROCS:
            self.procs = MAX_PROCS

        self.command = [str(arg) for arg in self.command]
        if not self.command:
            raise ValueError("No command given. Usage: pcat [-p num-procs] cmd [cmd-arguments]")

        if self.max_line_bytes < 2:
            raise ValueError(f"max_line_bytes must be at least 2 (got {self.max_line_bytes}).")

        if self.output_template is not None:
            # Both renders must succeed and differ, otherwise workers would share a file.
            first = render_output_path(self.output_template, 1)
            if self.procs > 1 and first == render_output_path(self.output_template, 2):
                raise ValueError(
                    f"Output template {self.output_template!r} does not depend on the worker number."
                )

        self.log_level = self.log_level.upper()
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ValueError(f"Unknown log level {self.log_level!r}.")

    def __repr__(self) -> str:
        output_info = f", output='{self.output_template}'" if self.output_template else ""
        params = (
            f"procs={self.procs}, command={' '.join(self.command)!r}, "
            f"max_line={self.max_line_bytes}{output_info}"
        )
        return f"<Config {params}>"
