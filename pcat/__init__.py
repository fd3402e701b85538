"""
pcat – stdin line-level parallelism
===================================

Root package. Holds the distribution metadata and exposes the high-level
pieces without loading the CLI (Typer is only imported by `run_cli`).
"""
from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version as _pkg_version

# ---------------------------------------------------------------------------#
# Metadata
# ---------------------------------------------------------------------------#
try:
    __version__: str = _pkg_version(__name__)
except PackageNotFoundError:  # running from source tree
    __version__ = "0.0.0.dev0"

# ---------------------------------------------------------------------------#
# Public API
# ---------------------------------------------------------------------------#
from .config import Config  # noqa: E402
from .errors import PcatError  # noqa: E402
from .pool import WorkerPool  # noqa: E402


def run_cli() -> None:
    """
    Entry point for launching the CLI from code:

    ```python
    import pcat
    pcat.run_cli()
    ```
    """
    from .cli import cli  # noqa: E402 (deferred import)

    cli()


__all__ = [
    "__version__",
    "Config",
    "PcatError",
    "WorkerPool",
    "run_cli",
]
