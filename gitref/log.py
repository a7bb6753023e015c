"""Logging helpers for gitref.

Library modules only ever ask for a logger through `get_logger`; handlers
are installed by `configure_logging`, which applications call once.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

BASE_LOGGER = "gitref"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a namespaced logger under 'gitref'."""
    if not name or name == BASE_LOGGER:
        return logging.getLogger(BASE_LOGGER)
    if name.startswith(f"{BASE_LOGGER}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{BASE_LOGGER}.{name}")


def configure_logging(verbose: bool = False, console: Console | None = None) -> logging.Logger:
    """Attach a rich handler to the 'gitref' logger and return it.

    Calling this again only updates the level.

    Args:
        verbose: Log at DEBUG instead of WARNING
        console: Console to write to (stderr by default)
    """
    base = logging.getLogger(BASE_LOGGER)
    base.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if any(isinstance(h, RichHandler) for h in base.handlers):
        return base

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=False,
        show_path=verbose,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    base.addHandler(handler)
    base.propagate = False
    return base
