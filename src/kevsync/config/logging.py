"""Logging setup for the kevsync command line."""

from __future__ import annotations

import logging

# httpx and httpcore report every request at INFO
_CHATTY_LOGGERS = ("httpx", "httpcore")


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Configure the root logger for CLI output.

    HTTP client libraries are held at WARNING or above so a run prints one line
    per reconciliation step. ``force=True`` replaces previously installed handlers.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        force=force,
    )
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
