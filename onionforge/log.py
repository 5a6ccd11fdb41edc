"""Logging setup for the onionforge CLI.

Library modules only call logging.getLogger(__name__); handlers are installed
here, once, by the CLI entry point.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_HANDLER_NAME = "onionforge-rich"


def setup_logging(verbose: bool = False, console: Console | None = None) -> logging.Logger:
    """Attach a RichHandler to the ``onionforge`` logger.

    WARNING and above by default, DEBUG when verbose. Calling it again only
    adjusts the level.
    """
    logger = logging.getLogger("onionforge")
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    if not any(h.get_name() == _HANDLER_NAME for h in logger.handlers):
        handler = RichHandler(
            console=console or Console(stderr=True),
            show_path=False,
            show_time=verbose,
        )
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter("%(name)s │ %(message)s"))
        logger.addHandler(handler)

    return logger
