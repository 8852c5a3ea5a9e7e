"""Logging configuration for dotlink.

Diagnostics go through the standard :mod:`logging` module and are rendered by
:class:`rich.logging.RichHandler` on stderr, so command reports printed on
stdout stay clean.

Example:
    ```python
    from dotlink.logging import setup_logging

    setup_logging(debug=True)
    ```
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

console = Console(stderr=True)


def setup_logging(debug: bool = False) -> None:
    """Set up root logging for a dotlink invocation.

    Args:
        debug: Whether to enable debug logging, including the commands GitPython runs.
    """
    level = logging.DEBUG if debug else logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    handler = RichHandler(
        console=console,
        show_time=debug,
        show_path=debug,
        markup=False,
        rich_tracebacks=True,
    )
    handler.setLevel(level)
    root_logger.addHandler(handler)

    # GitPython logs every command at DEBUG
    logging.getLogger("git").setLevel(logging.DEBUG if debug else logging.WARNING)

    logging.getLogger(__name__).debug("Logging initialized (debug=%s)", debug)
