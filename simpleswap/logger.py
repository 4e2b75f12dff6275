"""Console logging setup for SimpleSwap entry points.

Library modules only call ``logging.getLogger(__name__)``; entry points
call ``configure_logging`` once to attach a rich console handler.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

_HANDLER_NAME = "simpleswap-console"


def configure_logging(level: str = "WARNING") -> logging.Logger:
    """Attach a RichHandler to the ``simpleswap`` logger.

    Calling it again only updates the level.

    Args:
        level: Logging level name such as "INFO" or "DEBUG"

    Returns:
        The configured ``simpleswap`` logger
    """
    logger = logging.getLogger("simpleswap")
    logger.setLevel(level.upper())

    if not any(h.get_name() == _HANDLER_NAME for h in logger.handlers):
        handler = RichHandler(
            console=Console(stderr=True),
            show_path=False,
            rich_tracebacks=False,
            markup=False,
        )
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s", datefmt="[%X]"))
        logger.addHandler(handler)
        logger.propagate = False

    return logger
