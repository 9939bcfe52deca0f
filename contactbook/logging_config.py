"""Logging setup for the Contacts API.

``setup_logging`` attaches a single console handler to the root logger.
Calling it again is a no-op, so tests and repeated ``create_app`` calls
do not stack handlers.
"""

import logging


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger.

    Args:
        level (str): Logging level name, case insensitive. Unknown names
            fall back to ``INFO``.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    root.addHandler(handler)
