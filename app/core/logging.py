"""Logging setup shared by the API and scripts."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once; later calls only adjust the level."""
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    root.setLevel(level.upper())
    # SQL echo is controlled by the engine's ``echo`` flag, keep the pool quiet
    logging.getLogger("sqlalchemy.pool").setLevel(logging.WARNING)
