"""Centralized logging configuration with a Rich console handler."""

import logging

from rich.logging import RichHandler

_FORMAT = "%(name)s  %(message)s"
_DATE_FMT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str = "INFO") -> None:
    """Attach a RichHandler to the root logger once and set the level."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    if any(isinstance(h, RichHandler) for h in root.handlers):
        return

    handler = RichHandler(rich_tracebacks=True, show_path=False)
    handler.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATE_FMT))
    root.addHandler(handler)

    # The engine client logs every HTTP request at INFO
    logging.getLogger("elastic_transport").setLevel(logging.WARNING)
