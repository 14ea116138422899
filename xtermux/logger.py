import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Route application logs to stdout; the level is updated on every call."""
    logging.basicConfig(format=LOG_FORMAT, stream=sys.stdout)
    logging.getLogger("xtermux").setLevel(level.upper())
