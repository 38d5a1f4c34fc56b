"""Logging setup"""
import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger once for the application"""
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("splitter").setLevel(level)
