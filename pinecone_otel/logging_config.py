"""Centralized logging configuration"""
import logging
import sys
from typing import Optional

LOGGER_NAME = "pinecone_otel"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = "INFO", log_file: Optional[str] = None):
    """Configure logging for the library"""
    log_level = getattr(logging, level.upper(), logging.INFO)
    if not isinstance(log_level, int):
        log_level = logging.INFO

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(level=log_level, format=LOG_FORMAT, handlers=handlers)

    # Set library logger
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_level)

    return logger
