"""Logging configuration for the people search system."""

import logging
import sys
from typing import Optional


def setup_logging(
    level: str = "INFO",
    format_string: Optional[str] = None,
    include_timestamp: bool = True
) -> None:
    """
    Set up logging for the people search system.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_string: Custom format string
        include_timestamp: Whether to include timestamps
    """
    if format_string is None:
        if include_timestamp:
            format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        else:
            format_string = "%(name)s - %(levelname)s - %(message)s"

    numeric_level = getattr(logging, level.upper())

    logging.basicConfig(
        level=numeric_level,
        format=format_string,
        stream=sys.stdout,
        force=True
    )

    logging.getLogger("people_search").setLevel(numeric_level)

    # Provider SDK and HTTP transport are chatty at INFO
    for noisy in ("openai", "httpx", "httpcore", "sklearn", "numpy"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.info(f"Logging configured with level: {level}")
