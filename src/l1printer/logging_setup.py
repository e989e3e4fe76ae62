"""Logging configuration for l1printer."""

import logging

# Per-element and per-packet detail, below DEBUG
VERBOSE = 5
logging.addLevelName(VERBOSE, "VERBOSE")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def log_level(debug: bool = False, verbose: bool = False) -> int:
    """Pick the root log level for the debug/verbose switches."""
    if verbose:
        return VERBOSE
    if debug:
        return logging.DEBUG
    return logging.INFO


def configure_logging(debug: bool = False, verbose: bool = False) -> None:
    """Configure root logging for command line runs."""
    logging.basicConfig(level=log_level(debug, verbose), format=LOG_FORMAT)
    # Pillow logs PNG chunk details at DEBUG
    logging.getLogger("PIL").setLevel(logging.INFO)
