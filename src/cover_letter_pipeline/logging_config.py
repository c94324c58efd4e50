"""Logging configuration for the cover letter pipeline."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a specific module.

    Args:
        name: Short name of the module (e.g. "generator")

    Returns:
        Logger instance
    """
    return logging.getLogger(f"cover_letter_pipeline.{name}")


def configure_logging(verbose: bool = False) -> None:
    """Configure root logging for command-line use.

    Args:
        verbose: Emit DEBUG messages when True, INFO otherwise
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
    )
