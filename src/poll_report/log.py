"""Logging configuration for poll-report."""

from __future__ import annotations

import logging
import sys

import fitz  # PyMuPDF

_FORMAT = "%(asctime)s %(levelname)-5s %(name)s: %(message)s"


def _level_for(verbose: bool | None) -> int:
    if verbose is True:
        return logging.DEBUG
    if verbose is None:
        return logging.INFO
    return logging.WARNING


def setup_logging(
    verbose: bool | None = False,
    log_file: str | None = None,
) -> None:
    """Configure the ``poll_report`` logger hierarchy.

    Parameters
    ----------
    verbose:
        *True* for DEBUG, *False* for WARNING (the CLI default), *None* for INFO.
        MuPDF's own console messages (missing glyphs and the like) are only
        shown in verbose mode.
    log_file:
        If given, also write log output to this file path.
    """
    level = _level_for(verbose)
    logger = logging.getLogger("poll_report")
    logger.setLevel(level)
    fitz.TOOLS.mupdf_display_errors(verbose is True)

    # Called again from tests or a second CLI invocation in-process
    if logger.handlers:
        for handler in logger.handlers:
            handler.setLevel(level)
        return

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(handler)
