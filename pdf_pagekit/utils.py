"""Utility functions shared by PDF PageKit components."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from .exceptions import OperationCancelled, OperationFailed, PageKitError

MM_TO_POINTS = 2.83465


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.propagate = False
    if level:
        logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
    return logger


LOGGER = get_logger("pdf_pagekit")


@contextmanager
def operation_scope(operation: str, logger: logging.Logger = LOGGER) -> Iterator[None]:
    """Surface any failure inside the block as one operation-scoped error."""

    try:
        yield
    except OperationCancelled as exc:
        logger.info("%s cancelled", operation)
        raise exc.for_operation(operation)
    except PageKitError as exc:
        exc.for_operation(operation)
        logger.error("%s", exc)
        raise
    except Exception as exc:
        error = OperationFailed(str(exc) or type(exc).__name__, cause=exc).for_operation(operation)
        logger.error("%s", error)
        raise error from exc


def mm_to_points(value: float) -> float:
    return value * MM_TO_POINTS


def format_file_size(size_bytes: float) -> str:
    """
    Format file size in human-readable format.

    Args:
        size_bytes: File size in bytes

    Returns:
        Formatted string (e.g., "1.5 MB", "500 KB")
    """
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if size_bytes < 1024.0:
            return f"{size_bytes:.1f} {unit}"
        size_bytes /= 1024.0
    return f"{size_bytes:.1f} PB"
