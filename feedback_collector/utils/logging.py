"""Logging setup and helpers with conditional debug output."""

import logging
import traceback
from typing import Optional

from litestar import Request

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Toggled by configure_logging() from Settings.debug
DEBUG = False

# Get the main logger
logger = logging.getLogger("FeedbackCollector")


def configure_logging(debug: bool = False) -> None:
    """Configure root logging once for the process."""
    global DEBUG
    DEBUG = debug
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format=LOG_FORMAT,
    )
    logger.setLevel(logging.DEBUG if debug else logging.INFO)


def debug_log(message: str, *args, **kwargs) -> None:
    """%-style debug message, emitted only when debug logging is on. Accepts ``level=``."""
    if DEBUG:
        level = kwargs.pop("level", logging.DEBUG)
        logger.log(level, message, *args, **kwargs)


def error_log(
    message: str,
    exc: Optional[Exception] = None,
    context: Optional[dict] = None,
    *args,
    **kwargs
) -> None:
    """Log ``message`` with ``key=value`` context and, if given, the exception (traceback in debug)."""
    parts = [message]

    if context:
        context_str = ", ".join(f"{k}={v}" for k, v in context.items())
        parts.append(f"Context: {context_str}")

    if exc:
        parts.append(f"Exception: {type(exc).__name__}: {exc}")

        # Include full traceback in debug mode
        if DEBUG:
            parts.append(f"Traceback:\n{''.join(traceback.format_exception(type(exc), exc, exc.__traceback__))}")

    full_message = " | ".join(parts)

    if exc:
        logger.error(full_message, *args, exc_info=exc, **kwargs)
    else:
        logger.error(full_message, *args, **kwargs)


def log_request_error(request: Request, exc: Exception, message: Optional[str] = None) -> None:
    """Log an exception raised while serving ``request``."""
    context = {
        "method": request.method,
        "path": request.url.path,
        "user_agent": request.headers.get("user-agent", "unknown"),
    }
    error_log(message or f"Unhandled exception: {type(exc).__name__}", exc=exc, context=context)
