"""
Logging setup shared by the HTTP app, the Lambda adapters and the CLI.

Every line carries the service name and the function handling the current
request (``webhook-proxy`` / ``kajabi-tag``, ``-`` outside a request).
"""

import functools
import sys

from loguru import logger

NO_HANDLER = "-"

TEXT_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | "
    "{extra[service]} [{extra[handler]}] {name}:{line} - {message}"
)

_configured = False


def setup_logging(
    service_name: str,
    log_level: str = "INFO",
    enable_json: bool = False,
) -> None:
    """
    Replace loguru's default sink with a single stdout sink.

    Args:
        service_name: Name bound to every record
        log_level: Minimum level
        enable_json: Emit one serialized JSON record per line instead of text
    """
    global _configured

    logger.remove()
    logger.configure(extra={"service": service_name, "handler": NO_HANDLER})

    if enable_json:
        logger.add(sys.stdout, level=log_level.upper(), serialize=True)
    else:
        logger.add(
            sys.stdout,
            format=TEXT_FORMAT,
            level=log_level.upper(),
            colorize=True,
            backtrace=True,
            diagnose=False,
        )

    _configured = True
    logger.debug(f"Logging configured at level {log_level}")


def ensure_logging(service_name: str) -> None:
    """Configure logging from settings once per process (cold start)."""
    if _configured:
        return

    from lead_capture.config.settings import get_settings

    settings = get_settings()
    setup_logging(service_name, settings.log_level, enable_json=settings.log_json)


def logged_as(handler: str):
    """Tag every record logged while the decorated coroutine runs with ``handler``."""

    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            with logger.contextualize(handler=handler):
                return await func(*args, **kwargs)

        return wrapper

    return decorator
