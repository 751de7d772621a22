import sys
import logging
from typing import Any

from loguru import logger

from team_pokedex.config.settings import settings

# Chatty third-party loggers routed through the interceptor
NOISY_LOGGERS = ("httpx", "httpcore")


def third_party_noise_filter(record: dict[str, Any]) -> bool:
    """Drops sub-WARNING records coming from the HTTP stack.

    Intercepted stdlib records keep their original logger name in
    ``extra["logger_name"]``; native loguru records are always kept.
    """
    origin = record["extra"].get("logger_name", "")
    if any(origin == name or origin.startswith(f"{name}.") for name in NOISY_LOGGERS):
        return record["level"].no >= logger.level("WARNING").no
    return True


def setup_logging() -> None:
    """Configures Loguru logger based on application settings."""
    logger.remove()  # Remove default handler

    # stdout is reserved for the JSON dataset, so everything goes to stderr
    logger.add(
        sys.stderr,
        level=settings.log_level.upper(),
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        ),
        colorize=True,
        backtrace=True,
        diagnose=True,
        filter=third_party_noise_filter,
    )

    logger.debug(f"Logging initialized with level: {settings.log_level}")

    # Intercept standard logging messages
    class InterceptHandler(logging.Handler):
        def emit(self, record: logging.LogRecord) -> None:
            # Get corresponding Loguru level if it exists
            try:
                level = logger.level(record.levelname).name
            except ValueError:
                level = record.levelno

            # Find caller from where originated the logged message
            frame, depth = logging.currentframe(), 2
            while frame.f_code.co_filename == logging.__file__:
                frame = frame.f_back
                depth += 1

            logger.bind(logger_name=record.name).opt(
                depth=depth, exception=record.exc_info
            ).log(level, record.getMessage())

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    logger.debug("Standard logging intercepted.")
