"""Centralized logging configuration."""

import logging
import re

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that should share the application format
THIRD_PARTY_LOGGERS = (
    "uvicorn",
    "uvicorn.access",
    "uvicorn.error",
    "httpx",
    "fastapi",
)

# Loggers that write outbound request URLs
URL_LOGGERS = ("httpx", "httpcore")

SECRET_PARAMS = ("appid", "api_key", "apikey", "key")
REDACTED = "***"


class SecretQueryFilter(logging.Filter):
    """Masks credentials passed as query parameters in log messages.

    httpx logs every request URL at INFO, and OpenWeatherMap takes its key
    as ``appid=<key>`` in the query string.
    """

    pattern = re.compile(
        r"(?P<name>\b(?:" + "|".join(SECRET_PARAMS) + r")=)[^&\s\"']+",
        re.IGNORECASE
    )

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = self.pattern.sub(rf"\g<name>{REDACTED}", message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def _console_handler(formatter: logging.Formatter, level: int) -> logging.StreamHandler:
    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def configure_logging(level: int = logging.INFO):
    """
    Configure a consistent logging format for the whole service.

    Request URLs logged by httpx have their credentials masked before any
    handler sees them; httpcore's connection chatter is kept at WARNING.

    Args:
        level: Log level applied to the root logger and third-party loggers
    """
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove any existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.addHandler(_console_handler(formatter, level))

    for logger_name in THIRD_PARTY_LOGGERS:
        logger = logging.getLogger(logger_name)
        logger.setLevel(level)

        for handler in logger.handlers[:]:
            logger.removeHandler(handler)

        # Don't propagate to avoid duplicate messages
        logger.propagate = False
        logger.addHandler(_console_handler(formatter, level))

    logging.getLogger("httpcore").setLevel(max(level, logging.WARNING))

    for logger_name in URL_LOGGERS:
        logger = logging.getLogger(logger_name)
        for existing in logger.filters[:]:
            if isinstance(existing, SecretQueryFilter):
                logger.removeFilter(existing)
        logger.addFilter(SecretQueryFilter())
