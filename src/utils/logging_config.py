"""Root logger setup for the bakeries API, driven by ``LOG_*`` environment variables."""

import os
import logging
import sys
from pythonjsonlogger import jsonlogger

# Client libraries that log every request at INFO
QUIET_LOGGERS = ("httpx", "httpcore", "hpack", "supabase", "postgrest", "passlib")


class LoggingConfig:
    """Process-wide logging settings for API handlers and services."""

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
    LOG_FORMAT = os.environ.get("LOG_FORMAT", "json").lower()
    LOG_MASK_SENSITIVE = os.environ.get("LOG_MASK_SENSITIVE", "true").lower() == "true"
    LOG_CORRELATION_ID_HEADER = os.environ.get("LOG_CORRELATION_ID_HEADER", "X-Correlation-ID")
    LOG_SLOW_OPERATION_THRESHOLD_MS = int(os.environ.get("LOG_SLOW_OPERATION_THRESHOLD_MS", "1000"))
    LOG_SERVICE_NAME = os.environ.get("LOG_SERVICE_NAME", "bakeries-backend")

    _configured = False

    @classmethod
    def level(cls) -> int:
        return getattr(logging, cls.LOG_LEVEL, logging.INFO)

    @classmethod
    def build_formatter(cls) -> logging.Formatter:
        """JSON lines tagged with the service name, or plain text for local runs."""
        if cls.LOG_FORMAT != "json":
            return logging.Formatter("%(asctime)s %(levelname)-8s [%(name)s] %(message)s")
        return jsonlogger.JsonFormatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s",
            rename_fields={"levelname": "level", "asctime": "time"},
            static_fields={"service": cls.LOG_SERVICE_NAME},
        )

    @classmethod
    def setup_logging(cls, force: bool = False) -> None:
        """Install a single stdout handler on the root logger (once per process)."""
        if cls._configured and not force:
            return

        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(cls.level())
        handler.setFormatter(cls.build_formatter())

        root_logger = logging.getLogger()
        root_logger.handlers.clear()
        root_logger.setLevel(cls.level())
        root_logger.addHandler(handler)

        for name in QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
        cls._configured = True
