"""Factory classes for creating configured service instances."""

import logging
from typing import Any, Optional

from .codec import PillowCodec
from .config import ServiceSettings
from .logging_config import setup_logger
from .observability import LogContext, MetricsCollector, StructuredLogger
from .protocols import CodecProtocol, LoggerProtocol
from ..service import WebReadyService


class LoggerAdapter:
    """Adapter making a standard logger compatible with LoggerProtocol."""

    def __init__(self, logger: logging.Logger):
        self._structured = StructuredLogger(logger)

    def debug(self, message: str, context: Optional[LogContext] = None, **kwargs: Any) -> None:
        self._structured.debug(message, context, **kwargs)

    def info(self, message: str, context: Optional[LogContext] = None, **kwargs: Any) -> None:
        self._structured.info(message, context, **kwargs)

    def warning(self, message: str, context: Optional[LogContext] = None, **kwargs: Any) -> None:
        self._structured.warning(message, context, **kwargs)

    def error(self, message: str, context: Optional[LogContext] = None, **kwargs: Any) -> None:
        self._structured.error(message, context, **kwargs)


class LoggerFactory:
    """Factory for creating logger instances."""

    @staticmethod
    def create_logger(name: str = "webready", level: Optional[str] = None) -> LoggerProtocol:
        """Create a configured logger instance."""
        return LoggerAdapter(setup_logger(name, level=level))


class CodecFactory:
    """Factory for creating codec instances."""

    @staticmethod
    def create_codec() -> CodecProtocol:
        return PillowCodec()


class PipelineFactory:
    """Factory for creating the complete request service."""

    @staticmethod
    def create_service(
        codec: Optional[CodecProtocol] = None,
        logger: Optional[LoggerProtocol] = None,
        settings: Optional[ServiceSettings] = None,
        processor: Optional[str] = None,
        metrics_collector: Optional[MetricsCollector] = None,
    ) -> WebReadyService:
        """Create a fully configured WebReadyService."""
        if codec is None:
            codec = CodecFactory.create_codec()

        if logger is None:
            logger = LoggerFactory.create_logger("webready.service")

        settings = settings or ServiceSettings.from_env()
        if processor is not None:
            settings = settings.model_copy(update={"processor": processor})

        return WebReadyService(
            codec=codec,
            logger=logger,
            settings=settings,
            metrics_collector=metrics_collector,
        )
