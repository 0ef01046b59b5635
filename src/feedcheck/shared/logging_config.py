"""
Logging configuration for feedcheck.

Provides structured logging with correlation IDs and multiple output formats.
Components log through structlog; records are rendered by the stdlib handlers
configured here so library users can plug feedcheck into their own logging.
"""

import logging
import json
import sys
from datetime import datetime, timezone
from typing import Optional, Union
from uuid import uuid4
import traceback
from contextvars import ContextVar

import structlog

# Context variable for correlation tracking
correlation_id: ContextVar[Optional[str]] = ContextVar('correlation_id', default=None)

# Attributes every LogRecord has; anything else came in through ``extra``
_RECORD_ATTRIBUTES = set(vars(logging.LogRecord('', 0, '', 0, '', None, None))) | {'message', 'asctime'}


class CorrelationFilter(logging.Filter):
    """Add the correlation ID and component to log records."""

    def filter(self, record):
        record.correlation_id = correlation_id.get() or 'unknown'
        record.component = getattr(record, 'component', 'unknown')
        return True


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def __init__(self, include_extra=True):
        super().__init__()
        self.include_extra = include_extra

    def format(self, record):
        """Format log record as JSON."""
        log_entry = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'correlation_id': getattr(record, 'correlation_id', 'unknown'),
            'component': getattr(record, 'component', 'unknown'),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
        }

        if record.exc_info:
            log_entry['exception'] = {
                'type': record.exc_info[0].__name__,
                'message': str(record.exc_info[1]),
                'traceback': traceback.format_exception(*record.exc_info)
            }

        if self.include_extra:
            for key, value in record.__dict__.items():
                if key in log_entry or key in _RECORD_ATTRIBUTES or key.startswith('_'):
                    continue
                try:
                    json.dumps(value)
                    log_entry[key] = value
                except (TypeError, ValueError):
                    log_entry[key] = str(value)

        return json.dumps(log_entry, default=str)


class ColoredFormatter(logging.Formatter):
    """Colored formatter for console output."""

    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
    }
    RESET = '\033[0m'

    def format(self, record):
        color = self.COLORS.get(record.levelname, '')
        formatted = super().format(record)

        fields = {
            key: value for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRIBUTES and key not in ('correlation_id', 'component') and not key.startswith('_')
        }
        context = " ".join(f"{key}={value}" for key, value in fields.items())
        correlation_info = f"[{getattr(record, 'correlation_id', 'unknown')[:8]}]"

        return f"{color}{formatted}{self.RESET} {correlation_info} {context}".rstrip()


class LoggingConfig:
    """Centralized logging configuration."""

    DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

    THIRD_PARTY_LEVELS = {
        'httpx': logging.WARNING,
        'httpcore': logging.WARNING,
        'asyncio': logging.WARNING,
    }

    @classmethod
    def setup_logging(
        cls,
        level: Union[str, int] = logging.INFO,
        format_type: str = 'json',
        stream=None,
        correlation_tracking: bool = True
    ):
        """
        Setup logging for feedcheck.

        Args:
            level: Logging level
            format_type: 'json', 'colored', or 'standard'
            stream: Output stream, stdout by default
            correlation_tracking: Enable correlation ID tracking
        """
        root_logger = logging.getLogger()
        root_logger.setLevel(level)
        root_logger.handlers.clear()

        handler = logging.StreamHandler(stream or sys.stdout)
        handler.setLevel(level)
        handler.setFormatter(cls._build_formatter(format_type))
        if correlation_tracking:
            handler.addFilter(CorrelationFilter())
        root_logger.addHandler(handler)

        for logger_name, logger_level in cls.THIRD_PARTY_LEVELS.items():
            logging.getLogger(logger_name).setLevel(logger_level)

        cls.configure_structlog()

        logger = structlog.get_logger(__name__).bind(component="logging_config")
        logger.info(
            "Logging system initialized",
            level=level,
            format_type=format_type,
            correlation_tracking=correlation_tracking
        )

    @classmethod
    def configure_structlog(cls):
        """Route structlog events through the stdlib handlers."""
        structlog.configure(
            processors=[
                structlog.contextvars.merge_contextvars,
                structlog.stdlib.filter_by_level,
                structlog.stdlib.PositionalArgumentsFormatter(),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.stdlib.render_to_log_kwargs,
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

    @classmethod
    def _build_formatter(cls, format_type: str) -> logging.Formatter:
        if format_type == 'json':
            return JSONFormatter()
        if format_type == 'colored':
            return ColoredFormatter(cls.DEFAULT_FORMAT)
        return logging.Formatter(cls.DEFAULT_FORMAT)


class CorrelationContext:
    """Context manager for correlation tracking."""

    def __init__(self, correlation_id_value: Optional[str] = None):
        self.correlation_id_value = correlation_id_value or str(uuid4())
        self.correlation_token = None

    def __enter__(self):
        self.correlation_token = correlation_id.set(self.correlation_id_value)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.correlation_token:
            correlation_id.reset(self.correlation_token)


def setup_logging_from_settings():
    """Configure logging from the monitoring settings."""
    from .config import get_monitoring_settings

    monitoring = get_monitoring_settings()
    LoggingConfig.setup_logging(
        level=monitoring.log_level.value,
        format_type=monitoring.log_format.value,
    )


def set_correlation_id(correlation_id_value: str):
    """Set correlation ID for current context."""
    correlation_id.set(correlation_id_value)


def get_correlation_id() -> Optional[str]:
    """Get current correlation ID."""
    return correlation_id.get()
