# src/dtmf_codec/utils/logger.py
"""
Centralized logging configuration for the DTMF codec.
Provides consistent, configurable structured logging across all modules with
support for JSON or console output, log levels, and rotating log files.
"""

import logging
import logging.handlers
import os
import sys
from functools import wraps
from typing import Optional, Callable, Any, TextIO

import structlog
from pythonjsonlogger.json import JsonFormatter

# Default logging format for traditional logging
DEFAULT_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"

# Fields pulled from each record by the JSON formatter
JSON_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(module)s %(funcName)s %(lineno)d %(message)s"

# Logging levels dictionary for configuration
LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL
}

# LogRecord attributes that structured fields may not overwrite
RESERVED_RECORD_KEYS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", (), None).__dict__
) | {"message", "asctime"}

def _move_reserved_keys(_, __, event_dict: dict) -> dict:
    """
    Prepare an event for stdlib JSON formatting.
    A ``message`` field becomes the record message and the event name moves
    to ``event_name``; other fields that clash with LogRecord attributes are
    renamed with a ``field_`` prefix.
    """
    message = event_dict.pop("message", None)
    if message is not None:
        event_dict["event_name"] = event_dict.pop("event", None)
        event_dict["event"] = message
    for key in [k for k in event_dict if k in RESERVED_RECORD_KEYS]:
        event_dict[f"field_{key}"] = event_dict.pop(key)
    return event_dict

class LoggerConfig:
    """Configuration class for logger settings"""
    def __init__(
        self,
        level: str = "INFO",
        format: str = "json",
        output_file: Optional[str] = None,
        max_bytes: int = 10_485_760,  # 10MB
        backup_count: int = 5,
        stream: Optional[TextIO] = None
    ):
        self.level = LOG_LEVELS.get(level.upper(), logging.INFO)
        self.format = format.lower()
        self.output_file = output_file
        self.max_bytes = max_bytes
        self.backup_count = backup_count
        self.stream = stream

class DTMFLogger:
    """
    Central logging facility for the DTMF codec.
    Provides structured logging with configurable outputs and formats.
    """
    _instance = None
    _initialized = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if not self._initialized:
            self._logger = None
            self._config = None
            self._initialized = True

    @property
    def configured(self) -> bool:
        return self._logger is not None

    def configure(self, config: LoggerConfig) -> None:
        """
        Configure the logger with the provided settings.

        Args:
            config: LoggerConfig instance with desired settings
        """
        self._config = config

        # Create log directory if it doesn't exist
        if config.output_file:
            log_dir = os.path.dirname(config.output_file)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)

        # Set up structlog processors
        processors = [
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
        ]

        if config.format == "json":
            processors.extend([
                _move_reserved_keys,
                structlog.stdlib.render_to_log_kwargs,
            ])
        else:
            processors.append(structlog.dev.ConsoleRenderer(colors=False))

        structlog.configure(
            processors=processors,
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

        # Set up root logger
        root_logger = logging.getLogger()
        root_logger.setLevel(config.level)

        # Clear existing handlers
        root_logger.handlers = []

        handlers = []

        console_handler = logging.StreamHandler(config.stream or sys.stdout)
        console_handler.setLevel(config.level)
        handlers.append(console_handler)

        if config.output_file:
            file_handler = logging.handlers.RotatingFileHandler(
                config.output_file,
                maxBytes=config.max_bytes,
                backupCount=config.backup_count
            )
            file_handler.setLevel(config.level)
            handlers.append(file_handler)

        if config.format == "json":
            formatter = JsonFormatter(JSON_LOG_FORMAT)
        else:
            formatter = logging.Formatter(DEFAULT_LOG_FORMAT)

        for handler in handlers:
            handler.setFormatter(formatter)
            root_logger.addHandler(handler)

        self._logger = structlog.get_logger()
        self._logger.debug("logger_configured",
                           level=logging.getLevelName(config.level),
                           format=config.format,
                           output_file=config.output_file)

    def get_logger(self, name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
        """
        Get a logger instance with the given name.

        Args:
            name: Optional name for the logger (defaults to module name)

        Returns:
            Configured logger instance
        """
        if not self._logger:
            self.configure(LoggerConfig(level="WARNING"))

        return structlog.get_logger(name)

def log_function_call(level: str = "DEBUG") -> Callable:
    """
    Decorator to log function calls with arguments and return values.

    Args:
        level: Logging level for the function calls

    Returns:
        Decorator function
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            logger = DTMFLogger().get_logger(func.__module__)
            log_level = LOG_LEVELS.get(level.upper(), logging.DEBUG)

            logger.log(log_level,
                       "function_call",
                       function=func.__name__,
                       args=str(args),
                       kwargs=str(kwargs))

            try:
                result = func(*args, **kwargs)
                logger.log(log_level,
                           "function_return",
                           function=func.__name__,
                           result=str(result))
                return result
            except Exception as e:
                logger.error("function_exception",
                             function=func.__name__,
                             error=str(e),
                             exc_info=True)
                raise

        return wrapper
    return decorator
