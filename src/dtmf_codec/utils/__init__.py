"""
Utilities package initialization.
Contains shared configuration and logging helpers.
"""

from .config import Config, ConfigurationError
from .logger import DTMFLogger, LoggerConfig, log_function_call
