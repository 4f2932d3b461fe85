# src/dtmf_codec/api/__main__.py
"""
Main entry point for the DTMF codec API service.
Handles startup configuration and server initialization.
"""

import logging
import os
import sys
from pathlib import Path

from ..utils.config import Config, ConfigurationError
from ..utils.logger import DTMFLogger, LoggerConfig

def main():
    """
    Main entry point for the API service.
    Configures logging and starts the server.
    """
    # Initialize basic logging first
    basic_logger = logging.getLogger(__name__)
    basic_logger.setLevel(logging.DEBUG)
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter('%(asctime)s [%(levelname)s] %(name)s - %(message)s'))
    basic_logger.addHandler(console_handler)

    try:
        basic_logger.debug("Starting DTMF codec API initialization")

        config = Config()

        # Get the package root directory (2 levels up from __main__.py)
        package_root = Path(__file__).parent.parent
        basic_logger.debug(f"Package root directory: {package_root}")

        # Always start with default configuration
        default_config = package_root / "config" / "default.yml"
        basic_logger.debug(f"Loading default configuration from {default_config}")
        config.load(default_config)

        # Try to load and merge custom configuration
        config_paths = [
            package_root / "config" / "config.yml",  # Package config (preferred)
            Path("/etc/dtmf_codec/config.yml"),      # System-wide config (fallback)
        ]

        for config_path in config_paths:
            if not config_path.exists():
                basic_logger.debug(f"No custom configuration found at: {config_path}")
                continue
            config.load(config_path)
            basic_logger.debug(f"Loaded custom configuration from: {config_path}")
            break

        # Ensure log directory exists
        if config.logging.output:
            log_dir = os.path.dirname(config.logging.output)
            if log_dir:
                basic_logger.debug(f"Setting up log directory: {log_dir}")
                os.makedirs(log_dir, exist_ok=True)

        log_config = LoggerConfig(
            level=config.logging.level,
            format=config.logging.format,
            output_file=config.logging.output,
            max_bytes=10_485_760,  # 10MB
            backup_count=5
        )
        basic_logger.debug(f"Configuring DTMF logger with level={config.logging.level}, format={config.logging.format}")
        logger = DTMFLogger()
        logger.configure(log_config)

        module_logger = logger.get_logger(__name__)
        module_logger.info("DTMF logging system initialized")
        module_logger.info("Initializing DTMF codec API service...")

        # Import server module after logger is configured
        from .server import run_server
        run_server()

    except ConfigurationError as e:
        basic_logger.error(f"Configuration error: {str(e)}")
        sys.exit(1)
    except Exception as e:
        basic_logger.error(f"Startup failed: {str(e)}", exc_info=True)
        sys.exit(1)

if __name__ == "__main__":
    main()
