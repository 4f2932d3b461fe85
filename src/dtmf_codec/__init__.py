"""
DTMF codec package.
Main package initialization for the DTMF detection and generation library.
"""

from .utils.logger import DTMFLogger, LoggerConfig

# Configure basic logger before importing modules
logger = DTMFLogger()
if not logger.configured:
    log_config = LoggerConfig(
        level="WARNING",
        format="json",
        output_file=None
    )
    logger.configure(log_config)

# Now it's safe to import submodules
from . import utils
from . import core
from . import sources

from .core import DTMFDetector, DTMFGenerator, ToneEvent, generate_sequence

__version__ = "1.0.0"
