"""
API package initialization.
Contains REST and WebSocket API implementations.
"""

from .server import create_app, run_server
from .models import CodecStatus, DetectionResult, GenerateRequest
