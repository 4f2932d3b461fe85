# src/dtmf_codec/api/server.py
"""
Main server implementation for the DTMF codec API.
Initializes the FastAPI application, wires configuration into the codec
service, and registers REST and WebSocket routes.
Provides centralized error handling and request logging.
"""

import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..core.dtmf_detector import DetectorConfig
from ..core.dtmf_generator import GeneratorConfig
from ..core.interfaces import CodecError
from ..utils.config import Config, ConfigurationError
from ..utils.logger import DTMFLogger, log_function_call

# Configure module logger
logger = DTMFLogger().get_logger(__name__)

class CodecService:
    """
    Codec settings and usage counters shared by all routes.
    """
    def __init__(self, config: Config):
        self.config = config
        self.active_streams = 0
        self.detections = 0
        self.generations = 0

    def detector_config(self) -> DetectorConfig:
        return DetectorConfig(sample_rate=self.config.detector.sample_rate,
                              batch_size=self.config.detector.batch_size)

    def generator_config(self, frame_size: Optional[int] = None,
                         tone_ms: Optional[int] = None,
                         pause_ms: Optional[int] = None) -> GeneratorConfig:
        defaults = self.config.generator
        return GeneratorConfig(
            frame_size=frame_size if frame_size is not None else defaults.frame_size,
            tone_ms=tone_ms if tone_ms is not None else defaults.tone_ms,
            pause_ms=pause_ms if pause_ms is not None else defaults.pause_ms,
        )

# Global service instance
_codec_service: Optional[CodecService] = None

def get_codec_service() -> CodecService:
    """FastAPI dependency to get the codec service instance"""
    if _codec_service is None:
        raise RuntimeError("Codec service not initialized")
    return _codec_service

class DTMFCodecAPI:
    """
    Main API server class that initializes and manages the FastAPI application.
    Handles configuration, logging setup, and codec service initialization.
    """
    def __init__(self):
        # Load configuration
        self.config = Config()
        if not self.config.loaded:
            self.config.load_defaults()

        # Import modules
        from .routes import router as api_router
        from .websocket import router as websocket_router

        self.api_router = api_router
        self.websocket_router = websocket_router

        global _codec_service
        _codec_service = CodecService(self.config)
        self.service = _codec_service

        self.app = FastAPI(
            title="DTMF Codec API",
            description="""
            REST and WebSocket API for DTMF tone detection and generation.

            ## Features

            * DTMF detection in raw 16-bit PCM or AU recordings
            * DTMF sequence synthesis as raw PCM or AU
            * Streaming detection over WebSocket

            ## Audio Format

            All audio is 8 kHz mono linear PCM.

            ## Error Handling

            The API uses standard HTTP status codes and returns detailed error messages in JSON format.
            Common error codes:
            * 400: Bad Request - Unsupported or malformed audio
            * 422: Unprocessable Entity - Invalid request parameters
            * 500: Internal Server Error
            """,
            version="1.0.0",
            openapi_tags=[
                {
                    "name": "status",
                    "description": "Codec parameters and counters"
                },
                {
                    "name": "codec",
                    "description": "DTMF detection and generation"
                },
                {
                    "name": "websocket",
                    "description": "Streaming detection"
                }
            ],
            docs_url="/docs",
            redoc_url="/redoc",
            openapi_url="/openapi.json",
            lifespan=self._lifespan
        )

        # Initialize API
        self._setup_middleware()
        self._setup_exception_handlers()
        self._setup_routes()

        logger.info("api_initialized", message="DTMF codec API server initialized")

    @asynccontextmanager
    async def _lifespan(self, app: FastAPI):
        """Log server startup and shutdown"""
        logger.info("server_startup",
                    message="DTMF codec API starting",
                    batch_size=self.config.detector.batch_size,
                    frame_size=self.config.generator.frame_size)
        yield
        logger.info("server_shutdown",
                    message="DTMF codec API shutting down",
                    detections=self.service.detections,
                    generations=self.service.generations)

    @log_function_call(level="DEBUG")
    def _setup_middleware(self) -> None:
        """Configure API middleware including CORS and request logging"""
        # Add CORS middleware
        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=self.config.security.allowed_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

        # Add request logging middleware
        @self.app.middleware("http")
        async def log_requests(request: Request, call_next):
            logger.debug(f"Request: {request.method} {request.url}")
            response = await call_next(request)
            logger.debug(f"Response status: {response.status_code}")
            return response

    @log_function_call(level="DEBUG")
    def _setup_exception_handlers(self) -> None:
        """Configure global exception handlers"""
        @self.app.exception_handler(CodecError)
        async def codec_exception_handler(request: Request, exc: CodecError):
            logger.warning(f"Codec error: {str(exc)}")
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST,
                content={"detail": str(exc)}
            )

        @self.app.exception_handler(RequestValidationError)
        async def validation_exception_handler(request: Request, exc: RequestValidationError):
            logger.error(f"Validation error: {str(exc)}")
            return JSONResponse(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                content={"detail": jsonable_encoder(exc.errors())}
            )

        @self.app.exception_handler(Exception)
        async def general_exception_handler(request: Request, exc: Exception):
            logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"detail": "Internal server error"}
            )

    @log_function_call(level="DEBUG")
    def _setup_routes(self) -> None:
        """Configure API routes"""
        self.app.include_router(self.api_router)
        self.app.include_router(self.websocket_router)

def create_app() -> FastAPI:
    """Build a configured FastAPI application"""
    return DTMFCodecAPI().app

def run_server(config_path: Optional[str] = None):
    """
    Start the DTMF codec API server

    Args:
        config_path: Optional path to configuration file. If not provided,
                    configuration should already be loaded by __main__.py
    """
    server_logger = DTMFLogger().get_logger(__name__)
    try:
        server_logger.debug("Starting DTMF codec API server")

        config = Config()
        if config_path:
            config.load(config_path)

        server_logger.debug("Creating DTMFCodecAPI instance")
        api = DTMFCodecAPI()

        server_logger.info("Starting server with configuration:")
        server_logger.debug(f"Host: {config.server.host}")
        server_logger.debug(f"Port: {config.server.port}")
        server_logger.debug(f"Log Level: {config.logging.level}")
        server_logger.debug(f"Log Format: {config.logging.format}")
        server_logger.debug(f"Log Output: {config.logging.output}")

        try:
            uvicorn.run(
                api.app,
                host=config.server.host,
                port=config.server.port,
                log_level=config.logging.level.lower()
            )
        except Exception as e:
            server_logger.error("Server runtime error", exc_info=True)
            server_logger.debug(f"Error details: {str(e)}")
            sys.exit(1)

    except ConfigurationError as e:
        server_logger.error("Configuration error during server startup", exc_info=True)
        server_logger.debug(f"Configuration error details: {str(e)}")
        sys.exit(1)
