# src/dtmf_codec/api/routes.py

import asyncio

import numpy as np
from fastapi import APIRouter, Depends, File, Request, UploadFile, status
from fastapi.responses import Response

from .. import __version__
from ..core.coefficients import DTMF_SYMBOLS, SAMPLE_RATE
from ..core.dtmf_detector import DTMFDetector
from ..core.dtmf_generator import generate_sequence
from ..sources.au_file import decode_au, encode_au
from ..sources.pcm import decode_pcm16, encode_pcm16
from ..utils.logger import DTMFLogger
from .models import AudioFormat, ByteOrder, CodecStatus, DetectionResult, DTMFEvent, GenerateRequest
from .server import CodecService, get_codec_service

logger = DTMFLogger().get_logger(__name__)

router = APIRouter(
    prefix="",
    tags=["codec"],
    responses={
        status.HTTP_500_INTERNAL_SERVER_ERROR: {
            "description": "Internal server error",
            "content": {
                "application/json": {
                    "example": {"detail": "Internal server error"}
                }
            }
        }
    }
)

def _detect(samples: np.ndarray, service: CodecService) -> DetectionResult:
    detector = DTMFDetector(service.detector_config())
    events = detector.process(samples)
    service.detections += 1
    debug_info = detector.get_debug_info()
    logger.info("detection_complete",
                message=f"Detected {len(events)} DTMF tones",
                digits=detector.result,
                samples=len(samples))
    return DetectionResult(
        digits=detector.result,
        events=[DTMFEvent.from_tone_event(event) for event in events],
        samples=len(samples),
        batches=debug_info['batches_processed']
    )

@router.get(
    "/status",
    response_model=CodecStatus,
    summary="Get codec status",
    description="""
    Retrieves the codec parameters and service counters:
    - Sample rate and detector batch size
    - Default generator frame size and durations
    - Supported symbols
    - Active streams and completed requests
    """,
    tags=["status"]
)
async def get_status(service: CodecService = Depends(get_codec_service)) -> CodecStatus:
    config = service.config
    return CodecStatus(
        version=__version__,
        sample_rate=SAMPLE_RATE,
        batch_size=config.detector.batch_size,
        frame_size=config.generator.frame_size,
        tone_ms=config.generator.tone_ms,
        pause_ms=config.generator.pause_ms,
        symbols=DTMF_SYMBOLS,
        active_streams=service.active_streams,
        detections=service.detections,
        generations=service.generations
    )

@router.post(
    "/detect",
    response_model=DetectionResult,
    summary="Detect DTMF tones in raw PCM",
    description="""
    Detects DTMF tones in a request body of raw audio in the following format:
    - Sample rate: 8kHz
    - Bit depth: 16-bit
    - Channels: Mono
    - Byte order: selected by the `byteorder` query parameter
    """,
    responses={
        200: {
            "description": "Detection completed",
            "content": {
                "application/json": {
                    "example": {
                        "digits": "42",
                        "events": [
                            {"digit": "4", "batch_index": 1, "sample_offset": 102},
                            {"digit": "2", "batch_index": 14, "sample_offset": 1428}
                        ],
                        "samples": 3200,
                        "batches": 31
                    }
                }
            }
        },
        400: {
            "description": "Malformed audio",
            "content": {
                "application/json": {
                    "example": {"detail": "PCM16 payload has odd length 201"}
                }
            }
        }
    }
)
async def detect_pcm(
    request: Request,
    byteorder: ByteOrder = ByteOrder.LITTLE,
    service: CodecService = Depends(get_codec_service)
) -> DetectionResult:
    body = await request.body()
    samples = decode_pcm16(body, byteorder.value)
    return await asyncio.to_thread(_detect, samples, service)

@router.post(
    "/detect/au",
    response_model=DetectionResult,
    summary="Detect DTMF tones in an AU file",
    description="""
    Detects DTMF tones in an uploaded AU file.
    Supported encodings are 8-bit and 16-bit linear PCM at 8kHz mono,
    in either byte order.
    """,
    responses={
        400: {
            "description": "Unsupported AU file",
            "content": {
                "application/json": {
                    "example": {"detail": "bad magic number: 52494646"}
                }
            }
        }
    }
)
async def detect_au(
    file: UploadFile = File(...),
    service: CodecService = Depends(get_codec_service)
) -> DetectionResult:
    data = await file.read()
    header, samples = decode_au(data)
    logger.debug(f"Uploaded AU file {file.filename}: {header}")
    return await asyncio.to_thread(_detect, samples, service)

@router.post(
    "/generate",
    summary="Generate a DTMF sequence",
    description="""
    Synthesizes DTMF tones for the requested digits.
    Unset durations and frame size use the configured generator defaults.

    Returns raw 16-bit little-endian PCM (`application/octet-stream`)
    or an AU file (`audio/basic`).
    """,
    responses={
        200: {
            "description": "Generated audio",
            "content": {
                "application/octet-stream": {},
                "audio/basic": {}
            }
        }
    }
)
async def generate(
    request: GenerateRequest,
    service: CodecService = Depends(get_codec_service)
) -> Response:
    config = service.generator_config(request.frame_size, request.tone_ms, request.pause_ms)
    samples = await asyncio.to_thread(generate_sequence, request.digits, config)
    service.generations += 1
    logger.info("generation_complete",
                message=f"Generated {len(samples)} samples",
                digits=request.digits,
                format=request.format.value)

    if request.format == AudioFormat.AU:
        return Response(content=encode_au(samples), media_type="audio/basic")
    return Response(content=encode_pcm16(samples, "little"), media_type="application/octet-stream")
