# src/dtmf_codec/api/websocket.py

import json
from enum import Enum

from fastapi import Depends, WebSocket, WebSocketDisconnect
from fastapi.routing import APIRouter

from ..core.audio_processor import AudioConfig, AudioProcessingError, AudioProcessor
from ..core.dtmf_detector import ToneEvent
from ..utils.logger import DTMFLogger
from .models import DTMFEvent
from .server import CodecService, get_codec_service

logger = DTMFLogger().get_logger(__name__)

router = APIRouter(
    tags=["websocket"],
    responses={
        101: {"description": "WebSocket connection established"},
        400: {"description": "Connection error"},
    }
)

class StreamEventTypes(str, Enum):
    """Types of events that can be sent over WebSocket"""
    DTMF = "dtmf"
    RESET = "reset"
    ERROR = "error"

def _error_event(error: str) -> dict:
    return {"type": StreamEventTypes.ERROR.value, "error": error}

@router.websocket("/ws/detect")
async def detect_stream(
    websocket: WebSocket,
    service: CodecService = Depends(get_codec_service)
):
    """
    WebSocket endpoint for streaming DTMF detection.

    The client sends binary frames of 16-bit little-endian PCM at 8kHz mono.
    Frames may be any size up to the configured limit and need not align
    with sample or batch boundaries.

    Event Types:

    * `dtmf`: DTMF digit detected
        ```json
        {
            "type": "dtmf",
            "digit": "5",
            "batch_index": 12,
            "sample_offset": 1224
        }
        ```

    * `reset`: Detection state cleared after a `{"action": "reset"}` text message
        ```json
        {
            "type": "reset"
        }
        ```

    * `error`: Error event; the connection stays open
        ```json
        {
            "type": "error",
            "error": "Chunk of 70000 bytes exceeds limit of 65536"
        }
        ```
    """
    await websocket.accept()
    max_chunk_bytes = service.config.streaming.max_chunk_bytes
    processor = AudioProcessor(AudioConfig(byteorder="little"), service.detector_config())

    async def send_tone(event: ToneEvent) -> None:
        payload = DTMFEvent.from_tone_event(event).model_dump()
        await websocket.send_json({"type": StreamEventTypes.DTMF.value, **payload})

    await processor.subscribe_dtmf(send_tone)
    service.active_streams += 1
    logger.info("stream_opened", message="Detection stream opened", active_streams=service.active_streams)

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break

            data = message.get("bytes")
            if data is not None:
                if len(data) > max_chunk_bytes:
                    await websocket.send_json(
                        _error_event(f"Chunk of {len(data)} bytes exceeds limit of {max_chunk_bytes}")
                    )
                    continue
                try:
                    await processor.process_chunk(data)
                except AudioProcessingError as e:
                    await websocket.send_json(_error_event(str(e)))
                continue

            await _handle_command(websocket, processor, message.get("text") or "")
    except WebSocketDisconnect:
        pass
    finally:
        await processor.unsubscribe_dtmf(send_tone)
        service.active_streams -= 1
        service.detections += 1
        logger.info("stream_closed",
                    message="Detection stream closed",
                    digits=processor.digits,
                    debug=await processor.get_debug_info())

async def _handle_command(websocket: WebSocket, processor: AudioProcessor, text: str) -> None:
    """Handle a JSON control message"""
    try:
        command = json.loads(text)
    except json.JSONDecodeError:
        await websocket.send_json(_error_event("Invalid control message"))
        return

    if isinstance(command, dict) and command.get("action") == "reset":
        processor.reset()
        await websocket.send_json({"type": StreamEventTypes.RESET.value})
    else:
        await websocket.send_json(_error_event(f"Unknown command: {text}"))
