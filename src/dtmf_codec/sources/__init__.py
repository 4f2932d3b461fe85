"""
Sample source adapters.
Convert audio containers and raw payloads into the int16 PCM the codec consumes.
"""

from .pcm import decode_pcm16, decode_samples, encode_pcm16, promote_8bit
from .au_file import AUFileSource, AUHeader, decode_au, encode_au, parse_header, write_au

__all__ = [
    'decode_pcm16',
    'decode_samples',
    'encode_pcm16',
    'promote_8bit',
    'AUFileSource',
    'AUHeader',
    'decode_au',
    'encode_au',
    'parse_header',
    'write_au',
]
