"""Helpers for recordings stored as base64 ``data:`` URLs."""

import base64
import binascii
import mimetypes
from pathlib import Path

DEFAULT_AUDIO_MIME = 'audio/webm'


def encode_data_url(audio: bytes, mime_type: str = DEFAULT_AUDIO_MIME) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(audio).decode('ascii')}"


def decode_data_url(url: str) -> tuple[str, bytes]:
    """Split a base64 data URL into (mime type, payload bytes).

    Raises:
        ValueError: not a base64 data URL
    """
    if not url.startswith('data:') or ',' not in url:
        raise ValueError("Not a data URL")
    header, encoded = url[5:].split(',', 1)
    params = header.split(';')
    if 'base64' not in params[1:]:
        raise ValueError("Only base64 data URLs are supported")
    try:
        payload = base64.b64decode(encoded, validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 payload: {e}")
    return params[0] or DEFAULT_AUDIO_MIME, payload


def read_audio_file(path: str | Path) -> str:
    """Read an audio file and encode it as a data URL."""
    path = Path(path)
    mime_type, _ = mimetypes.guess_type(path.name)
    return encode_data_url(path.read_bytes(), mime_type or DEFAULT_AUDIO_MIME)
