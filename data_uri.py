"""
Helpers for audio carried inline as Base64 data URIs.
"""
import base64
import binascii
import os
import re
from typing import Optional, Tuple

# data:<mimetype>[;param=value...];base64,<payload>
DATA_URI_PATTERN = re.compile(r'^data:(?P<mime>[\w.+-]+/[\w.+-]+(?:;[\w.+-]+=[\w.+-]+)*);base64,(?P<payload>.*)$', re.DOTALL)

MIME_TYPES = {
    '.mp3': 'audio/mpeg',
    '.wav': 'audio/wav',
    '.m4a': 'audio/mp4',
    '.flac': 'audio/flac',
    '.ogg': 'audio/ogg',
    '.webm': 'audio/webm',
}


def is_data_uri(value: str) -> bool:
    """Return True if value looks like a Base64 data URI."""
    return isinstance(value, str) and DATA_URI_PATTERN.match(value) is not None


def parse_data_uri(uri: str) -> Tuple[str, bytes]:
    """
    Split a data URI into its MIME type and decoded bytes.

    Args:
        uri: String of the form 'data:<mimetype>;base64,<encoded_data>'

    Returns:
        Tuple of (mime_type, raw bytes)

    Raises:
        ValueError: If the string is not a Base64 data URI or has no payload
    """
    match = DATA_URI_PATTERN.match(uri or "")
    if not match:
        raise ValueError("Expected a data URI of the form 'data:<mimetype>;base64,<encoded_data>'")

    payload = match.group("payload").strip()
    if not payload:
        raise ValueError("Data URI has an empty payload")

    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"Data URI payload is not valid Base64: {e}")

    return match.group("mime"), data


def to_data_uri(data: bytes, mime_type: str) -> str:
    """Encode raw bytes as a Base64 data URI."""
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def mime_type_for(path: str) -> str:
    """Guess the audio MIME type from a file extension."""
    ext = os.path.splitext(path)[1].lower()
    return MIME_TYPES.get(ext, 'audio/mpeg')


def file_to_data_uri(path: str, mime_type: Optional[str] = None) -> str:
    """
    Read an audio file and return it as a data URI.

    Args:
        path: Path to the audio file
        mime_type: MIME type to declare. Inferred from the extension if None.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Audio file not found: {path}")

    with open(path, 'rb') as f:
        data = f.read()

    return to_data_uri(data, mime_type or mime_type_for(path))
