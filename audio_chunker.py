"""
Audio chunking module for feeding recorded files through the live recorder.
"""
import io
import os
from dataclasses import dataclass
from typing import List, Optional, Tuple

from pydub import AudioSegment

from config import CHUNK_DURATION_MS, MIN_TRAILING_CHUNK_MS, EXPORT_FORMAT
from data_uri import MIME_TYPES

# Video extensions that we can extract audio from
VIDEO_EXTENSIONS = {'.mp4', '.mkv', '.avi', '.mov', '.flv', '.wmv'}


@dataclass
class AudioChunk:
    """Represents a chunk of encoded audio with its position in the recording."""
    index: int
    start_time_ms: int
    end_time_ms: int
    data: bytes
    mime_type: str

    @property
    def duration_ms(self) -> int:
        return self.end_time_ms - self.start_time_ms


def is_video_file(file_path: str) -> bool:
    """Check if a file is a video file based on extension."""
    ext = os.path.splitext(file_path)[1].lower()
    return ext in VIDEO_EXTENSIONS


def export_mime_type(output_format: str) -> str:
    return MIME_TYPES.get(f".{output_format}", f"audio/{output_format}")


def load_audio(path: str) -> AudioSegment:
    """
    Load an audio or video file with pydub.

    Raises:
        FileNotFoundError: If the file doesn't exist
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Audio file not found: {path}")

    if is_video_file(path):
        print(f"  Extracting audio from {os.path.basename(path)}...")
    return AudioSegment.from_file(path)


def encode_segment(audio: AudioSegment, output_format: str = EXPORT_FORMAT) -> bytes:
    """Encode a pydub segment into bytes in the given container format."""
    buffer = io.BytesIO()
    audio.export(buffer, format=output_format)
    return buffer.getvalue()


def plan_chunks(
    total_duration_ms: int,
    chunk_ms: int = CHUNK_DURATION_MS,
    min_trailing_ms: int = MIN_TRAILING_CHUNK_MS,
) -> List[Tuple[int, int]]:
    """
    Compute (start_ms, end_ms) boundaries for consecutive chunks.

    A trailing remainder shorter than min_trailing_ms is folded into the
    previous chunk.
    """
    if chunk_ms <= 0:
        raise ValueError("chunk_ms must be positive")
    if total_duration_ms <= 0:
        return []

    bounds = []
    start_ms = 0
    while start_ms < total_duration_ms:
        end_ms = min(start_ms + chunk_ms, total_duration_ms)
        remaining_ms = end_ms - start_ms
        if bounds and remaining_ms < min_trailing_ms:
            prev_start, _ = bounds[-1]
            bounds[-1] = (prev_start, total_duration_ms)
            break
        bounds.append((start_ms, end_ms))
        start_ms = end_ms

    return bounds


def chunk_audio(
    path: str,
    chunk_ms: int = CHUNK_DURATION_MS,
    output_format: str = EXPORT_FORMAT,
    audio: Optional[AudioSegment] = None,
) -> List[AudioChunk]:
    """
    Split an audio file into consecutive, non-overlapping encoded chunks.

    Args:
        path: Path to the audio (or video) file
        chunk_ms: Chunk length in milliseconds
        output_format: Container format for each chunk
        audio: Already loaded audio, to avoid decoding the file twice

    Returns:
        List of AudioChunk objects in recording order
    """
    audio = audio if audio is not None else load_audio(path)
    total_duration_ms = len(audio)
    mime_type = export_mime_type(output_format)

    print(f"Audio duration: {total_duration_ms/1000:.1f}s, chunk size: {chunk_ms/1000:.1f}s")

    chunks = []
    for index, (start_ms, end_ms) in enumerate(plan_chunks(total_duration_ms, chunk_ms)):
        chunks.append(AudioChunk(
            index=index,
            start_time_ms=start_ms,
            end_time_ms=end_ms,
            data=encode_segment(audio[start_ms:end_ms], output_format),
            mime_type=mime_type,
        ))

    print(f"Created {len(chunks)} chunks")
    return chunks


def export_audio(
    path: str,
    output_format: str = EXPORT_FORMAT,
    audio: Optional[AudioSegment] = None,
) -> bytes:
    """Return the whole recording encoded in output_format."""
    audio = audio if audio is not None else load_audio(path)
    return encode_segment(audio, output_format)
