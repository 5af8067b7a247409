"""
Recording state and ordered assembly of live chunk transcriptions.

Chunks are transcribed concurrently, so their results can complete in any
order. Every chunk is tagged with a sequence number when it is captured and
the transcript only ever grows in sequence order.
"""
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from typing import Callable, Dict, List, Optional

from actions import TranscribeResult
from config import TRANSCRIPTION_WORKERS
from data_uri import to_data_uri
from notices import NoticeBoard
from providers.base import MediaPart
from transcript_checks import join_transcript_pieces

logger = logging.getLogger("court_scribe.recorder")


class RecordingState(str, Enum):
    IDLE = "idle"
    RECORDING = "recording"
    PAUSED = "paused"


class RecorderStateError(Exception):
    """Exception raised for a recording control used in the wrong state."""


class TranscriptAssembler:
    """
    Appends chunk transcriptions to a transcript in sequence order.

    Results delivered ahead of a missing sequence number are held back until
    the gap is filled. A failed chunk is delivered as None so it releases its
    slot without adding text.
    """

    def __init__(self, text: str = "", next_sequence: int = 0):
        self._text = text
        self._next = next_sequence
        self._pending: Dict[int, Optional[str]] = {}
        self._lock = threading.Lock()

    @property
    def text(self) -> str:
        with self._lock:
            return self._text

    @property
    def next_sequence(self) -> int:
        with self._lock:
            return self._next

    @property
    def held_back(self) -> int:
        with self._lock:
            return len(self._pending)

    def deliver(self, sequence: int, text: Optional[str]) -> str:
        """
        Record the result for one chunk.

        Returns:
            The text appended to the transcript by this delivery (may be empty)
        """
        with self._lock:
            if sequence < self._next or sequence in self._pending:
                raise ValueError(f"Chunk {sequence} was already delivered")
            self._pending[sequence] = text

            ready = []
            while self._next in self._pending:
                ready.append(self._pending.pop(self._next))
                self._next += 1

            added = join_transcript_pieces(ready)
            self._text += added
            return added


class Recorder:
    """
    Idle/recording/paused state machine that transcribes captured chunks.

    Args:
        transcribe: Called with a chunk data URI, returns a TranscribeResult
        notices: Board that receives transcription errors
        max_workers: Number of chunks transcribed concurrently
        on_transcript: Called with the full transcript whenever it grows
    """

    def __init__(
        self,
        transcribe: Callable[[str], TranscribeResult],
        notices: Optional[NoticeBoard] = None,
        max_workers: int = TRANSCRIPTION_WORKERS,
        on_transcript: Optional[Callable[[str], None]] = None,
    ):
        self.transcribe = transcribe
        self.notices = notices or NoticeBoard()
        self.max_workers = max(1, max_workers)
        self.on_transcript = on_transcript

        self.state = RecordingState.IDLE
        self.assembler = TranscriptAssembler()
        self.full_audio_uri: Optional[str] = None

        self._chunks: List[MediaPart] = []
        self._sequence = 0
        self._executor: Optional[ThreadPoolExecutor] = None
        self._lock = threading.Lock()

    @property
    def transcript(self) -> str:
        return self.assembler.text

    def start(self) -> None:
        """Start a new recording, or continue one that is paused."""
        with self._lock:
            if self.state == RecordingState.RECORDING:
                raise RecorderStateError("Already recording")

            if self.state == RecordingState.IDLE:
                self.assembler = TranscriptAssembler()
                self.full_audio_uri = None
                self._chunks = []
                self._sequence = 0
                self._executor = ThreadPoolExecutor(
                    max_workers=self.max_workers, thread_name_prefix="chunk-transcriber"
                )

            self.state = RecordingState.RECORDING
        logger.info("Recording started")

    def pause(self) -> None:
        with self._lock:
            if self.state != RecordingState.RECORDING:
                raise RecorderStateError("Can only pause while recording")
            self.state = RecordingState.PAUSED

    def resume(self) -> None:
        with self._lock:
            if self.state != RecordingState.PAUSED:
                raise RecorderStateError("Can only resume while paused")
            self.state = RecordingState.RECORDING

    def add_chunk(self, data: bytes, mime_type: str = "audio/webm") -> Optional[int]:
        """
        Queue a captured chunk for transcription.

        Returns:
            The chunk's sequence number, or None for an empty chunk
        """
        if not data:
            return None

        with self._lock:
            if self.state != RecordingState.RECORDING:
                raise RecorderStateError("Chunks can only be added while recording")
            sequence = self._sequence
            self._sequence += 1
            self._chunks.append(MediaPart(mime_type=mime_type, data=data))
            self._executor.submit(self._transcribe_chunk, sequence, to_data_uri(data, mime_type))

        logger.debug("Queued chunk %d (%d bytes)", sequence, len(data))
        return sequence

    def stop(self, full_audio: Optional[MediaPart] = None) -> Optional[str]:
        """
        Stop recording, wait for in-flight chunks and build the full audio.

        Args:
            full_audio: Full recording to keep. If None, chunk bytes are
                concatenated in capture order.

        Returns:
            The full recording as a data URI, or None if nothing was captured
        """
        with self._lock:
            if self.state == RecordingState.IDLE:
                raise RecorderStateError("Not recording")
            self.state = RecordingState.IDLE
            executor, self._executor = self._executor, None

        if executor:
            executor.shutdown(wait=True)

        if full_audio is not None:
            self.full_audio_uri = to_data_uri(full_audio.data, full_audio.mime_type)
        elif self._chunks:
            data = b"".join(c.data for c in self._chunks)
            self.full_audio_uri = to_data_uri(data, self._chunks[0].mime_type)

        logger.info("Recording stopped after %d chunks", self._sequence)
        return self.full_audio_uri

    def _transcribe_chunk(self, sequence: int, data_uri: str) -> None:
        text = None
        try:
            result = self.transcribe(data_uri)
            if result.transcription:
                text = result.transcription
            elif result.error:
                self.notices.error("Transcription Error", result.error)
        except Exception as e:
            logger.error("Error transcribing chunk %d: %s", sequence, e)
            self.notices.error("Transcription Error", "Failed to process audio chunk.")
        finally:
            added = self.assembler.deliver(sequence, text)

        if added and self.on_transcript:
            self.on_transcript(self.assembler.text)
