"""
The active court session: recording, transcript, search, diarization and
saved-session management.
"""
import logging
import re
from datetime import datetime
from typing import Callable, List, Optional

from actions import (
    diarize_transcript_action,
    search_transcript_action,
    transcribe_audio_action,
)
from flows import DiarizedSegment, SmartSearchOutput
from notices import Notice, NoticeBoard
from providers.base import MediaPart, ModelProvider
from recorder import Recorder, RecordingState
from session_store import Annotation, CaseMetadata, SavedSession, SessionStore
from transcript_checks import (
    locate_excerpts,
    render_export_text,
    render_search_text,
    unmatched_excerpts,
)

logger = logging.getLogger("court_scribe.workspace")


def suggest_title(now: Optional[datetime] = None) -> str:
    now = now or datetime.now()
    return f"Court Session - {now.strftime('%Y-%m-%d')} {now.strftime('%H:%M')}"


def export_filename(title: str) -> str:
    """Lowercase the title and replace anything non-alphanumeric with '_'."""
    return f"{re.sub(r'[^a-z0-9]', '_', title, flags=re.IGNORECASE).lower()}.txt"


class Workspace:
    """
    State and operations behind the recorder screen.

    User-visible problems are posted to `notices` instead of raised.
    """

    def __init__(
        self,
        provider: Optional[ModelProvider],
        store: SessionStore,
        notices: Optional[NoticeBoard] = None,
        max_workers: Optional[int] = None,
        on_notice: Optional[Callable[[Notice], None]] = None,
    ):
        self.provider = provider
        self.store = store
        self.notices = notices or NoticeBoard(on_notice)

        recorder_kwargs = {"notices": self.notices}
        if max_workers is not None:
            recorder_kwargs["max_workers"] = max_workers
        self.recorder = Recorder(self._transcribe_chunk, **recorder_kwargs)

        self.raw_transcript = ""
        self.diarized_transcript: Optional[List[DiarizedSegment]] = None
        self.current_audio_uri: Optional[str] = None
        self.loaded_audio_uri: Optional[str] = None
        self.title = ""
        self.case: Optional[CaseMetadata] = None

        self.search_results: Optional[SmartSearchOutput] = None
        self.search_error: Optional[str] = None
        self.unmatched_excerpts: List[str] = []

    # Recording

    @property
    def recording_state(self) -> RecordingState:
        return self.recorder.state

    def start_recording(self) -> None:
        fresh = self.recorder.state == RecordingState.IDLE
        self.recorder.start()
        if fresh:
            self.raw_transcript = ""
            self.diarized_transcript = None
            self.current_audio_uri = None
            self.loaded_audio_uri = None
            self.notices.post("Recording Started", "Audio capture is active.")
        else:
            self.notices.post("Recording Resumed")

    def pause_recording(self) -> None:
        if self.recorder.state == RecordingState.RECORDING:
            self.recorder.pause()
            self.notices.post("Recording Paused")

    def resume_recording(self) -> None:
        if self.recorder.state == RecordingState.PAUSED:
            self.recorder.resume()
            self.notices.post("Recording Resumed")

    def add_audio_chunk(self, data: bytes, mime_type: str = "audio/webm") -> Optional[int]:
        return self.recorder.add_chunk(data, mime_type)

    def stop_recording(self, full_audio: Optional[MediaPart] = None) -> None:
        if self.recorder.state == RecordingState.IDLE:
            return
        self.current_audio_uri = self.recorder.stop(full_audio)
        self.raw_transcript = self.recorder.transcript
        self.notices.post("Recording Stopped")

    def _transcribe_chunk(self, data_uri: str):
        return transcribe_audio_action({"audioDataUri": data_uri}, self.provider)

    @property
    def transcript(self) -> str:
        """Raw transcript, including text still arriving from a live recording."""
        if self.recorder.state != RecordingState.IDLE:
            return self.recorder.transcript
        return self.raw_transcript

    @property
    def audio_uri(self) -> Optional[str]:
        return self.current_audio_uri or self.loaded_audio_uri

    # Search

    def search_text(self) -> str:
        if self.diarized_transcript:
            return render_search_text(self.diarized_transcript)
        return self.transcript

    def search(self, term: str) -> Optional[SmartSearchOutput]:
        text = self.search_text()
        if not term.strip() or not text.strip():
            self.notices.error(
                "Search Error",
                "Please enter a search term and ensure there is a transcript to search.",
            )
            return None

        self.search_results = None
        self.search_error = None
        self.unmatched_excerpts = []

        response = search_transcript_action({"transcription": text, "searchTerm": term}, self.provider)
        if response.results:
            self.search_results = response.results
            self.unmatched_excerpts = unmatched_excerpts(
                locate_excerpts(text, response.results.search_results)
            )
            if self.unmatched_excerpts:
                logger.warning("%d search excerpts not found in transcript", len(self.unmatched_excerpts))
            self.notices.post("Search Complete", f'Found results for "{term}".')
        elif response.error:
            self.search_error = response.error
            self.notices.error("Search Failed", response.error)

        return self.search_results

    # Diarization

    @property
    def can_diarize(self) -> bool:
        return (
            self.recorder.state == RecordingState.IDLE
            and bool(self.raw_transcript.strip())
            and bool(self.audio_uri)
            and not self.diarized_transcript
        )

    def diarize(self) -> Optional[List[DiarizedSegment]]:
        if self.recorder.state != RecordingState.IDLE:
            self.notices.error("Diarization Error", "Please stop the current recording before diarizing.")
            return None
        if not self.audio_uri or not self.raw_transcript.strip():
            self.notices.error(
                "Diarization Error",
                "Full audio and raw transcript are required for diarization.",
            )
            return None

        response = diarize_transcript_action(
            {"audioDataUri": self.audio_uri, "rawTranscript": self.raw_transcript},
            self.provider,
        )
        if response.segments is not None:
            self.diarized_transcript = response.segments
            self.notices.post("Diarization Complete", "Transcript has been segmented by speaker.")
        elif response.error:
            self.notices.error("Diarization Failed", response.error)

        return self.diarized_transcript

    # Saved sessions

    def save(self, title: str) -> Optional[SavedSession]:
        if not self.transcript.strip():
            self.notices.error("Cannot Save", "Transcript is empty.")
            return None
        if not title.strip():
            self.notices.error("Invalid Title", "Please enter a title for the session.")
            return None

        session = self.store.create(
            title=title,
            raw_transcript=self.transcript,
            diarized_transcript=self.diarized_transcript,
            audio_data_uri=self.audio_uri,
            case=self.case,
        )
        self.title = title
        self.notices.post("Transcript Saved", f'"{title}" has been saved.')
        return session

    def load(self, session_id: str) -> Optional[SavedSession]:
        if self.recorder.state != RecordingState.IDLE:
            self.notices.error(
                "Cannot Load",
                "Please stop the current recording before loading another transcript.",
            )
            return None

        session = self.store.get(session_id)
        if session is None:
            self.notices.error("Cannot Load", f"No saved session with id {session_id}.")
            return None

        self.raw_transcript = session.raw_transcript
        self.diarized_transcript = session.diarized_transcript or None
        self.loaded_audio_uri = session.audio_data_uri or None
        self.current_audio_uri = None
        self.title = session.title
        self.case = session.case
        self.notices.post("Transcript Loaded", f'"{session.title}" is now active.')
        return session

    def save_changes(self, session_id: str) -> SavedSession:
        """Write the diarized transcript and case metadata back to a saved session."""
        session = self.store.get(session_id)
        if session is None:
            raise KeyError(f"No saved session with id {session_id}")
        updated = session.model_copy(update={
            "diarized_transcript": self.diarized_transcript,
            "case": self.case,
        })
        return self.store.update(updated)

    def delete(self, session_id: str) -> bool:
        deleted = self.store.delete(session_id)
        if deleted:
            self.notices.post("Transcript Deleted")
        return deleted

    # Case metadata

    def annotate(self, text: str, segment_index: Optional[int] = None) -> Annotation:
        if not text.strip():
            raise ValueError("Annotation text is empty")
        if segment_index is not None:
            count = len(self.diarized_transcript or [])
            if not 0 <= segment_index < count:
                raise IndexError(f"Segment {segment_index} out of range (transcript has {count} segments)")

        if self.case is None:
            self.case = CaseMetadata()
        annotation = Annotation(text=text, segment_index=segment_index)
        self.case.annotations.append(annotation)
        return annotation

    # Export

    def export_text(self) -> str:
        if self.diarized_transcript:
            return render_export_text(self.diarized_transcript)
        return self.transcript

    def export_filename(self, now: Optional[datetime] = None) -> str:
        title = self.title or f"Transcript-{(now or datetime.now()).isoformat()}"
        return export_filename(title)
