"""
Saved court sessions, persisted as a JSON document on disk.

The file holds a single JSON object whose STORAGE_KEY entry is the list of
saved sessions, newest first.
"""
import json
import os
import tempfile
import threading
import time
from typing import List, Optional

from pydantic import Field, ValidationError

from config import SESSION_STORE_PATH, STORAGE_KEY
from flows.schemas import CamelModel, DiarizedSegment


class Annotation(CamelModel):
    text: str
    created_at: int = Field(default_factory=lambda: now_ms())
    segment_index: Optional[int] = None


class CaseMetadata(CamelModel):
    case_number: Optional[str] = None
    judge: Optional[str] = None
    hearing_type: Optional[str] = None
    participants: List[str] = Field(default_factory=list)
    annotations: List[Annotation] = Field(default_factory=list)


class SavedSession(CamelModel):
    id: str
    timestamp: int
    title: str
    raw_transcript: str
    diarized_transcript: Optional[List[DiarizedSegment]] = None
    audio_data_uri: Optional[str] = None
    case: Optional[CaseMetadata] = None


class SessionStoreError(Exception):
    """Exception raised when the session file cannot be read or written."""


def now_ms() -> int:
    return int(time.time() * 1000)


class SessionStore:
    """
    List, add, update and delete saved sessions in a JSON file.

    A missing file is treated as an empty store. Every write replaces the
    file atomically.
    """

    def __init__(self, path: Optional[str] = None, key: str = STORAGE_KEY):
        self.path = path or SESSION_STORE_PATH
        self.key = key
        self._lock = threading.Lock()

    def list(self) -> List[SavedSession]:
        with self._lock:
            return self._read()

    def get(self, session_id: str) -> Optional[SavedSession]:
        for session in self.list():
            if session.id == session_id:
                return session
        return None

    def new_id(self, timestamp: Optional[int] = None) -> str:
        """Return an id derived from the timestamp, unique within this store."""
        existing = {s.id for s in self.list()}
        candidate = timestamp or now_ms()
        while str(candidate) in existing:
            candidate += 1
        return str(candidate)

    def create(
        self,
        title: str,
        raw_transcript: str,
        diarized_transcript: Optional[List[DiarizedSegment]] = None,
        audio_data_uri: Optional[str] = None,
        case: Optional[CaseMetadata] = None,
    ) -> SavedSession:
        """Build a new session with a fresh id and timestamp and add it."""
        timestamp = now_ms()
        session = SavedSession(
            id=self.new_id(timestamp),
            timestamp=timestamp,
            title=title,
            raw_transcript=raw_transcript,
            diarized_transcript=diarized_transcript,
            audio_data_uri=audio_data_uri,
            case=case,
        )
        return self.add(session)

    def add(self, session: SavedSession) -> SavedSession:
        with self._lock:
            sessions = self._read()
            if any(s.id == session.id for s in sessions):
                raise SessionStoreError(f"Session id already exists: {session.id}")
            self._write([session] + sessions)
        return session

    def update(self, session: SavedSession) -> SavedSession:
        with self._lock:
            sessions = self._read()
            for i, existing in enumerate(sessions):
                if existing.id == session.id:
                    sessions[i] = session
                    self._write(sessions)
                    return session
        raise KeyError(f"No saved session with id {session.id}")

    def delete(self, session_id: str) -> bool:
        """Remove a session. Returns False if no session had that id."""
        with self._lock:
            sessions = self._read()
            remaining = [s for s in sessions if s.id != session_id]
            if len(remaining) == len(sessions):
                return False
            self._write(remaining)
        return True

    def _read(self) -> List[SavedSession]:
        if not os.path.exists(self.path):
            return []

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                document = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise SessionStoreError(f"Could not read session store {self.path}: {e}")

        if not isinstance(document, dict):
            raise SessionStoreError(f"Session store {self.path} is not a JSON object")

        try:
            return [SavedSession.model_validate(item) for item in document.get(self.key, [])]
        except ValidationError as e:
            raise SessionStoreError(f"Session store {self.path} holds an invalid session: {e}")

    def _write(self, sessions: List[SavedSession]) -> None:
        document = {}
        if os.path.exists(self.path):
            try:
                with open(self.path, 'r', encoding='utf-8') as f:
                    document = json.load(f)
            except (OSError, json.JSONDecodeError):
                document = {}
        document[self.key] = [s.model_dump(mode="json", by_alias=True) for s in sessions]

        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".sessions-", suffix=".json")
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(document, f, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except OSError as e:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise SessionStoreError(f"Could not write session store {self.path}: {e}")
