"""
Tests for saved-session persistence.
"""
import json

import pytest

from config import STORAGE_KEY
from flows import DiarizedSegment
from session_store import (
    Annotation,
    CaseMetadata,
    SavedSession,
    SessionStore,
    SessionStoreError,
)


def full_session(session_id="1718000000000"):
    return SavedSession(
        id=session_id,
        timestamp=1718000000000,
        title="State v. Okafor - Day 1",
        raw_transcript="All rise. Court is in session. À bientôt ",
        diarized_transcript=[
            DiarizedSegment(speaker="Clerk", text="All rise."),
            DiarizedSegment(speaker="Judge", text="Court is in session."),
        ],
        audio_data_uri="data:audio/webm;base64,GkXfow==",
        case=CaseMetadata(
            case_number="FHC/L/CS/12/2024",
            judge="Hon. Justice Bello",
            hearing_type="Trial",
            participants=["Prosecution", "Defence"],
            annotations=[Annotation(text="Exhibit A tendered", created_at=1718000001000, segment_index=1)],
        ),
    )


class TestSessionStore:

    def test_missing_file_is_empty(self, store_path):
        assert SessionStore(store_path).list() == []

    def test_round_trip_preserves_all_fields(self, store_path):
        original = full_session()
        SessionStore(store_path).add(original)

        loaded = SessionStore(store_path).get(original.id)
        assert loaded == original
        assert loaded.model_dump_json(by_alias=True) == original.model_dump_json(by_alias=True)

    def test_file_layout_uses_storage_key_and_camel_case(self, store_path):
        SessionStore(store_path).add(full_session())
        with open(store_path, encoding="utf-8") as f:
            document = json.load(f)

        record = document[STORAGE_KEY][0]
        assert record["rawTranscript"].startswith("All rise.")
        assert record["diarizedTranscript"][1] == {"speaker": "Judge", "text": "Court is in session."}
        assert record["audioDataUri"] == "data:audio/webm;base64,GkXfow=="
        assert record["case"]["hearingType"] == "Trial"

    def test_optional_fields_default_to_null(self, store_path):
        store = SessionStore(store_path)
        session = store.create(title="Mention", raw_transcript="Adjourned.")
        with open(store_path, encoding="utf-8") as f:
            record = json.load(f)[STORAGE_KEY][0]
        assert record["diarizedTranscript"] is None
        assert record["audioDataUri"] is None
        assert store.get(session.id).diarized_transcript is None

    def test_newest_first(self, store_path):
        store = SessionStore(store_path)
        store.add(full_session("1"))
        store.add(full_session("2"))
        assert [s.id for s in store.list()] == ["2", "1"]

    def test_create_generates_unique_ids(self, store_path):
        store = SessionStore(store_path)
        first = store.create(title="a", raw_transcript="x")
        second = store.create(title="b", raw_transcript="y")
        assert first.id != second.id
        assert first.id.isdigit()
        assert first.timestamp > 0

    def test_new_id_bumps_on_collision(self, store_path):
        store = SessionStore(store_path)
        store.add(full_session("500"))
        assert store.new_id(500) == "501"

    def test_add_duplicate_id_rejected(self, store_path):
        store = SessionStore(store_path)
        store.add(full_session("7"))
        with pytest.raises(SessionStoreError):
            store.add(full_session("7"))

    def test_update(self, store_path):
        store = SessionStore(store_path)
        store.add(full_session("7"))
        changed = store.get("7").model_copy(update={"title": "Renamed"})
        store.update(changed)
        assert store.get("7").title == "Renamed"

    def test_update_missing_raises(self, store_path):
        with pytest.raises(KeyError):
            SessionStore(store_path).update(full_session("404"))

    def test_delete(self, store_path):
        store = SessionStore(store_path)
        store.add(full_session("1"))
        store.add(full_session("2"))
        assert store.delete("1") is True
        assert store.delete("1") is False
        assert [s.id for s in store.list()] == ["2"]

    def test_other_keys_are_preserved(self, store_path):
        with open(store_path, "w", encoding="utf-8") as f:
            json.dump({"theme": "dark"}, f)
        SessionStore(store_path).add(full_session())
        with open(store_path, encoding="utf-8") as f:
            document = json.load(f)
        assert document["theme"] == "dark"
        assert len(document[STORAGE_KEY]) == 1

    def test_corrupt_file_raises(self, store_path):
        with open(store_path, "w", encoding="utf-8") as f:
            f.write("{not json")
        with pytest.raises(SessionStoreError):
            SessionStore(store_path).list()

    def test_invalid_record_raises(self, store_path):
        with open(store_path, "w", encoding="utf-8") as f:
            json.dump({STORAGE_KEY: [{"title": "no id"}]}, f)
        with pytest.raises(SessionStoreError):
            SessionStore(store_path).list()
