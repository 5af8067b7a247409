"""
Tests for CLI commands that do not need the hosted model.
"""
import sys
from unittest.mock import patch

import pytest

from flows import DiarizedSegment
from main import create_parser, main
from session_store import CaseMetadata, SessionStore


def run_cli(*argv):
    with patch.object(sys, "argv", ["main.py", *argv]), patch("main.setup_logging"):
        with pytest.raises(SystemExit) as excinfo:
            main()
    return excinfo.value.code


@pytest.fixture
def populated_store(store_path):
    store = SessionStore(store_path)
    session = store.create(
        title="State v. Okafor",
        raw_transcript="All rise. ",
        diarized_transcript=[
            DiarizedSegment(speaker="Clerk", text="All rise."),
            DiarizedSegment(speaker="Judge", text="Be seated."),
        ],
        case=CaseMetadata(judge="Hon. Justice Bello"),
    )
    return store, session


class TestParser:

    def test_record_defaults(self):
        args = create_parser().parse_args(["record", "hearing.webm"])
        assert args.command == "record"
        assert args.chunk_seconds == 5.0
        assert not args.diarize
        assert args.participant == []
        assert args.save is None

    def test_save_without_title(self):
        args = create_parser().parse_args(["record", "hearing.webm", "--save"])
        assert args.save == ""

    def test_command_required(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args([])


class TestCommands:

    def test_sessions_list(self, populated_store, store_path, capsys):
        _, session = populated_store
        assert run_cli("--store", store_path, "sessions", "list") == 0
        out = capsys.readouterr().out
        assert session.id in out
        assert "State v. Okafor (Diarized) (No audio)" in out

    def test_sessions_show(self, populated_store, store_path, capsys):
        _, session = populated_store
        assert run_cli("--store", store_path, "sessions", "show", session.id) == 0
        out = capsys.readouterr().out
        assert "Judge:        Hon. Justice Bello" in out
        assert "Clerk:\nAll rise." in out

    def test_sessions_delete(self, populated_store, store_path):
        store, session = populated_store
        assert run_cli("--store", store_path, "sessions", "delete", session.id) == 0
        assert store.list() == []
        assert run_cli("--store", store_path, "sessions", "delete", session.id) == 1

    def test_annotate(self, populated_store, store_path):
        store, session = populated_store
        assert run_cli("--store", store_path, "annotate", session.id, "Ruling reserved", "--segment", "1") == 0
        note = store.get(session.id).case.annotations[0]
        assert note.text == "Ruling reserved"
        assert note.segment_index == 1

    def test_export(self, populated_store, store_path, tmp_path):
        _, session = populated_store
        out_dir = tmp_path / "exports"
        assert run_cli("--store", store_path, "export", session.id, "-d", str(out_dir)) == 0
        exported = (out_dir / "state_v__okafor.txt").read_text(encoding="utf-8")
        assert exported == "Clerk:\nAll rise.\n\nJudge:\nBe seated."

    def test_unknown_session_is_an_error(self, store_path, capsys):
        assert run_cli("--store", store_path, "export", "nope") == 1
        assert "Could not load session nope" in capsys.readouterr().err

    def test_record_missing_file(self, store_path, tmp_path):
        with patch("main.get_provider"):
            assert run_cli("--store", store_path, "record", str(tmp_path / "missing.wav")) == 1
