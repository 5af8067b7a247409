"""
CLI entry point for the court proceedings recorder.
"""
import argparse
import os
import sys
from datetime import datetime

from audio_chunker import chunk_audio, export_audio, export_mime_type, load_audio
from config import CHUNK_DURATION_MS, EXPORT_FORMAT, OUTPUT_DIR, SESSION_STORE_PATH
from logging_utils import setup_logging
from notices import Notice
from providers import GeminiProvider, MediaPart
from session_store import CaseMetadata, SessionStore
from workspace import Workspace, suggest_title


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        description="Record, transcribe, search and diarize court proceedings using Gemini.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py record hearing.webm --save "Case XYZ - Day 1"
  python main.py record hearing.mp3 --diarize --judge "Hon. Justice Ade" --save "Case XYZ"
  python main.py sessions list
  python main.py search 1718000000000 "adjournment"
  python main.py diarize 1718000000000
  python main.py export 1718000000000 -d transcripts/

Environment Variables:
  GEMINI_API_KEY       Google Gemini API key (required for model calls)
  SESSION_STORE_PATH   Saved sessions file (optional)
  OUTPUT_DIR           Default export directory (optional)
        """,
    )

    parser.add_argument(
        "--store",
        default=SESSION_STORE_PATH,
        help=f"Saved sessions file (default: {SESSION_STORE_PATH})",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    record = subparsers.add_parser("record", help="Transcribe an audio file chunk by chunk, as if recorded live")
    record.add_argument("input_file", help="Audio or video file to transcribe")
    record.add_argument(
        "--chunk-seconds",
        type=float,
        default=CHUNK_DURATION_MS / 1000,
        help=f"Length of each recorder chunk (default: {CHUNK_DURATION_MS / 1000:g})",
    )
    record.add_argument("--diarize", action="store_true", help="Attribute the transcript to speakers afterwards")
    record.add_argument(
        "--save",
        metavar="TITLE",
        nargs="?",
        const="",
        help="Save the session, optionally under TITLE (default: 'Court Session - <date> <time>')",
    )
    record.add_argument("--case-number", help="Case number to store with the session")
    record.add_argument("--judge", help="Presiding judge")
    record.add_argument("--hearing-type", help="Hearing type, e.g. 'Mention' or 'Trial'")
    record.add_argument(
        "--participant",
        action="append",
        default=[],
        help="Participant name (repeatable)",
    )

    search = subparsers.add_parser("search", help="Search a saved session")
    search.add_argument("session_id")
    search.add_argument("term", help="Keyword, phrase or legal reference")

    diarize = subparsers.add_parser("diarize", help="Attribute a saved session's transcript to speakers")
    diarize.add_argument("session_id")

    sessions = subparsers.add_parser("sessions", help="Manage saved sessions")
    sessions.add_argument("action", choices=["list", "show", "delete"])
    sessions.add_argument("session_id", nargs="?")

    annotate = subparsers.add_parser("annotate", help="Add an annotation to a saved session")
    annotate.add_argument("session_id")
    annotate.add_argument("text")
    annotate.add_argument("--segment", type=int, help="Index of the diarized segment the note refers to")

    export = subparsers.add_parser("export", help="Write a saved session's transcript to a text file")
    export.add_argument("session_id")
    export.add_argument(
        "-d", "--output-dir",
        dest="output_dir",
        default=OUTPUT_DIR,
        help=f"Directory for output files (default: {OUTPUT_DIR})",
    )

    return parser


def get_provider(provider_name: str = "gemini"):
    """
    Get the model provider by name.

    Args:
        provider_name: Name of the provider

    Returns:
        ModelProvider instance
    """
    providers = {
        "gemini": GeminiProvider,
    }

    if provider_name not in providers:
        raise ValueError(f"Unknown provider: {provider_name}. Available: {list(providers.keys())}")

    return providers[provider_name]()


def print_notice(notice: Notice) -> None:
    stream = sys.stderr if notice.is_error else sys.stdout
    print(f"  [{notice.title}] {notice.description}".rstrip(), file=stream)


def build_workspace(args, needs_model: bool = True) -> Workspace:
    provider = get_provider() if needs_model else None
    return Workspace(provider=provider, store=SessionStore(args.store), on_notice=print_notice)


def load_session(workspace: Workspace, session_id: str) -> None:
    if workspace.load(session_id) is None:
        raise ValueError(f"Could not load session {session_id}")


def cmd_record(args) -> int:
    if not os.path.exists(args.input_file):
        print(f"Error: Input file not found: {args.input_file}", file=sys.stderr)
        return 1

    workspace = build_workspace(args)
    if args.case_number or args.judge or args.hearing_type or args.participant:
        workspace.case = CaseMetadata(
            case_number=args.case_number,
            judge=args.judge,
            hearing_type=args.hearing_type,
            participants=args.participant,
        )

    print("Step 1: Chunking audio...")
    audio = load_audio(args.input_file)
    chunks = chunk_audio(args.input_file, chunk_ms=int(args.chunk_seconds * 1000), audio=audio)
    if not chunks:
        print("Error: No audio chunks were created", file=sys.stderr)
        return 1

    print(f"\nStep 2: Transcribing {len(chunks)} chunks...")
    workspace.start_recording()
    for chunk in chunks:
        workspace.add_audio_chunk(chunk.data, chunk.mime_type)
    full_audio = MediaPart(
        mime_type=export_mime_type(EXPORT_FORMAT),
        data=export_audio(args.input_file, audio=audio),
    )
    workspace.stop_recording(full_audio)
    print(f"  Transcribed {len(workspace.raw_transcript)} characters")

    if args.diarize:
        print("\nStep 3: Diarizing transcript...")
        segments = workspace.diarize()
        if segments:
            speakers = sorted({s.speaker for s in segments})
            print(f"  Found {len(segments)} segments from {len(speakers)} speakers")

    print(f"\n{'='*60}")
    print(workspace.export_text() or "(empty transcript)")
    print(f"{'='*60}")

    if args.save is not None:
        session = workspace.save(args.save or suggest_title())
        if session is None:
            return 1
        print(f"\nSaved session {session.id}: {session.title}")

    return 1 if workspace.notices.errors else 0


def cmd_search(args) -> int:
    workspace = build_workspace(args)
    load_session(workspace, args.session_id)

    results = workspace.search(args.term)
    if results is None:
        return 1

    print(f"\nSummary: {results.summary}\n")
    for i, excerpt in enumerate(results.search_results, 1):
        marker = "  (not found verbatim)" if excerpt in workspace.unmatched_excerpts else ""
        print(f"  {i}. {excerpt}{marker}")
    return 0


def cmd_diarize(args) -> int:
    workspace = build_workspace(args)
    load_session(workspace, args.session_id)

    if workspace.diarized_transcript:
        print("Session is already diarized.")
        return 0

    segments = workspace.diarize()
    if not segments:
        return 1

    workspace.save_changes(args.session_id)
    print()
    print(workspace.export_text())
    return 0


def cmd_sessions(args) -> int:
    workspace = build_workspace(args, needs_model=False)

    if args.action == "list":
        sessions = workspace.store.list()
        if not sessions:
            print("No saved sessions.")
        for s in sessions:
            when = datetime.fromtimestamp(s.timestamp / 1000).strftime("%Y-%m-%d %H:%M")
            flags = " (Diarized)" if s.diarized_transcript else ""
            flags += " (Audio available)" if s.audio_data_uri else " (No audio)"
            print(f"{s.id}  {when}  {s.title}{flags}")
        return 0

    if not args.session_id:
        print(f"Error: sessions {args.action} needs a session id", file=sys.stderr)
        return 1

    if args.action == "delete":
        if not workspace.delete(args.session_id):
            print(f"Error: No saved session with id {args.session_id}", file=sys.stderr)
            return 1
        return 0

    load_session(workspace, args.session_id)
    if workspace.case:
        case = workspace.case
        print(f"Case number:  {case.case_number or '-'}")
        print(f"Judge:        {case.judge or '-'}")
        print(f"Hearing type: {case.hearing_type or '-'}")
        print(f"Participants: {', '.join(case.participants) or '-'}")
        for note in case.annotations:
            target = f" [segment {note.segment_index}]" if note.segment_index is not None else ""
            print(f"  Note{target}: {note.text}")
        print()
    print(workspace.export_text())
    return 0


def cmd_annotate(args) -> int:
    workspace = build_workspace(args, needs_model=False)
    load_session(workspace, args.session_id)
    workspace.annotate(args.text, segment_index=args.segment)
    workspace.save_changes(args.session_id)
    print(f"Annotation added to {args.session_id}")
    return 0


def cmd_export(args) -> int:
    workspace = build_workspace(args, needs_model=False)
    load_session(workspace, args.session_id)

    text = workspace.export_text()
    if not text.strip():
        print("Error: Transcript is empty.", file=sys.stderr)
        return 1

    os.makedirs(args.output_dir, exist_ok=True)
    output_path = os.path.join(args.output_dir, workspace.export_filename())
    with open(output_path, 'w', encoding='utf-8') as f:
        f.write(text)

    print(f"Saved to: {output_path}")
    return 0


COMMANDS = {
    "record": cmd_record,
    "search": cmd_search,
    "diarize": cmd_diarize,
    "sessions": cmd_sessions,
    "annotate": cmd_annotate,
    "export": cmd_export,
}


def main():
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args()

    setup_logging(level="DEBUG" if args.verbose else None)

    try:
        sys.exit(COMMANDS[args.command](args))
    except KeyboardInterrupt:
        print("\nCancelled by user.", file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        print(f"\nError: {e}", file=sys.stderr)
        if args.verbose:
            import traceback
            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
