"""
Configuration for the court proceedings recorder.
"""
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# API Keys
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")

# Model settings
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")

# Audio larger than this is uploaded through the Files API instead of inlined
INLINE_MEDIA_LIMIT_BYTES = 18 * 1024 * 1024

# Recording parameters
CHUNK_DURATION_MS = 5000        # Recorder timeslice, one transcription request per chunk
MIN_TRAILING_CHUNK_MS = 1000    # Shorter remainders are merged into the previous chunk
TRANSCRIPTION_WORKERS = int(os.getenv("TRANSCRIPTION_WORKERS", "4"))
EXPORT_FORMAT = "mp3"

# Saved sessions
SESSION_STORE_PATH = os.getenv("SESSION_STORE_PATH", "court_sessions.json")
STORAGE_KEY = "naijaLawScribeTranscripts"

# Output settings
OUTPUT_DIR = os.getenv("OUTPUT_DIR", "output")
LOG_DIR = os.getenv("LOG_DIR", "logs")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Diarized segments reproducing less of the raw transcript than this are flagged
COVERAGE_WARN_THRESHOLD = 85.0

# Prompt for transcribing a single recorder chunk
LIVE_TRANSCRIPTION_PROMPT = """Transcribe the following audio in real-time.

Return only the words spoken in this audio clip. Do not add speaker labels,
timestamps or commentary. If nothing intelligible is spoken, return an empty
transcription."""

# Prompt for searching a transcript
SMART_SEARCH_PROMPT = """You are a legal assistant tasked with searching court transcriptions.

A user will provide a transcription and a search term. You must identify all
relevant excerpts from the transcription that contain the search term and provide a summary of the search results.

Transcription: {transcription}
Search Term: {search_term}

Return the search results as an array of excerpts and a summary.
Quote each excerpt exactly as it appears in the transcription."""

# Prompt for attributing a raw transcript to speakers
DIARIZATION_PROMPT = """You are an expert AI assistant specializing in analyzing audio recordings and transcribing conversations with speaker labels, particularly for legal or formal proceedings.
Given the full audio of a conversation and its raw, unformatted transcription, your task is to:
1. Identify distinct speakers in the audio. Assign generic labels like "Speaker 1", "Speaker 2", etc. If context from the transcript suggests roles (e.g., "Judge", "Plaintiff's Counsel", "Witness"), use those more descriptive labels where appropriate and consistent.
2. Segment the provided raw transcript according to these identified speakers. Ensure each part of the raw transcript is attributed to a speaker.
3. Format the output as an array of objects, where each object represents a continuous segment of speech from a single speaker. Each object must include:
    - "speaker": A string identifying the speaker.
    - "text": A string containing the transcribed text spoken by that speaker during that segment.

The audio is attached to this message.

Raw Transcript:
{raw_transcript}

Return an object with a single key "diarizedSegments" containing an array of these speaker segments.
Ensure the entire raw transcript is covered and attributed to speakers in the output array. Maintain the original wording from the raw transcript for each speaker's segment.
If the audio quality is too poor to reliably distinguish speakers or if the transcript is very short and appears to be from a single speaker, you may attribute it all to "Speaker 1" or a general "Narrator" if applicable."""
