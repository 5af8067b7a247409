"""
Model-backed flows for transcription, search and diarization.
"""
from .base import Flow, FlowError, FlowInputError
from .schemas import (
    DiarizedSegment,
    DiarizeTranscriptInput,
    DiarizeTranscriptOutput,
    LiveTranscriptionInput,
    LiveTranscriptionOutput,
    SmartSearchInput,
    SmartSearchOutput,
)
from .live_transcription import live_transcription, live_transcription_flow
from .smart_search import smart_search, smart_search_flow
from .diarize_transcript import diarize_transcript, diarize_transcript_flow

__all__ = [
    "Flow",
    "FlowError",
    "FlowInputError",
    "DiarizedSegment",
    "DiarizeTranscriptInput",
    "DiarizeTranscriptOutput",
    "LiveTranscriptionInput",
    "LiveTranscriptionOutput",
    "SmartSearchInput",
    "SmartSearchOutput",
    "live_transcription",
    "live_transcription_flow",
    "smart_search",
    "smart_search_flow",
    "diarize_transcript",
    "diarize_transcript_flow",
]
