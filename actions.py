"""
Action wrappers around the flows.

Each action runs one flow and never raises: any failure is logged and
returned as an error message for the caller to show the user.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from flows import (
    DiarizedSegment,
    DiarizeTranscriptInput,
    LiveTranscriptionInput,
    SmartSearchInput,
    SmartSearchOutput,
    diarize_transcript,
    live_transcription,
    smart_search,
)
from providers.base import ModelProvider

logger = logging.getLogger("court_scribe.actions")


@dataclass
class TranscribeResult:
    transcription: Optional[str] = None
    error: Optional[str] = None


@dataclass
class SearchResult:
    results: Optional[SmartSearchOutput] = None
    error: Optional[str] = None


@dataclass
class DiarizeResult:
    segments: Optional[List[DiarizedSegment]] = None
    error: Optional[str] = None


def _error_message(error: Exception, default: str) -> str:
    return str(error) or default


def transcribe_audio_action(
    payload: Union[LiveTranscriptionInput, Dict[str, Any]],
    provider: ModelProvider,
) -> TranscribeResult:
    try:
        result = live_transcription(payload, provider)
        return TranscribeResult(transcription=result.transcription)
    except Exception as e:
        logger.error("Error in transcribe_audio_action: %s", e, exc_info=logger.isEnabledFor(logging.DEBUG))
        return TranscribeResult(error=_error_message(e, "An unknown error occurred during transcription."))


def search_transcript_action(
    payload: Union[SmartSearchInput, Dict[str, Any]],
    provider: ModelProvider,
) -> SearchResult:
    try:
        results = smart_search(payload, provider)
        return SearchResult(results=results)
    except Exception as e:
        logger.error("Error in search_transcript_action: %s", e, exc_info=logger.isEnabledFor(logging.DEBUG))
        return SearchResult(error=_error_message(e, "An unknown error occurred during search."))


def diarize_transcript_action(
    payload: Union[DiarizeTranscriptInput, Dict[str, Any]],
    provider: ModelProvider,
) -> DiarizeResult:
    try:
        result = diarize_transcript(payload, provider)
        return DiarizeResult(segments=result.diarized_segments)
    except Exception as e:
        logger.error("Error in diarize_transcript_action: %s", e, exc_info=logger.isEnabledFor(logging.DEBUG))
        return DiarizeResult(error=_error_message(e, "An unknown error occurred during diarization."))
