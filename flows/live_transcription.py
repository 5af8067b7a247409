"""
Live transcription flow: one recorder chunk in, its text out.
"""
from typing import Any, Dict, Union

from config import LIVE_TRANSCRIPTION_PROMPT
from providers.base import ModelProvider
from .base import Flow
from .schemas import LiveTranscriptionInput, LiveTranscriptionOutput

live_transcription_flow = Flow(
    name="liveTranscriptionFlow",
    label="Transcription",
    input_schema=LiveTranscriptionInput,
    output_schema=LiveTranscriptionOutput,
    prompt_template=LIVE_TRANSCRIPTION_PROMPT,
    media_field="audio_data_uri",
)


def live_transcription(
    payload: Union[LiveTranscriptionInput, Dict[str, Any]],
    provider: ModelProvider,
) -> LiveTranscriptionOutput:
    """Transcribe a single chunk of audio given as a data URI."""
    return live_transcription_flow.run(payload, provider)
