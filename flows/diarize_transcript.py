"""
Speaker diarization flow.

Takes the full audio recording and its raw transcript, and asks the model
to attribute each part of the transcript to a speaker.
"""
import logging
from typing import Any, Dict, Union

from config import DIARIZATION_PROMPT, COVERAGE_WARN_THRESHOLD
from providers.base import ModelProvider
from transcript_checks import check_segment_coverage
from .base import Flow
from .schemas import DiarizeTranscriptInput, DiarizeTranscriptOutput

logger = logging.getLogger("court_scribe.flows")

diarize_transcript_flow = Flow(
    name="diarizeTranscriptFlow",
    label="Diarization",
    input_schema=DiarizeTranscriptInput,
    output_schema=DiarizeTranscriptOutput,
    prompt_template=DIARIZATION_PROMPT,
    media_field="audio_data_uri",
)


def diarize_transcript(
    payload: Union[DiarizeTranscriptInput, Dict[str, Any]],
    provider: ModelProvider,
) -> DiarizeTranscriptOutput:
    """
    Segment a raw transcript by speaker.

    Segments that reproduce too little of the raw transcript are logged as
    a warning but still returned.
    """
    data = diarize_transcript_flow.validate_input(payload)
    output = diarize_transcript_flow.run(data, provider)

    report = check_segment_coverage(data.raw_transcript, output.diarized_segments)
    if report.score < COVERAGE_WARN_THRESHOLD:
        logger.warning(
            "Diarized segments cover the raw transcript poorly (score %.1f, %d of %d words)",
            report.score, report.segment_words, report.raw_words,
        )

    return output
