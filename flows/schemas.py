"""
Input and output schemas for the model-backed flows.
"""
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from data_uri import is_data_uri

DATA_URI_DESCRIPTION = (
    "Audio data as a data URI that must include a MIME type and use Base64 encoding. "
    "Expected format: 'data:<mimetype>;base64,<encoded_data>'."
)


class CamelModel(BaseModel):
    """Base model serialised with camelCase keys, accepting either spelling on input."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AudioInput(CamelModel):
    audio_data_uri: str = Field(..., description=DATA_URI_DESCRIPTION)

    @field_validator("audio_data_uri")
    @classmethod
    def _check_data_uri(cls, value: str) -> str:
        if not is_data_uri(value):
            raise ValueError("audioDataUri must be a Base64 data URI")
        return value


class LiveTranscriptionInput(AudioInput):
    pass


class LiveTranscriptionOutput(CamelModel):
    transcription: str = Field(..., description="The real-time transcription of the audio.")


class SmartSearchInput(CamelModel):
    transcription: str = Field(..., description="The full text of the court proceeding transcription.")
    search_term: str = Field(
        ...,
        description="The keyword, phrase, or legal reference to search for in the transcription.",
    )


class SmartSearchOutput(CamelModel):
    search_results: List[str] = Field(
        ...,
        description="An array of relevant excerpts from the transcription containing the search term.",
    )
    summary: str = Field(..., description="A summary of the search results.")


class DiarizedSegment(CamelModel):
    speaker: str = Field(
        ...,
        description="An identifier for the speaker (e.g., 'Speaker 1', 'Judge', 'Counsel A').",
    )
    text: str = Field(..., description="The segment of speech attributed to this speaker.")


class DiarizeTranscriptInput(AudioInput):
    audio_data_uri: str = Field(
        ...,
        description="The full audio recording as a data URI, including MIME type and Base64 encoding.",
    )
    raw_transcript: str = Field(..., description="The complete raw, unformatted text of the transcription.")


class DiarizeTranscriptOutput(CamelModel):
    diarized_segments: List[DiarizedSegment] = Field(
        ...,
        description="An array of speech segments, each containing the speaker and their text.",
    )
