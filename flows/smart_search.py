"""
Smart search flow: find keywords, phrases or legal references in a transcript.
"""
from typing import Any, Dict, Union

from config import SMART_SEARCH_PROMPT
from providers.base import ModelProvider
from .base import Flow
from .schemas import SmartSearchInput, SmartSearchOutput

smart_search_flow = Flow(
    name="smartSearchFlow",
    label="Search",
    input_schema=SmartSearchInput,
    output_schema=SmartSearchOutput,
    prompt_template=SMART_SEARCH_PROMPT,
)


def smart_search(
    payload: Union[SmartSearchInput, Dict[str, Any]],
    provider: ModelProvider,
) -> SmartSearchOutput:
    """
    Search a transcription for a term.

    Args:
        payload: Transcription text and search term
        provider: Model provider to run the search with

    Returns:
        SmartSearchOutput with matching excerpts and a summary
    """
    return smart_search_flow.run(payload, provider)
