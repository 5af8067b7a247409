"""
Google Gemini model provider.
"""
import io
import logging
from typing import List, Optional, Type

from google import genai
from google.genai import types
from pydantic import ValidationError

from .base import ModelProvider, MediaPart, OutputT, ProviderError
from config import GEMINI_API_KEY, GEMINI_MODEL, INLINE_MEDIA_LIMIT_BYTES

logger = logging.getLogger("court_scribe.providers")


class GeminiProvider(ModelProvider):
    """
    Model provider using the Google Gemini API.

    Sends audio inline (or through the Files API when large) and asks
    for JSON output constrained by a pydantic response schema.
    """

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        """
        Initialize the Gemini provider.

        Args:
            api_key: Gemini API key. If None, uses GEMINI_API_KEY from config.
            model: Model name to use. If None, uses GEMINI_MODEL from config.
        """
        self.api_key = api_key or GEMINI_API_KEY
        self.model = model or GEMINI_MODEL

        if not self.api_key:
            raise ValueError("Gemini API key is required. Set GEMINI_API_KEY environment variable.")

        self.client = genai.Client(api_key=self.api_key)

    @property
    def name(self) -> str:
        return "Gemini"

    def generate(
        self,
        prompt: str,
        output_schema: Type[OutputT],
        media: Optional[List[MediaPart]] = None,
    ) -> Optional[OutputT]:
        try:
            parts = [self._media_part(m) for m in (media or [])]
            parts.append(types.Part.from_text(text=prompt))

            logger.debug("Requesting %s from %s", output_schema.__name__, self.model)
            response = self.client.models.generate_content(
                model=self.model,
                contents=[types.Content(role="user", parts=parts)],
                config=types.GenerateContentConfig(
                    response_mime_type="application/json",
                    response_schema=output_schema,
                ),
            )
        except Exception as e:
            raise ProviderError(
                f"Request failed: {str(e)}",
                self.name,
                original_error=e
            )

        if not response.text:
            return None

        try:
            return output_schema.model_validate_json(response.text)
        except ValidationError as e:
            raise ProviderError(
                f"Response does not match {output_schema.__name__}: {e}",
                self.name,
                original_error=e
            )

    def _media_part(self, media: MediaPart) -> types.Part:
        """Inline small audio, upload anything larger."""
        if len(media.data) <= INLINE_MEDIA_LIMIT_BYTES:
            return types.Part.from_bytes(data=media.data, mime_type=media.mime_type)

        logger.info("Uploading %.1f MB of %s to Gemini", len(media.data) / 1e6, media.mime_type)
        uploaded_file = self.client.files.upload(
            file=io.BytesIO(media.data),
            config=types.UploadFileConfig(mime_type=media.mime_type)
        )
        return types.Part.from_uri(file_uri=uploaded_file.uri, mime_type=media.mime_type)
