"""
Abstract base class for hosted model providers.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Type, TypeVar

from pydantic import BaseModel

OutputT = TypeVar("OutputT", bound=BaseModel)


@dataclass
class MediaPart:
    """Binary media attached to a prompt."""
    mime_type: str
    data: bytes


class ModelProvider(ABC):
    """
    Abstract base class for structured-output model providers.

    Subclasses send a rendered prompt plus optional media to their hosted
    model and return the response parsed into the requested schema.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the name of this provider."""
        pass

    @abstractmethod
    def generate(
        self,
        prompt: str,
        output_schema: Type[OutputT],
        media: Optional[List[MediaPart]] = None,
    ) -> Optional[OutputT]:
        """
        Run a prompt and parse the response into output_schema.

        Args:
            prompt: The rendered prompt text
            output_schema: Pydantic model the response must conform to
            media: Optional audio parts to send alongside the prompt

        Returns:
            An instance of output_schema, or None if the model returned nothing

        Raises:
            ProviderError: If the call fails or the response violates the schema
        """
        pass


class ProviderError(Exception):
    """Exception raised when a model call fails."""

    def __init__(self, message: str, provider: str, original_error: Optional[Exception] = None):
        self.message = message
        self.provider = provider
        self.original_error = original_error
        super().__init__(f"[{provider}] {message}")
