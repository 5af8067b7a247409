"""
Hosted model providers.
"""
from .base import ModelProvider, MediaPart, ProviderError
from .gemini import GeminiProvider

__all__ = ["ModelProvider", "MediaPart", "ProviderError", "GeminiProvider"]
