"""Provider abstraction layer for AI generation backends.

This package decouples the gateway from concrete backends
(google-genai SDK vs. plain REST).
"""

from nutricheck.providers.generation_provider import (
    GenerationRequest,
    SpeechRequest,
    StructuredGenerationProvider,
)
from nutricheck.providers.gemini_sdk_provider import GeminiSDKProvider
from nutricheck.providers.gemini_rest_provider import GeminiRestProvider

__all__ = [
    "GenerationRequest",
    "SpeechRequest",
    "StructuredGenerationProvider",
    "GeminiSDKProvider",
    "GeminiRestProvider",
]
