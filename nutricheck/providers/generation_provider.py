"""Abstract base class for structured-generation providers.

The gateway depends ONLY on this interface. A provider accepts a response
schema and returns schema-conformant JSON text; concrete implementations
wrap a specific AI backend without changing anything downstream.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional

from nutricheck.data_layer.models import InlineImage


@dataclass
class GenerationRequest:
    """Provider-neutral description of one generation call.

    Attributes:
        model: Backend model identifier
        contents: User content (the JSON payload or a plain prompt)
        system_instruction: Instruction text, if any
        response_schema: OpenAPI-style schema dict the output must follow
        response_mime_type: Requested output MIME type
        temperature: Sampling temperature (backend default when None)
        max_output_tokens: Output token cap (backend default when None)
        image: Optional inline photo sent alongside the contents
    """

    model: str
    contents: str
    system_instruction: Optional[str] = None
    response_schema: Optional[Dict[str, Any]] = None
    response_mime_type: str = "application/json"
    temperature: Optional[float] = None
    max_output_tokens: Optional[int] = None
    image: Optional[InlineImage] = None


@dataclass
class SpeechRequest:
    """Text-to-speech call using a prebuilt voice."""

    model: str
    text: str
    voice_name: str = "Kore"


class StructuredGenerationProvider(ABC):
    """Abstraction for a schema-constrained AI backend.

    Implementations must raise ``ProviderCallError`` for transport, HTTP,
    timeout and blocked-prompt failures, and must not retry.
    """

    @abstractmethod
    def generate(self, request: GenerationRequest) -> Optional[str]:
        """Run *request* and return the raw response text.

        Returns:
            Response text, or ``None`` / ``""`` when the backend produced nothing.
        """
        ...

    @abstractmethod
    def synthesize_speech(self, request: SpeechRequest) -> Optional[bytes]:
        """Return raw 16-bit mono PCM samples for *request*, or None."""
        ...
