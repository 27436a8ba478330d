"""Gemini provider backed by the official ``google-genai`` SDK."""

import base64
import logging
import os
from typing import Any, List, Optional, Union

import httpx
from google import genai
from google.genai import errors, types

from nutricheck import config
from nutricheck.data_layer.exceptions import ProviderCallError
from nutricheck.providers.generation_provider import (
    GenerationRequest,
    SpeechRequest,
    StructuredGenerationProvider,
)

logger = logging.getLogger(__name__)


class GeminiSDKProvider(StructuredGenerationProvider):
    """Provider that calls Gemini through ``google.genai.Client``.

    Usage::

        provider = GeminiSDKProvider.from_env()   # reads GEMINI_API_KEY
        text = provider.generate(GenerationRequest(model="gemini-2.5-flash", contents="{...}"))
    """

    def __init__(self, api_key: str, timeout: float = config.REQUEST_TIMEOUT, client: Any = None):
        """Initialize the provider.

        Args:
            api_key: Gemini API key
            timeout: Per-request timeout in seconds
            client: Pre-built ``genai.Client`` (tests inject a mock)

        Raises:
            ValueError: If API key is empty
        """
        if not api_key or not api_key.strip():
            raise ValueError("API key is required. Create one at https://aistudio.google.com/apikey")
        self.timeout = timeout
        self._client = client or genai.Client(
            api_key=api_key.strip(),
            http_options=types.HttpOptions(timeout=int(timeout * 1000)),
        )

    @classmethod
    def from_env(cls, env_var: str = config.GEMINI_API_KEY_ENV) -> "GeminiSDKProvider":
        """Create provider from environment variable.

        Raises:
            ValueError: If environment variable not set
        """
        api_key = os.environ.get(env_var)
        if not api_key:
            raise ValueError(
                f"Environment variable {env_var} not set. "
                "Create an API key at https://aistudio.google.com/apikey"
            )
        return cls(api_key=api_key)

    def generate(self, request: GenerationRequest) -> Optional[str]:
        generation_config = types.GenerateContentConfig(
            system_instruction=request.system_instruction,
            response_mime_type=request.response_mime_type,
            response_schema=request.response_schema,
            temperature=request.temperature,
            max_output_tokens=request.max_output_tokens,
        )
        response = self._call(
            "generate_content",
            model=request.model,
            contents=self._build_contents(request),
            config=generation_config,
        )
        self._raise_if_blocked(response, "generate_content")
        return response.text

    def synthesize_speech(self, request: SpeechRequest) -> Optional[bytes]:
        speech_config = types.GenerateContentConfig(
            response_modalities=["AUDIO"],
            speech_config=types.SpeechConfig(
                voice_config=types.VoiceConfig(
                    prebuilt_voice_config=types.PrebuiltVoiceConfig(voice_name=request.voice_name)
                )
            ),
        )
        response = self._call(
            "synthesize_speech",
            model=request.model,
            contents=request.text,
            config=speech_config,
        )
        self._raise_if_blocked(response, "synthesize_speech")

        candidates = response.candidates or []
        if not candidates or candidates[0].content is None:
            return None
        parts = candidates[0].content.parts or []
        if not parts or parts[0].inline_data is None:
            return None
        return parts[0].inline_data.data

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _build_contents(request: GenerationRequest) -> Union[str, List[types.Part]]:
        if request.image is None:
            return request.contents
        return [
            types.Part.from_text(text=request.contents),
            types.Part.from_bytes(
                data=base64.b64decode(request.image.data),
                mime_type=request.image.mime_type,
            ),
        ]

    def _call(self, operation: str, **kwargs):
        try:
            return self._client.models.generate_content(**kwargs)
        except errors.APIError as e:
            raise ProviderCallError(
                operation=operation,
                message=e.message or e.status or str(e),
                status_code=e.code,
            ) from e
        except httpx.TimeoutException as e:
            raise ProviderCallError(
                operation=operation,
                message=f"request exceeded {self.timeout:g}s",
                timeout=True,
            ) from e
        except httpx.TransportError as e:
            raise ProviderCallError(
                operation=operation,
                message=f"network connection failed ({e})",
            ) from e

    @staticmethod
    def _raise_if_blocked(response, operation: str) -> None:
        feedback = getattr(response, "prompt_feedback", None)
        block_reason = getattr(feedback, "block_reason", None) if feedback else None
        if block_reason and not response.candidates:
            reason = getattr(block_reason, "value", block_reason)
            logger.warning("Prompt blocked by provider during %s: %s", operation, reason)
            raise ProviderCallError(
                operation=operation,
                message=f"prompt blocked by safety filters ({reason})",
            )
