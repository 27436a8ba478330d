"""Gemini provider calling the public REST endpoint with ``requests``.

API Reference: https://ai.google.dev/api/generate-content

Same contract as the SDK provider; useful where the SDK is unavailable and
as a second backend behind the provider interface.
"""

import base64
import os
from typing import Any, Dict, Optional

import requests

from nutricheck import config
from nutricheck.data_layer.exceptions import ProviderCallError
from nutricheck.providers.generation_provider import (
    GenerationRequest,
    SpeechRequest,
    StructuredGenerationProvider,
)


class GeminiRestProvider(StructuredGenerationProvider):
    """Client for the Gemini ``generateContent`` REST endpoint.

    Usage:
        provider = GeminiRestProvider(api_key="your_key")
        # or
        provider = GeminiRestProvider.from_env()  # reads GEMINI_API_KEY env var
    """

    BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

    def __init__(self, api_key: str, timeout: float = config.REQUEST_TIMEOUT):
        """Initialize REST provider with API key.

        Args:
            api_key: Gemini API key
            timeout: Per-request timeout in seconds

        Raises:
            ValueError: If API key is empty
        """
        if not api_key or not api_key.strip():
            raise ValueError("API key is required. Create one at https://aistudio.google.com/apikey")
        self.api_key = api_key.strip()
        self.timeout = timeout

    @classmethod
    def from_env(cls, env_var: str = config.GEMINI_API_KEY_ENV) -> "GeminiRestProvider":
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
        parts = [{"text": request.contents}]
        if request.image is not None:
            parts.append({
                "inlineData": {
                    "mimeType": request.image.mime_type,
                    "data": request.image.data,
                }
            })

        generation_config: Dict[str, Any] = {"responseMimeType": request.response_mime_type}
        if request.response_schema is not None:
            generation_config["responseSchema"] = request.response_schema
        if request.temperature is not None:
            generation_config["temperature"] = request.temperature
        if request.max_output_tokens is not None:
            generation_config["maxOutputTokens"] = request.max_output_tokens

        body: Dict[str, Any] = {
            "contents": [{"role": "user", "parts": parts}],
            "generationConfig": generation_config,
        }
        if request.system_instruction:
            body["systemInstruction"] = {"parts": [{"text": request.system_instruction}]}

        data = self._make_request(request.model, body, "generate_content")
        candidate_parts = self._first_candidate_parts(data, "generate_content")
        texts = [part["text"] for part in candidate_parts if "text" in part]
        return "".join(texts) if texts else None

    def synthesize_speech(self, request: SpeechRequest) -> Optional[bytes]:
        body = {
            "contents": [{"parts": [{"text": request.text}]}],
            "generationConfig": {
                "responseModalities": ["AUDIO"],
                "speechConfig": {
                    "voiceConfig": {"prebuiltVoiceConfig": {"voiceName": request.voice_name}}
                },
            },
        }
        data = self._make_request(request.model, body, "synthesize_speech")
        for part in self._first_candidate_parts(data, "synthesize_speech"):
            inline = part.get("inlineData")
            if inline and inline.get("data"):
                return base64.b64decode(inline["data"])
        return None

    def _make_request(self, model: str, body: Dict[str, Any], operation: str) -> Dict[str, Any]:
        """POST to the generateContent endpoint.

        Raises:
            ProviderCallError: If the request fails or returns a non-200 status
        """
        url = f"{self.BASE_URL}/models/{model}:generateContent"
        headers = {"x-goog-api-key": self.api_key, "Content-Type": "application/json"}

        try:
            response = requests.post(url, headers=headers, json=body, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            raise ProviderCallError(
                operation=operation,
                message=f"request exceeded {self.timeout:g}s",
                timeout=True,
            ) from e
        except requests.exceptions.ConnectionError as e:
            raise ProviderCallError(operation=operation, message="network connection failed") from e
        except requests.exceptions.RequestException as e:
            raise ProviderCallError(operation=operation, message=f"request failed: {e}") from e

        if response.status_code != 200:
            raise ProviderCallError(
                operation=operation,
                message=self._error_message(response),
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderCallError(
                operation=operation,
                message="provider returned an unparseable envelope (invalid JSON)",
                status_code=response.status_code,
            ) from e
        if not isinstance(data, dict):
            raise ProviderCallError(
                operation=operation,
                message=f"provider returned an unexpected envelope ({type(data).__name__})",
                status_code=response.status_code,
            )
        return data

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.reason or ""
        error = body.get("error") if isinstance(body, dict) else None
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str) and error:
            return error
        return response.reason or ""

    @staticmethod
    def _first_candidate_parts(data: Dict[str, Any], operation: str):
        candidates = data.get("candidates") or []
        if not candidates:
            block_reason = (data.get("promptFeedback") or {}).get("blockReason")
            if block_reason:
                raise ProviderCallError(
                    operation=operation,
                    message=f"prompt blocked by safety filters ({block_reason})",
                )
            return []
        return (candidates[0].get("content") or {}).get("parts") or []
