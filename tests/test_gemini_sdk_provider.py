"""Tests for the google-genai backed provider.

The SDK client is mocked; no network calls are made.
"""
import base64
from unittest.mock import Mock, patch

import httpx
import pytest
from google.genai import errors

from nutricheck.data_layer.exceptions import ProviderCallError
from nutricheck.data_layer.models import InlineImage
from nutricheck.providers.gemini_sdk_provider import GeminiSDKProvider
from nutricheck.providers.generation_provider import GenerationRequest, SpeechRequest


@pytest.fixture
def client():
    return Mock()


@pytest.fixture
def provider(client):
    return GeminiSDKProvider(api_key="TEST_KEY", client=client)


def _request(**overrides):
    values = dict(
        model="gemini-2.5-flash",
        contents='{"food_query": "egg"}',
        system_instruction="Be precise.",
        response_schema={"type": "OBJECT", "properties": {"a": {"type": "STRING"}}, "required": ["a"]},
        temperature=0.3,
    )
    values.update(overrides)
    return GenerationRequest(**values)


class TestConstruction:
    """Tests for provider construction."""

    def test_requires_api_key(self):
        with pytest.raises(ValueError):
            GeminiSDKProvider(api_key="  ", client=Mock())

    def test_from_env_missing(self):
        with patch.dict("os.environ", {}, clear=True):
            with pytest.raises(ValueError, match="GEMINI_API_KEY"):
                GeminiSDKProvider.from_env()

    def test_from_env(self):
        with patch.dict("os.environ", {"GEMINI_API_KEY": "abc"}):
            with patch("nutricheck.providers.gemini_sdk_provider.genai.Client") as client_cls:
                GeminiSDKProvider.from_env()
        assert client_cls.call_args.kwargs["api_key"] == "abc"


class TestGenerate:
    """Tests for GeminiSDKProvider.generate."""

    def test_returns_text(self, provider, client):
        client.models.generate_content.return_value = Mock(text='{"a": "b"}', prompt_feedback=None)

        assert provider.generate(_request()) == '{"a": "b"}'

        kwargs = client.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-2.5-flash"
        assert kwargs["contents"] == '{"food_query": "egg"}'
        assert kwargs["config"].response_mime_type == "application/json"
        assert kwargs["config"].temperature == 0.3

    def test_image_sent_as_parts(self, provider, client):
        client.models.generate_content.return_value = Mock(text="{}", prompt_feedback=None)
        image = InlineImage(data=base64.b64encode(b"jpeg-bytes").decode(), mime_type="image/png")

        provider.generate(_request(image=image))

        contents = client.models.generate_content.call_args.kwargs["contents"]
        assert len(contents) == 2
        assert contents[0].text == '{"food_query": "egg"}'
        assert contents[1].inline_data.data == b"jpeg-bytes"
        assert contents[1].inline_data.mime_type == "image/png"

    def test_api_error_keeps_status(self, provider, client):
        client.models.generate_content.side_effect = errors.ClientError(
            429, {"error": {"code": 429, "message": "Resource exhausted", "status": "RESOURCE_EXHAUSTED"}}
        )
        with pytest.raises(ProviderCallError) as exc_info:
            provider.generate(_request())
        assert exc_info.value.status_code == 429

    def test_timeout(self, provider, client):
        client.models.generate_content.side_effect = httpx.ReadTimeout("timed out")
        with pytest.raises(ProviderCallError) as exc_info:
            provider.generate(_request())
        assert exc_info.value.timeout is True

    def test_connection_failure(self, provider, client):
        client.models.generate_content.side_effect = httpx.ConnectError("refused")
        with pytest.raises(ProviderCallError) as exc_info:
            provider.generate(_request())
        assert "network" in exc_info.value.message
        assert exc_info.value.status_code is None

    def test_blocked_prompt(self, provider, client):
        client.models.generate_content.return_value = Mock(
            text=None, candidates=[], prompt_feedback=Mock(block_reason="SAFETY")
        )
        with pytest.raises(ProviderCallError, match="blocked"):
            provider.generate(_request())


class TestSynthesizeSpeech:
    """Tests for GeminiSDKProvider.synthesize_speech."""

    def test_returns_pcm(self, provider, client):
        part = Mock()
        part.inline_data.data = b"\x00\x01"
        candidate = Mock()
        candidate.content.parts = [part]
        client.models.generate_content.return_value = Mock(candidates=[candidate], prompt_feedback=None)

        assert provider.synthesize_speech(SpeechRequest(model="tts", text="Hi")) == b"\x00\x01"

        config = client.models.generate_content.call_args.kwargs["config"]
        assert config.response_modalities == ["AUDIO"]
        assert config.speech_config.voice_config.prebuilt_voice_config.voice_name == "Kore"

    def test_no_audio(self, provider, client):
        client.models.generate_content.return_value = Mock(candidates=[], prompt_feedback=None)
        assert provider.synthesize_speech(SpeechRequest(model="tts", text="Hi")) is None
