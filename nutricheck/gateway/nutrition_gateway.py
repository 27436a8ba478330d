"""Single integration point between the session layer and the AI provider.

Every operation builds its request, calls the provider once and parses the
reply into typed models. Failures are raised as typed pipeline errors; the
gateway never returns partial data and never retries.
"""

import base64
import json
import logging
import re
from typing import Any, Dict, List, Optional

from nutricheck.data_layer.exceptions import (
    MalformedResponseError,
    NoResponseError,
    NutritionPipelineError,
)
from nutricheck.data_layer.models import (
    AnalysisMode,
    AnalysisResponse,
    FoodAnalysis,
    InlineImage,
    PreventiveHealthData,
    QuickScanEstimate,
    UserProfile,
)
from nutricheck.gateway.request_builder import AnalysisRequestBuilder
from nutricheck.ingestion.input_sanitizer import InputSanitizer
from nutricheck.output.audio import wrap_pcm_as_wav
from nutricheck.providers.generation_provider import StructuredGenerationProvider

logger = logging.getLogger(__name__)

_FENCE_PATTERN = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)


class NutritionGateway:
    """Runs analysis, deep analysis, speech and quick-scan calls.

    Usage::

        gateway = NutritionGateway(GeminiSDKProvider.from_env())
        response = gateway.analyze("2 boiled eggs", profile)
        report = gateway.analyze_deep(response.food_analysis, profile)
    """

    def __init__(
        self,
        provider: StructuredGenerationProvider,
        builder: Optional[AnalysisRequestBuilder] = None,
        sanitizer: Optional[InputSanitizer] = None,
    ):
        self.provider = provider
        self.builder = builder or AnalysisRequestBuilder()
        self.sanitizer = sanitizer or InputSanitizer()

    def analyze(
        self,
        query: str,
        profile: UserProfile,
        mode: AnalysisMode = AnalysisMode.SINGLE_FOOD,
        download_report: bool = False,
        history: Optional[List[AnalysisResponse]] = None,
        image: Optional[InlineImage] = None,
    ) -> AnalysisResponse:
        """Run the primary analysis.

        Raises:
            SecurityError: Query contains injection phrases (nothing is sent)
            ValueError: Query is empty and no image is attached
            ProviderCallError: The provider call failed
            NoResponseError: The provider returned nothing
            MalformedResponseError: The reply is not a valid analysis object
        """
        clean_query = self.sanitizer.sanitize(query)
        if not clean_query and image is None:
            raise ValueError("Food query cannot be empty")

        request = self.builder.build_analysis_request(
            clean_query, profile, mode, download_report, history=history, image=image
        )
        call = self.builder.build_analysis_call(request)
        logger.info(
            "Analysis request: mode=%s report=%s image=%s history=%d",
            mode.value, download_report, image is not None, len(request.history),
        )

        text = self._generate(call, "analysis")
        data = self._parse_json(text, "analysis")
        try:
            response = AnalysisResponse.from_dict(data)
        except (TypeError, ValueError) as e:
            raise MalformedResponseError("analysis", str(e), text) from e

        if response.error:
            logger.info("Provider could not analyse query: %s", response.error)
        return response

    def analyze_deep(self, food_analysis: FoodAnalysis, profile: UserProfile) -> PreventiveHealthData:
        """Run the preventive health (deep) analysis for an analysed food."""
        call = self.builder.build_deep_analysis_call(food_analysis, profile)
        logger.info("Deep analysis request for %r", food_analysis.food_name)

        text = self._generate(call, "deep analysis")
        data = self._parse_json(text, "deep analysis")
        try:
            return PreventiveHealthData.from_dict(data)
        except (TypeError, ValueError) as e:
            raise MalformedResponseError("deep analysis", str(e), text) from e

    def synthesize_audio(self, text: str) -> str:
        """Speak *text* and return a base64-encoded WAV file."""
        call = self.builder.build_speech_call(text)
        try:
            pcm = self.provider.synthesize_speech(call)
        except NutritionPipelineError as e:
            logger.warning("Speech synthesis failed: %s", e)
            raise
        if not pcm:
            raise NoResponseError("speech synthesis")
        return base64.b64encode(wrap_pcm_as_wav(pcm)).decode("ascii")

    def quick_scan(self, food_name: str) -> Optional[QuickScanEstimate]:
        """Best-effort macro estimate; returns None on any failure."""
        try:
            call = self.builder.build_quick_scan_call(food_name)
            text = self._generate(call, "quick scan")
            return QuickScanEstimate.from_dict(self._parse_json(text, "quick scan"))
        except Exception as e:
            logger.warning("Quick scan failed for %r: %s", food_name, e)
            return None

    def _generate(self, call, operation: str) -> str:
        try:
            text = self.provider.generate(call)
        except NutritionPipelineError as e:
            logger.warning("Provider call failed during %s: %s", operation, e)
            raise
        if not text or not text.strip():
            raise NoResponseError(operation)
        return text

    @staticmethod
    def _parse_json(text: str, operation: str) -> Dict[str, Any]:
        """Decode a JSON object, tolerating a surrounding markdown fence."""
        body = text.strip()
        match = _FENCE_PATTERN.match(body)
        if match:
            body = match.group(1)
        try:
            data = json.loads(body)
        except json.JSONDecodeError as e:
            raise MalformedResponseError(operation, f"invalid JSON ({e.msg})", text) from e
        if not isinstance(data, dict):
            raise MalformedResponseError(
                operation, f"expected a JSON object, got {type(data).__name__}", text
            )
        return data
