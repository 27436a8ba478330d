"""Builds the exact provider request for each gateway operation."""

import json
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from nutricheck import config
from nutricheck.data_layer.models import (
    AnalysisRequest,
    AnalysisResponse,
    DietHistorySummary,
    FoodAnalysis,
    PLACEHOLDER_DIET_HISTORY,
    UserProfile,
    merge_profile_with_metrics,
)
from nutricheck.gateway import prompts, schemas
from nutricheck.nutrition.calculator import MetabolicCalculator
from nutricheck.providers.generation_provider import GenerationRequest, SpeechRequest


IMAGE_ONLY_QUERY = "Identify and analyse the food shown in the attached photo."


def build_system_instruction(download_report: bool) -> str:
    """Primary analysis instruction, with or without the report section."""
    if download_report:
        return prompts.ANALYSIS_INSTRUCTION + "\n" + prompts.REPORT_INSTRUCTION
    return prompts.ANALYSIS_INSTRUCTION + "\n" + prompts.NO_REPORT_DIRECTIVE


def summarize_history(history: List[AnalysisResponse], limit: int = config.HISTORY_CAPACITY) -> List[Dict[str, Any]]:
    """Compact most-recent-first view of prior analyses for the payload."""
    summary = []
    for response in history[:limit]:
        food = response.food_analysis
        if food is None:
            continue
        summary.append({
            "food_name": food.food_name,
            "calories_kcal": food.calories_kcal,
            "health_score": food.health_score,
        })
    return summary


class AnalysisRequestBuilder:
    """Assembles system instruction, schema and payload for provider calls.

    Metabolic metrics are computed here for every request so the payload
    never relies on provider-side arithmetic.
    """

    def __init__(self, calculator: Optional[MetabolicCalculator] = None):
        self.calculator = calculator or MetabolicCalculator()

    def build_analysis_request(
        self,
        food_query: str,
        profile: UserProfile,
        mode,
        download_report: bool,
        history: Optional[List[AnalysisResponse]] = None,
        image=None,
    ) -> AnalysisRequest:
        return AnalysisRequest(
            food_query=food_query,
            profile=profile,
            metrics=self.calculator.calculate(profile),
            mode=mode,
            download_report=download_report,
            image=image,
            history=list(history or []),
        )

    def analysis_payload(self, request: AnalysisRequest) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "food_query": request.food_query or IMAGE_ONLY_QUERY,
            "user_profile": request.user_profile_payload(),
            "mode": request.mode.value,
            "download_report": request.download_report,
        }
        if request.history:
            payload["recent_history"] = summarize_history(request.history)
        return payload

    def build_analysis_call(self, request: AnalysisRequest) -> GenerationRequest:
        """Provider call for the primary analysis."""
        return GenerationRequest(
            model=config.ANALYSIS_MODEL,
            contents=json.dumps(self.analysis_payload(request)),
            system_instruction=build_system_instruction(request.download_report),
            response_schema=schemas.analysis_response_schema(include_report=request.download_report),
            temperature=config.TEMPERATURE,
            image=request.image,
        )

    def deep_analysis_payload(
        self,
        food_analysis: FoodAnalysis,
        profile: UserProfile,
        diet_history: DietHistorySummary = PLACEHOLDER_DIET_HISTORY,
    ) -> Dict[str, Any]:
        metrics = self.calculator.calculate(profile)
        return {
            "food_data": asdict(food_analysis),
            "user_profile": merge_profile_with_metrics(profile, metrics),
            "diet_history_summary": asdict(diet_history),
        }

    def build_deep_analysis_call(
        self,
        food_analysis: FoodAnalysis,
        profile: UserProfile,
        diet_history: DietHistorySummary = PLACEHOLDER_DIET_HISTORY,
    ) -> GenerationRequest:
        """Provider call for the preventive health (deep) analysis."""
        payload = self.deep_analysis_payload(food_analysis, profile, diet_history)
        return GenerationRequest(
            model=config.DEEP_ANALYSIS_MODEL,
            contents=json.dumps(payload),
            system_instruction=prompts.DEEP_ANALYSIS_INSTRUCTION,
            response_schema=schemas.PREVENTIVE_HEALTH_SCHEMA,
            temperature=config.TEMPERATURE,
            max_output_tokens=config.DEEP_ANALYSIS_MAX_OUTPUT_TOKENS,
        )

    def build_quick_scan_call(self, food_name: str) -> GenerationRequest:
        return GenerationRequest(
            model=config.QUICK_SCAN_MODEL,
            contents=prompts.QUICK_SCAN_PROMPT.format(food_name=food_name),
            response_schema=schemas.QUICK_SCAN_SCHEMA,
        )

    def build_speech_call(self, text: str) -> SpeechRequest:
        return SpeechRequest(model=config.TTS_MODEL, text=text, voice_name=config.TTS_VOICE)
