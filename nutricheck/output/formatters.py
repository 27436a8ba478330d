"""Formatters for analysis output (JSON, Markdown and spoken summary)."""

import json
import math
from enum import Enum
from typing import Any, Dict, List, Optional

from nutricheck.data_layer.models import (
    AnalysisResponse,
    FoodAnalysis,
    PreventiveHealthData,
    QuickScanEstimate,
)


INCOMPLETE_RESULT_MESSAGE = (
    "The AI returned an incomplete analysis. Please try a simpler query, "
    "for example a single food name."
)

AUDIO_SUMMARY_TEMPLATE = (
    "Nutritional analysis for {food_name}. "
    "It contains {calories} calories. "
    "Health score is {health_score}. "
    "{summary}"
)


class ResultStatus(Enum):
    """What a caller should display for a result."""

    COMPLETE = "complete"
    NOT_RECOGNIZED = "not_recognized"
    INCOMPLETE = "incomplete"


def describe_result_status(response: AnalysisResponse) -> ResultStatus:
    if response.error:
        return ResultStatus.NOT_RECOGNIZED
    if response.is_incomplete:
        return ResultStatus.INCOMPLETE
    return ResultStatus.COMPLETE


def _number(value: float, decimals: int = 1) -> str:
    """Format a number, dropping a trailing .0 (e.g. 155.0 -> "155")."""
    if not math.isfinite(value):
        return "n/a"
    if value == int(value):
        return str(int(value))
    text = f"{value:.{decimals}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def build_audio_summary_text(food: FoodAnalysis) -> str:
    """Text read aloud by the audio summary.

    Falls back to the top-level facts when the provider sent no summary.
    """
    return AUDIO_SUMMARY_TEMPLATE.format(
        food_name=food.food_name,
        calories=_number(food.calories_kcal, 0),
        health_score=_number(food.health_score, 0),
        summary=food.analysis_summary or "",
    ).strip()


def format_food_analysis(food: FoodAnalysis) -> List[str]:
    macros = food.macronutrients
    micros = food.micronutrients
    lines = [
        f"# {food.food_name}",
        f"_{food.serving_reference}_",
        "",
        f"**Calories:** {_number(food.calories_kcal)} kcal",
        f"**Health Score:** {_number(food.health_score)}/100",
        f"**Quality Index:** {_number(food.quality_index)}",
        f"**Glycemic Index:** {_number(food.glycemic_index)}",
        f"**Nutrient Density:** {_number(food.nutrient_density_score)}",
        "",
        "## Macronutrients",
        f"- Carbohydrates: {_number(macros.carbohydrates_g)}g",
        f"- Protein: {_number(macros.proteins_g)}g",
        f"- Fat: {_number(macros.fats_g)}g",
        f"- Fiber: {_number(macros.fiber_g)}g",
        f"- Sugars: {_number(macros.sugars_g)}g",
        "",
        "## Micronutrients",
        f"- Calcium: {_number(micros.calcium_mg)}mg",
        f"- Iron: {_number(micros.iron_mg)}mg",
        f"- Potassium: {_number(micros.potassium_mg)}mg",
        f"- Magnesium: {_number(micros.magnesium_mg)}mg",
        f"- Vitamin C: {_number(micros.vitamin_c_mg)}mg",
        f"- Vitamin B12: {_number(micros.vitamin_b12_mcg)}mcg",
        "",
    ]
    if food.analysis_summary:
        lines.extend([food.analysis_summary, ""])
    return lines


def format_analysis_markdown(response: AnalysisResponse) -> str:
    """Format an AnalysisResponse as Markdown for the terminal.

    Args:
        response: Parsed primary analysis

    Returns:
        Markdown string; a short notice when the food was not recognized or
        the result is incomplete
    """
    status = describe_result_status(response)
    if status is ResultStatus.NOT_RECOGNIZED:
        return f"⚠️ **{response.error}**\n"
    if status is ResultStatus.INCOMPLETE:
        return f"⚠️ **{INCOMPLETE_RESULT_MESSAGE}**\n"

    lines = format_food_analysis(response.food_analysis)

    impact = response.personalized_impact
    if impact:
        lines.append("## Personalized Impact")
        lines.append(f"**Daily Requirement:** {_number(impact.daily_calorie_requirement, 0)} kcal")
        lines.append(f"**Share of Daily Calories:** {_number(impact.percentage_of_daily_calories)}%")
        lines.append(f"**Goal Alignment:** {impact.goal_alignment}")
        if impact.recommended_adjustment:
            lines.append(f"**Adjustment:** {impact.recommended_adjustment}")
        lines.append("")

    risk = response.risk_prediction
    if risk:
        lines.append("## Risk Prediction")
        lines.append(f"- Diabetes: {risk.diabetes_risk}")
        lines.append(f"- Cardiovascular: {risk.cardiovascular_risk}")
        lines.append(f"- Obesity: {risk.obesity_risk}")
        lines.append("")

    gut = response.gut_health_analysis
    if gut:
        lines.append("## Gut Health")
        lines.append(f"- Prebiotic Score: {_number(gut.prebiotic_score)}")
        lines.append(f"- Digestive Friendliness: {gut.digestive_friendliness}")
        lines.append(f"- Inflammation Risk: {gut.inflammation_risk}")
        lines.append("")

    compat = response.food_compatibility
    if compat:
        lines.append("## Food Compatibility")
        if compat.compatible_with:
            lines.append(f"**Pairs well with:** {', '.join(compat.compatible_with)}")
        if compat.avoid_combining_with:
            lines.append(f"**Avoid combining with:** {', '.join(compat.avoid_combining_with)}")
        if compat.reasoning:
            lines.append(compat.reasoning)
        lines.append("")

    if response.ai_recommendations:
        lines.append("## Recommendations")
        for recommendation in response.ai_recommendations:
            lines.append(f"- {recommendation}")
        lines.append("")

    if response.downloadable_report:
        report = response.downloadable_report
        lines.append("## Report")
        lines.append(f"**{report.report_title}** ({report.report_id})")
        if report.report_summary:
            lines.append(report.report_summary)
        lines.append("")

    if response.preventive_health_data:
        lines.append(format_preventive_health_markdown(response.preventive_health_data))

    return "\n".join(lines)


def format_preventive_health_markdown(data: PreventiveHealthData) -> str:
    """Format the deep analysis sections that are present."""
    lines = ["# Preventive Health Report", ""]

    metabolic = data.metabolic_health_report
    if metabolic:
        lines.append("## Metabolic Health")
        lines.append(f"- BMR: {_number(metabolic.bmr, 0)} kcal")
        lines.append(f"- TDEE: {_number(metabolic.tdee, 0)} kcal")
        lines.append(f"- Efficiency Score: {_number(metabolic.metabolic_efficiency_score)}")
        lines.append(f"- Calorie Balance: {metabolic.calorie_balance_status}")
        lines.append("")

    glycemic = data.glycemic_and_insulin_report
    if glycemic:
        lines.append("## Glycemic & Insulin")
        lines.append(f"- Glycemic Load: {_number(glycemic.glycemic_load)} ({glycemic.classification})")
        lines.append(f"- Insulin Spike Probability: {glycemic.insulin_spike_probability}")
        lines.append("")

    cardio = data.cardiovascular_risk_report
    if cardio:
        lines.append("## Cardiovascular")
        lines.append(f"- Heart Health Index: {_number(cardio.heart_health_index)}")
        lines.append(f"- Overall Risk: {cardio.overall_cardiovascular_risk}")
        lines.append("")

    summary = data.preventive_health_summary
    if summary:
        lines.append("## Summary")
        lines.append(f"**Overall Health Score:** {_number(summary.overall_health_score)}")
        for label, items in (
            ("Strengths", summary.top_strengths),
            ("Risks", summary.top_risks),
            ("Priorities", summary.priority_recommendations),
        ):
            if items:
                lines.append(f"**{label}:**")
                lines.extend(f"- {item}" for item in items)
        lines.append("")

    skin = data.skin_health_report
    if skin:
        lines.append("## Skin Health")
        lines.append(f"- Skin Glow: {_number(skin.skin_glow_percentage)}%")
        lines.append(f"- Acne Risk Impact: {skin.acne_risk_impact}")
        if skin.dermatological_summary:
            lines.append(skin.dermatological_summary)
        lines.append("")

    projection = data.six_month_impact_simulation
    if projection:
        lines.append("## Six-Month Projection")
        lines.append(f"- Weight Change: {_number(projection.projected_weight_change_kg)} kg")
        lines.append(f"- Diabetes Risk: {projection.projected_diabetes_risk_change}")
        lines.append(f"- Heart Risk: {projection.projected_heart_risk_change}")
        lines.append("")

    if data.medical_disclaimer:
        lines.append(f"_{data.medical_disclaimer}_")
        lines.append("")

    return "\n".join(lines)


def format_quick_scan(food_name: str, estimate: Optional[QuickScanEstimate]) -> str:
    if estimate is None:
        return f"No quick estimate available for {food_name}."
    parts = []
    for label, value, unit in (
        ("Calories", estimate.calories, " kcal"),
        ("Carbs", estimate.carbs, "g"),
        ("Protein", estimate.protein, "g"),
        ("Fat", estimate.fat, "g"),
    ):
        if value is not None:
            parts.append(f"{label}: {_number(value)}{unit}")
    return f"{food_name}: " + (", ".join(parts) if parts else "no values returned")


def format_analysis_json(response: AnalysisResponse) -> Dict[str, Any]:
    """Dictionary form of a response with its display status."""
    data = response.to_dict()
    data["status"] = describe_result_status(response).value
    return data


def format_analysis_json_string(response: AnalysisResponse, indent: int = 2) -> str:
    return json.dumps(format_analysis_json(response), indent=indent)
