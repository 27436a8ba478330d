"""Response schemas for schema-constrained generation.

Schemas use the OpenAPI subset accepted by Gemini (``type`` in upper case,
``properties``, ``required``, ``items``, ``enum``). They are plain dicts so
any provider backend can forward them unchanged.
"""
from typing import Any, Dict, List, Optional

Schema = Dict[str, Any]

RISK_LEVELS = ["Low", "Moderate", "High"]
RATINGS = ["Good", "Moderate", "Poor"]


def _number(description: Optional[str] = None) -> Schema:
    schema: Schema = {"type": "NUMBER"}
    if description:
        schema["description"] = description
    return schema


def _string(description: Optional[str] = None) -> Schema:
    schema: Schema = {"type": "STRING"}
    if description:
        schema["description"] = description
    return schema


def _enum(values: List[str]) -> Schema:
    return {"type": "STRING", "enum": list(values)}


def _string_list() -> Schema:
    return {"type": "ARRAY", "items": {"type": "STRING"}}


def _object(properties: Dict[str, Schema], optional: tuple = ()) -> Schema:
    """Object schema where every property not named in *optional* is required."""
    return {
        "type": "OBJECT",
        "properties": properties,
        "required": [name for name in properties if name not in optional],
    }


FOOD_ANALYSIS_SCHEMA = _object({
    "food_name": _string(),
    "serving_reference": _string("e.g. 'Per 100 grams'"),
    "calories_kcal": _number(),
    "macronutrients": _object({
        "carbohydrates_g": _number(),
        "proteins_g": _number(),
        "fats_g": _number(),
        "fiber_g": _number(),
        "sugars_g": _number(),
    }),
    "micronutrients": _object({
        "calcium_mg": _number(),
        "iron_mg": _number(),
        "potassium_mg": _number(),
        "magnesium_mg": _number(),
        "vitamin_c_mg": _number(),
        "vitamin_b12_mcg": _number(),
    }),
    "glycemic_index": _number(),
    "nutrient_density_score": _number(),
    "health_score": _number("0-100"),
    "quality_index": _number(),
    "analysis_summary": _string("Two or three sentences, suitable for reading aloud"),
}, optional=("analysis_summary",))

PERSONALIZED_IMPACT_SCHEMA = _object({
    "daily_calorie_requirement": _number(),
    "percentage_of_daily_calories": _number(),
    "goal_alignment": _enum(RATINGS),
    "recommended_adjustment": _string(),
})

RISK_PREDICTION_SCHEMA = _object({
    "diabetes_risk": _enum(RISK_LEVELS),
    "cardiovascular_risk": _enum(RISK_LEVELS),
    "obesity_risk": _enum(RISK_LEVELS),
})

GUT_HEALTH_SCHEMA = _object({
    "prebiotic_score": _number(),
    "digestive_friendliness": _enum(RATINGS),
    "inflammation_risk": _enum(RISK_LEVELS),
})

FOOD_COMPATIBILITY_SCHEMA = _object({
    "compatible_with": _string_list(),
    "avoid_combining_with": _string_list(),
    "reasoning": _string(),
})

UI_METADATA_SCHEMA = _object({
    "theme_palette": _object({
        "primary_color": _string(),
        "secondary_color": _string(),
        "accent_color": _string(),
        "background_gradient": _string(),
    }),
    "recommended_visuals": _string_list(),
    "icon_style": _string(),
    "font_style": _string(),
})

DOWNLOADABLE_REPORT_SCHEMA = _object({
    "report_id": _string(),
    "report_title": _string(),
    "generated_on": _string("ISO 8601 timestamp"),
    "report_summary": _string(),
    "detailed_sections": _object({
        "user_profile_summary": _string(),
        "metabolic_analysis": _string(),
        "food_nutritional_breakdown": _string(),
        "risk_assessment": _string(),
        "gut_health_analysis": _string(),
        "goal_alignment_analysis": _string(),
        "recommendations": _string(),
    }),
    "print_ready_html": _string("Complete A4 HTML document with inline CSS"),
})

PRIMARY_SECTION_NAMES = (
    "food_analysis",
    "personalized_impact",
    "risk_prediction",
    "gut_health_analysis",
    "food_compatibility",
    "ai_recommendations",
    "ui_metadata",
)


def analysis_response_schema(include_report: bool) -> Schema:
    """Schema for the primary analysis.

    ``downloadable_report`` is only offered when a report was requested.
    ``preventive_health_data`` is never requested here; it is attached
    locally after a deep analysis.
    """
    properties: Dict[str, Schema] = {
        "food_analysis": FOOD_ANALYSIS_SCHEMA,
        "personalized_impact": PERSONALIZED_IMPACT_SCHEMA,
        "risk_prediction": RISK_PREDICTION_SCHEMA,
        "gut_health_analysis": GUT_HEALTH_SCHEMA,
        "food_compatibility": FOOD_COMPATIBILITY_SCHEMA,
        "ai_recommendations": _string_list(),
        "ui_metadata": UI_METADATA_SCHEMA,
    }
    optional = ["error"]
    if include_report:
        properties["downloadable_report"] = DOWNLOADABLE_REPORT_SCHEMA
        optional.append("downloadable_report")
    properties["error"] = _string("Set only when the food cannot be recognised")
    return _object(properties, optional=tuple(optional))


PREVENTIVE_HEALTH_SCHEMA = _object({
    "metabolic_health_report": _object({
        "bmr": _number(),
        "tdee": _number(),
        "metabolic_efficiency_score": _number(),
        "calorie_balance_status": _enum(["Deficit", "Surplus", "Maintenance"]),
    }),
    "glycemic_and_insulin_report": _object({
        "glycemic_index": _number(),
        "glycemic_load": _number(),
        "classification": _enum(RISK_LEVELS),
        "insulin_spike_probability": _enum(RISK_LEVELS),
    }),
    "cardiovascular_risk_report": _object({
        "heart_health_index": _number(),
        "sodium_risk": _enum(RISK_LEVELS),
        "saturated_fat_risk": _enum(RISK_LEVELS),
        "overall_cardiovascular_risk": _enum(RISK_LEVELS),
    }),
    "cognitive_nutrition_report": _object({
        "brain_support_score": _number(),
        "omega3_support": _enum(RISK_LEVELS),
        "b12_support": _enum(RISK_LEVELS),
        "mental_energy_rating": _number(),
    }),
    "gut_microbiome_report": _object({
        "prebiotic_score": _number(),
        "digestive_friendliness": _enum(RATINGS),
        "inflammation_risk": _enum(RISK_LEVELS),
    }),
    "nutrient_deficiency_projection": _object({
        "iron_deficiency_risk": _enum(RISK_LEVELS),
        "b12_deficiency_risk": _enum(RISK_LEVELS),
        "calcium_deficiency_risk": _enum(RISK_LEVELS),
        "protein_deficiency_risk": _enum(RISK_LEVELS),
    }),
    "body_composition_projection": _object({
        "weekly_weight_change_estimate_kg": _number(),
        "lean_mass_gain_potential": _enum(RISK_LEVELS),
        "fat_storage_probability": _enum(RISK_LEVELS),
    }),
    "preventive_health_summary": _object({
        "overall_health_score": _number(),
        "top_strengths": _string_list(),
        "top_risks": _string_list(),
        "priority_recommendations": _string_list(),
    }),
    "genetic_sensitivity_simulation": _object({
        "caffeine_metabolism_assumption": _enum(["Fast", "Slow"]),
        "carb_sensitivity_assumption": _enum(RISK_LEVELS),
        "fat_sensitivity_assumption": _enum(RISK_LEVELS),
        "personalized_note": _string(),
    }),
    "long_term_diet_trend_analysis": _object({
        "diabetes_risk_trend": _enum(["Stable", "Increasing", "Decreasing"]),
        "cardiovascular_risk_trend": _enum(["Stable", "Increasing", "Decreasing"]),
        "metabolic_stability_trend": _enum(["Stable", "Improving", "Declining"]),
    }),
    "hormonal_balance_support_report": _object({
        "thyroid_support": _enum(RISK_LEVELS),
        "testosterone_or_estrogen_support": _enum(RISK_LEVELS),
        "cortisol_balance_support": _enum(RISK_LEVELS),
    }),
    "skin_health_report": _object({
        "skin_glow_percentage": _number("0-100"),
        "collagen_support_rating": _enum(RISK_LEVELS),
        "hydration_support_rating": _enum(RISK_LEVELS),
        "anti_aging_support_score": _number(),
        "acne_risk_impact": _enum(["Increase", "Neutral", "Decrease"]),
        "glycation_risk_level": _enum(RISK_LEVELS),
        "dermatological_summary": _string(),
    }),
    "six_month_impact_simulation": _object({
        "projected_weight_change_kg": _number(),
        "projected_diabetes_risk_change": _enum(["Increase", "Stable", "Decrease"]),
        "projected_heart_risk_change": _enum(["Increase", "Stable", "Decrease"]),
    }),
    "medical_disclaimer": _string(),
})

QUICK_SCAN_SCHEMA = _object({
    "calories": _number(),
    "carbs": _number(),
    "protein": _number(),
    "fat": _number(),
}, optional=("calories", "carbs", "protein", "fat"))
