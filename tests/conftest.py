"""Shared sample provider payloads."""
import copy

import pytest


SAMPLE_ANALYSIS = {
    "food_analysis": {
        "food_name": "Boiled Egg",
        "serving_reference": "Per 100 grams",
        "calories_kcal": 155,
        "macronutrients": {
            "carbohydrates_g": 1.1,
            "proteins_g": 13,
            "fats_g": 11,
            "fiber_g": 0,
            "sugars_g": 1.1,
        },
        "micronutrients": {
            "calcium_mg": 50,
            "iron_mg": 1.2,
            "potassium_mg": 126,
            "magnesium_mg": 10,
            "vitamin_c_mg": 0,
            "vitamin_b12_mcg": 1.1,
        },
        "glycemic_index": 0,
        "nutrient_density_score": 78,
        "health_score": 82,
        "quality_index": 74.5,
        "analysis_summary": "Eggs are a dense source of complete protein.",
    },
    "personalized_impact": {
        "daily_calorie_requirement": 2555.6,
        "percentage_of_daily_calories": 6.1,
        "goal_alignment": "Good",
        "recommended_adjustment": "Pair with vegetables for fiber.",
    },
    "risk_prediction": {
        "diabetes_risk": "Low",
        "cardiovascular_risk": "Moderate",
        "obesity_risk": "Low",
    },
    "gut_health_analysis": {
        "prebiotic_score": 10,
        "digestive_friendliness": "Good",
        "inflammation_risk": "Low",
    },
    "food_compatibility": {
        "compatible_with": ["spinach", "whole grain toast"],
        "avoid_combining_with": ["fried bacon"],
        "reasoning": "Fiber balances the fat content.",
    },
    "ai_recommendations": ["Keep to two eggs a day.", "Prefer boiling over frying."],
    "ui_metadata": {
        "theme_palette": {
            "primary_color": "#2E7D32",
            "secondary_color": "#66BB6A",
            "accent_color": "#FFA726",
            "background_gradient": "linear-gradient(#fff, #eee)",
        },
        "recommended_visuals": ["macro_pie_chart"],
        "icon_style": "outline",
        "font_style": "sans-serif",
    },
}

SAMPLE_REPORT = {
    "report_id": "NCP-20261019-0001",
    "report_title": "Personalized Nutrition Intelligence Report",
    "generated_on": "2026-10-19T09:30:00Z",
    "report_summary": "Boiled egg fits a maintenance goal.",
    "detailed_sections": {
        "user_profile_summary": "30 year old male.",
        "metabolic_analysis": "TDEE 2556 kcal.",
        "food_nutritional_breakdown": "13 g protein per 100 g.",
        "risk_assessment": "Low overall.",
        "gut_health_analysis": "Neutral.",
        "goal_alignment_analysis": "Good.",
        "recommendations": "Add vegetables.",
    },
    "print_ready_html": "<html><body><h1>Report</h1></body></html>",
}

SAMPLE_PREVENTIVE = {
    "metabolic_health_report": {
        "bmr": 1648.75,
        "tdee": 2555.56,
        "metabolic_efficiency_score": 81,
        "calorie_balance_status": "Maintenance",
    },
    "glycemic_and_insulin_report": {
        "glycemic_index": 0,
        "glycemic_load": 0,
        "classification": "Low",
        "insulin_spike_probability": "Low",
    },
    "cardiovascular_risk_report": {
        "heart_health_index": 62,
        "sodium_risk": "Low",
        "saturated_fat_risk": "Moderate",
        "overall_cardiovascular_risk": "Low",
    },
    "cognitive_nutrition_report": {
        "brain_support_score": 70,
        "omega3_support": "Moderate",
        "b12_support": "High",
        "mental_energy_rating": 7,
    },
    "gut_microbiome_report": {
        "prebiotic_score": 10,
        "digestive_friendliness": "Good",
        "inflammation_risk": "Low",
    },
    "nutrient_deficiency_projection": {
        "iron_deficiency_risk": "Low",
        "b12_deficiency_risk": "Low",
        "calcium_deficiency_risk": "Moderate",
        "protein_deficiency_risk": "Low",
    },
    "body_composition_projection": {
        "weekly_weight_change_estimate_kg": 0.0,
        "lean_mass_gain_potential": "Moderate",
        "fat_storage_probability": "Low",
    },
    "preventive_health_summary": {
        "overall_health_score": 80,
        "top_strengths": ["complete protein"],
        "top_risks": ["dietary cholesterol"],
        "priority_recommendations": ["add leafy greens"],
    },
    "genetic_sensitivity_simulation": {
        "caffeine_metabolism_assumption": "Fast",
        "carb_sensitivity_assumption": "Low",
        "fat_sensitivity_assumption": "Moderate",
        "personalized_note": "Assumed average sensitivity.",
    },
    "long_term_diet_trend_analysis": {
        "diabetes_risk_trend": "Stable",
        "cardiovascular_risk_trend": "Stable",
        "metabolic_stability_trend": "Improving",
    },
    "hormonal_balance_support_report": {
        "thyroid_support": "Moderate",
        "testosterone_or_estrogen_support": "High",
        "cortisol_balance_support": "Moderate",
    },
    "skin_health_report": {
        "skin_glow_percentage": 68,
        "collagen_support_rating": "High",
        "hydration_support_rating": "Moderate",
        "anti_aging_support_score": 66,
        "acne_risk_impact": "Neutral",
        "glycation_risk_level": "Low",
        "dermatological_summary": "Protein supports collagen synthesis.",
    },
    "six_month_impact_simulation": {
        "projected_weight_change_kg": 0.0,
        "projected_diabetes_risk_change": "Stable",
        "projected_heart_risk_change": "Stable",
    },
    "medical_disclaimer": "Informational only; not a substitute for medical advice.",
}


@pytest.fixture
def analysis_data():
    """Complete primary analysis payload as the provider returns it."""
    return copy.deepcopy(SAMPLE_ANALYSIS)


@pytest.fixture
def report_analysis_data():
    """Primary analysis payload including a downloadable report."""
    data = copy.deepcopy(SAMPLE_ANALYSIS)
    data["downloadable_report"] = copy.deepcopy(SAMPLE_REPORT)
    return data


@pytest.fixture
def preventive_data():
    """Complete deep analysis payload."""
    return copy.deepcopy(SAMPLE_PREVENTIVE)
