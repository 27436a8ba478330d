"""Data models for the nutrition analysis pipeline.

Request-side models (profile, metrics, request) are built locally.
Response-side models mirror the structured JSON the AI provider is asked to
return and are parsed leniently with ``from_dict``: missing sections become
``None`` and missing leaf values fall back to their defaults, but a value of
the wrong shape raises ``TypeError`` / ``ValueError``.
"""
from dataclasses import dataclass, field, fields, is_dataclass, asdict
from enum import Enum
from typing import (
    Any,
    Dict,
    List,
    Literal,
    Optional,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)


RiskLevel = Literal["Low", "Moderate", "High"]
Rating = Literal["Good", "Moderate", "Poor"]
Trend = Literal["Stable", "Increasing", "Decreasing"]
Direction = Literal["Increase", "Stable", "Decrease"]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _parse_enum(enum_cls, value, field_name: str):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValueError(f"Invalid {field_name} {value!r}. Expected one of: {allowed}") from None


def _from_mapping(cls, data: Any):
    """Build dataclass *cls* from a JSON object, recursing into nested types."""
    if not isinstance(data, dict):
        raise TypeError(f"{cls.__name__} expects a JSON object, got {type(data).__name__}")

    hints = get_type_hints(cls)
    kwargs = {}
    for f in fields(cls):
        value = data.get(f.name)
        if value is None:
            continue
        kwargs[f.name] = _coerce(hints[f.name], value, f.name)
    return cls(**kwargs)


def _coerce(tp, value: Any, name: str):
    origin = get_origin(tp)

    if origin is Union:
        inner = [arg for arg in get_args(tp) if arg is not type(None)]
        return _coerce(inner[0], value, name)

    if origin is list:
        if not isinstance(value, list):
            raise TypeError(f"'{name}' must be a list, got {type(value).__name__}")
        (item_type,) = get_args(tp)
        return [_coerce(item_type, item, name) for item in value]

    if origin is Literal:
        return str(value)

    if is_dataclass(tp):
        return _from_mapping(tp, value)

    if tp is float:
        if isinstance(value, bool):
            raise TypeError(f"'{name}' must be a number, got a boolean")
        return float(value)

    if tp is str:
        return str(value)

    return value


def _drop_none(data: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in data.items() if value is not None}


class Gender(str, Enum):
    """Biological sex used by the BMR equation."""

    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class ActivityLevel(str, Enum):
    """Activity levels with a known TDEE multiplier."""

    SEDENTARY = "sedentary"
    LIGHT = "light"
    MODERATE = "moderate"
    ACTIVE = "active"
    ATHLETE = "athlete"

    @classmethod
    def parse(cls, value: Any) -> Optional["ActivityLevel"]:
        """Return the matching level, or None for unknown / missing values."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class Goal(str, Enum):
    """Body composition goal."""

    FAT_LOSS = "fat_loss"
    MAINTENANCE = "maintenance"
    MUSCLE_GAIN = "muscle_gain"


class AnalysisMode(str, Enum):
    """Kind of analysis requested from the provider."""

    SINGLE_FOOD = "single_food"
    COMPARISON = "comparison"
    MEAL_PLAN = "meal_plan"
    IMAGE_ANALYSIS = "image_analysis"
    COMPATIBILITY_CHECK = "compatibility_check"


# ---------------------------------------------------------------------------
# Request side
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class UserProfile:
    """Represents the user's body metrics and goal.

    Immutable: profile edits build a new instance with ``dataclasses.replace``.
    ``activity_level`` is normalized to an ``ActivityLevel`` when recognized;
    any other value is kept as given and treated as sedentary downstream.
    """

    age: int
    gender: Gender
    height_cm: float
    weight_kg: float
    activity_level: Union[ActivityLevel, str, None] = ActivityLevel.SEDENTARY
    goal: Goal = Goal.MAINTENANCE
    mood: Optional[str] = None

    def __post_init__(self):
        if self.age is None or self.age <= 0:
            raise ValueError(f"age must be a positive integer, got {self.age!r}")
        if self.height_cm is None or self.height_cm <= 0:
            raise ValueError(f"height_cm must be positive, got {self.height_cm!r}")
        if self.weight_kg is None or self.weight_kg <= 0:
            raise ValueError(f"weight_kg must be positive, got {self.weight_kg!r}")

        object.__setattr__(self, "gender", _parse_enum(Gender, self.gender, "gender"))
        object.__setattr__(self, "goal", _parse_enum(Goal, self.goal, "goal"))

        level = ActivityLevel.parse(self.activity_level)
        if level is not None:
            object.__setattr__(self, "activity_level", level)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserProfile":
        """Build a profile from a plain mapping (YAML, JSON request body)."""
        return cls(
            age=int(data["age"]),
            gender=data["gender"],
            height_cm=float(data["height_cm"]),
            weight_kg=float(data["weight_kg"]),
            activity_level=data.get("activity_level", ActivityLevel.SEDENTARY),
            goal=data.get("goal", Goal.MAINTENANCE),
            mood=data.get("mood"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the wire shape sent to the provider."""
        level = self.activity_level
        data: Dict[str, Any] = {
            "age": self.age,
            "gender": self.gender.value,
            "height_cm": self.height_cm,
            "weight_kg": self.weight_kg,
            "activity_level": level.value if isinstance(level, ActivityLevel) else level,
            "goal": self.goal.value,
        }
        if self.mood:
            data["mood"] = self.mood
        return data


DEFAULT_PROFILE = UserProfile(
    age=30,
    gender=Gender.MALE,
    height_cm=175.0,
    weight_kg=70.0,
    activity_level=ActivityLevel.MODERATE,
    goal=Goal.MAINTENANCE,
)


@dataclass(frozen=True)
class MetabolicMetrics:
    """Derived energy expenditure figures (kcal/day)."""

    bmr: float
    tdee: float
    activity_factor: float


@dataclass(frozen=True)
class DietHistorySummary:
    """Average daily intake baseline sent with deep analysis requests."""

    avg_daily_calories: float = 2000
    avg_daily_protein: float = 70
    avg_daily_sugar: float = 40
    avg_daily_fiber: float = 20
    avg_daily_sodium: float = 2300


# Used until a real intake tracker exists.
PLACEHOLDER_DIET_HISTORY = DietHistorySummary()


@dataclass(frozen=True)
class InlineImage:
    """Photo attached to an image analysis request (base64 payload)."""

    data: str
    mime_type: str = "image/jpeg"


@dataclass
class AnalysisRequest:
    """Everything needed to build one primary analysis call."""

    food_query: str
    profile: UserProfile
    metrics: MetabolicMetrics
    mode: AnalysisMode = AnalysisMode.SINGLE_FOOD
    download_report: bool = False
    image: Optional[InlineImage] = None
    history: List["AnalysisResponse"] = field(default_factory=list)

    def user_profile_payload(self) -> Dict[str, Any]:
        """Profile merged with the computed metabolic metrics."""
        return merge_profile_with_metrics(self.profile, self.metrics)


def merge_profile_with_metrics(profile: UserProfile, metrics: MetabolicMetrics) -> Dict[str, Any]:
    payload = profile.to_dict()
    payload.update(
        bmr=metrics.bmr,
        tdee=metrics.tdee,
        activity_factor=metrics.activity_factor,
    )
    return payload


# ---------------------------------------------------------------------------
# Primary analysis response
# ---------------------------------------------------------------------------


@dataclass
class Macronutrients:
    carbohydrates_g: float = 0.0
    proteins_g: float = 0.0
    fats_g: float = 0.0
    fiber_g: float = 0.0
    sugars_g: float = 0.0


@dataclass
class Micronutrients:
    calcium_mg: float = 0.0
    iron_mg: float = 0.0
    potassium_mg: float = 0.0
    magnesium_mg: float = 0.0
    vitamin_c_mg: float = 0.0
    vitamin_b12_mcg: float = 0.0


@dataclass
class FoodAnalysis:
    """Core nutrition facts for the analysed food (per serving reference)."""

    food_name: str = ""
    serving_reference: str = "Per 100 grams"
    calories_kcal: float = 0.0
    macronutrients: Macronutrients = field(default_factory=Macronutrients)
    micronutrients: Micronutrients = field(default_factory=Micronutrients)
    glycemic_index: float = 0.0
    nutrient_density_score: float = 0.0
    health_score: float = 0.0  # 0-100
    quality_index: float = 0.0
    analysis_summary: Optional[str] = None


@dataclass
class PersonalizedImpact:
    daily_calorie_requirement: float = 0.0
    percentage_of_daily_calories: float = 0.0
    goal_alignment: Rating = "Moderate"
    recommended_adjustment: str = ""


@dataclass
class RiskPrediction:
    diabetes_risk: RiskLevel = "Low"
    cardiovascular_risk: RiskLevel = "Low"
    obesity_risk: RiskLevel = "Low"


@dataclass
class GutHealthAnalysis:
    prebiotic_score: float = 0.0
    digestive_friendliness: Rating = "Moderate"
    inflammation_risk: RiskLevel = "Low"


@dataclass
class FoodCompatibility:
    compatible_with: List[str] = field(default_factory=list)
    avoid_combining_with: List[str] = field(default_factory=list)
    reasoning: str = ""


@dataclass
class ThemePalette:
    primary_color: str = "#4CAF50"
    secondary_color: str = "#81C784"
    accent_color: str = "#FFB74D"
    background_gradient: str = ""


@dataclass
class UIMetadata:
    theme_palette: ThemePalette = field(default_factory=ThemePalette)
    recommended_visuals: List[str] = field(default_factory=list)
    icon_style: str = ""
    font_style: str = ""


@dataclass
class ReportSections:
    user_profile_summary: str = ""
    metabolic_analysis: str = ""
    food_nutritional_breakdown: str = ""
    risk_assessment: str = ""
    gut_health_analysis: str = ""
    goal_alignment_analysis: str = ""
    recommendations: str = ""


@dataclass
class DownloadableReport:
    """Printable report; ``print_ready_html`` is passed through untouched."""

    report_id: str = ""
    report_title: str = ""
    generated_on: str = ""
    report_summary: str = ""
    detailed_sections: ReportSections = field(default_factory=ReportSections)
    print_ready_html: str = ""


# ---------------------------------------------------------------------------
# Deep (preventive health) analysis response
# ---------------------------------------------------------------------------


@dataclass
class MetabolicHealthReport:
    bmr: float = 0.0
    tdee: float = 0.0
    metabolic_efficiency_score: float = 0.0
    calorie_balance_status: Literal["Deficit", "Surplus", "Maintenance"] = "Maintenance"


@dataclass
class GlycemicInsulinReport:
    glycemic_index: float = 0.0
    glycemic_load: float = 0.0
    classification: RiskLevel = "Low"
    insulin_spike_probability: RiskLevel = "Low"


@dataclass
class CardiovascularRiskReport:
    heart_health_index: float = 0.0
    sodium_risk: RiskLevel = "Low"
    saturated_fat_risk: RiskLevel = "Low"
    overall_cardiovascular_risk: RiskLevel = "Low"


@dataclass
class CognitiveNutritionReport:
    brain_support_score: float = 0.0
    omega3_support: RiskLevel = "Low"
    b12_support: RiskLevel = "Low"
    mental_energy_rating: float = 0.0


@dataclass
class GutMicrobiomeReport:
    prebiotic_score: float = 0.0
    digestive_friendliness: Rating = "Moderate"
    inflammation_risk: RiskLevel = "Low"


@dataclass
class NutrientDeficiencyProjection:
    iron_deficiency_risk: RiskLevel = "Low"
    b12_deficiency_risk: RiskLevel = "Low"
    calcium_deficiency_risk: RiskLevel = "Low"
    protein_deficiency_risk: RiskLevel = "Low"


@dataclass
class BodyCompositionProjection:
    weekly_weight_change_estimate_kg: float = 0.0
    lean_mass_gain_potential: RiskLevel = "Low"
    fat_storage_probability: RiskLevel = "Low"


@dataclass
class PreventiveHealthSummary:
    overall_health_score: float = 0.0
    top_strengths: List[str] = field(default_factory=list)
    top_risks: List[str] = field(default_factory=list)
    priority_recommendations: List[str] = field(default_factory=list)


@dataclass
class GeneticSensitivitySimulation:
    caffeine_metabolism_assumption: Literal["Fast", "Slow"] = "Fast"
    carb_sensitivity_assumption: RiskLevel = "Moderate"
    fat_sensitivity_assumption: RiskLevel = "Moderate"
    personalized_note: str = ""


@dataclass
class LongTermDietTrendAnalysis:
    diabetes_risk_trend: Trend = "Stable"
    cardiovascular_risk_trend: Trend = "Stable"
    metabolic_stability_trend: Literal["Stable", "Improving", "Declining"] = "Stable"


@dataclass
class HormonalBalanceSupportReport:
    thyroid_support: RiskLevel = "Moderate"
    testosterone_or_estrogen_support: RiskLevel = "Moderate"
    cortisol_balance_support: RiskLevel = "Moderate"


@dataclass
class SkinHealthReport:
    skin_glow_percentage: float = 0.0  # clamped 0-100 by the provider
    collagen_support_rating: RiskLevel = "Moderate"
    hydration_support_rating: RiskLevel = "Moderate"
    anti_aging_support_score: float = 0.0
    acne_risk_impact: Literal["Increase", "Neutral", "Decrease"] = "Neutral"
    glycation_risk_level: RiskLevel = "Low"
    dermatological_summary: str = ""


@dataclass
class SixMonthImpactSimulation:
    projected_weight_change_kg: float = 0.0
    projected_diabetes_risk_change: Direction = "Stable"
    projected_heart_risk_change: Direction = "Stable"


@dataclass
class PreventiveHealthData:
    """Deep analysis report: thirteen sections plus a disclaimer."""

    metabolic_health_report: Optional[MetabolicHealthReport] = None
    glycemic_and_insulin_report: Optional[GlycemicInsulinReport] = None
    cardiovascular_risk_report: Optional[CardiovascularRiskReport] = None
    cognitive_nutrition_report: Optional[CognitiveNutritionReport] = None
    gut_microbiome_report: Optional[GutMicrobiomeReport] = None
    nutrient_deficiency_projection: Optional[NutrientDeficiencyProjection] = None
    body_composition_projection: Optional[BodyCompositionProjection] = None
    preventive_health_summary: Optional[PreventiveHealthSummary] = None
    genetic_sensitivity_simulation: Optional[GeneticSensitivitySimulation] = None
    long_term_diet_trend_analysis: Optional[LongTermDietTrendAnalysis] = None
    hormonal_balance_support_report: Optional[HormonalBalanceSupportReport] = None
    skin_health_report: Optional[SkinHealthReport] = None
    six_month_impact_simulation: Optional[SixMonthImpactSimulation] = None
    medical_disclaimer: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PreventiveHealthData":
        return _from_mapping(cls, data)

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none(asdict(self))


@dataclass
class AnalysisResponse:
    """Structured result of a primary analysis call.

    ``error`` is set when the provider recognized the request but could not
    analyse it (e.g. unknown food); that is distinct from transport errors.
    """

    food_analysis: Optional[FoodAnalysis] = None
    personalized_impact: Optional[PersonalizedImpact] = None
    risk_prediction: Optional[RiskPrediction] = None
    gut_health_analysis: Optional[GutHealthAnalysis] = None
    food_compatibility: Optional[FoodCompatibility] = None
    ai_recommendations: List[str] = field(default_factory=list)
    ui_metadata: Optional[UIMetadata] = None
    downloadable_report: Optional[DownloadableReport] = None
    preventive_health_data: Optional[PreventiveHealthData] = None
    error: Optional[str] = None

    @property
    def is_incomplete(self) -> bool:
        """True when the mandatory food_analysis block is missing."""
        return self.food_analysis is None and not self.error

    @property
    def is_successful(self) -> bool:
        return not self.error and self.food_analysis is not None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnalysisResponse":
        return _from_mapping(cls, data)

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none(asdict(self))


@dataclass
class QuickScanEstimate:
    """Rough per-serving macro estimate; any field may be missing."""

    calories: Optional[float] = None
    carbs: Optional[float] = None
    protein: Optional[float] = None
    fat: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "QuickScanEstimate":
        return _from_mapping(cls, data)

