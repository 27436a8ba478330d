"""Metabolic calculator (Mifflin-St Jeor BMR and activity-scaled TDEE)."""
from typing import Dict, Optional, Union

from nutricheck.data_layer.models import ActivityLevel, Gender, MetabolicMetrics, UserProfile


ACTIVITY_FACTORS: Dict[ActivityLevel, float] = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHT: 1.375,
    ActivityLevel.MODERATE: 1.55,
    ActivityLevel.ACTIVE: 1.725,
    ActivityLevel.ATHLETE: 1.9,
}

DEFAULT_ACTIVITY_FACTOR = ACTIVITY_FACTORS[ActivityLevel.SEDENTARY]


def calculate_bmr(weight_kg: float, height_cm: float, age: int, gender: Gender) -> float:
    """Calculate Basal Metabolic Rate using the Mifflin-St Jeor equation.

    Args:
        weight_kg: Weight in kg
        height_cm: Height in cm
        age: Age in years
        gender: Gender; anything other than male uses the female constant

    Returns:
        BMR in kcal/day
    """
    base = (10 * weight_kg) + (6.25 * height_cm) - (5 * age)
    if gender == Gender.MALE:
        return base + 5
    return base - 161


def activity_factor_for(activity_level: Union[ActivityLevel, str, None]) -> float:
    """Return the TDEE multiplier; unknown or missing levels count as sedentary."""
    level: Optional[ActivityLevel] = ActivityLevel.parse(activity_level)
    if level is None:
        return DEFAULT_ACTIVITY_FACTOR
    return ACTIVITY_FACTORS[level]


def calculate_tdee(bmr: float, activity_level: Union[ActivityLevel, str, None]) -> float:
    """Calculate Total Daily Energy Expenditure."""
    return bmr * activity_factor_for(activity_level)


class MetabolicCalculator:
    """Computes the metrics attached to every provider request.

    Computed locally so the downstream analysis does not depend on the
    provider's own arithmetic.
    """

    def calculate(self, profile: UserProfile) -> MetabolicMetrics:
        """Calculate BMR, activity factor and TDEE for *profile*.

        Args:
            profile: UserProfile

        Returns:
            MetabolicMetrics (unrounded)
        """
        bmr = calculate_bmr(profile.weight_kg, profile.height_cm, profile.age, profile.gender)
        factor = activity_factor_for(profile.activity_level)
        return MetabolicMetrics(bmr=bmr, tdee=bmr * factor, activity_factor=factor)
