"""Request building, provider gateway and error classification."""

from nutricheck.gateway.error_classifier import (
    ClassifiedError,
    ErrorCategory,
    ErrorClassifier,
)
from nutricheck.gateway.nutrition_gateway import NutritionGateway
from nutricheck.gateway.request_builder import AnalysisRequestBuilder

__all__ = [
    "AnalysisRequestBuilder",
    "ClassifiedError",
    "ErrorCategory",
    "ErrorClassifier",
    "NutritionGateway",
]
