"""Structured error types for the analysis pipeline.

PIPELINE ERROR FLOW:
    ┌─────────────────────────────────────────────────────┐
    │ Food query                                          │
    └─────────────────────────────────────────────────────┘
                              │
                              ▼
    ┌─────────────────────────────────────────────────────┐
    │ Sanitizer         → SecurityError (nothing sent)    │
    └─────────────────────────────────────────────────────┘
                              │
                              ▼
    ┌─────────────────────────────────────────────────────┐
    │ Provider call     → ProviderCallError               │
    └─────────────────────────────────────────────────────┘
                              │
                              ▼
    ┌─────────────────────────────────────────────────────┐
    │ Response parsing  → NoResponseError                 │
    │                   → MalformedResponseError          │
    └─────────────────────────────────────────────────────┘
                              │
                              ▼
    ┌─────────────────────────────────────────────────────┐
    │ AnalysisResponse / PreventiveHealthData (success)   │
    └─────────────────────────────────────────────────────┘

The session layer hands every one of these to the ErrorClassifier, so
callers only ever see a single user-facing message.
"""

from enum import Enum
from typing import Any, Dict, Optional


class PipelineErrorCode(Enum):
    """Enumeration of pipeline error codes.

    Codes are string values for easy serialization and logging.
    """

    SECURITY_REJECTED = "SECURITY_REJECTED"
    NO_RESPONSE = "NO_RESPONSE"
    MALFORMED_RESPONSE = "MALFORMED_RESPONSE"
    PROVIDER_CALL_FAILED = "PROVIDER_CALL_FAILED"


class NutritionPipelineError(Exception):
    """Base exception for all pipeline errors.

    Attributes:
        code: PipelineErrorCode identifying the error type
        message: Human-readable error description
        context: Dictionary of relevant error context
    """

    def __init__(
        self,
        code: PipelineErrorCode,
        message: str,
        context: Optional[Dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.context = context or {}
        super().__init__(f"[{code.value}] {message}")

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"code={self.code!r}, "
            f"message={self.message!r}, "
            f"context={self.context!r})"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for API responses and logs."""
        return {
            "error_code": self.code.value,
            "message": self.message,
            "context": self.context
        }


class SecurityError(NutritionPipelineError):
    """Raised when a food query contains disallowed instructions.

    Raised before any provider call is made.

    Context includes:
        - matched_phrase: The injection phrase that was detected
    """

    def __init__(self, matched_phrase: str):
        super().__init__(
            code=PipelineErrorCode.SECURITY_REJECTED,
            message=(
                "Your query contains instructions that cannot be processed. "
                "Please describe only the food you want analysed."
            ),
            context={"matched_phrase": matched_phrase}
        )
        self.matched_phrase = matched_phrase


class NoResponseError(NutritionPipelineError):
    """Raised when the provider returns an empty body."""

    def __init__(self, operation: str):
        super().__init__(
            code=PipelineErrorCode.NO_RESPONSE,
            message=f"The AI provider returned an empty response for {operation}",
            context={"operation": operation}
        )
        self.operation = operation


class MalformedResponseError(NutritionPipelineError):
    """Raised when the provider body is not a JSON object of the expected shape.

    Context includes:
        - operation: Which gateway operation was parsing
        - reason: Why parsing failed
        - excerpt: The first characters of the offending body
    """

    EXCERPT_LENGTH = 200

    def __init__(self, operation: str, reason: str, raw_text: Optional[str] = None):
        context: Dict[str, Any] = {"operation": operation, "reason": reason}
        if raw_text:
            context["excerpt"] = raw_text[:self.EXCERPT_LENGTH]

        super().__init__(
            code=PipelineErrorCode.MALFORMED_RESPONSE,
            message=f"Failed to parse AI response for {operation}: {reason}",
            context=context
        )
        self.operation = operation
        self.reason = reason


class ProviderCallError(NutritionPipelineError):
    """Raised when the call to the AI provider itself fails.

    Covers HTTP errors, timeouts, connection failures and blocked prompts.
    ``status_code`` is None for failures without an HTTP status.
    """

    def __init__(
        self,
        operation: str,
        message: str,
        status_code: Optional[int] = None,
        timeout: bool = False
    ):
        context: Dict[str, Any] = {"operation": operation}
        if status_code is not None:
            context["status_code"] = status_code
        if timeout:
            context["timeout"] = True

        if timeout:
            full_message = f"Provider timeout during {operation}: {message}"
        elif status_code is not None:
            full_message = f"Provider error during {operation}: HTTP {status_code} {message}"
        else:
            full_message = f"Provider failure during {operation}: {message}"

        super().__init__(
            code=PipelineErrorCode.PROVIDER_CALL_FAILED,
            message=full_message,
            context=context
        )
        self.operation = operation
        self.status_code = status_code
        self.timeout = timeout
