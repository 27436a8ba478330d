"""Maps raw provider / transport failures to user-facing error categories.

Rules are checked in a fixed order and the first match wins, so an HTTP 429
is always RATE_LIMITED whatever its message says.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional, Tuple, Type, Union

from nutricheck.data_layer.exceptions import (
    MalformedResponseError,
    ProviderCallError,
    SecurityError,
)


class ErrorCategory(Enum):
    """User-facing error categories, in classification order."""

    SECURITY = "SECURITY"
    RATE_LIMITED = "RATE_LIMITED"
    UNAUTHORIZED = "UNAUTHORIZED"
    CONTENT_BLOCKED = "CONTENT_BLOCKED"
    PROVIDER_UNAVAILABLE = "PROVIDER_UNAVAILABLE"
    NETWORK_ERROR = "NETWORK_ERROR"
    DATA_ERROR = "DATA_ERROR"
    UNKNOWN = "UNKNOWN"


USER_MESSAGES: Dict[ErrorCategory, str] = {
    ErrorCategory.SECURITY: (
        "Your query contains instructions that cannot be processed. "
        "Please describe only the food you want analysed."
    ),
    ErrorCategory.RATE_LIMITED: (
        "The nutrition service is handling too many requests right now. "
        "Please wait a minute and try again."
    ),
    ErrorCategory.UNAUTHORIZED: (
        "The nutrition service could not verify its access credentials. "
        "Please check the API key configuration."
    ),
    ErrorCategory.CONTENT_BLOCKED: (
        "This request was declined by the AI safety filters. "
        "Please rephrase it as a plain food description."
    ),
    ErrorCategory.PROVIDER_UNAVAILABLE: (
        "The AI service is temporarily unavailable or took too long to respond. "
        "Please try again shortly."
    ),
    ErrorCategory.NETWORK_ERROR: (
        "We could not reach the AI service. Please check your internet connection and try again."
    ),
    ErrorCategory.DATA_ERROR: (
        "The AI returned data we could not read. Please try again, perhaps with a simpler food name."
    ),
    ErrorCategory.UNKNOWN: (
        "Something went wrong while analysing your food. Please try again."
    ),
}


@dataclass(frozen=True)
class ClassifiedError:
    """A failure reduced to its category and static message."""

    category: ErrorCategory
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {"category": self.category.value, "message": self.message}


@dataclass(frozen=True)
class ClassificationRule:
    """One row of the classification table.

    A rule matches on any of: an exact status, a status at or above
    ``min_status``, an exception type, or a keyword in the lowercased message.
    """

    category: ErrorCategory
    statuses: FrozenSet[int] = frozenset()
    min_status: Optional[int] = None
    keywords: Tuple[str, ...] = ()
    exception_types: Tuple[Type[BaseException], ...] = ()
    timeouts: bool = False

    def matches(self, status: Optional[int], message: str, failure: Any) -> bool:
        if status is not None:
            if status in self.statuses:
                return True
            if self.min_status is not None and status >= self.min_status:
                return True
        if self.exception_types and isinstance(failure, self.exception_types):
            return True
        if self.timeouts and _is_timeout(failure):
            return True
        return any(keyword in message for keyword in self.keywords)


DEFAULT_RULES: Tuple[ClassificationRule, ...] = (
    ClassificationRule(
        ErrorCategory.SECURITY,
        exception_types=(SecurityError,),
    ),
    ClassificationRule(
        ErrorCategory.RATE_LIMITED,
        statuses=frozenset({429}),
        keywords=("quota", "rate limit", "exhausted"),
    ),
    ClassificationRule(
        ErrorCategory.UNAUTHORIZED,
        statuses=frozenset({401, 403}),
        keywords=("api key", "unauthorized", "forbidden"),
    ),
    ClassificationRule(
        ErrorCategory.CONTENT_BLOCKED,
        keywords=("safety", "blocked", "candidate was blocked"),
    ),
    ClassificationRule(
        ErrorCategory.PROVIDER_UNAVAILABLE,
        min_status=500,
        keywords=("unavailable", "overloaded"),
        timeouts=True,
    ),
    ClassificationRule(
        ErrorCategory.NETWORK_ERROR,
        keywords=("fetch", "network", "offline"),
        exception_types=(ConnectionError,),
    ),
    ClassificationRule(
        ErrorCategory.DATA_ERROR,
        keywords=("json", "parse", "unexpected token"),
        exception_types=(json.JSONDecodeError, MalformedResponseError),
    ),
)


FailureInput = Union[BaseException, int, str, None]


class ErrorClassifier:
    """Classifies failures into ``ClassifiedError`` values.

    Usage::

        classifier = ErrorClassifier()
        classifier.classify(ProviderCallError("generate_content", "Too Many Requests", 429))
        # ClassifiedError(category=RATE_LIMITED, message="...")
        classifier.classify(503).category        # PROVIDER_UNAVAILABLE
        classifier.classify("Failed to fetch")   # NETWORK_ERROR
    """

    def __init__(self, rules: Tuple[ClassificationRule, ...] = DEFAULT_RULES):
        self.rules = rules

    def classify(self, failure: FailureInput) -> ClassifiedError:
        status = _extract_status(failure)
        message = _extract_message(failure).lower()

        for rule in self.rules:
            if rule.matches(status, message, failure):
                return self._result(rule.category, failure)
        return self._result(ErrorCategory.UNKNOWN, failure)

    @staticmethod
    def _result(category: ErrorCategory, failure: FailureInput) -> ClassifiedError:
        if category is ErrorCategory.SECURITY and isinstance(failure, SecurityError):
            return ClassifiedError(category, failure.message)
        return ClassifiedError(category, USER_MESSAGES[category])


def _extract_status(failure: FailureInput) -> Optional[int]:
    if isinstance(failure, bool):
        return None
    if isinstance(failure, int):
        return failure
    if not isinstance(failure, BaseException):
        return None

    for attr in ("status_code", "code"):
        value = getattr(failure, attr, None)
        if isinstance(value, int) and not isinstance(value, bool):
            return value

    response = getattr(failure, "response", None)
    value = getattr(response, "status_code", None)
    if isinstance(value, int):
        return value
    return None


def _extract_message(failure: FailureInput) -> str:
    if failure is None or isinstance(failure, int):
        return ""
    if isinstance(failure, str):
        return failure
    parts = [str(failure)]
    message = getattr(failure, "message", None)
    if isinstance(message, str) and message not in parts[0]:
        parts.append(message)
    return " ".join(parts)


def _is_timeout(failure: Any) -> bool:
    if isinstance(failure, TimeoutError):
        return True
    return isinstance(failure, ProviderCallError) and failure.timeout
