"""Tests for failure classification."""
import json
from unittest.mock import Mock

import pytest

from nutricheck.data_layer.exceptions import (
    MalformedResponseError,
    NoResponseError,
    ProviderCallError,
    SecurityError,
)
from nutricheck.gateway.error_classifier import (
    USER_MESSAGES,
    ErrorCategory,
    ErrorClassifier,
)


@pytest.fixture
def classifier():
    return ErrorClassifier()


class TestStatusCodes:
    """Tests for classification by HTTP status."""

    @pytest.mark.parametrize("status,category", [
        (429, ErrorCategory.RATE_LIMITED),
        (401, ErrorCategory.UNAUTHORIZED),
        (403, ErrorCategory.UNAUTHORIZED),
        (500, ErrorCategory.PROVIDER_UNAVAILABLE),
        (503, ErrorCategory.PROVIDER_UNAVAILABLE),
        (404, ErrorCategory.UNKNOWN),
    ])
    def test_bare_status(self, classifier, status, category):
        """Test that an int status is classified on its own."""
        assert classifier.classify(status).category == category

    def test_provider_error_status(self, classifier):
        """Test that ProviderCallError.status_code is used."""
        error = ProviderCallError("generate_content", "Too Many Requests", status_code=429)
        assert classifier.classify(error).category == ErrorCategory.RATE_LIMITED

    def test_integer_code_attribute(self, classifier):
        """Test that an integer ``code`` attribute counts as a status."""
        error = Exception("boom")
        error.code = 503
        assert classifier.classify(error).category == ErrorCategory.PROVIDER_UNAVAILABLE

    def test_response_status_attribute(self, classifier):
        """Test that ``response.status_code`` is used when present."""
        error = Exception("request failed")
        error.response = Mock(status_code=401)
        assert classifier.classify(error).category == ErrorCategory.UNAUTHORIZED

    def test_status_wins_over_message(self, classifier):
        """Test that a 429 is rate limited even if the message mentions overload."""
        error = ProviderCallError("generate_content", "model overloaded", status_code=429)
        assert classifier.classify(error).category == ErrorCategory.RATE_LIMITED


class TestMessages:
    """Tests for classification by message keywords."""

    @pytest.mark.parametrize("message,category", [
        ("Resource has been exhausted (e.g. check quota).", ErrorCategory.RATE_LIMITED),
        ("Rate limit reached", ErrorCategory.RATE_LIMITED),
        ("API key not valid. Please pass a valid API key.", ErrorCategory.UNAUTHORIZED),
        ("Forbidden", ErrorCategory.UNAUTHORIZED),
        ("Candidate was blocked due to SAFETY", ErrorCategory.CONTENT_BLOCKED),
        ("The model is overloaded. Please try again later.", ErrorCategory.PROVIDER_UNAVAILABLE),
        ("Service Unavailable", ErrorCategory.PROVIDER_UNAVAILABLE),
        ("Failed to fetch", ErrorCategory.NETWORK_ERROR),
        ("You appear to be offline", ErrorCategory.NETWORK_ERROR),
        ("Unexpected token < in JSON at position 0", ErrorCategory.DATA_ERROR),
        ("something odd happened", ErrorCategory.UNKNOWN),
    ])
    def test_string_messages(self, classifier, message, category):
        assert classifier.classify(message).category == category

    def test_quota_beats_safety(self, classifier):
        """Test that the earlier rule wins when several keywords match."""
        assert classifier.classify("quota exceeded; safety check").category == ErrorCategory.RATE_LIMITED


class TestExceptionTypes:
    """Tests for classification by exception type."""

    def test_security_error_keeps_its_message(self, classifier):
        error = SecurityError("act as")
        result = classifier.classify(error)
        assert result.category == ErrorCategory.SECURITY
        assert result.message == error.message

    def test_timeout_flag(self, classifier):
        """Test that a provider timeout is ProviderUnavailable."""
        error = ProviderCallError("generate_content", "request exceeded 60s", timeout=True)
        assert classifier.classify(error).category == ErrorCategory.PROVIDER_UNAVAILABLE

    def test_builtin_timeout(self, classifier):
        assert classifier.classify(TimeoutError()).category == ErrorCategory.PROVIDER_UNAVAILABLE

    def test_connection_error(self, classifier):
        assert classifier.classify(ConnectionError()).category == ErrorCategory.NETWORK_ERROR

    def test_provider_network_failure(self, classifier):
        error = ProviderCallError("generate_content", "network connection failed")
        assert classifier.classify(error).category == ErrorCategory.NETWORK_ERROR

    def test_blocked_prompt(self, classifier):
        error = ProviderCallError("generate_content", "prompt blocked by safety filters (SAFETY)")
        assert classifier.classify(error).category == ErrorCategory.CONTENT_BLOCKED

    def test_json_decode_error(self, classifier):
        with pytest.raises(json.JSONDecodeError) as exc_info:
            json.loads("{not json")
        assert classifier.classify(exc_info.value).category == ErrorCategory.DATA_ERROR

    def test_malformed_response(self, classifier):
        error = MalformedResponseError("analysis", "expected a JSON object, got list", "[1]")
        assert classifier.classify(error).category == ErrorCategory.DATA_ERROR

    def test_no_response_is_unknown(self, classifier):
        assert classifier.classify(NoResponseError("analysis")).category == ErrorCategory.UNKNOWN

    def test_none_is_unknown(self, classifier):
        assert classifier.classify(None).category == ErrorCategory.UNKNOWN


class TestClassifiedError:
    """Tests for the classified result."""

    def test_messages_are_static(self, classifier):
        """Test that raw provider text never reaches the message."""
        error = ProviderCallError("generate_content", "upstream said: secret-token-xyz", status_code=500)
        result = classifier.classify(error)
        assert result.message == USER_MESSAGES[ErrorCategory.PROVIDER_UNAVAILABLE]
        assert "secret-token-xyz" not in result.message

    def test_to_dict(self, classifier):
        assert classifier.classify(429).to_dict() == {
            "category": "RATE_LIMITED",
            "message": USER_MESSAGES[ErrorCategory.RATE_LIMITED],
        }

    def test_every_category_has_a_message(self):
        assert set(USER_MESSAGES) == set(ErrorCategory)
