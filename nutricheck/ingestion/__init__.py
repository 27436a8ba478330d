"""Ingestion layer for validating user input before it reaches the provider."""

from nutricheck.ingestion.input_sanitizer import (
    INJECTION_PHRASES,
    InputSanitizer,
)

__all__ = [
    "INJECTION_PHRASES",
    "InputSanitizer",
]
