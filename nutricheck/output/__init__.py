"""Output formatting for analysis results."""

from nutricheck.output.audio import wrap_pcm_as_wav
from nutricheck.output.formatters import (
    INCOMPLETE_RESULT_MESSAGE,
    ResultStatus,
    build_audio_summary_text,
    describe_result_status,
    format_analysis_json,
    format_analysis_json_string,
    format_analysis_markdown,
    format_preventive_health_markdown,
    format_quick_scan,
)

__all__ = [
    "INCOMPLETE_RESULT_MESSAGE",
    "ResultStatus",
    "build_audio_summary_text",
    "describe_result_status",
    "format_analysis_json",
    "format_analysis_json_string",
    "format_analysis_markdown",
    "format_preventive_health_markdown",
    "format_quick_scan",
    "wrap_pcm_as_wav",
]
