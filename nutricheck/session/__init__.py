"""Session state, history and result merging."""

from nutricheck.session.analysis_session import (
    AnalysisSession,
    Channel,
    RequestState,
    RequestToken,
    SessionContext,
)
from nutricheck.session.history import AnalysisHistory
from nutricheck.session.result_merge import attach_preventive_health, preserve_attachments

__all__ = [
    "AnalysisHistory",
    "AnalysisSession",
    "Channel",
    "RequestState",
    "RequestToken",
    "SessionContext",
    "attach_preventive_health",
    "preserve_attachments",
]
