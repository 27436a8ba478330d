"""Combining a primary analysis with separately fetched attachments."""
from typing import Optional

from nutricheck.data_layer.models import AnalysisResponse, PreventiveHealthData


def attach_preventive_health(response: AnalysisResponse, data: PreventiveHealthData) -> AnalysisResponse:
    """Set (or replace) the deep analysis on *response* in place."""
    response.preventive_health_data = data
    return response


def preserve_attachments(previous: Optional[AnalysisResponse], fresh: AnalysisResponse) -> AnalysisResponse:
    """Carry the deep analysis over from *previous* onto a re-fetched result.

    An attachment already present on *fresh* wins.
    """
    if previous is not None and fresh.preventive_health_data is None:
        fresh.preventive_health_data = previous.preventive_health_data
    return fresh
