"""Session state and the controller that drives the analysis flow.

ORDERING POLICY:
    Every operation takes a RequestToken(channel, epoch, generation) before
    calling the gateway and applies its result only if the token is still
    current when the call returns.

    - epoch       bumps each time the same channel starts a new request,
                  so only the latest request per channel lands.
    - generation  bumps on a new primary analysis or a data clear, so a
                  late report / deep analysis / audio result for the
                  previous food is dropped.

    Tokens are issued and results applied under the context lock; gateway
    calls themselves run outside it. A token also carries the inputs it was
    issued against (profile, query, mode, image, displayed result), so a
    request never mixes the state of two generations.
"""

import logging
import threading
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable, Dict, Optional

from nutricheck.data_layer.exceptions import MalformedResponseError
from nutricheck.data_layer.models import (
    AnalysisMode,
    AnalysisResponse,
    DEFAULT_PROFILE,
    InlineImage,
    QuickScanEstimate,
    UserProfile,
)
from nutricheck.gateway.error_classifier import ClassifiedError, ErrorClassifier
from nutricheck.gateway.nutrition_gateway import NutritionGateway
from nutricheck.output.formatters import build_audio_summary_text
from nutricheck.session.history import AnalysisHistory
from nutricheck.session.result_merge import attach_preventive_health, preserve_attachments

logger = logging.getLogger(__name__)


class Channel(Enum):
    ANALYSIS = "analysis"
    REPORT = "report"
    DEEP_ANALYSIS = "deep_analysis"
    AUDIO = "audio"


class RequestState(Enum):
    IDLE = "idle"
    SENDING = "sending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class RequestToken:
    channel: Channel
    epoch: int
    generation: int
    profile: Optional[UserProfile] = field(default=None, compare=False, repr=False)
    query: str = field(default="", compare=False, repr=False)
    mode: AnalysisMode = field(default=AnalysisMode.SINGLE_FOOD, compare=False, repr=False)
    image: Optional[InlineImage] = field(default=None, compare=False, repr=False)
    result: Optional[AnalysisResponse] = field(default=None, compare=False, repr=False)


@dataclass
class SessionContext:
    """All state of one user session.

    Passed to and returned from every ``AnalysisSession`` operation.
    ``error`` holds a failed primary analysis; ``notification`` holds a
    transient message from a failed report, deep analysis or audio call
    and leaves the displayed result untouched.
    """

    profile: UserProfile = DEFAULT_PROFILE
    query: str = ""
    mode: AnalysisMode = AnalysisMode.SINGLE_FOOD
    image: Optional[InlineImage] = None
    current_result: Optional[AnalysisResponse] = None
    error: Optional[ClassifiedError] = None
    notification: Optional[str] = None
    audio_summary: Optional[str] = None
    history: AnalysisHistory = field(default_factory=AnalysisHistory)
    request_states: Dict[Channel, RequestState] = field(
        default_factory=lambda: {channel: RequestState.IDLE for channel in Channel}
    )
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)
    _epochs: Dict[Channel, int] = field(
        default_factory=lambda: {channel: 0 for channel in Channel}, repr=False
    )
    _generation: int = field(default=0, repr=False)

    def begin(
        self,
        channel: Channel,
        new_generation: bool = False,
        query: Optional[str] = None,
        mode: Optional[AnalysisMode] = None,
        image: Optional[InlineImage] = None,
        ready: Optional[Callable[["SessionContext"], bool]] = None,
    ) -> Optional[RequestToken]:
        """Issue a token for a request about to be sent on *channel*.

        With ``new_generation`` the displayed result and everything derived
        from it are cleared, invalidating outstanding tokens on all channels,
        and the given query/mode/image become the session's inputs.

        Returns:
            None, with no state touched, when *ready* rejects the context
        """
        with self._lock:
            if ready is not None and not ready(self):
                return None
            if new_generation:
                self._generation += 1
                self.current_result = None
                self.error = None
                self.audio_summary = None
                if query is not None:
                    self.query = query
                if mode is not None:
                    self.mode = mode
                self.image = image
            self.notification = None
            self._epochs[channel] += 1
            self.request_states[channel] = RequestState.SENDING
            return RequestToken(
                channel,
                self._epochs[channel],
                self._generation,
                profile=self.profile,
                query=self.query,
                mode=self.mode,
                image=self.image,
                result=self.current_result,
            )

    def is_current(self, token: RequestToken) -> bool:
        with self._lock:
            return (
                self._epochs[token.channel] == token.epoch
                and self._generation == token.generation
            )

    def finish(self, token: RequestToken, state: RequestState, apply: Callable[[], None]) -> bool:
        """Run *apply* and record *state* if *token* is still current.

        Returns:
            False when the result was stale and discarded
        """
        with self._lock:
            if not self.is_current(token):
                logger.debug("Discarding stale %s result", token.channel.value)
                return False
            apply()
            self.request_states[token.channel] = state
            return True

    def reset(self) -> None:
        """Clear query, result, messages, audio and history. The profile stays."""
        with self._lock:
            self._generation += 1
            for channel in Channel:
                self._epochs[channel] += 1
                self.request_states[channel] = RequestState.IDLE
            self.query = ""
            self.image = None
            self.current_result = None
            self.error = None
            self.notification = None
            self.audio_summary = None
            self.history.clear()

    def snapshot(self) -> Dict[str, Any]:
        """JSON-ready view of the session."""
        with self._lock:
            return {
                "profile": self.profile.to_dict(),
                "query": self.query,
                "mode": self.mode.value,
                "result": self.current_result.to_dict() if self.current_result else None,
                "error": self.error.to_dict() if self.error else None,
                "notification": self.notification,
                "audio_summary": self.audio_summary,
                "history": [
                    entry.food_analysis.food_name
                    for entry in self.history
                    if entry.food_analysis is not None
                ],
                "request_states": {
                    channel.value: state.value for channel, state in self.request_states.items()
                },
            }


class AnalysisSession:
    """Drives gateway calls against a SessionContext.

    Failures are classified and stored on the context, never raised, except
    for invalid profile updates which raise ValueError.
    """

    def __init__(self, gateway: NutritionGateway, classifier: Optional[ErrorClassifier] = None):
        self.gateway = gateway
        self.classifier = classifier or ErrorClassifier()

    def run_analysis(
        self,
        context: SessionContext,
        query: str,
        mode: Optional[AnalysisMode] = None,
        image: Optional[InlineImage] = None,
        include_history: bool = False,
    ) -> SessionContext:
        """Run a primary analysis; a blank query with no image does nothing."""
        query = (query or "").strip()
        if not query and image is None:
            return context

        if mode is None and image is not None and not query:
            mode = AnalysisMode.IMAGE_ANALYSIS
        history = context.history.items() if include_history else None
        token = context.begin(
            Channel.ANALYSIS, new_generation=True, query=query, mode=mode, image=image
        )

        try:
            response = self.gateway.analyze(
                token.query, token.profile, mode=token.mode, download_report=False,
                history=history, image=token.image,
            )
        except Exception as e:
            classified = self._classify(e, "analysis")

            def apply_failure():
                context.error = classified

            context.finish(token, RequestState.FAILED, apply_failure)
            return context

        def apply_success():
            context.current_result = response
            if response.is_successful:
                context.history.add(response)

        context.finish(token, RequestState.SUCCEEDED, apply_success)
        return context

    def generate_report(self, context: SessionContext) -> SessionContext:
        """Re-run the current query with a downloadable report.

        A deep analysis already attached to the displayed result is kept.
        """
        token = context.begin(
            Channel.REPORT,
            ready=lambda ctx: ctx.current_result is not None and bool(ctx.query or ctx.image),
        )
        if token is None:
            return context

        try:
            response = self.gateway.analyze(
                token.query, token.profile, mode=token.mode,
                download_report=True, image=token.image,
            )
        except Exception as e:
            self._notify(context, token, self._classify(e, "report"))
            return context

        if not response.is_successful or response.downloadable_report is None:
            failure = MalformedResponseError("report", "response carries no downloadable_report")
            self._notify(context, token, self._classify(failure, "report"))
            return context

        def apply_success():
            context.current_result = preserve_attachments(context.current_result, response)

        context.finish(token, RequestState.SUCCEEDED, apply_success)
        return context

    def run_deep_analysis(self, context: SessionContext) -> SessionContext:
        """Fetch the preventive health report and attach it to the current result."""
        token = context.begin(Channel.DEEP_ANALYSIS, ready=_has_food_analysis)
        if token is None:
            return context

        try:
            data = self.gateway.analyze_deep(token.result.food_analysis, token.profile)
        except Exception as e:
            self._notify(context, token, self._classify(e, "deep analysis"))
            return context

        def apply_success():
            attach_preventive_health(context.current_result, data)

        context.finish(token, RequestState.SUCCEEDED, apply_success)
        return context

    def play_summary(self, context: SessionContext) -> SessionContext:
        """Synthesize the spoken summary once per result and cache it."""
        token = context.begin(
            Channel.AUDIO,
            ready=lambda ctx: not ctx.audio_summary and _has_food_analysis(ctx),
        )
        if token is None:
            return context

        try:
            audio = self.gateway.synthesize_audio(build_audio_summary_text(token.result.food_analysis))
        except Exception as e:
            self._notify(context, token, self._classify(e, "audio summary"))
            return context

        def apply_success():
            context.audio_summary = audio

        context.finish(token, RequestState.SUCCEEDED, apply_success)
        return context

    def quick_scan(self, food_name: str) -> Optional[QuickScanEstimate]:
        return self.gateway.quick_scan(food_name)

    @staticmethod
    def clear_data(context: SessionContext) -> SessionContext:
        context.reset()
        return context

    @staticmethod
    def update_profile(context: SessionContext, **changes: Any) -> SessionContext:
        """Replace the profile with a copy carrying *changes*.

        Raises:
            ValueError: If the changed profile is invalid (context unchanged)
            TypeError: If a change names an unknown field
        """
        context.profile = replace(context.profile, **changes)
        return context

    def _classify(self, failure: Exception, operation: str) -> ClassifiedError:
        classified = self.classifier.classify(failure)
        logger.warning("%s failed (%s): %r", operation, classified.category.value, failure)
        return classified

    @staticmethod
    def _notify(context: SessionContext, token: RequestToken, classified: ClassifiedError) -> None:
        def apply_failure():
            context.notification = classified.message

        context.finish(token, RequestState.FAILED, apply_failure)


def _has_food_analysis(context: SessionContext) -> bool:
    return context.current_result is not None and context.current_result.food_analysis is not None
