"""FastAPI server exposing analysis sessions over HTTP."""

import logging
import threading
import uuid
from collections import OrderedDict
from typing import Any, Dict, Optional

import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from nutricheck import config
from nutricheck.data_layer.models import AnalysisMode, InlineImage
from nutricheck.gateway.nutrition_gateway import NutritionGateway
from nutricheck.providers.gemini_sdk_provider import GeminiSDKProvider
from nutricheck.session.analysis_session import AnalysisSession, SessionContext

logger = logging.getLogger(__name__)

app = FastAPI(title="Nutrition Checker API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Local development
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class ProfileUpdate(BaseModel):
    age: Optional[int] = None
    gender: Optional[str] = None
    height_cm: Optional[float] = None
    weight_kg: Optional[float] = None
    activity_level: Optional[str] = None
    goal: Optional[str] = None
    mood: Optional[str] = None


class ImagePayload(BaseModel):
    data: str
    mime_type: str = "image/jpeg"


class AnalyzeRequest(BaseModel):
    food_query: str = ""
    mode: Optional[AnalysisMode] = None
    image: Optional[ImagePayload] = None
    include_history: bool = False


class SessionStore:
    """In-memory session registry holding at most *capacity* sessions.

    Creating a session past capacity evicts the oldest one.
    """

    def __init__(self, capacity: int = config.MAX_SESSIONS):
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._lock = threading.Lock()
        self._sessions: "OrderedDict[str, SessionContext]" = OrderedDict()

    def create(self) -> str:
        session_id = uuid.uuid4().hex
        with self._lock:
            self._sessions[session_id] = SessionContext()
            while len(self._sessions) > self.capacity:
                evicted, _ = self._sessions.popitem(last=False)
                logger.info("Evicted session %s", evicted)
        return session_id

    def get(self, session_id: str) -> SessionContext:
        with self._lock:
            context = self._sessions.get(session_id)
        if context is None:
            raise HTTPException(status_code=404, detail=f"Unknown session: {session_id}")
        return context

    def delete(self, session_id: str) -> None:
        with self._lock:
            context = self._sessions.pop(session_id, None)
        if context is None:
            raise HTTPException(status_code=404, detail=f"Unknown session: {session_id}")

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


store = SessionStore()
_session: Optional[AnalysisSession] = None


def get_analysis_session() -> AnalysisSession:
    """Build the controller on first use (tests override this dependency)."""
    global _session
    if _session is None:
        try:
            provider = GeminiSDKProvider.from_env()
        except ValueError as exc:
            raise HTTPException(status_code=503, detail=str(exc)) from exc
        _session = AnalysisSession(NutritionGateway(provider))
    return _session


@app.post("/api/sessions")
def create_session() -> Dict[str, Any]:
    session_id = store.create()
    return {"session_id": session_id, **store.get(session_id).snapshot()}


@app.get("/api/sessions/{session_id}")
def get_session(session_id: str) -> Dict[str, Any]:
    return store.get(session_id).snapshot()


@app.delete("/api/sessions/{session_id}")
def delete_session(session_id: str) -> Dict[str, Any]:
    store.delete(session_id)
    return {"session_id": session_id, "deleted": True}


@app.put("/api/sessions/{session_id}/profile")
def update_profile(session_id: str, update: ProfileUpdate) -> Dict[str, Any]:
    context = store.get(session_id)
    changes = update.model_dump(exclude_none=True)
    try:
        AnalysisSession.update_profile(context, **changes)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return context.snapshot()


@app.post("/api/sessions/{session_id}/analyze")
def analyze(
    session_id: str,
    request: AnalyzeRequest,
    session: AnalysisSession = Depends(get_analysis_session),
) -> Dict[str, Any]:
    context = store.get(session_id)
    image = None
    if request.image is not None:
        image = InlineImage(data=request.image.data, mime_type=request.image.mime_type)
    if not request.food_query.strip() and image is None:
        raise HTTPException(status_code=422, detail="Provide a food_query or an image")

    session.run_analysis(
        context,
        request.food_query,
        mode=request.mode,
        image=image,
        include_history=request.include_history,
    )
    return context.snapshot()


@app.post("/api/sessions/{session_id}/report")
def generate_report(
    session_id: str,
    session: AnalysisSession = Depends(get_analysis_session),
) -> Dict[str, Any]:
    context = store.get(session_id)
    _require_result(context)
    session.generate_report(context)
    return context.snapshot()


@app.post("/api/sessions/{session_id}/deep-analysis")
def deep_analysis(
    session_id: str,
    session: AnalysisSession = Depends(get_analysis_session),
) -> Dict[str, Any]:
    context = store.get(session_id)
    _require_result(context)
    session.run_deep_analysis(context)
    return context.snapshot()


@app.post("/api/sessions/{session_id}/audio-summary")
def audio_summary(
    session_id: str,
    session: AnalysisSession = Depends(get_analysis_session),
) -> Dict[str, Any]:
    context = store.get(session_id)
    _require_result(context)
    session.play_summary(context)
    return context.snapshot()


@app.delete("/api/sessions/{session_id}/data")
def clear_data(
    session_id: str,
    confirm: bool = Query(False),
) -> Dict[str, Any]:
    context = store.get(session_id)
    if not confirm:
        raise HTTPException(status_code=400, detail="Pass confirm=true to clear session data")
    AnalysisSession.clear_data(context)
    return context.snapshot()


@app.get("/api/quick-scan")
def quick_scan(
    food: str = Query(..., min_length=1),
    session: AnalysisSession = Depends(get_analysis_session),
) -> Dict[str, Any]:
    estimate = session.quick_scan(food)
    return {
        "food": food,
        "estimate": None if estimate is None else {
            "calories": estimate.calories,
            "carbs": estimate.carbs,
            "protein": estimate.protein,
            "fat": estimate.fat,
        },
    }


def _require_result(context: SessionContext) -> None:
    result = context.current_result
    if result is None or result.food_analysis is None:
        raise HTTPException(status_code=409, detail="Run an analysis first")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    uvicorn.run(app, host="0.0.0.0", port=8000)
