import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from .engine import InsufficientWordsError
from .globals import score_repository, session_manager, vocab_manager
from .models import (
    AnswerSubmission,
    LearningSet,
    QuizMode,
    SessionResponse,
    StartSessionRequest,
)
from .sessions import ActiveSession

logger = logging.getLogger("vocabquiz")

router = APIRouter()


# --- Dependencies ---
def get_active_session(session_id: str) -> ActiveSession:
    active = session_manager.get(session_id)
    if active is None:
        raise HTTPException(status_code=404, detail="session_not_found")
    return active


def build_response(
    session_id: str, active: ActiveSession, accepted: bool = True
) -> SessionResponse:
    return SessionResponse(
        session_id=session_id,
        created_at=active.created_at,
        accepted=accepted,
        snapshot=active.engine.snapshot(),
    )


# --- Routes ---
@router.get("/api/sets", response_model=List[LearningSet])
async def get_sets():
    sets = vocab_manager.get_sets()
    for learning_set in sets:
        learning_set.high_score_mc = score_repository.get_high_score(
            learning_set.id, QuizMode.MULTIPLE_CHOICE
        )
        learning_set.high_score_type = score_repository.get_high_score(
            learning_set.id, QuizMode.TYPE_IN
        )
    return sets


@router.post("/api/sessions", response_model=SessionResponse)
async def start_session(payload: StartSessionRequest):
    if not vocab_manager.has_set(payload.set_id):
        raise HTTPException(status_code=404, detail="set_not_found")
    try:
        session_id = session_manager.start(payload.set_id, payload.mode)
    except InsufficientWordsError as e:
        logger.info(f"Quiz not started [Set: {payload.set_id}]: {e}")
        raise HTTPException(status_code=422, detail=str(e))
    return build_response(session_id, session_manager.get(session_id))


@router.get("/api/sessions/{session_id}", response_model=SessionResponse)
async def get_session(session_id: str, active: ActiveSession = Depends(get_active_session)):
    return build_response(session_id, active)


@router.post("/api/sessions/{session_id}/answer", response_model=SessionResponse)
async def submit_answer(
    session_id: str,
    payload: AnswerSubmission,
    active: ActiveSession = Depends(get_active_session),
):
    engine = active.engine
    answer = payload.answer
    if engine.session.mode == QuizMode.MULTIPLE_CHOICE and payload.option_index is not None:
        options = engine.session.options
        if 0 <= payload.option_index < len(options):
            answer = options[payload.option_index]
        else:
            answer = None

    # Blank input, bad option index or a repeated submit leave the session untouched
    accepted = engine.submit_answer(answer) is not None
    return build_response(session_id, active, accepted=accepted)


@router.post("/api/sessions/{session_id}/advance", response_model=SessionResponse)
async def advance(session_id: str, active: ActiveSession = Depends(get_active_session)):
    accepted = active.engine.advance()
    return build_response(session_id, active, accepted=accepted)


@router.post("/api/sessions/{session_id}/restart", response_model=SessionResponse)
async def restart(session_id: str, active: ActiveSession = Depends(get_active_session)):
    active.engine.restart()
    return build_response(session_id, active)


@router.delete("/api/sessions/{session_id}")
async def discard_session(session_id: str):
    if not session_manager.discard(session_id):
        raise HTTPException(status_code=404, detail="session_not_found")
    return {"status": "success"}
