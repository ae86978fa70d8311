"""FastAPI routes for interview session control."""
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import ValidationError

from api.schemas import (
    AnswerReq,
    CandidateProfile,
    DraftReq,
    HistoryDetail,
    NavigateReq,
    SessionView,
    StartReq,
    TransitionResp,
    view_of,
)
from config.settings import settings
from interview.state import Message, Session
from interview.transcript import filter_by_question
from interview.transition import Transition
from services.interview_service import InterviewService, StartBlocked
from services.store import InterviewStore
from session_reports import generate_session_report_pdf
from storage.candidates import load_candidate, save_candidate
from storage.history import get_session, list_sessions

router = APIRouter(prefix="/api/interview-sessions")
history_router = APIRouter(prefix="/api/history")
candidate_router = APIRouter(prefix="/api/candidate")

_service = InterviewService()


def get_service() -> InterviewService:
    return _service


def _store(service: InterviewService, session_id: str) -> InterviewStore:
    try:
        return service.get(session_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="session not found") from exc


def _resp(store: InterviewStore, result: Transition) -> TransitionResp:
    if not result.applied:
        raise HTTPException(status_code=409, detail=result.reason or "not applied")
    return TransitionResp(applied=True, reason=result.reason, view=view_of(store.state))


@router.post("/start", response_model=SessionView, status_code=201)
def start(req: StartReq, service: InterviewService = Depends(get_service)) -> SessionView:
    try:
        store = service.start(
            job_description=req.job_description,
            resume_text=req.resume_text,
            resume_confirmed=req.resume_confirmed,
            candidate=req.candidate,
            config=req.config,
        )
    except StartBlocked as exc:
        raise HTTPException(status_code=422, detail=exc.blockers) from exc
    except ValidationError as exc:
        raise HTTPException(
            status_code=422,
            detail=exc.errors(include_url=False, include_context=False, include_input=False),
        ) from exc
    return view_of(store.state)


@router.get("/{session_id}", response_model=SessionView)
def view(session_id: str, service: InterviewService = Depends(get_service)) -> SessionView:
    store = _store(service, session_id)
    service.refresh(session_id)
    return view_of(store.state)


@router.post("/{session_id}/answer", response_model=TransitionResp)
def answer(session_id: str, req: AnswerReq, service: InterviewService = Depends(get_service)) -> TransitionResp:
    store = _store(service, session_id)
    return _resp(store, service.submit(session_id, req.answer))


@router.put("/{session_id}/draft", response_model=TransitionResp)
def draft(session_id: str, req: DraftReq, service: InterviewService = Depends(get_service)) -> TransitionResp:
    store = _store(service, session_id)
    return _resp(store, service.update_draft(session_id, req.text))


@router.post("/{session_id}/navigate", response_model=TransitionResp)
def navigate(session_id: str, req: NavigateReq, service: InterviewService = Depends(get_service)) -> TransitionResp:
    store = _store(service, session_id)
    return _resp(store, service.navigate(session_id, req.index))


@router.post("/{session_id}/pause", response_model=TransitionResp)
def pause(session_id: str, service: InterviewService = Depends(get_service)) -> TransitionResp:
    store = _store(service, session_id)
    return _resp(store, service.pause(session_id))


@router.post("/{session_id}/resume", response_model=TransitionResp)
def resume(session_id: str, service: InterviewService = Depends(get_service)) -> TransitionResp:
    store = _store(service, session_id)
    return _resp(store, service.resume(session_id))


@router.post("/{session_id}/end", response_model=TransitionResp)
def end(session_id: str, service: InterviewService = Depends(get_service)) -> TransitionResp:
    store = _store(service, session_id)
    return _resp(store, service.finish(session_id))


@router.get("/{session_id}/transcript", response_model=List[Message])
def messages(
    session_id: str,
    question: Optional[int] = None,
    service: InterviewService = Depends(get_service),
) -> List[Message]:
    store = _store(service, session_id)
    service.refresh(session_id)
    state = store.state
    if question is None:
        return state.messages
    return filter_by_question(state.messages, question)


@history_router.get("", response_model=List[Session])
def history(limit: Optional[int] = None) -> List[Session]:
    return list_sessions(limit or settings.HISTORY_LIMIT)


@history_router.get("/{session_id}", response_model=HistoryDetail)
def history_detail(session_id: str) -> HistoryDetail:
    record = get_session(session_id)
    if record is None:
        raise HTTPException(status_code=404, detail="session not found")
    return HistoryDetail(session=record.session, questions=record.questions)


@history_router.get("/{session_id}/report.pdf")
def history_report(session_id: str) -> Response:
    record = get_session(session_id)
    if record is None:
        raise HTTPException(status_code=404, detail="session not found")
    payload = generate_session_report_pdf(record)
    headers = {"Content-Disposition": f'attachment; filename="interview-{session_id}.pdf"'}
    return Response(content=payload, media_type="application/pdf", headers=headers)


@candidate_router.get("", response_model=CandidateProfile)
def candidate() -> CandidateProfile:
    profile, resume_text = load_candidate()
    if profile is None:
        raise HTTPException(status_code=404, detail="no candidate profile")
    return CandidateProfile(candidate=profile, resume_text=resume_text)


@candidate_router.put("", response_model=CandidateProfile)
def update_candidate(req: CandidateProfile) -> CandidateProfile:
    save_candidate(req.candidate, req.resume_text)
    return req


__all__ = ["candidate_router", "get_service", "history_router", "router"]
