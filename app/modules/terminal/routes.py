from fastapi import APIRouter, Depends, HTTPException, status

from app.core.dependencies import get_current_user_id
from app.modules.runner.routes import get_runner_service
from app.modules.runner.service import RunnerService
from app.modules.terminal import registry
from app.modules.terminal.schemas import (
    TerminalStartRequest, TerminalInput, TerminalSessionResponse, TerminalUpdateResponse
)
from app.modules.terminal.session import TerminalSession, TerminalStateError
from typing import Dict

router = APIRouter(prefix="/terminal/sessions", tags=["terminal"])


def _get_owned_session(session_id: str, user_data: Dict) -> TerminalSession:
    session = registry.get_session(session_id, user_data["id"])
    if session is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Terminal session not found")
    return session


def _snapshot(session: TerminalSession) -> TerminalSessionResponse:
    return TerminalSessionResponse(
        id=session.id,
        needs_input=session.needs_input,
        waiting_for_input=session.waiting_for_input,
        finished=session.finished,
        lines=session.lines,
    )


def _update(session: TerminalSession, lines) -> TerminalUpdateResponse:
    return TerminalUpdateResponse(
        id=session.id,
        waiting_for_input=session.waiting_for_input,
        finished=session.finished,
        lines=lines,
    )


@router.post("", response_model=TerminalSessionResponse, status_code=201)
async def start_session(
    start_request: TerminalStartRequest,
    user_data: Dict = Depends(get_current_user_id),
    runner: RunnerService = Depends(get_runner_service)
):
    """Run the code once with empty stdin and keep the session open if it reads input"""
    if not start_request.code.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No code provided")
    session = TerminalSession(start_request.code, user_data["id"], start_request.provider)
    await session.start(runner.run)
    registry.register(session)
    return _snapshot(session)


@router.get("/{session_id}", response_model=TerminalSessionResponse)
async def get_session(
    session_id: str,
    user_data: Dict = Depends(get_current_user_id)
):
    """Full transcript of the session"""
    return _snapshot(_get_owned_session(session_id, user_data))


@router.post("/{session_id}/input", response_model=TerminalUpdateResponse)
async def submit_input(
    session_id: str,
    terminal_input: TerminalInput,
    user_data: Dict = Depends(get_current_user_id),
    runner: RunnerService = Depends(get_runner_service)
):
    """Feed one more stdin line; returns the echoed line and the new output only"""
    session = _get_owned_session(session_id, user_data)
    try:
        lines = await session.submit(terminal_input.line, runner.run)
    except TerminalStateError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return _update(session, lines)


@router.post("/{session_id}/finish", response_model=TerminalUpdateResponse)
async def finish_session(
    session_id: str,
    user_data: Dict = Depends(get_current_user_id)
):
    session = _get_owned_session(session_id, user_data)
    return _update(session, session.finish())


@router.delete("/{session_id}", status_code=204)
async def clear_session(
    session_id: str,
    user_data: Dict = Depends(get_current_user_id)
):
    """Clear the terminal and forget its collected input"""
    _get_owned_session(session_id, user_data)
    registry.unregister(session_id)
    return None
