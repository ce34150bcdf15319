from pydantic import BaseModel
from typing import List, Literal, Optional


class TerminalLine(BaseModel):
    type: Literal["output", "input", "error", "info"]
    text: str


class TerminalStartRequest(BaseModel):
    code: str
    provider: Optional[Literal["wandbox", "piston"]] = None


class TerminalInput(BaseModel):
    line: str


class TerminalSessionResponse(BaseModel):
    id: str
    needs_input: bool
    waiting_for_input: bool
    finished: bool
    lines: List[TerminalLine]


class TerminalUpdateResponse(BaseModel):
    """Only the lines added by the last action"""
    id: str
    waiting_for_input: bool
    finished: bool
    lines: List[TerminalLine]
