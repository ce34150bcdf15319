"""
Interactive terminal over a stateless compile-and-run API.

Every input line re-runs the whole program with all lines collected so far
as stdin. The new program output is compared with what the terminal already
shows and only the remainder is appended, so the transcript reads like a
live session.
"""

import logging
import os
import re
import time
import uuid
from typing import Awaitable, Callable, List, Optional

from app.modules.runner.providers import NO_OUTPUT
from app.modules.runner.schemas import RunResult
from app.modules.runner.service import RunnerError
from app.modules.terminal.schemas import TerminalLine

logger = logging.getLogger(__name__)

STDIN_PATTERN = re.compile(r"\b(cin\s*>>|scanf\s*\(|getline\s*\(|gets\s*\()")
SUCCESS_BANNER = "=== Code Execution Successful ==="

Runner = Callable[[str, str, Optional[str]], Awaitable[RunResult]]


class TerminalStateError(Exception):
    pass


def needs_input(code: str) -> bool:
    """True when the source reads standard input"""
    return bool(STDIN_PATTERN.search(code or ""))


def output_delta(previous: str, current: str) -> str:
    """Part of current not already covered by previous"""
    if current.startswith(previous):
        delta = current[len(previous):]
    else:
        # Output diverged (e.g. different branch taken); keep what still matches
        delta = current[len(os.path.commonprefix([previous, current])):]
    # The echoed input line already ended the prompt's line
    if previous and not previous.endswith("\n") and delta.startswith("\n"):
        delta = delta[1:]
    return delta


def split_output(text: str) -> List[str]:
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


class TerminalSession:
    def __init__(self, code: str, owner_id: str, provider: Optional[str] = None):
        self.id = str(uuid.uuid4())
        self.code = code
        self.owner_id = owner_id
        self.provider = provider
        self.needs_input = needs_input(code)
        self.inputs: List[str] = []
        self.lines: List[TerminalLine] = []
        self.displayed_output = ""
        self.waiting_for_input = False
        self.finished = False
        self.last_success = False
        self.last_active = time.monotonic()

    @property
    def stdin(self) -> str:
        return "\n".join(self.inputs)

    def touch(self) -> None:
        self.last_active = time.monotonic()

    async def start(self, runner: Runner) -> List[TerminalLine]:
        """First run with empty stdin; captures any prompt text"""
        self.inputs = []
        self.lines = []
        self.displayed_output = ""
        self.finished = False
        return await self._execute(runner)

    async def submit(self, line: str, runner: Runner) -> List[TerminalLine]:
        if not self.waiting_for_input:
            raise TerminalStateError("Terminal is not waiting for input")
        if line == "":
            raise TerminalStateError("Input line cannot be empty")
        # Closed until the re-run answers; overlapping submits get a conflict
        self.waiting_for_input = False
        self.inputs.append(line)
        echo = self._append("input", line)
        return [echo] + await self._execute(runner)

    def finish(self) -> List[TerminalLine]:
        """Stop reading input and close the transcript"""
        if self.finished:
            return []
        self.waiting_for_input = False
        self.finished = True
        added = []
        if not self.displayed_output:
            added.append(self._append("output", NO_OUTPUT))
        elif self.last_success:
            added.append(self._append("info", SUCCESS_BANNER))
        return added

    async def _execute(self, runner: Runner) -> List[TerminalLine]:
        self.touch()
        try:
            result = await runner(self.code, self.stdin, self.provider)
        except RunnerError as e:
            if self.finished:
                return []
            return self._fail(f"Error: {e.message}")

        if self.finished:
            # Closed while the run was in flight
            return []

        if result.compile_error:
            return self._fail(result.compile_error)

        output = "" if result.output == NO_OUTPUT else result.output
        if result.runtime_error and not output:
            return self._fail(result.runtime_error)

        delta = output_delta(self.displayed_output, output)
        self.displayed_output = output
        added = [self._append("output", text) for text in split_output(delta)]
        self.last_success = result.success

        if result.runtime_error:
            added.append(self._append("error", f"⚠️ {result.runtime_error}"))
            self.waiting_for_input = False
            self.finished = True
            return added

        self.waiting_for_input = self.needs_input
        if not self.waiting_for_input:
            added.extend(self.finish())
        return added

    def _fail(self, message: str) -> List[TerminalLine]:
        logger.debug(f"Terminal {self.id} stopped: {message[:80]}")
        self.waiting_for_input = False
        self.finished = True
        self.last_success = False
        return [self._append("error", message)]

    def _append(self, kind: str, text: str) -> TerminalLine:
        line = TerminalLine(type=kind, text=text)
        self.lines.append(line)
        return line
