import asyncio

import pytest

from app.modules.runner.schemas import RunResult
from app.modules.runner.service import RunnerError
from app.modules.terminal.session import (
    SUCCESS_BANNER, TerminalSession, TerminalStateError, needs_input, output_delta
)
from tests.conftest import auth_headers

GREETER = """
#include <iostream>
#include <string>
using namespace std;
int main() {
    string name; int age;
    cout << "Enter your name: ";
    cin >> name;
    cout << "Hello, " << name << "!\\nEnter your age: ";
    cin >> age;
    cout << "In ten years you will be " << age + 10 << ".\\n";
}
"""


def greeter_output(stdin: str) -> str:
    inputs = stdin.split("\n") if stdin else []
    out = "Enter your name: "
    if len(inputs) >= 1:
        out += f"Hello, {inputs[0]}!\nEnter your age: "
    if len(inputs) >= 2:
        out += f"In ten years you will be {int(inputs[1]) + 10}.\n"
    return out


async def greeter_runner(code, stdin, provider):
    return RunResult(output=greeter_output(stdin), exit_code=0, success=True)


def _texts(lines):
    return [(line.type, line.text) for line in lines]


@pytest.mark.parametrize("code", [
    "cin >> x;",
    "std::cin>>x;",
    "scanf(\"%d\", &x);",
    "getline(cin, line);",
    "gets (buf);",
])
def test_needs_input_detects_stdin_reads(code):
    assert needs_input(code)


@pytest.mark.parametrize("code", [
    "cout << \"hi\";",
    "printf(\"%d\", x);",
    "int cinema = 3;",
    "",
])
def test_needs_input_ignores_other_code(code):
    assert not needs_input(code)


def test_output_delta_appends_only_new_text():
    assert output_delta("Enter a: ", "Enter a: Enter b: ") == "Enter b: "
    assert output_delta("", "Hello\n") == "Hello\n"
    assert output_delta("same\n", "same\n") == ""


def test_output_delta_drops_newline_that_ends_prompt_line():
    assert output_delta("Name? ", "Name? \nHi Ada\n") == "Hi Ada\n"


def test_output_delta_when_output_diverges():
    assert output_delta("Value: 1\n", "Value: 2\n") == "2\n"


def test_session_resubmission_never_duplicates_lines():
    session = TerminalSession(GREETER, owner_id="u1")

    first = asyncio.run(session.start(greeter_runner))
    assert _texts(first) == [("output", "Enter your name: ")]
    assert session.waiting_for_input

    second = asyncio.run(session.submit("Ada", greeter_runner))
    assert _texts(second) == [
        ("input", "Ada"),
        ("output", "Hello, Ada!"),
        ("output", "Enter your age: "),
    ]

    third = asyncio.run(session.submit("30", greeter_runner))
    assert _texts(third) == [
        ("input", "30"),
        ("output", "In ten years you will be 40."),
    ]

    transcript = [line.text for line in session.lines if line.type == "output"]
    assert transcript == [
        "Enter your name: ", "Hello, Ada!", "Enter your age: ", "In ten years you will be 40.",
    ]
    assert session.stdin == "Ada\n30"

    closing = session.finish()
    assert _texts(closing) == [("info", SUCCESS_BANNER)]
    assert not session.waiting_for_input


def test_program_without_stdin_finishes_immediately():
    async def runner(code, stdin, provider):
        return RunResult(output="Hello, World!\n", exit_code=0, success=True)

    session = TerminalSession("int main() { cout << 1; }", owner_id="u1")
    lines = asyncio.run(session.start(runner))
    assert _texts(lines) == [("output", "Hello, World!"), ("info", SUCCESS_BANNER)]
    assert session.finished
    with pytest.raises(TerminalStateError):
        asyncio.run(session.submit("1", runner))


def test_no_output_placeholder_is_not_diffed():
    async def runner(code, stdin, provider):
        return RunResult(output="(no output)", exit_code=0, success=True)

    session = TerminalSession("int main() {}", owner_id="u1")
    lines = asyncio.run(session.start(runner))
    assert _texts(lines) == [("output", "(no output)")]


def test_compile_error_ends_session():
    async def runner(code, stdin, provider):
        return RunResult(output="", compile_error="error: expected ';'", exit_code=1, success=False)

    session = TerminalSession("int x; cin >> x", owner_id="u1")
    lines = asyncio.run(session.start(runner))
    assert _texts(lines) == [("error", "error: expected ';'")]
    assert session.finished
    assert not session.waiting_for_input


def test_runtime_error_after_output():
    async def runner(code, stdin, provider):
        return RunResult(output="partial\n", runtime_error="Segmentation fault", exit_code=139)

    session = TerminalSession("int main() {}", owner_id="u1")
    lines = asyncio.run(session.start(runner))
    assert _texts(lines) == [("output", "partial"), ("error", "⚠️ Segmentation fault")]
    assert session.finished


def test_runner_failure_is_shown_as_error():
    async def runner(code, stdin, provider):
        raise RunnerError("Compiler service error: down")

    session = TerminalSession("cin >> x;", owner_id="u1")
    lines = asyncio.run(session.start(runner))
    assert _texts(lines) == [("error", "Error: Compiler service error: down")]


def test_input_during_rerun_is_refused():
    async def slow_runner(code, stdin, provider):
        if stdin == "Ada":
            await asyncio.sleep(0.05)
        return await greeter_runner(code, stdin, provider)

    async def scenario():
        session = TerminalSession(GREETER, owner_id="u1")
        await session.start(slow_runner)
        first = asyncio.ensure_future(session.submit("Ada", slow_runner))
        await asyncio.sleep(0)
        assert not session.waiting_for_input
        with pytest.raises(TerminalStateError):
            await session.submit("30", slow_runner)
        await first
        await session.submit("30", slow_runner)
        return session

    session = asyncio.run(scenario())
    assert session.stdin == "Ada\n30"
    assert [line.text for line in session.lines if line.type == "output"] == [
        "Enter your name: ", "Hello, Ada!", "Enter your age: ", "In ten years you will be 40.",
    ]


def test_finish_during_rerun_keeps_session_closed():
    async def scenario():
        session = TerminalSession(GREETER, owner_id="u1")
        await session.start(greeter_runner)

        async def finishing_runner(code, stdin, provider):
            session.finish()
            return await greeter_runner(code, stdin, provider)

        await session.submit("Ada", finishing_runner)
        return session

    session = asyncio.run(scenario())
    assert session.finished
    assert not session.waiting_for_input
    assert [line.text for line in session.lines] == ["Enter your name: ", "Ada", SUCCESS_BANNER]


def test_empty_input_line_rejected():
    session = TerminalSession(GREETER, owner_id="u1")
    asyncio.run(session.start(greeter_runner))
    with pytest.raises(TerminalStateError):
        asyncio.run(session.submit("", greeter_runner))


def _greeter_wandbox(payload):
    return {"status": "0", "program_output": greeter_output(payload["stdin"])}


def test_terminal_endpoints_round_trip(client, compile_service, alice):
    compile_service.program = _greeter_wandbox
    headers = auth_headers(alice)

    started = client.post("/api/v1/terminal/sessions", json={"code": GREETER}, headers=headers)
    assert started.status_code == 201
    session = started.json()
    assert session["needs_input"] is True
    assert session["waiting_for_input"] is True
    assert session["lines"] == [{"type": "output", "text": "Enter your name: "}]

    url = f"/api/v1/terminal/sessions/{session['id']}"
    update = client.post(f"{url}/input", json={"line": "Ada"}, headers=headers).json()
    assert update["lines"] == [
        {"type": "input", "text": "Ada"},
        {"type": "output", "text": "Hello, Ada!"},
        {"type": "output", "text": "Enter your age: "},
    ]
    assert [r["json"]["stdin"] for r in compile_service.requests] == ["", "Ada"]

    client.post(f"{url}/input", json={"line": "30"}, headers=headers)
    assert compile_service.requests[-1]["json"]["stdin"] == "Ada\n30"

    finished = client.post(f"{url}/finish", json={}, headers=headers).json()
    assert finished["finished"] is True
    assert finished["lines"] == [{"type": "info", "text": SUCCESS_BANNER}]

    transcript = client.get(url, headers=headers).json()["lines"]
    assert [line["text"] for line in transcript].count("Enter your name: ") == 1

    assert client.delete(url, headers=headers).status_code == 204
    assert client.get(url, headers=headers).status_code == 404


def test_terminal_session_private_to_owner(client, compile_service, alice, bob):
    compile_service.program = _greeter_wandbox
    session_id = client.post(
        "/api/v1/terminal/sessions", json={"code": GREETER}, headers=auth_headers(alice)
    ).json()["id"]

    response = client.post(
        f"/api/v1/terminal/sessions/{session_id}/input", json={"line": "Eve"}, headers=auth_headers(bob)
    )
    assert response.status_code == 404


def test_input_after_finish_conflicts(client, compile_service, alice):
    compile_service.body = {"status": "0", "program_output": "done\n"}
    headers = auth_headers(alice)
    session = client.post(
        "/api/v1/terminal/sessions", json={"code": "int main() {}"}, headers=headers
    ).json()
    assert session["finished"] is True

    response = client.post(
        f"/api/v1/terminal/sessions/{session['id']}/input", json={"line": "1"}, headers=headers
    )
    assert response.status_code == 409


def test_piston_provider_selected(client, compile_service, alice):
    compile_service.body = {"run": {"stdout": "hi\n", "stderr": "", "code": 0}}
    response = client.post(
        "/api/v1/terminal/sessions",
        json={"code": "int main() {}", "provider": "piston"},
        headers=auth_headers(alice),
    )
    assert response.status_code == 201
    assert compile_service.requests[0]["url"].endswith("/piston/execute")
