import httpx

from app.modules.runner.providers import PistonProvider, WandboxProvider
from tests.conftest import auth_headers

RUN_URL = "/api/v1/run-cpp"
PISTON_URL = "/api/v1/run-cpp/piston"


def test_compile_error_reports_failure(client, compile_service, alice):
    compile_service.body = {
        "status": "1",
        "compiler_error": "prog.cc:1:1: error: expected ';'",
        "program_output": "",
    }
    response = client.post(RUN_URL, json={"code": "int main() { return 0 }"}, headers=auth_headers(alice))
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is False
    assert body["compileError"] == "prog.cc:1:1: error: expected ';'"
    assert body["output"] == ""
    assert body["exitCode"] == 1


def test_successful_run(client, compile_service, alice):
    compile_service.body = {"status": "0", "program_output": "Hello, World!\n"}
    response = client.post(RUN_URL, json={"code": "int main() {}"}, headers=auth_headers(alice))
    body = response.json()
    assert body == {
        "output": "Hello, World!\n",
        "compileError": "",
        "runtimeError": "",
        "exitCode": 0,
        "success": True,
    }


def test_request_forwarded_to_wandbox(client, compile_service, alice):
    client.post(RUN_URL, json={"code": "int main() {}", "stdin": "5\n"}, headers=auth_headers(alice))
    sent = compile_service.requests[0]
    assert sent["url"] == "https://wandbox.org/api/compile.json"
    assert sent["json"]["code"] == "int main() {}"
    assert sent["json"]["stdin"] == "5\n"
    assert sent["json"]["compiler"] == "gcc-head"
    assert sent["json"]["options"] == "warning,gnu++2b"
    assert sent["json"]["compiler-option-raw"] == "-O2"


def test_missing_stdin_sent_as_empty(client, compile_service, alice):
    client.post(RUN_URL, json={"code": "int main() {}"}, headers=auth_headers(alice))
    assert compile_service.requests[0]["json"]["stdin"] == ""


def test_runtime_error_with_output(client, compile_service, alice):
    compile_service.body = {
        "status": "139",
        "program_output": "before crash\n",
        "program_error": "Segmentation fault",
    }
    body = client.post(RUN_URL, json={"code": "int main() {}"}, headers=auth_headers(alice)).json()
    assert body["success"] is False
    assert body["compileError"] == ""
    assert body["runtimeError"] == "Segmentation fault"
    assert body["exitCode"] == 139


def test_missing_code_is_rejected(client, compile_service, alice):
    response = client.post(RUN_URL, json={"stdin": "1"}, headers=auth_headers(alice))
    assert response.status_code == 400
    assert response.json() == {"error": "No code provided"}
    assert compile_service.requests == []


def test_non_string_code_is_rejected(client, alice):
    response = client.post(RUN_URL, json={"code": 42}, headers=auth_headers(alice))
    assert response.status_code == 400
    assert response.json() == {"error": "No code provided"}


def test_upstream_failure(client, compile_service, alice):
    compile_service.status_code = 502
    compile_service.body = "Bad Gateway"
    response = client.post(RUN_URL, json={"code": "int main() {}"}, headers=auth_headers(alice))
    assert response.status_code == 500
    assert response.json() == {"error": "Compiler service error: Bad Gateway"}


def test_network_failure(client, compile_service, alice):
    compile_service.error = httpx.ConnectError("connection refused")
    response = client.post(RUN_URL, json={"code": "int main() {}"}, headers=auth_headers(alice))
    assert response.status_code == 500
    assert response.json() == {"error": "connection refused"}


def test_piston_endpoint(client, compile_service, alice):
    compile_service.body = {
        "language": "c++",
        "version": "10.2.0",
        "compile": {"stdout": "", "stderr": "", "code": 0, "signal": None, "output": ""},
        "run": {"stdout": "42\n", "stderr": "", "code": 0, "signal": None, "output": "42\n"},
    }
    response = client.post(PISTON_URL, json={"code": "int main() {}", "stdin": "x"}, headers=auth_headers(alice))
    assert response.status_code == 200
    assert response.json()["output"] == "42\n"
    assert response.json()["success"] is True

    sent = compile_service.requests[0]
    assert sent["url"] == "https://emkc.org/api/v2/piston/execute"
    assert sent["json"]["language"] == "c++"
    assert sent["json"]["files"] == [{"name": "main.cpp", "content": "int main() {}"}]
    assert sent["json"]["stdin"] == "x"


def test_runner_requires_auth(client):
    response = client.post(RUN_URL, json={"code": "int main() {}"})
    assert response.status_code in (401, 403)


class TestWandboxReshape:
    provider = WandboxProvider()

    def test_no_output_placeholder(self):
        result = self.provider.reshape({"status": "0"})
        assert result.output == "(no output)"
        assert result.success is True

    def test_compiler_message_used_when_error_text_missing(self):
        result = self.provider.reshape({
            "status": "1",
            "compiler_error": "x",
            "compiler_message": "full message",
        })
        assert result.compile_error == "x"

    def test_warnings_with_output_are_not_compile_errors(self):
        result = self.provider.reshape({
            "status": "0",
            "compiler_error": "warning: unused variable",
            "program_output": "ok\n",
        })
        assert result.compile_error == ""
        assert result.success is True

    def test_unparseable_status(self):
        result = self.provider.reshape({"status": "Killed", "program_output": "partial"})
        assert result.exit_code == -1
        assert result.success is False


class TestPistonReshape:
    provider = PistonProvider()

    def test_compile_failure(self):
        result = self.provider.reshape({
            "compile": {"stdout": "", "stderr": "main.cpp:1: error", "code": 1},
            "run": {},
        })
        assert result.success is False
        assert result.compile_error == "main.cpp:1: error"
        assert result.exit_code == 1
        assert result.output == ""

    def test_runtime_error(self):
        result = self.provider.reshape({
            "compile": {"code": 0},
            "run": {"stdout": "", "stderr": "terminate called", "code": 134},
        })
        assert result.runtime_error == "terminate called"
        assert result.exit_code == 134
        assert result.output == "(no output)"
        assert result.success is False

    def test_killed_by_signal(self):
        result = self.provider.reshape({
            "run": {"stdout": "tick\n", "stderr": "", "code": None, "signal": "SIGKILL"},
        })
        assert result.exit_code == -1
        assert result.success is False

    def test_compile_killed_by_signal(self):
        result = self.provider.reshape({
            "compile": {"stdout": "", "stderr": "", "code": None, "signal": "SIGKILL"},
        })
        assert result.success is False
        assert result.exit_code == -1
        assert result.compile_error == "Compilation killed by SIGKILL"

    def test_compile_failure_without_stderr(self):
        result = self.provider.reshape({
            "compile": {"stdout": "", "stderr": "", "output": "", "code": 1, "signal": None},
        })
        assert result.success is False
        assert result.exit_code == 1
        assert result.compile_error == "Compilation failed with exit code 1"

    def test_missing_run_stage_is_not_success(self):
        result = self.provider.reshape({"compile": {"code": 0, "stderr": ""}})
        assert result.success is False
        assert result.exit_code == -1
