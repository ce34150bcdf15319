"""
Compile-and-run providers.

Each provider knows the third-party endpoint, how to build its request body
and how to reshape its answer into a RunResult. Nothing is compiled or
executed locally.
"""

from typing import Any, Dict

from app.config import settings
from app.modules.runner.schemas import RunResult

NO_OUTPUT = "(no output)"


def _exit_code(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return -1


class WandboxProvider:
    name = "wandbox"

    @property
    def url(self) -> str:
        return settings.wandbox_url

    def payload(self, code: str, stdin: str) -> Dict[str, Any]:
        return {
            "code": code,
            "stdin": stdin,
            "compiler": settings.wandbox_compiler,
            "options": settings.wandbox_options,
            "compiler-option-raw": settings.wandbox_compiler_option_raw,
        }

    def reshape(self, result: Dict[str, Any]) -> RunResult:
        output = result.get("program_output") or ""
        compile_error = result.get("compiler_error") or ""
        compiler_message = result.get("compiler_message") or ""
        program_error = result.get("program_error") or ""
        status = str(result.get("status") or "0")

        # A compile failure leaves no program output behind
        has_compile_error = bool(compile_error) and not output and status != "0"

        return RunResult(
            output=output or ("" if has_compile_error else NO_OUTPUT),
            compile_error=(compile_error or compiler_message) if has_compile_error else "",
            runtime_error=program_error,
            exit_code=_exit_code(status),
            success=not has_compile_error and status == "0",
        )


class PistonProvider:
    name = "piston"

    @property
    def url(self) -> str:
        return settings.piston_url

    def payload(self, code: str, stdin: str) -> Dict[str, Any]:
        return {
            "language": settings.piston_language,
            "version": settings.piston_version,
            "files": [{"name": "main.cpp", "content": code}],
            "stdin": stdin,
        }

    def reshape(self, result: Dict[str, Any]) -> RunResult:
        compile_stage = result.get("compile") or {}
        run_stage = result.get("run") or {}

        compile_code = compile_stage.get("code")
        compile_signal = compile_stage.get("signal")
        compile_failed = bool(compile_signal) or compile_code not in (None, 0)

        if compile_failed:
            compile_error = compile_stage.get("stderr") or compile_stage.get("output") or ""
            if not compile_error:
                compile_error = (
                    f"Compilation killed by {compile_signal}" if compile_signal
                    else f"Compilation failed with exit code {compile_code}"
                )
            return RunResult(
                output="",
                compile_error=compile_error,
                runtime_error="",
                exit_code=-1 if compile_code is None else _exit_code(compile_code),
                success=False,
            )

        if not run_stage:
            return RunResult(
                output=NO_OUTPUT,
                compile_error="",
                runtime_error=result.get("message") or "Compiler service returned no run result",
                exit_code=-1,
                success=False,
            )

        output = run_stage.get("stdout") or ""
        run_code = run_stage.get("code")
        if run_code is None:
            # Killed by a signal (timeout, memory) leaves no exit code
            exit_code = -1 if run_stage.get("signal") else 0
        else:
            exit_code = _exit_code(run_code)

        return RunResult(
            output=output or NO_OUTPUT,
            compile_error="",
            runtime_error=run_stage.get("stderr") or "",
            exit_code=exit_code,
            success=exit_code == 0,
        )


PROVIDERS = {
    WandboxProvider.name: WandboxProvider(),
    PistonProvider.name: PistonProvider(),
}


def get_provider(name: str):
    provider = PROVIDERS.get(name)
    if provider is None:
        raise ValueError(f"Unknown runner provider: {name}")
    return provider
