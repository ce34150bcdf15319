from pydantic import BaseModel, Field
from typing import Any, Optional


class RunRequest(BaseModel):
    # Validated by the service so a missing or non-string code yields the 400 wire error
    code: Any = None
    stdin: Optional[str] = None


class RunResult(BaseModel):
    output: str = ""
    compile_error: str = Field("", alias="compileError")
    runtime_error: str = Field("", alias="runtimeError")
    exit_code: int = Field(0, alias="exitCode")
    success: bool = False

    class Config:
        populate_by_name = True


class RunErrorResponse(BaseModel):
    error: str
