from fastapi import APIRouter, Depends, Request
import httpx

from app.config import settings
from app.core.dependencies import get_current_user_id
from app.core.rate_limit import limiter
from app.modules.runner.providers import PistonProvider, WandboxProvider
from app.modules.runner.schemas import RunRequest, RunResult
from app.modules.runner.service import RunnerService, get_http_client
from typing import Dict

router = APIRouter(prefix="/run-cpp", tags=["runner"])


def get_runner_service(http_client: httpx.AsyncClient = Depends(get_http_client)) -> RunnerService:
    return RunnerService(http_client)


@router.post("", response_model=RunResult)
@limiter.limit(settings.run_rate_limit)
async def run_cpp(
    request: Request,
    run_request: RunRequest,
    user_data: Dict = Depends(get_current_user_id),
    service: RunnerService = Depends(get_runner_service)
):
    """Compile and run C++ through Wandbox"""
    return await service.run(run_request.code, run_request.stdin, provider=WandboxProvider.name)


@router.post("/piston", response_model=RunResult)
@limiter.limit(settings.run_rate_limit)
async def run_cpp_piston(
    request: Request,
    run_request: RunRequest,
    user_data: Dict = Depends(get_current_user_id),
    service: RunnerService = Depends(get_runner_service)
):
    """Compile and run C++ through Piston"""
    return await service.run(run_request.code, run_request.stdin, provider=PistonProvider.name)
