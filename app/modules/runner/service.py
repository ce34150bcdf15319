import logging
from typing import Any, Optional

import httpx

from app.config import settings
from app.modules.runner.providers import get_provider
from app.modules.runner.schemas import RunResult

logger = logging.getLogger(__name__)

_http_client: Optional[httpx.AsyncClient] = None


class RunnerError(Exception):
    """Failure to obtain a result from the compile service; rendered as {"error": message}"""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


async def get_http_client() -> httpx.AsyncClient:
    """Get or create the shared HTTP client for the compile services."""
    global _http_client
    if _http_client is None:
        _http_client = httpx.AsyncClient(
            timeout=httpx.Timeout(settings.runner_timeout_seconds, connect=10.0),
        )
    return _http_client


async def close_http_client() -> None:
    global _http_client
    if _http_client is not None:
        await _http_client.aclose()
        _http_client = None


class RunnerService:
    def __init__(self, http_client: httpx.AsyncClient):
        self.http_client = http_client

    async def run(self, code: Any, stdin: Optional[str] = None, provider: Optional[str] = None) -> RunResult:
        """Forward code and stdin to the compile service and reshape its answer"""
        if not code or not isinstance(code, str):
            raise RunnerError("No code provided", status_code=400)
        try:
            backend = get_provider(provider or settings.runner_provider)
        except ValueError as e:
            raise RunnerError(str(e), status_code=400)

        try:
            response = await self.http_client.post(backend.url, json=backend.payload(code, stdin or ""))
        except httpx.RequestError as e:
            logger.error(f"Failed to reach {backend.name}: {e}")
            raise RunnerError(str(e) or f"Failed to reach {backend.name}")

        if response.is_error:
            logger.warning(f"{backend.name} answered {response.status_code}")
            raise RunnerError(f"Compiler service error: {response.text}")

        try:
            result = response.json()
        except ValueError as e:
            raise RunnerError(f"Compiler service error: invalid JSON ({e})")

        run_result = backend.reshape(result)
        logger.debug(f"{backend.name} run finished with exit code {run_result.exit_code}")
        return run_result
