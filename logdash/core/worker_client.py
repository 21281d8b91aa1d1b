import logging
import time
from typing import Optional

import httpx
from pydantic import ValidationError

from logdash.config.settings import get_settings
from logdash.models.worker import (
    ProbeResult,
    WorkerStatus,
    WorkerUpdateRequest,
    WorkerUpdateResponse,
)

logger = logging.getLogger(__name__)

STATUS_PATH = "/admin/worker-status"
AI_CHAT_PATH = "/ai-chat"


class WorkerAPIError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)


def _error_detail(response: httpx.Response, *fields: str) -> str:
    try:
        data = response.json()
    except ValueError:
        data = None

    if isinstance(data, dict):
        for field in fields:
            if data.get(field):
                return str(data[field])

    return f"HTTP {response.status_code}"


class WorkerClient:
    """Client for the edge worker's admin control API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.worker_base_url).rstrip("/")
        self.timeout = timeout or settings.worker_timeout_seconds
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url, timeout=self.timeout, transport=self.transport
        )

    async def get_status(self) -> WorkerStatus:
        try:
            async with self._client() as client:
                response = await client.get(
                    STATUS_PATH, headers={"Content-Type": "application/json"}
                )
        except httpx.HTTPError as e:
            logger.error(f"Error fetching worker status: {e}")
            raise WorkerAPIError(f"Failed to fetch worker status: {e}") from e

        if response.is_error:
            logger.error(f"Worker status request failed: {response.status_code}")
            raise WorkerAPIError(
                f"Failed to fetch worker status: {response.status_code} - {response.text}",
                response.status_code,
            )

        try:
            return WorkerStatus.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise WorkerAPIError(f"Malformed worker status response: {e}") from e

    async def update_status(
        self, auth_token: str, updates: WorkerUpdateRequest
    ) -> WorkerUpdateResponse:
        try:
            async with self._client() as client:
                response = await client.post(
                    STATUS_PATH,
                    headers={"Authorization": f"Bearer {auth_token}"},
                    json=updates.model_dump(mode="json", exclude_none=True),
                )
        except httpx.HTTPError as e:
            logger.error(f"Error updating worker status: {e}")
            raise WorkerAPIError(f"Failed to update worker status: {e}") from e

        if response.is_error:
            logger.error(f"Worker status update failed: {response.status_code}")
            raise WorkerAPIError(
                f"Failed to update worker status: {response.status_code} - {response.text}",
                response.status_code,
            )

        try:
            return WorkerUpdateResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise WorkerAPIError(f"Malformed worker update response: {e}") from e

    async def probe_health(self) -> ProbeResult:
        started = time.monotonic()
        try:
            async with self._client() as client:
                response = await client.get(STATUS_PATH)
        except httpx.HTTPError as e:
            return ProbeResult(
                ok=False, response_time_ms=_elapsed_ms(started), error=str(e) or repr(e)
            )

        elapsed = _elapsed_ms(started)
        if response.is_error:
            return ProbeResult(
                ok=False,
                response_time_ms=elapsed,
                error=f"HTTP {response.status_code}: {response.reason_phrase}",
            )
        return ProbeResult(ok=True, response_time_ms=elapsed)

    async def probe_search(self) -> ProbeResult:
        started = time.monotonic()
        try:
            async with self._client() as client:
                response = await client.get(
                    "/", params={"query": "test", "searchType": "web", "start": 1}
                )
        except httpx.HTTPError as e:
            return ProbeResult(
                ok=False, response_time_ms=_elapsed_ms(started), error=str(e) or repr(e)
            )

        elapsed = _elapsed_ms(started)
        if response.is_error:
            return ProbeResult(
                ok=False, response_time_ms=elapsed, error=_error_detail(response, "error")
            )
        return ProbeResult(ok=True, response_time_ms=elapsed)

    async def probe_ai_chat(self) -> ProbeResult:
        started = time.monotonic()
        try:
            async with self._client() as client:
                response = await client.post(
                    AI_CHAT_PATH, json={"query": "Hello", "maxSources": 3}
                )
        except httpx.HTTPError as e:
            return ProbeResult(
                ok=False, response_time_ms=_elapsed_ms(started), error=str(e) or repr(e)
            )

        elapsed = _elapsed_ms(started)
        if response.is_error:
            return ProbeResult(
                ok=False,
                response_time_ms=elapsed,
                error=_error_detail(response, "error", "message"),
            )
        return ProbeResult(ok=True, response_time_ms=elapsed)


_client = WorkerClient()


def get_worker_client() -> WorkerClient:
    return _client
