"""Async GitHub REST client for the Actions and commits endpoints."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List

import httpx

from .exceptions import (
    GithubApiError,
    GithubConfigurationError,
    GithubRateLimitError,
    GithubRetryableError,
)

API_PREVIEW_HEADERS = {
    "Accept": "application/vnd.github+json",
}


class GitHubClient:
    def __init__(
        self,
        token: str | None,
        api_url: str = "https://api.github.com",
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 30,
    ) -> None:
        if not token:
            raise GithubConfigurationError("GitHub token is required to call the API")
        self._token = token
        self._api_url = api_url.rstrip("/")
        transport = transport or httpx.AsyncHTTPTransport(retries=3)
        self._rest = httpx.AsyncClient(
            base_url=self._api_url, timeout=timeout, transport=transport
        )

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self._token}",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        headers.update(API_PREVIEW_HEADERS)
        return headers

    def _handle_response(self, response: httpx.Response) -> httpx.Response:
        if response.status_code in (403, 429) and "rate limit" in response.text.lower():
            self._handle_rate_limit(response)
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise GithubApiError(str(exc), status_code=response.status_code) from exc
        return response

    def _handle_rate_limit(self, response: httpx.Response) -> None:
        reset_header = response.headers.get("X-RateLimit-Reset")
        retry_after_header = response.headers.get("Retry-After")
        wait_seconds = 60.0

        if retry_after_header:
            try:
                wait_seconds = float(retry_after_header)
            except ValueError:
                pass
        elif reset_header:
            try:
                reset_epoch = float(reset_header)
                now_epoch = datetime.now(timezone.utc).timestamp()
                wait_seconds = max(reset_epoch - now_epoch, 1.0)
            except ValueError:
                pass

        raise GithubRateLimitError("GitHub rate limit reached", retry_after=wait_seconds)

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._rest.request(
                method, path, headers=self._headers(), **kwargs
            )
        except httpx.RequestError as exc:
            raise GithubRetryableError(f"{method} {path} failed: {exc}") from exc
        return self._handle_response(response)

    async def _rest_request(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        response = await self._send(method, path, **kwargs)
        try:
            payload = response.json()
        except ValueError as exc:
            raise GithubApiError(
                f"{method} {path} returned a body that is not JSON",
                status_code=response.status_code,
            ) from exc
        if not isinstance(payload, dict):
            raise GithubApiError(
                f"{method} {path} returned {type(payload).__name__} instead of an object",
                status_code=response.status_code,
            )
        return payload

    async def get_workflow_run(self, full_name: str, run_id: int) -> Dict[str, Any]:
        return await self._rest_request("GET", f"/repos/{full_name}/actions/runs/{run_id}")

    async def list_workflow_runs(
        self, full_name: str, workflow_id: int, per_page: int = 100
    ) -> List[Dict[str, Any]]:
        data = await self._rest_request(
            "GET",
            f"/repos/{full_name}/actions/workflows/{workflow_id}/runs",
            params={"per_page": per_page},
        )
        runs = data.get("workflow_runs")
        return runs if isinstance(runs, list) else []

    async def get_commit(self, full_name: str, sha: str) -> Dict[str, Any]:
        return await self._rest_request("GET", f"/repos/{full_name}/commits/{sha}")

    async def cancel_workflow_run(self, full_name: str, run_id: int) -> int:
        response = await self._send(
            "POST", f"/repos/{full_name}/actions/runs/{run_id}/cancel"
        )
        return response.status_code

    async def close(self) -> None:
        await self._rest.aclose()

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

