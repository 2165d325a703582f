"""GitHub Data Service.

Fetches a public profile and its first page of repositories from the
GitHub REST API. Responses are cached in-process by URL (see
``ResponseCache``). There are no retries: a failed request fails the
search.

A search made for a client scope (a session) is tagged with a generation
number; if a newer search for the same scope starts before it completes,
it is discarded rather than returned. Searches without a scope are never
discarded.
"""

from __future__ import annotations

import asyncio
from typing import Any

import httpx
from pydantic import ValidationError as PydanticValidationError

from app.config import Settings, get_settings
from app.exceptions import (
    GitHubAPIError,
    GitHubStatusError,
    GitHubUserNotFoundError,
    StaleSearchError,
    ValidationError,
)
from app.logging_config import get_logger
from app.metrics import GITHUB_API_CALLS, GITHUB_API_DURATION, SEARCHES_TOTAL
from services.models import GitHubUser, Repository, SearchResult
from services.response_cache import ResponseCache

logger = get_logger(__name__)


class SearchGeneration:
    """Per-scope monotonically increasing search counter."""

    def __init__(self) -> None:
        self._current: dict[str, int] = {}

    def begin(self, scope: str) -> int:
        generation = self._current.get(scope, 0) + 1
        self._current[scope] = generation
        return generation

    def current(self, scope: str) -> int:
        return self._current.get(scope, 0)

    def is_current(self, generation: int, scope: str) -> bool:
        return self._current.get(scope, 0) == generation


class GitHubService:
    """Service for fetching and caching GitHub profile data.

    Cache strategy:
    - Key: full request URL including query string
    - TTL: ``cache_ttl_seconds`` (5 min default)
    - Size: ``cache_max_entries``, least recently used evicted first
    """

    def __init__(
        self,
        cache: ResponseCache | None = None,
        client: httpx.AsyncClient | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.cache = cache or ResponseCache(
            ttl_seconds=self.settings.cache_ttl_seconds,
            max_entries=self.settings.cache_max_entries,
        )
        self.generations = SearchGeneration()
        self._client = client
        self._headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self.settings.github_token:
            self._headers["Authorization"] = (
                f"Bearer {self.settings.github_token.get_secret_value()}"
            )

    async def search(self, login: str, scope: str | None = None) -> SearchResult:
        """Fetch profile and repositories concurrently.

        The result carries generation 0 when ``scope`` is None.

        Raises:
            GitHubUserNotFoundError: profile request returned a non-success status
            GitHubAPIError: network, decode or repository request failure
            StaleSearchError: a newer search for ``scope`` started meanwhile
        """
        login = login.strip()
        if not login:
            raise ValidationError("Username must not be empty")

        generation = self.generations.begin(scope) if scope is not None else 0
        user, repos = await asyncio.gather(
            self.fetch_user(login),
            self.fetch_repos(login),
            return_exceptions=True,
        )

        # The profile outcome decides the error reported when both fail
        for outcome in (user, repos):
            if isinstance(outcome, GitHubUserNotFoundError):
                SEARCHES_TOTAL.labels(outcome="not_found").inc()
                raise outcome
            if isinstance(outcome, BaseException):
                SEARCHES_TOTAL.labels(outcome="error").inc()
                raise outcome

        if scope is not None and not self.generations.is_current(generation, scope):
            SEARCHES_TOTAL.labels(outcome="stale").inc()
            logger.info(
                "search_discarded_stale",
                generation=generation,
                current_generation=self.generations.current(scope),
            )
            raise StaleSearchError(generation, self.generations.current(scope))

        SEARCHES_TOTAL.labels(outcome="ok").inc()
        logger.info("search_completed", login=user.login, repo_count=len(repos))
        return SearchResult(user=user, repos=repos, generation=generation)

    async def fetch_user(self, login: str) -> GitHubUser:
        url = f"{self.settings.github_api_base}/users/{login}"
        try:
            data = await self._get_json(url, endpoint="user")
        except GitHubStatusError as exc:
            raise GitHubUserNotFoundError() from exc

        try:
            return GitHubUser.model_validate(data)
        except PydanticValidationError as exc:
            raise GitHubAPIError("Unexpected user payload from GitHub") from exc

    async def fetch_repos(self, login: str) -> list[Repository]:
        """First page of repositories, most recently updated first."""
        url = f"{self.settings.github_api_base}/users/{login}/repos"
        params = {"sort": "updated", "per_page": self.settings.github_per_page}
        data = await self._get_json(url, endpoint="repos", params=params)
        if not isinstance(data, list):
            raise GitHubAPIError("Unexpected repository payload from GitHub")

        try:
            return [Repository.model_validate(r) for r in data]
        except PydanticValidationError as exc:
            raise GitHubAPIError("Unexpected repository payload from GitHub") from exc

    async def _get_json(
        self,
        url: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """GET ``url`` through the cache. Non-2xx raises ``GitHubStatusError``."""
        cache_key = str(httpx.URL(url, params=params))
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.debug("github_cache_hit", cache_key=cache_key)
            return cached

        with GITHUB_API_DURATION.labels(endpoint=endpoint).time():
            try:
                response = await self._send(url, params)
            except httpx.RequestError as exc:
                GITHUB_API_CALLS.labels(endpoint=endpoint, status="error").inc()
                logger.warning("github_request_failed", endpoint=endpoint, error=str(exc))
                raise GitHubAPIError(str(exc)) from exc

        GITHUB_API_CALLS.labels(endpoint=endpoint, status=str(response.status_code)).inc()
        if not response.is_success:
            logger.warning(
                "github_unsuccessful_status",
                endpoint=endpoint,
                status=response.status_code,
            )
            raise GitHubStatusError(response.status_code)

        try:
            data = response.json()
        except ValueError as exc:
            raise GitHubAPIError(f"Invalid JSON from GitHub: {exc}") from exc

        self.cache.set(cache_key, data)
        return data

    async def _send(self, url: str, params: dict[str, Any] | None) -> httpx.Response:
        if self._client is not None:
            return await self._client.get(url, headers=self._headers, params=params)
        async with httpx.AsyncClient(timeout=self.settings.github_timeout) as client:
            return await client.get(url, headers=self._headers, params=params)
