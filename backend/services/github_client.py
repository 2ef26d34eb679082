"""GitHub REST client returning repository snapshots for signal extraction."""

import base64
import binascii
import logging

import httpx

from models.schemas.repository import (
    CommitInfo,
    ReadmeInfo,
    RepositoryInfo,
    RepositorySnapshot,
)
from services.errors import SignalExtractionFailure
from services.pipeline.repo_signals import parse_repo_slug

logger = logging.getLogger(__name__)

MAX_COMMITS = 100


def _decode_readme(payload: dict) -> ReadmeInfo | None:
    content = payload.get("content") or ""
    try:
        text = base64.b64decode(content).decode("utf-8", errors="replace")
    except (binascii.Error, ValueError):
        return None
    return ReadmeInfo(content=text, size=int(payload.get("size") or len(text)))


def _parse_commit(item: dict) -> CommitInfo:
    commit = item.get("commit")
    if not isinstance(commit, dict):
        commit = {}
    author = commit.get("author")
    if not isinstance(author, dict):
        author = {}
    return CommitInfo(
        message=commit.get("message") or "",
        date=author.get("date") or "",
        author=author.get("name") or "",
    )


class GitHubClient:
    """Fetches repository info, up to 100 recent commits and the README."""

    def __init__(
        self,
        token: str = "",
        base_url: str = "https://api.github.com",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": "HackathonJudge/1.0",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.AsyncClient(
            base_url=base_url, headers=headers, timeout=timeout, transport=transport
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _get_json(self, path: str, **params) -> httpx.Response:
        return await self._client.get(path, params=params or None)

    async def fetch_repository(self, url: str) -> RepositorySnapshot:
        """Raises SignalExtractionFailure if the repository itself cannot be read."""
        slug = parse_repo_slug(url)
        if slug is None:
            raise SignalExtractionFailure(f"Could not parse GitHub URL: {url}")
        owner, repo = slug
        base = f"/repos/{owner}/{repo}"

        try:
            repo_response = await self._get_json(base)
        except httpx.RequestError as e:
            raise SignalExtractionFailure(f"GitHub request failed for {owner}/{repo}: {e}") from e

        if repo_response.status_code == 404:
            raise SignalExtractionFailure(f"Repository {owner}/{repo} not found or private")
        if repo_response.status_code in (403, 429):
            raise SignalExtractionFailure(f"GitHub rate limit hit for {owner}/{repo}")
        if repo_response.status_code != 200:
            raise SignalExtractionFailure(
                f"Repo fetch failed for {owner}/{repo}: {repo_response.status_code}"
            )

        try:
            repository = RepositoryInfo.model_validate(repo_response.json())
        except ValueError as e:
            raise SignalExtractionFailure(f"Malformed repository payload for {owner}/{repo}") from e

        commits = await self._fetch_commits(base)
        readme = await self._fetch_readme(base)

        logger.info("Fetched %s/%s: %d commits, readme=%s", owner, repo, len(commits), readme is not None)
        return RepositorySnapshot(url=url, repository=repository, commits=commits, readme=readme)

    async def _fetch_commits(self, base: str) -> list[CommitInfo]:
        try:
            response = await self._get_json(f"{base}/commits", per_page=MAX_COMMITS)
            if response.status_code != 200:
                logger.warning("Commit fetch failed for %s: %s", base, response.status_code)
                return []
            items = response.json()
        except (httpx.RequestError, ValueError) as e:
            logger.warning("Commit fetch failed for %s: %s", base, e)
            return []
        if not isinstance(items, list):
            return []
        try:
            return [_parse_commit(item) for item in items[:MAX_COMMITS] if isinstance(item, dict)]
        except ValueError as e:
            logger.warning("Malformed commit list for %s: %s", base, e)
            return []

    async def _fetch_readme(self, base: str) -> ReadmeInfo | None:
        try:
            response = await self._get_json(f"{base}/readme")
            if response.status_code != 200:
                return None
            return _decode_readme(response.json())
        except (httpx.RequestError, ValueError) as e:
            logger.info("README fetch failed for %s, continuing without it: %s", base, e)
            return None
