"""Shared dependencies for API routes. Overridden in tests."""

from config import settings
from services.gemini_client import get_client
from services.github_client import GitHubClient
from services.pipeline.judge import ProjectJudge
from services.pipeline.score_normalizer import Jitter
from services.project_search import ProjectSearchClient

_github_client: GitHubClient | None = None
_search_client: ProjectSearchClient | None = None


def get_github_client() -> GitHubClient:
    global _github_client
    if _github_client is None:
        _github_client = GitHubClient(
            token=settings.github_token,
            base_url=settings.github_api_url,
            timeout=settings.http_timeout_seconds,
        )
    return _github_client


def get_search_client() -> ProjectSearchClient:
    global _search_client
    if _search_client is None:
        _search_client = ProjectSearchClient(
            search_url=settings.search_api_url,
            hackathon_slug=settings.hackathon_slug,
            cookie=settings.devfolio_cookie,
            timeout=settings.http_timeout_seconds,
        )
    return _search_client


def get_judge() -> ProjectJudge | None:
    """Judge wired to the configured Gemini client; None when no API key is set."""
    client = get_client()
    if client is None:
        return None
    return ProjectJudge(
        model_client=client,
        repo_fetcher=get_github_client(),
        jitter=Jitter(magnitude=settings.jitter_magnitude, enabled=settings.jitter_enabled),
    )


async def close_clients() -> None:
    global _github_client, _search_client
    if _github_client is not None:
        await _github_client.aclose()
        _github_client = None
    if _search_client is not None:
        await _search_client.aclose()
        _search_client = None
