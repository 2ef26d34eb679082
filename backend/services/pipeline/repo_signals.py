"""Repository signal extraction: GitHub URL discovery, commit-quality and health heuristics.

The heuristics are pure functions of the fetched snapshot (plus a reference
time), so the same snapshot always yields the same signal. Only
``extract_repository_signal`` touches the network, through the injected
fetcher, and it never raises: an unreachable repository becomes ``None`` and
the scorer penalises it instead.
"""

import logging
import math
import re
from datetime import datetime, timedelta, timezone
from typing import Protocol

from models.schemas.project import Project
from models.schemas.repository import (
    CommitAnalysis,
    CommitInfo,
    RepositorySignal,
    RepositorySnapshot,
)
from services.errors import SignalExtractionFailure

logger = logging.getLogger(__name__)

_LINK_SPLIT_RE = re.compile(r"[,\s]+")
_DESCRIPTION_URL_RE = re.compile(r"(?:https?://)?github\.com/[^\s)]+", re.IGNORECASE)
_REPO_SLUG_RE = re.compile(r"github\.com/([^/\s]+)/([^/\s?#]+)", re.IGNORECASE)

# Commit messages that indicate scaffolding rather than real work
_TEMPLATE_PHRASES = ("initial commit", "first commit", "add files", "update readme")
_TEMPLATE_EXACT = {"update", "fix"}

RECENT_ACTIVITY_WINDOW = timedelta(days=30)
FRESH_REPO_WINDOW = timedelta(days=7)


class RepositoryFetcher(Protocol):
    async def fetch_repository(self, url: str) -> RepositorySnapshot: ...


# ---------------------------------------------------------------------------
# URL discovery
# ---------------------------------------------------------------------------


def parse_repo_slug(url: str) -> tuple[str, str] | None:
    """Return (owner, repo) for a GitHub URL, or None if it has no owner/repo path."""
    m = _REPO_SLUG_RE.search(url)
    if not m:
        return None
    owner, repo = m.group(1), m.group(2)
    repo = repo.rstrip("/")
    if repo.lower().endswith(".git"):
        repo = repo[:-4]
    if not owner or not repo:
        return None
    return owner, repo


def extract_github_urls(project: Project) -> list[str]:
    """Find candidate repository URLs in the links field and description sections.

    Only URLs with an ``owner/repo`` path are kept, reduced to
    ``https://github.com/<owner>/<repo>``. Order is preserved and duplicates
    dropped, so the first element is the repository to analyse.
    """
    candidates: list[str] = []

    for token in _LINK_SPLIT_RE.split(project.links or ""):
        token = token.strip()
        if token and "github.com" in token.lower():
            candidates.append(token)

    for section in project.description:
        for match in _DESCRIPTION_URL_RE.findall(section.content):
            candidates.append(match)

    urls: list[str] = []
    for url in candidates:
        slug = parse_repo_slug(url)
        if slug is None:
            continue
        canonical = f"https://github.com/{slug[0]}/{slug[1]}"
        if canonical not in urls:
            urls.append(canonical)
    return urls


def has_repository_reference(project: Project) -> bool:
    """True if the project claims or links a repository, reachable or not."""
    return project.has_github_link or bool(extract_github_urls(project))


# ---------------------------------------------------------------------------
# Heuristics
# ---------------------------------------------------------------------------


def _parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def is_template_message(message: str) -> bool:
    msg = message.strip().lower()
    if len(msg) < 5 or msg in _TEMPLATE_EXACT:
        return True
    return any(phrase in msg for phrase in _TEMPLATE_PHRASES)


def _is_meaningful_message(message: str) -> bool:
    msg = message.strip().lower()
    return len(msg) > 10 and "initial commit" not in msg and "first commit" not in msg


def _commit_frequency(commits: list[CommitInfo]) -> str:
    """Classify commits/day across the span of the list (newest first)."""
    if len(commits) <= 10:
        return "unknown"
    newest = _parse_timestamp(commits[0].date)
    oldest = _parse_timestamp(commits[-1].date)
    if newest is None or oldest is None:
        return "unknown"
    days = math.ceil((newest - oldest).total_seconds() / 86400)
    if days <= 0:
        return "unknown"
    per_day = len(commits) / days
    if per_day > 2:
        return "very_active"
    if per_day > 0.5:
        return "active"
    return "sparse"


def analyze_commit_quality(
    commits: list[CommitInfo], now: datetime | None = None
) -> CommitAnalysis:
    """Score commit history 0-100 from count, message quality and recency."""
    now = now or datetime.now(timezone.utc)
    count = len(commits)
    issues: list[str] = []
    score = 50

    if count <= 2:
        issues.append(f"Only {count} commit{'' if count == 1 else 's'} - likely template usage")
        score = 10
    elif count <= 5:
        issues.append(f"Very few commits ({count}) - limited development activity")
        score = 30
    elif count >= 20:
        score += 20

    template_indicators = sum(1 for c in commits if is_template_message(c.message))
    meaningful = sum(1 for c in commits if _is_meaningful_message(c.message))

    if template_indicators > count * 0.5:
        issues.append("Many low-quality commit messages detected")
        score -= 15

    cutoff = now - RECENT_ACTIVITY_WINDOW
    recent = False
    for commit in commits:
        ts = _parse_timestamp(commit.date)
        if ts is not None and ts > cutoff:
            recent = True
            break

    if recent:
        score += 10
    else:
        issues.append("No recent commits in the last 30 days")
        score -= 10

    return CommitAnalysis(
        quality_score=max(0, min(100, score)),
        issues=issues,
        commit_frequency="none" if count == 0 else _commit_frequency(commits),
        recent_activity=recent,
        meaningful_commits=meaningful,
        template_indicators=template_indicators,
    )


def calculate_repo_health(snapshot: RepositorySnapshot, now: datetime | None = None) -> int:
    """Repository health 0-100 from freshness, README, size and community signals."""
    now = now or datetime.now(timezone.utc)
    repo = snapshot.repository
    score = 50

    created = _parse_timestamp(repo.created_at)
    if created is not None and now - created < FRESH_REPO_WINDOW:
        score += 10  # created during the hackathon

    if snapshot.readme is not None:
        readme_len = len(snapshot.readme.content)
        if readme_len > 500:
            score += 15
        elif readme_len > 100:
            score += 5
    else:
        score -= 10

    if repo.size > 1000:
        score += 10
    elif repo.size < 100:
        score -= 5  # probably only config files

    score += min(10, repo.stargazers_count * 2)
    score += min(5, repo.forks_count * 3)

    return max(0, min(100, score))


def build_repository_signal(
    snapshot: RepositorySnapshot, now: datetime | None = None
) -> RepositorySignal:
    return RepositorySignal(
        url=snapshot.url,
        repository_name=snapshot.repository.name,
        total_commits=len(snapshot.commits),
        commit_analysis=analyze_commit_quality(snapshot.commits, now=now),
        health_score=calculate_repo_health(snapshot, now=now),
        readme_size=snapshot.readme.size if snapshot.readme is not None else None,
        recent_commits=snapshot.commits[:10],
    )


# ---------------------------------------------------------------------------
# Extraction entry point
# ---------------------------------------------------------------------------


async def extract_repository_signal(
    project: Project,
    fetcher: RepositoryFetcher | None,
    cache: dict[str, RepositorySnapshot] | None = None,
    now: datetime | None = None,
) -> RepositorySignal | None:
    """Resolve, fetch and analyse the project's repository. Never raises.

    ``cache`` maps repository URL to an already fetched snapshot so a batch
    run does not fetch the same repository twice. The signal itself is
    always recomputed.
    """
    urls = extract_github_urls(project)
    if not urls:
        logger.info("No GitHub URLs found for project: %s", project.name)
        return None
    if fetcher is None:
        logger.warning("No repository fetcher configured, skipping %s", urls[0])
        return None

    url = urls[0]
    snapshot = cache.get(url) if cache is not None else None
    if snapshot is None:
        try:
            snapshot = await fetcher.fetch_repository(url)
        except SignalExtractionFailure as e:
            logger.warning("Repository analysis failed for %s (%s): %s", project.name, url, e)
            return None
        except Exception as e:
            logger.error("Unexpected error analysing repository %s for %s: %s", url, project.name, e)
            return None
        if cache is not None:
            cache[url] = snapshot

    return build_repository_signal(snapshot, now=now)
