"""Tests for repository signal extraction."""

import pytest

from factories import NOW, StubFetcher, make_commits, make_project, make_snapshot
from models.schemas.project import ProjectDescription
from models.schemas.repository import CommitInfo
from services.pipeline.repo_signals import (
    analyze_commit_quality,
    build_repository_signal,
    calculate_repo_health,
    extract_github_urls,
    extract_repository_signal,
    has_repository_reference,
    is_template_message,
    parse_repo_slug,
)


# ---------------------------------------------------------------------------
# URL discovery
# ---------------------------------------------------------------------------


class TestUrlExtraction:
    def test_links_field_mixed_separators(self):
        project = make_project(
            links="https://vaultly.app, github.com/acme/vaultly.git\nhttps://github.com/acme/vaultly/"
        )
        assert extract_github_urls(project) == ["https://github.com/acme/vaultly"]

    def test_description_urls(self):
        project = make_project(links="")
        project = project.model_copy(update={
            "description": [
                ProjectDescription(content="Code lives at (github.com/acme/contracts) and docs elsewhere."),
                ProjectDescription(content="Frontend: https://github.com/acme/web/tree/main/app"),
            ]
        })
        assert extract_github_urls(project) == [
            "https://github.com/acme/contracts",
            "https://github.com/acme/web",
        ]

    def test_links_come_before_description(self):
        project = make_project(
            links="https://github.com/acme/first",
            description=["See https://github.com/acme/second for the contracts."],
        )
        assert extract_github_urls(project)[0] == "https://github.com/acme/first"

    def test_profile_url_is_not_a_repository(self):
        project = make_project(links="https://github.com/acme")
        assert extract_github_urls(project) == []

    def test_no_links(self):
        assert extract_github_urls(make_project(links="")) == []

    def test_parse_repo_slug(self):
        assert parse_repo_slug("https://github.com/acme/vaultly.git") == ("acme", "vaultly")
        assert parse_repo_slug("github.com/acme/vaultly?tab=readme") == ("acme", "vaultly")
        assert parse_repo_slug("https://gitlab.com/acme/vaultly") is None

    def test_repository_reference_from_flag_only(self):
        project = make_project(links="", has_github_link=True)
        assert extract_github_urls(project) == []
        assert has_repository_reference(project)


# ---------------------------------------------------------------------------
# Commit quality
# ---------------------------------------------------------------------------


class TestCommitQuality:
    @pytest.mark.parametrize("message", ["fix", "Update", "wip", "Initial commit", "Update README.md", "add files via upload"])
    def test_template_messages(self, message):
        assert is_template_message(message)

    def test_real_message_is_not_template(self):
        assert not is_template_message("Add vault withdrawal with slippage guard")

    def test_few_commits_forced_low(self):
        analysis = analyze_commit_quality(make_commits(2), now=NOW)
        # baseline 10, recent +10
        assert analysis.quality_score == 20
        assert analysis.recent_activity is True
        assert any("likely template usage" in issue for issue in analysis.issues)

    def test_limited_development(self):
        analysis = analyze_commit_quality(make_commits(4), now=NOW)
        assert analysis.quality_score == 40
        assert any("Very few commits (4)" in issue for issue in analysis.issues)

    def test_active_development_bonus(self):
        analysis = analyze_commit_quality(make_commits(20), now=NOW)
        assert analysis.quality_score == 80
        assert analysis.issues == []

    def test_no_commits(self):
        analysis = analyze_commit_quality([], now=NOW)
        assert analysis.quality_score == 0
        assert analysis.recent_activity is False
        assert analysis.commit_frequency == "none"

    def test_template_heavy_history_penalised(self):
        commits = make_commits(2) + make_commits(4, message="update")
        analysis = analyze_commit_quality(commits, now=NOW)
        assert analysis.template_indicators == 4
        # 50 - 15 + 10
        assert analysis.quality_score == 45
        assert "Many low-quality commit messages detected" in analysis.issues

    def test_stale_history_penalised(self):
        analysis = analyze_commit_quality(make_commits(8, days_ago=45), now=NOW)
        assert analysis.recent_activity is False
        assert analysis.quality_score == 40
        assert "No recent commits in the last 30 days" in analysis.issues

    def test_monotonic_in_commit_count(self):
        scores = [
            analyze_commit_quality(make_commits(n), now=NOW).quality_score
            for n in range(1, 26)
        ]
        assert all(later >= earlier for earlier, later in zip(scores, scores[1:]))
        assert scores[1] < scores[2]  # 2 -> 3 commits
        assert scores[4] < scores[5]  # 5 -> 6 commits
        assert scores[18] < scores[19]  # 19 -> 20 commits

    def test_frequency_label(self):
        # 24 commits one hour apart span one day
        assert analyze_commit_quality(make_commits(24), now=NOW).commit_frequency == "very_active"
        spread = [
            CommitInfo(message="Implement feature", date=f"2025-07-{day:02d}T10:00:00Z")
            for day in range(28, 6, -2)
        ]
        assert analyze_commit_quality(spread, now=NOW).commit_frequency == "active"

    def test_unparseable_dates_are_not_recent(self):
        commits = [CommitInfo(message="Implement feature", date="yesterday")] * 6
        assert analyze_commit_quality(commits, now=NOW).recent_activity is False


# ---------------------------------------------------------------------------
# Repository health
# ---------------------------------------------------------------------------


class TestRepoHealth:
    def test_established_repo(self):
        # 50 + 15 (readme) + 10 (size)
        assert calculate_repo_health(make_snapshot(), now=NOW) == 75

    def test_fresh_repo_bonus(self):
        assert calculate_repo_health(make_snapshot(created_days_ago=3), now=NOW) == 85

    def test_missing_readme_and_tiny_repo(self):
        assert calculate_repo_health(make_snapshot(readme=None, size=50), now=NOW) == 35

    def test_short_readme(self):
        assert calculate_repo_health(make_snapshot(readme="x" * 200, size=500), now=NOW) == 55

    def test_community_signals_capped(self):
        assert calculate_repo_health(make_snapshot(stars=50, forks=50), now=NOW) == 90

    def test_clamped_to_100(self):
        snapshot = make_snapshot(created_days_ago=1, stars=10, forks=10)
        assert calculate_repo_health(snapshot, now=NOW) == 100


# ---------------------------------------------------------------------------
# Extraction entry point
# ---------------------------------------------------------------------------


class TestExtractRepositorySignal:
    def test_signal_is_idempotent(self):
        snapshot = make_snapshot(commits=make_commits(7))
        first = build_repository_signal(snapshot, now=NOW)
        second = build_repository_signal(snapshot, now=NOW)
        assert first == second
        assert first.total_commits == 7
        assert first.readme_size == 600

    @pytest.mark.asyncio
    async def test_resolves_first_url(self):
        snapshot = make_snapshot()
        fetcher = StubFetcher({"https://github.com/acme/vaultly": snapshot})
        project = make_project(links="https://github.com/acme/vaultly https://github.com/acme/other")

        signal = await extract_repository_signal(project, fetcher, now=NOW)

        assert signal is not None
        assert fetcher.calls == ["https://github.com/acme/vaultly"]
        assert signal.total_commits == 25
        assert signal.recent_activity is True

    @pytest.mark.asyncio
    async def test_no_url_returns_none_without_fetching(self):
        fetcher = StubFetcher()
        signal = await extract_repository_signal(make_project(links=""), fetcher, now=NOW)
        assert signal is None
        assert fetcher.calls == []

    @pytest.mark.asyncio
    async def test_fetch_failure_is_absorbed(self):
        fetcher = StubFetcher(fail=True)
        project = make_project(links="https://github.com/acme/private")
        assert await extract_repository_signal(project, fetcher, now=NOW) is None

    @pytest.mark.asyncio
    async def test_cache_reuses_snapshot(self):
        fetcher = StubFetcher({"https://github.com/acme/vaultly": make_snapshot()})
        project = make_project(links="https://github.com/acme/vaultly")
        cache = {}

        first = await extract_repository_signal(project, fetcher, cache=cache, now=NOW)
        second = await extract_repository_signal(project, fetcher, cache=cache, now=NOW)

        assert fetcher.calls == ["https://github.com/acme/vaultly"]
        assert first == second

    @pytest.mark.asyncio
    async def test_unexpected_fetcher_error_is_absorbed(self):
        class BrokenFetcher:
            async def fetch_repository(self, url):
                raise ValueError("unexpected payload")

        project = make_project(links="https://github.com/acme/vaultly")
        assert await extract_repository_signal(project, BrokenFetcher(), now=NOW) is None
