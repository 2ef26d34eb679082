"""Single-project judge: wires signal extraction, the model call and normalization.

Flow:
    project
      ├─ extract_repository_signal()   → RepositorySignal | None   (best-effort)
      ├─ detect_integration()          → IntegrationSignal         (pure)
      │               ↓                        ↓
      ├─ invoke_model()                → RawBreakdown              (may fail)
      │               ↓
      ├─ normalize_score()             → ScoreAdjustments
      └─ generate_flags() + merge      → AIScore
"""

import logging
from datetime import datetime, timezone
from typing import Callable

from models.schemas.ai_score import AIScore, GithubSummary, ScoreBreakdown
from models.schemas.project import Project
from models.schemas.repository import RepositorySignal, RepositorySnapshot
from services.errors import JudgeError
from services.gemini_client import ModelClient
from services.pipeline.integration_detector import detect_integration
from services.pipeline.model_invoker import invoke_model
from services.pipeline.repo_signals import RepositoryFetcher, extract_repository_signal
from services.pipeline.score_normalizer import (
    Jitter,
    generate_flags,
    merge_flags,
    normalize_score,
    score_label,
)

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _round_breakdown(breakdown: ScoreBreakdown) -> ScoreBreakdown:
    return ScoreBreakdown(
        **{k: (round(v, 1) if v is not None else None) for k, v in breakdown.model_dump().items()}
    )


def _github_summary(repo_signal: RepositorySignal | None) -> GithubSummary | None:
    if repo_signal is None:
        return None
    return GithubSummary(
        total_commits=repo_signal.total_commits,
        recent_activity=repo_signal.recent_activity,
        commit_quality=repo_signal.quality_score,
        health_score=repo_signal.health_score,
    )


class ProjectJudge:
    """Scores projects with an explicitly supplied model client and repository fetcher."""

    def __init__(
        self,
        model_client: ModelClient,
        repo_fetcher: RepositoryFetcher | None = None,
        jitter: Jitter | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.model_client = model_client
        self.repo_fetcher = repo_fetcher
        self.jitter = jitter or Jitter()
        self.clock = clock

    async def judge_project(
        self,
        project: Project,
        cache: dict[str, RepositorySnapshot] | None = None,
    ) -> AIScore:
        """Score one project. Raises JudgeError if the model step fails."""
        now = self.clock()

        repo_signal = await extract_repository_signal(
            project, self.repo_fetcher, cache=cache, now=now
        )
        integration = detect_integration(project)

        try:
            raw = await invoke_model(self.model_client, project, repo_signal, integration)
        except Exception as e:
            logger.error("AI judging error for %s: %s", project.name, e)
            raise JudgeError(project.uuid, f"Failed to judge project: {e}") from e

        adjustments = normalize_score(
            raw.breakdown, project, repo_signal, integration, jitter=self.jitter
        )
        flags = merge_flags(raw.flags, generate_flags(project, raw.breakdown, repo_signal))

        reasoning = raw.reasoning
        if adjustments.details:
            reasoning = f"{reasoning}\n\nScore Analysis:\n{adjustments.analysis_details}"

        logger.info("Judged %s: %.1f", project.name, adjustments.final_score)

        return AIScore(
            project_id=project.uuid,
            overall_score=adjustments.final_score,
            label=score_label(adjustments.final_score),
            breakdown=_round_breakdown(raw.breakdown),
            reasoning=reasoning,
            flags=flags,
            confidence=raw.confidence,
            timestamp=now.isoformat(),
            github_data=_github_summary(repo_signal),
        )
