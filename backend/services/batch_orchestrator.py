"""Batch judging with bounded concurrency and per-project failure isolation.

Projects are scored in fixed-size groups. Every call in a group runs
concurrently and the group is fully settled before the next one starts; a
fixed delay separates groups to stay under upstream rate limits. One
project's failure is recorded against that project only.
"""

import asyncio
import logging
from typing import Callable

from models.schemas.ai_score import AIScore
from models.schemas.batch import BatchProgress, BatchResult, JudgeOutcome, ScoredProject
from models.schemas.project import Project
from models.schemas.repository import RepositorySnapshot
from services.pipeline.judge import ProjectJudge

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[BatchProgress], None]


class ScoreBoard:
    """In-memory per-project scoring state for one session, keyed by project uuid.

    Writes go through the project id, never a list index, so groups that
    settle out of order cannot clobber each other. A failed attempt clears any
    earlier score so an error is never shown next to a stale result.
    """

    def __init__(self, projects: list[Project] | None = None) -> None:
        self._entries: dict[str, ScoredProject] = {}
        if projects:
            self.load(projects)

    def load(self, projects: list[Project]) -> None:
        """Replace the board with freshly fetched, unscored projects."""
        self._entries = {p.uuid: ScoredProject(project=p) for p in projects}

    def _entry(self, project: Project) -> ScoredProject:
        entry = self._entries.get(project.uuid)
        if entry is None:
            entry = ScoredProject(project=project)
        return entry

    def mark_scoring(self, project: Project) -> None:
        entry = self._entry(project)
        self._entries[project.uuid] = ScoredProject(
            project=entry.project, status="scoring", score=entry.score
        )

    def record_success(self, project: Project, score: AIScore) -> None:
        self._entries[project.uuid] = ScoredProject(project=project, status="scored", score=score)

    def record_failure(self, project: Project, error: str) -> None:
        self._entries[project.uuid] = ScoredProject(
            project=project, status="failed", score=None, error=error
        )

    def clear_results(self) -> None:
        self._entries = {
            uuid: ScoredProject(project=e.project) for uuid, e in self._entries.items()
        }

    def get(self, project_id: str) -> ScoredProject | None:
        return self._entries.get(project_id)

    def entries(self) -> list[ScoredProject]:
        return list(self._entries.values())

    def failed_ids(self) -> list[str]:
        return [uuid for uuid, e in self._entries.items() if e.status == "failed"]

    def ranked(self) -> list[ScoredProject]:
        """Scored projects, best first."""
        scored = [e for e in self._entries.values() if e.status == "scored" and e.score]
        return sorted(scored, key=lambda e: e.score.overall_score, reverse=True)


async def _judge_one(
    project: Project,
    judge: ProjectJudge,
    scoreboard: ScoreBoard | None,
    cache: dict[str, RepositorySnapshot] | None,
) -> JudgeOutcome:
    if scoreboard is not None:
        scoreboard.mark_scoring(project)
    try:
        score = await judge.judge_project(project, cache=cache)
    except Exception as e:
        logger.error("Error judging project %s: %s", project.name, e)
        if scoreboard is not None:
            scoreboard.record_failure(project, str(e))
        return JudgeOutcome(
            project_id=project.uuid, project_name=project.name, success=False, error=str(e)
        )

    if scoreboard is not None:
        scoreboard.record_success(project, score)
    return JudgeOutcome(
        project_id=project.uuid, project_name=project.name, success=True, score=score
    )


async def judge_batch(
    projects: list[Project],
    judge: ProjectJudge,
    batch_size: int = 3,
    delay_seconds: float = 2.0,
    on_progress: ProgressCallback | None = None,
    scoreboard: ScoreBoard | None = None,
) -> BatchResult:
    """Score every project, one group of ``batch_size`` at a time."""
    if batch_size < 1:
        raise ValueError("batch_size must be at least 1")

    total = len(projects)
    outcomes: list[JudgeOutcome] = []
    cache: dict[str, RepositorySnapshot] = {}

    for start in range(0, total, batch_size):
        group = projects[start:start + batch_size]

        if on_progress is not None:
            for offset, project in enumerate(group):
                on_progress(BatchProgress(
                    current=start + offset + 1, total=total, project_name=project.name
                ))

        settled = await asyncio.gather(
            *(_judge_one(p, judge, scoreboard, cache) for p in group),
            return_exceptions=True,
        )
        for project, result in zip(group, settled):
            if isinstance(result, BaseException):
                # _judge_one handles Exception; this is e.g. cancellation of one member
                outcomes.append(JudgeOutcome(
                    project_id=project.uuid, project_name=project.name,
                    success=False, error=repr(result),
                ))
            else:
                outcomes.append(result)

        if start + batch_size < total and delay_seconds > 0:
            await asyncio.sleep(delay_seconds)

    result = BatchResult(outcomes=outcomes)
    logger.info(
        "Completed judging %d projects (%d succeeded, %d failed)",
        result.total, result.successful, result.failed,
    )
    return result


async def rejudge(project: Project, judge: ProjectJudge, scoreboard: ScoreBoard) -> JudgeOutcome:
    """Retry a single project without re-running the batch."""
    return await _judge_one(project, judge, scoreboard, cache=None)
