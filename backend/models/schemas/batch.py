"""Batch judging outcomes and per-project session state."""

from typing import Literal

from pydantic import BaseModel

from models.schemas.ai_score import AIScore
from models.schemas.project import Project


class JudgeOutcome(BaseModel):
    """Result of scoring one project inside a batch: a score or an error."""
    project_id: str
    project_name: str = ""
    success: bool = False
    score: AIScore | None = None
    error: str | None = None


class BatchProgress(BaseModel):
    current: int = 0  # 1-based index of the project being scored
    total: int = 0
    project_name: str = ""


class BatchResult(BaseModel):
    outcomes: list[JudgeOutcome] = []

    @property
    def results(self) -> list[JudgeOutcome]:
        return [o for o in self.outcomes if o.success]

    @property
    def errors(self) -> list[JudgeOutcome]:
        return [o for o in self.outcomes if not o.success]

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def successful(self) -> int:
        return len(self.results)

    @property
    def failed(self) -> int:
        return len(self.errors)

    @property
    def is_partial_failure(self) -> bool:
        """Some projects scored and some failed. Not a failure of the batch itself."""
        return self.successful > 0 and self.failed > 0


class ScoredProject(BaseModel):
    """A project plus its scoring state in the current session.

    ``status`` keeps "not yet scored", "scored" and "failed" distinct.
    """
    project: Project
    status: Literal["pending", "scoring", "scored", "failed"] = "pending"
    score: AIScore | None = None
    error: str | None = None
