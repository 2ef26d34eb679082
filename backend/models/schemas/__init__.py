"""Pydantic contracts passed between the judging pipeline stages."""

from models.schemas.project import Project
from models.schemas.repository import RepositorySignal, RepositorySnapshot
from models.schemas.integration import IntegrationSignal
from models.schemas.ai_score import AIScore, RawBreakdown, ScoreAdjustments, ScoreBreakdown
from models.schemas.batch import BatchResult, JudgeOutcome, ScoredProject

__all__ = [
    "Project",
    "RepositorySnapshot",
    "RepositorySignal",
    "IntegrationSignal",
    "RawBreakdown",
    "ScoreBreakdown",
    "ScoreAdjustments",
    "AIScore",
    "JudgeOutcome",
    "BatchResult",
    "ScoredProject",
]
