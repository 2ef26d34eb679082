"""Model output and final scoring result for a single project."""

from pydantic import BaseModel


class ScoreBreakdown(BaseModel):
    """Per-criterion 0-100 sub-scores, before weighting."""
    technical_implementation: float = 0.0
    innovation: float = 0.0
    value_proposition: float = 0.0
    completeness: float = 0.0
    market_potential: float = 0.0
    code_quality: float = 0.0
    # Optional domain categories, reported but not weighted
    network_integration: float | None = None
    ecosystem_fit: float | None = None


class RawBreakdown(BaseModel):
    """The model's judgement, already coerced and clamped from untrusted JSON."""
    breakdown: ScoreBreakdown = ScoreBreakdown()
    reasoning: str = ""
    flags: list[str] = []
    confidence: float = 0.8  # 0.0-1.0


class ScoreAdjustments(BaseModel):
    """Trace of how the weighted base became the final score."""
    base_score: float = 0.0
    total_penalty: float = 0.0
    bonus_points: float = 0.0
    adjusted_score: float = 0.0  # after penalties/bonuses, before the curve
    curved_score: float = 0.0
    final_score: float = 1.0
    details: list[str] = []

    @property
    def analysis_details(self) -> str:
        return "\n".join(self.details)


class GithubSummary(BaseModel):
    """Repository signal summary embedded in a score for display."""
    total_commits: int = 0
    recent_activity: bool = False
    commit_quality: int = 0
    health_score: int = 0


class AIScore(BaseModel):
    """Final score for one project. A re-judge replaces it, never mutates it."""
    project_id: str
    overall_score: float = 1.0  # 1-100, one decimal
    label: str = ""
    breakdown: ScoreBreakdown = ScoreBreakdown()
    reasoning: str = ""
    flags: list[str] = []
    confidence: float = 0.8
    timestamp: str = ""
    github_data: GithubSummary | None = None

    model_config = {"frozen": True}
