"""Score normalization: weighted base, penalties/bonuses, compression curve, jitter.

Flow:
    breakdown ──► weighted_base()
    project + repo signal + integration ──► accumulate_adjustments()  (penalty, bonus, trace)
    adjusted = max(0, base - penalty + bonus)
      ├─ apply_curve(): above 80 the excess becomes log10(excess + 1) * 8.5,
      │                 above 90 only 30% of the excess is kept
      ├─ Jitter: small symmetric noise so projects do not tie
      └─ clamp to [1, 100], round to one decimal

Everything except the jitter is deterministic.
"""

import logging
import math
import random

from models.schemas.ai_score import ScoreAdjustments, ScoreBreakdown
from models.schemas.integration import IntegrationSignal
from models.schemas.project import Project
from models.schemas.repository import RepositorySignal
from services.pipeline.repo_signals import has_repository_reference
from services.prompt_builder import SCORING_CRITERIA

logger = logging.getLogger(__name__)

CURVE_THRESHOLD = 80.0
CURVE_FACTOR = 8.5
TOP_THRESHOLD = 90.0
TOP_RETAINED = 0.3

MIN_DESCRIPTION_LENGTH = 100
MIN_README_SIZE = 200

# Penalties
PENALTY_NO_REPOSITORY = 15
PENALTY_REPOSITORY_INACCESSIBLE = 10
PENALTY_TEMPLATE_COMMITS = 20  # <= 2 commits
PENALTY_FEW_COMMITS = 15  # 3-5 commits
PENALTY_POOR_COMMIT_QUALITY = 8  # quality < 30
PENALTY_NO_RECENT_ACTIVITY = 10
PENALTY_NO_LINKS = 10
PENALTY_WEAK_DESCRIPTION = 8
PENALTY_SOLO = 3

# Bonuses
BONUS_ACTIVE_DEVELOPMENT = 5  # >= 20 commits
BONUS_REPOSITORY_HEALTH = 5  # health > 80


class Jitter:
    """Symmetric uniform noise in [-magnitude, +magnitude] to avoid score ties.

    Not part of the scoring policy. Disable it or pass a seeded ``rng`` for
    reproducible results.
    """

    def __init__(
        self,
        magnitude: float = 0.4,
        enabled: bool = True,
        rng: random.Random | None = None,
    ) -> None:
        self.magnitude = magnitude
        self.enabled = enabled
        self._rng = rng or random.Random()

    @classmethod
    def disabled(cls) -> "Jitter":
        return cls(magnitude=0.0, enabled=False)

    def sample(self) -> float:
        if not self.enabled or self.magnitude <= 0:
            return 0.0
        return self._rng.uniform(-self.magnitude, self.magnitude)


def weighted_base(breakdown: ScoreBreakdown) -> float:
    """Exact weighted sum of the six standard criteria."""
    return sum(
        getattr(breakdown, criterion) * weight / 100
        for criterion, weight in SCORING_CRITERIA.items()
    )


def has_weak_description(project: Project) -> bool:
    return all(len(d.content) < MIN_DESCRIPTION_LENGTH for d in project.description)


def has_no_links(project: Project) -> bool:
    return not project.links or not project.links.strip()


def accumulate_adjustments(
    project: Project,
    repo_signal: RepositorySignal | None,
    integration: IntegrationSignal,
) -> tuple[float, float, list[str]]:
    """Return (total_penalty, bonus_points, trace_lines)."""
    penalty = 0.0
    bonus = 0.0
    details: list[str] = []

    if repo_signal is not None:
        commits = repo_signal.total_commits
        if commits <= 2:
            penalty += PENALTY_TEMPLATE_COMMITS
            details.append(f"• MAJOR PENALTY: Only {commits} commit(s) - likely template usage (-{PENALTY_TEMPLATE_COMMITS} points)")
        elif commits <= 5:
            penalty += PENALTY_FEW_COMMITS
            details.append(f"• PENALTY: Very few commits ({commits}) - limited development (-{PENALTY_FEW_COMMITS} points)")
        elif commits >= 20:
            bonus += BONUS_ACTIVE_DEVELOPMENT
            details.append(f"• BONUS: Active development with {commits} commits (+{BONUS_ACTIVE_DEVELOPMENT} points)")

        if not repo_signal.recent_activity:
            penalty += PENALTY_NO_RECENT_ACTIVITY
            details.append(f"• PENALTY: No recent commits in last 30 days (-{PENALTY_NO_RECENT_ACTIVITY} points)")

        if repo_signal.quality_score < 30:
            penalty += PENALTY_POOR_COMMIT_QUALITY
            details.append(
                f"• PENALTY: Poor commit quality ({repo_signal.quality_score}/100) (-{PENALTY_POOR_COMMIT_QUALITY} points)"
            )

        if repo_signal.health_score > 80:
            bonus += BONUS_REPOSITORY_HEALTH
            details.append(
                f"• BONUS: Excellent repository health ({repo_signal.health_score}/100) (+{BONUS_REPOSITORY_HEALTH} points)"
            )
    elif has_repository_reference(project):
        penalty += PENALTY_REPOSITORY_INACCESSIBLE
        details.append(f"• PENALTY: GitHub repository inaccessible (-{PENALTY_REPOSITORY_INACCESSIBLE} points)")
    else:
        penalty += PENALTY_NO_REPOSITORY
        details.append(f"• PENALTY: No GitHub repository provided (-{PENALTY_NO_REPOSITORY} points)")

    if integration.bonus_score > 0:
        bonus += integration.bonus_score
        details.append(f"• BONUS: Base integration ({integration.network_type}) (+{integration.bonus_score} points)")

    if has_no_links(project):
        penalty += PENALTY_NO_LINKS
        details.append(f"• PENALTY: No demo links provided (-{PENALTY_NO_LINKS} points)")

    if has_weak_description(project):
        penalty += PENALTY_WEAK_DESCRIPTION
        details.append(f"• PENALTY: Poor project description (-{PENALTY_WEAK_DESCRIPTION} points)")

    if len(project.members) == 1:
        penalty += PENALTY_SOLO
        details.append(f"• PENALTY: Solo project - limited collaboration (-{PENALTY_SOLO} points)")

    return penalty, bonus, details


def apply_curve(score: float) -> float:
    """Two-stage compression: logarithmic above 80, then 30% retention above 90."""
    if score > CURVE_THRESHOLD:
        excess = score - CURVE_THRESHOLD
        score = CURVE_THRESHOLD + math.log10(excess + 1) * CURVE_FACTOR
    if score > TOP_THRESHOLD:
        score = TOP_THRESHOLD + (score - TOP_THRESHOLD) * TOP_RETAINED
    return score


def clamp_score(score: float) -> float:
    return round(max(1.0, min(100.0, score)), 1)


def normalize_score(
    breakdown: ScoreBreakdown,
    project: Project,
    repo_signal: RepositorySignal | None,
    integration: IntegrationSignal,
    jitter: Jitter | None = None,
) -> ScoreAdjustments:
    jitter = jitter or Jitter()

    base = weighted_base(breakdown)
    penalty, bonus, details = accumulate_adjustments(project, repo_signal, integration)

    adjusted = max(0.0, base - penalty + bonus)
    curved = apply_curve(adjusted)
    final = clamp_score(curved + jitter.sample())

    logger.debug(
        "Score for %s: base=%.1f penalty=%.1f bonus=%.1f curved=%.2f final=%.1f",
        project.name, base, penalty, bonus, curved, final,
    )

    return ScoreAdjustments(
        base_score=round(base, 1),
        total_penalty=round(penalty, 1),
        bonus_points=round(bonus, 1),
        adjusted_score=round(adjusted, 2),
        curved_score=round(curved, 2),
        final_score=final,
        details=details,
    )


# ---------------------------------------------------------------------------
# Flags
# ---------------------------------------------------------------------------


def generate_flags(
    project: Project,
    breakdown: ScoreBreakdown,
    repo_signal: RepositorySignal | None,
) -> list[str]:
    """System flags, triggered by the same conditions as the penalties."""
    flags: list[str] = []

    if repo_signal is not None:
        commits = repo_signal.total_commits
        if commits <= 2:
            flags.append(f"CRITICAL: Only {commits} commit(s) - possible template usage")
        elif commits <= 5:
            flags.append(f"WARNING: Very few commits ({commits}) - limited development activity")

        if not repo_signal.recent_activity:
            flags.append("No recent commits in the last 30 days")

        if repo_signal.commit_analysis.template_indicators > commits * 0.5:
            flags.append("Many low-quality/template-style commit messages")

        if repo_signal.readme_size is None or repo_signal.readme_size < MIN_README_SIZE:
            flags.append("Missing or very brief README documentation")
    elif has_repository_reference(project):
        flags.append("GitHub repository inaccessible or private")
    else:
        flags.append("No GitHub repository provided")

    if has_no_links(project):
        flags.append("No demo or live links provided")

    if has_weak_description(project):
        flags.append("Very brief or missing project description")

    if breakdown.technical_implementation < 50:
        flags.append("Significant technical implementation issues")
    if breakdown.innovation < 40:
        flags.append("Limited innovation or uniqueness")
    if breakdown.completeness < 45:
        flags.append("Project appears incomplete")

    return flags


def merge_flags(*flag_lists: list[str]) -> list[str]:
    """Order-preserving de-duplicated union."""
    merged: list[str] = []
    for flags in flag_lists:
        for flag in flags:
            if flag and flag not in merged:
                merged.append(flag)
    return merged


# ---------------------------------------------------------------------------
# Display labels
# ---------------------------------------------------------------------------


def score_label(score: float) -> str:
    if score >= 95:
        return "Outstanding"
    if score >= 90:
        return "Exceptional"
    if score >= 85:
        return "Excellent"
    if score >= 75:
        return "Good"
    if score >= 60:
        return "Fair"
    if score >= 45:
        return "Poor"
    return "Very Poor"

