"""Model invocation: prompt in, validated RawBreakdown out."""

import logging

from models.schemas.ai_score import RawBreakdown, ScoreBreakdown
from models.schemas.integration import IntegrationSignal
from models.schemas.project import Project
from models.schemas.repository import RepositorySignal
from services.errors import ModelInvocationError
from services.gemini_client import ModelClient
from services.prompt_builder import SCORING_CRITERIA, SYSTEM_PROMPT, build_judge_prompt

logger = logging.getLogger(__name__)

OPTIONAL_CRITERIA = ("network_integration", "ecosystem_fit")


def _to_score(value, field: str) -> float:
    """Coerce an untrusted sub-score to a float in [0, 100]."""
    if isinstance(value, bool):
        raise ModelInvocationError(f"Invalid value for {field}: {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise ModelInvocationError(f"Invalid value for {field}: {value!r}") from e
    if number != number:  # NaN
        raise ModelInvocationError(f"Invalid value for {field}: NaN")
    return max(0.0, min(100.0, number))


def _to_confidence(value) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.8
    if number != number or number <= 0:
        return 0.8
    return min(1.0, number)


def parse_breakdown(data: dict) -> RawBreakdown:
    """Validate the model's JSON. Missing standard criteria are an error, not a default."""
    raw = data.get("breakdown")
    if not isinstance(raw, dict):
        raise ModelInvocationError("Model response is missing the 'breakdown' object")

    scores: dict[str, float | None] = {}
    for criterion in SCORING_CRITERIA:
        if criterion not in raw:
            raise ModelInvocationError(f"Model response is missing criterion '{criterion}'")
        scores[criterion] = _to_score(raw[criterion], criterion)

    for criterion in OPTIONAL_CRITERIA:
        value = raw.get(criterion)
        if value is None:
            continue
        try:
            scores[criterion] = _to_score(value, criterion)
        except ModelInvocationError:
            logger.warning("Ignoring malformed optional criterion %s: %r", criterion, value)

    flags = data.get("flags")
    reasoning = data.get("reasoning")

    return RawBreakdown(
        breakdown=ScoreBreakdown(**scores),
        reasoning=reasoning if isinstance(reasoning, str) else "",
        flags=[str(f) for f in flags if f] if isinstance(flags, list) else [],
        confidence=_to_confidence(data.get("confidence")),
    )


async def invoke_model(
    client: ModelClient,
    project: Project,
    repo_signal: RepositorySignal | None,
    integration: IntegrationSignal,
) -> RawBreakdown:
    prompt = build_judge_prompt(project, repo_signal, integration)
    data = await client.generate_json(prompt, system_instruction=SYSTEM_PROMPT)
    return parse_breakdown(data)
