"""Tests for model response validation and invocation."""

import pytest

from factories import StubModelClient, breakdown_response, make_project
from models.schemas.integration import IntegrationSignal
from services.errors import ModelInvocationError
from services.pipeline.model_invoker import invoke_model, parse_breakdown
from services.prompt_builder import SYSTEM_PROMPT


class TestParseBreakdown:
    def test_well_formed(self):
        raw = parse_breakdown(breakdown_response(72, innovation=64))
        assert raw.breakdown.technical_implementation == 72
        assert raw.breakdown.innovation == 64
        assert raw.reasoning == "Solid execution."
        assert raw.confidence == 0.85
        assert raw.flags == []

    def test_values_are_clamped(self):
        raw = parse_breakdown(breakdown_response(70, innovation=140, code_quality=-5))
        assert raw.breakdown.innovation == 100
        assert raw.breakdown.code_quality == 0

    def test_numeric_strings_accepted(self):
        raw = parse_breakdown(breakdown_response(70, completeness="55.5"))
        assert raw.breakdown.completeness == 55.5

    def test_missing_breakdown(self):
        with pytest.raises(ModelInvocationError, match="breakdown"):
            parse_breakdown({"overall_score": 80})

    def test_missing_criterion(self):
        data = breakdown_response(70)
        del data["breakdown"]["market_potential"]
        with pytest.raises(ModelInvocationError, match="market_potential"):
            parse_breakdown(data)

    @pytest.mark.parametrize("value", ["high", None, True, [80]])
    def test_non_numeric_criterion(self, value):
        with pytest.raises(ModelInvocationError):
            parse_breakdown(breakdown_response(70, innovation=value))

    def test_optional_criteria(self):
        raw = parse_breakdown(breakdown_response(70, network_integration=90, ecosystem_fit="n/a"))
        assert raw.breakdown.network_integration == 90
        assert raw.breakdown.ecosystem_fit is None

    def test_loose_fields_defaulted(self):
        data = breakdown_response(70)
        data.update({"flags": "not a list", "reasoning": 12, "confidence": "sure"})
        raw = parse_breakdown(data)
        assert raw.flags == []
        assert raw.reasoning == ""
        assert raw.confidence == 0.8

    def test_confidence_capped(self):
        data = breakdown_response(70)
        data["confidence"] = 7
        assert parse_breakdown(data).confidence == 1.0


@pytest.mark.asyncio
async def test_invoke_model_sends_rubric_and_project():
    client = StubModelClient()
    raw = await invoke_model(client, make_project(name="Vaultly"), None, IntegrationSignal())

    assert raw.breakdown.completeness == 70
    assert '"name": "Vaultly"' in client.prompts[0]


@pytest.mark.asyncio
async def test_invoke_model_surfaces_bad_shape():
    client = StubModelClient(default={"score": 90})
    with pytest.raises(ModelInvocationError):
        await invoke_model(client, make_project(), None, IntegrationSignal())


@pytest.mark.asyncio
async def test_system_instruction_passed():
    seen = {}

    class Recorder:
        async def generate_json(self, prompt, system_instruction=""):
            seen["system"] = system_instruction
            return breakdown_response(60)

    await invoke_model(Recorder(), make_project(), None, IntegrationSignal())
    assert seen["system"] == SYSTEM_PROMPT
