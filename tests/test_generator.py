"""Provider ordering and fallback behaviour of the coordinator."""

from unittest.mock import patch

import pytest

from event_generator.generator import EventGenerator, build_event_generator
from event_generator.llm import DeepSeekClient, OpenAiClient
from event_generator.models import GenerationRequest

from tests.conftest import ScriptedClient, failing_client

WORKSHOP = GenerationRequest(category="workshop", details="A 2-hour coding bootcamp for teens")


@pytest.mark.asyncio
async def test_no_providers_uses_fallback_without_error_or_network(fixed_clock):
  generator = EventGenerator(clock=fixed_clock)

  with patch("httpx.AsyncClient") as mock_client:
    outcome = await generator.generate(WORKSHOP)

  mock_client.assert_not_called()
  assert outcome.source == "fallback"
  assert outcome.error is None
  assert outcome.event.description == WORKSHOP.details


@pytest.mark.asyncio
async def test_primary_success_never_calls_secondary(ai_event, fixed_clock):
  primary = ScriptedClient("openai", event=ai_event)
  secondary = ScriptedClient("deepseek", event=ai_event)
  generator = EventGenerator(primary=primary, secondary=secondary, clock=fixed_clock)

  outcome = await generator.generate(WORKSHOP)

  assert outcome.source == "primary"
  assert outcome.error is None
  assert outcome.event == ai_event
  assert primary.calls == 1
  assert secondary.calls == 0
  assert primary.requests == [WORKSHOP]


@pytest.mark.asyncio
async def test_primary_failure_falls_through_to_secondary(ai_event, fixed_clock):
  primary = failing_client("openai", "HTTP 500")
  secondary = ScriptedClient("deepseek", event=ai_event)
  generator = EventGenerator(primary=primary, secondary=secondary, clock=fixed_clock)

  outcome = await generator.generate(WORKSHOP)

  assert outcome.source == "secondary"
  assert outcome.error is None
  assert primary.calls == 1
  assert secondary.calls == 1


@pytest.mark.asyncio
async def test_only_secondary_configured_reports_secondary(ai_event, fixed_clock):
  generator = EventGenerator(secondary=ScriptedClient("deepseek", event=ai_event), clock=fixed_clock)

  outcome = await generator.generate(WORKSHOP)

  assert outcome.source == "secondary"


@pytest.mark.asyncio
async def test_both_failing_returns_fallback_with_diagnostic(fixed_clock):
  primary = failing_client("openai", "HTTP 500")
  secondary = failing_client("deepseek", "malformed response: not JSON")
  generator = EventGenerator(primary=primary, secondary=secondary, clock=fixed_clock)

  outcome = await generator.generate(WORKSHOP)

  assert outcome.source == "fallback"
  assert outcome.event.description == "A 2-hour coding bootcamp for teens"
  assert outcome.event.isFree is True
  assert outcome.event.suggestedPrice == 0
  assert outcome.error
  assert "openai" in outcome.error
  assert "deepseek" in outcome.error
  assert primary.calls == 1
  assert secondary.calls == 1


@pytest.mark.asyncio
async def test_single_configured_provider_failing_sets_error(fixed_clock):
  generator = EventGenerator(primary=failing_client("openai"), clock=fixed_clock)

  outcome = await generator.generate(WORKSHOP)

  assert outcome.source == "fallback"
  assert outcome.error == "primary (openai): HTTP 503"


@pytest.mark.asyncio
async def test_unexpected_provider_exceptions_are_absorbed(ai_event, fixed_clock):
  primary = ScriptedClient("openai", error=RuntimeError("socket closed"))
  secondary = ScriptedClient("deepseek", event=ai_event)
  generator = EventGenerator(primary=primary, secondary=secondary, clock=fixed_clock)

  outcome = await generator.generate(WORKSHOP)

  assert outcome.source == "secondary"


@pytest.mark.asyncio
async def test_provider_returning_nothing_counts_as_failure(fixed_clock):
  generator = EventGenerator(primary=ScriptedClient("openai", event=None), clock=fixed_clock)

  outcome = await generator.generate(WORKSHOP)

  assert outcome.source == "fallback"
  assert "no draft" in outcome.error


@pytest.mark.asyncio
async def test_fallback_is_deterministic_for_a_fixed_clock(fixed_clock):
  request = GenerationRequest(category="charity-fundraiser", details="")
  generator = EventGenerator(clock=fixed_clock)

  first = await generator.generate(request)
  second = await generator.generate(request)

  assert first.model_dump() == second.model_dump()
  assert first.event.isFree is False
  assert first.event.suggestedPrice == 25
  assert first.event.capacity == 50
  assert first.event.description == "Join us for this special event."


def test_build_event_generator_reads_environment(no_provider_env, monkeypatch):
  generator = build_event_generator()
  assert generator.primary is None
  assert generator.secondary is None

  monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
  monkeypatch.setenv("DEEPSEEK_API_KEY", "ds-test")
  generator = build_event_generator()
  assert isinstance(generator.primary, OpenAiClient)
  assert isinstance(generator.secondary, DeepSeekClient)
