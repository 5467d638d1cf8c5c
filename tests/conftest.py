"""Shared fixtures: a fixed clock, canned drafts and scripted LLM clients."""

from datetime import datetime, timezone
from typing import Optional

import pytest

from event_generator.llm import LlmClient, ProviderError
from event_generator.models import EventLocation, GeneratedEvent, GenerationRequest

FIXED_NOW = datetime(2026, 10, 19, 12, 30, tzinfo=timezone.utc)

PROVIDER_ENV_VARS = (
  "OPENAI_API_KEY",
  "OPENAI_MODEL",
  "OPENAI_BASE_URL",
  "DEEPSEEK_API_KEY",
  "DEEPSEEK_MODEL",
  "DEEPSEEK_BASE_URL",
  "AI_PROVIDER_TIMEOUT",
)


class ScriptedClient(LlmClient):
  """LlmClient that returns a fixed draft or raises, and counts calls."""

  def __init__(self, name: str, event: Optional[GeneratedEvent] = None, error: Optional[Exception] = None) -> None:
    self.name = name
    self.event = event
    self.error = error
    self.calls = 0
    self.requests = []

  async def generate_event(self, request: GenerationRequest) -> GeneratedEvent:
    self.calls += 1
    self.requests.append(request)
    if self.error is not None:
      raise self.error
    return self.event


def failing_client(name: str, reason: str = "HTTP 503") -> ScriptedClient:
  return ScriptedClient(name, error=ProviderError(name, reason))


@pytest.fixture
def fixed_clock():
  return lambda: FIXED_NOW


@pytest.fixture
def ai_event() -> GeneratedEvent:
  return GeneratedEvent(
    title="Teen Coding Bootcamp",
    description="Two hours of hands-on Python for teenagers.",
    location=EventLocation(
      name="Community Hall",
      address="12 High Street",
      city="Leicester",
      country="United Kingdom",
    ),
    suggestedDate="2026-11-14",
    capacity=30,
    isFree=True,
    suggestedPrice=0,
    categoryRecommendations=["workshop", "education"],
  )


@pytest.fixture
def ai_event_json(ai_event) -> dict:
  return ai_event.model_dump()


@pytest.fixture
def no_provider_env(monkeypatch):
  for name in PROVIDER_ENV_VARS:
    monkeypatch.delenv(name, raising=False)
