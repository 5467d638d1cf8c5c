import json
import logging
import os
import re
from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from event_generator.models import GeneratedEvent, GenerationRequest

logger = logging.getLogger("ai_event_generator")

DEFAULT_TIMEOUT = 30.0

SYSTEM_PROMPT = """
You are an event planning assistant. Create an event based on the category and description provided by the user.
Your response should be a JSON object with these fields:
{
  "title": "Event title",
  "description": "Detailed event description",
  "location": {
    "name": "Venue name",
    "address": "Venue address",
    "city": "City name",
    "country": "Country name"
  },
  "suggestedDate": "YYYY-MM-DD",
  "capacity": 50,
  "isFree": true,
  "suggestedPrice": 0,
  "categoryRecommendations": ["tag1", "tag2"]
}
capacity must be at least 1 and suggestedPrice must not be negative.
""".strip()

_FENCED_JSON = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)


class ProviderError(Exception):
  """A single provider attempt failed; the coordinator moves on to the next path."""

  def __init__(self, provider: str, reason: str) -> None:
    super().__init__(f"{provider}: {reason}")
    self.provider = provider
    self.reason = reason


def build_user_prompt(request: GenerationRequest) -> str:
  return (
    f'Create an event in the category "{request.category}" with these details: "{request.details}".\n'
    "Format as valid JSON only with no extra text."
  )


def parse_event_content(content: str) -> GeneratedEvent:
  """Parse the model's message text into a draft.

  Raises ``json.JSONDecodeError`` for non-JSON text and ``ValidationError`` when
  the JSON does not have the draft's shape.
  """
  text = content.strip()
  fenced = _FENCED_JSON.match(text)
  if fenced:
    text = fenced.group(1)
  parsed = json.loads(text)
  if not isinstance(parsed, dict):
    raise ValueError(f"expected a JSON object, got {type(parsed).__name__}")
  return GeneratedEvent.model_validate(parsed)


def _message_content(data: Any) -> str:
  try:
    content = data["choices"][0]["message"]["content"]
  except (KeyError, IndexError, TypeError) as exc:
    raise ValueError("response has no choices[0].message.content") from exc
  if not isinstance(content, str) or not content.strip():
    raise ValueError("response message content is empty")
  return content


class LlmClient(ABC):
  name: str = "llm"

  @abstractmethod
  async def generate_event(self, request: GenerationRequest) -> GeneratedEvent:
    """Return a validated draft or raise ``ProviderError``."""
    raise NotImplementedError


class OpenAiCompatibleClient(LlmClient):
  """Chat-completions client for any OpenAI-compatible JSON-mode endpoint."""

  def __init__(
    self,
    api_key: str,
    base_url: str,
    model: str,
    name: str,
    timeout: float = DEFAULT_TIMEOUT,
    transport: Optional[httpx.AsyncBaseTransport] = None,
  ) -> None:
    self.api_key = api_key
    self.base_url = base_url.rstrip("/")
    self.model = model
    self.name = name
    self.timeout = timeout
    self.transport = transport

  def _payload(self, request: GenerationRequest) -> dict:
    return {
      "model": self.model,
      "messages": [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": build_user_prompt(request)},
      ],
      "response_format": {"type": "json_object"},
    }

  async def generate_event(self, request: GenerationRequest) -> GeneratedEvent:
    headers = {"Authorization": f"Bearer {self.api_key}"}
    try:
      async with httpx.AsyncClient(timeout=self.timeout, headers=headers, transport=self.transport) as client:
        resp = await client.post(f"{self.base_url}/chat/completions", json=self._payload(request))
    except httpx.HTTPError as exc:
      raise ProviderError(self.name, f"request failed: {exc.__class__.__name__}: {exc}") from exc

    if not resp.is_success:
      raise ProviderError(self.name, f"HTTP {resp.status_code}")

    try:
      data = resp.json()
    except ValueError as exc:
      raise ProviderError(self.name, "response body is not JSON") from exc

    try:
      content = _message_content(data)
      return parse_event_content(content)
    except ValidationError as exc:
      raise ProviderError(self.name, f"draft failed validation ({exc.error_count()} errors)") from exc
    except ValueError as exc:
      raise ProviderError(self.name, f"malformed response: {exc}") from exc


class OpenAiClient(OpenAiCompatibleClient):
  def __init__(
    self,
    api_key: str,
    model: str = "gpt-4o-mini",
    base_url: str = "https://api.openai.com/v1",
    timeout: float = DEFAULT_TIMEOUT,
    transport: Optional[httpx.AsyncBaseTransport] = None,
  ) -> None:
    super().__init__(api_key, base_url, model, "openai", timeout=timeout, transport=transport)


class DeepSeekClient(OpenAiCompatibleClient):
  def __init__(
    self,
    api_key: str,
    model: str = "deepseek-chat",
    base_url: str = "https://api.deepseek.com/v1",
    timeout: float = DEFAULT_TIMEOUT,
    transport: Optional[httpx.AsyncBaseTransport] = None,
  ) -> None:
    super().__init__(api_key, base_url, model, "deepseek", timeout=timeout, transport=transport)


def _timeout_from_env() -> float:
  raw = os.getenv("AI_PROVIDER_TIMEOUT")
  if not raw:
    return DEFAULT_TIMEOUT
  try:
    value = float(raw)
  except ValueError:
    logger.warning("AI_PROVIDER_TIMEOUT=%r is not a number; using %.0fs.", raw, DEFAULT_TIMEOUT)
    return DEFAULT_TIMEOUT
  if value <= 0:
    logger.warning("AI_PROVIDER_TIMEOUT must be positive; using %.0fs.", DEFAULT_TIMEOUT)
    return DEFAULT_TIMEOUT
  return value


def get_primary_client() -> Optional[LlmClient]:
  token = os.getenv("OPENAI_API_KEY")
  if not token:
    logger.debug("OPENAI_API_KEY not set; primary provider disabled.")
    return None
  return OpenAiClient(
    api_key=token,
    model=os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
    base_url=os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1"),
    timeout=_timeout_from_env(),
  )


def get_secondary_client() -> Optional[LlmClient]:
  token = os.getenv("DEEPSEEK_API_KEY")
  if not token:
    logger.debug("DEEPSEEK_API_KEY not set; secondary provider disabled.")
    return None
  return DeepSeekClient(
    api_key=token,
    model=os.getenv("DEEPSEEK_MODEL", "deepseek-chat"),
    base_url=os.getenv("DEEPSEEK_BASE_URL", "https://api.deepseek.com/v1"),
    timeout=_timeout_from_env(),
  )
