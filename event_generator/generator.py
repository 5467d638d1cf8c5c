import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional, Tuple

from event_generator.fallback import synthesize_event
from event_generator.llm import LlmClient, ProviderError, get_primary_client, get_secondary_client
from event_generator.models import GeneratedEvent, GenerationOutcome, GenerationRequest, GenerationSource

logger = logging.getLogger("ai_event_generator")


def _utcnow() -> datetime:
  return datetime.now(timezone.utc)


class EventGenerator:
  """Primary provider, then secondary, then the placeholder draft.

  Each configured provider is tried once, in that fixed order, and only one
  call is ever in flight. ``generate`` never raises.
  """

  def __init__(
    self,
    primary: Optional[LlmClient] = None,
    secondary: Optional[LlmClient] = None,
    clock: Callable[[], datetime] = _utcnow,
  ) -> None:
    self.primary = primary
    self.secondary = secondary
    self.clock = clock

  async def _attempt(
    self, source: GenerationSource, client: LlmClient, request: GenerationRequest
  ) -> Tuple[Optional[GeneratedEvent], Optional[str]]:
    """Run one provider; returns (draft, None) on success or (None, reason)."""
    try:
      event = await client.generate_event(request)
    except ProviderError as exc:
      reason = exc.reason
    except Exception as exc:
      reason = f"unexpected {exc.__class__.__name__}: {exc}"
    else:
      if isinstance(event, GeneratedEvent):
        return event, None
      reason = "provider returned no draft"
    logger.warning("%s provider %s failed: %s", source.capitalize(), client.name, reason)
    return None, f"{source} ({client.name}): {reason}"

  async def generate(self, request: GenerationRequest) -> GenerationOutcome:
    failures: List[str] = []
    chain: List[Tuple[GenerationSource, Optional[LlmClient]]] = [
      ("primary", self.primary),
      ("secondary", self.secondary),
    ]
    for source, client in chain:
      if client is None:
        continue
      event, failure = await self._attempt(source, client, request)
      if event is not None:
        return GenerationOutcome(event=event, source=source)
      failures.append(failure)

    event = synthesize_event(request, self.clock())
    if failures:
      return GenerationOutcome(event=event, source="fallback", error="; ".join(failures))
    return GenerationOutcome(event=event, source="fallback")


def build_event_generator() -> EventGenerator:
  """Create a generator wired to whichever providers the environment enables."""
  return EventGenerator(primary=get_primary_client(), secondary=get_secondary_client())
