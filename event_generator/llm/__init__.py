from event_generator.llm.client import (
  LlmClient,
  OpenAiCompatibleClient,
  OpenAiClient,
  DeepSeekClient,
  ProviderError,
  get_primary_client,
  get_secondary_client,
)

__all__ = [
  "LlmClient",
  "OpenAiCompatibleClient",
  "OpenAiClient",
  "DeepSeekClient",
  "ProviderError",
  "get_primary_client",
  "get_secondary_client",
]
