from datetime import date, datetime
from typing import List, Optional, Literal
from pydantic import BaseModel, Field, StrictBool, field_validator


GenerationSource = Literal["primary", "secondary", "fallback"]


class EventLocation(BaseModel):
  name: str = Field(..., min_length=1)
  address: str = Field(..., min_length=1)
  city: str = Field(..., min_length=1)
  country: str = Field(..., min_length=1)

  @field_validator("name", "address", "city", "country")
  @classmethod
  def _not_blank(cls, value: str) -> str:
    if not value.strip():
      raise ValueError("must not be blank")
    return value


class GeneratedEvent(BaseModel):
  """Structured event draft handed back to the event creation wizard."""

  title: str = Field(..., min_length=1)
  description: str = Field(..., min_length=1)
  location: EventLocation
  suggestedDate: str
  capacity: int = Field(..., ge=1, strict=True)
  isFree: StrictBool
  suggestedPrice: float = Field(0, ge=0)
  categoryRecommendations: List[str] = []

  @field_validator("title", "description")
  @classmethod
  def _not_blank(cls, value: str) -> str:
    if not value.strip():
      raise ValueError("must not be blank")
    return value

  @field_validator("suggestedDate", mode="before")
  @classmethod
  def _iso_date(cls, value):
    if isinstance(value, datetime):
      return value.date().isoformat()
    if isinstance(value, date):
      return value.isoformat()
    if not isinstance(value, str):
      raise ValueError("suggestedDate must be an ISO-8601 date string")
    text = value.strip()
    if text.endswith(("Z", "z")):
      text = text[:-1] + "+00:00"
    # Models sometimes answer with a full timestamp; keep the date part.
    try:
      return datetime.fromisoformat(text).date().isoformat()
    except ValueError as exc:
      raise ValueError(f"suggestedDate is not an ISO-8601 date: {value!r}") from exc

  @field_validator("categoryRecommendations", mode="before")
  @classmethod
  def _tags(cls, value):
    if value is None:
      return []
    return value


class GenerationRequest(BaseModel):
  """Category plus free-text description the draft is generated from."""

  category: str
  details: str


class GenerationOutcome(BaseModel):
  """Draft plus the path that produced it; also the 200 response body.

  ``error`` is only set when a configured provider failed, never when the
  fallback was used because no provider was configured.
  """

  event: GeneratedEvent
  source: GenerationSource
  error: Optional[str] = None


class GenerateEventPayload(BaseModel):
  """Body posted by the wizard. Presence of both fields is checked by the route."""

  eventCategory: Optional[str] = None
  eventDetails: Optional[str] = None


class ErrorResponse(BaseModel):
  error: str
