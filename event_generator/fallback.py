from datetime import datetime, timedelta

from event_generator.categories import (
  category_display_name,
  default_price_for,
  map_to_event_category,
)
from event_generator.models import EventLocation, GeneratedEvent, GenerationRequest

DEFAULT_DESCRIPTION = "Join us for this special event."
DEFAULT_CAPACITY = 50
SUGGESTED_DATE_OFFSET = timedelta(days=7)


def _short_date(moment: datetime) -> str:
  # Same shape the wizard shows, e.g. 10/19/2026.
  return f"{moment.month}/{moment.day}/{moment.year}"


def synthesize_event(request: GenerationRequest, now: datetime) -> GeneratedEvent:
  """Build a placeholder draft from the request alone when no provider produced one.

  The result depends only on the request and ``now``, so the same inputs at the
  same instant always give the same draft.
  """
  price = default_price_for(request.category)
  details = request.details or ""
  return GeneratedEvent(
    title=f"{category_display_name(request.category)} - {_short_date(now)}",
    description=details if details.strip() else DEFAULT_DESCRIPTION,
    location=EventLocation(
      name="To be determined",
      address="Address pending",
      city="City",
      country="Country",
    ),
    suggestedDate=(now + SUGGESTED_DATE_OFFSET).date().isoformat(),
    capacity=DEFAULT_CAPACITY,
    isFree=price == 0,
    suggestedPrice=price,
    categoryRecommendations=[map_to_event_category(request.category)],
  )
