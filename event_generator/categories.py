import re
from typing import Dict, List, Optional

from pydantic import BaseModel


class EventCategoryOption(BaseModel):
  """Category the organizer picks in the first step of the wizard."""

  id: str
  name: str


EVENT_CATEGORIES: List[EventCategoryOption] = [
  EventCategoryOption(id="islamic-talk", name="Islamic Talk"),
  EventCategoryOption(id="charity-fundraiser", name="Charity Fundraiser"),
  EventCategoryOption(id="umrah-trip", name="Umrah Trip"),
  EventCategoryOption(id="business-networking", name="Business Networking"),
  EventCategoryOption(id="workshop", name="Workshop"),
  EventCategoryOption(id="other", name="Other"),
]

# Wizard category id -> category stored on published events.
_STORED_CATEGORY: Dict[str, str] = {
  "islamic-talk": "lecture",
  "charity-fundraiser": "charity",
  "umrah-trip": "umrah",
  "business-networking": "social",
  "workshop": "workshop",
  "other": "other",
}

# Categories that default to a ticket price in placeholder drafts.
_PAID_CATEGORY_PRICES: Dict[str, float] = {
  "charity-fundraiser": 25,
}


def slugify_category(value: str | None) -> str:
  """Normalise ids and display names alike: 'Charity Fundraiser' -> 'charity-fundraiser'."""
  text = (value or "").strip().lower()
  text = re.sub(r"[\s_]+", "-", text)
  return re.sub(r"-{2,}", "-", text).strip("-")


def get_category(value: str | None) -> Optional[EventCategoryOption]:
  slug = slugify_category(value)
  for option in EVENT_CATEGORIES:
    if option.id == slug:
      return option
  return None


def category_display_name(value: str | None) -> str:
  """Catalogue name when known, otherwise a humanised version of the id."""
  option = get_category(value)
  if option:
    return option.name
  slug = slugify_category(value)
  if not slug:
    return "Event"
  return " ".join(part.capitalize() for part in slug.split("-") if part)


def map_to_event_category(value: str | None) -> str:
  return _STORED_CATEGORY.get(slugify_category(value), "other")


def default_price_for(value: str | None) -> float:
  """0 for free categories."""
  return _PAID_CATEGORY_PRICES.get(slugify_category(value), 0)
