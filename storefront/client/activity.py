from collections import deque
from datetime import datetime, timezone
from typing import Deque, List, Literal

from pydantic import BaseModel, Field

from storefront.domain.services.constants import MAX_GUEST_ACTIVITY

ActivityType = Literal["view_product", "view_category", "search", "click_whatsapp", "click_call"]


class GuestActivity(BaseModel):
    type: ActivityType
    ref: str = ""                       # product/category id or search query
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class GuestActivityLog:
    """Last MAX_GUEST_ACTIVITY guest events, in memory only (never persisted)."""

    def __init__(self, maxlen: int = MAX_GUEST_ACTIVITY):
        self._events: Deque[GuestActivity] = deque(maxlen=maxlen)

    def record(self, type: ActivityType, ref: str = "") -> GuestActivity:
        event = GuestActivity(type=type, ref=ref)
        self._events.append(event)
        return event

    def events(self) -> List[GuestActivity]:
        """Oldest first."""
        return list(self._events)

    def clear(self) -> None:
        self._events.clear()

    def __len__(self) -> int:
        return len(self._events)
