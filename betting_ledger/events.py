"""
Event registry: the current catalog of sporting events.

The catalog is always replaced wholesale; there is no merge and no delete.
"""

import logging

from betting_ledger.errors import InvalidStatusTransition
from betting_ledger.models import EventStatus, SportEvent, StatusUpdate

logger = logging.getLogger(__name__)


class EventRegistry:
    """In-memory catalog of events keyed by id, in caller order."""

    def __init__(self, events: list[SportEvent] | None = None, strict_transitions: bool = False):
        self.strict_transitions = strict_transitions
        self._events: list[SportEvent] = []
        self.set_events(events or [])

    def set_events(self, events: list[SportEvent]) -> list[SportEvent]:
        """Replace the full catalog."""
        self._events = [e.model_copy(deep=True) for e in events]
        logger.debug("Event catalog replaced: %d events", len(self._events))
        return self.all()

    def update_event_status(self, event_id: str, status: EventStatus) -> StatusUpdate:
        """
        Overwrite one event's status.

        Unknown ids are ignored and reported as NOT_FOUND. Backward moves
        (e.g. finished -> live) are accepted unless strict_transitions is on.
        """
        status = EventStatus(status)
        event = self._find(event_id)
        if event is None:
            logger.info("Status update ignored, unknown event %s", event_id)
            return StatusUpdate.NOT_FOUND

        if self.strict_transitions and status.rank < event.status.rank:
            raise InvalidStatusTransition(event_id, event.status.value, status.value)

        event.status = status
        return StatusUpdate.UPDATED

    def _find(self, event_id: str) -> SportEvent | None:
        for event in self._events:
            if event.id == event_id:
                return event
        return None

    def get(self, event_id: str) -> SportEvent | None:
        """Copy of one event, or None."""
        event = self._find(event_id)
        return event.model_copy(deep=True) if event is not None else None

    def all(self) -> list[SportEvent]:
        """Copies of every event; edits go through set_events or update_event_status."""
        return [e.model_copy(deep=True) for e in self._events]

    def __len__(self) -> int:
        return len(self._events)

    def __contains__(self, event_id: object) -> bool:
        return self._find(event_id) is not None
