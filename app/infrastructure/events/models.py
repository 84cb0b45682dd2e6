"""Event records passed through the in-process event bus."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict

from infrastructure.logging import get_correlation_id

# Dispatched by the error classifier for every authentication failure
AUTH_LOGOUT = "auth.logout"


def _current_correlation_id() -> str:
    return get_correlation_id() or str(uuid.uuid4())


@dataclass(frozen=True)
class Event:
    """Something that happened, e.g. ``auth.logout``.

    ``correlation_id`` defaults to the id bound by ``bind_operation_context``
    so that an event raised during a sync cycle can be matched to that
    cycle's log lines.
    """

    event_type: str
    metadata: Dict[str, Any] = field(default_factory=dict)
    correlation_id: str = field(default_factory=_current_correlation_id)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_type": self.event_type,
            "metadata": dict(self.metadata),
            "correlation_id": self.correlation_id,
            "timestamp": self.timestamp.isoformat(),
        }
