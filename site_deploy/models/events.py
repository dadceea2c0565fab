# site_deploy/models/events.py
"""Deployment status events"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional


class EventKind(Enum):
    """Severity of a deployment event"""
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class DeployEvent:
    """Single step reported by an in-progress deployment"""
    step: str
    kind: EventKind = EventKind.INFO
    details: Optional[str] = None
    progress: Optional[int] = None

    def __post_init__(self):
        if self.progress is not None and not 0 <= self.progress <= 100:
            raise ValueError(f"Progress out of range: {self.progress}")

    @property
    def is_error(self) -> bool:
        return self.kind == EventKind.ERROR

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {"step": self.step, "type": self.kind.value}
        if self.details is not None:
            data["details"] = self.details
        if self.progress is not None:
            data["progress"] = self.progress
        return data


EventSink = Callable[[DeployEvent], None]


class EventLog:
    """Append-only event sink that records everything it receives.

    Can be passed directly as the sink of a deployment, optionally
    forwarding each event to another sink.
    """

    def __init__(self, forward: Optional[EventSink] = None):
        self._events: List[DeployEvent] = []
        self._forward = forward

    def __call__(self, event: DeployEvent) -> None:
        self._events.append(event)
        if self._forward is not None:
            self._forward(event)

    @property
    def events(self) -> List[DeployEvent]:
        return list(self._events)

    @property
    def errors(self) -> List[DeployEvent]:
        return [e for e in self._events if e.is_error]

    @property
    def last(self) -> Optional[DeployEvent]:
        return self._events[-1] if self._events else None

    def steps(self) -> List[str]:
        return [e.step for e in self._events]

    def __len__(self) -> int:
        return len(self._events)
