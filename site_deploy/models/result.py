"""Deployment result model returned at the API and CLI boundary"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from .events import DeployEvent


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OperationStatus(Enum):
    """Deployment status"""
    IN_PROGRESS = "in_progress"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class ErrorDetail:
    """Coded error attached to a failed deployment"""
    code: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"code": self.code, "message": self.message}


@dataclass
class DeployResult:
    """Outcome of one deployment

    ``events`` holds every event the orchestrator emitted, in order. A
    failed deployment carries the error that stopped it in ``errors`` and
    has no ``url``.
    """

    status: OperationStatus
    provider: Optional[str] = None
    target: Optional[str] = None
    url: Optional[str] = None
    project_type: Optional[str] = None
    message: str = ""
    patches_applied: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    errors: List[ErrorDetail] = field(default_factory=list)
    events: List[DeployEvent] = field(default_factory=list)
    start_time: datetime = field(default_factory=_utcnow)
    end_time: Optional[datetime] = None

    @property
    def is_success(self) -> bool:
        return self.status == OperationStatus.SUCCESS

    @property
    def is_failed(self) -> bool:
        return self.status == OperationStatus.FAILED

    @property
    def duration(self) -> Optional[float]:
        """Seconds between start and completion, None while in progress"""
        if self.end_time is None:
            return None
        return (self.end_time - self.start_time).total_seconds()

    def add_error(self, code: str, message: str) -> None:
        self.errors.append(ErrorDetail(code=code, message=message))

    def complete(self, status: OperationStatus) -> None:
        """Record the final status and completion time"""
        self.status = status
        self.end_time = _utcnow()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "status": self.status.value,
            "message": self.message,
            "provider": self.provider,
            "target": self.target,
            "url": self.url,
            "project_type": self.project_type,
            "patches_applied": self.patches_applied,
            "warnings": self.warnings,
            "errors": [e.to_dict() for e in self.errors],
            "events": [e.to_dict() for e in self.events],
            "duration": self.duration,
        }
