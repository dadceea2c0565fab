# site_deploy/models/__init__.py
"""Data models for site-deploy-tool"""

from .project import (
    ArchiveEntry,
    ManifestFile,
    IgnoredFile,
    ProjectAnalysis,
    ProjectType,
)
from .patch import Patch
from .events import DeployEvent, EventKind, EventSink, EventLog
from .result import DeployResult, OperationStatus, ErrorDetail
from .config import AppConfig, ProviderConfig, UploadConfig

__all__ = [
    # Project models
    "ArchiveEntry",
    "ManifestFile",
    "IgnoredFile",
    "ProjectAnalysis",
    "ProjectType",

    # Patch models
    "Patch",

    # Event models
    "DeployEvent",
    "EventKind",
    "EventSink",
    "EventLog",

    # Result models
    "DeployResult",
    "OperationStatus",
    "ErrorDetail",

    # Config models
    "AppConfig",
    "ProviderConfig",
    "UploadConfig",
]
