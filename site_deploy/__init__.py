"""Site Deploy Tool - publish static sites and front-end projects.

Analyzes an uploaded zip archive or project folder, classifies the
framework, warns about common mistakes, generates the patches that make
the project deployable and publishes it to GitHub Pages or Firebase
Hosting.
"""

from .__version__ import __version__, __version_info__, __license__

# Core API
from .api.analyzer import analyze, analyze_archive, analyze_path, validate_upload
from .api.deployer import Deployer, deploy

# Data models
from .models.project import ManifestFile, IgnoredFile, ProjectAnalysis, ProjectType
from .models.patch import Patch
from .models.events import DeployEvent, EventKind, EventLog
from .models.result import DeployResult

# Orchestrators
from .storage import (
    Orchestrator,
    GitHubPagesOrchestrator,
    FirebaseHostingOrchestrator,
    OrchestratorFactory,
)

# Exceptions
from .api.exceptions import (
    DeployToolError,
    ConfigurationError,
    CorruptArchiveError,
    ValidationError,
    DeployError,
    ConflictRecoverable,
    TransientNetworkError,
    FatalProviderError,
)

# Pipeline steps
from .core import fix_absolute_paths, generate_patches

__all__ = [
    # Version information
    "__version__",
    "__version_info__",
    "__license__",

    # Main classes
    "Deployer",

    # Core API functions
    "analyze",
    "analyze_archive",
    "analyze_path",
    "validate_upload",
    "deploy",
    "fix_absolute_paths",
    "generate_patches",

    # Data models
    "ManifestFile",
    "IgnoredFile",
    "ProjectAnalysis",
    "ProjectType",
    "Patch",
    "DeployEvent",
    "EventKind",
    "EventLog",
    "DeployResult",

    # Orchestrators
    "Orchestrator",
    "GitHubPagesOrchestrator",
    "FirebaseHostingOrchestrator",
    "OrchestratorFactory",

    # Exceptions
    "DeployToolError",
    "ConfigurationError",
    "CorruptArchiveError",
    "ValidationError",
    "DeployError",
    "ConflictRecoverable",
    "TransientNetworkError",
    "FatalProviderError",
]
