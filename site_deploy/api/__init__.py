# site_deploy/api/__init__.py
"""API layer for site-deploy-tool"""

# Exceptions first: core modules import them while this package initializes
from .exceptions import (
    DeployToolError,
    ConfigurationError,
    CorruptArchiveError,
    ValidationError,
    DeployError,
    ConflictRecoverable,
    TransientNetworkError,
    FatalProviderError,
)
from .analyzer import analyze, analyze_archive, analyze_path, validate_upload
from .deployer import Deployer, deploy

__all__ = [
    # Main classes
    "Deployer",

    # Convenience functions
    "analyze",
    "analyze_archive",
    "analyze_path",
    "validate_upload",
    "deploy",

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
