"""Exception definitions for site-deploy-tool API"""

from typing import Optional

from ..constants import ErrorCode


class DeployToolError(Exception):
    """Base exception for site-deploy-tool"""

    def __init__(self, message: str, error_code: str = None):
        super().__init__(message)
        self.error_code = error_code


class ConfigurationError(DeployToolError):
    """Required input is missing or the configuration file is malformed"""

    def __init__(self, message: str, error_code: str = ErrorCode.MISSING_REQUIRED_PARAMETER):
        super().__init__(message, error_code)


class CorruptArchiveError(DeployToolError):
    """Uploaded archive cannot be read"""

    def __init__(self, message: str = "Failed to read archive"):
        super().__init__(message, ErrorCode.CORRUPT_ARCHIVE)


class ValidationError(DeployToolError):
    """Upload does not look like a deployable project"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.INVALID_UPLOAD)


class DeployError(DeployToolError):
    """Deployment operation error"""
    pass


class ConflictRecoverable(DeployError):
    """Provider reports the target already exists or is already enabled.

    Orchestrators catch this and continue on the fallback path; it never
    escapes a deployment.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message, ErrorCode.PROVIDER_CONFLICT)
        self.status_code = status_code


class TransientNetworkError(DeployError):
    """Connection failure, timeout or 5xx/429 response"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message, ErrorCode.NETWORK_TRANSIENT)
        self.status_code = status_code


class FatalProviderError(DeployError):
    """Non-recoverable provider response; aborts the deployment"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message, ErrorCode.PROVIDER_FAILURE)
        self.status_code = status_code
