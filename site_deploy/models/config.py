"""Configuration data models"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..constants import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_HTTP_TIMEOUT,
    DEFAULT_RETRY_COUNT,
    DEFAULT_RETRY_DELAY,
    DEFAULT_SETTLE_DELAY,
    FIREBASE_API_BASE,
    GITHUB_API_BASE,
    Provider,
)


@dataclass
class UploadConfig:
    """Batched upload behaviour shared by every provider"""

    batch_size: int = DEFAULT_BATCH_SIZE
    max_attempts: int = DEFAULT_RETRY_COUNT
    retry_delay: float = DEFAULT_RETRY_DELAY
    settle_delay: float = DEFAULT_SETTLE_DELAY
    timeout: float = DEFAULT_HTTP_TIMEOUT

    def __post_init__(self):
        """Validate upload configuration"""
        if self.batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.retry_delay < 0 or self.settle_delay < 0:
            raise ValueError("Delays cannot be negative")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "batch_size": self.batch_size,
            "max_attempts": self.max_attempts,
            "retry_delay": self.retry_delay,
            "settle_delay": self.settle_delay,
            "timeout": self.timeout,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'UploadConfig':
        """Create from dictionary"""
        return cls(**data)


@dataclass
class ProviderConfig:
    """Credentials and endpoint for a hosting provider"""

    token: Optional[str] = None
    api_url: Optional[str] = None
    options: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data: Dict[str, Any] = {}
        if self.token:
            data["token"] = self.token
        if self.api_url:
            data["api_url"] = self.api_url
        if self.options:
            data["options"] = self.options
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ProviderConfig':
        """Create from dictionary"""
        return cls(
            token=data.get("token"),
            api_url=data.get("api_url"),
            options=data.get("options", {}),
        )


DEFAULT_API_URLS = {
    Provider.GITHUB: GITHUB_API_BASE,
    Provider.FIREBASE: FIREBASE_API_BASE,
}


@dataclass
class AppConfig:
    """Top level configuration loaded from .site-deploy.yaml"""

    github: ProviderConfig = field(default_factory=ProviderConfig)
    firebase: ProviderConfig = field(default_factory=ProviderConfig)
    upload: UploadConfig = field(default_factory=UploadConfig)

    def get_provider(self, provider: Provider) -> ProviderConfig:
        """Get configuration for a provider"""
        if provider == Provider.GITHUB:
            return self.github
        return self.firebase

    def api_url(self, provider: Provider) -> str:
        """Configured API base URL, falling back to the public endpoint"""
        return self.get_provider(provider).api_url or DEFAULT_API_URLS[provider]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "github": self.github.to_dict(),
            "firebase": self.firebase.to_dict(),
            "upload": self.upload.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'AppConfig':
        """Create from dictionary"""
        data = data or {}
        return cls(
            github=ProviderConfig.from_dict(data.get("github") or {}),
            firebase=ProviderConfig.from_dict(data.get("firebase") or {}),
            upload=UploadConfig.from_dict(data.get("upload") or {}),
        )
