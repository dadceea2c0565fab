"""Deployment orchestrator factory"""

from typing import Dict, List, Optional, Type, Union

from .base import Orchestrator
from .firebase import FirebaseHostingOrchestrator
from .github import GitHubPagesOrchestrator
from ..constants import Provider
from ..models.config import AppConfig


class OrchestratorFactory:
    """Factory for creating orchestrator instances"""

    # Registry of orchestrators
    _backends: Dict[Provider, Type[Orchestrator]] = {
        Provider.GITHUB: GitHubPagesOrchestrator,
        Provider.FIREBASE: FirebaseHostingOrchestrator,
    }

    @classmethod
    def create(cls,
               provider: Union[Provider, str],
               config: Optional[AppConfig] = None,
               **kwargs) -> Orchestrator:
        """Create a fresh orchestrator for one deployment

        Args:
            provider: Provider enum or its name
            config: Application configuration (API URL and upload settings)
            **kwargs: Passed to the orchestrator (e.g. transport)

        Returns:
            Orchestrator instance

        Raises:
            ValueError: If provider is not supported
        """
        if not isinstance(provider, Provider):
            try:
                provider = Provider(provider)
            except ValueError:
                raise ValueError(f"Invalid provider: {provider}")

        if provider not in cls._backends:
            raise ValueError(f"Unsupported provider: {provider.value}")

        config = config or AppConfig()
        backend_class = cls._backends[provider]
        return backend_class(
            config=config.upload,
            api_url=config.api_url(provider),
            **kwargs
        )

    @classmethod
    def register_backend(cls, provider: Provider, backend_class: Type[Orchestrator]):
        """Register an orchestrator for a provider

        Args:
            provider: Provider enum
            backend_class: Orchestrator class
        """
        cls._backends[provider] = backend_class

    @classmethod
    def get_supported_providers(cls) -> List[str]:
        """Get list of supported provider names"""
        return [p.value for p in cls._backends.keys()]
