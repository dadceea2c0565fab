"""Deployer API for deployment operations"""

import asyncio
import logging
from pathlib import Path
from typing import Optional, Union

import httpx

from ..constants import ErrorCode, Provider
from ..core.patch_generator import generate_patches
from ..models import (
    AppConfig,
    DeployResult,
    EventLog,
    EventSink,
    OperationStatus,
    ProjectAnalysis,
)
from ..storage import OrchestratorFactory
from .analyzer import analyze_path
from .exceptions import DeployToolError

logger = logging.getLogger(__name__)


class Deployer:
    """Deployer class for publishing analyzed projects"""

    def __init__(self,
                 config: Optional[AppConfig] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Initialize deployer

        Args:
            config: Application configuration
            transport: httpx transport override for every orchestrator
        """
        self.config = config or AppConfig()
        self.transport = transport

    async def deploy_analysis(self,
                              provider: Union[Provider, str],
                              analysis: ProjectAnalysis,
                              target: str,
                              token: str,
                              *,
                              description: Optional[str] = None,
                              private: bool = False,
                              custom_domain: Optional[str] = None,
                              apply_patches: bool = True,
                              sink: Optional[EventSink] = None) -> DeployResult:
        """
        Deploy an analyzed project

        Patches are generated for GitHub Pages only; Firebase serves the
        upload from the site root as is.

        Args:
            provider: Hosting provider
            analysis: Analyzed project
            target: Repository name or Firebase site ID
            token: Provider access token
            description: Repository description
            private: Create a private repository
            custom_domain: Custom domain for GitHub Pages
            apply_patches: Generate and apply deployability patches
            sink: Receives every DeployEvent as it happens

        Returns:
            DeployResult: Deployment result, failed when any step failed
        """
        provider = Provider(provider)
        events = EventLog(forward=sink)
        result = DeployResult(
            status=OperationStatus.IN_PROGRESS,
            provider=provider.value,
            target=target,
            project_type=analysis.project_type.value,
            warnings=list(analysis.warnings),
        )

        patches = []
        if apply_patches and provider == Provider.GITHUB:
            patches = generate_patches(analysis, target)
        result.patches_applied = [p.description for p in patches]

        orchestrator = OrchestratorFactory.create(provider, self.config, transport=self.transport)
        try:
            result.url = await orchestrator.deploy(
                token,
                target,
                analysis,
                patches,
                custom_domain,
                events,
                description=description,
                private=private,
            )
            result.message = f"Deployed to {result.url}"
            result.complete(OperationStatus.SUCCESS)
        except DeployToolError as e:
            result.add_error(e.error_code or ErrorCode.DEPLOY_FAILED, str(e))
            result.message = str(e)
            result.complete(OperationStatus.FAILED)
        finally:
            result.events = events.events

        return result

    async def deploy_path(self,
                          provider: Union[Provider, str],
                          path: Union[str, Path],
                          target: str,
                          token: str,
                          fix_paths: bool = False,
                          **options) -> DeployResult:
        """
        Analyze a zip file or folder and deploy it

        Args:
            provider: Hosting provider
            path: Zip file or folder
            target: Repository name or Firebase site ID
            token: Provider access token
            fix_paths: Rewrite root-absolute asset references first
            **options: See deploy_analysis

        Returns:
            DeployResult: Deployment result

        Raises:
            ValidationError: If the upload is rejected
            CorruptArchiveError: If the archive cannot be read
        """
        analysis = await analyze_path(path, fix_paths=fix_paths)
        return await self.deploy_analysis(provider, analysis, target, token, **options)


def deploy(provider: Union[Provider, str],
           path: Union[str, Path],
           target: str,
           token: str,
           config: Optional[AppConfig] = None,
           **options) -> DeployResult:
    """
    Deploy a zip file or folder

    This is a convenience function that creates a Deployer instance
    and performs the deployment.

    Args:
        provider: Hosting provider
        path: Zip file or folder
        target: Repository name or Firebase site ID
        token: Provider access token
        config: Application configuration
        **options: Additional deployment options

    Returns:
        DeployResult: Deployment result
    """
    deployer = Deployer(config)
    return asyncio.run(deployer.deploy_path(provider, path, target, token, **options))
