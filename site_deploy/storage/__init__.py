# site_deploy/storage/__init__.py
"""Hosting provider orchestrators for site-deploy-tool"""

from .base import Orchestrator, PreparedFile
from .github import GitHubPagesOrchestrator
from .firebase import FirebaseHostingOrchestrator
from .factory import OrchestratorFactory

__all__ = [
    'Orchestrator',
    'PreparedFile',
    'GitHubPagesOrchestrator',
    'FirebaseHostingOrchestrator',
    'OrchestratorFactory',
]
