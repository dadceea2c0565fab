# site_deploy/services/__init__.py
"""Business logic services for site-deploy-tool"""

from .config_service import ConfigService

__all__ = [
    "ConfigService",
]
