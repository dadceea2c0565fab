"""Configuration management service"""

import logging
import os
from pathlib import Path
from typing import Optional

import yaml

from ..api.exceptions import ConfigurationError
from ..constants import (
    ENV_CONFIG_PATH,
    ENV_FIREBASE_TOKEN,
    ENV_GITHUB_TOKEN,
    ErrorCode,
    PROJECT_CONFIG_FILE,
    Provider,
)
from ..models.config import AppConfig

logger = logging.getLogger(__name__)

TOKEN_ENV_VARS = {
    Provider.GITHUB: ENV_GITHUB_TOKEN,
    Provider.FIREBASE: ENV_FIREBASE_TOKEN,
}


class ConfigService:
    """Service for loading configuration and resolving credentials"""

    def __init__(self, project_root: Optional[Path] = None, config_path: Optional[Path] = None):
        """Initialize config service

        Args:
            project_root: Directory holding .site-deploy.yaml (defaults to cwd)
            config_path: Explicit configuration file; must exist when given
        """
        self.project_root = Path(project_root) if project_root else Path.cwd()
        self.explicit = config_path is not None or bool(os.environ.get(ENV_CONFIG_PATH))

        if config_path is not None:
            self.config_path = Path(config_path)
        elif os.environ.get(ENV_CONFIG_PATH):
            self.config_path = Path(os.environ[ENV_CONFIG_PATH])
        else:
            self.config_path = self.project_root / PROJECT_CONFIG_FILE

        self._config: Optional[AppConfig] = None

    @property
    def config(self) -> AppConfig:
        """Get current configuration (lazy load)"""
        if self._config is None:
            self.load_config()
        return self._config

    def load_config(self) -> AppConfig:
        """Load configuration from file

        A missing default file yields the built-in defaults; a missing
        explicit file is an error.

        Returns:
            Loaded configuration

        Raises:
            ConfigurationError: If the file is missing or malformed
        """
        if not self.config_path.exists():
            if self.explicit:
                raise ConfigurationError(f"Configuration file not found: {self.config_path}")
            logger.debug(f"No {PROJECT_CONFIG_FILE} in {self.project_root}, using defaults")
            self._config = AppConfig()
            return self._config

        with open(self.config_path, 'r', encoding='utf-8') as f:
            content = f.read()

        # Simple environment variable expansion
        content = os.path.expandvars(content)

        try:
            data = yaml.safe_load(content)
            if data is not None and not isinstance(data, dict):
                raise ValueError("top level must be a mapping")
            self._config = AppConfig.from_dict(data)
        except (yaml.YAMLError, ValueError, TypeError) as e:
            raise ConfigurationError(
                f"Invalid configuration in {self.config_path}: {e}",
                ErrorCode.CONFIG_FORMAT_ERROR,
            ) from e

        logger.info(f"Loaded configuration from {self.config_path}")
        return self._config

    def resolve_token(self, provider: Provider, explicit: Optional[str] = None) -> str:
        """Resolve the access token for a provider

        Precedence: explicit value, configuration file, environment variable.

        Args:
            provider: Hosting provider
            explicit: Token given on the command line

        Returns:
            Access token

        Raises:
            ConfigurationError: If no token is available
        """
        token = explicit or self.config.get_provider(provider).token or os.environ.get(TOKEN_ENV_VARS[provider])
        if not token:
            raise ConfigurationError(
                f"No {provider.value} token found. Pass --token, set "
                f"{TOKEN_ENV_VARS[provider]} or add it to {PROJECT_CONFIG_FILE}"
            )
        return token
