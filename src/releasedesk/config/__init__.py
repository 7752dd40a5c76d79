"""Application configuration helpers."""

from __future__ import annotations

from .env import env_float, env_int, optional_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .logging import configure_logging
from .storage import (
    DatabaseConfig,
    StorageConfig,
    get_database_config,
    get_database_uri,
    get_storage_config,
)
from .workflow import WorkflowConfig, get_workflow_config

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "MissingConfigurationError",
    "StorageConfig",
    "WorkflowConfig",
    "configure_logging",
    "env_float",
    "env_int",
    "get_database_config",
    "get_database_uri",
    "get_storage_config",
    "get_workflow_config",
    "optional_env_var",
    "require_env_vars",
]
