"""
Module Set and Connection Configuration for the API Sync System.

This module defines the configuration consumed by the sync core: the static
mapping of module slugs to collection names, the endpoint templates of the
documentation service and the workspace API, and the credentials of a run.
"""

import os
import yaml
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Union
from urllib.parse import urlparse
from pydantic import BaseModel, Field, field_validator

from ..config import (
    DEFAULT_DOC_HOST, DEFAULT_DOC_URL_TEMPLATE, DEFAULT_MODULES, DEFAULT_PM_BASE_URL,
    DEFAULT_TIMEOUT_SECONDS, DOC_API_KEY_ENV, PM_API_KEY_ENV, PM_WORKSPACE_ID_ENV,
)
from .error_tracker import ConfigurationError


class SyncConfig(BaseModel):
    """Main configuration for the API sync system."""
    modules: Dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_MODULES),
        description="Module slug -> collection name"
    )

    # Documentation service
    doc_url_template: str = Field(default=DEFAULT_DOC_URL_TEMPLATE, description="Doc endpoint template, formatted with module and doc_host")
    doc_host: str = Field(default=DEFAULT_DOC_HOST, description="Documentation service host")

    # Workspace API
    pm_base_url: str = Field(default=DEFAULT_PM_BASE_URL, description="Workspace API base URL")

    # Processing configuration
    timeout: float = Field(default=DEFAULT_TIMEOUT_SECONDS, description="Per-request timeout in seconds")
    max_workers: Optional[int] = Field(None, description="Thread pool size (defaults to one worker per module)")

    # Logging configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: Optional[str] = Field(None, description="Log file path")

    @field_validator('modules')
    @classmethod
    def validate_modules(cls, v):
        """Require at least one module with a non-empty slug and name."""
        if not v:
            raise ValueError('At least one module is required')
        for module, collection_name in v.items():
            if not module or not module.strip():
                raise ValueError('Module slugs must be non-empty')
            if not collection_name or not collection_name.strip():
                raise ValueError(f'Module {module} has an empty collection name')
        return v

    @field_validator('doc_url_template')
    @classmethod
    def validate_doc_url_template(cls, v):
        if '{module}' not in v:
            raise ValueError('doc_url_template must contain {module}')
        return v

    @field_validator('pm_base_url')
    @classmethod
    def validate_pm_base_url(cls, v):
        """Validate URL format."""
        result = urlparse(v)
        if not all([result.scheme, result.netloc]):
            raise ValueError('Invalid URL format')
        return v.rstrip('/')

    @field_validator('timeout')
    @classmethod
    def validate_timeout(cls, v):
        if v <= 0:
            raise ValueError('timeout must be positive')
        return v

    @field_validator('max_workers')
    @classmethod
    def validate_max_workers(cls, v):
        if v is not None and v < 1:
            raise ValueError('max_workers must be at least 1')
        return v

    @classmethod
    def default(cls) -> 'SyncConfig':
        """Configuration of the reference deployment."""
        return cls()

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> 'SyncConfig':
        """Load configuration from YAML file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration file {path} must contain a mapping, got {type(data).__name__}")
        return cls(**data)

    def to_yaml(self, path: Union[str, Path]) -> None:
        """Save configuration to YAML file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        data = self.model_dump(mode='json')

        with open(path, 'w', encoding='utf-8') as f:
            yaml.dump(data, f, default_flow_style=False, allow_unicode=True)

    def doc_url(self, module: str) -> str:
        """Build the documentation endpoint of a module."""
        return self.doc_url_template.format(module=module, doc_host=self.doc_host)

    def worker_count(self) -> int:
        return self.max_workers or len(self.modules)


@dataclass
class SyncParams:
    """Credentials and target workspace of a sync run."""
    doc_api_key: Optional[str] = None
    pm_api_key: Optional[str] = None
    pm_workspace_id: Optional[str] = None

    @classmethod
    def from_environment(cls) -> 'SyncParams':
        """
        Read sync parameters from environment variables.

        Returns:
            SyncParams instance, possibly incomplete (see validate)
        """
        return cls(
            doc_api_key=os.getenv(DOC_API_KEY_ENV) or None,
            pm_api_key=os.getenv(PM_API_KEY_ENV) or None,
            pm_workspace_id=os.getenv(PM_WORKSPACE_ID_ENV) or None,
        )

    def validate(self) -> 'SyncParams':
        """
        Check that every parameter is present.

        Raises:
            ConfigurationError: naming the first missing parameter
        """
        if not self.doc_api_key:
            raise ConfigurationError('doc-api-key is required')
        if not self.pm_api_key:
            raise ConfigurationError('pm-api-key is required')
        if not self.pm_workspace_id:
            raise ConfigurationError('pm-workspace-id is required')
        return self
