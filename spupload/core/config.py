"""Configuration for SharePoint Uploader (spupload)."""

import os
from dataclasses import dataclass, field
from typing import List, Mapping, Optional

from rich.console import Console

from spupload.core.errors import ConfigurationError

console = Console()

# Microsoft Graph API constants
GRAPH_API_ENDPOINT = "https://graph.microsoft.com/v1.0"
LOGIN_ENDPOINT = "https://login.microsoftonline.com"
SCOPES = ["https://graph.microsoft.com/.default"]  # Scope for confidential client flow

# File size constants
CHUNK_SIZE = 10 * 1024 * 1024  # 10 MiB
SMALL_FILE_THRESHOLD = 4 * 1024 * 1024  # 4 MiB
CHUNK_ALIGNMENT = 320 * 1024  # Graph wants chunk sizes in multiples of 320 KiB

# Network constants (seconds)
REQUEST_TIMEOUT = 30
CHUNK_TIMEOUT = 120
MAX_RETRIES = 3

CONFLICT_BEHAVIOR = "replace"
DEFAULT_DRIVE = "Documents"

# Environment variable names
ENV_CLIENT_ID = "MS_GRAPH_CLIENT_ID"
ENV_CLIENT_SECRET = "MS_GRAPH_CLIENT_SECRET"
ENV_TENANT_ID = "MS_GRAPH_TENANT_ID"
ENV_DOMAIN = "MS_GRAPH_DOMAIN"
ENV_SITE = "MS_GRAPH_SITE"
ENV_DRIVE = "MS_GRAPH_DRIVE"
ENV_FOLDER = "MS_GRAPH_FOLDER"
ENV_CHUNK_SIZE = "MS_GRAPH_CHUNK_SIZE"

REQUIRED_ENV_VARS = [ENV_CLIENT_ID, ENV_CLIENT_SECRET, ENV_TENANT_ID, ENV_DOMAIN, ENV_SITE]

# Worker limits
MIN_WORKERS = 1
MAX_WORKERS = 10

PLACEHOLDER_VALUES = ("", "null")


def _clean(value):
    """Return a stripped value, or None for unset and placeholder values."""
    if value is None:
        return None
    value = value.strip()
    if value.lower() in PLACEHOLDER_VALUES:
        return None
    return value


@dataclass(frozen=True)
class UploadConfig:
    """Validated settings for one run, built once at start-up."""

    client_id: Optional[str]
    client_secret: Optional[str]
    tenant_id: Optional[str]
    domain: Optional[str]
    site: Optional[str]
    drive: str = DEFAULT_DRIVE
    folder: str = ""
    chunk_size: int = CHUNK_SIZE
    small_file_threshold: int = SMALL_FILE_THRESHOLD
    max_workers: Optional[int] = None
    request_timeout: float = REQUEST_TIMEOUT
    chunk_timeout: float = CHUNK_TIMEOUT
    max_retries: int = MAX_RETRIES
    verbose: bool = False
    graph_endpoint: str = field(default=GRAPH_API_ENDPOINT, repr=False)
    login_endpoint: str = field(default=LOGIN_ENDPOINT, repr=False)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "UploadConfig":
        """
        Build a configuration from environment variables.

        Keyword overrides (typically command-line flags) win over the
        environment; overrides set to None are ignored.
        """
        if environ is None:
            environ = os.environ

        chunk_size = CHUNK_SIZE
        raw_chunk_size = _clean(environ.get(ENV_CHUNK_SIZE))
        if raw_chunk_size is not None:
            try:
                chunk_size = int(raw_chunk_size)
            except ValueError:
                raise ConfigurationError(
                    f"{ENV_CHUNK_SIZE} must be an integer number of bytes, got {raw_chunk_size!r}"
                )

        values = {
            "client_id": _clean(environ.get(ENV_CLIENT_ID)),
            "client_secret": _clean(environ.get(ENV_CLIENT_SECRET)),
            "tenant_id": _clean(environ.get(ENV_TENANT_ID)),
            "domain": _clean(environ.get(ENV_DOMAIN)),
            "site": _clean(environ.get(ENV_SITE)),
            "drive": _clean(environ.get(ENV_DRIVE)) or DEFAULT_DRIVE,
            "folder": _clean(environ.get(ENV_FOLDER)) or "",
            "chunk_size": chunk_size,
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)

    def missing_settings(self) -> List[str]:
        """Names of the required environment variables that are unset."""
        required = {
            ENV_CLIENT_ID: self.client_id,
            ENV_CLIENT_SECRET: self.client_secret,
            ENV_TENANT_ID: self.tenant_id,
            ENV_DOMAIN: self.domain,
            ENV_SITE: self.site,
        }
        return [name for name, value in required.items() if not value]

    def validate(self) -> "UploadConfig":
        """
        Check the configuration and return it unchanged.

        Raises:
            ConfigurationError: if a required setting is missing or a numeric
                setting is out of range.
        """
        missing = self.missing_settings()
        if missing:
            raise ConfigurationError(
                "Missing required environment variables: " + ", ".join(missing),
                missing=missing,
            )
        if self.chunk_size <= 0:
            raise ConfigurationError(f"chunk size must be positive, got {self.chunk_size}")
        if self.max_workers is not None and not MIN_WORKERS <= self.max_workers <= MAX_WORKERS:
            raise ConfigurationError(
                f"max workers must be between {MIN_WORKERS} and {MAX_WORKERS}, got {self.max_workers}"
            )
        if self.request_timeout <= 0 or self.chunk_timeout <= 0:
            raise ConfigurationError("timeouts must be positive")
        if self.max_retries < 1:
            raise ConfigurationError("max retries must be at least 1")

        if self.chunk_size % CHUNK_ALIGNMENT:
            console.print(
                f"[yellow]⚠️ Warning: chunk size {self.chunk_size} is not a multiple of "
                f"{CHUNK_ALIGNMENT} bytes; SharePoint may reject the upload.[/yellow]"
            )
        return self

    @property
    def authority(self) -> str:
        return f"{self.login_endpoint}/{self.tenant_id}"

    def destination_path(self, file_name: str) -> str:
        """Drive-relative path that a local file is uploaded to."""
        folder = self.folder.strip("/")
        return f"{folder}/{file_name}" if folder else file_name
