# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
podzol Configuration - Single source of truth.
YAML is king. Env vars only for deployment overrides.

The Config value is built once and handed to every component that talks to
the registry. Nothing in the build pipeline reads configuration implicitly.
"""

import os
import yaml
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from podzol import __version__
from podzol.core.errors import ConfigurationError


DEFAULT_REGISTRY_URL = "https://api.modrinth.com/v2"


# =============================================================================
# CONFIGURATION DATACLASS
# =============================================================================

@dataclass(frozen=True)
class Config:
    """
    Immutable application configuration.
    All values from YAML. No hidden state.
    """

    # -- Registry transport --
    registry_url: str = DEFAULT_REGISTRY_URL
    http_timeout: float = 30.0
    http_connect_timeout: float = 5.0
    user_agent: str = f"podzol/{__version__}"
    verify_tls: bool = True
    ca_bundle: Optional[str] = None

    # -- Resolution --
    max_concurrency: Optional[int] = None

    # -- Paths --
    manifest_name: str = "podzol.toml"

    # -- Output --
    show_progress: bool = True
    log_level: str = "INFO"
    log_format: str = "text"

    @property
    def tls_verify(self):
        """Value for httpx's ``verify`` argument."""
        if not self.verify_tls:
            return False
        return self.ca_bundle or True


# =============================================================================
# LOADER
# =============================================================================

def default_config_path() -> Path:
    """Config file location, overridable via PODZOL_CONFIG_PATH."""
    env_path = os.getenv("PODZOL_CONFIG_PATH")
    if env_path:
        return Path(env_path)
    return Path.home() / ".config" / "podzol" / "podzol.yaml"


def load_config(path: Optional[Path] = None) -> Config:
    """
    Load configuration from YAML.
    Returns defaults if file doesn't exist.

    Raises:
        ConfigurationError: If the file is not valid YAML or not a mapping
    """
    path = Path(path) if path else default_config_path()

    y = {}
    if path.exists():
        try:
            with open(path) as f:
                y = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}", config_file=str(path))

        if not isinstance(y, dict):
            raise ConfigurationError(
                f"Configuration root must be a mapping, got {type(y).__name__}",
                config_file=str(path)
            )

    # Helper to safely navigate nested dicts
    def get(d: dict, *keys, default=None):
        for k in keys:
            if not isinstance(d, dict):
                return default
            d = d.get(k, {})
        return d if d != {} else default

    max_concurrency = get(y, "resolver", "max_concurrency")
    if max_concurrency is not None and (not isinstance(max_concurrency, int) or max_concurrency < 1):
        raise ConfigurationError(
            f"resolver.max_concurrency must be a positive integer, got {max_concurrency!r}",
            config_file=str(path)
        )

    verify_tls = get(y, "registry", "verify_tls")
    show_progress = get(y, "progress", "enabled")

    return Config(
        # Registry
        registry_url=(
            os.getenv("PODZOL_REGISTRY_URL")
            or get(y, "registry", "url")
            or DEFAULT_REGISTRY_URL
        ).rstrip("/"),
        http_timeout=float(get(y, "registry", "timeout") or 30.0),
        http_connect_timeout=float(get(y, "registry", "connect_timeout") or 5.0),
        user_agent=get(y, "registry", "user_agent") or f"podzol/{__version__}",
        verify_tls=True if verify_tls is None else bool(verify_tls),
        ca_bundle=os.getenv("PODZOL_CA_BUNDLE") or get(y, "registry", "ca_bundle"),

        # Resolution
        max_concurrency=max_concurrency,

        # Paths
        manifest_name=get(y, "paths", "manifest") or "podzol.toml",

        # Output
        show_progress=True if show_progress is None else bool(show_progress),
        log_level=os.getenv("LOG_LEVEL") or get(y, "logging", "level") or "INFO",
        log_format=get(y, "logging", "format") or "text",
    )
