"""Configuration domain exports."""

from .config_scaffold_builder import (
    DEFAULT_CONFIG_FILENAME,
    build_placeholder_configuration,
    write_placeholder_configuration,
)
from .credentials import (
    AppCredentials,
    Credentials,
    TokenCredentials,
    load_credentials,
    load_environment,
)
from .loader import ConfigurationError, load_configuration
from .runtime_settings import (
    CacheStoreSettings,
    CollectorSettings,
    PollingSettings,
    TargetLink,
    TargetRepository,
)

__all__ = [
    "AppCredentials",
    "CacheStoreSettings",
    "CollectorSettings",
    "ConfigurationError",
    "Credentials",
    "DEFAULT_CONFIG_FILENAME",
    "PollingSettings",
    "TargetLink",
    "TargetRepository",
    "TokenCredentials",
    "build_placeholder_configuration",
    "load_configuration",
    "load_credentials",
    "load_environment",
    "write_placeholder_configuration",
]
