"""tsmscan configuration package."""

from .errors import ConfigurationError, PathValidationError
from .loaders import (
    TOMLConfigLoader,
    load_config_dict,
    load_settings,
    print_config,
    validate_data_root,
)
from .settings import DEFAULT_SETTINGS, Settings

__all__ = [
    "Settings",
    "DEFAULT_SETTINGS",
    "ConfigurationError",
    "PathValidationError",
    "TOMLConfigLoader",
    "load_config_dict",
    "load_settings",
    "print_config",
    "validate_data_root",
]
