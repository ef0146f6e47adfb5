"""Runtime configuration: settings model and loader."""

from awsu.config.loader import (
    config_dir,
    config_path,
    load_config_file,
    load_settings,
)
from awsu.config.models import (
    AUTO_INSTALL_ENV_VARS,
    DEFAULT_LOG_GROUP,
    FALLBACK_CLUSTER,
    FALLBACK_REGION,
    Settings,
    parse_bool,
)

__all__ = [
    "AUTO_INSTALL_ENV_VARS",
    "DEFAULT_LOG_GROUP",
    "FALLBACK_CLUSTER",
    "FALLBACK_REGION",
    "Settings",
    "config_dir",
    "config_path",
    "load_config_file",
    "load_settings",
    "parse_bool",
]
