"""Settings loading: environment → config file → built-in fallbacks.

The optional config file lives at ``$AWSU_CONFIG`` or
``$XDG_CONFIG_HOME/awsu/config.yaml`` and looks like::

    defaults:
      region: us-east-1
      cluster: prod
    auto_install:
      kubectl: false
    checks:
      quiet: true
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from awsu.config.models import (
    AUTO_INSTALL_ENV_VARS,
    FALLBACK_CLUSTER,
    FALLBACK_REGION,
    Settings,
    parse_bool,
)

logger = logging.getLogger(__name__)

_APP_DIR = "awsu"


def config_dir(environ: Optional[Mapping[str, str]] = None) -> Path:
    """Return the XDG config directory for awsu (not created)."""
    env = os.environ if environ is None else environ
    base = env.get("XDG_CONFIG_HOME", "") or str(Path.home() / ".config")
    return Path(base) / _APP_DIR


def config_path(environ: Optional[Mapping[str, str]] = None) -> Path:
    """Return the config file path, honouring ``AWSU_CONFIG``."""
    env = os.environ if environ is None else environ
    explicit = env.get("AWSU_CONFIG", "")
    if explicit:
        return Path(explicit).expanduser()
    return config_dir(env) / "config.yaml"


def load_config_file(path: Path) -> Dict[str, Any]:
    """Parse the YAML config file; a missing file yields ``{}``."""
    if not path.is_file():
        return {}
    with open(path, encoding="utf-8") as fh:
        raw = yaml.safe_load(fh) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    logger.debug("Loaded config file %s", path)
    return raw


def load_settings(
    environ: Optional[Mapping[str, str]] = None,
    path: Optional[Path] = None,
) -> Settings:
    """Build the process-wide :class:`Settings`.

    Precedence for every field: environment variable → config file →
    built-in fallback.
    """
    env = os.environ if environ is None else environ
    file_cfg = load_config_file(path if path is not None else config_path(env))

    defaults = file_cfg.get("defaults", {}) or {}
    file_auto = file_cfg.get("auto_install", {}) or {}
    checks = file_cfg.get("checks", {}) or {}

    region = (
        env.get("AWS_DEFAULT_REGION")
        or str(defaults.get("region") or "")
        or FALLBACK_REGION
    )
    cluster = (
        env.get("AWS_EKS_CLUSTER")
        or str(defaults.get("cluster") or "")
        or FALLBACK_CLUSTER
    )

    auto_install: Dict[str, bool] = {}
    for tool, var in AUTO_INSTALL_ENV_VARS.items():
        file_default = parse_bool(file_auto.get(tool), default=True)
        auto_install[tool] = parse_bool(env.get(var), default=file_default)

    quiet = parse_bool(
        env.get("AWS_QUIET_CHECKS"),
        default=parse_bool(checks.get("quiet"), default=False),
    )
    skip_host = parse_bool(
        env.get("AWSU_SKIP_HOST_CHECK"),
        default=parse_bool(checks.get("skip_host_check"), default=False),
    )

    return Settings(
        default_region=region,
        default_cluster=cluster,
        auto_install=auto_install,
        quiet_checks=quiet,
        skip_host_check=skip_host,
    )
