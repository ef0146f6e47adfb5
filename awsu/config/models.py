"""Pydantic models for awsu runtime configuration.

A single :class:`Settings` instance is built at process start by
:func:`awsu.config.loader.load_settings` and passed to every command
handler.  Handlers never read the environment themselves.
"""

from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator

FALLBACK_REGION = "ap-southeast-1"
FALLBACK_CLUSTER = "my-cluster"
DEFAULT_LOG_GROUP = "/aws/ec2/instance"

#: Tool name → environment variable that toggles its auto-install.
AUTO_INSTALL_ENV_VARS: Dict[str, str] = {
    "aws": "AWS_AUTO_INSTALL_CLI",
    "kubectl": "KUBECTL_AUTO_INSTALL",
    "krew": "KREW_AUTO_INSTALL",
    "helm": "HELM_AUTO_INSTALL",
    "kustomize": "KUSTOMIZE_AUTO_INSTALL",
    "tfenv": "TFENV_AUTO_INSTALL",
    "packer": "PACKER_AUTO_INSTALL",
    "fzf": "FZF_AUTO_INSTALL",
    "kubectl-alias": "KUBECTL_ALIAS_AUTO_SETUP",
}


class Settings(BaseModel):
    """Immutable process-wide configuration.

    Attributes:
        default_region: Region used when ``--region`` is not given.
        default_cluster: EKS cluster used when ``--cluster`` is not given.
        auto_install: Per-tool auto-install switch (missing → enabled).
        quiet_checks: Only run required dependency checks.
        skip_host_check: Do not refuse to run on non-Ubuntu hosts.
    """

    model_config = ConfigDict(frozen=True)

    default_region: str = FALLBACK_REGION
    default_cluster: str = FALLBACK_CLUSTER
    auto_install: Dict[str, bool] = Field(default_factory=dict)
    quiet_checks: bool = False
    skip_host_check: bool = False

    @field_validator("auto_install", mode="before")
    @classmethod
    def _coerce_flags(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {str(k): parse_bool(v, default=True) for k, v in data.items()}
        return data

    def auto_install_enabled(self, tool: str) -> bool:
        """Return whether *tool* may be installed automatically."""
        return self.auto_install.get(tool, True)


def parse_bool(value: Any, *, default: bool) -> bool:
    """Normalize ``true``/``false`` strings (any case) to a bool.

    ``None`` and empty strings yield *default*; anything other than a
    recognised "true" spelling is ``False``.
    """
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    text = str(value).strip()
    if not text:
        return default
    return text.lower() in ("true", "1", "yes", "on")
