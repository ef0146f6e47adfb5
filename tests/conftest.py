"""Shared fixtures: isolate every test from the caller's environment."""

from __future__ import annotations

import pytest

from awsu.config.models import AUTO_INSTALL_ENV_VARS

_ENV_VARS = (
    "AWS_DEFAULT_REGION",
    "AWS_EKS_CLUSTER",
    "AWS_QUIET_CHECKS",
    "XDG_CONFIG_HOME",
    *AUTO_INSTALL_ENV_VARS.values(),
)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("AWSU_CONFIG", str(tmp_path / "no-such-config.yaml"))
    monkeypatch.setenv("AWSU_SKIP_HOST_CHECK", "true")
