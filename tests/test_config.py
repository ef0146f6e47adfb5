"""Tests for awsu.config: settings precedence and config file parsing."""

from __future__ import annotations

from pathlib import Path

import pytest

from awsu.config.loader import config_path, load_config_file, load_settings
from awsu.config.models import FALLBACK_CLUSTER, FALLBACK_REGION, Settings, parse_bool


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(text, encoding="utf-8")
    return path


# ── TestParseBool ────────────────────────────────────────────────────────


class TestParseBool:
    @pytest.mark.parametrize("value", ["true", "TRUE", "True", "1", "yes", True])
    def test_truthy(self, value):
        assert parse_bool(value, default=False) is True

    @pytest.mark.parametrize("value", ["false", "FALSE", "0", "no", "off", "anything", False])
    def test_falsy(self, value):
        assert parse_bool(value, default=True) is False

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_default(self, value):
        assert parse_bool(value, default=True) is True
        assert parse_bool(value, default=False) is False


# ── TestSettings ─────────────────────────────────────────────────────────


class TestSettings:
    def test_fallbacks(self):
        s = Settings()
        assert s.default_region == FALLBACK_REGION == "ap-southeast-1"
        assert s.default_cluster == FALLBACK_CLUSTER == "my-cluster"

    def test_auto_install_defaults_on(self):
        s = Settings()
        assert s.auto_install_enabled("kubectl") is True

    def test_auto_install_coerced(self):
        s = Settings(auto_install={"helm": "FALSE", "packer": "true"})
        assert s.auto_install_enabled("helm") is False
        assert s.auto_install_enabled("packer") is True


# ── TestLoadSettings ─────────────────────────────────────────────────────


class TestLoadSettings:
    def test_empty_environment(self, tmp_path):
        s = load_settings(environ={}, path=tmp_path / "missing.yaml")
        assert s.default_region == "ap-southeast-1"
        assert s.default_cluster == "my-cluster"
        assert s.quiet_checks is False
        assert s.skip_host_check is False
        assert all(s.auto_install.values())

    def test_environment(self, tmp_path):
        env = {
            "AWS_DEFAULT_REGION": "us-east-1",
            "AWS_EKS_CLUSTER": "prod",
            "KUBECTL_AUTO_INSTALL": "FALSE",
            "AWS_QUIET_CHECKS": "true",
        }
        s = load_settings(environ=env, path=tmp_path / "missing.yaml")
        assert s.default_region == "us-east-1"
        assert s.default_cluster == "prod"
        assert s.auto_install_enabled("kubectl") is False
        assert s.auto_install_enabled("helm") is True
        assert s.quiet_checks is True

    def test_empty_env_value_falls_through(self, tmp_path):
        s = load_settings(environ={"AWS_DEFAULT_REGION": ""}, path=tmp_path / "missing.yaml")
        assert s.default_region == "ap-southeast-1"

    def test_config_file(self, tmp_path):
        path = _write(
            tmp_path,
            "defaults:\n"
            "  region: eu-west-1\n"
            "  cluster: staging\n"
            "auto_install:\n"
            "  packer: false\n"
            "checks:\n"
            "  quiet: true\n"
            "  skip_host_check: true\n",
        )
        s = load_settings(environ={}, path=path)
        assert s.default_region == "eu-west-1"
        assert s.default_cluster == "staging"
        assert s.auto_install_enabled("packer") is False
        assert s.quiet_checks is True
        assert s.skip_host_check is True

    def test_environment_beats_file(self, tmp_path):
        path = _write(tmp_path, "defaults:\n  region: eu-west-1\nauto_install:\n  packer: false\n")
        env = {"AWS_DEFAULT_REGION": "us-west-2", "PACKER_AUTO_INSTALL": "true"}
        s = load_settings(environ=env, path=path)
        assert s.default_region == "us-west-2"
        assert s.auto_install_enabled("packer") is True

    def test_awsu_config_env_selects_file(self, tmp_path):
        path = _write(tmp_path, "defaults:\n  cluster: from-file\n")
        s = load_settings(environ={"AWSU_CONFIG": str(path)})
        assert s.default_cluster == "from-file"

    def test_non_mapping_file_rejected(self, tmp_path):
        path = _write(tmp_path, "- a\n- b\n")
        with pytest.raises(ValueError, match="must contain a mapping"):
            load_settings(environ={}, path=path)


# ── TestConfigPath ───────────────────────────────────────────────────────


class TestConfigPath:
    def test_explicit(self, tmp_path):
        assert config_path({"AWSU_CONFIG": str(tmp_path / "c.yaml")}) == tmp_path / "c.yaml"

    def test_xdg(self, tmp_path):
        assert config_path({"XDG_CONFIG_HOME": str(tmp_path)}) == tmp_path / "awsu" / "config.yaml"

    def test_missing_file_is_empty(self, tmp_path):
        assert load_config_file(tmp_path / "nope.yaml") == {}

    def test_empty_file_is_empty(self, tmp_path):
        assert load_config_file(_write(tmp_path, "")) == {}
