"""Tests for awsu.dispatch.handlers: EKS auto mode and ECR login."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from awsu.catalog import get_command
from awsu.config.models import Settings
from awsu.dispatch.dispatcher import prepare
from awsu.dispatch.handlers import (
    ACCOUNT_ID_ARGV,
    automode_disable,
    automode_enable,
    automode_status,
    docker_login_argv,
    ecr_login,
    get_handler,
    registry_host,
)
from awsu.dispatch.runner import CommandResult
from awsu.errors import ConfirmationDeclined, ExternalCommandFailed


# ── helpers ──────────────────────────────────────────────────────────────


def _ok(stdout: str = "") -> CommandResult:
    return CommandResult(command="aws", returncode=0, stdout=stdout, success=True)


def _failed(rc: int = 254) -> CommandResult:
    return CommandResult(command="aws", returncode=rc, stderr="denied", success=False)


def _inv(name: str, tokens=("demo", "-r", "us-east-1")):
    return prepare(get_command(name), list(tokens), Settings())


def _no_confirm(prompt: str) -> bool:
    raise AssertionError("confirmation not expected")


# ── TestRegistry ─────────────────────────────────────────────────────────


class TestRegistry:
    def test_catalog_handlers_resolve(self):
        for name in ("eks-automode-status", "eks-automode-enabled", "eks-automode-disabled", "ecr-login"):
            assert get_handler(get_command(name).handler) is not None

    def test_no_handler(self):
        assert get_handler(None) is None
        assert get_handler("") is None


# ── TestAutomodeStatus ───────────────────────────────────────────────────


class TestAutomodeStatus:
    def test_enabled(self, capsys):
        runner = MagicMock(return_value=_ok("True"))
        assert automode_status(_inv("eks-automode-status"), runner=runner, confirm=_no_confirm) == 0
        assert "Auto mode is ENABLED" in capsys.readouterr().out
        assert runner.call_args[0][0] == [
            "aws", "eks", "describe-cluster",
            "--name", "demo",
            "--region", "us-east-1",
            "--query", "cluster.autoModeConfig.enabled",
            "--output", "text",
        ]

    def test_disabled(self, capsys):
        runner = MagicMock(return_value=_ok("false"))
        automode_status(_inv("eks-automode-status"), runner=runner, confirm=_no_confirm)
        assert "Auto mode is DISABLED" in capsys.readouterr().out

    def test_not_configured(self, capsys):
        runner = MagicMock(return_value=_ok("None"))
        automode_status(_inv("eks-automode-status"), runner=runner, confirm=_no_confirm)
        assert "not explicitly configured" in capsys.readouterr().out
        assert runner.call_count == 1

    def test_null_queries_config(self, capsys):
        runner = MagicMock(side_effect=[_ok("null"), _ok("null")])
        automode_status(_inv("eks-automode-status"), runner=runner, confirm=_no_confirm)
        assert runner.call_count == 2
        second = runner.call_args_list[1][0][0]
        assert second[second.index("--query") + 1] == "cluster.autoModeConfig"
        assert second[-1] == "json"
        assert "configuration is not available" in capsys.readouterr().out

    def test_empty_with_config_body(self, capsys):
        runner = MagicMock(side_effect=[_ok(""), _ok('{"nodePools": []}')])
        automode_status(_inv("eks-automode-status"), runner=runner, confirm=_no_confirm)
        out = capsys.readouterr().out
        assert "Auto mode status: unknown" in out
        assert "nodePools" in out

    def test_unexpected_value(self, capsys):
        runner = MagicMock(return_value=_ok("maybe"))
        automode_status(_inv("eks-automode-status"), runner=runner, confirm=_no_confirm)
        assert "Unexpected return value" in capsys.readouterr().out

    def test_query_failure(self, capsys):
        runner = MagicMock(return_value=_failed(rc=254))
        with pytest.raises(ExternalCommandFailed) as exc:
            automode_status(_inv("eks-automode-status"), runner=runner, confirm=_no_confirm)
        assert exc.value.exit_code == 254
        assert "Failed to query cluster information" in capsys.readouterr().out


# ── TestAutomodeEnable ───────────────────────────────────────────────────


class TestAutomodeEnable:
    def test_already_enabled(self, capsys):
        runner = MagicMock(return_value=_ok("true"))
        assert automode_enable(_inv("eks-automode-enabled"), runner=runner, confirm=_no_confirm) == 0
        assert runner.call_count == 1
        assert "already enabled" in capsys.readouterr().out

    def test_submits_update(self, capsys):
        runner = MagicMock(side_effect=[_ok("false"), _ok("abc-123")])
        inv = _inv("eks-automode-enabled")
        assert automode_enable(inv, runner=runner, confirm=_no_confirm) == 0
        assert runner.call_args_list[1][0][0] == inv.argv()
        assert "enabled=true" in inv.argv()
        out = capsys.readouterr().out
        assert "enable request submitted successfully" in out
        assert "Update ID" in out
        assert "abc-123" in out

    def test_update_id_none_not_shown(self, capsys):
        runner = MagicMock(side_effect=[_ok("None"), _ok("None")])
        automode_enable(_inv("eks-automode-enabled"), runner=runner, confirm=_no_confirm)
        assert "Update ID" not in capsys.readouterr().out

    def test_failure(self):
        runner = MagicMock(side_effect=[_ok("false"), _failed(rc=3)])
        with pytest.raises(ExternalCommandFailed) as exc:
            automode_enable(_inv("eks-automode-enabled"), runner=runner, confirm=_no_confirm)
        assert exc.value.exit_code == 3


# ── TestAutomodeDisable ──────────────────────────────────────────────────


class TestAutomodeDisable:
    def test_already_disabled_skips_prompt(self, capsys):
        runner = MagicMock(return_value=_ok("False"))
        assert automode_disable(_inv("eks-automode-disabled"), runner=runner, confirm=_no_confirm) == 0
        assert runner.call_count == 1
        assert "already disabled" in capsys.readouterr().out

    def test_declined(self, capsys):
        runner = MagicMock(return_value=_ok("true"))
        confirm = MagicMock(return_value=False)
        with pytest.raises(ConfirmationDeclined):
            automode_disable(_inv("eks-automode-disabled"), runner=runner, confirm=confirm)
        assert runner.call_count == 1
        confirm.assert_called_once_with(
            "Are you sure you want to disable auto mode for cluster 'demo'?"
        )
        assert "destructive operation" in capsys.readouterr().out

    def test_confirmed(self, capsys):
        runner = MagicMock(side_effect=[_ok("true"), _ok("upd-9")])
        inv = _inv("eks-automode-disabled")
        assert automode_disable(inv, runner=runner, confirm=lambda prompt: True) == 0
        assert runner.call_args_list[1][0][0] == inv.argv()
        assert "enabled=false" in inv.argv()
        out = capsys.readouterr().out
        assert "disable request submitted successfully" in out
        assert "describe-security-groups" in out


# ── TestEcrLogin ─────────────────────────────────────────────────────────


class TestEcrLogin:
    def test_helpers(self):
        assert registry_host("123456789012", "us-east-1") == "123456789012.dkr.ecr.us-east-1.amazonaws.com"
        assert docker_login_argv("reg") == [
            "docker", "login", "--username", "AWS", "--password-stdin", "reg",
        ]

    def test_login_pipes_password(self, capsys):
        runner = MagicMock(side_effect=[_ok("123456789012"), _ok("s3cret"), _ok()])
        inv = _inv("ecr-login", ["-r", "us-east-1"])
        assert ecr_login(inv, runner=runner, confirm=_no_confirm) == 0

        calls = runner.call_args_list
        assert calls[0][0][0] == ACCOUNT_ID_ARGV
        assert calls[1][0][0] == ["aws", "ecr", "get-login-password", "--region", "us-east-1"]
        assert calls[2][0][0] == docker_login_argv("123456789012.dkr.ecr.us-east-1.amazonaws.com")
        assert calls[2].kwargs["input"] == "s3cret"
        assert "ECR login successful" in capsys.readouterr().out

    def test_account_lookup_fails(self):
        runner = MagicMock(return_value=_failed(rc=255))
        with pytest.raises(ExternalCommandFailed) as exc:
            ecr_login(_inv("ecr-login", []), runner=runner, confirm=_no_confirm)
        assert exc.value.exit_code == 255
        assert runner.call_count == 1

    def test_docker_login_fails(self):
        runner = MagicMock(side_effect=[_ok("1"), _ok("pw"), _failed(rc=1)])
        with pytest.raises(ExternalCommandFailed):
            ecr_login(_inv("ecr-login", []), runner=runner, confirm=_no_confirm)
