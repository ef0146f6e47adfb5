"""Tests for awsu.catalog: command table integrity and ParamSpec rendering."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from awsu.catalog import (
    CATALOG,
    CommandSpec,
    OutputMode,
    ParamSpec,
    get_command,
    grouped,
)
from awsu.config.models import Settings
from awsu.options.parser import CLUSTER, FILTERS, FOLLOW, HELP, REGION, SHOW

EXPECTED_COMMANDS = {
    "eks-update-config",
    "eks-list-addons",
    "eks-automode-status",
    "eks-automode-enabled",
    "eks-automode-disabled",
    "eks-describe",
    "eks-list",
    "eks-list-nodegroups",
    "ecr-list",
    "ecr-list-images",
    "ecr-login",
    "ec2-userdata",
    "ec2-describe",
    "ec2-console-output",
    "ec2-list",
    "ec2-logs",
    "vpc-list",
    "vpc-list-subnets",
    "rds-list",
    "ecs-list-clusters",
    "ecs-list-services",
    "ecs-describe-service",
    "ecs-list-tasks",
    "ecs-describe-task",
    "ecs-update-service",
    "ecs-stop-task",
    "apprunner-list-services",
    "apprunner-describe-service",
    "apprunner-list-operations",
    "apprunner-pause-service",
    "apprunner-resume-service",
    "aws-whoami",
    "s3-list",
}


# ── TestCatalogTable ─────────────────────────────────────────────────────


class TestCatalogTable:
    def test_all_commands_present(self):
        assert {spec.name for spec in CATALOG} == EXPECTED_COMMANDS

    def test_names_unique(self):
        names = [spec.name for spec in CATALOG]
        assert len(names) == len(set(names))

    def test_get_command(self):
        spec = get_command("eks-list")
        assert spec.service == "eks"
        assert spec.verb == "list-clusters"

    def test_get_unknown_command(self):
        with pytest.raises(KeyError, match="Unknown command: nope"):
            get_command("nope")

    def test_grouped_keeps_catalog_order(self):
        groups = grouped()
        assert list(groups) == ["EKS", "ECR", "EC2", "VPC", "RDS", "ECS", "App Runner", "Other"]
        assert groups["EKS"][0].name == "eks-update-config"
        assert sum(len(v) for v in groups.values()) == len(CATALOG)

    def test_destructive_commands(self):
        destructive = {spec.name for spec in CATALOG if spec.destructive}
        assert destructive == {"eks-automode-disabled", "apprunner-pause-service"}
        for name in destructive:
            spec = get_command(name)
            assert spec.warning
            assert spec.confirm_prompt

    def test_every_region_param_defaults_from_settings(self):
        settings = Settings(default_region="eu-central-1")
        for spec in CATALOG:
            for p in spec.params:
                if p.name == "region":
                    assert p.default_value(settings) == "eu-central-1"
                    assert p.aws_flag == "--region"

    def test_ecr_login_needs_docker(self):
        assert get_command("ecr-login").tools == ("aws", "docker")

    def test_docs_url(self):
        spec = get_command("eks-describe")
        assert spec.docs_url.endswith("/eks/describe-cluster.html")


# ── TestCommandSpec ──────────────────────────────────────────────────────


class TestCommandSpec:
    def test_options_end_with_help_and_show(self):
        opts = get_command("ec2-list").options()
        assert opts[-2:] == (HELP, SHOW)
        assert REGION in opts
        assert FILTERS in opts

    def test_option_defaults(self):
        settings = Settings(default_region="us-east-2", default_cluster="c1")
        defaults = get_command("eks-update-config").option_defaults(settings)
        assert defaults == {"region": "us-east-2", "cluster": "c1"}

    def test_option_defaults_switch_and_list(self):
        settings = Settings()
        assert get_command("ec2-logs").option_defaults(settings)["follow"] is False
        assert get_command("ec2-list").option_defaults(settings)["filters"] == []

    def test_usage(self):
        usage = get_command("eks-update-config").usage()
        assert usage.startswith("eks-update-config ")
        assert "[-r|--region REGION]" in usage
        assert "[-c|--cluster CLUSTER]" in usage
        assert usage.endswith("[-h|--help] [--show]")

    def test_unknown_placeholder_rejected(self):
        with pytest.raises(ValidationError, match="has no parameter"):
            CommandSpec(
                name="broken",
                group="Other",
                service="sts",
                verb="get-caller-identity",
                summary="broken",
                arguments=("{region}",),
            )

    def test_destructive_requires_prompt(self):
        with pytest.raises(ValidationError, match="confirm_prompt"):
            CommandSpec(
                name="broken",
                group="Other",
                service="s3",
                verb="rb",
                summary="broken",
                destructive=True,
            )

    def test_frozen(self):
        spec = get_command("eks-list")
        with pytest.raises(ValidationError):
            spec.name = "other"

    def test_output_modes(self):
        assert get_command("eks-describe").output is OutputMode.JSON
        assert get_command("eks-list").output is OutputMode.TEXT


# ── TestParamRender ──────────────────────────────────────────────────────


class TestParamRender:
    def test_value_with_flag(self):
        p = ParamSpec(name="cluster", option=CLUSTER, aws_flag="--name")
        assert p.render("demo") == ["--name", "demo"]

    def test_bare_value(self):
        p = ParamSpec(name="log_group")
        assert p.render("/aws/ec2/instance") == ["/aws/ec2/instance"]

    def test_unset_value_renders_nothing(self):
        p = ParamSpec(name="service", aws_flag="--service-name")
        assert p.render(None) == []
        assert p.render("") == []

    def test_switch(self):
        p = ParamSpec(name="follow", option=FOLLOW, aws_flag="--follow")
        assert p.render(True) == ["--follow"]
        assert p.render(False) == []

    def test_list_with_format(self):
        p = ParamSpec(name="filters", option=FILTERS, aws_flag="--filters")
        assert p.render(["A=1", "B=2"]) == ["--filters", "A=1", "B=2"]
        assert p.render([]) == []

    def test_value_format(self):
        p = get_command("vpc-list-subnets").param("vpc_id")
        assert p.render("vpc-123") == ["--filters", "Name=vpc-id,Values=vpc-123"]
