"""Tests for awsu.dispatch.formatters."""

from __future__ import annotations

import base64
import json

import pytest

from awsu.catalog import get_command
from awsu.config.models import Settings
from awsu.dispatch.dispatcher import prepare
from awsu.dispatch.formatters import (
    decode_userdata,
    format_db_instances,
    format_instances,
    format_subnets,
    format_userdata,
    format_vpcs,
    tag_value,
)
from awsu.dispatch.runner import CommandResult


def _result(body) -> CommandResult:
    text = json.dumps(body) if not isinstance(body, str) else body
    parsed = body if not isinstance(body, str) else None
    return CommandResult(command="aws", returncode=0, stdout=text, json_body=parsed, success=True)


def _inv(name: str, tokens=()):
    return prepare(get_command(name), list(tokens), Settings())


# ── TestTagValue ─────────────────────────────────────────────────────────


class TestTagValue:
    def test_found(self):
        assert tag_value([{"Key": "Env", "Value": "prod"}, {"Key": "Name", "Value": "web"}]) == "web"

    def test_missing(self):
        assert tag_value([{"Key": "Env", "Value": "prod"}]) == "N/A"
        assert tag_value(None) == "N/A"

    def test_other_key(self):
        assert tag_value([{"Key": "Env", "Value": "prod"}], key="Env") == "prod"


# ── TestTables ───────────────────────────────────────────────────────────


class TestTables:
    def test_instances(self, capsys):
        body = {
            "Reservations": [
                {
                    "Instances": [
                        {
                            "InstanceId": "i-abc",
                            "State": {"Name": "running"},
                            "InstanceType": "t3.micro",
                            "PrivateIpAddress": "10.0.0.5",
                            "Tags": [{"Key": "Name", "Value": "web"}],
                        }
                    ]
                }
            ]
        }
        format_instances(_result(body), _inv("ec2-list"))
        out = capsys.readouterr().out
        assert "Instance ID" in out
        assert "i-abc" in out
        assert "running" in out
        assert "10.0.0.5" in out
        assert "web" in out

    def test_instances_missing_private_ip(self, capsys):
        body = {"Reservations": [{"Instances": [{"InstanceId": "i-abc"}]}]}
        format_instances(_result(body), _inv("ec2-list"))
        assert "N/A" in capsys.readouterr().out

    def test_empty_reservations(self, capsys):
        format_instances(_result({"Reservations": []}), _inv("ec2-list"))
        assert "No results" in capsys.readouterr().out

    def test_unexpected_shape_prints_raw(self, capsys):
        format_instances(_result("plain text reply"), _inv("ec2-list"))
        assert "plain text reply" in capsys.readouterr().out

    def test_vpcs(self, capsys):
        body = {"Vpcs": [{"VpcId": "vpc-1", "CidrBlock": "10.0.0.0/16"}]}
        format_vpcs(_result(body), _inv("vpc-list"))
        out = capsys.readouterr().out
        assert "vpc-1" in out
        assert "10.0.0.0/16" in out
        assert "N/A" in out

    def test_subnets(self, capsys):
        body = {
            "Subnets": [
                {
                    "SubnetId": "subnet-1",
                    "CidrBlock": "10.0.1.0/24",
                    "AvailabilityZone": "us-east-1a",
                    "Tags": [{"Key": "Name", "Value": "private-a"}],
                }
            ]
        }
        format_subnets(_result(body), _inv("vpc-list-subnets", ["vpc-1"]))
        out = capsys.readouterr().out
        assert "subnet-1" in out
        assert "us-east-1a" in out
        assert "private-a" in out

    def test_db_instances(self, capsys):
        body = {
            "DBInstances": [
                {
                    "DBInstanceIdentifier": "db1",
                    "Engine": "postgres",
                    "DBInstanceStatus": "available",
                    "Endpoint": {"Address": "db1.example"},
                }
            ]
        }
        format_db_instances(_result(body), _inv("rds-list"))
        out = capsys.readouterr().out
        assert "db1" in out
        assert "postgres" in out
        assert "available" in out


# ── TestUserData ─────────────────────────────────────────────────────────


class TestUserData:
    def test_decode(self):
        encoded = base64.b64encode(b"#!/bin/bash\necho hi\n").decode()
        assert decode_userdata(encoded) == "#!/bin/bash\necho hi\n"

    @pytest.mark.parametrize("value", ["", "None", "  \n"])
    def test_decode_empty(self, value):
        assert decode_userdata(value) is None

    def test_format_prints_script(self, capsys):
        encoded = base64.b64encode(b"echo hello").decode()
        format_userdata(_result(encoded), _inv("ec2-userdata", ["i-1"]))
        assert "echo hello" in capsys.readouterr().out

    def test_format_no_userdata(self, capsys):
        format_userdata(_result("None"), _inv("ec2-userdata", ["i-1"]))
        assert "No user data found for instance: i-1" in capsys.readouterr().out

    def test_format_invalid_base64_prints_raw(self, capsys):
        format_userdata(_result("abc"), _inv("ec2-userdata", ["i-1"]))
        assert "abc" in capsys.readouterr().out
