"""Output formatters for captured command results.

Each formatter receives the :class:`CommandResult` and the invocation and
prints a compact view.  When the reply is not the JSON shape expected,
the raw text is printed unchanged.
"""

from __future__ import annotations

import base64
import binascii
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from awsu import ui
from awsu.dispatch.invocation import Invocation
from awsu.dispatch.runner import CommandResult

logger = logging.getLogger(__name__)

Formatter = Callable[[CommandResult, Invocation], None]

_NA = "N/A"


def tag_value(tags: Optional[Iterable[Dict[str, Any]]], key: str = "Name") -> str:
    """Return the value of tag *key*, or ``N/A``."""
    for tag in tags or []:
        if tag.get("Key") == key:
            return str(tag.get("Value") or _NA)
    return _NA


def _emit(headers: Sequence[str], rows: List[List[str]]) -> None:
    if rows:
        ui.table(headers, rows)
    else:
        ui.info("No results")


def _raw(result: CommandResult) -> None:
    if result.stdout:
        ui.plain(result.stdout)


# ── Tables ─────────────────────────────────────────────────────────────────


def format_instances(result: CommandResult, inv: Invocation) -> None:
    body = result.json_body
    if not isinstance(body, dict) or "Reservations" not in body:
        _raw(result)
        return
    rows = []
    for reservation in body.get("Reservations", []):
        for inst in reservation.get("Instances", []):
            rows.append(
                [
                    inst.get("InstanceId", ""),
                    (inst.get("State") or {}).get("Name", ""),
                    inst.get("InstanceType", ""),
                    inst.get("PrivateIpAddress") or _NA,
                    inst.get("PublicIpAddress") or "",
                    tag_value(inst.get("Tags")),
                ]
            )
    _emit(["Instance ID", "State", "Type", "Private IP", "Public IP", "Name"], rows)


def format_vpcs(result: CommandResult, inv: Invocation) -> None:
    body = result.json_body
    if not isinstance(body, dict) or "Vpcs" not in body:
        _raw(result)
        return
    rows = [
        [vpc.get("VpcId", ""), vpc.get("CidrBlock", ""), tag_value(vpc.get("Tags"))]
        for vpc in body.get("Vpcs", [])
    ]
    _emit(["VPC ID", "CIDR", "Name"], rows)


def format_subnets(result: CommandResult, inv: Invocation) -> None:
    body = result.json_body
    if not isinstance(body, dict) or "Subnets" not in body:
        _raw(result)
        return
    rows = [
        [
            subnet.get("SubnetId", ""),
            subnet.get("CidrBlock", ""),
            subnet.get("AvailabilityZone", ""),
            tag_value(subnet.get("Tags")),
        ]
        for subnet in body.get("Subnets", [])
    ]
    _emit(["Subnet ID", "CIDR", "AZ", "Name"], rows)


def format_db_instances(result: CommandResult, inv: Invocation) -> None:
    body = result.json_body
    if not isinstance(body, dict) or "DBInstances" not in body:
        _raw(result)
        return
    rows = [
        [
            db.get("DBInstanceIdentifier", ""),
            db.get("Engine", ""),
            db.get("DBInstanceStatus", ""),
            (db.get("Endpoint") or {}).get("Address", ""),
        ]
        for db in body.get("DBInstances", [])
    ]
    _emit(["Identifier", "Engine", "Status", "Endpoint"], rows)


# ── User data ──────────────────────────────────────────────────────────────


def decode_userdata(encoded: str) -> Optional[str]:
    """Decode base64 user data; ``None`` when there is none."""
    text = encoded.strip()
    if not text or text == "None":
        return None
    raw = base64.b64decode(text, validate=False)
    return raw.decode("utf-8", errors="replace")


def format_userdata(result: CommandResult, inv: Invocation) -> None:
    try:
        decoded = decode_userdata(result.stdout)
    except (binascii.Error, ValueError):
        logger.debug("User data is not valid base64; printing raw value")
        _raw(result)
        return
    if decoded is None:
        ui.warn(inv.message("No user data found for instance: {instance_id}"))
        return
    ui.plain(decoded)


FORMATTERS: Dict[str, Formatter] = {
    "instances": format_instances,
    "vpcs": format_vpcs,
    "subnets": format_subnets,
    "db_instances": format_db_instances,
    "userdata": format_userdata,
}
