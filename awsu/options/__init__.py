"""Command-line option parsing."""

from awsu.options.parser import (
    CLUSTER,
    FILTERS,
    FOLLOW,
    FORCE_NEW_DEPLOYMENT,
    HELP,
    INSTANCE_ID,
    LOG_GROUP,
    NAME,
    PLUGINS,
    QUIET,
    REASON,
    REGION,
    SERVICE,
    SHOW,
    TASK,
    VPC_ID,
    OptionKind,
    OptionSpec,
    ParsedOptions,
    parse_args,
)

__all__ = [
    "CLUSTER",
    "FILTERS",
    "FOLLOW",
    "FORCE_NEW_DEPLOYMENT",
    "HELP",
    "INSTANCE_ID",
    "LOG_GROUP",
    "NAME",
    "OptionKind",
    "OptionSpec",
    "PLUGINS",
    "ParsedOptions",
    "QUIET",
    "REASON",
    "REGION",
    "SERVICE",
    "SHOW",
    "TASK",
    "VPC_ID",
    "parse_args",
]
