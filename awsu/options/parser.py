"""Generic option parser for catalog commands.

Turns the raw token list of one invocation into a :class:`ParsedOptions`
record.  The parser knows nothing about AWS; which options a command
accepts is decided by the caller (see :mod:`awsu.catalog`).

Rules:

- Value options consume the next token.  A missing, empty or
  dash-prefixed next token raises :class:`MissingValue`.  Long options
  also accept ``--opt=value``.
- Greedy options (``--filters``) consume tokens until the next token
  that starts with ``-``.
- Any other token starting with ``-`` raises :class:`UnknownOption`.
- Everything after a bare ``--`` is taken verbatim: into ``filters``
  when the command accepts ``--filters``, otherwise into
  ``positionals``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Set, Tuple

from awsu.errors import MissingValue, UnknownOption


class OptionKind(str, Enum):
    """Arity of a recognised option."""

    SWITCH = "switch"
    VALUE = "value"
    GREEDY = "greedy"


@dataclass(frozen=True)
class OptionSpec:
    """One recognised option and its aliases."""

    dest: str
    flags: Tuple[str, ...]
    kind: OptionKind = OptionKind.VALUE
    metavar: str = ""
    help: str = ""

    @property
    def display(self) -> str:
        """Help-style spelling, e.g. ``-r, --region REGION``."""
        names = ", ".join(self.flags)
        if self.kind is OptionKind.SWITCH:
            return names
        suffix = f"{self.metavar}..." if self.kind is OptionKind.GREEDY else self.metavar
        return f"{names} {suffix}"


# ---------------------------------------------------------------------------
# Standard options
# ---------------------------------------------------------------------------

REGION = OptionSpec("region", ("-r", "--region"), metavar="REGION", help="AWS region")
CLUSTER = OptionSpec("cluster", ("-c", "--cluster"), metavar="CLUSTER", help="Cluster name")
INSTANCE_ID = OptionSpec(
    "instance_id", ("-i", "--instance-id"), metavar="INSTANCE_ID", help="EC2 instance ID"
)
LOG_GROUP = OptionSpec(
    "log_group", ("-g", "--log-group"), metavar="GROUP", help="CloudWatch log group name"
)
FOLLOW = OptionSpec(
    "follow", ("-f", "--follow"), OptionKind.SWITCH, help="Follow log output (like tail -f)"
)
FILTERS = OptionSpec(
    "filters",
    ("--filters",),
    OptionKind.GREEDY,
    metavar="FILTERS",
    help="AWS EC2 filters (e.g., Name=instance-state-name,Values=running)",
)
HELP = OptionSpec("help", ("-h", "--help"), OptionKind.SWITCH, help="Show this help message")
SHOW = OptionSpec(
    "show",
    ("--show",),
    OptionKind.SWITCH,
    help="Show the AWS CLI command without executing it",
)

# ---------------------------------------------------------------------------
# Per-command extras
# ---------------------------------------------------------------------------

NAME = OptionSpec("name", ("-n", "--name"), metavar="REPO", help="ECR repository name")
SERVICE = OptionSpec("service", ("-s", "--service"), metavar="SERVICE", help="Service name or ARN")
TASK = OptionSpec("task", ("-t", "--task"), metavar="TASK_ID", help="ECS task ID or ARN")
REASON = OptionSpec("reason", ("--reason",), metavar="REASON", help="Reason recorded on the task")
VPC_ID = OptionSpec("vpc_id", ("--vpc-id",), metavar="VPC_ID", help="VPC ID")
FORCE_NEW_DEPLOYMENT = OptionSpec(
    "force_new_deployment",
    ("--force-new-deployment",),
    OptionKind.SWITCH,
    help="Force a new deployment of the service",
)
PLUGINS = OptionSpec(
    "plugins",
    ("-p", "--plugins"),
    OptionKind.SWITCH,
    help="Also install kubectl plugins (ns, ctx, history, images)",
)
QUIET = OptionSpec(
    "quiet", ("-q", "--quiet"), OptionKind.SWITCH, help="Only run required checks"
)

_CORE_FIELDS = frozenset(
    {
        "region",
        "cluster",
        "instance_id",
        "log_group",
        "follow",
        "filters",
        "help",
        "show",
    }
)


# ---------------------------------------------------------------------------
# ParsedOptions
# ---------------------------------------------------------------------------


@dataclass
class ParsedOptions:
    """Normalised options of one invocation.

    ``explicit`` records which destinations were given on the command
    line, so callers can tell a flag value apart from a default.
    """

    region: str = ""
    cluster: Optional[str] = None
    instance_id: Optional[str] = None
    log_group: Optional[str] = None
    follow: bool = False
    filters: List[str] = field(default_factory=list)
    help: bool = False
    show: bool = False
    positionals: List[str] = field(default_factory=list)
    values: Dict[str, Any] = field(default_factory=dict)
    explicit: Set[str] = field(default_factory=set)

    def get(self, dest: str, default: Any = None) -> Any:
        if dest in _CORE_FIELDS:
            value = getattr(self, dest)
            return default if value is None else value
        return self.values.get(dest, default)

    def set(self, dest: str, value: Any) -> None:
        if dest in _CORE_FIELDS:
            setattr(self, dest, value)
        else:
            self.values[dest] = value

    def is_explicit(self, dest: str) -> bool:
        return dest in self.explicit


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def parse_args(
    tokens: Sequence[str],
    options: Sequence[OptionSpec],
    defaults: Optional[Mapping[str, Any]] = None,
) -> ParsedOptions:
    """Parse *tokens* against the recognised *options*.

    *defaults* pre-populates destinations before parsing; explicit flags
    overwrite them.

    Raises:
        MissingValue: A value option has no usable value.
        UnknownOption: A dash-prefixed token is not in *options*.
    """
    lookup: Dict[str, OptionSpec] = {}
    for opt in options:
        for flag in opt.flags:
            lookup[flag] = opt
    accepts_filters = any(opt.dest == FILTERS.dest for opt in options)

    parsed = ParsedOptions()
    for dest, value in (defaults or {}).items():
        parsed.set(dest, value)

    items = list(tokens)
    i = 0
    while i < len(items):
        token = items[i]

        if token == "--":
            rest = items[i + 1:]
            if accepts_filters:
                parsed.filters.extend(rest)
            else:
                parsed.positionals.extend(rest)
            break

        if not _looks_like_flag(token):
            parsed.positionals.append(token)
            i += 1
            continue

        name, inline = token, None
        if token.startswith("--") and "=" in token:
            name, _, inline = token.partition("=")

        opt = lookup.get(name)
        if opt is None:
            raise UnknownOption(token)

        if opt.kind is OptionKind.SWITCH:
            if inline is not None:
                raise UnknownOption(token)
            parsed.set(opt.dest, True)

        elif opt.kind is OptionKind.VALUE:
            if inline is not None:
                value = inline
            else:
                nxt = items[i + 1] if i + 1 < len(items) else ""
                if not nxt or _looks_like_flag(nxt):
                    raise MissingValue(name)
                value = nxt
                i += 1
            if not value:
                raise MissingValue(name)
            parsed.set(opt.dest, value)

        else:  # GREEDY
            collected: List[str] = list(parsed.get(opt.dest) or [])
            if inline:
                collected.append(inline)
            while i + 1 < len(items) and not items[i + 1].startswith("-"):
                collected.append(items[i + 1])
                i += 1
            parsed.set(opt.dest, collected)

        parsed.explicit.add(opt.dest)
        i += 1

    return parsed


def _looks_like_flag(token: str) -> bool:
    return token.startswith("-") and token != "-"
