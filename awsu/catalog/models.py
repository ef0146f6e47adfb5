"""Pydantic models describing catalog operations.

A :class:`CommandSpec` is a static description of one wrapped AWS CLI
operation: which logical parameters it takes, how they map onto the
``aws`` command line, and how its output is presented.  Specs are frozen
and built once at import time.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from awsu.config.models import Settings
from awsu.options.parser import HELP, SHOW, OptionKind, OptionSpec

DOCS_BASE = "https://docs.aws.amazon.com/cli/latest/reference"

_PLACEHOLDER = re.compile(r"^\{([a-z_]+)\}$")


class OutputMode(str, Enum):
    """How the wrapped command's stdout is relayed."""

    TEXT = "text"
    JSON = "json"


class DefaultSource(str, Enum):
    """Settings field a parameter defaults to."""

    REGION = "region"
    CLUSTER = "cluster"


class ParamSpec(BaseModel):
    """One logical parameter of an operation.

    Attributes:
        name: Placeholder name used in :attr:`CommandSpec.arguments`.
        option: Command-line option the value is read from.
        positional: Index into the positional arguments used when the
            option is not given explicitly.
        required: Fail validation when the resolved value is empty.
        default: Literal default value.
        default_from: Settings field used as default (wins over *default*).
        aws_flag: Flag emitted on the ``aws`` command line; ``None`` emits
            the bare value.
        value_format: ``str.format`` pattern applied to the value.
        label: Human-readable name for error messages.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    option: Optional[OptionSpec] = None
    positional: Optional[int] = None
    required: bool = False
    default: Optional[str] = None
    default_from: Optional[DefaultSource] = None
    aws_flag: Optional[str] = None
    value_format: str = "{}"
    label: str = ""

    @property
    def is_switch(self) -> bool:
        return self.option is not None and self.option.kind is OptionKind.SWITCH

    @property
    def is_list(self) -> bool:
        return self.option is not None and self.option.kind is OptionKind.GREEDY

    @property
    def dest(self) -> str:
        return self.option.dest if self.option is not None else self.name

    def default_value(self, settings: Settings) -> Optional[str]:
        if self.default_from is DefaultSource.REGION:
            return settings.default_region
        if self.default_from is DefaultSource.CLUSTER:
            return settings.default_cluster
        return self.default

    def render(self, value: Any) -> List[str]:
        """Return the ``aws`` argv fragment for *value* (empty when unset)."""
        if self.is_switch:
            return [self.aws_flag] if value and self.aws_flag else []
        if self.is_list:
            values = [self.value_format.format(v) for v in value or []]
            if not values:
                return []
            return [self.aws_flag, *values] if self.aws_flag else values
        if value is None or value == "":
            return []
        text = self.value_format.format(value)
        return [self.aws_flag, text] if self.aws_flag else [text]


class CommandSpec(BaseModel):
    """Static description of one exposed operation.

    ``arguments`` is the ordered ``aws`` argument template that follows
    ``aws <service> <verb>``: ``{name}`` entries expand to the parameter's
    argv fragment, everything else is emitted literally.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    group: str
    service: str
    verb: str
    summary: str
    params: Tuple[ParamSpec, ...] = ()
    arguments: Tuple[str, ...] = ()
    output: OutputMode = OutputMode.TEXT
    destructive: bool = False
    warning: Tuple[str, ...] = ()
    confirm_prompt: str = ""
    announce: str = ""
    success_message: str = ""
    failure_hint: str = ""
    formatter: Optional[str] = None
    handler: Optional[str] = None
    examples: Tuple[str, ...] = ()
    tools: Tuple[str, ...] = ("aws",)

    @model_validator(mode="after")
    def _check_placeholders(self) -> "CommandSpec":
        names = {p.name for p in self.params}
        for token in self.arguments:
            match = _PLACEHOLDER.match(token)
            if match and match.group(1) not in names:
                raise ValueError(
                    f"{self.name}: argument placeholder {token} has no parameter"
                )
        if self.destructive and not self.confirm_prompt:
            raise ValueError(f"{self.name}: destructive commands need a confirm_prompt")
        return self

    # -- derived views --------------------------------------------------

    @property
    def docs_url(self) -> str:
        return f"{DOCS_BASE}/{self.service}/{self.verb}.html"

    @property
    def required_params(self) -> Tuple[ParamSpec, ...]:
        return tuple(p for p in self.params if p.required)

    @property
    def accepts_filters(self) -> bool:
        return any(p.is_list for p in self.params)

    def param(self, name: str) -> ParamSpec:
        for p in self.params:
            if p.name == name:
                return p
        raise KeyError(name)

    def options(self) -> Tuple[OptionSpec, ...]:
        """Recognised options: each parameter's option plus help/show."""
        seen: Dict[str, OptionSpec] = {}
        for p in self.params:
            if p.option is not None:
                seen.setdefault(p.option.dest, p.option)
        seen.setdefault(HELP.dest, HELP)
        seen.setdefault(SHOW.dest, SHOW)
        return tuple(seen.values())

    def option_defaults(self, settings: Settings) -> Dict[str, Any]:
        """Defaults handed to the option parser."""
        defaults: Dict[str, Any] = {}
        for p in self.params:
            if p.option is None:
                continue
            if p.is_switch:
                defaults.setdefault(p.dest, False)
            elif p.is_list:
                defaults.setdefault(p.dest, [])
            else:
                value = p.default_value(settings)
                if value is not None:
                    defaults[p.dest] = value
        return defaults

    def usage(self) -> str:
        """One-line usage string, e.g. ``eks-list [-r|--region REGION] ...``."""
        parts = [self.name]
        for p in self.params:
            if p.option is None:
                continue
            flags = "|".join(p.option.flags)
            if p.is_switch:
                text = flags
            elif p.is_list:
                text = f"{flags} {p.option.metavar}..."
            else:
                text = f"{flags} {p.option.metavar}"
            optional = (
                not p.required
                or p.positional is not None
                or p.default_from is not None
                or p.default is not None
            )
            parts.append(f"[{text}]" if optional else text)
        parts.extend(["[-h|--help]", "[--show]"])
        return " ".join(parts)
