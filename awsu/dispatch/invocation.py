"""One resolved invocation of a catalog command.

An :class:`Invocation` pairs a :class:`CommandSpec` with the parameter
values resolved for this call and the mode decided for it.  The argv it
renders is the single source of truth for both show mode and execution.
"""

from __future__ import annotations

import shlex
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List

from awsu import ui
from awsu.catalog.models import CommandSpec
from awsu.errors import ConfirmationDeclined
from awsu.options.parser import ParsedOptions

_PLACEHOLDER_PREFIX = "{"

# Callable shapes injected into the dispatcher.
Confirm = Callable[[str], bool]
EnsureTool = Callable[[str], bool]


class Mode(str, Enum):
    """Per-call mode, decided once before anything runs."""

    HELP = "help"
    SHOW = "show"
    EXECUTE = "execute"


@dataclass
class Invocation:
    spec: CommandSpec
    mode: Mode
    options: ParsedOptions
    values: Dict[str, Any] = field(default_factory=dict)

    def argv(self) -> List[str]:
        return build_argv(self.spec, self.values)

    def command_text(self) -> str:
        return shlex.join(self.argv())

    def message(self, template: str) -> str:
        """Fill ``{name}`` fields of *template* from the resolved values."""
        return template.format(**self.display_values())

    def display_values(self) -> Dict[str, str]:
        out: Dict[str, str] = {}
        for p in self.spec.params:
            value = self.values.get(p.name)
            if value is None:
                out[p.name] = ""
            elif isinstance(value, (list, tuple)):
                out[p.name] = " ".join(value)
            else:
                out[p.name] = str(value)
        return out


def build_argv(spec: CommandSpec, values: Dict[str, Any]) -> List[str]:
    """Expand *spec*'s argument template into a full ``aws`` argv."""
    argv = ["aws", spec.service, spec.verb]
    for token in spec.arguments:
        if token.startswith(_PLACEHOLDER_PREFIX) and token.endswith("}"):
            param = spec.param(token[1:-1])
            argv.extend(param.render(values.get(param.name)))
        else:
            argv.append(token)
    return argv


def confirm_destructive(inv: Invocation, confirm: Confirm) -> None:
    """Print the operation's warning and require an exact ``yes``.

    Raises:
        ConfirmationDeclined: Anything other than ``yes`` was answered.
    """
    spec = inv.spec
    for line in spec.warning:
        ui.warn(inv.message(line))
    ui.console.print()
    if not confirm(inv.message(spec.confirm_prompt)):
        raise ConfirmationDeclined(spec.name)
