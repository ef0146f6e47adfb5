"""Declarative catalog of wrapped AWS CLI operations."""

from awsu.catalog.commands import CATALOG, get_command, grouped
from awsu.catalog.models import (
    DOCS_BASE,
    CommandSpec,
    DefaultSource,
    OutputMode,
    ParamSpec,
)

__all__ = [
    "CATALOG",
    "CommandSpec",
    "DOCS_BASE",
    "DefaultSource",
    "OutputMode",
    "ParamSpec",
    "get_command",
    "grouped",
]
