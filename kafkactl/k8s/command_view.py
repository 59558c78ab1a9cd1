"""Read-only view of an invoked command and its flags."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, List, Optional, Protocol

import click
from click.core import ParameterSource

_EXPLICIT_SOURCES = {
    ParameterSource.COMMANDLINE,
    ParameterSource.ENVIRONMENT,
    ParameterSource.PROMPT,
}


class FlagType(str, Enum):
    """Declared value types of a flag."""

    STRING = "string"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float64"
    STRING_ARRAY = "stringArray"
    INT_SLICE = "intSlice"
    INT32_SLICE = "int32Slice"


INTEGER_LIST_TYPES = frozenset({FlagType.INT_SLICE, FlagType.INT32_SLICE})
# Flags replayed as one --name=value token per element.
REPEATED_TYPES = INTEGER_LIST_TYPES | {FlagType.STRING_ARRAY}


@dataclass(frozen=True)
class FlagView:
    """One declared flag together with the state it has in this invocation."""

    name: str
    value_type: FlagType
    changed: bool
    value: str


class CommandNode(Protocol):
    """A node of the command tree as seen by the invocation translator."""

    @property
    def name(self) -> str:
        """Declared name of the command."""

    @property
    def parent(self) -> Optional["CommandNode"]:
        """Parent command, ``None`` for the root."""

    def flags(self) -> Iterable[FlagView]:
        """Declared flags in enumeration order."""


def _long_name(option: click.Option) -> str:
    for opt in option.opts:
        if opt.startswith("--"):
            return opt[2:]
    return option.name or option.opts[0].lstrip("-")


def _flag_type(option: click.Option) -> FlagType:
    if option.multiple or option.nargs != 1:
        if isinstance(option.type, click.types.IntParamType):
            return FlagType.INT_SLICE
        return FlagType.STRING_ARRAY
    if option.is_bool_flag or isinstance(option.type, click.types.BoolParamType):
        return FlagType.BOOL
    if isinstance(option.type, click.types.IntParamType):
        return FlagType.INT
    if isinstance(option.type, click.types.FloatParamType):
        return FlagType.FLOAT
    return FlagType.STRING


def render_value(value_type: FlagType, value: Any) -> str:
    """Render a flag value the way the remote command line expects it."""
    if value is None:
        return ""
    if value_type in INTEGER_LIST_TYPES:
        return json.dumps([int(item) for item in value], separators=(",", ":"))
    if value_type is FlagType.STRING_ARRAY:
        return json.dumps([str(item) for item in value], separators=(",", ":"))
    if value_type is FlagType.BOOL:
        return "true" if value else "false"
    return str(value)


class ClickCommandNode:
    """Adapts an invoked ``click.Context`` to the ``CommandNode`` protocol.

    Only the command's own options are exposed; options of parent groups are
    parsed before the subcommand and therefore cannot be replayed after it.
    Flags are enumerated lexicographically by long name.
    """

    def __init__(self, ctx: click.Context):
        self._ctx = ctx

    @property
    def name(self) -> str:
        return self._ctx.command.name or self._ctx.info_name or ""

    @property
    def parent(self) -> Optional["ClickCommandNode"]:
        if self._ctx.parent is None:
            return None
        return ClickCommandNode(self._ctx.parent)

    def flags(self) -> List[FlagView]:
        views = []
        for param in self._ctx.command.params:
            if not isinstance(param, click.Option) or not param.expose_value:
                continue
            value_type = _flag_type(param)
            source = self._ctx.get_parameter_source(param.name)
            views.append(
                FlagView(
                    name=_long_name(param),
                    value_type=value_type,
                    changed=source in _EXPLICIT_SOURCES,
                    value=render_value(value_type, self._ctx.params.get(param.name)),
                )
            )
        return sorted(views, key=lambda view: view.name)


def positional_args(ctx: click.Context) -> List[str]:
    """Return the positional arguments of an invocation in declaration order."""

    args: List[str] = []
    for param in ctx.command.params:
        if not isinstance(param, click.Argument):
            continue
        value = ctx.params.get(param.name)
        if value is None:
            continue
        if param.nargs != 1:
            args.extend(str(item) for item in value)
        else:
            args.append(str(value))
    args.extend(ctx.args)
    return args
