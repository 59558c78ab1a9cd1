"""Rebuild an invocation so it can be replayed inside a remote pod."""

from __future__ import annotations

import json
from typing import List, Optional

from kafkactl.k8s.command_view import INTEGER_LIST_TYPES, REPEATED_TYPES, CommandNode
from kafkactl.k8s.context import ClientContext
from kafkactl.k8s.errors import CommandTreeError, FlagParseError

MAX_COMMAND_DEPTH = 64


def parse_complete_command(node: CommandNode) -> List[str]:
    """Return the command path from the root to ``node``, root excluded."""

    found: List[str] = []
    current: Optional[CommandNode] = node
    for _ in range(MAX_COMMAND_DEPTH + 1):
        if current is None or current.parent is None:
            return found
        found.insert(0, current.name)
        current = current.parent
    raise CommandTreeError(
        f"command tree deeper than {MAX_COMMAND_DEPTH} levels, parent chain is cyclic?"
    )


def parse_int_array(array: str) -> List[int]:
    """Parse a JSON array of integers such as ``[1,2,3]``."""

    values = json.loads(array)
    if not isinstance(values, list) or not all(
        isinstance(value, int) and not isinstance(value, bool) for value in values
    ):
        raise ValueError(f"not an array of integers: {array}")
    return values


def parse_string_array(array: str) -> List[str]:
    """Parse a JSON array of strings such as ``["a=1","b=2"]``."""

    values = json.loads(array)
    if not isinstance(values, list) or not all(isinstance(value, str) for value in values):
        raise ValueError(f"not an array of strings: {array}")
    return values


def parse_flags(node: CommandNode) -> List[str]:
    """Rebuild ``--name=value`` tokens for every flag set on this invocation."""

    flags: List[str] = []
    for flag in node.flags():
        if not flag.changed:
            continue
        if flag.value_type in REPEATED_TYPES:
            if flag.value_type in INTEGER_LIST_TYPES:
                parse = parse_int_array
            else:
                parse = parse_string_array
            try:
                values = parse(flag.value)
            except ValueError as exc:
                raise FlagParseError(flag.name, flag.value) from exc
            flags.extend(f"--{flag.name}={value}" for value in values)
        else:
            flags.append(f"--{flag.name}={flag.value}")
    return flags


def _append_strings(env: List[str], key: str, values: List[str]) -> None:
    env.append(f"{key}={' '.join(values)}")


def _append_bool(env: List[str], key: str, value: bool) -> None:
    if value:
        env.append(f"{key}=true")


def _append_string_if_defined(env: List[str], key: str, value: object) -> None:
    rendered = "" if value is None else str(value)
    if rendered != "":
        env.append(f"{key}={rendered}")


def parse_pod_environment(context: ClientContext) -> List[str]:
    """Map a connection context onto the environment of the remote pod.

    ``BROKERS`` is always present, even when empty, so the pod can tell an
    empty broker list from an unset variable. False booleans and empty
    strings are left out entirely.
    """

    env: List[str] = []

    _append_strings(env, "BROKERS", context.brokers)
    _append_bool(env, "TLS_ENABLED", context.tls.enabled)
    _append_string_if_defined(env, "TLS_CA", context.tls.ca)
    _append_string_if_defined(env, "TLS_CERT", context.tls.cert)
    _append_string_if_defined(env, "TLS_CERTKEY", context.tls.cert_key)
    _append_bool(env, "TLS_INSECURE", context.tls.insecure)
    _append_bool(env, "SASL_ENABLED", context.sasl.enabled)
    _append_string_if_defined(env, "SASL_USERNAME", context.sasl.username)
    _append_string_if_defined(env, "SASL_PASSWORD", context.sasl.password)
    _append_string_if_defined(env, "SASL_MECHANISM", context.sasl.mechanism)
    _append_string_if_defined(env, "REQUESTTIMEOUT", context.request_timeout)
    _append_string_if_defined(env, "CLIENTID", context.client_id)
    _append_string_if_defined(env, "KAFKAVERSION", context.kafka_version)
    _append_string_if_defined(env, "AVRO_SCHEMAREGISTRY", context.avro_schema_registry)
    _append_string_if_defined(env, "DEFAULTPARTITIONER", context.default_partitioner)

    return env
