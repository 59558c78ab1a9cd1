"""Tests for command, flag and environment reconstruction."""

import pytest

from kafkactl.k8s.command_view import FlagType
from kafkactl.k8s.context import (
    ClientContext,
    Duration,
    KafkaVersion,
    SaslConfig,
    TLSConfig,
)
from kafkactl.k8s.errors import CommandTreeError, FlagParseError
from kafkactl.k8s.translate import (
    MAX_COMMAND_DEPTH,
    parse_complete_command,
    parse_flags,
    parse_int_array,
    parse_pod_environment,
    parse_string_array,
)

from helpers import FakeNode, command_tree, flag


def test_command_path_excludes_root():
    assert parse_complete_command(command_tree("get", "topics")) == ["get", "topics"]


def test_command_path_of_root_is_empty():
    assert parse_complete_command(FakeNode("kafkactl")) == []


def test_command_path_has_no_fixed_depth():
    names = [f"level{i}" for i in range(10)]
    assert parse_complete_command(command_tree(*names)) == names


def test_cyclic_command_tree_is_rejected():
    first = FakeNode("a")
    second = FakeNode("b", parent=first)
    first.parent = second
    with pytest.raises(CommandTreeError):
        parse_complete_command(second)


def test_command_tree_at_depth_bound_is_accepted():
    names = [f"n{i}" for i in range(MAX_COMMAND_DEPTH)]
    assert parse_complete_command(command_tree(*names)) == names


def test_command_tree_beyond_depth_bound_is_rejected():
    names = [f"n{i}" for i in range(MAX_COMMAND_DEPTH + 1)]
    with pytest.raises(CommandTreeError):
        parse_complete_command(command_tree(*names))


def test_parse_int_array():
    assert parse_int_array("[1,2,3]") == [1, 2, 3]
    assert parse_int_array("[]") == []
    with pytest.raises(ValueError):
        parse_int_array("not-json")
    with pytest.raises(ValueError):
        parse_int_array('["a"]')


def test_int_list_flag_expands_in_order():
    node = command_tree(
        "consume", flags=[flag("partitions", "[1,2,3]", value_type=FlagType.INT_SLICE)]
    )
    assert parse_flags(node) == ["--partitions=1", "--partitions=2", "--partitions=3"]


def test_int32_list_flag_expands():
    node = command_tree(
        "consume", flags=[flag("partitions", "[7]", value_type=FlagType.INT32_SLICE)]
    )
    assert parse_flags(node) == ["--partitions=7"]


def test_invalid_int_list_flag_aborts_reconstruction():
    node = command_tree(
        "consume",
        flags=[
            flag("exit", "true", value_type=FlagType.BOOL),
            flag("partitions", "not-json", value_type=FlagType.INT_SLICE),
        ],
    )
    with pytest.raises(FlagParseError) as excinfo:
        parse_flags(node)
    assert excinfo.value.flag_name == "partitions"
    assert excinfo.value.value == "not-json"


def test_parse_string_array():
    assert parse_string_array('["a=1","b,c"]') == ["a=1", "b,c"]
    assert parse_string_array("[]") == []
    with pytest.raises(ValueError):
        parse_string_array("a,b")
    with pytest.raises(ValueError):
        parse_string_array("[1]")


def test_string_list_flag_expands_per_element():
    node = command_tree(
        "produce",
        flags=[flag("header", '["a:x,y","b:z"]', value_type=FlagType.STRING_ARRAY)],
    )
    assert parse_flags(node) == ["--header=a:x,y", "--header=b:z"]


def test_invalid_string_list_flag_aborts_reconstruction():
    node = command_tree(
        "produce", flags=[flag("header", "a:x,y", value_type=FlagType.STRING_ARRAY)]
    )
    with pytest.raises(FlagParseError, match="--header"):
        parse_flags(node)


def test_unchanged_flags_are_omitted():
    node = command_tree(
        "get",
        "topics",
        flags=[
            flag("output", "json"),
            flag("verbose", "false", changed=False, value_type=FlagType.BOOL),
            flag("partitions", "[1]", changed=False, value_type=FlagType.INT_SLICE),
        ],
    )
    assert parse_flags(node) == ["--output=json"]


def test_unchanged_invalid_int_list_is_not_parsed():
    node = command_tree(
        "consume",
        flags=[flag("partitions", "garbage", changed=False, value_type=FlagType.INT_SLICE)],
    )
    assert parse_flags(node) == []


def test_flags_follow_enumeration_order():
    node = command_tree(
        "produce",
        flags=[flag("value", "v1"), flag("key", "k1"), flag("partition", "3")],
    )
    assert parse_flags(node) == ["--value=v1", "--key=k1", "--partition=3"]


def test_empty_context_environment():
    assert parse_pod_environment(ClientContext(name="empty")) == ["BROKERS="]


def test_tls_flags_environment():
    context = ClientContext(
        name="tls",
        brokers=["b1:9092", "b2:9092"],
        tls=TLSConfig(enabled=True, insecure=True),
    )
    assert parse_pod_environment(context) == [
        "BROKERS=b1:9092 b2:9092",
        "TLS_ENABLED=true",
        "TLS_INSECURE=true",
    ]


def test_full_context_environment_order():
    context = ClientContext(
        name="full",
        brokers=["kafka:9092"],
        tls=TLSConfig(enabled=True, ca="/ca.pem", cert="/cert.pem", cert_key="/key.pem"),
        sasl=SaslConfig(enabled=True, username="user", password="secret", mechanism="scram-sha512"),
        request_timeout=Duration.parse("30s"),
        client_id="my-client",
        kafka_version=KafkaVersion.parse("2.5.0"),
        avro_schema_registry="http://registry:8081",
        default_partitioner="hash",
    )
    assert parse_pod_environment(context) == [
        "BROKERS=kafka:9092",
        "TLS_ENABLED=true",
        "TLS_CA=/ca.pem",
        "TLS_CERT=/cert.pem",
        "TLS_CERTKEY=/key.pem",
        "SASL_ENABLED=true",
        "SASL_USERNAME=user",
        "SASL_PASSWORD=secret",
        "SASL_MECHANISM=scram-sha512",
        "REQUESTTIMEOUT=30s",
        "CLIENTID=my-client",
        "KAFKAVERSION=2.5.0",
        "AVRO_SCHEMAREGISTRY=http://registry:8081",
        "DEFAULTPARTITIONER=hash",
    ]


def test_false_booleans_are_omitted_but_brokers_is_not():
    context = ClientContext(
        name="sasl",
        sasl=SaslConfig(enabled=False, username="user"),
    )
    env = parse_pod_environment(context)
    assert env == ["BROKERS=", "SASL_USERNAME=user"]
    assert not any(entry.startswith("SASL_ENABLED") for entry in env)


def test_environment_is_deterministic():
    context = ClientContext(name="x", brokers=["a", "b"], client_id="c")
    assert parse_pod_environment(context) == parse_pod_environment(context)
