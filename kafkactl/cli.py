"""kafkactl CLI implementation."""

import functools
import sys
from typing import Callable, Optional

import click
import yaml

from kafkactl import __version__
from kafkactl.config import ConfigManager, get_config_manager
from kafkactl.k8s import (
    ClickCommandNode,
    ContextResolutionError,
    KafkactlError,
    Operation,
    positional_args,
)
from kafkactl.k8s.translate import parse_complete_command
from kafkactl.shared import debug, output

TABLE_FORMATS = click.Choice(["compact", "wide", "json", "yaml"])
DOCUMENT_FORMATS = click.Choice(["json", "yaml"])


def _config_manager(ctx: click.Context) -> ConfigManager:
    return ctx.find_object(dict)["config_manager"]


def _operation(ctx: click.Context) -> Operation:
    """Create a fresh dispatch operation bound to the selected context."""
    obj = ctx.find_object(dict)
    loader = functools.partial(
        obj["config_manager"].create_client_context, obj.get("context")
    )
    return Operation(context_loader=loader)


def dispatch(ctx: click.Context) -> None:
    """Execute the invoked command inside the cluster if the context allows it."""
    node = ClickCommandNode(ctx)
    if _operation(ctx).try_run(node, positional_args(ctx)):
        return
    path = " ".join(parse_complete_command(node))
    raise click.ClickException(
        f"'{path}' needs a context with kubernetes.enabled set; "
        "local execution is not available"
    )


def remote_command(func: Callable) -> Callable:
    """Run the decorated command through ``dispatch``."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        dispatch(click.get_current_context())

    return wrapper


@click.group(
    help="kafkactl - command-line interface for Apache Kafka, executed in Kubernetes.",
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.option(
    "--config-file",
    type=click.Path(dir_okay=False),
    help="Config file (default is $HOME/.config/kafkactl/config.yml).",
)
@click.option("--context", "context_name", help="The name of the context to use.")
@click.option("-V", "--verbose", is_flag=True, help="Verbose output.")
@click.pass_context
def cli(
    ctx: click.Context,
    config_file: Optional[str],
    context_name: Optional[str],
    verbose: bool,
) -> None:
    """Root command for the kafkactl CLI."""
    debug.configure_root()
    if verbose:
        debug.enable()
    ctx.ensure_object(dict)
    ctx.obj["config_manager"] = get_config_manager(config_file)
    ctx.obj["context"] = context_name


@cli.command(help="Run an interactive shell in a pod inside the cluster.")
@click.pass_context
def attach(ctx: click.Context) -> None:
    """Attach to a debug shell with the context's connection settings."""
    if not sys.stdin.isatty():
        output.warn("stdin is not a terminal, the remote shell will not be interactive")
    try:
        _operation(ctx).attach()
    except KafkactlError as err:
        output.fail(err)


@cli.command(help="Print the kafkactl version.")
def version() -> None:
    click.echo(f"kafkactl {__version__}")


@cli.group(help="Get info about resources.")
def get() -> None:
    """Get commands."""


@get.command("topics", help="List available topics.")
@click.option("--output", "-o", type=TABLE_FORMATS, help="Output format.")
@remote_command
def get_topics(output: Optional[str]) -> None:
    """List topics."""


@get.command("consumer-groups", help="List available consumer groups.")
@click.option("--topic", "-t", multiple=True, help="Show groups for the given topic only.")
@click.option("--output", "-o", type=TABLE_FORMATS, help="Output format.")
@remote_command
def get_consumer_groups(topic, output):
    """List consumer groups."""


@cli.group(help="Describe a resource.")
def describe() -> None:
    """Describe commands."""


@describe.command("topic", help="Describe a topic.")
@click.argument("topic")
@click.option("--output", "-o", type=DOCUMENT_FORMATS, help="Output format.")
@click.option(
    "--print-configs",
    "-c",
    type=click.Choice(["no", "all", "non-defaults"]),
    default="non-defaults",
    show_default=True,
    help="Which topic configs to print.",
)
@remote_command
def describe_topic(topic, output, print_configs):
    """Describe one topic."""


@describe.command("consumer-group", help="Describe a consumer group.")
@click.argument("group")
@click.option("--topic", "-t", help="Show offsets for the given topic only.")
@click.option("--output", "-o", type=DOCUMENT_FORMATS, help="Output format.")
@remote_command
def describe_consumer_group(group, topic, output):
    """Describe one consumer group."""


@cli.group(help="Create topics, consumer groups, ...")
def create() -> None:
    """Create commands."""


@create.command("topic", help="Create one or more topics.")
@click.argument("topics", nargs=-1, required=True)
@click.option("--partitions", "-p", type=int, default=1, show_default=True)
@click.option("--replication-factor", "-r", type=int, default=-1, show_default=True)
@click.option("--config", "-c", multiple=True, help="Topic configs, key=value.")
@click.option("--validate-only", "-v", is_flag=True, help="Validate the request only.")
@remote_command
def create_topic(topics, partitions, replication_factor, config, validate_only):
    """Create topics."""


@cli.group(help="Delete topics, consumer groups, ...")
def delete() -> None:
    """Delete commands."""


@delete.command("topic", help="Delete one or more topics.")
@click.argument("topics", nargs=-1, required=True)
@remote_command
def delete_topic(topics):
    """Delete topics."""


@cli.group(help="Alter topics, partitions, ...")
def alter() -> None:
    """Alter commands."""


@alter.command("topic", help="Alter a topic.")
@click.argument("topic")
@click.option("--partitions", "-p", type=int, help="New number of partitions.")
@click.option("--config", "-c", multiple=True, help="Topic configs, key=value.")
@click.option("--validate-only", "-v", is_flag=True, help="Validate the request only.")
@remote_command
def alter_topic(topic, partitions, config, validate_only):
    """Alter a topic."""


@cli.command(help="Consume messages from a topic.")
@click.argument("topic")
@click.option(
    "--partitions", "-p", type=int, multiple=True, help="Partitions to consume from."
)
@click.option("--from-beginning", "-b", is_flag=True, help="Read from the oldest offset.")
@click.option("--exit", "-e", "exit_", is_flag=True, help="Stop at the newest offset.")
@click.option("--offset", multiple=True, help="Offsets per partition, partition=offset.")
@click.option("--max-messages", type=int, default=-1, show_default=True)
@click.option("--print-keys", "-k", is_flag=True, help="Print message keys.")
@click.option("--print-timestamps", is_flag=True, help="Print message timestamps.")
@click.option("--output", "-o", type=DOCUMENT_FORMATS, help="Output format.")
@remote_command
def consume(
    topic,
    partitions,
    from_beginning,
    exit_,
    offset,
    max_messages,
    print_keys,
    print_timestamps,
    output,
):
    """Consume messages."""


@cli.command(help="Produce messages to a topic.")
@click.argument("topic")
@click.option("--key", "-k", help="Message key.")
@click.option("--value", "-v", help="Message value.")
@click.option("--partition", "-p", type=int, default=-1, show_default=True)
@click.option("--separator", "-S", help="Separator between key and value.")
@click.option("--header", "-H", multiple=True, help="Headers, key:value.")
@click.option("--file", "-f", help="Read messages from a file.")
@remote_command
def produce(topic, key, value, partition, separator, header, file):
    """Produce messages."""


@cli.group(help="Show and edit configurations.")
def config() -> None:
    """Configuration commands."""


@config.command("current-context", help="Show the current context.")
@click.pass_context
def current_context(ctx: click.Context) -> None:
    try:
        click.echo(_config_manager(ctx).get_current_context())
    except ContextResolutionError as err:
        raise click.ClickException(str(err)) from err


@config.command("get-contexts", help="List configured contexts.")
@click.pass_context
def get_contexts(ctx: click.Context) -> None:
    manager = _config_manager(ctx)
    try:
        contexts = manager.list_contexts()
        config_data = manager.load_config()
    except ContextResolutionError as err:
        raise click.ClickException(str(err)) from err

    current = config_data.get("current-context")
    for name in contexts:
        marker = "*" if name == current else " "
        click.echo(f"{marker} {name}")


@config.command("use-context", help="Switch the active context.")
@click.argument("name")
@click.pass_context
def use_context(ctx: click.Context, name: str) -> None:
    try:
        _config_manager(ctx).use_context(name)
    except ContextResolutionError as err:
        raise click.ClickException(str(err)) from err
    click.echo(f"Switched to context {name!r}.")


@config.command("view", help="Show the contents of the config file.")
@click.pass_context
def view(ctx: click.Context) -> None:
    manager = _config_manager(ctx)
    try:
        config_data = manager.load_config()
    except ContextResolutionError as err:
        raise click.ClickException(str(err)) from err
    click.echo(f"# {manager.config_file}")
    click.echo(yaml.safe_dump(config_data, sort_keys=False).rstrip())


def main():
    """Main entry point for CLI."""
    cli(prog_name="kafkactl")


if __name__ == "__main__":
    main()
