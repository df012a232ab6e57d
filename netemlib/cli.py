"""Command line entry point (``netemlib --help``)."""
import asyncio
import json
import logging
import sys

import click

from netemlib import server
from netemlib.config import set_config
from netemlib.configuration import NetemConfiguration
from netemlib.errors import ConfigurationError, NetemExecutionError
from netemlib.netem.command import NetemReset, execute, show as show_controls
from netemlib.netem.controls import Controls
from netemlib.version import __version__


def _configuration(node_name: bool) -> NetemConfiguration:
    try:
        return NetemConfiguration.from_environment(latency_from_node_name=node_name)
    except ConfigurationError as err:
        raise click.ClickException(str(err))


def _run(netem) -> None:
    output = asyncio.run(execute(netem))
    click.echo(json.dumps(output.to_dict()))
    if not output.is_ok():
        sys.exit(1)


node_name_option = click.option(
    "--node-name",
    is_flag=True,
    help="Read the latency from the variable named after $NODE_NAME.",
)


@click.group()
@click.option("--debug", is_flag=True, help="Verbose logging.")
@click.option("--tc", "tc_binary", help="Path to the tc executable.")
@click.version_option(__version__)
def cli(debug, tc_binary):
    """Configure the netem qdisc of a device."""
    logging.basicConfig(level=logging.DEBUG if debug else logging.INFO)
    if tc_binary:
        set_config(tc_binary=tc_binary)


@cli.command()
@node_name_option
def apply(node_name):
    """Apply the controls described by the environment."""
    _run(_configuration(node_name).to_netem())


@cli.command()
@click.option("--interface", required=True, help="Device to reset.")
def reset(interface):
    """Remove the netem qdisc of a device."""
    _run(NetemReset(interface=interface))


@cli.command()
@node_name_option
def args(node_name):
    """Print the tc arguments built from the environment."""
    click.echo(" ".join(_configuration(node_name).to_netem().to_args()))


@cli.command()
@click.argument("source", type=click.File("r"), default="-")
@click.option(
    "--no-gate",
    is_flag=True,
    help="Don't require the text to start with 'qdisc netem'.",
)
def parse(source, no_gate):
    """Parse tc output (stdin by default) into controls."""
    controls = Controls.from_string(source.read(), gated=not no_gate)
    click.echo(json.dumps(controls.to_dict()))


@cli.command()
@click.option("--interface", required=True, help="Device to inspect.")
def show(interface):
    """Print the netem controls currently set on a device."""
    try:
        controls = asyncio.run(show_controls(interface))
    except NetemExecutionError as err:
        raise click.ClickException(err.description)
    click.echo(json.dumps(controls.to_dict()))


@cli.command()
@click.option("--host", help="Address to bind.")
@click.option("--port", type=int, help="Port to listen on.")
def serve(host, port):
    """Serve the HTTP api."""
    server.serve(host=host, port=port)


def main():
    cli()


if __name__ == "__main__":
    main()
