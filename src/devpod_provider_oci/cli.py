#!/usr/bin/env python3
"""DevPod OCI provider CLI"""

from __future__ import annotations

import os
from typing import NoReturn

import click
from rich.console import Console
from rich.table import Table

from devpod_provider_oci.auth_manager import OCIAuthManager
from devpod_provider_oci.oci_client import OCIClient
from devpod_provider_oci.options import Options
from devpod_provider_oci.provider import OracleProvider
from devpod_provider_oci.ssh import SSHCommandRunner
from devpod_provider_oci.ssh_keys import ensure_key_pair, private_key_path

# stdout belongs to the status output
CONSOLE = Console(stderr=True)


def fail(e: Exception) -> NoReturn:
    CONSOLE.print(f"[bold red]❌ Error: {e.__class__.__name__}: {e}[/bold red]")
    raise click.Abort()


def load_provider(skip_machine: bool = False) -> tuple[Options, OracleProvider]:
    options = Options.from_env(skip_machine)
    return options, OracleProvider.from_options(options)


@click.group()
def main():
    """DevPod machine provider for Oracle Cloud Infrastructure"""


@main.command()
def init():
    """Validate the OCI configuration"""
    try:
        options = Options.from_env(skip_machine=True)
        client = OCIClient(OCIAuthManager(options.oci_config_file, options.oci_profile), region=options.region)
        client.test_connectivity()
    except Exception as e:
        fail(e)

    display_options(options)


@main.command()
def create():
    """Create an instance"""
    try:
        options, provider = load_provider()
        key_pair = ensure_key_pair(options.machine_folder)
        provider.create(
            options.machine_id,
            options.disk_image,
            options.disk_size,
            options.machine_type,
            options.region,
            options.availability_domain,
            key_pair.public_key,
        )
    except Exception as e:
        fail(e)


@main.command()
def delete():
    """Delete an instance"""
    try:
        options, provider = load_provider()
        provider.delete(options.machine_id)
    except Exception as e:
        fail(e)


@main.command()
def start():
    """Start an instance"""
    try:
        options, provider = load_provider()
        provider.start(options.machine_id)
    except Exception as e:
        fail(e)


@main.command()
def stop():
    """Stop an instance"""
    try:
        options, provider = load_provider()
        provider.stop(options.machine_id)
    except Exception as e:
        fail(e)


@main.command()
def status():
    """Retrieve the status of an instance"""
    try:
        options, provider = load_provider()
        result = provider.status(options.machine_id)
    except Exception as e:
        fail(e)

    click.echo(result, nl=False)


@main.command()
@click.pass_context
def command(ctx: click.Context):
    """Run the command in $COMMAND on an instance"""
    try:
        options, provider = load_provider()
        remote_command = os.environ.get("COMMAND", "")
        if not remote_command:
            raise click.UsageError("COMMAND environment variable is not set")

        ip = provider.ip(options.machine_id)
        exit_code = SSHCommandRunner(private_key_path(options.machine_folder)).run(ip, remote_command)
    except Exception as e:
        fail(e)

    ctx.exit(exit_code)


def display_options(options: Options):
    """Display resolved options in a table"""
    table = Table(title="OCI Provider", show_header=True, header_style="bold magenta")
    table.add_column("Option", style="cyan", width=20)
    table.add_column("Value", style="white")

    for name in ("oci_config_file", "oci_profile", "region", "compartment_id", "availability_domain"):
        table.add_row(name.replace("_", " ").title(), str(getattr(options, name)))

    CONSOLE.print(table)
    CONSOLE.print("[bold green]✅ OCI configuration is valid[/bold green]")


if __name__ == "__main__":
    main()
