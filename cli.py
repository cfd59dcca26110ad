# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""ConfStore CLI - read and write INI files or registry keys from the shell"""

import json
import sys

import click

# Force UTF-8 encoding for Windows
if sys.platform == "win32":
    sys.stdout.reconfigure(encoding="utf-8")
    sys.stderr.reconfigure(encoding="utf-8")

from confstore import __version__
from confstore.core.config import get_config
from confstore.core.exceptions import ConfStoreError, ErrorHandler
from confstore.core.factory import StoreKind, create_store
from confstore.core.logger import get_logger
from confstore.core.store import Access


def _fail(error: ConfStoreError):
    ErrorHandler.handle_exception(error, reraise=False)
    click.echo(f"[-] Error: {error.message}", err=True)
    sys.exit(1)


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--backend",
    "-b",
    type=click.Choice([kind.value for kind in StoreKind]),
    default=StoreKind.INI_FILE.value,
    show_default=True,
    help="Storage backend",
)
@click.option("--hive", help="Registry hive (registry backend only)")
@click.option("--verbose", "-v", is_flag=True, help="Debug logging")
@click.argument("location")
@click.pass_context
def cli(ctx, backend: str, hive: str, verbose: bool, location: str):
    """ConfStore - section/key/value access to INI files and the registry.

    LOCATION is a file path, or a key path such as Software\\Vendor\\App.

    Examples:
        confstore app.ini set Net Host localhost
        confstore app.ini get Net host
        confstore -b registry Software\\Vendor\\App section Net --json
    """
    settings = get_config()
    log = get_logger(
        "confstore",
        level="DEBUG" if verbose else settings.observability.log_level,
        log_dir=settings.paths.log_dir,
        file_output=settings.observability.file_logging,
    )

    try:
        ctx.obj = create_store(backend, location, hive=hive, settings=settings)
    except ConfStoreError as e:
        _fail(e)

    log.debug(f"Opened {backend} store at {ctx.obj.location}")


@cli.command()
@click.argument("section")
@click.argument("key")
@click.option("--default", "-d", default="", help="Value when the key is absent")
@click.pass_obj
def get(store, section: str, key: str, default: str):
    """Print one value."""
    try:
        click.echo(store.read_value(section, key, default))
    except ConfStoreError as e:
        _fail(e)


@cli.command("set")
@click.argument("section")
@click.argument("key")
@click.argument("value")
@click.pass_obj
def set_value(store, section: str, key: str, value: str):
    """Write one value."""
    try:
        store.write_value(section, key, value)
    except ConfStoreError as e:
        _fail(e)


@cli.command()
@click.argument("section")
@click.option("--json", "as_json", is_flag=True, help="Print as a JSON object")
@click.pass_obj
def section(store, section: str, as_json: bool):
    """Print every key of a section."""
    try:
        values = dict(store.read_section(section))
    except ConfStoreError as e:
        _fail(e)

    if as_json:
        click.echo(json.dumps(values, indent=2, ensure_ascii=False))
        return

    for key, value in values.items():
        click.echo(f"{key}={value}")


@cli.command()
@click.argument("path", required=False)
@click.pass_obj
def exists(store, path: str):
    """Exit 0 if PATH (default: LOCATION) exists, 1 otherwise."""
    found = store.exists(path)
    click.echo("yes" if found else "no")
    sys.exit(0 if found else 1)


@cli.command()
@click.argument("path", required=False)
@click.option("--read/--no-read", default=True, help="Probe read access")
@click.option("--write/--no-write", default=True, help="Probe write access")
@click.pass_obj
def check(store, path: str, read: bool, write: bool):
    """Probe read/write permission on PATH (default: LOCATION)."""
    access = Access(0)
    if read:
        access |= Access.READ
    if write:
        access |= Access.WRITE

    try:
        store.check_permission(path, access)
    except ConfStoreError as e:
        _fail(e)

    click.echo(f"[+] {access.name.lower()} access OK")


if __name__ == "__main__":
    cli()
