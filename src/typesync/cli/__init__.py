"""CLI module for data type synchronization.

Provides commands to validate declared data types, preview and apply a
synchronization against the configured store, and create the store tables.

Usage:
    typesync validate --module myapp.models
    typesync plan
    typesync sync --confirm
    typesync init-store

Commands:
    validate    - Check declared data types for conflicts (no store access)
    plan        - Show which definitions would be created or updated
    sync        - Synchronize declared data types into the store
    init-store  - Create the store tables
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from typesync.adapters.postgres import (
    AsyncPostgresDefinitionStore,
    AsyncPostgresIdTracker,
)
from typesync.config.loader import get_settings, load_config, resolve_url
from typesync.config.models import SyncConfig
from typesync.discovery import TypeResolver
from typesync.sync.errors import ConfigurationError
from typesync.sync.synchronizer import DataTypeSynchronizer, get_database_type
from typesync.sync.validator import validate_models

console = Console()


def configure_logging(level: str | int = logging.INFO) -> None:
    """Route log records through rich."""
    if isinstance(level, str):
        level = level.upper()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


# ============================================================================
# Shared helpers
# ============================================================================


class ConfigLoadError(Exception):
    """typesync.toml or the store URL could not be loaded."""


def _load_config(args: argparse.Namespace, required: bool = True) -> SyncConfig | None:
    """Load typesync.toml from ``--config`` or the default location.

    Returns ``None`` when the file is missing and ``required`` is False.

    Raises:
        ConfigLoadError: If the file is missing or malformed.
    """
    config_path = Path(args.config) if getattr(args, "config", None) else None
    try:
        return load_config(config_path)
    except FileNotFoundError as e:
        if required:
            raise ConfigLoadError(str(e)) from e
        return None
    except ValueError as e:
        raise ConfigLoadError(str(e)) from e


def _modules(args: argparse.Namespace, config: SyncConfig | None) -> list[str]:
    """Modules from ``--module`` or, failing that, ``[sync].modules``."""
    # Console scripts do not put the working directory on sys.path
    cwd = str(Path.cwd())
    if cwd not in sys.path:
        sys.path.insert(0, cwd)

    if args.module:
        return list(args.module)
    if config is not None:
        return list(config.modules)
    return []


def _open_store(
    config: SyncConfig,
) -> tuple[AsyncPostgresDefinitionStore, AsyncPostgresIdTracker]:
    try:
        url = resolve_url(config.store)
    except ValueError as e:
        raise ConfigLoadError(str(e)) from e
    store = AsyncPostgresDefinitionStore(url)
    return store, AsyncPostgresIdTracker(store.engine)


def _print_configuration_error(error: ConfigurationError) -> None:
    console.print()
    console.print("[bold red]x[/bold red] Configuration conflict")
    console.print(str(error))


# ============================================================================
# Async command implementations
# ============================================================================


async def _async_validate(args: argparse.Namespace) -> int:
    """Async implementation for validate command.

    Returns:
        0 if the declared data types are consistent, 1 otherwise.
    """
    config = _load_config(args, required=False)
    modules = _modules(args, config)
    if not modules:
        console.print("[yellow]No modules to scan.[/yellow]")
        console.print(
            "[dim]Pass[/dim] [cyan]--module[/cyan] [dim]or set[/dim] "
            "[cyan][sync].modules[/cyan] [dim]in typesync.toml.[/dim]"
        )
        return 1

    models = await TypeResolver(modules).get_models()
    result = validate_models(models)

    if result.valid:
        console.print(
            f"[bold green]v[/bold green] {result.model_count} data types valid"
        )
        return 0

    console.print("[bold red]x[/bold red] Data types conflict")
    console.print(result.format_report())
    return 1


async def _async_plan(args: argparse.Namespace) -> int:
    """Async implementation for plan command.

    Returns:
        0 on success, 1 on configuration conflicts.
    """
    config = _load_config(args)
    modules = _modules(args, config)
    store, tracker = _open_store(config)

    try:
        synchronizer = DataTypeSynchronizer(TypeResolver(modules), store, tracker)
        try:
            plan = await synchronizer.plan()
        except ConfigurationError as e:
            _print_configuration_error(e)
            return 1
    finally:
        await store.close()

    if not plan.items:
        console.print("[dim]No data types declared.[/dim]")
        return 0

    table = Table(title="Data Type Plan", show_header=True, header_style="bold")
    table.add_column("Data type")
    table.add_column("Editor", style="dim")
    table.add_column("Storage")
    table.add_column("Action")
    table.add_column("Matched by", style="dim")

    for item in plan.items:
        action_style = "green" if item.action == "create" else "yellow"
        table.add_row(
            item.model.name,
            item.model.editor,
            get_database_type(item.model.value_type).value,
            f"[{action_style}]{item.action}[/{action_style}]",
            item.matched_by or "-",
        )

    console.print(table)
    console.print(
        f"[dim]{len(plan.creates)} to create, {len(plan.updates)} to update.[/dim]"
    )
    return 0


async def _async_sync(args: argparse.Namespace) -> int:
    """Async implementation for sync command.

    Returns:
        0 on success, 1 on configuration conflicts.
    """
    if not args.confirm:
        console.print(
            "[dim]To actually synchronize, add[/dim] [cyan]--confirm[/cyan] "
            "[dim]flag. Run[/dim] [cyan]typesync plan[/cyan] [dim]to preview.[/dim]"
        )
        return 0

    config = _load_config(args)
    modules = _modules(args, config)
    store, tracker = _open_store(config)

    try:
        synchronizer = DataTypeSynchronizer(TypeResolver(modules), store, tracker)
        try:
            result = await synchronizer.run()
        except ConfigurationError as e:
            _print_configuration_error(e)
            return 1
    finally:
        await store.close()

    console.print()
    console.print("[bold green]v Data types synchronized[/bold green]")
    console.print(f"  Created: {len(result.created)}")
    console.print(f"  Updated: {len(result.updated)}")
    console.print(f"  Id mappings written: {result.mapped}")
    return 0


async def _async_init_store(args: argparse.Namespace) -> int:
    """Async implementation for init-store command."""
    config = _load_config(args)
    store, _ = _open_store(config)
    try:
        await store.create_tables()
    finally:
        await store.close()

    console.print("[bold green]v[/bold green] Store tables ready")
    return 0


# ============================================================================
# Command wrappers
# ============================================================================


def cmd_validate(args: argparse.Namespace) -> int:
    """Check declared data types for conflicts.

    Wraps the async implementation with ``asyncio.run()``.
    """
    return asyncio.run(_async_validate(args))


def cmd_plan(args: argparse.Namespace) -> int:
    """Show which definitions would be created or updated.

    Wraps the async implementation with ``asyncio.run()``.
    """
    return asyncio.run(_async_plan(args))


def cmd_sync(args: argparse.Namespace) -> int:
    """Synchronize declared data types into the store.

    Wraps the async implementation with ``asyncio.run()``.
    """
    return asyncio.run(_async_sync(args))


def cmd_init_store(args: argparse.Namespace) -> int:
    """Create the store tables.

    Wraps the async implementation with ``asyncio.run()``.
    """
    return asyncio.run(_async_init_store(args))


# ============================================================================
# Main entry point
# ============================================================================


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with every subcommand."""
    parser = argparse.ArgumentParser(
        prog="typesync",
        description="Synchronize code-declared data types into a CMS store",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to typesync.toml (default: TYPESYNC_CONFIG_PATH or ./typesync.toml)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (default: TYPESYNC_LOG_LEVEL or INFO)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_module_option(p: argparse.ArgumentParser) -> None:
        p.add_argument(
            "--module",
            "-m",
            action="append",
            default=[],
            help="Module or package to scan for @data_type classes (repeatable)",
        )

    p_validate = subparsers.add_parser(
        "validate",
        help="Check declared data types for conflicts",
    )
    add_module_option(p_validate)
    p_validate.set_defaults(func=cmd_validate)

    p_plan = subparsers.add_parser(
        "plan",
        help="Show which definitions would be created or updated",
    )
    add_module_option(p_plan)
    p_plan.set_defaults(func=cmd_plan)

    p_sync = subparsers.add_parser(
        "sync",
        help="Synchronize declared data types into the store",
    )
    add_module_option(p_sync)
    p_sync.add_argument(
        "--confirm",
        action="store_true",
        help="Actually write to the store",
    )
    p_sync.set_defaults(func=cmd_sync)

    p_init = subparsers.add_parser(
        "init-store",
        help="Create the store tables",
    )
    p_init.set_defaults(func=cmd_init_store)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.log_level or get_settings().log_level)

    try:
        return args.func(args)
    except ConfigLoadError as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1


if __name__ == "__main__":
    sys.exit(main())
