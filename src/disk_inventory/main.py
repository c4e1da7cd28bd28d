"""Command line front end for disk inventory scans."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from pathlib import Path

import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .config import InventoryConfig
from .formatting import format_bytes
from .scanner import Scanner
from .summary import top_folders


def setup_logging(config: InventoryConfig, console: Console | None = None) -> logging.Logger:
    """Set up logging for the scanner.

    Args:
        config: Inventory configuration.
        console: Console for the Rich handler. A stderr console if None.

    Returns:
        Configured logger instance.

    Raises:
        ValueError: If ``config.log_level`` is not a valid level name.

    """
    level = logging.getLevelName(config.log_level.upper())
    if not isinstance(level, int):
        msg = f"Invalid log_level: {config.log_level!r}"
        raise ValueError(msg)

    logger = logging.getLogger("disk-inventory")
    logger.setLevel(level)

    # Clear existing handlers to avoid duplicates on repeated setup
    if logger.handlers:
        logger.handlers.clear()

    console_handler = RichHandler(
        console=console if console is not None else Console(stderr=True),
        show_time=True,
        show_path=False,
    )
    console_handler.setLevel(level)
    logger.addHandler(console_handler)

    if config.log_file is not None:
        config.log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(config.log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)s | %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Args:
        argv: Arguments to parse. Uses ``sys.argv`` if None.

    Returns:
        Parsed arguments.

    """
    parser = argparse.ArgumentParser(
        prog="disk-inventory",
        description="Inventory files under one or more directories and report folder sizes",
    )

    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Path to configuration file",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Scan command
    scan_parser = subparsers.add_parser("scan", help="Scan directories and summarize folder sizes")
    scan_parser.add_argument(
        "roots",
        nargs="*",
        type=Path,
        help="Directories to scan (defaults to configured roots)",
    )
    scan_parser.add_argument(
        "--top",
        type=int,
        default=None,
        help="Number of folders to show",
    )
    scan_parser.add_argument(
        "--json",
        action="store_true",
        dest="as_json",
        help="Print results as JSON",
    )

    # Config command
    config_parser = subparsers.add_parser("config", help="Configuration management")
    config_parser.add_argument(
        "--init",
        action="store_true",
        help="Create default configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        help="Show current configuration",
    )

    return parser.parse_args(argv)


def _wait_for_scan(scanner: Scanner, config: InventoryConfig, console: Console) -> None:
    """Poll the scanner until it stops, cancelling on Ctrl-C."""
    try:
        with console.status("Scanning...") as status:
            while scanner.is_running:
                progress = scanner.status()
                status.update(
                    f"Scanning: {progress.scanned_files} files, "
                    f"{format_bytes(progress.scanned_bytes)} "
                    f"[dim]{escape(progress.current_path or '')}[/dim]"
                )
                time.sleep(config.poll_interval)
    except KeyboardInterrupt:
        console.print("[yellow]Cancelling scan...[/yellow]")
        scanner.cancel()
        scanner.wait()


def cmd_scan(config: InventoryConfig, args: argparse.Namespace) -> int:
    """Execute scan command.

    Args:
        config: Inventory configuration.
        args: Parsed arguments.

    Returns:
        Exit code.

    """
    console = Console()
    roots = args.roots or config.roots
    if not roots:
        console.print("[red]No directories to scan[/red]")
        return 1

    limit = args.top if args.top is not None else config.top_folders

    scanner = Scanner(config)
    scanner.start(roots)
    if args.as_json:
        scanner.wait()
    else:
        _wait_for_scan(scanner, config, console)

    progress = scanner.status()
    folders = top_folders(scanner.results(), limit)

    if args.as_json:
        document = {
            "status": progress.to_dict(),
            "folders": [{"directory": f.directory, "size": f.size} for f in folders],
        }
        print(json.dumps(document, indent=2))
        return 0

    if not folders:
        console.print("[yellow]No files found[/yellow]")
    else:
        table = Table(title=f"Top {len(folders)} folders")
        table.add_column("Folder", style="cyan")
        table.add_column("Size", style="green", justify="right")
        for folder in folders:
            table.add_row(escape(folder.directory), format_bytes(folder.size))
        console.print(table)

    elapsed = progress.elapsed or 0.0
    console.print(
        f"{progress.scanned_files} files, {format_bytes(progress.scanned_bytes)} "
        f"in {elapsed:.1f}s ({progress.skipped_entries} unreadable)"
    )
    return 0


def cmd_config(config: InventoryConfig, args: argparse.Namespace) -> int:
    """Execute config command.

    Args:
        config: Inventory configuration.
        args: Parsed arguments.

    Returns:
        Exit code.

    """
    console = Console()

    if args.init:
        config_path = args.config or InventoryConfig.get_config_path()
        if config_path.exists():
            console.print(f"[yellow]Config already exists: {config_path}[/yellow]")
            return 1
        config.save(config_path)
        console.print(f"[green]Created config: {config_path}[/green]")
        return 0

    if args.show:
        table = Table(title="Current Configuration")
        table.add_column("Setting", style="cyan")
        table.add_column("Value", style="green")

        table.add_row("Roots", "\n".join(str(r) for r in config.roots))
        table.add_row("Max workers", str(config.max_workers or "auto"))
        table.add_row("Batch size", str(config.batch_size))
        table.add_row("Protect system paths", str(config.protect_system_paths))
        table.add_row("Extra protected paths", "\n".join(str(p) for p in config.extra_protected_paths))
        table.add_row("Top folders", str(config.top_folders))
        table.add_row("Log file", str(config.log_file or "-"))
        table.add_row("Log level", config.log_level)

        console.print(table)
        return 0

    console.print("[yellow]Use --init or --show[/yellow]")
    return 1


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Returns:
        Exit code.

    """
    args = parse_args(argv)
    try:
        config = InventoryConfig.load(args.config)
        setup_logging(config)
    except (ValueError, yaml.YAMLError) as e:
        Console(stderr=True).print(f"[red]Configuration error: {escape(str(e))}[/red]")
        return 1

    # Default to scan command
    command = args.command or "scan"

    if command == "scan":
        if args.command is None:
            args.roots, args.top, args.as_json = [], None, False
        return cmd_scan(config, args)
    elif command == "config":
        return cmd_config(config, args)
    else:
        print(f"Unknown command: {command}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
