#!/usr/bin/env python3
"""CLI entry point for syncth."""

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.tree import Tree

from .core.client import RemoteError, SyncthingClient
from .core.ids import generate_folder_id
from .core.sharing import FolderSharing, ShareResult, shared_devices
from .models.config import ConfigError, Configuration, LabelNotFound
from .models.remote import FileInfo, FolderType

console = Console()


def _load(args: argparse.Namespace) -> tuple[Configuration, SyncthingClient]:
    """Load the local config and build an authenticated client."""
    config = Configuration.load(args.config)
    try:
        client = SyncthingClient.from_config(config, base_url=args.url)
    except ValueError as e:
        raise ConfigError(f"Configuration error: {e}") from e
    return config, client


def cmd_list(args: argparse.Namespace) -> int:
    """List folders and the devices they are shared with."""
    config, client = _load(args)
    own_id = client.get_own_id()

    table = Table()
    table.add_column("Label")
    table.add_column("Path")
    table.add_column("Shared Devices")

    for folder in config.folders:
        names = [d.name for d in shared_devices(config, folder, own_id) if d.name is not None]
        table.add_row(folder.label, folder.path, ", ".join(names))

    console.print(table)
    return 0


def cmd_add(args: argparse.Namespace) -> int:
    """Add a local directory as a new folder."""
    config, client = _load(args)

    try:
        folder_path = Path(args.path).resolve(strict=True)
    except (OSError, RuntimeError) as e:
        console.print(f"[red]Cannot resolve path {args.path}: {e}")
        return 1

    existing = client.list_folder_ids() if args.unique else None
    folder_id = generate_folder_id(existing)
    # The filesystem root has no final component
    label = folder_path.name or str(folder_path)
    client.add_folder(str(folder_path), folder_id, args.type, label)

    console.print(f"[green]Folder added successfully: {label} ({folder_id})")
    return 0


def _report_share(result: ShareResult) -> None:
    if result.operation == "share":
        if result.changed:
            console.print("[green]Device added to folder successfully")
        else:
            console.print("[yellow]Folder already shared with device")
    elif result.changed:
        console.print("[green]Device removed from folder successfully")
    else:
        console.print("[yellow]Device was not in folder; folder rewritten unchanged")


def cmd_share(args: argparse.Namespace) -> int:
    """Share a folder with a device."""
    config, client = _load(args)
    folder_id = config.require_folder_id(args.folder)
    device_id = config.require_device_id(args.device)

    sharing = FolderSharing(client, strict=args.strict)
    _report_share(sharing.share(folder_id, device_id))
    return 0


def cmd_unshare(args: argparse.Namespace) -> int:
    """Stop sharing a folder with a device."""
    config, client = _load(args)
    folder_id = config.require_folder_id(args.folder)
    device_id = config.require_device_id(args.device)

    sharing = FolderSharing(client)
    _report_share(sharing.unshare(folder_id, device_id))
    return 0


def cmd_browse(args: argparse.Namespace) -> int:
    """Show the contents of a folder as seen by the daemon."""
    config, client = _load(args)
    folder_id = config.require_folder_id(args.folder)

    entries = client.browse(folder_id)
    tree = Tree(f"[bold blue]{args.folder}[/bold blue]")
    _add_tree_nodes(tree, entries)
    console.print(tree)
    return 0


def _add_tree_nodes(parent: Tree, entries: list[FileInfo]) -> None:
    """Recursively add browse entries to tree."""
    for entry in entries:
        if entry.is_directory:
            node = parent.add(f"[blue]{entry.name}/[/blue]")
            _add_tree_nodes(node, entry.children)
        else:
            parent.add(f"[green]{entry.name}[/green] [dim]{entry.size} B  {entry.mod_time}[/dim]")


def cmd_status(args: argparse.Namespace) -> int:
    """Show the daemon's identity and the configured devices."""
    config, client = _load(args)
    own_id = client.get_own_id()

    console.print(f"\n[bold]Device ID:[/bold] {own_id}")
    console.print(f"[bold]Daemon:[/bold] {client.auth.base_url}")

    table = Table(title="\nDevices")
    table.add_column("Name")
    table.add_column("Device ID")
    for device in config.devices:
        name = device.name or "[dim]-"
        if device.id == own_id:
            name += " [cyan](this device)"
        table.add_row(name, device.id)

    console.print(table)
    return 0


def cmd_connect_folder(args: argparse.Namespace) -> int:
    console.print("[yellow]connect-folder is not implemented yet")
    return 1


COMMANDS = {
    "list": cmd_list,
    "add": cmd_add,
    "share": cmd_share,
    "unshare": cmd_unshare,
    "browse": cmd_browse,
    "status": cmd_status,
    "connect-folder": cmd_connect_folder,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="syncth",
        description="A CLI tool for interacting with Syncthing",
    )
    parser.add_argument("--config", type=Path, help="Path to Syncthing config.xml")
    parser.add_argument("--url", help="Syncthing GUI/API address (default: http://localhost:8384)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log API requests")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # list command
    subparsers.add_parser("list", help="List folders and who they are shared with")

    # add command
    add_parser = subparsers.add_parser("add", help="Add a directory as a shared folder")
    add_parser.add_argument("path", nargs="?", default=".", help="Directory (default: current)")
    add_parser.add_argument(
        "-t", "--type",
        type=FolderType,
        choices=list(FolderType),
        default=FolderType.SEND_ONLY,
        help="Folder type (default: sendonly)",
    )
    add_parser.add_argument(
        "--unique",
        action="store_true",
        help="Check the new folder ID against the daemon's existing folders",
    )

    # share / unshare commands
    for name, help_text in (("share", "Share a folder with a device"),
                            ("unshare", "Stop sharing a folder with a device")):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("-f", "--folder", required=True, help="Folder label")
        sub.add_argument("-d", "--device", required=True, help="Device name")
        if name == "share":
            sub.add_argument(
                "--strict",
                action="store_true",
                help="Do nothing if the device is already in the folder",
            )

    # browse command
    browse_parser = subparsers.add_parser("browse", help="Show folder contents")
    browse_parser.add_argument("-f", "--folder", required=True, help="Folder label")

    # status command
    subparsers.add_parser("status", help="Show this device's ID and known devices")

    # connect-folder command
    subparsers.add_parser("connect-folder", help="Connect to a folder offered by a device")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )

    handler = COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        return 1

    try:
        return handler(args)
    except (ConfigError, LabelNotFound) as e:
        console.print(f"[red]{e}")
    except RemoteError as e:
        console.print(f"[red]{type(e).__name__}: {e}")

    return 1


if __name__ == "__main__":
    sys.exit(main())
