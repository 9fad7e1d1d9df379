#!/usr/bin/env python3
"""
wg-cli

Create, remove and show WireGuard peers kept in flat configuration files.

Usage:
    sudo wg-cli <command> [options]

Examples:
    sudo wg-cli show
    sudo wg-cli create-peer wg0 phone 192.168.2.10/32
    sudo wg-cli remove-peer wg0 phone
"""

import argparse
import logging
import sys
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from . import __version__
from .config import Settings, load_settings
from .exceptions import WgCliError
from .keys import WgKeyProvider
from .peers import create_peer, list_interfaces, list_peers, remove_peer, render_qr
from .service import control

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)


class ArgumentParser(argparse.ArgumentParser):
    """Argument parser that exits with status 1 on usage errors."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def setup_logging(settings: Settings) -> None:
    """Send wg_cli log records to stderr."""
    if settings.verbose:
        level = logging.DEBUG
    elif settings.quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    handler = RichHandler(console=err_console, show_time=False, show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger("wg_cli")
    for old in list(logger.handlers):
        logger.removeHandler(old)
    logger.addHandler(handler)
    logger.setLevel(level)


def say(settings: Settings, message: str) -> None:
    """Print an informational message unless running quietly."""
    if not settings.quiet:
        console.print(message)


def cmd_show(args, settings: Settings) -> int:
    """Handle the show command."""
    if args.interface:
        interfaces = [args.interface]
    else:
        interfaces = list(list_interfaces(settings))
        if not interfaces:
            console.print(f"[yellow]No interfaces found in {escape(str(settings.wg_dir))}[/yellow]")
            return 0

    for interface in interfaces:
        peers = list(list_peers(settings, interface))

        table = Table(title=f"Interface: {escape(interface)}", title_justify="left")
        table.add_column("Peer Name", style="cyan")
        table.add_column("Allowed IPs")
        for peer in peers:
            table.add_row(escape(peer.name), escape(peer.allowed_ips))

        if peers:
            console.print(table)
        else:
            console.print(f"Interface: {escape(interface)}")
            console.print("  [dim]No peers[/dim]")
        console.print()

    return 0


def cmd_create_peer(args, settings: Settings) -> int:
    """Handle the create-peer command."""
    keys = WgKeyProvider(timeout=settings.command_timeout)
    peer = create_peer(settings, keys, args.interface, args.peer, args.address)

    say(settings, f"[green]✓[/green] Peer '{escape(peer.name)}' added to {escape(peer.interface)}")
    say(settings, f"  Address: {escape(peer.address)}")
    say(settings, f"  AllowedIPs: {escape(peer.allowed_ips)}")
    say(settings, f"  Config: {escape(str(peer.path))}")

    if settings.show_qr and not settings.quiet:
        console.print("\nNew peer successfully generated:")
        render_qr(peer.path, out=console.file, timeout=settings.command_timeout)

    if settings.restart_service:
        control.restart(settings, peer.interface)

    return 0


def cmd_remove_peer(args, settings: Settings) -> int:
    """Handle the remove-peer command."""
    keys = WgKeyProvider(timeout=settings.command_timeout)
    removed = remove_peer(settings, keys, args.interface, args.peer)

    say(settings, f"[green]✓[/green] Interface \"{escape(removed.interface)}\" successfully updated")

    if settings.restart_service:
        control.restart(settings, removed.interface)

    if removed.peer_file_removed:
        say(settings, f"[green]✓[/green] Peer configuration file for \"{escape(removed.name)}\" "
                      f"deleted successfully")

    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    # Flags accepted both before and after the command
    flags = argparse.ArgumentParser(add_help=False)
    flags.add_argument("-q", "--quiet", action="store_true", default=argparse.SUPPRESS,
                       help="suppress informational output")
    flags.add_argument("-v", "--verbose", action="store_true", default=argparse.SUPPRESS,
                       help="show key material and diagnostic detail")

    parser = ArgumentParser(
        prog="wg-cli",
        description="Manage WireGuard peers",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        parents=[flags],
        epilog="""
Examples:
  %(prog)s show
  %(prog)s show wg0
  %(prog)s create-peer wg0 phone 192.168.2.10/32
  %(prog)s remove-peer wg0 phone
"""
    )
    parser.add_argument("--version", action="version", version=f"wg-cli {__version__}")
    parser.add_argument("-c", "--config", default=None,
                        help="settings file (default: /etc/wg-cli/config.yaml)")

    subparsers = parser.add_subparsers(dest="command", parser_class=ArgumentParser)

    show = subparsers.add_parser(
        "show", parents=[flags],
        help="Show existing peers",
        description="Show peers for the given interface, or for all interfaces.",
    )
    show.add_argument("interface", nargs="?", help="interface name (e.g. wg0)")
    show.set_defaults(func=cmd_show)

    create = subparsers.add_parser(
        "create-peer", parents=[flags],
        help="Create a new peer and add it to an existing interface",
        description=(
            "Generate a key pair, write <interface>-<peer>.conf to the peers "
            "directory from the template, add the peer's public key to the "
            "interface configuration, show a QR code and restart the interface."
        ),
    )
    create.add_argument("interface", help="interface name (e.g. wg0)")
    create.add_argument("peer", help="peer name (e.g. phone, laptop)")
    create.add_argument("address", help="peer address in CIDR notation (e.g. 192.168.2.10/32)")
    create.set_defaults(func=cmd_create_peer)

    remove = subparsers.add_parser(
        "remove-peer", parents=[flags],
        help="Remove an existing peer from its interface",
        description=(
            "Remove the peer's entry from the interface configuration, delete "
            "its peer configuration file and restart the interface."
        ),
    )
    remove.add_argument("interface", help="interface name (e.g. wg0)")
    remove.add_argument("peer", help="peer name")
    remove.set_defaults(func=cmd_remove_peer)

    subparsers.add_parser("help", help="Show this help")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the application."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command in (None, "help"):
        parser.print_help()
        return 0

    try:
        settings = load_settings(
            args.config,
            quiet=getattr(args, "quiet", None),
            verbose=getattr(args, "verbose", None),
        )
    except WgCliError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        return 1

    setup_logging(settings)

    try:
        return args.func(args, settings)
    except (WgCliError, OSError) as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        return 1
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Interrupted[/yellow]")
        return 1


if __name__ == "__main__":
    sys.exit(main())
