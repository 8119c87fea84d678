"""
peerswarm CLI entry point.

Resolve peer addresses, manage the persisted address deny-list, and generate
private network keys.

Usage::

    python -m peerswarm resolve /dnsaddr/bootstrap.libp2p.io
    python -m peerswarm filters
    python -m peerswarm filters add /ip4/10.0.0.0/ipcidr/8
    python -m peerswarm filters rm all
    python -m peerswarm key generate --output swarm.key

Options:
    --config     Node configuration file (default: $SWARM_CONFIG_PATH or
                 ~/.peerswarm/config.json)
    --timeout    Resolution deadline in seconds for `resolve` (default: 10)
    -v           Enable debug logging
    --no-color   Disable colored logging output
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from peerswarm.config import SWARM_CONFIG_PATH
from peerswarm.networking.config import DNS_RESOLVE_TIMEOUT
from peerswarm.networking.filters import Filters, FilterStore
from peerswarm.networking.resolver import DnsResolver, peers_with_addresses
from peerswarm.repo import FileConfigStore
from peerswarm.swarm import (
    format_addr_map,
    format_string_list,
    generate_swarm_key,
    write_swarm_key,
)
from peerswarm.types import SwarmError

logger = logging.getLogger(__name__)


class ColoredFormatter(logging.Formatter):
    """Logging formatter with ANSI colors for better readability."""

    GREY = "\x1b[38;5;244m"
    BLUE = "\x1b[38;5;39m"
    GREEN = "\x1b[38;5;40m"
    YELLOW = "\x1b[38;5;220m"
    RED = "\x1b[38;5;196m"
    BOLD_RED = "\x1b[38;5;196;1m"
    CYAN = "\x1b[38;5;51m"
    RESET = "\x1b[0m"

    LEVEL_COLORS = {
        logging.DEBUG: GREY,
        logging.INFO: GREEN,
        logging.WARNING: YELLOW,
        logging.ERROR: RED,
        logging.CRITICAL: BOLD_RED,
    }

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with colors."""
        color = self.LEVEL_COLORS.get(record.levelno, self.RESET)
        timestamp = f"{self.CYAN}{self.formatTime(record, self.datefmt)}{self.RESET}"
        levelname = f"{color}{record.levelname:8}{self.RESET}"
        name = f"{self.BLUE}{record.name}{self.RESET}"
        return f"{timestamp} {levelname} {name}: {record.getMessage()}"


_handler: logging.Handler | None = None


def setup_logging(verbose: bool = False, no_color: bool = False) -> None:
    """Configure logging to stderr, with optional colors."""
    global _handler
    level = logging.DEBUG if verbose else logging.WARNING

    root = logging.getLogger()
    if _handler is not None:
        root.removeHandler(_handler)

    handler = logging.StreamHandler()
    handler.setLevel(level)
    if no_color:
        formatter = logging.Formatter(
            "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    else:
        formatter = ColoredFormatter(datefmt="%Y-%m-%d %H:%M:%S")
    handler.setFormatter(formatter)

    root.setLevel(level)
    root.addHandler(handler)
    _handler = handler


async def run_resolve(addresses: list[str], timeout: float) -> str:
    """Resolve addresses and render one block per peer."""
    records = await peers_with_addresses(addresses, DnsResolver(), timeout)
    return format_addr_map({str(r.peer_id): [str(a) for a in r.addrs] for r in records})


def run_filters(config_path: Path, command: str | None, masks: list[str]) -> str:
    """List, add or remove persisted deny filters."""
    store = FilterStore.open(Filters(), FileConfigStore(), config_path)
    match command:
        case "add":
            result = store.add(masks)
        case "rm":
            result = store.remove(masks)
        case _:
            result = [str(mask) for mask in store.list()]
    return format_string_list(result)


def run_key_generate(output: Path | None) -> str:
    """Generate a pre-shared key, writing it to `output` when given."""
    key = generate_swarm_key()
    if output is None:
        return f"{key}\n"
    write_swarm_key(output, key)
    return ""


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="peerswarm",
        description="Peer address resolution and address filter management",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored logging output",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    resolve = commands.add_parser("resolve", help="Resolve addresses into peer records")
    resolve.add_argument("addresses", nargs="+", help="Multiaddrs to resolve")
    resolve.add_argument(
        "--timeout",
        type=float,
        default=DNS_RESOLVE_TIMEOUT,
        help=f"Deadline in seconds for the whole batch (default: {DNS_RESOLVE_TIMEOUT:g})",
    )

    filters = commands.add_parser("filters", help="List, add or remove address filters")
    filters.add_argument(
        "--config",
        type=Path,
        default=SWARM_CONFIG_PATH,
        help=f"Node configuration file (default: {SWARM_CONFIG_PATH})",
    )
    filter_commands = filters.add_subparsers(dest="filters_command")
    add = filter_commands.add_parser("add", help="Add deny filters")
    add.add_argument("masks", nargs="+", help="Masks such as /ip4/10.0.0.0/ipcidr/8")
    rm = filter_commands.add_parser("rm", help="Remove deny filters ('all' removes every one)")
    rm.add_argument("masks", nargs="+", help="Masks to remove, or 'all'")

    key = commands.add_parser("key", help="Private network keys")
    key_commands = key.add_subparsers(dest="key_command", required=True)
    generate = key_commands.add_parser("generate", help="Generate a pre-shared key")
    generate.add_argument("--output", type=Path, default=None, help="Write the key to this file")

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose, args.no_color)

    try:
        match args.command:
            case "resolve":
                output = asyncio.run(run_resolve(args.addresses, args.timeout))
            case "filters":
                output = run_filters(args.config, args.filters_command, getattr(args, "masks", []))
            case _:
                output = run_key_generate(args.output)
    except SwarmError as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    sys.stdout.write(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
