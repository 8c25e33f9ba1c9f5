"""CLI entry point for diffdirs.

    diffdirs ls LEFT RIGHT                       show the resolved file set
    diffdirs open LEFT RIGHT [OUTPUT] [--server]  open the comparisons in a running Neovim
"""

import argparse
import logging
import os
import sys

import pynvim
from rich.console import Console
from rich.markup import escape
from rich.table import Table

import diffdirs.core.file_set
import diffdirs.core.roots
import diffdirs.io.logging_setup
from diffdirs.app.navigation import register_keymaps
from diffdirs.app.session import DiffSession
from diffdirs.core.errors import ArgumentError, DiffDirsError, HostInteractionError, format_report
from diffdirs.nvim.host import NvimHost
from diffdirs.nvim.plugin import build_config

logger = logging.getLogger(__name__)

_PRESENT = "[green]✓[/green]"
_ABSENT = "[red]–[/red]"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="diffdirs", description="Side-by-side comparison of directory trees in Neovim"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    ls = sub.add_parser("ls", help="List the files that would be compared")
    ls.add_argument("left", help="Left directory")
    ls.add_argument("right", help="Right directory")

    open_ = sub.add_parser("open", help="Open the comparisons in a running Neovim")
    open_.add_argument(
        "roots",
        nargs="+",
        metavar="DIR",
        help="LEFT RIGHT [OUTPUT]; with OUTPUT the output side is the editable one",
    )
    open_.add_argument(
        "--server",
        type=str,
        default=None,
        help="Neovim RPC address: socket path or host:port (default: $NVIM)",
    )
    return parser


def render_file_set(console: Console, left: str, right: str) -> int:
    """Print the resolved paths with per-side presence. Returns the path count."""
    rows = diffdirs.core.file_set.presence(left, right)
    table = Table(title=escape("{} ↔ {}".format(left, right)))
    table.add_column("path")
    table.add_column("left", justify="center")
    table.add_column("right", justify="center")
    for path, in_left, in_right in rows:
        table.add_row(escape(path), _PRESENT if in_left else _ABSENT, _PRESENT if in_right else _ABSENT)
    console.print(table)
    console.print("{} file(s)".format(len(rows)))
    return len(rows)


def attach(address: str) -> "pynvim.Nvim":
    """Connect to Neovim on a unix socket / named pipe, or host:port."""
    try:
        if not os.path.exists(address) and ":" in address:
            host, _, port = address.rpartition(":")
            return pynvim.attach("tcp", address=host, port=int(port))
        return pynvim.attach("socket", path=address)
    except (OSError, ValueError) as e:
        raise HostInteractionError("cannot attach to Neovim at {}: {}".format(address, e)) from e


def open_in_nvim(nvim: "pynvim.Nvim", roots: diffdirs.core.roots.RootSet) -> int:
    host = NvimHost(nvim)
    session = DiffSession(host, config=build_config(nvim, None))
    register_keymaps(host)
    session.reset(roots)
    return session.build_all()


def main(argv=None) -> int:
    args = _build_parser().parse_args(argv)
    console = Console()
    err_console = Console(stderr=True)

    log_runtime = diffdirs.io.logging_setup.configure(run_name="cli")
    logger.debug(
        "logging configured level=%s file=%s", log_runtime.level_name, log_runtime.file_path
    )

    try:
        if args.command == "ls":
            render_file_set(console, args.left, args.right)
            return 0

        roots = diffdirs.core.roots.from_args(args.roots)
        address = args.server or os.environ.get("NVIM")
        if not address:
            raise ArgumentError("no Neovim to attach to: pass --server or run inside :terminal")
        nvim = attach(address)
        try:
            count = open_in_nvim(nvim, roots)
        finally:
            nvim.close()
        console.print("opened {} comparison(s)".format(count))
        return 0
    except ArgumentError as e:
        err_console.print("[red]error:[/red] {}".format(escape(str(e))), highlight=False)
        return 2
    except DiffDirsError as e:
        logger.error("diffdirs failed: %s", e)
        err_console.print(format_report(e), markup=False, highlight=False)
        return 1


if __name__ == "__main__":
    sys.exit(main())
