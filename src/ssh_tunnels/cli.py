"""Command-line front-end for ssh-tunnels."""

import argparse
import os
import sys

from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .common.exceptions import ConfigurationError, ForwardSpecError, SSHTunnelsError
from .common.logging import setup_logging
from .config import load_config
from .tunnels.manager import TunnelManager
from .tunnels.models import TunnelInfo, TunnelState

DEFAULT_CONFIG_PATH = os.path.join("~", ".config", "ssh-tunnels", "config.toml")
CONFIG_ENV_VAR = "SSH_TUNNELS_CONFIG"

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG_ERROR = 2

STATE_STYLES = {
    TunnelState.RUNNING: "bold green",
    TunnelState.STOPPED: "red",
}

console = Console()
error_console = Console(stderr=True)


def render_endpoint(endpoint: int | str | None) -> str:
    return "" if endpoint is None else str(endpoint)


def render_tunnel_table(infos: list[TunnelInfo]) -> Table:
    """Build the tunnel listing table."""
    table = Table(title="SSH tunnels")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Type")
    table.add_column("State")
    table.add_column("Local")
    table.add_column("Host")
    table.add_column("Remote")
    table.add_column("Login")
    for info in infos:
        table.add_row(
            escape(info.name),
            info.type.value,
            f"[{STATE_STYLES[info.state]}]{info.state.value}[/{STATE_STYLES[info.state]}]",
            escape(render_endpoint(info.local_endpoint)),
            escape(info.host),
            escape(render_endpoint(info.remote_endpoint)),
            escape(info.login),
        )
    return table


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ssh-tunnels",
        description="Run, stop and list named SSH tunnels through ssh control sockets",
    )
    parser.add_argument("--version", "-v", action="version", version=f"ssh-tunnels v{__version__}")
    parser.add_argument(
        "--config",
        "-c",
        default=os.environ.get(CONFIG_ENV_VAR, DEFAULT_CONFIG_PATH),
        help=f"Configuration file (default: ${CONFIG_ENV_VAR} or {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: WARNING)",
    )
    parser.add_argument("--json-logs", action="store_true", help="Emit logs as JSON lines")

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("list", help="Show every tunnel and whether it is running")

    for name, help_text in (
        ("run", "Start a tunnel unless it is already running"),
        ("rerun", "Stop a tunnel, then start it again"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("name", help="Tunnel name")
        sub.add_argument("--local-port", "-p", type=int, help="Use this local port for this run only")

    for name, help_text in (
        ("kill", "Stop a tunnel"),
        ("check", "Exit 0 if a tunnel is running, 1 otherwise"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("name", help="Tunnel name")

    return parser


def dispatch(manager: TunnelManager, args: argparse.Namespace) -> int:
    """Execute one sub-command and return the process exit code."""
    if args.command == "list":
        console.print(render_tunnel_table(manager.list_tunnels()))
        return EXIT_OK

    if args.command == "check":
        state = manager.status(args.name)
        console.print(f"{args.name}: {state.value}", markup=False)
        return EXIT_OK if state == TunnelState.RUNNING else EXIT_FAILURE

    if args.command == "kill":
        success = manager.kill_tunnel(args.name)
    elif args.command == "rerun":
        success = manager.rerun_tunnel(args.name, local_port=args.local_port)
    else:
        success = manager.run_tunnel(args.name, local_port=args.local_port)

    if not success:
        error_console.print(
            f"{args.command} failed for tunnel '{args.name}'", style="red", markup=False, soft_wrap=True
        )
        return EXIT_FAILURE
    console.print(f"{args.name}: {args.command} ok", markup=False)
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level=args.log_level, json_format=args.json_logs)

    try:
        manager = TunnelManager(load_config(args.config))
        return dispatch(manager, args)
    except (ConfigurationError, ForwardSpecError, ValidationError) as e:
        error_console.print(str(e), style="red", markup=False, soft_wrap=True)
        return EXIT_CONFIG_ERROR
    except SSHTunnelsError as e:
        error_console.print(str(e), style="red", markup=False, soft_wrap=True)
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
