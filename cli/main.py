"""CLI entry point and argument parsing"""

import argparse
import asyncio
import sys

from rich.console import Console

import settings
from api_client import ApiClient, ApiClientError, get_error_message
from cli.commands import handle_get, handle_login, handle_logout, handle_status
from cli.debug_setup import setup_logging
from session import SessionStorage, SessionStore


console = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="certdesk API client")
    parser.add_argument("--debug", "-d", action="store_true", help="Enable debug logging")
    parser.add_argument("--api-url", default=None, help="Override the backend URL (default: from config)")
    parser.add_argument("--session-file", default=None, help="Override the session file (default: from config)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    login_parser = subparsers.add_parser("login", help="Log in and store the session")
    login_parser.add_argument("--username", "-u", default=None, help="Username (prompted if omitted)")

    subparsers.add_parser("logout", help="Log out and clear the stored session")
    subparsers.add_parser("status", help="Show the stored session")

    get_parser = subparsers.add_parser("get", help="GET an API path with the stored session")
    get_parser.add_argument("path", help="Path relative to the API URL, e.g. /branches")
    get_parser.add_argument(
        "--param", "-p",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Query parameter, may be repeated"
    )

    return parser


async def run(args: argparse.Namespace) -> int:
    store = SessionStore(SessionStorage(args.session_file))

    if args.command == "status":
        return handle_status(store, console)

    async with ApiClient(base_url=args.api_url or settings.API_URL, store=store) as client:
        if args.command == "login":
            return await handle_login(client, store, console, args.username)
        if args.command == "logout":
            return await handle_logout(client, store, console)
        if args.command == "get":
            return await handle_get(client, console, args.path, args.param)

    raise ValueError(f"Unknown command: {args.command}")


def main():
    """Entry point for the CLI"""
    args = build_parser().parse_args()
    setup_logging(args.debug)

    try:
        exit_code = asyncio.run(run(args))
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        exit_code = 130
    except ApiClientError as e:
        console.print(f"[red]Error:[/red] {get_error_message(e)}")
        exit_code = 1
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        exit_code = 2

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
