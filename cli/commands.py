"""CLI command handlers"""

import json
import logging

from rich.console import Console
from rich.prompt import Prompt

from api_client import ApiClient, ApiClientError, auth_api
from cli.status_display import get_auth_status, show_session_status
from session import InvalidSessionError, SessionStore

logger = logging.getLogger(__name__)


def parse_params(pairs) -> dict:
    """Turn ``["page=1", "status=active"]`` into a params dict

    Repeated keys collect into a list.
    """
    params = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"Invalid parameter '{pair}', expected key=value")
        if key in params:
            existing = params[key]
            params[key] = existing + [value] if isinstance(existing, list) else [existing, value]
        else:
            params[key] = value
    return params


async def handle_login(client: ApiClient, store: SessionStore, console: Console, username=None) -> int:
    """Prompt for credentials and start a session"""
    username = username or Prompt.ask("[cyan]Username[/cyan]", console=console)
    password = Prompt.ask("[cyan]Password[/cyan]", password=True, console=console)

    payload = await auth_api.login(client, username, password)
    try:
        store.login(payload)
    except InvalidSessionError as e:
        console.print(f"[red]Login response rejected:[/red] {e}")
        return 1

    status, detail = get_auth_status(store)
    console.print(f"[green]✓ {status}[/green] {detail}")
    return 0


async def handle_logout(client: ApiClient, store: SessionStore, console: Console) -> int:
    """Log out on the server (best effort) and clear the local session"""
    if store.read().access_token:
        try:
            await auth_api.logout(client)
        except ApiClientError as e:
            logger.warning(f"Server logout failed, clearing local session anyway: {e}")
    store.clear()
    console.print("[green]✓ Logged out[/green]")
    return 0


def handle_status(store: SessionStore, console: Console) -> int:
    show_session_status(store, console)
    return 0


async def handle_get(client: ApiClient, console: Console, path: str, param_pairs=None) -> int:
    """GET a path and print the payload"""
    params = parse_params(param_pairs)
    payload = await client.get(path, params=params)

    if isinstance(payload, (dict, list)):
        console.print_json(json.dumps(payload, default=str))
    else:
        console.print(payload)
    return 0
