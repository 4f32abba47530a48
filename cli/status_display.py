"""Status display functionality for CLI"""

from rich.table import Table
from session import SessionStore


def show_session_status(store: SessionStore, console):
    """
    Display session status

    Args:
        store: SessionStore instance
        console: Rich console for output
    """
    user = store.user or {}
    credentials = store.read()

    table = Table(title="Session Status")
    table.add_column("Property", style="cyan")
    table.add_column("Value")

    table.add_row("Logged In", "Yes" if store.is_logged_in() else "No")
    table.add_row("Username", str(user.get("username") or "-"))
    table.add_row("Role", store.get_role() or "-")
    table.add_row("Access Token", "Present" if credentials.access_token else "Missing")
    table.add_row("Refresh Token", "Present" if credentials.refresh_token else "Missing")

    if store.storage is not None:
        table.add_row("Session File", str(store.storage.session_file))

    console.print(table)


def get_auth_status(store: SessionStore) -> tuple[str, str]:
    """
    Get a one-line authentication status

    Returns:
        Tuple of (status, detail_message)
    """
    if not store.is_logged_in():
        return "NO AUTH", "Not logged in"

    user = store.user or {}
    return "LOGGED IN", f"{user.get('username')} ({store.get_role() or 'unknown role'})"
