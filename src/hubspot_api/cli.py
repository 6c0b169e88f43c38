"""HubSpot CLI - Main entry point.

Credentials are never stored by the CLI. ``hubspot oauth login`` prints the
issued credentials as JSON; save them yourself and pass the file back with
``--auth`` (or ``HUBSPOT_AUTH_FILE``).
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from .config import settings

app = typer.Typer(
    name="hubspot",
    help="HubSpot contacts, properties and OAuth from the command line",
    no_args_is_help=True,
)
console = Console()

oauth_app = typer.Typer(help="OAuth authentication commands")
contacts_app = typer.Typer(help="Contact commands")
properties_app = typer.Typer(help="Contact property commands")

app.add_typer(oauth_app, name="oauth")
app.add_typer(contacts_app, name="contacts")
app.add_typer(properties_app, name="properties")

AUTH_OPTION = typer.Option(
    ...,
    "--auth",
    "-a",
    envvar="HUBSPOT_AUTH_FILE",
    help="JSON file with credentials printed by 'hubspot oauth login'",
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Configure logging for all commands."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _output_result(result: Any) -> None:
    console.print_json(json.dumps(result, default=str))


def _load_auth(path: Path):
    from .auth import Auth
    from .errors import DecodeError

    try:
        return Auth.from_json(json.loads(path.read_text(encoding="utf-8")))
    except FileNotFoundError:
        console.print(f"[red]Auth file not found: {path}[/red]")
        raise typer.Exit(1)
    except (json.JSONDecodeError, DecodeError) as e:
        console.print(f"[red]Invalid auth file {path}: {e}[/red]")
        raise typer.Exit(1)


def _portal_id(portal: int | None):
    from .types import PortalId

    value = portal if portal is not None else settings.portal_id
    if value is None:
        console.print("[red]Portal ID required. Use --portal or set HUBSPOT_PORTAL_ID.[/red]")
        raise typer.Exit(1)
    return PortalId(value)


# ============================================================================
# OAuth Commands
# ============================================================================


@oauth_app.command("url")
def oauth_url(
    portal: int = typer.Option(None, "--portal", "-p", help="Portal (Hub) ID"),
):
    """Print the authorization URL for a portal."""
    from .oauth import OAuthClient, OAuthError

    try:
        client = OAuthClient.from_settings()
    except OAuthError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    console.print(client.get_authorization_url(_portal_id(portal)), soft_wrap=True)


@oauth_app.command("login")
def oauth_login(
    portal: int = typer.Option(None, "--portal", "-p", help="Portal (Hub) ID"),
    port: int = typer.Option(3000, "--port", help="Local server port for callback"),
    timeout: int = typer.Option(300, "--timeout", "-t", help="Max seconds to wait"),
    no_browser: bool = typer.Option(False, "--no-browser", help="Don't open a browser"),
):
    """Authorize the app in a browser and print the issued credentials."""
    from .oauth import OAuthClient, OAuthError, run_oauth_flow

    portal_id = _portal_id(portal)
    try:
        client = OAuthClient.from_settings()
        auth = asyncio.run(
            run_oauth_flow(
                client=client,
                portal_id=portal_id,
                port=port,
                timeout=timeout,
                open_browser=not no_browser,
            )
        )
    except OAuthError as e:
        console.print(f"[red]OAuth error: {e}[/red]")
        if e.details:
            console.print(f"[dim]Details: {e.details}[/dim]")
        raise typer.Exit(1)
    except TimeoutError:
        console.print("[red]Authorization timed out. Please try again.[/red]")
        raise typer.Exit(1)

    _output_result(auth.to_json())


@oauth_app.command("refresh")
def oauth_refresh(auth_file: Path = AUTH_OPTION):
    """Refresh the access token and print the new credentials."""
    from .oauth import OAuthClient, OAuthError

    auth = _load_auth(auth_file)
    try:
        client = OAuthClient.from_settings()
        new_auth, portal_id = asyncio.run(client.refresh(auth))
    except OAuthError as e:
        console.print(f"[red]Refresh failed: {e}[/red]")
        console.print("[dim]You may need to run 'hubspot oauth login' again.[/dim]")
        raise typer.Exit(1)

    _output_result({**new_auth.to_json(), "portal_id": portal_id.to_json()})


@oauth_app.command("status")
def oauth_status(auth_file: Path = AUTH_OPTION):
    """Show whether the stored access token is still valid."""
    auth = _load_auth(auth_file)

    if auth.is_expired():
        console.print(
            Panel(
                "[bold yellow]Access Token Expired[/bold yellow]\n\n"
                + (
                    "Run 'hubspot oauth refresh' to get a new one."
                    if auth.refresh_token
                    else "No refresh token; run 'hubspot oauth login' again."
                ),
                title="OAuth Status",
            )
        )
        return

    expires_in = auth.expires_in_seconds()
    hours = expires_in // 3600
    minutes = (expires_in % 3600) // 60
    console.print(
        Panel(
            f"[bold green]Access Token Valid[/bold green]\n\n"
            f"Expires in: {hours}h {minutes}m\n"
            f"Refresh token: {'yes' if auth.refresh_token else 'no'}",
            title="OAuth Status",
        )
    )


# ============================================================================
# Contact Commands
# ============================================================================


@contacts_app.command("list")
def contacts_list(
    auth_file: Path = AUTH_OPTION,
    count: int = typer.Option(20, "--count", "-c", help="Contacts per page (max 100)"),
    offset: int = typer.Option(None, "--offset", help="vid-offset from a previous page"),
    prop: list[str] = typer.Option([], "--property", help="Property to include (repeatable)"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
):
    """List one page of contacts."""
    from .api import HubSpotClient

    auth = _load_auth(auth_file)

    async def _list():
        async with HubSpotClient(auth) as hs:
            return await hs.contacts.list(count=count, vid_offset=offset, properties=prop or None)

    page = _call(_list())

    if json_output:
        _output_result(
            {"contacts": list(page.contacts), "has-more": page.has_more, "vid-offset": page.vid_offset}
        )
        return

    table = Table(title=f"Contacts ({len(page.contacts)})")
    table.add_column("VID", style="dim")
    table.add_column("Email", style="cyan")
    table.add_column("Name", style="white")

    for c in page.contacts:
        table.add_row(str(c.get("vid", "-")), _profile_value(c, "email"), _contact_name(c))

    console.print(table)
    if page.has_more:
        console.print(f"[dim]More contacts available: --offset {page.vid_offset}[/dim]")


@contacts_app.command("get")
def contacts_get(
    vid: int = typer.Argument(..., help="Contact ID (vid)"),
    auth_file: Path = AUTH_OPTION,
):
    """Get a contact by vid."""
    from .api import HubSpotClient
    from .types import ContactId

    auth = _load_auth(auth_file)

    async def _get():
        async with HubSpotClient(auth) as hs:
            return await hs.contacts.get(ContactId(vid))

    _output_result(_call(_get()))


def _profile_value(contact: dict[str, Any], name: str) -> str:
    """Read ``properties.<name>.value`` from a v1 contact profile."""
    props = contact.get("properties")
    if not isinstance(props, dict):
        return "-"
    entry = props.get(name)
    if isinstance(entry, dict) and entry.get("value"):
        return str(entry["value"])
    return "-"


def _contact_name(contact: dict[str, Any]) -> str:
    parts = [_profile_value(contact, "firstname"), _profile_value(contact, "lastname")]
    name = " ".join(p for p in parts if p != "-")
    return name or "-"


# ============================================================================
# Property Commands
# ============================================================================


@properties_app.command("list")
def properties_list(
    auth_file: Path = AUTH_OPTION,
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
):
    """List contact properties."""
    from .api import HubSpotClient

    auth = _load_auth(auth_file)

    async def _list():
        async with HubSpotClient(auth) as hs:
            return await hs.properties.list()

    props = _call(_list())

    if json_output:
        _output_result([p.to_json() for p in props])
        return

    table = Table(title=f"Contact Properties ({len(props)})")
    table.add_column("Name", style="cyan")
    table.add_column("Label", style="white")
    table.add_column("Group", style="dim")
    table.add_column("Type", style="yellow")

    for p in props:
        kind = p.type.value if p.is_known_type else f"[red]{p.type}?[/red]"
        table.add_row(p.name, p.label, p.group_name, kind)

    console.print(table)


@properties_app.command("groups")
def properties_groups(
    auth_file: Path = AUTH_OPTION,
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
):
    """List contact property groups."""
    from .api import HubSpotClient

    auth = _load_auth(auth_file)

    async def _groups():
        async with HubSpotClient(auth) as hs:
            return await hs.properties.groups()

    groups = _call(_groups())

    if json_output:
        _output_result([g.to_json() for g in groups])
        return

    table = Table(title=f"Property Groups ({len(groups)})")
    table.add_column("Name", style="cyan")
    table.add_column("Display Name", style="white")
    table.add_column("Properties", style="green", justify="right")

    for g in groups:
        table.add_row(g.name, g.display_name, str(len(g.properties)))

    console.print(table)


def _call(coro):
    """Run an API coroutine, turning client errors into a non-zero exit."""
    from .errors import HubSpotError

    try:
        return asyncio.run(coro)
    except HubSpotError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
