"""Messagely CLI — register, log in, and exchange messages from a terminal.

Usage:
    messagely serve                              # Run the API server
    messagely init-db                            # Create tables (dev only)
    messagely register alice --first-name Alice --last-name Liddell --phone 555-0100
    messagely login alice                        # Prints a token
    export MESSAGELY_TOKEN=...                   # Use it for the commands below
    messagely users                              # Everyone on the server
    messagely send bob "hi"                      # Send a message
    messagely show 42                            # Message detail
    messagely read 42                            # Mark as read (recipient only)
    messagely inbox alice                        # Messages received
    messagely outbox alice                       # Messages sent
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import json
import os
import sys
from typing import Optional

import click
import httpx

from messagely import __version__

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DEFAULT_API_URL = "http://localhost:8000"


def _api_url() -> str:
    return os.environ.get("MESSAGELY_API_URL", DEFAULT_API_URL).rstrip("/")


def _client(token: Optional[str] = None) -> httpx.AsyncClient:
    """Build an async HTTP client pointed at the Messagely server."""
    headers = {"Authorization": f"Bearer {token}"} if token else {}
    return httpx.AsyncClient(base_url=_api_url(), headers=headers, timeout=30.0)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro):
    """Run an async coroutine from a synchronous Click handler.

    Inside an already-running loop (e.g. CliRunner in async tests) the
    coroutine is run on a worker thread with its own loop.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    else:
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()


def _require_token(token: Optional[str]) -> str:
    if not token:
        click.secho(
            "Error: --token required (or set MESSAGELY_TOKEN env var)",
            fg="red",
            err=True,
        )
        sys.exit(1)
    return token


def _check(response: httpx.Response) -> dict:
    """Return the JSON body, or print the server's detail and exit 1."""
    if response.is_error:
        try:
            detail = response.json().get("detail", response.text)
        except ValueError:
            detail = response.text
        click.secho(f"Error ({response.status_code}): {detail}", fg="red", err=True)
        sys.exit(1)
    return response.json()


def _pretty_json(data: dict | list) -> str:
    return json.dumps(data, indent=2, default=str)


def _print_table(rows: list[dict], columns: list[tuple[str, str, int]]):
    """Print a simple ASCII table.

    columns: list of (header, dict_key, width)
    """
    header = "  ".join(h.ljust(w) for h, _, w in columns)
    click.secho(header, bold=True)
    click.echo("-" * len(header))
    for row in rows:
        line = "  ".join(str(row.get(k) or "—")[:w].ljust(w) for _, k, w in columns)
        click.echo(line)


def _flatten_party(messages: list[dict], key: str) -> list[dict]:
    """Lift the nested from_user/to_user username into a flat column."""
    return [{**m, "party": m[key]["username"]} for m in messages]


token_option = click.option(
    "--token",
    envvar="MESSAGELY_TOKEN",
    help="Bearer token (or set MESSAGELY_TOKEN)",
)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="messagely")
def main():
    """Messagely — person-to-person messaging with read receipts."""


# ---------------------------------------------------------------------------
# Server commands
# ---------------------------------------------------------------------------


@main.command()
@click.option("--host", default=None, help="Bind address (default: settings.host)")
@click.option("--port", default=None, type=int, help="Port (default: settings.port)")
@click.option("--reload", is_flag=True, help="Auto-reload on code changes")
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """Run the API server with uvicorn."""
    import uvicorn

    from messagely.config import settings

    uvicorn.run(
        "messagely.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


@main.command("init-db")
def init_db():
    """Create all tables directly (development only; use alembic otherwise)."""
    from messagely.db.engine import engine, init_models

    async def _init():
        await init_models()
        await engine.dispose()

    _run(_init())
    click.secho("Tables created", fg="green")


# ---------------------------------------------------------------------------
# Account commands
# ---------------------------------------------------------------------------


@main.command()
@click.argument("username")
@click.option("--first-name", prompt=True)
@click.option("--last-name", prompt=True)
@click.option("--phone", prompt=True)
@click.password_option()
def register(username: str, first_name: str, last_name: str, phone: str, password: str):
    """Create an account and print a token."""
    _run(_register_impl(username, password, first_name, last_name, phone))


async def _register_impl(username: str, password: str, first_name: str,
                         last_name: str, phone: str):
    async with _client() as c:
        r = await c.post("/api/v1/auth/register", json={
            "username": username,
            "password": password,
            "first_name": first_name,
            "last_name": last_name,
            "phone": phone,
        })
        data = _check(r)
    click.secho(f"Registered {username}", fg="green", err=True)
    click.echo(data["token"])


@main.command()
@click.argument("username")
@click.option("--password", prompt=True, hide_input=True)
def login(username: str, password: str):
    """Log in and print a token."""
    _run(_login_impl(username, password))


async def _login_impl(username: str, password: str):
    async with _client() as c:
        r = await c.post("/api/v1/auth/login", json={
            "username": username,
            "password": password,
        })
        data = _check(r)
    click.echo(data["token"])


@main.command()
@token_option
def users(token: Optional[str]):
    """List all users."""
    _run(_users_impl(_require_token(token)))


async def _users_impl(token: str):
    async with _client(token) as c:
        data = _check(await c.get("/api/v1/users"))

    rows = data["users"]
    if not rows:
        click.echo("No users.")
        return
    _print_table(rows, [
        ("USERNAME", "username", 20),
        ("FIRST", "first_name", 15),
        ("LAST", "last_name", 15),
        ("PHONE", "phone", 15),
    ])


# ---------------------------------------------------------------------------
# Message commands
# ---------------------------------------------------------------------------


@main.command()
@click.argument("to_username")
@click.argument("body")
@token_option
def send(to_username: str, body: str, token: Optional[str]):
    """Send BODY to TO_USERNAME."""
    _run(_send_impl(to_username, body, _require_token(token)))


async def _send_impl(to_username: str, body: str, token: str):
    async with _client(token) as c:
        data = _check(await c.post("/api/v1/messages", json={
            "to_username": to_username,
            "body": body,
        }))
    message = data["message"]
    click.secho(f"Message #{message['id']} sent to {message['to_username']}", fg="green")


@main.command()
@click.argument("message_id", type=int)
@token_option
def show(message_id: int, token: Optional[str]):
    """Show one message (sender or recipient only)."""
    _run(_show_impl(message_id, _require_token(token)))


async def _show_impl(message_id: int, token: str):
    async with _client(token) as c:
        data = _check(await c.get(f"/api/v1/messages/{message_id}"))
    click.echo(_pretty_json(data["message"]))


@main.command()
@click.argument("message_id", type=int)
@token_option
def read(message_id: int, token: Optional[str]):
    """Mark a message as read (recipient only)."""
    _run(_read_impl(message_id, _require_token(token)))


async def _read_impl(message_id: int, token: str):
    async with _client(token) as c:
        data = _check(await c.post(f"/api/v1/messages/{message_id}/read"))
    message = data["message"]
    click.secho(f"Message #{message['id']} read at {message['read_at']}", fg="green")


@main.command()
@click.argument("username")
@token_option
def inbox(username: str, token: Optional[str]):
    """Messages USERNAME has received."""
    _run(_mailbox_impl(username, "to", "from_user", _require_token(token)))


@main.command()
@click.argument("username")
@token_option
def outbox(username: str, token: Optional[str]):
    """Messages USERNAME has sent."""
    _run(_mailbox_impl(username, "from", "to_user", _require_token(token)))


async def _mailbox_impl(username: str, direction: str, party_key: str, token: str):
    async with _client(token) as c:
        data = _check(await c.get(f"/api/v1/users/{username}/{direction}"))

    rows = _flatten_party(data["messages"], party_key)
    if not rows:
        click.echo("No messages.")
        return
    _print_table(rows, [
        ("ID", "id", 6),
        ("FROM" if direction == "to" else "TO", "party", 16),
        ("SENT", "sent_at", 20),
        ("READ", "read_at", 20),
        ("BODY", "body", 40),
    ])
