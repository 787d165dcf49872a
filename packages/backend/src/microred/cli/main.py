"""Microred CLI — run the server and inspect resources.

Usage:
    microred serve                          # Start the API + WebSocket server
    microred serve --reload                 # ...with auto-reload for development
    microred list colaboradores             # List every document of a resource
    microred get zonas zon123               # Fetch one document by business key
"""

from __future__ import annotations

import json
import os
import sys
from urllib.parse import quote

import click
import httpx

from microred.config import settings

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DEFAULT_API_URL = "http://localhost:3000"

RESOURCES = (
    "administradores",
    "colaboradores",
    "incentivos",
    "microempresarios",
    "referencias",
    "rutas",
    "zonas",
)


def _api_url() -> str:
    return os.environ.get("MICRORED_API_URL", DEFAULT_API_URL).rstrip("/")


def _client() -> httpx.Client:
    """Build an HTTP client pointed at the Microred backend."""
    return httpx.Client(base_url=f"{_api_url()}/api/v1", timeout=30.0)


def _pretty_json(data: dict | list) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


def _request(path: str) -> dict | list:
    try:
        with _client() as client:
            resp = client.get(path)
    except httpx.HTTPError as e:
        click.secho(f"Error: cannot reach {_api_url()} ({e})", fg="red", err=True)
        sys.exit(1)

    if resp.status_code >= 400:
        body = resp.json() if resp.headers.get("content-type", "").startswith("application/json") else {}
        message = body.get("error") or resp.text
        click.secho(f"Error {resp.status_code}: {message}", fg="red", err=True)
        sys.exit(1)
    return resp.json()


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@click.group()
def cli():
    """Microred backend command line."""


@cli.command()
@click.option("--host", default=None, help="Bind address (default: MICRORED_HOST)")
@click.option("--port", default=None, type=int, help="Port (default: MICRORED_PORT)")
@click.option("--reload", is_flag=True, help="Auto-reload on code changes")
def serve(host: str | None, port: int | None, reload: bool):
    """Run the API server with uvicorn."""
    import uvicorn

    uvicorn.run(
        "microred.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_level=settings.log_level,
    )


@cli.command("list")
@click.argument("resource", type=click.Choice(RESOURCES))
def list_resource(resource: str):
    """List every document of RESOURCE."""
    click.echo(_pretty_json(_request(f"/{resource}")))


@cli.command()
@click.argument("resource", type=click.Choice(RESOURCES))
@click.argument("key")
def get(resource: str, key: str):
    """Fetch one document of RESOURCE by its business KEY."""
    click.echo(_pretty_json(_request(f"/{resource}/{quote(key, safe='')}")))


def main():
    cli()


if __name__ == "__main__":
    main()
