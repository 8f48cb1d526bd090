"""Typer CLI entrypoint."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import NoReturn

import typer

from wpactrl.api import Client
from wpactrl.core.config import ClientConfig, load_config
from wpactrl.core.errors import WpaCtrlError
from wpactrl.core.model import DisconnectedEvent, SupplicantEvent

app = typer.Typer(help="Talk to wpa_supplicant over its control socket")


@dataclass
class _Options:
    config_path: Path | None = None
    interface: str | None = None
    ctrl_dir: str | None = None


def _format_event(event: SupplicantEvent) -> str:
    if isinstance(event, DisconnectedEvent):
        return f"{event.kind.value} [{event.reason}]: {event.raw}"
    return f"{event.kind.value}: {event.raw}"


def _load_config(options: _Options) -> ClientConfig:
    config = load_config(options.config_path)
    if options.interface:
        config = replace(config, interface=options.interface)
    if options.ctrl_dir:
        config = replace(config, ctrl_dir=options.ctrl_dir)
    return config


def _open_client(ctx: typer.Context) -> Client:
    options: _Options = ctx.obj or _Options()
    return Client.open(_load_config(options))


def _fail(exc: WpaCtrlError) -> NoReturn:
    typer.echo(f"Error: {exc}", err=True)
    raise typer.Exit(code=1) from None


@app.callback()
def main(
    ctx: typer.Context,
    interface: str | None = typer.Option(None, "--interface", "-i", help="Interface name, e.g. wlan0"),
    ctrl_dir: str | None = typer.Option(None, "--ctrl-dir", help="Control socket directory"),
    config: Path | None = typer.Option(None, "--config", help="Path to config.yaml"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = _Options(config_path=config, interface=interface, ctrl_dir=ctrl_dir)


@app.command("ping")
def ping(ctx: typer.Context) -> None:
    """Check that the daemon answers."""
    try:
        with _open_client(ctx) as client:
            client.ping()
        typer.echo("PONG")
    except WpaCtrlError as exc:
        _fail(exc)


@app.command("cmd")
def raw_command(ctx: typer.Context, words: list[str] = typer.Argument(..., help="Command and arguments")) -> None:
    """Send a raw control command and print the reply."""
    try:
        with _open_client(ctx) as client:
            typer.echo(client.command(" ".join(words)))
    except WpaCtrlError as exc:
        _fail(exc)


@app.command("networks")
def list_networks(ctx: typer.Context) -> None:
    """List configured networks."""
    try:
        with _open_client(ctx) as client:
            networks = client.list_networks()
        if not networks:
            typer.echo("No networks configured")
            return
        for network in networks:
            typer.echo(f"{network.id}\t{network.ssid}")
    except WpaCtrlError as exc:
        _fail(exc)


@app.command("add-network")
def add_network(
    ctx: typer.Context,
    ssid: str = typer.Option(..., "--ssid", help="Network SSID"),
    psk: str | None = typer.Option(None, "--psk", help="WPA passphrase"),
    enable: bool = typer.Option(False, "--enable", help="Enable the network after adding it"),
) -> None:
    """Add a network and print its id."""
    try:
        with _open_client(ctx) as client:
            network_id = client.add_network(ssid, psk, enable=enable)
        typer.echo(network_id)
    except WpaCtrlError as exc:
        _fail(exc)


@app.command("remove-network")
def remove_network(ctx: typer.Context, network_id: str) -> None:
    """Remove a configured network."""
    try:
        with _open_client(ctx) as client:
            client.remove_network(network_id)
        typer.echo(f"Removed network {network_id}")
    except WpaCtrlError as exc:
        _fail(exc)


@app.command("events")
def events(
    ctx: typer.Context,
    count: int | None = typer.Option(None, "--count", "-n", help="Stop after N events"),
) -> None:
    """Attach and print events as they arrive."""
    try:
        with _open_client(ctx) as client:
            client.attach()
            seen = 0
            for event in client.events():
                typer.echo(_format_event(event))
                seen += 1
                if count is not None and seen >= count:
                    break
    except WpaCtrlError as exc:
        _fail(exc)


def run() -> None:
    app()


if __name__ == "__main__":
    run()
