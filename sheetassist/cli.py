from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from sheetassist.config import GatewaySettings, load_settings
from sheetassist.gateway import ProviderGateway
from sheetassist.llm.cells import CellRef
from sheetassist.llm.credentials import CredentialStore
from sheetassist.llm.providers.base import PROVIDER_ORDER, ProviderError, RequestContext

app = typer.Typer(add_completion=False)
console = Console()

DEFAULT_STORE = "~/.sheetassist/credentials.db"


def _settings(config: Optional[str]) -> GatewaySettings:
    try:
        return load_settings(config)
    except (OSError, ValueError) as e:
        console.print(f"[red]Bad config[/red] {config}: {e}")
        raise typer.Exit(code=1)


def _store(settings: GatewaySettings) -> CredentialStore:
    return CredentialStore.open(settings.credentials_path or DEFAULT_STORE)


def _check_provider(provider: str) -> str:
    if provider not in PROVIDER_ORDER:
        raise typer.BadParameter(f"expected one of {list(PROVIDER_ORDER)}")
    return provider


@app.command()
def ask(
    prompt: str = typer.Argument(..., help="What to ask the assistant"),
    provider: str = typer.Option("openai", callback=_check_provider, help=f"One of {list(PROVIDER_ORDER)}"),
    cell: Optional[str] = typer.Option(None, help="Selected cell, e.g. B2"),
    value: str = typer.Option("", help="Current value of the selected cell"),
    data: Optional[str] = typer.Option(None, help="JSON file with surrounding cell data"),
    fallback: bool = typer.Option(True, "--fallback/--no-fallback", help="Try other providers on failure"),
    config: Optional[str] = typer.Option(None, help="YAML settings file"),
):
    settings = _settings(config)
    try:
        surrounding = json.loads(Path(data).read_text(encoding="utf-8")) if data else {}
    except (OSError, ValueError) as e:
        raise typer.BadParameter(str(e), param_hint="--data")
    try:
        selected = CellRef.parse(cell) if cell else None
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--cell")
    ctx = RequestContext(prompt=prompt, selected_cell=selected, cell_value=value, surrounding_data=surrounding)

    store = _store(settings)

    async def _run():
        async with ProviderGateway(store, settings) as gw:
            return await gw.request(provider, ctx, allow_fallback=fallback)

    try:
        resp = asyncio.run(_run())
    except ProviderError as e:
        console.print(f"[red]FAIL[/red] {e}")
        raise typer.Exit(code=1)
    finally:
        store.close()

    console.print(f"[bold]{resp.provider}[/bold]")
    console.print(resp.text)
    if resp.cell_updates:
        table = Table(title="Cell updates")
        table.add_column("Cell")
        table.add_column("Value")
        for u in resp.cell_updates:
            try:
                label = CellRef(int(u["row"]), int(u["col"])).label
            except (KeyError, TypeError, ValueError):
                label = "?"
            table.add_row(label, json.dumps(u.get("value") if isinstance(u, dict) else u))
        console.print(table)
    if resp.actions:
        table = Table(title="Actions")
        table.add_column("Description")
        table.add_column("Updates")
        for a in resp.actions:
            if not isinstance(a, dict):
                continue
            table.add_row(str(a.get("description", "")), str(len(a.get("cellUpdates") or [])))
        console.print(table)


@app.command()
def generate(
    prompt: str = typer.Argument(..., help="Plain prompt, no spreadsheet context"),
    config: Optional[str] = typer.Option(None, help="YAML settings file"),
):
    settings = _settings(config)
    store = _store(settings)

    async def _run():
        async with ProviderGateway(store, settings) as gw:
            return await gw.generate_content(prompt)

    try:
        console.print(asyncio.run(_run()))
    except ProviderError as e:
        console.print(f"[red]FAIL[/red] {e}")
        raise typer.Exit(code=1)
    finally:
        store.close()


@app.command()
def status(config: Optional[str] = typer.Option(None, help="YAML settings file")):
    settings = _settings(config)
    store = _store(settings)

    async def _run():
        async with ProviderGateway(store, settings) as gw:
            return await gw.check_all()

    try:
        results = asyncio.run(_run())
        configured = store.configured()
    finally:
        store.close()
    table = Table(title="Provider status")
    table.add_column("Provider")
    table.add_column("Key")
    table.add_column("Reachable")
    for p, ok in results.items():
        table.add_row(
            p,
            "yes" if configured.get(p) else "-",
            "[green]OK[/green]" if ok else "[red]FAIL[/red]",
        )
    console.print(table)


@app.command("set-key")
def set_key(
    provider: str = typer.Argument(..., callback=_check_provider),
    secret: str = typer.Argument(..., help="API key"),
    config: Optional[str] = typer.Option(None, help="YAML settings file"),
):
    store = _store(_settings(config))
    store.set(provider, secret)
    store.close()
    console.print(f"[green]OK[/green] stored key for {provider}")


@app.command("clear-key")
def clear_key(
    provider: str = typer.Argument(..., callback=_check_provider),
    config: Optional[str] = typer.Option(None, help="YAML settings file"),
):
    store = _store(_settings(config))
    store.set(provider, "")
    store.close()
    console.print(f"Cleared key for {provider}")


if __name__ == "__main__":
    app()
