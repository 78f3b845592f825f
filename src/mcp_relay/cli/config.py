"""CLI: mcp-relay config show|check|set"""

import json

import click
from rich.console import Console
from rich.table import Table

from mcp_relay.config import CONFIG_FILE, ENV_VARS, RelayConfig, read_config_file, save_config

console = Console()


def _load_config() -> RelayConfig:
    from mcp_relay.cli.main import _load_config
    return _load_config()


@click.group()
def config():
    """Configuration commands."""


@config.command("show")
@click.option("--json-output", "--json", is_flag=True)
def config_show(json_output: bool):
    """Show the resolved configuration (secrets redacted)."""
    values = _load_config().redacted()
    if json_output:
        click.echo(json.dumps(values, indent=2))
        return
    table = Table(title="mcp-relay configuration")
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_column("Env")
    for name, value in values.items():
        table.add_row(name, "" if value is None else str(value), ENV_VARS.get(name, ""))
    console.print(table)


@config.command("check")
def config_check():
    """Exit non-zero when required credentials are missing."""
    missing = _load_config().missing()
    if missing:
        for name in missing:
            console.print(f"[red]missing[/red] {name} (set {ENV_VARS[name]})")
        raise SystemExit(1)
    console.print("[green]Configuration complete.[/green]")


@config.command("set")
@click.argument("field")
@click.argument("value")
def config_set(field: str, value: str):
    """Store a value in ~/.mcp-relay/config.json."""
    if field not in RelayConfig.model_fields:
        console.print(f"[red]Unknown field: {field}[/red]")
        raise SystemExit(1)
    values = read_config_file(CONFIG_FILE)
    values[field] = value
    save_config(values)
    console.print(f"[green]{field} saved to {CONFIG_FILE}[/green]")
