"""CLI: mcp-relay tools list|send-email|generate-image"""

from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from mcp_relay.dispatch import GENERATE_IMAGE, SEND_EMAIL
from mcp_relay.models.envelope import RawResponse

console = Console()


def _gateway():
    from mcp_relay.cli.main import _load_config
    from mcp_relay.gateway import Gateway
    return Gateway(_load_config())


def _run(coro):
    from mcp_relay.cli.main import _run
    return _run(coro)


async def _call(name: str, arguments: dict):
    gateway = _gateway()
    try:
        return await gateway.dispatcher.dispatch(name, arguments)
    finally:
        await gateway.close()


@click.group()
def tools():
    """Call gateway tools directly, without a connection."""


@tools.command("list")
def tools_list():
    """List registered tools."""
    table = Table(title="Tools")
    table.add_column("Name", style="bold")
    table.add_column("Description")
    table.add_column("Arguments")
    # The tool table is fixed; no credentials are needed to describe it.
    from mcp_relay.config import RelayConfig
    from mcp_relay.gateway import Gateway

    for spec in Gateway(RelayConfig()).dispatcher.tools():
        schema = spec.descriptor()["inputSchema"]
        required = set(schema.get("required", []))
        args = ", ".join(f"{name}{'' if name in required else '?'}" for name in schema.get("properties", {}))
        table.add_row(spec.name, spec.description, args)
    console.print(table)


@tools.command("send-email")
@click.option("--to", "to", multiple=True, required=True, help="Recipient (repeatable)")
@click.option("--subject", default="", help="Subject line")
@click.option("--body", default="", help="Plain-text body")
@click.option("--html", "html_body", default=None, help="HTML body")
@click.option("--from", "sender", default=None, help="Sender address")
def send_email(to: tuple[str, ...], subject: str, body: str, html_body: Optional[str], sender: Optional[str]):
    """Send an email through the sendEmail tool."""
    arguments = {"to": list(to) if len(to) > 1 else to[0], "subject": subject, "body": body}
    if html_body:
        arguments["htmlBody"] = html_body
    if sender:
        arguments["from"] = sender
    with console.status("Sending..."):
        envelope = _run(_call(SEND_EMAIL, arguments))
    console.print(envelope.first_text)


@tools.command("generate-image")
@click.argument("prompt")
@click.option("--steps", default=30, type=int, help="Diffusion steps (clamped)")
@click.option("--out", "out", type=click.Path(dir_okay=False, path_type=Path), required=True)
def generate_image(prompt: str, steps: int, out: Path):
    """Generate an image through the generateImage tool and write it to --out."""
    with console.status("Generating..."):
        response: RawResponse = _run(_call(GENERATE_IMAGE, {"prompt": prompt, "steps": steps}))
    if response.status != 200:
        console.print(f"[red]HTTP {response.status}[/red] {response.body.decode('utf-8', 'replace')}")
        raise SystemExit(1)
    out.write_bytes(response.body)
    console.print(f"[green]Wrote {len(response.body)} bytes ({response.media_type}) to {out}[/green]")
