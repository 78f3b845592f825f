"""
mcp-relay CLI: `mcp-relay` command.

Commands:
  mcp-relay serve                 Run the HTTP + Socket.IO gateway
  mcp-relay config show|check|set Inspect or edit ~/.mcp-relay/config.json
  mcp-relay tools list            Show registered tools
  mcp-relay tools send-email      One-shot sendEmail call
  mcp-relay tools generate-image  One-shot generateImage call
"""

import asyncio
import logging
from typing import Optional

try:
    import click
    from rich.console import Console
    from rich.logging import RichHandler
except ImportError:
    raise SystemExit("CLI requires extras: pip install mcp-relay[cli]")

from mcp_relay import __version__
from mcp_relay.config import RelayConfig, load_config
from mcp_relay.errors import ConfigurationError

console = Console()


def _load_config(**overrides) -> RelayConfig:
    try:
        return load_config(**overrides)
    except ConfigurationError as e:
        console.print(f"[red]{e.message}[/red]")
        raise SystemExit(1)


def _run(coro):
    return asyncio.run(coro)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


@click.group()
@click.version_option(__version__)
@click.option("-v", "--verbose", is_flag=True, help="Debug logging")
def main(verbose: bool):
    """mcp-relay: email and image tools behind one authenticated MCP endpoint."""
    _setup_logging(verbose)


@main.command("serve")
@click.option("--host", default=None, help="Bind address")
@click.option("--port", default=None, type=int, help="Bind port")
def serve(host: Optional[str], port: Optional[int]):
    """Run the gateway (requires complete configuration)."""
    import uvicorn

    from mcp_relay.gateway import Gateway
    from mcp_relay.server import create_asgi_app

    cfg = _load_config(host=host, port=port)
    try:
        cfg.ensure_complete()
    except ConfigurationError as e:
        console.print(f"[red]{e.message}[/red]")
        raise SystemExit(1)

    console.print(f"[green]mcp-relay {__version__}[/green] listening on http://{cfg.host}:{cfg.port}/mcp")
    uvicorn.run(create_asgi_app(Gateway(cfg)), host=cfg.host, port=cfg.port, log_config=None)


# Register subcommands from separate modules
from mcp_relay.cli.config import config
from mcp_relay.cli.tools import tools

main.add_command(config)
main.add_command(tools)


if __name__ == "__main__":
    main()
