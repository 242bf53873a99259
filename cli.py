"""CLI entry point for oneinch-proxy."""

import sys
from datetime import datetime

from pydantic import ValidationError
from rich.console import Console

from app import create_app
from core.config import CONFIG_FILE, Config, load_config
from ui.console import ConsoleLogger
from ui.dashboard import Dashboard
from ui.log_utils import CLI_LOG_FILE, clear_logs, mask_secret, write_cli_log

console = Console()


def main():
    """Main CLI entry point."""
    try:
        config = load_config()
    except ValidationError as e:
        console.print(f"[red][ERROR][/red] Invalid configuration: {e}")
        sys.exit(1)
    except OSError as e:
        console.print(f"[red][ERROR][/red] Cannot read {CONFIG_FILE}: {e}")
        sys.exit(1)

    plain = False

    # Handle CLI arguments
    if len(sys.argv) > 1:
        arg = sys.argv[1]

        if arg in ("--check", "--auth"):
            print_auth_status(config)
            return

        if arg == "--config":
            console.print(f"[bold]Config:[/bold] {CONFIG_FILE}")
            console.print(f"[bold]Log:[/bold] {CLI_LOG_FILE}")
            return

        if arg in ("--help", "-h"):
            _print_help()
            return

        if arg == "--plain":
            plain = True
        else:
            console.print(f"[red][ERROR][/red] Unknown option: {arg}")
            _print_help()
            sys.exit(2)

    # Requests are refused per request until a credential is configured
    if not config.has_authorization:
        console.print("[yellow]Warning:[/yellow] AUTHORIZATION is not set; proxy requests will fail")

    clear_logs()
    logger = Dashboard(config) if not plain else ConsoleLogger(console)

    import uvicorn

    app = create_app(config, logger)

    uvicorn_config = uvicorn.Config(
        app,
        host=config.proxy.host,
        port=config.proxy.port,
        log_level="warning",
    )
    server = uvicorn.Server(uvicorn_config)

    if isinstance(logger, Dashboard):
        logger.start()
    else:
        console.print(f"Server running on http://{config.proxy.host}:{config.proxy.port}")
    start_time = datetime.now()
    write_cli_log("STARTUP", "Proxy started", port=config.proxy.port, environment=config.proxy.environment)
    try:
        server.run()
    finally:
        duration = datetime.now() - start_time
        write_cli_log("SHUTDOWN", "Proxy stopped", duration=str(duration))
        if isinstance(logger, Dashboard):
            logger.stop()


def print_auth_status(config: Config) -> bool:
    """Report whether the upstream credential is configured."""
    if config.has_authorization:
        masked = mask_secret(config.upstream.authorization)
        console.print(f"[green]Authorization configured[/green] ({masked})")
        return True

    console.print("[yellow]Authorization not configured[/yellow]")
    console.print("\n[dim]Set the AUTHORIZATION environment variable, e.g.:[/dim]")
    console.print('  export AUTHORIZATION="Bearer <your 1inch API key>"')
    console.print(f"\n[dim]Or set upstream.authorization in:[/dim] {CONFIG_FILE}")
    return False


def _print_help():
    """Print help message."""
    help_text = """
[bold cyan]1inch API Proxy[/bold cyan]

Forwards requests to https://api.1inch.dev with a server-side Authorization header.

[bold]Usage:[/bold]
    oneinch-proxy              Start with live dashboard
    oneinch-proxy --plain      Start with one log line per request
    oneinch-proxy --check      Check whether AUTHORIZATION is configured
    oneinch-proxy --config     Show config and log locations
    oneinch-proxy --help       Show this help

[bold]Environment:[/bold]
    AUTHORIZATION   Value sent upstream as the Authorization header
    PORT            Listening port (default 3000)
    HOST            Listening address (default 127.0.0.1)
    ENVIRONMENT     "development" adds stack traces to error responses
"""
    console.print(help_text)


if __name__ == "__main__":
    main()
