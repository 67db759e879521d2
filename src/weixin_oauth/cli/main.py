"""CLI entry point."""

import typer
from rich.console import Console
from rich.table import Table

from weixin_oauth.flow import AuthorizationFlow
from weixin_oauth.settings import settings

app = typer.Typer(name="weixin-oauth", help="Stateless Weixin OAuth2 login")
console = Console()


@app.command()
def serve(
    host: str = typer.Option(settings.api.host, help="API server host"),
    port: int = typer.Option(settings.api.port, help="API server port"),
    reload: bool = typer.Option(settings.api.reload, help="Auto-reload on code changes"),
) -> None:
    """Start the Weixin login API server.

    Examples:
        weixin-oauth serve
        weixin-oauth serve --reload
        weixin-oauth serve --host 127.0.0.1 --port 8080
    """
    import uvicorn

    console.print(f"[green]Starting Weixin login API on {host}:{port}[/green]")
    console.print(f"[dim]Login:[/dim] http://{host}:{port}/oauth/weixin/login")
    console.print(f"[dim]Callback:[/dim] http://{host}:{port}/oauth/weixin/callback")

    uvicorn.run(
        "weixin_oauth.api.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


@app.command("authorize-url")
def authorize_url(
    host: str = typer.Option(None, help="Request host used as cookie domain"),
    device: str = typer.Option(None, help="Override device (pc, mobile)"),
) -> None:
    """Print a login redirect URL and its state cookie.

    Useful for checking appid, redirect and scope settings against the
    Weixin console without running the server.

    Examples:
        weixin-oauth authorize-url --host example.com
        weixin-oauth authorize-url --device mobile
    """
    config = settings.to_provider_config()
    if device:
        config = config.with_overrides(device=device)

    redirect = AuthorizationFlow(config).begin_authorization(host=host)

    console.print(f"[bold]URL:[/bold] {redirect.url}")
    console.print(f"[bold]Set-Cookie:[/bold] {redirect.set_cookie}")


@app.command()
def config() -> None:
    """Show the effective Weixin configuration (secret masked)."""
    provider_config = settings.to_provider_config()

    table = Table(show_header=False, box=None)
    table.add_column("Key", style="cyan")
    table.add_column("Value")

    for key, value in provider_config.model_dump().items():
        if key == "client_secret" and value:
            value = "****"
        elif key == "scopes":
            value = ", ".join(value)
        elif key == "device":
            value = value.value
        table.add_row(key, str(value))

    console.print(table)


@app.command()
def version() -> None:
    """Show version information."""
    from weixin_oauth import __version__

    typer.echo(f"weixin-oauth v{__version__}")


if __name__ == "__main__":
    app()
