import asyncio
from datetime import timedelta

import typer
import uvicorn

app = typer.Typer(help="Pulse - channel messaging backend")


@app.command()
def serve(reload: bool = typer.Option(False, help="Reload on code changes.")) -> None:
    """Start the Pulse API server."""
    from pulse.app.config import settings

    typer.echo(f"Starting Pulse on {settings.host}:{settings.port}...")
    uvicorn.run(
        "pulse.app.main:app",
        host=settings.host,
        port=settings.port,
        reload=reload,
    )


@app.command("init-db")
def init_db() -> None:
    """Create tables and seed the general channel."""
    from pulse.app.db import init_db as _init_db

    asyncio.run(_init_db())
    typer.echo("Database ready.")


@app.command("issue-token")
def issue_token(
    subject: str = typer.Argument(..., help="Identity to put in the sub claim."),
    expires_minutes: int = typer.Option(60, help="Token lifetime in minutes."),
) -> None:
    """Mint a development bearer token signed with the configured key."""
    from pulse.app.core.security import create_access_token

    typer.echo(create_access_token(subject, timedelta(minutes=expires_minutes)))


if __name__ == "__main__":
    app()
