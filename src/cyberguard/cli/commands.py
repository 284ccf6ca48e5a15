"""CLI commands for the CyberGuard portal.

Commands:
- serve: run the Web API under uvicorn
- init-db: create the SQLite schema
- seed: load the catalog into the SQLite database
- create-user: add an account to the SQLite database

init-db, seed and create-user always work on the SQLite file (the in-memory
backend does not outlive the process).
"""

from pathlib import Path

import typer
import uvicorn
from rich.console import Console

from cyberguard.config.app_config import ConfigError, load_app_config
from cyberguard.core.auth import PasswordHasher
from cyberguard.core.catalog import seed_storage
from cyberguard.db.database import init_db
from cyberguard.db.sqlite_storage import SqliteStorage
from cyberguard.db.storage import DuplicateUsernameError
from cyberguard.utils.logging import setup_logging
from cyberguard.utils.validators import password_too_long, validate_email

app = typer.Typer(
    name="cyberguard",
    help="CyberGuard security awareness portal.",
    no_args_is_help=True,
)

console = Console()


def _load_config_or_exit():
    try:
        config = load_app_config()
    except ConfigError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1)
    setup_logging(config)
    return config


def _db_path(db_path: str | None) -> Path:
    if db_path:
        return Path(db_path).expanduser()
    return Path(_load_config_or_exit().storage.db_path)


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", help="Bind address (default from config)"),
    port: int | None = typer.Option(None, "--port", "-p", help="Port (default from config)"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
) -> None:
    """Run the Web API."""
    config = _load_config_or_exit()
    host = host or config.server.host
    port = port or config.server.port

    console.print(f"[green]✓ Starting CyberGuard API on http://{host}:{port}[/green]")
    console.print(f"  [dim]storage:[/dim] {config.storage.backend}")
    uvicorn.run(
        "cyberguard.web.api:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_config=None,
    )


@app.command(name="init-db")
def init_database(
    db_path: str | None = typer.Option(None, "--db-path", help="SQLite file (default from config)"),
) -> None:
    """Create the SQLite schema. Existing tables are left untouched."""
    path = init_db(_db_path(db_path))
    console.print("[green]✓ Database ready[/green]")
    console.print(f"  [dim]path:[/dim] {path}")


@app.command()
def seed(
    db_path: str | None = typer.Option(None, "--db-path", help="SQLite file (default from config)"),
) -> None:
    """Load modules, assessments, resources and threat bulletins."""
    storage = SqliteStorage(_db_path(db_path))
    counts = seed_storage(storage)

    if not any(counts.values()):
        console.print("[yellow]⚠ Catalog already present, nothing to do[/yellow]")
        return

    console.print("[green]✓ Catalog seeded[/green]")
    for table, count in counts.items():
        console.print(f"  [dim]{table}:[/dim] {count}")


@app.command(name="create-user")
def create_user(
    username: str = typer.Argument(..., help="Login name"),
    password: str = typer.Option(
        ..., "--password", prompt=True, hide_input=True, confirmation_prompt=True
    ),
    email: str | None = typer.Option(None, "--email", "-e", help="Email address"),
    role: str = typer.Option("user", "--role", "-r", help="Role, e.g. user or admin"),
    db_path: str | None = typer.Option(None, "--db-path", help="SQLite file (default from config)"),
) -> None:
    """Add a user account."""
    if email and not validate_email(email):
        console.print(f"[red]✗ Invalid email address: {email}[/red]")
        raise typer.Exit(code=1)
    if not password or password_too_long(password):
        console.print("[red]✗ Password must be 1 to 72 bytes[/red]")
        raise typer.Exit(code=1)

    config = _load_config_or_exit()
    path = _db_path(db_path)
    hasher = PasswordHasher(rounds=config.auth.bcrypt_rounds)
    storage = SqliteStorage(path)

    try:
        user = storage.create_user(
            username=username,
            password=hasher.hash(password),
            email=email,
            role=role,
        )
    except DuplicateUsernameError as e:
        console.print(f"[yellow]⚠ {e}[/yellow]")
        raise typer.Exit(code=1)

    console.print(f"[green]✓ Created user {user.username}[/green]")
    console.print(f"  [dim]id:[/dim]   {user.id}")
    console.print(f"  [dim]role:[/dim] {user.role}")


if __name__ == "__main__":
    app()
