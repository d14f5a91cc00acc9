"""Bondarys CLI application using Typer.

Operator utilities: secret generation, schema creation, granting the admin
role and running the API server.
"""

import asyncio
import secrets

import typer
from rich.console import Console
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from bondarys_auth import AccountNotFoundError
from bondarys_config.settings import get_settings
from bondarys_identity.application.commands import ChangeAccountRoleCommand
from bondarys_identity.domain.account import Account, AccountRole
from bondarys_identity.infrastructure.persistence.sqlalchemy import (
    AccountRepositorySQLAlchemy,
    create_engine_for,
    create_tables,
)

app = typer.Typer(
    name="bondarys",
    help="Bondarys - account sign-in and session service CLI",
    no_args_is_help=True,
)
console = Console()


secrets_app = typer.Typer(
    name="secrets",
    help="Secret generation utilities",
    no_args_is_help=True,
)
db_app = typer.Typer(
    name="db",
    help="Database schema utilities",
    no_args_is_help=True,
)
admin_app = typer.Typer(
    name="admin",
    help="Account administration",
    no_args_is_help=True,
)
app.add_typer(secrets_app)
app.add_typer(db_app)
app.add_typer(admin_app)


@secrets_app.command("generate")
def generate_secrets() -> None:
    """Generate signing secrets for the token configuration.

    Access and refresh tokens are signed with different keys; production
    refuses to start with the development defaults.

    Copy the output to your .env file.
    """
    console.print("\n[bold green]Bondarys Secret Generation[/bold green]")
    console.print("=" * 60)
    console.print(
        "\nGenerated secrets for your [bold].env[/bold] configuration file:\n"
    )

    # 64 bytes of entropy per key for HS256
    console.print(f"[cyan]JWT_SECRET[/cyan]={secrets.token_urlsafe(64)}")
    console.print(f"[cyan]JWT_REFRESH_SECRET[/cyan]={secrets.token_urlsafe(64)}")

    console.print("\n" + "=" * 60)
    console.print(
        "[yellow]Keep these secrets secure and never commit them "
        "to version control![/yellow]\n"
    )


@db_app.command("init")
def init_db() -> None:
    """Create all missing tables (existing tables are left untouched)."""

    async def _run() -> None:
        engine = create_engine_for(get_settings().database_url)
        try:
            await create_tables(engine)
        finally:
            await engine.dispose()

    asyncio.run(_run())
    console.print("[green]Database schema is up to date.[/green]")


async def _change_role(email: str, role: AccountRole) -> Account:
    engine = create_engine_for(get_settings().database_url)
    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    try:
        async with session_maker() as session:
            account = await ChangeAccountRoleCommand(
                AccountRepositorySQLAlchemy(session),
            ).execute(email, role)
            await session.commit()
            return account
    finally:
        await engine.dispose()


@admin_app.command("grant")
def grant_admin(email: str = typer.Argument(..., help="Email of the account")) -> None:
    """Give an existing account the admin role."""
    try:
        account = asyncio.run(_change_role(email, AccountRole.ADMIN))
    except AccountNotFoundError:
        console.print(f"[red]No account found for {email}[/red]")
        raise typer.Exit(code=1) from None
    console.print(f"[green]{account.email} is now an admin.[/green]")


@admin_app.command("revoke")
def revoke_admin(email: str = typer.Argument(..., help="Email of the account")) -> None:
    """Take the admin role away from an account."""
    try:
        account = asyncio.run(_change_role(email, AccountRole.USER))
    except AccountNotFoundError:
        console.print(f"[red]No account found for {email}[/red]")
        raise typer.Exit(code=1) from None
    console.print(f"[green]{account.email} is no longer an admin.[/green]")


@app.command("serve")
def serve(
    host: str | None = typer.Option(None, help="Bind address (default: API_HOST)"),
    port: int | None = typer.Option(None, help="Port (default: API_PORT)"),
    reload: bool = typer.Option(False, help="Reload on code changes"),
) -> None:
    """Run the API server with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "bondarys.presentation.api.app:app",
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=reload,
    )


def cli() -> None:
    """Entry point for the CLI application."""
    app()


if __name__ == "__main__":
    cli()
