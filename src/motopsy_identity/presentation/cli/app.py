"""Motopsy identity CLI application using Typer.

Operator utilities: secret generation, schema setup and admin-user
provisioning against the configured database.
"""

import asyncio
import secrets
from typing import Awaitable, Callable, TypeVar

import typer
from rich.console import Console
from rich.table import Table
from sqlalchemy.ext.asyncio import AsyncSession

from motopsy_config import Settings, configure_logging, get_settings
from motopsy_identity.application.results import Result
from motopsy_identity.infrastructure.persistence.sqlalchemy import (
    create_engine,
    create_session_maker,
    create_tables,
    seed_default_roles,
)
from motopsy_identity.presentation.dependencies import build_role_service

T = TypeVar("T")

app = typer.Typer(
    name="motopsy-identity",
    help="Motopsy identity - accounts, roles and credentials",
    no_args_is_help=True,
)
console = Console()

secrets_app = typer.Typer(
    name="secrets",
    help="Secret generation utilities",
    no_args_is_help=True,
)
app.add_typer(secrets_app)

db_app = typer.Typer(
    name="db",
    help="Database schema utilities",
    no_args_is_help=True,
)
app.add_typer(db_app)

admin_app = typer.Typer(
    name="admin",
    help="Admin user provisioning",
    no_args_is_help=True,
)
app.add_typer(admin_app)


def _load_settings() -> Settings:
    settings = get_settings()
    configure_logging(settings)
    return settings


def _run_with_session(
    settings: Settings,
    fn: Callable[[AsyncSession], Awaitable[T]],
) -> T:
    async def _run() -> T:
        engine = create_engine(settings.database_url)
        try:
            async with create_session_maker(engine)() as session:
                return await fn(session)
        finally:
            await engine.dispose()

    return asyncio.run(_run())


def _exit_on_failure(result: Result) -> None:
    if result.is_failure:
        console.print(f"[red]Error:[/red] {result.error} [dim]({result.code.value})[/dim]")
        raise typer.Exit(code=1)


@secrets_app.command("generate")
def generate_secrets() -> None:
    """Generate a JWT signing secret.

    Copy the output to your .env file.
    """
    console.print("\n[bold green]Motopsy Secret Generation[/bold green]")
    console.print("=" * 60)

    # 64 bytes of entropy for HS256
    jwt_secret = secrets.token_urlsafe(64)
    console.print(f"[cyan]JWT_SECRET_KEY[/cyan]={jwt_secret}")

    console.print("\n" + "=" * 60)
    console.print(
        "[yellow]Keep this secret secure and never commit it "
        "to version control![/yellow]"
    )
    console.print(
        "[dim]Copy the above value to your config/.env (Docker) or "
        "config/.env.dev (local) file.[/dim]\n"
    )


@db_app.command("init")
def init_database() -> None:
    """Create missing tables and seed the default roles."""
    settings = _load_settings()

    async def _init() -> list[str]:
        engine = create_engine(settings.database_url)
        try:
            await create_tables(engine)
            async with create_session_maker(engine)() as session:
                return await seed_default_roles(session)
        finally:
            await engine.dispose()

    created = asyncio.run(_init())
    console.print("[green]Database initialized.[/green]")
    if created:
        console.print(f"Seeded roles: {', '.join(created)}")


@admin_app.command("create")
def create_admin(
    email: str = typer.Argument(..., help="Email address of the new user"),
    password: str = typer.Option(
        ...,
        prompt=True,
        hide_input=True,
        confirmation_prompt=True,
        help="Initial password",
    ),
    role_id: int = typer.Option(..., "--role-id", help="Role to assign"),
    first_name: str | None = typer.Option(None, "--first-name"),
    last_name: str | None = typer.Option(None, "--last-name"),
    phone: str | None = typer.Option(None, "--phone"),
) -> None:
    """Create a pre-confirmed user with a role."""
    settings = _load_settings()

    async def _create(session: AsyncSession) -> Result:
        service = build_role_service(settings, session)
        return await service.create_admin_user(
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
            phone_number=phone,
            role_id=role_id,
        )

    result = _run_with_session(settings, _create)
    _exit_on_failure(result)

    created = result.value
    table = Table(title="Admin user created")
    table.add_column("ID", justify="right")
    table.add_column("Email")
    table.add_column("Role")
    table.add_row(str(created.id), created.email, created.role)
    console.print(table)


@admin_app.command("set-password")
def set_admin_password(
    user_id: int = typer.Argument(..., help="ID of the admin user"),
    password: str = typer.Option(
        ...,
        prompt=True,
        hide_input=True,
        confirmation_prompt=True,
        help="New password",
    ),
) -> None:
    """Replace the password of a user that holds at least one role."""
    settings = _load_settings()

    async def _update(session: AsyncSession) -> Result:
        service = build_role_service(settings, session)
        return await service.update_admin_user_password(user_id, password)

    result = _run_with_session(settings, _update)
    _exit_on_failure(result)
    console.print(f"[green]{result.value}[/green]")


def cli() -> None:
    """Entry point for the CLI application."""
    app()


if __name__ == "__main__":
    cli()
