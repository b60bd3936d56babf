"""Command line interface: ``linkeun-api serve|migrate|seed|token``."""

from datetime import datetime, timedelta, timezone

import typer
import uvicorn
from pydantic import ValidationError

from linkeun_api.auth import AuthError, JWTService
from linkeun_api.config import get_settings, parse_duration
from linkeun_api.database import create_db_engine, create_session_factory, create_tables
from linkeun_api.dto import TokenRequest
from linkeun_api.log import setup_logging
from linkeun_api.seeders import SEEDERS

app = typer.Typer(
    name="linkeun-api",
    help="Animal and flower CRUD API with a Redis look-aside cache",
    no_args_is_help=True,
)


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", help="Bind address (defaults to API_HOST)"),
    port: int | None = typer.Option(None, "--port", "-p", help="Port (defaults to API_PORT)"),
    reload: bool | None = typer.Option(None, "--reload/--no-reload", help="Auto-reload on code changes"),
) -> None:
    """Run the HTTP API with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "linkeun_api.api.app:create_app",
        factory=True,
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=settings.api_reload if reload is None else reload,
    )


@app.command()
def migrate() -> None:
    """Create missing tables from the ORM metadata."""
    settings = get_settings()
    setup_logging(settings)
    engine = create_db_engine(settings)
    try:
        create_tables(engine)
    finally:
        engine.dispose()
    typer.echo("Migration completed")


@app.command()
def seed(
    seeder: str = typer.Option("all", "--seeder", "-s", help="Seeder to run: animal, flower or all"),
    count: int = typer.Option(100, "--count", "-n", min=1, help="Number of records to generate"),
) -> None:
    """Fill empty tables with random sample data."""
    if seeder != "all" and seeder not in SEEDERS:
        typer.echo(f"Unknown seeder {seeder!r}. Available: {', '.join(SEEDERS)}, all", err=True)
        raise typer.Exit(code=1)

    settings = get_settings()
    setup_logging(settings)
    engine = create_db_engine(settings)
    try:
        create_tables(engine)
        session_factory = create_session_factory(engine)
        names = list(SEEDERS) if seeder == "all" else [seeder]
        for name in names:
            inserted = SEEDERS[name](session_factory, count=count).seed()
            typer.echo(f"{name}: inserted {inserted} records")
    finally:
        engine.dispose()


@app.command()
def token(
    user_id: int = typer.Option(1, "--id", help="User ID"),
    username: str = typer.Option("testuser", "--username", help="Username"),
    role: str = typer.Option("user", "--role", help="User role (user, admin, etc.)"),
    email: str = typer.Option("test@example.com", "--email", help="User email"),
    secret: str | None = typer.Option(None, "--secret", help="JWT secret (defaults to JWT_SECRET)"),
    expire: str | None = typer.Option(None, "--expire", help="Token lifetime, e.g. 24h or 30m"),
    force: bool = typer.Option(False, "--force", help="Allow token generation outside development and test"),
) -> None:
    """Generate a JWT for local testing."""
    settings = get_settings()
    env = settings.environment
    if env not in ("development", "test", "") and not force:
        typer.echo(
            "Token generation is only available in development and test environments "
            f"(current: {env}). Use --force to override.",
            err=True,
        )
        raise typer.Exit(code=1)
    if env == "production":
        typer.echo("WARNING: generating a token in the production environment", err=True)

    try:
        request = TokenRequest(user_id=user_id, username=username, role=role, email=email)
    except ValidationError as e:
        typer.echo(f"Invalid token claims: {e}", err=True)
        raise typer.Exit(code=1) from e

    expiration = parse_duration(expire, settings.jwt_expiration)
    service = JWTService(
        secret=secret or settings.jwt_secret,
        expiration=expiration,
    )
    try:
        jwt_token = service.generate_token(request.user_id, request.username, request.role, request.email)
    except AuthError as e:
        typer.echo(f"Error generating token: {e}. Set JWT_SECRET or pass --secret.", err=True)
        raise typer.Exit(code=1) from e

    expires = datetime.now(timezone.utc) + timedelta(seconds=expiration)
    typer.echo(f"Token: {jwt_token}")
    typer.echo("Claims:")
    typer.echo(f"  User ID (sub): {request.user_id}")
    typer.echo(f"  Username: {request.username}")
    typer.echo(f"  Role: {request.role}")
    typer.echo(f"  Email: {request.email}")
    typer.echo(f"  Expires: {expires.isoformat()}")
    typer.echo(f"  Environment: {env}")
    typer.echo(
        f'\ncurl -H "Authorization: Bearer {jwt_token}" '
        f"http://localhost:{settings.api_port}/api/v1/protected"
    )


if __name__ == "__main__":
    app()
