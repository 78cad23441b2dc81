from pathlib import Path

import click

from codeprep.hub.models.enums import Language
from codeprep.hub.models.language import LANGUAGES

_EXTENSIONS = {info.extension: lang for lang, info in LANGUAGES.items()}


@click.group()
def main() -> None:
    """CodePrep Hub - collaborative code-snippet workspace."""


@main.command()
@click.option("--host", default=None, help="Bind host (default: from CODEPREP_HOST or 0.0.0.0).")
@click.option("--port", default=None, type=int, help="Bind port (default: from CODEPREP_PORT or 8000).")
@click.option("--reload", is_flag=True, default=False, help="Enable auto-reload for development.")
def serve(host: str | None, port: int | None, reload: bool) -> None:
    """Start the hub HTTP server."""
    import uvicorn

    from codeprep.hub.settings import get_settings

    settings = get_settings()
    uvicorn.run(
        "codeprep.hub.app:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_level="warning",  # uvicorn's own logging is intercepted by loguru
    )


@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--language",
    type=click.Choice([lang.value for lang in Language]),
    default=None,
    help="Program language (default: from the file extension).",
)
def run(path: Path, language: str | None) -> None:
    """Run a program file the way an editor's Run button does."""
    import anyio

    from codeprep.hub.execution.adapter import ExecutionAdapter

    if language is None:
        inferred = _EXTENSIONS.get(path.suffix.lstrip("."))
        if inferred is None:
            raise click.UsageError(f"Cannot infer the language of '{path.name}'; pass --language.")
        language = inferred

    result = anyio.run(ExecutionAdapter().execute, Language(language), path.read_text(encoding="utf-8"))
    click.echo(result.output, err=result.is_error)
    if result.is_error:
        raise SystemExit(1)


# ---------------------------------------------------------------------------
# Database management
# ---------------------------------------------------------------------------


def _alembic_config():
    """Alembic config for the migrations shipped inside the package."""
    from alembic.config import Config

    hub_dir = Path(__file__).parent / "hub"
    cfg = Config(str(hub_dir / "alembic.ini"))
    cfg.set_main_option("script_location", str(hub_dir / "alembic"))
    return cfg


@main.group()
def db() -> None:
    """Database migration and management commands."""


@db.command()
@click.option("--revision", default="head", help="Target revision (default: head).")
@click.option("--sql", is_flag=True, default=False, help="Print the SQL instead of running it.")
def upgrade(revision: str, sql: bool) -> None:
    """Run database migrations forward."""
    from alembic import command

    command.upgrade(_alembic_config(), revision, sql=sql)
    if not sql:
        click.echo(f"Database upgraded to {revision}.")


@db.command()
@click.option("--revision", default="-1", help="Target revision (default: -1, one step back).")
def downgrade(revision: str) -> None:
    """Roll back database migrations."""
    from alembic import command

    command.downgrade(_alembic_config(), revision)
    click.echo(f"Database downgraded to {revision}.")


@db.command()
@click.argument("message")
def migrate(message: str) -> None:
    """Autogenerate a new migration from model changes."""
    from alembic import command

    command.revision(_alembic_config(), message=message, autogenerate=True)
    click.echo(f"Migration generated: {message}")


@db.command()
def current() -> None:
    """Show current database revision."""
    from alembic import command

    command.current(_alembic_config(), verbose=True)


@db.command()
def history() -> None:
    """Show migration history."""
    from alembic import command

    command.history(_alembic_config(), verbose=True)


if __name__ == "__main__":
    main()
