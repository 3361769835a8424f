"""Command-line entry point."""

from __future__ import annotations

import logging
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from sql2pinecone._migrator import MigrationSummary, run
from sql2pinecone.config import MigrationConfig
from sql2pinecone.exceptions import Sql2PineconeError

console = Console()

app = typer.Typer(
    name="sql2pinecone",
    help="Embed the text of every row of a SQL database into a Pinecone index.",
    no_args_is_help=True,
)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _print_summary(summary: MigrationSummary) -> None:
    table = Table(title="Migration summary")
    table.add_column("Table")
    table.add_column("Status")
    table.add_column("Rows", justify="right")
    table.add_column("Records", justify="right")
    table.add_column("Batches", justify="right")
    for name, stats in summary.tables.items():
        if stats.skipped:
            status = f"[yellow]skipped: {stats.skip_reason}[/yellow]"
        else:
            status = "[green]ok[/green]"
        table.add_row(name, status, str(stats.rows_read), str(stats.records), str(stats.flushes))
    console.print(table)


@app.callback()
def main() -> None:
    """sql2pinecone - one-shot SQL to Pinecone migration."""


@app.command()
def migrate(
    index: Annotated[
        str | None,
        typer.Option("--index", "-i", help="Target Pinecone index name [env: PINECONE_INDEX_NAME]"),
    ] = None,
    dialect: Annotated[
        str | None,
        typer.Option(
            "--dialect",
            "-d",
            help=(
                "postgresql, mysql, mssql or sqlite"
                " (inferred from the URL if omitted) [env: SQL_DIALECT]"
            ),
        ),
    ] = None,
    connection_string: Annotated[
        str | None,
        typer.Option("--connection-string", "-c", help="Database URL [env: DB_CONNECTION_STRING]"),
    ] = None,
    sqlite_file: Annotated[
        str | None,
        typer.Option("--sqlite-file", help="SQLite database file [env: SQLITE_DB_FILE]"),
    ] = None,
    api_key: Annotated[
        str | None,
        typer.Option("--api-key", help="Pinecone API key [env: PINECONE_API_KEY]"),
    ] = None,
    text_field: Annotated[
        str | None,
        typer.Option(
            "--text-field",
            "-t",
            help="Metadata field holding the embedded text [env: EMBEDDING_TEXT_FIELD]",
        ),
    ] = None,
    model: Annotated[
        str | None,
        typer.Option("--model", help="Pinecone embedding model [env: EMBEDDING_MODEL]"),
    ] = None,
    batch_size: Annotated[
        int | None,
        typer.Option(
            "--batch-size", min=1, help="Records per embed/upsert batch [env: BATCH_SIZE]"
        ),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option("--log-level", help="Logging level"),
    ] = "INFO",
) -> None:
    """Discover the schema and migrate every eligible table."""
    load_dotenv()
    _configure_logging(log_level)

    try:
        config = MigrationConfig.from_env(
            dialect=dialect,
            connection_string=connection_string,
            sqlite_file=sqlite_file,
            pinecone_api_key=api_key,
            index_name=index,
            embedding_text_field=text_field,
            embedding_model=model,
            batch_size=batch_size,
        ).validate()
    except Sql2PineconeError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1) from None

    try:
        summary = run(config)
    except Exception as e:
        # Already logged by the migration driver.
        console.print(f"[red]Migration failed: {e}[/red]")
        raise typer.Exit(1) from None

    _print_summary(summary)
    console.print(
        f"\n[green]Migrated {summary.records} records"
        f" from {len(summary.migrated)} tables.[/green]"
    )
