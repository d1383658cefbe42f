import sys
from pathlib import Path
from typing import Optional

import typer
from sqlalchemy.exc import SQLAlchemyError

from . import database, options as client_options
from .dump import dump
from .errors import ConfigurationError, DumpError
from .logging_setup import setup_logging
from .schemas import DumpSettings, OutputFormat
from .sink import Sink

app = typer.Typer(add_completion=False)


def _read_query(execute: Optional[str]) -> str:
    query = execute if execute is not None else sys.stdin.read()
    if not query.strip():
        raise ConfigurationError("No query given: pass -e or pipe it on standard input")
    return query


@app.command()
def main(
    host: Optional[str] = typer.Option(None, "-h", "--host", help="Connect to host."),
    user: Optional[str] = typer.Option(None, "-u", "--user", help="User for login if not current user."),
    database_name: Optional[str] = typer.Option(None, "-D", "--database", help="Database to use."),
    port: Optional[int] = typer.Option(None, "-P", "--port", help="The TCP/IP port number to use for the connection."),
    execute: Optional[str] = typer.Option(
        None, "-e", "--execute", help="The query to be processed. Read from standard input when omitted."
    ),
    format: OutputFormat = typer.Option(OutputFormat.csv, "-f", "--format", help="Query output format."),
    alias: Optional[str] = typer.Option(None, "-a", "--alias", help="Table the sql output inserts into."),
    insert_ignore: bool = typer.Option(False, "-i", "--insert-ignore", help="Produce INSERT IGNORE output for sql dump."),
    on_duplicate_key_update: bool = typer.Option(
        False, "-U", "--on-duplicate-key-update", help="Produce statement for update duplicate rows."
    ),
    batch_size: int = typer.Option(1024, "-s", "--batch-size", help="Batch size in KiB."),
    config: Optional[Path] = typer.Option(None, "-c", "--config", help="Configuration ini file with a [client] section."),
    url: Optional[str] = typer.Option(None, "--url", help="SQLAlchemy URL, replaces the MySQL connection options."),
    output: Optional[Path] = typer.Option(None, "-o", "--output", help="Write to this file instead of stdout."),
    csv_header: bool = typer.Option(False, "--csv-header", help="Write a header row in csv format."),
    no_set_names: bool = typer.Option(False, "--no-set-names", help="Omit the SET NAMES preamble in sql format."),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Debug logging on stderr."),
):
    """Run one query and dump its rows as json, csv or sql."""
    setup_logging(verbose)
    settings = DumpSettings(
        format=format.value,
        alias=alias,
        insert_ignore=insert_ignore,
        on_duplicate_key_update=on_duplicate_key_update,
        batch_size=batch_size,
        charset=client_options.DEFAULT_CHARSET,
        set_names=not no_set_names,
        csv_header=csv_header,
    )
    try:
        if settings.format == OutputFormat.sql.value and not settings.alias:
            raise ConfigurationError("Alias must be specified for sql format")
        query = _read_query(execute)
        opts = client_options.resolve_options(
            host=host, user=user, database=database_name, port=port, config_file=config and str(config)
        )
        engine = database.create_db_engine(database.build_url(opts, url))
        try:
            with database.open_cursor(engine, query) as cursor:
                if output is None:
                    dump(cursor, Sink(sys.stdout.buffer), settings)
                else:
                    with output.open("wb") as f:
                        dump(cursor, Sink(f), settings)
        finally:
            engine.dispose()
    except (DumpError, SQLAlchemyError, OSError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
