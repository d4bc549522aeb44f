#!/usr/bin/env python3
"""
fast-sql - CLI tool for batch loading CSV files through an INSERT template.
"""
import sys
from typing import Optional

import click
import polars as pl
from polars.exceptions import PolarsError
from rich.console import Console
from rich.progress import BarColumn, Progress, TextColumn, TimeElapsedColumn
from rich.table import Table

import fast_sql
from fast_sql.adapters import available_drivers
from fast_sql.config import CSV_READ_BATCH_SIZE, DEFAULT_FLUSH_THRESHOLD, setup_logging
from fast_sql.exceptions import FastSQLError
from fast_sql.query_collector import QueryCollector
from fast_sql.query_splitter import split_query

# Initialize console for rich output
console = Console()


@click.group()
@click.version_option(version=fast_sql.__version__)
def cli():
    """
    fast-sql - batch single-row INSERTs into multi-row INSERT statements.

    Use the 'load' command to insert every row of a CSV file through an
    INSERT template, or 'split' to see how a template is batched.
    """
    pass


@cli.command()
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--driver", "-D", required=True, envvar="FASTSQL_DRIVER",
              help="Database driver (sqlite, mysql, postgresql, trino)")
@click.option("--address", "-a", required=True, envvar="FASTSQL_ADDRESS",
              help="Database address: file path for sqlite, connection URL otherwise")
@click.option("--template", "-t", required=True,
              help="Single-row INSERT template, e.g. 'INSERT INTO t (a, b) VALUES (?, ?)'")
@click.option("--threshold", "-n", type=click.IntRange(min=0), default=DEFAULT_FLUSH_THRESHOLD,
              envvar="FASTSQL_FLUSH_THRESHOLD", show_default=True, help="Rows per batch")
@click.option("--delimiter", "-d", default=",", help="CSV delimiter (default: comma)")
@click.option("--skip-header/--no-skip-header", default=True, help="Skip the first CSV row (default: skip)")
@click.option("--null", "null_value", default=None, help="CSV value to insert as NULL")
@click.option("--dry-run", is_flag=True, help="Build batches without executing them")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def load(csv_file: str, driver: str, address: str, template: str, threshold: int,
         delimiter: str, skip_header: bool, null_value: Optional[str],
         dry_run: bool, verbose: bool):
    """Insert every row of CSV_FILE using TEMPLATE."""
    logger = setup_logging(verbose)
    collector = QueryCollector()

    try:
        split_query(template)
        db = fast_sql.open(driver, address, threshold, query_collector=collector, dry_run=dry_run)
    except (FastSQLError, ImportError) as e:
        console.print(f"[bold red]Error:[/bold red] {str(e)}")
        sys.exit(1)

    rows = 0
    try:
        reader = pl.scan_csv(
            csv_file,
            separator=delimiter,
            has_header=skip_header,
            infer_schema_length=0,
            null_values=[null_value] if null_value is not None else None,
            missing_utf8_is_empty_string=True,
        )
        total_rows = reader.select(pl.len()).collect().item()
        logger.info(f"CSV file has {total_rows} rows")

        with Progress(
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TextColumn("{task.completed}/{task.total} rows"),
            TimeElapsedColumn(),
            console=console,
        ) as progress:
            task = progress.add_task("Loading", total=total_rows)
            for batch_start in range(0, total_rows, CSV_READ_BATCH_SIZE):
                batch = reader.slice(batch_start, CSV_READ_BATCH_SIZE).collect()
                for record in batch.iter_rows():
                    db.batch_insert(template, *record)
                    rows += 1
                progress.advance(task, len(batch))
        db.close()
    except (FastSQLError, PolarsError) as e:
        logger.error(f"Load failed after {rows} rows: {str(e)}")
        console.print(f"[bold red]Error:[/bold red] {str(e)}")
        sys.exit(1)

    stats = collector.get_stats()
    table = Table(title="Dry run batches" if dry_run else "Flushed batches")
    table.add_column("Table")
    table.add_column("Batches", justify="right")
    table.add_column("Rows", justify="right")
    for name, counts in sorted(stats["tables"].items()):
        table.add_row(name, str(counts["batches"]), str(counts["rows"]))
    console.print(table)

    verb = "Would load" if dry_run else "Loaded"
    console.print(f"{verb} {rows} rows in {stats['total_queries']} batches")


@cli.command()
@click.argument("template")
@click.option("--rows", "-r", type=click.IntRange(min=1), default=3, show_default=True,
              help="Row count for the example batch statement")
def split(template: str, rows: int):
    """Show how TEMPLATE is split for batching."""
    try:
        parts = split_query(template)
    except FastSQLError as e:
        console.print(f"[bold red]Error:[/bold red] {str(e)}")
        sys.exit(1)

    table = Table(show_header=False)
    table.add_row("Table", parts.table_name)
    table.add_row("Prefix", parts.prefix)
    table.add_row("Row fragment", parts.row_fragment)
    table.add_row("Suffix", parts.suffix or "-")
    console.print(table)
    console.print(parts.materialize(parts.row_fragment * rows), markup=False, highlight=False)


@cli.command()
def drivers():
    """List the supported database drivers."""
    table = Table()
    table.add_column("Driver")
    table.add_column("Installed")
    for name, installed in available_drivers().items():
        table.add_row(name, "yes" if installed else "no")
    console.print(table)


def main():
    cli()


if __name__ == "__main__":
    main()
