"""CLI interface for the SQL workshop sandbox."""

from __future__ import annotations

import json
import logging
from typing import Optional

import typer

from sandbox import policy
from sandbox.failures import FixtureUnavailable
from workshop.config import WorkshopConfig, load_config
from workshop.schemas import QueryRequest, QuerySuccess
from workshop.service import CourseNotPermitted, WorkshopService

app = typer.Typer(help="SQL Workshop Sandbox CLI")


def _load(config_path: Optional[str], timeout_ms: Optional[int] = None) -> WorkshopConfig:
    try:
        config = load_config(config_path) if config_path else WorkshopConfig()
    except FileNotFoundError as e:
        typer.secho(f"❌ Config file not found: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)
    except ValueError as e:
        typer.secho(f"❌ Invalid config: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)
    if timeout_ms is not None:
        config.timeout_ms = timeout_ms
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return config


def _print_rows(rows: list[dict[str, object]]) -> None:
    if not rows:
        typer.echo("(no rows)")
        return
    columns = list(rows[0].keys())
    widths = {
        column: max(len(column), *(len(str(row.get(column))) for row in rows))
        for column in columns
    }
    typer.echo(" | ".join(column.ljust(widths[column]) for column in columns))
    typer.echo("-+-".join("-" * widths[column] for column in columns))
    for row in rows:
        typer.echo(" | ".join(str(row.get(column)).ljust(widths[column]) for column in columns))


@app.command()
def check(
    query: str = typer.Argument(..., help="SQL text to check against the admission policy"),
) -> None:
    """Show whether a query would be admitted."""
    verdict = policy.admit(query)
    if verdict.accepted:
        typer.secho("✅ Admitted", fg=typer.colors.GREEN)
        return
    typer.secho(f"❌ Rejected: {verdict.reason}", fg=typer.colors.RED, err=True)
    raise typer.Exit(1)


@app.command()
def execute(
    query: str = typer.Argument(..., help="SELECT query to run against the workshop dataset"),
    course: str = typer.Option("sql", help="Course the request comes from"),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to YAML config"),
    timeout_ms: Optional[int] = typer.Option(None, help="Override the time budget (ms)"),
    as_json: bool = typer.Option(False, "--json", help="Print the wire payload as JSON"),
) -> None:
    """Run a query in a fresh sandbox."""
    config = _load(config_path, timeout_ms)
    service = WorkshopService(config)

    try:
        response = service.execute(QueryRequest(query=query, course=course))
    except CourseNotPermitted as e:
        typer.secho(f"❌ Forbidden: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)

    if as_json:
        typer.echo(response.to_json())
    elif isinstance(response, QuerySuccess):
        _print_rows(response.results)
        typer.echo(f"\n{response.row_count} row(s) in {response.execution_time} ms")

    if not isinstance(response, QuerySuccess):
        if not as_json:
            typer.secho(f"❌ {response.error}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)


@app.command()
def schema(
    as_json: bool = typer.Option(False, "--json", help="Print the descriptor as JSON"),
) -> None:
    """Describe the tables of the workshop dataset."""
    service = WorkshopService()
    try:
        descriptor = service.schema()
    except FixtureUnavailable as e:
        typer.secho(f"❌ Workshop database unavailable: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)

    if as_json:
        typer.echo(json.dumps(descriptor, indent=2))
        return

    for table, columns in descriptor.items():
        typer.secho(f"\n{table}", fg=typer.colors.BLUE)
        for column in columns:
            flags = []
            if column["isPrimaryKey"]:
                flags.append("PK")
            if column["isNotNull"]:
                flags.append("NOT NULL")
            suffix = f" ({', '.join(flags)})" if flags else ""
            typer.echo(f"  {column['name']}: {column['type']}{suffix}")


@app.command()
def repeat(
    query: str = typer.Argument(..., help="Query to run repeatedly"),
    times: int = typer.Option(10, min=1, help="Number of concurrent runs"),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to YAML config"),
) -> None:
    """Run a query many times concurrently and confirm every run agrees."""
    config = _load(config_path)
    service = WorkshopService(config)
    results = service.run_many([query] * times, show_progress=True)

    failures = [result for result in results if not result.success]
    successes = [result for result in results if result.success]
    distinct = {json.dumps(result.rows, sort_keys=False, default=str) for result in successes}

    typer.echo(f"Runs: {len(results)} | Succeeded: {len(successes)} | Failed: {len(failures)}")
    if successes:
        slowest = max(result.elapsed_ms for result in successes)
        typer.echo(f"Rows per run: {successes[0].row_count} | Slowest: {slowest} ms")

    if len(distinct) > 1:
        typer.secho(f"❌ Runs disagreed: {len(distinct)} distinct result sets", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)
    if failures:
        typer.secho(f"⚠️  {failures[0].error}", fg=typer.colors.YELLOW, err=True)
        raise typer.Exit(1)
    typer.secho("✅ All runs returned identical rows", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()
