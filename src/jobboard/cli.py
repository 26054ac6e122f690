"""Typer CLI entry point for the job board."""

from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from jobboard.config import load_config
from jobboard.log import configure_logging

app = typer.Typer(
    name="jobboard",
    help="Job board API with a mirrored search index",
    no_args_is_help=True,
)
console = Console()


def _get_config():
    return load_config(Path("config.yaml"))


def _get_engine():
    from jobboard.db import init_db

    return init_db(_get_config().db_path)


def _get_search(config):
    from jobboard.web.app import build_search

    service, _ = build_search(config)
    return service


@app.command()
def serve(
    host: str = typer.Option(None, "--host", "-h", help="Bind host (default: from config)"),
    port: int = typer.Option(None, "--port", "-p", help="Bind port (default: from config)"),
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload for development"),
):
    """Start the API server."""
    try:
        import uvicorn
    except ImportError:
        console.print("[red]Server dependencies not installed. Run: pip install uvicorn[/red]")
        raise typer.Exit(1)

    config = _get_config()
    configure_logging(config.logging.level)
    bind_host = host or config.web.host
    bind_port = port or config.web.port
    do_reload = reload or config.web.reload

    console.print("[bold]Starting job board API[/bold]")
    console.print(f"  http://{bind_host}:{bind_port}")
    console.print(f"  Search index: {config.search.url}")
    if config.health_check.enabled:
        console.print(f"  Index health check: [green]{config.health_check.cron}[/green]")
    else:
        console.print("  Index health check: [dim]disabled[/dim]")

    uvicorn.run(
        "jobboard.web.app:create_app",
        host=bind_host,
        port=bind_port,
        reload=do_reload,
        factory=True,
    )


@app.command()
def reindex():
    """Probe the search index, ensure mappings and copy every job into it."""
    from jobboard.db import get_session

    config = _get_config()
    configure_logging(config.logging.level)
    engine = _get_engine()
    service = _get_search(config)

    session = get_session(engine)
    report = service.initialize_indices(session)
    session.close()

    if not service.available:
        console.print(f"[yellow]Search index not available at {config.search.url}[/yellow]")
        raise typer.Exit(1)
    if report is None:
        console.print("[yellow]Indices ensured; reindexing disabled in config.[/yellow]")
        return

    style = "green" if report.failed == 0 else "yellow"
    console.print(
        f"[bold {style}]Reindexed {report.indexed}/{report.total} jobs[/bold {style}]"
        f" ({report.failed} failed, refreshed: {report.refreshed})"
    )


@app.command()
def search(
    keyword: str = typer.Argument("", help="Free-text keyword (blank browses everything)"),
    location: str | None = typer.Option(None, "--location", "-l", help="Exact location filter"),
    date_from: str | None = typer.Option(None, "--from", help="Created on or after (YYYY-MM-DD)"),
    date_to: str | None = typer.Option(None, "--to", help="Created on or before (YYYY-MM-DD)"),
    page: int = typer.Option(1, "--page", help="Page number"),
    limit: int = typer.Option(20, "--limit", "-n", help="Page size (max 100)"),
):
    """Run a faceted job search against the index."""
    config = _get_config()
    service = _get_search(config)

    if not service.client.probe():
        console.print(f"[yellow]Search index not available at {config.search.url}[/yellow]")
        raise typer.Exit(1)

    result, pagination = service.search_with_facets(
        keyword=keyword,
        location=location,
        date_from=date_from,
        date_to=date_to,
        page=page,
        limit=limit,
    )

    if not result.jobs:
        console.print("[yellow]No jobs found.[/yellow]")
        return

    table = Table(title=f"Jobs (page {pagination.page}/{pagination.total_pages}, {result.total} total)")
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Score", justify="right", width=7)
    table.add_column("Title", style="bold", max_width=35)
    table.add_column("Location", max_width=20)
    table.add_column("Created", width=10)

    for doc in result.jobs:
        score = doc.get("score")
        score_str = f"{score:.2f}" if score is not None else "—"
        table.add_row(
            str(doc.get("id", "")),
            Text(score_str, style="green" if score else "dim"),
            doc.get("title", ""),
            doc.get("location", ""),
            str(doc.get("createdAt", ""))[:10],
        )
    console.print(table)

    for name, buckets in result.facets.items():
        if buckets:
            facet_line = ", ".join(f"{b.value} ({b.count})" for b in buckets)
            console.print(f"[bold]{name}:[/bold] {facet_line}")


@app.command()
def jobs():
    """List jobs from the database, newest first."""
    from jobboard.db import get_session, list_all_jobs

    session = get_session(_get_engine())
    job_list = list_all_jobs(session)
    session.close()

    if not job_list:
        console.print("[yellow]No jobs found.[/yellow]")
        return

    table = Table(title=f"Jobs ({len(job_list)} results)")
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Title", style="bold", max_width=35)
    table.add_column("Location", max_width=20)
    table.add_column("Created", width=16)

    for job in job_list:
        created = job.created_at.strftime("%Y-%m-%d %H:%M") if job.created_at else "—"
        table.add_row(str(job.id), job.title, job.location, created)

    console.print(table)


@app.command()
def config_cmd():
    """Show current configuration."""
    config = _get_config()
    dump = config.model_dump_json(indent=2, exclude={"search": {"password"}})
    console.print(Panel(dump, title="Configuration"))


if __name__ == "__main__":
    app()
