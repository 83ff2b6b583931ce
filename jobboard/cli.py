"""
Job Board Command Line Interface

Provides operator commands for the applicant pipeline: database setup,
applicant listings, status changes and running the HTTP API.
"""

from datetime import datetime
from typing import Any, Optional

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="jobboard",
    help="Job board applicant pipeline CLI",
    add_completion=False,
)
console = Console()

STATUS_COLORS = {
    "PENDING": "cyan",
    "REVIEWED": "yellow",
    "INTERVIEW_SCHEDULED": "blue",
    "INTERVIEW_COMPLETED": "magenta",
    "ACCEPTED": "green",
    "REJECTED": "red",
    "WITHDRAWN": "dim",
}


def _print_error(error: Any) -> None:
    """Print a job board error with its per-field details."""
    console.print(f"[red]Error ({error.kind}): {error.message}[/red]")
    for field_error in getattr(error, "errors", []):
        console.print(f"  [dim]{field_error.field}:[/dim] {field_error.message}")


def _require_database() -> None:
    from jobboard.data.database import get_database_manager

    if not get_database_manager().check_sync_connection():
        console.print("[red]Error: Could not connect to MongoDB. Run 'init-db' first.[/red]")
        raise typer.Exit(1)


def _truncate(value: Optional[str], width: int) -> str:
    if not value:
        return "-"
    return value[:width] + "..." if len(value) > width else value


@app.command()
def version():
    """Show application version."""
    from jobboard import __app_name__, __version__

    console.print(f"[bold blue]{__app_name__}[/bold blue] version [green]{__version__}[/green]")


@app.command()
def info():
    """Show system information and configuration."""
    from jobboard.utils.config import get_settings

    settings = get_settings()

    table = Table(title="Job Board Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Environment", settings.environment)
    table.add_row("Debug Mode", str(settings.debug))
    table.add_row("Database Host", settings.database.host)
    table.add_row("Database Name", settings.database.name)
    table.add_row("Replica Set", settings.database.replica_set or "-")
    table.add_row("Page Size", f"{settings.applicants.default_page_size} (max {settings.applicants.max_page_size})")
    table.add_row("Enforce Pipeline", str(settings.applicants.enforce_status_pipeline))
    table.add_row("API", f"{settings.api.host}:{settings.api.port}")
    table.add_row("Log Level", settings.logging.level)

    console.print(table)


@app.command()
def init_db():
    """Initialize the database with required collections and indexes."""
    import asyncio
    from jobboard.data.database import get_database_manager

    console.print("[yellow]Initializing database...[/yellow]")

    try:
        db_manager = get_database_manager()

        # Check connection first
        console.print("  Checking database connection...")
        if not db_manager.check_sync_connection():
            console.print("[red]Error: Could not connect to MongoDB.[/red]")
            console.print("[dim]Make sure MongoDB is running and connection settings are correct.[/dim]")
            raise typer.Exit(1)

        console.print("  [green]✓[/green] Connected to MongoDB")

        console.print("  Creating indexes...")
        asyncio.run(db_manager.ensure_indexes())
        console.print("  [green]✓[/green] Indexes created")

        console.print("\n[green]Database initialized successfully![/green]")

    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"[red]Error initializing database: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def applicants(
    company_id: str = typer.Argument(..., help="Company ID"),
    actor: str = typer.Option(..., "--actor", "-a", help="User ID of the company admin"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Name or email contains"),
    location: Optional[str] = typer.Option(None, "--location", help="City, province or address contains"),
    age_min: Optional[int] = typer.Option(None, "--age-min", help="Minimum age"),
    age_max: Optional[int] = typer.Option(None, "--age-max", help="Maximum age"),
    salary_min: Optional[float] = typer.Option(None, "--salary-min", help="Minimum expected salary"),
    salary_max: Optional[float] = typer.Option(None, "--salary-max", help="Maximum expected salary"),
    education: Optional[str] = typer.Option(None, "--education", "-e", help="Education level"),
    status: Optional[str] = typer.Option(None, "--status", "-s", help="Application status"),
    job_posting: Optional[str] = typer.Option(None, "--job", "-j", help="Restrict to one job posting"),
    sort_by: Optional[str] = typer.Option(None, "--sort-by", help="name/expectedSalary/testScore/age/createdAt"),
    sort_order: Optional[str] = typer.Option(None, "--order", "-o", help="asc or desc"),
    page: int = typer.Option(1, "--page", "-p", help="Page number"),
    limit: Optional[int] = typer.Option(None, "--limit", "-l", help="Applicants per page"),
):
    """List the applicants of a company's job postings."""
    from jobboard.core.applicants import get_search_service, parse_filter_params
    from jobboard.core.exceptions import JobBoardError

    params = {
        "name": name,
        "location": location,
        "ageMin": age_min,
        "ageMax": age_max,
        "salaryMin": salary_min,
        "salaryMax": salary_max,
        "education": education.upper() if education else None,
        "status": status.upper() if status else None,
        "jobPostingId": job_posting,
        "sortBy": sort_by,
        "sortOrder": sort_order,
        "page": page,
        "limit": limit,
    }

    try:
        criteria = parse_filter_params({k: v for k, v in params.items() if v is not None})
        _require_database()
        result = get_search_service().list_applicants(company_id, actor, criteria)
    except JobBoardError as e:
        _print_error(e)
        raise typer.Exit(1)

    if not result.applications:
        console.print("[yellow]No applicants found.[/yellow]")
        raise typer.Exit(0)

    pagination = result.pagination
    table = Table(
        title=f"Applicants (page {pagination.page}/{pagination.total_pages}, {pagination.total} total)"
    )
    table.add_column("Application", style="dim", width=24)
    table.add_column("Name", style="cyan")
    table.add_column("Job")
    table.add_column("Age", justify="right")
    table.add_column("Location")
    table.add_column("Salary", justify="right")
    table.add_column("Score", justify="right")
    table.add_column("Status", justify="center")

    for application in result.applications:
        applicant = application.applicant
        color = STATUS_COLORS.get(application.status, "white")
        table.add_row(
            str(application.id),
            _truncate(applicant.name or applicant.email, 30),
            _truncate(application.job_posting.title, 25),
            str(applicant.age) if applicant.age is not None else "-",
            _truncate(applicant.location, 25),
            f"{application.expected_salary:,.0f}" if application.expected_salary is not None else "-",
            f"{application.test_score:g}" if application.test_score is not None else "-",
            f"[{color}]{application.status}[/{color}]",
        )

    console.print(table)
    if pagination.has_next:
        console.print(f"[dim]More results: --page {pagination.page + 1}[/dim]")


@app.command()
def set_status(
    application_id: str = typer.Argument(..., help="Application ID"),
    status: str = typer.Argument(..., help="New application status"),
    actor: str = typer.Option(..., "--actor", "-a", help="User ID of the reviewing admin"),
    company_id: Optional[str] = typer.Option(None, "--company", "-c", help="Company the application must belong to"),
    reason: Optional[str] = typer.Option(None, "--reason", "-r", help="Rejection reason (REJECTED only)"),
    notes: Optional[str] = typer.Option(None, "--notes", help="Admin notes"),
    interview_at: Optional[datetime] = typer.Option(None, "--interview-at", help="Interview date and time"),
    interview_type: Optional[str] = typer.Option(None, "--interview-type", help="ONLINE, PHONE or IN_PERSON"),
    duration: Optional[int] = typer.Option(None, "--duration", help="Interview duration in minutes"),
    interview_location: Optional[str] = typer.Option(None, "--interview-location", help="Address or meeting link"),
):
    """Move an application to a new status."""
    from jobboard.core.exceptions import JobBoardError
    from jobboard.core.pipeline import get_transition_engine

    interview = None
    if interview_at is not None:
        interview = {
            "scheduledAt": interview_at,
            "interviewType": interview_type.upper() if interview_type else None,
            "duration": duration,
            "location": interview_location,
        }

    try:
        _require_database()
        application = get_transition_engine().transition(
            application_id,
            status.upper(),
            reviewed_by=actor,
            rejection_reason=reason,
            admin_notes=notes,
            interview=interview,
            company_id=company_id,
        )
    except JobBoardError as e:
        _print_error(e)
        raise typer.Exit(1)

    color = STATUS_COLORS.get(application.status, "white")
    console.print(
        f"[green]✓[/green] Application [cyan]{application.id}[/cyan] is now "
        f"[{color}]{application.status}[/{color}]"
    )
    if interview is not None and application.status == "INTERVIEW_SCHEDULED":
        console.print(f"  Interview scheduled for {interview_at.isoformat()}")


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address"),
    port: Optional[int] = typer.Option(None, "--port", help="Port"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
):
    """Run the HTTP API."""
    from jobboard.main import main

    raise typer.Exit(main(host=host, port=port, reload=reload))


if __name__ == "__main__":
    app()
