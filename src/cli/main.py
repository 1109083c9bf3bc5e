"""CLI interface for the intake portal."""
import json
import logging
from typing import Optional

import httpx
import typer

from ..config.settings import load_settings
from ..intake.reminders import request_reminder_scan
from ..intake.steps import STEPS

app = typer.Typer(help="Client intake portal - run the API and trigger reminder scans")

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", help="Bind address"),
    port: int = typer.Option(8000, help="Port"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
):
    """Run the API with uvicorn."""
    import uvicorn

    settings = load_settings()
    _configure_logging(settings.log_level)
    uvicorn.run(
        "services.api.app.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


@app.command()
def steps(as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table")):
    """List the wizard steps."""
    if as_json:
        print(json.dumps([s.as_dict() for s in STEPS], ensure_ascii=False, indent=2))
        return
    for s in STEPS:
        flag = " (optional)" if s.skippable else ""
        print(f"{s.number}. {s.title}{flag}  [{s.folder}]")


@app.command()
def remind(
    base_url: Optional[str] = typer.Option(None, help="Portal URL (default: PORTAL_BASE_URL)"),
    secret: Optional[str] = typer.Option(None, help="Bearer secret (default: CRON_SECRET)"),
    stale_days: Optional[int] = typer.Option(None, help="Override the idle threshold in days"),
    timeout: float = typer.Option(30.0, help="HTTP timeout in seconds"),
):
    """Trigger the stale-project reminder scan on a running portal."""
    settings = load_settings()
    _configure_logging(settings.log_level)
    url = base_url or settings.base_url
    token = secret or settings.cron_secret
    if not token:
        typer.echo("No secret given and CRON_SECRET is not set", err=True)
        raise typer.Exit(code=2)

    try:
        result = request_reminder_scan(url, token, timeout=timeout, stale_days=stale_days)
    except httpx.HTTPStatusError as e:
        typer.echo(f"Portal answered {e.response.status_code}: {e.response.text}", err=True)
        raise typer.Exit(code=1)
    except httpx.HTTPError as e:
        typer.echo(f"Could not reach {url}: {e}", err=True)
        raise typer.Exit(code=1)

    print(f"Candidates: {result.get('candidates', 0)}")
    print(f"Sent:       {result.get('sent', 0)}")
    print(f"Failed:     {result.get('failed', 0)}")
    for outcome in result.get("results", []):
        if outcome.get("status") == "failed":
            print(f"  ! {outcome.get('company_name')} ({outcome.get('project_id')}): {outcome.get('error')}")


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
