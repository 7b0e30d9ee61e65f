import click
import json
import logging
import sqlalchemy.exc
from catalog.crawl.orchestrator import Orchestrator
from catalog.database.operations import (
    create_db_engine,
    get_db,
    get_recent_statistics,
    get_session_factory,
    init_db,
)
from catalog.models import RunStatistics
from config.settings import Settings
from tabulate import tabulate
import traceback

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("catalog-cli")

SUMMARY_LABELS = [
    ("categoryUrl", "Category URL"),
    ("totalDetected", "Detected"),
    ("totalSaved", "Saved"),
    ("totalSkipped", "Skipped"),
    ("missingPrice", "Missing price"),
    ("startedAt", "Started"),
    ("finishedAt", "Finished"),
    ("durationSeconds", "Duration (s)"),
]


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.pass_context
def cli(ctx, verbose):
    """Benco category scraper."""
    ctx.ensure_object(dict)
    ctx.obj["VERBOSE"] = verbose

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.debug("Debug logging enabled")


@cli.command()
@click.option("--category", "-c", default=None, help="Category name (default: CATEGORY_NAME)")
@click.option(
    "--max-pages",
    "-m",
    type=int,
    default=None,
    help="Pages to scrape, 0 = all pages reported by the site (default: MAX_PAGES)",
)
@click.option("--scraper", default=None, help="Page fetcher: http or browser (default: SCRAPER_TYPE)")
@click.option("--storage", default=None, help="Storage backend: json or sqlite (default: STORAGE_TYPE)")
@click.option("--output", "-o", type=click.Path(), default=None, help="JSON output file (default: OUTPUT_FILE)")
@click.option("--db-path", type=click.Path(), default=None, help="SQLite database file (default: DB_PATH)")
@click.option(
    "--format-type",
    "-f",
    type=click.Choice(["table", "text", "json"]),
    default="table",
    help="Summary output format",
)
@click.pass_context
def run(ctx, category, max_pages, scraper, storage, output, db_path, format_type):
    """Scrape the configured category and save products and statistics."""
    try:
        settings = Settings(
            category_name=category,
            max_pages=max_pages,
            scraper_type=scraper,
            storage_type=storage,
            output_file=output,
            db_path=db_path,
        )
        orchestrator = Orchestrator(settings)
    except ValueError as e:
        # Configuration errors abort before any network activity
        raise click.ClickException(str(e))

    click.echo("=" * 50)
    click.echo(f"{settings.PROJECT_NAME.upper()}")
    click.echo("=" * 50)

    try:
        bundle = orchestrator.run()
    except Exception as e:  # pylint: disable=broad-exception-caught
        if ctx.obj["VERBOSE"]:
            click.echo(traceback.format_exc())
        raise click.ClickException(f"Run aborted: {str(e)}")

    if orchestrator.saved:
        click.echo(f"\nSaved to: {orchestrator.storage.location}")
    else:
        click.echo("\nResults were not saved (see log for details).")

    click.echo("\n" + "=" * 50)
    click.echo("RUN STATISTICS")
    click.echo("=" * 50)
    click.echo(format_statistics(bundle.statistics, format_type))
    click.echo("=" * 50)


@cli.command()
@click.option("--db-path", type=click.Path(), default=None, help="SQLite database file (default: DB_PATH)")
@click.option("--limit", "-l", default=10, help="Number of runs to show (default: 10)")
@click.pass_context
def history(ctx, db_path, limit):
    """Show statistics of previous runs stored in the SQLite database."""
    try:
        settings = Settings(db_path=db_path)
    except ValueError as e:
        raise click.ClickException(str(e))
    engine = create_db_engine(settings.DB_PATH)

    try:
        init_db(engine)
        for db in get_db(get_session_factory(engine)):
            rows = get_recent_statistics(db, limit=limit)
            table_data = [
                [
                    row.id,
                    row.started_at,
                    row.total_detected,
                    row.total_saved,
                    row.total_skipped,
                    row.missing_price,
                    f"{row.duration_seconds:.2f}",
                ]
                for row in rows
            ]
    except sqlalchemy.exc.SQLAlchemyError as e:
        if ctx.obj["VERBOSE"]:
            click.echo(traceback.format_exc())
        raise click.ClickException(f"Database error: {str(e)}")

    if not table_data:
        click.echo("No runs recorded yet.")
        return

    headers = ["Run", "Started", "Detected", "Saved", "Skipped", "Missing price", "Duration (s)"]
    click.echo(tabulate(table_data, headers=headers, tablefmt="grid"))


def format_statistics(stats: RunStatistics, format_type: str = "table") -> str:
    """Format run statistics for console output.

    Args:
        stats: Statistics of a finished run
        format_type: Output format ("table", "text", or "json")

    Returns:
        Formatted string
    """
    data = stats.to_dict()

    if format_type == "json":
        return json.dumps(data, indent=2)

    elif format_type == "text":
        return "\n".join(f"{label}: {data[key]}" for key, label in SUMMARY_LABELS)

    else:  # table format
        table_data = [[label, data[key]] for key, label in SUMMARY_LABELS]
        return tabulate(table_data, headers=["Metric", "Value"], tablefmt="grid")


if __name__ == "__main__":
    # This runs the Click application
    cli.main(obj={})
