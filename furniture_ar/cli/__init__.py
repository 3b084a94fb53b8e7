"""
Command Line Interface for the Furniture AR catalog.
"""

from typing import Optional

import typer
import uvicorn
from rich import print as rprint
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..config import get_settings
from ..db.base import get_session_local
from ..db.catalog_store import SqlCatalogStore
from ..log import configure_logging
from ..seo.backfill import backfill_slugs
from ..seo.resolver import NotResolved, UrlResolver
from ..seo.slugs import generate_model_slug, normalize_slug

app = typer.Typer(help="Furniture AR catalog - models, variants and share links")
console = Console()


@app.command()
def serve(
    port: Optional[int] = typer.Option(None, help="Port to run the API server on"),
    host: Optional[str] = typer.Option(None, help="Host to bind the server to"),
    dev: bool = typer.Option(False, help="Run in development mode with auto-reload"),
):
    """Start the API server."""
    settings = get_settings()
    rprint(Panel.fit("🛋️ Starting Furniture AR catalog", style="bold blue"))
    uvicorn.run(
        "furniture_ar.api:app",
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=dev,
        workers=1 if dev else settings.api_workers,
    )


@app.command(name="backfill-slugs")
def backfill(
    show_errors: bool = typer.Option(True, help="List rows that failed"),
):
    """Populate missing url/customer/category/color slugs."""
    configure_logging(get_settings())
    session = get_session_local()()
    try:
        report = backfill_slugs(SqlCatalogStore(session))
    finally:
        session.close()

    console.print(f"✅ Updated {report.updated} row(s)")
    if report.errors:
        console.print(f"⚠️ {len(report.errors)} row(s) failed and will keep using id-based links")
        if show_errors:
            table = Table(title="Backfill failures", show_header=True, header_style="bold red")
            table.add_column("Kind", style="cyan")
            table.add_column("ID", style="yellow")
            table.add_column("Error")
            for error in report.errors:
                table.add_row(error.kind, error.id, error.message)
            console.print(table)
        raise typer.Exit(code=1)


@app.command()
def resolve(
    customer: str = typer.Argument(..., help="Customer segment of the share link"),
    product: str = typer.Argument(..., help="Product segment ({slug}-{id})"),
    variant: Optional[str] = typer.Argument(None, help="Optional variant segment"),
):
    """Resolve a share link the way /f/... does and print the result."""
    session = get_session_local()()
    try:
        resolution = UrlResolver(SqlCatalogStore(session)).resolve(customer, product, variant)
    finally:
        session.close()

    if isinstance(resolution, NotResolved):
        console.print(f"❌ {resolution.reason.value}")
        if resolution.model is not None:
            console.print(f"Base model: {resolution.model.id} ({resolution.model.title})")
        raise typer.Exit(code=1)

    table = Table(title="Resolved share link", show_header=True, header_style="bold magenta")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Model", resolution.model.id)
    table.add_row("Title", resolution.model.title)
    table.add_row("Customer", resolution.model.customer_id)
    table.add_row("URL slug", resolution.model.url_slug or "-")
    if resolution.variant is not None:
        table.add_row("Variant", resolution.variant.id)
        table.add_row("Color slug", resolution.variant.color_slug or "-")
    console.print(table)


@app.command()
def slugify(
    text: str = typer.Argument(..., help="Display text to turn into a slug"),
    model_id: Optional[str] = typer.Option(None, help="Append a model id as url_slug does"),
):
    """Show the slug generated for a piece of text."""
    if model_id:
        console.print(generate_model_slug(text, model_id))
    else:
        console.print(normalize_slug(text))


@app.command()
def version():
    """Show version information."""
    from .. import __version__

    rprint(Panel.fit(f"Furniture AR catalog v{__version__}", style="bold green"))


def main():
    """Main CLI entry point."""
    app()


if __name__ == "__main__":
    main()
