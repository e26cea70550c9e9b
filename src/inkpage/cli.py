"""CLI commands for inkpage using Typer."""

import asyncio
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from inkpage.config import Settings, load_settings
from inkpage.core.content_store import create_content_store
from inkpage.core.paginator import Paginator
from inkpage.core.site_builder import create_site_builder
from inkpage.errors import InkpageError
from inkpage.output.post_writer import PostWriter
from inkpage.utils.logging import setup_logging
from inkpage.utils.text_utils import truncate_text


app = typer.Typer(
    name="inkpage",
    help="Static blog generator: Markdown posts in, paginated HTML out",
    no_args_is_help=True,
)

console = Console()

SourceOption = typer.Option(None, "--source", "-s", help="Site source directory")
ConfigOption = typer.Option(None, "--config", "-c", help="YAML site config file")


def _load(source: Optional[Path], config: Optional[Path], **overrides) -> Settings:
    try:
        return load_settings(config, source_dir=source, **overrides)
    except InkpageError as exc:
        _fail(exc)


def _fail(exc: Exception) -> None:
    console.print(f"[red]{escape(str(exc))}[/red]")
    raise typer.Exit(1)


# --- Logging ---


@app.callback()
def configure(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    # Runs before every command
    ctx.obj = {"verbose": verbose}
    setup_logging(logging.DEBUG if verbose else logging.INFO)


# --- Build Command ---


@app.command()
def build(
    ctx: typer.Context,
    source: Optional[Path] = SourceOption,
    destination: Optional[Path] = typer.Option(
        None, "--destination", "-d", help="Output directory"
    ),
    config: Optional[Path] = ConfigOption,
    per_page: Optional[int] = typer.Option(None, "--per-page", "-n", help="Posts per index page"),
    drafts: bool = typer.Option(False, "--drafts", help="Include unpublished posts"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """Build the site."""
    settings = _load(
        source,
        config,
        destination_dir=destination,
        paginate=per_page,
        show_drafts=drafts or None,
    )
    verbose = verbose or (ctx.obj or {}).get("verbose", False)
    setup_logging(logging.DEBUG if verbose else logging.INFO, settings.log_file)
    builder = create_site_builder(settings)

    try:
        result = asyncio.run(builder.build())
    except InkpageError as exc:
        _fail(exc)

    table = Table(title="Build summary", show_header=False)
    table.add_column("Item", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Posts", str(result.posts))
    table.add_row("Index pages", str(result.index_pages))
    table.add_row("Categories", str(result.categories))
    table.add_row("Category pages", str(result.category_pages))
    table.add_row("Files written", str(result.files_written))
    table.add_row("Time", f"{result.elapsed_seconds:.2f}s")
    console.print(table)
    console.print(f"[green]Site written to {result.destination}[/green]")


# --- Listing Commands ---


@app.command()
def posts(
    source: Optional[Path] = SourceOption,
    config: Optional[Path] = ConfigOption,
    drafts: bool = typer.Option(False, "--drafts", help="Include unpublished posts"),
):
    """List published posts in listing order."""
    settings = _load(source, config, show_drafts=drafts or None)
    store = create_content_store(settings)

    try:
        published = store.published_posts()
    except InkpageError as exc:
        _fail(exc)

    if not published:
        console.print("[yellow]No published posts found[/yellow]")
        return

    table = Table(title=f"Posts ({len(published)})")
    table.add_column("Date", style="dim")
    table.add_column("Title", style="green")
    table.add_column("Categories")
    table.add_column("URL", style="cyan")

    for post in published:
        title = escape(truncate_text(post.title, 60))
        if not post.published:
            title += " [yellow](draft)[/yellow]"
        table.add_row(
            post.date.strftime(settings.date_format),
            title,
            ", ".join(post.categories),
            post.url,
        )
    console.print(table)


@app.command()
def pages(
    source: Optional[Path] = SourceOption,
    config: Optional[Path] = ConfigOption,
    per_page: Optional[int] = typer.Option(None, "--per-page", "-n", help="Posts per index page"),
):
    """Show how the post index is split into pages."""
    settings = _load(source, config, paginate=per_page)
    store = create_content_store(settings)
    paginator = Paginator(settings.paginate, settings.paginate_path)

    try:
        listing = paginator.paginate(store.published_posts())
    except InkpageError as exc:
        _fail(exc)

    if not listing:
        console.print("[yellow]No published posts: the index has no pages[/yellow]")
        return

    table = Table(title=f"Index pages ({settings.paginate} posts per page)")
    table.add_column("#", justify="right")
    table.add_column("Path", style="cyan")
    table.add_column("Posts", justify="right")
    table.add_column("Prev")
    table.add_column("Next")
    table.add_column("First post", style="green")

    for page in listing:
        table.add_row(
            str(page.page_number),
            page.path,
            str(len(page.posts)),
            "yes" if page.has_previous else "-",
            "yes" if page.has_next else "-",
            escape(truncate_text(page.posts[0].title, 50)),
        )
    console.print(table)


@app.command()
def categories(
    source: Optional[Path] = SourceOption,
    config: Optional[Path] = ConfigOption,
):
    """List categories with their post counts."""
    settings = _load(source, config)
    store = create_content_store(settings)

    try:
        found = store.categories()
    except InkpageError as exc:
        _fail(exc)

    if not found:
        console.print("[yellow]No categories found[/yellow]")
        return

    table = Table(title="Categories")
    table.add_column("Name", style="cyan")
    table.add_column("Display Name")
    table.add_column("Posts", justify="right")
    table.add_column("URL")

    for cat in found:
        table.add_row(cat.name, cat.display_name or "", str(cat.post_count), cat.url)
    console.print(table)


# --- Authoring Commands ---


@app.command()
def new(
    title: str = typer.Argument(..., help="Post title"),
    category: list[str] = typer.Option([], "--category", help="Category (repeatable)"),
    tag: list[str] = typer.Option([], "--tag", "-t", help="Tag (repeatable)"),
    description: str = typer.Option("", "--description", help="Post summary"),
    draft: bool = typer.Option(False, "--draft", help="Create as unpublished"),
    source: Optional[Path] = SourceOption,
    config: Optional[Path] = ConfigOption,
):
    """Create a new post with front-matter."""
    settings = _load(source, config)
    writer = PostWriter(settings.posts_dir)

    try:
        path = asyncio.run(
            writer.write_post(
                title,
                categories=category,
                tags=tag,
                description=description,
                date=datetime.now().replace(microsecond=0),
                published=not draft,
            )
        )
    except FileExistsError as exc:
        _fail(exc)

    console.print(f"[green]Created {path}[/green]")


@app.command()
def clean(
    source: Optional[Path] = SourceOption,
    config: Optional[Path] = ConfigOption,
):
    """Remove the build output directory."""
    settings = _load(source, config)
    builder = create_site_builder(settings)

    try:
        removed = builder.clean()
    except InkpageError as exc:
        _fail(exc)

    if removed:
        console.print(f"[green]Removed {builder.destination}[/green]")
    else:
        console.print(f"[dim]Nothing to remove at {builder.destination}[/dim]")


# --- Entry Point ---


def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
