"""CLI entrypoints for wpfront."""

import logging
from pathlib import Path
from typing import Annotated, NoReturn

import requests
import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from .config import Config, ConfigError, load_config
from .drafts import Draft, FrontMatterError, load_draft, load_launch_post
from .feeds import generate_feed
from .pages import SiteBuildResult, build_site
from .wordpress import ContentClient, PostStatus, PublishClient, WordPressAPIError

console = Console()
app = typer.Typer(help="Static front end and publishing tools for a headless WordPress blog.")

DEFAULT_CATEGORY = "Vibe Coding"

ConfigPathOption = Annotated[
    str,
    typer.Option("--config", "-c", help="Path to configuration file or project directory."),
]
OutputOption = Annotated[
    Path | None,
    typer.Option("--output", "-o", help="Override the output directory from the configuration."),
]

REMOTE_ERRORS = (ConfigError, WordPressAPIError, requests.RequestException)


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging."),
    ] = False,
) -> None:
    """Configure logging and read a local .env file before any command runs."""
    load_dotenv()
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@app.command()
def build(
    config_path: ConfigPathOption = ".",
    output: OutputOption = None,
) -> None:
    """Fetch content and render the full static site."""
    config = _load(config_path, output)
    try:
        client = ContentClient(config.wordpress)
        result = build_site(config, client)
    except REMOTE_ERRORS as exc:
        _fail("Build failed", exc)

    _print_build_summary(config, result)


@app.command()
def feed(
    config_path: ConfigPathOption = ".",
    output: OutputOption = None,
) -> None:
    """Write only the RSS feed."""
    config = _load(config_path, output)
    try:
        path = generate_feed(config, ContentClient(config.wordpress))
    except REMOTE_ERRORS as exc:
        _fail("Feed generation failed", exc)

    if path is None:
        console.print("[bold yellow]Feeds disabled[/]: nothing written.")
        return
    console.print(f"[bold green]Feed written[/]: {path}")


@app.command()
def slugs(config_path: ConfigPathOption = ".") -> None:
    """List the post slugs used for static path generation."""
    config = _load(config_path)
    try:
        client = ContentClient(config.wordpress)
    except ConfigError as exc:
        _fail("Cannot list slugs", exc)

    found = client.get_all_post_slugs()
    if not found:
        console.print("[bold yellow]No posts found[/].")
        return
    for slug in found:
        console.print(slug)


@app.command("test-connection")
def test_connection(config_path: ConfigPathOption = ".") -> None:
    """Check authenticated access by listing categories."""
    config = _load(config_path)
    console.print("Testing WordPress API connection...")
    try:
        categories = PublishClient(config.wordpress).get_categories()
    except REMOTE_ERRORS as exc:
        _fail("Connection failed", exc)

    console.print("[bold green]Connection successful![/]")
    console.print(f"Categories: {escape(', '.join(category.name for category in categories))}")


@app.command()
def publish(
    config_path: ConfigPathOption = ".",
    file: Annotated[
        Path | None,
        typer.Option(
            "--file",
            "-f",
            exists=True,
            dir_okay=False,
            help="Markdown or HTML draft with YAML front matter. Defaults to the bundled launch post.",
        ),
    ] = None,
    category: Annotated[
        str,
        typer.Option("--category", help="Category name; created when missing."),
    ] = DEFAULT_CATEGORY,
    status: Annotated[
        PostStatus | None,
        typer.Option("--status", help="Override the status from the draft's front matter."),
    ] = None,
) -> None:
    """Create a post on WordPress and print where it landed."""
    config = _load(config_path)
    try:
        draft: Draft = load_draft(file) if file is not None else load_launch_post()
    except FrontMatterError as exc:
        _fail("Cannot read draft", exc)

    try:
        client = PublishClient(config.wordpress)
        category_id = client.get_or_create_category(category)
        post = client.create_post(
            title=draft.title,
            content=draft.content,
            excerpt=draft.excerpt,
            status=status or draft.status,
            categories=[category_id],
            tags=draft.tags,
        )
    except REMOTE_ERRORS as exc:
        _fail("Publish failed", exc)

    console.print("[bold green]Post published![/]")
    console.print(f"ID: {post.id}")
    console.print(f"URL: {post.link}")
    console.print(f"Slug: {post.slug}")


def _print_build_summary(config: Config, result: SiteBuildResult) -> None:
    console.print(
        f"[bold green]Build complete[/]: {len(result.pages)} page(s), "
        f"{result.post_count} post(s) in {config.output_dir}"
    )
    if result.feed is not None:
        console.print(f"[bold blue]Feed[/]: {result.feed}")
    if result.skipped_slugs:
        console.print(f"[bold yellow]Skipped[/]: {', '.join(result.skipped_slugs)}")
    if result.post_count == 0:
        console.print("[bold yellow]Warning[/]: no post pages were generated.")


def _load(path: str, output: Path | None = None) -> Config:
    candidate = Path(path)
    try:
        config = load_config(candidate)
    except FileNotFoundError as exc:
        raise typer.BadParameter(f"Config file not found: {path}") from exc
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    if output is not None:
        config.output_dir = output.resolve()
    return config


def _fail(summary: str, exc: Exception) -> NoReturn:
    console.print(f"[bold red]{summary}[/]: {escape(str(exc))}")
    raise typer.Exit(code=1) from exc


if __name__ == "__main__":
    app()
