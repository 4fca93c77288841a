"""Main CLI entry point."""

import asyncio
import logging
import sys
from pathlib import Path

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler

from labreport.config import Config, Provider
from labreport.download import REPORT_FILENAME, write_report
from labreport.files import FileSource
from labreport.report import build_provider
from labreport.web import create_app
from labreport.wizard import WizardSession

console = Console(stderr=True)
load_dotenv()

PROVIDER_CHOICE = click.Choice([p.value for p in Provider], case_sensitive=False)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_config(provider, model, api_key, temperature) -> Config:
    try:
        return Config.from_env(
            provider=Provider(provider),
            model_override=model,
            api_key_override=api_key,
            temperature=temperature,
        )
    except RuntimeError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)


def provider_options(f):
    """Options shared by every command that talks to the model."""
    f = click.option(
        "--temperature", "-t",
        type=click.FloatRange(0.0, 2.0),
        default=None,
        help="Sampling temperature (defaults to 0.2).",
    )(f)
    f = click.option(
        "--api-key",
        default=None,
        help="API key (overrides environment variable).",
    )(f)
    f = click.option(
        "--model", "-m",
        default=None,
        help="Model name override (defaults to the provider's multimodal model).",
    )(f)
    f = click.option(
        "--provider", "-p",
        type=PROVIDER_CHOICE,
        default=Provider.GEMINI.value,
        show_default=True,
        help="LLM provider used to write the report.",
    )(f)
    return f


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log progress details.")
@click.version_option(package_name="labreport")
def main(verbose):
    """Turn a LaTeX template, a lab guide and photos of handwritten data into a report."""
    _setup_logging(verbose)


@main.command()
@click.argument("template", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("guide", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("images", nargs=-1, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@provider_options
@click.option(
    "--output", "-o",
    type=click.Path(path_type=Path),
    default=Path(REPORT_FILENAME),
    show_default=True,
    help="Where to write the report. A directory receives report.tex.",
)
@click.option(
    "--preprocess/--no-preprocess",
    default=False,
    show_default=True,
    help="Apply auto-contrast and unsharp masking to the data photos.",
)
def generate(template, guide, images, provider, model, api_key, temperature, output, preprocess):
    """Write a report from TEMPLATE, GUIDE and zero or more data IMAGES.

    GUIDE may be a PDF or a text file.  IMAGES are sent in the order given;
    tables that continue across photos are merged by the model.
    """
    config = _load_config(provider, model, api_key, temperature)
    session = WizardSession()

    error = asyncio.run(_load_inputs(session, template, guide, images, preprocess))
    if error:
        console.print(f"[red]Error:[/red] {error}")
        sys.exit(1)

    review = session.review()
    pages = f", {review.guide_pages} page(s)" if review.guide_pages else ""
    console.print(
        f"[dim]{review.template_name} · {review.guide_name}{pages} · "
        f"{review.image_count} image(s)[/dim]"
    )

    provider_obj = build_provider(config)
    with console.status(f"[cyan]Writing report via {config.provider.value} ({config.model})..."):
        result = asyncio.run(session.generate(provider_obj, temperature=config.temperature))

    if not result.ok:
        console.print(f"[red]Error:[/red] {result.error}")
        sys.exit(1)

    path = write_report(result.latex, output)
    console.print(f"[green]Written to {path}[/green]")


async def _load_inputs(session: WizardSession, template, guide, images, preprocess):
    """Walk the wizard up to the Generate step. Returns an error message on failure."""
    if not await session.load_template(FileSource.from_path(template)):
        return session.error
    session.advance()

    if not await session.load_guide(FileSource.from_path(guide)):
        return session.error
    session.advance()

    added = await session.add_images([FileSource.from_path(p) for p in images], preprocess=preprocess)
    if added < len(images):
        console.print(f"[yellow]Skipped {len(images) - added} unreadable image(s)[/yellow]")
    session.advance()
    return None


@main.command()
@provider_options
@click.option("--host", default="127.0.0.1", show_default=True, help="Interface to bind.")
@click.option("--port", default=5000, show_default=True, help="Port to listen on.")
@click.option("--debug", is_flag=True, help="Run Flask in debug mode.")
def serve(provider, model, api_key, temperature, host, port, debug):
    """Run the step-by-step wizard in the browser."""
    config = _load_config(provider, model, api_key, temperature)
    app = create_app(config)
    console.print(f"[green]Wizard running on http://{host}:{port}[/green]")
    app.run(host=host, port=port, debug=debug)
