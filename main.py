# main.py
import json
import logging

import click

import crawler
import fetcher
import pdf_text
import settings
from context import answer_request, assemble_context, parse_request
from errors import PipelineError, ValidationError
from llm_interface import LlamaAnswerer


def _load_request(fh):
    try:
        payload = json.load(fh)
    except json.JSONDecodeError as exc:
        raise ValidationError(f"request is not valid JSON: {exc}") from exc
    return parse_request(payload)


def _fail(exc: PipelineError) -> click.ClickException:
    return click.ClickException(f"{exc.kind} error: {exc.message}")


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Debug logging.")
def cli(verbose: bool) -> None:
    """Assemble bounded context from text, PDFs and web pages, then ask."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.argument("request", type=click.File("r"), default="-")
@click.option("--model", "model_path", default=settings.LLM_MODEL_PATH,
              show_default=True, help="GGUF model used to answer.")
def ask(request, model_path: str) -> None:
    """Answer a {question, documents} JSON request; prints {"answer": …}."""
    try:
        req = _load_request(request)
        resp = answer_request(req, LlamaAnswerer(model_path=model_path))
    except PipelineError as exc:
        raise _fail(exc) from exc
    click.echo(json.dumps(resp.to_dict(), ensure_ascii=False))


@cli.command()
@click.argument("request", type=click.File("r"), default="-")
def context(request) -> None:
    """Print the context a request would send to the model."""
    try:
        req = _load_request(request)
    except PipelineError as exc:
        raise _fail(exc) from exc
    click.echo(assemble_context(req.documents))


@cli.command()
@click.argument("site")
@click.option("--pages", default=settings.CRAWL_MAX_PAGES, show_default=True,
              help="Max pages to crawl")
@click.option("--page-chars", default=settings.CRAWL_PAGE_CHARS, show_default=True)
@click.option("--total-chars", default=settings.CRAWL_TOTAL_CHARS, show_default=True)
def crawl(site: str, pages: int, page_chars: int, total_chars: int) -> None:
    """Crawl one site (same host, breadth-first) and print its text."""
    try:
        state = crawler.crawl_site(site, max_pages=pages,
                                   page_chars=page_chars, total_chars=total_chars)
    except PipelineError as exc:
        raise _fail(exc) from exc
    click.echo(state.text())
    click.echo(click.style(
        f"✓ {len(state.pages)} page(s) kept, {len(state.visited)} visited, "
        f"{len(state.errors)} failed.", fg="green"), err=True)


@cli.command()
@click.argument("url")
def pdf(url: str) -> None:
    """Download a PDF and print its text layer."""
    res = fetcher.fetch(url, timeout=settings.PDF_TIMEOUT)
    if isinstance(res, fetcher.FetchErr):
        raise _fail(res.to_error())
    click.echo(pdf_text.extract_pdf(res.content))


@cli.command()
def health() -> None:
    """Liveness probe."""
    click.echo("OK")


if __name__ == "__main__":
    cli()
