"""Command-line interface for the paper search aggregator."""

import asyncio
import json
from typing import Annotated

import typer

from .config import create_search_provider, list_profiles, load_config
from .errors import DataSourceError
from .paper_sources.models import PaperRecord, SearchRequest

app = typer.Typer(
    name="paper-vault",
    help="Search arXiv and OpenAlex as one deduplicated, citation-ranked list.",
    add_completion=False,
)


def _papers_json(papers: list[PaperRecord]) -> str:
    """Serialize as the {"papers": [...]} payload with camelCase keys."""
    payload = {"papers": [p.model_dump(mode="json", by_alias=True) for p in papers]}
    return json.dumps(payload, indent=2)


def _echo_papers(papers: list[PaperRecord], start: int = 0) -> None:
    if not papers:
        typer.echo("No papers found.")
        return

    typer.echo(f"Found {len(papers)} papers:\n")
    for i, p in enumerate(papers, start + 1):
        source_tag = "[arXiv]" if p.is_arxiv else "[OpenAlex]"
        citations = "N/A" if p.citation_count is None else p.citation_count
        typer.echo(f"{i}. {source_tag} {p.title}")
        typer.echo(f"   Published: {p.published_date or 'N/A'} | Citations: {citations}")
        if p.authors_display:
            typer.echo(f"   Authors: {p.authors_display}")
        typer.echo(f"   ID: {p.id}")
        typer.echo(f"   URL: {p.landing_url}")
        typer.echo()


def _fail(error: Exception) -> None:
    typer.echo(f"Error: {error}", err=True)
    raise typer.Exit(1)


@app.command()
def search(
    query: Annotated[str, typer.Argument(help="Search query for papers")],
    field: Annotated[
        str,
        typer.Option(
            "--field",
            help="Where to match: smart, title, author, abstract or all",
        ),
    ] = "smart",
    sort: Annotated[
        str,
        typer.Option(
            "--sort",
            help="relevance, submittedDate, lastUpdatedDate or citations",
        ),
    ] = "relevance",
    order: Annotated[
        str,
        typer.Option("--order", help="ascending or descending"),
    ] = "descending",
    limit: Annotated[
        int,
        typer.Option("--limit", "-n", help="Maximum number of results", min=1, max=300),
    ] = 10,
    start: Annotated[
        int,
        typer.Option("--start", help="Offset into the merged ranking", min=0),
    ] = 0,
    output_format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: text or json"),
    ] = "text",
    profile: Annotated[
        str,
        typer.Option("--profile", "-p", help="Configuration profile"),
    ] = None,
):
    """
    Search for academic papers.

    Examples:

        # Title or abstract match, best first
        paper-vault search "diffusion models"

        # Most cited papers with a phrase in the title
        paper-vault search "graph neural networks" --field title --sort citations

        # Second page of an author's newest papers
        paper-vault search "Yann LeCun" --field author --sort submittedDate --start 10

        # Output as JSON
        paper-vault search "contrastive learning" --format json
    """
    if output_format not in ("text", "json"):
        typer.echo("Error: Format must be one of: text, json", err=True)
        raise typer.Exit(1)

    request = SearchRequest(
        query=query,
        max_results=limit,
        start=start,
        field=field,
        sort=sort,
        order=order,
    )

    try:
        papers = asyncio.run(_search_async(request, profile))
    except (DataSourceError, KeyError) as e:
        _fail(e)

    if output_format == "json":
        typer.echo(_papers_json(papers))
    else:
        _echo_papers(papers, start=request.start)


async def _search_async(request: SearchRequest, profile: str | None) -> list[PaperRecord]:
    """Async implementation of search."""
    if not request.query.strip():
        return []

    provider = create_search_provider(load_config(profile))
    async with provider:
        return await provider.search_papers(request)


@app.command()
def lookup(
    paper_ids: Annotated[
        list[str],
        typer.Argument(help="arXiv IDs to fetch (e.g., 2301.00001 or 2301.00001v2)"),
    ],
    output_format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: text or json"),
    ] = "text",
    profile: Annotated[
        str,
        typer.Option("--profile", "-p", help="Configuration profile"),
    ] = None,
):
    """
    Fetch canonical arXiv records by id.

    Examples:

        paper-vault lookup 2301.00001

        paper-vault lookup 2301.00001 hep-th/9901001 --format json
    """
    try:
        papers = asyncio.run(_lookup_async(paper_ids, profile))
    except (DataSourceError, KeyError) as e:
        _fail(e)

    if output_format == "json":
        typer.echo(_papers_json(papers))
    else:
        _echo_papers(papers)


async def _lookup_async(paper_ids: list[str], profile: str | None) -> list[PaperRecord]:
    """Async implementation of lookup."""
    provider = create_search_provider(load_config(profile))
    async with provider:
        return await provider.fetch_papers(paper_ids)


@app.command()
def profiles():
    """List available configuration profiles."""
    typer.echo("Available profiles:\n")
    for name, profile in list_profiles().items():
        sources = ["arxiv"]
        if profile.openalex.enabled:
            sources.append("openalex")
        citations = "semantic_scholar" if profile.semantic_scholar.enabled else "off"

        typer.echo(f"  {name}")
        typer.echo(f"    Sources: {', '.join(sources)}")
        typer.echo(f"    Citations: {citations}")
        typer.echo()


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
