"""CLI Tests"""

import json

import pytest
from typer.testing import CliRunner

from paper_vault import cli
from paper_vault.errors import SourceUnavailableError
from paper_vault.paper_sources import CompositeSearchProvider, PaperRecord, SourceTag

runner = CliRunner()


def arxiv_record(n: int) -> PaperRecord:
    return PaperRecord(
        id=f"2301.0000{n}v1",
        title=f"Preprint {n}",
        authors_display="J. Smith",
        published_date="2023-01-02T00:00:00Z",
        landing_url=f"http://arxiv.org/abs/2301.0000{n}v1",
        pdf_url=f"http://arxiv.org/pdf/2301.0000{n}v1",
        source_tag=SourceTag.ARXIV,
    )


class FakeArXiv:
    def __init__(self, records=None, error=None):
        self.records = records or []
        self.error = error
        self.calls = 0

    async def search_papers(self, request):
        self.calls += 1
        if self.error:
            raise self.error
        return self.records[request.start : request.start + request.max_results]

    async def fetch_papers(self, paper_ids):
        return [r for r in self.records if r.id.startswith(tuple(paper_ids))]


@pytest.fixture
def fake_arxiv(monkeypatch):
    """Route the CLI through a composite provider backed by a fake arXiv."""
    arxiv = FakeArXiv(records=[arxiv_record(1), arxiv_record(2)])
    monkeypatch.setattr(
        cli, "create_search_provider", lambda profile: CompositeSearchProvider(arxiv)
    )
    return arxiv


def test_search_json(fake_arxiv):
    result = runner.invoke(cli.app, ["search", "graphs", "--format", "json", "-n", "1"])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert list(payload) == ["papers"]
    assert len(payload["papers"]) == 1
    paper = payload["papers"][0]
    assert paper["id"] == "2301.00001v1"
    assert paper["authorsDisplay"] == "J. Smith"
    assert paper["sourceTag"] == "arxiv"
    assert paper["citationCount"] is None
    assert "landingUrl" in paper and "pdfUrl" in paper


def test_search_text(fake_arxiv):
    result = runner.invoke(cli.app, ["search", "graphs", "--sort", "nonsense"])

    assert result.exit_code == 0, result.output
    assert "Found 2 papers" in result.output
    assert "1. [arXiv] Preprint 1" in result.output
    assert "Citations: N/A" in result.output


def test_blank_query(fake_arxiv):
    result = runner.invoke(cli.app, ["search", "   "])

    assert result.exit_code == 0
    assert "No papers found." in result.output
    assert fake_arxiv.calls == 0


def test_source_failure_exits_nonzero(monkeypatch):
    arxiv = FakeArXiv(error=SourceUnavailableError("arxiv", "HTTP 503", status_code=503))
    monkeypatch.setattr(
        cli, "create_search_provider", lambda profile: CompositeSearchProvider(arxiv)
    )

    result = runner.invoke(cli.app, ["search", "graphs"])

    assert result.exit_code == 1
    assert "[arxiv] HTTP 503" in result.output


def test_invalid_format(fake_arxiv):
    result = runner.invoke(cli.app, ["search", "graphs", "--format", "xml"])
    assert result.exit_code == 1


def test_lookup(fake_arxiv):
    result = runner.invoke(cli.app, ["lookup", "2301.00002", "--format", "json"])

    assert result.exit_code == 0, result.output
    assert [p["id"] for p in json.loads(result.output)["papers"]] == ["2301.00002v1"]


def test_profiles():
    result = runner.invoke(cli.app, ["profiles"])

    assert result.exit_code == 0
    assert "default" in result.output
    assert "arxiv-only" in result.output
    assert "Citations: off" in result.output
