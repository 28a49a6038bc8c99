"""
OpenAlex Adapter Tests

Tests for work conversion, abstract reconstruction, filter construction and
paging against a mocked /works endpoint.
"""

import asyncio

import httpx
import pytest

from paper_vault.errors import DataSourceError, SourceUnavailableError
from paper_vault.openalex import OpenAlexAdapter, reconstruct_abstract, work_to_record
from paper_vault.openalex.models import Work
from paper_vault.paper_sources.models import SearchRequest, SourceTag


def make_work(n: int, **overrides) -> dict:
    work = {
        "id": f"https://openalex.org/W{n}",
        "doi": f"https://doi.org/10.1000/W{n}",
        "display_name": f"Work number {n}",
        "publication_date": "2021-05-01",
        "publication_year": 2021,
        "authorships": [
            {"author": {"id": "https://openalex.org/A1", "display_name": "Jane Smith"}},
            {"author": {"id": "https://openalex.org/A2", "display_name": "Ali Lee"}},
        ],
        "abstract_inverted_index": {"graphs": [0], "matter": [1]},
        "primary_location": {"landing_page_url": f"https://publisher.org/{n}", "pdf_url": None},
    }
    work.update(overrides)
    return work


def works_page(works: list[dict]) -> dict:
    return {"meta": {"count": len(works)}, "results": works}


def run_search(handler, request: SearchRequest, **adapter_kwargs):
    async def run():
        async with OpenAlexAdapter(
            mailto="me@example.org",
            transport=httpx.MockTransport(handler),
            **adapter_kwargs,
        ) as adapter:
            return await adapter.search_papers(request)

    return asyncio.run(run())


def test_reconstruct_abstract():
    """Words are placed back at every position they occupy."""
    print("=" * 60)
    print("TEST 1: reconstruct_abstract")
    print("=" * 60)

    assert reconstruct_abstract({"deep": [0, 3], "learning": [1]}) == "deep learning deep"
    assert reconstruct_abstract({}) == ""
    assert reconstruct_abstract(None) == ""
    print("[PASS] Abstract rebuilt from inverted index")


def test_work_to_record():
    print("\n" + "=" * 60)
    print("TEST 2: work_to_record")
    print("=" * 60)

    record = work_to_record(Work.model_validate(make_work(7)))

    assert record.id == "openalex:W7"
    assert record.title == "Work number 7"
    assert record.authors_display == "Jane Smith, Ali Lee"
    assert record.abstract_text == "graphs matter"
    assert record.published_date == "2021-05-01"
    assert record.landing_url == "https://publisher.org/7"
    assert record.pdf_url == ""
    assert record.doi == "10.1000/w7"
    assert record.source_tag is SourceTag.OPENALEX
    assert record.citation_count is None
    print("[PASS] Work converted")


def test_work_landing_url_fallbacks():
    best_oa = make_work(
        1,
        primary_location=None,
        best_oa_location={"landing_page_url": "https://repo.org/1", "pdf_url": "https://repo.org/1.pdf"},
    )
    record = work_to_record(Work.model_validate(best_oa))
    assert record.landing_url == "https://repo.org/1"
    assert record.pdf_url == "https://repo.org/1.pdf"

    doi_only = make_work(2, primary_location=None)
    assert work_to_record(Work.model_validate(doi_only)).landing_url == "https://doi.org/10.1000/w2"

    nothing = make_work(3, primary_location=None, doi=None)
    assert work_to_record(Work.model_validate(nothing)) is None


def test_work_year_only_date():
    work = make_work(4, publication_date=None, publication_year=2019, authorships=None)
    record = work_to_record(Work.model_validate(work))
    assert record.published_date == "2019"
    assert record.authors_display == ""


def test_search_pages_until_window_is_filled():
    print("\n" + "=" * 60)
    print("TEST 3: Paging through /works")
    print("=" * 60)

    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/works"
        params = request.url.params
        seen.append(dict(params))
        page = int(params["page"])
        return httpx.Response(200, json=works_page([make_work(page * 10 + i) for i in range(2)]))

    papers = run_search(
        handler,
        SearchRequest(query="graph neural", field="title", start=1, max_results=2),
        page_size=2,
    )

    assert [p.id for p in papers] == ["openalex:W11", "openalex:W20"]
    assert [s["page"] for s in seen] == ["1", "2"]
    assert seen[0]["filter"] == "title.search:graph neural"
    assert seen[0]["sort"] == "relevance_score:desc"
    assert seen[0]["per_page"] == "2"
    assert seen[0]["mailto"] == "me@example.org"
    print("[PASS] Stopped paging once start + max_results records were collected")


def test_search_stops_on_short_page_and_skips_unusable_works():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(
            200,
            json=works_page([make_work(1), make_work(2, primary_location=None, doi=None)]),
        )

    papers = run_search(handler, SearchRequest(query="x", max_results=10), page_size=5)

    assert [p.id for p in papers] == ["openalex:W1"]
    assert len(calls) == 1


def test_search_respects_page_cap():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json=works_page([make_work(len(calls))]))

    papers = run_search(handler, SearchRequest(query="x", max_results=50), page_size=1, max_pages=3)

    assert len(calls) == 3
    assert len(papers) == 3


def test_field_and_sort_params():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(dict(request.url.params))
        return httpx.Response(200, json=works_page([]))

    run_search(handler, SearchRequest(query="a, b | c", field="smart", sort="citations", order="ascending"))
    run_search(handler, SearchRequest(query="transformers", field="all", sort="submittedDate"))
    run_search(handler, SearchRequest(query="proteins", field="abstract"))

    assert seen[0]["filter"] == "title_and_abstract.search:a  b   c"
    assert seen[0]["sort"] == "cited_by_count:asc"
    assert seen[1]["search"] == "transformers"
    assert "filter" not in seen[1]
    assert seen[1]["sort"] == "publication_date:desc"
    assert seen[2]["filter"] == "abstract.search:proteins"


def test_author_field_resolves_author_ids():
    print("\n" + "=" * 60)
    print("TEST 4: Author field")
    print("=" * 60)

    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.url.path, dict(request.url.params)))
        if request.url.path == "/authors":
            return httpx.Response(
                200,
                json={"results": [
                    {"id": "https://openalex.org/A1", "display_name": "Jane Smith"},
                    {"id": "https://openalex.org/A9", "display_name": "J. Smith"},
                ]},
            )
        return httpx.Response(200, json=works_page([make_work(1)]))

    papers = run_search(handler, SearchRequest(query="Jane Smith", field="author"))

    assert [p.id for p in papers] == ["openalex:W1"]
    assert seen[0] == ("/authors", {"search": "Jane Smith", "per_page": "10", "mailto": "me@example.org"})
    assert seen[1][1]["filter"] == "authorships.author.id:A1|A9"
    assert seen[1][1]["sort"] == "cited_by_count:desc"
    print("[PASS] Author names resolved to OpenAlex author ids")


def test_author_field_without_matches_returns_nothing():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.path)
        if request.url.path == "/authors":
            return httpx.Response(500, text="boom")
        return httpx.Response(200, json=works_page([make_work(1)]))

    assert run_search(handler, SearchRequest(query="Nobody", field="author")) == []
    assert seen == ["/authors"]


def test_blank_query_makes_no_call():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    assert run_search(handler, SearchRequest(query="  ")) == []


def test_upstream_failure_raises_data_source_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="unavailable")

    with pytest.raises(SourceUnavailableError) as excinfo:
        run_search(handler, SearchRequest(query="x"))
    assert excinfo.value.status_code == 503
    assert excinfo.value.source == "openalex"


def test_malformed_payload_raises_data_source_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"results": "not a list"})

    with pytest.raises(DataSourceError):
        run_search(handler, SearchRequest(query="x"))


def main():
    """Run all tests."""
    test_reconstruct_abstract()
    test_work_to_record()
    test_work_landing_url_fallbacks()
    test_work_year_only_date()
    test_search_pages_until_window_is_filled()
    test_search_stops_on_short_page_and_skips_unusable_works()
    test_search_respects_page_cap()
    test_field_and_sort_params()
    test_author_field_resolves_author_ids()
    test_author_field_without_matches_returns_nothing()
    test_blank_query_makes_no_call()
    test_upstream_failure_raises_data_source_error()
    test_malformed_payload_raises_data_source_error()

    print("\n" + "=" * 60)
    print("ALL TESTS PASSED!")
    print("=" * 60)


if __name__ == "__main__":
    main()
