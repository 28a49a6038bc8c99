"""Pydantic models shared by every paper source and pipeline stage."""

from enum import Enum

from pydantic import BaseModel, Field, field_validator


def _coerce(enum_cls: type[Enum], value, default: Enum) -> Enum:
    try:
        return enum_cls(value)
    except ValueError:
        return default


class SourceTag(str, Enum):
    """Which upstream produced a record."""

    ARXIV = "arxiv"
    OPENALEX = "openalex"


class SearchField(str, Enum):
    """Which part of a paper the query is matched against."""

    SMART = "smart"  # title OR abstract
    TITLE = "title"
    AUTHOR = "author"
    ABSTRACT = "abstract"
    ALL = "all"


class SortKey(str, Enum):
    RELEVANCE = "relevance"
    SUBMITTED_DATE = "submittedDate"
    LAST_UPDATED_DATE = "lastUpdatedDate"
    CITATIONS = "citations"


class SortOrder(str, Enum):
    ASCENDING = "ascending"
    DESCENDING = "descending"


class PaperRecord(BaseModel):
    """A paper as exchanged between adapters, pipeline stages and callers.

    Records are frozen: stages that add information (citation enrichment)
    return a copy instead of mutating the record an adapter emitted.
    """

    id: str
    title: str = ""
    authors_display: str = Field("", alias="authorsDisplay")
    abstract_text: str = Field("", alias="abstractText")
    published_date: str = Field("", alias="publishedDate")
    landing_url: str = Field("", alias="landingUrl")
    pdf_url: str = Field("", alias="pdfUrl")
    doi: str | None = None
    source_tag: SourceTag = Field(..., alias="sourceTag")
    citation_count: int | None = Field(None, alias="citationCount")
    influential_citation_count: int | None = Field(
        None, alias="influentialCitationCount"
    )

    model_config = {"populate_by_name": True, "frozen": True}

    @property
    def is_arxiv(self) -> bool:
        return self.source_tag is SourceTag.ARXIV


class SearchRequest(BaseModel):
    """One page of a search, as requested by a caller."""

    query: str = ""
    max_results: int = Field(10, ge=1, le=300)
    start: int = Field(0, ge=0)
    field: SearchField = SearchField.SMART
    sort: SortKey = SortKey.RELEVANCE
    order: SortOrder = SortOrder.DESCENDING

    # Unknown selector values fall back to the defaults instead of failing
    # the whole request.
    @field_validator("field", mode="before")
    @classmethod
    def _default_field(cls, value):
        return _coerce(SearchField, value, SearchField.SMART)

    @field_validator("sort", mode="before")
    @classmethod
    def _default_sort(cls, value):
        return _coerce(SortKey, value, SortKey.RELEVANCE)

    @field_validator("order", mode="before")
    @classmethod
    def _default_order(cls, value):
        return _coerce(SortOrder, value, SortOrder.DESCENDING)

    @property
    def descending(self) -> bool:
        return self.order is SortOrder.DESCENDING

    def window(self, start: int, max_results: int) -> "SearchRequest":
        """Same query, different paging window."""
        return self.model_copy(update={"start": start, "max_results": max_results})
