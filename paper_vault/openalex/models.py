"""Pydantic models for OpenAlex API responses."""

from pydantic import BaseModel, Field

OPENALEX_ID_PREFIX = "https://openalex.org/"


class DehydratedAuthor(BaseModel):
    """Author stub embedded in an authorship."""

    id: str | None = None
    display_name: str | None = None


class Authorship(BaseModel):
    author: DehydratedAuthor | None = None


class Location(BaseModel):
    """Where a work can be read (publisher page, repository, ...)."""

    landing_page_url: str | None = None
    pdf_url: str | None = None


class Work(BaseModel):
    """A work from the /works endpoint."""

    id: str | None = None
    doi: str | None = None
    title: str | None = None
    display_name: str | None = None
    publication_date: str | None = None
    publication_year: int | None = None
    authorships: list[Authorship] | None = None
    abstract_inverted_index: dict[str, list[int]] | None = None
    primary_location: Location | None = None
    best_oa_location: Location | None = None

    @property
    def short_id(self) -> str:
        """Short id, e.g. "W123" for "https://openalex.org/W123"."""
        return (self.id or "").removeprefix(OPENALEX_ID_PREFIX)


class Author(BaseModel):
    """An author from the /authors endpoint."""

    id: str
    display_name: str | None = None
    works_count: int | None = None

    @property
    def short_id(self) -> str:
        return self.id.removeprefix(OPENALEX_ID_PREFIX)


class ResponseMeta(BaseModel):
    count: int | None = None
    page: int | None = None
    per_page: int | None = None


class WorksResponse(BaseModel):
    """Response from the /works list endpoint."""

    meta: ResponseMeta = Field(default_factory=ResponseMeta)
    results: list[Work] = Field(default_factory=list)


class AuthorsResponse(BaseModel):
    """Response from the /authors list endpoint."""

    meta: ResponseMeta = Field(default_factory=ResponseMeta)
    results: list[Author] = Field(default_factory=list)
