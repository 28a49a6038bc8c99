"""Pydantic models for Semantic Scholar API responses."""

from pydantic import BaseModel, Field


class CitationCounts(BaseModel):
    """Citation metrics for one paper from the /paper/batch endpoint."""

    paper_id: str | None = Field(None, alias="paperId")
    citation_count: int | None = Field(None, alias="citationCount")
    influential_citation_count: int | None = Field(
        None, alias="influentialCitationCount"
    )
    external_ids: dict[str, str | int | None] | None = Field(None, alias="externalIds")

    model_config = {"populate_by_name": True}

    def external_id(self, name: str) -> str | None:
        """Return an external identifier (e.g. "DOI", "ArXiv") as a string."""
        if not self.external_ids:
            return None
        value = self.external_ids.get(name)
        return str(value) if value is not None else None
