"""Semantic Scholar integration used for citation counts."""

from .models import CitationCounts
from .adapters import SemanticScholarAdapter
from .client import SemanticScholarClient

__all__ = [
    # Models
    "CitationCounts",
    # Adapters
    "SemanticScholarAdapter",
    # Low-level client
    "SemanticScholarClient",
]
