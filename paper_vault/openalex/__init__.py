"""OpenAlex API integration: the JSON works index."""

from .adapters import OpenAlexAdapter, reconstruct_abstract, work_to_record
from .client import OpenAlexClient

__all__ = [
    "OpenAlexAdapter",
    "OpenAlexClient",
    "reconstruct_abstract",
    "work_to_record",
]
