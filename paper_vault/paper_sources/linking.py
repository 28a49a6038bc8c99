"""Replace works-index records that are really arXiv papers with the arXiv record."""

import logging

from ..errors import DataSourceError
from .identity import extract_arxiv_id_from_url, strip_version_suffix
from .models import PaperRecord
from .protocols import PaperLookupProvider

logger = logging.getLogger(__name__)


def linked_arxiv_id(record: PaperRecord) -> str:
    """arXiv id behind a record's landing or PDF URL, or ""."""
    return extract_arxiv_id_from_url(record.landing_url) or extract_arxiv_id_from_url(
        record.pdf_url
    )


async def link_to_arxiv(
    records: list[PaperRecord],
    arxiv: PaperLookupProvider,
) -> list[PaperRecord]:
    """
    Resolve works-index records that point at arXiv papers.

    Every record whose URLs embed an arXiv id is replaced, in place, by the
    canonical arXiv record fetched in one batched lookup. If the lookup has
    nothing for that id the record is dropped rather than kept as an
    unverified duplicate. Records without an arXiv id pass through.

    A failed lookup counts as "nothing found".
    """
    linked_ids = [linked_arxiv_id(r) for r in records]
    wanted = list(dict.fromkeys(i for i in linked_ids if i))
    if not wanted:
        return list(records)

    try:
        canonical = await arxiv.fetch_papers(wanted)
    except DataSourceError as e:
        logger.warning(f"arXiv lookup for {len(wanted)} linked ids failed: {e}")
        canonical = []

    by_id: dict[str, PaperRecord] = {}
    for record in canonical:
        by_id.setdefault(record.id.lower(), record)
        by_id.setdefault(strip_version_suffix(record.id).lower(), record)

    linked: list[PaperRecord] = []
    dropped = 0
    for record, arxiv_id in zip(records, linked_ids):
        if not arxiv_id:
            linked.append(record)
            continue
        match = by_id.get(arxiv_id.lower()) or by_id.get(
            strip_version_suffix(arxiv_id).lower()
        )
        if match is not None:
            linked.append(match)
        else:
            dropped += 1

    logger.info(
        f"Linked {len(wanted)} arXiv ids: {len(records) - dropped} kept, {dropped} dropped"
    )
    return linked
