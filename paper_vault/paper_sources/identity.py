"""Identity keys for matching the same paper across sources.

Every function here is pure and idempotent. The keys are only ever compared
with each other; they are never shown to callers.
"""

import re
import unicodedata
from urllib.parse import unquote

_VERSION_SUFFIX = re.compile(r"v\d+$", re.IGNORECASE)
_NON_ALNUM = re.compile(r"[\W_]")
_WHITESPACE = re.compile(r"\s+")

# arxiv.org/abs/2301.00001v2, arxiv.org/pdf/2301.00001v2.pdf,
# export.arxiv.org/abs/hep-th/9901001
_ARXIV_URL = re.compile(
    r"arxiv\.org/(?:abs|pdf)/(?P<id>[a-z\-.]+/\d{7}(?:v\d+)?|\d{4}\.\d{4,5}(?:v\d+)?)",
    re.IGNORECASE,
)
_DOI_URL = re.compile(r"(?:dx\.)?doi\.org/(?P<doi>10\.\d{4,9}/[^?#\s]+)", re.IGNORECASE)


def normalize_url(url: str | None) -> str:
    """Lowercase, force https, drop query/fragment and trailing slashes."""
    key = (url or "").strip().lower()
    if not key:
        return ""
    if key.startswith("http://"):
        key = "https://" + key[len("http://"):]
    key = key.split("#", 1)[0].split("?", 1)[0]
    return key.rstrip("/")


def normalize_title(title: str | None) -> str:
    """Lowercase and keep only letters and digits, in any script.

    Example: "Attention Is  All You Need!" -> "attentionisallyouneed"
    and "β-VAE" -> "βvae", which stays distinct from "α-VAE".
    """
    folded = unicodedata.normalize("NFKC", title or "").lower()
    collapsed = _WHITESPACE.sub(" ", folded).strip()
    return _NON_ALNUM.sub("", collapsed)


def strip_version_suffix(arxiv_id: str | None) -> str:
    """Drop a trailing version marker: "2301.00001v2" -> "2301.00001"."""
    return _VERSION_SUFFIX.sub("", (arxiv_id or "").strip())


def extract_arxiv_id_from_url(url: str | None) -> str:
    """Return the arXiv id embedded in an abs/pdf URL, or "" if there is none."""
    match = _ARXIV_URL.search(url or "")
    return match.group("id") if match else ""


def extract_doi_from_url(url: str | None) -> str:
    """Return the DOI behind a doi.org resolver URL, or "" if there is none."""
    match = _DOI_URL.search(url or "")
    return unquote(match.group("doi")) if match else ""


def normalize_doi(value: str | None) -> str:
    """Bare lowercase DOI from either a DOI, a "doi:" string or a resolver URL."""
    doi = (value or "").strip()
    from_url = extract_doi_from_url(doi)
    if from_url:
        doi = from_url
    elif doi.lower().startswith("doi:"):
        doi = doi[4:]
    return doi.strip().lower()
