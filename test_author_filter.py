"""Author Filter Tests"""

from paper_vault.paper_sources import PaperRecord, SourceTag, author_matches, filter_by_author
from paper_vault.paper_sources.author_filter import author_tokens


def test_matches_initials_and_full_names():
    authors = "J. Smith, A. Lee"

    assert author_matches(authors, "smith")
    assert author_matches(authors, "j smith")
    assert author_matches(authors, "J. Smith")
    assert author_matches(authors, "lee a")
    assert not author_matches(authors, "brown")


def test_full_given_name_must_be_whole_word():
    authors = "Jane Smith, Ali Lee"

    assert author_matches(authors, "jane smith")
    assert author_matches(authors, "j smith")
    assert not author_matches(authors, "janet smith")
    assert not author_matches(authors, "smit")


def test_tokens_must_match_the_same_author():
    # "jane" belongs to Smith, "lee" is a different author
    assert not author_matches("Jane Smith, Ali Lee", "jane lee")


def test_hyphenated_surnames():
    assert author_matches("Maria Garcia-Lopez", "garcia-lopez")
    assert author_matches("Maria Garcia-Lopez", "m garcia-lopez")


def test_empty_query_matches_everything():
    assert author_matches("Anyone", "  ")
    assert author_matches("", "...")


def test_filter_by_author():
    papers = [
        PaperRecord(id="1", authors_display="J. Smith, A. Lee", source_tag=SourceTag.ARXIV),
        PaperRecord(id="2", authors_display="B. Brown", source_tag=SourceTag.OPENALEX),
        PaperRecord(id="3", authors_display="John Smith", source_tag=SourceTag.OPENALEX),
    ]

    assert [p.id for p in filter_by_author(papers, "j smith")] == ["1", "3"]


def test_initial_matches_start_of_any_given_name():
    assert author_matches("J. Smith", "j smith")
    assert author_matches("John Smith", "j smith")
    assert author_matches("Jones Smith", "j smith")
    assert not author_matches("John Smith", "jane smith")
    assert not author_matches("Ali Smith", "j smith")


def test_names_with_non_ascii_letters():
    authors = "Thomas Müller, A. Lee"

    assert author_tokens("Müller") == ["müller"]
    assert author_matches(authors, "Müller")
    assert author_matches(authors, "thomas müller")
    assert author_matches(authors, "T. MÜLLER")
    assert not author_matches("Thomas Miller", "Müller")
    assert author_matches("José García", "j garcía")
    assert author_matches("Zoë Ó-Briain", "z ó-briain")
    # decomposed "u" + combining diaeresis folds to the same name
    assert author_matches("Thomas Mu\u0308ller", "müller")
