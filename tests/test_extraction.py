from contact_finder.extraction import (
    FOUNDED_BY,
    IS_ROLE,
    NAME_TITLE,
    TITLE_COLON_NAME,
    TITLE_NAME,
    clean_title,
    is_known_title,
    markdown_extractor,
    snippet_extractor,
)
from contact_finder.models import ContactSource
from contact_finder.names import NameValidator


def _pairs(contacts) -> list[tuple[str, str | None]]:
    return [(contact.full_name, contact.title) for contact in contacts]


def test_name_title_pattern_comma_and_dash(validator: NameValidator) -> None:
    extractor = snippet_extractor(validator)
    text = "Acme Bakery | John Smith, CEO of Acme Bakery. Jane Doe - Marketing Manager"
    assert _pairs(extractor.match_pattern(NAME_TITLE, text)) == [
        ("John Smith", "CEO"),
        ("Jane Doe", "Marketing Manager"),
    ]


def test_title_first_pattern(validator: NameValidator) -> None:
    extractor = snippet_extractor(validator)
    text = "CEO: Jane Doe. Co-Founder - Maria Rossi"
    assert _pairs(extractor.match_pattern(TITLE_NAME, text)) == [
        ("Jane Doe", "CEO"),
        ("Maria Rossi", "Co-Founder"),
    ]


def test_founded_by_splits_name_lists(validator: NameValidator) -> None:
    extractor = snippet_extractor(validator)
    text = "Acme was founded by John Smith and Jane Doe in 2010."
    assert _pairs(extractor.match_pattern(FOUNDED_BY, text)) == [
        ("John Smith", "Founder"),
        ("Jane Doe", "Founder"),
    ]
    text = "It was started by Sarah Connor, Kyle Reese, and John Connor."
    assert [c.full_name for c in extractor.match_pattern(FOUNDED_BY, text)] == [
        "Sarah Connor",
        "Kyle Reese",
        "John Connor",
    ]


def test_is_role_requires_known_title(validator: NameValidator) -> None:
    extractor = snippet_extractor(validator)
    accepted = "Maria Rossi is the owner of Rossi Catering."
    assert _pairs(extractor.match_pattern(IS_ROLE, accepted)) == [("Maria Rossi", "owner")]
    rejected = "Jane Doe is a wonderful person."
    assert extractor.match_pattern(IS_ROLE, rejected) == []


def test_snippet_extractor_tags_search_source(validator: NameValidator) -> None:
    contacts = snippet_extractor(validator).extract_contacts("John Smith - CEO - Acme | LinkedIn")
    assert len(contacts) == 1
    contact = contacts[0]
    assert (contact.first_name, contact.last_name) == ("John", "Smith")
    assert contact.source is ContactSource.SEARCH


def test_noise_and_empty_text_yield_nothing(validator: NameValidator) -> None:
    extractor = snippet_extractor(validator)
    assert extractor.extract_contacts("The staff was very helpful and friendly, Director") == []
    assert extractor.extract_contacts("Detail Name, CEO") == []
    assert extractor.extract_contacts("") == []
    assert extractor.extract_contacts(None) == []


def test_extraction_is_idempotent_and_ignores_business_hint(validator: NameValidator) -> None:
    extractor = snippet_extractor(validator)
    text = "Founded by John Smith. CEO: Jane Doe. Maria Rossi is the President."
    first = extractor.extract_contacts(text, "Acme")
    second = extractor.extract_contacts(text, "Something Else")
    assert first == second
    assert {c.full_name for c in first} == {"John Smith", "Jane Doe", "Maria Rossi"}


def test_markdown_bold_name_and_heading(validator: NameValidator) -> None:
    extractor = markdown_extractor(validator)
    assert _pairs(extractor.extract_contacts("**John Smith** - Founder & CEO")) == [
        ("John Smith", "Founder & CEO")
    ]
    assert _pairs(extractor.extract_contacts("### Jane Doe\nMarketing Director\n")) == [
        ("Jane Doe", "Marketing Director")
    ]


def test_markdown_comma_title_must_be_known(validator: NameValidator) -> None:
    extractor = markdown_extractor(validator)
    text = "Meet our team\n\nSarah Connor, Operations Manager\nKyle Reese, Head Chef\n"
    contacts = extractor.extract_contacts(text)
    assert _pairs(contacts) == [("Sarah Connor", "Operations Manager")]
    assert contacts[0].source is ContactSource.PAGE


def test_markdown_title_colon_name(validator: NameValidator) -> None:
    extractor = markdown_extractor(validator)
    assert _pairs(extractor.match_pattern(TITLE_COLON_NAME, "CEO: John Smith")) == [
        ("John Smith", "CEO")
    ]
    assert extractor.match_pattern(TITLE_COLON_NAME, "Team Lead: John Smith") == []


def test_overlapping_matches_are_kept_for_later_dedupe(validator: NameValidator) -> None:
    extractor = markdown_extractor(validator)
    text = "**Jane Doe** - CEO\nJane Doe is the CEO of Acme."
    assert _pairs(extractor.extract_contacts(text)) == [("Jane Doe", "CEO"), ("Jane Doe", "CEO")]


def test_title_helpers() -> None:
    assert is_known_title("Chief Operating Officer") is True
    assert is_known_title("co-owner and head of sales") is True
    assert is_known_title("Partners in crime") is False
    assert is_known_title(None) is False
    assert clean_title("  Founder,  CEO. ") == "Founder, CEO"
    assert clean_title(" - ") is None


def test_capitalized_words_before_a_name_are_trimmed(validator: NameValidator) -> None:
    snippets = snippet_extractor(validator)
    assert _pairs(snippets.extract_contacts("Meet Jane Doe, CEO")) == [("Jane Doe", "CEO")]
    assert _pairs(snippets.extract_contacts("Acme Bakery Jane Doe, Owner")) == [
        ("Jane Doe", "Owner")
    ]
    markdown = markdown_extractor(validator)
    assert _pairs(markdown.extract_contacts("Meet Jane Doe, CEO")) == [("Jane Doe", "CEO")]


def test_founded_by_splits_on_capitalized_and(validator: NameValidator) -> None:
    extractor = snippet_extractor(validator)
    text = "Acme was founded by John Smith And Jane Doe."
    assert [c.full_name for c in extractor.match_pattern(FOUNDED_BY, text)] == [
        "John Smith",
        "Jane Doe",
    ]
    assert [c.full_name for c in extractor.extract_contacts("Andrew Smith, CEO")] == [
        "Andrew Smith"
    ]


def test_international_names_are_recognized(validator: NameValidator) -> None:
    extractor = snippet_extractor(validator)
    texts = [
        "Liam Johnson, CEO",
        "Muhammad Khan, Founder",
        "Raj Patel, Owner",
        "Hiroshi Tanaka, CEO",
        "Harper Lee, Director",
    ]
    found = [c.full_name for text in texts for c in extractor.extract_contacts(text)]
    assert found == ["Liam Johnson", "Muhammad Khan", "Raj Patel", "Hiroshi Tanaka", "Harper Lee"]
