"""Tests for the LanguageTag facade."""

import pytest

from bcp47_python.exceptions import ParseError, PrefixError, ValidityError


def test_create_defaults(registry) -> None:  # type: ignore[no-untyped-def]
    """
    Test that a tag created without options is well-formed and left as given.

    :raises AssertionError: If the tag is changed or has unexpected status.
    """
    from bcp47_python import LanguageTag, TagNormalization, TagValidity

    tag = LanguageTag.create("EN-us", registry)
    assert tag.tag == "EN-us"
    assert str(tag) == "EN-us"
    assert tag.validity == TagValidity.WELL_FORMED
    assert tag.normalization == TagNormalization.UNKNOWN
    assert tag.primary_language == "EN"
    assert tag.is_well_formed


def test_create_valid_canonical(registry) -> None:  # type: ignore[no-untyped-def]
    """
    Test that requesting a valid canonical tag replaces redundant tags.

    :raises AssertionError: If the result or its status is wrong.
    """
    from bcp47_python import LanguageTag, TagNormalization, TagValidity

    tag = LanguageTag.create("zh-cmn-Hans", registry, validity="valid", normalization="canonical")
    assert tag.tag == "cmn-Hans"
    assert tag.validity == TagValidity.VALID
    assert tag.normalization == TagNormalization.CANONICAL


def test_create_preferred(registry) -> None:  # type: ignore[no-untyped-def]
    """
    Test that preferred normalization implies validity.

    :raises AssertionError: If the result or its status is wrong.
    """
    from bcp47_python import LanguageTag, TagNormalization, TagParts, TagValidity

    tag = LanguageTag.create("art-lojban", registry, normalization="preferred")
    assert tag.parts == TagParts(primary_language="jbo")
    assert tag.validity == TagValidity.VALID
    assert tag.normalization == TagNormalization.PREFERRED
    assert not tag.is_grandfathered


def test_create_strictly_valid(registry) -> None:  # type: ignore[no-untyped-def]
    """
    Test strict validation through the facade.

    :raises AssertionError: If strict validation is not enforced.
    """
    from bcp47_python import LanguageTag, TagValidity

    tag = LanguageTag.create("ca-valencia", registry, validity="strictly-valid")
    assert tag.validity == TagValidity.STRICTLY_VALID

    valid = LanguageTag.create("fr-valencia", registry, validity="valid")
    assert valid.is_valid
    assert not valid.is_strictly_valid
    with pytest.raises(PrefixError) as excinfo:
        LanguageTag.create("fr-valencia", registry, validity="strictly-valid")
    assert "invalid prefix" in str(excinfo.value)
    with pytest.raises(PrefixError):
        valid.to_strictly_valid()


def test_create_errors(registry) -> None:  # type: ignore[no-untyped-def]
    """
    Test the errors raised for bad input.

    :raises AssertionError: If the expected exception is not raised.
    """
    from bcp47_python import LanguageTag

    with pytest.raises(ParseError):
        LanguageTag.create("en-US-$$", registry)
    with pytest.raises(ValidityError):
        LanguageTag.create("xx-YY", registry, validity="valid")
    with pytest.raises(ValueError):
        LanguageTag.create("en", registry, validity="mostly-valid")
    with pytest.raises(TypeError):
        LanguageTag.create(42, registry)  # type: ignore[arg-type]


def test_create_from_parts_and_tag(registry) -> None:  # type: ignore[no-untyped-def]
    """
    Test the creation helpers for strings and parts.

    :raises AssertionError: If the helpers disagree with :meth:`LanguageTag.create`.
    """
    from bcp47_python import LanguageTag, TagParts

    from_parts = LanguageTag.create_from_parts(
        TagParts(primary_language="EN", region="gb"),
        registry,
        normalization="canonical",
    )
    assert from_parts.tag == "en-GB"
    from_tag = LanguageTag.create_from_tag("en-gb", registry, normalization="canonical")
    assert from_tag == from_parts
    assert from_tag.parts == from_parts.parts


def test_lazy_status_checks(registry) -> None:  # type: ignore[no-untyped-def]
    """
    Test that status properties raise the recorded status but never lower it.

    :raises AssertionError: If a property reports or records the wrong status.
    """
    from bcp47_python import LanguageTag, TagNormalization, TagValidity

    tag = LanguageTag.create("EN-us", registry)
    assert tag.is_valid
    assert tag.validity == TagValidity.VALID
    assert not tag.is_canonical
    assert tag.normalization == TagNormalization.NONE

    strict = LanguageTag.create("sl-rozaj-biske", registry)
    assert strict.is_strictly_valid
    assert strict.validity == TagValidity.STRICTLY_VALID

    unknown = LanguageTag.create("xx-YY", registry)
    assert not unknown.is_valid
    assert not unknown.is_strictly_valid
    assert unknown.is_canonical
    assert unknown.validity == TagValidity.WELL_FORMED
    assert unknown.normalization == TagNormalization.CANONICAL

    assert not LanguageTag.create("in", registry).is_preferred
    preferred = LanguageTag.create("id", registry)
    assert preferred.is_preferred
    assert preferred.normalization == TagNormalization.PREFERRED


def test_conversions_return_new_tags(registry) -> None:  # type: ignore[no-untyped-def]
    """
    Test that conversions leave the source tag untouched.

    :raises AssertionError: If a conversion modifies the original tag.
    """
    from bcp47_python import LanguageTag, TagNormalization, TagValidity

    tag = LanguageTag.create("iw-hebr-il", registry)
    canonical = tag.to_canonical()
    preferred = tag.to_preferred()
    assert tag.tag == "iw-hebr-il"
    assert canonical.tag == "iw-Hebr-IL"
    assert canonical.normalization >= TagNormalization.CANONICAL
    assert preferred.tag == "he-IL"
    assert preferred.validity >= TagValidity.VALID
    assert preferred.to_preferred() is preferred
    assert tag.to_valid().tag == "iw-hebr-il"


def test_status_never_decreases(registry) -> None:  # type: ignore[no-untyped-def]
    """
    Test that requesting a lower status for an existing tag keeps what is known.

    :raises AssertionError: If validity or normalization is lowered.
    """
    from bcp47_python import LanguageTag, TagNormalization, TagValidity

    tag = LanguageTag.create("en-US", registry, validity="strictly-valid", normalization="canonical")
    again = LanguageTag.create(tag, registry, validity="well-formed")
    assert again is tag
    upgraded = LanguageTag.create(tag, registry, normalization="preferred")
    assert upgraded.validity == TagValidity.STRICTLY_VALID
    assert upgraded.normalization == TagNormalization.PREFERRED


def test_canonical_of_valid_tag_ignores_input_case(registry) -> None:  # type: ignore[no-untyped-def]
    """
    Test that a valid tag reaches the same canonical form whatever its casing,
    and the same form as requesting valid canonical tags directly.

    :raises AssertionError: If the canonical forms differ.
    """
    from bcp47_python import LanguageTag, TagNormalization, TagValidity

    lower = LanguageTag.create("zh-cmn-Hans", registry, validity="valid")
    assert not lower.is_canonical
    upper = LanguageTag.create("ZH-cmn-Hans", registry, validity="valid")
    direct = LanguageTag.create("zh-cmn-Hans", registry, validity="valid", normalization="canonical")

    for tag in (lower.to_canonical(), upper.to_canonical(), direct):
        assert tag.tag == "cmn-Hans"
        assert tag.validity == TagValidity.VALID
        assert tag.normalization == TagNormalization.CANONICAL


@pytest.mark.parametrize(  # type: ignore[misc]
    "tag, expected",
    [
        ("en-us", "en-US"),
        ("ZH-hant-tw", "zh-Hant-TW"),
        ("zh-cmn-hans", "cmn-Hans"),
    ],
)
def test_canonical_then_valid(registry, tag: str, expected: str) -> None:  # type: ignore[no-untyped-def]
    """
    Test that validating a canonical tag keeps it canonical.

    :param tag: The tag as given.
    :param expected: The valid canonical form.
    :raises AssertionError: If the result is not valid and canonical.
    """
    from bcp47_python import LanguageTag, TagNormalization, TagValidity

    canonical = LanguageTag.create(tag, registry).to_canonical()
    result = canonical.to_valid()
    assert result.tag == expected
    assert result.validity >= TagValidity.VALID
    assert result.normalization >= TagNormalization.CANONICAL
    assert result == LanguageTag.create(tag, registry, validity="valid", normalization="canonical")


def test_undetermined_and_script(registry) -> None:  # type: ignore[no-untyped-def]
    """
    Test the undetermined flag and the effective script.

    :raises AssertionError: If either property is wrong.
    """
    from bcp47_python import LanguageTag

    assert LanguageTag.create("und", registry).is_undetermined
    assert not LanguageTag.create("en", registry).is_undetermined
    assert LanguageTag.create("en", registry).effective_script == "Latn"
    assert LanguageTag.create("zh-hant", registry).effective_script == "Hant"
    assert LanguageTag.create("zh", registry).effective_script is None


def test_equality_and_ordering(registry) -> None:  # type: ignore[no-untyped-def]
    """
    Test comparison, hashing and representation of tags.

    :raises AssertionError: If tags compare or hash inconsistently.
    """
    from bcp47_python import LanguageTag

    en_us = LanguageTag.create("en-US", registry)
    assert en_us == LanguageTag.create("EN-us", registry)
    assert en_us == "en-us"
    assert hash(en_us) == hash(LanguageTag.create("en-us", registry))
    assert en_us != LanguageTag.create("en-GB", registry)
    assert sorted([en_us, LanguageTag.create("de", registry)])[0] == "de"
    assert repr(en_us) == '<LanguageTag "en-US">'
    assert len({en_us, LanguageTag.create("EN-US", registry)}) == 1
