"""Tests for the well-formed, valid and strictly-valid checks."""

import pytest

from bcp47_python.exceptions import ParseError, PrefixError, ValidityError


@pytest.mark.parametrize(  # type: ignore[misc]
    "tag",
    [
        "en",
        "en-US",
        "EN-latn-us",
        "zh-cmn-Hans-CN",
        "es-419",
        "en-us-u-en-US-t-MT",
        "sl-rozaj-biske-1994",
        "qab-Qaab-QN",
        "i-klingon",
        "x-private",
    ],
)
def test_valid_tags(registry, tag: str) -> None:  # type: ignore[no-untyped-def]
    """
    Test that tags built from registered subtags pass validation unchanged.

    :param tag: A valid tag.
    :raises AssertionError: If validation fails or modifies the parts.
    """
    from bcp47_python import parse
    from bcp47_python.transforms import validate

    parts = parse(tag, registry)
    assert validate(parts, registry) == parts


@pytest.mark.parametrize(  # type: ignore[misc]
    "tag, message",
    [
        ("xx", "not registered"),
        ("en-Xxxx", "not registered"),
        ("en-XX", "not registered"),
        ("ca-ES-xyzzy", "not registered"),
        ("en-a-value", "not registered"),
        ("ca-valencia-valencia", "duplicate variant"),
        ("ca-valencia-Valencia", "duplicate variant"),
        ("en-u-ca-u-co", "duplicate extension"),
        ("zh-cmn-yue", "too many extlangs"),
    ],
)
def test_invalid_tags(registry, tag: str, message: str) -> None:  # type: ignore[no-untyped-def]
    """
    Test that well-formed but invalid tags raise ValidityError.

    :param tag: A well-formed tag that is not valid.
    :param message: Text expected in the error message.
    :raises AssertionError: If no ValidityError is raised or the message differs.
    """
    from bcp47_python import parse
    from bcp47_python.transforms import validate, validate_well_formed

    parts = parse(tag, registry)
    assert validate_well_formed(parts, registry) == parts
    with pytest.raises(ValidityError) as excinfo:
        validate(parts, registry)
    assert message in str(excinfo.value)
    assert excinfo.value.tier is not None
    assert excinfo.value.tier.label == "valid"


def test_well_formed_rejects_malformed_parts(registry) -> None:  # type: ignore[no-untyped-def]
    """
    Test that parts assembled by hand are checked against the subtag grammar.

    :raises AssertionError: If malformed parts are accepted.
    """
    from bcp47_python import TagParts
    from bcp47_python.transforms import validate_well_formed

    with pytest.raises(ParseError):
        validate_well_formed(TagParts(primary_language="e"), registry)
    with pytest.raises(ParseError) as excinfo:
        validate_well_formed(TagParts(region="US"), registry)
    assert "missing primary language subtag" in str(excinfo.value)
    with pytest.raises(ParseError) as excinfo:
        validate_well_formed(TagParts(extlangs=("cmn", "yue", "hak", "nan"), primary_language="zh"), registry)
    assert "too many extlang subtags" in str(excinfo.value)


@pytest.mark.parametrize(  # type: ignore[misc]
    "tag",
    [
        "ca-valencia",
        "ca-Valencia",
        "zh-cmn",
        "sgn-ase",
        "sl-rozaj",
        "sl-rozaj-biske",
        "sl-rozaj-biske-1994",
        "en-fonipa",
        "de-1901",
    ],
)
def test_strictly_valid_tags(registry, tag: str) -> None:  # type: ignore[no-untyped-def]
    """
    Test that extlangs and variants following a registered prefix are strictly valid.

    :param tag: A strictly valid tag.
    :raises AssertionError: If strict validation fails.
    """
    from bcp47_python import parse
    from bcp47_python.transforms import validate_strictly

    parts = parse(tag, registry)
    assert validate_strictly(parts, registry) == parts


@pytest.mark.parametrize(  # type: ignore[misc]
    "tag, message",
    [
        ("fr-valencia", 'invalid prefix "fr" for variant subtag valencia (expected "(ca)")'),
        ("sl-1994", 'invalid prefix "sl" for variant subtag 1994'),
        ("sl-rozaj-1996", 'invalid prefix "sl-rozaj" for variant subtag 1996'),
        ("en-cmn-us", 'invalid prefix "en" for extlang subtag cmn (expected "zh")'),
    ],
)
def test_invalid_prefixes(registry, tag: str, message: str) -> None:  # type: ignore[no-untyped-def]
    """
    Test that valid tags with a misplaced extlang or variant fail strict validation.

    :param tag: A valid but not strictly valid tag.
    :param message: Text expected in the error message.
    :raises AssertionError: If no PrefixError is raised or the message differs.
    """
    from bcp47_python import parse
    from bcp47_python.transforms import validate, validate_strictly

    parts = parse(tag, registry)
    validate(parts, registry)
    with pytest.raises(PrefixError) as excinfo:
        validate_strictly(parts, registry)
    assert message in str(excinfo.value)
    assert excinfo.value.tier is not None
    assert excinfo.value.tier.label == "strictly-valid"
