"""Tests for canonical and preferred normalization."""

import pytest

from bcp47_python.exceptions import NormalizationError, ValidityError


@pytest.mark.parametrize(  # type: ignore[misc]
    "tag, expected",
    [
        ("EN-latn-us", "en-Latn-US"),
        ("ZH-CMN-hans-cn", "zh-cmn-Hans-CN"),
        ("en-us-u-en-US-t-MT", "en-US-u-en-us-t-mt"),
        ("en-X-Private", "en-x-private"),
        ("I-KLINGON", "i-klingon"),
        ("EN-gb-OED", "en-GB-oed"),
        ("xx-YY", "xx-YY"),
    ],
)
def test_normalize_canonical(registry, tag: str, expected: str) -> None:  # type: ignore[no-untyped-def]
    """
    Test that canonical normalization only changes casing.

    :param tag: The tag to normalize.
    :param expected: The canonical form.
    :raises AssertionError: If the canonical form differs.
    """
    from bcp47_python import parse
    from bcp47_python.transforms import normalize_canonical

    assert str(normalize_canonical(parse(tag, registry), registry)) == expected


def test_valid_canonical_replaces_redundant_tags(registry) -> None:  # type: ignore[no-untyped-def]
    """
    Test that a whole redundant tag with a preferred value is replaced by it.

    :raises AssertionError: If the redundant tag is kept.
    """
    from bcp47_python import TagParts, parse
    from bcp47_python.transforms import normalize_valid_canonical

    assert normalize_valid_canonical(parse("zh-cmn-Hans", registry), registry) == TagParts(
        primary_language="cmn",
        script="Hans",
    )
    assert str(normalize_valid_canonical(parse("SGN-us", registry), registry)) == "ase"
    # redundant tags without a preferred value are kept
    assert str(normalize_valid_canonical(parse("zh-hant-tw", registry), registry)) == "zh-Hant-TW"


def test_valid_canonical_rejects_unregistered_subtags(registry) -> None:  # type: ignore[no-untyped-def]
    """
    Test that valid-canonical normalization requires registered subtags.

    :raises AssertionError: If an unregistered subtag is accepted.
    """
    from bcp47_python import parse
    from bcp47_python.transforms import normalize_valid_canonical

    with pytest.raises(ValidityError):
        normalize_valid_canonical(parse("xx-YY", registry), registry)


@pytest.mark.parametrize(  # type: ignore[misc]
    "tag, expected",
    [
        ("en-Latn-US", "en-US"),
        ("he-Hebr-IL", "he-IL"),
        ("iw-Hebr-IL", "he-IL"),
        ("in", "id"),
        ("en-BU", "en-MM"),
        ("de-DD", "de-DE"),
        ("zh-cmn-Hans-CN", "cmn-Hans-CN"),
        ("zh-yue", "yue"),
        ("sgn-ase", "ase"),
        ("en-cmn-us", "en-cmn-US"),
        ("zh-Hant-TW", "zh-Hant-TW"),
        ("art-lojban", "jbo"),
        ("i-klingon", "tlh"),
        ("zh-min-nan", "nan"),
        ("en-GB-oed", "en-GB-oxendict"),
        ("i-default", "i-default"),
        ("en-Cyrl", "en-Cyrl"),
        ("x-private", "x-private"),
    ],
)
def test_normalize_preferred(registry, tag: str, expected: str) -> None:  # type: ignore[no-untyped-def]
    """
    Test replacement of deprecated subtags, grandfathered and redundant tags,
    and removal of suppressed scripts.

    :param tag: The tag to normalize.
    :param expected: The preferred form.
    :raises AssertionError: If the preferred form differs.
    """
    from bcp47_python import parse
    from bcp47_python.transforms import normalize_preferred

    assert str(normalize_preferred(parse(tag, registry), registry)) == expected


def test_preferred_grandfathered_parts(registry) -> None:  # type: ignore[no-untyped-def]
    """
    Test that a grandfathered tag with a preferred value becomes ordinary parts.

    :raises AssertionError: If the replacement is still grandfathered.
    """
    from bcp47_python import TagParts, parse
    from bcp47_python.transforms import normalize_preferred

    assert normalize_preferred(parse("art-lojban", registry), registry) == TagParts(primary_language="jbo")


def test_normalization_is_idempotent(registry) -> None:  # type: ignore[no-untyped-def]
    """
    Test that normalizing an already normalized tag changes nothing.

    :raises AssertionError: If a second pass changes the parts.
    """
    from bcp47_python import parse
    from bcp47_python.transforms import normalize_canonical, normalize_preferred, normalize_valid_canonical

    for tag in ("EN-latn-us", "zh-cmn-Hans", "art-lojban", "iw-Hebr-IL", "en-us-u-en-US-t-MT"):
        parts = parse(tag, registry)
        for normalize in (normalize_canonical, normalize_valid_canonical, normalize_preferred):
            once = normalize(parts, registry)
            assert normalize(once, registry) == once


def _registry_with(registry, extra: str):  # type: ignore[no-untyped-def]
    """
    Build a copy of the bundled registry with extra record-jar records appended.

    :param registry: The bundled registry, used for its region hierarchy.
    :param extra: Additional records, each preceded by a ``%%`` line.
    :return: The extended registry.
    """
    from bcp47_python import Registry
    from bcp47_python.record_jar import load_language_subtag_registry
    from bcp47_python.utils import read_bundled_data

    text = read_bundled_data("language-subtag-registry.txt").rstrip("\n") + "\n" + extra
    file_date, entries = load_language_subtag_registry(text)
    return Registry.from_entries(
        entries + list(registry.extensions),
        file_date=file_date,
        regions=registry.region_hierarchy,
    )


def test_grandfathered_preferred_value_must_not_be_grandfathered(registry) -> None:  # type: ignore[no-untyped-def]
    """
    Test that a grandfathered tag whose preferred value is another grandfathered
    tag cannot be normalized.

    :raises AssertionError: If no NormalizationError is raised.
    """
    from bcp47_python import parse
    from bcp47_python.transforms import normalize_preferred

    custom = _registry_with(
        registry,
        "%%\nType: grandfathered\nTag: i-test\nDescription: Test\nAdded: 2020-01-01\n"
        "Deprecated: 2020-01-01\nPreferred-Value: i-klingon\n",
    )
    with pytest.raises(NormalizationError) as excinfo:
        normalize_preferred(parse("i-test", custom), custom)
    assert "also grandfathered" in str(excinfo.value)


def test_redundant_preferred_value_must_parse(registry) -> None:  # type: ignore[no-untyped-def]
    """
    Test that a redundant tag with a malformed preferred value cannot be normalized.

    :raises AssertionError: If no NormalizationError is raised.
    """
    from bcp47_python import parse
    from bcp47_python.transforms import normalize_valid_canonical

    custom = _registry_with(
        registry,
        "%%\nType: redundant\nTag: de-AT-1901\nDescription: Test\nAdded: 2020-01-01\n"
        "Deprecated: 2020-01-01\nPreferred-Value: 123\n",
    )
    with pytest.raises(NormalizationError) as excinfo:
        normalize_valid_canonical(parse("de-AT-1901", custom), custom)
    assert "invalid preferred value" in str(excinfo.value)
