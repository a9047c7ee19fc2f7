"""Tests for option validation and the status lattices."""

import pytest


def test_encode_create_options() -> None:
    """
    Test that validity and normalization options accept labels, ranks and members.

    :raises AssertionError: If an option is not converted to its lattice member.
    """
    from bcp47_python import TagNormalization, TagValidity
    from bcp47_python.config_file import CREATE_SCHEMA, encode_options

    encoded = encode_options({"validity": "strictly-valid", "normalization": 900}, CREATE_SCHEMA)
    assert encoded == {"validity": TagValidity.STRICTLY_VALID, "normalization": TagNormalization.CANONICAL}

    encoded = encode_options({"validity": TagValidity.VALID, "normalization": None}, CREATE_SCHEMA)
    assert encoded == {"validity": TagValidity.VALID}


def test_encode_options_errors() -> None:
    """
    Test that unknown keys, wrong types and unknown values are rejected.

    :raises AssertionError: If a bad option is accepted.
    """
    from bcp47_python.config_file import CREATE_SCHEMA, FILTER_SCHEMA, encode_options

    with pytest.raises(ValueError):
        encode_options({"strictness": "valid"}, CREATE_SCHEMA)
    with pytest.raises(TypeError):
        encode_options({"validity": 1.5}, CREATE_SCHEMA)
    with pytest.raises(ValueError):
        encode_options({"validity": "almost-valid"}, CREATE_SCHEMA)
    with pytest.raises(ValueError):
        encode_options({"normalization": 42}, CREATE_SCHEMA)
    with pytest.raises(ValueError):
        encode_options({"use": "both"}, FILTER_SCHEMA)
    with pytest.raises(TypeError):
        encode_options({"filter": ["none"]}, FILTER_SCHEMA)


def test_status_lattices() -> None:
    """
    Test the ordering and labels of the validity and normalization levels.

    :raises AssertionError: If the lattices are ordered or labelled incorrectly.
    """
    from bcp47_python import TagNormalization, TagValidity
    from bcp47_python.status import most_normalized, most_valid

    assert TagValidity.UNKNOWN < TagValidity.WELL_FORMED < TagValidity.VALID < TagValidity.STRICTLY_VALID
    assert (
        TagNormalization.UNKNOWN
        < TagNormalization.NONE
        < TagNormalization.CANONICAL
        < TagNormalization.PREFERRED
    )
    assert TagValidity.STRICTLY_VALID.label == "strictly-valid"
    assert str(TagNormalization.PREFERRED) == "preferred"
    assert TagValidity.coerce(" Well-Formed ") is TagValidity.WELL_FORMED
    assert most_valid(TagValidity.VALID, TagValidity.WELL_FORMED) is TagValidity.VALID
    assert most_normalized(TagNormalization.NONE, TagNormalization.CANONICAL) is TagNormalization.CANONICAL
