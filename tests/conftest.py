"""Shared fixtures for the bcp47_python tests."""

from pathlib import Path

import pytest

DATA_DIR = Path(__file__).resolve().parent.parent / "bcp47_python" / "data"


@pytest.fixture(scope="session")  # type: ignore[misc]
def registry():  # type: ignore[no-untyped-def]
    """
    Registry built from the data files bundled with the package.
    Paths are given explicitly so that a downloaded cache or environment
    overrides on the test machine do not change the results.

    :return: The bundled registry.
    :rtype: bcp47_python.Registry
    """
    import bcp47_python

    return bcp47_python.load_registry(
        DATA_DIR / "language-subtag-registry.txt",
        DATA_DIR / "language-tag-extensions-registry.txt",
        DATA_DIR / "m49.csv",
    )
