"""Tests for downloading the IANA registries."""

from typing import Dict, Iterator, List, Optional

import pytest
import requests

from bcp47_python.exceptions import PathError, RegistryError


class FakeResponse:
    """Minimal stand-in for a streamed :class:`requests.Response`."""

    def __init__(self, content: bytes, status_code: int = 200) -> None:
        self.content = content
        self.status_code = status_code
        self.headers: Dict[str, str] = {"Content-Length": str(len(content))}

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} error")

    def iter_content(self, chunk_size: int = 1024) -> Iterator[bytes]:
        for i in range(0, len(self.content), chunk_size):
            yield self.content[i : i + chunk_size]


def fake_get(responses: Dict[str, FakeResponse], calls: List[str]):  # type: ignore[no-untyped-def]
    """
    Build a replacement for :func:`requests.get` serving canned responses.

    :param responses: Responses keyed by URL.
    :param calls: List that receives every requested URL.
    :return: The replacement function.
    """

    def get(url: str, stream: bool = False, proxies: Optional[Dict[str, str]] = None, timeout: int = 0) -> FakeResponse:
        calls.append(url)
        return responses[url]

    return get


def bundled(filename: str) -> bytes:
    from bcp47_python.utils import read_bundled_data

    return read_bundled_data(filename).encode("utf-8")


def test_download_registry(monkeypatch, tmp_path) -> None:  # type: ignore[no-untyped-def]
    """
    Test that both registries are downloaded into the given directory.

    :raises AssertionError: If the files are missing or have the wrong contents.
    """
    from bcp47_python.download_registry import EXTENSIONS_URL, REGISTRY_URL, download_registry

    calls: List[str] = []
    monkeypatch.setattr(
        requests,
        "get",
        fake_get(
            {
                REGISTRY_URL: FakeResponse(bundled("language-subtag-registry.txt")),
                EXTENSIONS_URL: FakeResponse(bundled("language-tag-extensions-registry.txt")),
            },
            calls,
        ),
    )
    paths = download_registry(tmp_path)
    assert [p.name for p in paths] == ["language-subtag-registry.txt", "language-tag-extensions-registry.txt"]
    assert calls == [REGISTRY_URL, EXTENSIONS_URL]
    assert paths[0].read_bytes() == bundled("language-subtag-registry.txt")
    assert sorted(p.name for p in tmp_path.iterdir()) == [
        "language-subtag-registry.txt",
        "language-tag-extensions-registry.txt",
    ]


def test_download_rejects_malformed_registry(monkeypatch, tmp_path) -> None:  # type: ignore[no-untyped-def]
    """
    Test that a malformed download does not replace the cached file.

    :raises AssertionError: If the cached file is overwritten or no error is raised.
    """
    from bcp47_python.download_registry import download_file
    from bcp47_python.record_jar import load_language_subtag_registry

    destination = tmp_path / "language-subtag-registry.txt"
    destination.write_text("File-Date: 2000-01-01\n", encoding="utf-8")
    monkeypatch.setattr(requests, "get", fake_get({"http://example/reg": FakeResponse(b"not a registry\n")}, []))

    with pytest.raises(RegistryError):
        download_file("http://example/reg", destination, load_language_subtag_registry)
    assert destination.read_text(encoding="utf-8") == "File-Date: 2000-01-01\n"
    assert list(tmp_path.iterdir()) == [destination]


def test_download_http_errors(monkeypatch, tmp_path) -> None:  # type: ignore[no-untyped-def]
    """
    Test the errors raised for missing files, server errors and timeouts.

    :raises AssertionError: If the expected exception is not raised.
    """
    from bcp47_python.download_registry import http_get

    monkeypatch.setattr(
        requests,
        "get",
        fake_get(
            {
                "http://example/missing": FakeResponse(b"", status_code=404),
                "http://example/broken": FakeResponse(b"", status_code=500),
            },
            [],
        ),
    )
    with open(tmp_path / "out", "wb") as out_file:
        with pytest.raises(PathError):
            http_get("http://example/missing", out_file)
        with pytest.raises(requests.exceptions.HTTPError):
            http_get("http://example/broken", out_file)

    def timeout(*args, **kwargs):  # type: ignore[no-untyped-def]
        raise requests.exceptions.Timeout("too slow")

    monkeypatch.setattr(requests, "get", timeout)
    with open(tmp_path / "out", "wb") as out_file, pytest.raises(TimeoutError):
        http_get("http://example/slow", out_file)


def test_download_directory_must_exist(tmp_path) -> None:  # type: ignore[no-untyped-def]
    """
    Test that downloading into a path that is not a directory raises PathError.

    :raises AssertionError: If no PathError is raised.
    """
    from bcp47_python import download_registry

    not_a_directory = tmp_path / "file"
    not_a_directory.write_text("", encoding="utf-8")
    with pytest.raises(PathError):
        download_registry(not_a_directory)
