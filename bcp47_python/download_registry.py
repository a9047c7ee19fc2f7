"""IANA registry download module."""

import logging
import os
import tempfile
from pathlib import Path
from typing import IO, Callable, Dict, List, Optional

import requests
import tqdm

from .exceptions import PathError
from .record_jar import load_extensions_registry, load_language_subtag_registry
from .utils import EXTENSIONS_FILENAME, REGISTRY_FILENAME, get_data_download_path

logger = logging.getLogger(__name__)


# Get download URLs from environment or default.
REGISTRY_URL = os.environ.get(
    "BCP47_REGISTRY_URL",
    "https://www.iana.org/assignments/language-subtag-registry/language-subtag-registry",
)
EXTENSIONS_URL = os.environ.get(
    "BCP47_EXTENSIONS_URL",
    "https://www.iana.org/assignments/language-tag-extensions-registry/language-tag-extensions-registry",
)


def http_get(
    url: str,
    out_file: IO[bytes],
    proxies: Optional[Dict[str, str]] = None,
) -> None:
    """
    Streams one of the IANA registry files into ``out_file`` with a progress bar.
    When the server sends no ``Content-Length`` the bar shows bytes only.
    Nothing is checked here; :func:`download_file` parses the result before
    replacing the cached copy.

    :param url: The registry URL, usually :data:`REGISTRY_URL` or :data:`EXTENSIONS_URL`.
    :type url: str
    :param out_file: The file object to write the downloaded content to.
    :type out_file: IO[bytes]
    :param proxies: Optional dictionary of proxies to use for the request.
    :type proxies: Optional[Dict[str, str]]
    :raises TimeoutError: If the request times out.
    :raises PathError: If the file could not be found at the given URL (HTTP 404).
    """
    logger.info("Starting download from %s", url)
    try:
        req = requests.get(url, stream=True, proxies=proxies, timeout=60)
    except requests.exceptions.Timeout as e:
        err = f"Request to {url} timed out."
        raise TimeoutError(err) from e
    if req.status_code == 404:
        err = f"Could not find at URL {url}."
        raise PathError(err)
    req.raise_for_status()
    content_length = req.headers.get("Content-Length")
    total = int(content_length) if content_length is not None else None
    progress = tqdm.tqdm(
        unit="B",
        unit_scale=True,
        total=total,
        desc=f"Downloading {url.rsplit('/', 1)[-1]}",
    )
    for chunk in req.iter_content(chunk_size=1024):
        if chunk:  # filter out keep-alive new chunks
            progress.update(len(chunk))
            out_file.write(chunk)
    progress.close()


def download_file(url: str, destination: Path, check: Optional[Callable[[str], object]] = None) -> Path:
    """
    Download a registry file and move it into place once it has been checked.

    The file is written to a temporary file in the destination directory first,
    so a failed or malformed download never replaces a good cached copy.

    :param url: The URL of the file.
    :type url: str
    :param destination: Where the file should be stored.
    :type destination: Path
    :param check: Optional callable run on the downloaded text; it should raise
                  if the contents are unusable.
    :type check: Optional[Callable[[str], object]]
    :raises RegistryError: If ``check`` rejects the contents.
    :return: The destination path.
    :rtype: Path
    """
    logger.info("Downloading %s to %s", url, destination)
    with tempfile.NamedTemporaryFile(dir=destination.parent, suffix=".part", delete=False) as downloaded_file:
        temp_path = Path(downloaded_file.name)
    try:
        with open(temp_path, "wb") as out_file:
            http_get(url, out_file)
        if check is not None:
            check(temp_path.read_text(encoding="utf-8"))
        temp_path.replace(destination)
    finally:
        temp_path.unlink(missing_ok=True)
    return destination


def download_registry(directory: Optional[Path] = None) -> List[Path]:
    """
    Download the current IANA language subtag and extensions registries.

    :param directory: Directory to store the files in; defaults to the cache
                      directory returned by
                      :func:`bcp47_python.utils.get_data_download_path`.
    :type directory: Optional[Path]
    :raises PathError: If the directory is not a directory or a file cannot be found.
    :raises TimeoutError: If a request times out.
    :raises RegistryError: If a downloaded file is malformed.
    :return: The paths of the downloaded files.
    :rtype: List[Path]
    """
    download_folder = directory if directory is not None else get_data_download_path()
    if not download_folder.is_dir():
        err = f"Download folder {download_folder} is not a directory."
        raise PathError(err)
    return [
        download_file(REGISTRY_URL, download_folder / REGISTRY_FILENAME, load_language_subtag_registry),
        download_file(EXTENSIONS_URL, download_folder / EXTENSIONS_FILENAME, load_extensions_registry),
    ]
