"""Utility functions for locating and loading registry data."""

import importlib.resources
import locale
import logging
import os
from pathlib import Path
from typing import Optional, Union

from .exceptions import PathError
from .record_jar import load_extensions_registry, load_language_subtag_registry
from .region_codes import RegionHierarchy
from .registry import Registry

logger = logging.getLogger(__name__)

FAILSAFE_LANGUAGE = "en"

BCP47_DATA_PATH_ENV_VAR = "BCP47_DATA_PATH"  # download cache directory
BCP47_REGISTRY_PATH_ENV_VAR = "BCP47_REGISTRY_PATH"
BCP47_EXTENSIONS_PATH_ENV_VAR = "BCP47_EXTENSIONS_PATH"
BCP47_M49_PATH_ENV_VAR = "BCP47_M49_PATH"

REGISTRY_FILENAME = "language-subtag-registry.txt"
EXTENSIONS_FILENAME = "language-tag-extensions-registry.txt"
M49_FILENAME = "m49.csv"

PathLike = Union[str, Path]


def _data_path() -> Path:
    return Path(
        os.environ.get(
            BCP47_DATA_PATH_ENV_VAR,
            str(Path.home() / ".cache" / "bcp47_python"),
        ),
    )


def get_data_download_path() -> Path:
    """
    Get the directory where downloaded registry files are cached.
    This function retrieves the path from the environment variable specified by
    ``BCP47_DATA_PATH_ENV_VAR``. If the environment variable is not set, it
    defaults to a path in the user's home directory under
    ``.cache/bcp47_python``. The function ensures that the directory exists
    before returning it.

    :return: The download path for registry files.
    :rtype: Path
    """
    path = _data_path()
    path.mkdir(parents=True, exist_ok=True)
    return path


def read_bundled_data(filename: str) -> str:
    """
    Read one of the registry excerpts shipped with the package.

    :param filename: Name of the file in the package ``data`` directory.
    :type filename: str
    :return: The file contents.
    :rtype: str
    """
    resource = importlib.resources.files("bcp47_python").joinpath("data").joinpath(filename)
    return resource.read_text(encoding="utf-8")


def _read_data_file(path: Path) -> str:
    if not path.is_file():
        err = f"registry file does not exist: {path}"
        raise PathError(err)
    return path.read_text(encoding="utf-8")


def read_data(filename: str, explicit_path: Optional[PathLike], env_var: str) -> str:
    """
    Read a data file from the first location that provides it.

    Locations are tried in order: the explicit path, the path named by the
    environment variable, the download cache, and finally the excerpt bundled
    with the package.

    :param filename: Name of the file in the cache and bundled data directories.
    :type filename: str
    :param explicit_path: Path given by the caller, if any.
    :type explicit_path: Optional[PathLike]
    :param env_var: Environment variable that may name the file.
    :type env_var: str
    :raises PathError: If an explicit or environment path does not exist.
    :return: The file contents.
    :rtype: str
    """
    if explicit_path is not None:
        logger.debug("Reading %s from %s", filename, explicit_path)
        return _read_data_file(Path(explicit_path))
    env_path = os.environ.get(env_var)
    if env_path:
        logger.debug("Reading %s from %s=%s", filename, env_var, env_path)
        return _read_data_file(Path(env_path))
    cached = _data_path() / filename
    if cached.is_file():
        logger.debug("Reading %s from cache %s", filename, cached)
        return cached.read_text(encoding="utf-8")
    logger.debug("Reading bundled %s", filename)
    return read_bundled_data(filename)


def load_registry(
    registry_path: Optional[PathLike] = None,
    extensions_path: Optional[PathLike] = None,
    m49_path: Optional[PathLike] = None,
) -> Registry:
    """
    Build a registry from the IANA language subtag registry, the IANA
    extensions registry and the UN M.49 region table.

    Each file is located as described in :func:`read_data`.

    :param registry_path: Path to ``language-subtag-registry``.
    :type registry_path: Optional[PathLike]
    :param extensions_path: Path to ``language-tag-extensions-registry``.
    :type extensions_path: Optional[PathLike]
    :param m49_path: Path to the semicolon separated UN M.49 table.
    :type m49_path: Optional[PathLike]
    :raises PathError: If an explicitly named file does not exist.
    :raises RegistryError: If a file is malformed.
    :return: The populated registry.
    :rtype: Registry
    """
    file_date, entries = load_language_subtag_registry(
        read_data(REGISTRY_FILENAME, registry_path, BCP47_REGISTRY_PATH_ENV_VAR),
    )
    _, extensions = load_extensions_registry(
        read_data(EXTENSIONS_FILENAME, extensions_path, BCP47_EXTENSIONS_PATH_ENV_VAR),
    )
    regions = RegionHierarchy.from_m49_csv(read_data(M49_FILENAME, m49_path, BCP47_M49_PATH_ENV_VAR))
    registry = Registry.from_entries(entries + extensions, file_date=file_date, regions=regions)
    logger.debug("Loaded %r", registry)
    return registry


def get_locale_language() -> str:
    """
    Get the current locale language as a language tag.
    This function retrieves the current locale language setting of the system
    using ``locale.getlocale()`` and converts it to tag form (``en_US`` becomes
    ``en-US``). If no usable locale is set, it returns a default failsafe
    language code.

    :return: The language tag of the current locale.
    :rtype: str
    """
    name = locale.getlocale()[0]
    if not name or name.upper() in ("C", "POSIX"):
        return FAILSAFE_LANGUAGE
    return name.split(".")[0].split("@")[0].replace("_", "-")
