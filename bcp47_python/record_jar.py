"""Reader for the IANA record-jar registry format (RFC 5646 section 3.1)."""

import logging
import string
from typing import Dict, Iterator, List, Optional, Tuple

from .exceptions import RegistryError
from .registry import RegistryEntry
from .subtags import SubtagKind

logger = logging.getLogger(__name__)

RECORD_SEPARATOR = "%%"

Record = Dict[str, List[str]]

_SUBTAG_KINDS = {
    "language": SubtagKind.LANGUAGE,
    "extlang": SubtagKind.EXTLANG,
    "script": SubtagKind.SCRIPT,
    "region": SubtagKind.REGION,
    "variant": SubtagKind.VARIANT,
}
_TAG_KINDS = {
    "grandfathered": SubtagKind.GRANDFATHERED,
    "redundant": SubtagKind.REDUNDANT,
}


def _unfold(text: str) -> Iterator[Tuple[str, int]]:
    """Yield logical lines, joining continuation lines onto the previous one."""
    current: Optional[List[str]] = None
    start = 0
    for line_number, line in enumerate(text.splitlines(), start=1):
        if line[:1] in (" ", "\t") and current is not None:
            current.append(line.strip())
            continue
        if current is not None:
            yield " ".join(current), start
        current = [line.strip()]
        start = line_number
    if current is not None:
        yield " ".join(current), start


def parse_records(text: str) -> List[Record]:
    """
    Split record-jar text into records of field name to values.

    Records are separated by ``%%`` lines. A field may repeat (for example
    ``Description`` or ``Prefix``), so every field maps to a list of values.

    :param text: The registry file contents.
    :type text: str
    :raises RegistryError: If a line is neither a separator nor a field.
    :return: The records, in file order.
    :rtype: List[Record]
    """
    records: List[Record] = []
    current: Record = {}
    for line, line_number in _unfold(text):
        if line == RECORD_SEPARATOR:
            records.append(current)
            current = {}
            continue
        if not line:
            continue
        name, sep, value = line.partition(":")
        if not sep or not name.strip():
            err = f"line {line_number}: malformed record-jar field {line!r}"
            raise RegistryError(err)
        current.setdefault(name.strip(), []).append(value.strip())
    if current:
        records.append(current)
    return records


def _single(record: Record, field: str) -> Optional[str]:
    values = record.get(field)
    return values[0] if values else None


def _expand_range(value: str) -> List[str]:
    """
    Expand a registry subtag range such as ``qaa..qtz`` or ``QM..QZ``.

    :param value: A single subtag or an ``a..b`` range of equal-length subtags.
    :type value: str
    :raises RegistryError: If the range is malformed.
    :return: Every subtag in the range, inclusive.
    :rtype: List[str]
    """
    if ".." not in value:
        return [value]
    start, _, end = value.partition("..")
    if not start or not end or len(start) != len(end):
        err = f'"{value}": malformed subtag range'
        raise RegistryError(err, value)
    if start.isdigit() and end.isdigit():
        width = len(start)
        return [str(n).zfill(width) for n in range(int(start), int(end) + 1)]

    alphabet = string.ascii_lowercase
    lower_start, lower_end = start.lower(), end.lower()
    if not (lower_start.isalpha() and lower_end.isalpha()) or lower_start > lower_end:
        err = f'"{value}": malformed subtag range'
        raise RegistryError(err, value)

    def to_number(s: str) -> int:
        n = 0
        for c in s:
            n = n * 26 + alphabet.index(c)
        return n

    def to_subtag(n: int) -> str:
        chars = []
        for _ in range(len(start)):
            n, rem = divmod(n, 26)
            chars.append(alphabet[rem])
        raw = "".join(reversed(chars))
        # keep the casing convention of the range endpoints
        if start.isupper():
            return raw.upper()
        if start[:1].isupper():
            return raw[:1].upper() + raw[1:]
        return raw

    return [to_subtag(n) for n in range(to_number(lower_start), to_number(lower_end) + 1)]


def _entry_kwargs(record: Record) -> Dict[str, object]:
    return {
        "description": tuple(record.get("Description", [])),
        "added": _single(record, "Added"),
        "deprecated": _single(record, "Deprecated"),
        "preferred_value": _single(record, "Preferred-Value"),
        "suppress_script": _single(record, "Suppress-Script"),
        "macrolanguage": _single(record, "Macrolanguage"),
        "scope": _single(record, "Scope"),
        "prefix": tuple(record.get("Prefix", [])),
        "comments": tuple(record.get("Comments", [])),
    }


def _file_date(records: List[Record]) -> str:
    if not records or "File-Date" not in records[0]:
        err = "registry must start with a File-Date record"
        raise RegistryError(err)
    return records[0]["File-Date"][0]


def load_language_subtag_registry(text: str) -> Tuple[str, List[RegistryEntry]]:
    """
    Parse the IANA Language Subtag Registry.

    :param text: Contents of ``language-subtag-registry``.
    :type text: str
    :raises RegistryError: If the file is malformed.
    :return: The registry ``File-Date`` and its entries, with subtag ranges expanded.
    :rtype: Tuple[str, List[RegistryEntry]]
    """
    records = parse_records(text)
    file_date = _file_date(records)
    entries: List[RegistryEntry] = []
    for record in records[1:]:
        kind_name = _single(record, "Type")
        if kind_name in _SUBTAG_KINDS:
            subtag = _single(record, "Subtag")
            if subtag is None:
                err = f"{kind_name} record without Subtag field"
                raise RegistryError(err)
            kwargs = _entry_kwargs(record)
            for value in _expand_range(subtag):
                entries.append(RegistryEntry(_SUBTAG_KINDS[kind_name], value, **kwargs))  # type: ignore[arg-type]
        elif kind_name in _TAG_KINDS:
            tag = _single(record, "Tag")
            if tag is None:
                err = f"{kind_name} record without Tag field"
                raise RegistryError(err)
            entries.append(RegistryEntry(_TAG_KINDS[kind_name], tag, **_entry_kwargs(record)))  # type: ignore[arg-type]
        else:
            err = f"unknown registry record type {kind_name!r}"
            raise RegistryError(err, kind_name)
    logger.debug("Read %d language subtag registry entries (File-Date %s)", len(entries), file_date)
    return file_date, entries


def load_extensions_registry(text: str) -> Tuple[str, List[RegistryEntry]]:
    """
    Parse the IANA Language Tag Extensions Registry.

    :param text: Contents of ``language-tag-extensions-registry``.
    :type text: str
    :raises RegistryError: If the file is malformed.
    :return: The registry ``File-Date`` and one entry per extension singleton.
    :rtype: Tuple[str, List[RegistryEntry]]
    """
    records = parse_records(text)
    file_date = _file_date(records)
    entries = []
    for record in records[1:]:
        identifier = _single(record, "Identifier")
        if identifier is None:
            err = "extension record without Identifier field"
            raise RegistryError(err)
        entries.append(
            RegistryEntry(
                SubtagKind.EXTENSION,
                identifier,
                description=tuple(record.get("Description", [])),
                added=_single(record, "Added"),
                comments=tuple(record.get("Comments", [])),
            ),
        )
    logger.debug("Read %d extension registry entries (File-Date %s)", len(entries), file_date)
    return file_date, entries
