"""In-memory IANA language subtag and extension registries."""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from .exceptions import ParseError, RegistryError, ValidityError
from .region_codes import RegionHierarchy
from .subtags import SYNTAX_BY_KIND, SubtagKind, SubtagSyntax

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegistryEntry:
    """
    A single record from an IANA registry.

    Subtag records (language, extlang, script, region, variant) and whole-tag
    records (grandfathered, redundant) share this type, as do the records of
    the Language Tag Extensions Registry (kind ``extension``, keyed by the
    singleton identifier).
    """

    kind: SubtagKind
    """The kind of the registered item."""

    tag: str
    """The registered subtag, tag or extension singleton."""

    description: Tuple[str, ...] = ()
    """Descriptions, in registry order."""

    added: Optional[str] = None
    """Date the item was added to the registry."""

    deprecated: Optional[str] = None
    """Date the item was deprecated, if it is deprecated."""

    preferred_value: Optional[str] = None
    """Replacement to be used in preferred form, if any."""

    suppress_script: Optional[str] = None
    """Script that should not be used with this language (language only)."""

    macrolanguage: Optional[str] = None
    """Encompassing macrolanguage, if any."""

    scope: Optional[str] = None
    """Scope (``macrolanguage``, ``collection``, ``special``, ``private-use``)."""

    prefix: Tuple[str, ...] = ()
    """Registered prefixes (extlang: exactly one language; variant: zero or more tags)."""

    comments: Tuple[str, ...] = ()
    """Free-form comments."""

    @property
    def is_deprecated(self) -> bool:
        return self.deprecated is not None


class SubtagScope:
    """
    Lookup table for one kind of registered subtag or tag.

    Lookups accept any casing. Values are stored under their canonical form.

    :param kind: The kind of item held by this scope.
    :type kind: SubtagKind
    :param syntax: Grammar and casing rule for the kind; defaults to the
                   rule registered for ``kind``.
    :type syntax: Optional[SubtagSyntax]
    """

    kind: SubtagKind
    """The kind of item held by this scope."""

    syntax: SubtagSyntax
    """Grammar and casing rule applied to lookups."""

    _items: Dict[str, RegistryEntry]
    """Entries keyed by canonical tag."""

    def __init__(self, kind: SubtagKind, syntax: Optional[SubtagSyntax] = None) -> None:
        self.kind = kind
        self.syntax = syntax or SYNTAX_BY_KIND[kind]
        self._items = {}

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[RegistryEntry]:
        return iter(self._items.values())

    def __contains__(self, value: object) -> bool:
        return isinstance(value, str) and self.is_valid(value)

    def __repr__(self) -> str:
        return f"<SubtagScope {self.kind.value} ({len(self)} entries)>"

    def add(self, entry: RegistryEntry) -> None:
        """
        Add an entry to this scope.

        :param entry: The entry to be added. Its tag must be well-formed for
                      this kind and must not already be present.
        :type entry: RegistryEntry
        :raises RegistryError: If the entry has the wrong kind, is malformed,
                               or is a duplicate.
        """
        if entry.kind is not self.kind:
            err = f"{entry.tag}: cannot add {entry.kind.value} entry to {self.kind.value} scope"
            raise RegistryError(err, entry.tag)
        canonical = self.syntax.to_canonical(entry.tag)
        if canonical is None:
            err = f"{entry.tag}: malformed {self.syntax.description} in registry"
            raise RegistryError(err, entry.tag)
        if canonical in self._items:
            err = f"{entry.tag}: duplicate {self.syntax.description} in registry"
            raise RegistryError(err, entry.tag)
        self._items[canonical] = entry

    def tags(self) -> List[str]:
        return list(self._items)

    def try_get(self, value: Optional[str]) -> Optional[RegistryEntry]:
        """
        Look up a value in any casing.

        :param value: The subtag or tag to look up.
        :type value: Optional[str]
        :return: The registered entry, or None if it is absent or malformed.
        :rtype: Optional[RegistryEntry]
        """
        if value is None:
            return None
        got = self._items.get(value)
        if got is None:
            canonical = self.syntax.to_canonical(value)
            if canonical is not None:
                got = self._items.get(canonical)
        return got

    def try_get_canonical(self, value: str) -> Optional[RegistryEntry]:
        """Look up a value which is already in canonical form."""
        return self._items.get(value)

    def get(self, value: str) -> RegistryEntry:
        """
        Look up a value, raising if it is not registered.

        :param value: The subtag or tag to look up.
        :type value: str
        :raises ValidityError: If the value is not registered.
        :return: The registered entry.
        :rtype: RegistryEntry
        """
        got = self.try_get(value)
        if got is None:
            err = f'invalid {self.syntax.description} "{value}" (not registered)'
            raise ValidityError(err, value)
        return got

    def is_well_formed(self, value: Optional[str]) -> bool:
        return self.syntax.is_well_formed(value)

    def is_canonical(self, value: Optional[str]) -> bool:
        return self.syntax.is_canonical(value)

    def is_valid(self, value: Optional[str]) -> bool:
        return self.try_get(value) is not None

    def to_canonical(self, value: str) -> str:
        """
        Convert a well-formed value to canonical casing without consulting
        the registry contents.

        :param value: The value to be converted.
        :type value: str
        :raises ParseError: If the value is not well-formed.
        :return: The canonical value.
        :rtype: str
        """
        canonical = self.syntax.to_canonical(value)
        if canonical is None:
            err = f'"{value}": malformed {self.syntax.description}'
            raise ParseError(err, value)
        return canonical

    def to_valid_canonical(self, value: str) -> str:
        """
        Convert a value to canonical casing, requiring that it is registered.

        :param value: The value to be converted.
        :type value: str
        :raises ParseError: If the value is not well-formed.
        :raises ValidityError: If the value is not registered.
        :return: The canonical value.
        :rtype: str
        """
        canonical = self.to_canonical(value)
        if canonical not in self._items:
            err = f'invalid {self.syntax.description} "{value}" (not registered)'
            raise ValidityError(err, value)
        return canonical

    def verify_is_well_formed(self, value: str) -> str:
        if not self.is_well_formed(value):
            err = f'"{value}": malformed {self.syntax.description}'
            raise ParseError(err, value)
        return value

    def verify_is_valid(self, value: str) -> str:
        self.to_valid_canonical(value)
        return value

    def verify_is_canonical(self, value: str) -> str:
        if not self.is_canonical(value):
            err = f'"{value}": {self.syntax.description} is not in canonical form'
            raise ParseError(err, value)
        return value


class Registry:
    """
    The set of IANA registries queried by the tag engine.

    A registry is read-only once built and may be shared between threads.

    :param file_date: The ``File-Date`` of the language subtag registry.
    :type file_date: Optional[str]
    :param regions: Optional UN M.49 hierarchy used for macro-region matching.
    :type regions: Optional[RegionHierarchy]
    """

    languages: SubtagScope
    extlangs: SubtagScope
    scripts: SubtagScope
    regions: SubtagScope
    variants: SubtagScope
    grandfathered: SubtagScope
    redundant: SubtagScope
    extensions: SubtagScope

    file_date: Optional[str]
    """The ``File-Date`` of the language subtag registry."""

    region_hierarchy: RegionHierarchy
    """UN M.49 region containment (empty when no data was supplied)."""

    def __init__(
        self,
        file_date: Optional[str] = None,
        regions: Optional[RegionHierarchy] = None,
    ) -> None:
        self.languages = SubtagScope(SubtagKind.LANGUAGE)
        self.extlangs = SubtagScope(SubtagKind.EXTLANG)
        self.scripts = SubtagScope(SubtagKind.SCRIPT)
        self.regions = SubtagScope(SubtagKind.REGION)
        self.variants = SubtagScope(SubtagKind.VARIANT)
        self.grandfathered = SubtagScope(SubtagKind.GRANDFATHERED)
        self.redundant = SubtagScope(SubtagKind.REDUNDANT)
        self.extensions = SubtagScope(SubtagKind.EXTENSION)
        self.file_date = file_date
        self.region_hierarchy = regions if regions is not None else RegionHierarchy()

    def __repr__(self) -> str:
        return (
            f"<Registry {self.file_date or 'undated'}: "
            f"{len(self.languages)} languages, {len(self.regions)} regions>"
        )

    def scope(self, kind: SubtagKind) -> SubtagScope:
        return {
            SubtagKind.LANGUAGE: self.languages,
            SubtagKind.EXTLANG: self.extlangs,
            SubtagKind.SCRIPT: self.scripts,
            SubtagKind.REGION: self.regions,
            SubtagKind.VARIANT: self.variants,
            SubtagKind.GRANDFATHERED: self.grandfathered,
            SubtagKind.REDUNDANT: self.redundant,
            SubtagKind.EXTENSION: self.extensions,
        }[kind]

    def add(self, entry: RegistryEntry) -> None:
        self.scope(entry.kind).add(entry)

    def add_all(self, entries: Iterable[RegistryEntry]) -> None:
        count = 0
        for entry in entries:
            self.add(entry)
            count += 1
        logger.debug("Added %d registry entries", count)

    @classmethod
    def from_entries(
        cls,
        entries: Iterable[RegistryEntry],
        file_date: Optional[str] = None,
        regions: Optional[RegionHierarchy] = None,
    ) -> "Registry":
        """
        Build a registry from already parsed entries.

        :param entries: Language subtag and extension registry entries.
        :type entries: Iterable[RegistryEntry]
        :param file_date: The ``File-Date`` of the source registry.
        :type file_date: Optional[str]
        :param regions: Optional UN M.49 hierarchy.
        :type regions: Optional[RegionHierarchy]
        :raises RegistryError: If any entry is malformed or duplicated.
        :return: The populated registry.
        :rtype: Registry
        """
        registry = cls(file_date=file_date, regions=regions)
        registry.add_all(entries)
        return registry
