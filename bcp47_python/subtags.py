"""Subtag kinds and their RFC 5646 grammar and casing rules."""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, NewType, Optional, Pattern

LanguageSubtag = NewType("LanguageSubtag", str)
ExtLangSubtag = NewType("ExtLangSubtag", str)
ScriptSubtag = NewType("ScriptSubtag", str)
RegionSubtag = NewType("RegionSubtag", str)
VariantSubtag = NewType("VariantSubtag", str)
ExtensionSingleton = NewType("ExtensionSingleton", str)
ExtensionSubtag = NewType("ExtensionSubtag", str)
ExtendedLanguageRange = NewType("ExtendedLanguageRange", str)
GrandfatheredTag = NewType("GrandfatheredTag", str)
RedundantTag = NewType("RedundantTag", str)

UNDETERMINED_LANGUAGE = LanguageSubtag("und")
GLOBAL_REGION = RegionSubtag("001")
PRIVATE_USE_PREFIX = "x"


class SubtagKind(Enum):
    LANGUAGE = "language"
    EXTLANG = "extlang"
    SCRIPT = "script"
    REGION = "region"
    VARIANT = "variant"
    GRANDFATHERED = "grandfathered"
    REDUNDANT = "redundant"
    EXTENSION = "extension"


def _title(value: str) -> str:
    return value[:1].upper() + value[1:].lower()


def canonical_tag_case(value: str) -> str:
    """
    Apply the RFC 5646 section 2.1.1 casing convention to a whole tag.
    The first subtag is lowercase, later two-letter subtags are uppercase,
    later four-letter subtags are titlecase and everything else is lowercase.
    Subtags after a singleton are always lowercase.

    :param value: The tag to be case-folded.
    :type value: str
    :return: The tag with canonical casing.
    :rtype: str
    """
    canonical = []
    after_singleton = False
    for index, part in enumerate(value.split("-")):
        if index == 0 or after_singleton or len(part) not in (2, 4):
            canonical.append(part.lower())
        elif len(part) == 2:
            canonical.append(part.upper())
        else:
            canonical.append(_title(part))
        if index > 0 and len(part) == 1:
            after_singleton = True
    return "-".join(canonical)


@dataclass(frozen=True)
class SubtagSyntax:
    """
    Grammar and casing rule for one kind of subtag (or whole tag).

    This class is frozen (immutable): one instance per kind is shared by
    every registry.
    """

    description: str
    """Human-readable name used in error messages."""

    well_formed: Pattern[str]
    """Pattern a well-formed value matches (case-insensitive)."""

    canonicalize: Callable[[str], str]
    """Converts a well-formed value to its canonical casing."""

    def is_well_formed(self, value: Optional[str]) -> bool:
        return isinstance(value, str) and self.well_formed.fullmatch(value) is not None

    def is_canonical(self, value: Optional[str]) -> bool:
        return self.is_well_formed(value) and self.canonicalize(value) == value  # type: ignore[arg-type]

    def to_canonical(self, value: str) -> Optional[str]:
        """
        Return the canonical form of a value, or None if it is malformed.

        :param value: The value to be converted.
        :type value: str
        :return: The canonical value, or None if ``value`` is not well-formed.
        :rtype: Optional[str]
        """
        if not self.is_well_formed(value):
            return None
        return self.canonicalize(value)


_WHOLE_TAG = re.compile(r"[A-Za-z][A-Za-z0-9-]+")

LANGUAGE = SubtagSyntax("language subtag", re.compile(r"[A-Za-z]{2,8}"), str.lower)
EXTLANG = SubtagSyntax("extlang subtag", re.compile(r"[A-Za-z]{3}"), str.lower)
SCRIPT = SubtagSyntax("script subtag", re.compile(r"[A-Za-z]{4}"), _title)
REGION = SubtagSyntax(
    "region subtag",
    re.compile(r"[A-Za-z]{2}|[0-9]{3}"),
    str.upper,
)
VARIANT = SubtagSyntax(
    "variant subtag",
    re.compile(r"[A-Za-z0-9]{5,8}|[0-9][A-Za-z0-9]{3}"),
    str.lower,
)
GRANDFATHERED = SubtagSyntax("grandfathered tag", _WHOLE_TAG, canonical_tag_case)
REDUNDANT = SubtagSyntax("redundant tag", _WHOLE_TAG, canonical_tag_case)
EXTENSION_SINGLETON = SubtagSyntax(
    "extension singleton",
    re.compile(r"[0-9A-WYZa-wyz]"),
    str.lower,
)
EXTENSION_SUBTAG = SubtagSyntax(
    "extension subtag",
    re.compile(r"[A-Za-z0-9]{2,8}(?:-[A-Za-z0-9]{2,8})*"),
    str.lower,
)
PRIVATE_USE_SUBTAG = SubtagSyntax(
    "private-use subtag",
    re.compile(r"[A-Za-z0-9]{1,8}(?:-[A-Za-z0-9]{1,8})*"),
    str.lower,
)

SYNTAX_BY_KIND = {
    SubtagKind.LANGUAGE: LANGUAGE,
    SubtagKind.EXTLANG: EXTLANG,
    SubtagKind.SCRIPT: SCRIPT,
    SubtagKind.REGION: REGION,
    SubtagKind.VARIANT: VARIANT,
    SubtagKind.GRANDFATHERED: GRANDFATHERED,
    SubtagKind.REDUNDANT: REDUNDANT,
    SubtagKind.EXTENSION: EXTENSION_SINGLETON,
}


def is_private_use_prefix(value: Optional[str]) -> bool:
    return value is not None and value.lower() == PRIVATE_USE_PREFIX
