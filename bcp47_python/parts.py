"""Structured representation of a parsed language tag."""

from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional, Tuple

from .subtags import (
    PRIVATE_USE_PREFIX,
    ExtendedLanguageRange,
    ExtensionSingleton,
    ExtensionSubtag,
    ExtLangSubtag,
    GrandfatheredTag,
    LanguageSubtag,
    RegionSubtag,
    ScriptSubtag,
    VariantSubtag,
)


@dataclass(frozen=True)
class ExtensionValue:
    """
    One extension sequence of a language tag, such as ``u-ca-buddhist``.

    This class is frozen (immutable) to ensure extensions remain constant
    once a tag has been parsed.
    """

    singleton: ExtensionSingleton
    """The single-character extension identifier (``'u'``, ``'t'``, ...)."""

    value: ExtensionSubtag
    """The ``-``-joined extension subtags following the singleton."""

    def __str__(self) -> str:
        return f"{self.singleton}-{self.value}"


@dataclass(frozen=True)
class TagParts:
    """
    The subtags of a language tag, grouped by kind.

    After a successful parse exactly one of three shapes holds: only
    ``grandfathered`` is set; ``primary_language`` is set; or only
    ``private_use`` is set. List-valued fields are tuples when present and
    ``None`` when absent, never empty.

    This class is frozen (immutable): transforms return new instances.
    """

    primary_language: Optional[LanguageSubtag] = None
    """The primary language subtag (``'en'``)."""

    extlangs: Optional[Tuple[ExtLangSubtag, ...]] = None
    """Extended language subtags (``'cmn'`` in ``zh-cmn``)."""

    script: Optional[ScriptSubtag] = None
    """The script subtag (``'Latn'``)."""

    region: Optional[RegionSubtag] = None
    """The region subtag (``'US'`` or ``'419'``)."""

    variants: Optional[Tuple[VariantSubtag, ...]] = None
    """Variant subtags in tag order."""

    extensions: Optional[Tuple[ExtensionValue, ...]] = None
    """Extension sequences in tag order."""

    private_use: Optional[Tuple[ExtendedLanguageRange, ...]] = None
    """Private-use sequences, each the ``-``-joined subtags after an ``x``."""

    grandfathered: Optional[GrandfatheredTag] = None
    """The whole tag, when it is a registered grandfathered tag."""

    def __str__(self) -> str:
        return parts_to_string(self)

    def replace(self, **changes: Any) -> "TagParts":
        """Return a copy of these parts with the given fields replaced."""
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """
        Return the present fields as a plain dictionary.

        Extensions are rendered as ``{'singleton': ..., 'value': ...}``
        dictionaries and tuples as lists, so the result is JSON-friendly.

        :return: A dictionary of the fields that are not ``None``.
        :rtype: Dict[str, Any]
        """
        result: Dict[str, Any] = {}
        for field in fields(self):
            value = getattr(self, field.name)
            if value is None:
                continue
            if field.name == "extensions":
                value = [{"singleton": e.singleton, "value": e.value} for e in value]
            elif isinstance(value, tuple):
                value = list(value)
            result[field.name] = value
        return result


def parts_to_string(parts: TagParts) -> str:
    """
    Render tag parts as a language tag string.

    Subtags are emitted in grammar order without any case conversion.

    :param parts: The parts to render.
    :type parts: TagParts
    :return: The ``-``-joined tag.
    :rtype: str
    """
    if parts.grandfathered is not None:
        return parts.grandfathered

    subtags = []
    if parts.primary_language is not None:
        subtags.append(parts.primary_language)
    subtags.extend(parts.extlangs or ())
    if parts.script is not None:
        subtags.append(parts.script)
    if parts.region is not None:
        subtags.append(parts.region)
    subtags.extend(parts.variants or ())
    subtags.extend(str(e) for e in parts.extensions or ())
    subtags.extend(f"{PRIVATE_USE_PREFIX}-{p}" for p in parts.private_use or ())
    return "-".join(subtags)


def optional_tuple(values: Any) -> Optional[Tuple[Any, ...]]:
    """Convert an iterable to a tuple, mapping empty or missing input to None."""
    if values is None:
        return None
    result = tuple(values)
    return result if result else None
