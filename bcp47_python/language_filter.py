"""Best-match selection of available languages for a list of desired languages."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Union

from .config_file import (
    AVAILABLE_LANGUAGE,
    FILTER_PRIMARY_LANGUAGE,
    FILTER_SCHEMA,
    encode_options,
)
from .language_tag import LanguageTag, TagSource
from .match import LanguageComparer, MatchQuality
from .registry import Registry

logger = logging.getLogger(__name__)

SMALL_LIST_DECREMENT = 0.1
SMALL_LIST_SIZE = 10


@dataclass(frozen=True)
class FilteredLanguage:
    """A language selected by :class:`LanguageFilter`, with its score."""

    quality: float
    """Score of the match; higher is better."""

    tag: str
    """String form of ``language_tag``."""

    language_tag: LanguageTag
    """The selected tag."""


class LanguageFilter:
    """
    Rank available languages against an ordered list of desired languages.

    Each desired language claims a band of scores below the band of the one
    before it, so an exact match for a less desired language never beats
    any match for a more desired one.

    :param registry: Registry used to create the ultimate fallback tag from a string.
    :type registry: Registry
    :param comparer: The comparer used to score pairs of tags.
    :type comparer: Optional[LanguageComparer]
    """

    def __init__(self, registry: Registry, comparer: Optional[LanguageComparer] = None) -> None:
        self.registry = registry
        self.comparer = comparer or LanguageComparer()

    def filter_language_tags_with_details(
        self,
        desired: Sequence[LanguageTag],
        available: Sequence[LanguageTag],
        use: Optional[str] = None,
        filter: Optional[str] = None,  # noqa: A002
        ultimate_fallback: Optional[TagSource] = None,
    ) -> List[FilteredLanguage]:
        """
        Select the best available languages for the desired languages.

        :param desired: Desired languages, most desired first.
        :type desired: Sequence[LanguageTag]
        :param available: Languages to choose from.
        :type available: Sequence[LanguageTag]
        :param use: ``'available_language'`` (default) to return the matching
                    available tags, or ``'desired_language'`` to return the
                    desired tags that matched.
        :type use: Optional[str]
        :param filter: ``'primary_language'`` (default) to keep only the best
                       match per primary language, or ``'none'`` to keep the
                       best match per tag.
        :type filter: Optional[str]
        :param ultimate_fallback: Tag returned with score 0 when nothing matches,
                                  as a string, parsed parts or an existing tag.
        :type ultimate_fallback: Optional[Union[str, TagParts, LanguageTag]]
        :raises ValueError: If ``use`` or ``filter`` is not a known value.
        :return: The matches, best first.
        :rtype: List[FilteredLanguage]
        """
        fallback = ultimate_fallback
        options = encode_options(
            {
                "use": use,
                "filter": filter,
                "ultimate_fallback": str(fallback) if fallback is not None else None,
            },
            FILTER_SCHEMA,
        )
        use_available = options.get("use", AVAILABLE_LANGUAGE) == AVAILABLE_LANGUAGE
        by_language = options.get("filter", FILTER_PRIMARY_LANGUAGE) == FILTER_PRIMARY_LANGUAGE

        decrement = SMALL_LIST_DECREMENT if len(desired) < SMALL_LIST_SIZE else 1.0 / len(desired)
        base = 1.0
        matched: Dict[str, FilteredLanguage] = {}

        for want in desired:
            base -= decrement
            for have in available:
                similarity = self.comparer.compare(want, have)
                if similarity <= MatchQuality.NONE:
                    continue
                quality = base + similarity * decrement
                language_tag = have if use_available else want
                key = language_tag.tag.lower()
                if by_language and language_tag.parts.primary_language is not None:
                    key = language_tag.parts.primary_language.lower()
                existing = matched.get(key)
                if existing is None or existing.quality < quality:
                    matched[key] = FilteredLanguage(quality, language_tag.tag, language_tag)

        results = sorted(matched.values(), key=lambda m: m.quality, reverse=True)
        if not results and fallback is not None:
            if not isinstance(fallback, LanguageTag):
                fallback = LanguageTag.create(fallback, self.registry)
            logger.debug("No match for %s, using fallback %s", [str(d) for d in desired], fallback)
            return [FilteredLanguage(0.0, fallback.tag, fallback)]
        logger.debug("Filtered %s against %s: %s", desired, available, [(m.tag, m.quality) for m in results])
        return results

    def filter_language_tags(
        self,
        desired: Sequence[LanguageTag],
        available: Sequence[LanguageTag],
        **options: Any,
    ) -> List[LanguageTag]:
        """Select the best available languages; see :meth:`filter_language_tags_with_details`."""
        return [m.language_tag for m in self.filter_language_tags_with_details(desired, available, **options)]  # type: ignore[arg-type]


def _to_tags(tags: Sequence[Union[str, LanguageTag]], registry: Registry) -> List[LanguageTag]:
    return [t if isinstance(t, LanguageTag) else LanguageTag.create(t, registry) for t in tags]


def filter_language_tags_with_details(
    desired: Sequence[Union[str, LanguageTag]],
    available: Sequence[Union[str, LanguageTag]],
    registry: Registry,
    **options: Any,
) -> List[FilteredLanguage]:
    """
    Select the best available languages for the desired languages.

    Tags may be given as strings, which are parsed as well-formed tags.
    Accepts the options of :meth:`LanguageFilter.filter_language_tags_with_details`.

    :raises Bcp47Error: If a tag string is not well-formed.
    :return: The matches, best first.
    :rtype: List[FilteredLanguage]
    """
    return LanguageFilter(registry).filter_language_tags_with_details(
        _to_tags(desired, registry),
        _to_tags(available, registry),
        **options,  # type: ignore[arg-type]
    )


def filter_language_tags(
    desired: Sequence[Union[str, LanguageTag]],
    available: Sequence[Union[str, LanguageTag]],
    registry: Registry,
    **options: Any,
) -> List[LanguageTag]:
    """Like :func:`filter_language_tags_with_details`, returning only the tags."""
    return [m.language_tag for m in filter_language_tags_with_details(desired, available, registry, **options)]
