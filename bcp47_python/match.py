"""Similarity scoring between two language tags."""

import logging
from typing import Optional, Tuple, Union

from .config_file import COMPARE_SCHEMA, encode_options
from .language_tag import LanguageTag, TagSource
from .registry import Registry
from .status import TagNormalization
from .subtags import GLOBAL_REGION

logger = logging.getLogger(__name__)


class MatchQuality:
    """
    Ordered similarity levels returned by :func:`compare`.

    Only the ordering of the levels is significant:
    ``EXACT > UNDETERMINED > MACRO_REGION > NEUTRAL_REGION > SIBLING > REGION
    > VARIANT > NONE``. Overall similarity is the minimum of the per-field
    levels, and every level other than ``NONE`` is positive.
    """

    EXACT = 1.0
    UNDETERMINED = 0.9
    MACRO_REGION = 0.65
    NEUTRAL_REGION = 0.5
    SIBLING = 0.3
    REGION = 0.25
    VARIANT = 0.2
    NONE = 0.0

    @classmethod
    def name_of(cls, quality: float) -> str:
        """
        Return the name of the highest level not above ``quality``.

        :param quality: A similarity score.
        :type quality: float
        :return: A lowercase level name such as ``'macro_region'``.
        :rtype: str
        """
        levels = sorted(
            ((value, name) for name, value in vars(cls).items() if name.isupper()),
            reverse=True,
        )
        for value, name in levels:
            if quality >= value:
                return name.lower()
        return "none"


class LanguageComparer:
    """
    Field-by-field comparison of language tags.

    :param normalization: If ``'preferred'``, tags are converted to their
                          preferred form before being compared, so that
                          deprecated and current subtags compare equal.
    :type normalization: Union[str, TagNormalization, None]
    """

    normalization: TagNormalization
    """Normalization applied to both tags before comparing."""

    def __init__(self, normalization: Union[str, TagNormalization, None] = None) -> None:
        options = encode_options({"normalization": normalization}, COMPARE_SCHEMA)
        self.normalization = options.get("normalization", TagNormalization.UNKNOWN)

    def compare(self, t1: LanguageTag, t2: LanguageTag) -> float:
        """
        Compute the similarity of two language tags.

        Tags without a primary language (grandfathered or private-use only)
        match exactly or not at all. Otherwise each field is scored and the
        lowest score wins.

        :param t1: The first tag.
        :type t1: LanguageTag
        :param t2: The second tag.
        :type t2: LanguageTag
        :raises Bcp47Error: If preferred normalization was requested and a tag
                            cannot be normalized.
        :return: A :class:`MatchQuality` level.
        :rtype: float
        """
        if self.normalization >= TagNormalization.PREFERRED:
            t1, t2 = t1.to_preferred(), t2.to_preferred()

        if t1.parts.primary_language is None or t2.parts.primary_language is None:
            return MatchQuality.EXACT if t1.tag.lower() == t2.tag.lower() else MatchQuality.NONE

        quality = MatchQuality.EXACT
        for comparison in (
            self.compare_primary_language,
            self.compare_extlangs,
            self.compare_script,
            self.compare_region,
            self.compare_variants,
            self.compare_extensions,
        ):
            quality = min(quality, comparison(t1, t2))
            if quality <= MatchQuality.NONE:
                break
        logger.debug("Compared %s with %s: %s", t1, t2, quality)
        return quality

    def compare_primary_language(self, t1: LanguageTag, t2: LanguageTag) -> float:
        if _lower(t1.parts.primary_language) == _lower(t2.parts.primary_language):
            return MatchQuality.EXACT
        if t1.is_undetermined or t2.is_undetermined:
            return MatchQuality.UNDETERMINED
        return MatchQuality.NONE

    def compare_extlangs(self, t1: LanguageTag, t2: LanguageTag) -> float:
        if _lower_all(t1.parts.extlangs) == _lower_all(t2.parts.extlangs):
            return MatchQuality.EXACT
        return MatchQuality.NONE

    def compare_script(self, t1: LanguageTag, t2: LanguageTag) -> float:
        if _lower(t1.effective_script) == _lower(t2.effective_script):
            return MatchQuality.EXACT
        if t1.is_undetermined or t2.is_undetermined:
            return MatchQuality.UNDETERMINED
        return MatchQuality.NONE

    def compare_region(self, t1: LanguageTag, t2: LanguageTag) -> float:
        """
        Score the region subtags of two tags.

        A missing region and the world region ``001`` are interchangeable.
        Either one against a specific region is a neutral match; two regions
        where one encloses the other in the UN M.49 hierarchy are a
        macro-region match; any other pair of regions are siblings.

        :param t1: The first tag.
        :type t1: LanguageTag
        :param t2: The second tag.
        :type t2: LanguageTag
        :return: A :class:`MatchQuality` level.
        :rtype: float
        """
        r1 = _upper(t1.parts.region)
        r2 = _upper(t2.parts.region)
        if r1 == r2:
            return MatchQuality.EXACT
        if r1 in (None, GLOBAL_REGION) and r2 in (None, GLOBAL_REGION):
            return MatchQuality.EXACT
        if r1 in (None, GLOBAL_REGION) or r2 in (None, GLOBAL_REGION):
            return MatchQuality.NEUTRAL_REGION
        if t1.registry.region_hierarchy.is_related(r1, r2):  # type: ignore[arg-type]
            return MatchQuality.MACRO_REGION
        return MatchQuality.SIBLING

    def compare_variants(self, t1: LanguageTag, t2: LanguageTag) -> float:
        if _lower_all(t1.parts.variants) == _lower_all(t2.parts.variants):
            return MatchQuality.EXACT
        return MatchQuality.REGION

    def compare_extensions(self, t1: LanguageTag, t2: LanguageTag) -> float:
        e1 = _lower_all(str(e) for e in t1.parts.extensions) if t1.parts.extensions else None
        e2 = _lower_all(str(e) for e in t2.parts.extensions) if t2.parts.extensions else None
        if e1 == e2:
            return MatchQuality.EXACT
        return MatchQuality.VARIANT


def _lower(value: Optional[str]) -> Optional[str]:
    return value.lower() if value is not None else None


def _upper(value: Optional[str]) -> Optional[str]:
    return value.upper() if value is not None else None


def _lower_all(values) -> Optional[Tuple[str, ...]]:  # type: ignore[no-untyped-def]
    return tuple(v.lower() for v in values) if values is not None else None


def compare(
    t1: LanguageTag,
    t2: LanguageTag,
    normalization: Union[str, TagNormalization, None] = None,
) -> float:
    """
    Compute the similarity of two language tags.

    :param t1: The first tag.
    :type t1: LanguageTag
    :param t2: The second tag.
    :type t2: LanguageTag
    :param normalization: ``'preferred'`` to compare preferred forms.
    :type normalization: Union[str, TagNormalization, None]
    :return: A :class:`MatchQuality` level.
    :rtype: float
    """
    return LanguageComparer(normalization).compare(t1, t2)


def match(
    t1: TagSource,
    t2: TagSource,
    registry: Registry,
    normalization: Union[str, TagNormalization, None] = None,
) -> float:
    """
    Compute the similarity of two tags given as strings, parts or tags.

    :param t1: The first tag.
    :type t1: Union[str, TagParts, LanguageTag]
    :param t2: The second tag.
    :type t2: Union[str, TagParts, LanguageTag]
    :param registry: The registry used to parse and normalize the tags.
    :type registry: Registry
    :param normalization: ``'preferred'`` to compare preferred forms.
    :type normalization: Union[str, TagNormalization, None]
    :raises Bcp47Error: If either tag is not well-formed.
    :return: A :class:`MatchQuality` level.
    :rtype: float
    """
    return compare(LanguageTag.create(t1, registry), LanguageTag.create(t2, registry), normalization)
