"""BCP-47 language tag facade."""

import logging
from functools import total_ordering
from typing import Any, Optional, Union

from .config_file import CREATE_SCHEMA, encode_options
from .exceptions import Bcp47Error
from .parser import parse
from .parts import TagParts
from .registry import Registry
from .status import TagNormalization, TagValidity, most_normalized, most_valid
from .subtags import UNDETERMINED_LANGUAGE, ScriptSubtag
from .transforms import (
    apply_transforms,
    choose_transforms,
    normalize_canonical,
    normalize_preferred,
    normalize_valid_canonical,
    validate,
    validate_strictly,
)

logger = logging.getLogger(__name__)

TagSource = Union[str, TagParts, "LanguageTag"]


@total_ordering
class LanguageTag:
    """
    An immutable, parsed language tag together with what is known about its
    validity and normalization.

    Instances are created through :meth:`create`, :meth:`create_from_tag` or
    :meth:`create_from_parts`. Conversions such as :meth:`to_canonical`
    return new instances and never change the parts of an existing tag.

    :param parts: The already transformed parts.
    :type parts: TagParts
    :param registry: The registry the tag was checked against.
    :type registry: Registry
    :param validity: The validity guaranteed for ``parts``.
    :type validity: TagValidity
    :param normalization: The normalization guaranteed for ``parts``.
    :type normalization: TagNormalization
    """

    parts: TagParts
    """The subtags of this tag."""

    tag: str
    """The string form of this tag."""

    registry: Registry
    """The registry this tag was checked against."""

    validity: TagValidity
    """The highest validity known to hold for this tag."""

    normalization: TagNormalization
    """The highest normalization known to hold for this tag."""

    def __init__(
        self,
        parts: TagParts,
        registry: Registry,
        validity: TagValidity,
        normalization: TagNormalization,
    ) -> None:
        self.parts = parts
        self.tag = str(parts)
        self.registry = registry
        self.validity = validity
        self.normalization = normalization
        self._is_valid: Optional[bool] = None
        self._is_strictly_valid: Optional[bool] = None
        self._is_canonical: Optional[bool] = None
        self._is_preferred: Optional[bool] = None

    @classmethod
    def create(
        cls,
        source: TagSource,
        registry: Registry,
        validity: Union[str, int, TagValidity, None] = None,
        normalization: Union[str, int, TagNormalization, None] = None,
    ) -> "LanguageTag":
        """
        Create a language tag with the requested validity and normalization.

        Strings are parsed first. The transforms needed to reach the
        requested ``(validity, normalization)`` are then applied, and the
        resulting tag records whichever is higher of the requested levels and
        the levels the transforms guarantee.

        :param source: A tag string, parsed parts, or an existing tag.
        :type source: Union[str, TagParts, LanguageTag]
        :param registry: The registry to check and normalize against.
        :type registry: Registry
        :param validity: The requested validity (``'well-formed'`` by default).
        :type validity: Union[str, int, TagValidity, None]
        :param normalization: The requested normalization (``'unknown'`` by default).
        :type normalization: Union[str, int, TagNormalization, None]
        :raises ValueError: If ``validity`` or ``normalization`` names no known level.
        :raises Bcp47Error: If the tag cannot reach the requested validity or
                            normalization.
        :return: The new tag.
        :rtype: LanguageTag
        """
        options = encode_options({"validity": validity, "normalization": normalization}, CREATE_SCHEMA)
        want_validity = options.get("validity", TagValidity.WELL_FORMED)
        want_normalization = options.get("normalization", TagNormalization.UNKNOWN)

        if isinstance(source, LanguageTag):
            return source._upgrade(want_validity, want_normalization)
        if isinstance(source, str):
            parts = parse(source, registry)
        elif isinstance(source, TagParts):
            parts = source
        else:
            err = f"cannot create a language tag from {type(source).__name__}"
            raise TypeError(err)

        transforms = choose_transforms(want_validity, want_normalization)
        parts, got_validity, got_normalization = apply_transforms(
            parts,
            registry,
            want_validity,
            want_normalization,
            transforms,
        )
        return cls(parts, registry, got_validity, got_normalization)

    @classmethod
    def create_from_tag(cls, tag: str, registry: Registry, **options: Any) -> "LanguageTag":
        """Create a language tag from its string form; see :meth:`create`."""
        return cls.create(tag, registry, **options)

    @classmethod
    def create_from_parts(cls, parts: TagParts, registry: Registry, **options: Any) -> "LanguageTag":
        """Create a language tag from already parsed parts; see :meth:`create`."""
        return cls.create(parts, registry, **options)

    def _upgrade(self, validity: TagValidity, normalization: TagNormalization) -> "LanguageTag":
        if self.validity >= validity and self.normalization >= normalization:
            return self

        known_validity = most_valid(validity, self.validity)
        if normalization < TagNormalization.PREFERRED:
            # validation leaves parts untouched and canonical casing never
            # affects validity, so the known validity carries over
            transforms = choose_transforms(validity, normalization)
        else:
            # preferred values replace subtags, so the known validity is checked again
            transforms = choose_transforms(known_validity, normalization)
        known_normalization = normalization
        if all(t.normalization == TagNormalization.UNKNOWN for t in transforms):
            known_normalization = most_normalized(normalization, self.normalization)

        parts, got_validity, got_normalization = apply_transforms(
            self.parts,
            self.registry,
            known_validity,
            known_normalization,
            transforms,
        )
        return LanguageTag(parts, self.registry, got_validity, got_normalization)

    @property
    def primary_language(self) -> Optional[str]:
        return self.parts.primary_language

    @property
    def is_grandfathered(self) -> bool:
        return self.parts.grandfathered is not None

    @property
    def is_undetermined(self) -> bool:
        """True if the primary language is ``und``."""
        return (
            self.parts.primary_language is not None
            and self.parts.primary_language.lower() == UNDETERMINED_LANGUAGE
        )

    @property
    def effective_script(self) -> Optional[ScriptSubtag]:
        """
        The explicit script of the tag, or the ``Suppress-Script`` registered
        for its primary language.

        :return: The script in canonical casing, or None if neither is known.
        :rtype: Optional[ScriptSubtag]
        """
        if self.parts.script is not None:
            return ScriptSubtag(self.registry.scripts.syntax.to_canonical(self.parts.script) or self.parts.script)
        language = self.registry.languages.try_get(self.parts.primary_language)
        if language is not None and language.suppress_script is not None:
            return ScriptSubtag(language.suppress_script)
        return None

    @property
    def is_well_formed(self) -> bool:
        return self.validity >= TagValidity.WELL_FORMED

    @property
    def is_valid(self) -> bool:
        """
        Whether every subtag is registered. Computed on first use; a positive
        answer raises the recorded validity of this tag.

        :return: True if the tag is valid.
        :rtype: bool
        """
        if self.validity >= TagValidity.VALID:
            return True
        if self._is_valid is None:
            self._is_valid = self._passes(validate)
            if self._is_valid:
                self._record_validity(TagValidity.VALID)
        return self._is_valid

    @property
    def is_strictly_valid(self) -> bool:
        """
        Whether the tag is valid and every extlang and variant follows one of
        its registered prefixes.

        :return: True if the tag is strictly valid.
        :rtype: bool
        """
        if self.validity >= TagValidity.STRICTLY_VALID:
            return True
        if self._is_strictly_valid is None:
            self._is_strictly_valid = self._passes(validate_strictly)
            if self._is_strictly_valid:
                self._record_validity(TagValidity.STRICTLY_VALID)
        return self._is_strictly_valid

    @property
    def is_canonical(self) -> bool:
        """
        Whether the tag is already in canonical form. For a tag known to be
        valid this is the valid-canonical form, which also replaces redundant
        tags and orders extensions; otherwise only subtag casing is checked.

        :return: True if the tag is in canonical form.
        :rtype: bool
        """
        if self.normalization >= TagNormalization.CANONICAL:
            return True
        if self._is_canonical is None:
            if self.validity >= TagValidity.VALID:
                self._is_canonical = self._unchanged_by(normalize_valid_canonical)
            else:
                self._is_canonical = self._unchanged_by(normalize_canonical)
            if self._is_canonical:
                self.normalization = most_normalized(self.normalization, TagNormalization.CANONICAL)
            else:
                self.normalization = most_normalized(self.normalization, TagNormalization.NONE)
        return self._is_canonical

    @property
    def is_preferred(self) -> bool:
        """
        Whether the tag is already in its preferred form.

        :return: True if the tag is valid and in preferred form.
        :rtype: bool
        """
        if self.normalization >= TagNormalization.PREFERRED:
            return True
        if self._is_preferred is None:
            self._is_preferred = self._unchanged_by(normalize_preferred)
            if self._is_preferred:
                self.normalization = TagNormalization.PREFERRED
                self.validity = most_valid(self.validity, TagValidity.VALID)
        return self._is_preferred

    def _record_validity(self, validity: TagValidity) -> None:
        # canonical at well-formed only covers casing; a valid canonical tag
        # must also be in valid-canonical form
        if (
            self.validity < TagValidity.VALID
            and self.normalization == TagNormalization.CANONICAL
            and not self._unchanged_by(normalize_valid_canonical)
        ):
            return
        self.validity = most_valid(self.validity, validity)

    def _passes(self, check: Any) -> bool:
        try:
            check(self.parts, self.registry)
        except Bcp47Error as e:
            logger.debug("%s fails %s: %s", self.tag, check.__name__, e)
            return False
        return True

    def _unchanged_by(self, transform: Any) -> bool:
        try:
            return transform(self.parts, self.registry) == self.parts
        except Bcp47Error as e:
            logger.debug("%s fails %s: %s", self.tag, transform.__name__, e)
            return False

    def to_valid(self) -> "LanguageTag":
        """
        Return this tag if it is valid, otherwise a validated copy.

        :raises Bcp47Error: If the tag is not valid.
        :return: A tag with validity of at least ``valid``.
        :rtype: LanguageTag
        """
        if self.is_valid and self.validity >= TagValidity.VALID:
            return self
        return self._upgrade(TagValidity.VALID, self.normalization)

    def to_strictly_valid(self) -> "LanguageTag":
        """
        Return this tag if it is strictly valid, otherwise a strictly validated copy.

        :raises Bcp47Error: If the tag is not strictly valid.
        :return: A tag with validity ``strictly-valid``.
        :rtype: LanguageTag
        """
        if self.is_strictly_valid and self.validity >= TagValidity.STRICTLY_VALID:
            return self
        return self._upgrade(TagValidity.STRICTLY_VALID, self.normalization)

    def to_canonical(self) -> "LanguageTag":
        """
        Return this tag if it is canonical, otherwise a canonical copy.

        :raises Bcp47Error: If the tag cannot be normalized.
        :return: A tag with normalization of at least ``canonical``.
        :rtype: LanguageTag
        """
        if self.is_canonical:
            return self
        return self._upgrade(self.validity, TagNormalization.CANONICAL)

    def to_preferred(self) -> "LanguageTag":
        """
        Return this tag if it is in preferred form, otherwise a preferred copy.
        Preferred form is only defined for valid tags, so the result is always
        at least valid.

        :raises Bcp47Error: If the tag is not valid or cannot be normalized.
        :return: A tag with normalization ``preferred``.
        :rtype: LanguageTag
        """
        if self.is_preferred:
            return self
        return self._upgrade(most_valid(self.validity, TagValidity.VALID), TagNormalization.PREFERRED)

    def __eq__(self, other: Any) -> bool:
        """
        Compare this tag with another tag or a tag string, ignoring case.

        :param other: The other object to compare with.
        :type other: Any
        :return: True if both tags have the same string form, ignoring case.
        :rtype: bool
        """
        if isinstance(other, (LanguageTag, str)):
            return self.tag.lower() == str(other).lower()
        return NotImplemented

    def __lt__(self, other: Any) -> bool:
        if isinstance(other, (LanguageTag, str)):
            return self.tag.lower() < str(other).lower()
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.tag.lower())

    def __str__(self) -> str:
        return self.tag

    def __repr__(self) -> str:
        """
        Return a string representation of the LanguageTag instance.

        :return: A string in the format '<LanguageTag "language_tag_string">'
        :rtype: str
        """
        return f'<LanguageTag "{self.tag}">'
