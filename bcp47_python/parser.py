"""Single-pass parser splitting a language tag into its subtags."""

import logging
from typing import List, Optional

from .exceptions import ParseError
from .parts import ExtensionValue, TagParts, optional_tuple
from .registry import Registry
from .subtags import (
    EXTENSION_SINGLETON,
    EXTENSION_SUBTAG,
    PRIVATE_USE_SUBTAG,
    ExtendedLanguageRange,
    ExtensionSingleton,
    ExtensionSubtag,
    GrandfatheredTag,
    is_private_use_prefix,
)

logger = logging.getLogger(__name__)

MAX_EXTLANGS = 3
IRREGULAR_PREFIX = "i"


class _ParserState:
    """Remaining subtags of the tag being parsed, with one subtag of lookahead."""

    def __init__(self, tag: str) -> None:
        self.tag = tag
        self._subtags: List[str] = tag.split("-")
        self.next: Optional[str] = None
        self.advance()

    def advance(self) -> Optional[str]:
        """Consume the lookahead subtag and return it."""
        current = self.next
        self.next = self._subtags.pop(0) if self._subtags else None
        return current

    def consume_all(self) -> None:
        self._subtags = []
        self.next = None


def parse(tag: str, registry: Registry) -> TagParts:
    """
    Parse a language tag into its subtags.

    Parsing checks the RFC 5646 grammar only. Subtags keep the casing they
    were given, and registry membership is not required except to recognize
    grandfathered tags.

    :param tag: The language tag to be parsed (e.g. ``'en-Latn-US'``).
    :type tag: str
    :param registry: The registry used to recognize grandfathered tags and
                     check subtag grammar.
    :type registry: Registry
    :raises ParseError: If the tag is not well-formed.
    :return: The parsed parts.
    :rtype: TagParts
    """
    state = _ParserState(tag)

    grandfathered = _parse_grandfathered(state, registry)
    if grandfathered is not None:
        logger.debug("Parsed %r as grandfathered tag", tag)
        return TagParts(grandfathered=grandfathered)

    primary_language = _parse_primary_language(state, registry)
    extlangs = _parse_extlangs(state, registry)
    script = state.advance() if registry.scripts.is_well_formed(state.next) else None
    region = state.advance() if registry.regions.is_well_formed(state.next) else None

    variants = []
    while registry.variants.is_well_formed(state.next):
        variants.append(state.advance())

    extensions = _parse_extensions(state)
    private_use = _parse_private_use(state)

    if state.next is not None:
        err = f"{state.next}: unexpected subtag"
        raise ParseError(err, state.next)

    parts = TagParts(
        primary_language=primary_language,  # type: ignore[arg-type]
        extlangs=optional_tuple(extlangs),
        script=script,  # type: ignore[arg-type]
        region=region,  # type: ignore[arg-type]
        variants=optional_tuple(variants),
        extensions=optional_tuple(extensions),
        private_use=optional_tuple(private_use),
    )
    logger.debug("Parsed %r into %r", tag, parts)
    return parts


def _parse_grandfathered(state: _ParserState, registry: Registry) -> Optional[GrandfatheredTag]:
    if registry.grandfathered.try_get(state.tag) is not None:
        state.consume_all()
        return GrandfatheredTag(state.tag)
    if state.next is not None and state.next.lower() == IRREGULAR_PREFIX:
        err = f"{state.tag}: unrecognized grandfathered tag"
        raise ParseError(err, state.tag)
    return None


def _parse_primary_language(state: _ParserState, registry: Registry) -> Optional[str]:
    # primary language is required unless the tag is private use only
    if registry.languages.is_well_formed(state.next):
        return state.advance()
    if is_private_use_prefix(state.next):
        return None
    err = f"{state.tag}: no primary language subtag"
    raise ParseError(err, state.next)


def _parse_extlangs(state: _ParserState, registry: Registry) -> List[str]:
    extlangs: List[str] = []
    while registry.extlangs.is_well_formed(state.next):
        if len(extlangs) >= MAX_EXTLANGS:
            err = f"{state.next}: too many extlang subtags"
            raise ParseError(err, state.next)
        extlangs.append(state.advance())  # type: ignore[arg-type]
    return extlangs


def _parse_extensions(state: _ParserState) -> List[ExtensionValue]:
    extensions = []
    while state.next is not None and EXTENSION_SINGLETON.is_well_formed(state.next):
        singleton = state.advance()
        values = []
        while EXTENSION_SUBTAG.is_well_formed(state.next):
            values.append(state.advance())
        if (
            state.next is not None
            and not EXTENSION_SINGLETON.is_well_formed(state.next)
            and not is_private_use_prefix(state.next)
        ):
            err = f"{state.next}: malformed extension subtag"
            raise ParseError(err, state.next)
        if not values:
            err = f"{state.tag}: extension '{singleton}' must have at least one subtag."
            raise ParseError(err, singleton)
        extensions.append(
            ExtensionValue(ExtensionSingleton(singleton), ExtensionSubtag("-".join(values))),  # type: ignore[arg-type]
        )
    return extensions


def _parse_private_use(state: _ParserState) -> List[ExtendedLanguageRange]:
    private_use = []
    while is_private_use_prefix(state.next):
        state.advance()
        values = []
        while (
            state.next is not None
            and not is_private_use_prefix(state.next)
            and PRIVATE_USE_SUBTAG.is_well_formed(state.next)
        ):
            values.append(state.advance())
        if state.next is not None and not is_private_use_prefix(state.next):
            err = f"{state.next}: malformed private-use subtag"
            raise ParseError(err, state.next)
        if not values:
            err = f"{state.tag}: private-use tag must have at least one subtag."
            raise ParseError(err, state.tag)
        private_use.append(ExtendedLanguageRange("-".join(values)))  # type: ignore[arg-type]
    return private_use
