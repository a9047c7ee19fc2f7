"""
Validity and normalization transforms over :class:`TagParts`.

Each transform is a pure function of the parts and the registry, declared
with the validity and normalization it guarantees. :func:`choose_transforms`
maps a requested ``(validity, normalization)`` pair to the chain of
transforms that reaches it.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Hashable, List, Optional, Sequence, Tuple, TypeVar

from .exceptions import NormalizationError, ParseError, PrefixError, ValidityError
from .parser import MAX_EXTLANGS, parse
from .parts import ExtensionValue, TagParts, optional_tuple, parts_to_string
from .registry import Registry, SubtagScope
from .status import TagNormalization, TagValidity, most_normalized, most_valid
from .subtags import EXTENSION_SUBTAG, PRIVATE_USE_SUBTAG, SubtagSyntax

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_VALID_EXTLANGS = 1


def _map_optional(values: Optional[Sequence[T]], fn: Callable[[T], T]) -> Optional[Tuple[T, ...]]:
    if values is None:
        return None
    return optional_tuple(fn(v) for v in values)


def _syntax_to_canonical(syntax: SubtagSyntax, value: str) -> str:
    canonical = syntax.to_canonical(value)
    if canonical is None:
        err = f'"{value}": malformed {syntax.description}'
        raise ParseError(err, value)
    return canonical


def _syntax_verify_well_formed(syntax: SubtagSyntax, value: str) -> str:
    if not syntax.is_well_formed(value):
        err = f'"{value}": malformed {syntax.description}'
        raise ParseError(err, value)
    return value


def _verify_unique(description: str, items: Optional[Sequence[T]], key: Callable[[T], Hashable]) -> None:
    """
    Verify that no two items share a key.

    :raises ValidityError: On the first duplicate key.
    """
    seen = set()
    for item in items or ():
        k = key(item)
        if k in seen:
            err = f"{k}: duplicate {description}"
            raise ValidityError(err, str(k))
        seen.add(k)


def _check_shape(parts: TagParts) -> None:
    """
    Verify that the parts describe exactly one kind of tag: a grandfathered
    tag, a tag with a primary language, or a private-use-only tag.

    :raises ParseError: If the parts mix or lack these shapes.
    """
    if parts.grandfathered is not None:
        others = parts.replace(grandfathered=None)
        if others != TagParts():
            err = f"{parts.grandfathered}: grandfathered tag cannot have other subtags"
            raise ParseError(err, parts.grandfathered)
        return
    if parts.primary_language is not None:
        return
    if parts.private_use is not None and parts.replace(private_use=None) == TagParts():
        return
    err = f"{parts_to_string(parts)}: missing primary language subtag"
    raise ParseError(err, parts_to_string(parts))


def _basic_post_validation(parts: TagParts) -> TagParts:
    _check_shape(parts)
    if parts.extlangs is not None and len(parts.extlangs) > MAX_EXTLANGS:
        err = f"{parts_to_string(parts)}: too many extlang subtags"
        raise ParseError(err, parts.extlangs[MAX_EXTLANGS])
    return parts


def _valid_post_validation(parts: TagParts) -> TagParts:
    _basic_post_validation(parts)
    if parts.extlangs is not None and len(parts.extlangs) > MAX_VALID_EXTLANGS:
        extlangs = "-".join(parts.extlangs)
        err = f"{extlangs}: too many extlangs"
        raise ValidityError(err, extlangs)
    return parts


def _map_extensions(
    parts: TagParts,
    singleton_fn: Callable[[str], str],
    value_fn: Callable[[str], str],
) -> Optional[Tuple[ExtensionValue, ...]]:
    return _map_optional(
        parts.extensions,
        lambda e: ExtensionValue(singleton_fn(e.singleton), value_fn(e.value)),  # type: ignore[arg-type]
    )


def _apply_to_fields(
    parts: TagParts,
    registry: Registry,
    fn: Callable[[SubtagScope, str], str],
    value_fn: Callable[[SubtagSyntax, str], str],
) -> TagParts:
    """Run ``fn`` over every registered subtag and ``value_fn`` over free-form ones."""

    def opt(scope: SubtagScope, value: Optional[str]) -> Optional[str]:
        return fn(scope, value) if value is not None else None

    return TagParts(
        primary_language=opt(registry.languages, parts.primary_language),  # type: ignore[arg-type]
        extlangs=_map_optional(parts.extlangs, lambda e: fn(registry.extlangs, e)),  # type: ignore[arg-type]
        script=opt(registry.scripts, parts.script),  # type: ignore[arg-type]
        region=opt(registry.regions, parts.region),  # type: ignore[arg-type]
        variants=_map_optional(parts.variants, lambda v: fn(registry.variants, v)),  # type: ignore[arg-type]
        extensions=_map_extensions(
            parts,
            lambda s: fn(registry.extensions, s),
            lambda v: value_fn(EXTENSION_SUBTAG, v),
        ),
        private_use=_map_optional(parts.private_use, lambda p: value_fn(PRIVATE_USE_SUBTAG, p)),  # type: ignore[arg-type]
        grandfathered=opt(registry.grandfathered, parts.grandfathered),  # type: ignore[arg-type]
    )


def _verify_unique_variants_and_extensions(parts: TagParts) -> None:
    _verify_unique("variant", parts.variants, lambda v: v.lower())
    _verify_unique("extension", parts.extensions, lambda e: e.singleton.lower())


# Validity lattice


def validate_well_formed(parts: TagParts, registry: Registry) -> TagParts:
    """
    Check that every subtag conforms to the grammar for its kind.

    Registry membership is not required. Casing is left unchanged.

    :param parts: The parts to check.
    :type parts: TagParts
    :param registry: Registry providing the per-kind grammar.
    :type registry: Registry
    :raises ParseError: If any subtag is malformed or the parts have no valid shape.
    :return: The unchanged parts.
    :rtype: TagParts
    """
    checked = _apply_to_fields(
        parts,
        registry,
        lambda scope, value: scope.verify_is_well_formed(value),
        _syntax_verify_well_formed,
    )
    return _basic_post_validation(checked)


def validate(parts: TagParts, registry: Registry) -> TagParts:
    """
    Check that every subtag is registered, that there is at most one extlang
    and that no variant or extension singleton repeats.

    :param parts: The parts to check.
    :type parts: TagParts
    :param registry: The registry to check membership against.
    :type registry: Registry
    :raises ParseError: If any subtag is malformed.
    :raises ValidityError: If the parts are well-formed but not valid.
    :return: The unchanged parts.
    :rtype: TagParts
    """
    checked = _apply_to_fields(
        parts,
        registry,
        lambda scope, value: scope.verify_is_valid(value),
        _syntax_verify_well_formed,
    )
    _verify_unique_variants_and_extensions(checked)
    return _valid_post_validation(checked)


def _verify_extlang_prefix(parts: TagParts, registry: Registry) -> None:
    if parts.extlangs is None:
        return
    if parts.primary_language is None:
        err = "missing primary language for extlang prefix validation"
        raise PrefixError(err, parts.extlangs[0])
    prefix = registry.languages.to_canonical(parts.primary_language)
    for extlang in parts.extlangs:
        entry = registry.extlangs.get(extlang)
        expected = entry.prefix[0] if entry.prefix else None
        if prefix != expected:
            err = f'invalid prefix "{prefix}" for extlang subtag {extlang} (expected "{expected}")'
            raise PrefixError(err, extlang)


def _verify_variant_prefixes(parts: TagParts, registry: Registry) -> None:
    if parts.variants is None:
        return
    base = TagParts(
        primary_language=parts.primary_language,
        extlangs=parts.extlangs,
        script=parts.script,
        region=parts.region,
    )
    prefix = parts_to_string(normalize_canonical(base, registry))
    for variant in parts.variants:
        entry = registry.variants.get(variant)
        # variants registered without prefixes may follow anything
        if entry.prefix and prefix not in entry.prefix:
            expected = ", ".join(entry.prefix)
            err = f'invalid prefix "{prefix}" for variant subtag {variant} (expected "({expected})")'
            raise PrefixError(err, variant)
        prefix = f"{prefix}-{registry.variants.to_canonical(variant)}"


def validate_strictly(parts: TagParts, registry: Registry) -> TagParts:
    """
    Check that the parts are valid and that every extlang and variant
    appears after one of its registered prefixes.

    :param parts: The parts to check.
    :type parts: TagParts
    :param registry: The registry to check membership and prefixes against.
    :type registry: Registry
    :raises ParseError: If any subtag is malformed.
    :raises ValidityError: If the parts are not valid.
    :raises PrefixError: If an extlang or variant prefix is not satisfied.
    :return: The unchanged parts.
    :rtype: TagParts
    """
    checked = validate(parts, registry)
    _verify_extlang_prefix(checked, registry)
    _verify_variant_prefixes(checked, registry)
    return checked


# Normalization


def normalize_canonical(parts: TagParts, registry: Registry) -> TagParts:
    """
    Convert every subtag to the canonical casing for its kind.

    :param parts: The parts to normalize.
    :type parts: TagParts
    :param registry: Registry providing the per-kind casing rules.
    :type registry: Registry
    :raises ParseError: If any subtag is malformed.
    :return: The canonically cased parts.
    :rtype: TagParts
    """
    canonical = _apply_to_fields(
        parts,
        registry,
        lambda scope, value: scope.to_canonical(value),
        _syntax_to_canonical,
    )
    return _basic_post_validation(canonical)


def _valid_canonical_fields(parts: TagParts, registry: Registry) -> TagParts:
    canonical = _apply_to_fields(
        parts,
        registry,
        lambda scope, value: scope.to_valid_canonical(value),
        _syntax_to_canonical,
    )
    _verify_unique_variants_and_extensions(canonical)
    return _valid_post_validation(canonical)


def _replacement_parts(kind: str, tag: str, preferred_value: str, registry: Registry) -> TagParts:
    """Parse the preferred value of a grandfathered or redundant tag."""
    try:
        replacement = parse(preferred_value, registry)
    except ParseError as e:
        err = f'{kind} tag "{tag}" has invalid preferred value "{preferred_value}": {e}'
        raise NormalizationError(err, tag) from e
    if replacement.grandfathered is not None:
        err = f"preferred value {preferred_value} of {kind} tag {tag} is also grandfathered"
        raise NormalizationError(err, tag)
    logger.debug("Replacing %s tag %s with %s", kind, tag, preferred_value)
    return replacement


def _redundant_preferred_value(parts: TagParts, registry: Registry) -> Optional[str]:
    entry = registry.redundant.try_get_canonical(parts_to_string(parts))
    return entry.preferred_value if entry is not None else None


def normalize_valid_canonical(parts: TagParts, registry: Registry) -> TagParts:
    """
    Convert every subtag to canonical casing, requiring that each is registered.

    A tag that matches a registered redundant tag with a preferred value as a
    whole is replaced by that preferred value (so ``zh-cmn-Hans`` becomes
    ``cmn-Hans``).

    :param parts: The parts to normalize.
    :type parts: TagParts
    :param registry: The registry to check membership against.
    :type registry: Registry
    :raises ParseError: If any subtag is malformed.
    :raises ValidityError: If the parts are not valid.
    :raises NormalizationError: If a redundant tag has an unusable preferred value.
    :return: The normalized parts.
    :rtype: TagParts
    """
    canonical = _valid_canonical_fields(parts, registry)
    preferred_value = _redundant_preferred_value(canonical, registry)
    if preferred_value is not None:
        replacement = _replacement_parts("redundant", parts_to_string(canonical), preferred_value, registry)
        return _valid_canonical_fields(replacement, registry)
    return canonical


def _preferred_or_canonical(scope: SubtagScope, value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    entry = scope.get(value)
    return entry.preferred_value or scope.to_canonical(value)


def normalize_preferred(parts: TagParts, registry: Registry) -> TagParts:
    """
    Convert the parts to the registry's preferred form.

    In addition to canonical casing this replaces deprecated language,
    extlang, region and variant subtags with their preferred values, drops a
    script that matches the language's ``Suppress-Script``, and replaces
    grandfathered and redundant tags that have a preferred value.

    :param parts: The parts to normalize.
    :type parts: TagParts
    :param registry: The registry to normalize against.
    :type registry: Registry
    :raises ParseError: If any subtag is malformed.
    :raises ValidityError: If the parts are not valid.
    :raises NormalizationError: If a grandfathered or redundant tag has an
                                unusable preferred value.
    :return: The normalized parts.
    :rtype: TagParts
    """
    canonical = _valid_canonical_fields(parts, registry)

    if canonical.grandfathered is not None:
        entry = registry.grandfathered.get(canonical.grandfathered)
        if entry.preferred_value is None:
            return canonical
        replacement = _replacement_parts("grandfathered", canonical.grandfathered, entry.preferred_value, registry)
        return normalize_preferred(replacement, registry)

    preferred_value = _redundant_preferred_value(canonical, registry)
    if preferred_value is not None:
        replacement = _replacement_parts("redundant", parts_to_string(canonical), preferred_value, registry)
        return normalize_preferred(replacement, registry)

    language = canonical.primary_language
    extlangs = canonical.extlangs
    if extlangs is not None:
        # an extlang with a preferred value replaces its prefix language
        extlang_entry = registry.extlangs.get(extlangs[0])
        if extlang_entry.preferred_value is not None and language in extlang_entry.prefix:
            logger.debug("Replacing %s-%s with %s", language, extlangs[0], extlang_entry.preferred_value)
            language = extlang_entry.preferred_value  # type: ignore[assignment]
            extlangs = None
    language = _preferred_or_canonical(registry.languages, language)  # type: ignore[assignment]

    script = canonical.script
    if language is not None and script is not None:
        language_entry = registry.languages.get(language)
        if language_entry.suppress_script == script:
            script = None

    preferred = canonical.replace(
        primary_language=language,
        extlangs=extlangs,
        script=script,
        region=_preferred_or_canonical(registry.regions, canonical.region),
        variants=_map_optional(
            canonical.variants,
            lambda v: _preferred_or_canonical(registry.variants, v),  # type: ignore[arg-type, return-value]
        ),
    )
    _verify_unique_variants_and_extensions(preferred)
    return _valid_post_validation(preferred)


@dataclass(frozen=True)
class TagTransform:
    """
    A named transform together with the validity and normalization its
    output is guaranteed to have.
    """

    name: str
    validity: TagValidity
    normalization: TagNormalization
    process: Callable[[TagParts, Registry], TagParts]

    def __call__(self, parts: TagParts, registry: Registry) -> TagParts:
        return self.process(parts, registry)


WELL_FORMED = TagTransform("well-formed", TagValidity.WELL_FORMED, TagNormalization.UNKNOWN, validate_well_formed)
VALID = TagTransform("valid", TagValidity.VALID, TagNormalization.UNKNOWN, validate)
STRICTLY_VALID = TagTransform("strictly-valid", TagValidity.STRICTLY_VALID, TagNormalization.UNKNOWN, validate_strictly)
CANONICAL = TagTransform("canonical", TagValidity.WELL_FORMED, TagNormalization.CANONICAL, normalize_canonical)
VALID_CANONICAL = TagTransform(
    "valid-canonical",
    TagValidity.VALID,
    TagNormalization.CANONICAL,
    normalize_valid_canonical,
)
PREFERRED = TagTransform("preferred", TagValidity.VALID, TagNormalization.PREFERRED, normalize_preferred)

_WELL_FORMED_CHAINS: Dict[TagNormalization, Tuple[TagTransform, ...]] = {
    TagNormalization.UNKNOWN: (WELL_FORMED,),
    TagNormalization.NONE: (WELL_FORMED,),
    TagNormalization.CANONICAL: (CANONICAL,),
    TagNormalization.PREFERRED: (PREFERRED,),
}

TRANSFORMS: Dict[TagValidity, Dict[TagNormalization, Tuple[TagTransform, ...]]] = {
    TagValidity.UNKNOWN: _WELL_FORMED_CHAINS,
    TagValidity.WELL_FORMED: _WELL_FORMED_CHAINS,
    TagValidity.VALID: {
        TagNormalization.UNKNOWN: (VALID,),
        TagNormalization.NONE: (VALID,),
        TagNormalization.CANONICAL: (VALID_CANONICAL,),
        TagNormalization.PREFERRED: (PREFERRED,),
    },
    TagValidity.STRICTLY_VALID: {
        TagNormalization.UNKNOWN: (STRICTLY_VALID,),
        TagNormalization.NONE: (STRICTLY_VALID,),
        TagNormalization.CANONICAL: (STRICTLY_VALID, CANONICAL),
        TagNormalization.PREFERRED: (STRICTLY_VALID, PREFERRED),
    },
}


def choose_transforms(validity: TagValidity, normalization: TagNormalization) -> Tuple[TagTransform, ...]:
    """
    Select the chain of transforms that produces the requested validity and
    normalization.

    :param validity: The requested validity.
    :type validity: TagValidity
    :param normalization: The requested normalization.
    :type normalization: TagNormalization
    :return: The transforms to apply, in order.
    :rtype: Tuple[TagTransform, ...]
    """
    return TRANSFORMS[validity][normalization]


def apply_transforms(
    parts: TagParts,
    registry: Registry,
    validity: TagValidity,
    normalization: TagNormalization,
    transforms: Sequence[TagTransform],
) -> Tuple[TagParts, TagValidity, TagNormalization]:
    """
    Run a chain of transforms, combining the declared status of each step
    with the requested status.

    :param parts: The parts to transform.
    :type parts: TagParts
    :param registry: The registry passed to every transform.
    :type registry: Registry
    :param validity: The validity already known for the result.
    :type validity: TagValidity
    :param normalization: The normalization already known for the result.
    :type normalization: TagNormalization
    :param transforms: The transforms to apply, in order.
    :type transforms: Sequence[TagTransform]
    :raises Bcp47Error: If any transform fails; no partial result is returned.
    :return: The transformed parts with the resulting validity and normalization.
    :rtype: Tuple[TagParts, TagValidity, TagNormalization]
    """
    applied: List[str] = []
    for transform in transforms:
        parts = transform(parts, registry)
        validity = most_valid(validity, transform.validity)
        normalization = most_normalized(normalization, transform.normalization)
        applied.append(transform.name)
    logger.debug("Applied %s: %s (%s, %s)", applied, parts, validity, normalization)
    return parts, validity, normalization
