"""Schemas for the option dictionaries accepted by tag creation, matching and filtering."""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Optional, Tuple, Union

from .status import TagNormalization, TagValidity

logger = logging.getLogger(__name__)

AVAILABLE_LANGUAGE = "available_language"
DESIRED_LANGUAGE = "desired_language"
USE_CHOICES = (AVAILABLE_LANGUAGE, DESIRED_LANGUAGE)

FILTER_PRIMARY_LANGUAGE = "primary_language"
FILTER_NONE = "none"
FILTER_CHOICES = (FILTER_PRIMARY_LANGUAGE, FILTER_NONE)


@dataclass(frozen=True)
class OptionSpec:
    """
    Specification for an option.

    This class defines the structure and behavior of an option, including its
    type constraints, the conversion applied to accepted values, and optional
    validation.

    This class is frozen (immutable) to ensure option specifications remain
    constant throughout the application lifecycle.
    """

    py_types: Union[type, Tuple[type, ...]]
    """The Python type(s) that this option accepts."""

    encoder: Callable[[Any], Any]
    """A callable that converts the option value to the form used internally."""

    validator: Optional[Callable[[Any], None]] = None
    """An optional validator function for the option value."""


def _choice_validator(choices: Iterable[str]) -> Callable[[Any], None]:
    """
    Build a validator accepting only the given values.

    :param choices: The accepted values.
    :type choices: Iterable[str]
    :return: A validator raising ``ValueError`` for any other value.
    :rtype: Callable[[Any], None]
    """
    allowed = tuple(choices)

    def validator(v: Any) -> None:
        if v not in allowed:
            err = f"invalid value {v!r}, expected one of: {', '.join(allowed)}"
            raise ValueError(err)

    return validator


def _non_empty_validator(v: Any) -> None:
    if not v:
        err = "value must not be empty"
        raise ValueError(err)


_VALIDITY = OptionSpec((str, int), TagValidity.coerce)
_NORMALIZATION = OptionSpec((str, int), TagNormalization.coerce)

CREATE_SCHEMA: Dict[str, OptionSpec] = {
    "validity": _VALIDITY,
    "normalization": _NORMALIZATION,
}

COMPARE_SCHEMA: Dict[str, OptionSpec] = {
    "normalization": _NORMALIZATION,
}

FILTER_SCHEMA: Dict[str, OptionSpec] = {
    "use": OptionSpec(str, str, _choice_validator(USE_CHOICES)),
    "filter": OptionSpec(str, str, _choice_validator(FILTER_CHOICES)),
    "ultimate_fallback": OptionSpec(str, str, _non_empty_validator),
}


def encode_options(options: Dict[str, Any], schema: Dict[str, OptionSpec]) -> Dict[str, Any]:
    """
    Validate an option dictionary against a schema and convert its values.

    Options whose value is ``None`` are treated as absent and dropped.

    :param options: A dictionary of option names and values.
    :type options: Dict[str, Any]
    :param schema: The schema the options must conform to.
    :type schema: Dict[str, OptionSpec]
    :return: A dictionary with the same keys and converted values.
    :rtype: Dict[str, Any]
    :raises ValueError: If a key is not found in the schema, or a value is
                        not one of the accepted values.
    :raises TypeError: If a value's type does not match the expected type(s)
                       defined in the schema.
    """
    logger.debug("Encoding options with keys: %s", list(options.keys()))
    encoded: Dict[str, Any] = {}
    for key, value in options.items():
        spec = schema.get(key)
        if spec is None:
            err = f"unexpected option: {key}"
            raise ValueError(err)
        if value is None:
            continue
        if not isinstance(value, spec.py_types):
            err = f"invalid type for {key}: {type(value).__name__}"
            raise TypeError(err)
        if spec.validator is not None:
            spec.validator(value)
        encoded[key] = spec.encoder(value)
    return encoded
