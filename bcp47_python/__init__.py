"""BCP-47 language tag parsing, validation, normalization and matching for Python."""

__all__ = [
    "LanguageTag",
    "LanguageComparer",
    "LanguageFilter",
    "FilteredLanguage",
    "MatchQuality",
    "Registry",
    "TagParts",
    "ExtensionValue",
    "TagValidity",
    "TagNormalization",
    "parse",
    "compare",
    "match",
    "filter_language_tags",
    "filter_language_tags_with_details",
    "load_registry",
    "download_registry",
    "utils",
    "exceptions",
]

import logging

from . import exceptions, utils
from .download_registry import download_registry
from .language_filter import (
    FilteredLanguage,
    LanguageFilter,
    filter_language_tags,
    filter_language_tags_with_details,
)
from .language_tag import LanguageTag
from .match import LanguageComparer, MatchQuality, compare, match
from .parser import parse
from .parts import ExtensionValue, TagParts
from .registry import Registry
from .status import TagNormalization, TagValidity
from .utils import load_registry

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())
