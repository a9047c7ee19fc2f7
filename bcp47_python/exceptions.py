from typing import Optional

from .status import TagValidity


class Bcp47Error(Exception):
    """
    Exception raised for errors in the bcp47_python library.
    This is a generic exception that can be used to indicate various types of
    errors encountered while parsing, validating or normalizing language tags.

    :param message: A human-readable description of the problem.
    :type message: str
    :param subtag: The offending subtag or tag, if known.
    :type subtag: Optional[str]
    :param tier: The validity tier at which the tag first failed, if known.
    :type tier: Optional[TagValidity]
    """

    subtag: Optional[str]
    """The subtag (or whole tag) that caused the error."""

    tier: Optional[TagValidity]
    """The validity tier at which the error was detected."""

    def __init__(
        self,
        message: str,
        subtag: Optional[str] = None,
        tier: Optional[TagValidity] = None,
    ) -> None:
        super().__init__(message)
        self.subtag = subtag
        self.tier = tier


class ParseError(Bcp47Error):
    """
    Exception raised when a tag or subtag does not conform to the RFC 5646 grammar.
    This covers a missing primary language, unexpected trailing subtags, malformed
    extension or private-use subtags, too many extlang subtags and unrecognized
    grandfathered tags.
    """

    def __init__(self, message: str, subtag: Optional[str] = None) -> None:
        super().__init__(message, subtag, TagValidity.WELL_FORMED)


class ValidityError(Bcp47Error):
    """
    Exception raised when a well-formed tag is not valid.
    This is used for subtags which are not registered with IANA, duplicate
    variant or extension subtags, and more than one extlang subtag.
    """

    def __init__(
        self,
        message: str,
        subtag: Optional[str] = None,
        tier: TagValidity = TagValidity.VALID,
    ) -> None:
        super().__init__(message, subtag, tier)


class PrefixError(ValidityError):
    """
    Exception raised when a valid tag is not strictly valid because an extlang
    or variant subtag appears without one of its registered prefixes.
    """

    def __init__(self, message: str, subtag: Optional[str] = None) -> None:
        super().__init__(message, subtag, TagValidity.STRICTLY_VALID)


class NormalizationError(Bcp47Error):
    """
    Exception raised when the registry describes an impossible normalization,
    such as a grandfathered tag whose preferred value is itself grandfathered.
    """

    pass


class RegistryError(Bcp47Error):
    """
    Exception raised for malformed registry data, either in the IANA record-jar
    files or in the UN M.49 region table.
    """

    pass


class PathError(Bcp47Error):
    """
    Exception raised for errors in the file paths used by bcp47_python.
    This error is raised when a registry file cannot be found locally or at
    the download URL, or when the cache path is not a usable directory.
    """

    pass
