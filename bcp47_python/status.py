"""Validity and normalization levels of a language tag."""

from enum import IntEnum
from typing import Union


class _RankedStatus(IntEnum):
    """Shared behavior for the two status lattices."""

    @property
    def label(self) -> str:
        """
        The RFC-style name of the level (e.g. ``'well-formed'``).

        :return: The label of this level.
        :rtype: str
        """
        return self.name.lower().replace("_", "-")

    @classmethod
    def coerce(cls, value: Union[str, int, "_RankedStatus"]) -> "_RankedStatus":
        """
        Convert a label, rank or member into a member of this lattice.

        :param value: A label such as ``'strictly-valid'``, a member or its rank.
        :type value: Union[str, int, _RankedStatus]
        :raises ValueError: If the value does not name a level of this lattice.
        :return: The matching member.
        :rtype: _RankedStatus
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().upper().replace("-", "_")
            try:
                return cls[key]
            except KeyError as e:
                err = f"unknown {cls.__name__} {value!r}"
                raise ValueError(err) from e
        return cls(value)

    def __str__(self) -> str:
        return self.label


class TagValidity(_RankedStatus):
    UNKNOWN = 0
    WELL_FORMED = 500
    VALID = 900
    STRICTLY_VALID = 1000


class TagNormalization(_RankedStatus):
    UNKNOWN = 0
    NONE = 100
    CANONICAL = 900
    PREFERRED = 1000


def most_valid(v1: TagValidity, v2: TagValidity) -> TagValidity:
    """
    Return the more thoroughly validated of two validity levels.

    :param v1: The first validity level.
    :type v1: TagValidity
    :param v2: The second validity level.
    :type v2: TagValidity
    :return: The higher of the two levels.
    :rtype: TagValidity
    """
    return v1 if v1 >= v2 else v2


def most_normalized(n1: TagNormalization, n2: TagNormalization) -> TagNormalization:
    """
    Return the more thoroughly normalized of two normalization levels.

    :param n1: The first normalization level.
    :type n1: TagNormalization
    :param n2: The second normalization level.
    :type n2: TagNormalization
    :return: The higher of the two levels.
    :rtype: TagNormalization
    """
    return n1 if n1 >= n2 else n2
