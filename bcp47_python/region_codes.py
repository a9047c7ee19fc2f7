"""UN M.49 region hierarchy used for macro-region matching."""

import csv
import io
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from .exceptions import RegistryError

logger = logging.getLogger(__name__)

GLOBAL_CODE = "001"

M49_COLUMNS = (
    "Global Code",
    "Global Name",
    "Region Code",
    "Region Name",
    "Sub-region Code",
    "Sub-region Name",
    "Intermediate Region Code",
    "Intermediate Region Name",
    "Country or Area",
    "M49 Code",
    "ISO-alpha2 Code",
    "ISO-alpha3 Code",
)


@dataclass(frozen=True)
class Area:
    """A region or a country/area in the UN M.49 hierarchy."""

    code: str
    """Three-digit M.49 code."""

    name: str
    """English name."""

    parent: Optional[str]
    """M.49 code of the enclosing region (None only for the world)."""

    iso_alpha2: Optional[str] = None
    """ISO 3166-1 alpha-2 code, for countries and areas."""

    iso_alpha3: Optional[str] = None
    """ISO 3166-1 alpha-3 code, for countries and areas."""


class RegionHierarchy:
    """
    Containment relation between UN M.49 regions and ISO 3166 countries.

    Codes may be given as three-digit M.49 codes or ISO alpha-2 codes in any
    casing.
    """

    _areas: Dict[str, Area]
    """Areas keyed by M.49 code."""

    _alpha2: Dict[str, str]
    """M.49 codes keyed by ISO alpha-2 code."""

    def __init__(self) -> None:
        self._areas = {GLOBAL_CODE: Area(GLOBAL_CODE, "World", None)}
        self._alpha2 = {}

    def __len__(self) -> int:
        return len(self._areas)

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and self._resolve(code) is not None

    def add(self, area: Area) -> None:
        """
        Add a region or area, or confirm that an identical one is present.

        :param area: The area to add.
        :type area: Area
        :raises RegistryError: If the code is already used by a different area,
                               or the parent is unknown.
        """
        if area.parent is not None and area.parent not in self._areas:
            err = f"{area.name}: unknown parent region {area.parent}"
            raise RegistryError(err, area.code)
        existing = self._areas.get(area.code)
        if existing is not None:
            if existing.parent != area.parent:
                err = f"{area.name}: region {existing.name} already exists with M.49 code {area.code}"
                raise RegistryError(err, area.code)
            return
        if area.iso_alpha2:
            if area.iso_alpha2 in self._alpha2:
                err = f"{area.name}: region already exists with ISO alpha-2 code {area.iso_alpha2}"
                raise RegistryError(err, area.iso_alpha2)
            self._alpha2[area.iso_alpha2] = area.code
        self._areas[area.code] = area

    def _resolve(self, code: str) -> Optional[str]:
        key = code.upper()
        if key in self._areas:
            return key
        return self._alpha2.get(key)

    def get(self, code: str) -> Optional[Area]:
        resolved = self._resolve(code)
        return self._areas[resolved] if resolved is not None else None

    def ancestors(self, code: str) -> List[str]:
        """
        Return the M.49 codes of every region enclosing ``code``, innermost first.

        :param code: M.49 or ISO alpha-2 code.
        :type code: str
        :return: Enclosing region codes, ending with ``'001'``; empty if the code
                 is unknown or is the world itself.
        :rtype: List[str]
        """
        resolved = self._resolve(code)
        chain: List[str] = []
        while resolved is not None:
            parent = self._areas[resolved].parent
            if parent is None:
                break
            chain.append(parent)
            resolved = parent
        return chain

    def contains(self, outer: str, inner: str) -> bool:
        """
        Determine whether region ``outer`` encloses ``inner``.

        :param outer: The candidate enclosing region.
        :type outer: str
        :param inner: The candidate enclosed region or country.
        :type inner: str
        :return: True if ``outer`` is a strict ancestor of ``inner``.
        :rtype: bool
        """
        resolved = self._resolve(outer)
        return resolved is not None and resolved in self.ancestors(inner)

    def is_related(self, r1: str, r2: str) -> bool:
        """True if either region encloses the other."""
        return self.contains(r1, r2) or self.contains(r2, r1)

    @classmethod
    def from_m49_csv(cls, text: str) -> "RegionHierarchy":
        """
        Build the hierarchy from the UN statistics division M.49 table.

        The table is semicolon separated with a header row naming at least the
        columns in ``M49_COLUMNS``. Empty intermediate or sub-region columns
        are skipped.

        :param text: Contents of the CSV file.
        :type text: str
        :raises RegistryError: If required columns are missing or rows conflict.
        :return: The populated hierarchy.
        :rtype: RegionHierarchy
        """
        reader = csv.DictReader(io.StringIO(text), delimiter=";")
        missing = [c for c in M49_COLUMNS if c not in (reader.fieldnames or [])]
        if missing:
            err = f"M.49 table is missing columns: {', '.join(missing)}"
            raise RegistryError(err)

        hierarchy = cls()
        for row in reader:
            parent = GLOBAL_CODE
            for code_column, name_column in (
                ("Region Code", "Region Name"),
                ("Sub-region Code", "Sub-region Name"),
                ("Intermediate Region Code", "Intermediate Region Name"),
            ):
                code = (row[code_column] or "").strip()
                if code:
                    code = code.zfill(3)
                    hierarchy.add(Area(code, row[name_column].strip(), parent))
                    parent = code
            hierarchy.add(
                Area(
                    code=row["M49 Code"].strip().zfill(3),
                    name=row["Country or Area"].strip(),
                    parent=parent,
                    iso_alpha2=(row["ISO-alpha2 Code"] or "").strip().upper() or None,
                    iso_alpha3=(row["ISO-alpha3 Code"] or "").strip().upper() or None,
                ),
            )
        logger.debug("Loaded %d M.49 regions and areas", len(hierarchy))
        return hierarchy
