"""Resolve charging stations to residents by apartment number."""

import logging
from typing import Any, Iterable, NamedTuple

logger = logging.getLogger(__name__)


class ApartmentMatch(NamedTuple):
    """Result of an apartment-number lookup.

    ``resident`` is None when nobody lives at the apartment. ``ambiguous`` is
    True when several residents share it; ``resident`` is then the first one
    in snapshot order and ``candidates`` lists all of them.
    """

    resident: Any | None
    ambiguous: bool = False
    candidates: tuple = ()


def normalize_apartment(apartment_number: Any) -> str:
    """Apartment numbers are compared as trimmed strings."""
    if apartment_number is None:
        return ""
    return str(apartment_number).strip()


class ApartmentIndex:
    """Lookup of residents by trimmed apartment number."""

    def __init__(self, residents_by_apartment: dict[str, list[Any]]):
        self._residents = residents_by_apartment

    @classmethod
    def from_residents(cls, residents: Iterable[Any]) -> "ApartmentIndex":
        index: dict[str, list[Any]] = {}
        for resident in residents:
            key = normalize_apartment(getattr(resident, "apartment_number", None))
            if not key:
                logger.warning(
                    "Resident id=%s has no apartment number, charging bills cannot be matched",
                    getattr(resident, "id", "?"),
                )
                continue
            index.setdefault(key, []).append(resident)
        return cls(index)

    def lookup(self, apartment_number: Any) -> ApartmentMatch:
        key = normalize_apartment(apartment_number)
        candidates = self._residents.get(key, [])
        if not candidates:
            return ApartmentMatch(resident=None)
        if len(candidates) > 1:
            logger.warning(
                "Apartment %r is shared by residents %s, attributing to id=%s",
                key,
                [getattr(r, "id", "?") for r in candidates],
                getattr(candidates[0], "id", "?"),
            )
            return ApartmentMatch(resident=candidates[0], ambiguous=True, candidates=tuple(candidates))
        return ApartmentMatch(resident=candidates[0], candidates=(candidates[0],))


__all__ = ["ApartmentIndex", "ApartmentMatch", "normalize_apartment"]
