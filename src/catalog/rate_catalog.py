"""
Rate catalog: the fixed lookup of role name -> base hourly rate.

The rate card ships as ``rate_card.yaml`` beside this module. Loading never
raises to the caller: a missing or malformed card yields an empty catalog
carrying a warning, and rates are then entered by hand.
"""

import logging
import os
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

import yaml

from src.common.errors import CatalogLoadError
from src.common.numbers import safe_number

logger = logging.getLogger(__name__)

DEFAULT_RATE_CARD_PATH = Path(__file__).parent / "rate_card.yaml"


@dataclass(frozen=True)
class RateCatalogEntry:
    """A single role on the rate card."""

    role_name: str
    base_hourly_rate: Decimal


class RateCatalog:
    """Immutable, ordered collection of rate card entries."""

    def __init__(self, entries: Tuple[RateCatalogEntry, ...] = (), warning: Optional[str] = None):
        self._entries = tuple(entries)
        self._by_name: Dict[str, RateCatalogEntry] = {}
        for entry in self._entries:
            # First occurrence wins so lookups match the picker order
            self._by_name.setdefault(entry.role_name, entry)
        self.warning = warning

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[RateCatalogEntry]:
        return iter(self._entries)

    def __contains__(self, role_name: object) -> bool:
        return role_name in self._by_name

    @property
    def available(self) -> bool:
        return bool(self._entries)

    @property
    def role_names(self) -> List[str]:
        return [entry.role_name for entry in self._entries]

    def lookup_rate(self, role_name: str) -> Optional[Decimal]:
        """Return the base hourly rate for a role, or None when the role is unknown."""
        entry = self._by_name.get(role_name or "")
        return entry.base_hourly_rate if entry else None

    @classmethod
    def from_records(cls, records: List[dict]) -> "RateCatalog":
        """Build a catalog from ``[{"name": ..., "rate": ...}]`` records."""
        entries = []
        for index, record in enumerate(records):
            if not isinstance(record, dict):
                raise CatalogLoadError(f"Rate card entry {index} is not a mapping", collaborator="rate_card")
            name = str(record.get("name") or "").strip()
            if not name:
                raise CatalogLoadError(f"Rate card entry {index} has no name", collaborator="rate_card")
            rate = safe_number(record.get("rate"))
            if rate <= 0:
                raise CatalogLoadError(
                    f"Rate card entry '{name}' has no positive rate", collaborator="rate_card"
                )
            entries.append(RateCatalogEntry(role_name=name, base_hourly_rate=rate))
        return cls(tuple(entries))

    @classmethod
    def from_yaml(cls, path: os.PathLike) -> "RateCatalog":
        """
        Read a rate card file.

        Raises:
            CatalogLoadError: If the file is missing, unreadable or malformed
        """
        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise CatalogLoadError(
                f"Could not read rate card at {path}: {e}", collaborator="rate_card", original_error=e
            ) from e

        if not isinstance(data, dict) or not isinstance(data.get("roles"), list):
            raise CatalogLoadError(f"Rate card at {path} has no 'roles' list", collaborator="rate_card")
        return cls.from_records(data["roles"])


def load_rate_catalog(path: Optional[os.PathLike] = None) -> RateCatalog:
    """
    Load the rate card, degrading to an empty catalog on failure.

    Args:
        path: Rate card file; defaults to the packaged card

    Returns:
        RateCatalog; ``warning`` is set when the card could not be loaded
    """
    card_path = Path(path) if path else DEFAULT_RATE_CARD_PATH
    try:
        catalog = RateCatalog.from_yaml(card_path)
    except CatalogLoadError as e:
        logger.warning(f"{e} - no roles available, rates must be entered manually")
        return RateCatalog(warning=CatalogLoadError.user_message)

    logger.info(f"Loaded {len(catalog)} roles from rate card {card_path}")
    return catalog
