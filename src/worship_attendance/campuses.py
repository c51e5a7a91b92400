"""Campus registry.

Each campus maps to one attendance spreadsheet and, optionally, one tab in it
(``sheet_id`` is the tab's numeric gid; None means the first tab).
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType

from worship_attendance.google.exceptions import ConfigError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Campus:
    """A physical church location and its attendance spreadsheet."""

    id: str
    label: str
    spreadsheet_id: str
    sheet_id: int | None = None


DEFAULT_CAMPUSES = (
    Campus("san-leandro", "San Leandro", "1hFgXyLssTPX8rMjl5IzrhmFJGWBI1WlRAwCb8PLBvMI", 178023513),
    Campus("milpitas", "Milpitas", "1xyx-LMVYVdZQyX64w9YRzKrMNJ7oWR2tbmedlY81ZwQ"),
    Campus("peninsula", "Peninsula", "11Kuu6sG4UKMXdZBDFLoBbf_hCDU6en0eh8KVtII7MZg"),
    Campus("tracy", "Tracy", "14QNh7Y3YPLoeIkw-GYtEemLjc7pQuKN-86SVYxievI0", 2068867284),
    Campus("pleasanton", "Pleasanton", "1xsnUELFKcPxLFItnqqykv39oRLbpm_4VdOQ3o5LefXE"),
)


class CampusRegistry(Mapping):
    """Read-only mapping of campus id to Campus, in declaration order."""

    def __init__(self, campuses: tuple[Campus, ...] | list[Campus] = DEFAULT_CAMPUSES):
        by_id: dict[str, Campus] = {}
        for campus in campuses:
            if campus.id in by_id:
                raise ConfigError(f"Duplicate campus id: {campus.id}")
            by_id[campus.id] = campus
        self._campuses = MappingProxyType(by_id)

    def __getitem__(self, campus_id: str) -> Campus:
        return self._campuses[campus_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._campuses)

    def __len__(self) -> int:
        return len(self._campuses)

    def resolve(self, campus_id: str | None) -> Campus | None:
        """Look up a requested campus; unknown or missing ids resolve to None."""
        if not campus_id:
            return None
        return self._campuses.get(campus_id)

    @classmethod
    def from_file(cls, path: str | Path) -> CampusRegistry:
        """Load a registry from JSON.

        Format::

            {"tracy": {"label": "Tracy", "spreadsheet_id": "...", "sheet_id": 2068867284}}

        Raises:
            ConfigError: If the file is missing or malformed.
        """
        path = Path(path)
        try:
            with open(path) as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise ConfigError(f"Campus registry not found at {path}") from e
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid campus registry {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Invalid campus registry {path}: expected an object")

        campuses = []
        for campus_id, info in data.items():
            try:
                sheet_id = info.get("sheet_id")
                campuses.append(
                    Campus(
                        id=campus_id,
                        label=info["label"],
                        spreadsheet_id=info["spreadsheet_id"],
                        sheet_id=int(sheet_id) if sheet_id is not None else None,
                    )
                )
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                raise ConfigError(f"Invalid campus entry {campus_id!r}: {e}") from e

        logger.info(f"Loaded {len(campuses)} campuses from {path}")
        return cls(campuses)


def load_registry(path: Path | None = None) -> CampusRegistry:
    """Load the configured registry, or the built-in campuses."""
    if path is None:
        return CampusRegistry()
    return CampusRegistry.from_file(path)
