"""
Source Catalog — the client and project records synthesis runs over.

The records are owned by the clients/projects collaborator; this hub only
holds the latest copy it was handed and replaces it wholesale.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from systems_hub.models.source import Client, Project, SourceSnapshot

logger = logging.getLogger(__name__)


class SourceCatalogError(Exception):
    """Source payload could not be read."""

    def __init__(self, message, status_code=400):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class SourceCatalog:
    def __init__(self, snapshot: SourceSnapshot | None = None):
        self._snapshot = snapshot or SourceSnapshot()
        self._version = 0

    @property
    def clients(self) -> tuple[Client, ...]:
        return self._snapshot.clients

    @property
    def projects(self) -> tuple[Project, ...]:
        return self._snapshot.projects

    @property
    def version(self) -> int:
        """Bumped on every replace; lets callers tell stale snapshots apart."""
        return self._version

    def replace(self, snapshot: SourceSnapshot) -> None:
        self._snapshot = snapshot
        self._version += 1
        logger.info("Source records replaced: %d clients, %d projects (v%d)",
                    len(snapshot.clients), len(snapshot.projects), self._version)

    def replace_from_dict(self, data: dict) -> SourceSnapshot:
        if not isinstance(data, dict):
            raise SourceCatalogError("Source payload must be an object with 'clients' and 'projects'")
        snapshot = SourceSnapshot.from_dict(data)
        self.replace(snapshot)
        return snapshot

    def load_file(self, path: str | Path) -> SourceSnapshot:
        """Replace the catalog from a JSON file of ``{clients, projects}``."""
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8-sig"))
        except FileNotFoundError as exc:
            raise SourceCatalogError(f"Source file not found: {path}", status_code=404) from exc
        except json.JSONDecodeError as exc:
            raise SourceCatalogError(f"Source file is not valid JSON: {exc.msg}") from exc
        return self.replace_from_dict(data)

    def to_dict(self) -> dict:
        return self._snapshot.to_dict()
