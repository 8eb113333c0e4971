"""
Override Overlay Store — user edits layered over synthesized resources.

Holds two kinds of entries, both keyed by the resource key string:
  - a partial OverridePatch for a synthesized resource
  - a complete SynthesizedResource for a user-created resource

Synthesized resources are never touched; compose() returns a new value with
the patch applied, so edits survive every resynthesis.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from systems_hub.models.resource import OverridePatch, SynthesizedResource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OverrideEntry:
    patch: OverridePatch | None = None
    record: SynthesizedResource | None = None

    @property
    def is_custom(self) -> bool:
        return self.record is not None


class OverrideStore:
    """Mapping of resource key → OverrideEntry. Not thread-safe on its own."""

    def __init__(self):
        self._entries: dict[str, OverrideEntry] = {}

    def __contains__(self, key) -> bool:
        return str(key) in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def set_override(self, key, patch: OverridePatch) -> None:
        """Merge ``patch`` into the key's entry. Other keys are untouched."""
        key = str(key)
        entry = self._entries.get(key)
        if entry is not None and entry.is_custom:
            self._entries[key] = OverrideEntry(record=patch.apply(entry.record))
        else:
            base = entry.patch if entry is not None and entry.patch else OverridePatch()
            self._entries[key] = OverrideEntry(patch=base.merged(patch))
        logger.debug("Override set for %s: %s", key, patch.to_dict())

    def put_record(self, key, record: SynthesizedResource) -> None:
        key = str(key)
        self._entries[key] = OverrideEntry(record=record)
        logger.debug("Custom record stored for %s", key)

    def clear_override(self, key) -> bool:
        """Remove the key's entry entirely. Returns False if there was none."""
        removed = self._entries.pop(str(key), None)
        if removed is not None:
            logger.debug("Override cleared for %s", key)
        return removed is not None

    def get(self, key) -> OverrideEntry | None:
        return self._entries.get(str(key))

    def keys(self) -> list[str]:
        return list(self._entries)

    def custom_records(self) -> list[SynthesizedResource]:
        return [e.record for e in self._entries.values() if e.is_custom]

    def compose(self, key, synthesized: SynthesizedResource | None) -> SynthesizedResource | None:
        """Synthesized value with the overlay on top.

        Falls back to the stored complete record when nothing was
        synthesized for ``key``; returns None when there is neither.
        """
        entry = self._entries.get(str(key))
        if synthesized is None:
            return entry.record if entry is not None else None
        if entry is None:
            return synthesized
        if entry.is_custom:
            # Custom keys never collide with synthesized ones.
            return synthesized
        return entry.patch.apply(synthesized)

    def clear(self) -> None:
        self._entries.clear()
