"""
SolutionsHub — composition root for the Systems Hub.

Owns the source catalog, the override overlay store and the ROI registry,
and is the only place they are wired together. Blueprints and the CLI talk
to one SolutionsHub per Flask app (``app.extensions["solutions_hub"]``).

Every read-modify-write runs under one re-entrant lock, so under a threaded
WSGI server each request's update completes before the next one begins.

Usage:
    hub = SolutionsHub(SynthesisContext(account_type="agency"))
    hub.replace_sources({"clients": [...], "projects": [...]})
    hub.resources(status="active")
    hub.manual_roi_update("tool-t1", {...})
    hub.import_roi(csv_text)
"""

from __future__ import annotations

import logging
import threading
import uuid
from typing import Callable

from systems_hub.core.exceptions import ConflictError, NotFoundError, ValidationError
from systems_hub.models.resource import (
    OverridePatch,
    ResourceKind,
    SynthesizedResource,
    resource_from_patch,
    to_key,
)
from systems_hub.models.roi import RoiMetricRecord, RoiUpdate
from systems_hub.services import roi_import_service
from systems_hub.services.override_store import OverrideStore
from systems_hub.services.resource_synthesizer import SynthesisContext, synthesize
from systems_hub.services.roi_import_service import ImportResult
from systems_hub.services.roi_registry import RoiRegistry, utcnow_iso
from systems_hub.services.source_catalog import SourceCatalog

logger = logging.getLogger(__name__)

SEARCH_FIELDS = ("name", "description", "owner_label", "context_label", "category", "status")


def option_label(resource: SynthesizedResource) -> str:
    if resource.kind is ResourceKind.SYSTEM:
        return f"System • {resource.name} ({resource.context_label})"
    return f"Tool • {resource.name}"


def _matches(resource: SynthesizedResource, status=None, kind=None, q=None) -> bool:
    if status and resource.status != status:
        return False
    if kind and resource.kind.value != kind:
        return False
    if q:
        needle = q.strip().casefold()
        haystack = [str(getattr(resource, name) or "").casefold() for name in SEARCH_FIELDS]
        haystack.extend(m.casefold() for m in resource.team_members)
        if not any(needle in value for value in haystack):
            return False
    return True


class SolutionsHub:
    def __init__(self, context: SynthesisContext | None = None,
                 clock: Callable[[], str] = utcnow_iso):
        self.context = context or SynthesisContext()
        self._clock = clock
        self._lock = threading.RLock()
        self.catalog = SourceCatalog()
        self.overrides = OverrideStore()
        self.roi = RoiRegistry(self.overrides, resolve=self._find_unlocked, clock=clock)
        self._synth_cache: tuple[int, list[SynthesizedResource]] | None = None

    # ═════════════════════════════════════════════════════════════════════
    # Sources
    # ═════════════════════════════════════════════════════════════════════

    def replace_sources(self, data: dict) -> dict:
        with self._lock:
            snapshot = self.catalog.replace_from_dict(data)
            self._synth_cache = None
            return {"clients": len(snapshot.clients), "projects": len(snapshot.projects)}

    def load_sources(self, path) -> dict:
        with self._lock:
            snapshot = self.catalog.load_file(path)
            self._synth_cache = None
            return {"clients": len(snapshot.clients), "projects": len(snapshot.projects)}

    def sources(self) -> dict:
        with self._lock:
            return self.catalog.to_dict()

    # ═════════════════════════════════════════════════════════════════════
    # Composed resource registry
    # ═════════════════════════════════════════════════════════════════════

    def _synthesized(self) -> list[SynthesizedResource]:
        version = self.catalog.version
        if self._synth_cache is None or self._synth_cache[0] != version:
            produced = synthesize(self.catalog.clients, self.catalog.projects, self.context)
            self._synth_cache = (version, produced)
        return self._synth_cache[1]

    def _composed_unlocked(self) -> list[SynthesizedResource]:
        composed = [self.overrides.compose(r.key, r) for r in self._synthesized()]
        composed.extend(self.overrides.custom_records())
        self.roi.ensure_defaults(composed)
        return composed

    def _find_unlocked(self, key: str) -> SynthesizedResource | None:
        key = str(key)
        synthesized = next((r for r in self._synthesized() if str(r.key) == key), None)
        return self.overrides.compose(key, synthesized)

    def resources(self, status: str | None = None, kind: str | None = None,
                  q: str | None = None) -> list[SynthesizedResource]:
        with self._lock:
            return [r for r in self._composed_unlocked() if _matches(r, status, kind, q)]

    def resource(self, key: str) -> SynthesizedResource:
        with self._lock:
            found = self._find_unlocked(key)
            if found is None:
                raise NotFoundError(resource="Resource", resource_id=key)
            return found

    def options(self) -> list[dict]:
        """Select-list entries for the ROI forms: tools first, then systems."""
        with self._lock:
            composed = self._composed_unlocked()
        tools = [r for r in composed if r.kind is ResourceKind.TOOL]
        systems = [r for r in composed if r.kind is ResourceKind.SYSTEM]
        return [{"key": str(r.key), "label": option_label(r)} for r in tools + systems]

    # ═════════════════════════════════════════════════════════════════════
    # Edits
    # ═════════════════════════════════════════════════════════════════════

    @staticmethod
    def _parse_patch(payload: dict) -> OverridePatch:
        if not isinstance(payload, dict):
            raise ValidationError("Request body must be a JSON object")
        try:
            return OverridePatch.from_dict(payload)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc

    def create_resource(self, payload: dict) -> SynthesizedResource:
        """Store a user-created tool with default stats under a fresh key."""
        patch = self._parse_patch(payload)
        with self._lock:
            key = to_key(ResourceKind.TOOL, f"custom-{uuid.uuid4().hex[:12]}")
            if key in self.overrides or self._find_unlocked(key) is not None:
                raise ConflictError(resource="Resource", field="key", value=str(key))
            record = resource_from_patch(key, patch, timestamp=self._clock())
            self.overrides.put_record(key, record)
            self.roi.ensure_default(key, record)
            logger.info("Custom resource created: %s (%s)", key, record.name)
            return record

    def update_resource(self, key: str, payload: dict) -> SynthesizedResource:
        patch = self._parse_patch(payload)
        with self._lock:
            if self._find_unlocked(key) is None:
                raise NotFoundError(resource="Resource", resource_id=key)
            stamped = patch.merged(OverridePatch(updated_at=self._clock()))
            self.overrides.set_override(key, stamped)
            logger.info("Resource %s edited: %s", key, sorted(patch.to_dict()))
            return self._find_unlocked(key)

    def delete_resource(self, key: str) -> dict:
        """Remove a custom resource, or revert a synthesized one to its derived values."""
        with self._lock:
            entry = self.overrides.get(key)
            if entry is None:
                if self._find_unlocked(key) is None:
                    raise NotFoundError(resource="Resource", resource_id=key)
                return {"key": str(key), "action": "unchanged"}
            self.overrides.clear_override(key)
            action = "deleted" if entry.is_custom else "reverted"
            logger.info("Resource %s %s", key, action)
            return {"key": str(key), "action": action}

    # ═════════════════════════════════════════════════════════════════════
    # ROI metrics
    # ═════════════════════════════════════════════════════════════════════

    def roi_snapshot(self) -> dict[str, RoiMetricRecord]:
        with self._lock:
            self._composed_unlocked()
            return self.roi.snapshot()

    def roi_record(self, key: str) -> RoiMetricRecord:
        """The key's record, creating the default for a known resource."""
        with self._lock:
            record = self.roi.get(key)
            if record is not None:
                return record
            resource = self._find_unlocked(key)
            if resource is None:
                raise NotFoundError(resource="ROI record", resource_id=key)
            return self.roi.ensure_default(key, resource)

    def manual_roi_update(self, key: str, payload: dict | RoiMetricRecord) -> RoiMetricRecord:
        if isinstance(payload, RoiMetricRecord):
            record = payload
        else:
            try:
                record = RoiMetricRecord.from_dict(payload)
            except ValueError as exc:
                raise ValidationError(str(exc)) from exc
        with self._lock:
            return self.roi.manual_update(key, record)

    def bulk_roi_update(self, entries: list) -> int:
        """JSON bulk update: ``[{"key": ..., "metrics": {...}}, ...]``.

        Every entry is validated before anything is written.
        """
        if not isinstance(entries, list) or not entries:
            raise ValidationError("updates must be a non-empty list")
        updates = []
        errors = {}
        for index, entry in enumerate(entries):
            key = entry.get("key") if isinstance(entry, dict) else None
            if not key or not str(key).strip():
                errors[str(index)] = "key is required"
                continue
            try:
                updates.append(RoiUpdate(str(key).strip(), RoiMetricRecord.from_dict(entry.get("metrics"))))
            except ValueError as exc:
                errors[str(index)] = str(exc)
        if errors:
            raise ValidationError("Invalid bulk ROI updates", details=errors)
        with self._lock:
            return self.roi.bulk_update(updates)

    def import_roi(self, content: str | bytes | None) -> ImportResult:
        with self._lock:
            return roi_import_service.import_roi_csv(content, self.roi)

    def validate_roi_import(self, content: str | bytes | None) -> ImportResult:
        return roi_import_service.validate_roi_csv(content)

    def roi_template(self) -> str:
        return roi_import_service.generate_csv_template(self.roi_snapshot())

    # ═════════════════════════════════════════════════════════════════════

    def reset(self) -> None:
        """Drop every source record, override and ROI record."""
        with self._lock:
            self.catalog = SourceCatalog()
            self.overrides.clear()
            self.roi.clear()
            self._synth_cache = None
