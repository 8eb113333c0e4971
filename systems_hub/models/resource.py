"""
Resource models — keys, synthesized resources and override patches.

A resource is a tool or system shown in the Systems Hub views. Every
resource is addressed by a ResourceKey whose string form ("tool-<id>",
"system-<id>") is the key used by the override store and the ROI registry.

Usage:
    from systems_hub.models.resource import ResourceKey, to_key

    key = to_key("tool", "t-42")
    str(key)                      # "tool-t-42"
    ResourceKey.parse("tool-t-42") == key
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any


class ResourceKind(str, Enum):
    TOOL = "tool"
    SYSTEM = "system"


class ResourceCategory(str, Enum):
    AUTOMATION = "Automation"
    AI_TOOL = "AI Tool"
    ML = "ML"
    WORKFLOW = "Workflow"
    GPT = "GPT"
    LLM = "LLM"
    AGENT = "Agent"


class ResourceStatus(str, Enum):
    ACTIVE = "active"
    DEVELOPMENT = "development"
    TESTING = "testing"
    INACTIVE = "inactive"


CATEGORY_VALUES = frozenset(c.value for c in ResourceCategory)
STATUS_VALUES = frozenset(s.value for s in ResourceStatus)


# ═════════════════════════════════════════════════════════════════════════════
# Resource Key
# ═════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ResourceKey:
    """Stable (kind, id) identifier, independent of any synthesis pass."""

    kind: ResourceKind
    id: str

    def __str__(self) -> str:
        return f"{self.kind.value}-{self.id}"

    @classmethod
    def parse(cls, text: str) -> ResourceKey:
        """Parse "<kind>-<id>". Only the first dash separates kind from id.

        Raises ValueError for an unknown kind or an empty id.
        """
        kind, sep, ident = (text or "").partition("-")
        if not sep or not ident:
            raise ValueError(f"Malformed resource key: {text!r}")
        try:
            return cls(ResourceKind(kind), ident)
        except ValueError as exc:
            raise ValueError(f"Unknown resource kind in key: {text!r}") from exc

    @classmethod
    def try_parse(cls, text: str) -> ResourceKey | None:
        try:
            return cls.parse(text)
        except ValueError:
            return None


def to_key(kind: ResourceKind | str, ident: str) -> ResourceKey:
    return ResourceKey(ResourceKind(kind), str(ident))


# ═════════════════════════════════════════════════════════════════════════════
# Stats
# ═════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ResourceStats:
    """Operational statistics displayed for every resource."""

    usage: float
    efficiency: float
    uptime: float
    processing_time: float
    total_runs: float
    cost_savings: float
    error_rate: float

    def to_dict(self) -> dict:
        return {
            "usage": self.usage,
            "efficiency": self.efficiency,
            "uptime": self.uptime,
            "processingTime": self.processing_time,
            "totalRuns": self.total_runs,
            "costSavings": self.cost_savings,
            "errorRate": self.error_rate,
        }


# camelCase (wire) → snake_case (attribute)
STAT_FIELDS: dict[str, str] = {
    "usage": "usage",
    "efficiency": "efficiency",
    "uptime": "uptime",
    "processingTime": "processing_time",
    "totalRuns": "total_runs",
    "costSavings": "cost_savings",
    "errorRate": "error_rate",
}

DEFAULT_STATS = ResourceStats(
    usage=75,
    efficiency=80,
    uptime=98,
    processing_time=220,
    total_runs=1500,
    cost_savings=18000,
    error_rate=3,
)


@dataclass(frozen=True)
class StatsPatch:
    """Partial ResourceStats; None means "not set by this patch"."""

    usage: float | None = None
    efficiency: float | None = None
    uptime: float | None = None
    processing_time: float | None = None
    total_runs: float | None = None
    cost_savings: float | None = None
    error_rate: float | None = None

    def merged(self, other: StatsPatch | None) -> StatsPatch:
        """Return a patch with ``other``'s defined fields layered on top."""
        if other is None:
            return self
        updates = {f.name: getattr(other, f.name) for f in fields(other)
                   if getattr(other, f.name) is not None}
        return replace(self, **updates)

    def apply(self, stats: ResourceStats) -> ResourceStats:
        updates = {f.name: getattr(self, f.name) for f in fields(self)
                   if getattr(self, f.name) is not None}
        return replace(stats, **updates) if updates else stats

    def to_dict(self) -> dict:
        return {wire: getattr(self, attr) for wire, attr in STAT_FIELDS.items()
                if getattr(self, attr) is not None}

    @classmethod
    def from_dict(cls, data: dict | None) -> StatsPatch:
        """Build from a camelCase or snake_case mapping; unknown keys are ignored.

        Raises ValueError when a stat value is not numeric.
        """
        values: dict[str, float] = {}
        for key, value in (data or {}).items():
            attr = STAT_FIELDS.get(key) or (key if key in STAT_FIELDS.values() else None)
            if attr is None or value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"stats.{key} must be a number")
            values[attr] = value
        return cls(**values)


# ═════════════════════════════════════════════════════════════════════════════
# Synthesized Resource & Override Patch
# ═════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class SynthesizedResource:
    """Canonical resource shape. A new instance is built on every synthesis pass."""

    key: ResourceKey
    name: str
    description: str
    category: str
    status: str
    owner_label: str
    context_label: str
    team_members: tuple[str, ...]
    stats: ResourceStats
    created_at: str
    updated_at: str
    business_impact: str = ""

    @property
    def kind(self) -> ResourceKind:
        return self.key.kind

    def to_dict(self) -> dict:
        return {
            "key": str(self.key),
            "kind": self.key.kind.value,
            "id": self.key.id,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "status": self.status,
            "ownerLabel": self.owner_label,
            "contextLabel": self.context_label,
            "teamMembers": list(self.team_members),
            "businessImpact": self.business_impact,
            "stats": self.stats.to_dict(),
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


# camelCase (wire) → snake_case (attribute) for the scalar patch fields
PATCH_FIELDS: dict[str, str] = {
    "name": "name",
    "description": "description",
    "category": "category",
    "status": "status",
    "ownerLabel": "owner_label",
    "contextLabel": "context_label",
    "businessImpact": "business_impact",
    "updatedAt": "updated_at",
}


@dataclass(frozen=True)
class OverridePatch:
    """User edits for one resource. Every field is optional."""

    name: str | None = None
    description: str | None = None
    category: str | None = None
    status: str | None = None
    owner_label: str | None = None
    context_label: str | None = None
    business_impact: str | None = None
    team_members: tuple[str, ...] | None = None
    stats: StatsPatch | None = None
    updated_at: str | None = None

    def merged(self, other: OverridePatch) -> OverridePatch:
        """Layer ``other`` on top of this patch; stats merge field by field."""
        updates: dict[str, Any] = {}
        for f in fields(other):
            value = getattr(other, f.name)
            if value is None or f.name == "stats":
                continue
            updates[f.name] = value
        if other.stats is not None:
            updates["stats"] = (self.stats or StatsPatch()).merged(other.stats)
        return replace(self, **updates)

    def apply(self, resource: SynthesizedResource) -> SynthesizedResource:
        """Return ``resource`` with this patch on top. ``resource`` is not modified."""
        updates: dict[str, Any] = {}
        for attr in PATCH_FIELDS.values():
            value = getattr(self, attr)
            if value is not None:
                updates[attr] = value
        if self.team_members is not None:
            updates["team_members"] = tuple(self.team_members)
        if self.stats is not None:
            updates["stats"] = self.stats.apply(resource.stats)
        return replace(resource, **updates) if updates else resource

    def to_dict(self) -> dict:
        data: dict[str, Any] = {}
        for wire, attr in PATCH_FIELDS.items():
            value = getattr(self, attr)
            if value is not None:
                data[wire] = value
        if self.team_members is not None:
            data["teamMembers"] = list(self.team_members)
        if self.stats is not None:
            data["stats"] = self.stats.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: dict) -> OverridePatch:
        """Build a patch from an edit-form payload (camelCase or snake_case).

        Raises ValueError on values outside the closed category/status
        vocabularies or on non-numeric stats.
        """
        data = data or {}
        values: dict[str, Any] = {}
        for wire, attr in PATCH_FIELDS.items():
            value = data.get(wire, data.get(attr))
            if value is not None:
                values[attr] = str(value)

        if "category" in values and values["category"] not in CATEGORY_VALUES:
            raise ValueError(f"Unknown category '{values['category']}'")
        if "status" in values and values["status"] not in STATUS_VALUES:
            raise ValueError(f"Unknown status '{values['status']}'")

        members = data.get("teamMembers", data.get("team_members"))
        if members is not None:
            if not isinstance(members, (list, tuple)):
                raise ValueError("teamMembers must be a list")
            values["team_members"] = tuple(str(m) for m in members)

        if data.get("stats") is not None:
            if not isinstance(data["stats"], dict):
                raise ValueError("stats must be an object")
            values["stats"] = StatsPatch.from_dict(data["stats"])

        return cls(**values)


def resource_from_patch(key: ResourceKey, patch: OverridePatch,
                        *, timestamp: str) -> SynthesizedResource:
    """Build a complete record for a user-created resource from a form patch."""
    return SynthesizedResource(
        key=key,
        name=patch.name or "Untitled resource",
        description=patch.description or "",
        category=patch.category or ResourceCategory.AI_TOOL.value,
        status=patch.status or ResourceStatus.ACTIVE.value,
        owner_label=patch.owner_label or "Internal",
        context_label=patch.context_label or "Standalone",
        team_members=tuple(patch.team_members or ()),
        stats=(patch.stats or StatsPatch()).apply(DEFAULT_STATS),
        created_at=timestamp,
        updated_at=patch.updated_at or timestamp,
        business_impact=patch.business_impact or "",
    )


__all__ = [
    "ResourceKind",
    "ResourceCategory",
    "ResourceStatus",
    "ResourceKey",
    "to_key",
    "ResourceStats",
    "StatsPatch",
    "DEFAULT_STATS",
    "SynthesizedResource",
    "OverridePatch",
    "resource_from_patch",
]
