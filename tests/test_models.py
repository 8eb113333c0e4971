"""
Model tests — resource keys, patches, ROI records, source parsing.

Test blocks:
  1. ResourceKey
  2. StatsPatch / OverridePatch
  3. RoiMetricRecord
  4. Source record parsing
"""

import math

import pytest

from systems_hub.models.resource import (
    DEFAULT_STATS,
    OverridePatch,
    ResourceKey,
    ResourceKind,
    ResourceStats,
    StatsPatch,
    SynthesizedResource,
    resource_from_patch,
    to_key,
)
from systems_hub.models.roi import ROI_METRIC_KEYS, RoiMetricKey, RoiMetricRecord, RoiMetricValue
from systems_hub.models.source import Client, Project, SourceSnapshot


def _metrics_payload(**overrides):
    payload = {key.value: {"pre": 10, "post": 20} for key in ROI_METRIC_KEYS}
    payload.update(overrides)
    return payload


def _resource(**kwargs):
    base = dict(
        key=to_key("tool", "t1"),
        name="Invoice Bot",
        description="Automation system for Acme Corp",
        category="Automation",
        status="active",
        owner_label="Acme Corp",
        context_label="Acme Rollout",
        team_members=("u1",),
        stats=DEFAULT_STATS,
        created_at="2024-01-01T00:00:00Z",
        updated_at="2024-01-02T00:00:00Z",
    )
    base.update(kwargs)
    return SynthesizedResource(**base)


# ═══════════════════════════════════════════════════════════════
# 1. ResourceKey
# ═══════════════════════════════════════════════════════════════

class TestResourceKey:
    def test_string_form(self):
        assert str(to_key("tool", "t1")) == "tool-t1"
        assert str(to_key(ResourceKind.SYSTEM, "s1")) == "system-s1"

    def test_parse_splits_on_first_dash_only(self):
        key = ResourceKey.parse("system-s-3")
        assert key.kind is ResourceKind.SYSTEM
        assert key.id == "s-3"
        assert str(key) == "system-s-3"

    @pytest.mark.parametrize("text", ["", "tool", "tool-", "widget-1", "-x"])
    def test_parse_rejects_malformed(self, text):
        with pytest.raises(ValueError):
            ResourceKey.parse(text)
        assert ResourceKey.try_parse(text) is None

    def test_keys_are_hashable_and_equal_by_value(self):
        assert {to_key("tool", "a"), to_key("tool", "a")} == {to_key("tool", "a")}
        assert to_key("tool", "a") != to_key("system", "a")


# ═══════════════════════════════════════════════════════════════
# 2. Patches
# ═══════════════════════════════════════════════════════════════

class TestPatches:
    def test_stats_patch_merge_keeps_both_sides(self):
        merged = StatsPatch(usage=90).merged(StatsPatch(efficiency=70))
        assert merged.usage == 90
        assert merged.efficiency == 70

    def test_stats_patch_later_value_wins(self):
        assert StatsPatch(usage=90).merged(StatsPatch(usage=50)).usage == 50

    def test_stats_patch_from_dict_camel_and_snake(self):
        patch = StatsPatch.from_dict({"costSavings": 100, "error_rate": 2, "bogus": 1})
        assert patch.cost_savings == 100
        assert patch.error_rate == 2
        assert patch.usage is None

    def test_stats_patch_rejects_non_numeric(self):
        with pytest.raises(ValueError, match="usage"):
            StatsPatch.from_dict({"usage": "high"})

    def test_override_apply_is_field_level(self):
        resource = _resource()
        patched = OverridePatch(name="Renamed", stats=StatsPatch(usage=12)).apply(resource)
        assert patched.name == "Renamed"
        assert patched.stats.usage == 12
        assert patched.stats.efficiency == DEFAULT_STATS.efficiency
        assert patched.description == resource.description
        # original untouched
        assert resource.name == "Invoice Bot"
        assert resource.stats.usage == DEFAULT_STATS.usage

    def test_override_merge_nests_stats(self):
        first = OverridePatch(name="A", stats=StatsPatch(usage=1))
        second = OverridePatch(status="inactive", stats=StatsPatch(efficiency=2))
        merged = first.merged(second)
        assert merged.name == "A"
        assert merged.status == "inactive"
        assert merged.stats == StatsPatch(usage=1, efficiency=2)

    def test_override_from_dict_validates_vocabularies(self):
        with pytest.raises(ValueError, match="category"):
            OverridePatch.from_dict({"category": "Blockchain"})
        with pytest.raises(ValueError, match="status"):
            OverridePatch.from_dict({"status": "archived"})

    def test_override_from_dict_wire_names(self):
        patch = OverridePatch.from_dict({
            "ownerLabel": "Internal",
            "teamMembers": ["u9"],
            "stats": {"usage": 55},
        })
        assert patch.owner_label == "Internal"
        assert patch.team_members == ("u9",)
        assert patch.stats.usage == 55
        assert patch.to_dict() == {
            "ownerLabel": "Internal",
            "teamMembers": ["u9"],
            "stats": {"usage": 55},
        }

    def test_override_from_dict_rejects_bad_shapes(self):
        with pytest.raises(ValueError):
            OverridePatch.from_dict({"teamMembers": "u1"})
        with pytest.raises(ValueError):
            OverridePatch.from_dict({"stats": [1, 2]})

    def test_resource_from_patch_defaults(self):
        record = resource_from_patch(to_key("tool", "custom-1"), OverridePatch(),
                                     timestamp="2024-05-01T00:00:00Z")
        assert record.name == "Untitled resource"
        assert record.category == "AI Tool"
        assert record.status == "active"
        assert record.owner_label == "Internal"
        assert record.context_label == "Standalone"
        assert record.stats == DEFAULT_STATS
        assert record.created_at == record.updated_at == "2024-05-01T00:00:00Z"

    def test_resource_to_dict_shape(self):
        data = _resource().to_dict()
        assert data["key"] == "tool-t1"
        assert data["kind"] == "tool"
        assert data["stats"]["costSavings"] == DEFAULT_STATS.cost_savings
        assert data["teamMembers"] == ["u1"]


# ═══════════════════════════════════════════════════════════════
# 3. RoiMetricRecord
# ═══════════════════════════════════════════════════════════════

class TestRoiMetricRecord:
    def test_from_dict_requires_all_metrics(self):
        payload = _metrics_payload()
        del payload["hoursSaved"]
        with pytest.raises(ValueError, match="hoursSaved"):
            RoiMetricRecord.from_dict(payload)

    @pytest.mark.parametrize("bad", ["12", None, True, math.nan, math.inf, -1])
    def test_from_dict_rejects_bad_values(self, bad):
        with pytest.raises(ValueError):
            RoiMetricRecord.from_dict(_metrics_payload(costSavings={"pre": bad, "post": 5}))

    def test_from_dict_clamps_percentages(self):
        record = RoiMetricRecord.from_dict(
            _metrics_payload(adoptionRate={"pre": 40, "post": 140}))
        assert record.adoption_rate == RoiMetricValue(40, 100)

    def test_currency_is_not_clamped(self):
        record = RoiMetricRecord.from_dict(
            _metrics_payload(costSavings={"pre": 0, "post": 2_500_000}))
        assert record.cost_savings.post == 2_500_000

    def test_to_dict_round_shape(self):
        record = RoiMetricRecord.from_dict(_metrics_payload()).with_timestamp("2024-01-01T00:00:00Z")
        data = record.to_dict()
        assert list(data) == [k.value for k in ROI_METRIC_KEYS] + ["lastUpdated"]
        assert data["efficiencyGain"] == {"pre": 10, "post": 20}

    def test_metric_lookup_and_delta(self):
        record = RoiMetricRecord.from_dict(_metrics_payload())
        assert record.metric(RoiMetricKey.HOURS_SAVED).delta == 10
        assert record.metric("revenueGenerated").post == 20

    def test_zero_record(self):
        record = RoiMetricRecord.zero()
        assert all(record.metric(k) == RoiMetricValue(0, 0) for k in ROI_METRIC_KEYS)


# ═══════════════════════════════════════════════════════════════
# 4. Source records
# ═══════════════════════════════════════════════════════════════

class TestSourceParsing:
    def test_client_from_camel_case(self, sources_payload):
        client = Client.from_dict(sources_payload["clients"][0])
        assert client.company_name == "Acme Corp"
        assert client.team_member_ids == ("u1", "u2", "u3")
        assert client.tools[0].usage == 82

    def test_missing_fields_default_to_empty(self):
        client = Client.from_dict({"id": "c9"})
        assert client.company_name == ""
        assert client.tools == ()
        project = Project.from_dict({"id": "p9", "systems": [{"id": "s9"}, "junk"]})
        assert len(project.systems) == 1
        assert project.systems[0].name == ""

    def test_snapshot_round_trip_keeps_wire_names(self, sources_payload):
        snapshot = SourceSnapshot.from_dict(sources_payload)
        data = snapshot.to_dict()
        assert data["clients"][0]["companyName"] == "Acme Corp"
        assert data["projects"][0]["assignedUsers"] == ["u1", "u2"]
        assert len(snapshot.projects[0].systems) == 2

    def test_non_numeric_usage_is_zero(self):
        client = Client.from_dict({"id": "c1", "tools": [{"id": "t", "usage": "lots"}]})
        assert client.tools[0].usage == 0
