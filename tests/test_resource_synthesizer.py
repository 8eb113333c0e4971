"""
Resource synthesizer tests.

Test blocks:
  1. Client tools
  2. Project systems
  3. De-duplication & placeholders
  4. Account context & featured tools
  5. Determinism & stat ranges
"""

import pytest

from systems_hub.models.source import SourceSnapshot
from systems_hub.services.resource_synthesizer import (
    FEATURED_TOOLS,
    STAT_RANGES,
    SynthesisContext,
    business_impact,
    synthesize,
    system_category,
    tool_category,
)


@pytest.fixture()
def snapshot(sources_payload):
    return SourceSnapshot.from_dict(sources_payload)


def _by_key(resources):
    return {str(r.key): r for r in resources}


def _run(snapshot, **context):
    ctx = SynthesisContext(**{"include_featured": False, **context})
    return synthesize(snapshot.clients, snapshot.projects, ctx)


# ═══════════════════════════════════════════════════════════════
# 1. Client tools
# ═══════════════════════════════════════════════════════════════

class TestClientTools:
    def test_tool_fields(self, snapshot):
        tool = _by_key(_run(snapshot))["tool-t1"]
        assert tool.name == "Invoice Bot"
        assert tool.description == "Automation system for Acme Corp"
        assert tool.category == "Automation"
        assert tool.status == "active"
        assert tool.owner_label == "Acme Corp"
        assert tool.context_label == "Acme Rollout"
        assert tool.team_members == ("u1", "u2")
        assert tool.business_impact == "Reduces manual processing time by 75% in retail operations"
        assert tool.created_at == "2024-01-10T08:00:00Z"
        assert tool.updated_at == "2024-03-05T10:00:00Z"

    def test_real_usage_wins(self, snapshot):
        assert _by_key(_run(snapshot))["tool-t1"].stats.usage == 82

    def test_zero_usage_falls_back_to_seeded_value(self, snapshot):
        usage = _by_key(_run(snapshot))["tool-t2"].stats.usage
        assert 60 <= usage <= 99

    def test_unknown_tool_status_becomes_inactive(self, snapshot):
        assert _by_key(_run(snapshot))["tool-t2"].status == "inactive"
        assert _by_key(_run(snapshot))["tool-t3"].status == "development"

    def test_client_without_project(self, snapshot):
        tool = _by_key(_run(snapshot))["tool-t3"]
        assert tool.context_label == "Unknown Project"
        assert tool.team_members == ("u7",)

    @pytest.mark.parametrize("tool_type,category", [
        ("Automation", "Automation"),
        ("AI Assistant", "AI Tool"),
        ("Document Processing", "ML"),
        ("Financial Tool", "Automation"),
        ("Scheduling System", "Workflow"),
        ("AI Classifier", "ML"),
        ("Quantum Thing", "AI Tool"),
    ])
    def test_tool_category_table(self, tool_type, category):
        assert tool_category(tool_type) == category


# ═══════════════════════════════════════════════════════════════
# 2. Project systems
# ═══════════════════════════════════════════════════════════════

class TestProjectSystems:
    def test_system_fields(self, snapshot):
        system = _by_key(_run(snapshot))["system-s1"]
        assert system.category == "Workflow"
        assert system.status == "testing"
        assert system.owner_label == "Acme Corp"
        assert system.context_label == "Acme Rollout"
        assert system.business_impact == "Cuts order latency"
        assert system.created_at == "2024-02-01T08:00:00Z"
        assert system.updated_at == "2024-03-07T10:00:00Z"

    def test_unresolvable_client_uses_placeholder_owner(self, snapshot):
        system = _by_key(_run(snapshot))["system-s-3"]
        assert system.owner_label == "Unknown Client"
        assert system.status == "inactive"
        assert system.category == "Automation"

    @pytest.mark.parametrize("system_type,category", [
        ("automation", "Automation"),
        ("workflow", "Workflow"),
        ("integration", "Automation"),
        ("ai-model", "AI Tool"),
        ("", "AI Tool"),
    ])
    def test_system_category_table(self, system_type, category):
        assert system_category(system_type) == category


# ═══════════════════════════════════════════════════════════════
# 3. De-duplication & placeholders
# ═══════════════════════════════════════════════════════════════

class TestDedupAndPlaceholders:
    def test_name_collision_first_wins(self, snapshot):
        resources = _by_key(_run(snapshot))
        assert "tool-t1" in resources
        assert "system-s2" not in resources

    def test_emission_order_tools_then_systems(self, snapshot):
        keys = [str(r.key) for r in _run(snapshot)]
        assert keys == ["tool-t1", "tool-t2", "tool-t3", "system-s1", "system-s-3"]

    def test_nameless_tool_gets_placeholder(self):
        snap = SourceSnapshot.from_dict({
            "clients": [{"id": "c1", "companyName": "Acme", "tools": [{"id": "t9"}]}],
        })
        tool = _run(snap)[0]
        assert tool.name == "Untitled resource"
        assert tool.context_label == "Unknown Project"

    def test_empty_inputs(self):
        assert synthesize([], [], SynthesisContext()) == []
        assert synthesize(None, None) == []

    def test_unknown_impact_type_uses_default(self):
        assert business_impact("Widget", "x") == (
            "Streamlines business processes and improves efficiency")


# ═══════════════════════════════════════════════════════════════
# 4. Account context & featured tools
# ═══════════════════════════════════════════════════════════════

class TestContext:
    def test_business_account_sees_only_systems(self, snapshot):
        resources = _run(snapshot, account_type="business", account_name="Initech")
        assert all(r.kind.value == "system" for r in resources)
        # no tool was emitted first, so the "invoice bot" system survives
        assert {str(r.key) for r in resources} == {"system-s1", "system-s2", "system-s-3"}
        assert {r.owner_label for r in resources} == {"Initech"}

    def test_business_account_default_name(self, snapshot):
        resources = _run(snapshot, account_type="business")
        assert resources[0].owner_label == "Business Account"

    def test_featured_tools_per_client(self, snapshot):
        resources = synthesize(snapshot.clients, snapshot.projects,
                               SynthesisContext(include_featured=True))
        featured = [r for r in resources if r.key.id.startswith("featured-")]
        assert [str(r.key) for r in featured] == ["tool-featured-c1", "tool-featured-c2"]
        assert featured[0].name == FEATURED_TOOLS[0].name
        assert featured[0].category == "ML"
        assert featured[0].status == "active"
        assert featured[1].name == "Predictive Analytics Engine"
        assert featured[1].team_members == ("u7",)

    def test_featured_skipped_for_business(self, snapshot):
        resources = synthesize(snapshot.clients, snapshot.projects,
                               SynthesisContext(account_type="business", include_featured=True))
        assert not [r for r in resources if r.key.id.startswith("featured-")]


# ═══════════════════════════════════════════════════════════════
# 5. Determinism & stat ranges
# ═══════════════════════════════════════════════════════════════

class TestDeterminism:
    def test_repeat_synthesis_is_identical(self, snapshot):
        assert _run(snapshot) == _run(snapshot)

    def test_unrelated_source_change_keeps_values(self, sources_payload):
        before = _by_key(_run(SourceSnapshot.from_dict(sources_payload)))
        sources_payload["clients"].append({"id": "c3", "companyName": "Umbrella", "tools": [
            {"id": "t4", "name": "Vaccine Scheduler", "type": "Scheduling System"}]})
        after = _by_key(_run(SourceSnapshot.from_dict(sources_payload)))
        assert after["tool-t1"] == before["tool-t1"]
        assert after["system-s1"] == before["system-s1"]
        assert after["tool-t4"].category == "Workflow"

    def test_stats_within_ranges(self, snapshot):
        for resource in _run(snapshot):
            for attr, _suffix, low, high in STAT_RANGES:
                if attr == "usage" and resource.key.id == "t1":
                    continue
                assert low <= getattr(resource.stats, attr) <= high, (resource.key, attr)
