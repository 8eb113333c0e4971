"""
Resource Synthesizer — source records → flat SynthesizedResource list.

Every client tool and every project system becomes one resource. Featured
tools are appended for non-business accounts. Stats without a real source
value are generated deterministically from the resource id, so the output
for unchanged inputs is identical on every pass.

Synthesis never raises for incomplete source data: missing nested records
fall back to placeholders and the rest of the batch is still produced.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from systems_hub.models.resource import (
    ResourceCategory,
    ResourceKind,
    ResourceStats,
    ResourceStatus,
    SynthesizedResource,
    to_key,
)
from systems_hub.models.source import Client, ClientTool, Project, System
from systems_hub.services.stat_generator import from_seed

logger = logging.getLogger(__name__)

UNKNOWN_PROJECT = "Unknown Project"
UNKNOWN_CLIENT = "Unknown Client"
UNTITLED_RESOURCE = "Untitled resource"
BUSINESS_ACCOUNT = "business"
DEFAULT_BUSINESS_NAME = "Business Account"


@dataclass(frozen=True)
class SynthesisContext:
    """Who is looking: business accounts see only their own systems."""

    account_type: str = "agency"
    account_name: str = ""
    include_featured: bool = True

    @property
    def is_business(self) -> bool:
        return self.account_type == BUSINESS_ACCOUNT


# ═════════════════════════════════════════════════════════════════════════════
# Mapping tables
# ═════════════════════════════════════════════════════════════════════════════

TOOL_TYPE_CATEGORIES: dict[str, ResourceCategory] = {
    "Automation": ResourceCategory.AUTOMATION,
    "AI Assistant": ResourceCategory.AI_TOOL,
    "Document Processing": ResourceCategory.ML,
    "Financial Tool": ResourceCategory.AUTOMATION,
    "Scheduling System": ResourceCategory.WORKFLOW,
    "AI Classifier": ResourceCategory.ML,
}

SYSTEM_TYPE_CATEGORIES: dict[str, ResourceCategory] = {
    "automation": ResourceCategory.AUTOMATION,
    "workflow": ResourceCategory.WORKFLOW,
    "integration": ResourceCategory.AUTOMATION,
    "ai-model": ResourceCategory.AI_TOOL,
}

TOOL_STATUSES = frozenset({ResourceStatus.ACTIVE.value, ResourceStatus.DEVELOPMENT.value})
SYSTEM_STATUSES = frozenset({
    ResourceStatus.ACTIVE.value,
    ResourceStatus.DEVELOPMENT.value,
    ResourceStatus.TESTING.value,
})

DEFAULT_IMPACT = "Streamlines business processes and improves efficiency"

BUSINESS_IMPACTS: dict[str, str] = {
    "Automation": "Reduces manual processing time by 75% in {industry} operations",
    "AI Assistant": "Improves customer satisfaction by 40% through intelligent responses",
    "Document Processing": "Processes documents 90% faster with 99% accuracy",
    "Financial Tool": "Saves $25,000 annually through automated expense tracking",
    "Scheduling System": "Reduces scheduling conflicts by 85% and improves efficiency",
    "AI Classifier": "Automatically categorizes and routes requests with 95% accuracy",
    "workflow": "Streamlines business processes and improves operational efficiency",
    "automation": "Automates repetitive tasks and reduces manual workload",
    "ai-model": "Leverages AI to improve decision making and accuracy",
    "integration": "Connects systems and improves data flow across platforms",
}

# (stat attribute, seed suffix, low, high)
STAT_RANGES: tuple[tuple[str, str, int, int], ...] = (
    ("usage", "usage", 60, 99),
    ("efficiency", "efficiency", 70, 99),
    ("uptime", "uptime", 90, 99),
    ("processing_time", "processingTime", 100, 599),
    ("total_runs", "totalRuns", 1000, 10999),
    ("cost_savings", "costSavings", 10000, 59999),
    ("error_rate", "errorRate", 1, 5),
)


@dataclass(frozen=True)
class FeaturedTool:
    name: str
    description: str
    category: ResourceCategory
    type: str


FEATURED_TOOLS: tuple[FeaturedTool, ...] = (
    FeaturedTool("Smart Email Classifier",
                 "AI-powered email classification and routing system",
                 ResourceCategory.ML, "Email Processing"),
    FeaturedTool("Predictive Analytics Engine",
                 "Machine learning model for business forecasting",
                 ResourceCategory.ML, "Analytics"),
    FeaturedTool("Conversational AI Agent",
                 "GPT-powered customer service chatbot",
                 ResourceCategory.GPT, "Chatbot"),
    FeaturedTool("Document Intelligence System",
                 "LLM-based document analysis and extraction",
                 ResourceCategory.LLM, "Document AI"),
    FeaturedTool("Workflow Orchestrator",
                 "Automated workflow management and execution",
                 ResourceCategory.WORKFLOW, "Orchestration"),
    FeaturedTool("Intelligent Process Agent",
                 "Autonomous agent for business process automation",
                 ResourceCategory.AGENT, "Process Agent"),
)


def tool_category(tool_type: str) -> str:
    return TOOL_TYPE_CATEGORIES.get(tool_type, ResourceCategory.AI_TOOL).value


def system_category(system_type: str) -> str:
    return SYSTEM_TYPE_CATEGORIES.get(system_type, ResourceCategory.AI_TOOL).value


def tool_status(status: str) -> str:
    return status if status in TOOL_STATUSES else ResourceStatus.INACTIVE.value


def system_status(status: str) -> str:
    return status if status in SYSTEM_STATUSES else ResourceStatus.INACTIVE.value


def business_impact(resource_type: str, industry: str) -> str:
    template = BUSINESS_IMPACTS.get(resource_type, DEFAULT_IMPACT)
    return template.format(industry=industry)


def synthesize_stats(ident: str, usage: float | None = None) -> ResourceStats:
    """Seeded stats for ``ident``; a truthy ``usage`` from the source wins."""
    values = {attr: from_seed(f"{ident}-{suffix}", low, high)
              for attr, suffix, low, high in STAT_RANGES}
    if usage:
        values["usage"] = usage
    return ResourceStats(**values)


# ═════════════════════════════════════════════════════════════════════════════
# Synthesis
# ═════════════════════════════════════════════════════════════════════════════

def _first_project(client: Client, projects: list[Project] | tuple[Project, ...]) -> Project | None:
    return next((p for p in projects if p.client_id == client.id), None)


def _tool_from_client(client: Client, tool: ClientTool, project: Project | None) -> SynthesizedResource:
    return SynthesizedResource(
        key=to_key(ResourceKind.TOOL, tool.id),
        name=tool.name or UNTITLED_RESOURCE,
        description=f"{tool.type} system for {client.company_name}",
        category=tool_category(tool.type),
        status=tool_status(tool.status),
        owner_label=client.company_name or UNKNOWN_CLIENT,
        context_label=project.name if project and project.name else UNKNOWN_PROJECT,
        team_members=project.assigned_users if project and project.assigned_users
        else client.team_member_ids,
        stats=synthesize_stats(tool.id, tool.usage),
        created_at=client.created_at,
        updated_at=client.updated_at,
        business_impact=business_impact(tool.type, client.industry),
    )


def _featured_tool(client: Client, template: FeaturedTool, project: Project | None) -> SynthesizedResource:
    ident = f"featured-{client.id}"
    return SynthesizedResource(
        key=to_key(ResourceKind.TOOL, ident),
        name=template.name,
        description=template.description,
        category=template.category.value,
        status=ResourceStatus.ACTIVE.value,
        owner_label=client.company_name or UNKNOWN_CLIENT,
        context_label=project.name if project and project.name else UNKNOWN_PROJECT,
        team_members=project.assigned_users if project and project.assigned_users
        else client.team_member_ids[:2],
        stats=synthesize_stats(ident),
        created_at=client.created_at,
        updated_at=client.updated_at,
        business_impact=business_impact(template.type, client.industry),
    )


def _system_from_project(system: System, project: Project, owner: str) -> SynthesizedResource:
    return SynthesizedResource(
        key=to_key(ResourceKind.SYSTEM, system.id),
        name=system.name or UNTITLED_RESOURCE,
        description=system.description,
        category=system_category(system.type),
        status=system_status(system.status),
        owner_label=owner,
        context_label=project.name or UNKNOWN_PROJECT,
        team_members=project.assigned_users,
        stats=synthesize_stats(system.id),
        created_at=system.created_at,
        updated_at=project.updated_at,
        business_impact=system.business_impact,
    )


def synthesize(clients, projects, context: SynthesisContext | None = None) -> list[SynthesizedResource]:
    """Derive the resource catalog from client and project records.

    Emission order: client tools, project systems, featured tools. A
    resource whose trimmed, case-folded name was already emitted is
    dropped, so the first occurrence wins.
    """
    context = context or SynthesisContext()
    clients = tuple(clients or ())
    projects = tuple(projects or ())
    clients_by_id = {c.id: c for c in clients}

    emitted: list[SynthesizedResource] = []
    seen_names: set[str] = set()
    seen_keys: set[str] = set()

    def emit(resource: SynthesizedResource) -> None:
        name_key = resource.name.strip().casefold()
        if name_key in seen_names or str(resource.key) in seen_keys:
            logger.debug("Dropping duplicate resource %s (%s)", resource.key, resource.name)
            return
        seen_names.add(name_key)
        seen_keys.add(str(resource.key))
        emitted.append(resource)

    if not context.is_business:
        for client in clients:
            project = _first_project(client, projects)
            for tool in client.tools:
                emit(_tool_from_client(client, tool, project))

    for project in projects:
        if context.is_business:
            owner = context.account_name or DEFAULT_BUSINESS_NAME
        else:
            client = clients_by_id.get(project.client_id)
            owner = client.company_name if client and client.company_name else UNKNOWN_CLIENT
        for system in project.systems:
            emit(_system_from_project(system, project, owner))

    if context.include_featured and not context.is_business:
        for template, client in zip(FEATURED_TOOLS, clients):
            emit(_featured_tool(client, template, _first_project(client, projects)))

    logger.debug("Synthesized %d resources from %d clients / %d projects",
                 len(emitted), len(clients), len(projects))
    return emitted
