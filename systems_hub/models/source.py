"""
Source records supplied by the client/project collaborator.

These arrive already validated by the collaborator that owns them, so
parsing is tolerant: a missing field falls back to an empty value and the
synthesizer substitutes its documented placeholders. Field names on the
wire are the front end's camelCase names.
"""

from __future__ import annotations

from dataclasses import dataclass


def _text(data: dict, key: str, default: str = "") -> str:
    value = data.get(key)
    return default if value is None else str(value)


def _number(data: dict, key: str) -> float:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return value


def _strings(data: dict, key: str) -> tuple[str, ...]:
    value = data.get(key)
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(str(v) for v in value)


def _records(data: dict, key: str) -> list[dict]:
    value = data.get(key)
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


@dataclass(frozen=True)
class ClientTool:
    id: str
    name: str
    type: str = ""
    status: str = ""
    usage: float = 0
    last_used: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> ClientTool:
        return cls(
            id=_text(data, "id"),
            name=_text(data, "name"),
            type=_text(data, "type"),
            status=_text(data, "status"),
            usage=_number(data, "usage"),
            last_used=_text(data, "lastUsed"),
        )


@dataclass(frozen=True)
class ClientTemplate:
    id: str
    name: str
    category: str = ""
    usage: float = 0
    last_modified: str = ""
    is_template: bool = True

    @classmethod
    def from_dict(cls, data: dict) -> ClientTemplate:
        return cls(
            id=_text(data, "id"),
            name=_text(data, "name"),
            category=_text(data, "category"),
            usage=_number(data, "usage"),
            last_modified=_text(data, "lastModified"),
            is_template=bool(data.get("isTemplate", True)),
        )


@dataclass(frozen=True)
class ClientLibraryItem:
    id: str
    name: str
    type: str = ""
    category: str = ""
    created_at: str = ""
    template_id: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> ClientLibraryItem:
        return cls(
            id=_text(data, "id"),
            name=_text(data, "name"),
            type=_text(data, "type"),
            category=_text(data, "category"),
            created_at=_text(data, "createdAt"),
            template_id=_text(data, "templateId"),
        )


@dataclass(frozen=True)
class Client:
    id: str
    company_name: str
    industry: str = ""
    status: str = ""
    team_member_ids: tuple[str, ...] = ()
    tools: tuple[ClientTool, ...] = ()
    templates: tuple[ClientTemplate, ...] = ()
    library: tuple[ClientLibraryItem, ...] = ()
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> Client:
        return cls(
            id=_text(data, "id"),
            company_name=_text(data, "companyName"),
            industry=_text(data, "industry"),
            status=_text(data, "status"),
            team_member_ids=_strings(data, "teamMemberIds"),
            tools=tuple(ClientTool.from_dict(t) for t in _records(data, "tools")),
            templates=tuple(ClientTemplate.from_dict(t) for t in _records(data, "templates")),
            library=tuple(ClientLibraryItem.from_dict(i) for i in _records(data, "library")),
            created_at=_text(data, "createdAt"),
            updated_at=_text(data, "updatedAt"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "companyName": self.company_name,
            "industry": self.industry,
            "status": self.status,
            "teamMemberIds": list(self.team_member_ids),
            "tools": [
                {"id": t.id, "name": t.name, "type": t.type, "status": t.status,
                 "usage": t.usage, "lastUsed": t.last_used}
                for t in self.tools
            ],
            "templates": [
                {"id": t.id, "name": t.name, "category": t.category, "usage": t.usage,
                 "lastModified": t.last_modified, "isTemplate": t.is_template}
                for t in self.templates
            ],
            "library": [
                {"id": i.id, "name": i.name, "type": i.type, "category": i.category,
                 "createdAt": i.created_at, "templateId": i.template_id}
                for i in self.library
            ],
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


@dataclass(frozen=True)
class System:
    id: str
    name: str
    description: str = ""
    type: str = ""
    status: str = ""
    business_impact: str = ""
    project_id: str = ""
    created_at: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> System:
        return cls(
            id=_text(data, "id"),
            name=_text(data, "name"),
            description=_text(data, "description"),
            type=_text(data, "type"),
            status=_text(data, "status"),
            business_impact=_text(data, "businessImpact"),
            project_id=_text(data, "projectId"),
            created_at=_text(data, "createdAt"),
        )


@dataclass(frozen=True)
class Project:
    id: str
    name: str
    description: str = ""
    status: str = ""
    client_id: str = ""
    assigned_users: tuple[str, ...] = ()
    systems: tuple[System, ...] = ()
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> Project:
        return cls(
            id=_text(data, "id"),
            name=_text(data, "name"),
            description=_text(data, "description"),
            status=_text(data, "status"),
            client_id=_text(data, "clientId"),
            assigned_users=_strings(data, "assignedUsers"),
            systems=tuple(System.from_dict(s) for s in _records(data, "systems")),
            created_at=_text(data, "createdAt"),
            updated_at=_text(data, "updatedAt"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "status": self.status,
            "clientId": self.client_id,
            "assignedUsers": list(self.assigned_users),
            "systems": [
                {"id": s.id, "name": s.name, "description": s.description, "type": s.type,
                 "status": s.status, "businessImpact": s.business_impact,
                 "projectId": s.project_id, "createdAt": s.created_at}
                for s in self.systems
            ],
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


@dataclass(frozen=True)
class SourceSnapshot:
    """The full set of source records for one synthesis pass."""

    clients: tuple[Client, ...] = ()
    projects: tuple[Project, ...] = ()

    @classmethod
    def from_dict(cls, data: dict | None) -> SourceSnapshot:
        data = data or {}
        return cls(
            clients=tuple(Client.from_dict(c) for c in _records(data, "clients")),
            projects=tuple(Project.from_dict(p) for p in _records(data, "projects")),
        )

    def to_dict(self) -> dict:
        return {
            "clients": [c.to_dict() for c in self.clients],
            "projects": [p.to_dict() for p in self.projects],
        }
