from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Optional, Sequence

from ..clients.repository import ClientRepository
from ..common.money import dsum, to_money
from ..common.validators import (
    optional_text,
    parse_decimal,
    parse_enum,
    require_date_range,
    require_non_empty,
    require_non_negative,
)
from ..core.enums import Permission, ProjectStatus, Role
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..permissions.service import PermissionService
from .model import Project
from .repository import ProjectRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProjectInput:
    name: str
    client_id: Optional[int]
    start_date: Optional[date]
    end_date: Optional[date] = None
    description: Optional[str] = None
    status: str = ProjectStatus.ACTIVE.value
    budget: Any = None


class ProjectService:
    def __init__(self, projects: ProjectRepository, clients: ClientRepository, permissions: PermissionService):
        self._projects = projects
        self._clients = clients
        self._permissions = permissions

    def _clean(self, data: ProjectInput) -> dict:
        if not data.client_id or not self._clients.get_by_id(int(data.client_id)):
            raise ValidationError("Please select an existing client")
        if data.start_date is None:
            raise ValidationError("Start date is required")
        require_date_range(data.start_date, data.end_date)

        budget = None
        if data.budget not in (None, ""):
            budget = require_non_negative(to_money(parse_decimal(data.budget, "Budget")), "Budget")

        return {
            "name": require_non_empty(data.name, "Project name"),
            "description": optional_text(data.description),
            "client_id": int(data.client_id),
            "status": parse_enum(ProjectStatus, data.status or ProjectStatus.ACTIVE.value, "Status").value,
            "start_date": data.start_date,
            "end_date": data.end_date,
            "budget": budget,
        }

    def get(self, project_id: int) -> Project:
        project = self._projects.get_by_id(int(project_id))
        if not project:
            raise NotFoundError("Project not found")
        return project

    def create_project(self, *, current_role: Role, data: ProjectInput) -> int:
        self._permissions.require(current_role, Permission.PROJECTS_MANAGE)
        project_id = self._projects.create(values=self._clean(data))
        logger.info("Created project %s", project_id)
        return project_id

    def update_project(self, *, current_role: Role, project_id: int, data: ProjectInput) -> None:
        self._permissions.require(current_role, Permission.PROJECTS_MANAGE)
        self.get(project_id)
        self._projects.update(int(project_id), changes=self._clean(data))

    def delete_project(self, *, current_role: Role, project_id: int) -> None:
        self._permissions.require(current_role, Permission.PROJECTS_MANAGE)
        project = self.get(project_id)
        if project.timesheet_count > 0:
            raise ConflictError("This project has logged working hours and cannot be deleted")
        self._projects.delete(project.project_id)
        logger.info("Deleted project %s", project.project_id)

    def list_projects(
        self,
        *,
        client_id: Optional[int] = None,
        status: Optional[ProjectStatus] = None,
        search: Optional[str] = None,
    ) -> Sequence[Project]:
        return self._projects.list_projects(client_id=client_id, status=status, search=optional_text(search))

    def stats(self) -> dict:
        projects = self._projects.list_projects()
        return {
            "total": len(projects),
            "active": sum(1 for p in projects if p.status == ProjectStatus.ACTIVE),
            "completed": sum(1 for p in projects if p.status == ProjectStatus.COMPLETED),
            "total_budget": to_money(dsum(p.budget for p in projects if p.budget is not None)),
        }
