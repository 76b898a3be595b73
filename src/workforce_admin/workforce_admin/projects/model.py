from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..core.enums import ProjectStatus


@dataclass(frozen=True)
class Project:
    project_id: int
    name: str
    client_id: int
    start_date: date
    status: ProjectStatus = ProjectStatus.ACTIVE
    description: Optional[str] = None
    end_date: Optional[date] = None
    budget: Optional[Decimal] = None
    client_name: Optional[str] = None
    timesheet_count: int = 0
