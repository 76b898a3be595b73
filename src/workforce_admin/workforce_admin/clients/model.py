from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import ClientStatus


@dataclass(frozen=True)
class Client:
    client_id: int
    name: str
    email: str
    company: str
    phone: Optional[str] = None
    status: ClientStatus = ClientStatus.ACTIVE
    project_count: int = 0
    created_at: Optional[datetime] = None
