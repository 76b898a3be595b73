from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from ..common.validators import optional_text, parse_enum, require_email, require_non_empty
from ..core.enums import ClientStatus, Permission, Role
from ..core.exceptions import ConflictError, NotFoundError
from ..permissions.service import PermissionService
from .model import Client
from .repository import ClientRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClientInput:
    name: str
    email: str
    company: str
    phone: Optional[str] = None
    status: str = ClientStatus.ACTIVE.value


class ClientService:
    def __init__(self, clients: ClientRepository, permissions: PermissionService):
        self._clients = clients
        self._permissions = permissions

    @staticmethod
    def _clean(data: ClientInput) -> dict:
        return {
            "name": require_non_empty(data.name, "Client name"),
            "email": require_email(data.email),
            "company": require_non_empty(data.company, "Company"),
            "phone": optional_text(data.phone),
            "status": parse_enum(ClientStatus, data.status or ClientStatus.ACTIVE.value, "Status").value,
        }

    def get(self, client_id: int) -> Client:
        client = self._clients.get_by_id(int(client_id))
        if not client:
            raise NotFoundError("Client not found")
        return client

    def create_client(self, *, current_role: Role, data: ClientInput) -> int:
        self._permissions.require(current_role, Permission.CLIENTS_MANAGE)
        client_id = self._clients.create(values=self._clean(data))
        logger.info("Created client %s", client_id)
        return client_id

    def update_client(self, *, current_role: Role, client_id: int, data: ClientInput) -> None:
        self._permissions.require(current_role, Permission.CLIENTS_MANAGE)
        self.get(client_id)
        self._clients.update(int(client_id), changes=self._clean(data))

    def delete_client(self, *, current_role: Role, client_id: int) -> None:
        self._permissions.require(current_role, Permission.CLIENTS_MANAGE)
        client = self.get(client_id)
        if client.project_count > 0:
            raise ConflictError("This client still has projects; delete or move them first")
        self._clients.delete(client.client_id)
        logger.info("Deleted client %s", client.client_id)

    def list_clients(self, *, status: Optional[ClientStatus] = None, search: Optional[str] = None) -> Sequence[Client]:
        return self._clients.list_clients(status=status, search=optional_text(search))

    def stats(self) -> dict:
        clients = self._clients.list_clients()
        return {
            "total": len(clients),
            "active": sum(1 for c in clients if c.status == ClientStatus.ACTIVE),
        }
