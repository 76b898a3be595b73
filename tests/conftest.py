from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from src.workforce_admin.workforce_admin.banking.model import BankAccount, BankTransaction, TransactionFilter
from src.workforce_admin.workforce_admin.bulk_payroll.model import BulkPayroll, BulkPayrollItem
from src.workforce_admin.workforce_admin.clients.model import Client
from src.workforce_admin.workforce_admin.container import wire_container
from src.workforce_admin.workforce_admin.core.enums import (
    BulkPayrollItemStatus,
    BulkPayrollStatus,
    ClientStatus,
    EmploymentType,
    NotificationActionType,
    NotificationPriority,
    PayrollStatus,
    ProjectStatus,
    Role,
    TransactionCategory,
    TransactionType,
    WorkingHoursStatus,
)
from src.workforce_admin.workforce_admin.notifications.model import Notification
from src.workforce_admin.workforce_admin.payroll.model import Payroll
from src.workforce_admin.workforce_admin.profiles.model import Profile
from src.workforce_admin.workforce_admin.projects.model import Project
from src.workforce_admin.workforce_admin.salary_templates.model import SalaryTemplate
from src.workforce_admin.workforce_admin.timesheets.model import HoursFilter, WorkingHours
from src.workforce_admin.workforce_admin.timesheets.service import calculate_amounts


def _enum(enum_cls, value):
    if value is None or isinstance(value, enum_cls):
        return value
    return enum_cls(value)


class InMemoryProfiles:
    def __init__(self):
        self.items: dict[int, Profile] = {}
        self._id = 0

    def _build(self, profile_id: int, v: dict) -> Profile:
        return Profile(
            profile_id=profile_id,
            full_name=v["full_name"],
            email=v["email"],
            password_hash=v["password_hash"],
            role=_enum(Role, v["role"]),
            hourly_rate=Decimal(v.get("hourly_rate") or 0),
            employment_type=_enum(EmploymentType, v.get("employment_type")),
            salary=v.get("salary"),
            phone=v.get("phone"),
            full_address=v.get("full_address"),
            tax_file_number=v.get("tax_file_number"),
            start_date=v.get("start_date"),
            is_active=bool(v.get("is_active", 1)),
        )

    def get_by_id(self, profile_id: int) -> Optional[Profile]:
        return self.items.get(int(profile_id))

    def get_by_email(self, email: str) -> Optional[Profile]:
        return next((p for p in self.items.values() if p.email == email), None)

    def create(self, *, values) -> int:
        self._id += 1
        self.items[self._id] = self._build(self._id, dict(values))
        return self._id

    def update(self, profile_id: int, *, changes) -> bool:
        p = self.items.get(int(profile_id))
        if not p:
            return False
        changes = dict(changes)
        if "role" in changes:
            changes["role"] = _enum(Role, changes["role"])
        if "employment_type" in changes:
            changes["employment_type"] = _enum(EmploymentType, changes["employment_type"])
        if "is_active" in changes:
            changes["is_active"] = bool(changes["is_active"])
        updated = replace(p, **changes)
        self.items[p.profile_id] = updated
        return updated != p

    def list_profiles(self, *, role=None, active_only=False, search=None):
        out = [p for p in self.items.values() if (role is None or p.role == role) and (p.is_active or not active_only)]
        if search:
            out = [p for p in out if search.lower() in p.full_name.lower() or search.lower() in p.email.lower()]
        return sorted(out, key=lambda p: p.full_name)


class InMemoryGrants:
    def __init__(self):
        self.rows: set[tuple] = set()

    def list_for_role(self, role):
        return sorted((p for r, p in self.rows if r == role), key=lambda p: p.value)

    def has_rows_for_role(self, role) -> bool:
        return any(r == role for r, _ in self.rows)

    def add(self, role, permission) -> bool:
        if (role, permission) in self.rows:
            return False
        self.rows.add((role, permission))
        return True

    def remove(self, role, permission) -> bool:
        if (role, permission) not in self.rows:
            return False
        self.rows.discard((role, permission))
        return True


class InMemoryClients:
    def __init__(self):
        self.items: dict[int, Client] = {}
        self.projects: Optional["InMemoryProjects"] = None
        self._id = 0

    def _with_count(self, c: Client) -> Client:
        count = sum(1 for p in self.projects.items.values() if p.client_id == c.client_id) if self.projects else 0
        return replace(c, project_count=count)

    def get_by_id(self, client_id: int) -> Optional[Client]:
        c = self.items.get(int(client_id))
        return self._with_count(c) if c else None

    def create(self, *, values) -> int:
        self._id += 1
        v = dict(values)
        self.items[self._id] = Client(
            client_id=self._id,
            name=v["name"],
            email=v["email"],
            company=v["company"],
            phone=v.get("phone"),
            status=_enum(ClientStatus, v.get("status") or "active"),
        )
        return self._id

    def update(self, client_id: int, *, changes) -> bool:
        c = self.items.get(int(client_id))
        if not c:
            return False
        changes = dict(changes)
        if "status" in changes:
            changes["status"] = _enum(ClientStatus, changes["status"])
        updated = replace(c, **changes)
        self.items[c.client_id] = updated
        return updated != c

    def delete(self, client_id: int) -> bool:
        return self.items.pop(int(client_id), None) is not None

    def list_clients(self, *, status=None, search=None):
        out = [self._with_count(c) for c in self.items.values() if status is None or c.status == status]
        if search:
            out = [c for c in out if search.lower() in f"{c.name} {c.company} {c.email}".lower()]
        return sorted(out, key=lambda c: (c.company, c.name))


class InMemoryProjects:
    def __init__(self, clients: InMemoryClients):
        self.items: dict[int, Project] = {}
        self.clients = clients
        self.hours: Optional["InMemoryHours"] = None
        self._id = 0

    def _decorate(self, p: Project) -> Project:
        client = self.clients.items.get(p.client_id)
        count = sum(1 for r in self.hours.rows.values() if r["project_id"] == p.project_id) if self.hours else 0
        return replace(p, client_name=client.company if client else None, timesheet_count=count)

    def get_by_id(self, project_id: int) -> Optional[Project]:
        p = self.items.get(int(project_id))
        return self._decorate(p) if p else None

    def create(self, *, values) -> int:
        self._id += 1
        v = dict(values)
        self.items[self._id] = Project(
            project_id=self._id,
            name=v["name"],
            client_id=int(v["client_id"]),
            start_date=v["start_date"],
            status=_enum(ProjectStatus, v.get("status") or "active"),
            description=v.get("description"),
            end_date=v.get("end_date"),
            budget=v.get("budget"),
        )
        return self._id

    def update(self, project_id: int, *, changes) -> bool:
        p = self.items.get(int(project_id))
        if not p:
            return False
        changes = dict(changes)
        if "status" in changes:
            changes["status"] = _enum(ProjectStatus, changes["status"])
        updated = replace(p, **changes)
        self.items[p.project_id] = updated
        return updated != p

    def delete(self, project_id: int) -> bool:
        return self.items.pop(int(project_id), None) is not None

    def list_projects(self, *, client_id=None, status=None, search=None):
        out = [
            self._decorate(p)
            for p in self.items.values()
            if (client_id is None or p.client_id == client_id) and (status is None or p.status == status)
        ]
        if search:
            out = [p for p in out if search.lower() in p.name.lower()]
        return sorted(out, key=lambda p: (p.start_date, p.name), reverse=True)


class InMemoryHours:
    """Rows are kept in column form; `links` maps working_hours_id -> payroll_id."""

    def __init__(self, profiles: InMemoryProfiles, projects: InMemoryProjects):
        self.rows: dict[int, dict] = {}
        self.links: dict[int, int] = {}
        self.profiles = profiles
        self.projects = projects
        self._id = 0

    def _build(self, working_hours_id: int, v: dict) -> WorkingHours:
        profile = self.profiles.items.get(v["profile_id"])
        project = self.projects.items.get(v["project_id"])
        client = self.projects.clients.items.get(v["client_id"])
        return WorkingHours(
            working_hours_id=working_hours_id,
            profile_id=v["profile_id"],
            client_id=v["client_id"],
            project_id=v["project_id"],
            work_date=v["date"],
            start_time=v["start_time"],
            end_time=v["end_time"],
            total_hours=Decimal(v["total_hours"]),
            hourly_rate=Decimal(v["hourly_rate"]),
            payable_amount=Decimal(v["payable_amount"]),
            status=_enum(WorkingHoursStatus, v["status"]),
            sign_in_time=v.get("sign_in_time"),
            sign_out_time=v.get("sign_out_time"),
            actual_hours=Decimal(v.get("actual_hours") or 0),
            overtime_hours=Decimal(v.get("overtime_hours") or 0),
            notes=v.get("notes"),
            profile_name=profile.full_name if profile else None,
            client_name=client.company if client else None,
            project_name=project.name if project else None,
            payroll_id=self.links.get(working_hours_id),
        )

    def get_by_id(self, working_hours_id: int) -> Optional[WorkingHours]:
        v = self.rows.get(int(working_hours_id))
        return self._build(int(working_hours_id), v) if v else None

    def create(self, *, values) -> int:
        self._id += 1
        v = dict(values)
        v["status"] = _enum(WorkingHoursStatus, v.get("status") or "pending").value
        self.rows[self._id] = v
        return self._id

    def update(self, working_hours_id: int, *, changes) -> bool:
        if int(working_hours_id) not in self.rows:
            return False
        self.rows[int(working_hours_id)].update(dict(changes))
        return True

    def delete(self, working_hours_id: int) -> bool:
        return self.rows.pop(int(working_hours_id), None) is not None

    def set_status(self, working_hours_ids, status, *, only_from=None) -> int:
        changed = 0
        for i in working_hours_ids:
            v = self.rows.get(int(i))
            if v is None or (only_from is not None and v["status"] != only_from.value):
                continue
            v["status"] = status.value
            changed += 1
        return changed

    def list_hours(self, flt: HoursFilter):
        out = []
        for i in self.rows:
            r = self.get_by_id(i)
            if flt.profile_id is not None and r.profile_id != flt.profile_id:
                continue
            if flt.client_id is not None and r.client_id != flt.client_id:
                continue
            if flt.project_id is not None and r.project_id != flt.project_id:
                continue
            if flt.status is not None and r.status != flt.status:
                continue
            if flt.start is not None and r.work_date < flt.start:
                continue
            if flt.end is not None and r.work_date > flt.end:
                continue
            if flt.unlinked_only and r.payroll_id is not None:
                continue
            out.append(r)
        out.sort(key=lambda r: (r.work_date, r.start_time), reverse=True)
        return out[: flt.limit]

    def list_by_ids(self, working_hours_ids):
        out = [self.get_by_id(i) for i in working_hours_ids if int(i) in self.rows]
        return sorted(out, key=lambda r: r.work_date)


class InMemoryPayrolls:
    def __init__(self, hours: InMemoryHours, profiles: InMemoryProfiles):
        self.items: dict[int, Payroll] = {}
        self.hours = hours
        self.profiles = profiles
        self._id = 0

    def _decorate(self, p: Payroll) -> Payroll:
        profile = self.profiles.items.get(p.profile_id)
        return replace(p, profile_name=profile.full_name if profile else None)

    def get_by_id(self, payroll_id: int) -> Optional[Payroll]:
        p = self.items.get(int(payroll_id))
        return self._decorate(p) if p else None

    def create(self, *, values, working_hours_ids=()) -> int:
        for wid in working_hours_ids:
            if int(wid) in self.hours.links:
                raise RuntimeError(f"working hours {wid} already linked")
        self._id += 1
        v = dict(values)
        self.items[self._id] = Payroll(
            payroll_id=self._id,
            profile_id=v["profile_id"],
            pay_period_start=v["pay_period_start"],
            pay_period_end=v["pay_period_end"],
            total_hours=Decimal(v["total_hours"]),
            hourly_rate=Decimal(v["hourly_rate"]),
            gross_pay=Decimal(v["gross_pay"]),
            deductions=Decimal(v["deductions"]),
            net_pay=Decimal(v["net_pay"]),
            status=_enum(PayrollStatus, v.get("status") or "pending"),
            bank_account_id=v.get("bank_account_id"),
        )
        for wid in working_hours_ids:
            self.hours.links[int(wid)] = self._id
        return self._id

    def update(self, payroll_id: int, *, changes) -> bool:
        p = self.items.get(int(payroll_id))
        if not p:
            return False
        changes = dict(changes)
        if "status" in changes:
            changes["status"] = _enum(PayrollStatus, changes["status"])
        self.items[p.payroll_id] = replace(p, **changes)
        return True

    def delete(self, payroll_id: int) -> bool:
        for wid, pid in list(self.hours.links.items()):
            if pid == int(payroll_id):
                del self.hours.links[wid]
        return self.items.pop(int(payroll_id), None) is not None

    def list_payrolls(self, *, status=None, profile_id=None, search=None, start=None, end=None):
        out = [self._decorate(p) for p in self.items.values()]
        out = [
            p
            for p in out
            if (status is None or p.status == status)
            and (profile_id is None or p.profile_id == profile_id)
            and (start is None or p.pay_period_end >= start)
            and (end is None or p.pay_period_start <= end)
            and (not search or search.lower() in (p.profile_name or "").lower())
        ]
        return sorted(out, key=lambda p: (p.pay_period_start, p.payroll_id), reverse=True)

    def find_overlapping(self, profile_ids, start, end):
        return [
            self._decorate(p)
            for p in self.items.values()
            if p.profile_id in set(profile_ids) and p.pay_period_start <= end and p.pay_period_end >= start
        ]

    def linked_working_hours_ids(self, payroll_id: int):
        return sorted(wid for wid, pid in self.hours.links.items() if pid == int(payroll_id))


class InMemoryTemplates:
    def __init__(self):
        self.items: dict[int, SalaryTemplate] = {}
        self._id = 0
        self._tick = 0

    def _stamp(self) -> datetime:
        self._tick += 1
        return datetime(2026, 1, 1) + timedelta(minutes=self._tick)

    def get_by_id(self, template_id: int) -> Optional[SalaryTemplate]:
        return self.items.get(int(template_id))

    def create(self, *, values) -> int:
        self._id += 1
        v = dict(values)
        v["is_active"] = bool(v.get("is_active", 1))
        self.items[self._id] = SalaryTemplate(template_id=self._id, updated_at=self._stamp(), **v)
        return self._id

    def update(self, template_id: int, *, changes) -> bool:
        t = self.items.get(int(template_id))
        if not t:
            return False
        changes = dict(changes)
        if "is_active" in changes:
            changes["is_active"] = bool(changes["is_active"])
        self.items[t.template_id] = replace(t, updated_at=self._stamp(), **changes)
        return True

    def delete(self, template_id: int) -> bool:
        return self.items.pop(int(template_id), None) is not None

    def list_templates(self, *, profile_id=None, active_only=False):
        out = [
            t
            for t in self.items.values()
            if (profile_id is None or t.profile_id == profile_id) and (t.is_active or not active_only)
        ]
        return sorted(out, key=lambda t: (t.updated_at, t.template_id), reverse=True)


class InMemoryAccounts:
    def __init__(self):
        self.items: dict[int, BankAccount] = {}
        self._id = 0

    def get_by_id(self, account_id: int) -> Optional[BankAccount]:
        return self.items.get(int(account_id))

    def create(self, *, values) -> int:
        self._id += 1
        v = dict(values)
        v["is_primary"] = bool(v.get("is_primary", 0))
        v["opening_balance"] = Decimal(v.get("opening_balance") or 0)
        self.items[self._id] = BankAccount(account_id=self._id, **v)
        return self._id

    def update(self, account_id: int, *, changes) -> bool:
        a = self.items.get(int(account_id))
        if not a:
            return False
        changes = dict(changes)
        if "is_primary" in changes:
            changes["is_primary"] = bool(changes["is_primary"])
        self.items[a.account_id] = replace(a, **changes)
        return True

    def delete(self, account_id: int) -> bool:
        return self.items.pop(int(account_id), None) is not None

    def list_accounts(self, *, profile_id=None, company_only=False):
        out = [
            a
            for a in self.items.values()
            if (profile_id is None or a.profile_id == profile_id) and (not company_only or a.profile_id is None)
        ]
        return sorted(out, key=lambda a: (not a.is_primary, a.bank_name, a.account_id))

    def clear_primary(self, *, profile_id, except_account_id=None) -> int:
        changed = 0
        for a in list(self.items.values()):
            if a.profile_id == profile_id and a.account_id != except_account_id and a.is_primary:
                self.items[a.account_id] = replace(a, is_primary=False)
                changed += 1
        return changed


class InMemoryTransactions:
    def __init__(self):
        self.items: dict[int, BankTransaction] = {}
        self._id = 0

    def _build(self, transaction_id: int, v: dict) -> BankTransaction:
        return BankTransaction(
            transaction_id=transaction_id,
            description=v["description"],
            amount=Decimal(v["amount"]),
            type=_enum(TransactionType, v["type"]),
            category=_enum(TransactionCategory, v["category"]),
            txn_date=v["date"],
            bank_account_id=v.get("bank_account_id"),
            client_id=v.get("client_id"),
            project_id=v.get("project_id"),
            profile_id=v.get("profile_id"),
        )

    def get_by_id(self, transaction_id: int) -> Optional[BankTransaction]:
        return self.items.get(int(transaction_id))

    def create(self, *, values) -> int:
        self._id += 1
        self.items[self._id] = self._build(self._id, dict(values))
        return self._id

    def update(self, transaction_id: int, *, changes) -> bool:
        if int(transaction_id) not in self.items:
            return False
        self.items[int(transaction_id)] = self._build(int(transaction_id), dict(changes))
        return True

    def delete(self, transaction_id: int) -> bool:
        return self.items.pop(int(transaction_id), None) is not None

    def list_transactions(self, flt: TransactionFilter):
        out = [
            t
            for t in self.items.values()
            if (flt.account_id is None or t.bank_account_id == flt.account_id)
            and (flt.type is None or t.type == flt.type)
            and (flt.category is None or t.category == flt.category)
        ]
        return sorted(out, key=lambda t: (t.txn_date, t.transaction_id), reverse=True)[: flt.limit]

    def totals_by_type(self, *, account_id=None):
        totals = {TransactionType.DEPOSIT: Decimal(0), TransactionType.WITHDRAWAL: Decimal(0)}
        for t in self.items.values():
            if account_id is None or t.bank_account_id == account_id:
                totals[t.type] += t.amount
        return totals

    def count_for_account(self, account_id: int) -> int:
        return sum(1 for t in self.items.values() if t.bank_account_id == int(account_id))


class InMemoryNotifications:
    def __init__(self):
        self.items: dict[int, Notification] = {}
        self._id = 0

    def get_by_id(self, notification_id: int) -> Optional[Notification]:
        return self.items.get(int(notification_id))

    def create_many(self, *, rows) -> int:
        for v in rows:
            self._id += 1
            self.items[self._id] = Notification(
                notification_id=self._id,
                recipient_profile_id=v["recipient_profile_id"],
                title=v["title"],
                message=v["message"],
                type=v["type"],
                priority=_enum(NotificationPriority, v["priority"]),
                action_type=_enum(NotificationActionType, v["action_type"]),
                action_data=v.get("action_data") or {},
                sender_profile_id=v.get("sender_profile_id"),
                related_id=v.get("related_id"),
                created_at=datetime(2026, 3, 1, 9, 0) + timedelta(minutes=self._id),
            )
        return len(rows)

    def list_for_recipient(self, profile_id, *, start=None, end=None, unread_only=False, limit=200):
        out = [
            n
            for n in self.items.values()
            if n.recipient_profile_id == profile_id and (not unread_only or not n.is_read)
        ]
        return sorted(out, key=lambda n: n.created_at, reverse=True)[:limit]

    def unread_count(self, profile_id: int) -> int:
        return sum(1 for n in self.items.values() if n.recipient_profile_id == profile_id and not n.is_read)

    def mark_read(self, notification_id: int, *, at) -> bool:
        n = self.items.get(int(notification_id))
        if not n:
            return False
        self.items[n.notification_id] = replace(n, is_read=True, read_at=at)
        return True

    def mark_all_read(self, profile_id: int, *, at) -> int:
        changed = 0
        for n in list(self.items.values()):
            if n.recipient_profile_id == profile_id and not n.is_read:
                self.items[n.notification_id] = replace(n, is_read=True, read_at=at)
                changed += 1
        return changed

    def mark_actioned(self, notification_id: int, *, at) -> bool:
        n = self.items.get(int(notification_id))
        if not n or n.is_actioned:
            return False
        self.items[n.notification_id] = replace(n, is_actioned=True, actioned_at=at)
        return True

    def delete(self, notification_id: int) -> bool:
        return self.items.pop(int(notification_id), None) is not None


class InMemoryBulkPayroll:
    def __init__(self):
        self.batches: dict[int, BulkPayroll] = {}
        self.items: dict[int, BulkPayrollItem] = {}
        self._batch_id = 0
        self._item_id = 0

    def create_batch(self, *, values, profile_ids) -> int:
        self._batch_id += 1
        v = dict(values)
        v["status"] = _enum(BulkPayrollStatus, v["status"])
        self.batches[self._batch_id] = BulkPayroll(bulk_payroll_id=self._batch_id, **v)
        for profile_id in profile_ids:
            self._item_id += 1
            self.items[self._item_id] = BulkPayrollItem(
                item_id=self._item_id,
                bulk_payroll_id=self._batch_id,
                profile_id=int(profile_id),
            )
        return self._batch_id

    def update_batch(self, bulk_payroll_id: int, *, changes) -> bool:
        b = self.batches.get(int(bulk_payroll_id))
        if not b:
            return False
        changes = dict(changes)
        if "status" in changes:
            changes["status"] = _enum(BulkPayrollStatus, changes["status"])
        self.batches[b.bulk_payroll_id] = replace(b, **changes)
        return True

    def update_item(self, item_id: int, *, changes) -> bool:
        i = self.items.get(int(item_id))
        if not i:
            return False
        changes = dict(changes)
        if "status" in changes:
            changes["status"] = _enum(BulkPayrollItemStatus, changes["status"])
        self.items[i.item_id] = replace(i, **changes)
        return True

    def list_items(self, bulk_payroll_id: int):
        return [i for i in sorted(self.items.values(), key=lambda i: i.item_id) if i.bulk_payroll_id == bulk_payroll_id]

    def get_batch(self, bulk_payroll_id: int) -> Optional[BulkPayroll]:
        b = self.batches.get(int(bulk_payroll_id))
        return replace(b, items=tuple(self.list_items(b.bulk_payroll_id))) if b else None

    def list_batches(self):
        return sorted(self.batches.values(), key=lambda b: b.bulk_payroll_id, reverse=True)


@pytest.fixture
def repos():
    profiles = InMemoryProfiles()
    clients = InMemoryClients()
    projects = InMemoryProjects(clients)
    clients.projects = projects
    hours = InMemoryHours(profiles, projects)
    projects.hours = hours
    return {
        "profiles_repo": profiles,
        "grants_repo": InMemoryGrants(),
        "clients_repo": clients,
        "projects_repo": projects,
        "hours_repo": hours,
        "payroll_repo": InMemoryPayrolls(hours, profiles),
        "templates_repo": InMemoryTemplates(),
        "bulk_repo": InMemoryBulkPayroll(),
        "accounts_repo": InMemoryAccounts(),
        "transactions_repo": InMemoryTransactions(),
        "notifications_repo": InMemoryNotifications(),
    }


@pytest.fixture
def container(repos):
    return wire_container(conn=None, **repos)


class Seed:
    """Shortcuts that put rows straight into the in-memory repositories."""

    def __init__(self, repos):
        self.repos = repos

    def profile(self, name: str, *, role: Role = Role.EMPLOYEE, rate: str = "30.00", password: str = "secret123") -> int:
        return self.repos["profiles_repo"].create(
            values={
                "full_name": name,
                "email": f"{name.lower().replace(' ', '.')}@example.com",
                "password_hash": generate_password_hash(password),
                "role": role.value,
                "hourly_rate": Decimal(rate),
            }
        )

    def client_project(self, *, company: str = "Harbour Logistics", project: str = "Night shifts") -> tuple[int, int]:
        client_id = self.repos["clients_repo"].create(
            values={"name": "Dana", "email": "dana@example.com", "company": company, "status": "active"}
        )
        project_id = self.repos["projects_repo"].create(
            values={"name": project, "client_id": client_id, "start_date": date(2026, 1, 1), "status": "active"}
        )
        return client_id, project_id

    def hours(
        self,
        *,
        profile_id: int,
        client_id: int,
        project_id: int,
        day: date,
        start: time = time(9, 0),
        end: time = time(17, 0),
        sign_in: Optional[time] = None,
        sign_out: Optional[time] = None,
        rate: str = "30.00",
        status: WorkingHoursStatus = WorkingHoursStatus.APPROVED,
    ) -> int:
        values = {
            "profile_id": profile_id,
            "client_id": client_id,
            "project_id": project_id,
            "date": day,
            "start_time": start,
            "end_time": end,
            "sign_in_time": sign_in,
            "sign_out_time": sign_out,
            "notes": None,
            "status": status.value,
        }
        values.update(
            calculate_amounts(
                start_time=start,
                end_time=end,
                sign_in_time=sign_in,
                sign_out_time=sign_out,
                hourly_rate=Decimal(rate),
            )
        )
        return self.repos["hours_repo"].create(values=values)

    def company_account(self, *, bank_name: str = "Commonwealth", opening: str = "1000.00", primary: bool = True) -> int:
        return self.repos["accounts_repo"].create(
            values={
                "bank_name": bank_name,
                "account_number": "12345678",
                "account_holder_name": "Workforce Pty Ltd",
                "opening_balance": Decimal(opening),
                "is_primary": 1 if primary else 0,
                "profile_id": None,
            }
        )


@pytest.fixture
def seed(repos):
    return Seed(repos)
