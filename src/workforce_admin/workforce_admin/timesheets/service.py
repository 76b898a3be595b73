from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import date, time
from decimal import Decimal
from typing import Any, Optional, Sequence

from ..common.datetime_utils import hours_between
from ..common.money import dsum, to_hours, to_money
from ..common.validators import optional_text, parse_decimal, require_non_negative
from ..core.enums import Permission, Role, WorkingHoursStatus
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..permissions.service import PermissionService
from ..profiles.repository import ProfileRepository
from ..projects.repository import ProjectRepository
from .model import HoursFilter, WorkingHours
from .repository import WorkingHoursRepository

logger = logging.getLogger(__name__)

EDITABLE_STATUSES = (WorkingHoursStatus.PENDING, WorkingHoursStatus.REJECTED)


@dataclass(frozen=True)
class HoursInput:
    profile_id: Optional[int]
    client_id: Optional[int]
    project_id: Optional[int]
    work_date: Optional[date]
    start_time: Optional[time]
    end_time: Optional[time]
    sign_in_time: Optional[time] = None
    sign_out_time: Optional[time] = None
    hourly_rate: Any = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class HoursTotals:
    total_hours: Decimal
    payable_amount: Decimal
    pending_count: int
    row_count: int


@dataclass
class BulkResult:
    done: list[int] = field(default_factory=list)
    skipped: list[int] = field(default_factory=list)


def calculate_amounts(
    *,
    start_time: time,
    end_time: time,
    sign_in_time: Optional[time],
    sign_out_time: Optional[time],
    hourly_rate: Decimal,
) -> dict:
    """Derived hour and pay columns of a timesheet row.

    total = scheduled end - start; actual = sign out - sign in (0 when not signed);
    overtime = actual beyond the scheduled hours; payable uses actual hours when signed in/out.
    """
    total = hours_between(start_time, end_time)
    signed = sign_in_time is not None and sign_out_time is not None
    actual = hours_between(sign_in_time, sign_out_time) if signed else Decimal("0.00")
    overtime = to_hours(max(actual - total, Decimal(0))) if signed else Decimal("0.00")
    worked = actual if signed else total
    return {
        "total_hours": total,
        "actual_hours": actual,
        "overtime_hours": overtime,
        "hourly_rate": to_money(hourly_rate),
        "payable_amount": to_money(worked * hourly_rate),
    }


def summarize(rows: Sequence[WorkingHours]) -> HoursTotals:
    return HoursTotals(
        total_hours=to_hours(dsum(r.worked_hours for r in rows)),
        payable_amount=to_money(dsum(r.payable_amount for r in rows)),
        pending_count=sum(1 for r in rows if r.status == WorkingHoursStatus.PENDING),
        row_count=len(rows),
    )


class TimesheetService:
    """Use case: log, review and approve working hours."""

    def __init__(
        self,
        hours: WorkingHoursRepository,
        profiles: ProfileRepository,
        projects: ProjectRepository,
        permissions: PermissionService,
    ):
        self._hours = hours
        self._profiles = profiles
        self._projects = projects
        self._permissions = permissions

    def _can_manage(self, role: Role) -> bool:
        return self._permissions.has_permission(role, Permission.WORKING_HOURS_MANAGE)

    def _clean(self, data: HoursInput) -> dict:
        if not data.profile_id:
            raise ValidationError("Please select a team member")
        profile = self._profiles.get_by_id(int(data.profile_id))
        if not profile:
            raise ValidationError("Team member not found")
        if not data.client_id or not data.project_id:
            raise ValidationError("Client and project are required")
        project = self._projects.get_by_id(int(data.project_id))
        if not project or project.client_id != int(data.client_id):
            raise ValidationError("The selected project does not belong to the selected client")
        if data.work_date is None:
            raise ValidationError("Date is required")
        if data.start_time is None or data.end_time is None:
            raise ValidationError("Start and end time are required")
        if data.end_time <= data.start_time:
            raise ValidationError("End time must be after start time")
        if (data.sign_in_time is None) != (data.sign_out_time is None):
            raise ValidationError("Sign in and sign out times must be given together")
        if data.sign_in_time is not None and data.sign_out_time <= data.sign_in_time:
            raise ValidationError("Sign out time must be after sign in time")

        rate = parse_decimal(data.hourly_rate, "Hourly rate", default=profile.hourly_rate)
        require_non_negative(rate, "Hourly rate")

        values = {
            "profile_id": profile.profile_id,
            "client_id": int(data.client_id),
            "project_id": project.project_id,
            "date": data.work_date,
            "start_time": data.start_time,
            "end_time": data.end_time,
            "sign_in_time": data.sign_in_time,
            "sign_out_time": data.sign_out_time,
            "notes": optional_text(data.notes),
        }
        values.update(
            calculate_amounts(
                start_time=data.start_time,
                end_time=data.end_time,
                sign_in_time=data.sign_in_time,
                sign_out_time=data.sign_out_time,
                hourly_rate=rate,
            )
        )
        return values

    def _check_owner(self, *, current_role: Role, current_profile_id: int, profile_id: Optional[int]) -> None:
        if self._can_manage(current_role):
            return
        if profile_id is None or int(profile_id) != int(current_profile_id):
            raise AuthorizationError("You can only manage your own working hours")

    def get(self, working_hours_id: int) -> WorkingHours:
        row = self._hours.get_by_id(int(working_hours_id))
        if not row:
            raise NotFoundError("Working hours entry not found")
        return row

    def log_hours(self, *, current_role: Role, current_profile_id: int, data: HoursInput) -> int:
        self._permissions.require(current_role, Permission.WORKING_HOURS_VIEW)
        self._check_owner(current_role=current_role, current_profile_id=current_profile_id, profile_id=data.profile_id)

        values = self._clean(data)
        values["status"] = WorkingHoursStatus.PENDING.value
        working_hours_id = self._hours.create(values=values)
        logger.info("Logged %s hours for profile %s", values["total_hours"], values["profile_id"])
        return working_hours_id

    def update_hours(
        self,
        *,
        current_role: Role,
        current_profile_id: int,
        working_hours_id: int,
        data: HoursInput,
    ) -> None:
        existing = self.get(working_hours_id)
        self._check_owner(
            current_role=current_role,
            current_profile_id=current_profile_id,
            profile_id=existing.profile_id,
        )
        self._check_owner(current_role=current_role, current_profile_id=current_profile_id, profile_id=data.profile_id)
        if existing.status not in EDITABLE_STATUSES:
            raise ValidationError(f"Working hours that are {existing.status.value} can no longer be edited")

        values = self._clean(data)
        # A corrected rejected entry goes back for review.
        values["status"] = WorkingHoursStatus.PENDING.value
        self._hours.update(existing.working_hours_id, changes=values)

    def delete_hours(self, *, current_role: Role, current_profile_id: int, working_hours_id: int) -> None:
        existing = self.get(working_hours_id)
        self._check_owner(
            current_role=current_role,
            current_profile_id=current_profile_id,
            profile_id=existing.profile_id,
        )
        if existing.payroll_id is not None or existing.status == WorkingHoursStatus.PAID:
            raise ConflictError("These working hours are part of a payroll and cannot be deleted")
        if not self._can_manage(current_role) and existing.status not in EDITABLE_STATUSES:
            raise ValidationError("Approved working hours can no longer be deleted")
        self._hours.delete(existing.working_hours_id)

    def _decide(self, *, current_role: Role, working_hours_id: int, status: WorkingHoursStatus) -> None:
        self._permissions.require(current_role, Permission.WORKING_HOURS_APPROVE)
        row = self.get(working_hours_id)
        if row.status != WorkingHoursStatus.PENDING:
            raise ValidationError("Only pending working hours can be reviewed")
        if self._hours.set_status([row.working_hours_id], status, only_from=WorkingHoursStatus.PENDING) == 0:
            raise ValidationError("Only pending working hours can be reviewed")

    def approve(self, *, current_role: Role, working_hours_id: int) -> None:
        self._decide(current_role=current_role, working_hours_id=working_hours_id, status=WorkingHoursStatus.APPROVED)

    def reject(self, *, current_role: Role, working_hours_id: int) -> None:
        self._decide(current_role=current_role, working_hours_id=working_hours_id, status=WorkingHoursStatus.REJECTED)

    def _decide_many(self, *, current_role: Role, ids: Sequence[int], status: WorkingHoursStatus) -> BulkResult:
        self._permissions.require(current_role, Permission.WORKING_HOURS_APPROVE)
        result = BulkResult()
        for working_hours_id in dict.fromkeys(int(i) for i in ids):
            row = self._hours.get_by_id(working_hours_id)
            if row is None or row.status != WorkingHoursStatus.PENDING:
                result.skipped.append(working_hours_id)
                continue
            if self._hours.set_status([working_hours_id], status, only_from=WorkingHoursStatus.PENDING):
                result.done.append(working_hours_id)
            else:
                result.skipped.append(working_hours_id)
        logger.info("%s %d working hours entries (%d skipped)", status.value, len(result.done), len(result.skipped))
        return result

    def approve_many(self, *, current_role: Role, ids: Sequence[int]) -> BulkResult:
        return self._decide_many(current_role=current_role, ids=ids, status=WorkingHoursStatus.APPROVED)

    def reject_many(self, *, current_role: Role, ids: Sequence[int]) -> BulkResult:
        return self._decide_many(current_role=current_role, ids=ids, status=WorkingHoursStatus.REJECTED)

    def list_hours(self, *, current_role: Role, current_profile_id: int, flt: HoursFilter) -> Sequence[WorkingHours]:
        self._permissions.require(current_role, Permission.WORKING_HOURS_VIEW)
        if not self._can_manage(current_role) and not self._permissions.has_permission(
            current_role, Permission.WORKING_HOURS_APPROVE
        ):
            flt = replace(flt, profile_id=int(current_profile_id))
        return self._hours.list_hours(flt)

    def totals(self, rows: Sequence[WorkingHours]) -> HoursTotals:
        return summarize(rows)
