from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..banking.service import BankingService
from ..clients.repository import ClientRepository
from ..common.datetime_utils import month_bounds
from ..common.money import dsum, to_hours, to_money
from ..common.validators import require_date_range
from ..core.enums import ClientStatus, PayrollStatus, ProjectStatus, WorkingHoursStatus
from ..notifications.service import NotificationService
from ..payroll.model import Payroll
from ..payroll.repository import PayrollRepository
from ..profiles.repository import ProfileRepository
from ..projects.repository import ProjectRepository
from ..timesheets.model import HoursFilter
from ..timesheets.repository import WorkingHoursRepository

REPORT_ROW_LIMIT = 10000

TIMESHEET_CSV_FIELDS = [
    "date",
    "profile_id",
    "full_name",
    "client",
    "project",
    "start_time",
    "end_time",
    "sign_in_time",
    "sign_out_time",
    "total_hours",
    "actual_hours",
    "overtime_hours",
    "hourly_rate",
    "payable_amount",
    "status",
    "notes",
]


@dataclass(frozen=True)
class DashboardStats:
    active_clients: int
    active_projects: int
    active_profiles: int
    pending_timesheets: int
    pending_payrolls: int
    total_balance: Decimal


@dataclass(frozen=True)
class PersonalDashboard:
    hours_this_month: Decimal
    payable_this_month: Decimal
    pending_rows: int
    latest_payroll: Optional[Payroll]
    unread_notifications: int


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: list[dict]


class ReportService:
    def __init__(
        self,
        clients: ClientRepository,
        projects: ProjectRepository,
        profiles: ProfileRepository,
        hours: WorkingHoursRepository,
        payrolls: PayrollRepository,
        banking: BankingService,
        notifications: NotificationService,
    ):
        self._clients = clients
        self._projects = projects
        self._profiles = profiles
        self._hours = hours
        self._payrolls = payrolls
        self._banking = banking
        self._notifications = notifications

    def dashboard_stats(self) -> DashboardStats:
        return DashboardStats(
            active_clients=len(self._clients.list_clients(status=ClientStatus.ACTIVE)),
            active_projects=len(self._projects.list_projects(status=ProjectStatus.ACTIVE)),
            active_profiles=len(self._profiles.list_profiles(active_only=True)),
            pending_timesheets=len(
                self._hours.list_hours(HoursFilter(status=WorkingHoursStatus.PENDING, limit=REPORT_ROW_LIMIT))
            ),
            pending_payrolls=len(self._payrolls.list_payrolls(status=PayrollStatus.PENDING)),
            total_balance=self._banking.balance(),
        )

    def personal_dashboard(self, profile_id: int, *, today: date) -> PersonalDashboard:
        start, end = month_bounds(today)
        month_rows = self._hours.list_hours(
            HoursFilter(profile_id=int(profile_id), start=start, end=end, limit=REPORT_ROW_LIMIT)
        )
        counted = [r for r in month_rows if r.status != WorkingHoursStatus.REJECTED]
        pending = self._hours.list_hours(
            HoursFilter(profile_id=int(profile_id), status=WorkingHoursStatus.PENDING, limit=REPORT_ROW_LIMIT)
        )
        payrolls = self._payrolls.list_payrolls(profile_id=int(profile_id))
        return PersonalDashboard(
            hours_this_month=to_hours(dsum(r.worked_hours for r in counted)),
            payable_this_month=to_money(dsum(r.payable_amount for r in counted)),
            pending_rows=len(pending),
            latest_payroll=payrolls[0] if payrolls else None,
            unread_notifications=self._notifications.unread_count(int(profile_id)),
        )

    def timesheet_report(self, *, start: date, end: date, profile_id: Optional[int] = None) -> ReportData:
        """Timesheet rows in [start, end] plus per-person totals, ready for CSV export."""
        require_date_range(start, end)
        rows = self._hours.list_hours(
            HoursFilter(profile_id=profile_id, start=start, end=end, limit=REPORT_ROW_LIMIT)
        )

        out_rows: list[dict] = []
        summary_map: dict[int, dict] = {}
        for r in sorted(rows, key=lambda x: (x.work_date, x.profile_name or "", x.start_time)):
            out_rows.append(
                {
                    "date": r.work_date.strftime("%Y-%m-%d"),
                    "profile_id": r.profile_id,
                    "full_name": r.profile_name or "",
                    "client": r.client_name or "",
                    "project": r.project_name or "",
                    "start_time": r.start_time.strftime("%H:%M"),
                    "end_time": r.end_time.strftime("%H:%M"),
                    "sign_in_time": r.sign_in_time.strftime("%H:%M") if r.sign_in_time else "-",
                    "sign_out_time": r.sign_out_time.strftime("%H:%M") if r.sign_out_time else "-",
                    "total_hours": f"{r.total_hours:.2f}",
                    "actual_hours": f"{r.actual_hours:.2f}",
                    "overtime_hours": f"{r.overtime_hours:.2f}",
                    "hourly_rate": f"{r.hourly_rate:.2f}",
                    "payable_amount": f"{r.payable_amount:.2f}",
                    "status": r.status.value,
                    "notes": r.notes or "",
                }
            )

            s = summary_map.get(r.profile_id)
            if not s:
                s = {"profile_id": r.profile_id, "full_name": r.profile_name or "", "hours": Decimal(0), "payable": Decimal(0)}
                summary_map[r.profile_id] = s
            s["hours"] += r.worked_hours
            s["payable"] += r.payable_amount

        summary = [
            {
                "profile_id": s["profile_id"],
                "full_name": s["full_name"],
                "total_hours": to_hours(s["hours"]),
                "total_payable": to_money(s["payable"]),
            }
            for s in summary_map.values()
        ]
        summary.sort(key=lambda x: x["total_hours"], reverse=True)
        return ReportData(rows=out_rows, summary=summary)
