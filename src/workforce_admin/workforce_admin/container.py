from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .banking.mysql_bank_account_repository import MySQLBankAccountRepository
from .banking.mysql_bank_transaction_repository import MySQLBankTransactionRepository
from .banking.repository import BankAccountRepository, BankTransactionRepository
from .banking.service import BankingService
from .bulk_payroll.mysql_bulk_payroll_repository import MySQLBulkPayrollRepository
from .bulk_payroll.repository import BulkPayrollRepository
from .bulk_payroll.service import BulkPayrollService
from .clients.mysql_client_repository import MySQLClientRepository
from .clients.repository import ClientRepository
from .clients.service import ClientService
from .database.connection import DBConfig, DatabaseConnection
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.repository import NotificationRepository
from .notifications.service import NotificationService
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.repository import PayrollRepository
from .payroll.service import PayrollService
from .permissions.mysql_permission_repository import MySQLRolePermissionRepository
from .permissions.repository import RolePermissionRepository
from .permissions.service import PermissionService
from .profiles.mysql_profile_repository import MySQLProfileRepository
from .profiles.repository import ProfileRepository
from .profiles.service import AuthService, ProfileService
from .projects.mysql_project_repository import MySQLProjectRepository
from .projects.repository import ProjectRepository
from .projects.service import ProjectService
from .reports.service import ReportService
from .salary_templates.mysql_salary_template_repository import MySQLSalaryTemplateRepository
from .salary_templates.repository import SalaryTemplateRepository
from .salary_templates.service import SalaryTemplateService
from .timesheets.mysql_working_hours_repository import MySQLWorkingHoursRepository
from .timesheets.repository import WorkingHoursRepository
from .timesheets.service import TimesheetService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    profiles_repo: ProfileRepository
    grants_repo: RolePermissionRepository
    clients_repo: ClientRepository
    projects_repo: ProjectRepository
    hours_repo: WorkingHoursRepository
    payroll_repo: PayrollRepository
    templates_repo: SalaryTemplateRepository
    bulk_repo: BulkPayrollRepository
    accounts_repo: BankAccountRepository
    transactions_repo: BankTransactionRepository
    notifications_repo: NotificationRepository

    permission_service: PermissionService
    auth_service: AuthService
    profile_service: ProfileService
    client_service: ClientService
    project_service: ProjectService
    timesheet_service: TimesheetService
    salary_template_service: SalaryTemplateService
    banking_service: BankingService
    notification_service: NotificationService
    payroll_service: PayrollService
    bulk_payroll_service: BulkPayrollService
    report_service: ReportService


def wire_container(
    *,
    conn: Optional[DatabaseConnection],
    profiles_repo: ProfileRepository,
    grants_repo: RolePermissionRepository,
    clients_repo: ClientRepository,
    projects_repo: ProjectRepository,
    hours_repo: WorkingHoursRepository,
    payroll_repo: PayrollRepository,
    templates_repo: SalaryTemplateRepository,
    bulk_repo: BulkPayrollRepository,
    accounts_repo: BankAccountRepository,
    transactions_repo: BankTransactionRepository,
    notifications_repo: NotificationRepository,
) -> Container:
    """Build every service on top of the given repositories."""
    permission_service = PermissionService(grants_repo)
    auth_service = AuthService(profiles_repo)
    profile_service = ProfileService(profiles_repo, permission_service)
    client_service = ClientService(clients_repo, permission_service)
    project_service = ProjectService(projects_repo, clients_repo, permission_service)
    timesheet_service = TimesheetService(hours_repo, profiles_repo, projects_repo, permission_service)
    salary_template_service = SalaryTemplateService(templates_repo, permission_service)
    banking_service = BankingService(
        accounts_repo,
        transactions_repo,
        profiles_repo,
        projects_repo,
        permission_service,
    )
    notification_service = NotificationService(notifications_repo, profiles_repo, permission_service)
    payroll_service = PayrollService(
        payroll_repo,
        hours_repo,
        profiles_repo,
        salary_template_service,
        accounts_repo,
        transactions_repo,
        notification_service,
        permission_service,
    )
    bulk_payroll_service = BulkPayrollService(bulk_repo, payroll_service, profiles_repo, permission_service)
    report_service = ReportService(
        clients_repo,
        projects_repo,
        profiles_repo,
        hours_repo,
        payroll_repo,
        banking_service,
        notification_service,
    )

    return Container(
        conn=conn,
        profiles_repo=profiles_repo,
        grants_repo=grants_repo,
        clients_repo=clients_repo,
        projects_repo=projects_repo,
        hours_repo=hours_repo,
        payroll_repo=payroll_repo,
        templates_repo=templates_repo,
        bulk_repo=bulk_repo,
        accounts_repo=accounts_repo,
        transactions_repo=transactions_repo,
        notifications_repo=notifications_repo,
        permission_service=permission_service,
        auth_service=auth_service,
        profile_service=profile_service,
        client_service=client_service,
        project_service=project_service,
        timesheet_service=timesheet_service,
        salary_template_service=salary_template_service,
        banking_service=banking_service,
        notification_service=notification_service,
        payroll_service=payroll_service,
        bulk_payroll_service=bulk_payroll_service,
        report_service=report_service,
    )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire_container(
        conn=conn,
        profiles_repo=MySQLProfileRepository(conn),
        grants_repo=MySQLRolePermissionRepository(conn),
        clients_repo=MySQLClientRepository(conn),
        projects_repo=MySQLProjectRepository(conn),
        hours_repo=MySQLWorkingHoursRepository(conn),
        payroll_repo=MySQLPayrollRepository(conn),
        templates_repo=MySQLSalaryTemplateRepository(conn),
        bulk_repo=MySQLBulkPayrollRepository(conn),
        accounts_repo=MySQLBankAccountRepository(conn),
        transactions_repo=MySQLBankTransactionRepository(conn),
        notifications_repo=MySQLNotificationRepository(conn),
    )
