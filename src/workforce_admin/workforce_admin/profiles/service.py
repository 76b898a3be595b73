from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.money import to_money
from ..common.validators import (
    optional_text,
    parse_decimal,
    parse_enum,
    require_email,
    require_min_length,
    require_non_empty,
    require_non_negative,
)
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import EmploymentType, Permission, Role
from ..core.exceptions import AuthenticationError, NotFoundError, ValidationError
from ..permissions.service import PermissionService
from .model import Profile
from .repository import ProfileRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    profile_id: int
    full_name: str
    email: str
    role: Role


@dataclass(frozen=True)
class ProfileInput:
    full_name: str
    email: str
    role: str
    hourly_rate: Any = "0"
    employment_type: Optional[str] = None
    salary: Any = None
    phone: Optional[str] = None
    full_address: Optional[str] = None
    tax_file_number: Optional[str] = None
    start_date: Optional[date] = None


class AuthService:
    """Use case: authenticate a profile (login)."""

    def __init__(self, profiles: ProfileRepository):
        self._profiles = profiles

    def authenticate(self, email: str, password: str) -> SessionUser:
        profile = self._profiles.get_by_email((email or "").strip().lower())
        if not profile or not profile.is_active:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(profile.password_hash, password or "")
        except ValueError:
            # placeholder or corrupted hashes
            ok = False

        if not ok:
            raise AuthenticationError("Invalid email or password")

        logger.info("Profile %s signed in", profile.profile_id)
        return SessionUser(
            profile_id=profile.profile_id,
            full_name=profile.full_name,
            email=profile.email,
            role=profile.role,
        )


class ProfileService:
    """Use case: manage team member profiles."""

    def __init__(self, profiles: ProfileRepository, permissions: PermissionService):
        self._profiles = profiles
        self._permissions = permissions

    def _clean(self, data: ProfileInput) -> dict:
        hourly_rate = require_non_negative(
            to_money(parse_decimal(data.hourly_rate, "Hourly rate", default=Decimal(0))), "Hourly rate"
        )
        salary = None
        if data.salary not in (None, ""):
            salary = require_non_negative(to_money(parse_decimal(data.salary, "Salary")), "Salary")

        employment_type = None
        if data.employment_type:
            employment_type = parse_enum(EmploymentType, data.employment_type, "Employment type").value

        return {
            "full_name": require_non_empty(data.full_name, "Full name"),
            "email": require_email(data.email),
            "role": parse_enum(Role, data.role, "Role").value,
            "hourly_rate": hourly_rate,
            "employment_type": employment_type,
            "salary": salary,
            "phone": optional_text(data.phone),
            "full_address": optional_text(data.full_address),
            "tax_file_number": optional_text(data.tax_file_number),
            "start_date": data.start_date,
        }

    def get(self, profile_id: int) -> Profile:
        profile = self._profiles.get_by_id(int(profile_id))
        if not profile:
            raise NotFoundError("Profile not found")
        return profile

    def create_profile(self, *, current_role: Role, data: ProfileInput, password: str) -> int:
        self._permissions.require(current_role, Permission.EMPLOYEES_MANAGE)

        values = self._clean(data)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
        if self._profiles.get_by_email(values["email"]):
            raise ValidationError("A profile with this email already exists")
        if values["role"] == Role.ADMIN.value and current_role != Role.ADMIN:
            raise ValidationError("Only administrators can create administrator profiles")

        values["password_hash"] = generate_password_hash(password)
        profile_id = self._profiles.create(values=values)
        logger.info("Created profile %s (%s)", profile_id, values["role"])
        return profile_id

    def update_profile(self, *, current_role: Role, profile_id: int, data: ProfileInput) -> None:
        self._permissions.require(current_role, Permission.EMPLOYEES_MANAGE)
        existing = self.get(profile_id)

        values = self._clean(data)
        if values["email"] != existing.email:
            other = self._profiles.get_by_email(values["email"])
            if other and other.profile_id != existing.profile_id:
                raise ValidationError("A profile with this email already exists")
        if values["role"] != existing.role.value and Role.ADMIN.value in (values["role"], existing.role.value):
            if current_role != Role.ADMIN:
                raise ValidationError("Only administrators can change administrator roles")

        self._profiles.update(existing.profile_id, changes=values)

    def change_password(self, *, profile_id: int, current_password: str, new_password: str) -> None:
        profile = self.get(profile_id)
        if not check_password_hash(profile.password_hash, current_password or ""):
            raise AuthenticationError("Current password is incorrect")
        require_min_length(new_password, "Password", MIN_PASSWORD_LENGTH)
        self._profiles.update(profile.profile_id, changes={"password_hash": generate_password_hash(new_password)})

    def set_active(self, *, current_role: Role, current_profile_id: int, profile_id: int, is_active: bool) -> None:
        self._permissions.require(current_role, Permission.EMPLOYEES_MANAGE)
        if int(profile_id) == int(current_profile_id) and not is_active:
            raise ValidationError("You cannot deactivate your own profile")
        profile = self.get(profile_id)
        self._profiles.update(profile.profile_id, changes={"is_active": 1 if is_active else 0})
        logger.info("Profile %s active=%s", profile.profile_id, is_active)

    def list_profiles(
        self,
        *,
        role: Optional[Role] = None,
        active_only: bool = False,
        search: Optional[str] = None,
    ) -> Sequence[Profile]:
        return self._profiles.list_profiles(role=role, active_only=active_only, search=optional_text(search))

    def stats(self) -> dict:
        profiles = self._profiles.list_profiles()
        by_role = {role.value: 0 for role in Role}
        for p in profiles:
            by_role[p.role.value] += 1
        active = sum(1 for p in profiles if p.is_active)
        return {
            "total": len(profiles),
            "active": active,
            "inactive": len(profiles) - active,
            "by_role": by_role,
        }
