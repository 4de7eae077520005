"""Ordered field checks for create and update requests.

Every validator walks its checks in a fixed order and returns the first
failure, or None when the request is valid. Checks are not aggregated:
clients always receive a single message naming the first offending
field. `None`, empty and whitespace-only strings count as missing.
"""

from datetime import date
from typing import Callable, Iterable, Optional

from . import schemas
from .results import ValidationFailed, required

EMAIL_IN_USE = "The email provided is already in use."
PROFICIENCY_RANGE = "Proficiency must be between 0 and 100."

Check = Callable[[], Optional[ValidationFailed]]


def is_blank(value) -> bool:
    return value is None or not str(value).strip()


def _present(value, field: str, label: str) -> Check:
    return lambda: required(field, label) if is_blank(value) else None


def _date_set(value: Optional[date], field: str, label: str) -> Check:
    return lambda: required(field, label) if value is None or value == date.min else None


def first_failure(checks: Iterable[Check]) -> Optional[ValidationFailed]:
    """Run `checks` in order and stop at the first failure."""
    for check in checks:
        failure = check()
        if failure is not None:
            return failure
    return None


def _user_profile_checks(request) -> list:
    return [
        _present(request.phone, "phone", "Phone"),
        _date_set(request.birth_date, "birth_date", "Birth date"),
        _present(request.current_role, "current_role", "Current role"),
        _present(request.interest_area, "interest_area", "Interest area"),
    ]


def validate_create_user(request: schemas.CreateUserRequest, email_in_use: Callable[[str], bool]) -> Optional[ValidationFailed]:
    """Validate a new user.

    `email_in_use` is only consulted once name and email are present,
    so the store lookup never runs for a request that already failed.
    """
    def email_available():
        if email_in_use(request.email):
            return ValidationFailed(field="email", message=EMAIL_IN_USE)
        return None

    checks = [
        _present(request.name, "name", "Name"),
        _present(request.email, "email", "Email"),
        email_available,
        _present(request.password, "password", "Password"),
    ]
    return first_failure(checks + _user_profile_checks(request))


def validate_update_user(request: schemas.UpdateUserRequest) -> Optional[ValidationFailed]:
    checks = [
        _present(request.name, "name", "Name"),
        _present(request.email, "email", "Email"),
    ]
    return first_failure(checks + _user_profile_checks(request))


def validate_skill(request: schemas.UpdateSkillRequest) -> Optional[ValidationFailed]:
    """Validate a skill create or update payload."""
    p = request.proficiency_percentage
    return first_failure([
        _present(request.name, "name", "Name"),
        _present(request.level, "level", "Level"),
        _present(request.category, "category", "Category"),
        lambda: None if 0 <= p <= 100 else ValidationFailed(field="proficiency_percentage", message=PROFICIENCY_RANGE),
    ])


def validate_course(request: schemas.UpdateCourseRequest) -> Optional[ValidationFailed]:
    return first_failure([
        _present(request.title, "title", "Title"),
        _present(request.description, "description", "Description"),
        _present(request.category, "category", "Category"),
        _present(request.difficulty, "difficulty", "Difficulty"),
    ])


def validate_education(request: schemas.UpdateEducationRequest) -> Optional[ValidationFailed]:
    return first_failure([
        _present(request.degree, "degree", "Degree"),
        _present(request.institution, "institution", "Institution"),
    ])
