"""Business logic services used by HTTP controllers.

This module holds one service per resource (users, skills, courses,
education). Services are intentionally thin: they validate requests in
a fixed order, check that referenced users exist, and persist through
repositories. Every public method returns a value from `results`
instead of raising; only storage errors escape as exceptions.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from passlib.context import CryptContext
from sqlmodel import Session

from . import models, repositories, schemas, validation
from .config import settings
from .results import Ok, ReferenceNotFound, ResourceNotFound, Result, required

logger = logging.getLogger(__name__)

PWD_CTX = CryptContext(schemes=settings.PASSWORD_SCHEMES, deprecated="auto")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _missing_user(user_id: Optional[int]) -> ReferenceNotFound:
    return ReferenceNotFound(entity="User", entity_id=user_id, message=f"The provided UserId {user_id} does not exist.")


class UserService:
    """Create, query, update and delete users.

    Users returned by `get_by_id`, `get_by_email` and `get_all` have their
    skills, courses and education loaded.
    """
    def __init__(self, session: Session):
        self.session = session
        self.user_repo = repositories.UserRepository(session)

    def create(self, request: schemas.CreateUserRequest) -> Result[models.User]:
        """Validate and persist a new user with a hashed password.

        Email uniqueness is checked with a lookup right before insert;
        two concurrent creates with the same address may both pass.
        """
        failure = validation.validate_create_user(
            request, lambda email: self.user_repo.find_by_email_trimmed(email) is not None
        )
        if failure:
            logger.warning("User creation rejected: %s", failure.message)
            return failure
        user = models.User(
            name=request.name,
            email=request.email.strip(),
            password_hash=PWD_CTX.hash(request.password),
            phone=request.phone,
            birth_date=request.birth_date,
            current_role=request.current_role,
            interest_area=request.interest_area,
        )
        self.user_repo.add(user)
        logger.info("Created user %s", user.id)
        return Ok(user)

    def get_all(self) -> Result[List[models.User]]:
        users = self.user_repo.list_all()
        if not users:
            return ResourceNotFound("No users found.")
        return Ok(users)

    def get_by_id(self, user_id: int) -> Result[models.User]:
        user = self.user_repo.get_with_children(user_id)
        if user is None:
            return ResourceNotFound("User not found.")
        return Ok(user)

    def get_by_email(self, email: Optional[str]) -> Result[models.User]:
        """Look a user up by email, ignoring surrounding whitespace."""
        if validation.is_blank(email):
            return required("email", "Email")
        user = self.user_repo.find_by_email_trimmed(email, with_children=True)
        if user is None:
            return ResourceNotFound("No user exists with this email.")
        return Ok(user)

    def update(self, user_id: int, request: schemas.UpdateUserRequest) -> Result[models.User]:
        """Replace the mutable profile fields of a user.

        The password is not touched and the email is not re-checked for
        uniqueness.
        """
        user = self.user_repo.get(user_id)
        if user is None:
            return ResourceNotFound("User not found.")
        failure = validation.validate_update_user(request)
        if failure:
            logger.warning("Update of user %s rejected: %s", user_id, failure.message)
            return failure
        user.name = request.name
        user.email = request.email.strip()
        user.phone = request.phone
        user.birth_date = request.birth_date
        user.current_role = request.current_role
        user.interest_area = request.interest_area
        self.user_repo.save(user)
        logger.info("Updated user %s", user_id)
        return Ok(user)

    def delete(self, user_id: int) -> Result[None]:
        """Delete a user together with everything the user owns."""
        user = self.user_repo.get(user_id)
        if user is None:
            return ResourceNotFound("User not found.")
        self.user_repo.remove_with_children(user)
        logger.info("Deleted user %s and owned records", user_id)
        return Ok(None)


class OwnedResourceService:
    """Shared queries and deletion for resources owned by a user.

    Subclasses set the repository class and the not-found messages, and
    implement `create` and `update`.
    """
    repository_class = repositories.OwnedRepository
    label = "Resource"
    not_found = "Resource not found."
    none_found = "No records found."
    none_for_user = "No records found for this user."

    def __init__(self, session: Session):
        self.session = session
        self.repo = self.repository_class(session)
        self.user_repo = repositories.UserRepository(session)

    def get_all(self) -> Result[list]:
        rows = self.repo.list_all()
        if not rows:
            return ResourceNotFound(self.none_found)
        return Ok(rows)

    def get_by_id(self, entity_id: int) -> Result:
        row = self.repo.get(entity_id)
        if row is None:
            return ResourceNotFound(self.not_found)
        return Ok(row)

    def get_by_user_id(self, user_id: int) -> Result[list]:
        rows = self.repo.list_by_user(user_id)
        if not rows:
            return ResourceNotFound(self.none_for_user)
        return Ok(rows)

    def delete(self, entity_id: int) -> Result[None]:
        row = self.repo.get(entity_id)
        if row is None:
            return ResourceNotFound(self.not_found)
        self.repo.remove(row)
        logger.info("Deleted %s %s", self.label.lower(), entity_id)
        return Ok(None)

    def _persist_new(self, request, failure, build) -> Result:
        """Shared create flow: field checks, then owner check, then insert."""
        if failure:
            logger.warning("%s creation rejected: %s", self.label, failure.message)
            return failure
        if not self.user_repo.exists(request.user_id):
            logger.warning("%s creation rejected: user %s does not exist", self.label, request.user_id)
            return _missing_user(request.user_id)
        row = self.repo.add(build())
        logger.info("Created %s %s for user %s", self.label.lower(), row.id, row.user_id)
        return Ok(row)

    def _apply_update(self, entity_id: int, failure_for, apply) -> Result:
        row = self.repo.get(entity_id)
        if row is None:
            return ResourceNotFound(self.not_found)
        failure = failure_for()
        if failure:
            logger.warning("Update of %s %s rejected: %s", self.label.lower(), entity_id, failure.message)
            return failure
        apply(row)
        self.repo.save(row)
        logger.info("Updated %s %s", self.label.lower(), entity_id)
        return Ok(row)


class SkillService(OwnedResourceService):
    repository_class = repositories.SkillRepository
    label = "Skill"
    not_found = "Skill not found."
    none_found = "No skills records found."
    none_for_user = "No skills found for this user."

    def create(self, request: schemas.CreateSkillRequest) -> Result[models.Skill]:
        return self._persist_new(request, validation.validate_skill(request), lambda: models.Skill(
            name=request.name,
            level=request.level,
            category=request.category,
            proficiency_percentage=request.proficiency_percentage,
            description=request.description,
            user_id=request.user_id,
        ))

    def update(self, skill_id: int, request: schemas.UpdateSkillRequest) -> Result[models.Skill]:
        def apply(skill: models.Skill):
            skill.name = request.name
            skill.level = request.level
            skill.category = request.category
            skill.proficiency_percentage = request.proficiency_percentage
            skill.description = request.description

        return self._apply_update(skill_id, lambda: validation.validate_skill(request), apply)


class CourseService(OwnedResourceService):
    """Courses carry server-assigned `created_at`/`updated_at` timestamps."""
    repository_class = repositories.CourseRepository
    label = "Course"
    not_found = "Course not found."
    none_found = "No courses found."
    none_for_user = "No courses found for this user."

    def create(self, request: schemas.CreateCourseRequest) -> Result[models.Course]:
        def build():
            now = _utcnow()
            return models.Course(
                title=request.title,
                description=request.description,
                category=request.category,
                difficulty=request.difficulty,
                url=request.url,
                user_id=request.user_id,
                created_at=now,
                updated_at=now,
            )

        return self._persist_new(request, validation.validate_course(request), build)

    def update(self, course_id: int, request: schemas.UpdateCourseRequest) -> Result[models.Course]:
        def apply(course: models.Course):
            course.title = request.title
            course.description = request.description
            course.category = request.category
            course.difficulty = request.difficulty
            course.url = request.url
            course.updated_at = _utcnow()

        return self._apply_update(course_id, lambda: validation.validate_course(request), apply)


class EducationService(OwnedResourceService):
    repository_class = repositories.EducationRepository
    label = "Education"
    not_found = "Education record not found."
    none_found = "No education records found."
    none_for_user = "No education records found for this user."

    def create(self, request: schemas.CreateEducationRequest) -> Result[models.Education]:
        return self._persist_new(request, validation.validate_education(request), lambda: models.Education(
            degree=request.degree,
            institution=request.institution,
            completion_date=request.completion_date,
            certificate=request.certificate,
            user_id=request.user_id,
        ))

    def update(self, education_id: int, request: schemas.UpdateEducationRequest) -> Result[models.Education]:
        def apply(education: models.Education):
            education.degree = request.degree
            education.institution = request.institution
            education.completion_date = request.completion_date
            education.certificate = request.certificate

        return self._apply_update(education_id, lambda: validation.validate_education(request), apply)
