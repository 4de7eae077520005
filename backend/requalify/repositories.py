"""Repository classes encapsulating database operations.

Each repository is small and focused on a single table (users, skills,
courses, education). Repositories return SQLModel objects, commit their
own writes and let SQLAlchemy errors propagate to the caller untouched.
Rows are always returned in primary key order so pagination is stable.
"""

from typing import List, Optional, Type
from sqlalchemy import func
from sqlalchemy.orm import selectinload
from sqlmodel import Session, SQLModel, select
from . import models

# Signed 64-bit INTEGER range of the backing store.
MIN_ID = -(2 ** 63)
MAX_ID = 2 ** 63 - 1


def in_id_range(value: Optional[int]) -> bool:
    """Return True if `value` fits the store's integer key column."""
    return value is not None and MIN_ID <= value <= MAX_ID


class Repository:
    """Common CRUD operations for a single `model` table."""
    model: Type[SQLModel] = SQLModel

    def __init__(self, session: Session):
        self.session = session

    def get(self, entity_id: int):
        """Fetch a row by primary key or `None`."""
        if not in_id_range(entity_id):
            return None
        return self.session.get(self.model, entity_id)

    def list_all(self) -> List:
        """Return every row of the table."""
        stmt = select(self.model).order_by(self.model.id)
        return list(self.session.exec(stmt).all())

    def add(self, entity):
        """Persist a new row and return the managed instance."""
        self.session.add(entity)
        self.session.commit()
        self.session.refresh(entity)
        return entity

    def save(self, entity):
        """Commit in-place changes made to a managed instance."""
        self.session.add(entity)
        self.session.commit()
        self.session.refresh(entity)
        return entity

    def remove(self, entity) -> None:
        """Hard-delete a row."""
        self.session.delete(entity)
        self.session.commit()


class OwnedRepository(Repository):
    """Repository for tables carrying a `user_id` owner column."""

    def list_by_user(self, user_id: int) -> List:
        """Return all rows owned by `user_id`."""
        if not in_id_range(user_id):
            return []
        stmt = select(self.model).where(self.model.user_id == user_id).order_by(self.model.id)
        return list(self.session.exec(stmt).all())


class SkillRepository(OwnedRepository):
    model = models.Skill


class CourseRepository(OwnedRepository):
    model = models.Course


class EducationRepository(OwnedRepository):
    model = models.Education


class UserRepository(Repository):
    """CRUD operations for `User` objects.

    Read helpers load skills, courses and education eagerly so the
    composite representation can be built after the session closes.
    """
    model = models.User

    def _select_with_children(self):
        return select(models.User).options(
            selectinload(models.User.skills),
            selectinload(models.User.courses),
            selectinload(models.User.educations),
        )

    def get_with_children(self, user_id: int) -> Optional[models.User]:
        """Get a `User` by primary key with its sub-resources loaded."""
        if not in_id_range(user_id):
            return None
        stmt = self._select_with_children().where(models.User.id == user_id)
        return self.session.exec(stmt).first()

    def list_all(self) -> List[models.User]:
        """Return all users with their sub-resources loaded."""
        stmt = self._select_with_children().order_by(models.User.id)
        return list(self.session.exec(stmt).all())

    def exists(self, user_id: Optional[int]) -> bool:
        """Return True if a user with `user_id` exists."""
        if not in_id_range(user_id):
            return False
        stmt = select(models.User.id).where(models.User.id == user_id)
        return self.session.exec(stmt).first() is not None

    def find_by_email_trimmed(self, email: str, with_children: bool = False) -> Optional[models.User]:
        """Return the user whose trimmed email equals trimmed `email`.

        The comparison is case-sensitive.
        """
        stmt = self._select_with_children() if with_children else select(models.User)
        stmt = stmt.where(func.trim(models.User.email) == email.strip())
        return self.session.exec(stmt).first()

    def remove_with_children(self, user: models.User) -> None:
        """Delete a user's skills, courses and education, then the user.

        All deletes are flushed by a single commit so the cascade is
        atomic on stores that support transactions.
        """
        for model in (models.Skill, models.Course, models.Education):
            rows = self.session.exec(select(model).where(model.user_id == user.id)).all()
            for row in rows:
                self.session.delete(row)
        self.session.delete(user)
        self.session.commit()
