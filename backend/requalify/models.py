"""SQLModel data models.

This module defines the application's database tables using SQLModel.
A `User` owns any number of `Skill`, `Course` and `Education` rows; the
owning side is the `user_id` foreign key on each sub-resource.
"""

from typing import Optional
from sqlmodel import SQLModel, Field, Relationship
from datetime import datetime, date
from typing import List


class User(SQLModel, table=True):
    """A registered professional.

    Fields:
    - `email`: unique across users (enforced by `UserService`, compared trimmed)
    - `password_hash`: hashed password string (never store plaintext)
    """
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    email: str = Field(index=True, nullable=False)
    password_hash: str
    phone: str
    birth_date: Optional[date] = None
    current_role: str
    interest_area: str
    skills: List['Skill'] = Relationship(back_populates='user', sa_relationship_kwargs={'passive_deletes': 'all'})
    courses: List['Course'] = Relationship(back_populates='user', sa_relationship_kwargs={'passive_deletes': 'all'})
    educations: List['Education'] = Relationship(back_populates='user', sa_relationship_kwargs={'passive_deletes': 'all'})


class Skill(SQLModel, table=True):
    """A skill held by a user, with a 0-100 proficiency percentage."""
    __tablename__ = "skills"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    level: str
    category: str
    proficiency_percentage: int = 0
    description: Optional[str] = None
    user_id: int = Field(foreign_key='users.id', index=True)
    user: Optional[User] = Relationship(back_populates='skills')


class Course(SQLModel, table=True):
    """A course taken or planned by a user.

    `created_at` is assigned once on insert; `updated_at` is refreshed by
    the service on every mutation.
    """
    __tablename__ = "courses"

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    description: str
    category: str
    difficulty: str
    url: Optional[str] = None
    user_id: int = Field(foreign_key='users.id', index=True)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    user: Optional[User] = Relationship(back_populates='courses')


class Education(SQLModel, table=True):
    """An academic record (degree at an institution) of a user."""
    __tablename__ = "educations"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key='users.id', index=True)
    degree: str
    institution: str
    completion_date: Optional[date] = None
    certificate: Optional[str] = None
    user: Optional[User] = Relationship(back_populates='educations')
