"""Pydantic request/response schemas used by the API.

Schemas keep API input/output shapes stable. Request fields are
optional on purpose: required-field checks run in the services, in a
fixed order, so a client always sees the same first error for the same
payload. Response models carry a `links` list of hypermedia links.
"""

from datetime import date, datetime
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class Link(BaseModel):
    """A hypermedia link; `href` is None when the relation is not available."""
    rel: str
    href: Optional[str] = None
    method: str


class CreateUserRequest(BaseModel):
    """Payload for user creation."""
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    phone: Optional[str] = None
    birth_date: Optional[date] = None
    current_role: Optional[str] = None
    interest_area: Optional[str] = None


class UpdateUserRequest(BaseModel):
    """Payload for user updates. The password cannot be changed here."""
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    birth_date: Optional[date] = None
    current_role: Optional[str] = None
    interest_area: Optional[str] = None


class UpdateSkillRequest(BaseModel):
    name: Optional[str] = None
    level: Optional[str] = None
    category: Optional[str] = None
    proficiency_percentage: int = 0
    description: Optional[str] = None


class CreateSkillRequest(UpdateSkillRequest):
    user_id: Optional[int] = None


class UpdateCourseRequest(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    difficulty: Optional[str] = None
    url: Optional[str] = None


class CreateCourseRequest(UpdateCourseRequest):
    user_id: Optional[int] = None


class UpdateEducationRequest(BaseModel):
    degree: Optional[str] = None
    institution: Optional[str] = None
    completion_date: Optional[date] = None
    certificate: Optional[str] = None


class CreateEducationRequest(UpdateEducationRequest):
    user_id: Optional[int] = None


class SkillOut(BaseModel):
    id: int
    name: str
    level: str
    category: str
    proficiency_percentage: int
    description: Optional[str] = None
    user_id: int
    links: List[Link] = Field(default_factory=list)


class CourseOut(BaseModel):
    id: int
    title: str
    description: str
    category: str
    difficulty: str
    url: Optional[str] = None
    user_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    links: List[Link] = Field(default_factory=list)


class EducationOut(BaseModel):
    id: int
    degree: str
    institution: str
    completion_date: Optional[date] = None
    certificate: Optional[str] = None
    user_id: int
    links: List[Link] = Field(default_factory=list)


class UserOut(BaseModel):
    """Composite user representation with embedded sub-resources.

    Each embedded item carries links to its own resource route.
    """
    id: int
    name: str
    email: str
    phone: str
    birth_date: Optional[date] = None
    current_role: str
    interest_area: str
    skills: List[SkillOut] = Field(default_factory=list)
    courses: List[CourseOut] = Field(default_factory=list)
    educations: List[EducationOut] = Field(default_factory=list)
    links: List[Link] = Field(default_factory=list)


class PagedResponse(BaseModel, Generic[T]):
    """Paged list envelope with collection-level `self`/`next`/`prev` links."""
    items: List[T]
    page_number: int
    page_size: int
    total_count: int
    total_pages: int
    links: List[Link] = Field(default_factory=list)


class PredictInterestRequest(BaseModel):
    """Inputs of the professional area predictor."""
    current_role: Optional[str] = None
    main_skill: Optional[str] = None
    skill_level: Optional[str] = None
    education: Optional[str] = None


class PredictInterestOut(BaseModel):
    recommended_area: str
