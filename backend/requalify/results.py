"""Explicit result values returned by the resource services.

Services never raise for domain failures. Each method returns either
`Ok(value)` or one of the error variants below, and the HTTP layer
decides how to present them. Storage errors are not wrapped and still
propagate as SQLAlchemy exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class ValidationFailed:
    """A required field is missing or a value is out of range."""
    field: str
    message: str


@dataclass(frozen=True)
class ReferenceNotFound:
    """A referenced owning entity (e.g. the user of a skill) does not exist."""
    entity: str
    entity_id: Any
    message: str


@dataclass(frozen=True)
class ResourceNotFound:
    """The looked-up entity, or any entity of a listing, does not exist."""
    message: str


Result = Union[Ok[T], ValidationFailed, ReferenceNotFound, ResourceNotFound]


def is_error(result: Any) -> bool:
    return isinstance(result, (ValidationFailed, ReferenceNotFound, ResourceNotFound))


def required(field: str, label: Optional[str] = None) -> ValidationFailed:
    """Build the missing-field error for `field`."""
    return ValidationFailed(field=field, message=f"The field {label or field} is required.")
