"""Build outward representations from entities.

Entities are copied field-for-field into their response schema (the
password hash has no counterpart and is never copied), links are
attached through `links`, and listings are wrapped in a
`PagedResponse` envelope.
"""

from typing import Callable, Mapping, Optional, Sequence

from . import models, schemas
from .links import Action, LinkContext, ResourceKind, collection_links, embedded_links, resource_links
from .pagination import paginate

_NESTED = ("links", "skills", "courses", "educations")


def _fields(entity, out_cls) -> dict:
    return {name: getattr(entity, name) for name in out_cls.model_fields if name not in _NESTED}


def skill_out(skill: models.Skill, links=()) -> schemas.SkillOut:
    return schemas.SkillOut(**_fields(skill, schemas.SkillOut), links=list(links))


def course_out(course: models.Course, links=()) -> schemas.CourseOut:
    return schemas.CourseOut(**_fields(course, schemas.CourseOut), links=list(links))


def education_out(education: models.Education, links=()) -> schemas.EducationOut:
    return schemas.EducationOut(**_fields(education, schemas.EducationOut), links=list(links))


def compose_skill(skill: models.Skill, ctx: LinkContext) -> schemas.SkillOut:
    return skill_out(skill, resource_links(ResourceKind.SKILL, skill.id, ctx.version, ctx.resolve))


def compose_course(course: models.Course, ctx: LinkContext) -> schemas.CourseOut:
    return course_out(course, resource_links(ResourceKind.COURSE, course.id, ctx.version, ctx.resolve))


def compose_education(education: models.Education, ctx: LinkContext) -> schemas.EducationOut:
    return education_out(education, resource_links(ResourceKind.EDUCATION, education.id, ctx.version, ctx.resolve))


def compose_user(user: models.User, ctx: LinkContext) -> schemas.UserOut:
    """Composite user with embedded sub-resources.

    The user's own links use `ctx.version`; each embedded skill, course
    and education entry links to its own resource at that resource's
    fixed API version.
    """
    resolve = ctx.resolve
    return schemas.UserOut(
        **_fields(user, schemas.UserOut),
        skills=[skill_out(s, embedded_links(ResourceKind.SKILL, s.id, resolve)) for s in user.skills or []],
        courses=[course_out(c, embedded_links(ResourceKind.COURSE, c.id, resolve)) for c in user.courses or []],
        educations=[education_out(e, embedded_links(ResourceKind.EDUCATION, e.id, resolve)) for e in user.educations or []],
        links=resource_links(ResourceKind.USER, user.id, ctx.version, resolve),
    )


COMPOSERS: Mapping[ResourceKind, Callable] = {
    ResourceKind.USER: compose_user,
    ResourceKind.SKILL: compose_skill,
    ResourceKind.COURSE: compose_course,
    ResourceKind.EDUCATION: compose_education,
}


def compose(kind: ResourceKind, entity, ctx: LinkContext):
    return COMPOSERS[kind](entity, ctx)


def compose_page(kind: ResourceKind, rows: Sequence, page_number: int, page_size: int, ctx: LinkContext,
                 action: Action = Action.GET_ALL,
                 route_params: Optional[Mapping[str, object]] = None) -> schemas.PagedResponse:
    """Paginate `rows`, compose each item on the page and add envelope links."""
    page = paginate(rows, page_number, page_size)
    return schemas.PagedResponse(
        items=[compose(kind, row, ctx) for row in page.items],
        page_number=page.page_number,
        page_size=page.page_size,
        total_count=page.total_count,
        total_pages=page.total_pages,
        links=collection_links(kind, action, page, ctx, route_params),
    )
