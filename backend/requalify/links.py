"""Hypermedia link construction.

Routes are looked up in a typed table keyed by `(ResourceKind, Action)`
rather than by handler name. Every resource lives under its own API
version (users v1, skills v2, education v3, courses v4); the version a
link is built for is always passed in explicitly, either through a
`LinkContext` for the resource being served or from `API_VERSIONS` for
sub-resources embedded in a user.
"""

from __future__ import annotations

import string
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Mapping, Optional
from urllib.parse import quote, urlencode

from .pagination import Page
from .schemas import Link


class ResourceKind(str, Enum):
    USER = "users"
    SKILL = "skills"
    EDUCATION = "education"
    COURSE = "courses"


class Action(str, Enum):
    GET_ALL = "get_all"
    GET_BY_USER = "get_by_user"
    GET_BY_ID = "get_by_id"
    GET_BY_EMAIL = "get_by_email"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


API_VERSIONS: Dict[ResourceKind, str] = {
    ResourceKind.USER: "1",
    ResourceKind.SKILL: "2",
    ResourceKind.EDUCATION: "3",
    ResourceKind.COURSE: "4",
}

SUB_RESOURCES = (ResourceKind.SKILL, ResourceKind.COURSE, ResourceKind.EDUCATION)


def collection_path(kind: ResourceKind) -> str:
    return "/api/v{version}/" + kind.value


def _build_routes() -> Dict[tuple, str]:
    routes = {}
    for kind in ResourceKind:
        base = collection_path(kind)
        routes[(kind, Action.GET_ALL)] = base
        routes[(kind, Action.CREATE)] = base
        routes[(kind, Action.GET_BY_ID)] = base + "/{id}"
        routes[(kind, Action.UPDATE)] = base + "/{id}"
        routes[(kind, Action.DELETE)] = base + "/{id}"
    for kind in SUB_RESOURCES:
        routes[(kind, Action.GET_BY_USER)] = collection_path(kind) + "/user/{user_id}"
    routes[(ResourceKind.USER, Action.GET_BY_EMAIL)] = collection_path(ResourceKind.USER) + "/email/{email}"
    return routes


ROUTES: Dict[tuple, str] = _build_routes()

Resolver = Callable[[Action, ResourceKind, Mapping[str, object]], Optional[str]]


def resolve_route(action: Action, kind: ResourceKind, params: Mapping[str, object]) -> Optional[str]:
    """Fill the route template for `(kind, action)` from `params`.

    Template placeholders are taken from `params`; remaining non-None
    params are appended as a query string. Returns None when the route
    is unknown or a placeholder has no value.
    """
    template = ROUTES.get((kind, action))
    if template is None:
        return None
    names = [name for _, name, _, _ in string.Formatter().parse(template) if name]
    if any(params.get(name) is None for name in names):
        return None
    path = template.format(**{name: quote(str(params[name]), safe="") for name in names})
    query = {k: v for k, v in params.items() if k not in names and v is not None}
    if query:
        path = f"{path}?{urlencode(query)}"
    return path


@dataclass(frozen=True)
class LinkContext:
    """Per-request link settings: the API version being served and the resolver."""
    version: str
    resolve: Resolver = field(default=resolve_route)

    @classmethod
    def for_resource(cls, kind: ResourceKind, resolve: Resolver = resolve_route) -> "LinkContext":
        return cls(version=API_VERSIONS[kind], resolve=resolve)


def build_link(rel: str, action: Action, kind: ResourceKind, params: Mapping[str, object], method: str,
               resolve: Resolver = resolve_route) -> Link:
    return Link(rel=rel, href=resolve(action, kind, params), method=method)


def resource_links(kind: ResourceKind, entity_id: Optional[int], version: str,
                   resolve: Resolver = resolve_route) -> List[Link]:
    """`self`, `update` and `delete` links of one resource under `version`."""
    params = {"version": version, "id": entity_id}
    return [
        build_link("self", Action.GET_BY_ID, kind, params, "GET", resolve),
        build_link("update", Action.UPDATE, kind, params, "PUT", resolve),
        build_link("delete", Action.DELETE, kind, params, "DELETE", resolve),
    ]


def embedded_links(kind: ResourceKind, entity_id: Optional[int], resolve: Resolver = resolve_route) -> List[Link]:
    """Links of a sub-resource embedded in another representation.

    The version is the fixed one of `kind`, whatever version the
    enclosing resource was served under.
    """
    return resource_links(kind, entity_id, API_VERSIONS[kind], resolve)


def collection_links(kind: ResourceKind, action: Action, page: Page, ctx: LinkContext,
                     route_params: Optional[Mapping[str, object]] = None) -> List[Link]:
    """`self`, `next` and `prev` links of a paged listing.

    `next` and `prev` are always present; their href is None on the last
    and first page respectively.
    """
    def params(page_number: int):
        out = {"version": ctx.version}
        out.update(route_params or {})
        out.update({"pageNumber": page_number, "pageSize": page.page_size})
        return out

    def link(rel: str, page_number: int, available: bool) -> Link:
        if not available:
            return Link(rel=rel, href=None, method="GET")
        return build_link(rel, action, kind, params(page_number), "GET", ctx.resolve)

    return [
        link("self", page.page_number, True),
        link("next", page.page_number + 1, page.has_next),
        link("prev", page.page_number - 1, page.has_prev),
    ]
