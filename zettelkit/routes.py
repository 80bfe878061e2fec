"""Output paths of the generated site's routes."""

from typing import Union

from pydantic import BaseModel

from zettelkit.domain.note import Slug


class ZettelRoute(BaseModel):
    slug: Slug


class ImpulseRoute(BaseModel):
    # Only used to build the URL; the impulse page itself is written once
    tag: str | None = None


Route = Union[ZettelRoute, ImpulseRoute]


def route_html_path(route: Route) -> str:
    if isinstance(route, ZettelRoute):
        return f"{route.slug}.html"
    if route.tag is not None:
        return f"impulse.html?q=tag:{route.tag}"
    return "impulse.html"
