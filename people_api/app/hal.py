from typing import Any, Dict, Iterable

from fastapi import Request
from fastapi.responses import JSONResponse

from .queries import Finder
from .store import Person

HAL_JSON = "application/hal+json"
COLLECTION_KEY = "people"


class HALResponse(JSONResponse):
    media_type = HAL_JSON


def link(href: str, templated: bool = False) -> Dict[str, Any]:
    if templated:
        return {"href": href, "templated": True}
    return {"href": href}


def person_url(request: Request, person_id: int) -> str:
    return str(request.url_for("get_person", person_id=person_id))


def person_resource(request: Request, person: Person) -> Dict[str, Any]:
    href = person_url(request, person.id)
    return {
        "firstName": person.first_name,
        "lastName": person.last_name,
        "_links": {"self": link(href), "person": link(href)},
    }


def _embedded(request: Request, people: Iterable[Person]) -> Dict[str, Any]:
    return {COLLECTION_KEY: [person_resource(request, person) for person in people]}


def people_page(
    request: Request,
    people: Iterable[Person],
    *,
    page: int,
    size: int,
    total: int,
) -> Dict[str, Any]:
    collection_url = str(request.url_for("list_people"))
    total_pages = (total + size - 1) // size
    links = {
        "self": link(collection_url),
        "search": link(str(request.url_for("search_index"))),
    }
    if page > 0:
        links["prev"] = link(f"{collection_url}?page={page - 1}&size={size}")
    if page + 1 < total_pages:
        links["next"] = link(f"{collection_url}?page={page + 1}&size={size}")
    return {
        "_embedded": _embedded(request, people),
        "_links": links,
        "page": {
            "size": size,
            "totalElements": total,
            "totalPages": total_pages,
            "number": page,
        },
    }


def search_results(request: Request, people: Iterable[Person]) -> Dict[str, Any]:
    return {
        "_embedded": _embedded(request, people),
        "_links": {"self": link(str(request.url))},
    }


def search_index(request: Request, finders: Iterable[Finder]) -> Dict[str, Any]:
    links: Dict[str, Any] = {}
    for finder in finders:
        href = str(request.url_for("run_finder", finder_name=finder.name))
        links[finder.name] = link(f"{href}{{?{finder.param}}}", templated=True)
    links["self"] = link(str(request.url_for("search_index")))
    return {"_links": links}


def root_index(request: Request) -> Dict[str, Any]:
    people_url = str(request.url_for("list_people"))
    return {"_links": {COLLECTION_KEY: link(f"{people_url}{{?page,size}}", templated=True)}}
