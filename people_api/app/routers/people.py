import logging
from dataclasses import replace
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status

from .. import hal, queries
from ..errors import PersonNotFound, missing_query_param
from ..schemas import PersonCreate, PersonUpdate
from ..store import Person, PersonStore

logger = logging.getLogger(__name__)

# Keeps page * size within a Postgres bigint OFFSET.
MAX_PAGE = 1_000_000

router = APIRouter(
    prefix="/people",
    tags=["people"],
)


def get_store(request: Request) -> PersonStore:
    return request.app.state.store


def _require_person(store: PersonStore, person_id: int) -> Person:
    person = store.find_by_id(person_id)
    if person is None:
        raise PersonNotFound(person_id)
    return person


@router.get("", response_class=hal.HALResponse)
def list_people(
    request: Request,
    page: int = Query(0, ge=0, le=MAX_PAGE),
    size: Optional[int] = Query(default=None, ge=1, le=1000),
    store: PersonStore = Depends(get_store),
):
    size = size or request.app.state.settings.page_size
    total = store.count()
    people = store.find_page(page, size)
    return hal.HALResponse(hal.people_page(request, people, page=page, size=size, total=total))


# Search routes are declared before "/{person_id}" so "search" is not parsed as an id.
@router.get("/search", response_class=hal.HALResponse)
def search_index(request: Request):
    return hal.HALResponse(hal.search_index(request, queries.FINDERS.values()))


@router.get("/search/{finder_name}", response_class=hal.HALResponse)
def run_finder(finder_name: str, request: Request, store: PersonStore = Depends(get_store)):
    finder = queries.get_finder(finder_name)
    value = request.query_params.get(finder.param)
    if value is None:
        raise missing_query_param(finder.param)
    return hal.HALResponse(hal.search_results(request, finder.run(store, value)))


@router.get("/{person_id}", response_class=hal.HALResponse)
def get_person(person_id: int, request: Request, store: PersonStore = Depends(get_store)):
    person = _require_person(store, person_id)
    return hal.HALResponse(hal.person_resource(request, person))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_person(payload: PersonCreate, request: Request, store: PersonStore = Depends(get_store)):
    person = store.save(Person(first_name=payload.first_name, last_name=payload.last_name))
    logger.info("created person %s", person.id)
    return Response(
        status_code=status.HTTP_201_CREATED,
        headers={"Location": hal.person_url(request, person.id)},
    )


@router.put("/{person_id}", status_code=status.HTTP_204_NO_CONTENT)
def replace_person(
    person_id: int,
    payload: PersonCreate,
    request: Request,
    store: PersonStore = Depends(get_store),
):
    _require_person(store, person_id)
    store.save(Person(id=person_id, first_name=payload.first_name, last_name=payload.last_name))
    logger.info("replaced person %s", person_id)
    return Response(
        status_code=status.HTTP_204_NO_CONTENT,
        headers={"Location": hal.person_url(request, person_id)},
    )


@router.patch("/{person_id}", status_code=status.HTTP_204_NO_CONTENT)
def update_person(person_id: int, payload: PersonUpdate, store: PersonStore = Depends(get_store)):
    person = _require_person(store, person_id)
    fields = payload.model_dump(exclude_unset=True)
    if fields:
        store.save(replace(person, **fields))
        logger.info("updated person %s: %s", person_id, sorted(fields))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{person_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_person(person_id: int, store: PersonStore = Depends(get_store)):
    if store.delete_by_id(person_id):
        logger.info("deleted person %s", person_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
