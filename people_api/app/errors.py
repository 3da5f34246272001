import logging

from fastapi import FastAPI, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class NotFound(Exception):
    """Raised when a requested resource does not exist. Rendered as an empty 404."""


class PersonNotFound(NotFound):
    def __init__(self, person_id: int):
        super().__init__(f"Person {person_id} not found")
        self.person_id = person_id


class UnknownFinder(NotFound):
    def __init__(self, name: str):
        super().__init__(f"No search named {name!r}")
        self.name = name


def missing_query_param(param: str) -> RequestValidationError:
    return RequestValidationError(
        [{"type": "missing", "loc": ("query", param), "msg": "Field required", "input": None}]
    )


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(NotFound)
    async def not_found(request: Request, exc: NotFound):
        logger.debug("%s %s: %s", request.method, request.url.path, exc)
        return Response(status_code=404)

    @app.exception_handler(RequestValidationError)
    async def validation_failed(request: Request, exc: RequestValidationError):
        logger.info("rejected %s %s: %d validation error(s)", request.method, request.url.path, len(exc.errors()))
        return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})
