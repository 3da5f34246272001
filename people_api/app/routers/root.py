from fastapi import APIRouter, Request

from .. import hal

router = APIRouter(tags=["root"])


@router.get("/", response_class=hal.HALResponse)
def root(request: Request):
    return hal.HALResponse(hal.root_index(request))
