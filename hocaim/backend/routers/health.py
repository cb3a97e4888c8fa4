from __future__ import annotations

from fastapi import APIRouter, Request

from hocaim.backend import constants
from hocaim.backend.response import success_response
from hocaim.backend.schemas import PingEnvelope


router = APIRouter(prefix="/api", tags=["health"])


@router.get("/ping", response_model=PingEnvelope)
def ping(request: Request):
	return success_response(request=request, msg=constants.PING_MESSAGE)
