from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import PlainTextResponse, StreamingResponse

from hocaim.backend.response import success_response
from hocaim.backend.schemas import (
	AskRequest,
	ChatRequest,
	ExplainRequest,
	ReplyEnvelope,
	StyleExplainEnvelope,
	StyleExplainRequest,
)
from hocaim.backend.services import tutor_service
from hocaim.backend.services.errors import TutorServiceError


router = APIRouter(prefix="/api", tags=["tutor"])

_STREAM_HEADERS = {
	"Cache-Control": "no-cache",
	"X-Accel-Buffering": "no",
}


def _http_error(exc: TutorServiceError) -> HTTPException:
	return HTTPException(
		status_code=exc.status_code,
		detail={"code": exc.code, "message": exc.message, "evidence": exc.evidence},
	)


@router.post("/explain", response_class=PlainTextResponse)
async def explain(payload: Optional[ExplainRequest] = None):
	payload = payload or ExplainRequest()
	try:
		outcome = await tutor_service.explain(
			message=payload.message,
			topic=payload.topic,
			history=payload.history,
			stream=payload.stream,
		)
	except TutorServiceError as exc:
		raise _http_error(exc) from exc

	headers = {"X-Tutor-Provider": outcome.provider}
	if outcome.streaming:
		return StreamingResponse(
			outcome.chunks,
			media_type="text/plain",
			headers={**_STREAM_HEADERS, **headers},
		)
	return PlainTextResponse(outcome.text or "", headers=headers)


@router.post("/explain/style", response_model=StyleExplainEnvelope)
async def explain_style(request: Request, payload: Optional[StyleExplainRequest] = None):
	payload = payload or StyleExplainRequest()
	try:
		result = await tutor_service.explain_style(
			prompt=payload.prompt,
			topic=payload.topic,
			style=payload.style,
			level=payload.level,
			context=payload.context,
		)
	except TutorServiceError as exc:
		raise _http_error(exc) from exc
	return success_response(request=request, **result)


@router.post("/ask", response_model=ReplyEnvelope)
async def ask(request: Request, payload: Optional[AskRequest] = None):
	payload = payload or AskRequest()
	try:
		result = await tutor_service.ask(prompt=payload.prompt)
	except TutorServiceError as exc:
		raise _http_error(exc) from exc
	return success_response(request=request, **result)


@router.post("/chat", response_model=ReplyEnvelope)
async def chat(request: Request, payload: Optional[ChatRequest] = None):
	payload = payload or ChatRequest()
	try:
		result = await tutor_service.chat(message=payload.message)
	except TutorServiceError as exc:
		raise _http_error(exc) from exc
	return success_response(request=request, **result)
