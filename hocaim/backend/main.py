from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

from dotenv import find_dotenv, load_dotenv
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from hocaim.backend import constants
from hocaim.backend.middleware import RequestContextMiddleware
from hocaim.backend.response import error_response
from hocaim.backend.routers import health, tutor

_PUBLIC_DIR = Path(__file__).resolve().parents[2] / "public"

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
	_load_env_file()
	_configure_logging()
	_warn_if_unconfigured()
	app = FastAPI(
		title=constants.APP_NAME,
		version=constants.APP_VERSION,
	)
	_register_middleware(app)
	_register_handlers(app)
	_register_routers(app)
	return app


def _load_env_file() -> None:
	# Variables already set in the process environment win over the file.
	env_file = find_dotenv(usecwd=True)
	if env_file:
		load_dotenv(env_file, override=False)


def _warn_if_unconfigured() -> None:
	if os.getenv("OPENAI_API_KEY", "").strip():
		return
	mode = os.getenv("HOCAIM_PROVIDER_MODE", "auto").strip().lower() or "auto"
	if mode == "auto":
		logger.warning("OPENAI_API_KEY is not set; answers come from the local responder. Set it in the environment or .env.")
	elif mode == "openai":
		logger.warning("OPENAI_API_KEY is not set; completion requests will fail with provider_unconfigured.")


def _configure_logging() -> None:
	level_name = os.getenv("HOCAIM_LOG_LEVEL", constants.DEFAULT_LOG_LEVEL).strip().upper()
	level = getattr(logging, level_name, None)
	if not isinstance(level, int):
		level = logging.INFO
	logging.basicConfig(level=level, format=constants.LOG_FORMAT)


def _register_middleware(app: FastAPI) -> None:
	app.add_middleware(RequestContextMiddleware)
	app.add_middleware(
		CORSMiddleware,
		allow_origins=constants.DEFAULT_CORS_ALLOW_ORIGINS,
		allow_credentials=False,
		allow_methods=["*"],
		allow_headers=["*"],
	)


def _register_routers(app: FastAPI) -> None:
	@app.get("/favicon.ico", include_in_schema=False)
	def favicon():
		return Response(status_code=204)

	app.include_router(health.router)
	app.include_router(tutor.router)

	# Mounted last so the API routes take precedence over static files.
	if _PUBLIC_DIR.exists():
		app.mount("/", StaticFiles(directory=str(_PUBLIC_DIR), html=True), name="public")


def _register_handlers(app: FastAPI) -> None:
	@app.exception_handler(HTTPException)
	async def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:
		code = f"http_{exc.status_code}"
		message = _exc_message(exc.detail)
		evidence = None
		if isinstance(exc.detail, dict):
			detail_code = exc.detail.get("code")
			detail_message = exc.detail.get("message")
			detail_evidence = exc.detail.get("evidence")
			if isinstance(detail_code, str) and detail_code.strip():
				code = detail_code.strip()
			if isinstance(detail_message, str) and detail_message.strip():
				message = detail_message.strip()
			if isinstance(detail_evidence, list):
				evidence = [str(item) for item in detail_evidence]
		payload = error_response(
			code=code,
			message=message,
			request=request,
			evidence=evidence,
		)
		return JSONResponse(status_code=exc.status_code, content=payload)

	@app.exception_handler(StarletteHTTPException)
	async def handle_starlette_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
		payload = error_response(
			code=f"http_{exc.status_code}",
			message=_exc_message(exc.detail),
			request=request,
		)
		return JSONResponse(status_code=exc.status_code, content=payload)

	@app.exception_handler(RequestValidationError)
	async def handle_request_validation_error(
		request: Request,
		exc: RequestValidationError,
	) -> JSONResponse:
		evidence = []
		for issue in exc.errors():
			loc = ".".join(str(part) for part in issue.get("loc", []))
			msg = issue.get("msg", "Invalid request.")
			evidence.append(f"{loc}: {msg}" if loc else msg)
		payload = error_response(
			code="validation_error",
			message="Request validation failed.",
			request=request,
			evidence=evidence,
		)
		return JSONResponse(status_code=422, content=payload)

	@app.exception_handler(Exception)
	async def handle_unexpected_exception(request: Request, exc: Exception) -> JSONResponse:
		logger.exception("Unhandled error on %s %s", request.method, request.url.path)
		payload = error_response(
			code="internal_error",
			message="Internal server error.",
			request=request,
		)
		return JSONResponse(status_code=500, content=payload)


def _exc_message(detail: Any) -> str:
	if isinstance(detail, str):
		return detail
	if detail is None:
		return "Request failed."
	return str(detail)


app = create_app()
