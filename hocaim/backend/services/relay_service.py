from __future__ import annotations

import inspect
import logging
import re
from collections.abc import Mapping
from typing import Any, AsyncIterator, Dict, List

import anyio

from hocaim.backend import constants
from hocaim.backend.services.errors import TutorServiceError
from hocaim.backend.services.provider_service import upstream_error
from hocaim.backend.tutor.types import PromptRequest


logger = logging.getLogger(__name__)

_STYLE_NAME_PATTERN = (
	r"(?:\d+[.)]\s*)?"
	r"(?:[^\w\s*#]+\s*)?"
	r"(?:g[öo]rsel|[iİI][şs]itsel|okuma\s*[-/]?\s*yazma|kinestetik|dokunsal"
	r"|visual|auditory|reading\s*[-/]?\s*writing|kinesthetic)"
	r"(?:\s+(?:öğrenme\s+)?(?:stil|stili|stile|anlatım)\w*)?"
	r"\s*(?:\([^)]*\))?"
)
_STYLE_HEADING_RE = re.compile(
	rf"^\s*#{{1,6}}\s*(?:\*\*|__)?\s*{_STYLE_NAME_PATTERN}\s*:?\s*(?:\*\*|__)?\s*:?\s*$",
	re.IGNORECASE,
)
_STYLE_BOLD_LABEL_RE = re.compile(
	rf"^\s*(?:[-*]\s+)?(?:\*\*|__)\s*{_STYLE_NAME_PATTERN}\s*:?\s*(?:\*\*|__)\s*:?\s*$",
	re.IGNORECASE,
)
_BLANK_LINE_WHITESPACE_RE = re.compile(r"^[ \t]+$", re.MULTILINE)
_BLANK_RUN_RE = re.compile(r"\n{3,}")


def _field(value: Any, name: str) -> Any:
	if isinstance(value, Mapping):
		return value.get(name)
	return getattr(value, name, None)


def _first_choice(payload: Any) -> Any:
	choices = _field(payload, "choices")
	if isinstance(choices, (list, tuple)) and choices:
		return choices[0]
	return None


def extract_message_text(response: Any) -> str:
	message = _field(_first_choice(response), "message")
	content = _field(message, "content")
	if isinstance(content, str):
		return content.strip()
	return ""


def extract_delta_text(chunk: Any) -> str:
	delta = _field(_first_choice(chunk), "delta")
	content = _field(delta, "content")
	if isinstance(content, str):
		return content
	return ""


def is_style_heading(line: str) -> bool:
	return bool(_STYLE_HEADING_RE.match(line) or _STYLE_BOLD_LABEL_RE.match(line))


def sanitize_style_output(text: str) -> str:
	kept: List[str] = [line for line in (text or "").splitlines() if not is_style_heading(line)]
	cleaned = "\n".join(kept)
	cleaned = _BLANK_LINE_WHITESPACE_RE.sub("", cleaned)
	cleaned = _BLANK_RUN_RE.sub("\n\n", cleaned)
	return cleaned.strip()


async def _create(client: Any, request: PromptRequest) -> Any:
	kwargs: Dict[str, Any] = request.as_kwargs()
	try:
		return await client.chat.completions.create(**kwargs)
	except TutorServiceError:
		raise
	except Exception as exc:
		logger.exception("Completion request failed (model=%s, stream=%s).", request.model, request.stream)
		raise upstream_error(exc) from exc


async def complete_text(client: Any, request: PromptRequest, *, fallback: str) -> str:
	if request.stream:
		raise ValueError("complete_text expects a non-streaming prompt request.")
	response = await _create(client, request)
	text = extract_message_text(response)
	if not text:
		logger.warning("Completion service returned no usable text; substituting fallback.")
		return fallback
	return text


async def open_stream(client: Any, request: PromptRequest) -> Any:
	if not request.stream:
		raise ValueError("open_stream expects a streaming prompt request.")
	return await _create(client, request)


async def _close_upstream(stream: Any) -> None:
	close = getattr(stream, "close", None)
	if not callable(close):
		return
	with anyio.CancelScope(shield=True):
		try:
			result = close()
			if inspect.isawaitable(result):
				await result
		except Exception:
			logger.warning("Could not close upstream completion stream.", exc_info=True)


async def relay_stream(stream: Any) -> AsyncIterator[str]:
	"""Yield each non-empty upstream delta in arrival order.

	Once the caller has received bytes the status line is committed, so an
	upstream failure is reported as one in-band marker. The upstream stream is
	closed when relaying ends for any reason, including caller disconnect.
	"""
	fragments = 0
	finished = False
	try:
		async for chunk in stream:
			delta = extract_delta_text(chunk)
			if delta:
				fragments += 1
				yield delta
		finished = True
	except Exception:
		finished = True
		logger.exception("Upstream stream failed after %d fragment(s); appending error marker.", fragments)
		yield constants.STREAM_ERROR_MARKER
	finally:
		if not finished:
			logger.info("Caller stopped reading after %d fragment(s); aborting upstream stream.", fragments)
		await _close_upstream(stream)
	logger.debug("Relayed %d fragment(s).", fragments)
