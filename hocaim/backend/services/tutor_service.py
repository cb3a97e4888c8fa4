from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, AsyncIterator, Dict, Optional

from hocaim.backend import constants
from hocaim.backend.services import provider_service, relay_service
from hocaim.backend.services.errors import InvalidRequestError
from hocaim.backend.tutor import prompts
from hocaim.backend.tutor.classifier import classify
from hocaim.backend.tutor.history import compress_history
from hocaim.backend.tutor.types import ClassificationResult, StyleContext


logger = logging.getLogger(__name__)


@dataclass
class ExplainOutcome:
	provider: str
	classification: ClassificationResult
	text: Optional[str] = None
	chunks: Optional[AsyncIterator[str]] = None

	@property
	def streaming(self) -> bool:
		return self.chunks is not None


def _require_text(value: Any, field_name: str) -> str:
	if not isinstance(value, str) or not value.strip():
		raise InvalidRequestError(f"{field_name} required")
	return value


def _optional_text(value: Optional[str]) -> str:
	return value.strip() if isinstance(value, str) else ""


def parse_style(raw: Optional[str], *, level: Optional[str] = None, context: Optional[str] = None) -> StyleContext:
	code = _optional_text(raw)
	if not code or code.lower() == "auto":
		normalized = "auto"
	else:
		normalized = code.upper()
		if normalized not in constants.STYLE_CODES:
			allowed = ", ".join(constants.STYLE_CODES)
			raise InvalidRequestError(f"style must be one of: {allowed}")
	return StyleContext(
		style=normalized,  # type: ignore[arg-type]
		level=_optional_text(level),
		context=_optional_text(context),
	)


async def explain(
	*,
	message: Optional[str],
	topic: Optional[str] = None,
	history: Any = None,
	stream: bool = True,
) -> ExplainOutcome:
	text = _require_text(message, "message")
	meta = classify(text)
	logger.info("Explain request classified: meta=%s term=%r", meta.is_meta, meta.term)

	provider = provider_service.get_provider()
	turns = compress_history(history)

	if meta.is_meta:
		request = prompts.build_meta_prompt(
			model=provider.model,
			message=text,
			topic=topic,
			history=turns,
			meta=meta,
		)
		reply = await relay_service.complete_text(
			provider.client,
			request,
			fallback=meta.fallback or constants.EMPTY_REPLY_PLACEHOLDER,
		)
		return ExplainOutcome(provider=provider.mode, classification=meta, text=reply)

	request = prompts.build_explain_prompt(
		model=provider.model,
		message=text,
		topic=topic,
		history=turns,
		stream=stream,
	)
	if not request.stream:
		reply = await relay_service.complete_text(
			provider.client,
			request,
			fallback=constants.EMPTY_REPLY_PLACEHOLDER,
		)
		return ExplainOutcome(provider=provider.mode, classification=meta, text=reply)

	upstream = await relay_service.open_stream(provider.client, request)
	return ExplainOutcome(
		provider=provider.mode,
		classification=meta,
		chunks=relay_service.relay_stream(upstream),
	)


async def explain_style(
	*,
	prompt: Optional[str] = None,
	topic: Optional[str] = None,
	style: Optional[str] = None,
	level: Optional[str] = None,
	context: Optional[str] = None,
) -> Dict[str, str]:
	if not _optional_text(prompt) and not _optional_text(topic):
		raise InvalidRequestError("prompt or topic required")
	style_context = parse_style(style, level=level, context=context)

	provider = provider_service.get_provider()
	request = prompts.build_style_prompt(
		model=provider.model,
		prompt=prompt,
		topic=topic,
		style=style_context,
	)
	reply = await relay_service.complete_text(
		provider.client,
		request,
		fallback=constants.EMPTY_REPLY_PLACEHOLDER,
	)
	cleaned = relay_service.sanitize_style_output(reply) or constants.EMPTY_REPLY_PLACEHOLDER
	return {"html": cleaned, "provider": provider.mode, "style": style_context.style}


async def ask(*, prompt: Optional[str]) -> Dict[str, str]:
	text = _require_text(prompt, "prompt")
	provider = provider_service.get_provider()
	request = prompts.build_simple_prompt(
		model=provider.model,
		system=prompts.ASK_SYSTEM_PROMPT,
		message=text,
		temperature=0.6,
	)
	reply = await relay_service.complete_text(
		provider.client,
		request,
		fallback=constants.EMPTY_REPLY_PLACEHOLDER,
	)
	return {"reply": reply, "provider": provider.mode}


async def chat(*, message: Optional[str] = None) -> Dict[str, str]:
	text = message if isinstance(message, str) and message.strip() else constants.DEFAULT_CHAT_MESSAGE
	provider = provider_service.get_provider()
	request = prompts.build_simple_prompt(
		model=provider.model,
		system=prompts.CHAT_SYSTEM_PROMPT,
		message=text,
		temperature=0.7,
	)
	reply = await relay_service.complete_text(
		provider.client,
		request,
		fallback=constants.EMPTY_REPLY_PLACEHOLDER,
	)
	return {"reply": reply, "provider": provider.mode}
