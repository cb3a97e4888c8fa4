from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Literal

from hocaim.backend import constants
from hocaim.backend.services.errors import ProviderUnconfiguredError, UpstreamError
from hocaim.backend.services.local_provider import LocalCompletionClient


ProviderMode = Literal["auto", "openai", "local"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompletionProvider:
	mode: ProviderMode
	model: str
	client: Any


def provider_mode() -> ProviderMode:
	mode = os.getenv("HOCAIM_PROVIDER_MODE", "auto").strip().lower() or "auto"
	if mode not in {"auto", "openai", "local"}:
		raise ProviderUnconfiguredError("HOCAIM_PROVIDER_MODE must be one of: auto, openai, local.")
	return mode  # type: ignore[return-value]


def resolved_provider_mode(configured_mode: ProviderMode) -> ProviderMode:
	if configured_mode == "local":
		return "local"
	if configured_mode == "openai":
		return "openai"
	has_openai_key = bool(os.getenv("OPENAI_API_KEY", "").strip())
	return "openai" if has_openai_key else "local"


def openai_timeout() -> float:
	raw = os.getenv("HOCAIM_OPENAI_TIMEOUT_S", "").strip()
	if not raw:
		return constants.DEFAULT_OPENAI_TIMEOUT_S
	try:
		value = float(raw)
	except ValueError as exc:
		raise ProviderUnconfiguredError("HOCAIM_OPENAI_TIMEOUT_S must be numeric.") from exc
	if value <= 0:
		raise ProviderUnconfiguredError("HOCAIM_OPENAI_TIMEOUT_S must be greater than zero.")
	return value


def default_model() -> str:
	for name in ("HOCAIM_MODEL", "MODEL"):
		value = os.getenv(name, "").strip()
		if value:
			return value
	return constants.DEFAULT_MODEL


def _openai_api_key() -> str:
	key = os.getenv("OPENAI_API_KEY", "").strip()
	if not key:
		raise ProviderUnconfiguredError("OpenAI API key not configured. Set OPENAI_API_KEY.")
	return key


def _build_openai_client(*, api_key: str, timeout_s: float):
	try:
		from openai import AsyncOpenAI
	except ImportError as exc:
		raise ProviderUnconfiguredError("OpenAI SDK not installed. Add 'openai' dependency.") from exc
	return AsyncOpenAI(api_key=api_key, timeout=timeout_s)


def get_provider() -> CompletionProvider:
	effective_mode = resolved_provider_mode(provider_mode())
	model = default_model()
	logger.debug("Using %s completion provider (model=%s).", effective_mode, model)
	if effective_mode == "local":
		return CompletionProvider(mode="local", model=model, client=LocalCompletionClient())
	client = _build_openai_client(api_key=_openai_api_key(), timeout_s=openai_timeout())
	return CompletionProvider(mode="openai", model=model, client=client)


def upstream_error(exc: Exception) -> UpstreamError:
	name = exc.__class__.__name__
	detail = str(exc) or name
	if isinstance(exc, TimeoutError) or name == "APITimeoutError":
		return UpstreamError(
			status_code=504,
			code="upstream_timeout",
			message="Completion service timed out.",
			detail=detail,
		)
	return UpstreamError(message="Completion service request failed.", detail=detail)
