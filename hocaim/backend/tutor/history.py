from __future__ import annotations

import os
from collections.abc import Mapping, Sequence
from typing import Any, List

from hocaim.backend import constants
from hocaim.backend.tutor.types import ChatTurn


def default_history_turns() -> int:
	raw = os.getenv("HOCAIM_HISTORY_TURNS", "").strip()
	if not raw:
		return constants.DEFAULT_HISTORY_TURNS
	try:
		value = int(raw)
	except ValueError:
		return constants.DEFAULT_HISTORY_TURNS
	return value if value >= 0 else constants.DEFAULT_HISTORY_TURNS


def _turn_field(item: Any, name: str) -> Any:
	if isinstance(item, Mapping):
		return item.get(name)
	return getattr(item, name, None)


def _content_text(value: Any) -> str:
	if not value:
		return ""
	return str(value)


def compress_history(history: Any, limit: int | None = None) -> List[ChatTurn]:
	"""Return the most recent ``limit`` turns as new, bounded ChatTurn values.

	Anything that is not a list/tuple of turns yields an empty list.
	"""
	if limit is None:
		limit = default_history_turns()
	if limit <= 0:
		return []
	if isinstance(history, (str, bytes)) or not isinstance(history, Sequence):
		return []

	turns: List[ChatTurn] = []
	for item in list(history)[-limit:]:
		role = "assistant" if _turn_field(item, "role") == "assistant" else "user"
		content = _content_text(_turn_field(item, "content"))
		turns.append(ChatTurn(role=role, content=content[: constants.MAX_HISTORY_CONTENT_CHARS]))
	return turns
