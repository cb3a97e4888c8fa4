from __future__ import annotations

from typing import Any, AsyncIterator, Dict, List


_LOCAL_MODEL = "hocaim-local"
_CHUNK_WORDS = 4


def _last_user_content(messages: List[Dict[str, Any]]) -> str:
	for message in reversed(messages):
		if message.get("role") == "user":
			return str(message.get("content") or "")
	return ""


def _local_reply(messages: List[Dict[str, Any]]) -> str:
	question = " ".join(_last_user_content(messages).split())
	if not question:
		return ""
	return (
		"HocAIm (yerel mod) sorunu aldı: "
		f"{question[:400]}\n\n"
		"Gerçek bir açıklama için OPENAI_API_KEY tanımlayıp sağlayıcıyı 'openai' moduna al."
	)


def _chunk_words(text: str, size: int = _CHUNK_WORDS) -> List[str]:
	words = text.split(" ")
	chunks: List[str] = []
	for i in range(0, len(words), size):
		piece = " ".join(words[i : i + size])
		if i + size < len(words):
			piece += " "
		chunks.append(piece)
	return chunks


class LocalCompletionStream:
	def __init__(self, chunks: List[str]):
		self._chunks = list(chunks)
		self.closed = False

	def __aiter__(self) -> AsyncIterator[Dict[str, Any]]:
		return self._iterate()

	async def _iterate(self) -> AsyncIterator[Dict[str, Any]]:
		for chunk in self._chunks:
			if self.closed:
				return
			yield {"choices": [{"index": 0, "delta": {"content": chunk}}]}

	async def close(self) -> None:
		self.closed = True


class _LocalCompletions:
	async def create(self, *, messages: List[Dict[str, Any]], stream: bool = False, **_kwargs: Any):
		text = _local_reply(messages)
		if stream:
			return LocalCompletionStream(_chunk_words(text) if text else [])
		return {
			"model": _LOCAL_MODEL,
			"choices": [{"index": 0, "message": {"role": "assistant", "content": text}}],
		}


class _LocalChat:
	def __init__(self) -> None:
		self.completions = _LocalCompletions()


class LocalCompletionClient:
	"""Offline stand-in exposing the ``chat.completions.create`` surface."""

	def __init__(self) -> None:
		self.chat = _LocalChat()
