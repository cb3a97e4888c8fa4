from typing import Any, Dict, List, Optional


def completion(text: Optional[str]) -> Dict[str, Any]:
	return {"choices": [{"index": 0, "message": {"role": "assistant", "content": text}}]}


def fragment(text: Optional[str]) -> Dict[str, Any]:
	return {"choices": [{"index": 0, "delta": {"content": text}}]}


class FakeStream:
	def __init__(self, deltas: List[Optional[str]], *, error: Optional[Exception] = None):
		self._deltas = list(deltas)
		self._error = error
		self.close_calls = 0

	def __aiter__(self):
		return self._iterate()

	async def _iterate(self):
		for delta in self._deltas:
			yield fragment(delta)
		if self._error is not None:
			raise self._error

	async def close(self) -> None:
		self.close_calls += 1


class _FakeCompletions:
	def __init__(self, *, text: Optional[str], stream: Optional[FakeStream], error: Optional[Exception]):
		self._text = text
		self._stream = stream
		self._error = error
		self.calls: List[Dict[str, Any]] = []

	async def create(self, **kwargs):
		self.calls.append(kwargs)
		if self._error is not None:
			raise self._error
		if kwargs.get("stream"):
			return self._stream if self._stream is not None else FakeStream([])
		return completion(self._text)


class _FakeChat:
	def __init__(self, completions: _FakeCompletions):
		self.completions = completions


class FakeClient:
	def __init__(
		self,
		*,
		text: Optional[str] = "cevap",
		stream: Optional[FakeStream] = None,
		error: Optional[Exception] = None,
	):
		self.chat = _FakeChat(_FakeCompletions(text=text, stream=stream, error=error))

	@property
	def calls(self) -> List[Dict[str, Any]]:
		return self.chat.completions.calls
