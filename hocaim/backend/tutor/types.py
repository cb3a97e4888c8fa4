from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Literal, Optional, Tuple


TurnRole = Literal["user", "assistant"]
MessageRole = Literal["system", "user", "assistant"]
StyleCode = Literal["V", "A", "R", "K", "auto"]


@dataclass(frozen=True)
class ChatTurn:
	role: TurnRole
	content: str

	def as_dict(self) -> Dict[str, str]:
		return {"role": self.role, "content": self.content}


@dataclass(frozen=True)
class ClassificationResult:
	is_meta: bool
	term: Optional[str] = None
	fallback: Optional[str] = None


@dataclass(frozen=True)
class PromptMessage:
	role: MessageRole
	content: str

	def as_dict(self) -> Dict[str, str]:
		return {"role": self.role, "content": self.content}


@dataclass(frozen=True)
class PromptRequest:
	model: str
	temperature: float
	stream: bool
	messages: Tuple[PromptMessage, ...]

	def as_kwargs(self) -> Dict[str, Any]:
		return {
			"model": self.model,
			"temperature": self.temperature,
			"stream": self.stream,
			"messages": [message.as_dict() for message in self.messages],
		}


@dataclass(frozen=True)
class StyleContext:
	style: StyleCode = "auto"
	level: str = ""
	context: str = ""
