from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ApiError(BaseModel):
	model_config = ConfigDict(extra="forbid")

	code: str
	message: str
	evidence: List[str] = Field(default_factory=list)


class ApiEnvelope(BaseModel):
	model_config = ConfigDict(extra="allow")

	ok: bool
	generated_at: str
	request_id: Optional[str] = None
	error: Optional[ApiError] = None


class PingEnvelope(ApiEnvelope):
	msg: str


class ReplyEnvelope(ApiEnvelope):
	reply: str
	provider: Optional[str] = None


class StyleExplainEnvelope(ApiEnvelope):
	html: str
	provider: Optional[str] = None
	style: Optional[str] = None


class ExplainRequest(BaseModel):
	model_config = ConfigDict(extra="ignore")

	message: Optional[str] = Field(default=None, description="Learner message to explain or define.")
	topic: Optional[str] = Field(default=None, description="Current lesson topic, if known.")
	history: Any = Field(default=None, description="Prior turns as [{role, content}]; malformed values are ignored.")
	stream: bool = Field(default=True, description="Stream full explanations as chunked text/plain.")


class StyleExplainRequest(BaseModel):
	model_config = ConfigDict(extra="ignore")

	prompt: Optional[str] = Field(default=None, description="Free-form request; overrides the synthesized topic prompt.")
	topic: Optional[str] = Field(default=None, description="Topic to explain when no prompt is given.")
	style: Optional[str] = Field(default=None, description="V | A | R | K | auto")
	level: Optional[str] = Field(default=None, description="Learner level, e.g. ilkokul, ortaokul, lise, universite.")
	context: Optional[str] = Field(default=None, description="Optional supporting context.")


class AskRequest(BaseModel):
	model_config = ConfigDict(extra="ignore")

	prompt: Optional[str] = Field(default=None, description="Short question for a quick answer.")


class ChatRequest(BaseModel):
	model_config = ConfigDict(extra="ignore")

	message: Optional[str] = Field(default=None, description="Chat message; defaults to a greeting.")
