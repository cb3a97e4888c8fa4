from __future__ import annotations

from typing import List, Optional


class TutorServiceError(Exception):
	def __init__(self, *, status_code: int, code: str, message: str, evidence: Optional[List[str]] = None):
		super().__init__(message)
		self.status_code = status_code
		self.code = code
		self.message = message
		self.evidence = list(evidence or [])


class InvalidRequestError(TutorServiceError):
	def __init__(self, message: str):
		super().__init__(status_code=400, code="invalid_request", message=message)


class ProviderUnconfiguredError(TutorServiceError):
	def __init__(self, message: str):
		super().__init__(status_code=503, code="provider_unconfigured", message=message)


class UpstreamError(TutorServiceError):
	def __init__(self, *, message: str, detail: str = "", status_code: int = 502, code: str = "upstream_error"):
		super().__init__(
			status_code=status_code,
			code=code,
			message=message,
			evidence=[detail] if detail else None,
		)
		self.detail = detail
