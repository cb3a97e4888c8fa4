from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Pattern, Tuple

from hocaim.backend.tutor.types import ClassificationResult


_QUOTE_CHARS = "\"'“”"
_TERM_CHARS = r"A-Za-z0-9_/\-.#+ğüşöçıİĞÜŞÖÇ"


@dataclass(frozen=True)
class ClassifierConfig:
	trigger_phrases: Tuple[str, ...] = ("nedir", "ne demek", "ne anlama gelir", "anlamı ne")
	# Phrases that directly follow the asked-about word ("X nedir?").
	term_anchor_phrases: Tuple[str, ...] = ("nedir", "ne demek", "ne anlama gelir")
	demonstratives: Tuple[str, ...] = ("buradaki", "şuradaki")
	short_demonstratives: Tuple[str, ...] = ("bu", "şu")
	vocabulary: Tuple[str, ...] = (
		"text",
		"metin",
		"function",
		"fonksiyon",
		"değişken",
		"variable",
		"const",
		"let",
		"class",
		"tag",
		"etiket",
		"markdown",
	)
	fallback: str = "Bu ifade genelde görünen yazıyı/etiketi temsil eder."
	max_quoted_chars: int = 40
	min_term_chars: int = 2
	max_term_chars: int = 32


DEFAULT_CLASSIFIER_CONFIG = ClassifierConfig()


@dataclass(frozen=True)
class _CompiledPatterns:
	trigger: Pattern[str]
	cue: Pattern[str]
	vocabulary: Pattern[str]
	quoted: Pattern[str]
	anchored_term: Pattern[str]


def _alternation(phrases: Tuple[str, ...]) -> str:
	if not phrases:
		return "(?!)"
	return "|".join(re.escape(phrase).replace(r"\ ", r"\s+") for phrase in phrases)


@lru_cache(maxsize=8)
def _compile(config: ClassifierConfig) -> _CompiledPatterns:
	quote = f"[{_QUOTE_CHARS}]"
	cue_parts = [
		_alternation(config.demonstratives),
		rf"\b(?:{_alternation(config.short_demonstratives)})\s",
		rf"{quote}\w+{quote}",
	]
	return _CompiledPatterns(
		trigger=re.compile(_alternation(config.trigger_phrases)),
		cue=re.compile("|".join(f"(?:{part})" for part in cue_parts)),
		vocabulary=re.compile(rf"(?<!\S)(?:{_alternation(config.vocabulary)})(?!\S)"),
		quoted=re.compile(rf"{quote}([^{_QUOTE_CHARS}]{{1,{config.max_quoted_chars}}}){quote}"),
		anchored_term=re.compile(
			rf"\b([{_TERM_CHARS}]{{{config.min_term_chars},{config.max_term_chars}}})\b"
			rf"(?=.*?(?:{_alternation(config.term_anchor_phrases)}))",
			re.IGNORECASE,
		),
	)


def turkish_lower(text: str) -> str:
	# Dotted and dotless capitals do not round-trip through str.lower().
	return (text or "").replace("I", "ı").replace("İ", "i").lower()


def _lowered_forms(message: str) -> Tuple[str, ...]:
	# English vocabulary ("FUNCTION") still needs the plain lowering.
	turkish = turkish_lower(message)
	plain = (message or "").lower()
	return (turkish,) if turkish == plain else (turkish, plain)


def has_definition_trigger(message: str, config: ClassifierConfig = DEFAULT_CLASSIFIER_CONFIG) -> bool:
	patterns = _compile(config)
	return any(
		patterns.trigger.search(lowered) and patterns.cue.search(lowered)
		for lowered in _lowered_forms(message)
	)


def mentions_target(message: str, config: ClassifierConfig = DEFAULT_CLASSIFIER_CONFIG) -> bool:
	vocabulary = _compile(config).vocabulary
	return any(vocabulary.search(lowered) for lowered in _lowered_forms(message))


def extract_term(message: str, config: ClassifierConfig = DEFAULT_CLASSIFIER_CONFIG) -> Optional[str]:
	patterns = _compile(config)
	raw = message or ""
	quoted = patterns.quoted.search(raw)
	if quoted:
		term = quoted.group(1).strip()
		if term:
			return term
	anchored = patterns.anchored_term.search(raw)
	if anchored:
		term = anchored.group(1).strip()
		if term:
			return term
	return None


def classify(message: str, config: ClassifierConfig = DEFAULT_CLASSIFIER_CONFIG) -> ClassificationResult:
	"""Decide between a term lookup ("X ne demek?") and a full explanation.

	The trigger and vocabulary heuristics are OR-ed: either one alone marks the
	message as a meta question. A quoted span always wins over the word found in
	front of an anchor phrase.
	"""
	if not (has_definition_trigger(message, config) or mentions_target(message, config)):
		return ClassificationResult(is_meta=False, term=None, fallback=None)
	return ClassificationResult(
		is_meta=True,
		term=extract_term(message, config),
		fallback=config.fallback,
	)
