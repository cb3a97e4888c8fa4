from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from hocaim.backend.tutor.types import ChatTurn, ClassificationResult, PromptMessage, PromptRequest, StyleContext


STYLE_NAMES: Dict[str, str] = {
	"V": "Görsel",
	"A": "İşitsel",
	"R": "Okuma-Yazma",
	"K": "Kinestetik",
}

_STYLE_GUIDANCE: Dict[str, str] = {
	"V": "Şema, tablo, renk kodlu vurgu ve adım adım görsel betimlemelerle anlat.",
	"A": "Sesli anlatır gibi, konuşma dilinde, ritimli tekrarlar ve akılda kalan cümlelerle anlat.",
	"R": "Başlıksız düz metin, tanımlar, maddeler ve kısa yazılı özetlerle anlat.",
	"K": "Uygulamalı örnekler, mini deneyler ve öğrencinin yaparak deneyeceği adımlarla anlat.",
}

_PERSONA_RULES = [
	"Sen 'HocAIm'sin: sabırlı, motive edici, Türkçe konuşan bir yapay zekâ öğretmensin.",
	"Öğrencinin öğrenme tarzına (Görsel/İşitsel/Okuma-Yazma/Dokunsal) uygun, sade ve adım adım anlat.",
	"Gerekirse kısa maddeler, küçük örnekler ve mikro quiz öner.",
	"Gereksiz uzatma yapma; önce sorunun niyetini doğru anla.",
	"Eğer soru bir TERİM/SEMBOL/KOD parçasının anlamını soruyorsa (meta soru), SADECE o terimi açıkla; tüm konuyu baştan anlatma.",
	"LaTeX/markdown kullanabilirsin ama okunurluğu bozma.",
]

ASK_SYSTEM_PROMPT = "Sen HocAIm adlı kişiselleştirilmiş bir AI öğretmensin. Kısa, anlaşılır, motive edici anlat."
CHAT_SYSTEM_PROMPT = "Sen Canım HocAIm’sin. Öğrencinin seviyesine göre motive edici, sade ve samimi şekilde anlatırsın."


class PromptOrderError(RuntimeError):
	pass


class PromptBuilder:
	"""Collects one system message, then history, then the final user turn.

	Calls in any other order raise PromptOrderError, so the system message is
	always first and singular in the built request.
	"""

	def __init__(self, *, model: str, temperature: float, stream: bool):
		self._model = model
		self._temperature = temperature
		self._stream = stream
		self._system: Optional[PromptMessage] = None
		self._history: List[PromptMessage] = []
		self._user: Optional[PromptMessage] = None

	def system(self, content: str) -> "PromptBuilder":
		if self._system is not None:
			raise PromptOrderError("System message already set.")
		self._system = PromptMessage(role="system", content=content)
		return self

	def history(self, turns: Iterable[ChatTurn]) -> "PromptBuilder":
		if self._system is None:
			raise PromptOrderError("History must follow the system message.")
		if self._user is not None:
			raise PromptOrderError("History cannot follow the final user turn.")
		for turn in turns:
			role = "assistant" if turn.role == "assistant" else "user"
			self._history.append(PromptMessage(role=role, content=turn.content))
		return self

	def user(self, content: str) -> "PromptBuilder":
		if self._system is None:
			raise PromptOrderError("User turn must follow the system message.")
		if self._user is not None:
			raise PromptOrderError("Final user turn already set.")
		self._user = PromptMessage(role="user", content=content)
		return self

	def build(self) -> PromptRequest:
		if self._system is None or self._user is None:
			raise PromptOrderError("A prompt needs a system message and a final user turn.")
		return PromptRequest(
			model=self._model,
			temperature=self._temperature,
			stream=self._stream,
			messages=(self._system, *self._history, self._user),
		)


def system_prompt(topic: Optional[str]) -> str:
	topic_text = (topic or "").strip()
	rules = list(_PERSONA_RULES)
	if topic_text:
		rules.append(f"Güncel konu: {topic_text}")
	else:
		rules.append("Güncel konu belirtilmedi; kullanıcı mesajından çıkarım yap.")
	return "\n- ".join(rules)


def meta_user_prompt(message: str, meta: ClassificationResult) -> str:
	if meta.term:
		lead = f'Kullanıcı özellikle şu terimi soruyor: "{meta.term}". Sadece bu terimi açıkla, 3-6 cümle.'
	else:
		lead = "Kullanıcı bir terimin anlamını soruyor; terim net değil. Kısa ve genel bir açıklama yap. 3-6 cümle."
	return f"{lead}\n\nKullanıcı mesajı: {message}"


def style_system_prompt(style: StyleContext, topic: Optional[str]) -> str:
	if style.style in STYLE_NAMES:
		name = STYLE_NAMES[style.style]
		lock = [
			f"Bu cevabı YALNIZCA '{name}' öğrenme stiline göre hazırla.",
			_STYLE_GUIDANCE[style.style],
			"Başka öğrenme stillerine ait bölümler ekleme.",
		]
	else:
		lock = [
			"Konuya en uygun TEK bir öğrenme stilini seç ve cevabı yalnızca o stile göre hazırla.",
			"Birden fazla stil için ayrı bölümler yazma.",
		]
	rules = [
		"Sen 'HocAIm'sin: sabırlı, motive edici, Türkçe konuşan bir yapay zekâ öğretmensin.",
		*lock,
		"Stil adlarını (Görsel, İşitsel, Okuma-Yazma, Kinestetik) başlık ya da kalın etiket olarak yazma.",
		"Sade ve adım adım anlat; gerekirse kısa bir mini quiz ile bitir.",
	]
	level = style.level.strip()
	if level:
		rules.append(f"Öğrenci seviyesi: {level}. Dili ve örnekleri bu seviyeye göre ayarla.")
	topic_text = (topic or "").strip()
	if topic_text:
		rules.append(f"Güncel konu: {topic_text}")
	context = style.context.strip()
	if context:
		rules.append(f"Ek bağlam: {context}")
	return "\n- ".join(rules)


def style_user_prompt(prompt: Optional[str], topic: Optional[str], style: StyleContext) -> str:
	prompt_text = (prompt or "").strip()
	if prompt_text:
		return prompt_text
	topic_text = (topic or "").strip()
	if style.style in STYLE_NAMES:
		return f"'{topic_text}' konusunu {STYLE_NAMES[style.style]} stiline uygun şekilde anlat."
	return f"'{topic_text}' konusunu en uygun tek bir öğrenme stiline göre anlat."


def build_meta_prompt(
	*,
	model: str,
	message: str,
	topic: Optional[str],
	history: Iterable[ChatTurn],
	meta: ClassificationResult,
) -> PromptRequest:
	return (
		PromptBuilder(model=model, temperature=0.3, stream=False)
		.system(system_prompt(topic))
		.history(history)
		.user(meta_user_prompt(message, meta))
		.build()
	)


def build_explain_prompt(
	*,
	model: str,
	message: str,
	topic: Optional[str],
	history: Iterable[ChatTurn],
	stream: bool = True,
) -> PromptRequest:
	return (
		PromptBuilder(model=model, temperature=0.4, stream=stream)
		.system(system_prompt(topic))
		.history(history)
		.user(message)
		.build()
	)


def build_style_prompt(
	*,
	model: str,
	prompt: Optional[str],
	topic: Optional[str],
	style: StyleContext,
) -> PromptRequest:
	return (
		PromptBuilder(model=model, temperature=0.5, stream=False)
		.system(style_system_prompt(style, topic))
		.user(style_user_prompt(prompt, topic, style))
		.build()
	)


def build_simple_prompt(*, model: str, system: str, message: str, temperature: float) -> PromptRequest:
	return PromptBuilder(model=model, temperature=temperature, stream=False).system(system).user(message).build()
