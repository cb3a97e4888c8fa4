from unittest import IsolatedAsyncioTestCase, TestCase

from hocaim.backend import constants
from hocaim.backend.services import relay_service
from hocaim.backend.services.errors import UpstreamError
from hocaim.backend.tutor import prompts

from tests.fakes import FakeClient, FakeStream


class _APITimeoutError(Exception):
	pass


_APITimeoutError.__name__ = "APITimeoutError"


def _blocking_request():
	return prompts.build_simple_prompt(model="m", system="sys", message="soru", temperature=0.3)


def _streaming_request():
	return prompts.build_explain_prompt(model="m", message="soru", topic=None, history=[])


async def _collect(chunks):
	return [chunk async for chunk in chunks]


class BlockingRelayTests(IsolatedAsyncioTestCase):
	async def test_returns_stripped_first_choice_text(self) -> None:
		client = FakeClient(text="  Merhaba dünya \n")
		text = await relay_service.complete_text(client, _blocking_request(), fallback="yedek")
		self.assertEqual(text, "Merhaba dünya")
		self.assertFalse(client.calls[0]["stream"])
		self.assertEqual(client.calls[0]["messages"][0]["role"], "system")

	async def test_empty_text_uses_fallback(self) -> None:
		for value in ("", "   \n", None):
			client = FakeClient(text=value)
			text = await relay_service.complete_text(client, _blocking_request(), fallback="yedek")
			self.assertEqual(text, "yedek")

	async def test_missing_choices_uses_fallback(self) -> None:
		self.assertEqual(relay_service.extract_message_text({"choices": []}), "")
		self.assertEqual(relay_service.extract_message_text(object()), "")

	async def test_upstream_failure_raises_upstream_error(self) -> None:
		client = FakeClient(error=RuntimeError("boom"))
		with self.assertRaises(UpstreamError) as ctx:
			await relay_service.complete_text(client, _blocking_request(), fallback="yedek")
		self.assertEqual(ctx.exception.status_code, 502)
		self.assertEqual(ctx.exception.code, "upstream_error")
		self.assertIn("boom", ctx.exception.evidence)

	async def test_upstream_timeout_maps_to_504(self) -> None:
		client = FakeClient(error=_APITimeoutError("slow"))
		with self.assertRaises(UpstreamError) as ctx:
			await relay_service.complete_text(client, _blocking_request(), fallback="yedek")
		self.assertEqual(ctx.exception.status_code, 504)
		self.assertEqual(ctx.exception.code, "upstream_timeout")

	async def test_complete_text_rejects_streaming_request(self) -> None:
		with self.assertRaises(ValueError):
			await relay_service.complete_text(FakeClient(), _streaming_request(), fallback="yedek")


class StreamingRelayTests(IsolatedAsyncioTestCase):
	async def test_forwards_fragments_in_order_and_skips_empty(self) -> None:
		stream = FakeStream(["Bir", "", None, " iki", " üç"])
		chunks = await _collect(relay_service.relay_stream(stream))
		self.assertEqual(chunks, ["Bir", " iki", " üç"])
		self.assertEqual(stream.close_calls, 1)

	async def test_mid_stream_failure_appends_single_marker(self) -> None:
		stream = FakeStream(["Bir", " iki"], error=RuntimeError("connection reset"))
		chunks = await _collect(relay_service.relay_stream(stream))
		self.assertEqual(chunks, ["Bir", " iki", constants.STREAM_ERROR_MARKER])
		self.assertEqual(stream.close_calls, 1)

	async def test_early_close_aborts_upstream(self) -> None:
		stream = FakeStream(["Bir", " iki", " üç"])
		chunks = relay_service.relay_stream(stream)
		self.assertEqual(await chunks.__anext__(), "Bir")
		await chunks.aclose()
		self.assertEqual(stream.close_calls, 1)

	async def test_open_stream_failure_is_upstream_error(self) -> None:
		client = FakeClient(error=RuntimeError("refused"))
		with self.assertRaises(UpstreamError):
			await relay_service.open_stream(client, _streaming_request())

	async def test_open_stream_passes_stream_flag(self) -> None:
		stream = FakeStream(["x"])
		client = FakeClient(stream=stream)
		opened = await relay_service.open_stream(client, _streaming_request())
		self.assertIs(opened, stream)
		self.assertTrue(client.calls[0]["stream"])
		self.assertEqual(client.calls[0]["temperature"], 0.4)


class StyleSanitizerTests(TestCase):
	def test_removes_style_heading_and_collapses_blank_runs(self) -> None:
		raw = "## Görsel\n\nKesir bir bütünün parçasıdır.\n\n\n\n\n## Özet\nPay ve payda."
		cleaned = relay_service.sanitize_style_output(raw)
		self.assertEqual(cleaned, "Kesir bir bütünün parçasıdır.\n\n## Özet\nPay ve payda.")

	def test_removes_bold_style_labels(self) -> None:
		raw = "**İşitsel:**\nSesli tekrar et.\n- **Okuma-Yazma**\nNot al."
		cleaned = relay_service.sanitize_style_output(raw)
		self.assertEqual(cleaned, "Sesli tekrar et.\nNot al.")

	def test_removes_emoji_prefixed_style_headings(self) -> None:
		raw = "## 🎨 Görsel\nx\n- **👂 İşitsel:**\ny"
		self.assertEqual(relay_service.sanitize_style_output(raw), "x\ny")

	def test_preserves_other_headings_verbatim(self) -> None:
		raw = "### Görsel örnekler için ipuçları\n**Önemli:** dikkat"
		self.assertEqual(relay_service.sanitize_style_output(raw), raw)

	def test_trims_surrounding_whitespace(self) -> None:
		self.assertEqual(relay_service.sanitize_style_output("\n\n  metin  \n\n"), "metin")
