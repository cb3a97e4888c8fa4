import os
import tempfile
from pathlib import Path
from unittest import TestCase
from unittest.mock import patch

from hocaim.backend.main import create_app
from hocaim.backend.services import provider_service


class AppStartupTests(TestCase):
	def setUp(self) -> None:
		self._prev_cwd = os.getcwd()
		self._tmp = tempfile.TemporaryDirectory()
		os.chdir(self._tmp.name)

	def tearDown(self) -> None:
		os.chdir(self._prev_cwd)
		self._tmp.cleanup()

	def _write_env_file(self, content: str) -> None:
		Path(self._tmp.name, ".env").write_text(content, encoding="utf-8")

	def test_env_file_key_selects_openai_provider(self) -> None:
		self._write_env_file("OPENAI_API_KEY=sk-from-dotenv\n")
		with patch.dict(os.environ, {"HOCAIM_PROVIDER_MODE": "auto"}, clear=False):
			os.environ.pop("OPENAI_API_KEY", None)
			create_app()
			self.assertEqual(os.environ.get("OPENAI_API_KEY"), "sk-from-dotenv")
			with patch.object(provider_service, "_build_openai_client", return_value=object()) as build:
				provider = provider_service.get_provider()
		self.assertEqual(provider.mode, "openai")
		self.assertEqual(build.call_args.kwargs["api_key"], "sk-from-dotenv")

	def test_process_environment_wins_over_env_file(self) -> None:
		self._write_env_file("OPENAI_API_KEY=sk-from-dotenv\n")
		with patch.dict(os.environ, {"OPENAI_API_KEY": "sk-from-process"}, clear=False):
			create_app()
			self.assertEqual(os.environ["OPENAI_API_KEY"], "sk-from-process")

	def test_missing_key_in_auto_mode_logs_warning(self) -> None:
		with patch.dict(os.environ, {"HOCAIM_PROVIDER_MODE": "auto"}, clear=False):
			os.environ.pop("OPENAI_API_KEY", None)
			with self.assertLogs("hocaim.backend.main", level="WARNING") as logs:
				create_app()
		self.assertTrue(any("local responder" in line for line in logs.output))

	def test_missing_key_in_openai_mode_logs_warning(self) -> None:
		with patch.dict(os.environ, {"HOCAIM_PROVIDER_MODE": "openai", "OPENAI_API_KEY": ""}, clear=False):
			with self.assertLogs("hocaim.backend.main", level="WARNING") as logs:
				create_app()
		self.assertTrue(any("provider_unconfigured" in line for line in logs.output))

	def test_configured_key_logs_no_warning(self) -> None:
		with patch.dict(os.environ, {"HOCAIM_PROVIDER_MODE": "auto", "OPENAI_API_KEY": "sk-test"}, clear=False):
			with self.assertNoLogs("hocaim.backend.main", level="WARNING"):
				create_app()
