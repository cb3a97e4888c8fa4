APP_NAME = "Canım HocAIm API"
APP_VERSION = "1.0.0"
DEFAULT_CORS_ALLOW_ORIGINS = ["*"]
DEFAULT_PORT = 3000
DEFAULT_LOG_LEVEL = "INFO"
LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s - %(message)s"

PING_MESSAGE = "Canım HocAIm API ayakta ✅"

DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_OPENAI_TIMEOUT_S = 30.0
DEFAULT_HISTORY_TURNS = 6
MAX_HISTORY_CONTENT_CHARS = 2000

DEFAULT_CHAT_MESSAGE = "Merhaba!"
EMPTY_REPLY_PLACEHOLDER = "Cevap üretilemedi."
STREAM_ERROR_MARKER = "\n\n[Hata: yanıt akışı kesildi, lütfen tekrar dene.]"

STYLE_CODES = ("V", "A", "R", "K", "auto")
