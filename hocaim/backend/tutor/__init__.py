from hocaim.backend.tutor.classifier import DEFAULT_CLASSIFIER_CONFIG, ClassifierConfig, classify
from hocaim.backend.tutor.history import compress_history
from hocaim.backend.tutor.prompts import PromptBuilder, PromptOrderError
from hocaim.backend.tutor.types import ChatTurn, ClassificationResult, PromptMessage, PromptRequest, StyleContext

__all__ = [
	"ChatTurn",
	"ClassificationResult",
	"ClassifierConfig",
	"DEFAULT_CLASSIFIER_CONFIG",
	"PromptBuilder",
	"PromptMessage",
	"PromptOrderError",
	"PromptRequest",
	"StyleContext",
	"classify",
	"compress_history",
]
