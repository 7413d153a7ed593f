"""Language-model predictor for market questions."""

from sapience_bot.clients.llm.exceptions import LLMError, LLMResponseError, PredictionParseError
from sapience_bot.clients.llm.predictor import Predictor, parse_prediction

__all__ = [
    "LLMError",
    "LLMResponseError",
    "PredictionParseError",
    "Predictor",
    "parse_prediction",
]
