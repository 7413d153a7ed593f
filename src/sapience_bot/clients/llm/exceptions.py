"""Exception hierarchy for language-model prediction errors."""


class LLMError(Exception):
    """Base exception for all language-model errors."""


class LLMResponseError(LLMError):
    """The completion response did not contain a text message."""


class PredictionParseError(LLMError):
    """The model's answer could not be read as Yes or No."""
