"""Ask an OpenAI chat model to predict the outcome of a market question.

The model is told to finish with a bare "Yes", "No" or number on its final
line.  The reply is reduced to a binary prediction in 18-decimal units:
``10**18`` for yes and ``0`` for no.
"""

import logging
import re
from typing import Any

from openai import AsyncOpenAI

from sapience_bot.clients.llm.exceptions import LLMResponseError, PredictionParseError
from sapience_bot.core.units import WEI_PER_UNIT

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-search-preview"

SYSTEM_PROMPT = (
    "You are a helpful research assistant that answers questions. You MUST ALWAYS, "
    'regardless of your confidence, reply to the question with just "Yes", "No", '
    "or a specific number on the final line."
)

_WORD_RE = re.compile(r"[a-z]+")


def _classify(text: str) -> int | None:
    """Return the prediction named in ``text``, or ``None`` if it names neither.

    Raises:
        PredictionParseError: When both "yes" and "no" appear.

    """
    words = set(_WORD_RE.findall(text.lower()))
    has_yes = "yes" in words
    has_no = "no" in words
    if has_yes and has_no:
        raise PredictionParseError(f"Ambiguous prediction, both yes and no in: {text.strip()!r}")
    if has_yes:
        return WEI_PER_UNIT
    if has_no:
        return 0
    return None


def parse_prediction(text: str) -> int:
    """Reduce a model reply to a binary prediction.

    Match whole words case-insensitively.  The final non-empty line is
    checked first; the full reply is only consulted when that line names
    neither answer.

    Args:
        text: Raw completion text.

    Returns:
        ``10**18`` for yes, ``0`` for no.

    Raises:
        PredictionParseError: When the reply names neither answer or both.

    """
    lines = [line for line in text.splitlines() if line.strip()]
    prediction = _classify(lines[-1]) if lines else None
    if prediction is None:
        prediction = _classify(text)
    if prediction is None:
        raise PredictionParseError("Couldn't parse a prediction")
    return prediction


class Predictor:
    """Binary outcome predictor backed by an OpenAI chat completion.

    Without an API key no request is made and every question is answered
    "Yes".

    Args:
        api_key: OpenAI API key, or ``None`` to use the default answer.
        model: Chat model name; must support web search.
        client: Pre-built ``AsyncOpenAI`` client, mainly for tests.

    """

    def __init__(
        self,
        api_key: str | None,
        model: str = DEFAULT_MODEL,
        client: Any = None,
    ) -> None:
        """Initialize the predictor.

        Args:
            api_key: OpenAI API key, or ``None`` to use the default answer.
            model: Chat model name.
            client: Pre-built ``AsyncOpenAI`` client.

        """
        self.model = model
        self._client: Any = client
        if self._client is None and api_key:
            self._client = AsyncOpenAI(api_key=api_key)

    @property
    def enabled(self) -> bool:
        """Whether predictions come from the model rather than the default."""
        return self._client is not None

    async def ask(self, question: str) -> str:
        """Send the question to the model and return its reply text.

        Raises:
            LLMResponseError: When the reply carries no text content.

        """
        response = await self._client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": question},
            ],
            web_search_options={"search_context_size": "medium"},
        )
        content = response.choices[0].message.content if response.choices else None
        if not isinstance(content, str):
            logger.error("Invalid response structure from OpenAI API: %s", response)
            raise LLMResponseError("Failed to get a valid response from OpenAI API.")
        logger.info("Model answer: %s", content)
        return content

    async def predict(self, question: str) -> int:
        """Predict a market question's outcome.

        Args:
            question: Market question text.

        Returns:
            ``10**18`` for yes, ``0`` for no.

        Raises:
            LLMResponseError: When the reply carries no text content.
            PredictionParseError: When the reply names neither answer or both.

        """
        if not self.enabled:
            logger.info('OpenAI API key not found. Defaulting to "Yes".')
            return WEI_PER_UNIT
        return parse_prediction(await self.ask(question))
