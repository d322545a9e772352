"""Narrative generation over the OpenAI chat completions API.

The client comes in two variants picked once at startup from the settings:
an enabled one holding an SDK client, and a disabled one used when no API
key is configured, which refuses every request without any network call.
Each ``generate`` call makes at most one request; the SDK's built-in
retries are switched off.
"""

import logging
from typing import Any, Optional

from openai import OpenAI, OpenAIError

from config import Settings
from errors import GenerationFailed, InvalidRequest, ServiceUnavailable
from prompts import SYSTEM_PROMPT

logger = logging.getLogger(__name__)

TEMPERATURE = 0.8
MAX_OUTPUT_TOKENS = 4000


class NarrativeClient:
    enabled = False

    def generate(self, prompt: str) -> str:
        raise NotImplementedError


class DisabledNarrativeClient(NarrativeClient):
    def generate(self, prompt: str) -> str:
        raise ServiceUnavailable(
            "OpenAI API key not configured. Please add OPENAI_API_KEY to your environment variables."
        )


class OpenAINarrativeClient(NarrativeClient):
    enabled = True

    def __init__(self, api_key: str, model: str, client: Optional[Any] = None):
        self.model = model
        self._client = client if client is not None else OpenAI(api_key=api_key, max_retries=0)

    def generate(self, prompt: str) -> str:
        if not isinstance(prompt, str) or not prompt.strip():
            raise InvalidRequest("Prompt is empty")

        try:
            completion = self._client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=TEMPERATURE,
                max_tokens=MAX_OUTPUT_TOKENS,
            )
        except OpenAIError as exc:
            logger.error("OpenAI request failed (model=%s): %s", self.model, exc)
            raise GenerationFailed("Failed to generate story") from exc

        choices = getattr(completion, "choices", None) or []
        content = choices[0].message.content if choices else None
        if not content or not content.strip():
            logger.error("OpenAI returned no content (model=%s)", self.model)
            raise GenerationFailed("Generation service returned no content")
        return content.strip()


def build_narrative_client(settings: Settings) -> NarrativeClient:
    if not settings.generation_enabled:
        logger.warning("OPENAI_API_KEY not set; story generation is disabled")
        return DisabledNarrativeClient()
    return OpenAINarrativeClient(settings.openai_api_key, settings.openai_model)
