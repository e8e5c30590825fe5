# services/gemini.py
import logging
from typing import Protocol

from google import genai
from google.genai import types, errors as gerrors

from config import Settings
from core.errors import ConfigurationError, UpstreamServiceError

_LOG = logging.getLogger(__name__)

# Keep the SDK's own request logging quiet
logging.getLogger("google.genai").setLevel(logging.WARNING)

# ───────────── Model Names ─────────────
CHAT_MODEL = "models/gemini-2.0-flash"


class LLMClient(Protocol):
    """Anything that turns a prompt into one text reply."""

    async def generate(
        self,
        prompt: str,
        *,
        temperature: float = 0.7,
        max_output_tokens: int = 2000,
    ) -> str: ...


class GeminiClient:
    def __init__(self, api_key: str, model: str = CHAT_MODEL) -> None:
        self._client = genai.Client(api_key=api_key)
        self.model = model

    @classmethod
    def from_settings(cls, settings: Settings) -> "GeminiClient":
        if not settings.gemini_api_key:
            raise ConfigurationError(
                "GEMINI_API_KEY not set in environment (GOOGLE_API_KEY is also accepted)"
            )
        return cls(settings.gemini_api_key, settings.chat_model)

    # ───────────── Generation ─────────────
    async def generate(
        self,
        prompt: str,
        *,
        temperature: float = 0.7,
        max_output_tokens: int = 2000,
    ) -> str:
        """Run a single completion and return the model's text response."""
        _LOG.debug("Gemini request: model=%s prompt_chars=%d", self.model, len(prompt))
        try:
            resp = await self._client.aio.models.generate_content(
                model=self.model,
                contents=[prompt],
                config=types.GenerateContentConfig(
                    temperature=temperature,
                    max_output_tokens=max_output_tokens,
                    response_mime_type="application/json",
                ),
            )
        except gerrors.APIError as e:
            _LOG.warning("Gemini generation failed: %s", e)
            raise UpstreamServiceError(f"Gemini generation failed: {e}") from e

        text = resp.text
        if not text:
            raise UpstreamServiceError("Gemini returned an empty response")
        return text
