import logging
from typing import Optional

from google import genai
from google.genai import types

from holiday_planner.utils.config import Settings

logger = logging.getLogger(__name__)


class MissingCredentialError(RuntimeError):
    pass


class CompletionServiceError(RuntimeError):
    pass


class GeminiCompletionClient:
    """
    Thin wrapper around the Gemini text-completion call.
    The SDK client is created on first use so a missing key only fails the
    request that needs it.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self._client: Optional[genai.Client] = None

    def _get_client(self) -> genai.Client:
        if self._client is None:
            if not self.settings.gemini_api_key:
                raise MissingCredentialError("GEMINI_API_KEY is not set in your environment.")
            self._client = genai.Client(api_key=self.settings.gemini_api_key)
        return self._client

    async def complete(self, prompt: str) -> str:
        client = self._get_client()
        config = types.GenerateContentConfig(
            temperature=self.settings.temperature,
            max_output_tokens=self.settings.max_output_tokens,
        )
        contents = [types.Content(role="user", parts=[types.Part(text=prompt)])]

        try:
            response = await client.aio.models.generate_content(
                model=self.settings.gemini_model,
                contents=contents,
                config=config,
            )
        except Exception as exc:
            raise CompletionServiceError(f"Gemini request failed: {exc}") from exc

        text = getattr(response, "text", None)
        if not text:
            raise CompletionServiceError("Gemini returned an empty response")
        return text
